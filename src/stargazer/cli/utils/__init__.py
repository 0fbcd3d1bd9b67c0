"""
CLI Utilities Module
"""
