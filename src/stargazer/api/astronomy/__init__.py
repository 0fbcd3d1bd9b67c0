"""Astronomy subpackage: moon phase helpers."""
