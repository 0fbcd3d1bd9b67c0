"""
CLI Commands Module

- siqs: Sky quality scoring (score, night, fallback, batch)
- bortle: Bortle scale estimation from SQM readings, star counts and place names
"""
