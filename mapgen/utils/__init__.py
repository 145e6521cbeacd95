"""
Utility helpers: per-stage random streams and logging setup.
"""
