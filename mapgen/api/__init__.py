"""
HTTP API for world generation.
"""
