"""
Infrastructure adapters for the record cache.
"""
