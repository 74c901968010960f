"""
Domain layer: contracts, value objects and binding rules of the record cache.
"""
