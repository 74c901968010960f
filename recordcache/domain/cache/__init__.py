"""
Cache Domain Module

Contracts, value objects, key derivation, binding registry and exceptions
of the record cache.
"""
