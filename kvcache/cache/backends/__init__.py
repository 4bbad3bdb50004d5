"""
kvcache - Cache Backends

Exports the Redis cache adapter.
"""

from .redis import DEFAULT_PORT, SCAN_PAGE_SIZE, RedisCache, normalize_address, split_address

__all__ = [
    "RedisCache",
    "normalize_address",
    "split_address",
    "DEFAULT_PORT",
    "SCAN_PAGE_SIZE",
]
