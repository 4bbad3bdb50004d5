"""
kvcache - Cache Module

Key-value cache over a remote Redis server.

- factory.py: creation and lifecycle of named cache instances
- interface.py: abstract cache contract
- backends/redis.py: the Redis adapter

Usage:
    from kvcache.cache import open_cache

    cache = await open_cache()
    await cache.set("key", b"value", expire_ms=60_000)
    value = await cache.get_with_err("key")
"""

from .backends.redis import RedisCache
from .factory import (
    close_all_caches,
    create_cache,
    get_cache,
    list_cache_instances,
    open_cache,
    reset_cache_factory,
)
from .interface import CacheInterface

__all__ = [
    # Factory functions
    "create_cache",
    "open_cache",
    "get_cache",
    "close_all_caches",
    "list_cache_instances",
    "reset_cache_factory",
    # Interface and adapter
    "CacheInterface",
    "RedisCache",
]
