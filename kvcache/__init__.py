"""
kvcache - Remote Key-Value Cache

Thin asyncio adapter over a Redis server: byte values, millisecond
expirations, glob deletes and full key listing.
"""

__version__ = "1.0.0"

from .cache import (
    CacheInterface,
    RedisCache,
    close_all_caches,
    create_cache,
    get_cache,
    open_cache,
)
from .errors import (
    CacheConnectionError,
    CacheError,
    CacheOperationError,
    ConfigurationError,
    ConnectionFailureReason,
    KeyDoesNotExistError,
    KVCacheError,
)

__all__ = [
    "CacheInterface",
    "RedisCache",
    "create_cache",
    "open_cache",
    "get_cache",
    "close_all_caches",
    "KVCacheError",
    "ConfigurationError",
    "CacheError",
    "CacheConnectionError",
    "CacheOperationError",
    "ConnectionFailureReason",
    "KeyDoesNotExistError",
]
