"""
kvcache - Cache Factory

Canonical factory for creating cache instances from configuration.

Key points:
- create_cache() builds an adapter without touching the network
- open_cache() additionally runs the PING liveness probe when
  CacheConfig.probe_on_connect is set, and raises CacheConnectionError
  with the cause instead of handing back a dead handle
- Instances are kept in a named registry until close_all_caches()

Examples:
    from kvcache.cache.factory import create_cache, open_cache

    # Uses env-configured connection settings
    cache = await open_cache()

    # Or explicitly supply a CacheConfig (e.g., for tests)
    from kvcache.config import CacheConfig
    cfg = CacheConfig(address="cache.internal", db=2, default_expire_ms=5000)
    cache = create_cache(cfg, name="sessions")
"""

from __future__ import annotations

import asyncio
import logging

from ..config import CacheConfig, get_config
from .backends.redis import RedisCache

logger = logging.getLogger(__name__)

# Global cache instances registry
_cache_instances: dict[str, RedisCache] = {}

# Serializes open_cache() per name so concurrent openers share one instance
_open_locks: dict[str, asyncio.Lock] = {}


def _build_cache(config: CacheConfig) -> RedisCache:
    return RedisCache(
        address=config.address,
        password=config.password,
        db=config.db,
        default_expire_ms=config.default_expire_ms,
        socket_timeout=config.socket_timeout,
        max_connections=config.max_connections,
    )


def create_cache(
    config: CacheConfig | None = None,
    name: str = "default",
) -> RedisCache:
    """
    Create a cache instance without probing the server.

    Args:
        config: Cache configuration (uses global config if not provided)
        name: Cache instance name (for multiple cache instances)

    Returns:
        Configured cache instance

    Raises:
        CacheConnectionError: If the configured address is malformed
    """
    if name in _cache_instances:
        logger.debug("Returning existing cache instance: %s", name)
        return _cache_instances[name]

    if config is None:
        config = get_config().cache

    logger.info(
        "Creating cache instance '%s' for %s (db %d)",
        name,
        config.address,
        config.db,
        extra={"cache_name": name, "address": config.address, "db": config.db},
    )

    cache = _build_cache(config)
    _cache_instances[name] = cache
    return cache


async def open_cache(
    config: CacheConfig | None = None,
    name: str = "default",
) -> RedisCache:
    """
    Create a cache instance and verify the server is alive.

    The probe is skipped when config.probe_on_connect is false.
    A failed probe registers nothing and closes the client.
    Concurrent calls for one name share a single instance.

    An instance already registered under the name (for example by
    create_cache) is returned as is, after probing it first if it has
    never been verified and probing is enabled. A failed probe of such
    an instance raises but leaves it registered.

    Raises:
        CacheConnectionError: If the address is malformed or the probe fails
    """
    if config is None:
        config = get_config().cache

    lock = _open_locks.setdefault(name, asyncio.Lock())
    async with lock:
        existing = _cache_instances.get(name)
        if existing is not None:
            if config.probe_on_connect and not existing.verified:
                await existing.probe(timeout=config.socket_timeout)
            logger.debug("Returning existing cache instance: %s", name)
            return existing

        cache = _build_cache(config)
        if config.probe_on_connect:
            try:
                await cache.probe(timeout=config.socket_timeout)
            except BaseException:
                # includes cancellation while the probe is in flight
                await cache.close()
                raise

        _cache_instances[name] = cache

    logger.info(
        "Cache instance '%s' opened",
        name,
        extra={"cache_name": name, "address": cache.address, "probed": config.probe_on_connect},
    )
    return cache


def get_cache(name: str = "default") -> RedisCache:
    """
    Get an existing cache instance by name.

    If the instance doesn't exist, it is created (unprobed) from the
    global configuration.
    """
    if name not in _cache_instances:
        logger.debug("Cache instance '%s' not found, creating new instance", name)
        return create_cache(name=name)

    return _cache_instances[name]


async def close_all_caches() -> None:
    """
    Close all cache instances and release their connections.

    Call during graceful shutdown.
    """
    _open_locks.clear()
    if not _cache_instances:
        logger.debug("No cache instances to close")
        return

    logger.info("Closing %d cache instance(s)...", len(_cache_instances))

    for name, cache in list(_cache_instances.items()):
        await cache.close()
        logger.debug("Closed cache instance: %s", name)

    _cache_instances.clear()


def reset_cache_factory() -> None:
    """
    Clear all instance references without closing them.

    Only use this in tests; close_all_caches() is the shutdown path.
    """
    count = len(_cache_instances)
    _cache_instances.clear()
    _open_locks.clear()
    logger.debug("Reset cache factory, cleared %d instance reference(s)", count)


def list_cache_instances() -> list[str]:
    """List all registered cache instance names."""
    return list(_cache_instances.keys())
