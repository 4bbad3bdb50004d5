"""
kvcache - Basic Usage Example

Run against a local Redis:
    REDIS_ADDRESS=localhost CACHE_DEFAULT_EXPIRE_MS=60000 python examples/basic_usage.py
"""

import asyncio
import logging

from kvcache.cache import close_all_caches, open_cache
from kvcache.errors import CacheConnectionError, KeyDoesNotExistError
from kvcache.observability import configure_from_config

logger = logging.getLogger("kvcache.examples")


async def main() -> None:
    configure_from_config()

    try:
        cache = await open_cache()
    except CacheConnectionError as e:
        logger.error(f"Cannot reach Redis: {e.reason.value}", extra=e.details)
        return

    try:
        await cache.set("user:1", b"alice")
        await cache.set_ex("session:abc", b"token", 30_000)

        print("user:1 ->", await cache.get_with_err("user:1"))
        print("keys ->", await cache.list_keys())

        await cache.delete("user:*")
        try:
            await cache.get_with_err("user:1")
        except KeyDoesNotExistError:
            print("user:1 deleted")
    finally:
        await close_all_caches()


if __name__ == "__main__":
    asyncio.run(main())
