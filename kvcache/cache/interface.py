"""
kvcache - Cache Interface

Defines the abstract contract the remote cache adapter implements.
"""

from abc import ABC, abstractmethod
from typing import Any, Self


class CacheInterface(ABC):
    """
    Abstract base class for the key-value cache.

    Values are raw bytes; expirations are in milliseconds.
    """

    @abstractmethod
    async def set(self, key: str, value: bytes, expire_ms: int | None = None) -> None:
        """
        Store a value, replacing any existing value and its expiration.

        Args:
            key: Cache key
            value: Raw bytes to store
            expire_ms: Expiration in milliseconds (None or 0 = use default)
        """
        pass

    @abstractmethod
    async def set_ex(self, key: str, value: bytes, expire_ms: int) -> None:
        """
        Store a value with a mandatory explicit expiration.

        Args:
            key: Cache key
            value: Raw bytes to store
            expire_ms: Expiration in milliseconds, must be positive
        """
        pass

    @abstractmethod
    async def get(self, key: str) -> bytes:
        """
        Retrieve a value, or b"" when absent or on any error.

        Cannot tell an absent key from an empty value or a failed call;
        prefer get_with_err().
        """
        pass

    @abstractmethod
    async def get_with_err(self, key: str) -> bytes:
        """
        Retrieve a value.

        Raises:
            KeyDoesNotExistError: If the key is absent
            CacheOperationError: If the remote call fails
        """
        pass

    @abstractmethod
    async def delete(self, key_pattern: str) -> int:
        """
        Delete every key matching a glob-style pattern.

        Returns:
            Number of keys deleted
        """
        pass

    @abstractmethod
    async def has(self, key: str) -> bool:
        """Check whether a key currently exists."""
        pass

    @abstractmethod
    async def reset(self) -> None:
        """Flush every key in the backing store."""
        pass

    @abstractmethod
    async def ping(self) -> str:
        """Send a liveness probe and return the acknowledgement."""
        pass

    @abstractmethod
    async def list_keys(self) -> list[str]:
        """List every key in the backing store."""
        pass

    @abstractmethod
    async def get_stats(self) -> dict[str, Any]:
        """Get cache statistics (hits, misses, connectivity, ...)."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """
        Close the cache and release its connection.

        Should be called during graceful shutdown.
        """
        pass

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
