"""
kvcache - Redis Cache Backend

Asynchronous adapter over the redis-py asyncio client:
- Raw bytes values, millisecond expirations (PX / PSETEX)
- Default expiration applied when none is given
- Glob-pattern deletes resolved through KEYS, one DEL per key
- Full key listing through a cursor-based SCAN

Requires: redis>=5.0.1 with asyncio support

Example:
    cache = await RedisCache.connect("localhost", default_expire_ms=5000)
    await cache.set("greeting", b"hello")
    val = await cache.get_with_err("greeting")
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from ...errors import (
    CacheConnectionError,
    CacheOperationError,
    ConnectionFailureReason,
    KeyDoesNotExistError,
)
from ..interface import CacheInterface

logger = logging.getLogger(__name__)

try:
    from redis.asyncio import Redis
    from redis.exceptions import AuthenticationError, RedisError
    from redis.exceptions import ConnectionError as RedisConnectionError
    from redis.exceptions import TimeoutError as RedisTimeoutError
except ImportError as e:  # pragma: no cover
    raise ImportError(
        "Redis async client is required but not installed. "
        "Install with: pip install 'redis>=5.0.1' or add 'redis' to your dependencies."
    ) from e

DEFAULT_PORT = 6379
SCAN_PAGE_SIZE = 10
PONG = "PONG"


def normalize_address(address: str) -> str:
    """Append the default Redis port when the address has no ':' delimiter."""
    address = address.strip()
    if ":" not in address:
        address = f"{address}:{DEFAULT_PORT}"
    return address


def split_address(address: str) -> tuple[str, int]:
    """
    Split an address into host and port.

    Accepts "host", "host:port" and "[v6-host]:port".

    Raises:
        CacheConnectionError: With reason BAD_ADDRESS if host or port is unusable
    """
    normalized = normalize_address(address)
    host, _, port_text = normalized.rpartition(":")
    host = host.strip("[]")
    if not host:
        raise CacheConnectionError(address, ConnectionFailureReason.BAD_ADDRESS, {"error": "missing host"})
    try:
        port = int(port_text)
    except ValueError as e:
        raise CacheConnectionError(
            address, ConnectionFailureReason.BAD_ADDRESS, {"error": f"invalid port {port_text!r}"}
        ) from e
    if not 0 < port < 65536:
        raise CacheConnectionError(address, ConnectionFailureReason.BAD_ADDRESS, {"error": f"port {port} out of range"})
    return host, port


def _ack_to_str(ack: Any) -> str:
    # redis-py turns a PONG reply into True
    if ack is True:
        return PONG
    if isinstance(ack, bytes):
        return ack.decode("utf-8", errors="replace")
    return str(ack)


def _decode_key(raw: bytes | str) -> str:
    if isinstance(raw, bytes):
        return raw.decode("utf-8", errors="replace")
    return raw


def _check_key(key: str) -> None:
    if not isinstance(key, str) or not key:
        raise ValueError("key must be a non-empty string")


def _check_expire_ms(expire_ms: int, name: str = "expire_ms") -> int:
    # bool is an int subclass; floats would truncate silently
    if isinstance(expire_ms, bool) or not isinstance(expire_ms, int):
        raise TypeError(f"{name} must be an int, got {type(expire_ms).__name__}")
    if expire_ms < 0:
        raise ValueError(f"{name} must be >= 0")
    return expire_ms


def _to_bytes(value: bytes | bytearray | memoryview) -> bytes:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise TypeError(f"value must be bytes-like, got {type(value).__name__}")


class RedisCache(CacheInterface):
    """
    Redis cache adapter with millisecond expirations.

    Notes:
    - Construction never performs I/O; use connect() to verify liveness.
    - Values are stored and returned as raw bytes.
    - Expiration 0 on the handle means keys set without one never expire.
    - delete() and list_keys() make several round-trips and are not atomic.
    """

    def __init__(
        self,
        address: str = "localhost",
        password: str = "",
        db: int = 0,
        default_expire_ms: int = 0,
        socket_timeout: float = 5.0,
        max_connections: int = 10,
        client: Redis | None = None,
    ) -> None:
        """
        Initialize the Redis cache adapter.

        Args:
            address: "host" or "host:port" (port defaults to 6379)
            password: Redis password (empty = no auth)
            db: Logical database index
            default_expire_ms: Default expiration in milliseconds (0 => no expiry)
            socket_timeout: Socket timeout in seconds
            max_connections: Connection pool size
            client: Pre-built client to adopt instead of creating one
        """
        _check_expire_ms(default_expire_ms, "default_expire_ms")
        if db < 0:
            raise ValueError("db must be >= 0")

        host, port = split_address(address)
        self.address = normalize_address(address)
        self.db = db
        self.default_expire_ms = default_expire_ms
        self.verified = False
        self._closed = False
        self._hits = 0
        self._misses = 0
        self._sets = 0
        self._deletes = 0

        # Lazy connection; connects on first command
        self._client: Redis = client if client is not None else Redis(
            host=host,
            port=port,
            password=password or None,
            db=db,
            socket_timeout=socket_timeout,
            max_connections=max_connections,
            decode_responses=False,
        )

    @classmethod
    async def connect(
        cls,
        address: str = "localhost",
        password: str = "",
        db: int = 0,
        default_expire_ms: int = 0,
        socket_timeout: float = 5.0,
        max_connections: int = 10,
        client: Redis | None = None,
    ) -> RedisCache:
        """
        Construct an adapter and verify the server answers PING with PONG.

        Raises:
            CacheConnectionError: If the address is malformed or the probe fails
        """
        cache = cls(
            address=address,
            password=password,
            db=db,
            default_expire_ms=default_expire_ms,
            socket_timeout=socket_timeout,
            max_connections=max_connections,
            client=client,
        )
        try:
            await cache.probe(timeout=socket_timeout)
        except BaseException:
            # includes cancellation while the probe is in flight
            await cache.close()
            raise
        return cache

    async def probe(self, timeout: float | None = None) -> None:
        """
        Liveness handshake.

        Raises:
            CacheConnectionError: Reason tells auth, timeout, unreachable or bad reply apart
        """
        try:
            ack = _ack_to_str(await asyncio.wait_for(self._client.ping(), timeout=timeout))
        except AuthenticationError as e:
            raise self._probe_failure(ConnectionFailureReason.AUTH_REJECTED, e) from e
        except (RedisTimeoutError, TimeoutError) as e:
            raise self._probe_failure(ConnectionFailureReason.PROBE_TIMEOUT, e) from e
        except RedisConnectionError as e:
            raise self._probe_failure(ConnectionFailureReason.UNREACHABLE, e) from e
        except RedisError as e:
            raise self._probe_failure(ConnectionFailureReason.PROBE_FAILED, e) from e

        if ack != PONG:
            raise self._probe_failure(ConnectionFailureReason.PROBE_FAILED, None, {"ack": ack})
        self.verified = True
        logger.debug(f"Redis at {self.address} answered liveness probe", extra={"address": self.address})

    def _probe_failure(
        self,
        reason: ConnectionFailureReason,
        error: Exception | None,
        details: dict[str, Any] | None = None,
    ) -> CacheConnectionError:
        details = details or {}
        if error is not None:
            details["error"] = str(error) or type(error).__name__
        logger.error(
            f"Liveness probe to {self.address} failed: {reason.value}",
            extra={"address": self.address, "db": self.db, "reason": reason.value, **details},
        )
        return CacheConnectionError(self.address, reason, details)

    def _operation_failure(self, operation: str, error: RedisError, **context: Any) -> CacheOperationError:
        logger.error(
            f"Redis {operation} failed: {error}",
            extra={"operation": operation, "address": self.address, "error": str(error), **context},
        )
        return CacheOperationError(operation, str(error), {"error": str(error), **context})

    def _resolve_expire_ms(self, expire_ms: int | None) -> int | None:
        """
        Normalize expiration:
        - None or 0 -> default_expire_ms
        - resulting 0 -> no expiry (return None)
        """
        if expire_ms is None or _check_expire_ms(expire_ms) == 0:
            expire_ms = self.default_expire_ms
        return expire_ms or None

    # ------------ Core Interface ------------

    async def set(self, key: str, value: bytes, expire_ms: int | None = None) -> None:
        """Store a value; expiration falls back to the handle default."""
        _check_key(key)
        payload = _to_bytes(value)
        px = self._resolve_expire_ms(expire_ms)
        try:
            await self._client.set(key, payload, px=px)
        except RedisError as e:
            raise self._operation_failure("set", e, key=key, expire_ms=px) from e
        self._sets += 1

    async def set_ex(self, key: str, value: bytes, expire_ms: int) -> None:
        """Store a value with an explicit, positive expiration."""
        _check_key(key)
        payload = _to_bytes(value)
        if expire_ms is None or _check_expire_ms(expire_ms) == 0:
            raise ValueError("set_ex requires expire_ms > 0")
        try:
            await self._client.psetex(key, expire_ms, payload)
        except RedisError as e:
            raise self._operation_failure("set_ex", e, key=key, expire_ms=expire_ms) from e
        self._sets += 1

    async def get(self, key: str) -> bytes:
        try:
            return await self.get_with_err(key)
        except KeyDoesNotExistError:
            return b""
        except CacheOperationError:
            logger.warning(f"Returning empty value for key '{key}' after failed get", extra={"key": key})
            return b""

    async def get_with_err(self, key: str) -> bytes:
        """Retrieve a value; a missing key raises KeyDoesNotExistError."""
        _check_key(key)
        try:
            data = await self._client.get(key)
        except RedisError as e:
            raise self._operation_failure("get", e, key=key) from e

        if data is None:
            self._misses += 1
            raise KeyDoesNotExistError(key)
        self._hits += 1
        return bytes(data)

    async def delete(self, key_pattern: str) -> int:
        """
        Delete every key matching key_pattern, one DEL per key.

        Matching follows Redis KEYS glob rules (*, ?, [...], backslash escapes).
        Stops at the first failing DEL; keys removed before it stay removed.
        """
        if not isinstance(key_pattern, str) or not key_pattern:
            raise ValueError("key_pattern must be a non-empty string")
        try:
            matched = await self._client.keys(key_pattern)
        except RedisError as e:
            raise self._operation_failure("delete", e, pattern=key_pattern) from e

        deleted = 0
        for raw_key in matched:
            try:
                removed = int(await self._client.delete(raw_key))
            except RedisError as e:
                raise self._operation_failure(
                    "delete",
                    e,
                    pattern=key_pattern,
                    key=_decode_key(raw_key),
                    deleted=deleted,
                    matched=len(matched),
                ) from e
            deleted += removed
            self._deletes += removed

        logger.debug(
            f"Deleted {deleted} key(s) matching '{key_pattern}'",
            extra={"pattern": key_pattern, "deleted": deleted, "matched": len(matched)},
        )
        return deleted

    async def has(self, key: str) -> bool:
        """Check if a key exists."""
        _check_key(key)
        try:
            return int(await self._client.exists(key)) > 0
        except RedisError as e:
            raise self._operation_failure("has", e, key=key) from e

    async def reset(self) -> None:
        """Flush all keys in every logical database of the server."""
        try:
            await self._client.flushall()
        except RedisError as e:
            raise self._operation_failure("reset", e) from e
        logger.info(f"Flushed all keys on {self.address}", extra={"address": self.address})

    async def ping(self) -> str:
        try:
            return _ack_to_str(await self._client.ping())
        except RedisError as e:
            raise self._operation_failure("ping", e) from e

    async def list_keys(self) -> list[str]:
        """
        List all keys with a cursor-based SCAN.

        Keys SCAN reports more than once are kept once, in first-seen order.
        """
        keys: dict[str, None] = {}
        cursor = 0
        try:
            while True:
                cursor, batch = await self._client.scan(cursor=cursor, match="*", count=SCAN_PAGE_SIZE)
                for raw_key in batch:
                    keys.setdefault(_decode_key(raw_key), None)
                if cursor == 0:
                    break
        except RedisError as e:
            raise self._operation_failure("list_keys", e, keys_collected=len(keys)) from e
        return list(keys)

    async def get_stats(self) -> dict[str, Any]:
        """Return local counters and server connectivity."""
        stats: dict[str, Any] = {
            "backend": "redis",
            "address": self.address,
            "db": self.db,
            "default_expire_ms": self.default_expire_ms,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": 0.0,
            "sets": self._sets,
            "deletes": self._deletes,
            "connected": False,
        }

        total_requests = self._hits + self._misses
        stats["hit_rate"] = round((self._hits / total_requests) * 100, 2) if total_requests else 0.0

        if not self._closed:
            try:
                stats["connected"] = await self.ping() == PONG
            except CacheOperationError:
                logger.warning(f"Redis at {self.address} unreachable while collecting stats")

        return stats

    async def close(self) -> None:
        """Close the Redis client and its connection pool."""
        if self._closed:
            return
        self._closed = True
        try:
            await self._client.aclose(close_connection_pool=True)
            logger.info(f"Closed Redis cache at {self.address}", extra={"address": self.address})
        except Exception as e:
            logger.error(
                f"Error closing Redis client: {e}", extra={"address": self.address, "error": str(e)}, exc_info=True
            )
