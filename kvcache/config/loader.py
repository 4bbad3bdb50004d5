"""
kvcache - Configuration Loader

Loads and validates configuration from environment variables and .env files.
Provides a singleton configuration instance for the runtime.
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from ..errors import ConfigurationError
from .schemas import KVCacheConfig

logger = logging.getLogger(__name__)

_config_instance: KVCacheConfig | None = None


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def load_config(
    env_file: str | None = None,
    reload: bool = False,
) -> KVCacheConfig:
    """
    Load configuration from environment variables and .env file.

    Args:
        env_file: Path to .env file (default: .env in the working directory)
        reload: Force reload even if config already loaded

    Returns:
        Validated KVCacheConfig instance

    Raises:
        ConfigurationError: If configuration is invalid
    """
    global _config_instance

    if _config_instance is not None and not reload:
        return _config_instance

    if env_file:
        env_path = Path(env_file)
    else:
        env_path = Path.cwd() / ".env"

    if env_path.exists():
        logger.info(f"Loading environment from {env_path}")
        try:
            load_dotenv(env_path, override=True)
        except Exception as e:
            logger.error(
                f"Failed to load .env file from {env_path}: {e}",
                extra={"path": str(env_path), "error": str(e)},
                exc_info=True,
            )
            raise ConfigurationError(
                f"Failed to load environment file: {e}",
                details={"path": str(env_path), "error": str(e)},
            ) from e
    else:
        logger.debug("No .env file found, using environment variables only")

    try:
        config_dict = {
            "environment": os.getenv("ENVIRONMENT", "development"),
            "log_level": os.getenv("LOG_LEVEL", "INFO").upper(),
            "log_format": os.getenv("LOG_FORMAT", "text").lower(),
            "cache": {
                "address": os.getenv("REDIS_ADDRESS", "localhost"),
                "password": os.getenv("REDIS_PASSWORD", ""),
                "db": int(os.getenv("REDIS_DB", "0")),
                "default_expire_ms": int(os.getenv("CACHE_DEFAULT_EXPIRE_MS", "0")),
                "probe_on_connect": _env_bool("CACHE_PROBE_ON_CONNECT", "true"),
                "socket_timeout": float(os.getenv("REDIS_SOCKET_TIMEOUT", "5.0")),
                "max_connections": int(os.getenv("REDIS_MAX_CONNECTIONS", "10")),
            },
        }
    except ValueError as e:
        logger.error(f"Malformed numeric environment variable: {e}", extra={"error": str(e)})
        raise ConfigurationError(
            f"Malformed numeric environment variable: {e}",
            details={"error": str(e)},
        ) from e

    try:
        _config_instance = KVCacheConfig(**config_dict)  # type: ignore[arg-type]
        logger.info(
            f"Configuration loaded successfully (environment: {_config_instance.environment})",
            extra={"environment": _config_instance.environment, "cache_address": _config_instance.cache.address},
        )
        return _config_instance
    except ValidationError as e:
        logger.error(
            f"Configuration validation failed: {e}",
            extra={"validation_errors": e.errors(), "config_dict_keys": list(config_dict.keys())},
        )
        raise ConfigurationError(
            "Configuration validation failed. Check your environment variables and configuration.",
            details={"validation_errors": e.errors()},
        ) from e


def get_config() -> KVCacheConfig:
    """
    Get the current configuration instance, loading it on first access.

    Returns:
        Current KVCacheConfig instance
    """
    if _config_instance is None:
        return load_config()

    return _config_instance


def reload_config(env_file: str | None = None) -> KVCacheConfig:
    """
    Force reload configuration.

    Args:
        env_file: Optional path to .env file

    Returns:
        Reloaded KVCacheConfig instance
    """
    return load_config(env_file=env_file, reload=True)


def reset_config() -> None:
    """Drop the cached configuration instance. Used by tests."""
    global _config_instance
    _config_instance = None
