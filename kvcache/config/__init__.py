"""
kvcache - Configuration Module

Provides typed configuration loading and validation.
"""

from .loader import get_config, load_config, reload_config, reset_config
from .schemas import (
    CacheConfig,
    Environment,
    KVCacheConfig,
    LogFormat,
    LogLevel,
)

__all__ = [
    # Loader functions
    "load_config",
    "get_config",
    "reload_config",
    "reset_config",
    # Main config
    "KVCacheConfig",
    # Enums
    "Environment",
    "LogLevel",
    "LogFormat",
    # Config sections
    "CacheConfig",
]
