"""
kvcache - Observability Module

Logging setup for the kvcache runtime.

Usage:
    from kvcache.observability import setup_logging

    setup_logging(level="DEBUG", json_format=True)
"""

from .structured_logging import JSONFormatter, configure_from_config, setup_logging

__all__ = [
    "JSONFormatter",
    "setup_logging",
    "configure_from_config",
]
