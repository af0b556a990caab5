"""Infrastructure module for cross-cutting concerns."""

from .cache import CacheManager, MemoryCache, RedisCache, create_cache
from .container import Container
from .logging import LoggerMixin, get_logger, setup_logging
from .retry import RetryPolicy, is_transient

__all__ = [
    "Container",
    "CacheManager",
    "MemoryCache",
    "RedisCache",
    "create_cache",
    "RetryPolicy",
    "is_transient",
    "LoggerMixin",
    "get_logger",
    "setup_logging",
]
