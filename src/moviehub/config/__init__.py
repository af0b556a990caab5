"""Configuration management."""

from .config_manager import ConfigManager
from .models import (
    AggregationConfig,
    CacheConfig,
    Config,
    LLMConfig,
    LoggingConfig,
    OMDbConfig,
    RetryConfig,
    ServerConfig,
    TMDbConfig,
    TVMazeConfig,
    WorkflowConfig,
)

__all__ = [
    "Config",
    "ConfigManager",
    "LLMConfig",
    "TMDbConfig",
    "OMDbConfig",
    "TVMazeConfig",
    "RetryConfig",
    "CacheConfig",
    "AggregationConfig",
    "WorkflowConfig",
    "ServerConfig",
    "LoggingConfig",
]
