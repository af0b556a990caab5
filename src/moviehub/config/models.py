"""Configuration data models."""

import os
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

SORT_MODES = {
    "relevance",
    "year_desc",
    "year_asc",
    "title_az",
    "title_za",
    "votes_desc",
    "votes_asc",
}


class LLMConfig(BaseModel):
    """LLM provider configuration."""

    enabled: bool = Field(default=True, description="Use the LLM for intent analysis and summaries")
    provider: str = Field(default="openai", description="LLM provider name")
    model: str = Field(default="gpt-4o-mini", description="Model identifier")
    api_key: str = Field(default="", description="API key for the provider")
    max_tokens: int = Field(default=1000, description="Maximum tokens for completion")
    temperature: float = Field(default=0.1, ge=0.0, le=2.0, description="Sampling temperature")
    timeout: int = Field(default=30, gt=0, description="Request timeout in seconds")

    @field_validator("provider")
    @classmethod
    def validate_provider(cls, v: str) -> str:
        """Validate LLM provider."""
        allowed = {"openai", "anthropic"}
        if v.lower() not in allowed:
            raise ValueError(f"Provider must be one of: {allowed}")
        return v.lower()

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Expand environment variables in API key."""
        return os.path.expandvars(v)

    @property
    def usable(self) -> bool:
        """Whether the LLM is enabled and has a resolved key."""
        return self.enabled and bool(self.api_key) and not self.api_key.startswith("$")


class TMDbConfig(BaseModel):
    """TMDb API configuration."""

    api_key: str = Field(..., description="TMDb API key")
    base_url: str = Field(default="https://api.themoviedb.org/3", description="TMDb API base URL")
    image_base_url: str = Field(
        default="https://image.tmdb.org/t/p/w500", description="Prefix for poster paths"
    )
    language: str = Field(default="en-US", description="Default language for requests")
    timeout: int = Field(default=10, gt=0, description="Request timeout in seconds")

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Expand environment variables in API key."""
        return os.path.expandvars(v)


class OMDbConfig(BaseModel):
    """OMDb API configuration."""

    api_key: str = Field(..., description="OMDb API key")
    base_url: str = Field(default="https://www.omdbapi.com/", description="OMDb API base URL")
    timeout: int = Field(default=10, gt=0, description="Request timeout in seconds")

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Expand environment variables in API key."""
        return os.path.expandvars(v)


class TVMazeConfig(BaseModel):
    """TVMaze API configuration (no key required)."""

    base_url: str = Field(default="https://api.tvmaze.com", description="TVMaze API base URL")
    timeout: int = Field(default=10, gt=0, description="Request timeout in seconds")


class RetryConfig(BaseModel):
    """Bounded retry policy for outbound calls."""

    max_attempts: int = Field(default=3, ge=1, description="Attempts including the first one")
    backoff_multiplier: float = Field(default=1.0, ge=0.0, description="Exponential backoff base")
    backoff_max: float = Field(default=10.0, ge=0.0, description="Backoff ceiling in seconds")


class CacheConfig(BaseModel):
    """Cache configuration."""

    enabled: bool = Field(default=True, description="Enable result caching")
    backend: str = Field(default="memory", description="Cache backend")
    url: str = Field(default="redis://localhost:6379/0", description="Redis connection URL")
    key_prefix: str = Field(default="moviehub", description="Namespace for every key")
    default_ttl: int = Field(default=3600, gt=0, description="Default TTL in seconds")
    search_ttl: int = Field(default=1800, gt=0, description="Search result TTL in seconds")
    details_ttl: int = Field(default=7200, gt=0, description="Movie detail TTL in seconds")
    summary_ttl: int = Field(default=86400, gt=0, description="LLM summary TTL in seconds")

    @field_validator("backend")
    @classmethod
    def validate_backend(cls, v: str) -> str:
        """Validate cache backend."""
        allowed = {"redis", "memory"}
        if v.lower() not in allowed:
            raise ValueError(f"Cache backend must be one of: {allowed}")
        return v.lower()


class AggregationConfig(BaseModel):
    """Search aggregation configuration."""

    provider_timeout: float = Field(default=10.0, gt=0, description="Per-provider timeout")
    default_limit: int = Field(default=20, ge=1, le=100, description="Default result limit")
    default_sort: str = Field(default="relevance", description="Default sort mode")

    @field_validator("default_sort")
    @classmethod
    def validate_sort(cls, v: str) -> str:
        """Validate sort mode."""
        if v not in SORT_MODES:
            raise ValueError(f"Sort mode must be one of: {sorted(SORT_MODES)}")
        return v


class WorkflowConfig(BaseModel):
    """Workflow orchestration configuration."""

    gateway: str = Field(default="local", description="Tool gateway transport")
    gateway_url: str = Field(default="http://localhost:3005", description="Remote gateway URL")
    tool_timeout: float = Field(default=15.0, gt=0, description="Per-tool-call timeout")
    intent_timeout: float = Field(default=10.0, gt=0, description="LLM intent call timeout")
    recommendation_limit: int = Field(default=5, ge=1, description="Recommendations returned")
    advertise_url: Optional[str] = Field(
        default=None, description="URL announced to a remote gateway when registering tools"
    )

    @field_validator("gateway")
    @classmethod
    def validate_gateway(cls, v: str) -> str:
        """Validate gateway transport."""
        allowed = {"local", "http"}
        if v.lower() not in allowed:
            raise ValueError(f"Gateway must be one of: {allowed}")
        return v.lower()


class ServerConfig(BaseModel):
    """HTTP server configuration."""

    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=3000, gt=0, lt=65536, description="Bind port")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"], description="CORS origins")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Logging level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format string",
    )
    file: Optional[str] = Field(default=None, description="Log file path")
    max_size_mb: int = Field(default=10, gt=0, description="Maximum log file size in MB")
    backup_count: int = Field(default=5, ge=0, description="Number of backup log files")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate logging level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Logging level must be one of: {allowed}")
        return v.upper()


class Config(BaseModel):
    """Main configuration model."""

    llm: LLMConfig = Field(default_factory=LLMConfig, description="LLM configuration")
    tmdb: TMDbConfig = Field(..., description="TMDb configuration")
    omdb: OMDbConfig = Field(..., description="OMDb configuration")
    tvmaze: TVMazeConfig = Field(default_factory=TVMazeConfig, description="TVMaze configuration")
    retry: RetryConfig = Field(default_factory=RetryConfig, description="Retry policy")
    cache: CacheConfig = Field(default_factory=CacheConfig, description="Cache configuration")
    aggregation: AggregationConfig = Field(
        default_factory=AggregationConfig, description="Aggregation configuration"
    )
    workflow: WorkflowConfig = Field(
        default_factory=WorkflowConfig, description="Workflow configuration"
    )
    server: ServerConfig = Field(default_factory=ServerConfig, description="Server configuration")
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    model_config = ConfigDict(
        validate_assignment=True,
        populate_by_name=True,
    )
