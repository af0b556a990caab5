"""Utility functions and classes."""

from .concurrency import Settled, settle_all
from .exceptions import (
    ConfigurationError,
    ConflictError,
    EmptyInputError,
    LLMServiceError,
    MalformedResponseError,
    MovieHubError,
    MovieNotFoundError,
    OrchestratorError,
    ProviderError,
    ToolCallError,
    ToolNotFoundError,
)
from .text_utils import (
    collation_key,
    contains_word,
    extract_year,
    find_year_token,
    is_missing,
    parse_float,
    parse_int,
    split_list,
    strip_html_tags,
)

__all__ = [
    "MovieHubError",
    "ConfigurationError",
    "ProviderError",
    "MovieNotFoundError",
    "ConflictError",
    "EmptyInputError",
    "LLMServiceError",
    "MalformedResponseError",
    "ToolNotFoundError",
    "ToolCallError",
    "OrchestratorError",
    "Settled",
    "settle_all",
    "strip_html_tags",
    "extract_year",
    "find_year_token",
    "is_missing",
    "parse_int",
    "parse_float",
    "split_list",
    "collation_key",
    "contains_word",
]
