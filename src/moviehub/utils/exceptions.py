"""Custom exceptions for the application."""


class MovieHubError(Exception):
    """Base exception for all application errors."""

    pass


class ConfigurationError(MovieHubError):
    """Configuration-related errors."""

    pass


class ProviderError(MovieHubError):
    """An upstream provider call failed or timed out."""

    def __init__(
        self, message: str, provider: str = "", status: int = 0, transient: bool = False
    ) -> None:
        super().__init__(message)
        self.provider = provider
        self.status = status
        self.transient = transient


class MovieNotFoundError(MovieHubError):
    """No provider could resolve the requested id."""

    pass


class ConflictError(MovieHubError):
    """A uniqueness invariant was violated."""

    pass


class EmptyInputError(MovieHubError):
    """An aggregation function received no records."""

    pass


class LLMServiceError(MovieHubError):
    """LLM service errors."""

    pass


class MalformedResponseError(LLMServiceError):
    """An upstream service returned output that could not be parsed."""

    pass


class ToolNotFoundError(MovieHubError):
    """A qualified tool name did not resolve to a registered server and tool."""

    pass


class ToolCallError(MovieHubError):
    """A resolved tool failed while executing."""

    pass


class OrchestratorError(MovieHubError):
    """Orchestrator errors."""

    pass
