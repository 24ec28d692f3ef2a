"""Custom exception hierarchy for the Arhan agent.

Errors are organized into configuration errors, client errors (the
transport and the model provider) and tool errors. Client errors end the
current run; tool errors never leave the dispatcher.
"""


class AgentError(Exception):
    """Base exception for all agent errors."""


class ConfigurationError(AgentError):
    """Required configuration (such as the API key) is missing."""


# =============================================================================
# Client Errors - Issues with the model endpoint
# =============================================================================

class ClientError(AgentError):
    """Base class for classified transport/provider errors."""


class AuthenticationError(ClientError):
    """API key is invalid, revoked or missing on the provider side."""


class RateLimitError(ClientError):
    """Rate limit exceeded."""

    def __init__(self, message: str = "Rate limit exceeded", retry_after: float | None = None):
        self.retry_after = retry_after
        if retry_after:
            message = f"{message}\nRetry after: {retry_after}s"
        super().__init__(message)


class ModelNotFoundError(ClientError):
    """Requested model does not exist or has no available endpoint."""

    def __init__(self, model_name: str, detail: str | None = None):
        self.model_name = model_name
        message = (
            f"Model not found: {model_name}\n"
            "Check the model id at https://openrouter.ai/models "
            "or pass another one with --model"
        )
        if detail:
            message = f"{message}\nProvider said: {detail}"
        super().__init__(message)


class ProviderUnavailableError(ClientError):
    """Provider API could not be reached."""


class ProviderError(ClientError):
    """The provider rejected or failed the request for another reason."""


class InvalidResponseError(ClientError):
    """Response from provider could not be parsed."""


# =============================================================================
# Tool Errors - Issues with tool calls
# =============================================================================

class ToolError(AgentError):
    """Base class for tool call errors."""


class ToolNotFoundError(ToolError):
    """Requested tool does not exist."""

    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        super().__init__(f"Unknown tool: {tool_name}")


class ToolValidationError(ToolError):
    """Tool arguments parsed as JSON but do not match the tool's schema."""

    def __init__(self, tool_name: str, errors: list[str]):
        self.tool_name = tool_name
        self.errors = errors
        super().__init__(f"Invalid arguments for {tool_name}: {', '.join(errors)}")


class MalformedToolArgumentsError(ToolError):
    """Tool arguments are not valid JSON."""

    def __init__(self, tool_name: str, raw_arguments: str):
        self.tool_name = tool_name
        self.raw_arguments = raw_arguments
        super().__init__(f"Failed to parse tool arguments: {raw_arguments}")
