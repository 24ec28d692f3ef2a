"""Classification of model endpoint failures.

Provider failures arrive as ``openai`` SDK exceptions, sometimes with a
precise status code and sometimes (errors sent inside the event stream) as
a bare message. Both are mapped onto the ClientError hierarchy with a
message naming the likely cause and what to do about it.
"""

import openai

from ..exceptions import (
    AuthenticationError,
    ClientError,
    ModelNotFoundError,
    ProviderError,
    ProviderUnavailableError,
    RateLimitError,
)

MODEL_NOT_FOUND_SIGNATURES = (
    "model not found",
    "no endpoints found",
    "not a valid model",
    "does not exist",
)
AUTH_SIGNATURES = (
    "unauthorized",
    "invalid api key",
    "no auth credentials",
    "user not found",
)
RATE_LIMIT_SIGNATURES = (
    "rate limit",
    "rate-limited",
    "too many requests",
)
CREDIT_SIGNATURES = (
    "insufficient credits",
    "requires more credits",
)


def _error_message(error: Exception) -> str:
    message = getattr(error, "message", None) or str(error)
    body = getattr(error, "body", None)
    # openrouter puts the upstream provider's own message under metadata.raw
    if isinstance(body, dict):
        metadata = body.get("metadata") or (body.get("error") or {}).get("metadata") or {}
        raw = metadata.get("raw") if isinstance(metadata, dict) else None
        if raw and str(raw) not in message:
            message = f"{message} ({raw})"
    return message


def _matches(message: str, signatures: tuple[str, ...]) -> bool:
    lowered = message.lower()
    return any(signature in lowered for signature in signatures)


def _retry_after(error: Exception) -> float | None:
    response = getattr(error, "response", None)
    if response is None:
        return None
    value = response.headers.get("retry-after")
    try:
        return float(value) if value is not None else None
    except ValueError:
        return None


def classify_provider_error(error: Exception, model: str) -> ClientError:
    """Map a transport/provider exception to an actionable ClientError.

    Args:
        error: Exception raised by the SDK before or during streaming.
        model: Model id of the failed request, quoted in the message.

    Returns:
        The ClientError to raise in place of ``error``.
    """
    if isinstance(error, ClientError):
        return error

    message = _error_message(error)
    status = getattr(error, "status_code", None)

    if isinstance(error, openai.APIConnectionError):
        return ProviderUnavailableError(
            f"Could not reach the model endpoint: {message}\n"
            "Check your network connection and try again"
        )

    if (
        isinstance(error, openai.AuthenticationError)
        or status == 401
        or _matches(message, AUTH_SIGNATURES)
    ):
        return AuthenticationError(
            f"Authentication failed: {message}\n"
            "Check OPENROUTER_API_KEY; keys are managed at https://openrouter.ai/keys"
        )

    if (
        isinstance(error, openai.NotFoundError)
        or status == 404
        or _matches(message, MODEL_NOT_FOUND_SIGNATURES)
    ):
        return ModelNotFoundError(model, detail=message)

    if (
        isinstance(error, openai.RateLimitError)
        or status == 429
        or _matches(message, RATE_LIMIT_SIGNATURES)
    ):
        return RateLimitError(
            f"Rate limit exceeded for {model}: {message}\n"
            "Free models are heavily rate limited; wait a moment or pick another model with --model",
            retry_after=_retry_after(error),
        )

    if status == 402 or _matches(message, CREDIT_SIGNATURES):
        return ProviderError(
            f"Insufficient credits for {model}: {message}\n"
            "Add credits at https://openrouter.ai/credits or switch to a free model"
        )

    return ProviderError(
        f"Provider returned an error for {model}: {message}\n"
        "The upstream provider may be overloaded; try again or pick another model with --model"
    )
