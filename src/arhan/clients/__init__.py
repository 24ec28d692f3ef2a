"""Model client implementations.

Clients implement the BaseLLMClient streaming contract and raise
classified ClientError subclasses on failure.
"""

from .base import BaseLLMClient
from .errors import classify_provider_error
from .openrouter import OpenRouterClient

__all__ = [
    "BaseLLMClient",
    "OpenRouterClient",
    "classify_provider_error",
]
