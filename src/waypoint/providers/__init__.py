"""
Waypoint provider layer.

Model client access via LiteLLM, provider error classification, and
session usage and cost accounting.
"""

from waypoint.providers.client import CompletionOptions, LiteLLMClient, ModelClient
from waypoint.providers.cost import (
    DEFAULT_PRICE,
    LiteLLMPriceTable,
    PriceTable,
    ResponseUsage,
    SessionAccumulator,
    StaticPriceTable,
)
from waypoint.providers.exceptions import (
    AuthenticationError,
    ContextLengthExceededError,
    FailureType,
    InvalidRequestError,
    NetworkError,
    ProviderError,
    RateLimitError,
    ServerError,
    classify_error,
    wrap_error,
)
from waypoint.providers.models import (
    Message,
    MessageRole,
    ModelPrice,
    ModelReply,
    ModelUsage,
    SessionStats,
    TokenUsage,
)

__all__ = [
    "AuthenticationError",
    "CompletionOptions",
    "ContextLengthExceededError",
    "DEFAULT_PRICE",
    "FailureType",
    "InvalidRequestError",
    "LiteLLMClient",
    "LiteLLMPriceTable",
    "Message",
    "MessageRole",
    "ModelClient",
    "ModelPrice",
    "ModelReply",
    "ModelUsage",
    "NetworkError",
    "PriceTable",
    "ProviderError",
    "RateLimitError",
    "ResponseUsage",
    "ServerError",
    "SessionAccumulator",
    "SessionStats",
    "StaticPriceTable",
    "TokenUsage",
    "classify_error",
    "wrap_error",
]
