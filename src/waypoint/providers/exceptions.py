"""
Provider exceptions for Waypoint.

Model client failures are raised as ProviderError subclasses; the
orchestration loop turns them into a Failed outcome.
"""

from enum import Enum

from waypoint.errors import WaypointError


class FailureType(Enum):
    """Classification of provider failures."""

    RATE_LIMIT = "rate_limit"
    AUTH_ERROR = "auth_error"
    NETWORK_ERROR = "network_error"
    SERVER_ERROR = "server_error"
    CONTEXT_LENGTH = "context_length"
    INVALID_REQUEST = "invalid_request"
    UNKNOWN = "unknown"


class ProviderError(WaypointError):
    """Base exception for provider errors."""

    failure_type = FailureType.UNKNOWN

    def __init__(self, message: str, provider: str | None = None):
        super().__init__(message)
        self.provider = provider


class AuthenticationError(ProviderError):
    """API key invalid or missing."""

    failure_type = FailureType.AUTH_ERROR


class RateLimitError(ProviderError):
    """Provider rate limit exceeded."""

    failure_type = FailureType.RATE_LIMIT

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        retry_after: int | None = None,
    ):
        super().__init__(message, provider)
        self.retry_after = retry_after


class ContextLengthExceededError(ProviderError):
    """Request exceeded the model's context length."""

    failure_type = FailureType.CONTEXT_LENGTH


class NetworkError(ProviderError):
    """Network-related error (connection, timeout, etc.)."""

    failure_type = FailureType.NETWORK_ERROR


class ServerError(ProviderError):
    """Provider server error (5xx status codes)."""

    failure_type = FailureType.SERVER_ERROR


class InvalidRequestError(ProviderError):
    """Invalid request sent to provider."""

    failure_type = FailureType.INVALID_REQUEST


_ERROR_TYPES: dict[FailureType, type[ProviderError]] = {
    FailureType.RATE_LIMIT: RateLimitError,
    FailureType.AUTH_ERROR: AuthenticationError,
    FailureType.NETWORK_ERROR: NetworkError,
    FailureType.SERVER_ERROR: ServerError,
    FailureType.CONTEXT_LENGTH: ContextLengthExceededError,
    FailureType.INVALID_REQUEST: InvalidRequestError,
    FailureType.UNKNOWN: ProviderError,
}


def classify_error(error: Exception) -> FailureType:
    """
    Classify an exception into a failure type.

    Args:
        error: The exception to classify.

    Returns:
        The failure type classification.
    """
    if isinstance(error, ProviderError):
        return error.failure_type

    # Import LiteLLM exceptions here to keep import time low
    from litellm.exceptions import (
        APIConnectionError,
        APIError,
        AuthenticationError as LiteLLMAuthError,
        BadRequestError,
        ContextWindowExceededError,
        RateLimitError as LiteLLMRateLimitError,
        ServiceUnavailableError,
        Timeout,
    )

    # ContextWindowExceededError subclasses BadRequestError; check it first
    if isinstance(error, ContextWindowExceededError):
        return FailureType.CONTEXT_LENGTH
    elif isinstance(error, LiteLLMRateLimitError):
        return FailureType.RATE_LIMIT
    elif isinstance(error, LiteLLMAuthError):
        return FailureType.AUTH_ERROR
    elif isinstance(error, (APIConnectionError, ServiceUnavailableError, Timeout)):
        return FailureType.NETWORK_ERROR
    elif isinstance(error, BadRequestError):
        return FailureType.INVALID_REQUEST
    elif isinstance(error, APIError):
        status = getattr(error, "status_code", None)
        if status and 500 <= status < 600:
            return FailureType.SERVER_ERROR
        elif status and 400 <= status < 500:
            return FailureType.INVALID_REQUEST
        return FailureType.UNKNOWN

    if isinstance(error, (ConnectionError, TimeoutError)):
        return FailureType.NETWORK_ERROR

    return FailureType.UNKNOWN


def wrap_error(error: Exception, provider: str | None = None) -> ProviderError:
    """Convert any client exception into the matching ProviderError."""
    if isinstance(error, ProviderError):
        return error

    error_type = _ERROR_TYPES[classify_error(error)]
    return error_type(str(error), provider)
