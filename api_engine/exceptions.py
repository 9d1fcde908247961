"""Error taxonomy for the API engine.

Every failure produced by the request pipeline is one of the classes below.
The set is flat: each error derives directly from ``ApiClientError`` so
callers can catch one kind without accidentally catching another.
"""

import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class ApiClientError(Exception):
    """Base exception for all API engine errors."""

    def __init__(
        self,
        message: str,
        original_exception: Optional[BaseException] = None,
        **context: Any
    ):
        """
        Initialize API error with context and logging.

        Args:
            message (str): Primary error message
            original_exception (Optional[BaseException]): Underlying exception
            **context: Additional error context (request_url, request_method, ...)
        """
        self.message = message
        self.original_exception = original_exception
        self.context = context

        log_message = f"{self.__class__.__name__}: {message}"
        if context:
            log_message += f" | Context: {context}"
        logger.error(log_message, extra={"error_context": context})

        super().__init__(message)

    def __str__(self) -> str:
        parts = [self.message]
        method = self.context.get("request_method")
        url = self.context.get("request_url")
        if method and url:
            parts.append(f"Request: {method} {url}")
        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the error into a serializable dictionary."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "original_exception": repr(self.original_exception) if self.original_exception else None,
            "context": dict(self.context),
        }


class NetworkError(ApiClientError):
    """Raised when the transport fails (DNS, refused connection, TLS, timeout)."""
    pass


class JsonParseError(ApiClientError):
    """Raised when a successful response body cannot be parsed into the target type."""

    def __init__(self, message: str, body: str = "", **kwargs: Any):
        self.body = body
        super().__init__(message, **kwargs)


class DeserializeError(ApiClientError):
    """Raised when decoding a JSON value or encoding an outgoing payload fails.

    ``path`` holds the dotted location of the offending field when known.
    """

    def __init__(self, message: str, path: Optional[str] = None, **kwargs: Any):
        self.path = path
        super().__init__(message, **kwargs)

    def __str__(self) -> str:
        base = super().__str__()
        if self.path:
            return f"{base} | Path: {self.path}"
        return base


class RateLimitError(ApiClientError):
    """Raised for HTTP 429. The only outcome the executor retries."""

    status = 429

    def __init__(
        self,
        body: str,
        retry_after: Optional[float] = None,
        limit: Optional[int] = None,
        remaining: Optional[int] = None,
        reset_time: Optional[int] = None,
        **kwargs: Any
    ):
        self.body = body
        self.retry_after = retry_after
        self.limit = limit
        self.remaining = remaining
        self.reset_time = reset_time
        super().__init__(f"Rate limit exceeded: {body}", **kwargs)


class ApiError(ApiClientError):
    """Raised for any non-success status other than 429."""

    def __init__(self, status: int, body: str, **kwargs: Any):
        self.status = status
        self.body = body
        super().__init__(
            f"API returned an error: status {status}, body {body}", **kwargs
        )


class MaxRetriesReachedError(ApiClientError):
    """Raised when every attempt was rate limited."""

    def __init__(self, attempts: int, **kwargs: Any):
        self.attempts = attempts
        super().__init__(f"Maximum retries reached after {attempts} attempts", **kwargs)


class UnexpectedError(ApiClientError):
    """Raised when an internal invariant is violated."""
    pass


class ConfigurationError(ApiClientError):
    """Raised when client settings are inconsistent."""
    pass
