"""Async HTTP API client engine with pluggable auth and typed responses."""

from .auth import ApiKeyAuth, AuthStrategy, BearerAuth, HeaderAuth
from .client import ApiClient, join_url
from .config import ClientSettings, RetryPolicy, get_settings
from .executor import RequestExecutor, RetryState
from .exceptions import (
    ApiClientError,
    ApiError,
    ConfigurationError,
    DeserializeError,
    JsonParseError,
    MaxRetriesReachedError,
    NetworkError,
    RateLimitError,
    UnexpectedError,
)
from .logging_config import setup_logging, setup_logging_from_settings
from .query import serialize_params
from .response import ResponseHandler, deserialize_value

deserialize_response = deserialize_value

__all__ = [
    "ApiClient",
    "join_url",

    # Auth
    "AuthStrategy",
    "ApiKeyAuth",
    "BearerAuth",
    "HeaderAuth",

    # Configuration
    "ClientSettings",
    "RetryPolicy",
    "get_settings",
    "setup_logging",
    "setup_logging_from_settings",

    # Pipeline
    "RequestExecutor",
    "RetryState",
    "ResponseHandler",
    "serialize_params",
    "deserialize_response",

    # Errors
    "ApiClientError",
    "NetworkError",
    "JsonParseError",
    "DeserializeError",
    "RateLimitError",
    "ApiError",
    "MaxRetriesReachedError",
    "UnexpectedError",
    "ConfigurationError",
]

__version__ = "0.1.0"
