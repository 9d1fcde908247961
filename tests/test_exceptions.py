"""Tests for the error taxonomy."""

import logging

import pytest

from api_engine import (
    ApiClientError,
    ApiError,
    DeserializeError,
    JsonParseError,
    MaxRetriesReachedError,
    NetworkError,
    RateLimitError,
    UnexpectedError,
)


class TestTaxonomy:
    """The taxonomy is flat: every kind derives directly from the base."""

    @pytest.mark.parametrize("error_class", [
        NetworkError,
        JsonParseError,
        DeserializeError,
        RateLimitError,
        ApiError,
        MaxRetriesReachedError,
        UnexpectedError,
    ])
    def test_direct_subclass_of_base(self, error_class):
        assert error_class.__bases__ == (ApiClientError,)

    def test_rate_limit_is_not_max_retries(self):
        assert not issubclass(RateLimitError, MaxRetriesReachedError)
        assert not issubclass(MaxRetriesReachedError, RateLimitError)


class TestErrorFields:
    """Test error attributes and rendering."""

    def test_api_error_fields(self):
        error = ApiError(500, "boom")
        assert error.status == 500
        assert error.body == "boom"
        assert str(error) == "API returned an error: status 500, body boom"

    def test_rate_limit_fields(self):
        error = RateLimitError("slow down", retry_after=7.0, limit=100, remaining=0)
        assert error.status == 429
        assert error.body == "slow down"
        assert error.retry_after == 7.0
        assert error.limit == 100
        assert error.remaining == 0
        assert "Rate limit exceeded: slow down" in str(error)

    def test_max_retries_attempts(self):
        error = MaxRetriesReachedError(attempts=3)
        assert error.attempts == 3
        assert "3 attempts" in str(error)

    def test_deserialize_error_path_in_str(self):
        error = DeserializeError("bad field", path="user.address.zip")
        assert error.path == "user.address.zip"
        assert str(error) == "bad field | Path: user.address.zip"

    def test_request_context_in_str(self):
        error = NetworkError(
            "Network error: refused",
            request_method="GET",
            request_url="https://api.example.com/items",
        )
        assert str(error) == "Network error: refused | Request: GET https://api.example.com/items"

    def test_to_dict(self):
        cause = ValueError("bad")
        error = JsonParseError("Failed to parse", body="{", original_exception=cause)
        data = error.to_dict()
        assert data["error_type"] == "JsonParseError"
        assert data["message"] == "Failed to parse"
        assert data["original_exception"] == repr(cause)
        assert error.body == "{"

    def test_error_is_logged_on_creation(self, caplog):
        with caplog.at_level(logging.ERROR, logger="api_engine.exceptions"):
            UnexpectedError("invariant broken", step="clone")
        assert "UnexpectedError: invariant broken" in caplog.text
        assert "clone" in caplog.text
