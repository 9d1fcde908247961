"""Tests for authentication strategies."""

import httpx
import pytest

from api_engine import ApiKeyAuth, AuthStrategy, BearerAuth, HeaderAuth

SECRET = "s3cr3t-value-123"


def make_request() -> httpx.Request:
    return httpx.Request("GET", "https://api.example.com/items")


class TestApply:
    """Each strategy adds exactly its own header."""

    def test_api_key_header(self):
        request = ApiKeyAuth(SECRET).apply(make_request())
        assert request.headers["x-api-key"] == SECRET

    def test_bearer_header(self):
        request = BearerAuth(SECRET).apply(make_request())
        assert request.headers["Authorization"] == f"Bearer {SECRET}"

    def test_custom_header(self):
        request = HeaderAuth("X-Service-Token", SECRET).apply(make_request())
        assert request.headers["X-Service-Token"] == SECRET

    def test_apply_returns_same_request(self):
        request = make_request()
        assert BearerAuth(SECRET).apply(request) is request

    def test_strategy_is_abstract(self):
        with pytest.raises(TypeError):
            AuthStrategy()


class TestRedaction:
    """Debug and string forms never leak the secret."""

    @pytest.mark.parametrize("auth", [
        ApiKeyAuth(SECRET),
        BearerAuth(SECRET),
        HeaderAuth("X-Service-Token", SECRET),
    ])
    def test_secret_not_in_repr_or_str(self, auth):
        assert SECRET not in repr(auth)
        assert SECRET not in str(auth)
        assert "***" in repr(auth)

    def test_header_auth_shows_header_name(self):
        assert "X-Service-Token" in repr(HeaderAuth("X-Service-Token", SECRET))

    def test_secret_not_in_vars(self):
        auth = ApiKeyAuth(SECRET)
        assert SECRET not in str(vars(auth))


@pytest.mark.asyncio
async def test_strategy_works_as_httpx_auth():
    """A strategy can be handed to httpx directly."""
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={})

    async with httpx.AsyncClient(
        transport=httpx.MockTransport(handler), auth=BearerAuth(SECRET)
    ) as client:
        await client.get("https://api.example.com/ping")

    assert seen[0].headers["Authorization"] == f"Bearer {SECRET}"
