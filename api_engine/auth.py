"""Authentication strategies applied to outgoing requests."""

from abc import ABCMeta, abstractmethod
from typing import Generator

import httpx
from pydantic import SecretStr

REDACTED = "***"


class AuthStrategy(httpx.Auth, metaclass=ABCMeta):
    """Adds credentials to a request without the caller knowing the scheme.

    Strategies are immutable and safe to share between concurrent calls.
    They also satisfy ``httpx.Auth`` so they can be passed to httpx directly.
    """

    @abstractmethod
    def apply(self, request: httpx.Request) -> httpx.Request:
        """Add credentials to ``request`` and return it."""
        ...

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        yield self.apply(request)

    def __repr__(self) -> str:
        return "AuthStrategy"

    __str__ = __repr__


class ApiKeyAuth(AuthStrategy):
    """Sends the key in the ``x-api-key`` header."""

    header_name = "x-api-key"

    def __init__(self, api_key: str):
        self._api_key = SecretStr(api_key)

    def apply(self, request: httpx.Request) -> httpx.Request:
        request.headers[self.header_name] = self._api_key.get_secret_value()
        return request

    def __repr__(self) -> str:
        return f"ApiKeyAuth(api_key='{REDACTED}')"

    __str__ = __repr__


class BearerAuth(AuthStrategy):
    """Sends ``Authorization: Bearer <token>``."""

    def __init__(self, token: str):
        self._token = SecretStr(token)

    def apply(self, request: httpx.Request) -> httpx.Request:
        request.headers["Authorization"] = f"Bearer {self._token.get_secret_value()}"
        return request

    def __repr__(self) -> str:
        return f"BearerAuth(token='{REDACTED}')"

    __str__ = __repr__


class HeaderAuth(AuthStrategy):
    """Sends an arbitrary named header carrying a secret value."""

    def __init__(self, header_name: str, value: str):
        self.header_name = header_name
        self._value = SecretStr(value)

    def apply(self, request: httpx.Request) -> httpx.Request:
        request.headers[self.header_name] = self._value.get_secret_value()
        return request

    def __repr__(self) -> str:
        return f"HeaderAuth(header_name={self.header_name!r}, value='{REDACTED}')"

    __str__ = __repr__
