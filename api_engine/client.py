"""Public API client facade."""

import logging
from typing import Any, Optional, Sequence, Tuple

import httpx
from pydantic_core import PydanticSerializationError, to_json

from .auth import AuthStrategy
from .config import DEFAULT_USER_AGENT, ClientSettings, RetryPolicy
from .exceptions import ConfigurationError, DeserializeError, NetworkError
from .executor import RequestExecutor, SleepFunc
from .query import serialize_params
from .response import ResponseHandler, deserialize_value

logger = logging.getLogger(__name__)


def join_url(base_url: str, endpoint: str) -> str:
    """Join a base URL and endpoint with exactly one slash at the seam."""
    return f"{base_url.rstrip('/')}/{endpoint.lstrip('/')}"


def build_transport(timeout: Optional[float] = None, user_agent: str = DEFAULT_USER_AGENT) -> httpx.AsyncClient:
    """Create the default httpx transport for a client.

    With no ``timeout`` the httpx default applies.
    """
    kwargs: dict = {
        "headers": {
            "Accept": "application/json",
            "User-Agent": user_agent,
        },
    }
    if timeout is not None:
        kwargs["timeout"] = httpx.Timeout(timeout)
    return httpx.AsyncClient(**kwargs)


class ApiClient:
    """Async HTTP API client with pluggable auth and rate-limit retries.

    The client holds no per-call state and may be shared freely between
    concurrent tasks.
    """

    def __init__(
        self,
        base_url: str,
        auth: Optional[AuthStrategy] = None,
        transport: Optional[httpx.AsyncClient] = None,
        retry_policy: Optional[RetryPolicy] = None,
        sleep: Optional[SleepFunc] = None,
        timeout: Optional[float] = None,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        """Initialize API client.

        Args:
            base_url: Root URL; trailing slashes are stripped
            auth: Strategy that adds credentials to each request
            transport: Shared httpx client. If None, one is created and owned
            retry_policy: Retry budget for rate-limited calls
            sleep: Awaitable sleep used between retries (defaults to asyncio.sleep)
            timeout: Timeout in seconds for an owned transport (httpx default if None)
            user_agent: User-Agent header for an owned transport
        """
        self._base_url = base_url.rstrip("/")
        self._auth = auth
        self._owns_transport = transport is None
        self._transport = transport or build_transport(timeout=timeout, user_agent=user_agent)
        self._retry_policy = retry_policy or RetryPolicy()
        self._executor = RequestExecutor(
            self._transport,
            handler=ResponseHandler(),
            policy=self._retry_policy,
            sleep=sleep,
        )

    @classmethod
    def from_settings(
        cls,
        settings: ClientSettings,
        transport: Optional[httpx.AsyncClient] = None,
    ) -> "ApiClient":
        """Create a client from ``ClientSettings``."""
        if not settings.base_url:
            raise ConfigurationError("base_url is required to build a client")
        return cls(
            settings.base_url,
            auth=settings.build_auth(),
            transport=transport,
            retry_policy=settings.retry_policy,
            timeout=settings.timeout,
            user_agent=settings.user_agent,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def auth(self) -> Optional[AuthStrategy]:
        return self._auth

    @property
    def transport(self) -> httpx.AsyncClient:
        return self._transport

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._retry_policy

    def __repr__(self) -> str:
        return f"ApiClient(base_url={self._base_url!r}, auth={self._auth!r})"

    def _build_url(self, endpoint: str) -> str:
        return join_url(self._base_url, endpoint)

    def _build_request(self, method: str, url: str, **kwargs: Any) -> httpx.Request:
        try:
            return self._transport.build_request(method, url, **kwargs)
        except httpx.InvalidURL as e:
            raise NetworkError(
                f"Invalid request URL: {e}",
                original_exception=e,
                request_method=method,
                request_url=url,
            ) from e

    def _apply_auth(self, request: httpx.Request) -> httpx.Request:
        if self._auth is None:
            return request
        return self._auth.apply(request)

    async def get(
        self,
        endpoint: str,
        params: Optional[Sequence[Tuple[str, str]]] = None,
        response_type: Any = None,
    ) -> Any:
        """
        Send a GET request.

        Args:
            endpoint: Path relative to the base URL
            params: Ordered query pairs
            response_type: Target type for the body; None returns decoded JSON

        Returns:
            The parsed response body
        """
        url = self._build_url(endpoint)
        logger.info(f"Sending GET request to URL: {url}")

        request = self._build_request("GET", url, params=list(params) if params else None)
        if params:
            logger.debug(f"Added query parameters: {list(params)}")
        request = self._apply_auth(request)

        return await self._executor.execute(request, response_type)

    async def post(
        self,
        endpoint: str,
        body: Any = None,
        response_type: Any = None,
    ) -> Any:
        """
        Send a POST request with an optional JSON body.

        Args:
            endpoint: Path relative to the base URL
            body: Anything pydantic can serialize; aliases are honored
            response_type: Target type for the body; None returns decoded JSON

        Returns:
            The parsed response body

        Raises:
            DeserializeError: the body could not be serialized (nothing is sent)
        """
        url = self._build_url(endpoint)
        logger.info(f"Sending POST request to URL: {url}")

        content = None
        headers = None
        if body is not None:
            try:
                content = to_json(body, by_alias=True)
            except PydanticSerializationError as e:
                raise DeserializeError(
                    f"Failed to serialize request body: {e}",
                    original_exception=e,
                    request_method="POST",
                    request_url=url,
                ) from e
            headers = {"Content-Type": "application/json"}
            logger.debug(f"Serialized body: {content.decode()}")

        request = self._build_request("POST", url, content=content, headers=headers)
        request = self._apply_auth(request)

        return await self._executor.execute(request, response_type)

    @staticmethod
    def serialize_params(params: Any) -> Optional[list]:
        """Flatten a parameter object into query pairs. See ``query.serialize_params``."""
        return serialize_params(params)

    @staticmethod
    def deserialize_response(value: Any, response_type: Any) -> Any:
        """Path-aware conversion of decoded JSON into ``response_type``."""
        return deserialize_value(value, response_type)

    async def aclose(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_transport:
            await self._transport.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
