"""Request execution with fixed-delay retries on rate limiting."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

import httpx

from .config import RetryPolicy
from .exceptions import MaxRetriesReachedError, NetworkError, RateLimitError, UnexpectedError
from .response import ResponseHandler

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[Any]]


@dataclass
class RetryState:
    """Retry bookkeeping for a single ``execute`` call."""

    remaining: int
    attempts: int = 0

    @property
    def exhausted(self) -> bool:
        return self.remaining <= 0

    def record_attempt(self) -> None:
        self.attempts += 1

    def record_rate_limit(self) -> None:
        self.remaining -= 1


def clone_request(request: httpx.Request) -> httpx.Request:
    """Copy a prepared request so it can be sent again unchanged."""
    try:
        content = request.content
    except httpx.RequestNotRead as e:
        raise UnexpectedError(
            "Request body is a stream and cannot be cloned for retry",
            original_exception=e,
            request_method=request.method,
            request_url=str(request.url),
        ) from e
    return httpx.Request(
        request.method,
        request.url,
        headers=request.headers.copy(),
        content=content or None,
        extensions=dict(request.extensions),
    )


class RequestExecutor:
    """Sends a prepared request, retrying only when the server rate limits it.

    Transport failures and every other error kind propagate on the first
    occurrence. Holds no per-call state, so one executor serves any number
    of concurrent calls.
    """

    def __init__(
        self,
        transport: httpx.AsyncClient,
        handler: Optional[ResponseHandler] = None,
        policy: Optional[RetryPolicy] = None,
        sleep: Optional[SleepFunc] = None,
    ):
        self.transport = transport
        self.handler = handler or ResponseHandler()
        self.policy = policy or RetryPolicy()
        self._sleep = sleep or asyncio.sleep

    async def _send(self, request: httpx.Request) -> httpx.Response:
        try:
            return await self.transport.send(request, stream=True)
        except httpx.TransportError as e:
            raise NetworkError(
                f"Network error: {e}",
                original_exception=e,
                request_method=request.method,
                request_url=str(request.url),
            ) from e
        except RuntimeError as e:
            if not self.transport.is_closed:
                raise
            raise UnexpectedError(
                "Transport is closed",
                original_exception=e,
                request_method=request.method,
                request_url=str(request.url),
            ) from e

    async def execute(self, request: httpx.Request, response_type: Any = None) -> Any:
        """
        Run one logical call.

        Args:
            request: Fully prepared request, auth already applied
            response_type: Target type for the success body

        Returns:
            The parsed success body

        Raises:
            MaxRetriesReachedError: every attempt was rate limited
            NetworkError, JsonParseError, ApiError, UnexpectedError: first occurrence
        """
        state = RetryState(remaining=self.policy.max_attempts)

        while not state.exhausted:
            attempt = clone_request(request)
            state.record_attempt()
            response = await self._send(attempt)

            try:
                return await self.handler.classify_and_parse(response, response_type)
            except RateLimitError:
                state.record_rate_limit()
                logger.warning(
                    f"Rate limited on {request.method} {request.url} "
                    f"(attempt {state.attempts}, {state.remaining} left), "
                    f"retrying in {self.policy.delay}s"
                )
                await self._sleep(self.policy.delay)

        raise MaxRetriesReachedError(
            attempts=state.attempts,
            request_method=request.method,
            request_url=str(request.url),
        )
