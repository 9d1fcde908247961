"""Shared fixtures: scripted httpx transport and a recording sleep."""

from typing import List

import httpx
import pytest

from api_engine import ApiClient

BASE_URL = "https://api.example.com"


class ScriptedTransport:
    """Replays scripted responses in order and records every request."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    @property
    def calls(self) -> int:
        return len(self.requests)


class SleepRecorder:
    """Stand-in for asyncio.sleep that records delays and returns at once."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def fake_sleep():
    return SleepRecorder()


@pytest.fixture
def make_client(fake_sleep):
    """Build an ApiClient wired to a scripted transport."""

    def _make(*responses, **kwargs):
        script = ScriptedTransport(*responses)
        transport = httpx.AsyncClient(transport=httpx.MockTransport(script))
        client = ApiClient(
            kwargs.pop("base_url", BASE_URL),
            transport=transport,
            sleep=fake_sleep,
            **kwargs
        )
        return client, script

    return _make
