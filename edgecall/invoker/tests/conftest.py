from typing import List, Optional
from unittest.mock import AsyncMock

import pytest

from edgecall.invoker.models.session import Session


class FakeScheduler:
    """Records sleeps and timeouts instead of waiting."""

    def __init__(self):
        self.sleeps: List[float] = []
        self.timeouts: List[float] = []

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)

    async def with_timeout(self, awaitable, seconds: float):
        self.timeouts.append(seconds)
        return await awaitable


class FakeSessionAccessor:
    def __init__(self, token: Optional[str] = "user-token"):
        self.token = token
        self.reads = 0

    async def get_session(self) -> Optional[Session]:
        self.reads += 1
        if self.token is None:
            return None
        return Session(access_token=self.token)


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def session_accessor():
    return FakeSessionAccessor()


@pytest.fixture
def primary():
    transport = AsyncMock()
    transport.call = AsyncMock()
    return transport


@pytest.fixture
def fallback():
    transport = AsyncMock()
    transport.call = AsyncMock()
    return transport
