"""Shared fakes for Newsdesk tests."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from newsdesk.client import NewsApiClient
from newsdesk.core.storage import MemoryStorage
from newsdesk.fetchers.news import NewsFetcher


class FakeResponse:
    def __init__(self, status: int, body: Any):
        self.status = status
        self._body = body
        self.json_called = False

    async def json(self) -> Any:
        self.json_called = True
        return self._body


class _ResponseContext:
    def __init__(self, session: "FakeSession"):
        self.session = session

    async def __aenter__(self) -> FakeResponse:
        if self.session.delay:
            await asyncio.sleep(self.session.delay)
        if self.session.error is not None:
            raise self.session.error
        return self.session.response

    async def __aexit__(self, *exc_info) -> bool:
        return False


class FakeSession:
    """Stands in for aiohttp.ClientSession.post."""

    def __init__(self, status: int = 200, body: Any = None, error: Exception | None = None, delay: float = 0):
        self.response = FakeResponse(status, body if body is not None else {"articles": []})
        self.error = error
        self.delay = delay
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    def post(self, url: str, json: Any = None, headers: Any = None) -> _ResponseContext:
        self.calls.append({"url": url, "json": json, "headers": headers})
        return _ResponseContext(self)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def client(storage: MemoryStorage, session: FakeSession) -> NewsApiClient:
    fetcher = NewsFetcher(base_url="https://news.example.com/api", session=session, timeout=5)
    return NewsApiClient(fetcher, storage)
