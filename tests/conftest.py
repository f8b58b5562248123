from __future__ import annotations

from pathlib import Path
import sys

import httpx
import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app.core.cache import TTLCache, get_recipe_cache
from app.core.http_client import TastyClient, tasty_client
from app.main import app


class FakeTasty:
    """Scripted Tasty upstream. Maps path → (status, json) and records calls."""

    def __init__(self) -> None:
        self.routes: dict[str, tuple[int, object]] = {}
        self.requests: list[httpx.Request] = []

    def reply(self, path: str, payload: object, status: int = 200) -> None:
        self.routes[path] = (status, payload)

    def calls(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, payload = self.routes.get(request.url.path, (404, {"message": "no route"}))
        if isinstance(payload, bytes):
            return httpx.Response(status, content=payload)
        return httpx.Response(status, json=payload)

    def client(self, **kwargs) -> TastyClient:
        return TastyClient(
            base_url="https://tasty.test",
            transport=httpx.MockTransport(self.handler),
            **kwargs,
        )


class FakeClock:
    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture(autouse=True)
def api_key(monkeypatch):
    monkeypatch.setenv("RAPIDAPI_KEY", "test-key")
    return "test-key"


@pytest.fixture
def tasty() -> FakeTasty:
    return FakeTasty()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock) -> TTLCache:
    return TTLCache(ttl_s=300, clock=clock)


@pytest.fixture
def client(tasty, cache):
    upstream = tasty.client()
    app.dependency_overrides[tasty_client] = lambda: upstream
    app.dependency_overrides[get_recipe_cache] = lambda: cache
    yield TestClient(app)
    app.dependency_overrides.clear()
