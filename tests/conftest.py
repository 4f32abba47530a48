"""
Shared fixtures: an in-process fake backend served through httpx.MockTransport.
"""

import inspect
from typing import Callable, Dict, List, Optional, Tuple

import httpx
import pytest

from api_client import ApiClient
from session import SessionStore

BASE_URL = "https://api.test"


class FakeBackend:
    """Routes requests to per-path handlers and records every request"""

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Callable] = {}
        self.requests: List[httpx.Request] = []

    def route(self, method: str, path: str, handler: Callable):
        self.routes[(method.upper(), path)] = handler

    def calls(self, path: str, method: Optional[str] = None) -> List[httpx.Request]:
        return [
            r for r in self.requests
            if r.url.path == path and (method is None or r.method == method.upper())
        ]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"success": False, "message": "Not found"})
        result = handler(request)
        if inspect.isawaitable(result):
            result = await result
        return result


def make_store(access_token: Optional[str] = "A1", refresh_token: Optional[str] = "R1") -> SessionStore:
    """Memory-only store holding the given credentials"""
    store = SessionStore()
    if access_token and refresh_token:
        store.login(
            {
                "user": {"id": 1, "username": "admin", "role": "Admin"},
                "accessToken": access_token,
                "refreshToken": refresh_token,
            }
        )
    elif access_token:
        store.replace(access_token)
    return store


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def store() -> SessionStore:
    return make_store()


@pytest.fixture
def client(backend: FakeBackend, store: SessionStore) -> ApiClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(backend))
    return ApiClient(base_url=BASE_URL, store=store, http_client=http_client)
