"""
Shared fixtures: a scripted fake backend behind httpx.MockTransport, a
TestClient wired to it, and in-memory stand-ins for Redis.
"""

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from sparkling_web import cache as cache_module
from sparkling_web import config
from sparkling_web.api_client import BackendClient, get_backend
from sparkling_web.main import app

API_BASE = "http://backend.test/api"

CUSTOMER = {
    "_id": "user-1",
    "firstName": "Dana",
    "lastName": "Reyes",
    "email": "dana@example.com",
    "phone": "5125550100",
    "role": "customer",
}
MOVER = {
    "_id": "mover-user-1",
    "firstName": "Sam",
    "lastName": "Ortiz",
    "email": "sam@sparkle.example",
    "role": "mover",
    "status": "pending",
}
ADMIN = {
    "_id": "admin-1",
    "firstName": "Ada",
    "lastName": "Admin",
    "email": "ada@sparklinghomes.com",
    "role": "admin",
    "isAdmin": True,
}


class FakeBackend:
    """Answers backend calls from a (method, path) table and records every request"""

    def __init__(self):
        self.routes: dict[tuple[str, str], tuple[int, dict]] = {}
        self.calls: list[httpx.Request] = []

    def add(self, method: str, path: str, body: dict, status_code: int = 200) -> None:
        self.routes[(method.upper(), path)] = (status_code, body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        path = request.url.path
        if path.startswith("/api"):
            path = path[len("/api"):]
        status_code, body = self.routes.get(
            (request.method, path), (404, {"status": "error", "message": "Not found"})
        )
        return httpx.Response(status_code, json=body)

    def called(self, method: str, path: str) -> list[httpx.Request]:
        return [
            r for r in self.calls
            if r.method == method.upper() and r.url.path == f"/api{path}"
        ]

    def last_json(self, method: str, path: str) -> dict:
        return json.loads(self.called(method, path)[-1].content)


class FakeRedis:
    def __init__(self):
        self.store: dict[str, str] = {}

    def get(self, key):
        return self.store.get(key)

    def setex(self, key, ttl, value):
        self.store[key] = value

    def delete(self, key):
        self.store.pop(key, None)


@pytest.fixture(autouse=True)
def _test_settings(monkeypatch):
    monkeypatch.setattr(config, "CSRF_ENABLED", False)
    monkeypatch.setattr(config, "RATE_LIMIT_ENABLED", False)


@pytest.fixture(autouse=True)
def fake_redis(monkeypatch):
    redis_stub = FakeRedis()
    monkeypatch.setattr(cache_module.cache, "_get_client", lambda: redis_stub)
    return redis_stub


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def api(backend):
    return BackendClient(base_url=API_BASE, transport=httpx.MockTransport(backend.handler))


@pytest.fixture
def client(api):
    app.dependency_overrides[get_backend] = lambda: api
    test_client = TestClient(app)
    yield test_client
    app.dependency_overrides.clear()


def sign_in(client: TestClient, backend: FakeBackend, user: dict, user_type: str) -> TestClient:
    backend.add("GET", "/auth/me", {"status": "success", "data": {"user": user, "userType": user_type}})
    client.cookies.set(config.AUTH_COOKIE_NAME, "test-token")
    return client


@pytest.fixture
def customer_client(client, backend):
    return sign_in(client, backend, CUSTOMER, "customer")


@pytest.fixture
def mover_client(client, backend):
    return sign_in(client, backend, MOVER, "mover")


@pytest.fixture
def admin_client(client, backend):
    return sign_in(client, backend, ADMIN, "admin")


def set_cookie_headers(response) -> str:
    return " ".join(response.headers.get_list("set-cookie"))
