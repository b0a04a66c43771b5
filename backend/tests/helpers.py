"""
Shared fixtures: a fresh in-memory store per test and fake dictionary APIs.
"""

import httpx
from fastapi.testclient import TestClient

from dialectbase.auth.service import AuthService
from dialectbase.config import get_settings
from dialectbase.dependencies import get_http_client, get_user_store
from dialectbase.main import create_app
from dialectbase.users.store import UserStore

PRIMARY = "https://wiktionary.test/definition"
SECONDARY = "https://freedict.test/entries/en"


def down_transport() -> httpx.MockTransport:
    """Every upstream call fails as if the network were unreachable."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    return httpx.MockTransport(handler)


def recording_transport(responses: dict, calls: list) -> httpx.MockTransport:
    """Answer by host with ``responses[host]`` (status, json); 404 otherwise."""

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(str(request.url))
        status, body = responses.get(request.url.host, (404, {"title": "Not found"}))
        if isinstance(body, Exception):
            raise body
        return httpx.Response(status, json=body)

    return httpx.MockTransport(handler)


def make_store() -> UserStore:
    return UserStore("sqlite://")


def make_auth(store: UserStore) -> AuthService:
    return AuthService(store, secret="test-secret", bcrypt_rounds=4)


def make_client(store: UserStore, transport: httpx.MockTransport | None = None) -> TestClient:
    settings = get_settings()
    settings.primary_api_url = PRIMARY
    settings.secondary_api_url = SECONDARY

    app = create_app()
    http = httpx.AsyncClient(transport=transport or down_transport())
    app.dependency_overrides[get_user_store] = lambda: store
    app.dependency_overrides[get_http_client] = lambda: http
    return TestClient(app, raise_server_exceptions=False)
