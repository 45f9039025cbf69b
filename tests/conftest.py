"""Pytest fixtures: settings, scripted upstream APIs and a bridge test client."""

import httpx
import pytest
from fastapi.testclient import TestClient

from payu_bridge.clients import EcwidClient, PayUClient
from payu_bridge.config import Settings, get_settings
from payu_bridge.main import app, get_ecwid_client, get_payu_client

PAYU_URL = "https://payu.test"
ECWID_URL = "https://ecwid.test/api/v3"


class FakeUpstream:
    """
    Scripted HTTP upstream built on `httpx.MockTransport`.

    Routes map `(method, path)` to a status code and JSON (or text) body.
    Every request is recorded, so tests can assert what was sent and how often.
    """

    def __init__(self):
        self.routes = {}
        self.requests = []

    def on(self, method, path, status_code=200, json=None, text=None):
        self.routes[(method, path)] = (status_code, json, text)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"error": f"no route for {request.method} {request.url.path}"})
        status_code, json, text = route
        if text is not None:
            return httpx.Response(status_code, text=text)
        return httpx.Response(status_code, json=json)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        payu_client_id="300746",
        payu_client_secret="client-secret",
        payu_pos_id="300746",
        payu_api_url=PAYU_URL,
        ecwid_store_id="1003",
        ecwid_api_token="secret_test_token",
        ecwid_api_url=ECWID_URL,
    )


@pytest.fixture
def payu_api() -> FakeUpstream:
    upstream = FakeUpstream()
    upstream.on("POST", "/pl/standard/user/oauth/authorize", json={"access_token": "tok-123", "expires_in": 43199})
    return upstream


@pytest.fixture
def ecwid_api() -> FakeUpstream:
    upstream = FakeUpstream()
    upstream.on("PUT", "/api/v3/1003/orders/123/payment_status", json={"updateCount": 1})
    return upstream


@pytest.fixture
def client(settings, payu_api, ecwid_api):
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_payu_client] = lambda: PayUClient(settings, payu_api.client())
    app.dependency_overrides[get_ecwid_client] = lambda: EcwidClient(settings, ecwid_api.client())
    yield TestClient(app)
    app.dependency_overrides.clear()
