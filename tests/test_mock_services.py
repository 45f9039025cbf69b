"""End-to-end flow: bridge against the mock PayU and mock Ecwid services."""

import pytest
from fastapi.testclient import TestClient

from mock_services import mock_ecwid, mock_payu
from payu_bridge.clients import EcwidClient, PayUClient
from payu_bridge.config import get_settings
from payu_bridge.main import app, get_ecwid_client, get_payu_client

ORDER = {
    "id": 1001,
    "items": [
        {"name": "Yoga mat", "price": 89.99, "quantity": 1},
        {"name": "Water bottle", "price": 19.5, "quantity": 2},
    ],
    "total": 128.99,
}


@pytest.fixture
def sandbox(settings):
    """Bridge wired to the in-process mock services, with mock state reset."""
    mock_payu.ISSUED_TOKENS.clear()
    mock_payu.ORDERS.clear()
    mock_ecwid.PAYMENT_STATUSES.clear()

    def use(**overrides):
        configured = settings.model_copy(update={
            "ecwid_api_url": "https://app.ecwid.com/api/v3",
            "ecwid_api_token": mock_ecwid.API_TOKEN,
            **overrides,
        })
        app.dependency_overrides[get_settings] = lambda: configured
        app.dependency_overrides[get_payu_client] = lambda: PayUClient(configured, TestClient(mock_payu.app))
        app.dependency_overrides[get_ecwid_client] = lambda: EcwidClient(configured, TestClient(mock_ecwid.app))
        return TestClient(app)

    yield use
    app.dependency_overrides.clear()


def test_order_round_trip(sandbox):
    bridge = sandbox()

    created = bridge.post("/payu", json={"order": ORDER})

    assert created.status_code == 200
    assert created.json()["redirectUrl"].startswith(mock_payu.REDIRECT_BASE)
    submitted = mock_payu.ORDERS["1001"]["request"]
    assert submitted["totalAmount"] == "12899"
    assert [p["unitPrice"] for p in submitted["products"]] == [8999, 1950]
    assert submitted["notifyUrl"] == "http://testserver/payu/notify"

    notification = {
        "order": {
            "orderId": mock_payu.ORDERS["1001"]["orderId"],
            "extOrderId": submitted["extOrderId"],
            "status": "COMPLETED",
        }
    }
    notified = bridge.post("/payu/notify", json=notification)

    assert notified.status_code == 200
    assert mock_ecwid.PAYMENT_STATUSES == {("1003", "1001"): "PAID"}


def test_rejected_credentials(sandbox):
    bridge = sandbox(payu_client_secret=mock_payu.REJECTED_SECRET)

    response = bridge.post("/payu", json={"order": ORDER})

    assert response.status_code == 500
    assert response.json() == {"error": "Payment initialization failed"}
    assert mock_payu.ORDERS == {}


def test_rejected_order(sandbox):
    bridge = sandbox()

    response = bridge.post("/payu", json={"order": {**ORDER, "id": "reject-7"}})

    assert response.status_code == 400
    assert response.json()["error"]["status"]["statusCode"] == "ERROR_VALUE_INVALID"


def test_notification_for_unknown_order(sandbox):
    bridge = sandbox()

    response = bridge.post("/payu/notify", json={"order": {"extOrderId": "missing-5"}})

    assert response.status_code == 500
    assert mock_ecwid.PAYMENT_STATUSES == {}


def test_notification_with_wrong_ecwid_token(sandbox):
    bridge = sandbox(ecwid_api_token="wrong")

    response = bridge.post("/payu/notify", json={"order": {"extOrderId": "1001"}})

    assert response.status_code == 500
