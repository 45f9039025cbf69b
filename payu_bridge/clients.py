"""
This module provides communication clients for the external systems used by the bridge:
- PayU (OAuth token endpoint and REST order API)
- Ecwid (REST order API)
Each class encapsulates its endpoint URLs, authorization headers and error mapping.
Both accept an optional pre-built `httpx.Client` so callers can supply their own transport.
"""

import logging
from typing import Optional
from urllib.parse import quote

import httpx

from .config import Settings
from .errors import AuthError, UpstreamError
from .models import PayUOrderRequest

log = logging.getLogger(__name__)


def build_http_client(settings: Settings) -> httpx.Client:
    """
    Creates the HTTP client used for outbound calls.

    Redirects are not followed: PayU answers order creation with a 302 whose
    JSON body carries the redirect URI meant for the customer, not for us.
    """
    timeout_config = httpx.Timeout(settings.http_timeout_seconds)
    return httpx.Client(timeout=timeout_config, follow_redirects=False)


# --- PayU Client (REST) ---
class PayUClient:
    """
    Client for the PayU REST API.
    Handles the OAuth client-credentials exchange and order creation.
    """
    AUTHORIZE_PATH = "/pl/standard/user/oauth/authorize"
    ORDERS_PATH = "/api/v2_1/orders"

    def __init__(self, settings: Settings, client: Optional[httpx.Client] = None):
        """
        Args:
            settings (Settings): Bridge configuration with PayU credentials.
            client (Optional[httpx.Client]): HTTP client to use. A new one with the
                configured timeout is created when omitted.
        """
        self.settings = settings
        self.base_url = settings.payu_api_url.rstrip("/")
        self.client = client or build_http_client(settings)

    def close(self):
        self.client.close()

    def get_access_token(self) -> str:
        """
        Obtains a fresh OAuth bearer token from PayU.

        The token is not cached; every order creation acquires its own.

        Returns:
            str: The opaque access token.
        Raises:
            AuthError: If the credentials are empty, PayU answers with a
                non-success status, or the response carries no token.
            httpx.HTTPError: If PayU cannot be reached.
        """
        if not self.settings.payu_client_id or not self.settings.payu_client_secret:
            raise AuthError("PayU Auth Failed: client credentials are not configured")

        response = self.client.post(
            f"{self.base_url}{self.AUTHORIZE_PATH}",
            data={
                "grant_type": "client_credentials",
                "client_id": self.settings.payu_client_id,
                "client_secret": self.settings.payu_client_secret,
            },
        )
        if not response.is_success:
            raise AuthError(
                f"PayU Auth Failed: {response.status_code} {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        token = response.json().get("access_token")
        if not token:
            raise AuthError(
                f"PayU Auth Failed: no access_token in response {response.text}",
                status_code=response.status_code,
                body=response.text,
            )
        return token

    def create_order(self, payload: PayUOrderRequest, token: str) -> dict:
        """
        Submits an order to PayU.

        PayU reports the outcome in `status.statusCode` of the JSON body, on
        success together with a 302 status, so the body is returned as-is
        whatever the HTTP status was. Interpreting it is up to the caller.

        Args:
            payload (PayUOrderRequest): The order in PayU's schema.
            token (str): Bearer token from `get_access_token()`.
        Returns:
            dict: Decoded PayU response.
        Raises:
            httpx.HTTPError: If PayU cannot be reached.
            ValueError: If the response body is not JSON.
        """
        response = self.client.post(
            f"{self.base_url}{self.ORDERS_PATH}",
            json=payload.model_dump(),
            headers={"Authorization": f"Bearer {token}"},
        )
        log.debug(f"[Order: {payload.extOrderId}] PayU answered HTTP {response.status_code}")
        return response.json()


# --- Ecwid Client (REST) ---
class EcwidClient:
    """
    Client for the Ecwid REST API.
    Updates the payment status of storefront orders.
    """

    def __init__(self, settings: Settings, client: Optional[httpx.Client] = None):
        self.settings = settings
        self.base_url = settings.ecwid_api_url.rstrip("/")
        self.client = client or build_http_client(settings)

    def close(self):
        self.client.close()

    def payment_status_url(self, order_id: str) -> str:
        return (
            f"{self.base_url}/{self.settings.ecwid_store_id}"
            f"/orders/{quote(order_id, safe='')}/payment_status"
        )

    def set_payment_status(self, order_id: str, payment_status: str = "PAID") -> dict:
        """
        Sets the payment status of an Ecwid order.

        Args:
            order_id (str): Ecwid order id (the PayU `extOrderId`).
            payment_status (str): New Ecwid payment status, "PAID" by default.
        Returns:
            dict: Decoded Ecwid response, empty if it carried no JSON.
        Raises:
            UpstreamError: If Ecwid answers with a non-success status.
            httpx.HTTPError: If Ecwid cannot be reached.
        """
        response = self.client.put(
            self.payment_status_url(order_id),
            json={"paymentStatus": payment_status},
            headers={"Authorization": f"Bearer {self.settings.ecwid_api_token}"},
        )
        if not response.is_success:
            raise UpstreamError(
                f"Failed to update Ecwid order {order_id}: HTTP {response.status_code}",
                status_code=500,
                body=response.text,
            )
        try:
            return response.json()
        except ValueError:
            return {}
