"""
workflow.py — Core Orchestration Logic of the Payment Bridge

This module contains the request handling logic, independent of the HTTP layer.
Each handler returns a `Result` instead of raising, so the translation of
errors into HTTP responses lives in a single place (`main.to_response`).

Workflow Overview:
    Order creation (Ecwid → PayU):
        1. Acquire a PayU OAuth token
        2. Validate the Ecwid order
        3. Build the PayU order payload (amounts in minor units)
        4. Submit it and hand the PayU redirect URI back to Ecwid

    Payment notification (PayU → Ecwid):
        1. Extract the external order id from the PayU webhook
        2. Mark the Ecwid order as PAID
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import pydantic

from .clients import EcwidClient, PayUClient
from .config import Settings
from .errors import AuthError, BridgeError, InternalError, UpstreamError, ValidationError
from .models import EcwidOrder, PayUNotification, PayUOrderRequest, PayUProduct, to_minor_units

log = logging.getLogger(__name__)

NOTIFY_PATH = "/payu/notify"
DEFAULT_CUSTOMER_IP = "127.0.0.1"


@dataclass(frozen=True)
class Result:
    """
    Outcome of a handler: either a success payload or a `BridgeError`.

    Attributes:
        value (Optional[dict]): JSON payload for the caller on success.
        error (Optional[BridgeError]): The failure, if any.
    """
    value: Optional[dict] = None
    error: Optional[BridgeError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Optional[dict] = None) -> "Result":
        return cls(value=value)

    @classmethod
    def failure(cls, error: BridgeError) -> "Result":
        return cls(error=error)


@dataclass(frozen=True)
class RequestContext:
    """
    Facts about the inbound HTTP request that end up in the PayU order.

    Attributes:
        origin (str): Externally reachable origin of this service, e.g. "https://bridge.example.com".
        customer_ip (Optional[str]): Address of the calling client.
    """
    origin: str
    customer_ip: Optional[str] = None

    @property
    def notify_url(self) -> str:
        return f"{self.origin.rstrip('/')}{NOTIFY_PATH}"


def build_payu_order(order: EcwidOrder, context: RequestContext, settings: Settings) -> PayUOrderRequest:
    """
    Translates an Ecwid order into PayU's order schema.

    Args:
        order (EcwidOrder): Validated storefront order.
        context (RequestContext): Origin and client address of the inbound request.
        settings (Settings): Provides the merchant POS id and default currency.

    Returns:
        PayUOrderRequest: Payload ready to be submitted to PayU.
    """
    products = [
        PayUProduct(
            name=item.name,
            unitPrice=to_minor_units(item.price),
            quantity=item.quantity,
        )
        for item in order.items
    ]
    return PayUOrderRequest(
        notifyUrl=context.notify_url,
        customerIp=context.customer_ip or DEFAULT_CUSTOMER_IP,
        merchantPosId=settings.payu_pos_id,
        description=f"Order #{order.id}",
        extOrderId=order.ext_order_id,
        currencyCode=order.currency or settings.default_currency,
        totalAmount=str(to_minor_units(order.total)),
        products=products,
    )


def create_payment(body: Any, context: RequestContext, payu: PayUClient, settings: Settings) -> Result:
    """
    Creates a PayU order for an Ecwid order and returns the checkout redirect URL.

    The token is acquired before the order is looked at, so a PayU outage is
    reported as a server error even for an empty request.

    Args:
        body (Any): Decoded JSON request body, expected to be `{"order": {...}}`.
        context (RequestContext): Origin and client address of the request.
        payu (PayUClient): Client for the PayU API.
        settings (Settings): Bridge configuration.

    Returns:
        Result: `{"redirectUrl": ...}` on success, otherwise one of
            AuthError (500), ValidationError (400), UpstreamError (400) or InternalError (500).
    """
    log_prefix = "[Order: ?]"
    try:
        try:
            token = payu.get_access_token()
        except AuthError as e:
            log.error(f"PayU authorization failed: {e}")
            return Result.failure(e)

        raw_order = body.get("order") if isinstance(body, dict) else None
        if not raw_order:
            log.warning("Request without order data received.")
            return Result.failure(ValidationError("No order data received from Ecwid"))

        try:
            order = EcwidOrder.model_validate(raw_order)
        except pydantic.ValidationError as e:
            log.warning(f"Invalid order data received: {e}")
            return Result.failure(ValidationError("Invalid order data received from Ecwid"))

        log_prefix = f"[Order: {order.ext_order_id}]"
        payload = build_payu_order(order, context, settings)
        log.info(f"{log_prefix} Creating PayU order ({payload.totalAmount} {payload.currencyCode}).")

        result = payu.create_order(payload, token)

        status = result.get("status") if isinstance(result, dict) else None
        if isinstance(status, dict) and status.get("statusCode") == "SUCCESS":
            log.info(f"{log_prefix} PayU order created: {result}")
            return Result.success({"redirectUrl": result.get("redirectUri")})

        log.error(f"{log_prefix} PayU order creation failed: {result}")
        return Result.failure(UpstreamError("PayU order creation failed", status_code=400, payload=result))

    except Exception as e:
        log.error(f"{log_prefix} Error creating PayU order: {e}", exc_info=True)
        return Result.failure(InternalError(str(e)))


def extract_ext_order_id(body: Any) -> Optional[str]:
    """
    Returns `order.extOrderId` of a PayU notification, or None when the body
    does not have that shape.
    """
    if not isinstance(body, dict):
        return None
    try:
        notification = PayUNotification.model_validate(body)
    except pydantic.ValidationError:
        return None
    if notification.order is None or notification.order.extOrderId in (None, ""):
        return None
    return str(notification.order.extOrderId)


def confirm_payment(body: Any, ecwid: EcwidClient) -> Result:
    """
    Propagates a PayU payment notification to Ecwid as payment status PAID.

    The notification is not authenticated; anyone who can reach the endpoint
    can mark an order as paid.

    Args:
        body (Any): Decoded JSON webhook body, None if it was not valid JSON.
        ecwid (EcwidClient): Client for the Ecwid API.

    Returns:
        Result: Empty success, or ValidationError (400), UpstreamError (500), InternalError (500).
    """
    try:
        log.info(f"PayU notification received: {body}")

        order_id = extract_ext_order_id(body)
        if not order_id:
            log.error("No order ID found in PayU notification")
            return Result.failure(ValidationError("No order ID found in PayU notification"))

        log_prefix = f"[Order: {order_id}]"
        try:
            ecwid.set_payment_status(order_id, "PAID")
        except UpstreamError as e:
            log.error(f"{log_prefix} Failed to update Ecwid order: {e.upstream_body}")
            return Result.failure(e)

        log.info(f"{log_prefix} Marked as PAID in Ecwid.")
        return Result.success()

    except Exception as e:
        log.error(f"Error processing PayU notification: {e}", exc_info=True)
        return Result.failure(InternalError(str(e)))
