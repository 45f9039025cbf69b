"""
models.py — Data Models for the Payment Bridge

This module defines the data structures exchanged with Ecwid and PayU.
It uses Pydantic models to validate inbound payloads at the boundary and to
build outbound payloads with the exact field names PayU expects.

Models:
    - OrderItem / EcwidOrder: Order received from the Ecwid storefront.
    - PayUProduct / PayUOrderRequest: Order payload sent to PayU.
    - NotificationOrder / PayUNotification: Webhook payload sent by PayU.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


def to_minor_units(amount) -> int:
    """
    Converts a decimal currency amount to integer minor units (e.g. grosz).

    The amount is scaled by 100 and rounded half away from zero, using
    decimal arithmetic so that float inputs are taken at their printed value:
    19.99 -> 1999, 10.005 -> 1001, 10.004 -> 1000.

    Args:
        amount (Decimal | float | int | str): Amount in major currency units.

    Returns:
        int: Amount in minor currency units.
    """
    value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    return int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class OrderItem(BaseModel):
    """
    A single line item of an Ecwid order.

    Attributes:
        name (str): Product name shown on the PayU checkout page.
        price (Decimal): Unit price in major currency units.
        quantity (int): Number of units ordered.
    """
    name: str
    price: Decimal
    quantity: int


class EcwidOrder(BaseModel):
    """
    Order as forwarded by the Ecwid storefront.

    Attributes:
        id (int | str): Ecwid order identifier. Its string form is the
            external order id used to correlate the PayU notification.
        items (List[OrderItem]): Ordered products.
        total (Decimal): Order total in major currency units.
        currency (Optional[str]): ISO 4217 code; the configured default applies when missing.
    """
    id: Union[int, str]
    items: List[OrderItem]
    total: Decimal
    currency: Optional[str] = None

    model_config = ConfigDict(extra="ignore")

    @property
    def ext_order_id(self) -> str:
        return str(self.id)


class PayUProduct(BaseModel):
    """
    A product line of a PayU order.

    Attributes:
        name (str): Product name.
        unitPrice (int): Unit price in minor currency units.
        quantity (int): Number of units.
    """
    name: str
    unitPrice: int
    quantity: int


class PayUOrderRequest(BaseModel):
    """
    Order payload for `POST /api/v2_1/orders`.

    Field names follow the PayU REST API. `totalAmount` is sent as a string of
    minor units, `unitPrice` as an integer, which is what PayU accepts.
    """
    notifyUrl: str
    customerIp: str
    merchantPosId: str
    description: str
    extOrderId: str
    currencyCode: str
    totalAmount: str
    products: List[PayUProduct]


class NotificationOrder(BaseModel):
    """
    The `order` object of a PayU notification. Only `extOrderId` is needed;
    PayU sends many more fields (orderId, status, buyer, ...), which are kept
    as extras and never validated.
    """
    extOrderId: Optional[Union[str, int]] = None

    model_config = ConfigDict(extra="allow")


class PayUNotification(BaseModel):
    """
    Webhook body posted by PayU to the notify URL.

    Attributes:
        order (Optional[NotificationOrder]): The order the notification is about.
    """
    order: Optional[NotificationOrder] = None

    model_config = ConfigDict(extra="allow")
