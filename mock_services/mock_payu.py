"""
mock_payu.py — Mock Implementation of the PayU REST API

This module provides a simulated PayU sandbox for local development and tests.
It exposes a small FastAPI application that mimics the two PayU endpoints the bridge calls.

Simulation Scenarios:
    • Successful OAuth token issue, rejected credentials (HTTP 401)
    • Successful order creation with a redirect URI
    • Rejected order (extOrderId starting with "reject-") → ERROR_VALUE_INVALID
    • Unknown bearer token → HTTP 401

Endpoints:
    POST /pl/standard/user/oauth/authorize — Issues access tokens.
    POST /api/v2_1/orders — Creates orders.

Port:
    Default: 8001 (HTTP)
"""

import logging
import uuid
from typing import List
from urllib.parse import parse_qs

from fastapi import FastAPI, Header, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

app = FastAPI(title="Mock PayU")
logging.basicConfig(level=logging.INFO)

REJECTED_SECRET = "bad-secret"
REDIRECT_BASE = "https://merch-prod.snd.payu.com/pay/"

ISSUED_TOKENS = set()
ORDERS = {}


class Product(BaseModel):
    name: str
    unitPrice: int
    quantity: int


class OrderCreateRequest(BaseModel):
    """
    Order payload as accepted by `POST /api/v2_1/orders`.
    """
    notifyUrl: str
    customerIp: str
    merchantPosId: str
    description: str
    extOrderId: str
    currencyCode: str
    totalAmount: str
    products: List[Product]


@app.post("/pl/standard/user/oauth/authorize")
async def authorize(request: Request):
    """
    Issues a client-credentials access token.

    A `client_secret` equal to "bad-secret" is rejected with HTTP 401.
    """
    form = {key: values[0] for key, values in parse_qs((await request.body()).decode()).items()}
    if form.get("grant_type") != "client_credentials" or not form.get("client_id"):
        return JSONResponse(
            {"error": "unsupported_grant_type", "error_description": "Unsupported grant type"},
            status_code=400,
        )
    if form.get("client_secret") == REJECTED_SECRET:
        logging.warning(f"[PayU] Rejected credentials for client {form['client_id']}.")
        return JSONResponse(
            {"error": "invalid_client", "error_description": "Bad client credentials"},
            status_code=401,
        )

    token = str(uuid.uuid4())
    ISSUED_TOKENS.add(token)
    logging.info(f"[PayU] Token issued for client {form['client_id']}.")
    return {
        "access_token": token,
        "token_type": "bearer",
        "expires_in": 43199,
        "grant_type": "client_credentials",
    }


@app.post("/api/v2_1/orders")
def create_order(order: OrderCreateRequest, authorization: str = Header("")):
    """
    Creates an order and returns the customer redirect URI.

    Returns:
        dict: PayU order response with `status.statusCode` "SUCCESS",
            `redirectUri`, `orderId` and `extOrderId`.
        401: If the bearer token was not issued by this mock.
        400: If `extOrderId` starts with "reject-".
    """
    token = authorization.removeprefix("Bearer ").strip()
    if token not in ISSUED_TOKENS:
        return JSONResponse(
            {"status": {"statusCode": "UNAUTHORIZED", "code": "UNAUTHORIZED", "statusDesc": "Invalid token"}},
            status_code=401,
        )

    if order.extOrderId.startswith("reject-"):
        logging.warning(f"[PayU] Order {order.extOrderId} rejected.")
        return JSONResponse(
            {
                "status": {
                    "statusCode": "ERROR_VALUE_INVALID",
                    "code": "8071",
                    "codeLiteral": "INVALID_ORDER",
                    "statusDesc": "Invalid order",
                }
            },
            status_code=400,
        )

    payu_order_id = uuid.uuid4().hex[:20].upper()
    ORDERS[order.extOrderId] = {"orderId": payu_order_id, "request": order.model_dump()}
    logging.info(f"[PayU] Order {order.extOrderId} created as {payu_order_id}.")
    return {
        "status": {"statusCode": "SUCCESS"},
        "redirectUri": f"{REDIRECT_BASE}?orderId={payu_order_id}",
        "orderId": payu_order_id,
        "extOrderId": order.extOrderId,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8001)
