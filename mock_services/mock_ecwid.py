"""
mock_ecwid.py — Mock Implementation of the Ecwid REST API

This module simulates the part of the Ecwid API the bridge uses: updating the
payment status of an order. Updated statuses are kept in memory so tests can
check which orders were marked as paid.

Simulation Scenarios:
    • Successful payment status update
    • Wrong API token → HTTP 403
    • Order id starting with "missing-" → HTTP 404

Endpoints:
    PUT /api/v3/{store_id}/orders/{order_id}/payment_status

Port:
    Default: 8002 (HTTP)
"""

import logging
import os

from fastapi import FastAPI, Header
from fastapi.responses import JSONResponse
from pydantic import BaseModel

app = FastAPI(title="Mock Ecwid")
logging.basicConfig(level=logging.INFO)

API_TOKEN = os.environ.get("MOCK_ECWID_API_TOKEN", "secret_test_token")

PAYMENT_STATUSES = {}


class PaymentStatusUpdate(BaseModel):
    paymentStatus: str


@app.put("/api/v3/{store_id}/orders/{order_id}/payment_status")
def update_payment_status(
        store_id: str,
        order_id: str,
        update: PaymentStatusUpdate,
        authorization: str = Header(""),
):
    """
    Stores the new payment status for `(store_id, order_id)`.

    Returns:
        dict: `{"updateCount": 1}` on success.
        403: If the bearer token does not match `MOCK_ECWID_API_TOKEN`.
        404: If the order id starts with "missing-".
    """
    if authorization != f"Bearer {API_TOKEN}":
        logging.warning(f"[Ecwid] Invalid token for store {store_id}.")
        return JSONResponse({"errorMessage": "Invalid token", "errorCode": "INVALID_TOKEN"}, status_code=403)

    if order_id.startswith("missing-"):
        logging.warning(f"[Ecwid] Order {order_id} not found.")
        return JSONResponse({"errorMessage": f"Order #{order_id} not found"}, status_code=404)

    PAYMENT_STATUSES[(store_id, order_id)] = update.paymentStatus
    logging.info(f"[Ecwid] Order {order_id} in store {store_id} set to {update.paymentStatus}.")
    return {"updateCount": 1}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8002)
