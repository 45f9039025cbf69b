"""
main.py — FastAPI Entry Point for the PayU ⇄ Ecwid Payment Bridge

This module provides the REST API interface between the Ecwid storefront and PayU.
It adapts HTTP requests to the workflow functions and their `Result` back to HTTP responses.

Responsibilities:
    • Accept order-creation requests from Ecwid and answer with a PayU redirect URL
    • Accept PayU payment notifications and mark the Ecwid order as paid
    • Provide system health information
"""

from typing import Any, Iterator

import uvicorn
from fastapi import Depends, FastAPI, Request, Response
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from .clients import EcwidClient, PayUClient
from .config import Settings, get_settings
from .logging_config import setup_logging, get_logger
from .workflow import RequestContext, Result, confirm_payment, create_payment

log = get_logger(__name__)
app = FastAPI(title="PayU Ecwid Payment Bridge")


# Startup Event: Configure Logging
@app.on_event("startup")
def on_startup():
    """
    FastAPI startup event handler.

    Loads the settings once, so missing environment variables fail the start
    instead of the first request, and configures logging from them.
    """
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_file)
    log.info(f"PayU bridge started (PayU: {settings.payu_api_url}, Ecwid store: {settings.ecwid_store_id}).")


# Dependencies: one HTTP client per request
def get_payu_client(settings: Settings = Depends(get_settings)) -> Iterator[PayUClient]:
    client = PayUClient(settings)
    try:
        yield client
    finally:
        client.close()


def get_ecwid_client(settings: Settings = Depends(get_settings)) -> Iterator[EcwidClient]:
    client = EcwidClient(settings)
    try:
        yield client
    finally:
        client.close()


async def read_json(request: Request) -> Any:
    """Decodes the request body as JSON, returning None if it is not valid JSON."""
    try:
        return await request.json()
    except ValueError:
        return None


def request_context(request: Request, settings: Settings) -> RequestContext:
    """
    Derives the origin used for the PayU notify URL and the customer IP.

    `PUBLIC_BASE_URL` wins over the request's own scheme and Host header,
    which are wrong behind a TLS-terminating proxy.
    """
    if settings.public_base_url:
        origin = settings.public_base_url
    else:
        host = request.headers.get("host") or request.url.netloc
        origin = f"{request.url.scheme}://{host}"
    customer_ip = request.client.host if request.client else None
    return RequestContext(origin=origin, customer_ip=customer_ip)


def to_response(result: Result, with_body: bool = True) -> Response:
    """
    Translates a workflow `Result` into an HTTP response.

    Args:
        result (Result): Outcome of a workflow function.
        with_body (bool): If False, only the status code is sent (PayU webhooks).

    Returns:
        Response: JSON response, or a bare status response.
    """
    if result.ok:
        if not with_body:
            return Response(status_code=200)
        return JSONResponse(result.value or {}, status_code=200)

    error = result.error
    if not with_body:
        return Response(status_code=error.status_code)
    return JSONResponse(error.response_body(), status_code=error.status_code)


# API Endpoint: Ecwid → PayU order creation
@app.post("/payu")
async def create_payu_order(
        request: Request,
        settings: Settings = Depends(get_settings),
        payu: PayUClient = Depends(get_payu_client),
):
    """
    Creates a PayU order for the Ecwid order in the request body.

    Returns:
        200 {"redirectUrl": str}: Ecwid redirects the customer there.
        400 {"error": str | object}: Missing order data or PayU rejection.
        500 {"error": str}: Authorization failure or unexpected error.
    """
    body = await read_json(request)
    context = request_context(request, settings)
    result = await run_in_threadpool(create_payment, body, context, payu, settings)
    return to_response(result)


# Webhook Endpoint: PayU → Ecwid payment confirmation
@app.post("/payu/notify")
async def payu_notify(
        request: Request,
        ecwid: EcwidClient = Depends(get_ecwid_client),
):
    """
    Receives a PayU notification and marks the referenced Ecwid order as PAID.

    Responds with a bare status: 200 on success, 400 if the notification
    has no `order.extOrderId`, 500 if Ecwid could not be updated.
    """
    body = await read_json(request)
    result = await run_in_threadpool(confirm_payment, body, ecwid)
    return to_response(result, with_body=False)


# Health Check Endpoint
@app.get("/health")
def health_check():
    """
    Simple health check endpoint for container orchestrators.

    Returns:
        dict: A basic JSON object indicating service availability.
    """
    return {"status": "ok"}


def run():
    """Starts the bridge with uvicorn on the configured port."""
    settings = get_settings()
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
