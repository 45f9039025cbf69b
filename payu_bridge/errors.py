"""
errors.py — Error Taxonomy of the Payment Bridge

Every failure the bridge knows how to report is a subclass of `BridgeError`.
Each error carries the HTTP status it maps to and decides which part of itself
may be shown to the caller. The full diagnostic text stays in `str(error)`
and is only written to the server log.

Errors:
    - AuthError: PayU credential exchange failed.
    - ValidationError: A required inbound field is missing or malformed.
    - UpstreamError: PayU or Ecwid returned a non-success outcome.
    - InternalError: Any unexpected exception.
"""

from typing import Any, Optional

GENERIC_FAILURE_MESSAGE = "Payment initialization failed"


class BridgeError(Exception):
    """
    Base class for all errors surfaced by the bridge.

    Attributes:
        status_code (int): HTTP status returned to the caller.
        public_message (str): Message safe to expose to the caller.
    """
    status_code = 500
    public_message = GENERIC_FAILURE_MESSAGE

    def response_body(self) -> dict:
        """Returns the JSON body shown to the caller for this error."""
        return {"error": self.public_message}


class AuthError(BridgeError):
    """
    PayU rejected the client credentials or the OAuth call failed.

    The message embeds the upstream status code and body for diagnostics,
    but the caller only ever sees the generic failure message.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.upstream_status = status_code
        self.upstream_body = body


class ValidationError(BridgeError):
    """A required field of the inbound request is missing or invalid."""
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.public_message = message


class UpstreamError(BridgeError):
    """
    PayU or Ecwid answered with a non-success outcome.

    Args:
        message (str): Diagnostic message for the log.
        status_code (int): HTTP status to return to our caller.
        payload (Any): Upstream error object. When given, it is echoed to the
            caller (the storefront is a trusted internal system).
        body (str): Raw upstream response text, kept for the log.
    """

    def __init__(self, message: str, status_code: int = 500, payload: Any = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload
        self.upstream_body = body

    def response_body(self) -> dict:
        if self.payload is not None:
            return {"error": self.payload}
        return super().response_body()


class InternalError(BridgeError):
    """Wraps an unexpected exception. Its text is never shown to the caller."""
