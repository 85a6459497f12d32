"""
Custom exception classes.

Represent errors raised while invoking edge functions.
"""

from typing import Any, Dict, Optional


class EdgeCallError(Exception):
    """Base exception class for edge function invocation."""

    pass


class LocalPreconditionError(EdgeCallError):
    """Raised before any network round trip when the call cannot be made."""

    pass


class PayloadSerializationError(LocalPreconditionError):
    """Raised when the payload is not JSON-serializable."""

    def __init__(self, cause: Exception):
        self.cause = cause
        super().__init__(f"Payload is not JSON-serializable: {cause}")


class NoSessionError(LocalPreconditionError):
    """Raised when no valid session is available for an authenticated call."""

    def __init__(self, detail: str = "No valid session for direct HTTPS call"):
        super().__init__(detail)


class TransportError(EdgeCallError):
    """Raised when a transport fails without a usable HTTP status."""

    def __init__(self, detail: str, cause: Optional[Exception] = None):
        self.cause = cause
        super().__init__(detail)


class HttpStatusError(EdgeCallError):
    """Raised when an edge function answers with a non-2xx status."""

    def __init__(self, status_code: int, message: str, details: Any = None):
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class InvocationTimeoutError(EdgeCallError):
    """Raised when the HTTPS fallback is cancelled by its timeout."""

    def __init__(self, timeout_seconds: float):
        self.timeout_seconds = timeout_seconds
        super().__init__(f"Request aborted after {timeout_seconds:g}s timeout")


class ExhaustedRetriesError(EdgeCallError):
    """
    Raised by callers that need an exception once all attempts have failed.

    Wraps the last NormalizedError observed by the invoker.
    """

    def __init__(self, error, attempts: int = 0):
        self.error = error
        self.attempts = attempts
        super().__init__(error.user_message())

    @property
    def status_code(self) -> Optional[int]:
        return self.error.http_status


# ===========================================
# Primary transport (SDK style) errors
# ===========================================


class FunctionsError(EdgeCallError):
    """
    Structured error reported by the primary transport.

    ``context`` mirrors what the SDK attaches to its errors: the response
    ``status`` and the response ``body`` when one was read.
    """

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.status = status
        self.context = context or {}
        super().__init__(message)


class FunctionsHttpError(FunctionsError):
    """Edge function returned a non-2xx status code."""

    pass


class FunctionsRelayError(FunctionsError):
    """Relay in front of the edge function failed to reach it."""

    pass


class FunctionsFetchError(FunctionsError):
    """Request never got a response (DNS, connection reset, ...)."""

    pass
