"""
Error normalization.

Every catch site in the invoker turns whatever it caught into a NormalizedError
right away; nothing downstream inspects raw exceptions.
"""

import json
import re
from typing import Any, Optional, Tuple

from edgecall.invoker.core.exceptions import (
    FunctionsError,
    HttpStatusError,
    InvocationTimeoutError,
    NoSessionError,
    PayloadSerializationError,
    TransportError,
)
from edgecall.invoker.models.result import ErrorKind, NormalizedError

STATUS_CODE_PATTERN = re.compile(r"status code (\d+)", re.IGNORECASE)
ERROR_BODY_FIELDS = ("details", "error", "message")

HTTP_ACCEPTED = 202
ACCEPTED_MESSAGE = (
    "Edge Function accepted the request for asynchronous processing (HTTP 202)"
)


def encode_payload(payload: Any) -> bytes:
    """Serialize the payload once, before any network attempt."""
    try:
        return json.dumps(payload, allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise PayloadSerializationError(e) from e


def status_from_message(message: Optional[str]) -> Optional[int]:
    """Extract N from messages like 'returned a non-2xx status code N'."""
    if not message:
        return None
    match = STATUS_CODE_PATTERN.search(message)
    if match:
        return int(match.group(1))
    return None


def _coerce_status(value: Any) -> Optional[int]:
    """Accept ints and digit strings only; anything else counts as unknown."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def parse_error_body(status_code: int, text: str) -> Tuple[str, Any]:
    """
    Pick the error message out of a non-2xx response body.

    JSON bodies are searched for ``details``, ``error`` then ``message``.
    Anything else falls back to the raw text, or ``HTTP <status>`` when empty.

    Returns:
        (message, parsed body or None)
    """
    fallback = f"HTTP {status_code}"
    try:
        parsed = json.loads(text)
    except ValueError:
        return (text or fallback), None

    if isinstance(parsed, dict):
        for field in ERROR_BODY_FIELDS:
            value = parsed.get(field)
            if value:
                return (value if isinstance(value, str) else json.dumps(value)), parsed
    return fallback, parsed


def _status_error(
    status: int, message: str, raw_details: Any, transport: Optional[str]
) -> NormalizedError:
    if status == HTTP_ACCEPTED:
        return NormalizedError(
            kind=ErrorKind.ACCEPTED,
            message=ACCEPTED_MESSAGE,
            http_status=status,
            raw_details=raw_details,
            transport=transport,
        )
    return NormalizedError(
        kind=ErrorKind.HTTP_STATUS,
        message=message,
        http_status=status,
        raw_details=raw_details,
        transport=transport,
    )


def from_functions_error(error: FunctionsError, transport: str = "primary") -> NormalizedError:
    """
    Normalize a structured error from the primary transport.

    Status lookup order: ``context['status']``, ``status``, then the message.
    Values that are not a number are skipped.
    """
    status = _coerce_status(error.context.get("status"))
    if status is None:
        status = _coerce_status(error.status)
    if status is None:
        status = status_from_message(str(error))

    message = str(error)
    raw_details = None
    body = error.context.get("body")
    if isinstance(body, str) and body:
        try:
            body = json.loads(body)
        except ValueError:
            pass
    if isinstance(body, dict):
        raw_details = body
        for field in ERROR_BODY_FIELDS:
            value = body.get(field)
            if value:
                message = value if isinstance(value, str) else json.dumps(value)
                break
    elif body:
        # Plain-text body is kept as detail; the SDK message stays.
        raw_details = body

    if status is None:
        return NormalizedError(
            kind=ErrorKind.TRANSPORT,
            message=message,
            raw_details=raw_details,
            transport=transport,
        )
    return _status_error(status, message, raw_details, transport)


def normalize_exception(exc: BaseException, transport: Optional[str] = None) -> NormalizedError:
    """Convert any exception caught by the invoker into a NormalizedError."""
    if isinstance(exc, PayloadSerializationError):
        return NormalizedError(kind=ErrorKind.SERIALIZATION, message=str(exc), transport="local")
    if isinstance(exc, NoSessionError):
        return NormalizedError(kind=ErrorKind.NO_SESSION, message=str(exc), transport="local")
    if isinstance(exc, InvocationTimeoutError):
        return NormalizedError(kind=ErrorKind.TIMEOUT, message=str(exc), transport=transport)
    if isinstance(exc, HttpStatusError):
        return _status_error(exc.status_code, str(exc), exc.details, transport)
    if isinstance(exc, FunctionsError):
        return from_functions_error(exc, transport=transport or "primary")

    message = str(exc) or type(exc).__name__
    status = status_from_message(message)
    if status is not None:
        return _status_error(status, message, None, transport)
    if isinstance(exc, TransportError):
        return NormalizedError(kind=ErrorKind.TRANSPORT, message=message, transport=transport)
    return NormalizedError(
        kind=ErrorKind.TRANSPORT,
        message=message,
        raw_details={"error_type": type(exc).__name__},
        transport=transport,
    )
