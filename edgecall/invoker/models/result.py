"""
Invocation result models.

Standardizes the output of the edge function invocation pipeline.
"""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from edgecall.invoker.core.exceptions import ExhaustedRetriesError


class ErrorKind(str, Enum):
    SERIALIZATION = "serialization"
    NO_SESSION = "no_session"
    TRANSPORT = "transport"
    HTTP_STATUS = "http_status"
    ACCEPTED = "accepted"
    TIMEOUT = "timeout"
    INVALID_REQUEST = "invalid_request"
    UNKNOWN = "unknown"


class NormalizedError(BaseModel):
    """
    Single error representation, independent of the transport that failed.

    Immutable once built, so one instance can be handed to several results.
    """

    model_config = ConfigDict(frozen=True)

    kind: ErrorKind
    message: str
    http_status: Optional[int] = None
    raw_details: Any = None
    transport: Optional[str] = Field(
        default=None, description="primary, https or local"
    )

    @property
    def is_local(self) -> bool:
        return self.kind in (
            ErrorKind.SERIALIZATION,
            ErrorKind.NO_SESSION,
            ErrorKind.INVALID_REQUEST,
        )

    def user_message(self) -> str:
        """Message to surface to an end user, preferring the parsed error body."""
        if isinstance(self.raw_details, dict):
            for key in ("details", "error"):
                value = self.raw_details.get(key)
                if value:
                    return value if isinstance(value, str) else str(value)
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"message": self.message}
        if self.http_status is not None:
            data["status"] = self.http_status
        return data


def unknown_error() -> NormalizedError:
    """Placeholder for a failure that captured no error."""
    return NormalizedError(kind=ErrorKind.UNKNOWN, message="Unknown error")


class InvocationResult(BaseModel):
    """
    Unified result of an edge function invocation.

    Exactly one of ``data`` (on success) or ``error`` (on failure) is meaningful.
    """

    success: bool
    data: Any = None
    error: Optional[NormalizedError] = None
    attempts: int = 0

    @classmethod
    def ok(cls, data: Any, attempts: int) -> "InvocationResult":
        return cls(success=True, data=data, attempts=attempts)

    @classmethod
    def failure(cls, error: NormalizedError, attempts: int) -> "InvocationResult":
        return cls(success=False, error=error, attempts=attempts)

    def unwrap(self) -> Any:
        """Return the data, or raise ExhaustedRetriesError for a failed call."""
        if self.success:
            return self.data
        raise ExhaustedRetriesError(self.error or unknown_error(), attempts=self.attempts)

    def to_dict(self) -> Dict[str, Any]:
        """Caller-facing shape: {success, data} or {success, error: {message, status?}}."""
        if self.success:
            return {"success": True, "data": self.data}
        error = self.error or unknown_error()
        return {"success": False, "error": error.to_dict()}
