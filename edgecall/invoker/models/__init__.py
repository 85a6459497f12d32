"""
Data model definitions package.

Aggregates Pydantic models for use in other modules.
"""

from .request import InvocationOptions, InvocationRequest
from .result import ErrorKind, InvocationResult, NormalizedError
from .session import Session

__all__ = [
    "InvocationOptions",
    "InvocationRequest",
    "ErrorKind",
    "InvocationResult",
    "NormalizedError",
    "Session",
]
