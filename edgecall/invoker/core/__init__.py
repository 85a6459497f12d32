"""
Core logic package.

Provides the exception taxonomy, error normalization and timer capabilities.
"""

from .exceptions import (
    EdgeCallError,
    ExhaustedRetriesError,
    HttpStatusError,
    InvocationTimeoutError,
    LocalPreconditionError,
    NoSessionError,
    PayloadSerializationError,
    TransportError,
)
from .scheduler import AsyncioScheduler, Scheduler

__all__ = [
    "EdgeCallError",
    "ExhaustedRetriesError",
    "HttpStatusError",
    "InvocationTimeoutError",
    "LocalPreconditionError",
    "NoSessionError",
    "PayloadSerializationError",
    "TransportError",
    "AsyncioScheduler",
    "Scheduler",
]
