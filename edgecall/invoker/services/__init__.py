"""
Services package.

Provides the invoker, its transports and external integrations.
"""

from .edge_api import EdgeApi
from .functions_client import FunctionsClient, PrimaryResponse
from .https_transport import HttpsFallbackTransport
from .invoker import EdgeFunctionInvoker
from .session_store import AuthStatus, AuthTokenStore

__all__ = [
    "EdgeApi",
    "FunctionsClient",
    "PrimaryResponse",
    "HttpsFallbackTransport",
    "EdgeFunctionInvoker",
    "AuthStatus",
    "AuthTokenStore",
]
