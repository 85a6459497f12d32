"""
HTTPS Fallback Transport

Direct POST to the edge function URL, used when the primary transport fails.
Enforces a hard timeout through the injected Scheduler.
"""

import json
import logging
from typing import Any, Protocol

import httpx

from edgecall.invoker.core.errors import parse_error_body
from edgecall.invoker.core.exceptions import (
    HttpStatusError,
    NoSessionError,
    TransportError,
)
from edgecall.invoker.core.scheduler import Scheduler
from edgecall.invoker.services.functions_client import function_url
from edgecall.invoker.services.session_store import SessionAccessor

logger = logging.getLogger("edgecall.https_transport")


class FallbackTransport(Protocol):
    async def call(self, function_name: str, content: bytes, timeout_seconds: float) -> Any: ...


class HttpsFallbackTransport:
    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str,
        anon_key: str,
        session_accessor: SessionAccessor,
        scheduler: Scheduler,
    ):
        """
        Args:
            client: Shared httpx.AsyncClient
            base_url: Project URL, e.g. https://<ref>.supabase.co
            anon_key: Public anon key sent as ``apikey``
            session_accessor: Source of the bearer token
            scheduler: Provides the cancellation timeout
        """
        self.client = client
        self.base_url = base_url.rstrip("/")
        self.anon_key = anon_key
        self.session_accessor = session_accessor
        self.scheduler = scheduler

    async def call(self, function_name: str, content: bytes, timeout_seconds: float) -> Any:
        """
        POST the serialized payload to the edge function.

        Returns:
            Decoded JSON body of the 2xx response

        Raises:
            NoSessionError: no usable session
            InvocationTimeoutError: no response before the timeout (raised by
                the scheduler; httpx itself runs without a timeout here)
            HttpStatusError: non-2xx response
            TransportError: network failure or undecodable success body
        """
        session = await self.session_accessor.get_session()
        if session is None or not session.access_token:
            logger.error("No session or access token for direct HTTPS call")
            raise NoSessionError()

        url = function_url(self.base_url, function_name)
        headers = {
            "Authorization": f"Bearer {session.access_token}",
            "Content-Type": "application/json",
            "apikey": self.anon_key,
        }
        logger.info(
            f"Direct HTTPS call to {function_name}",
            extra={"function_name": function_name, "body_size": len(content)},
        )

        try:
            response = await self.scheduler.with_timeout(
                self._post(url, content, headers), timeout_seconds
            )
        except httpx.RequestError as e:
            logger.error(
                f"Direct HTTPS call failed for function '{function_name}'",
                extra={
                    "function_name": function_name,
                    "error_type": type(e).__name__,
                    "error_detail": str(e),
                },
            )
            raise TransportError(f"Network error: {e}", cause=e) from e

        logger.info(
            f"Direct HTTPS response {response.status_code} for {function_name}",
            extra={"function_name": function_name, "status_code": response.status_code},
        )

        if not response.is_success:
            message, parsed = parse_error_body(response.status_code, response.text)
            raise HttpStatusError(response.status_code, message, details=parsed)

        if not response.content:
            return None
        try:
            return response.json()
        except json.JSONDecodeError as e:
            raise TransportError(f"Invalid JSON in response from {function_name}", cause=e) from e

    async def _post(self, url: str, content: bytes, headers: dict) -> httpx.Response:
        # Body is read inside the timeout window.
        return await self.client.post(url, content=content, headers=headers, timeout=None)
