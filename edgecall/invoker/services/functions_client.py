"""
Functions Client (primary transport)

SDK-style edge function client. Errors are returned, not raised, in the same
shape the hosted SDK reports them: a FunctionsError carrying ``context``.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

import httpx

from edgecall.invoker.core.exceptions import (
    FunctionsError,
    FunctionsFetchError,
    FunctionsHttpError,
    FunctionsRelayError,
)

logger = logging.getLogger("edgecall.functions_client")

FUNCTIONS_PATH = "/functions/v1"


@dataclass
class PrimaryResponse:
    """Either ``data`` or ``error`` is set."""

    data: Any = None
    error: Optional[FunctionsError] = None


class PrimaryTransport(Protocol):
    async def call(
        self, function_name: str, body: Any, access_token: Optional[str]
    ) -> PrimaryResponse: ...


def function_url(base_url: str, function_name: str) -> str:
    return f"{base_url.rstrip('/')}{FUNCTIONS_PATH}/{function_name}"


class FunctionsClient:
    """Invoke edge functions the way the platform SDK does."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str,
        anon_key: str,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.client = client
        self.base_url = base_url.rstrip("/")
        self.anon_key = anon_key
        self.headers = headers or {}

    async def call(
        self, function_name: str, body: Any, access_token: Optional[str]
    ) -> PrimaryResponse:
        url = function_url(self.base_url, function_name)
        headers = {
            **self.headers,
            # Signed-out calls go out with the anon key, like the SDK.
            "Authorization": f"Bearer {access_token or self.anon_key}",
            "apikey": self.anon_key,
        }

        try:
            response = await self.client.post(url, json=body, headers=headers)
        except httpx.RequestError as e:
            logger.error(
                f"Failed to send a request to Edge Function '{function_name}'",
                extra={
                    "function_name": function_name,
                    "error_type": type(e).__name__,
                    "error_detail": str(e),
                },
            )
            return PrimaryResponse(
                error=FunctionsFetchError(
                    "Failed to send a request to the Edge Function",
                    context={"cause": type(e).__name__},
                )
            )

        if response.headers.get("x-relay-error") == "true":
            return PrimaryResponse(
                error=FunctionsRelayError(
                    "Relay Error invoking the Edge Function",
                    context={"body": response.text},
                )
            )

        if not response.is_success:
            return PrimaryResponse(
                error=FunctionsHttpError(
                    f"Edge Function returned a non-2xx status code {response.status_code}",
                    context={"status": response.status_code, "body": response.text},
                )
            )

        return PrimaryResponse(data=self._parse_body(response))

    @staticmethod
    def _parse_body(response: httpx.Response) -> Any:
        content_type = response.headers.get("content-type", "").split(";")[0].strip()
        if content_type == "application/json":
            return response.json()
        if content_type == "application/octet-stream":
            return response.content
        return response.text
