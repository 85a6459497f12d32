"""
Edge Function Invoker

Calls a named edge function over the primary transport, falls back to a direct
HTTPS call when it fails, and repeats the whole cycle with a linear backoff.
Every failure is returned as an InvocationResult; nothing is raised to the caller.
"""

import logging
from typing import Any, Optional

from pydantic import ValidationError

from edgecall.common.core.request_context import (
    clear_invocation_id,
    generate_invocation_id,
)
from edgecall.invoker.core.errors import encode_payload, normalize_exception
from edgecall.invoker.core.exceptions import PayloadSerializationError
from edgecall.invoker.core.scheduler import AsyncioScheduler, Scheduler
from edgecall.invoker.models.request import InvocationOptions, InvocationRequest
from edgecall.invoker.models.result import (
    ErrorKind,
    InvocationResult,
    NormalizedError,
    unknown_error,
)
from edgecall.invoker.services.functions_client import PrimaryTransport
from edgecall.invoker.services.https_transport import FallbackTransport
from edgecall.invoker.services.session_store import SessionAccessor

logger = logging.getLogger("edgecall.invoker")

DEFAULT_BACKOFF_BASE_MS = 2000


class EdgeFunctionInvoker:
    def __init__(
        self,
        primary: PrimaryTransport,
        fallback: FallbackTransport,
        session_accessor: SessionAccessor,
        scheduler: Optional[Scheduler] = None,
        default_options: Optional[InvocationOptions] = None,
        backoff_base_ms: int = DEFAULT_BACKOFF_BASE_MS,
    ):
        """
        Args:
            primary: SDK-style transport tried first on every attempt
            fallback: Direct HTTPS transport tried after a primary failure
            session_accessor: Read before every primary call
            scheduler: Backoff sleeps (defaults to asyncio)
            default_options: Used when invoke() gets no options
            backoff_base_ms: Delay after attempt i is backoff_base_ms * (i + 1)
        """
        self.primary = primary
        self.fallback = fallback
        self.session_accessor = session_accessor
        self.scheduler = scheduler or AsyncioScheduler()
        self.default_options = default_options or InvocationOptions()
        self.backoff_base_ms = backoff_base_ms

    def backoff_delay_ms(self, attempt: int) -> int:
        return self.backoff_base_ms * (attempt + 1)

    async def invoke(
        self,
        function_name: str,
        payload: Any,
        options: Optional[InvocationOptions] = None,
    ) -> InvocationResult:
        """
        Invoke an edge function.

        Args:
            function_name: Edge function name
            payload: JSON-serializable request body
            options: Retry/timeout policy for this call

        Returns:
            InvocationResult with the untouched response data, or the last
            NormalizedError once every attempt has failed
        """
        generate_invocation_id()
        try:
            try:
                request = InvocationRequest(
                    function_name=function_name,
                    payload=payload,
                    options=options or self.default_options,
                )
            except ValidationError as e:
                error = NormalizedError(
                    kind=ErrorKind.INVALID_REQUEST,
                    message=f"Invalid invocation request: {e.error_count()} validation error(s)",
                    raw_details=e.errors(include_url=False),
                    transport="local",
                )
                logger.error(f"Cannot invoke {function_name!r}: {error.message}")
                return InvocationResult.failure(error, attempts=0)
            return await self._invoke(request)
        finally:
            clear_invocation_id()

    async def _invoke(self, request: InvocationRequest) -> InvocationResult:
        function_name = request.function_name
        payload = request.payload
        opts = request.options
        logger.info(
            f"Invoking edge function {function_name}",
            extra={
                "function_name": function_name,
                "max_retries": opts.max_retries,
                "timeout_ms": opts.timeout_ms,
                "use_fallback": opts.use_fallback,
            },
        )

        try:
            content = encode_payload(payload)
        except PayloadSerializationError as e:
            error = normalize_exception(e, transport="local")
            logger.error(f"Cannot invoke {function_name}: {error.message}")
            return InvocationResult.failure(error, attempts=0)

        last_error: Optional[NormalizedError] = None

        for attempt in range(opts.max_retries):
            is_last = attempt == opts.max_retries - 1
            logger.info(f"Attempt {attempt + 1}/{opts.max_retries} for {function_name}")

            try:
                data = await self._call_primary(function_name, payload)
                logger.info(f"Edge function {function_name} succeeded via primary transport")
                return InvocationResult.ok(data, attempts=attempt + 1)
            except Exception as e:
                last_error = self._normalize(e, "primary")
                self._log_failure(function_name, attempt, last_error)

            if opts.use_fallback:
                try:
                    data = await self.fallback.call(function_name, content, opts.timeout_seconds)
                    logger.info(f"HTTPS fallback succeeded for {function_name}")
                    return InvocationResult.ok(data, attempts=attempt + 1)
                except Exception as e:
                    last_error = self._normalize(e, "https")
                    self._log_failure(function_name, attempt, last_error)

            if not is_last:
                delay_ms = self.backoff_delay_ms(attempt)
                logger.info(f"Waiting {delay_ms}ms before retrying {function_name}")
                await self.scheduler.sleep(delay_ms / 1000)

        error = last_error or unknown_error()
        logger.error(
            f"All attempts failed for {function_name}: {error.message}",
            extra={
                "function_name": function_name,
                "error_kind": error.kind.value,
                "http_status": error.http_status,
            },
        )
        return InvocationResult.failure(error, attempts=opts.max_retries)

    async def _call_primary(self, function_name: str, payload: Any) -> Any:
        session = await self.session_accessor.get_session()
        access_token = session.access_token if session else None
        response = await self.primary.call(function_name, payload, access_token)
        if response.error is not None:
            raise response.error
        return response.data

    @staticmethod
    def _normalize(exc: Exception, transport: str) -> NormalizedError:
        try:
            return normalize_exception(exc, transport=transport)
        except Exception:
            logger.exception(f"Could not normalize {type(exc).__name__} from {transport}")
            return NormalizedError(
                kind=ErrorKind.TRANSPORT,
                message=str(exc) or type(exc).__name__,
                transport=transport,
            )

    @staticmethod
    def _log_failure(function_name: str, attempt: int, error: NormalizedError) -> None:
        if error.kind == ErrorKind.ACCEPTED:
            logger.warning(
                f"{function_name} answered 202 Accepted; processing continues asynchronously"
            )
        logger.error(
            f"Attempt {attempt + 1} failed for {function_name} via {error.transport}: "
            f"{error.message}",
            extra={
                "function_name": function_name,
                "error_kind": error.kind.value,
                "http_status": error.http_status,
            },
        )
