"""
Timer capabilities used by the invoker.

Backoff sleeps and the HTTPS fallback timeout go through a Scheduler so tests
can drive them without waiting on the wall clock.
"""

import asyncio
import logging
from typing import Awaitable, Protocol, TypeVar

from edgecall.invoker.core.exceptions import InvocationTimeoutError

logger = logging.getLogger("edgecall.scheduler")

T = TypeVar("T")


class Scheduler(Protocol):
    async def sleep(self, seconds: float) -> None: ...

    async def with_timeout(self, awaitable: Awaitable[T], seconds: float) -> T: ...


class AsyncioScheduler:
    """Scheduler backed by the running event loop."""

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)

    async def with_timeout(self, awaitable: Awaitable[T], seconds: float) -> T:
        """
        Await ``awaitable``, cancelling it after ``seconds``.

        Raises:
            InvocationTimeoutError: the deadline fired before completion
        """
        try:
            return await asyncio.wait_for(awaitable, timeout=seconds)
        except asyncio.TimeoutError as e:
            logger.warning(f"Operation cancelled after {seconds:g}s timeout")
            raise InvocationTimeoutError(seconds) from e
