"""
Wiring for the default invoker stack.
"""

import logging
from typing import Optional

import httpx

from edgecall.common.core.http_client import HttpClientFactory
from edgecall.invoker.config import EdgeClientConfig
from edgecall.invoker.core.scheduler import AsyncioScheduler, Scheduler
from edgecall.invoker.services.edge_api import EdgeApi
from edgecall.invoker.services.functions_client import FunctionsClient
from edgecall.invoker.services.https_transport import HttpsFallbackTransport
from edgecall.invoker.services.invoker import EdgeFunctionInvoker
from edgecall.invoker.services.session_store import AuthTokenStore, SessionAccessor

logger = logging.getLogger("edgecall.clients")


def create_http_client(config: EdgeClientConfig) -> httpx.AsyncClient:
    """Shared client for both transports."""
    factory = HttpClientFactory(config)
    factory.configure_global_settings()
    return factory.create_async_client(
        timeout=httpx.Timeout(config.EDGE_PRIMARY_TIMEOUT_SECONDS)
    )


def build_invoker(
    config: EdgeClientConfig,
    client: httpx.AsyncClient,
    session_accessor: SessionAccessor,
    scheduler: Optional[Scheduler] = None,
) -> EdgeFunctionInvoker:
    scheduler = scheduler or AsyncioScheduler()
    primary = FunctionsClient(client, config.EDGE_BASE_URL, config.EDGE_ANON_KEY)
    fallback = HttpsFallbackTransport(
        client,
        config.EDGE_BASE_URL,
        config.EDGE_ANON_KEY,
        session_accessor=session_accessor,
        scheduler=scheduler,
    )
    logger.debug(f"Edge function invoker configured for {config.EDGE_BASE_URL}")
    return EdgeFunctionInvoker(
        primary=primary,
        fallback=fallback,
        session_accessor=session_accessor,
        scheduler=scheduler,
        default_options=config.default_options(),
        backoff_base_ms=config.EDGE_BACKOFF_BASE_MS,
    )


def build_edge_api(
    config: EdgeClientConfig,
    client: httpx.AsyncClient,
    store: Optional[AuthTokenStore] = None,
) -> EdgeApi:
    """Invoker and business wrappers backed by the persisted auth token store."""
    if store is None:
        store = AuthTokenStore(config.AUTH_STORE_PATH)
        store.hydrate()
    invoker = build_invoker(config, client, session_accessor=store)
    return EdgeApi(invoker, session_accessor=store)
