"""
End-to-end wiring: real transports over a mocked network.
"""

import json

import httpx
import pytest
import respx

from edgecall.invoker.clients import build_edge_api, build_invoker, create_http_client
from edgecall.invoker.config import EdgeClientConfig
from edgecall.invoker.models.request import InvocationOptions
from edgecall.invoker.models.result import ErrorKind
from edgecall.invoker.services.session_store import AuthTokenStore

BASE_URL = "https://project.example.co"
FUNCTION_URL = f"{BASE_URL}/functions/v1/analyze-transcription"


@pytest.fixture
def edge_config():
    return EdgeClientConfig(
        EDGE_BASE_URL=BASE_URL, EDGE_ANON_KEY="test-anon-key", EDGE_MAX_RETRIES=2, _env_file=None
    )


@pytest.mark.asyncio
@respx.mock
async def test_primary_failure_then_https_fallback_success(edge_config, session_accessor, scheduler):
    route = respx.post(FUNCTION_URL).mock(
        side_effect=[
            httpx.Response(500, json={"error": "cold start"}),
            httpx.Response(200, json={"success": True}),
        ]
    )
    async with httpx.AsyncClient() as client:
        invoker = build_invoker(edge_config, client, session_accessor, scheduler=scheduler)
        result = await invoker.invoke("analyze-transcription", {"videoId": "v1"})

    assert result.success is True
    assert result.data == {"success": True}
    assert route.call_count == 2
    assert scheduler.timeouts == [30.0]
    assert scheduler.sleeps == []


@pytest.mark.asyncio
@respx.mock
async def test_all_attempts_fail(edge_config, session_accessor, scheduler):
    route = respx.post(FUNCTION_URL).mock(
        return_value=httpx.Response(413, json={"details": "Video too large"})
    )
    async with httpx.AsyncClient() as client:
        invoker = build_invoker(edge_config, client, session_accessor, scheduler=scheduler)
        result = await invoker.invoke("analyze-transcription", {"videoId": "v1"})

    # Two cycles of primary + fallback.
    assert route.call_count == 4
    assert scheduler.sleeps == [2.0]
    assert result.error.kind == ErrorKind.HTTP_STATUS
    assert result.error.http_status == 413
    assert result.error.message == "Video too large"
    assert result.to_dict() == {
        "success": False,
        "error": {"message": "Video too large", "status": 413},
    }


@pytest.mark.asyncio
@respx.mock
async def test_per_call_options_override_config(edge_config, session_accessor, scheduler):
    route = respx.post(FUNCTION_URL).mock(return_value=httpx.Response(500))
    async with httpx.AsyncClient() as client:
        invoker = build_invoker(edge_config, client, session_accessor, scheduler=scheduler)
        await invoker.invoke(
            "analyze-transcription", {}, InvocationOptions(max_retries=3, use_fallback=False)
        )

    assert route.call_count == 3
    assert scheduler.sleeps == [2.0, 4.0]


@pytest.mark.asyncio
@respx.mock
async def test_edge_api_uses_stored_token(edge_config, tmp_path):
    store = AuthTokenStore(tmp_path / "auth.json")
    store.sign_in("stored-token", {"id": "u1"})
    route = respx.post(FUNCTION_URL).mock(return_value=httpx.Response(200, json={"success": True}))

    async with httpx.AsyncClient() as client:
        api = build_edge_api(edge_config, client, store=store)
        result = await api.analyze_video("v1", "u1")

    assert result == {"success": True}
    request = route.calls.last.request
    assert request.headers["Authorization"] == "Bearer stored-token"
    assert json.loads(request.content)["videoId"] == "v1"


@pytest.mark.asyncio
async def test_create_http_client(edge_config):
    client = create_http_client(edge_config)
    try:
        assert isinstance(client, httpx.AsyncClient)
        assert client.timeout.read == edge_config.EDGE_PRIMARY_TIMEOUT_SECONDS
    finally:
        await client.aclose()
