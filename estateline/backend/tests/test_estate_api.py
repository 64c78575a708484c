import asyncio

import httpx
import pytest

from app.adapters.clients.estate_api import EstateApiClient, build_params
from app.config import Settings
from app.domain.types import Market, PermanentFailure, SearchMode, SourceRequest, Success, TransientFailure


def _client(handler, **overrides) -> EstateApiClient:
    s = Settings(
        ESTATE_API_KEY=overrides.pop("key", "secret-key"),
        ESTATE_BASE_URL="https://estate.test/api/",
        ESTATE_KEY_HEADER=overrides.pop("header", "x-api-key"),
    )
    return EstateApiClient(settings=s, transport=httpx.MockTransport(handler))


def _req(market=Market.sales, mode=SearchMode.text, **kw) -> SourceRequest:
    kw.setdefault("street", "Station Road")
    kw.setdefault("town", "Coalville")
    return SourceRequest(market=market, mode=mode, **kw)


def test_text_search_params():
    params = build_params(_req(postcode="LE67 3AB", page_size=30))
    assert params == {
        "searchText": "Station Road Coalville LE67 3AB",
        "marketingStatus": "OnMarket",
        "pageSize": "30",
    }


def test_fielded_search_sends_only_given_fields():
    params = build_params(_req(Market.lettings, SearchMode.fielded, street="", page_size=100))
    assert params == {"propertyTown": "Coalville", "marketingStatus": "OnMarket", "pageSize": "100"}


def test_on_market_filter_is_optional():
    params = build_params(_req(on_market_only=False, street="", town=""))
    assert params == {"pageSize": "100"}


@pytest.mark.asyncio
async def test_success_returns_results_records():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"results": [{"refId": "1"}, "junk", {"refId": "2"}], "total": 2})

    outcome = await _client(handler).issue(_req(page_size=30), 1.0)

    assert isinstance(outcome, Success)
    assert [r["refId"] for r in outcome.records] == ["1", "2"]

    req = seen[0]
    assert req.url.path == "/api/sales-properties"
    assert req.url.params["searchText"] == "Station Road Coalville"
    assert req.url.params["pageSize"] == "30"
    assert req.headers["x-api-key"] == "secret-key"


@pytest.mark.asyncio
async def test_lettings_path_and_custom_key_header():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"results": []})

    client = _client(handler, header="X-Api-Token")
    outcome = await client.issue(_req(Market.lettings, SearchMode.fielded), 1.0)

    assert outcome == Success(())
    assert seen[0].url.path == "/api/lettings-properties"
    assert seen[0].url.params["propertyStreet"] == "Station Road"
    assert seen[0].headers["x-api-token"] == "secret-key"


@pytest.mark.asyncio
async def test_non_json_or_unexpected_shape_is_empty_success():
    def handler(request: httpx.Request) -> httpx.Response:
        if "sales" in request.url.path:
            return httpx.Response(200, text="<html>maintenance</html>")
        return httpx.Response(200, json=[{"refId": "1"}])

    client = _client(handler)
    assert await client.issue(_req(), 1.0) == Success(())
    assert await client.issue(_req(Market.lettings), 1.0) == Success(())


@pytest.mark.asyncio
async def test_http_error_status_is_permanent():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"message": "bad key"})

    outcome = await _client(handler).issue(_req(), 1.0)
    assert outcome == PermanentFailure(reason="HTTP_401")


@pytest.mark.asyncio
async def test_connect_error_is_permanent():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    outcome = await _client(handler).issue(_req(), 1.0)
    assert isinstance(outcome, PermanentFailure)
    assert outcome.reason == "ConnectError"


@pytest.mark.asyncio
async def test_httpx_timeout_is_transient():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow upstream", request=request)

    outcome = await _client(handler).issue(_req(), 1.0)
    assert isinstance(outcome, TransientFailure)


@pytest.mark.asyncio
async def test_budget_expiry_cancels_and_is_transient():
    cancelled = asyncio.Event()

    async def handler(request: httpx.Request) -> httpx.Response:
        try:
            await asyncio.sleep(5)
        except asyncio.CancelledError:
            cancelled.set()
            raise
        return httpx.Response(200, json={"results": [{"refId": "late"}]})

    outcome = await _client(handler).issue(_req(), 0.05)
    assert isinstance(outcome, TransientFailure)
    assert cancelled.is_set()


def test_configured_reflects_api_key():
    assert _client(lambda r: httpx.Response(200)).configured is True
    assert _client(lambda r: httpx.Response(200), key="  ").configured is False
