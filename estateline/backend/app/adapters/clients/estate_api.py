# app/adapters/clients/estate_api.py
from __future__ import annotations

import asyncio
import logging
from typing import Any

import certifi
import httpx

from ...config import Settings, settings as default_settings
from ...domain.types import (
    Market,
    Outcome,
    PermanentFailure,
    SearchMode,
    SourceRequest,
    Success,
    TransientFailure,
)

log = logging.getLogger(__name__)

_PATHS = {
    Market.sales: "/sales-properties",
    Market.lettings: "/lettings-properties",
}


def _as_list_of_dicts(payload: Any) -> list[dict[str, Any]]:
    """Catalog responses look like {"results": [...]}; anything else is no records."""
    if isinstance(payload, dict):
        items = payload.get("results")
        if isinstance(items, list):
            return [x for x in items if isinstance(x, dict)]
    return []


def build_params(request: SourceRequest) -> dict[str, str]:
    """
    The API is field-strict: unknown or empty params make it 400, so only
    send what the caller actually said.
    """
    params: dict[str, str] = {}

    if request.mode == SearchMode.fielded:
        if request.street:
            params["propertyStreet"] = request.street
        if request.town:
            params["propertyTown"] = request.town
        if request.postcode:
            params["propertyPostcode"] = request.postcode
    else:
        text = " ".join(p for p in (request.street, request.town, request.postcode) if p).strip()
        if text:
            params["searchText"] = text

    if request.on_market_only:
        params["marketingStatus"] = "OnMarket"
    params["pageSize"] = str(int(request.page_size))
    return params


class EstateApiClient:
    """
    Sales/lettings catalog search over HTTP.

    issue() never raises for upstream trouble and never retries:
      - budget expiry / httpx timeouts -> TransientFailure
      - anything else (401/403, 4xx/5xx, connect errors) -> PermanentFailure
    """

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        s = settings or default_settings
        self._settings = s
        self._api_key = (s.ESTATE_API_KEY or "").strip() or None
        self._base_url = (s.ESTATE_BASE_URL or "").rstrip("/")
        self._key_header = s.ESTATE_KEY_HEADER or "x-api-key"
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    def _headers(self) -> dict[str, str]:
        if not self._api_key:
            return {"accept": "application/json"}
        return {"accept": "application/json", self._key_header: self._api_key}

    def _http_verify(self) -> bool | str:
        if not self._settings.ESTATE_VERIFY_SSL:
            return False
        if self._settings.ESTATE_CA_BUNDLE:
            return self._settings.ESTATE_CA_BUNDLE
        return certifi.where()

    def build_url(self, request: SourceRequest) -> str:
        return f"{self._base_url}{_PATHS[request.market]}"

    async def _get(self, url: str, params: dict[str, str], timeout_s: float) -> list[dict[str, Any]]:
        kwargs: dict[str, Any] = {"timeout": httpx.Timeout(timeout_s)}
        if self._transport is not None:
            kwargs["transport"] = self._transport
        else:
            kwargs["verify"] = self._http_verify()

        async with httpx.AsyncClient(**kwargs) as client:
            r = await client.get(url, headers=self._headers(), params=params)
            r.raise_for_status()
            try:
                data = r.json()
            except ValueError:
                data = {}

        return _as_list_of_dicts(data)

    async def issue(self, request: SourceRequest, timeout_s: float) -> Outcome:
        url = self.build_url(request)
        params = build_params(request)
        label = f"{request.market.value}/{request.mode.value}"

        try:
            records = await asyncio.wait_for(self._get(url, params, timeout_s), timeout=timeout_s)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            log.info("estate %s timed out after %.1fs (%s)", label, timeout_s, type(e).__name__)
            return TransientFailure(reason="timeout")
        except httpx.HTTPStatusError as e:
            log.warning("estate %s failed: HTTP_%s", label, e.response.status_code)
            return PermanentFailure(reason=f"HTTP_{e.response.status_code}")
        except Exception as e:
            log.warning("estate %s failed: %r", label, e)
            return PermanentFailure(reason=type(e).__name__)

        log.debug("estate %s -> %d records", label, len(records))
        return Success(records=tuple(records))
