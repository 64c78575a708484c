# tests/conftest.py
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

import pytest

from app.config import Settings
from app.domain.types import (
    Market,
    Outcome,
    SearchMode,
    SourceRequest,
    Success,
)
from app.service_layer.cache import LookupCache
from app.service_layer.lookup import LookupEngine

SALES_TEXT = (Market.sales, SearchMode.text)
LETTINGS_FIELDED = (Market.lettings, SearchMode.fielded)
LETTINGS_TEXT = (Market.lettings, SearchMode.text)

FAST_PAGE = 30
FULL_PAGE = 100


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@dataclass
class Delay:
    """Scripted step: answer `outcome` after `seconds` (or never, within the test's budgets)."""
    seconds: float
    outcome: Outcome = field(default_factory=Success)


class ScriptedSource:
    """
    Fake SourceClient. Steps are looked up by (market, mode, page_size)
    first, then (market, mode); unknown requests succeed with no records.
    A step is an Outcome, a Delay, or an exception instance to raise.
    """

    def __init__(self, script: dict[tuple, Any] | None = None, *, configured: bool = True) -> None:
        self.script = script or {}
        self.calls: list[SourceRequest] = []
        self._configured = configured

    @property
    def configured(self) -> bool:
        return self._configured

    def calls_for(self, market: Market) -> list[SourceRequest]:
        return [c for c in self.calls if c.market == market]

    async def issue(self, request: SourceRequest, timeout_s: float) -> Outcome:
        self.calls.append(request)
        step = self.script.get((request.market, request.mode, request.page_size))
        if step is None:
            step = self.script.get((request.market, request.mode), Success())

        if isinstance(step, Delay):
            await asyncio.sleep(step.seconds)
            return step.outcome
        if isinstance(step, BaseException):
            raise step
        return step


def listing(
    ref_id: str,
    street: str,
    town: str,
    price: Any,
    *,
    number: int = 1,
    postcode: str = "",
    **extra: Any,
) -> dict[str, Any]:
    rec = {
        "refId": ref_id,
        "propertyStreet": street,
        "propertyTown": town,
        "propertyPostcode": postcode,
        "address": f"{number} {street}, {town}",
        "propertyTypeText": "House",
        "price": price,
        "teamEmail": "team@example.com",
        "teamPhone": "01530 000000",
        "responsibleAgentName": "Sam Agent",
    }
    rec.update(extra)
    return rec


@pytest.fixture
def settings() -> Settings:
    # Tight budgets so timeout tests stay fast.
    return Settings(
        ESTATE_API_KEY="test-key",
        ESTATE_BASE_URL="https://estate.test/api",
        ESTATE_FAST_TIMEOUT_S=0.05,
        ESTATE_TIMEOUT_S=0.2,
        ESTATE_FAST_PAGE_SIZE=FAST_PAGE,
        ESTATE_PAGE_SIZE=FULL_PAGE,
        LOOKUP_CACHE_TTL_S=60,
        LOOKUP_FALLBACK_LIMIT=12,
        SMTP_HOST=None,
        LEAD_WEBHOOK_URL=None,
        FORCE_LEAD_EMAIL_TO=None,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_engine(settings, clock):
    def _make(source: ScriptedSource) -> LookupEngine:
        cache = LookupCache(ttl_s=settings.LOOKUP_CACHE_TTL_S, clock=clock)
        return LookupEngine(source, cache=cache, settings=settings)

    return _make
