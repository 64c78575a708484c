# app/service_layer/lookup.py
from __future__ import annotations

import asyncio
import logging

from ..adapters.clients.base import SourceClient
from ..config import Settings, settings as default_settings
from ..domain.aggregate import merge_outcomes
from ..domain.errors import ConfigurationError
from ..domain.ranking import pack_result, select_candidates, strict_filter
from ..domain.types import (
    Candidate,
    LookupQuery,
    LookupResult,
    Market,
    Outcome,
    PermanentFailure,
    SearchMode,
    SourceRequest,
    Success,
    TransientFailure,
)
from .cache import LookupCache

log = logging.getLogger(__name__)

# Fixed order: aggregation and dedupe depend on it.
FULL_PLAN: tuple[tuple[Market, SearchMode], ...] = (
    (Market.sales, SearchMode.text),
    (Market.lettings, SearchMode.fielded),
    (Market.lettings, SearchMode.text),
)


class LookupEngine:
    """
    Unified sales + lettings lookup.

      0) fast path: sales text search only, small page, short budget.
         Any strict match -> answer now, lettings never queried.
      1) full path: all three searches concurrently, each with its own
         budget, full join (no first-response race).
      2) strict filter, town-only widening if that is empty.

    Whole lookups are cached per normalized query for the TTL.
    """

    def __init__(
        self,
        client: SourceClient,
        *,
        cache: LookupCache | None = None,
        settings: Settings | None = None,
    ) -> None:
        s = settings or default_settings
        self.client = client
        self.cache = cache if cache is not None else LookupCache(ttl_s=s.LOOKUP_CACHE_TTL_S)

        self.fast_timeout_s = float(s.ESTATE_FAST_TIMEOUT_S)
        self.full_timeout_s = float(s.ESTATE_TIMEOUT_S)
        self.fast_page_size = int(s.ESTATE_FAST_PAGE_SIZE)
        self.full_page_size = int(s.ESTATE_PAGE_SIZE)
        self.fallback_limit = int(s.LOOKUP_FALLBACK_LIMIT)

    async def lookup(self, query: LookupQuery) -> LookupResult:
        if not self.client.configured:
            raise ConfigurationError("ESTATE_API_KEY missing")

        key = query.cache_key()
        try:
            async with self.cache.lock_for(key):
                cached = self.cache.get(key)
                if cached is not None:
                    log.debug("lookup cache hit %s", key)
                    return cached

                result = await self._run(query)
                self.cache.put(key, result)
                return result
        finally:
            self.cache.release_lock(key)

    # -------------------------
    # Tiers
    # -------------------------

    async def _run(self, query: LookupQuery) -> LookupResult:
        fast = await self._fast_path(query)
        if fast:
            log.info("lookup fast path: %d sales candidates", len(fast))
            return pack_result(fast)
        return await self._full_path(query)

    async def _fast_path(self, query: LookupQuery) -> list[Candidate]:
        req = self._request(Market.sales, SearchMode.text, query, page_size=self.fast_page_size)
        outcome = await self._issue(req, self.fast_timeout_s)
        if not isinstance(outcome, Success) or not outcome.records:
            return []
        candidates = merge_outcomes([(Market.sales, outcome)])
        return strict_filter(candidates, query)

    async def _full_path(self, query: LookupQuery) -> LookupResult:
        requests = [
            self._request(market, mode, query, page_size=self.full_page_size)
            for market, mode in FULL_PLAN
        ]
        outcomes: list[Outcome] = await asyncio.gather(
            *(self._issue(req, self.full_timeout_s) for req in requests)
        )

        transient = any(isinstance(o, TransientFailure) for o in outcomes)
        candidates = merge_outcomes([(req.market, o) for req, o in zip(requests, outcomes)])
        selected = select_candidates(candidates, query, fallback_limit=self.fallback_limit)

        log.info(
            "lookup full path: %d merged, %d selected, outcomes=%s",
            len(candidates),
            len(selected),
            [type(o).__name__ for o in outcomes],
        )
        return pack_result(selected, transient=transient)

    # -------------------------
    # Helpers
    # -------------------------

    @staticmethod
    def _request(market: Market, mode: SearchMode, query: LookupQuery, *, page_size: int) -> SourceRequest:
        return SourceRequest(
            market=market,
            mode=mode,
            street=query.street.strip(),
            town=query.town.strip(),
            postcode=query.postcode.strip(),
            page_size=page_size,
            on_market_only=True,
        )

    async def _issue(self, request: SourceRequest, timeout_s: float) -> Outcome:
        """
        Bound one source call by its own budget and fold anything it raises
        into an outcome, so one source can never fail or stall the others.
        """
        try:
            return await asyncio.wait_for(self.client.issue(request, timeout_s), timeout=timeout_s)
        except asyncio.TimeoutError:
            log.info("%s/%s exceeded %.1fs budget", request.market.value, request.mode.value, timeout_s)
            return TransientFailure(reason="timeout")
        except Exception as e:
            log.warning("%s/%s raised %r", request.market.value, request.mode.value, e)
            return PermanentFailure(reason=type(e).__name__)
