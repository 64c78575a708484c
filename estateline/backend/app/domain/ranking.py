# app/domain/ranking.py
from __future__ import annotations

from typing import Sequence

from .matching import price_close, street_hit, town_match
from .text import edit_distance, normalize, phonetic_code
from .types import Candidate, LookupQuery, LookupResult, Market

FALLBACK_LIMIT = 12
PHONETIC_BONUS = 1


def _town_ok(want_town: str, c: Candidate) -> bool:
    return town_match(want_town, c.town) or town_match(want_town, c.address)


def _street_ok(want_street: str, c: Candidate) -> bool:
    return street_hit(want_street, c.street) or street_hit(want_street, c.address)


def strict_filter(candidates: Sequence[Candidate], query: LookupQuery) -> list[Candidate]:
    """
    Town and street must match when the caller gave them (against the
    listing field or its full address); price must always be close.
    """
    want_town = normalize(query.town)
    want_street = normalize(query.street)

    out: list[Candidate] = []
    for c in candidates:
        if want_town and not _town_ok(want_town, c):
            continue
        if want_street and not _street_ok(want_street, c):
            continue
        if not price_close(query.price, c.price):
            continue
        out.append(c)
    return out


def street_score(want_street: str, got: str) -> int:
    # Lower is better.
    score = edit_distance(want_street, got)
    if phonetic_code(want_street) == phonetic_code(got):
        score -= PHONETIC_BONUS
    return score


def widen_by_town(
    candidates: Sequence[Candidate],
    query: LookupQuery,
    *,
    limit: int = FALLBACK_LIMIT,
) -> list[Candidate]:
    """
    Town-only recall for badly garbled streets: rank the town's listings by
    how close their street/address is to what the caller said, keep the best
    `limit`, then re-check street and price on that shortlist.
    """
    want_town = normalize(query.town)
    if not want_town:
        return []
    want_street = normalize(query.street)

    in_town = [c for c in candidates if _town_ok(want_town, c)]
    # sorted() is stable: equal scores keep upstream order
    ranked = sorted(
        in_town,
        key=lambda c: min(street_score(want_street, c.street), street_score(want_street, c.address)),
    )

    out: list[Candidate] = []
    for c in ranked[:limit]:
        if want_street and not _street_ok(want_street, c):
            continue
        if not price_close(query.price, c.price):
            continue
        out.append(c)
    return out


def select_candidates(
    candidates: Sequence[Candidate],
    query: LookupQuery,
    *,
    fallback_limit: int = FALLBACK_LIMIT,
) -> list[Candidate]:
    strict = strict_filter(candidates, query)
    if strict:
        return strict
    return widen_by_town(candidates, query, limit=fallback_limit)


def pack_result(candidates: Sequence[Candidate], transient: bool = False) -> LookupResult:
    sales = sum(1 for c in candidates if c.market == Market.sales)
    lettings = sum(1 for c in candidates if c.market == Market.lettings)
    return LookupResult(
        candidates=tuple(candidates),
        markets_present=frozenset(c.market for c in candidates),
        sales_count=sales,
        lettings_count=lettings,
        transient=transient,
    )
