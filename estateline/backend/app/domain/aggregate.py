# app/domain/aggregate.py
from __future__ import annotations

import logging
from typing import Iterable, Sequence

from .listing import candidate_from_raw
from .types import Candidate, Market, Outcome, Success

log = logging.getLogger(__name__)


def dedupe(candidates: Iterable[Candidate]) -> list[Candidate]:
    """First occurrence per identity key wins; input order kept."""
    seen: set[str] = set()
    out: list[Candidate] = []
    for c in candidates:
        key = c.identity_key
        if key in seen:
            continue
        seen.add(key)
        out.append(c)
    return out


def candidates_from_outcome(outcome: Outcome, market: Market) -> list[Candidate]:
    if not isinstance(outcome, Success):
        return []
    out: list[Candidate] = []
    for rec in outcome.records:
        if not isinstance(rec, dict):
            continue
        out.append(candidate_from_raw(rec, market))
    return out


def merge_outcomes(outcomes: Sequence[tuple[Market, Outcome]]) -> list[Candidate]:
    """
    Concatenate successful outputs in the order given, then dedupe.
    Callers pass sources in fixed order: sales, lettings-fielded, lettings-text.
    """
    merged: list[Candidate] = []
    for market, outcome in outcomes:
        merged.extend(candidates_from_outcome(outcome, market))

    deduped = dedupe(merged)
    if len(deduped) != len(merged):
        log.debug("dedupe dropped %d of %d candidates", len(merged) - len(deduped), len(merged))
    return deduped
