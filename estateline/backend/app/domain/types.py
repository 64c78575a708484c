# app/domain/types.py
from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from .text import normalize

RawListing = dict[str, Any]


class Market(str, Enum):
    sales = "sales"
    lettings = "lettings"


class SearchMode(str, Enum):
    text = "text"  # searchText=<street town postcode>
    fielded = "fielded"  # propertyStreet / propertyTown / propertyPostcode


@dataclass(frozen=True)
class LookupQuery:
    street: str = ""
    town: str = ""
    postcode: str = ""
    price: str = ""

    @classmethod
    def from_raw(cls, **kw: Any) -> "LookupQuery":
        """Caller payloads carry None / numbers for missing fields; coerce to str."""
        def _s(v: Any) -> str:
            if v is None:
                return ""
            if isinstance(v, float) and v.is_integer():
                return str(int(v))
            return str(v)

        return cls(
            street=_s(kw.get("street")),
            town=_s(kw.get("town")),
            postcode=_s(kw.get("postcode")),
            price=_s(kw.get("price")),
        )

    def cache_key(self) -> str:
        # Field order is part of the key; keep it fixed.
        return json.dumps(
            [normalize(self.street), normalize(self.town), normalize(self.postcode), normalize(self.price)]
        )


@dataclass(frozen=True)
class Candidate:
    ref_id: str
    address: str
    street: str
    town: str
    postcode: str
    property_type: str
    price: Any
    market: Market
    contact_email: str = ""
    contact_phone: str = ""
    agent_name: str = ""

    @property
    def identity_key(self) -> str:
        return self.ref_id or self.address


CandidateSet = tuple[Candidate, ...]


@dataclass(frozen=True)
class LookupResult:
    candidates: CandidateSet = ()
    markets_present: frozenset[Market] = frozenset()
    sales_count: int = 0
    lettings_count: int = 0
    transient: bool = False

    @property
    def empty(self) -> bool:
        return not self.candidates


@dataclass(frozen=True)
class SourceRequest:
    market: Market
    mode: SearchMode
    street: str = ""
    town: str = ""
    postcode: str = ""
    page_size: int = 100
    on_market_only: bool = True


@dataclass(frozen=True)
class Success:
    records: tuple[RawListing, ...] = ()


@dataclass(frozen=True)
class TransientFailure:
    reason: str = "timeout"


@dataclass(frozen=True)
class PermanentFailure:
    reason: str = "error"


Outcome = Union[Success, TransientFailure, PermanentFailure]


@dataclass(frozen=True)
class CacheEntry:
    result: LookupResult
    created_at: float
