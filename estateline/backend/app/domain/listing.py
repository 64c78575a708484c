# app/domain/listing.py
from __future__ import annotations

from typing import Any

from .parsing import as_text, get_first
from .types import Candidate, Market

_ADDRESS_PARTS = ("propertyStreet", "propertyLocality", "propertyTown", "propertyPostcode")


def format_address(payload: dict[str, Any]) -> str:
    """Upstream 'address' when present, else "street, locality, town, postcode"."""
    addr = as_text(payload.get("address"))
    if addr:
        return addr
    return ", ".join(p for p in (as_text(payload.get(k)) for k in _ADDRESS_PARTS) if p)


def candidate_from_raw(payload: dict[str, Any], market: Market) -> Candidate:
    """
    Sales and lettings records share the property* fields but carry
    different lifecycle ids; either one is good enough as a reference.
    """
    ref_id = get_first(payload, "refId", "salesLifecycleId", "lettingsLifecycleId")

    return Candidate(
        ref_id=as_text(ref_id),
        address=format_address(payload),
        street=as_text(payload.get("propertyStreet")),
        town=as_text(payload.get("propertyTown")),
        postcode=as_text(payload.get("propertyPostcode")),
        property_type=as_text(payload.get("propertyTypeText")),
        price=payload.get("price"),
        market=market,
        contact_email=as_text(payload.get("teamEmail")),
        contact_phone=as_text(payload.get("teamPhone")),
        agent_name=as_text(payload.get("responsibleAgentName")),
    )
