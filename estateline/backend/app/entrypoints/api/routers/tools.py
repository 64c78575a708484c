# app/entrypoints/api/routers/tools.py
from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..deps import get_engine, get_lead_sink, get_settings
from ....config import Settings
from ....domain.errors import ConfigurationError
from ....domain.parsing import parse_price_digits
from ....domain.types import Candidate, LookupQuery, LookupResult, Market
from ....integrations.base import LeadSink
from ....schemas import LeadEnquiry, PropertyOut, RouteCallRequest, RouteCallResponse, SendLeadResponse
from ....service_layer.leads import has_required_fields, render_lead_email, resolve_recipient
from ....service_layer.lookup import LookupEngine

log = logging.getLogger(__name__)

router = APIRouter(tags=["tools"])

MAX_PROPERTIES = 10
MAX_PRICE_OPTIONS = 4


def _property_out(c: Candidate) -> PropertyOut:
    return PropertyOut(
        refId=c.ref_id,
        address=c.address,
        street=c.street,
        town=c.town,
        postcode=c.postcode,
        propertyTypeText=c.property_type,
        price=c.price,
        market=c.market.value,
        teamEmail=c.contact_email,
        teamPhone=c.contact_phone,
        responsibleAgentName=c.agent_name,
    )


def route_call_payload(result: LookupResult) -> RouteCallResponse:
    """
    What the voice agent needs to keep talking: the shortlist, whether to
    ask "buying or renting?", and a few prices it can read back.
    """
    if result.empty and result.transient:
        return RouteCallResponse(ok=False, transient=True, matched=0)

    properties = [_property_out(c) for c in result.candidates]

    prices: list = []
    for c in result.candidates:
        if c.price in (None, "", 0) or c.price in prices:
            continue
        prices.append(c.price)
    prices.sort(key=parse_price_digits)

    markets = sorted(m.value for m in result.markets_present)

    return RouteCallResponse(
        ok=True,
        matched=len(properties),
        properties=properties[:MAX_PROPERTIES],
        markets_present=markets,
        need_market_choice=result.markets_present >= {Market.sales, Market.lettings},
        price_options=prices[:MAX_PRICE_OPTIONS],
    )


@router.post("/tools/route_call", response_model=RouteCallResponse, response_model_exclude_none=True)
async def route_call(
    body: RouteCallRequest | None = None,
    engine: LookupEngine = Depends(get_engine),
    s: Settings = Depends(get_settings),
):
    query = LookupQuery.from_raw(**(body.model_dump() if body else {}))
    if not query.street.strip() or not query.town.strip():
        return JSONResponse(status_code=400, content={"ok": False, "error": "need street and town"})

    try:
        result = await asyncio.wait_for(engine.lookup(query), timeout=s.REQUEST_TIMEOUT_S)
    except asyncio.TimeoutError:
        log.warning("route_call exceeded %.1fs request budget", s.REQUEST_TIMEOUT_S)
        return RouteCallResponse(ok=False, transient=True, matched=0)
    except ConfigurationError as e:
        log.error("route_call misconfigured: %s", e)
        return RouteCallResponse(ok=False, transient=False, error="lookup_failed")
    except Exception:
        log.exception("route_call lookup failed")
        return RouteCallResponse(ok=False, transient=False, error="lookup_failed")

    return route_call_payload(result)


@router.post("/tools/send_lead", response_model=SendLeadResponse, response_model_exclude_none=True)
async def send_lead(
    body: LeadEnquiry | None = None,
    sink: LeadSink | None = Depends(get_lead_sink),
    s: Settings = Depends(get_settings),
):
    enquiry = body or LeadEnquiry()

    to = resolve_recipient(enquiry, s)
    if not to:
        return JSONResponse(status_code=400, content={"ok": False, "error": "missing_team_email"})
    if not has_required_fields(enquiry):
        return JSONResponse(status_code=400, content={"ok": False, "error": "missing_required_fields"})
    if sink is None:
        return JSONResponse(status_code=500, content={"ok": False, "error": "mailer_not_configured"})

    from_addr = (s.LEAD_FROM_EMAIL or s.SMTP_USER or "").strip()
    message = render_lead_email(enquiry, to=to, from_addr=from_addr)

    res = await sink.deliver(message)
    if not res.ok:
        log.warning("send_lead delivery failed: %s", res.error)
        return JSONResponse(status_code=500, content={"ok": False, "error": "send_lead_failed"})

    return SendLeadResponse(ok=True, emailed_to=to)
