from pydantic import BaseModel
from typing import Any, Literal

MarketName = Literal["sales", "lettings"]


class RouteCallRequest(BaseModel):
    street: str | None = ""
    town: str | None = ""
    postcode: str | None = ""
    # callers send 200000, "200000" or "£200,000"
    price: str | int | float | None = ""


class PropertyOut(BaseModel):
    refId: str
    address: str
    street: str
    town: str
    postcode: str
    propertyTypeText: str
    price: Any = None
    market: MarketName
    teamEmail: str
    teamPhone: str
    responsibleAgentName: str


class RouteCallResponse(BaseModel):
    ok: bool
    matched: int | None = None
    transient: bool | None = None
    error: str | None = None

    properties: list[PropertyOut] | None = None
    markets_present: list[MarketName] | None = None
    need_market_choice: bool | None = None
    price_options: list[Any] | None = None


class LeadEnquiry(BaseModel):
    refId: str | int | None = None
    address: str | None = None
    responsibleAgentName: str | None = None
    teamEmail: str | None = None

    caller_name: str | None = None
    caller_phone: str | None = None
    caller_email: str | None = None
    preferred_times: str | None = None
    notes: str | None = None
    summary: str | None = None
    transcript: str | None = None


class SendLeadResponse(BaseModel):
    ok: bool
    emailed_to: str | None = None
    error: str | None = None


class HealthOut(BaseModel):
    ok: bool
    service: str
    env: str
