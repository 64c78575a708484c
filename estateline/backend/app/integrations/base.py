from __future__ import annotations
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class LeadMessage:
    to: str
    subject: str
    html: str
    from_addr: str = ""


@dataclass(frozen=True)
class SinkDeliveryResult:
    ok: bool
    error: str | None = None


class LeadSink(Protocol):
    async def deliver(self, message: LeadMessage) -> SinkDeliveryResult:
        ...
