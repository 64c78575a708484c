from __future__ import annotations

import hmac
import hashlib
import json

import httpx

from .base import LeadMessage, LeadSink, SinkDeliveryResult


class WebhookSink(LeadSink):
    """Forwards enquiries as JSON to a mail relay / CRM hook."""

    def __init__(
        self,
        url: str,
        secret: str | None = None,
        timeout_s: int = 20,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        self.secret = secret
        self.timeout_s = timeout_s
        self._transport = transport

    def _sign(self, body: bytes) -> str | None:
        if not self.secret:
            return None
        digest = hmac.new(self.secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
        return digest

    async def deliver(self, message: LeadMessage) -> SinkDeliveryResult:
        body = json.dumps(
            {
                "type": "lead.enquiry",
                "data": {
                    "to": message.to,
                    "from": message.from_addr,
                    "subject": message.subject,
                    "html": message.html,
                },
            }
        ).encode("utf-8")
        headers = {"Content-Type": "application/json"}
        sig = self._sign(body)
        if sig:
            headers["X-Estateline-Signature"] = sig

        try:
            async with httpx.AsyncClient(timeout=self.timeout_s, transport=self._transport) as client:
                r = await client.post(self.url, content=body, headers=headers)
                if 200 <= r.status_code < 300:
                    return SinkDeliveryResult(ok=True)
                return SinkDeliveryResult(ok=False, error=f"HTTP {r.status_code}: {r.text[:500]}")
        except Exception as e:
            return SinkDeliveryResult(ok=False, error=str(e))
