from __future__ import annotations

import asyncio
import logging
import smtplib
from email.message import EmailMessage

from .base import LeadMessage, LeadSink, SinkDeliveryResult

log = logging.getLogger(__name__)


class SmtpLeadSink(LeadSink):
    """Plain SMTP relay (SendGrid and friends): STARTTLS + login when credentials are set."""

    def __init__(
        self,
        host: str,
        port: int = 587,
        user: str | None = None,
        password: str | None = None,
        timeout_s: int = 20,
    ) -> None:
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.timeout_s = timeout_s

    def _build(self, message: LeadMessage) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = message.subject
        msg["From"] = message.from_addr
        msg["To"] = message.to
        msg.set_content("This enquiry is best viewed as HTML.")
        msg.add_alternative(message.html, subtype="html")
        return msg

    def _send_blocking(self, msg: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout_s) as smtp:
            if self.user and self.password:
                smtp.starttls()
                smtp.login(self.user, self.password)
            smtp.send_message(msg)

    async def deliver(self, message: LeadMessage) -> SinkDeliveryResult:
        msg = self._build(message)
        try:
            # smtplib is blocking; keep it off the event loop
            await asyncio.to_thread(self._send_blocking, msg)
        except (smtplib.SMTPException, OSError) as e:
            log.warning("lead email to %s failed: %r", message.to, e)
            return SinkDeliveryResult(ok=False, error=str(e))
        return SinkDeliveryResult(ok=True)
