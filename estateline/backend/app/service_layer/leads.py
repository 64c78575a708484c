# app/service_layer/leads.py
from __future__ import annotations

import html

from ..config import Settings
from ..integrations.base import LeadMessage, LeadSink
from ..integrations.smtp import SmtpLeadSink
from ..integrations.webhook import WebhookSink
from ..schemas import LeadEnquiry


def build_lead_sink(s: Settings) -> LeadSink | None:
    """SMTP when configured, else the webhook relay, else nothing (send_lead answers 500)."""
    if s.SMTP_HOST:
        return SmtpLeadSink(host=s.SMTP_HOST, port=s.SMTP_PORT, user=s.SMTP_USER, password=s.SMTP_PASS)
    if s.LEAD_WEBHOOK_URL:
        return WebhookSink(url=s.LEAD_WEBHOOK_URL, secret=s.LEAD_WEBHOOK_SECRET)
    return None


def resolve_recipient(enquiry: LeadEnquiry, s: Settings) -> str:
    return (s.FORCE_LEAD_EMAIL_TO or enquiry.teamEmail or "").strip()


def has_required_fields(enquiry: LeadEnquiry) -> bool:
    return all(
        str(v or "").strip()
        for v in (enquiry.refId, enquiry.address, enquiry.caller_name, enquiry.caller_phone)
    )


def _e(v: object) -> str:
    return html.escape(str(v or ""))


def _multiline(v: object) -> str:
    return _e(v).replace("\n", "<br>")


def render_lead_email(enquiry: LeadEnquiry, *, to: str, from_addr: str) -> LeadMessage:
    subject = f"[PROPERTY ENQUIRY] {enquiry.address} (Ref {enquiry.refId})"

    parts = [
        "<h2>New property enquiry</h2>",
        f"<p><b>Property:</b> {_e(enquiry.address)} (Ref {_e(enquiry.refId)})</p>",
        f"<p><b>Agent:</b> {_e(enquiry.responsibleAgentName)}</p>",
        "<hr>",
        f"<p><b>Caller:</b> {_e(enquiry.caller_name)}</p>",
        f"<p><b>Phone:</b> {_e(enquiry.caller_phone)}</p>",
        f"<p><b>Email:</b> {_e(enquiry.caller_email)}</p>",
    ]
    if enquiry.preferred_times:
        parts.append(f"<p><b>Preferred time(s):</b> {_e(enquiry.preferred_times)}</p>")
    if enquiry.notes:
        parts.append(f"<p><b>Notes:</b><br>{_multiline(enquiry.notes)}</p>")
    if enquiry.summary:
        parts.append(f"<p><b>Summary:</b><br>{_multiline(enquiry.summary)}</p>")
    if enquiry.transcript:
        parts.append(
            f"<details><summary>Full transcript</summary><pre>{_e(enquiry.transcript)}</pre></details>"
        )
    parts += ["<hr>", "<small>Sent by the voice agent</small>"]

    return LeadMessage(to=to, subject=subject, html="\n".join(parts), from_addr=from_addr)
