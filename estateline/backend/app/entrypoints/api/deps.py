# app/entrypoints/api/deps.py
from __future__ import annotations

from fastapi import Request

from ...config import Settings
from ...integrations.base import LeadSink
from ...service_layer.lookup import LookupEngine


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_engine(request: Request) -> LookupEngine:
    # One engine per process: it owns the lookup cache.
    return request.app.state.lookup_engine


def get_lead_sink(request: Request) -> LeadSink | None:
    return request.app.state.lead_sink
