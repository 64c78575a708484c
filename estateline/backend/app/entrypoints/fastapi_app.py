# app/entrypoints/fastapi_app.py
from __future__ import annotations

from fastapi import FastAPI

from ..adapters.clients.estate_api import EstateApiClient
from ..config import Settings, settings as default_settings
from ..integrations.base import LeadSink
from ..service_layer.leads import build_lead_sink
from ..service_layer.lookup import LookupEngine
from .api.routers import health, tools


def create_app(
    *,
    settings: Settings | None = None,
    engine: LookupEngine | None = None,
    lead_sink: LeadSink | None = None,
) -> FastAPI:
    s = settings or default_settings
    app = FastAPI(title="estateline - voice property lookup")

    app.state.settings = s
    app.state.lookup_engine = engine or LookupEngine(EstateApiClient(settings=s), settings=s)
    app.state.lead_sink = lead_sink if lead_sink is not None else build_lead_sink(s)

    # Routers
    app.include_router(health.router)
    app.include_router(tools.router)

    return app
