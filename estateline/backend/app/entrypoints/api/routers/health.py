# app/entrypoints/api/routers/health.py
from __future__ import annotations

from fastapi import APIRouter, Depends

from ..deps import get_settings
from ....config import Settings
from ....schemas import HealthOut

router = APIRouter(tags=["health"])


@router.get("/healthz", response_model=HealthOut)
def healthz(s: Settings = Depends(get_settings)) -> HealthOut:
    return HealthOut(ok=True, service=s.SERVICE_NAME, env=s.ENV)
