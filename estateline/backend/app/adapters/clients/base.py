# app/adapters/clients/base.py
from __future__ import annotations

from typing import Protocol

from ...domain.types import Outcome, SourceRequest


class SourceClient(Protocol):
    """
    One structured catalog query -> Success | TransientFailure | PermanentFailure.
    Implementations must not raise for upstream problems and must not retry.
    """

    @property
    def configured(self) -> bool:
        ...

    async def issue(self, request: SourceRequest, timeout_s: float) -> Outcome:
        ...
