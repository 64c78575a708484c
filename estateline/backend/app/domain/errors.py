# app/domain/errors.py
from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Required credential/config missing. Fatal for the lookup; never retried."""
