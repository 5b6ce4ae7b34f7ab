"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from datetime import timedelta

from fournil.config import Settings, get_settings
from fournil.infrastructure.persistence.json_store import JsonUnitOfWork


def unit_of_work(settings: Settings | None = None) -> JsonUnitOfWork:
    settings = settings or get_settings()
    return JsonUnitOfWork(settings.store_path, lock_timeout=settings.lock_timeout_seconds)


def lifecycle_options(settings: Settings | None = None) -> dict:
    """Keyword arguments for OperationLifecycleManager taken from settings."""
    settings = settings or get_settings()
    ttl = (
        timedelta(hours=settings.reservation_ttl_hours)
        if settings.reservation_ttl_hours
        else None
    )
    return {
        "alert_lead_days": settings.lot_alert_lead_days,
        "reservation_ttl": ttl,
    }
