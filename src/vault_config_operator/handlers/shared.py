"""Shared utilities for handlers."""

from __future__ import annotations

import os

from ..reconcilers.base import ReconciliationEngine
from ..services.clients import get_clients

_engine: ReconciliationEngine | None = None


def get_engine() -> ReconciliationEngine:
    """Return the process-wide reconciliation engine, creating it on first use."""
    global _engine
    if _engine is None:
        _engine = ReconciliationEngine(get_clients())
    return _engine


def drift_check_interval() -> int:
    """Seconds between periodic drift checks."""
    return int(os.getenv("DRIFT_CHECK_INTERVAL_SECONDS", "300"))
