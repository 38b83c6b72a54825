"""Handler for RandomSecret CRD."""

from __future__ import annotations

from typing import Any

import kopf

from ..constants import API_GROUP_VERSION, KIND_RANDOM_SECRET
from ..resources.random_secret import RandomSecret
from .base import BaseHandler
from .shared import drift_check_interval, get_engine

_handler = BaseHandler(RandomSecret, get_engine)


# The timer also drives refreshPeriod rotation
@kopf.on.create(API_GROUP_VERSION, KIND_RANDOM_SECRET)
@kopf.on.update(API_GROUP_VERSION, KIND_RANDOM_SECRET)
@kopf.on.resume(API_GROUP_VERSION, KIND_RANDOM_SECRET)
@kopf.timer(
    API_GROUP_VERSION,
    KIND_RANDOM_SECRET,
    interval=drift_check_interval(),
    initial_delay=drift_check_interval(),
)
def handle_random_secret(
    body: dict[str, Any],
    meta: dict[str, Any],
    status: dict[str, Any],
    patch: kopf.Patch,
    **kwargs: Any,
) -> None:
    """Handle RandomSecret resource reconciliation."""
    _handler.ensure_finalizer(meta, patch)
    _handler.reconcile_with_metrics(
        meta, lambda: _handler.reconcile(body, meta, status, patch, old=kwargs.get("old"))
    )


@kopf.on.delete(API_GROUP_VERSION, KIND_RANDOM_SECRET)
def handle_random_secret_delete(
    body: dict[str, Any],
    meta: dict[str, Any],
    patch: kopf.Patch,
    **kwargs: Any,
) -> None:
    """Handle RandomSecret resource deletion."""
    _handler.delete(body, meta, patch)
