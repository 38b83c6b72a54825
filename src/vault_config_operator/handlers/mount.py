"""Handler for SecretEngineMount CRD."""

from __future__ import annotations

from typing import Any

import kopf

from ..constants import API_GROUP_VERSION, KIND_SECRET_ENGINE_MOUNT
from ..resources.mount import SecretEngineMount
from .base import BaseHandler
from .shared import drift_check_interval, get_engine

# Global handler instance
_handler = BaseHandler(SecretEngineMount, get_engine)


@kopf.on.create(API_GROUP_VERSION, KIND_SECRET_ENGINE_MOUNT)
@kopf.on.update(API_GROUP_VERSION, KIND_SECRET_ENGINE_MOUNT)
@kopf.on.resume(API_GROUP_VERSION, KIND_SECRET_ENGINE_MOUNT)
@kopf.timer(
    API_GROUP_VERSION,
    KIND_SECRET_ENGINE_MOUNT,
    interval=drift_check_interval(),
    initial_delay=drift_check_interval(),
)
def handle_secret_engine_mount(
    body: dict[str, Any],
    meta: dict[str, Any],
    status: dict[str, Any],
    patch: kopf.Patch,
    **kwargs: Any,
) -> None:
    """Handle SecretEngineMount resource reconciliation."""
    _handler.ensure_finalizer(meta, patch)
    _handler.reconcile_with_metrics(
        meta, lambda: _handler.reconcile(body, meta, status, patch, old=kwargs.get("old"))
    )


@kopf.on.delete(API_GROUP_VERSION, KIND_SECRET_ENGINE_MOUNT)
def handle_secret_engine_mount_delete(
    body: dict[str, Any],
    meta: dict[str, Any],
    patch: kopf.Patch,
    **kwargs: Any,
) -> None:
    """Disable the secret engine mount."""
    _handler.delete(body, meta, patch)
