"""Handler for Policy CRD."""

from __future__ import annotations

from typing import Any

import kopf

from ..constants import API_GROUP_VERSION, KIND_POLICY
from ..resources.policy import Policy
from .base import BaseHandler
from .shared import drift_check_interval, get_engine

_handler = BaseHandler(Policy, get_engine)


@kopf.on.create(API_GROUP_VERSION, KIND_POLICY)
@kopf.on.update(API_GROUP_VERSION, KIND_POLICY)
@kopf.on.resume(API_GROUP_VERSION, KIND_POLICY)
@kopf.timer(
    API_GROUP_VERSION,
    KIND_POLICY,
    interval=drift_check_interval(),
    initial_delay=drift_check_interval(),
)
def handle_policy(
    body: dict[str, Any],
    meta: dict[str, Any],
    status: dict[str, Any],
    patch: kopf.Patch,
    **kwargs: Any,
) -> None:
    """Handle Policy resource reconciliation."""
    _handler.ensure_finalizer(meta, patch)
    _handler.reconcile_with_metrics(
        meta, lambda: _handler.reconcile(body, meta, status, patch, old=kwargs.get("old"))
    )


@kopf.on.delete(API_GROUP_VERSION, KIND_POLICY)
def handle_policy_delete(
    body: dict[str, Any],
    meta: dict[str, Any],
    patch: kopf.Patch,
    **kwargs: Any,
) -> None:
    """Handle Policy resource deletion."""
    _handler.delete(body, meta, patch)
