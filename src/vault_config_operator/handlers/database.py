"""Handlers for the database secret engine CRDs."""

from __future__ import annotations

from typing import Any

import kopf

from ..constants import API_GROUP_VERSION, KIND_DATABASE_SECRET_ENGINE_CONFIG, KIND_DATABASE_SECRET_ENGINE_ROLE
from ..resources.database import DatabaseSecretEngineConfig, DatabaseSecretEngineRole
from .base import BaseHandler
from .shared import drift_check_interval, get_engine

_config_handler = BaseHandler(DatabaseSecretEngineConfig, get_engine)
_role_handler = BaseHandler(DatabaseSecretEngineRole, get_engine)


@kopf.on.create(API_GROUP_VERSION, KIND_DATABASE_SECRET_ENGINE_CONFIG)
@kopf.on.update(API_GROUP_VERSION, KIND_DATABASE_SECRET_ENGINE_CONFIG)
@kopf.on.resume(API_GROUP_VERSION, KIND_DATABASE_SECRET_ENGINE_CONFIG)
@kopf.timer(
    API_GROUP_VERSION,
    KIND_DATABASE_SECRET_ENGINE_CONFIG,
    interval=drift_check_interval(),
    initial_delay=drift_check_interval(),
)
def handle_database_config(
    body: dict[str, Any],
    meta: dict[str, Any],
    status: dict[str, Any],
    patch: kopf.Patch,
    **kwargs: Any,
) -> None:
    """Handle DatabaseSecretEngineConfig resource reconciliation."""
    _config_handler.ensure_finalizer(meta, patch)
    _config_handler.reconcile_with_metrics(
        meta, lambda: _config_handler.reconcile(body, meta, status, patch, old=kwargs.get("old"))
    )


@kopf.on.delete(API_GROUP_VERSION, KIND_DATABASE_SECRET_ENGINE_CONFIG)
def handle_database_config_delete(
    body: dict[str, Any],
    meta: dict[str, Any],
    patch: kopf.Patch,
    **kwargs: Any,
) -> None:
    """Handle DatabaseSecretEngineConfig resource deletion."""
    _config_handler.delete(body, meta, patch)


@kopf.on.create(API_GROUP_VERSION, KIND_DATABASE_SECRET_ENGINE_ROLE)
@kopf.on.update(API_GROUP_VERSION, KIND_DATABASE_SECRET_ENGINE_ROLE)
@kopf.on.resume(API_GROUP_VERSION, KIND_DATABASE_SECRET_ENGINE_ROLE)
@kopf.timer(
    API_GROUP_VERSION,
    KIND_DATABASE_SECRET_ENGINE_ROLE,
    interval=drift_check_interval(),
    initial_delay=drift_check_interval(),
)
def handle_database_role(
    body: dict[str, Any],
    meta: dict[str, Any],
    status: dict[str, Any],
    patch: kopf.Patch,
    **kwargs: Any,
) -> None:
    """Handle DatabaseSecretEngineRole resource reconciliation."""
    _role_handler.ensure_finalizer(meta, patch)
    _role_handler.reconcile_with_metrics(
        meta, lambda: _role_handler.reconcile(body, meta, status, patch, old=kwargs.get("old"))
    )


@kopf.on.delete(API_GROUP_VERSION, KIND_DATABASE_SECRET_ENGINE_ROLE)
def handle_database_role_delete(
    body: dict[str, Any],
    meta: dict[str, Any],
    patch: kopf.Patch,
    **kwargs: Any,
) -> None:
    """Handle DatabaseSecretEngineRole resource deletion."""
    _role_handler.delete(body, meta, patch)
