"""Handler for LDAPAuthEngineConfig CRD."""

from __future__ import annotations

from typing import Any

import kopf

from ..constants import API_GROUP_VERSION, KIND_LDAP_AUTH_ENGINE_CONFIG
from ..resources.ldap import LDAPAuthEngineConfig
from .base import BaseHandler
from .shared import drift_check_interval, get_engine

_handler = BaseHandler(LDAPAuthEngineConfig, get_engine)


@kopf.on.create(API_GROUP_VERSION, KIND_LDAP_AUTH_ENGINE_CONFIG)
@kopf.on.update(API_GROUP_VERSION, KIND_LDAP_AUTH_ENGINE_CONFIG)
@kopf.on.resume(API_GROUP_VERSION, KIND_LDAP_AUTH_ENGINE_CONFIG)
@kopf.timer(
    API_GROUP_VERSION,
    KIND_LDAP_AUTH_ENGINE_CONFIG,
    interval=drift_check_interval(),
    initial_delay=drift_check_interval(),
)
def handle_ldap_config(
    body: dict[str, Any],
    meta: dict[str, Any],
    status: dict[str, Any],
    patch: kopf.Patch,
    **kwargs: Any,
) -> None:
    """Handle LDAPAuthEngineConfig resource reconciliation."""
    _handler.ensure_finalizer(meta, patch)
    _handler.reconcile_with_metrics(
        meta, lambda: _handler.reconcile(body, meta, status, patch, old=kwargs.get("old"))
    )


@kopf.on.delete(API_GROUP_VERSION, KIND_LDAP_AUTH_ENGINE_CONFIG)
def handle_ldap_config_delete(
    body: dict[str, Any],
    meta: dict[str, Any],
    patch: kopf.Patch,
    **kwargs: Any,
) -> None:
    """The LDAP config is left in Vault; only the finalizer is released."""
    _handler.delete(body, meta, patch)
