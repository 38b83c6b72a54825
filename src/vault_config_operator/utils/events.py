"""Utilities for emitting Kubernetes events."""

from __future__ import annotations

from typing import Any

import kopf

from ..constants import (
    EVENT_REASON_AWAITING_SIGNATURE,
    EVENT_REASON_CA_GENERATED,
    EVENT_REASON_CA_SIGNED,
    EVENT_REASON_RECONCILE_FAILED,
    EVENT_REASON_RECONCILE_STARTED,
    EVENT_REASON_VALIDATE_FAILED,
    EVENT_REASON_VALIDATE_SUCCEEDED,
    EVENT_REASON_VAULT_CREATED,
    EVENT_REASON_VAULT_DELETED,
    EVENT_REASON_VAULT_UPDATED,
)


def emit_event(
    meta: dict[str, Any],
    reason: str,
    message: str,
    type_: str = "Normal",
) -> None:
    """Emit a Kubernetes event.

    Args:
        meta: Resource metadata
        reason: Event reason
        message: Event message
        type_: Event type (Normal or Warning)
    """
    kopf.event(
        meta,
        reason=reason,
        message=message,
        type=type_,
    )


def emit_reconcile_started(meta: dict[str, Any]) -> None:
    """Emit reconcile started event."""
    emit_event(meta, EVENT_REASON_RECONCILE_STARTED, "Reconciliation started")


def emit_reconcile_failed(meta: dict[str, Any], message: str) -> None:
    """Emit reconcile failed event."""
    emit_event(meta, EVENT_REASON_RECONCILE_FAILED, message, type_="Warning")


def emit_validate_succeeded(meta: dict[str, Any]) -> None:
    """Emit validation succeeded event."""
    emit_event(meta, EVENT_REASON_VALIDATE_SUCCEEDED, "Validation succeeded")


def emit_validate_failed(meta: dict[str, Any], message: str) -> None:
    """Emit validation failed event."""
    emit_event(meta, EVENT_REASON_VALIDATE_FAILED, message, type_="Warning")


def emit_vault_created(meta: dict[str, Any], path: str) -> None:
    """Emit Vault object created event."""
    emit_event(meta, EVENT_REASON_VAULT_CREATED, f"Vault object {path} created")


def emit_vault_updated(meta: dict[str, Any], path: str) -> None:
    """Emit Vault object updated event."""
    emit_event(meta, EVENT_REASON_VAULT_UPDATED, f"Vault object {path} updated")


def emit_vault_deleted(meta: dict[str, Any], path: str) -> None:
    """Emit Vault object deleted event."""
    emit_event(meta, EVENT_REASON_VAULT_DELETED, f"Vault object {path} deleted")


def emit_ca_generated(meta: dict[str, Any], ca_type: str) -> None:
    """Emit certificate authority generated event."""
    emit_event(meta, EVENT_REASON_CA_GENERATED, f"{ca_type} certificate authority generated")


def emit_ca_signed(meta: dict[str, Any], ca_type: str) -> None:
    """Emit certificate authority signed event."""
    emit_event(meta, EVENT_REASON_CA_SIGNED, f"{ca_type} certificate authority signed")


def emit_awaiting_signature(meta: dict[str, Any], secret_name: str) -> None:
    """Emit awaiting external signature event."""
    emit_event(
        meta,
        EVENT_REASON_AWAITING_SIGNATURE,
        f"Waiting for signed certificate in secret {secret_name}",
    )
