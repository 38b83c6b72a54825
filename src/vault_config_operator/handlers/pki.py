"""Handler for PKISecretEngineConfig CRD."""

from __future__ import annotations

from typing import Any

import kopf

from ..constants import API_GROUP_VERSION, KIND_PKI_SECRET_ENGINE_CONFIG, REASON_AWAITING_SIGNATURE
from ..models.pki import CALifecycle, CAState
from ..reconcilers.base import ReconcileResult
from ..resources.base import VaultResource
from ..resources.pki import PKISecretEngineConfig
from ..utils.conditions import set_ready_condition, set_signed_condition
from ..utils.errors import AwaitingExternalInputError
from ..utils.events import emit_awaiting_signature, emit_ca_generated, emit_ca_signed
from .base import BaseHandler
from .shared import drift_check_interval, get_engine


class PKIHandler(BaseHandler):
    """Adds the Signed condition and CA lifecycle events."""

    def build_conditions(
        self,
        resource: VaultResource,
        result: ReconcileResult,
        conditions: list[dict[str, Any]],
        generation: int,
    ) -> list[dict[str, Any]]:
        conditions = super().build_conditions(resource, result, conditions, generation)
        lifecycle = CALifecycle.from_status({**resource.status, **result.status})
        if lifecycle.signed:
            conditions = set_signed_condition(conditions, True, "Certificate authority is signed", generation)
        elif lifecycle.generated:
            conditions = set_signed_condition(conditions, False, result.message, generation)
        if isinstance(result.error, AwaitingExternalInputError):
            conditions = set_ready_condition(
                conditions, False, result.message, generation, REASON_AWAITING_SIGNATURE
            )
        return conditions

    def emit_result_events(self, resource: PKISecretEngineConfig, result: ReconcileResult) -> None:  # type: ignore[override]
        super().emit_result_events(resource, result)
        before = CALifecycle.from_status(resource.status)
        after = CALifecycle.from_status({**resource.status, **result.status})
        if after.generated and not before.generated:
            emit_ca_generated(resource.meta, resource.ca_type)
        if after.signed and not before.signed:
            emit_ca_signed(resource.meta, resource.ca_type)
        if after.state is CAState.AWAITING_SIGNATURE and before.state is not CAState.AWAITING_SIGNATURE:
            emit_awaiting_signature(
                resource.meta, resource.external_sign_secret or resource.internal_signer or resource.name
            )


_handler = PKIHandler(PKISecretEngineConfig, get_engine)


# The timer resumes CAs that are waiting for a signature
@kopf.on.create(API_GROUP_VERSION, KIND_PKI_SECRET_ENGINE_CONFIG)
@kopf.on.update(API_GROUP_VERSION, KIND_PKI_SECRET_ENGINE_CONFIG)
@kopf.on.resume(API_GROUP_VERSION, KIND_PKI_SECRET_ENGINE_CONFIG)
@kopf.timer(
    API_GROUP_VERSION,
    KIND_PKI_SECRET_ENGINE_CONFIG,
    interval=drift_check_interval(),
    initial_delay=drift_check_interval(),
)
def handle_pki_config(
    body: dict[str, Any],
    meta: dict[str, Any],
    status: dict[str, Any],
    patch: kopf.Patch,
    **kwargs: Any,
) -> None:
    """Handle PKISecretEngineConfig resource reconciliation."""
    _handler.ensure_finalizer(meta, patch)
    _handler.reconcile_with_metrics(
        meta, lambda: _handler.reconcile(body, meta, status, patch, old=kwargs.get("old"))
    )


@kopf.on.delete(API_GROUP_VERSION, KIND_PKI_SECRET_ENGINE_CONFIG)
def handle_pki_config_delete(
    body: dict[str, Any],
    meta: dict[str, Any],
    patch: kopf.Patch,
    **kwargs: Any,
) -> None:
    """Delete the CA from its PKI engine."""
    _handler.delete(body, meta, patch)
