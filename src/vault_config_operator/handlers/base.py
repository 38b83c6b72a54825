"""Base handler class with common functionality for all CRD handlers."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

import kopf

from .. import metrics
from ..constants import CONTROLLER_NAME, FINALIZER, REASON_CREDENTIAL_NOT_FOUND, REASON_RECONCILE_FAILED
from ..logging import log_resource_event
from ..reconcilers.base import Phase, ReconcileResult, ReconciliationEngine
from ..resources.base import VaultResource
from ..utils.conditions import set_ready_condition, set_validated_condition
from ..utils.errors import (
    CredentialNotFoundError,
    ImmutableFieldError,
    ValidationError,
    sanitize_dict,
    sanitize_exception,
    to_kopf_error,
)
from ..utils.events import (
    emit_reconcile_failed,
    emit_reconcile_started,
    emit_validate_failed,
    emit_validate_succeeded,
    emit_vault_created,
    emit_vault_deleted,
    emit_vault_updated,
)


class BaseHandler:
    """Base class for all CRD handlers with common functionality."""

    def __init__(self, resource_cls: type[VaultResource], engine_factory: Callable[[], ReconciliationEngine]):
        """Initialize base handler.

        Args:
            resource_cls: The resource class this handler reconciles
            engine_factory: Returns the engine used for each pass
        """
        self.resource_cls = resource_cls
        self.kind = resource_cls.kind
        self.engine_factory = engine_factory
        self.logger = logging.getLogger(__name__)

    def _get_resource_context(self, meta: dict[str, Any]) -> dict[str, Any]:
        return {
            "name": meta.get("name", "unknown"),
            "namespace": meta.get("namespace", "default"),
            "uid": meta.get("uid", "unknown"),
        }

    def _log(
        self,
        meta: dict[str, Any],
        message: str,
        event: str,
        reason: str,
        level: int = logging.INFO,
        **kwargs: Any,
    ) -> None:
        ctx = self._get_resource_context(meta)
        log_resource_event(
            self.logger,
            controller=CONTROLLER_NAME,
            resource_kind=self.kind,
            resource_name=ctx["name"],
            namespace=ctx["namespace"],
            uid=ctx["uid"],
            event=event,
            reason=reason,
            message=message,
            level=level,
            **kwargs,
        )

    def log_info(
        self,
        meta: dict[str, Any],
        message: str,
        event: str = "info",
        reason: str = "Info",
        **kwargs: Any,
    ) -> None:
        """Log an info-level structured log message."""
        self._log(meta, message, event, reason, **kwargs)

    def log_warning(
        self,
        meta: dict[str, Any],
        message: str,
        event: str = "warning",
        reason: str = "Warning",
        **kwargs: Any,
    ) -> None:
        """Log a warning-level structured log message."""
        self._log(meta, message, event, reason, logging.WARNING, **kwargs)

    def log_error(
        self,
        meta: dict[str, Any],
        message: str,
        error: Exception | None = None,
        event: str = "error",
        reason: str = "Error",
        **kwargs: Any,
    ) -> None:
        """Log an error-level structured log message.

        Args:
            meta: Kubernetes resource metadata
            message: Log message
            error: Optional exception to include sanitized error details
            event: Event type (default: "error")
            reason: Reason for the event (default: "Error")
            **kwargs: Additional fields to include in the log
        """
        log_data = sanitize_dict(kwargs)
        if error is not None:
            log_data["error"] = sanitize_exception(error)
            log_data["error_type"] = type(error).__name__
        self._log(meta, message, event, reason, logging.ERROR, **log_data)

    def ensure_finalizer(self, meta: dict[str, Any], patch: kopf.Patch) -> None:
        """Ensure finalizer is present in metadata."""
        if not self.resource_cls.is_deletable:
            return
        finalizers = list(meta.get("finalizers", []))
        if FINALIZER not in finalizers:
            finalizers.append(FINALIZER)
            patch.metadata["finalizers"] = finalizers

    def remove_finalizer(self, meta: dict[str, Any], patch: kopf.Patch) -> None:
        """Remove finalizer from metadata."""
        finalizers = list(meta.get("finalizers", []))
        if FINALIZER in finalizers:
            finalizers.remove(FINALIZER)
            patch.metadata["finalizers"] = finalizers if finalizers else None

    def reconcile_with_metrics(
        self,
        meta: dict[str, Any],
        reconcile_fn: Callable[[], None],
    ) -> None:
        """Execute reconciliation with metrics and error handling.

        Args:
            meta: Kubernetes resource metadata
            reconcile_fn: Function to execute for reconciliation
        """
        emit_reconcile_started(meta)
        metrics.reconcile_total.labels(kind=self.kind, result="started").inc()

        start_time = time.time()
        try:
            reconcile_fn()
            metrics.reconcile_total.labels(kind=self.kind, result="success").inc()
        except kopf.TemporaryError:
            metrics.reconcile_total.labels(kind=self.kind, result="retry").inc()
            raise
        except kopf.PermanentError:
            metrics.reconcile_total.labels(kind=self.kind, result="failed").inc()
            raise
        except Exception as e:
            metrics.error_total.labels(kind=self.kind, error_type=type(e).__name__).inc()
            self.log_error(meta, "Reconciliation failed", error=e, reason="ReconciliationFailed")
            emit_reconcile_failed(meta, f"Reconciliation failed: {sanitize_exception(e)}")
            metrics.reconcile_total.labels(kind=self.kind, result="error").inc()
            raise
        finally:
            duration = time.time() - start_time
            metrics.reconcile_duration_seconds.labels(kind=self.kind).observe(duration)

    def update_resource_status(
        self,
        patch: kopf.Patch,
        meta: dict[str, Any],
        ready: bool,
        status_data: dict[str, Any] | None = None,
    ) -> None:
        """Update resource status with common fields."""
        status_update = {
            "observedGeneration": meta.get("generation", 0),
            **(status_data or {}),
        }

        if ready:
            metrics.resource_status_total.labels(kind=self.kind, status="ready").inc()
        else:
            metrics.resource_status_total.labels(kind=self.kind, status="not_ready").inc()

        patch.status.update(status_update)

    def build_conditions(
        self,
        resource: VaultResource,
        result: ReconcileResult,
        conditions: list[dict[str, Any]],
        generation: int,
    ) -> list[dict[str, Any]]:
        """Translate a pass result into status conditions."""
        validated = result.phase is not Phase.UNVALIDATED and not isinstance(result.error, ValidationError)
        conditions = set_validated_condition(
            conditions,
            validated,
            "Spec is valid" if validated else result.message,
            generation,
        )
        reason = None
        if isinstance(result.error, CredentialNotFoundError):
            reason = REASON_CREDENTIAL_NOT_FOUND
        elif result.error is not None:
            reason = REASON_RECONCILE_FAILED
        return set_ready_condition(conditions, result.ready, result.message, generation, reason)

    def emit_result_events(self, resource: VaultResource, result: ReconcileResult) -> None:
        """Emit the Kubernetes events describing a pass result."""
        meta = resource.meta
        if result.phase is Phase.UNVALIDATED or isinstance(result.error, ValidationError):
            emit_validate_failed(meta, result.message)
            return
        emit_validate_succeeded(meta)
        if result.error is not None:
            emit_reconcile_failed(meta, result.message)
        elif result.action == "created":
            emit_vault_created(meta, resource.path)
        elif result.action == "updated":
            emit_vault_updated(meta, resource.path)

    def reconcile(
        self,
        body: dict[str, Any],
        meta: dict[str, Any],
        status: dict[str, Any],
        patch: kopf.Patch,
        old: dict[str, Any] | None = None,
    ) -> ReconcileResult:
        """Run one reconciliation pass and write the outcome to the status.

        Raises:
            kopf.PermanentError: If the spec is invalid
            kopf.TemporaryError: If the pass should be retried
        """
        resource = self.resource_cls(body)
        generation = meta.get("generation", 0)

        try:
            resource.check_immutable((old or {}).get("spec"))
        except ImmutableFieldError as e:
            error = e.with_resource(resource.identity)
            result = ReconcileResult(phase=Phase.UNVALIDATED, action="none", message=str(error), error=error)
        else:
            result = self.engine_factory().reconcile(resource)

        conditions = [dict(c) for c in status.get("conditions", [])]
        conditions = self.build_conditions(resource, result, conditions, generation)
        self.update_resource_status(patch, meta, result.ready, {**result.status, "conditions": conditions})
        self.emit_result_events(resource, result)

        if result.error is not None:
            error_type = type(result.error).__name__
            metrics.error_total.labels(kind=self.kind, error_type=error_type).inc()
            if isinstance(result.error, ValidationError):
                self.log_error(meta, result.message, reason="ValidationFailed", error_type=error_type)
            else:
                self.log_warning(meta, result.message, reason=REASON_RECONCILE_FAILED, error_type=error_type)
            raise to_kopf_error(result.error)

        self.log_info(meta, result.message, event="reconciled", reason=result.action, path=resource.path)
        return result

    def delete(
        self,
        body: dict[str, Any],
        meta: dict[str, Any],
        patch: kopf.Patch,
    ) -> None:
        """Remove the Vault object and release the finalizer once it is gone.

        Raises:
            kopf.TemporaryError: If Vault could not be cleaned up yet
        """
        resource = self.resource_cls(body)
        self.log_info(meta, f"{self.kind} is being deleted", event="deletion", reason="Deletion")

        result = self.engine_factory().delete(resource)
        if result.phase is not Phase.DELETED:
            self.log_error(meta, result.message, error=result.error, reason="DeletionFailed")
            emit_reconcile_failed(meta, result.message)
            raise to_kopf_error(result.error)

        if result.action == "deleted":
            emit_vault_deleted(meta, resource.delete_path)
        self.remove_finalizer(meta, patch)
