"""Generic desired-state reconciliation of Vault-backed resources."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .. import metrics
from ..resources.base import PassContext, VaultResource
from ..services.clients import Clients
from ..services.credentials import CredentialResolver
from ..tracing import add_span_attribute, trace_span
from ..utils.equivalence import changed_keys
from ..utils.errors import OperatorError, ValidationError

logger = logging.getLogger(__name__)

_pass_locks: dict[str, threading.Lock] = {}
_pass_locks_guard = threading.Lock()


def pass_lock(resource: VaultResource) -> threading.Lock:
    """Return the lock serialising passes on one object.

    Change handlers and drift timers run on separate executor threads.
    """
    key = resource.meta.get("uid") or resource.identity
    with _pass_locks_guard:
        return _pass_locks.setdefault(key, threading.Lock())


def release_pass_lock(resource: VaultResource) -> None:
    with _pass_locks_guard:
        _pass_locks.pop(resource.meta.get("uid") or resource.identity, None)


class Phase(str, Enum):
    """Where a resource got to in one pass."""

    UNVALIDATED = "Unvalidated"
    PREPARED = "Prepared"
    SYNCED = "Synced"
    DELETING = "Deleting"
    DELETED = "Deleted"


@dataclass
class ReconcileResult:
    """Outcome of one pass, handed to the handler for status reporting."""

    phase: Phase
    action: str
    message: str
    status: dict[str, Any] = field(default_factory=dict)
    error: OperatorError | None = None

    @property
    def ready(self) -> bool:
        return self.error is None and self.phase in (Phase.SYNCED, Phase.DELETED)


class ReconciliationEngine:
    """Runs validate, login, resolve, read, compare and write for a resource.

    Operator errors never escape ``reconcile``/``delete``; they are returned
    on the result, already prefixed with the resource identity.
    """

    def __init__(self, clients: Clients, resolver: CredentialResolver | None = None) -> None:
        self.clients = clients
        self.resolver = resolver or CredentialResolver(clients)

    def open_session(self, resource: VaultResource) -> PassContext:
        """Log in to Vault as the resource's service account."""
        vault = self.clients.connector.login(resource.connection, resource.auth, resource.namespace)
        return PassContext(vault=vault, clients=self.clients, resolver=self.resolver)

    def _failed(self, resource: VaultResource, phase: Phase, error: OperatorError) -> ReconcileResult:
        error = error.with_resource(resource.identity)
        logger.warning(f"{phase.value}: {error}")
        return ReconcileResult(
            phase=phase,
            action="none",
            message=str(error),
            status=dict(resource.status_updates),
            error=error,
        )

    def reconcile(self, resource: VaultResource) -> ReconcileResult:
        """Bring the Vault object behind ``resource`` to its desired state."""
        with pass_lock(resource):
            return self._reconcile(resource)

    def _reconcile(self, resource: VaultResource) -> ReconcileResult:
        with trace_span("reconcile", kind=resource.kind, attributes={"resource.name": resource.name}):
            try:
                resource.validate()
            except ValidationError as e:
                return self._failed(resource, Phase.UNVALIDATED, e)

            try:
                ctx = self.open_session(resource)
                resource.prepare(ctx)
                action = resource.synchronize(self, ctx)
            except OperatorError as e:
                return self._failed(resource, Phase.PREPARED, e)

            add_span_attribute("reconcile.action", action)
            return ReconcileResult(
                phase=Phase.SYNCED,
                action=action,
                message=f"{resource.kind} is in sync with Vault",
                status=dict(resource.status_updates),
            )

    def create_or_update(self, resource: VaultResource, ctx: PassContext) -> str:
        """Create the object if absent, update it if it drifted.

        Returns:
            "created", "updated" or "unchanged"
        """
        current = resource.read_current(ctx.vault)
        if current is None:
            resource.create(ctx.vault)
            logger.info(f"Created {resource.identity} at {resource.path}")
            return "created"

        if not resource.is_equivalent(current):
            drifted = changed_keys(resource.desired_state(), current, resource.redacted_keys)
            metrics.drift_detected_total.labels(kind=resource.kind).inc()
            logger.info(f"Updating {resource.identity} at {resource.path}, drifted keys: {drifted}")
            resource.update(ctx.vault)
            return "updated"

        return "unchanged"

    def delete(self, resource: VaultResource) -> ReconcileResult:
        """Remove the Vault object behind ``resource`` if the kind owns it."""
        with pass_lock(resource):
            result = self._delete(resource)
        if result.phase is Phase.DELETED:
            release_pass_lock(resource)
        return result

    def _delete(self, resource: VaultResource) -> ReconcileResult:
        if not resource.is_deletable:
            return ReconcileResult(
                phase=Phase.DELETED,
                action="skipped",
                message=f"{resource.kind} is not deleted from Vault",
            )

        try:
            resource.validate_connection()
        except ValidationError as e:
            # Without a usable connection there is no Vault session to delete through
            logger.warning(f"Releasing {resource.identity} without deleting from Vault: {e}")
            return ReconcileResult(phase=Phase.DELETED, action="skipped", message=str(e))

        with trace_span("delete", kind=resource.kind, attributes={"resource.name": resource.name}):
            try:
                ctx = self.open_session(resource)
                resource.delete_remote(ctx.vault)
            except OperatorError as e:
                return self._failed(resource, Phase.DELETING, e)

        logger.info(f"Deleted {resource.identity} at {resource.delete_path}")
        return ReconcileResult(
            phase=Phase.DELETED,
            action="deleted",
            message=f"{resource.kind} removed from Vault",
        )
