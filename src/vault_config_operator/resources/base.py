"""Common contract implemented by every Vault-backed resource kind."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..models.connection import AuthConfig, ConnectionConfig
from ..utils.equivalence import is_equivalent
from ..utils.errors import ImmutableFieldError, ValidationError

if TYPE_CHECKING:
    from ..reconcilers.base import ReconciliationEngine
    from ..services.clients import Clients
    from ..services.credentials import CredentialResolver
    from ..services.vault.base import VaultService


@dataclass
class PassContext:
    """Everything one reconciliation pass may touch."""

    vault: VaultService
    clients: Clients
    resolver: CredentialResolver


class VaultResource:
    """A custom resource whose desired state lives at one Vault path.

    Subclasses provide ``path`` and ``payload()``; both must be pure
    functions of the spec plus whatever ``prepare()`` resolved.
    """

    kind = ""
    # Payload keys Vault never returns, dropped on both sides of a comparison
    redacted_keys: tuple[str, ...] = ()
    # When set, only these keys take part in a comparison
    compared_keys: tuple[str, ...] | None = None
    # Spec fields that may not change once the resource exists
    immutable_fields: tuple[str, ...] = ()
    is_deletable = True

    def __init__(self, body: dict[str, Any]) -> None:
        self.body = body
        self.meta: dict[str, Any] = body.get("metadata", {})
        self.spec: dict[str, Any] = body.get("spec") or {}
        self.status: dict[str, Any] = body.get("status") or {}
        self.name: str = self.meta.get("name", "")
        self.namespace: str = self.meta.get("namespace", "default")
        self.auth = AuthConfig.from_spec(self.spec.get("authentication"))
        # Fields the pass wants written back to the resource status
        self.status_updates: dict[str, Any] = {}

    @property
    def identity(self) -> str:
        """Human readable identity used to prefix errors."""
        return f"{self.kind} {self.namespace}/{self.name}"

    @property
    def connection(self) -> ConnectionConfig:
        return ConnectionConfig.from_spec(self.spec.get("connection"))

    @property
    def path(self) -> str:
        raise NotImplementedError

    @property
    def delete_path(self) -> str:
        return self.path

    def payload(self) -> dict[str, Any]:
        raise NotImplementedError

    def desired_state(self) -> dict[str, Any]:
        """The map a read of ``path`` returns once the payload is applied."""
        return self.payload()

    def validate(self) -> None:
        """Check the spec without touching any remote system.

        Raises:
            ValidationError: If the spec cannot be reconciled as written
        """
        self.validate_connection()

    def validate_connection(self) -> None:
        """Check the settings needed to open a Vault session.

        Raises:
            ValidationError: If the role or connection settings are unusable
        """
        if not self.auth.role:
            raise ValidationError("authentication.role is required")
        try:
            connection = self.connection
        except ValueError as e:
            raise ValidationError(f"invalid connection settings: {e}") from e
        if not connection.address:
            raise ValidationError("no Vault address configured")

    def check_immutable(self, old_spec: dict[str, Any] | None) -> None:
        """Reject changes to immutable spec fields against a previous spec.

        Raises:
            ImmutableFieldError: If an immutable field changed
        """
        if not old_spec:
            return
        for field in self.immutable_fields:
            if old_spec.get(field) != self.spec.get(field):
                raise ImmutableFieldError(f"spec.{field} cannot be changed after creation")

    def prepare(self, ctx: PassContext) -> None:
        """Resolve anything the payload needs from outside the spec."""

    def is_equivalent(self, observed: dict[str, Any] | None) -> bool:
        return is_equivalent(self.desired_state(), observed, self.redacted_keys, self.compared_keys)

    def read_current(self, vault: VaultService) -> dict[str, Any] | None:
        return vault.read(self.path)

    def create(self, vault: VaultService) -> None:
        vault.write(self.path, self.payload())

    def update(self, vault: VaultService) -> None:
        vault.write(self.path, self.payload())

    def delete_remote(self, vault: VaultService) -> None:
        vault.delete(self.delete_path)

    def synchronize(self, engine: ReconciliationEngine, ctx: PassContext) -> str:
        """Bring Vault to the desired state and return the action taken."""
        return engine.create_or_update(self, ctx)
