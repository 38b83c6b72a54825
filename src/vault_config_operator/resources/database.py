"""Database secret engine connection config and roles."""

from __future__ import annotations

from typing import Any

from ..builders.database import (
    DATABASE_CONFIG_REDACTED,
    DATABASE_ROLE_TTL_KEYS,
    build_database_config_payload,
    build_database_config_state,
    build_database_role_payload,
)
from ..builders.paths import clean_path, resolve_name
from ..constants import KIND_DATABASE_SECRET_ENGINE_CONFIG, KIND_DATABASE_SECRET_ENGINE_ROLE
from ..models.credentials import ResolvedCredential, parse_credential_reference
from ..utils.durations import normalize_ttls
from ..utils.equivalence import is_equivalent
from ..utils.errors import ValidationError
from .base import PassContext, VaultResource


class DatabaseSecretEngineConfig(VaultResource):
    """Connection settings of one database, with root credentials from a reference."""

    kind = KIND_DATABASE_SECRET_ENGINE_CONFIG
    redacted_keys = DATABASE_CONFIG_REDACTED
    immutable_fields = ("path",)

    def __init__(self, body: dict[str, Any]) -> None:
        super().__init__(body)
        self.credential: ResolvedCredential | None = None

    @property
    def path(self) -> str:
        return clean_path(self.spec.get("path"), "config", resolve_name(self.spec, self.meta))

    def validate(self) -> None:
        super().validate()
        if not self.spec.get("path"):
            raise ValidationError("spec.path is required")
        if not self.spec.get("pluginName"):
            raise ValidationError("spec.pluginName is required")
        reference = parse_credential_reference(self.spec.get("rootCredentials"))
        if reference.source is None:
            raise ValidationError("spec.rootCredentials must set one of secret, vaultSecret or randomSecret")

    def prepare(self, ctx: PassContext) -> None:
        self.credential = ctx.resolver.resolve(
            self.spec.get("rootCredentials"),
            self.namespace,
            ctx.vault,
            identity_override=self.spec.get("username"),
        )

    def payload(self) -> dict[str, Any]:
        if self.credential is None:
            raise RuntimeError("root credentials have not been resolved")
        return build_database_config_payload(self.spec, self.credential.identity or "", self.credential.secret)

    def desired_state(self) -> dict[str, Any]:
        return build_database_config_state(self.payload())

    def is_equivalent(self, observed: dict[str, Any] | None) -> bool:
        if observed is None:
            return False
        desired = self.desired_state()
        details = desired.pop("connection_details")
        return is_equivalent(desired, observed, compared_keys=desired.keys()) and is_equivalent(
            details, observed.get("connection_details") or {}, compared_keys=details.keys()
        )


class DatabaseSecretEngineRole(VaultResource):
    kind = KIND_DATABASE_SECRET_ENGINE_ROLE
    immutable_fields = ("path",)

    @property
    def path(self) -> str:
        return clean_path(self.spec.get("path"), "roles", resolve_name(self.spec, self.meta))

    def validate(self) -> None:
        super().validate()
        if not self.spec.get("path"):
            raise ValidationError("spec.path is required")
        if not self.spec.get("dBName"):
            raise ValidationError("spec.dBName is required")

    def payload(self) -> dict[str, Any]:
        return build_database_role_payload(self.spec)

    def is_equivalent(self, observed: dict[str, Any] | None) -> bool:
        if observed is None:
            return False
        desired = normalize_ttls(self.desired_state(), DATABASE_ROLE_TTL_KEYS)
        observed = normalize_ttls(observed, DATABASE_ROLE_TTL_KEYS)
        return is_equivalent(desired, observed, compared_keys=desired.keys())
