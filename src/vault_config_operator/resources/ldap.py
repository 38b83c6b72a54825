"""LDAPAuthEngineConfig: configuration of an LDAP auth mount."""

from __future__ import annotations

from typing import Any

from ..builders.ldap import LDAP_CONFIG_REDACTED, LDAP_CONFIG_TTL_KEYS, build_ldap_config_payload
from ..builders.paths import clean_path
from ..constants import KIND_LDAP_AUTH_ENGINE_CONFIG
from ..models.credentials import ResolvedCredential, parse_credential_reference
from ..utils.durations import normalize_ttls
from ..utils.equivalence import is_equivalent
from ..utils.errors import ValidationError
from .base import PassContext, VaultResource


class LDAPAuthEngineConfig(VaultResource):
    """LDAP auth settings at ``auth/<path>/config``.

    Bind credentials are optional: without a source Vault binds anonymously.
    The config lives as long as the auth mount, so it is never deleted on its own.
    """

    kind = KIND_LDAP_AUTH_ENGINE_CONFIG
    redacted_keys = LDAP_CONFIG_REDACTED
    immutable_fields = ("path",)
    is_deletable = False

    def __init__(self, body: dict[str, Any]) -> None:
        super().__init__(body)
        self.credential: ResolvedCredential | None = None

    @property
    def path(self) -> str:
        return clean_path("auth", self.spec.get("path"), "config")

    def validate(self) -> None:
        super().validate()
        if not self.spec.get("path"):
            raise ValidationError("spec.path is required")
        if not self.spec.get("url"):
            raise ValidationError("spec.url is required")
        parse_credential_reference(self.spec.get("bindCredentials"))

    def prepare(self, ctx: PassContext) -> None:
        self.credential = ctx.resolver.resolve(
            self.spec.get("bindCredentials"),
            self.namespace,
            ctx.vault,
            identity_override=self.spec.get("bindDN"),
            allow_empty=True,
        )

    def payload(self) -> dict[str, Any]:
        if self.credential is None:
            return build_ldap_config_payload(self.spec, self.spec.get("bindDN"), None)
        return build_ldap_config_payload(self.spec, self.credential.identity, self.credential.secret)

    def is_equivalent(self, observed: dict[str, Any] | None) -> bool:
        # A read echoes every config field, set or not
        if observed is None:
            return False
        desired = normalize_ttls(self.desired_state(), LDAP_CONFIG_TTL_KEYS)
        observed = normalize_ttls(observed, LDAP_CONFIG_TTL_KEYS)
        return is_equivalent(desired, observed, self.redacted_keys, desired.keys())
