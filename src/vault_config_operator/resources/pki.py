"""PKISecretEngineConfig: a root or intermediate certificate authority."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..builders.paths import clean_path
from ..builders.pki import (
    build_config_crl_payload,
    build_config_urls_payload,
    build_generate_payload,
)
from ..constants import DEFAULT_CERTIFICATE_KEY, KIND_PKI_SECRET_ENGINE_CONFIG
from ..reconcilers.pki import PKILifecycleController
from ..utils.errors import ImmutableFieldError, ValidationError
from .base import PassContext, VaultResource

if TYPE_CHECKING:
    from ..reconcilers.base import ReconciliationEngine

CA_TYPES = ("root", "intermediate")
PRIVATE_KEY_TYPES = ("internal", "exported")


class PKISecretEngineConfig(VaultResource):
    """A CA living in the PKI engine mounted at ``spec.path``."""

    kind = KIND_PKI_SECRET_ENGINE_CONFIG
    immutable_fields = ("path", "type", "privateKeyType")

    @property
    def ca_type(self) -> str:
        return self.spec.get("type") or "root"

    @property
    def private_key_type(self) -> str:
        return self.spec.get("privateKeyType") or "internal"

    @property
    def exports_private_key(self) -> bool:
        return self.private_key_type == "exported"

    @property
    def internal_signer(self) -> str | None:
        return (self.spec.get("internalSign") or {}).get("name") or None

    @property
    def external_sign_secret(self) -> str | None:
        return (self.spec.get("externalSignSecret") or {}).get("name") or None

    @property
    def certificate_key(self) -> str:
        return self.spec.get("certificateKey") or DEFAULT_CERTIFICATE_KEY

    @property
    def path(self) -> str:
        return clean_path(self.spec.get("path"))

    @property
    def delete_path(self) -> str:
        return clean_path(self.path, "root")

    @property
    def generate_path(self) -> str:
        return clean_path(self.path, self.ca_type, "generate", self.private_key_type)

    @property
    def config_urls_path(self) -> str:
        return clean_path(self.path, "config/urls")

    @property
    def config_crl_path(self) -> str:
        return clean_path(self.path, "config/crl")

    @property
    def issuers_path(self) -> str:
        return clean_path(self.path, "issuers")

    @property
    def set_signed_path(self) -> str:
        return clean_path(self.path, "intermediate/set-signed")

    def validate(self) -> None:
        super().validate()
        if not self.path:
            raise ValidationError("spec.path is required")
        if self.ca_type not in CA_TYPES:
            raise ValidationError(f"spec.type must be one of {', '.join(CA_TYPES)}")
        if self.private_key_type not in PRIVATE_KEY_TYPES:
            raise ValidationError(f"spec.privateKeyType must be one of {', '.join(PRIVATE_KEY_TYPES)}")
        if not self.spec.get("commonName"):
            raise ValidationError("spec.commonName is required")
        if self.internal_signer and self.external_sign_secret:
            raise ValidationError("only one of internalSign or externalSignSecret can be specified")
        if self.ca_type == "root" and (self.internal_signer or self.external_sign_secret):
            raise ValidationError("a root CA cannot set internalSign or externalSignSecret")
        self.check_recorded_identity()

    def check_recorded_identity(self) -> None:
        """Compare type and key mode with what the CA was generated as.

        Raises:
            ImmutableFieldError: If either changed after generation
        """
        recorded_type = self.status.get("observedType")
        recorded_key_type = self.status.get("observedPrivateKeyType")
        if recorded_type and recorded_type != self.ca_type:
            raise ImmutableFieldError("spec.type cannot be changed after creation")
        if recorded_key_type and recorded_key_type != self.private_key_type:
            raise ImmutableFieldError("spec.privateKeyType cannot be changed after creation")

    def payload(self) -> dict[str, Any]:
        return build_generate_payload(self.spec)

    def config_urls_payload(self) -> dict[str, Any]:
        return build_config_urls_payload(self.spec)

    def config_crl_payload(self) -> dict[str, Any]:
        return build_config_crl_payload(self.spec)

    def synchronize(self, engine: ReconciliationEngine, ctx: PassContext) -> str:
        return PKILifecycleController(ctx).run(self)
