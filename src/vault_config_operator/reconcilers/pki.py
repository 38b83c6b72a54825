"""Certificate authority lifecycle: generate, export, sign, configure."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .. import metrics
from ..builders.paths import clean_path
from ..builders.pki import (
    build_exported_secret_data,
    build_set_signed_payload,
    build_sign_intermediate_payload,
)
from ..constants import KIND_PKI_SECRET_ENGINE_CONFIG, LABEL_PKI_SECRET, PLURAL_PKI_SECRET_ENGINE_CONFIG
from ..models.pki import CALifecycle, CAState, IntermediateArtifact
from ..tracing import trace_span
from ..utils.equivalence import is_equivalent
from ..utils.errors import AwaitingExternalInputError, CredentialNotFoundError, ValidationError
from ..utils.secrets import owner_reference

if TYPE_CHECKING:
    from ..resources.base import PassContext
    from ..resources.pki import PKISecretEngineConfig

logger = logging.getLogger(__name__)


class PKILifecycleController:
    """Drives one PKISecretEngineConfig through its lifecycle.

    Every step is persisted into ``resource.status_updates`` as soon as it
    completes, so a pass that stops half way resumes from the last finished
    step instead of generating a second CA.
    """

    def __init__(self, ctx: PassContext) -> None:
        self.ctx = ctx

    def run(self, resource: PKISecretEngineConfig) -> str:
        lifecycle = CALifecycle.from_status(resource.status)
        artifact = IntermediateArtifact()
        action = "unchanged"

        if not lifecycle.generated and not self._adopt_existing(resource, lifecycle, artifact):
            with trace_span("pki_generate", kind=KIND_PKI_SECRET_ENGINE_CONFIG):
                self._generate(resource, lifecycle, artifact)
            action = "created"

        if not lifecycle.signed:
            with trace_span("pki_sign", kind=KIND_PKI_SECRET_ENGINE_CONFIG):
                self._sign(resource, lifecycle, artifact)
            action = "created" if action == "created" else "updated"

        config_changed = self._sync_config(resource)
        if config_changed and action == "unchanged":
            action = "updated"
        return action

    def _record(self, resource: PKISecretEngineConfig, lifecycle: CALifecycle) -> None:
        resource.status_updates.update(lifecycle.to_status())
        metrics.ca_transitions_total.labels(ca_type=resource.ca_type, state=lifecycle.state.value).inc()

    def _adopt_existing(
        self,
        resource: PKISecretEngineConfig,
        lifecycle: CALifecycle,
        artifact: IntermediateArtifact,
    ) -> bool:
        """Pick up a CA generated by a pass whose status never got persisted.

        An installed issuer means the CA is complete. An intermediate whose
        companion secret holds a CSR was generated but not yet signed.

        Returns:
            True if generation must be skipped
        """
        companion = None
        if resource.exports_private_key or resource.ca_type == "intermediate":
            companion = self.ctx.clients.object_store.read_secret(resource.namespace, resource.name)
        exported = bool(companion and companion.get("private_key"))

        if self.ctx.vault.list(resource.issuers_path):
            lifecycle.mark_generated(exported)
            lifecycle.mark_signed()
        elif resource.ca_type == "intermediate" and companion and companion.get("csr"):
            lifecycle.mark_generated(exported)
            artifact.csr = companion["csr"]
        else:
            return False

        resource.status_updates["observedType"] = resource.ca_type
        resource.status_updates["observedPrivateKeyType"] = resource.private_key_type
        self._record(resource, lifecycle)
        logger.info(f"Found existing {resource.ca_type} CA at {resource.path}, skipping generation")
        return True

    def _generate(
        self,
        resource: PKISecretEngineConfig,
        lifecycle: CALifecycle,
        artifact: IntermediateArtifact,
    ) -> None:
        data = self.ctx.vault.write(resource.generate_path, resource.payload()) or {}
        exported = resource.exports_private_key

        # Intermediates always keep their CSR so a resumed pass can still sign it
        if exported or resource.ca_type == "intermediate":
            self.ctx.clients.object_store.create_secret(
                resource.namespace,
                resource.name,
                build_exported_secret_data(resource.ca_type, data, exported),
                owner_references=[owner_reference(resource.body)],
                labels={LABEL_PKI_SECRET: resource.name},
                immutable=True,
            )

        lifecycle.mark_generated(exported)
        resource.status_updates["observedType"] = resource.ca_type
        resource.status_updates["observedPrivateKeyType"] = resource.private_key_type
        artifact.csr = data.get("csr")
        logger.info(f"Generated {resource.ca_type} CA at {resource.generate_path}")

        if resource.ca_type == "root":
            lifecycle.mark_signed()
        self._record(resource, lifecycle)

    def _sign(
        self,
        resource: PKISecretEngineConfig,
        lifecycle: CALifecycle,
        artifact: IntermediateArtifact,
    ) -> None:
        try:
            if resource.internal_signer:
                artifact.certificate = self._sign_internally(resource, artifact)
            else:
                artifact.certificate = self._read_external_certificate(resource)
        except AwaitingExternalInputError:
            if lifecycle.state is not CAState.AWAITING_SIGNATURE:
                lifecycle.mark_awaiting_signature()
                self._record(resource, lifecycle)
            raise

        self.ctx.vault.write(resource.set_signed_path, build_set_signed_payload(artifact.certificate))
        lifecycle.mark_signed()
        self._record(resource, lifecycle)
        logger.info(f"Installed signed intermediate certificate at {resource.set_signed_path}")

    def _csr(self, resource: PKISecretEngineConfig, artifact: IntermediateArtifact) -> str:
        if artifact.csr:
            return artifact.csr
        data = self.ctx.clients.object_store.read_secret(resource.namespace, resource.name)
        if not data or not data.get("csr"):
            raise CredentialNotFoundError(
                f"CSR secret {resource.namespace}/{resource.name} not found, cannot resume signing"
            )
        artifact.csr = data["csr"]
        return artifact.csr

    def _signer_path(self, resource: PKISecretEngineConfig) -> str:
        signer_name = resource.internal_signer
        signer = self.ctx.clients.object_store.get_custom_object(
            resource.namespace, PLURAL_PKI_SECRET_ENGINE_CONFIG, signer_name
        )
        if signer is None:
            raise AwaitingExternalInputError(
                f"signing CA {KIND_PKI_SECRET_ENGINE_CONFIG} {resource.namespace}/{signer_name} not found"
            )
        signer_spec = signer.get("spec", {})
        if (signer_spec.get("type") or "root") != "root":
            raise ValidationError(f"internalSign must reference a root CA, {signer_name} is an intermediate")
        if not CALifecycle.from_status(signer.get("status")).signed:
            raise AwaitingExternalInputError(f"signing CA {signer_name} has not been generated yet")
        return clean_path(signer_spec.get("path"), "root/sign-intermediate")

    def _sign_internally(self, resource: PKISecretEngineConfig, artifact: IntermediateArtifact) -> str:
        sign_path = self._signer_path(resource)
        csr = self._csr(resource, artifact)
        data = self.ctx.vault.write(sign_path, build_sign_intermediate_payload(resource.spec, csr)) or {}
        certificate = data.get("certificate")
        if not certificate:
            raise AwaitingExternalInputError(f"{sign_path} returned no certificate")
        return str(certificate)

    def _read_external_certificate(self, resource: PKISecretEngineConfig) -> str:
        secret_name = resource.external_sign_secret
        if not secret_name:
            raise AwaitingExternalInputError("waiting for spec.externalSignSecret with the signed certificate")
        data = self.ctx.clients.object_store.read_secret(resource.namespace, secret_name)
        if data is None or not data.get(resource.certificate_key):
            raise AwaitingExternalInputError(
                f"waiting for key '{resource.certificate_key}' in secret {resource.namespace}/{secret_name}"
            )
        return data[resource.certificate_key]

    def _sync_config(self, resource: PKISecretEngineConfig) -> bool:
        changed = False
        for path, payload in (
            (resource.config_urls_path, resource.config_urls_payload()),
            (resource.config_crl_path, resource.config_crl_payload()),
        ):
            current = self.ctx.vault.read(path)
            if not is_equivalent(payload, current, compared_keys=payload.keys()):
                self.ctx.vault.write(path, payload)
                changed = True
        return changed
