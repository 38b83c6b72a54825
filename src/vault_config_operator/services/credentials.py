"""Resolution of credential references into identity/secret pairs."""

from __future__ import annotations

import logging
from typing import Any

from ..builders.paths import clean_path, resolve_name
from ..builders.random_secret import unwrap_kv_data
from ..constants import PLURAL_RANDOM_SECRET
from ..models.credentials import (
    CredentialReference,
    LocalSecretSource,
    RandomSecretSource,
    ResolvedCredential,
    VaultSecretSource,
    parse_credential_reference,
)
from ..utils.errors import CredentialNotFoundError, ValidationError
from .clients import Clients
from .vault.base import VaultService

logger = logging.getLogger(__name__)


class CredentialResolver:
    """Turns a credential reference into a ResolvedCredential.

    Every call looks the sources up again; nothing is cached between passes.
    """

    def __init__(self, clients: Clients) -> None:
        self.clients = clients

    def resolve(
        self,
        reference: CredentialReference | dict[str, Any] | None,
        namespace: str,
        vault: VaultService,
        identity_override: str | None = None,
        allow_empty: bool = False,
    ) -> ResolvedCredential | None:
        """Resolve a credential reference.

        Args:
            reference: Parsed reference, or the raw spec section holding it
            namespace: Namespace of the resource that owns the reference
            vault: Authenticated Vault session of the current pass
            identity_override: Identity from the spec, wins over the source's username
            allow_empty: Whether zero sources is acceptable for this kind

        Returns:
            The resolved credential, or None when no source is set and allow_empty

        Raises:
            MultipleCredentialSourcesError: If more than one source is set
            ValidationError: If no source is set (and not allow_empty), or a
                RandomSecret source has no identity override
            CredentialNotFoundError: If any referenced object or key is missing
        """
        if not isinstance(reference, CredentialReference):
            reference = parse_credential_reference(reference)

        source = reference.source
        if source is None:
            if allow_empty:
                return None
            raise ValidationError("one of secret, vaultSecret or randomSecret must be specified")

        if isinstance(source, RandomSecretSource):
            return self._from_random_secret(source, namespace, vault, identity_override)
        if isinstance(source, LocalSecretSource):
            data = self.clients.object_store.read_secret(namespace, source.name)
            if data is None:
                raise CredentialNotFoundError(f"secret {namespace}/{source.name} not found")
            return self._from_map(data, reference, identity_override, f"secret {namespace}/{source.name}")
        if isinstance(source, VaultSecretSource):
            data = unwrap_kv_data(vault.read(source.path))
            if data is None:
                raise CredentialNotFoundError(f"no Vault secret found at {source.path}")
            return self._from_map(data, reference, identity_override, f"Vault secret {source.path}")
        raise ValidationError(f"unsupported credential source {type(source).__name__}")

    def _from_map(
        self,
        data: dict[str, Any],
        reference: CredentialReference,
        identity_override: str | None,
        location: str,
    ) -> ResolvedCredential:
        if reference.password_key not in data:
            raise CredentialNotFoundError(f"key '{reference.password_key}' not found in {location}")
        identity = identity_override
        if not identity:
            if reference.username_key not in data:
                raise CredentialNotFoundError(f"key '{reference.username_key}' not found in {location}")
            identity = str(data[reference.username_key])
        return ResolvedCredential(identity=identity, secret=str(data[reference.password_key]))

    def _from_random_secret(
        self,
        source: RandomSecretSource,
        namespace: str,
        vault: VaultService,
        identity_override: str | None,
    ) -> ResolvedCredential:
        # A generated secret has no username of its own
        if not identity_override:
            raise ValidationError("a username must be set in the spec when using randomSecret")

        random_secret = self.clients.object_store.get_custom_object(namespace, PLURAL_RANDOM_SECRET, source.name)
        if random_secret is None:
            raise CredentialNotFoundError(f"RandomSecret {namespace}/{source.name} not found")

        spec = random_secret.get("spec", {})
        path = clean_path(spec.get("path"), resolve_name(spec, random_secret.get("metadata", {})))
        secret_key = spec.get("secretKey", "password")

        data = unwrap_kv_data(vault.read(path))
        if data is None or secret_key not in data:
            raise CredentialNotFoundError(
                f"RandomSecret {namespace}/{source.name} has not generated key '{secret_key}' at {path} yet"
            )
        logger.debug(f"Resolved credential from RandomSecret {namespace}/{source.name}")
        return ResolvedCredential(identity=identity_override, secret=str(data[secret_key]))
