"""Typed views over custom resource specs and status."""

from .connection import AuthConfig, ConnectionConfig, TLSConfig
from .credentials import (
    CredentialReference,
    LocalSecretSource,
    RandomSecretSource,
    ResolvedCredential,
    VaultSecretSource,
    parse_credential_reference,
)
from .pki import CALifecycle, CAState, IntermediateArtifact

__all__ = [
    "AuthConfig",
    "ConnectionConfig",
    "TLSConfig",
    "CredentialReference",
    "LocalSecretSource",
    "RandomSecretSource",
    "ResolvedCredential",
    "VaultSecretSource",
    "parse_credential_reference",
    "CALifecycle",
    "CAState",
    "IntermediateArtifact",
]
