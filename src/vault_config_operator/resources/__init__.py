"""Vault-backed resource kinds."""

from ..constants import (
    KIND_DATABASE_SECRET_ENGINE_CONFIG,
    KIND_DATABASE_SECRET_ENGINE_ROLE,
    KIND_LDAP_AUTH_ENGINE_CONFIG,
    KIND_PKI_SECRET_ENGINE_CONFIG,
    KIND_POLICY,
    KIND_RANDOM_SECRET,
    KIND_SECRET_ENGINE_MOUNT,
)
from .base import PassContext, VaultResource
from .database import DatabaseSecretEngineConfig, DatabaseSecretEngineRole
from .ldap import LDAPAuthEngineConfig
from .mount import SecretEngineMount
from .pki import PKISecretEngineConfig
from .policy import Policy
from .random_secret import RandomSecret

RESOURCE_KINDS: dict[str, type[VaultResource]] = {
    KIND_SECRET_ENGINE_MOUNT: SecretEngineMount,
    KIND_POLICY: Policy,
    KIND_DATABASE_SECRET_ENGINE_CONFIG: DatabaseSecretEngineConfig,
    KIND_DATABASE_SECRET_ENGINE_ROLE: DatabaseSecretEngineRole,
    KIND_RANDOM_SECRET: RandomSecret,
    KIND_LDAP_AUTH_ENGINE_CONFIG: LDAPAuthEngineConfig,
    KIND_PKI_SECRET_ENGINE_CONFIG: PKISecretEngineConfig,
}

__all__ = [
    "PassContext",
    "VaultResource",
    "DatabaseSecretEngineConfig",
    "DatabaseSecretEngineRole",
    "LDAPAuthEngineConfig",
    "SecretEngineMount",
    "PKISecretEngineConfig",
    "Policy",
    "RandomSecret",
    "RESOURCE_KINDS",
]
