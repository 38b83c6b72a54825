"""Models for credential references and resolved credentials."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from ..constants import DEFAULT_PASSWORD_KEY, DEFAULT_USERNAME_KEY
from ..utils.errors import MultipleCredentialSourcesError


@dataclass(frozen=True)
class LocalSecretSource:
    """Credentials stored in a Kubernetes secret in the resource namespace."""

    name: str


@dataclass(frozen=True)
class VaultSecretSource:
    """Credentials stored at a Vault path."""

    path: str


@dataclass(frozen=True)
class RandomSecretSource:
    """Password generated by a RandomSecret resource in the same namespace."""

    name: str


CredentialSource = Union[LocalSecretSource, VaultSecretSource, RandomSecretSource]


@dataclass(frozen=True)
class CredentialReference:
    """Where a credential comes from, and which keys hold its parts."""

    source: CredentialSource | None = None
    username_key: str = DEFAULT_USERNAME_KEY
    password_key: str = DEFAULT_PASSWORD_KEY


@dataclass(frozen=True)
class ResolvedCredential:
    """An identity and secret pair, held in memory for one pass only."""

    identity: str | None
    secret: str = field(repr=False)


def parse_credential_reference(spec: dict[str, Any] | None) -> CredentialReference:
    """Parse a credential reference section of a spec.

    Raises:
        MultipleCredentialSourcesError: If more than one source is set
    """
    spec = spec or {}
    sources: list[CredentialSource] = []
    if (spec.get("secret") or {}).get("name"):
        sources.append(LocalSecretSource(name=spec["secret"]["name"]))
    if (spec.get("vaultSecret") or {}).get("path"):
        sources.append(VaultSecretSource(path=spec["vaultSecret"]["path"]))
    if (spec.get("randomSecret") or {}).get("name"):
        sources.append(RandomSecretSource(name=spec["randomSecret"]["name"]))

    if len(sources) > 1:
        raise MultipleCredentialSourcesError(
            "only one of secret, vaultSecret or randomSecret can be specified"
        )

    return CredentialReference(
        source=sources[0] if sources else None,
        username_key=spec.get("usernameKey") or DEFAULT_USERNAME_KEY,
        password_key=spec.get("passwordKey") or DEFAULT_PASSWORD_KEY,
    )
