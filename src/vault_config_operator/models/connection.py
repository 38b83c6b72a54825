"""Models for Vault connection and authentication settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

from ..constants import DEFAULT_AUTH_PATH, DEFAULT_SERVICE_ACCOUNT
from ..utils.durations import parse_duration


def _env_flag(name: str) -> bool:
    return os.getenv(name, "false").lower() in ("1", "true", "yes")


@dataclass
class TLSConfig:
    """TLS settings for the Vault connection."""

    ca_cert: str | None = None
    tls_secret: str | None = None
    skip_verify: bool = False

    @classmethod
    def from_spec(cls, spec: dict[str, Any] | None) -> TLSConfig:
        """Create TLS settings from ``connection.tLSConfig``, falling back to the environment."""
        if not spec:
            return cls(
                ca_cert=os.getenv("VAULT_CACERT") or None,
                skip_verify=_env_flag("VAULT_SKIP_VERIFY"),
            )
        tls_secret = spec.get("tlsSecret") or {}
        return cls(
            ca_cert=spec.get("cacert"),
            tls_secret=tls_secret.get("name"),
            skip_verify=bool(spec.get("skipVerify", False)),
        )


@dataclass
class ConnectionConfig:
    """Where and how to reach Vault."""

    address: str
    tls: TLSConfig
    timeout: float = 30.0
    max_retries: int = 2

    @classmethod
    def from_spec(cls, spec: dict[str, Any] | None) -> ConnectionConfig:
        """Create a connection from ``spec.connection``.

        Unset fields fall back to the standard Vault environment variables.
        """
        spec = spec or {}
        return cls(
            address=spec.get("address") or os.getenv("VAULT_ADDR", "https://vault:8200"),
            tls=TLSConfig.from_spec(spec.get("tLSConfig")),
            timeout=_parse_timeout(spec.get("timeOut")),
            max_retries=int(spec.get("maxRetries", os.getenv("VAULT_MAX_RETRIES", "2"))),
        )


def _parse_timeout(value: Any) -> float:
    if value in (None, ""):
        return float(os.getenv("VAULT_TIMEOUT_SECONDS", "30"))
    if isinstance(value, (int, float)):
        return float(value)
    return parse_duration(value).total_seconds()


@dataclass
class AuthConfig:
    """Kubernetes auth method settings used to log in to Vault."""

    role: str
    path: str = DEFAULT_AUTH_PATH
    service_account: str = DEFAULT_SERVICE_ACCOUNT
    namespace: str | None = None

    @classmethod
    def from_spec(cls, spec: dict[str, Any] | None) -> AuthConfig:
        """Create auth settings from ``spec.authentication``."""
        spec = spec or {}
        service_account = spec.get("serviceAccount") or {}
        return cls(
            role=spec.get("role", ""),
            path=spec.get("path") or DEFAULT_AUTH_PATH,
            service_account=service_account.get("name") or DEFAULT_SERVICE_ACCOUNT,
            namespace=spec.get("namespace") or os.getenv("VAULT_NAMESPACE") or None,
        )

    @property
    def login_path(self) -> str:
        """Mount point of the kubernetes auth method."""
        return self.path.strip("/")
