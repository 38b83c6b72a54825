"""Error taxonomy and sanitization utilities."""

from __future__ import annotations

import os
import re
from typing import Any

import kopf


class OperatorError(Exception):
    """Base class for every error raised by a reconciliation pass."""

    retryable = True

    def __init__(self, message: str, resource: str | None = None) -> None:
        self.message = message
        self.resource = resource
        super().__init__(f"{resource}: {message}" if resource else message)

    def with_resource(self, resource: str) -> OperatorError:
        """Return a copy of this error prefixed with the resource identity."""
        if self.resource:
            return self
        error = type(self)(self.message, resource=resource)
        error.__cause__ = self.__cause__
        return error


class ValidationError(OperatorError):
    """The spec is inconsistent; retrying without a spec change is pointless."""

    retryable = False


class MultipleCredentialSourcesError(ValidationError):
    """More than one credential source is set on a credential reference."""


CredentialAmbiguousError = MultipleCredentialSourcesError


class ImmutableFieldError(ValidationError):
    """A field that may not change after creation was modified."""


class CredentialNotFoundError(OperatorError):
    """A referenced secret, key or generator does not exist."""


class RemoteNotFoundError(OperatorError):
    """The Vault object does not exist. Drives create, never surfaced."""


class RemoteTransientError(OperatorError):
    """Network, permission or server-side failure talking to Vault or Kubernetes."""


class AwaitingExternalInputError(OperatorError):
    """The pass is waiting on an artifact produced outside the operator."""


class SecretConflictError(OperatorError):
    """An immutable secret already exists with different data."""


def _delay(env_name: str, default: str) -> float:
    return float(os.getenv(env_name, default))


def to_kopf_error(error: OperatorError) -> Exception:
    """Map an operator error to the kopf error that encodes its retry policy."""
    message = sanitize_exception(error)
    if isinstance(error, ValidationError):
        return kopf.PermanentError(message)
    if isinstance(error, AwaitingExternalInputError):
        return kopf.TemporaryError(message, delay=_delay("AWAIT_SIGNATURE_RETRY_SECONDS", "60"))
    if isinstance(error, CredentialNotFoundError):
        return kopf.TemporaryError(message, delay=_delay("CREDENTIAL_RETRY_DELAY_SECONDS", "30"))
    return kopf.TemporaryError(message, delay=_delay("TRANSIENT_RETRY_DELAY_SECONDS", "10"))


# Patterns that might expose sensitive information
SENSITIVE_PATTERNS = [
    r"(hvs\.)[A-Za-z0-9_\-]+",
    r"(s\.)[A-Za-z0-9]{24}",
    r"(-----BEGIN [A-Z ]*PRIVATE KEY-----)[\s\S]*?-----END [A-Z ]*PRIVATE KEY-----",
    r"(://[^:/\s]+:)[^@\s]+(?=@)",
]

# Fields to redact completely
SENSITIVE_FIELDS = {
    "password",
    "bindpass",
    "secret",
    "token",
    "jwt",
    "private_key",
    "client_token",
}


def sanitize_error_message(message: str) -> str:
    """Sanitize error message to remove sensitive information.

    Args:
        message: Original error message

    Returns:
        Sanitized error message with sensitive data redacted
    """
    sanitized = message

    for pattern in SENSITIVE_PATTERNS:
        sanitized = re.sub(pattern, r"\1[REDACTED]", sanitized)

    for field in SENSITIVE_FIELDS:
        sanitized = re.sub(
            rf"\b{field}\b['\"]?\s*[:=]\s*['\"]?([^\s,;\)'\"]+)",
            f"{field}: [REDACTED]",
            sanitized,
            flags=re.IGNORECASE,
        )

    return sanitized


def sanitize_exception(error: Exception) -> str:
    """Sanitize exception message.

    Args:
        error: Exception object

    Returns:
        Sanitized error message
    """
    return sanitize_error_message(str(error))


def sanitize_dict(data: dict[str, Any], sensitive_keys: set[str] | None = None) -> dict[str, Any]:
    """Sanitize dictionary by redacting sensitive fields.

    Args:
        data: Dictionary to sanitize
        sensitive_keys: Additional keys to redact (merged with SENSITIVE_FIELDS)

    Returns:
        Sanitized dictionary with sensitive values redacted
    """
    all_sensitive = SENSITIVE_FIELDS | (sensitive_keys or set())
    sanitized: dict[str, Any] = {}

    for key, value in data.items():
        if key.lower() in all_sensitive:
            sanitized[key] = "[REDACTED]"
        elif isinstance(value, dict):
            sanitized[key] = sanitize_dict(value, sensitive_keys)
        elif isinstance(value, str):
            sanitized[key] = sanitize_error_message(value)
        else:
            sanitized[key] = value

    return sanitized
