"""Builders for the database secret engine."""

from __future__ import annotations

from typing import Any

from .payload import FieldMapping, project_fields

DATABASE_CONFIG_FIELDS = (
    FieldMapping("pluginName", "plugin_name"),
    FieldMapping("verifyConnection", "verify_connection", True),
    FieldMapping("allowedRoles", "allowed_roles"),
    FieldMapping("rootRotationStatements", "root_rotation_statements"),
    FieldMapping("passwordPolicy", "password_policy"),
    FieldMapping("connectionURL", "connection_url"),
)

DATABASE_CONFIG_REDACTED = ("password",)

# Top-level keys of a config read; everything else is reported under connection_details
DATABASE_CONFIG_READ_KEYS = {
    "plugin_name": "plugin_name",
    "allowed_roles": "allowed_roles",
    "password_policy": "password_policy",
    "root_rotation_statements": "root_credentials_rotate_statements",
}
# Accepted on write, never reported back
DATABASE_CONFIG_WRITE_ONLY = ("password", "verify_connection")

DATABASE_ROLE_FIELDS = (
    FieldMapping("dBName", "db_name"),
    FieldMapping("defaultTTL", "default_ttl"),
    FieldMapping("maxTTL", "max_ttl"),
    FieldMapping("creationStatements", "creation_statements"),
    FieldMapping("revocationStatements", "revocation_statements"),
    FieldMapping("rollbackStatements", "rollback_statements"),
    FieldMapping("renewStatements", "renew_statements"),
)

DATABASE_ROLE_TTL_KEYS = ("default_ttl", "max_ttl")


def build_database_config_payload(
    spec: dict[str, Any],
    username: str,
    password: str,
) -> dict[str, Any]:
    """Create the connection config payload with resolved root credentials.

    Plugin specific settings from ``databaseSpecificConfig`` are merged in
    as-is and never override the credential fields.
    """
    payload = project_fields(spec, DATABASE_CONFIG_FIELDS)
    payload.update(spec.get("databaseSpecificConfig") or {})
    payload["username"] = username
    payload["password"] = password
    return payload


def build_database_role_payload(spec: dict[str, Any]) -> dict[str, Any]:
    """Create the dynamic role payload."""
    return project_fields(spec, DATABASE_ROLE_FIELDS)


def build_database_config_state(payload: dict[str, Any]) -> dict[str, Any]:
    """Reshape a config payload into the map a read of the config returns.

    Vault nests the connection settings, including plugin specific ones,
    under ``connection_details`` and renames the root rotation statements.
    """
    state: dict[str, Any] = {}
    details: dict[str, Any] = {}
    for key, value in payload.items():
        if key in DATABASE_CONFIG_WRITE_ONLY:
            continue
        if key in DATABASE_CONFIG_READ_KEYS:
            state[DATABASE_CONFIG_READ_KEYS[key]] = value
        else:
            details[key] = value
    state["connection_details"] = details
    return state
