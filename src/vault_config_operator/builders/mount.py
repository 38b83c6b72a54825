"""Builder for secret engine mounts."""

from __future__ import annotations

from typing import Any

from .payload import FieldMapping, project_fields

MOUNT_FIELDS = (
    FieldMapping("type", "type"),
    FieldMapping("description", "description"),
    FieldMapping("local", "local", False),
    FieldMapping("sealWrap", "seal_wrap", False),
    FieldMapping("externalEntropyAccess", "external_entropy_access", False),
    FieldMapping("options", "options"),
)

MOUNT_CONFIG_FIELDS = (
    FieldMapping("defaultLeaseTTL", "default_lease_ttl", ""),
    FieldMapping("maxLeaseTTL", "max_lease_ttl", ""),
    FieldMapping("forceNoCache", "force_no_cache", False),
    FieldMapping("auditNonHMACRequestKeys", "audit_non_hmac_request_keys"),
    FieldMapping("auditNonHMACResponseKeys", "audit_non_hmac_response_keys"),
    FieldMapping("listingVisibility", "listing_visibility"),
    FieldMapping("passthroughRequestHeaders", "passthrough_request_headers"),
    FieldMapping("allowedResponseHeaders", "allowed_response_headers"),
)


def build_tune_payload(spec: dict[str, Any]) -> dict[str, Any]:
    """Create the tune payload (mount config only) from the spec."""
    return project_fields(spec.get("config") or {}, MOUNT_CONFIG_FIELDS)


def build_mount_payload(spec: dict[str, Any]) -> dict[str, Any]:
    """Create the payload that enables a secret engine mount."""
    payload = project_fields(spec, MOUNT_FIELDS)
    payload["config"] = build_tune_payload(spec)
    return payload
