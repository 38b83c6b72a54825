"""Builder for the LDAP auth engine configuration."""

from __future__ import annotations

from typing import Any

from .payload import FieldMapping, project_fields

LDAP_CONFIG_FIELDS = (
    FieldMapping("url", "url"),
    FieldMapping("caseSensitiveNames", "case_sensitive_names", False),
    FieldMapping("requestTimeout", "request_timeout"),
    FieldMapping("startTls", "starttls", False),
    FieldMapping("tlsMinVersion", "tls_min_version"),
    FieldMapping("tlsMaxVersion", "tls_max_version"),
    FieldMapping("insecureTls", "insecure_tls", False),
    FieldMapping("certificate", "certificate"),
    FieldMapping("clientTlsCert", "client_tls_cert"),
    FieldMapping("clientTlsKey", "client_tls_key"),
    FieldMapping("userDN", "userdn"),
    FieldMapping("userAttr", "userattr"),
    FieldMapping("discoverDN", "discoverdn", False),
    FieldMapping("denyNullBind", "deny_null_bind", True),
    FieldMapping("UPNDomain", "upndomain"),
    FieldMapping("userFilter", "userfilter"),
    FieldMapping("anonymousGroupSearch", "anonymous_group_search", False),
    FieldMapping("groupFilter", "groupfilter"),
    FieldMapping("groupDN", "groupdn"),
    FieldMapping("groupAttr", "groupattr"),
    FieldMapping("usernameAsAlias", "username_as_alias", False),
    FieldMapping("tokenTtl", "token_ttl"),
    FieldMapping("tokenMaxTtl", "token_max_ttl"),
    FieldMapping("tokenPolicies", "token_policies"),
    FieldMapping("tokenBoundCIDRs", "token_bound_cidrs"),
    FieldMapping("tokenExplicitMaxTtl", "token_explicit_max_ttl"),
    FieldMapping("tokenNoDefaultPolicy", "token_no_default_policy", False),
    FieldMapping("tokenNumUses", "token_num_uses"),
    FieldMapping("tokenPeriod", "token_period"),
    FieldMapping("tokenType", "token_type"),
)

LDAP_CONFIG_REDACTED = ("bindpass", "client_tls_key")

LDAP_CONFIG_TTL_KEYS = (
    "request_timeout",
    "token_ttl",
    "token_max_ttl",
    "token_explicit_max_ttl",
    "token_period",
)


def build_ldap_config_payload(
    spec: dict[str, Any],
    bind_dn: str | None,
    bind_password: str | None,
) -> dict[str, Any]:
    """Create the LDAP config payload.

    With no bind credentials the payload carries neither ``binddn`` nor
    ``bindpass`` and Vault performs anonymous binds.
    """
    payload = project_fields(spec, LDAP_CONFIG_FIELDS)
    if bind_dn:
        payload["binddn"] = bind_dn
    if bind_password is not None:
        payload["bindpass"] = bind_password
    return payload
