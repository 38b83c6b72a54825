"""Builders for the PKI secret engine."""

from __future__ import annotations

from typing import Any

from ..constants import DEFAULT_CRL_EXPIRY
from .payload import FieldMapping, project_fields

PKI_COMMON_FIELDS = (
    FieldMapping("commonName", "common_name"),
    FieldMapping("altNames", "alt_names"),
    FieldMapping("IPSans", "ip_sans"),
    FieldMapping("URISans", "uri_sans"),
    FieldMapping("otherSans", "other_sans"),
    FieldMapping("TTL", "ttl"),
    FieldMapping("format", "format"),
    FieldMapping("privateKeyFormat", "private_key_format"),
    FieldMapping("keyType", "key_type"),
    FieldMapping("keyBits", "key_bits"),
    FieldMapping("maxPathLength", "max_path_length"),
    FieldMapping("excludeCnFromSans", "exclude_cn_from_sans"),
    FieldMapping("permittedDnsDomains", "permitted_dns_domains"),
    FieldMapping("ou", "ou"),
    FieldMapping("organization", "organization"),
    FieldMapping("country", "country"),
    FieldMapping("locality", "locality"),
    FieldMapping("province", "province"),
    FieldMapping("streetAddress", "street_address"),
    FieldMapping("postalCode", "postal_code"),
    FieldMapping("serialNumber", "serial_number"),
)

PKI_URL_FIELDS = (
    FieldMapping("issuingCertificates", "issuing_certificates", []),
    FieldMapping("CRLDistributionPoints", "crl_distribution_points", []),
    FieldMapping("ocspServers", "ocsp_servers", []),
)

PKI_CRL_FIELDS = (
    FieldMapping("CRLExpiry", "expiry", DEFAULT_CRL_EXPIRY),
    FieldMapping("CRLDisable", "disable", False),
)

# Generation response fields kept in the companion secret
ROOT_EXPORT_FIELDS = ("issuing_ca", "expiration", "certificate", "serial_number")
INTERMEDIATE_EXPORT_FIELDS = ("csr",)
PRIVATE_KEY_FIELDS = ("private_key", "private_key_type")


def build_generate_payload(spec: dict[str, Any]) -> dict[str, Any]:
    """Create the payload for root or intermediate generation."""
    return project_fields(spec, PKI_COMMON_FIELDS)


def build_sign_intermediate_payload(spec: dict[str, Any], csr: str) -> dict[str, Any]:
    """Create the payload asking a root CA to sign an intermediate CSR."""
    payload = build_generate_payload(spec)
    payload["csr"] = csr
    return payload


def build_set_signed_payload(certificate: str) -> dict[str, Any]:
    """Create the payload installing a signed intermediate certificate."""
    return {"certificate": certificate}


def build_config_urls_payload(spec: dict[str, Any]) -> dict[str, Any]:
    """Create the issuing/CRL/OCSP URL configuration payload."""
    return project_fields(spec, PKI_URL_FIELDS)


def build_config_crl_payload(spec: dict[str, Any]) -> dict[str, Any]:
    """Create the CRL configuration payload."""
    return project_fields(spec, PKI_CRL_FIELDS)


def build_exported_secret_data(ca_type: str, data: dict[str, Any], exported: bool) -> dict[str, str]:
    """Select the generation response fields kept in the companion secret.

    Roots keep the issued certificate material, intermediates keep the CSR.
    Private key fields are only present when the key was exported.
    """
    fields = ROOT_EXPORT_FIELDS if ca_type == "root" else INTERMEDIATE_EXPORT_FIELDS
    if exported:
        fields = fields + PRIVATE_KEY_FIELDS
    return {field: str(data[field]) for field in fields if data.get(field) is not None}
