"""Declarative projection of spec fields onto Vault payload keys."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable


@dataclass(frozen=True)
class FieldMapping:
    """One spec field and the Vault key it is written under.

    ``default`` is used when the spec omits the field; a None default means
    the key is left out of the payload entirely.
    """

    spec_key: str
    vault_key: str
    default: Any = None


def project_fields(spec: dict[str, Any], mappings: Iterable[FieldMapping]) -> dict[str, Any]:
    """Build a payload by renaming spec fields through a mapping table.

    Args:
        spec: Custom resource spec (or a nested section of it)
        mappings: Renaming table for the kind

    Returns:
        Payload dict keyed by Vault field names
    """
    payload: dict[str, Any] = {}
    for mapping in mappings:
        if mapping.spec_key in spec and spec[mapping.spec_key] is not None:
            payload[mapping.vault_key] = spec[mapping.spec_key]
        elif mapping.default is not None:
            payload[mapping.vault_key] = mapping.default
    return payload
