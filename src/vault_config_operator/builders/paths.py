"""Vault path helpers."""

from __future__ import annotations

import re
from typing import Any

_SEPARATOR_RUN = re.compile(r"/+")


def clean_path(*segments: Any) -> str:
    """Join path segments into a canonical Vault path.

    Empty segments are skipped, any run of ``/`` collapses to one, and leading
    and trailing separators are trimmed, so ``clean_path(clean_path(p)) ==
    clean_path(p)`` for every input.

    >>> clean_path("/a//b/", "c")
    'a/b/c'
    """
    joined = "/".join(str(segment) for segment in segments if segment not in (None, ""))
    return _SEPARATOR_RUN.sub("/", joined).strip("/")


def resolve_name(spec: dict[str, Any], meta: dict[str, Any]) -> str:
    """Return the Vault object name: ``spec.name`` overrides the resource name."""
    return spec.get("name") or meta.get("name", "")
