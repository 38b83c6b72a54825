"""Parsing of Go-style duration strings used in custom resource specs."""

from __future__ import annotations

import re
from datetime import timedelta
from typing import Any, Iterable

_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_COMPONENT = re.compile(r"(\d+(?:\.\d+)?)(ns|us|µs|ms|s|m|h)")


def parse_duration(value: str) -> timedelta:
    """Parse a duration such as ``"72h"`` or ``"1h30m"``.

    Raises:
        ValueError: If the string is not a valid duration
    """
    text = value.strip()
    if text in ("0", ""):
        return timedelta(0)
    position = 0
    seconds = 0.0
    for match in _COMPONENT.finditer(text):
        if match.start() != position:
            break
        seconds += float(match.group(1)) * _UNITS[match.group(2)]
        position = match.end()
    if position != len(text):
        raise ValueError(f"invalid duration {value!r}")
    return timedelta(seconds=seconds)


def normalize_ttls(state: dict[str, Any], ttl_keys: Iterable[str]) -> dict[str, Any]:
    """Express the TTL fields of a Vault map in seconds, the unit Vault reads them back in.

    An empty TTL means the system default and is dropped so it is not compared.
    """
    state = dict(state)
    for key in ttl_keys:
        value = state.get(key)
        if value in ("", None):
            state.pop(key, None)
        elif isinstance(value, str) and not value.isdigit():
            state[key] = int(parse_duration(value).total_seconds())
        elif isinstance(value, str):
            state[key] = int(value)
    return state
