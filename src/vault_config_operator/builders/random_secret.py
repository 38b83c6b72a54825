"""Builder for generated secrets written to a KV engine."""

from __future__ import annotations

from typing import Any

TTL_KEY = "ttl"


def build_random_secret_payload(
    secret_key: str,
    secret: str,
    refresh_period: str | None,
    kv_v2: bool,
) -> dict[str, Any]:
    """Create the KV payload holding a generated secret.

    KV v2 engines expect the key/value map wrapped under ``data``.
    """
    payload: dict[str, Any] = {secret_key: secret}
    if refresh_period:
        payload[TTL_KEY] = refresh_period
    if kv_v2:
        return {"data": payload}
    return payload


def unwrap_kv_data(data: dict[str, Any] | None) -> dict[str, Any] | None:
    """Return the key/value map of a KV read, for either engine version."""
    if data is None:
        return None
    inner = data.get("data")
    if isinstance(inner, dict) and "metadata" in data:
        return inner
    return data
