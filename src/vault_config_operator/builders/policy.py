"""Builder for ACL policies."""

from __future__ import annotations

from typing import Any


def build_policy_payload(spec: dict[str, Any]) -> dict[str, Any]:
    """Create the policy payload.

    ``sys/policy`` reads the document back under ``rules`` while the typed
    ``sys/policies/<type>`` endpoints use ``policy``.
    """
    return {"policy": spec.get("policy", "")}


def build_policy_desired_state(spec: dict[str, Any], name: str) -> dict[str, Any]:
    """Create the map a policy read returns when it matches the spec."""
    state: dict[str, Any] = {"name": name}
    if spec.get("type"):
        state["policy"] = spec.get("policy", "")
    else:
        state["rules"] = spec.get("policy", "")
    return state
