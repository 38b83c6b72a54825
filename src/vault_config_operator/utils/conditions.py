"""Status conditions reported on every custom resource."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from ..constants import (
    COND_READY,
    COND_SIGNED,
    COND_VALIDATED,
    REASON_AWAITING_SIGNATURE,
    REASON_RECONCILE_SUCCESSFUL,
    REASON_SIGNED,
    REASON_VALIDATION_FAILED,
    REASON_VALIDATION_SUCCEEDED,
)


def _status(value: bool) -> str:
    return "True" if value else "False"


def update_condition(
    conditions: list[dict[str, Any]],
    condition_type: str,
    status: str,
    reason: str,
    message: str,
    observed_generation: int | None = None,
) -> list[dict[str, Any]]:
    """Return ``conditions`` with one condition replaced or appended.

    ``lastTransitionTime`` only moves when the status of an existing
    condition flips.

    Args:
        conditions: Current conditions, left unmodified
        condition_type: Type of condition
        status: "True", "False" or "Unknown"
        reason: Machine readable reason
        message: Human readable message
        observed_generation: Generation the condition describes
    """
    previous = next((c for c in conditions if c.get("type") == condition_type), None)
    transition_time = datetime.now(timezone.utc).isoformat()
    if previous is not None and previous.get("status") == status:
        transition_time = previous.get("lastTransitionTime", transition_time)

    condition: dict[str, Any] = {
        "type": condition_type,
        "status": status,
        "reason": reason,
        "message": message,
        "lastTransitionTime": transition_time,
    }
    if observed_generation is not None:
        condition["observedGeneration"] = observed_generation

    if previous is None:
        return [*conditions, condition]
    return [condition if c is previous else c for c in conditions]


def set_ready_condition(
    conditions: list[dict[str, Any]],
    status: bool,
    message: str,
    observed_generation: int | None = None,
    reason: str | None = None,
) -> list[dict[str, Any]]:
    """Set the Ready condition; ``reason`` overrides the default one."""
    default_reason = REASON_RECONCILE_SUCCESSFUL if status else "NotReady"
    return update_condition(
        conditions, COND_READY, _status(status), reason or default_reason, message, observed_generation
    )


def set_validated_condition(
    conditions: list[dict[str, Any]],
    status: bool,
    message: str,
    observed_generation: int | None = None,
) -> list[dict[str, Any]]:
    reason = REASON_VALIDATION_SUCCEEDED if status else REASON_VALIDATION_FAILED
    return update_condition(conditions, COND_VALIDATED, _status(status), reason, message, observed_generation)


def set_signed_condition(
    conditions: list[dict[str, Any]],
    status: bool,
    message: str,
    observed_generation: int | None = None,
) -> list[dict[str, Any]]:
    """Set the Signed condition of a certificate authority."""
    reason = REASON_SIGNED if status else REASON_AWAITING_SIGNATURE
    return update_condition(conditions, COND_SIGNED, _status(status), reason, message, observed_generation)
