"""Compare desired payloads with the state Vault reports."""

from __future__ import annotations

from typing import Any, Collection, Iterable


def _project(
    data: dict[str, Any],
    redacted_keys: Collection[str],
    compared_keys: Iterable[str] | None,
) -> dict[str, Any]:
    if compared_keys is not None:
        wanted = set(compared_keys)
        data = {key: value for key, value in data.items() if key in wanted}
    return {key: value for key, value in data.items() if key not in redacted_keys}


def is_equivalent(
    desired: dict[str, Any],
    observed: dict[str, Any] | None,
    redacted_keys: Collection[str] = (),
    compared_keys: Iterable[str] | None = None,
) -> bool:
    """Return True when ``observed`` already matches ``desired``.

    Redacted keys are removed from both sides since Vault never returns them.
    When ``compared_keys`` is given only those keys take part, which is how
    tunable mounts ignore everything Vault adds on its own. An absent key and
    a key holding an empty value are different.

    Args:
        desired: Payload the operator would write
        observed: Payload read back from Vault, None when absent
        redacted_keys: Keys excluded on both sides
        compared_keys: Optional allow-list of keys to compare

    Returns:
        True if no write is needed
    """
    if observed is None:
        return False
    compared = list(compared_keys) if compared_keys is not None else None
    return _project(desired, redacted_keys, compared) == _project(observed, redacted_keys, compared)


def changed_keys(
    desired: dict[str, Any],
    observed: dict[str, Any] | None,
    redacted_keys: Collection[str] = (),
) -> list[str]:
    """List the keys whose values differ, for drift logging."""
    observed = observed or {}
    keys = (set(desired) | set(observed)) - set(redacted_keys)
    return sorted(
        key for key in keys
        if key not in desired or key not in observed or desired[key] != observed[key]
    )
