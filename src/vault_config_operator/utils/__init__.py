"""Utility functions for the Vault Config Operator."""

from .conditions import (
    set_ready_condition,
    set_signed_condition,
    set_validated_condition,
    update_condition,
)
from .equivalence import is_equivalent
from .events import emit_event
from .rate_limit import rate_limit_k8s, rate_limit_vault
from .secrets import read_secret_data

__all__ = [
    "update_condition",
    "set_ready_condition",
    "set_signed_condition",
    "set_validated_condition",
    "is_equivalent",
    "emit_event",
    "read_secret_data",
    "rate_limit_k8s",
    "rate_limit_vault",
]
