"""Policy: an ACL (or typed) Vault policy."""

from __future__ import annotations

from typing import Any

from ..builders.paths import clean_path, resolve_name
from ..builders.policy import build_policy_desired_state, build_policy_payload
from ..constants import KIND_POLICY
from ..utils.errors import ValidationError
from .base import VaultResource


class Policy(VaultResource):
    kind = KIND_POLICY

    @property
    def policy_name(self) -> str:
        return resolve_name(self.spec, self.meta)

    @property
    def path(self) -> str:
        policy_type = self.spec.get("type")
        if policy_type:
            return clean_path("sys/policies", policy_type, self.policy_name)
        return clean_path("sys/policy", self.policy_name)

    def validate(self) -> None:
        super().validate()
        if not self.spec.get("policy"):
            raise ValidationError("spec.policy is required")

    def payload(self) -> dict[str, Any]:
        return build_policy_payload(self.spec)

    def desired_state(self) -> dict[str, Any]:
        return build_policy_desired_state(self.spec, self.policy_name)
