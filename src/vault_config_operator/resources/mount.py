"""SecretEngineMount: enables and tunes a secret engine."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..builders.mount import build_mount_payload, build_tune_payload
from ..builders.paths import clean_path, resolve_name
from ..constants import KIND_SECRET_ENGINE_MOUNT
from ..utils.durations import normalize_ttls, parse_duration
from ..utils.equivalence import is_equivalent
from ..utils.errors import ValidationError
from .base import VaultResource

if TYPE_CHECKING:
    from ..services.vault.base import VaultService

MOUNTS_PATH = "sys/mounts"
TTL_KEYS = ("default_lease_ttl", "max_lease_ttl")


class SecretEngineMount(VaultResource):
    """A secret engine mounted at ``<path>/<name>``."""

    kind = KIND_SECRET_ENGINE_MOUNT
    immutable_fields = ("path", "name", "type")

    @property
    def mount_path(self) -> str:
        return clean_path(self.spec.get("path"), resolve_name(self.spec, self.meta))

    @property
    def path(self) -> str:
        return clean_path(MOUNTS_PATH, self.mount_path)

    @property
    def tune_path(self) -> str:
        return clean_path(self.path, "tune")

    def validate(self) -> None:
        super().validate()
        if not self.spec.get("type"):
            raise ValidationError("spec.type is required")
        config = self.spec.get("config") or {}
        for field in ("defaultLeaseTTL", "maxLeaseTTL"):
            value = str(config.get(field) or "")
            if value and not value.isdigit():
                try:
                    parse_duration(value)
                except ValueError as e:
                    raise ValidationError(f"spec.config.{field}: {e}") from e

    def payload(self) -> dict[str, Any]:
        return build_mount_payload(self.spec)

    def desired_state(self) -> dict[str, Any]:
        return build_tune_payload(self.spec)

    def is_equivalent(self, observed: dict[str, Any] | None) -> bool:
        if observed is None:
            return False
        desired = normalize_ttls(self.desired_state(), TTL_KEYS)
        return is_equivalent(desired, normalize_ttls(observed, TTL_KEYS), compared_keys=desired.keys())

    def read_current(self, vault: VaultService) -> dict[str, Any] | None:
        mounts = vault.read(MOUNTS_PATH) or {}
        mount = mounts.get(f"{self.mount_path}/")
        if mount is None:
            return None
        if mount.get("accessor"):
            self.status_updates["accessor"] = mount["accessor"]
        return vault.read(self.tune_path)

    def create(self, vault: VaultService) -> None:
        vault.write(self.path, self.payload())
        mount = (vault.read(MOUNTS_PATH) or {}).get(f"{self.mount_path}/") or {}
        if mount.get("accessor"):
            self.status_updates["accessor"] = mount["accessor"]

    def update(self, vault: VaultService) -> None:
        vault.write(self.tune_path, build_tune_payload(self.spec))
