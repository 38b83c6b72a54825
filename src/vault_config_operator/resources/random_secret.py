"""RandomSecret: a generated password stored in a KV engine."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from ..builders.paths import clean_path, resolve_name
from ..builders.random_secret import TTL_KEY, build_random_secret_payload, unwrap_kv_data
from ..constants import KIND_RANDOM_SECRET
from ..models.password_policy import parse_password_policy
from ..utils.durations import parse_duration
from ..utils.errors import RemoteTransientError, ValidationError
from .base import PassContext, VaultResource

if TYPE_CHECKING:
    from ..reconcilers.base import ReconciliationEngine
    from ..services.vault.base import VaultService


class RandomSecret(VaultResource):
    """A generated secret, rotated every ``refreshPeriod`` when one is set."""

    kind = KIND_RANDOM_SECRET
    immutable_fields = ("path", "isKVSecretsEngineV2")

    def __init__(self, body: dict[str, Any]) -> None:
        super().__init__(body)
        self.secret: str | None = None

    @property
    def path(self) -> str:
        return clean_path(self.spec.get("path"), resolve_name(self.spec, self.meta))

    @property
    def secret_key(self) -> str:
        return self.spec.get("secretKey", "password")

    @property
    def kv_v2(self) -> bool:
        return bool(self.spec.get("isKVSecretsEngineV2", False))

    @property
    def secret_format(self) -> dict[str, Any]:
        return self.spec.get("secretFormat") or {}

    def validate(self) -> None:
        super().validate()
        if not self.spec.get("path"):
            raise ValidationError("spec.path is required")
        if self.kv_v2 and "/data/" not in f"/{self.path}/":
            raise ValidationError("spec.path must contain /data/ when isKVSecretsEngineV2 is set")
        if self.spec.get("refreshPeriod"):
            if self.secret_key == TTL_KEY:
                raise ValidationError(f"spec.secretKey cannot be '{TTL_KEY}' when refreshPeriod is set")
            try:
                parse_duration(self.spec["refreshPeriod"])
            except ValueError as e:
                raise ValidationError(f"spec.refreshPeriod: {e}") from e
        inline_policy = self.secret_format.get("inlinePasswordPolicy")
        if bool(inline_policy) == bool(self.secret_format.get("passwordPolicyName")):
            raise ValidationError(
                "exactly one of secretFormat.passwordPolicyName or secretFormat.inlinePasswordPolicy is required"
            )
        if inline_policy:
            parse_password_policy(inline_policy)

    def payload(self) -> dict[str, Any]:
        if self.secret is None:
            raise RuntimeError("no secret has been generated")
        return build_random_secret_payload(self.secret_key, self.secret, self.spec.get("refreshPeriod"), self.kv_v2)

    def refresh_due(self, now: datetime | None = None) -> bool:
        """Whether the stored value must be regenerated."""
        if self.status.get("observedSecretFormat") not in (None, self.secret_format):
            return True
        refresh_period = self.spec.get("refreshPeriod")
        last_update = self.status.get("lastVaultSecretUpdate")
        if not refresh_period or not last_update:
            return False
        now = now or datetime.now(timezone.utc)
        updated_at = datetime.fromisoformat(last_update.replace("Z", "+00:00"))
        return updated_at + parse_duration(refresh_period) <= now

    def generate(self, vault: VaultService) -> str:
        """Generate a new value from the inline policy or a named Vault password policy."""
        inline_policy = self.secret_format.get("inlinePasswordPolicy")
        if inline_policy:
            return parse_password_policy(inline_policy).generate()
        policy = self.secret_format["passwordPolicyName"]
        response = vault.read(clean_path("sys/policies/password", policy, "generate"))
        if not response or not response.get("password"):
            raise RemoteTransientError(f"password policy {policy} did not generate a password")
        return str(response["password"])

    def synchronize(self, engine: ReconciliationEngine, ctx: PassContext) -> str:
        current = unwrap_kv_data(ctx.vault.read(self.path))
        if current is not None and self.secret_key in current and not self.refresh_due():
            return "unchanged"

        self.secret = self.generate(ctx.vault)
        ctx.vault.write(self.path, self.payload())
        self.status_updates["lastVaultSecretUpdate"] = datetime.now(timezone.utc).isoformat()
        self.status_updates["observedSecretFormat"] = self.secret_format
        return "created" if current is None else "updated"
