"""Shared fixtures: in-memory stand-ins for Vault and the Kubernetes API."""

from __future__ import annotations

import copy
from typing import Any

import pytest

from vault_config_operator.reconcilers.base import ReconciliationEngine
from vault_config_operator.services.clients import Clients
from vault_config_operator.utils.errors import SecretConflictError


class FakeVault:
    """Path keyed Vault double recording every call."""

    def __init__(self) -> None:
        self.data: dict[str, dict[str, Any]] = {}
        self.responses: dict[str, dict[str, Any]] = {}
        self.writes: list[tuple[str, dict[str, Any]]] = []
        self.deletes: list[str] = []
        self.errors: dict[str, Exception] = {}

    def _raise_for(self, path: str) -> None:
        if path in self.errors:
            raise self.errors[path]

    def read(self, path: str) -> dict[str, Any] | None:
        self._raise_for(path)
        value = self.data.get(path)
        return copy.deepcopy(value) if value is not None else None

    def write(self, path: str, payload: dict[str, Any]) -> dict[str, Any] | None:
        self._raise_for(path)
        self.writes.append((path, copy.deepcopy(payload)))
        self.data[path] = copy.deepcopy(payload)
        return copy.deepcopy(self.responses.get(path))

    def delete(self, path: str) -> None:
        self._raise_for(path)
        self.deletes.append(path)
        self.data.pop(path, None)

    def list(self, path: str) -> list[str]:
        prefix = path.rstrip("/") + "/"
        return sorted({key[len(prefix):].split("/")[0] for key in self.data if key.startswith(prefix)})

    def written_paths(self) -> list[str]:
        return [path for path, _ in self.writes]


class FakeObjectStore:
    """Kubernetes double holding decoded secrets and custom objects."""

    def __init__(self) -> None:
        self.secrets: dict[tuple[str, str], dict[str, str]] = {}
        self.created_secrets: list[dict[str, Any]] = []
        self.custom_objects: dict[tuple[str, str, str], dict[str, Any]] = {}

    def read_secret(self, namespace: str, name: str) -> dict[str, str] | None:
        return self.secrets.get((namespace, name))

    def create_secret(
        self,
        namespace: str,
        name: str,
        data: dict[str, str],
        owner_references: list[dict[str, Any]] | None = None,
        labels: dict[str, str] | None = None,
        immutable: bool = False,
    ) -> None:
        self.created_secrets.append(
            {
                "namespace": namespace,
                "name": name,
                "data": dict(data),
                "owner_references": owner_references,
                "labels": labels,
                "immutable": immutable,
            }
        )
        existing = self.secrets.get((namespace, name))
        if existing is not None and existing != data:
            raise SecretConflictError(f"secret {namespace}/{name} already exists with different data")
        self.secrets.setdefault((namespace, name), dict(data))

    def get_custom_object(self, namespace: str, plural: str, name: str) -> dict[str, Any] | None:
        return self.custom_objects.get((namespace, plural, name))

    def create_service_account_token(self, namespace: str, service_account: str) -> str:
        return f"token-for-{namespace}-{service_account}"


class FakeConnector:
    """Hands out the same FakeVault for every login."""

    def __init__(self, vault: FakeVault) -> None:
        self.vault = vault
        self.logins: list[tuple[Any, Any, str]] = []
        self.error: Exception | None = None

    def login(self, connection: Any, auth: Any, namespace: str) -> FakeVault:
        if self.error is not None:
            raise self.error
        self.logins.append((connection, auth, namespace))
        return self.vault


def build_body(
    spec: dict[str, Any],
    name: str = "test",
    namespace: str = "default",
    status: dict[str, Any] | None = None,
    generation: int = 1,
) -> dict[str, Any]:
    """Build a custom resource body with working connection settings."""
    full_spec = {
        "authentication": {"role": "operator"},
        "connection": {"address": "https://vault.example:8200"},
        **spec,
    }
    return {
        "apiVersion": "redhatcop.redhat.io/v1alpha1",
        "metadata": {
            "name": name,
            "namespace": namespace,
            "uid": f"uid-{name}",
            "generation": generation,
        },
        "spec": full_spec,
        "status": status or {},
    }


@pytest.fixture
def make_body():
    return build_body


@pytest.fixture
def vault() -> FakeVault:
    return FakeVault()


@pytest.fixture
def object_store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture
def connector(vault: FakeVault) -> FakeConnector:
    return FakeConnector(vault)


@pytest.fixture
def clients(object_store: FakeObjectStore, connector: FakeConnector) -> Clients:
    return Clients(object_store=object_store, connector=connector)  # type: ignore[arg-type]


@pytest.fixture
def engine(clients: Clients) -> ReconciliationEngine:
    return ReconciliationEngine(clients)
