"""Explicit bundle of the external clients a reconciliation pass uses."""

from __future__ import annotations

from dataclasses import dataclass

from .kube import ObjectStore, get_object_store
from .vault.client import VaultConnector


@dataclass
class Clients:
    """Kubernetes object store plus the factory for Vault sessions."""

    object_store: ObjectStore
    connector: VaultConnector


_clients: Clients | None = None


def get_clients() -> Clients:
    """Return the process-wide clients, creating them on first use."""
    global _clients
    if _clients is None:
        object_store = get_object_store()
        _clients = Clients(object_store=object_store, connector=VaultConnector(object_store))
    return _clients
