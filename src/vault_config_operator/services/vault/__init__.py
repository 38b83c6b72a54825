"""Vault service access."""

from .base import VaultService
from .client import VaultClient, VaultConnector

__all__ = ["VaultService", "VaultClient", "VaultConnector"]
