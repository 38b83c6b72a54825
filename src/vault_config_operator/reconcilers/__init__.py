"""Reconciliation of resources against Vault."""
