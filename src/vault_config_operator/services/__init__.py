"""Clients for the systems a reconciliation pass talks to."""
