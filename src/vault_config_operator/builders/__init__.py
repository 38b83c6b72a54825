"""Builders that turn custom resource specs into Vault paths and payloads."""

from .paths import clean_path, resolve_name
from .payload import FieldMapping, project_fields

__all__ = ["clean_path", "resolve_name", "FieldMapping", "project_fields"]
