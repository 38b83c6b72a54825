"""Base Vault service interface."""

from __future__ import annotations

from typing import Any, Protocol


class VaultService(Protocol):
    """Protocol defining the logical Vault operations the operator uses."""

    def read(self, path: str) -> dict[str, Any] | None:
        """Read the data at a path, None if nothing is there."""
        ...

    def write(self, path: str, payload: dict[str, Any]) -> dict[str, Any] | None:
        """Write a payload to a path and return the response data, if any."""
        ...

    def delete(self, path: str) -> None:
        """Delete the object at a path. A missing object is not an error."""
        ...

    def list(self, path: str) -> list[str]:
        """List the keys under a path."""
        ...
