"""Certificate authority lifecycle state."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class CAState(str, Enum):
    """Where a certificate authority is in its lifecycle."""

    NOT_GENERATED = "NotGenerated"
    GENERATED = "Generated"
    EXPORTED = "Exported"
    AWAITING_SIGNATURE = "AwaitingSignature"
    SIGNED = "Signed"


class InvalidTransitionError(RuntimeError):
    """A lifecycle step was attempted out of order."""


@dataclass
class CALifecycle:
    """Lifecycle of one CA, persisted in the resource status.

    ``state`` is authoritative; the ``generated``/``exported``/``signed``
    booleans are derived from it for status consumers. Exported is only ever
    set together with Generated and Signed is only reachable after Generated.
    """

    state: CAState = CAState.NOT_GENERATED
    exported: bool = False

    @property
    def generated(self) -> bool:
        return self.state is not CAState.NOT_GENERATED

    @property
    def signed(self) -> bool:
        return self.state is CAState.SIGNED

    def mark_generated(self, exported: bool) -> None:
        if self.generated:
            raise InvalidTransitionError(f"cannot generate a CA in state {self.state.value}")
        self.exported = exported
        self.state = CAState.EXPORTED if exported else CAState.GENERATED

    def mark_awaiting_signature(self) -> None:
        if not self.generated or self.signed:
            raise InvalidTransitionError(f"cannot await a signature in state {self.state.value}")
        self.state = CAState.AWAITING_SIGNATURE

    def mark_signed(self) -> None:
        if not self.generated:
            raise InvalidTransitionError("cannot sign a CA that was never generated")
        self.state = CAState.SIGNED

    @classmethod
    def from_status(cls, status: dict[str, Any] | None) -> CALifecycle:
        """Restore the lifecycle from a resource status.

        Status written before ``state`` existed only has the booleans, so
        the state is derived from them in that case.
        """
        status = status or {}
        exported = bool(status.get("exported", False))
        raw_state = status.get("state")
        if raw_state:
            return cls(state=CAState(raw_state), exported=exported)
        if status.get("signed"):
            state = CAState.SIGNED
        elif status.get("generated"):
            state = CAState.EXPORTED if exported else CAState.GENERATED
        else:
            state = CAState.NOT_GENERATED
        return cls(state=state, exported=exported and state is not CAState.NOT_GENERATED)

    def to_status(self) -> dict[str, Any]:
        return {
            "state": self.state.value,
            "generated": self.generated,
            "exported": self.exported,
            "signed": self.signed,
        }


@dataclass
class IntermediateArtifact:
    """CSR and signed certificate carried through one intermediate pass."""

    csr: str | None = None
    certificate: str | None = None
