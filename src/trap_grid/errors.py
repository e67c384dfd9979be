"""
trap_grid.errors — Custom exception classes
============================================

Defines the exception hierarchy for the session protocol.
Every exception carries its error kind plus the offending field and
value, so a client can decide whether to retry, switch circuit
variants, or end the session.

Kinds
-----
NotFound, Conflict (AlreadyEnded is a Conflict), InvalidArgument,
InvalidState, Unauthorized, IntegrityViolation, RejectedProof,
VerificationBudgetExceeded, GatewayError.
"""

from __future__ import annotations
from typing import Any, Dict, Optional

from .error_formatter import format_error_block
from .types import ErrorPayload


class TrapGridError(Exception):
    """Base exception for all trap_grid errors."""

    kind = "TrapGridError"

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Any = None,
        session_id: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.field = field
        self.value = value
        self.session_id = session_id
        self.details = details or {}
        super().__init__(self._render())

    def _render(self) -> str:
        text = f"[{self.kind}] {self.message}"
        if self.field is not None:
            text += f" ({self.field}={self.value!r})"
        return text

    def to_dict(self) -> ErrorPayload:
        """Client-facing payload for this error."""
        return {
            "kind": self.kind,
            "message": self.message,
            "field": self.field,
            "value": self.value,
            "session_id": self.session_id,
            "details": self.details,
        }

    def format_error_log(self) -> str:
        return format_error_block(
            kind=self.kind,
            message=self.message,
            session_id=self.session_id,
            field=self.field,
            value=self.value,
            details=self.details or None,
        )


class NotFoundError(TrapGridError):
    """Raised when a session (or a move within it) does not exist."""
    kind = "NotFound"


class ConflictError(TrapGridError):
    """Raised on duplicate session ids, duplicate moves, or double end."""
    kind = "Conflict"


class AlreadyEndedError(ConflictError):
    """Raised when ending a session that has already ended."""
    kind = "AlreadyEnded"


class InvalidArgumentError(TrapGridError):
    """Raised for out-of-range coordinates and malformed byte payloads."""
    kind = "InvalidArgument"


class InvalidStateError(TrapGridError):
    """Raised when an operation runs outside its lifecycle state."""
    kind = "InvalidState"


class UnauthorizedError(TrapGridError):
    """Raised when the wrong party calls a privileged operation."""
    kind = "Unauthorized"


class IntegrityViolationError(TrapGridError):
    """Raised when embedded public inputs disagree with the recorded move.

    Always raised before the verification gateway is called.
    """
    kind = "IntegrityViolation"


class RejectedProofError(TrapGridError):
    """Raised when the verifier returns False for a proof.

    The session continues and the cell stays consumed.
    """
    kind = "RejectedProof"


class VerificationBudgetExceededError(TrapGridError):
    """Raised when verification does not fit the host's compute budget.

    Distinct from a rejected proof: the circuit variant is too expensive
    to verify, and retrying the same proof will not help.
    """
    kind = "VerificationBudgetExceeded"


class GatewayError(TrapGridError):
    """Raised when the verifier could not be run at all.

    The proof was never judged; the move stays pending and may be
    resubmitted once the verifier is reachable again.
    """
    kind = "GatewayError"
