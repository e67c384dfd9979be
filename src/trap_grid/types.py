"""
trap_grid.types — TypedDict schemas for serialized views
========================================================

This module documents the exact structure of the plain dictionaries
the package hands out: session snapshots, move records, error payloads
and the CLI's commitment summary.

All types are exported from the main package:

    from trap_grid import SessionDict, MoveDict, SnapshotDict
"""

from typing import Any, Dict, List, Literal, Optional, TypedDict


# ============================================
# Session state
# ============================================

class SessionDict(TypedDict):
    """Serialized GameSession.

    Fields
    ------
    session_id : int
        u32 session identifier.
    holder, prober : str
        Player identities. The holder is player 1 towards the registry.
    status : str
        "active" or "ended".
    moves_made : int
        Verified moves, always hits + misses.
    winner : str or None
        Winner identity once the session has ended.
    commitment_root : str or None
        Hex root for Merkle-bound sessions.
    """
    session_id: int
    holder: str
    prober: str
    holder_points: int
    prober_points: int
    status: Literal["created", "active", "ended"]
    moves_made: int
    hits: int
    misses: int
    winner: Optional[str]
    commitment_root: Optional[str]
    circuit_variant: str


class MoveDict(TypedDict):
    """Serialized MoveRecord."""
    session_id: int
    x: int
    y: int
    claim: bool
    status: Literal["pending", "verified", "discarded"]
    verified: bool
    sequence: int           # order the cell was consumed in
    attempts: int           # proof submissions seen
    last_error: Optional[str]


class SnapshotDict(TypedDict):
    """Returned by GameSessionService.snapshot()."""
    session: SessionDict
    moves: List[MoveDict]


# ============================================
# Errors
# ============================================

class ErrorPayload(TypedDict):
    """Returned by TrapGridError.to_dict()."""
    kind: str               # e.g., "Conflict", "RejectedProof"
    message: str
    field: Optional[str]
    value: Any
    session_id: Optional[int]
    details: Dict[str, Any]


# ============================================
# Commitment
# ============================================

class CommitmentSummary(TypedDict):
    """Printed by ``python -m trap_grid commit``.

    The salt is the holder's secret and only appears when requested.
    """
    grid_size: int
    depth: int
    leaf_count: int
    root: str
    salt: Optional[str]
