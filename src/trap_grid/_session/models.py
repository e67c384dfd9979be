# Area: Session
"""
trap_grid._session.models — Session and move dataclasses
========================================================

Row-backed views of the persisted session state. Repositories return
these; the session service never hands out raw database rows.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..types import MoveDict, SessionDict

from .enums import MoveStatus, Role, SessionStatus


@dataclass
class GameSession:
    """
    One two-party game.

    Attributes:
        session_id: Unique session identifier
        holder: Identity of the party hiding the grid (player 1)
        prober: Identity of the party probing cells (player 2)
        holder_points: Points committed by the holder
        prober_points: Points committed by the prober
        status: Lifecycle status
        moves_made: Number of verified moves
        hits: Verified moves whose claim was True
        misses: Verified moves whose claim was False
        winner: Winner identity once ended
        commitment_root: Grid root for variants that commit up front
        circuit_variant: Variant the session was started under
    """

    session_id: int
    holder: str
    prober: str
    holder_points: int
    prober_points: int
    status: SessionStatus
    moves_made: int = 0
    hits: int = 0
    misses: int = 0
    winner: Optional[str] = None
    commitment_root: Optional[int] = None
    circuit_variant: str = ""

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "GameSession":
        root = row.get("commitment_root")
        return cls(
            session_id=row["session_id"],
            holder=row["holder"],
            prober=row["prober"],
            holder_points=row["holder_points"],
            prober_points=row["prober_points"],
            status=SessionStatus(row["status"]),
            moves_made=row["moves_made"],
            hits=row["hits"],
            misses=row["misses"],
            winner=row.get("winner"),
            commitment_root=int(root, 16) if root else None,
            circuit_variant=row.get("circuit_variant") or "",
        )

    def role_of(self, identity: str) -> Optional[Role]:
        if identity == self.holder:
            return Role.HOLDER
        if identity == self.prober:
            return Role.PROBER
        return None

    def identity_of(self, role: Role) -> str:
        return self.holder if role is Role.HOLDER else self.prober

    def to_dict(self) -> SessionDict:
        return {
            "session_id": self.session_id,
            "holder": self.holder,
            "prober": self.prober,
            "holder_points": self.holder_points,
            "prober_points": self.prober_points,
            "status": self.status.value,
            "moves_made": self.moves_made,
            "hits": self.hits,
            "misses": self.misses,
            "winner": self.winner,
            "commitment_root": hex(self.commitment_root) if self.commitment_root is not None else None,
            "circuit_variant": self.circuit_variant,
        }


@dataclass
class MoveRecord:
    """
    One probe of one cell. Unique per (session_id, x, y).

    Attributes:
        session_id: Owning session
        x, y: Probed cell
        claim: Holder's public claim for the cell
        status: pending, verified or discarded
        sequence: Order in which the cell was consumed within the session
        attempts: Proof submissions seen for this move
        last_error: Kind of the last failed verification, if any
    """

    session_id: int
    x: int
    y: int
    claim: bool
    status: MoveStatus
    sequence: int
    attempts: int = 0
    last_error: Optional[str] = None

    @property
    def verified(self) -> bool:
        return self.status is MoveStatus.VERIFIED

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "MoveRecord":
        return cls(
            session_id=row["session_id"],
            x=row["x"],
            y=row["y"],
            claim=bool(row["claim"]),
            status=MoveStatus(row["status"]),
            sequence=row["sequence"],
            attempts=row["attempts"],
            last_error=row.get("last_error"),
        )

    def to_dict(self) -> MoveDict:
        return {
            "session_id": self.session_id,
            "x": self.x,
            "y": self.y,
            "claim": self.claim,
            "status": self.status.value,
            "verified": self.verified,
            "sequence": self.sequence,
            "attempts": self.attempts,
            "last_error": self.last_error,
        }
