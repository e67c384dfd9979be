# Area: Session
"""
trap_grid._session.repo_moves — Move Records Repository
=======================================================

Repository for move_records table operations.
(session_id, x, y) is the primary key: consuming a cell is a single
INSERT, so two racing probes of the same cell cannot both succeed.
"""

import sqlite3
from typing import List, Optional

from ..errors import ConflictError
from .database import BaseRepository
from .enums import MoveStatus
from .models import MoveRecord


class MoveRepository(BaseRepository):
    """
    Repository for move_records table.

    Handles consuming cells and resolving pending moves.
    """

    def consume_cell(
        self, conn: sqlite3.Connection, session_id: int, x: int, y: int, claim: bool
    ) -> MoveRecord:
        """
        Create the pending record for a probe.

        Raises:
            ConflictError: If the cell was already probed in this session
        """
        row = self._execute_one(
            "SELECT COUNT(*) AS n FROM move_records WHERE session_id = ?", (session_id,), conn=conn
        )
        sequence = row["n"] if row else 0
        try:
            self._execute(
                """
                INSERT INTO move_records (session_id, x, y, claim, status, sequence)
                VALUES (?, ?, ?, ?, 'pending', ?)
                """,
                (session_id, x, y, int(bool(claim)), sequence),
                conn=conn,
            )
        except sqlite3.IntegrityError:
            raise ConflictError(
                "cell already probed",
                field="cell",
                value=(x, y),
                session_id=session_id,
            )
        return MoveRecord(
            session_id=session_id, x=x, y=y, claim=bool(claim),
            status=MoveStatus.PENDING, sequence=sequence,
        )

    def get_move(
        self, session_id: int, x: int, y: int, conn: Optional[sqlite3.Connection] = None
    ) -> Optional[MoveRecord]:
        row = self._execute_one(
            "SELECT * FROM move_records WHERE session_id = ? AND x = ? AND y = ?",
            (session_id, x, y),
            conn=conn,
        )
        return MoveRecord.from_row(row) if row else None

    def get_moves(self, session_id: int, conn: Optional[sqlite3.Connection] = None) -> List[MoveRecord]:
        """All moves of a session in the order the cells were consumed."""
        rows = self._execute(
            "SELECT * FROM move_records WHERE session_id = ? ORDER BY sequence",
            (session_id,),
            fetch=True,
            conn=conn,
        ) or []
        return [MoveRecord.from_row(r) for r in rows]

    def count_moves(self, conn: sqlite3.Connection, session_id: int, status: Optional[MoveStatus] = None) -> int:
        if status is None:
            row = self._execute_one(
                "SELECT COUNT(*) AS n FROM move_records WHERE session_id = ?", (session_id,), conn=conn
            )
        else:
            row = self._execute_one(
                "SELECT COUNT(*) AS n FROM move_records WHERE session_id = ? AND status = ?",
                (session_id, status.value),
                conn=conn,
            )
        return row["n"] if row else 0

    def resolve(
        self, conn: sqlite3.Connection, session_id: int, x: int, y: int, status: MoveStatus
    ) -> int:
        """
        Resolve a pending move exactly once.

        Returns:
            Number of rows changed: 1 if the move was pending, else 0
        """
        query = """
            UPDATE move_records
            SET status = ?, resolved_at = CURRENT_TIMESTAMP
            WHERE session_id = ? AND x = ? AND y = ? AND status = 'pending'
        """
        return self._execute_count(query, (status.value, session_id, x, y), conn)

    def record_attempt(
        self, conn: sqlite3.Connection, session_id: int, x: int, y: int, error_kind: Optional[str]
    ) -> None:
        """Count a proof submission and remember why it failed, if it did."""
        query = """
            UPDATE move_records
            SET attempts = attempts + 1, last_error = ?
            WHERE session_id = ? AND x = ? AND y = ?
        """
        self._execute(query, (error_kind, session_id, x, y), conn=conn)

    def discard_pending(self, conn: sqlite3.Connection, session_id: int) -> int:
        """Discard every pending move of a session."""
        query = """
            UPDATE move_records
            SET status = 'discarded', resolved_at = CURRENT_TIMESTAMP
            WHERE session_id = ? AND status = 'pending'
        """
        return self._execute_count(query, (session_id,), conn)
