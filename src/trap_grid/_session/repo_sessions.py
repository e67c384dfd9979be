# Area: Session
"""
trap_grid._session.repo_sessions — Sessions Repository
======================================================

Repository for game_sessions table operations.
Session ids are the primary key, so a duplicate start is rejected by
the insert itself rather than by a separate lookup.
"""

import sqlite3
from typing import Optional

from ..errors import ConflictError
from .database import BaseRepository
from .enums import SessionStatus
from .models import GameSession


class SessionRepository(BaseRepository):
    """
    Repository for game_sessions table.

    Handles creating, retrieving, scoring and ending sessions.
    """

    def create_session(
        self,
        conn: sqlite3.Connection,
        session_id: int,
        holder: str,
        prober: str,
        holder_points: int,
        prober_points: int,
        circuit_variant: str,
        commitment_root: Optional[int] = None,
        status: SessionStatus = SessionStatus.ACTIVE,
    ) -> None:
        """
        Insert a new session row.

        Raises:
            ConflictError: If the session id is already taken
        """
        query = """
            INSERT INTO game_sessions
            (session_id, holder, prober, holder_points, prober_points,
             status, commitment_root, circuit_variant)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """
        root = hex(commitment_root) if commitment_root is not None else None
        try:
            self._execute(
                query,
                (session_id, holder, prober, holder_points, prober_points,
                 status.value, root, circuit_variant),
                conn=conn,
            )
        except sqlite3.IntegrityError:
            raise ConflictError(
                "session id already in use", field="session_id", value=session_id, session_id=session_id
            )

    def get_session(
        self, session_id: int, conn: Optional[sqlite3.Connection] = None
    ) -> Optional[GameSession]:
        """
        Get a session by ID.

        Args:
            session_id: Session identifier to look up
            conn: Open transaction to read within, if any

        Returns:
            GameSession or None if not found
        """
        row = self._execute_one(
            "SELECT * FROM game_sessions WHERE session_id = ?", (session_id,), conn=conn
        )
        return GameSession.from_row(row) if row else None

    def record_score(self, conn: sqlite3.Connection, session_id: int, hit: bool) -> int:
        """Count one verified move. Only touches active sessions."""
        column = "hits" if hit else "misses"
        query = f"""
            UPDATE game_sessions
            SET moves_made = moves_made + 1, {column} = {column} + 1
            WHERE session_id = ? AND status = 'active'
        """
        return self._execute_count(query, (session_id,), conn)

    def mark_ended(self, conn: sqlite3.Connection, session_id: int, winner: str) -> int:
        """Move an active session to ended and record the winner."""
        query = """
            UPDATE game_sessions
            SET status = 'ended', winner = ?, ended_at = CURRENT_TIMESTAMP
            WHERE session_id = ? AND status = 'active'
        """
        return self._execute_count(query, (winner, session_id), conn)
