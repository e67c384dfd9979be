# Area: Session
"""
trap_grid._session.registry — Session registry bridge
=====================================================

The external hub that tracks sessions and settles points. The session
service notifies it when a session starts and when it ends; player 1
is always the holder.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..errors import ConflictError, NotFoundError

logger = logging.getLogger("trap_grid.session.registry")


class SessionRegistry(ABC):
    """Abstract session/score ledger."""

    @abstractmethod
    def start_game(
        self,
        game_contract_id: str,
        session_id: int,
        player1: str,
        player2: str,
        player1_points: int,
        player2_points: int,
    ) -> None:
        """Record that a session has started."""

    @abstractmethod
    def end_game(self, session_id: int, player1_won: bool) -> None:
        """Record a session's outcome."""


@dataclass
class RegisteredGame:
    """One session as seen by the in-memory hub."""

    game_contract_id: str
    session_id: int
    player1: str
    player2: str
    player1_points: int
    player2_points: int
    active: bool = True
    player1_won: Optional[bool] = None


class InMemorySessionRegistry(SessionRegistry):
    """
    Local stand-in for the hub contract.

    Keeps every start/end call so local runs and tests can inspect them.
    Like the hub, it refuses a second start for a session id and an end
    for a session that is unknown or already settled.
    """

    def __init__(self):
        self.games: Dict[int, RegisteredGame] = {}
        self.events: List[tuple] = []

    def start_game(
        self,
        game_contract_id: str,
        session_id: int,
        player1: str,
        player2: str,
        player1_points: int,
        player2_points: int,
    ) -> None:
        if session_id in self.games:
            raise ConflictError("session already registered", field="session_id", value=session_id)
        self.games[session_id] = RegisteredGame(
            game_contract_id=game_contract_id,
            session_id=session_id,
            player1=player1,
            player2=player2,
            player1_points=player1_points,
            player2_points=player2_points,
        )
        self.events.append(("start", session_id))
        logger.info(f"Hub: session {session_id} started ({player1} vs {player2})")

    def end_game(self, session_id: int, player1_won: bool) -> None:
        game = self.games.get(session_id)
        if game is None:
            raise NotFoundError("session was never registered", field="session_id", value=session_id)
        if not game.active:
            raise ConflictError("session already settled", field="session_id", value=session_id)
        game.active = False
        game.player1_won = player1_won
        self.events.append(("end", session_id))
        logger.info(f"Hub: session {session_id} ended (player1_won={player1_won})")
