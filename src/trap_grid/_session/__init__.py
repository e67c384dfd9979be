# Area: Session
"""
Session lifecycle and persistence.

This package handles:
- The session state machine and move records
- SQLite storage with atomic cell consumption
- Winner policies and the registry bridge
- The GameSessionService that ties them together
"""

from .enums import MoveStatus, Role, SessionEvent, SessionStatus
from .models import GameSession, MoveRecord
from .state_machine import SessionStateMachine
from .database import init_database
from .winner_policy import (
    POLICY_NAMES,
    HitRatioPolicy,
    HitThresholdPolicy,
    MoveCountPolicy,
    WinnerPolicy,
    build_winner_policy,
)
from .registry import InMemorySessionRegistry, RegisteredGame, SessionRegistry
from .game_session import GameSessionService

__all__ = [
    "MoveStatus",
    "Role",
    "SessionEvent",
    "SessionStatus",
    "GameSession",
    "MoveRecord",
    "SessionStateMachine",
    "init_database",
    "POLICY_NAMES",
    "HitRatioPolicy",
    "HitThresholdPolicy",
    "MoveCountPolicy",
    "WinnerPolicy",
    "build_winner_policy",
    "InMemorySessionRegistry",
    "RegisteredGame",
    "SessionRegistry",
    "GameSessionService",
]
