# Area: Session
"""
trap_grid._session.enums — Session lifecycle enums
==================================================

Defines the states and events of a game session plus the status of
individual move records.
"""

from enum import Enum


class SessionStatus(Enum):
    """
    States of a game session.

    State transitions:
    CREATED -> ACTIVE (on START)
    ACTIVE -> ENDED (on END)

    ENDED is terminal. Starting a session creates and activates it in
    one step, so CREATED is never observable from outside.
    """
    CREATED = "created"
    ACTIVE = "active"
    ENDED = "ended"


class SessionEvent(Enum):
    """Events that drive session transitions."""
    START = "START"
    END = "END"


class MoveStatus(Enum):
    """
    Status of a move record.

    A record is created PENDING and changes exactly once, to VERIFIED
    (accepted proof, scored) or DISCARDED (abandoned or swept at game
    end, never scored). Records are never deleted.
    """
    PENDING = "pending"
    VERIFIED = "verified"
    DISCARDED = "discarded"


class Role(Enum):
    """The two parties of a session."""
    HOLDER = "holder"
    PROBER = "prober"
