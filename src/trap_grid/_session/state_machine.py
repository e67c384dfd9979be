# Area: Session
"""
trap_grid._session.state_machine — Session state machine
========================================================

Validates lifecycle transitions for one session. Transitions are
monotonic: there are no reverse edges and nothing leaves ENDED.
"""

from typing import Optional

from ..errors import AlreadyEndedError, InvalidStateError
from .enums import SessionEvent, SessionStatus


# Valid state transitions: {current_state: {event: next_state}}
TRANSITIONS = {
    SessionStatus.CREATED: {
        SessionEvent.START: SessionStatus.ACTIVE,
    },
    SessionStatus.ACTIVE: {
        SessionEvent.END: SessionStatus.ENDED,
    },
    SessionStatus.ENDED: {},
}


class SessionStateMachine:
    """
    State machine for one session's lifecycle.

    Attributes:
        current_state: The current session status
        session_id: Session this machine belongs to, for error context
    """

    def __init__(
        self,
        current_state: SessionStatus = SessionStatus.CREATED,
        session_id: Optional[int] = None,
    ):
        self.current_state = current_state
        self.session_id = session_id

    def can_transition(self, event: SessionEvent) -> bool:
        """
        Check if a transition is valid from current state.

        Args:
            event: The event to check

        Returns:
            True if the transition is valid, False otherwise
        """
        return event in TRANSITIONS.get(self.current_state, {})

    def transition(self, event: SessionEvent) -> SessionStatus:
        """
        Execute a state transition.

        Args:
            event: The event triggering the transition

        Returns:
            The new state after transition

        Raises:
            AlreadyEndedError: If the session has already ended
            InvalidStateError: For any other invalid transition
        """
        if not self.can_transition(event):
            if self.current_state is SessionStatus.ENDED:
                raise AlreadyEndedError(
                    "session has already ended",
                    field="status",
                    value=self.current_state.value,
                    session_id=self.session_id,
                )
            raise InvalidStateError(
                f"cannot apply {event.value} in state {self.current_state.value}",
                field="status",
                value=self.current_state.value,
                session_id=self.session_id,
            )

        self.current_state = TRANSITIONS[self.current_state][event]
        return self.current_state

    def require(self, state: SessionStatus) -> None:
        """Raise InvalidStateError unless the session is in ``state``."""
        if self.current_state is not state:
            raise InvalidStateError(
                f"session must be {state.value}",
                field="status",
                value=self.current_state.value,
                session_id=self.session_id,
            )
