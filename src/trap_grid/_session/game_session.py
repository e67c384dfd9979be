# Area: Session
"""
trap_grid._session.game_session — Game session service
======================================================

Owns the session lifecycle and routes verifier decisions into scores.

Flow for one probe:
1. make_move consumes the cell (one INSERT, so no replay) and records
   the claim as a pending move.
2. If proof bytes come along (or later via submit_proof), the embedded
   public inputs are checked against the recorded move. Any
   disagreement is an IntegrityViolation and the gateway is not called.
3. The gateway decides. Accepted -> the move is verified and hits or
   misses goes up by one. Rejected, over budget or verifier failure ->
   the move stays pending and unscored, and a typed error is raised.

Every state change runs inside one ``BEGIN IMMEDIATE`` transaction,
so check-then-set logic cannot interleave with another call. The
gateway itself is called outside any transaction.
"""

from __future__ import annotations
import functools
import logging
from typing import List, Optional

from ..errors import (
    ConflictError,
    GatewayError,
    IntegrityViolationError,
    InvalidArgumentError,
    InvalidStateError,
    NotFoundError,
    RejectedProofError,
    TrapGridError,
    UnauthorizedError,
)
from .._commitment.field import CURVE_ORDER
from .._commitment.grid import check_coordinates
from .._proof.codec import decode_public_inputs
from .._proof.gateway import MoveVerificationGateway
from .._proof.variants import CircuitVariant, MerkleBoundInputs
from .database import init_database
from .enums import MoveStatus, Role, SessionEvent, SessionStatus
from .models import GameSession, MoveRecord
from .registry import SessionRegistry
from .repo_moves import MoveRepository
from .repo_sessions import SessionRepository
from .state_machine import SessionStateMachine
from .winner_policy import WinnerPolicy
from ..types import SnapshotDict

logger = logging.getLogger("trap_grid.session")

U32_MAX = 2 ** 32 - 1


def _session_context(method):
    """Attach the session id to errors raised without one."""

    @functools.wraps(method)
    def wrapper(self, session_id, *args, **kwargs):
        try:
            return method(self, session_id, *args, **kwargs)
        except TrapGridError as e:
            if e.session_id is None:
                e.session_id = session_id
            raise

    return wrapper


class GameSessionService:
    """
    Session state machine over a persistent store.

    Args:
        db_path: SQLite database path
        gateway: Verifier for the deployment's circuit variant
        registry: Hub notified on start and end
        winner_policy: Decides the winner at end of game
        variant: The deployment's circuit variant
        grid_size: N of the N×N grid
        game_contract_id: Identifier reported to the registry
        auto_end_when_exhausted: End the game once every cell is resolved
    """

    def __init__(
        self,
        db_path: str,
        gateway: MoveVerificationGateway,
        registry: SessionRegistry,
        winner_policy: WinnerPolicy,
        variant: CircuitVariant,
        grid_size: int = 8,
        game_contract_id: str = "trap-grid",
        auto_end_when_exhausted: bool = True,
    ):
        self.gateway = gateway
        self.registry = registry
        self.winner_policy = winner_policy
        self.variant = variant
        self.grid_size = grid_size
        self.game_contract_id = game_contract_id
        self.auto_end_when_exhausted = auto_end_when_exhausted
        init_database(db_path)
        self.sessions = SessionRepository(db_path)
        self.moves = MoveRepository(db_path)

    # ── Lifecycle ────────────────────────────────────────────────

    @_session_context
    def start_game(
        self,
        session_id: int,
        holder: str,
        prober: str,
        holder_points: int,
        prober_points: int,
        commitment_root: Optional[int] = None,
    ) -> GameSession:
        """
        Create and activate a session, then notify the registry.

        Raises:
            ConflictError: If ``session_id`` is already used
            InvalidArgumentError: Bad id, self-play, negative points, bad or missing root
        """
        if not 0 <= session_id <= U32_MAX:
            raise InvalidArgumentError("session id must fit in u32", field="session_id", value=session_id)
        if holder == prober:
            raise InvalidArgumentError("holder and prober must differ", field="prober", value=prober)
        for name, points in (("holder_points", holder_points), ("prober_points", prober_points)):
            if points < 0:
                raise InvalidArgumentError("points must not be negative", field=name, value=points)
        if self.variant.requires_root and commitment_root is None:
            raise InvalidArgumentError(
                f"{self.variant.value} sessions need a commitment root", field="commitment_root", value=None
            )
        if commitment_root is not None and not 0 <= commitment_root < CURVE_ORDER:
            raise InvalidArgumentError(
                "commitment root is not a field element", field="commitment_root", value=commitment_root
            )

        machine = SessionStateMachine(SessionStatus.CREATED, session_id)
        status = machine.transition(SessionEvent.START)

        with self.sessions.transaction() as conn:
            self.sessions.create_session(
                conn, session_id, holder, prober, holder_points, prober_points,
                circuit_variant=self.variant.value,
                commitment_root=commitment_root,
                status=status,
            )
            # A failing hub rolls the session back
            self.registry.start_game(
                self.game_contract_id, session_id, holder, prober, holder_points, prober_points
            )
            session = self.sessions.get_session(session_id, conn=conn)

        logger.info(f"[{session_id}] Session started: holder={holder} prober={prober}")
        return session

    @_session_context
    def end_game(self, session_id: int, caller: Optional[str] = None) -> GameSession:
        """
        End an active session, decide the winner and notify the registry.

        Raises:
            NotFoundError: Unknown session
            UnauthorizedError: ``caller`` is not a player
            AlreadyEndedError: Session already ended (a ConflictError)
            InvalidStateError: Session never started
        """
        with self.sessions.transaction() as conn:
            session = self._load(conn, session_id)
            if caller is not None and session.role_of(caller) is None:
                raise UnauthorizedError("only players may end a session", field="caller", value=caller)
            session = self._finish(conn, session)

        logger.info(f"[{session_id}] Session ended: winner={session.winner}")
        return session

    # ── Moves ────────────────────────────────────────────────────

    @_session_context
    def make_move(
        self,
        session_id: int,
        x: int,
        y: int,
        claim: bool,
        proof: Optional[bytes] = None,
        public_inputs: Optional[bytes] = None,
        caller: Optional[str] = None,
    ) -> MoveRecord:
        """
        Consume a cell and, when proof bytes are given, verify the claim.

        Args:
            session_id: Session to play in
            x, y: Probed cell
            claim: Claimed cell value (True = hit)
            proof: Proof bytes, optional
            public_inputs: Public input bytes, required together with ``proof``
            caller: Identity of the submitting player, checked when given

        Returns:
            The move record after this call

        Raises:
            NotFoundError, InvalidStateError, InvalidArgumentError,
            UnauthorizedError, ConflictError, IntegrityViolationError:
                the call had no effect
            RejectedProofError, VerificationBudgetExceededError, GatewayError:
                the cell stays consumed and unscored
        """
        if (proof is None) != (public_inputs is None):
            raise InvalidArgumentError(
                "proof and public inputs must be given together",
                field="public_inputs" if public_inputs is None else "proof",
                value=None,
            )

        with self.sessions.transaction() as conn:
            session = self._load(conn, session_id)
            SessionStateMachine(session.status, session_id).require(SessionStatus.ACTIVE)
            if caller is not None and session.role_of(caller) is None:
                raise UnauthorizedError("only players may make moves", field="caller", value=caller)
            check_coordinates(x, y, self.grid_size)
            record = self.moves.consume_cell(conn, session_id, x, y, claim)
            if public_inputs is not None:
                self._check_integrity(session, x, y, claim, public_inputs)

        logger.info(f"[{session_id}] Cell ({x}, {y}) consumed, claim={bool(claim)}")
        if proof is None:
            return record
        return self._verify_and_score(session_id, x, y, bool(claim), proof, public_inputs)

    @_session_context
    def submit_proof(
        self,
        session_id: int,
        x: int,
        y: int,
        proof: bytes,
        public_inputs: bytes,
        caller: Optional[str] = None,
    ) -> MoveRecord:
        """
        Prove the claim of an already consumed, still pending move.

        Raises:
            NotFoundError: Unknown session, or no move at the cell
            ConflictError: The move is already verified or discarded
            UnauthorizedError: ``caller`` is not the holder
            IntegrityViolationError: Public inputs disagree with the move
            RejectedProofError, VerificationBudgetExceededError, GatewayError:
                move stays pending
        """
        with self.sessions.transaction() as conn:
            session = self._load(conn, session_id)
            SessionStateMachine(session.status, session_id).require(SessionStatus.ACTIVE)
            self._require_holder(session, caller)
            record = self._load_pending(conn, session_id, x, y)
            self._check_integrity(session, x, y, record.claim, public_inputs)

        return self._verify_and_score(session_id, x, y, record.claim, proof, public_inputs)

    @_session_context
    def abandon_move(self, session_id: int, x: int, y: int, caller: Optional[str] = None) -> MoveRecord:
        """Give up on a pending move. The cell stays consumed and unscored."""
        with self.sessions.transaction() as conn:
            session = self._load(conn, session_id)
            SessionStateMachine(session.status, session_id).require(SessionStatus.ACTIVE)
            self._require_holder(session, caller)
            self._load_pending(conn, session_id, x, y)
            self.moves.resolve(conn, session_id, x, y, MoveStatus.DISCARDED)
            self._maybe_auto_end(conn, session_id)
            record = self.moves.get_move(session_id, x, y, conn=conn)

        logger.info(f"[{session_id}] Move ({x}, {y}) abandoned")
        return record

    # ── Queries ──────────────────────────────────────────────────

    @_session_context
    def get_game(self, session_id: int) -> GameSession:
        session = self.sessions.get_session(session_id)
        if session is None:
            raise NotFoundError("unknown session", field="session_id", value=session_id)
        return session

    @_session_context
    def get_moves(self, session_id: int) -> List[MoveRecord]:
        self.get_game(session_id)
        return self.moves.get_moves(session_id)

    def snapshot(self, session_id: int) -> SnapshotDict:
        """Session plus moves as plain dicts."""
        return {
            "session": self.get_game(session_id).to_dict(),
            "moves": [m.to_dict() for m in self.get_moves(session_id)],
        }

    # ── Internals ────────────────────────────────────────────────

    def _load(self, conn, session_id: int) -> GameSession:
        session = self.sessions.get_session(session_id, conn=conn)
        if session is None:
            raise NotFoundError("unknown session", field="session_id", value=session_id)
        return session

    def _load_pending(self, conn, session_id: int, x: int, y: int) -> MoveRecord:
        check_coordinates(x, y, self.grid_size)
        record = self.moves.get_move(session_id, x, y, conn=conn)
        if record is None:
            raise NotFoundError("no move at this cell", field="cell", value=(x, y))
        if record.status is not MoveStatus.PENDING:
            raise ConflictError(
                f"move already {record.status.value}", field="cell", value=(x, y)
            )
        return record

    def _require_holder(self, session: GameSession, caller: Optional[str]) -> None:
        if caller is not None and session.role_of(caller) is not Role.HOLDER:
            raise UnauthorizedError("only the holder may prove moves", field="caller", value=caller)

    def _check_integrity(
        self, session: GameSession, x: int, y: int, claim: bool, public_inputs: bytes
    ) -> None:
        """Compare the embedded public inputs with the recorded move."""
        public = decode_public_inputs(public_inputs, self.variant, self.grid_size)
        if public.claim != bool(claim):
            raise IntegrityViolationError(
                "public input claim disagrees with the recorded claim",
                field="claim",
                value=public.claim,
                details={"recorded_claim": bool(claim), "x": x, "y": y},
            )
        if (public.x, public.y) != (x, y):
            raise IntegrityViolationError(
                "public input coordinates disagree with the move",
                field="cell",
                value=(public.x, public.y),
                details={"recorded_cell": [x, y]},
            )
        if isinstance(public, MerkleBoundInputs) and public.root != session.commitment_root:
            raise IntegrityViolationError(
                "public input root disagrees with the session commitment",
                field="root",
                value=hex(public.root),
            )

    def _verify_and_score(
        self, session_id: int, x: int, y: int, claim: bool, proof: bytes, public_inputs: bytes
    ) -> MoveRecord:
        try:
            accepted = self.gateway.verify(proof, public_inputs)
        except TrapGridError as e:
            self._record_failure(session_id, x, y, e.kind)
            raise
        except Exception as e:
            self._record_failure(session_id, x, y, GatewayError.kind)
            raise GatewayError(
                f"verification gateway failed: {e}",
                field="gateway",
                value=type(e).__name__,
                session_id=session_id,
                details={"x": x, "y": y},
            ) from e

        if not accepted:
            self._record_failure(session_id, x, y, RejectedProofError.kind)
            raise RejectedProofError(
                "verifier rejected the proof; the cell stays consumed",
                field="proof",
                value=len(proof),
                session_id=session_id,
                details={"x": x, "y": y},
            )

        with self.sessions.transaction() as conn:
            session = self._load(conn, session_id)
            SessionStateMachine(session.status, session_id).require(SessionStatus.ACTIVE)
            if self.moves.resolve(conn, session_id, x, y, MoveStatus.VERIFIED) != 1:
                raise ConflictError("move was resolved concurrently", field="cell", value=(x, y))
            if self.sessions.record_score(conn, session_id, claim) != 1:
                raise InvalidStateError("session is no longer active", field="status", value=None)
            self.moves.record_attempt(conn, session_id, x, y, None)
            self._maybe_auto_end(conn, session_id)
            record = self.moves.get_move(session_id, x, y, conn=conn)

        logger.info(f"[{session_id}] Move ({x}, {y}) verified: {'hit' if claim else 'miss'}")
        return record

    def _record_failure(self, session_id: int, x: int, y: int, kind: str) -> None:
        logger.warning(f"[{session_id}] Proof for ({x}, {y}) failed: {kind}")
        with self.moves.transaction() as conn:
            self.moves.record_attempt(conn, session_id, x, y, kind)

    def _maybe_auto_end(self, conn, session_id: int) -> None:
        if not self.auto_end_when_exhausted:
            return
        cells = self.grid_size * self.grid_size
        if self.moves.count_moves(conn, session_id) < cells:
            return
        if self.moves.count_moves(conn, session_id, MoveStatus.PENDING) > 0:
            return
        logger.info(f"[{session_id}] Every cell resolved, ending session")
        self._finish(conn, self._load(conn, session_id))

    def _finish(self, conn, session: GameSession) -> GameSession:
        """Transition to ENDED inside an open transaction."""
        machine = SessionStateMachine(session.status, session.session_id)
        machine.transition(SessionEvent.END)

        discarded = self.moves.discard_pending(conn, session.session_id)
        if discarded:
            logger.info(f"[{session.session_id}] Discarded {discarded} pending moves")
        winner_role = self.winner_policy(session)
        winner = session.identity_of(winner_role)
        self.sessions.mark_ended(conn, session.session_id, winner)
        self.registry.end_game(session.session_id, winner_role is Role.HOLDER)
        return self.sessions.get_session(session.session_id, conn=conn)
