"""
trap_grid — Zero-knowledge trap grid sessions
=============================================

A holder hides traps in an N×N grid and commits to it; a prober picks
cells; the holder answers each probe with a claim plus a proof that the
claim matches the committed grid. A session only ever scores a move
after an external verifier has accepted its proof.

Quick Start:
    from trap_grid import (
        Grid, build_commitment, build_inputs, CircuitVariant,
        GameSessionService, InMemorySessionRegistry, HitRatioPolicy,
    )

    grid = Grid.from_traps([(0, 0), (4, 4)])
    commitment = build_commitment(grid)
    service = GameSessionService(
        "game.db", gateway, InMemorySessionRegistry(), HitRatioPolicy(0.5),
        CircuitVariant.MERKLE_BOUND,
    )
    service.start_game(1, "alice", "bob", 100, 100, commitment_root=commitment.root)

Configuration-driven wiring:
    from trap_grid import load_config
    service = load_config("config.json").build_service(registry)

Error Kinds
-----------
Every error is a TrapGridError carrying ``kind``, ``field`` and ``value``:

    from trap_grid import ConflictError, RejectedProofError, ...
"""

from .errors import (
    TrapGridError,
    NotFoundError,
    ConflictError,
    AlreadyEndedError,
    InvalidArgumentError,
    InvalidStateError,
    UnauthorizedError,
    IntegrityViolationError,
    RejectedProofError,
    VerificationBudgetExceededError,
    GatewayError,
)
from ._commitment import (
    CURVE_ORDER,
    Grid,
    GridCommitment,
    MerkleProof,
    build_commitment,
    load_grid,
    proof_for,
    tree_depth,
    verify_cell,
    verify_merkle,
)
from ._proof import (
    CircuitVariant,
    CommitmentBoundInputs,
    MerkleBoundInputs,
    PositionOnlyInputs,
    decode_public_inputs,
    encode_public_inputs,
    split_for_variant,
    split_prover_output,
    PrivateInputs,
    ProofRequest,
    build_inputs,
    Prover,
    ProofJob,
    TransparentProver,
    CommandGateway,
    MoveVerificationGateway,
    TransparentGateway,
)
from ._session import (
    GameSession,
    GameSessionService,
    HitRatioPolicy,
    HitThresholdPolicy,
    InMemorySessionRegistry,
    MoveCountPolicy,
    MoveRecord,
    MoveStatus,
    Role,
    SessionRegistry,
    SessionStatus,
    WinnerPolicy,
    build_winner_policy,
)
from ._config import TrapGridConfig, load_config
from ._shared import setup_logging
from .types import CommitmentSummary, ErrorPayload, MoveDict, SessionDict, SnapshotDict

__all__ = [
    # Errors
    "TrapGridError",
    "NotFoundError",
    "ConflictError",
    "AlreadyEndedError",
    "InvalidArgumentError",
    "InvalidStateError",
    "UnauthorizedError",
    "IntegrityViolationError",
    "RejectedProofError",
    "VerificationBudgetExceededError",
    "GatewayError",
    # Commitment
    "CURVE_ORDER",
    "Grid",
    "GridCommitment",
    "MerkleProof",
    "build_commitment",
    "load_grid",
    "proof_for",
    "tree_depth",
    "verify_cell",
    "verify_merkle",
    # Proof plumbing
    "CircuitVariant",
    "CommitmentBoundInputs",
    "MerkleBoundInputs",
    "PositionOnlyInputs",
    "decode_public_inputs",
    "encode_public_inputs",
    "split_for_variant",
    "split_prover_output",
    "PrivateInputs",
    "ProofRequest",
    "build_inputs",
    "Prover",
    "ProofJob",
    "TransparentProver",
    "CommandGateway",
    "MoveVerificationGateway",
    "TransparentGateway",
    # Sessions
    "GameSession",
    "GameSessionService",
    "HitRatioPolicy",
    "HitThresholdPolicy",
    "InMemorySessionRegistry",
    "MoveCountPolicy",
    "MoveRecord",
    "MoveStatus",
    "Role",
    "SessionRegistry",
    "SessionStatus",
    "WinnerPolicy",
    "build_winner_policy",
    # Config and logging
    "TrapGridConfig",
    "load_config",
    "setup_logging",
    # Types
    "CommitmentSummary",
    "ErrorPayload",
    "MoveDict",
    "SessionDict",
    "SnapshotDict",
]
__version__ = "1.0.0"
