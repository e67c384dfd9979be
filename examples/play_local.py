"""
play_local.py — Walk through every move outcome locally
=======================================================

Shows the probe/prove split, a rejected proof that is retried, an
abandoned move, a replay attempt and the final settlement. Uses the
transparent prover and gateway, so no proving backend is needed.

Run with:  python play_local.py
"""

import tempfile
from pathlib import Path

from trap_grid import (
    CircuitVariant,
    ConflictError,
    GameSessionService,
    Grid,
    HitRatioPolicy,
    InMemorySessionRegistry,
    MoveVerificationGateway,
    RejectedProofError,
    TransparentGateway,
    TransparentProver,
    build_commitment,
    build_inputs,
    split_for_variant,
)

VARIANT = CircuitVariant.MERKLE_BOUND


class FlakyGateway(MoveVerificationGateway):
    """Rejects the first proof it sees, then defers to the real check."""

    def __init__(self, inner):
        self.inner = inner
        self.seen = 0

    def verify(self, proof, public_inputs):
        self.seen += 1
        if self.seen == 1:
            return False
        return self.inner.verify(proof, public_inputs)


def prove(grid, commitment, x, y):
    claim = grid.cell(x, y)
    request = build_inputs(x, y, claim, grid, VARIANT, commitment)
    public_inputs, proof = split_for_variant(TransparentProver().prove(request), VARIANT, grid.size)
    return claim, proof, public_inputs


def main():
    grid = Grid.from_traps([(0, 0), (3, 3), (5, 2)])
    commitment = build_commitment(grid)
    registry = InMemorySessionRegistry()

    with tempfile.TemporaryDirectory() as tmp:
        service = GameSessionService(
            db_path=str(Path(tmp) / "local.db"),
            gateway=FlakyGateway(TransparentGateway(VARIANT, grid.size)),
            registry=registry,
            winner_policy=HitRatioPolicy(0.5),
            variant=VARIANT,
        )
        service.start_game(7, "holder", "prober", 50, 50, commitment_root=commitment.root)

        print("1. Prober probes (0, 0); holder proves it later")
        service.make_move(7, 0, 0, True, caller="prober")
        claim, proof, public_inputs = prove(grid, commitment, 0, 0)
        try:
            service.submit_proof(7, 0, 0, proof, public_inputs, caller="holder")
        except RejectedProofError as e:
            print(f"   first attempt: {e.kind}")
        record = service.submit_proof(7, 0, 0, proof, public_inputs, caller="holder")
        print(f"   second attempt: {record.status.value} after {record.attempts} attempts")

        print("2. Probe (3, 3) with proof in one call")
        service.make_move(7, 3, 3, *prove(grid, commitment, 3, 3))

        print("3. Replay (3, 3)")
        try:
            service.make_move(7, 3, 3, *prove(grid, commitment, 3, 3))
        except ConflictError as e:
            print(f"   {e}")

        print("4. Probe (1, 1) and abandon it")
        service.make_move(7, 1, 1, False, caller="prober")
        service.abandon_move(7, 1, 1, caller="holder")

        session = service.end_game(7, caller="prober")
        print(f"Winner: {session.winner}, hits={session.hits}, misses={session.misses}")
        print(f"Registry: {registry.events}")


if __name__ == "__main__":
    main()
