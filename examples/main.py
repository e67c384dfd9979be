"""
main.py — Run a trap grid session service
=========================================

Loads config.json (plus TRAP_GRID_* variables and .env), wires the
session service and plays one game against it.

    python main.py

The verifier comes from ``verifier_command`` in the config. For a local
run without a proving backend set ``use_transparent_gateway`` instead;
it only accepts proofs from TransparentProver.
"""

from trap_grid import (
    Grid,
    InMemorySessionRegistry,
    ProofJob,
    TransparentProver,
    build_commitment,
    build_inputs,
    load_config,
    setup_logging,
)

# ── Configuration ──
config = load_config("config.json")
setup_logging(config.log_file, config.log_level)

# ── Holder side: hide traps and commit ──
grid = Grid.from_traps([(1, 1), (2, 5), (6, 3)], size=config.grid_size)
commitment = build_commitment(grid)

# ── Session side ──
registry = InMemorySessionRegistry()
service = config.build_service(registry)
root = commitment.root if config.circuit_variant.requires_root else None
service.start_game(1, "holder", "prober", 100, 100, commitment_root=root)

# ── Play ──
prover = TransparentProver()
for x, y in [(1, 1), (0, 0), (6, 3)]:
    claim = grid.cell(x, y)
    request = build_inputs(x, y, claim, grid, config.circuit_variant, commitment)
    public_inputs, proof = ProofJob.start(prover, request, config.grid_size).split()
    record = service.make_move(1, x, y, claim, proof, public_inputs, caller="holder")
    print(f"({x}, {y}) -> {record.status.value}, claim={record.claim}")

session = service.end_game(1)
print(f"Winner: {session.winner} ({session.hits} hits / {session.moves_made} moves)")
