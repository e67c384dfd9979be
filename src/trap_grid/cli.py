# Area: Shared
"""
trap_grid.cli — Command-line interface
======================================

Holder-side tooling plus a scripted local game.

Usage:
    python -m trap_grid commit --grid grid.json --show-salt
    python -m trap_grid prove-path --grid grid.json --salt 0x1f... --x 3 --y 4
    python -m trap_grid split prover_output.bin --out-dir proof/
    python -m trap_grid inspect proof/public_inputs
    python -m trap_grid demo

Variant and grid size come from the config (file, TRAP_GRID_* env vars,
.env) unless given on the command line.
"""

import argparse
import json
import sys
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import TrapGridError
from ._config import TrapGridConfig, load_config
from ._shared.logging_config import log_game_error, setup_logging
from ._commitment.grid import Grid, load_grid
from ._commitment.merkle import build_commitment, proof_for
from ._proof.codec import decode_public_inputs, split_for_variant
from ._proof.gateway import TransparentGateway
from ._proof.prover import ProofJob, TransparentProver
from ._proof.request_builder import build_inputs
from ._proof.variants import CircuitVariant, CommitmentBoundInputs, MerkleBoundInputs
from ._session.registry import InMemorySessionRegistry
from .types import CommitmentSummary

# Traps and probes of the scripted demo game on an 8×8 grid
DEMO_TRAPS = [(0, 0), (1, 3), (2, 5), (4, 4), (6, 1), (7, 7)]
DEMO_PROBES = [(0, 0), (0, 1), (4, 4), (5, 5), (7, 7), (3, 2)]


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="trap_grid",
        description="ZK trap grid - commitments, proof plumbing and local games",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m trap_grid commit --grid grid.json
  python -m trap_grid --variant position_only split out.bin --out-dir proof/
  TRAP_GRID_CIRCUIT_VARIANT=merkle_bound python -m trap_grid demo
        """,
    )
    parser.add_argument("--config", type=str, help="Path to JSON config file")
    parser.add_argument("--log-level", type=str, help="Override the configured log level")
    parser.add_argument(
        "--variant",
        choices=[v.value for v in CircuitVariant],
        help="Circuit variant (default: from config)",
    )
    parser.add_argument("--grid-size", type=int, help="Grid size N (default: from config)")

    sub = parser.add_subparsers(dest="command", required=True)

    commit = sub.add_parser("commit", help="Commit to a grid file and print the root")
    commit.add_argument("--grid", required=True, help="Grid JSON file")
    commit.add_argument("--salt", help="Hex salt; a random one is drawn when omitted")
    commit.add_argument("--show-salt", action="store_true", help="Include the secret salt in the output")

    path = sub.add_parser("prove-path", help="Print the Merkle inclusion path of a cell")
    path.add_argument("--grid", required=True, help="Grid JSON file")
    path.add_argument("--salt", required=True, help="Hex salt used for the commitment")
    path.add_argument("--x", type=int, required=True)
    path.add_argument("--y", type=int, required=True)

    split = sub.add_parser("split", help="Split combined prover output into public inputs and proof")
    split.add_argument("output", help="File holding public_inputs || proof")
    split.add_argument("--out-dir", default=".", help="Directory for the two output files")

    inspect = sub.add_parser("inspect", help="Decode a public input file")
    inspect.add_argument("public_inputs", help="File holding k*32 public input bytes")

    demo = sub.add_parser("demo", help="Play a scripted game with the transparent prover")
    demo.add_argument("--db", help="Database path (default: a temporary file)")

    return parser.parse_args(argv)


def _parse_salt(text: str) -> int:
    return int(text, 16)


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2))


def cmd_commit(args: argparse.Namespace, config: TrapGridConfig) -> int:
    grid = load_grid(args.grid)
    commitment = build_commitment(grid, _parse_salt(args.salt) if args.salt else None)
    summary: CommitmentSummary = {
        "grid_size": grid.size,
        "depth": commitment.depth,
        "leaf_count": commitment.leaf_count,
        "root": hex(commitment.root),
        "salt": hex(commitment.salt) if args.show_salt else None,
    }
    _print_json(summary)
    return 0


def cmd_prove_path(args: argparse.Namespace, config: TrapGridConfig) -> int:
    grid = load_grid(args.grid)
    commitment = build_commitment(grid, _parse_salt(args.salt))
    index = grid.index_of(args.x, args.y)
    proof = proof_for(commitment, index)
    _print_json({
        "root": hex(commitment.root),
        "leaf": hex(commitment.leaf(index)),
        "proof": proof.to_dict(),
    })
    return 0


def cmd_split(args: argparse.Namespace, config: TrapGridConfig) -> int:
    output = Path(args.output).read_bytes()
    public_inputs, proof = split_for_variant(output, config.circuit_variant, config.grid_size)
    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    (out_dir / "public_inputs").write_bytes(public_inputs)
    (out_dir / "proof").write_bytes(proof)
    _print_json({
        "variant": config.circuit_variant.value,
        "public_inputs_bytes": len(public_inputs),
        "proof_bytes": len(proof),
    })
    return 0


def cmd_inspect(args: argparse.Namespace, config: TrapGridConfig) -> int:
    data = Path(args.public_inputs).read_bytes()
    public = decode_public_inputs(data, config.circuit_variant, config.grid_size)
    decoded: Dict[str, Any] = {
        "variant": config.circuit_variant.value,
        "x": public.x,
        "y": public.y,
        "claim": public.claim,
    }
    if isinstance(public, MerkleBoundInputs):
        decoded["root"] = hex(public.root)
        decoded["path"] = public.proof.to_dict()
    elif isinstance(public, CommitmentBoundInputs):
        decoded["leaf_commitment"] = hex(public.leaf_commitment)
    _print_json(decoded)
    return 0


def run_demo(config: TrapGridConfig, db_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Play one scripted game end to end and return its snapshot.

    The holder proves every probe with TransparentProver; the session
    verifies with the matching TransparentGateway.
    """
    variant = config.circuit_variant
    size = config.grid_size
    grid = Grid.from_traps([(x, y) for x, y in DEMO_TRAPS if x < size and y < size], size)
    commitment = build_commitment(grid)
    registry = InMemorySessionRegistry()
    service = config.model_copy(update={"db_path": db_path or config.db_path}).build_service(
        registry, gateway=TransparentGateway(variant, size)
    )
    prover = TransparentProver()

    session_id = 1
    root = commitment.root if variant.requires_root else None
    service.start_game(session_id, "holder", "prober", 100, 100, commitment_root=root)

    for x, y in DEMO_PROBES:
        if x >= size or y >= size:
            continue
        claim = grid.cell(x, y)
        request = build_inputs(x, y, claim, grid, variant, commitment)
        job = ProofJob.start(prover, request, size)
        public_inputs, proof = job.split()
        service.make_move(session_id, x, y, claim, proof, public_inputs, caller="holder")

    service.end_game(session_id, caller="holder")
    return {"snapshot": service.snapshot(session_id), "registry_events": registry.events}


def cmd_demo(args: argparse.Namespace, config: TrapGridConfig) -> int:
    if args.db:
        result = run_demo(config, args.db)
    else:
        with tempfile.TemporaryDirectory(prefix="trap-grid-demo-") as tmp:
            result = run_demo(config, str(Path(tmp) / "demo.db"))
    _print_json(result)
    return 0


COMMANDS = {
    "commit": cmd_commit,
    "prove-path": cmd_prove_path,
    "split": cmd_split,
    "inspect": cmd_inspect,
    "demo": cmd_demo,
}


def main(argv=None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)
    try:
        config = load_config(args.config)
        overrides: Dict[str, Any] = {}
        if args.variant:
            overrides["circuit_variant"] = CircuitVariant(args.variant)
        if args.grid_size:
            overrides["grid_size"] = args.grid_size
        if args.log_level:
            overrides["log_level"] = args.log_level.upper()
        if overrides:
            config = config.model_copy(update=overrides)
        # stdout carries the JSON results
        setup_logging(config.log_file, config.log_level, stream=sys.stderr)
        return COMMANDS[args.command](args, config)
    except TrapGridError as e:
        log_game_error(e)
        return 1
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
