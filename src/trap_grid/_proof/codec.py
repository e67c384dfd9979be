# Area: Proof
"""
trap_grid._proof.codec — Byte contract with the external verifier
=================================================================

Public inputs travel as ``k`` concatenated 32-byte big-endian field
elements in the variant's declared order. A prover's combined output
is ``public_inputs || proof``; splitting it is purely positional:

    public_inputs = output[0 : k*32]
    proof         = output[k*32 :]

``k`` always comes from the circuit variant, never from the payload.
Existing verifiers depend on this layout byte for byte.
"""

from __future__ import annotations
from typing import List, Sequence, Tuple

from ..errors import InvalidArgumentError
from .._commitment.field import FIELD_BYTES, be32, from_be32
from .._commitment.grid import check_coordinates
from .._commitment.merkle import MerkleProof, tree_depth
from .variants import (
    CircuitVariant,
    CommitmentBoundInputs,
    MerkleBoundInputs,
    PositionOnlyInputs,
    ProofPublicInputs,
)


def encode_fields(fields: Sequence[int]) -> bytes:
    """Concatenate field elements as 32-byte big-endian words."""
    return b"".join(be32(f) for f in fields)


def decode_fields(data: bytes, field_count: int) -> List[int]:
    """Split ``data`` into exactly ``field_count`` field elements."""
    expected = field_count * FIELD_BYTES
    if len(data) != expected:
        raise InvalidArgumentError(
            f"public inputs must be {expected} bytes ({field_count} fields)",
            field="public_inputs",
            value=len(data),
        )
    return [from_be32(data[i:i + FIELD_BYTES]) for i in range(0, expected, FIELD_BYTES)]


def encode_public_inputs(inputs: ProofPublicInputs) -> bytes:
    return encode_fields(inputs.to_fields())


def _as_bit(value: int, name: str) -> int:
    if value not in (0, 1):
        raise InvalidArgumentError(f"{name} must be 0 or 1", field=name, value=value)
    return value


def decode_public_inputs(data: bytes, variant: CircuitVariant, grid_size: int) -> ProofPublicInputs:
    """
    Parse public input bytes into the variant's typed inputs.

    Args:
        data: Exactly k*32 bytes
        variant: The deployment's circuit variant
        grid_size: N of the N×N grid

    Returns:
        The typed public inputs

    Raises:
        InvalidArgumentError: Wrong length, non-canonical field, bad bit or coordinate
    """
    fields = decode_fields(data, variant.field_count(grid_size))

    if variant is CircuitVariant.POSITION_ONLY:
        x, y, claim = fields
        check_coordinates(x, y, grid_size)
        return PositionOnlyInputs(x=x, y=y, claim=bool(_as_bit(claim, "claim")))

    if variant is CircuitVariant.COMMITMENT_BOUND:
        leaf, x, y, claim = fields
        check_coordinates(x, y, grid_size)
        return CommitmentBoundInputs(
            leaf_commitment=leaf, x=x, y=y, claim=bool(_as_bit(claim, "claim"))
        )

    depth = tree_depth(grid_size * grid_size)
    root, x, y, claim, path_length = fields[:5]
    check_coordinates(x, y, grid_size)
    if path_length != depth:
        raise InvalidArgumentError(
            f"path length must equal tree depth {depth}", field="path_length", value=path_length
        )
    bits = tuple(_as_bit(b, "path_bits") for b in fields[5:5 + depth])
    siblings = tuple(fields[5 + depth:])
    proof = MerkleProof(leaf_index=x * grid_size + y, siblings=siblings, path_bits=bits)
    return MerkleBoundInputs(root=root, x=x, y=y, claim=bool(_as_bit(claim, "claim")), proof=proof)


def split_prover_output(output: bytes, field_count: int) -> Tuple[bytes, bytes]:
    """
    Split a combined prover output into (public_inputs, proof).

    Args:
        output: Raw ``public_inputs || proof`` bytes
        field_count: k, fixed by the circuit variant

    Returns:
        Tuple of (first k*32 bytes, remaining bytes)

    Raises:
        InvalidArgumentError: If no proof bytes remain after the prefix
    """
    prefix = field_count * FIELD_BYTES
    if len(output) <= prefix:
        raise InvalidArgumentError(
            f"prover output must be longer than the {prefix}-byte public input prefix",
            field="prover_output",
            value=len(output),
        )
    return output[:prefix], output[prefix:]


def split_for_variant(output: bytes, variant: CircuitVariant, grid_size: int) -> Tuple[bytes, bytes]:
    """split_prover_output with k taken from the variant."""
    return split_prover_output(output, variant.field_count(grid_size))
