# Area: Proof
"""
trap_grid._proof.variants — Circuit flavors and their public inputs
===================================================================

A deployment picks exactly one circuit variant. The variant fixes
which public inputs exist and the order they are serialized in; it is
never inferred from a payload.

Declared field order (one 32-byte field each):

    POSITION_ONLY     x, y, claim                                     k = 3
    COMMITMENT_BOUND  leaf_commitment, x, y, claim                    k = 4
    MERKLE_BOUND      root, x, y, claim, path_length,
                      path_bits[depth], siblings[depth]               k = 5 + 2*depth
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, List, Tuple, Union

from .._commitment.merkle import MerkleProof, tree_depth


class CircuitVariant(Enum):
    """Circuit flavors a deployment can be wired to."""
    POSITION_ONLY = "position_only"
    COMMITMENT_BOUND = "commitment_bound"
    MERKLE_BOUND = "merkle_bound"

    def field_count(self, grid_size: int) -> int:
        """Number of 32-byte public input fields (k) for an N×N grid."""
        if self is CircuitVariant.POSITION_ONLY:
            return 3
        if self is CircuitVariant.COMMITMENT_BOUND:
            return 4
        return 5 + 2 * tree_depth(grid_size * grid_size)

    @property
    def requires_root(self) -> bool:
        """Whether sessions must commit to a Merkle root up front."""
        return self is CircuitVariant.MERKLE_BOUND


@dataclass(frozen=True)
class PositionOnlyInputs:
    """Public inputs of the position-only circuit."""

    x: int
    y: int
    claim: bool

    variant = CircuitVariant.POSITION_ONLY
    FIELD_NAMES: ClassVar[Tuple[str, ...]] = ("x", "y", "claim")

    def to_fields(self) -> List[int]:
        return [self.x, self.y, int(self.claim)]


@dataclass(frozen=True)
class CommitmentBoundInputs:
    """Public inputs of the per-cell commitment circuit."""

    leaf_commitment: int
    x: int
    y: int
    claim: bool

    variant = CircuitVariant.COMMITMENT_BOUND
    FIELD_NAMES: ClassVar[Tuple[str, ...]] = ("leaf_commitment", "x", "y", "claim")

    def to_fields(self) -> List[int]:
        return [self.leaf_commitment, self.x, self.y, int(self.claim)]


@dataclass(frozen=True)
class MerkleBoundInputs:
    """Public inputs of the Merkle-root circuit."""

    root: int
    x: int
    y: int
    claim: bool
    proof: MerkleProof

    variant = CircuitVariant.MERKLE_BOUND
    FIELD_NAMES: ClassVar[Tuple[str, ...]] = ("root", "x", "y", "claim", "path_length", "path_bits", "siblings")

    def to_fields(self) -> List[int]:
        return [
            self.root,
            self.x,
            self.y,
            int(self.claim),
            self.proof.depth,
            *self.proof.path_bits,
            *self.proof.siblings,
        ]


ProofPublicInputs = Union[PositionOnlyInputs, CommitmentBoundInputs, MerkleBoundInputs]
