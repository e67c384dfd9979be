# Area: Proof
"""
trap_grid._proof.request_builder — Inputs for one move's proof
==============================================================

Assembles the public/private input schema the external prover needs
to answer a single probe. How the proof is computed is the prover's
business; this module only decides what goes in.

The holder's own claim is checked against the grid here. A lying
claim fails fast and never reaches the prover.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..errors import IntegrityViolationError, InvalidArgumentError
from .._commitment.grid import Grid
from .._commitment.merkle import GridCommitment, proof_for
from .variants import (
    CircuitVariant,
    CommitmentBoundInputs,
    MerkleBoundInputs,
    PositionOnlyInputs,
    ProofPublicInputs,
)

logger = logging.getLogger("trap_grid.proof.request")


@dataclass(frozen=True)
class PrivateInputs:
    """Witness values that never leave the holder."""

    cell_value: bool
    leaf_index: int
    salt: int = 0


@dataclass(frozen=True)
class ProofRequest:
    """Everything the prover needs for one move."""

    public: ProofPublicInputs
    private: PrivateInputs

    @property
    def variant(self) -> CircuitVariant:
        return self.public.variant

    def to_prover_inputs(self) -> Dict[str, Any]:
        """Prover.toml-style mapping: field name -> decimal string(s)."""
        public: Dict[str, Any] = {}
        for name, value in zip(self.public.FIELD_NAMES, self._public_values()):
            public[name] = [str(v) for v in value] if isinstance(value, tuple) else str(value)
        return {
            "public_inputs": public,
            "private_inputs": {
                "cell_value": str(int(self.private.cell_value)),
                "leaf_index": str(self.private.leaf_index),
                "salt": str(self.private.salt),
            },
        }

    def _public_values(self):
        p = self.public
        if isinstance(p, MerkleBoundInputs):
            return (p.root, p.x, p.y, int(p.claim), p.proof.depth, p.proof.path_bits, p.proof.siblings)
        return tuple(p.to_fields())


def build_inputs(
    x: int,
    y: int,
    claim: bool,
    grid: Grid,
    variant: CircuitVariant,
    commitment: Optional[GridCommitment] = None,
) -> ProofRequest:
    """
    Build the proof request for a probe at (x, y).

    Args:
        x, y: Probed cell
        claim: Outcome the holder will publicly assert
        grid: The holder's hidden grid
        variant: Deployment circuit variant
        commitment: Grid commitment, required for the bound variants

    Returns:
        ProofRequest with variant-specific public inputs

    Raises:
        InvalidArgumentError: Bad coordinates or a missing/mismatched commitment
        IntegrityViolationError: If ``claim`` disagrees with the grid
    """
    index = grid.index_of(x, y)
    true_value = grid.cell(x, y)
    if bool(claim) != true_value:
        raise IntegrityViolationError(
            "claim does not match the committed cell value",
            field="claim",
            value=bool(claim),
            details={"x": x, "y": y},
        )

    if variant is CircuitVariant.POSITION_ONLY:
        private = PrivateInputs(cell_value=true_value, leaf_index=index)
        return ProofRequest(public=PositionOnlyInputs(x=x, y=y, claim=true_value), private=private)

    if commitment is None:
        raise InvalidArgumentError(
            f"{variant.value} proofs need the grid commitment", field="commitment", value=None
        )
    if commitment.grid_size != grid.size:
        raise InvalidArgumentError(
            "commitment was built for a different grid size",
            field="commitment.grid_size",
            value=commitment.grid_size,
        )

    private = PrivateInputs(cell_value=true_value, leaf_index=index, salt=commitment.salt)
    if variant is CircuitVariant.COMMITMENT_BOUND:
        public = CommitmentBoundInputs(
            leaf_commitment=commitment.leaf(index), x=x, y=y, claim=true_value
        )
    else:
        public = MerkleBoundInputs(
            root=commitment.root, x=x, y=y, claim=true_value, proof=proof_for(commitment, index)
        )

    logger.debug("Built %s inputs for (%d, %d)", variant.value, x, y)
    return ProofRequest(public=public, private=private)
