# Area: Proof
"""
Proof plumbing between the holder, the prover and the verifier.

This package handles:
- Circuit variants and their typed public inputs
- The 32-byte field byte contract and prover output splitting
- Building proof requests for a move
- The prover and verification gateway boundaries
"""

from .variants import (
    CircuitVariant,
    CommitmentBoundInputs,
    MerkleBoundInputs,
    PositionOnlyInputs,
    ProofPublicInputs,
)
from .codec import (
    decode_fields,
    decode_public_inputs,
    encode_fields,
    encode_public_inputs,
    split_for_variant,
    split_prover_output,
)
from .request_builder import PrivateInputs, ProofRequest, build_inputs
from .prover import Prover, ProofJob, TransparentProver
from .gateway import CommandGateway, MoveVerificationGateway, TransparentGateway

__all__ = [
    "CircuitVariant",
    "CommitmentBoundInputs",
    "MerkleBoundInputs",
    "PositionOnlyInputs",
    "ProofPublicInputs",
    "decode_fields",
    "decode_public_inputs",
    "encode_fields",
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
]
