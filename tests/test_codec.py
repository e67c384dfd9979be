# Area: Proof Tests
"""Tests for the public input byte contract and prover output splitting."""

import pytest

from trap_grid.errors import InvalidArgumentError
from trap_grid._commitment.field import CURVE_ORDER, be32
from trap_grid._commitment.grid import Grid
from trap_grid._commitment.merkle import build_commitment, proof_for
from trap_grid._proof.codec import (
    decode_fields,
    decode_public_inputs,
    encode_fields,
    encode_public_inputs,
    split_for_variant,
    split_prover_output,
)
from trap_grid._proof.variants import (
    CircuitVariant,
    CommitmentBoundInputs,
    MerkleBoundInputs,
    PositionOnlyInputs,
)


class TestFieldCount:
    """Tests for k per circuit variant."""

    def test_position_only_has_three_fields(self):
        """Test k = 3 for (x, y, claim)."""
        assert CircuitVariant.POSITION_ONLY.field_count(8) == 3

    def test_commitment_bound_has_four_fields(self):
        """Test k = 4 for (leaf_commitment, x, y, claim)."""
        assert CircuitVariant.COMMITMENT_BOUND.field_count(8) == 4

    def test_merkle_bound_depends_on_depth(self):
        """Test k = 5 + 2 * depth; 17 for the 8x8 grid."""
        assert CircuitVariant.MERKLE_BOUND.field_count(8) == 17
        assert CircuitVariant.MERKLE_BOUND.field_count(4) == 13

    def test_only_merkle_requires_root(self):
        """Test which variants need a root at session start."""
        assert CircuitVariant.MERKLE_BOUND.requires_root
        assert not CircuitVariant.POSITION_ONLY.requires_root
        assert not CircuitVariant.COMMITMENT_BOUND.requires_root


class TestEncoding:
    """Tests for field encoding in declared order."""

    def test_position_only_layout(self):
        """Test x, y, claim each occupy one 32-byte big-endian word."""
        data = encode_public_inputs(PositionOnlyInputs(x=2, y=5, claim=True))
        assert len(data) == 96
        assert data[0:32] == be32(2)
        assert data[32:64] == be32(5)
        assert data[64:96] == be32(1)

    def test_commitment_bound_puts_leaf_first(self):
        """Test the leaf commitment precedes the coordinates."""
        data = encode_public_inputs(CommitmentBoundInputs(leaf_commitment=99, x=1, y=0, claim=False))
        assert len(data) == 128
        assert data[0:32] == be32(99)
        assert data[96:128] == be32(0)

    def test_merkle_bound_layout(self):
        """Test root, x, y, claim, path_length, bits, then siblings."""
        grid = Grid.from_traps([(1, 3)])
        commitment = build_commitment(grid, salt=3)
        proof = proof_for(commitment, 11)
        inputs = MerkleBoundInputs(root=commitment.root, x=1, y=3, claim=True, proof=proof)
        data = encode_public_inputs(inputs)

        assert len(data) == 17 * 32
        assert data[0:32] == be32(commitment.root)
        assert data[128:160] == be32(6)
        assert data[160:192] == be32(proof.path_bits[0])
        assert data[352:384] == be32(proof.siblings[0])

    def test_decode_fields_requires_exact_length(self):
        """Test k is fixed by the caller, never inferred from the payload."""
        data = encode_fields([1, 2, 3])
        assert decode_fields(data, 3) == [1, 2, 3]
        with pytest.raises(InvalidArgumentError) as exc:
            decode_fields(data, 4)
        assert exc.value.field == "public_inputs"


class TestDecoding:
    """Tests for decoding public inputs into typed values."""

    def test_decode_position_only(self):
        """Test decoding the position-only layout."""
        decoded = decode_public_inputs(encode_fields([3, 4, 0]), CircuitVariant.POSITION_ONLY, 8)
        assert decoded == PositionOnlyInputs(x=3, y=4, claim=False)

    def test_decode_rejects_non_bit_claim(self):
        """Test that a claim field must be 0 or 1."""
        with pytest.raises(InvalidArgumentError) as exc:
            decode_public_inputs(encode_fields([3, 4, 2]), CircuitVariant.POSITION_ONLY, 8)
        assert exc.value.field == "claim"

    def test_decode_rejects_out_of_grid_coordinates(self):
        """Test that coordinates must fall inside the grid."""
        with pytest.raises(InvalidArgumentError):
            decode_public_inputs(encode_fields([8, 0, 1]), CircuitVariant.POSITION_ONLY, 8)

    def test_decode_rejects_non_canonical_field(self):
        """Test that a word >= r is malformed."""
        data = (CURVE_ORDER).to_bytes(32, "big") + encode_fields([0, 1])
        with pytest.raises(InvalidArgumentError):
            decode_public_inputs(data, CircuitVariant.POSITION_ONLY, 8)

    def test_decode_merkle_bound_rebuilds_proof(self):
        """Test the decoded path carries the cell's leaf index."""
        grid = Grid.from_traps([(1, 3)])
        commitment = build_commitment(grid, salt=3)
        inputs = MerkleBoundInputs(
            root=commitment.root, x=1, y=3, claim=True, proof=proof_for(commitment, 11)
        )
        decoded = decode_public_inputs(encode_public_inputs(inputs), CircuitVariant.MERKLE_BOUND, 8)
        assert decoded == inputs
        assert decoded.proof.leaf_index == 11

    def test_decode_merkle_bound_rejects_wrong_path_length(self):
        """Test that path_length must equal the tree depth."""
        fields = [5, 1, 3, 1, 5] + [0] * 12
        with pytest.raises(InvalidArgumentError) as exc:
            decode_public_inputs(encode_fields(fields), CircuitVariant.MERKLE_BOUND, 8)
        assert exc.value.field == "path_length"


class TestSplit:
    """Tests for splitting combined prover output."""

    def test_split_scenario_position_only(self):
        """Test 2240 bytes with k = 3 split into 96 + 2144."""
        output = bytes(range(256)) * 8 + bytes(192)
        assert len(output) == 2240

        public_inputs, proof = split_prover_output(output, 3)

        assert len(public_inputs) == 96
        assert len(proof) == 2144
        assert public_inputs == output[:96]
        assert proof == output[96:]

    def test_split_is_positional_only(self):
        """Test splitting never inspects the payload bytes."""
        output = b"\xff" * 200
        public_inputs, proof = split_prover_output(output, 4)
        assert public_inputs == b"\xff" * 128
        assert proof == b"\xff" * 72

    def test_split_requires_proof_bytes(self):
        """Test that output no longer than k*32 is rejected."""
        with pytest.raises(InvalidArgumentError):
            split_prover_output(b"\x00" * 96, 3)
        with pytest.raises(InvalidArgumentError):
            split_prover_output(b"\x00" * 10, 3)

    def test_split_for_variant_uses_variant_k(self):
        """Test the Merkle-bound prefix is 17 words on an 8x8 grid."""
        output = b"\x01" * (17 * 32 + 10)
        public_inputs, proof = split_for_variant(output, CircuitVariant.MERKLE_BOUND, 8)
        assert len(public_inputs) == 544
        assert len(proof) == 10
