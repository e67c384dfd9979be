# Area: Commitment Tests
"""Tests for field encoding, the grid and the Merkle commitment."""

import json

import pytest

from trap_grid.errors import InvalidArgumentError
from trap_grid._commitment.field import (
    CURVE_ORDER,
    FR,
    be32,
    from_be32,
    hash_leaf,
    hash_node,
    to_field,
)
from trap_grid._commitment.grid import Grid, check_coordinates, load_grid
from trap_grid._commitment.merkle import (
    MerkleProof,
    build_commitment,
    compute_root,
    proof_for,
    tree_depth,
    verify_cell,
    verify_merkle,
)

TRAPS = [(0, 0), (1, 3), (4, 4), (7, 7)]


class TestField:
    """Tests for field elements and hashing."""

    def test_fr_reduces_modulo_curve_order(self):
        """Test that FR arithmetic wraps at the scalar field order."""
        assert int(FR(CURVE_ORDER + 5)) == 5
        assert to_field(CURVE_ORDER) == 0

    def test_be32_is_big_endian(self):
        """Test 32-byte big-endian encoding."""
        encoded = be32(1)
        assert len(encoded) == 32
        assert encoded == b"\x00" * 31 + b"\x01"
        assert from_be32(encoded) == 1

    def test_be32_rejects_non_canonical(self):
        """Test that values outside [0, r) cannot be encoded."""
        with pytest.raises(InvalidArgumentError):
            be32(CURVE_ORDER)
        with pytest.raises(InvalidArgumentError):
            be32(-1)

    def test_from_be32_rejects_wrong_length(self):
        """Test that a field must be exactly 32 bytes."""
        with pytest.raises(InvalidArgumentError) as exc:
            from_be32(b"\x00" * 31)
        assert exc.value.field == "field_element"

    def test_from_be32_rejects_value_above_modulus(self):
        """Test that an encoded value >= r is rejected."""
        with pytest.raises(InvalidArgumentError):
            from_be32(b"\xff" * 32)

    def test_leaf_hash_binds_index_value_and_salt(self):
        """Test that changing any leaf input changes the leaf."""
        base = hash_leaf(3, 1, 42)
        assert base != hash_leaf(4, 1, 42)
        assert base != hash_leaf(3, 0, 42)
        assert base != hash_leaf(3, 1, 43)
        assert 0 <= base < CURVE_ORDER

    def test_node_hash_is_ordered(self):
        """Test that H_node(a, b) differs from H_node(b, a)."""
        assert hash_node(1, 2) != hash_node(2, 1)


class TestGrid:
    """Tests for the Grid class."""

    def test_from_traps_sets_cells(self):
        """Test building a grid from trap coordinates."""
        grid = Grid.from_traps(TRAPS)
        assert grid.size == 8
        assert grid.cell_count == 64
        assert grid.cell(1, 3) is True
        assert grid.cell(3, 1) is False
        assert grid.trap_positions() == TRAPS

    def test_index_is_row_major(self):
        """Test that (x, y) maps to x * N + y."""
        grid = Grid.empty(8)
        assert grid.index_of(0, 0) == 0
        assert grid.index_of(1, 3) == 11
        assert grid.index_of(7, 7) == 63

    def test_wrong_cell_count_rejected(self):
        """Test that a grid needs exactly N*N cells."""
        with pytest.raises(InvalidArgumentError) as exc:
            Grid([0] * 10, size=3)
        assert exc.value.field == "cells"

    def test_non_boolean_cell_rejected(self):
        """Test that cells must be 0 or 1."""
        with pytest.raises(InvalidArgumentError):
            Grid([0] * 8 + [2], size=3)

    def test_out_of_range_coordinates(self):
        """Test coordinate validation names the bad axis."""
        with pytest.raises(InvalidArgumentError) as exc:
            check_coordinates(8, 0, 8)
        assert exc.value.field == "x"
        with pytest.raises(InvalidArgumentError) as exc:
            check_coordinates(0, -1, 8)
        assert exc.value.field == "y"

    def test_dict_round_trip(self):
        """Test to_dict output is accepted by from_dict."""
        grid = Grid.from_traps(TRAPS)
        assert Grid.from_dict(grid.to_dict()) == grid

    def test_from_dict_requires_cells_or_traps(self):
        """Test that grid data without cells or traps is rejected."""
        with pytest.raises(InvalidArgumentError):
            Grid.from_dict({"grid_size": 8})

    def test_load_grid_from_trap_file(self, tmp_path):
        """Test loading the traps JSON shape from disk."""
        path = tmp_path / "grid.json"
        path.write_text(json.dumps({"grid_size": 4, "traps": [[0, 1], [3, 3]]}))
        grid = load_grid(path)
        assert grid.size == 4
        assert grid.trap_positions() == [(0, 1), (3, 3)]


class TestMerkleCommitment:
    """Tests for building and verifying the commitment tree."""

    @pytest.fixture
    def grid(self):
        return Grid.from_traps(TRAPS)

    @pytest.fixture
    def commitment(self, grid):
        return build_commitment(grid, salt=1234)

    def test_tree_depth(self):
        """Test depth is ceil(log2(leaves))."""
        assert tree_depth(1) == 0
        assert tree_depth(2) == 1
        assert tree_depth(9) == 4
        assert tree_depth(64) == 6

    def test_tree_depth_rejects_empty(self):
        """Test that a tree needs at least one leaf."""
        with pytest.raises(InvalidArgumentError):
            tree_depth(0)

    def test_commitment_shape(self, commitment):
        """Test an 8x8 grid yields 64 leaves and depth 6."""
        assert commitment.leaf_count == 64
        assert commitment.depth == 6
        assert commitment.tree[-1] == [commitment.root]

    def test_commitment_is_deterministic_for_a_salt(self, grid):
        """Test the same grid and salt give the same root."""
        assert build_commitment(grid, salt=9).root == build_commitment(grid, salt=9).root

    def test_salt_changes_root(self, grid):
        """Test that a different salt hides the grid behind a different root."""
        assert build_commitment(grid, salt=1).root != build_commitment(grid, salt=2).root

    def test_different_grid_changes_root(self, grid):
        """Test that moving one trap changes the root."""
        other = Grid.from_traps([(0, 0), (1, 3), (4, 4), (7, 6)])
        assert build_commitment(grid, salt=5).root != build_commitment(other, salt=5).root

    def test_salt_not_in_repr(self, commitment):
        """Test the secret salt is kept out of repr."""
        assert "salt" not in repr(commitment)

    def test_every_cell_verifies(self, grid, commitment):
        """Test that each leaf's proof recomputes the root."""
        for index in range(64):
            proof = proof_for(commitment, index)
            assert proof.depth == 6
            assert verify_cell(commitment.root, grid.value_at(index), index, 1234, proof)

    def test_path_bits_spell_the_index(self, commitment):
        """Test path bit i is bit i of the leaf index."""
        proof = proof_for(commitment, 11)
        assert proof.path_bits == (1, 1, 0, 1, 0, 0)

    def test_flipped_value_fails(self, grid, commitment):
        """Test that lying about a cell's value fails verification."""
        proof = proof_for(commitment, 11)
        assert grid.value_at(11) is True
        assert not verify_cell(commitment.root, False, 11, 1234, proof)

    def test_proof_reused_for_other_index_fails(self, commitment):
        """Test that a valid path cannot be replayed at another position."""
        proof = proof_for(commitment, 0)
        moved = MerkleProof(leaf_index=1, siblings=proof.siblings, path_bits=proof.path_bits)
        assert not verify_merkle(commitment.root, commitment.leaf(0), 1, moved)

    def test_tampered_sibling_fails(self, commitment):
        """Test that changing a sibling breaks the path."""
        proof = proof_for(commitment, 20)
        siblings = list(proof.siblings)
        siblings[2] = (siblings[2] + 1) % CURVE_ORDER
        tampered = MerkleProof(leaf_index=20, siblings=tuple(siblings), path_bits=proof.path_bits)
        assert not verify_merkle(commitment.root, commitment.leaf(20), 20, tampered)

    def test_depth_mismatch_raises(self, commitment):
        """Test that a proof of the wrong length is malformed input."""
        proof = proof_for(commitment, 3)
        short = MerkleProof(leaf_index=3, siblings=proof.siblings[:5], path_bits=proof.path_bits[:5])
        with pytest.raises(InvalidArgumentError):
            verify_merkle(commitment.root, commitment.leaf(3), 3, short)

    def test_truncated_proof_raises_without_explicit_depth(self, commitment):
        """Test the four-argument call derives the depth and rejects a short path."""
        proof = proof_for(commitment, 0)
        truncated = MerkleProof(leaf_index=0, siblings=proof.siblings[:3], path_bits=proof.path_bits[:3])
        with pytest.raises(InvalidArgumentError) as exc:
            verify_merkle(commitment.root, commitment.leaf(0), 0, truncated)
        assert exc.value.field == "siblings"
        assert exc.value.value == 3

    def test_index_out_of_range_raises(self, commitment):
        """Test that an index beyond the leaf count is malformed input."""
        proof = proof_for(commitment, 0)
        with pytest.raises(InvalidArgumentError):
            verify_merkle(commitment.root, commitment.leaf(0), 64, proof)

    def test_index_bounded_by_leaf_count(self):
        """Test a 3x3 grid rejects index 9 even though its path has room for 16 leaves."""
        commitment = build_commitment(Grid.empty(3), salt=5)
        proof = proof_for(commitment, 8)
        with pytest.raises(InvalidArgumentError) as exc:
            verify_merkle(commitment.root, commitment.leaf(8), 9, proof, grid_size=3)
        assert exc.value.field == "leaf_index"

    def test_odd_levels_pair_last_node_with_itself(self):
        """Test a 3x3 grid (9 leaves) commits and verifies every cell."""
        grid = Grid.from_traps([(2, 2)], size=3)
        commitment = build_commitment(grid, salt=77)
        assert commitment.depth == 4
        last = proof_for(commitment, 8)
        assert last.siblings[0] == commitment.leaf(8)
        assert compute_root(commitment.leaf(8), last) == commitment.root
        for index in range(9):
            proof = proof_for(commitment, index)
            assert verify_cell(commitment.root, grid.value_at(index), index, 77, proof, grid_size=3)
