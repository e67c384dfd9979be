# Area: Commitment
"""
Grid commitment scheme.

This package handles:
- Field elements and domain separated hashing
- The holder's hidden grid
- Merkle tree construction, inclusion proofs and their verification
"""

from .field import FR, CURVE_ORDER, be32, from_be32, hash_leaf, hash_node, random_salt
from .grid import Grid, check_coordinates, load_grid
from .merkle import (
    GridCommitment,
    MerkleProof,
    build_commitment,
    proof_for,
    tree_depth,
    verify_cell,
    verify_merkle,
)

__all__ = [
    "FR",
    "CURVE_ORDER",
    "be32",
    "from_be32",
    "hash_leaf",
    "hash_node",
    "random_salt",
    "Grid",
    "check_coordinates",
    "load_grid",
    "GridCommitment",
    "MerkleProof",
    "build_commitment",
    "proof_for",
    "tree_depth",
    "verify_cell",
    "verify_merkle",
]
