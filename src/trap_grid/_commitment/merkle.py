# Area: Commitment
"""
trap_grid._commitment.merkle — Grid commitment tree
====================================================

Builds the Merkle tree that binds a hidden grid to one public root,
and produces/checks single-leaf inclusion proofs.

Tree rules (the verifier side must apply the exact same ones):
- tree[0] holds one leaf commitment per cell, in grid index order
- each parent is H_node(left, right)
- a level with an odd count pairs its last node with itself
- tree[-1] == [root]

Path bits record which child the current node was at each level:
0 = left child, 1 = right child (``index % 2``).
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..errors import InvalidArgumentError
from .field import hash_leaf, hash_node, random_salt
from .grid import DEFAULT_GRID_SIZE, Grid

logger = logging.getLogger("trap_grid.commitment")


@dataclass(frozen=True)
class MerkleProof:
    """
    Inclusion proof for one leaf.

    Attributes:
        leaf_index: Index of the proven leaf
        siblings: Sibling node at each level, leaf level first
        path_bits: 1 where the current node was the right child
    """

    leaf_index: int
    siblings: Tuple[int, ...]
    path_bits: Tuple[int, ...]

    @property
    def depth(self) -> int:
        return len(self.siblings)

    def to_dict(self) -> dict:
        return {
            "leaf_index": self.leaf_index,
            "siblings": [hex(s) for s in self.siblings],
            "path_bits": list(self.path_bits),
        }


@dataclass
class GridCommitment:
    """
    Commitment to a grid: every tree level plus the salt used for leaves.

    The salt is the holder's secret. Only ``root`` is ever published.

    Attributes:
        root: Public Merkle root
        tree: tree[0] = leaf commitments, tree[-1] = [root]
        salt: Secret blinding value mixed into every leaf
        grid_size: N of the committed N×N grid
    """

    root: int
    tree: List[List[int]]
    salt: int = field(repr=False)
    grid_size: int

    @property
    def depth(self) -> int:
        return len(self.tree) - 1

    @property
    def leaf_count(self) -> int:
        return len(self.tree[0])

    def leaf(self, index: int) -> int:
        if not 0 <= index < self.leaf_count:
            raise InvalidArgumentError("leaf index out of range", field="leaf_index", value=index)
        return self.tree[0][index]


def tree_depth(leaf_count: int) -> int:
    """ceil(log2(leaf_count)); 0 for a single leaf."""
    if leaf_count <= 0:
        raise InvalidArgumentError("tree needs at least one leaf", field="leaf_count", value=leaf_count)
    return math.ceil(math.log2(leaf_count)) if leaf_count > 1 else 0


def leaf_commitments(grid: Grid, salt: int) -> List[int]:
    return [hash_leaf(i, v, salt) for i, v in enumerate(grid.values())]


def build_commitment(grid: Grid, salt: Optional[int] = None) -> GridCommitment:
    """
    Commit to a grid.

    Args:
        grid: The holder's grid
        salt: Blinding salt; a fresh random one is drawn when omitted

    Returns:
        GridCommitment with every tree level
    """
    if salt is None:
        salt = random_salt()
    level = leaf_commitments(grid, salt)
    tree = [level]
    while len(level) > 1:
        parents = []
        for i in range(0, len(level), 2):
            left = level[i]
            right = level[i + 1] if i + 1 < len(level) else left
            parents.append(hash_node(left, right))
        tree.append(parents)
        level = parents

    commitment = GridCommitment(root=level[0], tree=tree, salt=salt, grid_size=grid.size)
    logger.debug("Built commitment: %d leaves, depth %d", commitment.leaf_count, commitment.depth)
    return commitment


def proof_for(commitment: GridCommitment, leaf_index: int) -> MerkleProof:
    """Walk from a leaf to the root, collecting siblings and path bits."""
    if not 0 <= leaf_index < commitment.leaf_count:
        raise InvalidArgumentError("leaf index out of range", field="leaf_index", value=leaf_index)

    siblings: List[int] = []
    bits: List[int] = []
    index = leaf_index
    for level in commitment.tree[:-1]:
        is_right = index % 2
        sibling_index = index - 1 if is_right else index + 1
        # Odd level: the last node is its own sibling
        sibling = level[sibling_index] if sibling_index < len(level) else level[index]
        siblings.append(sibling)
        bits.append(is_right)
        index //= 2

    return MerkleProof(leaf_index=leaf_index, siblings=tuple(siblings), path_bits=tuple(bits))


def compute_root(leaf: int, proof: MerkleProof) -> int:
    """Fold a leaf up its path."""
    node = leaf
    for sibling, bit in zip(proof.siblings, proof.path_bits):
        node = hash_node(sibling, node) if bit else hash_node(node, sibling)
    return node


def verify_merkle(
    root: int,
    leaf: int,
    leaf_index: int,
    proof: MerkleProof,
    grid_size: int = DEFAULT_GRID_SIZE,
) -> bool:
    """
    Check that ``leaf`` sits at ``leaf_index`` under ``root``.

    The tree shape follows from the grid size: ``grid_size ** 2`` leaves
    and ``tree_depth`` of that many levels, so a proof of any other
    length is malformed rather than merely wrong.

    Args:
        root: Committed root
        leaf: Leaf commitment being proven
        leaf_index: Claimed position of the leaf
        proof: Siblings and path bits
        grid_size: N of the committed N×N grid

    Returns:
        True iff the path recomputes ``root`` and its bits spell ``leaf_index``

    Raises:
        InvalidArgumentError: On a proof/depth length mismatch or an out of range index
    """
    leaf_count = grid_size * grid_size
    depth = tree_depth(leaf_count)
    if len(proof.siblings) != len(proof.path_bits):
        raise InvalidArgumentError(
            "siblings and path bits differ in length", field="path_bits", value=len(proof.path_bits)
        )
    if proof.depth != depth:
        raise InvalidArgumentError(
            f"proof length does not match tree depth {depth}", field="siblings", value=proof.depth
        )
    if not 0 <= leaf_index < leaf_count:
        raise InvalidArgumentError("leaf index out of range", field="leaf_index", value=leaf_index)

    expected_bits = tuple((leaf_index >> level) & 1 for level in range(depth))
    if tuple(proof.path_bits) != expected_bits:
        return False
    return compute_root(leaf, proof) == root


def verify_cell(
    root: int,
    value: bool,
    leaf_index: int,
    salt: int,
    proof: MerkleProof,
    grid_size: int = DEFAULT_GRID_SIZE,
) -> bool:
    """verify_merkle for a raw cell value, hashing the leaf first."""
    return verify_merkle(root, hash_leaf(leaf_index, int(value), salt), leaf_index, proof, grid_size)
