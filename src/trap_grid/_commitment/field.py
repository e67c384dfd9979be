# Area: Commitment
"""
trap_grid._commitment.field — Field elements and hashing
=========================================================

All commitment values live in the BN254 scalar field, the same field
the external circuits work over. Values are carried around as plain
ints in ``[0, r)``; ``FR`` does the modular reduction.

Hashing is domain separated so a leaf can never be confused with an
inner node:

    H_leaf(index, value, salt) = sha256(b"trap-grid/leaf" || be32(index) || be32(value) || be32(salt)) mod r
    H_node(left, right)        = sha256(b"trap-grid/node" || be32(left) || be32(right)) mod r
"""

import hashlib
import secrets

from py_ecc import bn128
from py_ecc.fields import bn128_FQ as FQ

from ..errors import InvalidArgumentError


class FR(FQ):
    """Element of the bn128 scalar field."""
    field_modulus = bn128.curve_order


CURVE_ORDER = bn128.curve_order
FIELD_BYTES = 32

LEAF_TAG = b"trap-grid/leaf"
NODE_TAG = b"trap-grid/node"


def to_field(value: int) -> int:
    """Reduce an integer into the scalar field."""
    return int(FR(value))


def be32(value: int) -> bytes:
    """Encode a field element as 32 big-endian bytes."""
    if value < 0 or value >= CURVE_ORDER:
        raise InvalidArgumentError(
            "value is not a canonical field element", field="field_element", value=value
        )
    return value.to_bytes(FIELD_BYTES, "big")


def from_be32(chunk: bytes) -> int:
    """Decode 32 big-endian bytes into a canonical field element."""
    if len(chunk) != FIELD_BYTES:
        raise InvalidArgumentError(
            "field element must be exactly 32 bytes", field="field_element", value=len(chunk)
        )
    value = int.from_bytes(chunk, "big")
    if value >= CURVE_ORDER:
        raise InvalidArgumentError(
            "encoded value exceeds the field modulus", field="field_element", value=chunk.hex()
        )
    return value


def _hash_to_field(tag: bytes, *elements: int) -> int:
    h = hashlib.sha256(tag)
    for element in elements:
        h.update(be32(element))
    return to_field(int.from_bytes(h.digest(), "big"))


def hash_leaf(index: int, value: int, salt: int) -> int:
    """Commitment to one cell, bound to its index and the grid salt."""
    return _hash_to_field(LEAF_TAG, index, value, salt)


def hash_node(left: int, right: int) -> int:
    """Parent of two tree nodes. Order matters."""
    return _hash_to_field(NODE_TAG, left, right)


def random_salt() -> int:
    """Fresh holder-secret salt for a grid."""
    return to_field(secrets.randbits(256))
