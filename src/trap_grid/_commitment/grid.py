# Area: Commitment
"""
trap_grid._commitment.grid — The holder's hidden grid
======================================================

An N×N boolean matrix stored row-major: cell ``(x, y)`` lives at
index ``x * N + y``. The reference deployment uses N = 8 (64 cells).

Grid files are JSON in one of two shapes:

    {"grid_size": 8, "traps": [[0, 0], [1, 2]]}
    {"grid_size": 8, "cells": [1, 0, 0, ...]}
"""

from __future__ import annotations
import json
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple, Union

from ..errors import InvalidArgumentError

DEFAULT_GRID_SIZE = 8


class Grid:
    """Hidden N×N boolean grid owned by the holder."""

    def __init__(self, cells: Sequence[bool], size: int = DEFAULT_GRID_SIZE):
        if size <= 0:
            raise InvalidArgumentError("grid size must be positive", field="grid_size", value=size)
        if len(cells) != size * size:
            raise InvalidArgumentError(
                f"grid of size {size} needs {size * size} cells",
                field="cells",
                value=len(cells),
            )
        for value in cells:
            if value not in (0, 1, True, False):
                raise InvalidArgumentError("cell values must be 0 or 1", field="cells", value=value)
        self.size = size
        self._cells: Tuple[bool, ...] = tuple(bool(v) for v in cells)

    @classmethod
    def empty(cls, size: int = DEFAULT_GRID_SIZE) -> "Grid":
        return cls([False] * (size * size), size)

    @classmethod
    def from_traps(cls, traps: Iterable[Tuple[int, int]], size: int = DEFAULT_GRID_SIZE) -> "Grid":
        """Build a grid that is True exactly at the given coordinates."""
        cells = [False] * (size * size)
        for x, y in traps:
            check_coordinates(x, y, size)
            cells[x * size + y] = True
        return cls(cells, size)

    @classmethod
    def from_dict(cls, data: dict) -> "Grid":
        size = data.get("grid_size", DEFAULT_GRID_SIZE)
        if "cells" in data:
            return cls(data["cells"], size)
        if "traps" in data:
            return cls.from_traps([tuple(t) for t in data["traps"]], size)
        raise InvalidArgumentError("grid data needs 'cells' or 'traps'", field="grid", value=sorted(data))

    def to_dict(self) -> dict:
        return {"grid_size": self.size, "cells": [int(v) for v in self._cells]}

    @property
    def cell_count(self) -> int:
        return self.size * self.size

    def index_of(self, x: int, y: int) -> int:
        check_coordinates(x, y, self.size)
        return x * self.size + y

    def cell(self, x: int, y: int) -> bool:
        return self._cells[self.index_of(x, y)]

    def value_at(self, index: int) -> bool:
        if not 0 <= index < self.cell_count:
            raise InvalidArgumentError("leaf index out of range", field="leaf_index", value=index)
        return self._cells[index]

    def values(self) -> List[int]:
        """Cell values as field-ready ints, in leaf order."""
        return [int(v) for v in self._cells]

    def trap_positions(self) -> List[Tuple[int, int]]:
        return [divmod(i, self.size) for i, v in enumerate(self._cells) if v]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self.size == other.size and self._cells == other._cells

    def __repr__(self) -> str:
        return f"Grid(size={self.size}, traps={len(self.trap_positions())})"


def check_coordinates(x: int, y: int, size: int) -> None:
    """Raise InvalidArgumentError unless 0 <= x, y < size."""
    if not 0 <= x < size:
        raise InvalidArgumentError(f"x must be in [0, {size})", field="x", value=x)
    if not 0 <= y < size:
        raise InvalidArgumentError(f"y must be in [0, {size})", field="y", value=y)


def load_grid(path: Union[str, Path]) -> Grid:
    """Load a grid from a JSON file."""
    with open(path, encoding="utf-8") as f:
        return Grid.from_dict(json.load(f))
