"""
Grid state for the frozen-seed DLA model.

The grid is a fixed-size ``(height, width)`` array of small integer cell
codes. Coordinates are ``(row, col)`` tuples and are always in bounds: they
come either from the row-major traversal or from the neighbour resolver.
"""

from __future__ import annotations

from enum import IntEnum
from typing import List, Optional, Tuple

import numpy as np

###############################################################################
# Cell codes (plain ints so the Numba kernel can use them as constants)
###############################################################################

EMPTY = 0
FLYING = 1
FROZEN = 2

Coord = Tuple[int, int]


class Cell(IntEnum):
    EMPTY = EMPTY
    FLYING = FLYING
    FROZEN = FROZEN


class Grid:
    """Owns the 2D cell array and exposes coordinate read/write."""

    def __init__(self, cells: np.ndarray) -> None:
        if cells.ndim != 2:
            raise ValueError(f"Grid expects a 2D array, got shape {cells.shape}")
        self.cells = np.ascontiguousarray(cells, dtype=np.uint8)

    @classmethod
    def empty(cls, height: int, width: int) -> "Grid":
        if height <= 0 or width <= 0:
            raise ValueError(f"Grid size must be positive, got {height}x{width}")
        return cls(np.full((height, width), EMPTY, dtype=np.uint8))

    # ------------------------------------------------------------------ shape
    @property
    def shape(self) -> Tuple[int, int]:
        return self.cells.shape

    @property
    def height(self) -> int:
        return self.cells.shape[0]

    @property
    def width(self) -> int:
        return self.cells.shape[1]

    @property
    def center(self) -> Coord:
        return self.height // 2, self.width // 2

    # ------------------------------------------------------------------ access
    def get(self, coord: Coord) -> Cell:
        return Cell(int(self.cells[coord]))

    def set(self, coord: Coord, state: Cell) -> None:
        self.cells[coord] = state

    def view(self) -> np.ndarray:
        """Read-only view of the cell array, for renderers."""
        arr = self.cells.view()
        arr.flags.writeable = False
        return arr

    # ------------------------------------------------------------------ queries
    def count(self, state: Cell) -> int:
        return int(np.count_nonzero(self.cells == state))

    def occupied_count(self) -> int:
        """Number of non-empty cells."""
        return int(np.count_nonzero(self.cells != EMPTY))

    def flying_coords(self) -> List[Coord]:
        return [(int(r), int(c)) for r, c in np.argwhere(self.cells == FLYING)]

    def frozen_mask(self) -> np.ndarray:
        return self.cells == FROZEN

    def __repr__(self) -> str:
        return (
            f"Grid({self.height}x{self.width}, flying={self.count(Cell.FLYING)}, "
            f"frozen={self.count(Cell.FROZEN)})"
        )


def make_grid(
    height: int,
    width: int,
    num_flying: int,
    rng: Optional[np.random.Generator] = None,
) -> Grid:
    """
    Create a grid with a frozen seed at the centre and ``num_flying`` walkers.

    Walker positions are drawn uniformly with replacement, row then column.
    A later draw overwrites whatever is already there, the seed included.
    """
    if num_flying < 0:
        raise ValueError(f"num_flying must be non-negative, got {num_flying}")
    rng = rng if rng is not None else np.random.default_rng()

    grid = Grid.empty(height, width)
    grid.set(grid.center, Cell.FROZEN)
    for _ in range(num_flying):
        row = int(rng.integers(height))
        col = int(rng.integers(width))
        grid.set((row, col), Cell.FLYING)
    return grid


def grid_from_rows(rows: List[str]) -> Grid:
    """
    Build a grid from rendered text rows (``' '``, ``'f'``, ``'*'``).

    Handy for setting up fixed scenarios; rows must all have the same length.
    """
    if not rows:
        raise ValueError("grid_from_rows needs at least one row")
    width = len(rows[0])
    codes = {" ": EMPTY, ".": EMPTY, "f": FLYING, "*": FROZEN}
    cells = np.zeros((len(rows), width), dtype=np.uint8)
    for r, line in enumerate(rows):
        if len(line) != width:
            raise ValueError(f"Row {r} has length {len(line)}, expected {width}")
        for c, ch in enumerate(line):
            if ch not in codes:
                raise ValueError(f"Unknown cell glyph {ch!r} at ({r}, {c})")
            cells[r, c] = codes[ch]
    return Grid(cells)
