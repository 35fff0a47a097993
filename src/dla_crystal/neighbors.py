"""
Neighbour resolution on the DLA grid.

The boundary policy is deliberately asymmetric: the decrement directions
(up, left) clamp at index 0, so a cell on the top or left edge is its own
up/left neighbour, while the increment directions (down, right) wrap to
index 0 on the far edge.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Tuple

from .grid import Coord


class Direction(IntEnum):
    """Positions in the tuple returned by :func:`neighbor_coords`."""

    UP = 0
    DOWN = 1
    LEFT = 2
    RIGHT = 3


def clamp_decrement(index: int) -> int:
    return index - 1 if index > 0 else 0


def wrap_increment(index: int, size: int) -> int:
    return (index + 1) % size


def neighbor_coords(coord: Coord, height: int, width: int) -> Tuple[Coord, Coord, Coord, Coord]:
    """Return the (up, down, left, right) neighbours of ``coord``."""
    row, col = coord
    return (
        (clamp_decrement(row), col),
        (wrap_increment(row, height), col),
        (row, clamp_decrement(col)),
        (row, wrap_increment(col, width)),
    )
