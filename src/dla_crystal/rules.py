"""
The DLA growth rule, applied to one flying cell at a time.

Updates are made in place during a single row-major pass: a cell's
neighbour reads see whatever earlier cells in the same pass have already
written. There is no step-start snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from .grid import Cell, Coord, Grid
from .neighbors import neighbor_coords


class RandomSource(Protocol):
    """Anything with a numpy ``Generator``-style ``integers(n)`` method."""

    def integers(self, high: int) -> int: ...


class Outcome(Enum):
    FROZE = "froze"
    MOVED = "moved"
    STUCK = "stuck"


@dataclass
class StepStats:
    """Counters for one pass over the grid."""

    flying: int = 0
    froze: int = 0
    moved: int = 0
    stuck: int = 0

    def record(self, outcome: Outcome) -> None:
        self.flying += 1
        if outcome is Outcome.FROZE:
            self.froze += 1
        elif outcome is Outcome.MOVED:
            self.moved += 1
        else:
            self.stuck += 1


def update_cell(grid: Grid, coord: Coord, rng: RandomSource) -> Outcome:
    """
    Apply the growth rule to the flying cell at ``coord``.

    1. Any frozen neighbour: freeze in place.
    2. Otherwise move to a uniformly chosen empty neighbour, or stay put
       if there is none.

    A self-neighbour (top/left edge) is harmless: the cell itself is
    flying, so it neither triggers a freeze nor counts as an empty target.
    """
    neighbours = neighbor_coords(coord, grid.height, grid.width)

    if any(grid.get(n) is Cell.FROZEN for n in neighbours):
        grid.set(coord, Cell.FROZEN)
        return Outcome.FROZE

    candidates = [n for n in neighbours if grid.get(n) is Cell.EMPTY]
    if not candidates:
        return Outcome.STUCK

    target = candidates[int(rng.integers(len(candidates)))]
    grid.set(coord, Cell.EMPTY)
    grid.set(target, Cell.FLYING)
    return Outcome.MOVED


def apply_step(grid: Grid, rng: RandomSource) -> StepStats:
    """One row-major pass, updating every cell that is flying when visited."""
    stats = StepStats()
    for row in range(grid.height):
        for col in range(grid.width):
            if grid.get((row, col)) is not Cell.FLYING:
                continue
            stats.record(update_cell(grid, (row, col), rng))
    return stats
