"""
Frozen-seed grid DLA driver.

Flying cells random-walk on a small grid and freeze as soon as one of their
four neighbours is frozen. Each step is a single in-place row-major pass
over the grid; the run ends after the first step that finds no flying cell.

Key points:
1.  **Boundary policy:** up/left clamp at index 0, down/right wrap to index 0
    (see :mod:`dla_crystal.neighbors`).
2.  **In-place updates:** neighbour reads see writes made earlier in the same
    pass. A walker that moves right or down can be visited again in the
    same step.
3.  **Two back ends:** the pure-Python rule (pluggable random source, used by
    the tests) and an equivalent ``@numba.njit`` kernel for larger grids.

A run is not guaranteed to terminate. If a walker lands on the seed at
start-up nothing can ever freeze, and walkers wander forever unless
``max_steps`` is set.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional
import time

import numpy as np
from numba import njit

from . import utils
from .grid import EMPTY, FLYING, FROZEN, Cell, Grid, make_grid
from .render import FramePacer, NoPacer, NullRenderer
from .rules import RandomSource, StepStats, apply_step

###############################################################################
# Numba step kernel
###############################################################################

KERNEL_SEED_BOUND = 2**31


@njit(cache=True)
def _seed_kernel_rng(seed: int) -> None:
    """
    Numba keeps one process-wide RNG, separate from numpy's global one.
    It is re-seeded from the owning simulator before every kernel pass.
    """
    np.random.seed(seed)


@njit(cache=True)
def _step_kernel(cells: np.ndarray) -> int:
    """
    One in-place row-major pass over ``cells``.

    Returns the number of flying cells visited. Same rule as
    :func:`dla_crystal.rules.update_cell`.
    """
    height, width = cells.shape
    nbr_rows = np.empty(4, dtype=np.int64)
    nbr_cols = np.empty(4, dtype=np.int64)
    candidates = np.empty(4, dtype=np.int64)
    flying = 0

    for row in range(height):
        for col in range(width):
            if cells[row, col] != FLYING:
                continue
            flying += 1

            # up, down, left, right
            nbr_rows[0] = row - 1 if row > 0 else 0
            nbr_cols[0] = col
            nbr_rows[1] = (row + 1) % height
            nbr_cols[1] = col
            nbr_rows[2] = row
            nbr_cols[2] = col - 1 if col > 0 else 0
            nbr_rows[3] = row
            nbr_cols[3] = (col + 1) % width

            touching = False
            for k in range(4):
                if cells[nbr_rows[k], nbr_cols[k]] == FROZEN:
                    touching = True
                    break
            if touching:
                cells[row, col] = FROZEN
                continue

            n_free = 0
            for k in range(4):
                if cells[nbr_rows[k], nbr_cols[k]] == EMPTY:
                    candidates[n_free] = k
                    n_free += 1
            if n_free == 0:
                continue

            k = candidates[np.random.randint(0, n_free)]
            cells[row, col] = EMPTY
            cells[nbr_rows[k], nbr_cols[k]] = FLYING

    return flying


###############################################################################
# Driver
###############################################################################


@dataclass
class DLAConfig:
    """Grid size, walker count and display pacing for one run."""
    width: int = 16
    height: int = 8
    starting_flying_cells: int = 5
    target_fps: float = 10.0
    seed: Optional[int] = None
    use_numba: bool = False
    max_steps: Optional[int] = None
    verbose: bool = False


class SimState(Enum):
    RUNNING = "running"
    TERMINATED = "terminated"


class DLASimulator:
    """
    Owns the grid and the main loop.

    Responsibilities:
    1. Build the initial grid (or accept a prepared one).
    2. Run steps until no flying cell is left.
    3. Hand each frame to the renderer, paced by the frame pacer.
    """

    def __init__(
        self,
        config: DLAConfig | None = None,
        *,
        rng: Optional[RandomSource] = None,
        grid: Optional[Grid] = None,
        renderer: Optional[Callable[[np.ndarray], None]] = None,
        pacer: Optional[FramePacer | NoPacer] = None,
    ) -> None:
        self.config = config or DLAConfig()
        self._validate()

        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)

        if grid is None:
            grid = make_grid(
                self.config.height,
                self.config.width,
                self.config.starting_flying_cells,
                self.rng,
            )
        self._grid = grid

        self.renderer = renderer if renderer is not None else NullRenderer()
        self.pacer = pacer if pacer is not None else FramePacer(self.config.target_fps)

        self.state = SimState.RUNNING
        self.steps = 0
        self.flying_count = self._grid.count(Cell.FLYING)
        self.last_stats: Optional[StepStats] = None

    def _validate(self) -> None:
        cfg = self.config
        if cfg.width <= 0 or cfg.height <= 0:
            raise ValueError(f"Grid size must be positive, got {cfg.height}x{cfg.width}")
        if cfg.starting_flying_cells < 0:
            raise ValueError(
                f"starting_flying_cells must be non-negative, got {cfg.starting_flying_cells}"
            )
        if cfg.target_fps <= 0:
            raise ValueError(f"target_fps must be positive, got {cfg.target_fps}")
        if cfg.max_steps is not None and cfg.max_steps <= 0:
            raise ValueError(f"max_steps must be positive, got {cfg.max_steps}")

    @property
    def grid(self) -> Grid:
        return self._grid

    @property
    def terminated(self) -> bool:
        return self.state is SimState.TERMINATED

    # ------------------------------------------------------------------ stepping
    def step(self) -> int:
        """
        Run one pass and return the number of flying cells it visited.

        A pass that visits no flying cell terminates the simulation.
        """
        if self.terminated:
            return 0

        if self.config.use_numba:
            _seed_kernel_rng(int(self.rng.integers(KERNEL_SEED_BOUND)))
            self.flying_count = int(_step_kernel(self._grid.cells))
            self.last_stats = None
        else:
            self.last_stats = apply_step(self._grid, self.rng)
            self.flying_count = self.last_stats.flying

        self.steps += 1
        if self.flying_count == 0:
            self.state = SimState.TERMINATED
        return self.flying_count

    def _show(self) -> None:
        self.pacer.wait()
        self.renderer(self._grid.view())

    def run(self) -> utils.ClusterResult:
        """Run until no flying cells remain (or ``max_steps`` is hit)."""
        cfg = self.config
        if cfg.verbose:
            print(f"Running grid DLA: {cfg.height}x{cfg.width}, "
                  f"flying={self.flying_count}, numba={cfg.use_numba}")

        start = time.time()
        while not self.terminated:
            if cfg.max_steps is not None and self.steps >= cfg.max_steps:
                break
            self._show()
            self.step()
        self._show()
        elapsed = time.time() - start

        if cfg.verbose:
            status = "terminated" if self.terminated else "stopped at max_steps"
            print(f"Grid DLA {status} after {self.steps} steps: "
                  f"frozen={self._grid.count(Cell.FROZEN)} ({elapsed:.2f}s)")
        return self.result(elapsed=elapsed)

    def result(self, elapsed: float = 0.0) -> utils.ClusterResult:
        frozen = self._grid.frozen_mask()
        meta = {
            "model": "grid",
            "width": self._grid.width,
            "height": self._grid.height,
            "starting_flying_cells": self.config.starting_flying_cells,
            "seed": self.config.seed,
            "steps": self.steps,
            "terminated": self.terminated,
            "flying": self._grid.count(Cell.FLYING),
            "elapsed": elapsed,
        }
        meta.update(utils.cluster_stats(frozen))
        return utils.ClusterResult(cells=self._grid.cells.copy(), frozen=frozen, meta=meta)


__all__ = ["DLAConfig", "DLASimulator", "SimState"]


if __name__ == "__main__":
    from .render import TerminalRenderer

    sim = DLASimulator(DLAConfig(seed=42, verbose=True), renderer=TerminalRenderer())
    sim.run()
