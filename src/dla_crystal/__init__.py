"""
DLA Crystal - frozen-seed diffusion-limited aggregation on a small grid

Flying cells random-walk over a fixed grid and freeze when they touch the
growing structure. The package provides:
- Grid / make_grid: cell state storage and initial layout
- neighbor_coords: clamp-up/left, wrap-down/right neighbour resolution
- update_cell / apply_step: the growth rule
- DLASimulator: the step loop and termination
"""

from .grid import Cell, Grid, make_grid, grid_from_rows
from .neighbors import Direction, neighbor_coords
from .rules import Outcome, StepStats, apply_step, update_cell
from .simulation import DLAConfig, DLASimulator, SimState
from .render import FramePacer, NullRenderer, TerminalRenderer, render_text
from . import utils

__all__ = [
    # Simulator
    "DLASimulator",
    "DLAConfig",
    "SimState",
    # Grid and rule
    "Cell",
    "Grid",
    "make_grid",
    "grid_from_rows",
    "Direction",
    "neighbor_coords",
    "Outcome",
    "StepStats",
    "apply_step",
    "update_cell",
    # Rendering
    "FramePacer",
    "NullRenderer",
    "TerminalRenderer",
    "render_text",
    # Utilities
    "utils",
]
