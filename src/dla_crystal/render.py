"""
Terminal rendering and frame pacing.

These are cosmetic collaborators of the simulator: they read the grid but
never change it, and the frame delay has no effect on the simulation.
"""

from __future__ import annotations

import sys
import time
from typing import Callable, List, Optional, TextIO

import numpy as np

from .grid import EMPTY, FLYING, FROZEN

GLYPHS = {EMPTY: " ", FLYING: "f", FROZEN: "*"}

CLEAR_SCREEN = "\x1b[2J\x1b[H"

MICROSECONDS_PER_SECOND = 1_000_000


def render_rows(cells: np.ndarray) -> List[str]:
    """One string per grid row, one glyph per cell, no separators."""
    return ["".join(GLYPHS[int(v)] for v in row) for row in cells]


def render_text(cells: np.ndarray) -> str:
    return "\n".join(render_rows(cells)) + "\n"


class TerminalRenderer:
    """Writes each frame to a text stream, optionally clearing the screen first."""

    def __init__(self, stream: Optional[TextIO] = None, *, clear: bool = True) -> None:
        self.stream = stream if stream is not None else sys.stdout
        self.clear = clear
        self.frames = 0

    def __call__(self, cells: np.ndarray) -> None:
        if self.clear:
            self.stream.write(CLEAR_SCREEN)
        self.stream.write(render_text(cells))
        self.stream.flush()
        self.frames += 1


class NullRenderer:
    """Counts frames and draws nothing (headless runs)."""

    def __init__(self) -> None:
        self.frames = 0

    def __call__(self, cells: np.ndarray) -> None:
        self.frames += 1


class FramePacer:
    """Fixed inter-frame pause derived from a target frame rate."""

    def __init__(
        self,
        target_fps: float,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if target_fps <= 0:
            raise ValueError(f"target_fps must be positive, got {target_fps}")
        self.target_fps = target_fps
        self.pause_us = MICROSECONDS_PER_SECOND / target_fps
        self._sleep = sleep

    def wait(self) -> None:
        self._sleep(self.pause_us / MICROSECONDS_PER_SECOND)


class NoPacer:
    def wait(self) -> None:
        pass
