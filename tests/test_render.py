import io

import pytest

from dla_crystal import FramePacer, TerminalRenderer, grid_from_rows, render_text
from dla_crystal.render import CLEAR_SCREEN, render_rows


def test_glyphs_one_line_per_row():
    grid = grid_from_rows([" f*", "*  "])
    assert render_rows(grid.cells) == [" f*", "*  "]
    assert render_text(grid.cells) == " f*\n*  \n"


def test_terminal_renderer_writes_frames():
    grid = grid_from_rows(["f ", " *"])
    stream = io.StringIO()
    renderer = TerminalRenderer(stream, clear=False)
    renderer(grid.view())
    renderer(grid.view())
    assert stream.getvalue() == "f \n *\n" * 2
    assert renderer.frames == 2


def test_terminal_renderer_clears_screen():
    stream = io.StringIO()
    TerminalRenderer(stream)(grid_from_rows(["*"]).cells)
    assert stream.getvalue() == CLEAR_SCREEN + "*\n"


def test_frame_pause_from_target_fps():
    slept = []
    pacer = FramePacer(10, sleep=slept.append)
    assert pacer.pause_us == 100_000
    pacer.wait()
    assert slept == [pytest.approx(0.1)]
    assert FramePacer(60, sleep=slept.append).pause_us == pytest.approx(1_000_000 / 60)


def test_frame_pacer_rejects_non_positive_fps():
    with pytest.raises(ValueError):
        FramePacer(0)
