import json
import sys
from pathlib import Path

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from dla_crystal import utils
from src.scripts import plot_cluster, run_sim  # type: ignore[import]


def test_save_and_load_cluster(tmp_path):
    cells = np.array([[0, 1], [2, 2]], dtype=np.uint8)
    result = utils.ClusterResult(cells=cells, frozen=cells == 2, meta={"steps": 7, "seed": None})
    path = tmp_path / "nested" / "cluster.npz"
    utils.save_cluster_result(path, result)

    loaded = utils.load_cluster(path)
    np.testing.assert_array_equal(loaded.cells, cells)
    np.testing.assert_array_equal(loaded.frozen, cells == 2)
    assert loaded.meta == {"steps": 7, "seed": None}

    with pytest.raises(FileExistsError):
        utils.save_cluster_result(path, result, overwrite=False)


def test_load_missing_cluster(tmp_path):
    with pytest.raises(FileNotFoundError):
        utils.load_cluster(tmp_path / "nope.npz")


def test_load_params_json(tmp_path):
    path = tmp_path / "params.json"
    path.write_text(json.dumps({"width": 10, "seed": 3}))
    assert utils.load_params(path) == {"width": 10, "seed": 3}


@pytest.mark.skipif(utils.tomllib is None, reason="tomllib needs Python 3.11+")
def test_load_params_toml(tmp_path):
    path = tmp_path / "params.toml"
    path.write_text("width = 10\ntarget_fps = 30.0\n")
    assert utils.load_params(path) == {"width": 10, "target_fps": 30.0}


def test_load_params_unsupported(tmp_path):
    path = tmp_path / "params.yaml"
    path.write_text("width: 10\n")
    with pytest.raises(ValueError):
        utils.load_params(path)


def test_cluster_stats():
    assert utils.cluster_stats(np.zeros((3, 3), dtype=bool)) == {"mass": 0, "r_gyration": 0.0}
    frozen = np.zeros((3, 3), dtype=bool)
    frozen[1, 0] = frozen[1, 2] = True
    stats = utils.cluster_stats(frozen)
    assert stats["mass"] == 2
    assert stats["r_gyration"] == pytest.approx(1.0)


def test_run_sim_params_file_and_flags(tmp_path, monkeypatch):
    path = tmp_path / "params.json"
    path.write_text(json.dumps({"width": 10, "height": 6, "seed": 1}))
    parser_args = ["--params", str(path), "--height", "7", "--headless", "--quiet"]

    captured = {}

    class Recorder(run_sim.DLASimulator):
        def __init__(self, config, **kwargs):
            captured["config"] = config
            super().__init__(config, **kwargs)

        def run(self):
            return self.result()

    monkeypatch.setattr(run_sim, "DLASimulator", Recorder)
    assert run_sim.main(parser_args) == 0

    config = captured["config"]
    assert (config.width, config.height, config.seed) == (10, 7, 1)
    assert config.verbose is False


def test_run_sim_rejects_unknown_params(tmp_path):
    path = tmp_path / "params.json"
    path.write_text(json.dumps({"radius": 10}))
    with pytest.raises(ValueError):
        run_sim.main(["--params", str(path), "--headless", "--quiet"])


def test_run_then_plot(tmp_path):
    out = tmp_path / "cluster.npz"
    code = run_sim.main([
        "--width", "8", "--height", "6", "--seed", "2",
        "--max-steps", "50", "--headless", "--quiet", "--out", str(out),
    ])
    assert code == 0
    result = utils.load_cluster(out)
    assert result.cells.shape == (6, 8)
    assert result.meta["width"] == 8

    png = tmp_path / "cluster.png"
    assert plot_cluster.main([str(out), "--out", str(png), "--dpi", "50"]) == 0
    assert png.exists()


def test_format_title():
    assert plot_cluster.format_title({}) is None
    title = plot_cluster.format_title(
        {"height": 8, "width": 16, "steps": 40, "seed": 1, "mass": 6, "r_gyration": 1.5, "terminated": False}
    )
    assert title == "grid=8x16 | steps=40 | seed=1 | mass=6 | Rg=1.50 | unfinished"


def test_auto_output_name_marks_unseeded_runs():
    seeded = run_sim.auto_output_name(run_sim.DLAConfig(width=16, height=8, seed=4))
    assert seeded.startswith("grid_8x16_S4_") and seeded.endswith(".npz")
    unseeded = run_sim.auto_output_name(run_sim.DLAConfig(width=16, height=8))
    assert unseeded.startswith("grid_8x16_Srand_")
    assert "None" not in unseeded
