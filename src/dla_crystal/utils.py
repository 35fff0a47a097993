# src/dla_crystal/utils.py
from __future__ import annotations

import json
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import numpy as np

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover
    tomllib = None  # type: ignore


@dataclass
class ClusterResult:
    """Final state of a DLA run: the raw cell codes plus the frozen mask."""

    cells: Optional[np.ndarray] = None
    frozen: Optional[np.ndarray] = None
    meta: Optional[Dict[str, Any]] = None


def now_str() -> str:
    return time.strftime("%Y%m%d-%H%M%S")


def save_cluster_result(
    path: str | os.PathLike[str], result: ClusterResult, *, overwrite: bool = True
) -> None:
    """Serialize a ClusterResult to a compressed .npz file."""
    if not overwrite and Path(path).exists():
        raise FileExistsError(f"{path} already exists")
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    out: Dict[str, Any] = {}
    if result.cells is not None:
        out["cells"] = np.asarray(result.cells, dtype=np.uint8)
    if result.frozen is not None:
        out["frozen"] = np.asarray(result.frozen).astype("uint8")
    out["meta"] = result.meta or {}
    np.savez_compressed(path, **out)


def load_cluster(path: str | os.PathLike[str]) -> ClusterResult:
    """
    Load a cluster .npz written by :func:`save_cluster_result`.
    """
    if not Path(path).exists():
        raise FileNotFoundError(f"Missing cluster file: {path}")
    with np.load(path, allow_pickle=True) as data:
        cells = data["cells"].astype(np.uint8) if "cells" in data else None
        frozen = data["frozen"].astype(bool) if "frozen" in data else None
        meta: Dict[str, Any] = {}
        if "meta" in data:
            meta_raw = data["meta"]
            meta = meta_raw.item()
    return ClusterResult(cells=cells, frozen=frozen, meta=meta)


def load_params(path: str | os.PathLike[str]) -> Dict[str, Any]:
    """
    Load simulation parameters from JSON or TOML.
    """
    path = str(path)
    with open(path, "rb") as fh:
        data = fh.read()
    suffix = Path(path).suffix.lower()
    if suffix in {".json", ""}:
        return json.loads(data.decode("utf-8"))
    if suffix in {".toml", ".tml"}:
        if tomllib is None:
            raise RuntimeError("tomllib is unavailable; cannot parse TOML files")
        return tomllib.loads(data.decode("utf-8"))
    raise ValueError(f"Unsupported parameter file format: {suffix}")


def cluster_stats(frozen: np.ndarray) -> Dict[str, float]:
    """Mass and radius of gyration of a frozen mask."""
    coords = np.argwhere(frozen)
    mass = coords.shape[0]
    if mass == 0:
        return {"mass": 0, "r_gyration": 0.0}
    centroid = coords.mean(axis=0)
    r_gyration = float(np.sqrt(np.mean(np.sum((coords - centroid) ** 2, axis=1))))
    return {"mass": int(mass), "r_gyration": r_gyration}
