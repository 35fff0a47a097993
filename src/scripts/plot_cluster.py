# src/scripts/plot_cluster.py
import argparse
import os
import sys
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.colors as mcolors
import matplotlib.pyplot as plt
import numpy as np

from dla_crystal import utils
from dla_crystal.grid import EMPTY, FLYING, FROZEN

# empty, flying, frozen
CELL_COLORS = ["white", "tab:orange", "black"]


def format_title(meta):
    """
    Format a title string with the run statistics stored in the metadata.
    """
    if not meta:
        return None

    size = f"{meta.get('height', '?')}x{meta.get('width', '?')}"
    seed = meta.get("seed")
    seed_str = str(seed) if seed is not None else "?"
    parts = [f"grid={size}", f"steps={meta.get('steps', '?')}", f"seed={seed_str}"]

    mass = meta.get("mass")
    if mass is not None:
        parts.append(f"mass={mass}")
    rg = meta.get("r_gyration")
    if rg is not None:
        parts.append(f"Rg={rg:.2f}")
    if meta.get("terminated") is False:
        parts.append("unfinished")
    return " | ".join(parts)


def cells_from_result(result):
    """Cell codes of a ClusterResult, rebuilt from the frozen mask if needed."""
    if result.cells is not None:
        return result.cells
    if result.frozen is not None:
        return np.where(result.frozen, FROZEN, EMPTY).astype(np.uint8)
    raise ValueError("ClusterResult has neither cells nor a frozen mask")


def render(result, title=None, output=None, dpi=150, show_flying=True):
    cells = cells_from_result(result)
    if not show_flying:
        cells = np.where(cells == FLYING, EMPTY, cells)

    cmap = mcolors.ListedColormap(CELL_COLORS)
    norm = mcolors.BoundaryNorm([-0.5, 0.5, 1.5, 2.5], cmap.N)

    h, w = cells.shape
    fig, ax = plt.subplots(figsize=(max(2.0, w / 4), max(2.0, h / 4)))
    ax.imshow(cells, interpolation="nearest", cmap=cmap, norm=norm)
    ax.set_aspect("equal")
    ax.axis("off")
    if title:
        ax.set_title(title, pad=10, fontsize=8)

    if output:
        os.makedirs(os.path.dirname(output) if os.path.dirname(output) else ".", exist_ok=True)
        plt.savefig(output, dpi=dpi, bbox_inches="tight", pad_inches=0.1)
        print(f"Saved figure to {output} ({w}x{h} cells @ {dpi} DPI)")

    plt.close(fig)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Plot a saved grid DLA cluster .npz")
    parser.add_argument("file", nargs="?", default="results/cluster.npz", help="Path to .npz cluster file")
    parser.add_argument("--out", default=None, help="Output image path (default: <file>.png)")
    parser.add_argument("--dpi", type=int, default=150, help="DPI for output file (default: 150)")
    parser.add_argument("--frozen-only", action="store_true", help="Hide cells that were still flying")
    args = parser.parse_args(argv)

    if not os.path.exists(args.file):
        print(f"Error: file not found: {args.file}")
        return 1

    if args.out is None:
        args.out = str(Path(args.file).with_suffix(".png"))

    result = utils.load_cluster(args.file)
    render(
        result,
        title=format_title(result.meta),
        output=args.out,
        dpi=args.dpi,
        show_flying=not args.frozen_only,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
