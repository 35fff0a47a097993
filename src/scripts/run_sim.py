#!/usr/bin/env python3
"""
Interactive grid DLA runner.

Draws the grid in the terminal every step until no flying cell is left.
Parameters come from the command line, optionally preloaded from a JSON or
TOML file (keys match the DLAConfig fields).
"""

import argparse
import sys
from pathlib import Path

from dla_crystal import DLAConfig, DLASimulator, FramePacer, NullRenderer, TerminalRenderer, utils
from dla_crystal.render import NoPacer

DEFAULTS = DLAConfig()


def build_config(args: argparse.Namespace) -> DLAConfig:
    params = utils.load_params(args.params) if args.params else {}
    unknown = set(params) - set(DLAConfig.__dataclass_fields__)
    if unknown:
        raise ValueError(f"Unknown parameters in {args.params}: {sorted(unknown)}")

    # Command-line values win over the parameter file when given explicitly.
    for name in ("width", "height", "starting_flying_cells", "target_fps", "seed", "max_steps"):
        value = getattr(args, name)
        if value is not None:
            params[name] = value
    if args.numba:
        params["use_numba"] = True
    params["verbose"] = not args.quiet
    return DLAConfig(**params)


def auto_output_name(config: DLAConfig) -> str:
    seed = f"S{config.seed}" if config.seed is not None else "Srand"
    return f"grid_{config.height}x{config.width}_{seed}_{utils.now_str()}.npz"


def main(argv=None):
    parser = argparse.ArgumentParser(description="Run a frozen-seed grid DLA in the terminal")
    parser.add_argument("--width", type=int, default=None, help=f"grid width (default: {DEFAULTS.width})")
    parser.add_argument("--height", type=int, default=None, help=f"grid height (default: {DEFAULTS.height})")
    parser.add_argument(
        "--flying",
        dest="starting_flying_cells",
        type=int,
        default=None,
        help=f"initial flying cells (default: {DEFAULTS.starting_flying_cells})",
    )
    parser.add_argument("--fps", dest="target_fps", type=float, default=None, help="frames per second")
    parser.add_argument("--seed", type=int, default=None, help="random seed")
    parser.add_argument("--max-steps", type=int, default=None, help="stop after this many steps")
    parser.add_argument("--numba", action="store_true", help="use the compiled step kernel")
    parser.add_argument("--params", default=None, help="JSON/TOML parameter file")
    parser.add_argument("--headless", action="store_true", help="no drawing and no frame delay")
    parser.add_argument("--no-clear", action="store_true", help="do not clear the screen between frames")
    parser.add_argument("--quiet", action="store_true", help="no start/finish summary")
    parser.add_argument("--out", default=None, help="save the final grid to this .npz file")
    parser.add_argument("--save", action="store_true", help="save the final grid under results/ with an auto-generated name")
    args = parser.parse_args(argv)

    config = build_config(args)
    if args.headless:
        renderer, pacer = NullRenderer(), NoPacer()
    else:
        renderer, pacer = TerminalRenderer(clear=not args.no_clear), FramePacer(config.target_fps)

    sim = DLASimulator(config, renderer=renderer, pacer=pacer)
    result = sim.run()

    if args.save and args.out is None:
        args.out = str(Path("results") / auto_output_name(config))
    if args.out:
        utils.save_cluster_result(args.out, result)
        if config.verbose:
            print(f"Cluster saved to {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
