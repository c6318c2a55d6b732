#!/usr/bin/env python3
"""
Plan a single room described on the command line.

Usage:
    python scripts/plan_room.py --name vault --width 13 --height 11 --size 6 --door 9,10 --door 6,0
    python scripts/plan_room.py --name crew --width 20 --height 17 --mode strips --door 0,2
"""

import argparse
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from room_packing.packing import PackingConfig
from room_packing.pipeline import Pipeline, PipelineConfig, RoomSpec
from room_packing.placement import PlacerConfig
from room_packing.renderer import RenderConfig
from room_packing.utils.config import load_config
from room_packing.utils.paths import PathManager
from room_packing.utils.logging import setup_logging


def parse_door(value: str):
    """Parse an 'x,z' door argument."""
    try:
        x, z = (int(part) for part in value.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Door must be 'x,z', got '{value}'")
    return [x, z]


def parse_sizes(value: str):
    """Parse a comma separated size list."""
    try:
        return [int(part) for part in value.split(",")]
    except ValueError:
        raise argparse.ArgumentTypeError(f"Sizes must be comma separated integers, got '{value}'")


def main():
    parser = argparse.ArgumentParser(description="Plan a single room")
    parser.add_argument("--name", type=str, required=True, help="Room name used for output files")
    parser.add_argument("--mode", choices=["single", "strips"], default="single", help="Planning mode")
    parser.add_argument("--width", type=int, required=True, help="Room width including walls")
    parser.add_argument("--height", type=int, required=True, help="Room height including walls")
    parser.add_argument("--min-x", type=int, default=0, help="Room minimum x")
    parser.add_argument("--min-z", type=int, default=0, help="Room minimum z")
    parser.add_argument("--door", type=parse_door, action="append", default=[], help="Door cell as x,z")
    parser.add_argument("--size", type=int, help="Footprint size (single mode)")
    parser.add_argument("--widths", type=parse_sizes, help="Allowed widths, e.g. 3,4 (strips mode)")
    parser.add_argument("--depths", type=parse_sizes, help="Allowed depths, e.g. 4,5 (strips mode)")
    parser.add_argument(
        "--config-dir",
        type=Path,
        default=Path(__file__).parent.parent / "config",
        help="Configuration directory",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path(__file__).parent.parent / "data",
        help="Output directory",
    )
    parser.add_argument(
        "--log-level", type=str, default="INFO", help="Log level (DEBUG, INFO, WARNING, ERROR)"
    )
    args = parser.parse_args()

    # Load configurations
    packing_config_dict = load_config(args.config_dir, "packing")
    render_config_dict = load_config(args.config_dir, "render")
    pipeline_config_dict = load_config(args.config_dir, "pipeline")
    pipeline_config = PipelineConfig.from_dict(pipeline_config_dict)

    # Setup logging
    paths = PathManager(args.output_dir, pipeline_config.paths)
    setup_logging(level=args.log_level, log_file=paths.get_log_path(args.name))

    try:
        spec = RoomSpec.from_dict(
            {
                "name": args.name,
                "mode": args.mode,
                "room": {
                    "min_x": args.min_x,
                    "min_z": args.min_z,
                    "width": args.width,
                    "height": args.height,
                },
                "doors": args.door,
                "footprint_size": args.size,
                "widths": args.widths,
                "depths": args.depths,
            }
        )
    except ValueError as e:
        parser.error(str(e))

    pipeline = Pipeline(
        packing_config=PackingConfig.from_dict(packing_config_dict),
        placer_config=PlacerConfig.from_dict(packing_config_dict),
        render_config=RenderConfig.from_dict(render_config_dict),
        pipeline_config=pipeline_config,
        base_dir=args.output_dir,
    )

    outputs = pipeline.plan_room(spec)

    if outputs:
        for kind, path in outputs.items():
            print(f"Success: {kind} -> {path}")
        sys.exit(0)
    else:
        print(f"Failed to plan room {args.name}")
        sys.exit(1)


if __name__ == "__main__":
    main()
