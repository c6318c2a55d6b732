#!/usr/bin/env python3
"""
Plan every room in a YAML batch file.

Usage:
    python scripts/plan_batch.py --rooms config/rooms.yaml --output-dir data
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
from room_packing.utils.config import load_config, load_room_batch
from room_packing.utils.paths import PathManager
from room_packing.utils.logging import setup_logging, get_logger

logger = get_logger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Plan a batch of rooms")
    parser.add_argument(
        "--rooms",
        type=Path,
        default=Path(__file__).parent.parent / "config" / "rooms.yaml",
        help="Room batch YAML file",
    )
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
    setup_logging(level=args.log_level, log_file=paths.get_log_path("batch_planning"))

    pipeline = Pipeline(
        packing_config=PackingConfig.from_dict(packing_config_dict),
        placer_config=PlacerConfig.from_dict(packing_config_dict),
        render_config=RenderConfig.from_dict(render_config_dict),
        pipeline_config=pipeline_config,
        base_dir=args.output_dir,
    )

    try:
        specs = [RoomSpec.from_dict(room) for room in load_room_batch(args.rooms)]
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Cannot load room batch: {e}")
        sys.exit(1)

    logger.info(f"Starting batch planning: {len(specs)} rooms")

    results = pipeline.plan_batch(specs)
    failed = [name for name, outputs in results.items() if outputs is None]
    success_count = len(results) - len(failed)

    # Summary
    logger.info("=" * 60)
    logger.info("Batch planning complete")
    logger.info(f"  Success: {success_count}/{len(specs)}")
    logger.info(f"  Failed: {len(failed)}")
    if failed:
        logger.info(f"  Failed rooms: {failed}")
    logger.info("=" * 60)

    # Exit code based on success rate
    if success_count == len(specs):
        sys.exit(0)
    elif success_count > 0:
        sys.exit(2)  # Partial success
    else:
        sys.exit(1)  # Total failure


if __name__ == "__main__":
    main()
