"""
Utility modules for room layout planning.
"""

from room_packing.utils.config import load_config, load_room_batch, ConfigLoader
from room_packing.utils.logging import setup_logging, get_logger
from room_packing.utils.paths import PathManager
from room_packing.utils.validation import (
    check_packing_input,
    check_room_input,
    validate_packing_result,
    validate_placement_result,
)

__all__ = [
    "load_config",
    "load_room_batch",
    "ConfigLoader",
    "setup_logging",
    "get_logger",
    "PathManager",
    "check_packing_input",
    "check_room_input",
    "validate_packing_result",
    "validate_placement_result",
]
