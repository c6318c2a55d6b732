"""
Configuration loading and management.
"""

from pathlib import Path
from typing import Any, Dict, List
import yaml


class ConfigLoader:
    """Load YAML configuration files from one directory."""

    def __init__(self, config_dir: Path):
        """
        Initialize config loader.

        Args:
            config_dir: Directory containing YAML config files
        """
        self.config_dir = Path(config_dir)
        if not self.config_dir.exists():
            raise FileNotFoundError(f"Config directory not found: {config_dir}")

    def load(self, config_name: str) -> Dict[str, Any]:
        """
        Load a YAML configuration file.

        Args:
            config_name: Name of config file (without .yaml extension)

        Returns:
            Dictionary containing configuration (empty for an empty file)

        Raises:
            FileNotFoundError: If config file doesn't exist
            yaml.YAMLError: If config file is invalid
        """
        config_path = self.config_dir / f"{config_name}.yaml"

        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, "r") as f:
            config = yaml.safe_load(f)

        return config or {}

    def load_all(self) -> Dict[str, Dict[str, Any]]:
        """
        Load all configuration files.

        Returns:
            Dictionary mapping config names to their contents
        """
        return {
            config_file.stem: self.load(config_file.stem)
            for config_file in sorted(self.config_dir.glob("*.yaml"))
        }


def load_config(config_dir: Path, config_name: str) -> Dict[str, Any]:
    """
    Convenience function to load a single config file.

    Args:
        config_dir: Directory containing config files
        config_name: Name of config file (without .yaml extension)

    Returns:
        Dictionary containing configuration
    """
    loader = ConfigLoader(config_dir)
    return loader.load(config_name)


def load_room_batch(batch_path: Path) -> List[Dict[str, Any]]:
    """
    Load a YAML file describing a batch of rooms.

    The file holds a top-level ``rooms`` list; each entry is one room spec.

    Args:
        batch_path: Path to the batch YAML file

    Returns:
        List of room spec dictionaries

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file has no ``rooms`` list or repeats a room name
    """
    batch_path = Path(batch_path)
    if not batch_path.exists():
        raise FileNotFoundError(f"Room batch not found: {batch_path}")

    with open(batch_path, "r") as f:
        data = yaml.safe_load(f) or {}

    rooms = data.get("rooms")
    if not isinstance(rooms, list):
        raise ValueError(f"Room batch {batch_path} has no 'rooms' list")

    names = [room.get("name") for room in rooms if isinstance(room, dict)]
    duplicates = sorted({str(name) for name in names if names.count(name) > 1})
    if duplicates:
        raise ValueError(f"Room batch {batch_path} repeats room names: {duplicates}")

    return rooms
