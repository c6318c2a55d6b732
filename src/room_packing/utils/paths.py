"""
Path management utilities.
"""

from pathlib import Path
from typing import Dict


class PathManager:
    """Manage output paths for planned rooms."""

    def __init__(self, base_dir: Path, paths_config: Dict[str, str]):
        """
        Initialize path manager.

        Args:
            base_dir: Base directory for all outputs (typically data/)
            paths_config: Dictionary of path configurations from pipeline.yaml
        """
        self.base_dir = Path(base_dir)
        self.paths_config = paths_config

        self.results_dir = self.base_dir / paths_config.get("results", "results")
        self.diagrams_dir = self.base_dir / paths_config.get("diagrams", "diagrams")
        self.renders_dir = self.base_dir / paths_config.get("renders", "renders")
        self.logs_dir = self.base_dir / paths_config.get("logs", "logs")

        self._create_directories()

    def _create_directories(self):
        """Create all required directories."""
        for dir_path in [
            self.results_dir,
            self.diagrams_dir,
            self.renders_dir,
            self.logs_dir,
        ]:
            dir_path.mkdir(parents=True, exist_ok=True)

    def get_result_path(self, room_name: str) -> Path:
        """Get path for the JSON layout result."""
        return self.results_dir / f"{room_name}.json"

    def get_diagram_path(self, room_name: str) -> Path:
        """Get path for the ASCII diagram."""
        return self.diagrams_dir / f"{room_name}.txt"

    def get_render_path(self, room_name: str) -> Path:
        """Get path for the PNG render."""
        return self.renders_dir / f"{room_name}.png"

    def get_log_path(self, name: str) -> Path:
        """Get path for a log file."""
        return self.logs_dir / f"{name}.log"
