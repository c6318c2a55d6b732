"""
Raster rendering of room layouts to PNG.

A layout is first turned into a label grid (one integer per room cell),
then colorized with a matplotlib colormap and written with Pillow.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence
import logging

import matplotlib
import numpy as np
from PIL import Image

from room_packing.geometry import Door, Rect, WallSegment

logger = logging.getLogger(__name__)

# Fixed labels; footprints are numbered from FIRST_FOOTPRINT upward
FLOOR = 0
BOUNDARY = 1
DOOR = 2
WALL = 3
EXCLUSION = 4
WASTE = 5
FIRST_FOOTPRINT = 6

_FIXED_COLORS = {
    FLOOR: (235, 235, 230),
    BOUNDARY: (40, 40, 40),
    DOOR: (200, 60, 40),
    WALL: (110, 110, 110),
    EXCLUSION: (250, 215, 160),
    WASTE: (170, 210, 170),
}


@dataclass
class RenderConfig:
    """Configuration for PNG rendering."""

    cell_size: int = 16  # pixels per grid cell
    colormap: str = "tab20"
    grid_lines: bool = True

    @classmethod
    def from_dict(cls, config: dict) -> "RenderConfig":
        """Create config from dictionary (loaded from YAML)."""
        render = config.get("render", config)
        return cls(
            cell_size=render.get("cell_size", 16),
            colormap=render.get("colormap", "tab20"),
            grid_lines=render.get("grid_lines", True),
        )


class LayoutRenderer:
    """
    Render placement and packing results as colorized images.
    """

    def __init__(self, config: Optional[RenderConfig] = None):
        self.config = config or RenderConfig()

    def label_grid(
        self,
        room: Rect,
        doors: Sequence[Door],
        footprints: Sequence[Rect],
        walls: Sequence[WallSegment] = (),
        exclusions: Sequence[Rect] = (),
        waste: Sequence[Rect] = (),
    ) -> np.ndarray:
        """
        Build a label grid for a room, indexed [row, col] with row 0 at the north wall.

        Later layers overwrite earlier ones: exclusions, waste, footprints,
        walls, then doors.
        """
        grid = np.full((room.height, room.width), FLOOR, dtype=np.int32)
        grid[0, :] = BOUNDARY
        grid[-1, :] = BOUNDARY
        grid[:, 0] = BOUNDARY
        grid[:, -1] = BOUNDARY

        def paint(rect: Rect, label: int):
            rows = slice(room.max_z - rect.max_z, room.max_z - rect.min_z + 1)
            cols = slice(rect.min_x - room.min_x, rect.max_x - room.min_x + 1)
            grid[rows, cols] = label

        for rect in exclusions:
            paint(rect, EXCLUSION)
        for rect in waste:
            paint(rect, WASTE)
        for index, rect in enumerate(footprints):
            paint(rect, FIRST_FOOTPRINT + index)
        for wall in walls:
            for x, z in wall.cells():
                grid[room.max_z - z, x - room.min_x] = WALL
        for door in doors:
            grid[room.max_z - door.z, door.x - room.min_x] = DOOR

        return grid

    def colorize(self, grid: np.ndarray) -> np.ndarray:
        """Map a label grid to an RGB image, one pixel block per cell."""
        cmap = matplotlib.colormaps[self.config.colormap]
        colored = np.zeros((*grid.shape, 3), dtype=np.uint8)

        for label, color in _FIXED_COLORS.items():
            colored[grid == label] = color

        footprint_ids = np.unique(grid[grid >= FIRST_FOOTPRINT])
        logger.debug(f"Colorizing {len(footprint_ids)} footprints")
        for idx, label in enumerate(footprint_ids):
            rgba = cmap(idx % cmap.N)
            colored[grid == label] = (np.array(rgba[:3]) * 255).astype(np.uint8)

        size = self.config.cell_size
        image = np.repeat(np.repeat(colored, size, axis=0), size, axis=1)

        if self.config.grid_lines and size > 2:
            image[::size, :, :] = (image[::size, :, :] * 0.8).astype(np.uint8)
            image[:, ::size, :] = (image[:, ::size, :] * 0.8).astype(np.uint8)

        return image

    def render_placement(self, room: Rect, result, doors: Sequence[Door], output_path: Path) -> Path:
        """
        Render a single footprint placement to PNG.

        Args:
            room: Room rectangle including boundary walls
            result: PlacementResult to draw
            doors: Door cells on the room perimeter
            output_path: Destination PNG path

        Returns:
            Path to the written image
        """
        footprints = [result.bounds] if result.is_valid else []
        grid = self.label_grid(room, doors, footprints, result.walls)
        return self._save(grid, output_path)

    def render_packing(self, packing_input, result, output_path: Path) -> Path:
        """
        Render a strip packing result to PNG.

        Args:
            packing_input: PackingInput the result was computed from
            result: PackingResult to draw
            output_path: Destination PNG path

        Returns:
            Path to the written image
        """
        exclusions = [
            Rect.from_bounds(region.min_x, strip.min_z, region.max_x, strip.max_z)
            for strip in result.strips
            if strip.is_footprint_row
            for region in strip.regions
            if region.is_exclusion_zone
        ]
        grid = self.label_grid(
            packing_input.room,
            packing_input.doors,
            [footprint.bounds for footprint in result.footprints],
            result.walls,
            exclusions,
            [waste.bounds for waste in result.waste_areas],
        )
        return self._save(grid, output_path)

    def _save(self, grid: np.ndarray, output_path: Path) -> Path:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        Image.fromarray(self.colorize(grid)).save(output_path)
        logger.info(f"✓ Saved render: {output_path}")
        return output_path
