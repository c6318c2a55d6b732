"""
Single footprint placement inside a rectangular room.

Tries the four corners, then the four walls, then the room center, and
returns the first placement that keeps every door clear. Corner placements
reuse two room walls; edge placements reuse one and need one synthesized
wall; the center placement needs an L of two synthesized walls.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple
import logging

from room_packing.geometry import (
    Door,
    Rect,
    Rotation,
    Side,
    WallSegment,
    bounds_from_center,
    center_offset,
    wall_cells,
)
from room_packing.utils.validation import check_room_input

logger = logging.getLogger(__name__)


class PlacementType(Enum):
    """How many room walls a placement reuses."""

    INVALID = "invalid"
    CORNER = "corner"  # two room walls
    EDGE = "edge"  # one room wall
    CENTER = "center"  # no room walls


@dataclass
class PlacerConfig:
    """Configuration for single footprint placement."""

    edge_margin: int = 1  # extra door-free cells required along a wall
    corner_buffer: int = 2  # wall cells skipped at each end when scanning edges

    @classmethod
    def from_dict(cls, config: dict) -> "PlacerConfig":
        """Create config from dictionary (loaded from YAML)."""
        placement = config.get("placement", config)
        return cls(
            edge_margin=placement.get("edge_margin", 1),
            corner_buffer=placement.get("corner_buffer", 2),
        )


@dataclass(frozen=True)
class PlacementResult:
    """Spawn coordinate, rotation and required walls for one footprint."""

    center_x: int
    center_z: int
    rotation: Rotation
    placement_type: PlacementType
    size: int
    walls: Tuple[WallSegment, ...] = field(default_factory=tuple)

    @property
    def is_valid(self) -> bool:
        return self.placement_type != PlacementType.INVALID

    @property
    def bounds(self) -> Optional[Rect]:
        if not self.is_valid:
            return None
        return bounds_from_center(self.center_x, self.center_z, self.size, self.rotation)

    def to_dict(self) -> dict:
        bounds = self.bounds
        return {
            "type": self.placement_type.value,
            "center_x": self.center_x,
            "center_z": self.center_z,
            "rotation": self.rotation.name.lower(),
            "size": self.size,
            "bounds": bounds.to_dict() if bounds else None,
            "walls": [wall.to_dict() for wall in self.walls],
        }

    @classmethod
    def invalid(cls, size: int) -> "PlacementResult":
        return cls(0, 0, Rotation.NORTH, PlacementType.INVALID, size)


# Corner order and the two room walls each corner is flush against
_CORNERS = (
    (Rotation.NORTH, (Side.NORTH, Side.WEST)),  # NW
    (Rotation.EAST, (Side.NORTH, Side.EAST)),  # NE
    (Rotation.SOUTH, (Side.SOUTH, Side.EAST)),  # SE
    (Rotation.WEST, (Side.SOUTH, Side.WEST)),  # SW
)


def corner_anchor(room: Rect, size: int, rotation: Rotation) -> Tuple[int, int]:
    """
    Spawn coordinate that puts a footprint flush into one room corner.

    The corner is selected by rotation: NORTH is NW, EAST is NE, SOUTH is SE
    and WEST is SW. Even sizes get a per-corner compensation so that the
    realized rectangle, not the naive center, touches both walls.
    """
    off = center_offset(size)
    half = size // 2

    if rotation == Rotation.NORTH:
        return room.min_x + 1 + half - off, room.max_z - off - (size - half)
    if rotation == Rotation.EAST:
        return room.max_x - off - (size - half), room.max_z - size + half
    if rotation == Rotation.SOUTH:
        return room.max_x - size + half, room.min_z + 1 + half
    return room.min_x + 1 + half, room.min_z + 1 + half - off


def has_door_on_wall(doors: Sequence[Door], room: Rect, side: Side, lo: int, hi: int) -> bool:
    """True if any door sits on ``side`` with its along-wall coordinate in [lo, hi]."""
    for door in doors:
        if side == Side.NORTH and door.z == room.max_z and lo <= door.x <= hi:
            return True
        if side == Side.EAST and door.x == room.max_x and lo <= door.z <= hi:
            return True
        if side == Side.SOUTH and door.z == room.min_z and lo <= door.x <= hi:
            return True
        if side == Side.WEST and door.x == room.min_x and lo <= door.z <= hi:
            return True
    return False


def _corner_blocked(bounds: Rect, room: Rect, doors: Sequence[Door], sides: Tuple[Side, Side]) -> bool:
    for side in sides:
        if side in (Side.NORTH, Side.SOUTH):
            lo, hi = bounds.min_x, bounds.max_x
        else:
            lo, hi = bounds.min_z, bounds.max_z
        if has_door_on_wall(doors, room, side, lo, hi):
            return True
    return False


def edge_wall(bounds: Rect, rotation: Rotation) -> WallSegment:
    """The one synthesized wall that closes the open side of an edge placement."""
    if rotation == Rotation.NORTH:
        return WallSegment(bounds.min_x - 1, bounds.min_z, bounds.min_x - 1, bounds.max_z)
    if rotation == Rotation.EAST:
        return WallSegment(bounds.min_x, bounds.max_z + 1, bounds.max_x, bounds.max_z + 1)
    if rotation == Rotation.SOUTH:
        return WallSegment(bounds.max_x + 1, bounds.min_z, bounds.max_x + 1, bounds.max_z)
    return WallSegment(bounds.min_x, bounds.min_z - 1, bounds.max_x, bounds.min_z - 1)


def center_walls(bounds: Rect) -> Tuple[WallSegment, WallSegment]:
    """Left wall plus back wall, joined at the back-left cell."""
    left = WallSegment(bounds.min_x - 1, bounds.min_z, bounds.min_x - 1, bounds.max_z)
    back = WallSegment(bounds.min_x - 1, bounds.max_z + 1, bounds.max_x, bounds.max_z + 1)
    return left, back


def longest_free_run(
    cells: Sequence[Tuple[int, int]], doors: Sequence[Door], start: int, stop: int
) -> Tuple[int, int]:
    """
    Longest door-free run of wall cells within indices [start, stop].

    Returns:
        (run_start, run_length); run_length is 0 if every cell has a door.
        Ties go to the run found first.
    """
    door_cells = {(door.x, door.z) for door in doors}
    best_start, best_len = start, 0
    run_start, run_len = start, 0

    for idx in range(start, stop + 1):
        if cells[idx] in door_cells:
            run_len = 0
            run_start = idx + 1
            continue
        run_len += 1
        if run_len > best_len:
            best_start, best_len = run_start, run_len

    return best_start, best_len


class FootprintPlacer:
    """
    Place one square footprint in a room without blocking any door.
    """

    def __init__(self, config: Optional[PlacerConfig] = None):
        self.config = config or PlacerConfig()

    def place(self, room: Rect, footprint_size: int, doors: Sequence[Door]) -> PlacementResult:
        """
        Find the best placement for a footprint.

        Args:
            room: Room rectangle including its boundary walls
            footprint_size: Side length of the square footprint
            doors: Door cells on the room perimeter

        Returns:
            First feasible corner, edge or center placement, else INVALID

        Raises:
            ValueError: If the room, size or doors are malformed
        """
        check_room_input(room, doors, footprint_size)
        doors = list(doors)

        for result in (
            self._try_corners(room, footprint_size, doors),
            self._try_edges(room, footprint_size, doors),
            self._try_center(room, footprint_size),
        ):
            if result is not None:
                logger.debug(
                    f"Placed size {footprint_size} footprint: {result.placement_type.value} "
                    f"at ({result.center_x}, {result.center_z}) facing {result.rotation.name}"
                )
                return result

        logger.debug(f"No placement for size {footprint_size} footprint in {room}")
        return PlacementResult.invalid(footprint_size)

    def _try_corners(self, room: Rect, size: int, doors: List[Door]) -> Optional[PlacementResult]:
        interior = room.interior()
        for rotation, sides in _CORNERS:
            center_x, center_z = corner_anchor(room, size, rotation)
            bounds = bounds_from_center(center_x, center_z, size, rotation)
            if not interior.contains_rect(bounds):
                continue
            if _corner_blocked(bounds, room, doors, sides):
                logger.debug(f"Corner {rotation.name} blocked by door")
                continue
            return PlacementResult(center_x, center_z, rotation, PlacementType.CORNER, size)
        return None

    def _try_edges(self, room: Rect, size: int, doors: List[Door]) -> Optional[PlacementResult]:
        for side in Side:
            result = self._try_edge(room, side, size, doors)
            if result is not None:
                return result
        return None

    def _try_edge(self, room: Rect, side: Side, size: int, doors: List[Door]) -> Optional[PlacementResult]:
        segment_len = size + self.config.edge_margin
        buffer = self.config.corner_buffer
        cells = wall_cells(room, side)

        if len(cells) < segment_len + 2 * buffer:
            return None

        run_start, run_len = longest_free_run(cells, doors, buffer, len(cells) - 1 - buffer)
        if run_len < segment_len:
            return None

        window_start = run_start + (run_len - segment_len) // 2
        wall_x, wall_z = cells[window_start + (segment_len - 1) // 2]

        # one cell clears the room wall, then half the footprint
        inset = size // 2 + 1
        rotation = Rotation(side.value)
        if side == Side.NORTH:
            center_x, center_z = wall_x, wall_z - inset
        elif side == Side.EAST:
            center_x, center_z = wall_x - inset, wall_z
        elif side == Side.SOUTH:
            center_x, center_z = wall_x, wall_z + inset
        else:
            center_x, center_z = wall_x + inset, wall_z

        bounds = bounds_from_center(center_x, center_z, size, rotation)
        if not room.interior().contains_rect(bounds):
            logger.debug(f"Edge {side.name} placement leaves the room interior")
            return None

        return PlacementResult(
            center_x,
            center_z,
            rotation,
            PlacementType.EDGE,
            size,
            (edge_wall(bounds, rotation),),
        )

    def _try_center(self, room: Rect, size: int) -> Optional[PlacementResult]:
        center_x = room.min_x + room.width // 2 - 1
        center_z = room.min_z + room.height // 2 - 1
        bounds = bounds_from_center(center_x, center_z, size, Rotation.NORTH)
        walls = center_walls(bounds)

        interior = room.interior()
        if not interior.contains_rect(bounds):
            return None
        if not all(interior.contains(x, z) for wall in walls for x, z in wall.cells()):
            return None

        return PlacementResult(center_x, center_z, Rotation.NORTH, PlacementType.CENTER, size, walls)


def place(
    room: Rect,
    footprint_size: int,
    doors: Sequence[Door],
    config: Optional[PlacerConfig] = None,
) -> PlacementResult:
    """Convenience wrapper around ``FootprintPlacer.place``."""
    return FootprintPlacer(config).place(room, footprint_size, doors)
