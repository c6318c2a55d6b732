"""
Grid geometry primitives shared by the placer and the strip packer.

All coordinates are integer grid cells. A room rectangle includes its
boundary walls, so the usable interior is the rectangle shrunk by one cell
on every side.

Footprints are spawned by a center coordinate. For even sizes the
center-to-rectangle mapping is asymmetric and the asymmetry does not rotate
with the footprint, so every conversion goes through ``bounds_from_center``
and its per-rotation correction table.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator, List, Optional, Tuple

EVEN_SIZE_CENTER_OFFSET = 1


class Rotation(IntEnum):
    """Footprint rotation. The front (entrance) faces the opposite way."""

    NORTH = 0  # front faces south
    EAST = 1  # front faces west
    SOUTH = 2  # front faces north
    WEST = 3  # front faces east

    @property
    def is_horizontal(self) -> bool:
        """True when local width maps onto world z."""
        return self in (Rotation.EAST, Rotation.WEST)

    @property
    def arrow(self) -> str:
        """Arrow pointing the way the front faces."""
        return "↓←↑→"[self.value]


class Side(IntEnum):
    """Room walls in scan order."""

    NORTH = 0  # max_z
    EAST = 1  # max_x
    SOUTH = 2  # min_z
    WEST = 3  # min_x


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle of grid cells, inclusive bounds."""

    min_x: int
    min_z: int
    width: int
    height: int

    @property
    def max_x(self) -> int:
        return self.min_x + self.width - 1

    @property
    def max_z(self) -> int:
        return self.min_z + self.height - 1

    def contains(self, x: int, z: int) -> bool:
        return self.min_x <= x <= self.max_x and self.min_z <= z <= self.max_z

    def contains_rect(self, other: "Rect") -> bool:
        return (
            self.min_x <= other.min_x
            and other.max_x <= self.max_x
            and self.min_z <= other.min_z
            and other.max_z <= self.max_z
        )

    def overlaps(self, other: "Rect") -> bool:
        return not (
            other.min_x > self.max_x
            or other.max_x < self.min_x
            or other.min_z > self.max_z
            or other.max_z < self.min_z
        )

    def interior(self) -> "Rect":
        """Rectangle without the one-cell boundary wall."""
        return Rect(self.min_x + 1, self.min_z + 1, self.width - 2, self.height - 2)

    def cells(self) -> Iterator[Tuple[int, int]]:
        for z in range(self.min_z, self.max_z + 1):
            for x in range(self.min_x, self.max_x + 1):
                yield x, z

    @classmethod
    def from_bounds(cls, min_x: int, min_z: int, max_x: int, max_z: int) -> "Rect":
        return cls(min_x, min_z, max_x - min_x + 1, max_z - min_z + 1)

    def to_dict(self) -> dict:
        return {
            "min_x": self.min_x,
            "min_z": self.min_z,
            "width": self.width,
            "height": self.height,
        }


@dataclass(frozen=True)
class Door:
    """A perimeter cell that must stay unobstructed."""

    x: int
    z: int

    def to_dict(self) -> dict:
        return {"x": self.x, "z": self.z}


@dataclass(frozen=True)
class WallSegment:
    """Straight run of wall cells, inclusive of both ends."""

    start_x: int
    start_z: int
    end_x: int
    end_z: int

    @property
    def is_vertical(self) -> bool:
        return self.start_x == self.end_x

    @property
    def is_horizontal(self) -> bool:
        return self.start_z == self.end_z

    @property
    def length(self) -> int:
        return max(abs(self.end_x - self.start_x), abs(self.end_z - self.start_z)) + 1

    def cells(self) -> Iterator[Tuple[int, int]]:
        if self.is_vertical:
            lo, hi = sorted((self.start_z, self.end_z))
            for z in range(lo, hi + 1):
                yield self.start_x, z
        else:
            lo, hi = sorted((self.start_x, self.end_x))
            for x in range(lo, hi + 1):
                yield x, self.start_z

    def to_dict(self) -> dict:
        return {
            "start_x": self.start_x,
            "start_z": self.start_z,
            "end_x": self.end_x,
            "end_z": self.end_z,
        }


def center_offset(size: int) -> int:
    """Correction applied to anchors of even-sized footprints."""
    return EVEN_SIZE_CENTER_OFFSET if size % 2 == 0 else 0


# (dx, dz) applied to the base minimum, in units of center_offset(size)
_ROTATION_CORRECTION = {
    Rotation.NORTH: (0, 0),
    Rotation.EAST: (0, -1),
    Rotation.SOUTH: (-1, -1),
    Rotation.WEST: (-1, 0),
}


def bounds_from_center(center_x: int, center_z: int, size: int, rotation: Rotation) -> Rect:
    """
    Realized rectangle of a square footprint spawned at a center coordinate.

    Args:
        center_x: Spawn x coordinate
        center_z: Spawn z coordinate
        size: Side length in cells
        rotation: Footprint rotation

    Returns:
        The occupied rectangle
    """
    half = size // 2
    off = center_offset(size)
    base_min_x = center_x - half + off
    base_min_z = center_z - half + off
    dx, dz = _ROTATION_CORRECTION[Rotation(rotation)]
    return Rect(base_min_x + dx * off, base_min_z + dz * off, size, size)


def rotated_dimensions(width: int, height: int, rotation: Rotation) -> Tuple[int, int]:
    """World-axis size of a footprint with local ``width x height``."""
    if Rotation(rotation).is_horizontal:
        return height, width
    return width, height


def bounds_non_square(min_x: int, min_z: int, width: int, height: int, rotation: Rotation) -> Rect:
    """World rectangle for a non-square footprint anchored at its minimum corner."""
    world_w, world_h = rotated_dimensions(width, height, rotation)
    return Rect(min_x, min_z, world_w, world_h)


def center_from_corner(
    min_x: int, min_z: int, width: int, height: int, rotation: Rotation
) -> Tuple[int, int]:
    world_w, world_h = rotated_dimensions(width, height, rotation)
    return min_x + world_w // 2, min_z + world_h // 2


def corner_from_center(
    center_x: int, center_z: int, width: int, height: int, rotation: Rotation
) -> Tuple[int, int]:
    world_w, world_h = rotated_dimensions(width, height, rotation)
    return center_x - world_w // 2, center_z - world_h // 2


def spawn_position(
    min_x: int, min_z: int, world_w: int, world_h: int, rotation: Rotation
) -> Tuple[int, int]:
    """
    Spawn coordinate that makes a footprint occupy the given world rectangle.

    Args:
        min_x: Target rectangle minimum x
        min_z: Target rectangle minimum z
        world_w: Target width along world x
        world_h: Target height along world z
        rotation: Footprint rotation

    Returns:
        (center_x, center_z) to pass to the spawner
    """
    center_x = min_x + (world_w - 1) // 2
    center_z = min_z + (world_h - 1) // 2
    rotation = Rotation(rotation)
    even_w = world_w % 2 == 0
    even_h = world_h % 2 == 0

    if rotation == Rotation.EAST:
        if even_h:
            center_z += 1
    elif rotation == Rotation.SOUTH:
        if even_w:
            center_x += 1
        if even_h:
            center_z += 1
    elif rotation == Rotation.WEST:
        if even_w:
            center_x += 1

    return center_x, center_z


def centered_spawn_position(room: Rect, width: int, height: int, rotation: Rotation) -> Tuple[int, int]:
    """Spawn coordinate that centers a ``width x height`` footprint inside ``room``."""
    world_w, world_h = rotated_dimensions(width, height, rotation)
    target_min_x = room.min_x + (room.width - world_w) // 2
    target_min_z = room.min_z + (room.height - world_h) // 2
    return spawn_position(target_min_x, target_min_z, world_w, world_h, rotation)


def wall_cells(room: Rect, side: Side) -> List[Tuple[int, int]]:
    """Cells of one room wall in ascending coordinate order, corners included."""
    side = Side(side)
    if side == Side.NORTH:
        return [(x, room.max_z) for x in range(room.min_x, room.max_x + 1)]
    if side == Side.EAST:
        return [(room.max_x, z) for z in range(room.min_z, room.max_z + 1)]
    if side == Side.SOUTH:
        return [(x, room.min_z) for x in range(room.min_x, room.max_x + 1)]
    return [(room.min_x, z) for z in range(room.min_z, room.max_z + 1)]


def door_side(room: Rect, door: Door) -> Optional[Side]:
    """
    Which room wall a door sits on.

    A door on a room corner belongs to two walls and is reported as None.
    Doors off the perimeter also return None.
    """
    on_x_edge = door.x in (room.min_x, room.max_x)
    on_z_edge = door.z in (room.min_z, room.max_z)
    if on_x_edge and on_z_edge:
        return None
    if door.z == room.max_z and room.min_x <= door.x <= room.max_x:
        return Side.NORTH
    if door.x == room.max_x and room.min_z <= door.z <= room.max_z:
        return Side.EAST
    if door.z == room.min_z and room.min_x <= door.x <= room.max_x:
        return Side.SOUTH
    if door.x == room.min_x and room.min_z <= door.z <= room.max_z:
        return Side.WEST
    return None


def is_on_perimeter(room: Rect, door: Door) -> bool:
    if not room.contains(door.x, door.z):
        return False
    return door.x in (room.min_x, room.max_x) or door.z in (room.min_z, room.max_z)
