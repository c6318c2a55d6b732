"""
Input checks and result validation.

``check_*`` functions guard the public entry points and raise ValueError on
malformed input. ``validate_*`` functions inspect a computed result against
the layout rules, log every violation and return a bool.
"""

from typing import Iterable, List, Optional, Sequence, Tuple
import logging

import numpy as np

from room_packing.geometry import Door, Rect, Rotation, Side, door_side, is_on_perimeter

logger = logging.getLogger(__name__)

MIN_ROOM_SIZE = 3


def check_room_input(room: Rect, doors: Iterable[Door], footprint_size: Optional[int] = None):
    """
    Reject malformed room, door or footprint size input.

    Raises:
        ValueError: On a room smaller than 3x3, a door off the perimeter,
            or a footprint size that is not positive or exceeds the room
    """
    if room.width < MIN_ROOM_SIZE or room.height < MIN_ROOM_SIZE:
        raise ValueError(f"Room must be at least {MIN_ROOM_SIZE}x{MIN_ROOM_SIZE}, got {room.width}x{room.height}")

    for door in doors:
        if not is_on_perimeter(room, door):
            raise ValueError(f"Door ({door.x}, {door.z}) is not on the perimeter of {room}")

    if footprint_size is not None:
        if footprint_size <= 0:
            raise ValueError(f"Footprint size must be positive, got {footprint_size}")
        if footprint_size > min(room.width, room.height):
            raise ValueError(
                f"Footprint size {footprint_size} exceeds room {room.width}x{room.height}"
            )


def check_packing_input(packing_input):
    """
    Reject malformed strip packing input.

    Raises:
        ValueError: On a malformed room or door list, or an empty or
            non-positive allowed width/depth set
    """
    check_room_input(packing_input.room, packing_input.doors)

    for name, sizes in (
        ("widths", packing_input.allowed_widths),
        ("depths", packing_input.allowed_depths),
    ):
        if not sizes:
            raise ValueError(f"Allowed {name} must not be empty")
        if any(size <= 0 for size in sizes):
            raise ValueError(f"Allowed {name} must be positive, got {list(sizes)}")


def door_front_cell(room: Rect, door: Door):
    """Interior cell directly inside a door, or None for a corner door."""
    side = door_side(room, door)
    if side is None:
        return None
    if side == Side.NORTH:
        return door.x, door.z - 1
    if side == Side.EAST:
        return door.x - 1, door.z
    if side == Side.SOUTH:
        return door.x, door.z + 1
    return door.x + 1, door.z


def occupancy_grid(room: Rect, rects: Sequence[Rect]) -> np.ndarray:
    """Count of rectangles covering each room cell, indexed [z, x] relative to the room."""
    grid = np.zeros((room.height, room.width), dtype=np.int32)
    for rect in rects:
        x0 = max(rect.min_x, room.min_x) - room.min_x
        x1 = min(rect.max_x, room.max_x) - room.min_x + 1
        z0 = max(rect.min_z, room.min_z) - room.min_z
        z1 = min(rect.max_z, room.max_z) - room.min_z + 1
        if x0 < x1 and z0 < z1:
            grid[z0:z1, x0:x1] += 1
    return grid


def find_overlaps(rects: Sequence[Rect]) -> List[Tuple[int, int]]:
    """Index pairs of rectangles that share at least one cell."""
    return [
        (i, j)
        for i in range(len(rects))
        for j in range(i + 1, len(rects))
        if rects[i].overlaps(rects[j])
    ]


def _check_common(
    room: Rect, doors: Sequence[Door], rects: Sequence[Rect], walls, check_door_fronts: bool
) -> bool:
    valid = True
    interior = room.interior()

    for rect in rects:
        if not interior.contains_rect(rect):
            logger.error(f"Footprint {rect} leaves the room interior")
            valid = False

    for i, j in find_overlaps(rects):
        logger.error(f"Footprints overlap: {rects[i]} and {rects[j]}")
        valid = False

    grid = occupancy_grid(room, rects)
    wall_cells = set()
    for wall in walls:
        for x, z in wall.cells():
            wall_cells.add((x, z))
            if not interior.contains(x, z):
                logger.error(f"Wall {wall} leaves the room interior at ({x}, {z})")
                valid = False
            elif grid[z - room.min_z, x - room.min_x] > 0:
                logger.error(f"Wall {wall} runs through a footprint at ({x}, {z})")
                valid = False

    for door in doors:
        if any(rect.contains(door.x, door.z) for rect in rects):
            logger.error(f"Door ({door.x}, {door.z}) is covered by a footprint")
            valid = False
            continue
        front = door_front_cell(room, door)
        if not check_door_fronts or front is None:
            continue
        x, z = front
        if grid[z - room.min_z, x - room.min_x] > 0 or front in wall_cells:
            logger.error(f"Door ({door.x}, {door.z}) is blocked at ({x}, {z})")
            valid = False

    return valid


def validate_placement_result(result, room: Rect, doors: Sequence[Door]) -> bool:
    """
    Validate a single footprint placement.

    Args:
        result: PlacementResult to check
        room: Room rectangle including boundary walls
        doors: Door cells on the room perimeter

    Returns:
        True if valid (an INVALID placement is trivially valid), False otherwise
    """
    if not result.is_valid:
        if result.walls:
            logger.error("Invalid placement carries walls")
            return False
        return True

    valid = _check_common(room, list(doors), [result.bounds], result.walls, check_door_fronts=False)
    if valid:
        logger.debug(f"Placement validated: {result.placement_type.value} at ({result.center_x}, {result.center_z})")
    return valid


def validate_packing_result(result, packing_input, config=None) -> bool:
    """
    Validate a strip packing result.

    Args:
        result: PackingResult to check
        packing_input: The PackingInput it was computed from
        config: Optional PackingConfig for corridor minimums

    Returns:
        True if valid, False otherwise
    """
    room = packing_input.room
    rects = [footprint.bounds for footprint in result.footprints]
    valid = _check_common(room, list(packing_input.doors), rects, result.walls, check_door_fronts=True)

    allowed_widths = set(packing_input.allowed_widths)
    allowed_depths = set(packing_input.allowed_depths)
    for footprint in result.footprints:
        if footprint.width not in allowed_widths:
            logger.error(f"Footprint width {footprint.width} not in {sorted(allowed_widths)}")
            valid = False
        if footprint.depth not in allowed_depths:
            logger.error(f"Footprint depth {footprint.depth} not in {sorted(allowed_depths)}")
            valid = False

    rows = [strip for strip in result.strips if strip.is_footprint_row]
    for strip in rows:
        if strip.depth not in allowed_depths:
            logger.error(f"Row depth {strip.depth} not in {sorted(allowed_depths)}")
            valid = False
        is_middle = strip.min_z > room.min_z + 1 and strip.max_z < room.max_z - 1
        if is_middle and not any(region.is_exclusion_zone for region in strip.regions):
            logger.error(f"Middle row {strip.min_z}-{strip.max_z} has no exclusion zone")
            valid = False

    facing_min = config.min_corridor_facing if config else 1
    back_min = config.min_corridor_back if config else 2
    # strips run top to bottom: row above, corridor, row below
    for above, corridor, below in zip(result.strips, result.strips[1:], result.strips[2:]):
        if corridor.is_footprint_row or not (above.is_footprint_row and below.is_footprint_row):
            continue
        fronts_meet = below.facing == Rotation.SOUTH and above.facing == Rotation.NORTH
        required = facing_min if fronts_meet else back_min
        if corridor.depth < required:
            logger.error(f"Corridor {corridor.min_z}-{corridor.max_z} narrower than {required}")
            valid = False

    occupied = set(rects)
    for waste in result.waste_areas:
        if any(waste.bounds.overlaps(rect) for rect in occupied):
            logger.error(f"Waste area {waste.bounds} overlaps a footprint")
            valid = False
        if any(waste.bounds.contains(x, z) for wall in result.walls for x, z in wall.cells()):
            logger.error(f"Waste area {waste.bounds} overlaps a wall")
            valid = False

    if valid:
        logger.debug(f"Packing validated: {len(result.footprints)} footprints")
    return valid
