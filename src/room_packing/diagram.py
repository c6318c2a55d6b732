"""
Plain-text room diagrams for placement and packing results.

Rows are printed from the north wall down, one character per cell followed
by a space, with a ``z=`` label on the left.

Legend:
    ■  room boundary        D  door
    W  synthesized wall     C  spawn coordinate
    ↓←↑→ footprint, arrow points the way its front faces
    x  exclusion zone       ~  waste area
    .  open floor
"""

from typing import Dict, List, Optional, Sequence, Tuple

from room_packing.geometry import Door, Rect, Rotation, WallSegment

ROTATION_NAMES = {
    Rotation.NORTH: "North - front faces south ↓",
    Rotation.EAST: "East - front faces west ←",
    Rotation.SOUTH: "South - front faces north ↑",
    Rotation.WEST: "West - front faces east →",
}

Cell = Tuple[int, int]


def _render(
    room: Rect,
    layers: Sequence[Dict[Cell, str]],
    show_coordinates: bool = False,
    row_notes: Optional[Dict[int, str]] = None,
) -> str:
    """
    Render character layers over a room. Earlier layers win.
    """
    row_notes = row_notes or {}
    label_width = max(len(f"z={room.max_z}"), len(f"z={room.min_z}"))
    lines = []

    for z in range(room.max_z, room.min_z - 1, -1):
        cells = []
        for x in range(room.min_x, room.max_x + 1):
            char = None
            for layer in layers:
                char = layer.get((x, z))
                if char is not None:
                    break
            if char is None:
                on_boundary = x in (room.min_x, room.max_x) or z in (room.min_z, room.max_z)
                char = "■" if on_boundary else "."
            cells.append(char)

        line = f"z={z}".rjust(label_width) + "  " + " ".join(cells)
        if show_coordinates and z in row_notes:
            line += f"  ← {row_notes[z]}"
        lines.append(line.rstrip())

    if show_coordinates:
        labels = []
        for x in range(room.min_x, room.max_x + 1):
            if 0 <= x <= 9:
                labels.append(f"{x} ")
            elif x % 2 == 0:
                labels.append(f"{x:<2}")
            else:
                labels.append("  ")
        lines.append("x=".rjust(label_width + 2) + "".join(labels).rstrip())

    return "\n".join(lines)


def _door_layer(doors: Sequence[Door]) -> Dict[Cell, str]:
    return {(door.x, door.z): "D" for door in doors}


def _wall_layer(walls: Sequence[WallSegment]) -> Dict[Cell, str]:
    return {cell: "W" for wall in walls for cell in wall.cells()}


def _rect_layer(rects: Sequence[Tuple[Rect, str]]) -> Dict[Cell, str]:
    layer = {}
    for rect, char in rects:
        for cell in rect.cells():
            layer.setdefault(cell, char)
    return layer


def placement_diagram(room: Rect, result, doors: Sequence[Door] = (), show_coordinates: bool = False) -> str:
    """
    Diagram of a single footprint placement.

    Args:
        room: Room rectangle including boundary walls
        result: PlacementResult to draw
        doors: Door cells on the room perimeter
        show_coordinates: Add x labels and wall/center notes

    Returns:
        Multi-line diagram
    """
    layers = [_door_layer(doors), _wall_layer(result.walls)]
    notes = {room.max_z: "North wall", room.min_z: "South wall"}

    if result.is_valid:
        layers.append({(result.center_x, result.center_z): "C"})
        layers.append(_rect_layer([(result.bounds, result.rotation.arrow)]))
        notes.setdefault(result.center_z, "Footprint center")

    return _render(room, layers, show_coordinates, notes)


def packing_diagram(packing_input, result, show_coordinates: bool = False) -> str:
    """
    Diagram of a strip packing result.

    Exclusion zones are drawn only where nothing else occupies the cell.
    """
    room = packing_input.room

    footprint_rects = [(f.bounds, f.rotation.arrow) for f in result.footprints]
    waste_rects = [(w.bounds, "~") for w in result.waste_areas]
    exclusion_rects = [
        (Rect.from_bounds(region.min_x, strip.min_z, region.max_x, strip.max_z), "x")
        for strip in result.strips
        if strip.is_footprint_row
        for region in strip.regions
        if region.is_exclusion_zone
    ]

    layers = [
        _door_layer(packing_input.doors),
        _wall_layer(result.walls),
        _rect_layer(footprint_rects),
        _rect_layer(waste_rects),
        _rect_layer(exclusion_rects),
    ]

    notes = {}
    for strip in result.strips:
        if strip.is_footprint_row:
            notes[strip.max_z] = f"row {strip.min_z}-{strip.max_z} facing {strip.facing.name}"
        else:
            notes[strip.max_z] = f"corridor {strip.min_z}-{strip.max_z}"

    return _render(room, layers, show_coordinates, notes)


def wall_diagram(wall_length: int, doors: Sequence[Door], wall_z: int, wall_name: str = "North") -> str:
    """
    One horizontal wall as a strip of ``#`` with doors marked ``D``.

    Position markers are printed every 5 cells.
    """
    door_xs = {door.x for door in doors if door.z == wall_z}
    lines: List[str] = [
        f"{wall_name} wall (z={wall_z}): {wall_length} cells",
        "".join("D" if x in door_xs else "#" for x in range(wall_length)),
        "".join("|" if x % 5 == 0 else " " for x in range(wall_length)),
        "".join(str(x)[0] if x % 5 == 0 else " " for x in range(wall_length)),
    ]
    return "\n".join(lines)


def describe_placement(room: Rect, result) -> str:
    """Two-line human summary of a placement."""
    lines = [
        f"Room: {room.width}x{room.height} ({room.min_x},{room.min_z} to {room.max_x},{room.max_z})"
    ]
    if not result.is_valid:
        lines.append(f"Footprint: {result.size}x{result.size}, no valid placement")
    else:
        lines.append(
            f"Footprint: {result.size}x{result.size} {result.placement_type.value} at center "
            f"({result.center_x},{result.center_z}), rotation {int(result.rotation)} "
            f"({ROTATION_NAMES[result.rotation]})"
        )
    return "\n".join(lines)
