"""
Strip packing of many same-class footprints into one room.

The room interior is cut into horizontal strips: footprint rows separated by
corridors. Each row is partitioned into door exclusion zones and usable
regions, footprints are packed into the usable regions, and the walls that
close the packed rows are synthesized.

Pipeline:
    1. calculate_strips  - row/corridor layout along z
    2. calculate_regions - door exclusion zones along x, per row
    3. fit_footprints    - footprints and leftover waste, per usable region
    4. calculate_walls   - gap, enclosing and back walls
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional, Sequence, Tuple
import logging

from room_packing.geometry import Door, Rect, Rotation, WallSegment, spawn_position
from room_packing.utils.validation import check_packing_input

logger = logging.getLogger(__name__)


@dataclass
class PackingConfig:
    """Configuration for strip packing."""

    variant_prefix: str = "Subroom"
    ns_door_exclusion: int = 3  # door cell plus one each side
    ew_door_exclusion: int = 2  # corridor access plus footprint wall
    min_corridor_facing: int = 1  # fronts meet
    min_corridor_back: int = 2  # front meets back
    default_widths: List[int] = field(default_factory=lambda: [3, 4])
    default_depths: List[int] = field(default_factory=lambda: [4, 5])

    @classmethod
    def from_dict(cls, config: dict) -> "PackingConfig":
        """Create config from dictionary (loaded from YAML)."""
        packing = config.get("packing", config)
        exclusion = packing.get("exclusion", {})
        corridor = packing.get("corridor", {})
        sizes = packing.get("sizes", {})
        return cls(
            variant_prefix=packing.get("variant_prefix", "Subroom"),
            ns_door_exclusion=exclusion.get("north_south", 3),
            ew_door_exclusion=exclusion.get("east_west", 2),
            min_corridor_facing=corridor.get("facing", 1),
            min_corridor_back=corridor.get("back", 2),
            default_widths=list(sizes.get("widths", [3, 4])),
            default_depths=list(sizes.get("depths", [4, 5])),
        )


class StripType(Enum):
    FOOTPRINT_ROW = "footprint_row"
    CORRIDOR = "corridor"


@dataclass(frozen=True)
class Region:
    """Horizontal sub-range of a strip, inclusive."""

    min_x: int
    max_x: int
    is_exclusion_zone: bool = False

    @property
    def width(self) -> int:
        return self.max_x - self.min_x + 1

    def to_dict(self) -> dict:
        return {"min_x": self.min_x, "max_x": self.max_x, "exclusion": self.is_exclusion_zone}


@dataclass(frozen=True)
class Strip:
    """Horizontal slice of the room interior spanning its full width."""

    min_z: int
    max_z: int
    strip_type: StripType
    facing: Rotation = Rotation.NORTH  # meaningful for footprint rows only
    regions: Tuple[Region, ...] = ()

    @property
    def depth(self) -> int:
        return self.max_z - self.min_z + 1

    @property
    def is_footprint_row(self) -> bool:
        return self.strip_type == StripType.FOOTPRINT_ROW

    def to_dict(self) -> dict:
        data = {
            "min_z": self.min_z,
            "max_z": self.max_z,
            "type": self.strip_type.value,
        }
        if self.is_footprint_row:
            data["facing"] = self.facing.name.lower()
            data["regions"] = [region.to_dict() for region in self.regions]
        return data


@dataclass(frozen=True)
class FootprintInstance:
    """One packed footprint. Rows only use NORTH/SOUTH, so local axes are world axes."""

    min_x: int
    min_z: int
    width: int
    depth: int
    rotation: Rotation
    variant: str

    @property
    def max_x(self) -> int:
        return self.min_x + self.width - 1

    @property
    def bounds(self) -> Rect:
        return Rect(self.min_x, self.min_z, self.width, self.depth)

    @property
    def center(self) -> Tuple[int, int]:
        """Spawn coordinate for this footprint."""
        return spawn_position(self.min_x, self.min_z, self.width, self.depth, self.rotation)

    def to_dict(self) -> dict:
        center_x, center_z = self.center
        return {
            "variant": self.variant,
            "bounds": self.bounds.to_dict(),
            "rotation": self.rotation.name.lower(),
            "center_x": center_x,
            "center_z": center_z,
        }


@dataclass(frozen=True)
class WasteArea:
    """
    Leftover cells beside an exclusion zone, too narrow for a footprint.

    Filler content faces east by default. Rotation is NORTH when the
    exclusion zone is to the right and SOUTH when it is to the left.
    """

    min_x: int
    min_z: int
    width: int
    depth: int
    rotation: Rotation

    @property
    def bounds(self) -> Rect:
        return Rect(self.min_x, self.min_z, self.width, self.depth)

    @property
    def center(self) -> Tuple[int, int]:
        return spawn_position(self.min_x, self.min_z, self.width, self.depth, self.rotation)

    def to_dict(self) -> dict:
        center_x, center_z = self.center
        return {
            "bounds": self.bounds.to_dict(),
            "rotation": self.rotation.name.lower(),
            "center_x": center_x,
            "center_z": center_z,
        }


@dataclass(frozen=True)
class PackingInput:
    """Room, doors and the allowed footprint sizes."""

    room: Rect
    doors: Tuple[Door, ...]
    allowed_widths: Tuple[int, ...]
    allowed_depths: Tuple[int, ...]

    @classmethod
    def create(
        cls,
        room: Rect,
        doors: Sequence[Door],
        allowed_widths: Sequence[int],
        allowed_depths: Sequence[int],
    ) -> "PackingInput":
        return cls(room, tuple(doors), tuple(allowed_widths), tuple(allowed_depths))


@dataclass(frozen=True)
class PackingResult:
    """Strips top to bottom, packed footprints, synthesized walls and waste areas."""

    strips: Tuple[Strip, ...] = ()
    footprints: Tuple[FootprintInstance, ...] = ()
    walls: Tuple[WallSegment, ...] = ()
    waste_areas: Tuple[WasteArea, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.strips

    def to_dict(self) -> dict:
        return {
            "strips": [strip.to_dict() for strip in self.strips],
            "footprints": [footprint.to_dict() for footprint in self.footprints],
            "walls": [wall.to_dict() for wall in self.walls],
            "waste_areas": [waste.to_dict() for waste in self.waste_areas],
        }


@dataclass(frozen=True)
class RegionFit:
    """Footprints packed into one region and the leftover waste, if any."""

    footprints: Tuple[FootprintInstance, ...]
    waste_min_x: int = 0
    waste_width: int = 0
    waste_on_left: bool = False

    @property
    def has_waste(self) -> bool:
        return self.waste_width > 0


@dataclass
class _LayoutItem:
    is_row: bool
    depth: int
    facing: Rotation = Rotation.NORTH


def largest_allowed(allowed: Sequence[int], limit: int) -> Optional[int]:
    """Largest allowed size not above ``limit``."""
    fitting = [size for size in allowed if size <= limit]
    return max(fitting) if fitting else None


def next_allowed(allowed: Sequence[int], size: int) -> Optional[int]:
    """Smallest allowed size strictly above ``size``."""
    larger = [candidate for candidate in allowed if candidate > size]
    return min(larger) if larger else None


def merge_ranges(ranges: Sequence[Tuple[int, int]]) -> List[Tuple[int, int]]:
    """Merge overlapping or adjacent inclusive ranges; input must be sorted by start."""
    merged: List[Tuple[int, int]] = []
    for lo, hi in ranges:
        if merged and lo <= merged[-1][1] + 1:
            merged[-1] = (merged[-1][0], max(merged[-1][1], hi))
        else:
            merged.append((lo, hi))
    return merged


class StripPackingPlanner:
    """
    Pack rows of footprints into a room, leaving corridors and door access.
    """

    def __init__(self, config: Optional[PackingConfig] = None):
        self.config = config or PackingConfig()

    def pack(self, packing_input: PackingInput) -> PackingResult:
        """
        Compute the full packing for a room.

        Args:
            packing_input: Room, doors and allowed sizes

        Returns:
            Packing result; empty when not even one row fits

        Raises:
            ValueError: If the input is malformed
        """
        check_packing_input(packing_input)
        room = packing_input.room

        strips = self.calculate_strips(packing_input)
        if not strips:
            logger.debug(f"No footprint row fits in {room}")
            return PackingResult()

        strips = [
            replace(strip, regions=tuple(self.calculate_regions(strip, room, packing_input.doors)))
            if strip.is_footprint_row
            else strip
            for strip in strips
        ]

        footprints: List[FootprintInstance] = []
        waste_areas: List[WasteArea] = []

        for strip in strips:
            if not strip.is_footprint_row:
                continue
            for index, region in enumerate(strip.regions):
                if region.is_exclusion_zone:
                    continue
                fit = self.fit_footprints_with_waste(region, strip, packing_input.allowed_widths, room)
                footprints.extend(fit.footprints)

                waste = self._waste_area(fit, strip, index)
                if waste is not None:
                    waste_areas.append(waste)

        walls = self.calculate_walls(footprints, strips, room)

        logger.debug(
            f"Packed {len(footprints)} footprints in {sum(s.is_footprint_row for s in strips)} rows, "
            f"{len(walls)} walls, {len(waste_areas)} waste areas"
        )

        return PackingResult(tuple(strips), tuple(footprints), tuple(walls), tuple(waste_areas))

    # ------------------------------------------------------------------
    # Step 1: strips
    # ------------------------------------------------------------------

    def calculate_strips(self, packing_input: PackingInput) -> List[Strip]:
        """
        Lay out footprint rows and corridors along z.

        Rows are stacked from the south interior edge. The bottom row faces
        SOUTH (front toward north) and every other row faces NORTH (front
        toward south). Leftover height that rows and the minimum corridors do
        not absorb is spread over the corridors, so the outer rows stay flush
        with both room boundaries.

        Returns:
            Strips ordered top (north) to bottom (south); empty if no row fits
        """
        room = packing_input.room
        interior_min_z = room.min_z + 1
        available = room.height - 2
        depths = sorted(set(packing_input.allowed_depths))

        layout = self._best_layout(available, depths)
        if not layout:
            return []

        leftover = available - sum(item.depth for item in layout)
        corridors = [item for item in layout if not item.is_row]
        if leftover > 0 and corridors:
            per_corridor, extra = divmod(leftover, len(corridors))
            for i, item in enumerate(corridors):
                item.depth += per_corridor + (1 if i < extra else 0)

        strips = []
        z = interior_min_z
        for item in layout:
            strips.append(
                Strip(
                    min_z=z,
                    max_z=z + item.depth - 1,
                    strip_type=StripType.FOOTPRINT_ROW if item.is_row else StripType.CORRIDOR,
                    facing=item.facing,
                )
            )
            z += item.depth

        strips.reverse()
        return strips

    def _best_layout(self, available: int, depths: List[int]) -> Optional[List[_LayoutItem]]:
        for rows in range(available // depths[0], 0, -1):
            layout = self._try_layout(rows, available, depths)
            if layout is not None:
                logger.debug(f"Strip layout: {rows} rows in {available} cells")
                return layout
        return None

    def _try_layout(self, rows: int, available: int, depths: List[int]) -> Optional[List[_LayoutItem]]:
        min_depth, max_depth = depths[0], depths[-1]

        if rows == 1:
            depth = largest_allowed(depths, min(max_depth, available))
            if depth is None:
                return None
            return [_LayoutItem(True, depth, Rotation.SOUTH)]

        facings = [Rotation.SOUTH] + [Rotation.NORTH] * (rows - 1)
        corridor_widths = [
            self.config.min_corridor_facing
            if below == Rotation.SOUTH and above == Rotation.NORTH
            else self.config.min_corridor_back
            for below, above in zip(facings, facings[1:])
        ]

        row_space = available - sum(corridor_widths)
        if row_space < rows * min_depth:
            return None

        base_depth = largest_allowed(depths, min(row_space // rows, max_depth))
        if base_depth is None:
            return None

        layout: List[_LayoutItem] = []
        for i, facing in enumerate(facings):
            layout.append(_LayoutItem(True, base_depth, facing))
            if i < rows - 1:
                layout.append(_LayoutItem(False, corridor_widths[i]))

        remaining = available - sum(item.depth for item in layout)

        # Grow rows first, one allowed step at a time, cycling
        grown = True
        while remaining > 0 and grown:
            grown = False
            for item in layout:
                if not item.is_row:
                    continue
                step_to = next_allowed(depths, item.depth)
                if step_to is not None and step_to - item.depth <= remaining:
                    remaining -= step_to - item.depth
                    item.depth = step_to
                    grown = True
                if remaining == 0:
                    break

        # Then one cell per corridor
        for item in layout:
            if remaining == 0:
                break
            if not item.is_row:
                item.depth += 1
                remaining -= 1

        return layout

    # ------------------------------------------------------------------
    # Step 2: regions
    # ------------------------------------------------------------------

    def calculate_regions(self, strip: Strip, room: Rect, doors: Sequence[Door]) -> List[Region]:
        """
        Partition a footprint row into usable regions and door exclusion zones.

        Args:
            strip: Footprint row
            room: Room rectangle including boundary walls
            doors: Door cells on the room perimeter

        Returns:
            Regions ordered west to east
        """
        interior_min_x = room.min_x + 1
        interior_max_x = room.max_x - 1
        ew_width = self.config.ew_door_exclusion
        half_ns = self.config.ns_door_exclusion // 2

        exclusions = []
        for door in doors:
            if door.z == room.max_z and strip.max_z == room.max_z - 1:
                lo, hi = door.x - half_ns, door.x + half_ns
            elif door.z == room.min_z and strip.min_z == room.min_z + 1:
                lo, hi = door.x - half_ns, door.x + half_ns
            elif door.x == room.min_x and self._side_door_affects(strip, room, door):
                lo, hi = interior_min_x, interior_min_x + ew_width - 1
            elif door.x == room.max_x and self._side_door_affects(strip, room, door):
                lo, hi = interior_max_x - ew_width + 1, interior_max_x
            else:
                continue
            exclusions.append((max(lo, interior_min_x), min(hi, interior_max_x)))

        regions = []
        x = interior_min_x
        for lo, hi in merge_ranges(sorted(exclusions)):
            if x < lo:
                regions.append(Region(x, lo - 1))
            regions.append(Region(lo, hi, is_exclusion_zone=True))
            x = hi + 1
        if x <= interior_max_x:
            regions.append(Region(x, interior_max_x))

        is_middle = strip.min_z > room.min_z + 1 and strip.max_z < room.max_z - 1
        if is_middle and not any(region.is_exclusion_zone for region in regions):
            # Keep the corridors on both sides of this row connected
            exclusion_max_x = interior_min_x + ew_width - 1
            regions = [Region(interior_min_x, exclusion_max_x, is_exclusion_zone=True)]
            if exclusion_max_x < interior_max_x:
                regions.append(Region(exclusion_max_x + 1, interior_max_x))

        return regions

    @staticmethod
    def _side_door_affects(strip: Strip, room: Rect, door: Door) -> bool:
        """A west/east door constrains a row it opens onto or one whose back wall it faces."""
        if strip.min_z <= door.z <= strip.max_z:
            return True
        if strip.facing == Rotation.NORTH and strip.max_z < room.max_z - 1:
            return door.z == strip.max_z + 1
        if strip.facing == Rotation.SOUTH and strip.min_z > room.min_z + 1:
            return door.z == strip.min_z - 1
        return False

    # ------------------------------------------------------------------
    # Step 3: footprints
    # ------------------------------------------------------------------

    def fit_footprints(
        self, region: Region, strip: Strip, allowed_widths: Sequence[int], room: Rect
    ) -> List[FootprintInstance]:
        """Footprints packed into one usable region."""
        return list(self.fit_footprints_with_waste(region, strip, allowed_widths, room).footprints)

    def fit_footprints_with_waste(
        self, region: Region, strip: Strip, allowed_widths: Sequence[int], room: Rect
    ) -> RegionFit:
        """
        Pack as many footprints as fit, then widen them to absorb leftover.

        Footprints are anchored at whichever end of the region is nearer
        to a room boundary; leftover waste ends up on the other side. Waste
        excludes the enclosing wall cell next to the footprints.

        Args:
            region: Usable region
            strip: Footprint row the region belongs to
            allowed_widths: Allowed footprint widths
            room: Room rectangle including boundary walls

        Returns:
            Packed footprints and leftover waste
        """
        widths = sorted(set(allowed_widths))
        min_width = widths[0]
        region_width = region.width

        count = max((region_width + 1) // (min_width + 1), 1)
        while count > 0 and count * min_width + count - 1 > region_width:
            count -= 1

        if count == 0:
            # Whole region is waste, reported on the left by convention
            return RegionFit((), region.min_x, region_width, waste_on_left=True)

        sizes = [min_width] * count
        leftover = region_width - (count * min_width + count - 1)

        # Index 0 is the footprint nearest the room boundary in both directions
        grown = True
        while leftover > 0 and grown:
            grown = False
            for i in range(count):
                step_to = next_allowed(widths, sizes[i])
                if step_to is not None and step_to - sizes[i] <= leftover:
                    leftover -= step_to - sizes[i]
                    sizes[i] = step_to
                    grown = True
                if leftover == 0:
                    break

        dist_west = region.min_x - (room.min_x + 1)
        dist_east = (room.max_x - 1) - region.max_x
        left_to_right = dist_west <= dist_east

        footprints = []
        if left_to_right:
            x = region.min_x
            for width in sizes:
                footprints.append(self._footprint(x, strip, width))
                x += width + 1
            waste_min_x = x
        else:
            x = region.max_x
            for width in sizes:
                footprints.append(self._footprint(x - width + 1, strip, width))
                x -= width + 1
            waste_min_x = region.min_x

        # One leftover cell goes to the enclosing wall beside the footprints
        waste_width = leftover - 1 if leftover > 0 else 0
        if waste_width <= 0:
            return RegionFit(tuple(footprints))
        return RegionFit(tuple(footprints), waste_min_x, waste_width, waste_on_left=not left_to_right)

    def _footprint(self, min_x: int, strip: Strip, width: int) -> FootprintInstance:
        return FootprintInstance(
            min_x=min_x,
            min_z=strip.min_z,
            width=width,
            depth=strip.depth,
            rotation=strip.facing,
            variant=self.variant_name(width, strip.depth),
        )

    def variant_name(self, width: int, depth: int) -> str:
        return f"{self.config.variant_prefix}{width}x{depth}"

    @staticmethod
    def _waste_area(fit: RegionFit, strip: Strip, index: int) -> Optional[WasteArea]:
        if not fit.has_waste:
            return None

        regions = strip.regions
        if fit.waste_on_left:
            if index > 0 and regions[index - 1].is_exclusion_zone:
                rotation = Rotation.SOUTH
            else:
                return None
        else:
            if index < len(regions) - 1 and regions[index + 1].is_exclusion_zone:
                rotation = Rotation.NORTH
            else:
                return None

        return WasteArea(fit.waste_min_x, strip.min_z, fit.waste_width, strip.depth, rotation)

    # ------------------------------------------------------------------
    # Step 4: walls
    # ------------------------------------------------------------------

    def calculate_walls(
        self, footprints: Sequence[FootprintInstance], strips: Sequence[Strip], room: Rect
    ) -> List[WallSegment]:
        """
        Walls that close every packed row.

        Gap walls separate neighbours, enclosing walls close a region's ends
        unless flush with a room wall, and a back wall closes a row whose
        back does not rest against a room wall.
        """
        walls: List[WallSegment] = []

        for strip in strips:
            if not strip.is_footprint_row:
                continue

            row = sorted((f for f in footprints if f.min_z == strip.min_z), key=lambda f: f.min_x)
            if not row:
                continue

            groups = []
            for region in strip.regions:
                if region.is_exclusion_zone:
                    continue
                group = [f for f in row if f.min_x >= region.min_x and f.max_x <= region.max_x]
                if group:
                    groups.append(group)

            for group in groups:
                first, last = group[0], group[-1]
                if first.min_x > room.min_x + 1:
                    walls.append(WallSegment(first.min_x - 1, strip.min_z, first.min_x - 1, strip.max_z))
                for footprint in group[:-1]:
                    gap_x = footprint.max_x + 1
                    walls.append(WallSegment(gap_x, strip.min_z, gap_x, strip.max_z))
                if last.max_x < room.max_x - 1:
                    walls.append(WallSegment(last.max_x + 1, strip.min_z, last.max_x + 1, strip.max_z))

            back_z = self._back_wall_z(strip, room)
            if back_z is None:
                continue

            for group in groups:
                first, last = group[0], group[-1]
                start_x = first.min_x - 1 if first.min_x > room.min_x + 1 else first.min_x
                end_x = last.max_x + 1 if last.max_x < room.max_x - 1 else last.max_x
                walls.append(WallSegment(start_x, back_z, end_x, back_z))

        return walls

    @staticmethod
    def _back_wall_z(strip: Strip, room: Rect) -> Optional[int]:
        """z of the wall closing a row's back, or None when a room wall does it."""
        if strip.facing == Rotation.NORTH and strip.max_z < room.max_z - 1:
            return strip.max_z + 1
        if strip.facing == Rotation.SOUTH and strip.min_z > room.min_z + 1:
            return strip.min_z - 1
        return None


def pack(packing_input: PackingInput, config: Optional[PackingConfig] = None) -> PackingResult:
    """Convenience wrapper around ``StripPackingPlanner.pack``."""
    return StripPackingPlanner(config).pack(packing_input)
