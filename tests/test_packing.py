"""Tests for strip packing."""

import pytest

from room_packing.geometry import Door, Rect, Rotation, WallSegment
from room_packing.packing import (
    PackingConfig,
    PackingInput,
    Region,
    Strip,
    StripPackingPlanner,
    StripType,
    WasteArea,
    merge_ranges,
    pack,
)
from room_packing.utils.validation import validate_packing_result

ROOM = Rect(0, 0, 20, 17)
DOORS = (Door(0, 2), Door(10, 0), Door(7, 16), Door(19, 8))


@pytest.fixture
def planner():
    return StripPackingPlanner()


@pytest.fixture
def crew_input():
    return PackingInput.create(ROOM, DOORS, [3, 4], [4, 5])


def row(min_z, max_z, facing):
    return Strip(min_z, max_z, StripType.FOOTPRINT_ROW, facing)


class TestStrips:
    def test_crew_quarters_layout(self, planner, crew_input):
        strips = planner.calculate_strips(crew_input)
        summary = [(s.min_z, s.max_z, s.strip_type, s.facing) for s in strips if s.is_footprint_row]
        assert summary == [
            (12, 15, StripType.FOOTPRINT_ROW, Rotation.NORTH),
            (6, 9, StripType.FOOTPRINT_ROW, Rotation.NORTH),
            (1, 4, StripType.FOOTPRINT_ROW, Rotation.SOUTH),
        ]
        corridors = [(s.min_z, s.max_z) for s in strips if not s.is_footprint_row]
        assert corridors == [(10, 11), (5, 5)]

    def test_interior_height_17(self, planner):
        room = Rect(0, 0, 16, 19)
        strips = planner.calculate_strips(PackingInput.create(room, [Door(0, 9), Door(15, 9)], [3, 4], [4, 5]))
        depths_bottom_up = [s.depth for s in reversed(strips)]
        assert depths_bottom_up == [5, 1, 5, 2, 4]
        assert strips[0].max_z == room.max_z - 1
        assert strips[-1].min_z == room.min_z + 1

    def test_single_row_sits_on_south_wall(self, planner):
        strips = planner.calculate_strips(PackingInput.create(Rect(0, 0, 10, 8), [], [3], [4, 5]))
        assert len(strips) == 1
        assert (strips[0].min_z, strips[0].max_z) == (1, 5)
        assert strips[0].facing == Rotation.SOUTH

    def test_two_rows_face_each_other(self, planner):
        strips = planner.calculate_strips(PackingInput.create(Rect(0, 0, 10, 12), [], [3], [4, 5]))
        assert [(s.min_z, s.max_z) for s in strips] == [(7, 10), (6, 6), (1, 5)]
        assert strips[0].facing == Rotation.NORTH
        assert strips[2].facing == Rotation.SOUTH

    def test_depths_stay_in_allowed_set(self, planner):
        strips = planner.calculate_strips(PackingInput.create(Rect(0, 0, 16, 19), [], [3], [4, 6]))
        assert all(s.depth in (4, 6) for s in strips if s.is_footprint_row)
        assert sum(s.depth for s in strips) == 17

    def test_leftover_spreads_over_corridors(self, planner):
        """Rows at the largest depth push the remaining height into the corridors."""
        strips = planner.calculate_strips(PackingInput.create(Rect(0, 0, 10, 21), [], [3], [4]))
        assert [s.depth for s in reversed(strips)] == [4, 3, 4, 4, 4]
        assert strips[0].max_z == 19 and strips[-1].min_z == 1

    def test_room_too_shallow(self, planner):
        assert planner.calculate_strips(PackingInput.create(Rect(0, 0, 10, 5), [], [3], [4])) == []


class TestRegions:
    def test_top_row(self, planner):
        regions = planner.calculate_regions(row(12, 15, Rotation.NORTH), ROOM, DOORS)
        assert regions == [Region(1, 5), Region(6, 8, True), Region(9, 18)]

    def test_middle_row(self, planner):
        regions = planner.calculate_regions(row(6, 9, Rotation.NORTH), ROOM, DOORS)
        assert regions == [Region(1, 16), Region(17, 18, True)]

    def test_bottom_row(self, planner):
        regions = planner.calculate_regions(row(1, 4, Rotation.SOUTH), ROOM, DOORS)
        assert regions == [Region(1, 2, True), Region(3, 8), Region(9, 11, True), Region(12, 18)]

    def test_middle_row_without_doors_gets_exclusion(self, planner):
        regions = planner.calculate_regions(row(6, 9, Rotation.NORTH), ROOM, [])
        assert regions[0] == Region(1, 2, True)
        assert regions[1] == Region(3, 18)

    def test_side_door_at_back_wall(self, planner):
        """A west door facing a middle row's back wall still constrains it."""
        regions = planner.calculate_regions(row(6, 9, Rotation.NORTH), ROOM, [Door(0, 10)])
        assert regions == [Region(1, 2, True), Region(3, 18)]
        regions = planner.calculate_regions(row(12, 15, Rotation.NORTH), ROOM, [Door(0, 11)])
        assert regions == [Region(1, 18)]

    def test_adjacent_exclusions_merge(self, planner):
        regions = planner.calculate_regions(row(12, 15, Rotation.NORTH), ROOM, [Door(5, 16), Door(8, 16)])
        assert regions == [Region(1, 3), Region(4, 9, True), Region(10, 18)]

    def test_exclusion_clamped_to_interior(self, planner):
        regions = planner.calculate_regions(row(12, 15, Rotation.NORTH), ROOM, [Door(1, 16)])
        assert regions == [Region(1, 2, True), Region(3, 18)]

    def test_merge_ranges(self):
        assert merge_ranges([(1, 2), (3, 4), (6, 8), (7, 9)]) == [(1, 4), (6, 9)]
        assert merge_ranges([]) == []


class TestFitting:
    STRIP = Strip(1, 4, StripType.FOOTPRINT_ROW, Rotation.SOUTH)

    def widths(self, planner, region, allowed=(3, 4)):
        return [f.width for f in planner.fit_footprints(region, self.STRIP, allowed, ROOM)]

    def test_five_cells(self, planner):
        assert self.widths(planner, Region(1, 5)) == [4]

    def test_six_cells(self, planner):
        assert self.widths(planner, Region(3, 8)) == [4]

    def test_ten_cells(self, planner):
        assert self.widths(planner, Region(9, 18)) == [4, 4]

    def test_thirteen_cells(self, planner):
        """Three minimum footprints plus two gaps leave two cells to widen into."""
        footprints = planner.fit_footprints(Region(1, 13), self.STRIP, [3, 4], ROOM)
        assert len(footprints) == 3
        assert sorted(f.width for f in footprints) == [3, 4, 4]
        assert [f.min_x for f in footprints] == [1, 6, 11]

    @pytest.mark.parametrize("width", range(3, 19))
    def test_count_is_maximal(self, planner, width):
        footprints = planner.fit_footprints(Region(1, width), self.STRIP, [3, 4], ROOM)
        assert len(footprints) == (width + 1) // 4

    def test_right_to_left_near_east_wall(self, planner):
        fit = planner.fit_footprints_with_waste(Region(10, 18), self.STRIP, [3], ROOM)
        assert [f.min_x for f in fit.footprints] == [16, 12]
        assert (fit.waste_min_x, fit.waste_width, fit.waste_on_left) == (10, 1, True)

    def test_left_to_right_waste_skips_wall(self, planner):
        fit = planner.fit_footprints_with_waste(Region(3, 8), self.STRIP, [3, 4], ROOM)
        assert [f.min_x for f in fit.footprints] == [3]
        assert (fit.waste_min_x, fit.waste_width, fit.waste_on_left) == (8, 1, False)

    def test_region_too_small_is_all_waste(self, planner):
        fit = planner.fit_footprints_with_waste(Region(1, 2), self.STRIP, [3, 4], ROOM)
        assert fit.footprints == ()
        assert (fit.waste_min_x, fit.waste_width, fit.waste_on_left) == (1, 2, True)

    def test_variant_names(self, planner):
        footprints = planner.fit_footprints(Region(1, 5), self.STRIP, [3, 4], ROOM)
        assert footprints[0].variant == "Subroom4x4"
        custom = StripPackingPlanner(PackingConfig(variant_prefix="Bunk"))
        assert custom.fit_footprints(Region(1, 5), self.STRIP, [3, 4], ROOM)[0].variant == "Bunk4x4"

    def test_footprint_spawn_centers(self, planner):
        south = planner.fit_footprints(Region(1, 5), self.STRIP, [3, 4], ROOM)[0]
        assert south.center == (1 + 4 // 2, 1 + 4 // 2)
        north_strip = Strip(12, 15, StripType.FOOTPRINT_ROW, Rotation.NORTH)
        north = planner.fit_footprints(Region(1, 3), north_strip, [3], ROOM)[0]
        assert north.center == (1 + (3 - 1) // 2, 12 + (4 - 1) // 2)


class TestPack:
    def test_crew_quarters(self, crew_input):
        result = pack(crew_input)
        by_row = {}
        for f in result.footprints:
            by_row.setdefault(f.min_z, []).append((f.min_x, f.width))
        assert sorted(by_row[12]) == [(1, 4), (10, 4), (15, 4)]
        assert sorted(by_row[6]) == [(1, 4), (6, 3), (10, 3), (14, 3)]
        assert sorted(by_row[1]) == [(3, 4), (12, 3), (16, 3)]
        assert all(f.depth == 4 for f in result.footprints)

    def test_crew_quarters_walls(self, crew_input):
        walls = set(pack(crew_input).walls)
        assert walls == {
            # top row
            WallSegment(5, 12, 5, 15),
            WallSegment(9, 12, 9, 15),
            WallSegment(14, 12, 14, 15),
            # middle row and its back wall
            WallSegment(5, 6, 5, 9),
            WallSegment(9, 6, 9, 9),
            WallSegment(13, 6, 13, 9),
            WallSegment(17, 6, 17, 9),
            WallSegment(1, 10, 17, 10),
            # bottom row
            WallSegment(2, 1, 2, 4),
            WallSegment(7, 1, 7, 4),
            WallSegment(11, 1, 11, 4),
            WallSegment(15, 1, 15, 4),
        }

    def test_crew_quarters_waste(self, crew_input):
        assert pack(crew_input).waste_areas == (WasteArea(8, 1, 1, 4, Rotation.NORTH),)

    def test_waste_left_of_footprints_faces_south(self):
        room = Rect(0, 0, 20, 7)
        result = pack(PackingInput.create(room, [Door(8, 0)], [3], [5]))
        assert WasteArea(10, 1, 1, 5, Rotation.SOUTH) in result.waste_areas

    def test_crew_quarters_validates(self, crew_input):
        assert validate_packing_result(pack(crew_input), crew_input)

    @pytest.mark.parametrize(
        "room, doors, widths, depths",
        [
            (Rect(0, 0, 16, 19), [Door(0, 9), Door(15, 9)], [3, 4], [4, 5]),
            (Rect(0, 0, 25, 25), [Door(12, 24), Door(12, 0), Door(0, 12), Door(24, 12)], [3, 4], [4, 5]),
            (Rect(0, 0, 12, 30), [Door(0, 3), Door(11, 20)], [3], [4]),
            (Rect(5, 5, 18, 14), [Door(5, 10), Door(14, 18)], [4, 5], [4, 6]),
            (Rect(0, 0, 20, 17), [], [3, 4], [4, 5]),
        ],
    )
    def test_layouts_validate(self, room, doors, widths, depths):
        packing_input = PackingInput.create(room, doors, widths, depths)
        assert validate_packing_result(pack(packing_input), packing_input)

    def test_deterministic(self, crew_input):
        reordered = PackingInput.create(ROOM, list(reversed(DOORS)), [4, 3], [5, 4])
        assert pack(crew_input) == pack(reordered)

    def test_middle_rows_keep_an_exclusion(self):
        result = pack(PackingInput.create(Rect(0, 0, 14, 30), [], [3], [4]))
        room = Rect(0, 0, 14, 30)
        middle = [
            s for s in result.strips
            if s.is_footprint_row and s.min_z > room.min_z + 1 and s.max_z < room.max_z - 1
        ]
        assert middle
        assert all(any(r.is_exclusion_zone for r in s.regions) for s in middle)

    def test_empty_when_nothing_fits(self):
        result = pack(PackingInput.create(Rect(0, 0, 10, 5), [], [3], [4]))
        assert result.is_empty
        assert result.footprints == () and result.walls == () and result.waste_areas == ()

    def test_to_dict(self, crew_input):
        data = pack(crew_input).to_dict()
        assert len(data["strips"]) == 5
        assert data["strips"][1] == {"min_z": 10, "max_z": 11, "type": "corridor"}
        assert data["footprints"][0]["variant"] == "Subroom4x4"


class TestInputChecks:
    @pytest.mark.parametrize(
        "widths, depths",
        [([], [4]), ([3], []), ([0, 3], [4]), ([3], [-4])],
    )
    def test_bad_sizes(self, widths, depths):
        with pytest.raises(ValueError):
            pack(PackingInput.create(ROOM, [], widths, depths))

    def test_door_off_perimeter(self):
        with pytest.raises(ValueError, match="perimeter"):
            pack(PackingInput.create(ROOM, [Door(5, 5)], [3], [4]))

    def test_config_from_dict(self):
        config = PackingConfig.from_dict(
            {"packing": {"variant_prefix": "Bunk", "corridor": {"back": 3}, "sizes": {"widths": [2]}}}
        )
        assert config.variant_prefix == "Bunk"
        assert config.min_corridor_back == 3
        assert config.min_corridor_facing == 1
        assert config.default_widths == [2]
        assert config.default_depths == [4, 5]
