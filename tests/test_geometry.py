"""Tests for grid geometry primitives."""

import pytest

from room_packing.geometry import (
    Door,
    Rect,
    Rotation,
    Side,
    WallSegment,
    bounds_from_center,
    bounds_non_square,
    center_from_corner,
    center_offset,
    centered_spawn_position,
    corner_from_center,
    door_side,
    is_on_perimeter,
    rotated_dimensions,
    spawn_position,
    wall_cells,
)


class TestRect:
    def test_derived_bounds(self):
        rect = Rect(2, 3, 4, 5)
        assert rect.max_x == 5
        assert rect.max_z == 7

    def test_interior(self):
        assert Rect(0, 0, 13, 11).interior() == Rect(1, 1, 11, 9)

    def test_overlaps_shares_cell(self):
        assert Rect(0, 0, 3, 3).overlaps(Rect(2, 2, 3, 3))
        assert not Rect(0, 0, 3, 3).overlaps(Rect(3, 0, 3, 3))

    def test_contains_rect(self):
        room = Rect(0, 0, 10, 10)
        assert room.interior().contains_rect(Rect(1, 1, 8, 8))
        assert not room.interior().contains_rect(Rect(0, 1, 8, 8))

    def test_from_bounds(self):
        assert Rect.from_bounds(1, 2, 4, 6) == Rect(1, 2, 4, 5)

    def test_cells_count(self):
        assert len(list(Rect(0, 0, 3, 2).cells())) == 6


class TestWallSegment:
    def test_vertical_cells_either_direction(self):
        down = WallSegment(2, 9, 2, 4)
        up = WallSegment(2, 4, 2, 9)
        assert down.is_vertical
        assert list(down.cells()) == list(up.cells())
        assert down.length == 6

    def test_horizontal_cells(self):
        wall = WallSegment(6, 8, 11, 8)
        assert wall.is_horizontal
        assert list(wall.cells())[0] == (6, 8)
        assert list(wall.cells())[-1] == (11, 8)


class TestBoundsFromCenter:
    def test_center_offset(self):
        assert center_offset(6) == 1
        assert center_offset(5) == 0

    @pytest.mark.parametrize(
        "rotation, expected_min",
        [
            (Rotation.NORTH, (3, 3)),
            (Rotation.EAST, (3, 2)),
            (Rotation.SOUTH, (2, 2)),
            (Rotation.WEST, (2, 3)),
        ],
    )
    def test_even_size_correction(self, rotation, expected_min):
        """Even sizes shift differently per rotation."""
        bounds = bounds_from_center(5, 5, 6, rotation)
        assert (bounds.min_x, bounds.min_z) == expected_min
        assert (bounds.width, bounds.height) == (6, 6)

    @pytest.mark.parametrize("rotation", list(Rotation))
    def test_odd_size_is_symmetric(self, rotation):
        bounds = bounds_from_center(5, 5, 5, rotation)
        assert bounds == Rect(3, 3, 5, 5)

    @pytest.mark.parametrize("size", [3, 4, 5, 6, 7])
    @pytest.mark.parametrize("rotation", list(Rotation))
    def test_spawn_position_realizes_target(self, size, rotation):
        """Spawning at spawn_position occupies exactly the target rectangle."""
        center = spawn_position(4, 7, size, size, rotation)
        assert bounds_from_center(*center, size, rotation) == Rect(4, 7, size, size)


class TestSpawnPosition:
    @pytest.mark.parametrize(
        "rotation, expected",
        [
            (Rotation.NORTH, (1, 1)),
            (Rotation.EAST, (1, 2)),
            (Rotation.SOUTH, (2, 2)),
            (Rotation.WEST, (2, 1)),
        ],
    )
    def test_even_square(self, rotation, expected):
        assert spawn_position(0, 0, 4, 4, rotation) == expected

    def test_odd_width_even_depth_south(self):
        assert spawn_position(10, 1, 3, 4, Rotation.SOUTH) == (11, 3)

    def test_centered_spawn(self):
        assert centered_spawn_position(Rect(0, 0, 10, 10), 4, 4, Rotation.NORTH) == (4, 4)


class TestNonSquare:
    def test_rotated_dimensions(self):
        assert rotated_dimensions(3, 5, Rotation.NORTH) == (3, 5)
        assert rotated_dimensions(3, 5, Rotation.EAST) == (5, 3)
        assert rotated_dimensions(3, 5, Rotation.WEST) == (5, 3)

    def test_bounds_non_square_swaps_for_horizontal(self):
        assert bounds_non_square(1, 1, 3, 5, Rotation.SOUTH) == Rect(1, 1, 3, 5)
        assert bounds_non_square(1, 1, 3, 5, Rotation.EAST) == Rect(1, 1, 5, 3)

    def test_corner_center_round_trip(self):
        center = center_from_corner(0, 0, 3, 4, Rotation.EAST)
        assert center == (2, 1)
        assert corner_from_center(*center, 3, 4, Rotation.EAST) == (0, 0)


class TestWalls:
    def test_wall_cells_order(self):
        room = Rect(0, 0, 13, 11)
        north = wall_cells(room, Side.NORTH)
        assert north[0] == (0, 10) and north[-1] == (12, 10)
        east = wall_cells(room, Side.EAST)
        assert east[0] == (12, 0) and east[-1] == (12, 10)
        assert len(wall_cells(room, Side.WEST)) == 11

    def test_door_side(self):
        room = Rect(0, 0, 13, 11)
        assert door_side(room, Door(6, 10)) == Side.NORTH
        assert door_side(room, Door(12, 5)) == Side.EAST
        assert door_side(room, Door(6, 0)) == Side.SOUTH
        assert door_side(room, Door(0, 5)) == Side.WEST

    def test_corner_door_has_no_side(self):
        assert door_side(Rect(0, 0, 13, 11), Door(0, 10)) is None

    def test_is_on_perimeter(self):
        room = Rect(0, 0, 13, 11)
        assert is_on_perimeter(room, Door(0, 3))
        assert not is_on_perimeter(room, Door(3, 3))
        assert not is_on_perimeter(room, Door(13, 3))
