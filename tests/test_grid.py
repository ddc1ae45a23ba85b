"""Tests for Grid terrain, directional edges, and Vector2 helpers."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from pathmove.core.enums import Direction, Material
from pathmove.core.grid import Grid
from pathmove.core.models import Vector2


class TestVector2:
    def test_step_offsets(self):
        p = Vector2(3, 3)
        assert p.step(Direction.UP) == Vector2(3, 2)
        assert p.step(Direction.RIGHT) == Vector2(4, 3)
        assert p.step(Direction.DOWN) == Vector2(3, 4)
        assert p.step(Direction.LEFT) == Vector2(2, 3)

    def test_direction_to(self):
        p = Vector2(0, 0)
        assert p.direction_to(Vector2(0, 1)) == Direction.DOWN
        assert p.direction_to(Vector2(-1, 0)) == Direction.LEFT
        assert p.direction_to(Vector2(2, 2)) == Direction.RIGHT  # horizontal wins ties
        assert p.direction_to(Vector2(1, -3)) == Direction.UP
        assert p.direction_to(p) is None

    def test_reverse(self):
        assert Direction.UP.reverse() == Direction.DOWN
        assert Direction.LEFT.reverse() == Direction.RIGHT

    def test_repr(self):
        assert repr(Vector2(4, -2)) == "(4, -2)"


class TestGrid:
    def test_out_of_bounds_reads_as_wall(self):
        g = Grid(4, 4)
        assert g.get(Vector2(-1, 0)) == Material.WALL
        assert g.get(Vector2(4, 0)) == Material.WALL
        assert not g.is_walkable(Vector2(0, 4))

    def test_walkable_materials(self):
        g = Grid(4, 1)
        g.set(Vector2(1, 0), Material.GRASS)
        g.set(Vector2(2, 0), Material.WATER)
        g.set(Vector2(3, 0), Material.WALL)
        assert g.is_walkable(Vector2(0, 0))
        assert g.is_walkable(Vector2(1, 0))
        assert not g.is_walkable(Vector2(2, 0))
        assert not g.is_walkable(Vector2(3, 0))

    def test_fill_is_inclusive(self):
        g = Grid(5, 5)
        g.fill(3, 3, 1, 1, Material.WALL)
        walls = [(x, y) for y in range(5) for x in range(5) if g.get(Vector2(x, y)) == Material.WALL]
        assert len(walls) == 9

    def test_passable_needs_walkable_destination(self):
        g = Grid(3, 1)
        g.set(Vector2(2, 0), Material.WALL)
        assert g.is_passable(Vector2(0, 0), Direction.RIGHT)
        assert not g.is_passable(Vector2(1, 0), Direction.RIGHT)

    def test_source_tile_need_not_be_walkable(self):
        g = Grid(3, 1)
        g.set(Vector2(0, 0), Material.WALL)
        assert g.is_passable(Vector2(0, 0), Direction.RIGHT)

    def test_leaving_the_map_is_never_passable(self):
        g = Grid(3, 3)
        assert not g.is_passable(Vector2(0, 0), Direction.UP)
        assert not g.is_passable(Vector2(2, 2), Direction.RIGHT)

    def test_edge_blocks_apply_on_both_sides(self):
        g = Grid(3, 1)
        g.block_edge(Vector2(1, 0), Direction.LEFT)
        assert not g.is_passable(Vector2(1, 0), Direction.LEFT)  # exit side
        assert not g.is_passable(Vector2(0, 0), Direction.RIGHT)  # entry side
        assert g.is_passable(Vector2(1, 0), Direction.RIGHT)

    def test_unblock_edge(self):
        g = Grid(3, 1)
        g.block_edge(Vector2(1, 0), Direction.LEFT, Direction.RIGHT)
        g.unblock_edge(Vector2(1, 0), Direction.LEFT)
        assert not g.edge_blocked(Vector2(1, 0), Direction.LEFT)
        assert g.edge_blocked(Vector2(1, 0), Direction.RIGHT)
        g.unblock_edge(Vector2(1, 0), Direction.RIGHT)
        assert g.is_passable(Vector2(1, 0), Direction.RIGHT)

    def test_copy_is_independent(self):
        g = Grid(3, 3)
        c = g.copy()
        g.set(Vector2(1, 1), Material.WALL)
        g.block_edge(Vector2(0, 0), Direction.DOWN)
        assert c.get(Vector2(1, 1)) == Material.FLOOR
        assert not c.edge_blocked(Vector2(0, 0), Direction.DOWN)
        assert (c.width, c.height) == (3, 3)
