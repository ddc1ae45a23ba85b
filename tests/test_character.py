"""Tests for characters: stepping, occupancy, animation and wandering."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from pathmove.core.character import MapEvent, Player
from pathmove.core.enums import Direction
from pathmove.core.models import Vector2
from tests.helpers.arena import PathArena


class TestMoveStraight:
    def test_step_moves_and_updates_occupancy(self):
        arena = PathArena(5, 5)
        player = arena.add_player((1, 1))
        assert player.move_straight(Direction.RIGHT)
        assert player.pos == Vector2(2, 1)
        assert player.direction == Direction.RIGHT
        assert player.moves_issued == 1
        assert arena.world.characters_at(Vector2(2, 1)) == [player]
        assert arena.world.characters_at(Vector2(1, 1)) == []

    def test_wall_blocks_but_turns(self):
        arena = PathArena(5, 5)
        arena.wall(1, 0)
        player = arena.add_player((1, 1))
        assert not player.move_straight(Direction.UP)
        assert player.pos == Vector2(1, 1)
        assert player.direction == Direction.UP
        assert player.moves_issued == 0

    def test_solid_character_blocks(self):
        arena = PathArena(5, 5)
        player = arena.add_player((1, 1))
        arena.add_event((2, 1))
        assert not player.can_pass(player.pos, Direction.RIGHT)

    def test_through_ignores_walls_and_characters(self):
        arena = PathArena(5, 5)
        arena.wall(2, 1)
        arena.add_event((3, 1))
        player = arena.add_player((1, 1))
        player.through = True
        assert player.move_straight(Direction.RIGHT)
        assert player.move_straight(Direction.RIGHT)
        assert player.pos == Vector2(3, 1)

    def test_through_never_leaves_the_map(self):
        arena = PathArena(5, 5)
        player = arena.add_player((0, 0))
        player.through = True
        assert not player.can_pass(player.pos, Direction.LEFT)
        assert not player.move_straight(Direction.UP)

    def test_unattached_character_raises(self):
        loose = MapEvent(7, Vector2(0, 0))
        with pytest.raises(RuntimeError):
            loose.can_pass(loose.pos, Direction.RIGHT)
        with pytest.raises(RuntimeError):
            loose.start_pathfinding(1, 1)


class TestAnimation:
    def test_real_pos_interpolates(self):
        arena = PathArena(5, 1, step_ticks=3)
        player = arena.add_player((0, 0))
        player.move_straight(Direction.RIGHT)
        assert player.is_moving()
        assert player.real_pos == (0.0, 0.0)
        player.update_move()
        x, y = player.real_pos
        assert x == pytest.approx(1 / 3)
        assert y == 0.0
        player.update_move()
        player.update_move()
        assert not player.is_moving()
        assert player.real_pos == (1.0, 0.0)

    def test_locate_cancels_animation(self):
        arena = PathArena(5, 5, step_ticks=4)
        player = arena.add_player((0, 0))
        player.move_straight(Direction.DOWN)
        player.locate(Vector2(3, 3))
        assert not player.is_moving()
        assert arena.world.characters_at(Vector2(3, 3)) == [player]
        assert arena.world.characters_at(Vector2(0, 1)) == []


class TestKinds:
    def test_player_identity(self):
        player = Player(Vector2(0, 0))
        assert player.id == -1
        assert player.kind == "player"

    def test_second_player_replaces_first(self):
        arena = PathArena(5, 5)
        first = arena.add_player((0, 0))
        second = arena.add_player((4, 4))
        assert arena.world.player is second
        assert arena.world.characters_at(first.pos) == []

    def test_update_order_is_player_then_events_by_id(self):
        arena = PathArena(5, 5)
        arena.add_event((3, 3), eid=5)
        arena.add_event((2, 2), eid=2)
        arena.add_player((0, 0))
        assert [c.id for c in arena.world.characters()] == [-1, 2, 5]

    def test_event_ids_are_allocated_upwards(self):
        arena = PathArena(5, 5)
        arena.add_event((1, 1), eid=4)
        nxt = arena.add_event((2, 2))
        assert nxt.id == 5


class TestWandering:
    def _positions(self, seed: int) -> list[tuple[int, int]]:
        arena = PathArena(12, 12, seed=seed)
        walker = arena.add_event((6, 6), move_chance=0.5)
        return [(p.x, p.y) for p in arena.trace(walker, 40)]

    def test_same_seed_same_walk(self):
        assert self._positions(11) == self._positions(11)

    def test_walker_actually_moves(self):
        assert len(set(self._positions(11))) > 1

    def test_no_wandering_while_following_a_route(self):
        arena = PathArena(10, 10)
        walker = arena.add_event((0, 0), move_chance=1.0)
        assert walker.wanders
        arena.move_to(walker, 6, 3)
        path = list(walker.pathfinding.path)
        assert arena.trace(walker, len(path)) == path

    def test_idle_event_without_rng_stays_put(self):
        arena = PathArena(5, 5)
        event = arena.add_event((2, 2))
        assert not event.wanders
        arena.tick(10)
        assert event.pos == Vector2(2, 2)
