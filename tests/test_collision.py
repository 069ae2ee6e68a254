"""Tests for hit detection, pickups and dodge counting."""
from __future__ import annotations

import random

import pytest

from miffy_runner.simulation.collision import (
    CollisionEngine,
    collect_pickups,
    count_dodges,
    find_hit,
)
from miffy_runner.simulation.entities import Heart, Tulip
from miffy_runner.simulation.player import Player
from miffy_runner.simulation.world import LiveEntities

GROUND_Y = 130


@pytest.fixture
def player() -> Player:
    return Player(ground_level=GROUND_Y)


def heart_on_player(player: Player, rng: random.Random) -> Heart:
    heart = Heart(player.x + 5, GROUND_Y, rng=rng)
    heart.y = player.y + 10
    return heart


class TestObstacleHits:
    def test_tulip_at_player_is_a_hit(self, player: Player) -> None:
        tulip = Tulip(player.x, GROUND_Y)
        assert find_hit(player, [tulip]) is tulip

    def test_removed_obstacle_is_ignored(self, player: Player) -> None:
        tulip = Tulip(player.x, GROUND_Y)
        tulip.mark_removed()
        assert find_hit(player, [tulip]) is None

    def test_jump_clears_a_tulip(self, player: Player) -> None:
        tulip = Tulip(player.x, GROUND_Y)
        player.jump()
        player.update(260)
        assert find_hit(player, [tulip]) is None

    def test_crash_tick_still_collects_and_dodges(self, player: Player, rng: random.Random) -> None:
        heart = heart_on_player(player, rng)
        passed = Tulip(player.x - 30, GROUND_Y)
        world = LiveEntities(obstacles=[Tulip(player.x, GROUND_Y), passed], hearts=[heart])
        report = CollisionEngine().check(player, world)
        assert report.crashed
        assert report.collected == [heart]
        assert heart.collected
        assert report.dodged == [passed]


class TestPickups:
    def test_every_overlapping_collectible_is_collected(self, player: Player, rng: random.Random) -> None:
        hearts = [heart_on_player(player, rng), heart_on_player(player, rng)]
        picked = collect_pickups(player, hearts)
        assert picked == hearts
        assert all(h.collected and h.remove for h in hearts)

    def test_collected_items_are_not_retested(self, player: Player, rng: random.Random) -> None:
        heart = heart_on_player(player, rng)
        collect_pickups(player, [heart])
        assert collect_pickups(player, [heart]) == []

    def test_far_heart_is_not_collected(self, player: Player, rng: random.Random) -> None:
        heart = Heart(400, GROUND_Y, rng=rng)
        assert collect_pickups(player, [heart]) == []


# ── dodge counting ─────────────────────────────────────────────


def scroll_until_gone(player: Player, world: LiveEntities, speed: float, dt: float) -> int:
    dodges = 0
    for _ in range(10000):
        if not world.obstacles:
            break
        world.update(speed, dt)
        dodges += len(count_dodges(player, world.obstacles))
        world.compact()
    return dodges


class TestDodges:
    @pytest.mark.parametrize("dt", [16.0, 34.0])
    def test_one_dodge_per_obstacle_at_any_frame_rate(self, player: Player, dt: float) -> None:
        world = LiveEntities(obstacles=[Tulip(200, GROUND_Y), Tulip(320, GROUND_Y), Tulip(460, GROUND_Y)])
        assert scroll_until_gone(player, world, speed=9.0, dt=dt) == 3

    @pytest.mark.parametrize("dt", [16.0, 34.0])
    def test_fast_scroll_still_counts_once(self, player: Player, dt: float) -> None:
        world = LiveEntities(obstacles=[Tulip(120, GROUND_Y)])
        assert scroll_until_gone(player, world, speed=40.0, dt=dt) == 1

    def test_right_edge_on_player_x_is_not_yet_dodged(self, player: Player) -> None:
        tulip = Tulip(player.x - 18, GROUND_Y)
        assert tulip.right == player.x
        assert count_dodges(player, [tulip]) == []
        tulip.x -= 1
        assert count_dodges(player, [tulip]) == [tulip]
        assert count_dodges(player, [tulip]) == []
