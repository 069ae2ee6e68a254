"""Tests for entity movement, removal and geometry."""
from __future__ import annotations

import random

import pytest

from miffy_runner.simulation.entities import (
    FRAME_MS,
    Bear,
    Butterfly,
    Cake,
    Cloud,
    Decoration,
    EntityCategory,
    FallingDecoration,
    Heart,
    Tulip,
    TulipCluster,
    frame_scale,
)
from miffy_runner.simulation.world import LiveEntities

GROUND_Y = 130


def test_frame_scale():
    assert frame_scale(FRAME_MS) == pytest.approx(1.0)
    assert frame_scale(34.0) == pytest.approx(2.04)


class TestTulips:
    def test_tulip_stands_on_ground(self) -> None:
        tulip = Tulip(600, GROUND_Y, size="large")
        assert (tulip.width, tulip.height) == (26, 38)
        assert tulip.bounds.bottom == GROUND_Y
        assert tulip.category == EntityCategory.OBSTACLE

    def test_unknown_size_is_small(self) -> None:
        assert Tulip(600, GROUND_Y, size="giant").size == "small"

    def test_cluster_is_union_of_members(self, rng: random.Random) -> None:
        cluster = TulipCluster(600, GROUND_Y, count=3, spacing=6.5, large_chance=0.5, rng=rng)
        rects = cluster.member_rects()
        assert len(rects) == 3
        assert cluster.x == rects[0].x
        assert cluster.right == pytest.approx(rects[-1].right)
        assert cluster.y == min(r.y for r in rects)
        assert cluster.bounds.bottom == GROUND_Y
        for left, right in zip(rects, rects[1:]):
            assert right.x == pytest.approx(left.right + 6.5)

    def test_cluster_count_is_clamped(self, rng: random.Random) -> None:
        cluster = TulipCluster(600, GROUND_Y, count=9, min_count=2, max_count=4, rng=rng)
        assert cluster.count == 4

    def test_small_only_cluster(self, rng: random.Random) -> None:
        cluster = TulipCluster(600, GROUND_Y, count=4, large_chance=1.0, small_only=True, rng=rng)
        assert {m.size for m in cluster.members} == {"small"}

    def test_cluster_view_lists_members(self, rng: random.Random) -> None:
        cluster = TulipCluster(600, GROUND_Y, count=2, rng=rng)
        assert len(cluster.view()["members"]) == 2


class TestFlyers:
    def test_butterfly_height_tier(self, rng: random.Random) -> None:
        for _ in range(20):
            butterfly = Butterfly(600, GROUND_Y, rng=rng)
            assert GROUND_Y - butterfly.base_y in Butterfly.HEIGHT_TIERS

    def test_butterfly_moves_left(self, rng: random.Random) -> None:
        butterfly = Butterfly(600, GROUND_Y, rng=rng)
        butterfly.update(8.0, FRAME_MS)
        assert butterfly.x < 600

    def test_bear_hovers_above_ground(self, rng: random.Random) -> None:
        bear = Bear(600, GROUND_Y, rng=rng)
        bear.update(6.0, FRAME_MS)
        assert bear.x == pytest.approx(600 - 6.0 * 0.9)
        assert abs(bear.y - (GROUND_Y - 55)) <= 5


class TestRemoval:
    def test_obstacle_removed_once_off_screen(self) -> None:
        tulip = Tulip(5, GROUND_Y)
        tulip.update(6.0, FRAME_MS)
        assert not tulip.remove
        for _ in range(5):
            tulip.update(6.0, FRAME_MS)
        assert tulip.remove

    def test_removal_never_reverts(self) -> None:
        tulip = Tulip(-30, GROUND_Y)
        tulip.update(6.0, FRAME_MS)
        assert tulip.remove
        tulip.x = 300
        tulip.update(0.0, FRAME_MS)
        assert tulip.remove

    def test_collected_heart_is_removed(self, rng: random.Random) -> None:
        heart = Heart(300, GROUND_Y, rng=rng)
        heart.collect()
        assert heart.collected and heart.remove

    def test_falling_decoration_leaves_at_bottom(self, rng: random.Random) -> None:
        flake = FallingDecoration(600, 150, "❄️", rng=rng)
        for _ in range(1000):
            flake.update(6.0, FRAME_MS)
            if flake.remove:
                break
        assert flake.remove
        assert flake.y > 150

    def test_decoration_leaves_past_left_margin(self, rng: random.Random) -> None:
        bird = Decoration(-39, "bird", rng=rng)
        bird.update(6.0, FRAME_MS)
        assert bird.remove

    def test_cloud_drifts_slower_than_scroll(self, rng: random.Random) -> None:
        cloud = Cloud(300, rng=rng)
        cloud.update(6.0, FRAME_MS)
        assert cloud.x == pytest.approx(300 - 1.1)

    def test_cake_scrolls_at_reduced_speed(self, rng: random.Random) -> None:
        cake = Cake(300, GROUND_Y, rng=rng)
        cake.update(10.0, FRAME_MS)
        assert cake.x == pytest.approx(294.0)


class TestLiveEntities:
    def test_compact_drops_removed(self, rng: random.Random) -> None:
        world = LiveEntities(obstacles=[Tulip(-30, GROUND_Y), Tulip(300, GROUND_Y)])
        world.update(6.0, FRAME_MS)
        assert len(world.obstacles) == 2
        assert world.compact() == 1
        assert [o.x for o in world.obstacles] == [pytest.approx(294.0)]

    def test_iteration_covers_every_list(self, rng: random.Random) -> None:
        world = LiveEntities(clouds=[Cloud(10, rng=rng)], hearts=[Heart(10, GROUND_Y, rng=rng)])
        assert len(world) == 2
        assert len(list(world)) == 2
        world.clear()
        assert len(world) == 0
