"""Tests for snapshot rendering into the numpy frame buffer."""
from __future__ import annotations

import numpy as np

from miffy_runner.simulator.framebuffer import (
    KIND_COLORS,
    PLAYER_COLORS,
    SEASON_COLORS,
    FrameRenderer,
    fill_rect,
)


def make_renderer() -> FrameRenderer:
    return FrameRenderer(600, 150, 130)


def test_fill_rect_clips_to_buffer():
    buffer = np.zeros((10, 10, 3), dtype=np.uint8)
    fill_rect(buffer, -5, 8, 8, 5, (1, 2, 3))
    assert (buffer[8:10, 0:3] == (1, 2, 3)).all()
    assert (buffer[:8] == 0).all()
    assert (buffer[:, 3:] == 0).all()


def test_fill_rect_off_buffer_is_noop():
    buffer = np.zeros((10, 10, 3), dtype=np.uint8)
    fill_rect(buffer, 20, 20, 5, 5, (9, 9, 9))
    assert not buffer.any()


class TestFrameRenderer:
    def test_empty_snapshot_draws_sky_and_ground(self) -> None:
        frame = make_renderer().render({"season": "autumn"})
        assert frame.shape == (150, 600, 3)
        assert frame.dtype == np.uint8
        assert tuple(frame[0, 0]) == SEASON_COLORS["autumn"]["sky"]
        assert tuple(frame[140, 300]) == SEASON_COLORS["autumn"]["ground"]

    def test_unknown_season_uses_spring(self) -> None:
        frame = make_renderer().render({"season": "monsoon"})
        assert tuple(frame[0, 0]) == SEASON_COLORS["spring"]["sky"]

    def test_player_and_obstacles(self) -> None:
        snapshot = {
            "season": "spring",
            "player": {"x": 50, "y": 80, "width": 40, "height": 50, "status": "crashed"},
            "entities": {
                "obstacles": [{"kind": "bear", "x": 300, "y": 75, "width": 50, "height": 50}],
            },
        }
        frame = make_renderer().render(snapshot)
        assert tuple(frame[100, 60]) == PLAYER_COLORS["crashed"]
        assert tuple(frame[100, 320]) == KIND_COLORS["bear"]

    def test_cluster_members_are_drawn(self) -> None:
        cluster = {
            "kind": "tulip_cluster", "x": 200, "y": 92, "width": 50, "height": 38,
            "members": [
                {"size": "small", "offset_x": 0, "width": 18, "height": 28},
                {"size": "large", "offset_x": 24, "width": 26, "height": 38},
            ],
        }
        frame = make_renderer().render({"entities": {"obstacles": [cluster]}})
        assert tuple(frame[120, 205]) == KIND_COLORS["tulip_cluster"]
        # gap between members shows sky
        assert tuple(frame[120, 220]) == SEASON_COLORS["spring"]["sky"]

    def test_milestone_flash_inverts_top_strip(self) -> None:
        frame = make_renderer().render({"milestone_flash": True})
        sky = np.array(SEASON_COLORS["spring"]["sky"])
        assert tuple(frame[0, 0]) == tuple(255 - sky)

    def test_get_buffer_is_a_copy(self) -> None:
        renderer = make_renderer()
        renderer.render({})
        copy = renderer.get_buffer()
        copy[:] = 0
        assert renderer.get_buffer().any()
