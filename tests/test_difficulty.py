"""Tests for the speed curve and obstacle interval."""
from __future__ import annotations

import pytest

from miffy_runner.config.settings import Settings
from miffy_runner.simulation.difficulty import DifficultyController, obstacle_interval


@pytest.fixture
def difficulty(settings: Settings) -> DifficultyController:
    return DifficultyController(settings.difficulty, settings.obstacles)


class TestObstacleInterval:
    def test_interval_shrinks_with_speed(self) -> None:
        assert obstacle_interval(10, 1650, 850, 50) == 1150

    def test_interval_is_floored(self) -> None:
        assert obstacle_interval(20, 1650, 850, 50) == 850

    def test_controller_uses_current_speed(self, difficulty: DifficultyController) -> None:
        difficulty.speed = 10
        assert difficulty.obstacle_interval() == 1150
        difficulty.set_speed_multiplier(2.0)
        assert difficulty.obstacle_interval() == 850


class TestSpeedCurve:
    def test_speed_non_decreasing_and_capped(self, difficulty: DifficultyController) -> None:
        previous = difficulty.speed
        for _ in range(5000):
            difficulty.advance(34)
            assert difficulty.speed >= previous
            assert difficulty.speed <= 13.0
            previous = difficulty.speed
        assert difficulty.speed == 13.0

    def test_acceleration_per_ms(self, difficulty: DifficultyController) -> None:
        difficulty.advance(1000)
        assert difficulty.speed == pytest.approx(6.1)

    def test_current_speed_applies_multiplier(self, difficulty: DifficultyController) -> None:
        difficulty.set_speed_multiplier(1.5)
        assert difficulty.current_speed == pytest.approx(9.0)

    def test_reset_keeps_multiplier(self, difficulty: DifficultyController) -> None:
        difficulty.set_speed_multiplier(0.5)
        difficulty.advance(10000)
        difficulty.reset()
        assert difficulty.speed == 6.0
        assert difficulty.speed_multiplier == 0.5


class TestSpeedMultiplier:
    @pytest.mark.parametrize("value, expected", [(5, 2.0), (0.1, 0.5), ("1.25", 1.25)])
    def test_multiplier_is_clamped(self, difficulty: DifficultyController, value, expected) -> None:
        assert difficulty.set_speed_multiplier(value)
        assert difficulty.speed_multiplier == expected

    @pytest.mark.parametrize("value", ["fast", None, float("nan"), float("inf")])
    def test_unusable_values_are_rejected(self, difficulty: DifficultyController, value) -> None:
        assert not difficulty.set_speed_multiplier(value)
        assert difficulty.speed_multiplier == 1.0
