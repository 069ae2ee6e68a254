"""Tests for settings defaults, fallbacks and YAML overrides."""
from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from miffy_runner.config.settings import (
    DifficultySettings,
    ObstacleSettings,
    Settings,
    ViewSettings,
    clamp_speed_multiplier,
    load_settings,
)


class TestDefaults:
    def test_core_tunables(self, settings: Settings) -> None:
        assert settings.difficulty.initial_speed == 6.0
        assert settings.difficulty.max_speed == 13.0
        assert settings.performance.max_delta_time == 34.0
        assert settings.obstacles.base_interval == 1650.0
        assert settings.obstacles.spawn_chances.bear == 0.2
        assert settings.collectibles.cake_start_score == 1000
        assert settings.season == "spring"

    def test_ground_line(self) -> None:
        assert ViewSettings().ground_y == 130

    def test_settings_are_frozen(self, settings: Settings) -> None:
        with pytest.raises(ValidationError):
            settings.difficulty.max_speed = 99


class TestFallback:
    def test_wrong_type_uses_default(self) -> None:
        assert DifficultySettings(initial_speed="fast").initial_speed == 6.0

    @pytest.mark.parametrize("value", [float("nan"), float("inf")])
    def test_non_finite_uses_default(self, value: float) -> None:
        assert ObstacleSettings(base_interval=value).base_interval == 1650.0

    def test_bad_nested_value_keeps_the_rest(self) -> None:
        settings = Settings(obstacles={"min_interval": "soon", "base_interval": 2000})
        assert settings.obstacles.min_interval == 850.0
        assert settings.obstacles.base_interval == 2000.0

    def test_unknown_season_uses_default(self) -> None:
        assert Settings(season="monsoon").season == "spring"

    def test_speed_multiplier_is_clamped(self) -> None:
        assert DifficultySettings(speed_multiplier=9).speed_multiplier == 2.0
        assert DifficultySettings(speed_multiplier=0.2).speed_multiplier == 0.5


@pytest.mark.parametrize(
    "value, expected",
    [(1, 1.0), (0.0, 0.5), (4, 2.0), ("1.5", 1.5), ("x", None), (None, None), (float("nan"), None)],
)
def test_clamp_speed_multiplier(value, expected):
    assert clamp_speed_multiplier(value) == expected


class TestLoadSettings:
    def test_yaml_overrides(self, tmp_path: Path) -> None:
        path = tmp_path / "miffy.yaml"
        path.write_text("season: winter\ndifficulty:\n  max_speed: 15\n")
        settings = load_settings(path)
        assert settings.season == "winter"
        assert settings.difficulty.max_speed == 15.0
        assert settings.difficulty.initial_speed == 6.0

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        assert load_settings(tmp_path / "absent.yaml") == Settings()

    def test_malformed_yaml_gives_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("difficulty: [unclosed\n")
        assert load_settings(path) == Settings()

    def test_undecodable_yaml_gives_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "binary.yaml"
        path.write_bytes(b"\xff\xfe{bad")
        assert load_settings(path) == Settings()

    def test_non_mapping_gives_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        assert load_settings(path) == Settings()

    def test_environment_overrides(self, monkeypatch) -> None:
        monkeypatch.setenv("MIFFY_DIFFICULTY__MAX_SPEED", "20")
        monkeypatch.setenv("MIFFY_SEASON", "autumn")
        settings = Settings()
        assert settings.difficulty.max_speed == 20.0
        assert settings.season == "autumn"
