"""
Game settings using Pydantic.

Settings are loaded from environment variables with .env file support,
optionally overlaid with a YAML file. Every tunable falls back to its
default when the supplied value is missing, malformed or non-finite, so a
bad config never stops the game loop.
"""

import logging
import math
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

SEASONS: tuple[str, ...] = ("spring", "summer", "autumn", "winter")

SPEED_MULTIPLIER_MIN = 0.5
SPEED_MULTIPLIER_MAX = 2.0


def _fallback_to_default(cls, value: Any, handler, info: ValidationInfo) -> Any:
    """Validate a field, substituting its default on any defect."""
    field_info = cls.model_fields[info.field_name]
    try:
        result = handler(value)
    except ValidationError as e:
        default = field_info.get_default(call_default_factory=True)
        logger.warning(
            f"Invalid value for {cls.__name__}.{info.field_name}: {value!r} "
            f"({e.error_count()} errors), using default {default!r}"
        )
        return default

    if isinstance(result, float) and not math.isfinite(result):
        default = field_info.get_default(call_default_factory=True)
        logger.warning(
            f"Non-finite value for {cls.__name__}.{info.field_name}, using default {default!r}"
        )
        return default

    return result


def clamp_speed_multiplier(value: Any) -> float | None:
    """Coerce and clamp a speed multiplier. Returns None if unusable."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return min(SPEED_MULTIPLIER_MAX, max(SPEED_MULTIPLIER_MIN, number))


class TunableModel(BaseModel):
    """Frozen settings group with per-field default fallback."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    fallback_to_default = field_validator("*", mode="wrap")(classmethod(_fallback_to_default))


class DifficultySettings(TunableModel):
    """Scroll speed curve."""

    initial_speed: float = 6.0
    max_speed: float = 13.0
    acceleration: float = 0.0001  # speed units per ms
    speed_multiplier: float = 1.0

    @field_validator("speed_multiplier")
    @classmethod
    def clamp_multiplier(cls, value: float) -> float:
        clamped = clamp_speed_multiplier(value)
        return 1.0 if clamped is None else clamped


class ViewSettings(TunableModel):
    """Logical playfield size."""

    width: int = 600
    height: int = 150
    ground_height: int = 20

    @property
    def ground_y(self) -> int:
        """Y coordinate of the ground line."""
        return self.height - self.ground_height


class CharacterSettings(TunableModel):
    """Player geometry and jump tuning."""

    width: int = 40
    height: int = 50
    duck_height: int = 30
    start_x: int = 50
    frame_interval: float = 100.0
    jump_duration: float = 520.0
    jump_height: float = 65.0
    speed_drop_ratio: float = 0.85


class PerformanceSettings(TunableModel):
    """Frame pacing and effect caps."""

    target_fps: int = 60
    max_delta_time: float = 34.0  # ms, avoid giant frame spikes
    enable_particles: bool = True
    max_particles: int = 160


class SpawnChances(TunableModel):
    """Obstacle band widths for the ordered draw."""

    bear: float = 0.2
    butterfly: float = 0.18
    tulip_cluster: float = 0.32


class TulipClusterSettings(TunableModel):
    """Cluster sizing bounds."""

    min_count: int = 2
    max_count: int = 4
    spacing: float = 6.5
    large_chance: float = 0.4


class ObstacleSettings(TunableModel):
    """Obstacle spawn pacing, weights and early game tuning."""

    base_interval: float = 1650.0
    min_interval: float = 850.0
    speed_interval_factor: float = 50.0
    min_speed_for_bear: float = 6.0
    min_speed_for_butterfly: float = 8.0
    spawn_chances: SpawnChances = Field(default_factory=SpawnChances)
    tulip_cluster: TulipClusterSettings = Field(default_factory=TulipClusterSettings)
    single_tulip_large_chance: float = 0.5

    # Early game tuning to avoid too-wide tulip clusters
    early_game_duration_ms: float = 20000.0
    early_game_max_cluster_count: int = 2
    early_game_small_only: bool = True
    early_game_large_chance: float = 0.15
    early_game_single_tulip_large_chance: float = 0.2
    early_game_cluster_spacing: float = 4.5


class CloudSettings(TunableModel):
    initial_count: int = 3
    max_count: int = 5
    spawn_interval_ms: float = 3000.0


class DecorationSettings(TunableModel):
    max_count: int = 8
    spawn_interval_ms: float = 2000.0
    falling_max_count: int = 12
    falling_spawn_interval_ms: float = 1500.0


class CollectibleSettings(TunableModel):
    """Heart and cake pacing."""

    heart_min_interval_ms: int = 4000
    heart_max_interval_ms: int = 9000
    max_hearts: int = 3
    cake_start_score: int = 1000
    cake_min_interval_ms: int = 12000
    cake_max_interval_ms: int = 20000
    max_cakes: int = 2


class StorageSettings(TunableModel):
    """Where progress records live."""

    backend: Literal["file", "memory"] = "file"
    data_dir: Path = Field(default_factory=lambda: Path.home() / ".miffy-runner")


class SimulatorSettings(TunableModel):
    """Developer simulator window."""

    title: str = "Miffy Runner Simulator"
    scale: int = 2
    fps: int = 60


class Settings(BaseSettings):
    """Main game settings."""

    model_config = SettingsConfigDict(
        env_prefix="MIFFY_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        frozen=True,
    )

    debug: bool = False
    season: Literal["spring", "summer", "autumn", "winter"] = "spring"

    # Nested settings
    difficulty: DifficultySettings = Field(default_factory=DifficultySettings)
    view: ViewSettings = Field(default_factory=ViewSettings)
    character: CharacterSettings = Field(default_factory=CharacterSettings)
    performance: PerformanceSettings = Field(default_factory=PerformanceSettings)
    obstacles: ObstacleSettings = Field(default_factory=ObstacleSettings)
    clouds: CloudSettings = Field(default_factory=CloudSettings)
    decorations: DecorationSettings = Field(default_factory=DecorationSettings)
    collectibles: CollectibleSettings = Field(default_factory=CollectibleSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    simulator: SimulatorSettings = Field(default_factory=SimulatorSettings)

    fallback_to_default = field_validator("*", mode="wrap")(classmethod(_fallback_to_default))


def load_settings(path: Path | str | None = None) -> Settings:
    """Build settings from the environment plus an optional YAML file.

    A missing, unreadable or malformed file is logged and ignored.
    """
    if path is None:
        return Settings()

    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        logger.warning(f"Could not read settings file {path}: {e}")
        return Settings()

    if not isinstance(data, dict):
        logger.warning(f"Settings file {path} is not a mapping, ignoring")
        return Settings()

    logger.info(f"Loaded settings overrides from {path}")
    return Settings(**data)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
