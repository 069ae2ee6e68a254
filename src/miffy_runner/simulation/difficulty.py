"""Scroll speed curve and the obstacle interval derived from it."""

from miffy_runner.config.settings import DifficultySettings, ObstacleSettings, clamp_speed_multiplier


def obstacle_interval(
    current_speed: float,
    base_interval: float,
    min_interval: float,
    speed_interval_factor: float,
) -> float:
    """Spawn gap in ms: shrinks linearly with speed, floored at ``min_interval``."""
    return max(min_interval, base_interval - current_speed * speed_interval_factor)


class DifficultyController:
    """Owns the single difficulty variable: scroll speed.

    ``speed`` only grows while playing and is capped at ``max_speed``.
    ``current_speed`` folds in the player-facing multiplier.
    """

    def __init__(self, settings: DifficultySettings, obstacles: ObstacleSettings):
        self.settings = settings
        self.obstacles = obstacles
        self.speed = settings.initial_speed
        self.speed_multiplier = settings.speed_multiplier

    @property
    def current_speed(self) -> float:
        return self.speed * self.speed_multiplier

    def advance(self, dt: float) -> float:
        """Accelerate for ``dt`` ms and return the new current speed."""
        if self.speed < self.settings.max_speed:
            self.speed = min(self.settings.max_speed, self.speed + self.settings.acceleration * dt)
        return self.current_speed

    def set_speed_multiplier(self, value) -> bool:
        clamped = clamp_speed_multiplier(value)
        if clamped is None:
            return False
        self.speed_multiplier = clamped
        return True

    def obstacle_interval(self) -> float:
        return obstacle_interval(
            self.current_speed,
            self.obstacles.base_interval,
            self.obstacles.min_interval,
            self.obstacles.speed_interval_factor,
        )

    def reset(self) -> None:
        """Back to the initial speed. The multiplier is a setting and survives."""
        self.speed = self.settings.initial_speed
