"""Player actor and its jump/duck/crash state machine."""

import logging
import math
from enum import Enum
from typing import Any, Dict, Optional

from miffy_runner.config.settings import CharacterSettings
from miffy_runner.simulation.geometry import Rect

logger = logging.getLogger(__name__)


class PlayerStatus(Enum):
    WAITING = "waiting"
    RUNNING = "running"
    JUMPING = "jumping"
    DUCKING = "ducking"
    CRASHED = "crashed"


def jump_offset(t: float, jump_height: float) -> float:
    """Vertical offset for normalized jump time ``t`` (negative is up).

    Smoothstep applied to a half sine: zero at both ends, peak at t=0.5.
    """
    t = min(max(t, 0.0), 1.0)
    arc = math.sin(math.pi * t)
    ease = arc * arc * (3 - 2 * arc)
    return -ease * jump_height


class Player:
    """The runner.

    ``jumping`` and ``ducking`` are mutually exclusive. Once crashed, every
    action is refused until ``reset()``.
    """

    RUN_FRAMES = 3

    def __init__(self, settings: Optional[CharacterSettings] = None, ground_level: float = 130):
        self.settings = settings or CharacterSettings()
        self.width = self.settings.width
        self.height = self.settings.height
        self.duck_height = self.settings.duck_height
        self.x = float(self.settings.start_x)

        self.ground_y = ground_level - self.height
        self.y = self.ground_y

        self.status = PlayerStatus.WAITING
        self.jumping = False
        self.ducking = False
        self.jump_time = 0.0
        self.jump_count = 0

        self.frame = 0
        self._frame_timer = 0.0

    @property
    def is_crashed(self) -> bool:
        return self.status == PlayerStatus.CRASHED

    @property
    def jump_progress(self) -> float:
        """Normalized jump time in [0, 1]."""
        duration = self.settings.jump_duration
        if duration <= 0:
            return 1.0
        return min(self.jump_time / duration, 1.0)

    def update(self, dt: float) -> None:
        self._frame_timer += dt
        if self._frame_timer >= self.settings.frame_interval:
            self.frame = (self.frame + 1) % self.RUN_FRAMES
            self._frame_timer = 0.0

        if not self.jumping:
            return

        self.jump_time += dt
        t = self.jump_progress
        self.y = self.ground_y + jump_offset(t, self.settings.jump_height)

        if t >= 1:
            self.y = self.ground_y
            self.jumping = False
            self.jump_time = 0.0
            if self.status != PlayerStatus.CRASHED:
                self.status = PlayerStatus.RUNNING

    def jump(self) -> bool:
        """Start a jump. Returns False if the jump was refused."""
        if self.is_crashed or self.jumping or self.ducking:
            return False

        self.jumping = True
        self.jump_time = 0.0
        self.status = PlayerStatus.JUMPING
        self.jump_count += 1
        return True

    def duck(self, is_ducking: bool) -> bool:
        """Enter or leave the duck pose. Refused mid-jump or after a crash."""
        if self.is_crashed or self.jumping:
            return False

        self.ducking = is_ducking
        if is_ducking:
            self.status = PlayerStatus.DUCKING
            self.y = self.ground_y + (self.height - self.duck_height)
        else:
            self.status = PlayerStatus.RUNNING
            self.y = self.ground_y
        return True

    def speed_drop(self) -> bool:
        """Fast-fall: push the jump timer toward landing."""
        if self.is_crashed or not self.jumping:
            return False
        floor = self.settings.jump_duration * self.settings.speed_drop_ratio
        self.jump_time = max(self.jump_time, floor)
        return True

    def crash(self) -> None:
        self.status = PlayerStatus.CRASHED

    def start_running(self) -> None:
        if self.status == PlayerStatus.WAITING:
            self.status = PlayerStatus.RUNNING

    def reset(self) -> None:
        self.y = self.ground_y
        self.jumping = False
        self.ducking = False
        self.jump_time = 0.0
        self.status = PlayerStatus.RUNNING
        self.jump_count = 0

    @property
    def collision_box(self) -> Rect:
        if self.ducking:
            return Rect(self.x + 5, self.y + 5, 40, self.duck_height - 10)
        return Rect(self.x + 5, self.y + 5, 30, self.height - 10)

    def view(self) -> Dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.duck_height if self.ducking else self.height,
            "status": self.status.value,
            "frame": self.frame,
        }
