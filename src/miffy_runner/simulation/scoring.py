"""Distance, score and high score bookkeeping for a run."""

import math

from miffy_runner.simulation.entities import frame_scale

SCORE_DIVISOR = 10
MILESTONE_STEP = 100
MILESTONE_FLASH_MS = 1000.0


def score_for_distance(distance: float) -> int:
    return int(math.floor(distance / SCORE_DIVISOR))


class ScoreTracker:
    """Turns scrolled distance into score.

    Distance accumulates ``current_speed`` pixels per 60 Hz frame. The high
    score follows the live score so the HUD can show a new record as it
    happens; persisting it is left to the caller.
    """

    def __init__(self, high_score: int = 0):
        self.distance = 0.0
        self.score = 0
        self.high_score = max(0, int(high_score))
        self.milestone_timer = 0.0
        self._last_milestone = 0

    @property
    def milestone_flash(self) -> bool:
        """True while the HUD should flash for a fresh multiple of 100."""
        return self.milestone_timer > 0

    def advance(self, current_speed: float, dt: float) -> bool:
        """Add the distance covered in ``dt`` ms.

        Returns True if the score landed on a new milestone this tick.
        """
        self.distance += current_speed * frame_scale(dt)
        self.score = score_for_distance(self.distance)
        if self.score > self.high_score:
            self.high_score = self.score

        if self.milestone_timer > 0:
            self.milestone_timer = max(0.0, self.milestone_timer - dt)

        milestone = self.score - self.score % MILESTONE_STEP
        if milestone > 0 and milestone > self._last_milestone:
            self._last_milestone = milestone
            self.milestone_timer = MILESTONE_FLASH_MS
            return True
        return False

    def reset(self) -> None:
        """New run. The high score is kept."""
        self.distance = 0.0
        self.score = 0
        self.milestone_timer = 0.0
        self._last_milestone = 0
