"""
State machine for the run lifecycle.

States:
    IDLE: Not started yet (start prompt showing)
    PLAYING: Simulation advancing every tick
    CRASHED: Player hit an obstacle, waiting for restart
"""

from enum import Enum, auto
from typing import Callable
import logging

logger = logging.getLogger(__name__)


class RunPhase(Enum):
    """Run states."""
    IDLE = auto()
    PLAYING = auto()
    CRASHED = auto()


Listener = Callable[[RunPhase, RunPhase], None]


class RunStateMachine:
    """
    Guards run phase transitions.

    Only the transitions listed in VALID_TRANSITIONS are accepted; anything
    else is rejected with a warning and leaves the phase untouched.
    """

    VALID_TRANSITIONS: list[tuple[RunPhase, RunPhase]] = [
        (RunPhase.IDLE, RunPhase.PLAYING),       # start
        (RunPhase.PLAYING, RunPhase.CRASHED),    # game over
        (RunPhase.CRASHED, RunPhase.PLAYING),    # restart
    ]

    def __init__(self, initial_phase: RunPhase = RunPhase.IDLE) -> None:
        self._phase = initial_phase
        self._listeners: list[Listener] = []
        self._valid_transitions = set(self.VALID_TRANSITIONS)
        logger.debug(f"RunStateMachine initialized with phase: {initial_phase.name}")

    @property
    def phase(self) -> RunPhase:
        """Get current phase."""
        return self._phase

    @property
    def is_playing(self) -> bool:
        return self._phase == RunPhase.PLAYING

    @property
    def is_crashed(self) -> bool:
        return self._phase == RunPhase.CRASHED

    @property
    def has_started(self) -> bool:
        return self._phase != RunPhase.IDLE

    def can_transition(self, to_phase: RunPhase) -> bool:
        """Check if transition to given phase is valid."""
        return (self._phase, to_phase) in self._valid_transitions

    def transition(self, to_phase: RunPhase) -> bool:
        """
        Attempt to transition to a new phase.

        Returns:
            True if transition successful, False otherwise
        """
        if not self.can_transition(to_phase):
            logger.warning(
                f"Invalid transition: {self._phase.name} -> {to_phase.name}"
            )
            return False

        old_phase = self._phase
        self._phase = to_phase
        logger.info(f"Run transition: {old_phase.name} -> {to_phase.name}")

        for listener in self._listeners:
            try:
                listener(old_phase, to_phase)
            except Exception as e:
                logger.error(f"Error in run phase listener: {e}")

        return True

    def add_listener(self, callback: Listener) -> None:
        """Add a phase change listener."""
        self._listeners.append(callback)

    def remove_listener(self, callback: Listener) -> None:
        """Remove a phase change listener."""
        if callback in self._listeners:
            self._listeners.remove(callback)
