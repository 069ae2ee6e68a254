"""
Run controller.

Owns one attempt at a time and drives the per-tick pipeline:

    clock -> difficulty -> score -> spawns -> entity updates -> collisions

Inputs arrive as direct calls between ticks and are checked against the
current phase. Rendering reads ``snapshot()`` after ``tick()`` returns.
"""

import logging
import random
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from miffy_runner.config.settings import Settings, get_settings
from miffy_runner.core.clock import FrameClock
from miffy_runner.core.events import Event, EventBus, EventType
from miffy_runner.core.state import RunPhase, RunStateMachine
from miffy_runner.progress.achievements import Achievement, AchievementSystem, RunSummary
from miffy_runner.progress.store import ProgressStore, StoreError
from miffy_runner.simulation.collision import CollisionEngine
from miffy_runner.simulation.difficulty import DifficultyController
from miffy_runner.simulation.entities import EntityKind
from miffy_runner.simulation.particles import (
    CAKE_BURST,
    CRASH_BURST,
    HEART_BURST,
    JUMP_BURST,
    ParticleSystem,
)
from miffy_runner.simulation.player import Player
from miffy_runner.simulation.scoring import ScoreTracker
from miffy_runner.simulation.seasons import is_known_season
from miffy_runner.simulation.spawner import SpawnController
from miffy_runner.simulation.world import LiveEntities

logger = logging.getLogger(__name__)


@dataclass
class RunState:
    """Per-attempt counters. Distance and score live in the ScoreTracker."""

    goal_score: int = 1000
    dodge_count: int = 0
    hearts_collected: int = 0
    cake_collected_count: int = 0
    play_time: float = 0.0  # ms spent playing this run
    stats_committed: bool = False


class RunController:
    """Orchestrates player, spawner, difficulty, collisions and progress."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        store: Optional[ProgressStore] = None,
        event_bus: Optional[EventBus] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[FrameClock] = None,
    ):
        self.settings = settings or get_settings()
        self.rng = rng or random.Random()
        self.event_bus = event_bus or EventBus()
        self.clock = clock or FrameClock(max_delta_ms=self.settings.performance.max_delta_time)
        self.store = store or ProgressStore()

        self.season = self.settings.season
        self.phase = RunStateMachine()
        self.state = RunState(goal_score=self.settings.collectibles.cake_start_score)

        self.player = Player(self.settings.character, ground_level=self.settings.view.ground_y)
        self.difficulty = DifficultyController(self.settings.difficulty, self.settings.obstacles)
        self.spawner = SpawnController(self.settings, rng=self.rng, season=self.season)
        self.collisions = CollisionEngine()
        self.particles = ParticleSystem(self.settings.performance, rng=self.rng)
        self.world = LiveEntities()
        self.world.clouds.extend(self.spawner.initial_clouds())

        self.achievements = AchievementSystem(self.store)
        self._stored_high_score = max(self.store.load_high_score(), self.achievements.stats.high_score)
        self.score = ScoreTracker(high_score=self._stored_high_score)

    # -------------------------------------------------------------------------
    # Read-only views
    # -------------------------------------------------------------------------

    @property
    def playing(self) -> bool:
        return self.phase.is_playing

    @property
    def crashed(self) -> bool:
        return self.phase.is_crashed

    @property
    def started(self) -> bool:
        return self.phase.has_started

    @property
    def current_speed(self) -> float:
        return self.difficulty.current_speed

    @property
    def cakes_active(self) -> bool:
        return self.score.score >= self.state.goal_score

    def summary(self) -> RunSummary:
        return RunSummary(
            score=self.score.score,
            jump_count=self.player.jump_count,
            dodges=self.state.dodge_count,
            play_time=self.state.play_time,
        )

    def snapshot(self) -> Dict[str, Any]:
        """Render-facing state, valid until the next tick."""
        return {
            "phase": self.phase.phase.name.lower(),
            "season": self.season,
            "score": self.score.score,
            "high_score": self.score.high_score,
            "distance": self.score.distance,
            "milestone_flash": self.score.milestone_flash,
            "speed": self.difficulty.speed,
            "current_speed": self.current_speed,
            "speed_multiplier": self.difficulty.speed_multiplier,
            "dodge_count": self.state.dodge_count,
            "hearts_collected": self.state.hearts_collected,
            "cakes_collected": self.state.cake_collected_count,
            "goal_score": self.state.goal_score,
            "player": self.player.view(),
            "entities": {
                name: [entity.view() for entity in entities]
                for name, entities in self.world.lists().items()
            },
            "particles": [p.view() for p in self.particles.particles],
        }

    # -------------------------------------------------------------------------
    # Tick
    # -------------------------------------------------------------------------

    def tick(self, now_ms: Optional[float] = None) -> float:
        """Advance one frame. Returns the clamped delta in ms.

        Outside the playing phase only the clock moves.
        """
        dt = self.clock.tick(now_ms)
        if self.phase.is_playing:
            self._step(dt)
        return dt

    def _step(self, dt: float) -> None:
        current_speed = self.difficulty.advance(dt)

        if self.score.advance(current_speed, dt):
            self._emit(EventType.SCORE_MILESTONE, score=self.score.score)
        self.state.play_time += dt

        self.spawner.update(
            self.world,
            dt,
            current_speed=current_speed,
            obstacle_interval=self.difficulty.obstacle_interval(),
            run_time_ms=self.state.play_time,
            cakes_active=self.cakes_active,
        )

        self.player.update(dt)
        self.world.update(current_speed, dt)
        self.particles.update(dt)

        report = self.collisions.check(self.player, self.world)
        self.world.compact()

        for item in report.collected:
            center_x = item.x + item.width / 2
            center_y = item.y + item.height / 2
            if item.kind == EntityKind.CAKE:
                self.state.cake_collected_count += 1
                self.particles.burst(center_x, center_y, CAKE_BURST)
                self._emit(EventType.CAKE_COLLECTED, count=self.state.cake_collected_count)
            else:
                self.state.hearts_collected += 1
                self.particles.burst(center_x, center_y, HEART_BURST)
                self._emit(EventType.HEART_COLLECTED, count=self.state.hearts_collected)

        for obstacle in report.dodged:
            self.state.dodge_count += 1
            self._emit(EventType.OBSTACLE_DODGED, kind=obstacle.kind.value, count=self.state.dodge_count)

        if report.crashed:
            self.game_over()

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start(self) -> bool:
        """Leave the idle screen. Only valid once."""
        if self.started or not self.phase.transition(RunPhase.PLAYING):
            return False
        self.player.start_running()
        self._emit(EventType.RUN_STARTED, season=self.season)
        return True

    def game_over(self) -> bool:
        """End the run after a hit. Repeated calls are no-ops."""
        if not self.phase.is_playing:
            return False

        self.phase.transition(RunPhase.CRASHED)
        self.player.crash()
        self.particles.burst(self.player.x + 20, self.player.y + 25, CRASH_BURST)
        self._persist_high_score()

        unlocked = self._check_achievements()
        self._emit(EventType.GAME_OVER, score=self.score.score, high_score=self.score.high_score,
                   dodges=self.state.dodge_count, jumps=self.player.jump_count)
        self._announce(unlocked)
        return True

    def restart(self) -> bool:
        """Start a fresh run after a crash. Progress and high score survive."""
        if not self.phase.is_crashed:
            return False

        self._announce(self._check_achievements())

        self.state = RunState(goal_score=self.settings.collectibles.cake_start_score)
        self.score.reset()
        self.difficulty.reset()
        self.player.reset()
        self.spawner.reset()
        self.particles.clear()
        self.world.clear()
        self.world.clouds.extend(self.spawner.initial_clouds())

        self.phase.transition(RunPhase.PLAYING)
        self._emit(EventType.RUN_RESTARTED, season=self.season)
        return True

    def _check_achievements(self) -> List[Achievement]:
        """Evaluate the current run, committing its stats at most once."""
        unlocked = self.achievements.check(
            self.summary(),
            self.season,
            commit_stats=not self.state.stats_committed,
        )
        self.state.stats_committed = True
        return unlocked

    def _announce(self, unlocked: List[Achievement]) -> None:
        for achievement in unlocked:
            self._emit(EventType.ACHIEVEMENT_UNLOCKED, id=achievement.id, name=achievement.name,
                       icon=achievement.icon, description=achievement.description)

    def _persist_high_score(self) -> None:
        if self.score.high_score <= self._stored_high_score:
            return
        try:
            self.store.save_high_score(self.score.high_score)
        except StoreError as e:
            logger.warning(f"Unable to save high score: {e}")
            return
        self._stored_high_score = self.score.high_score
        logger.info(f"New high score: {self.score.high_score}")

    # -------------------------------------------------------------------------
    # Triggers
    # -------------------------------------------------------------------------

    def request_start(self) -> bool:
        if self.started:
            return False
        return self.start()

    def request_restart(self) -> bool:
        return self.restart()

    def request_jump(self) -> bool:
        if not self.phase.is_playing:
            return False
        if not self.player.jump():
            return False
        self.particles.burst(self.player.x + 20, self.player.y + self.player.height, JUMP_BURST)
        self._emit(EventType.JUMP, count=self.player.jump_count)
        return True

    def request_duck_start(self) -> bool:
        if not self.phase.is_playing:
            return False
        return self.player.duck(True)

    def request_duck_end(self) -> bool:
        if not self.phase.is_playing:
            return False
        return self.player.duck(False)

    def request_speed_drop(self) -> bool:
        if not self.phase.is_playing:
            return False
        return self.player.speed_drop()

    def request_tap(self) -> bool:
        """Single-button input: start, restart or jump depending on the phase."""
        if not self.started:
            return self.start()
        if self.crashed:
            return self.restart()
        return self.request_jump()

    # -------------------------------------------------------------------------
    # Settings and records
    # -------------------------------------------------------------------------

    def set_speed_multiplier(self, value) -> bool:
        if not self.difficulty.set_speed_multiplier(value):
            logger.warning(f"Ignoring invalid speed multiplier: {value!r}")
            return False
        self._emit(EventType.SPEED_MULTIPLIER_CHANGED, value=self.difficulty.speed_multiplier)
        return True

    def set_season(self, season) -> bool:
        if not is_known_season(season):
            logger.warning(f"Ignoring unknown season: {season!r}")
            return False
        self.season = season
        self.spawner.season = season
        self._emit(EventType.SEASON_CHANGED, season=season)
        return True

    def get_achievements(self) -> List[Dict[str, Any]]:
        return self.achievements.get_achievements()

    def get_stats(self) -> Dict[str, Any]:
        return self.achievements.get_stats()

    def get_next_notification(self) -> Optional[Achievement]:
        """Oldest unlock not yet shown to the player, or None."""
        return self.achievements.get_next_notification()

    def reset_records(self) -> None:
        """Wipe achievements, stats and the stored high score."""
        self.achievements.reset()
        self._stored_high_score = 0
        self.score.high_score = self.score.score
        logger.info("Progress records reset")

    def _emit(self, event_type: EventType, **data: Any) -> None:
        self.event_bus.emit(Event(type=event_type, data=data, source="run"))
