"""Procedural spawning of obstacles, collectibles and ambient decoration.

Every category keeps an (elapsed, target) timer. When the timer is due and
the category is under its cap, one entity is created and the timer restarts,
re-rolling the target where the category uses an interval range.

Obstacle kinds come from an ordered, non-overlapping draw over one uniform
roll. A band whose speed gate fails falls through to the next band instead
of re-rolling, so slow runs see more tulips than the raw weights suggest.
"""

import logging
import random
from dataclasses import dataclass
from typing import List, Optional

from miffy_runner.config.settings import ObstacleSettings, Settings
from miffy_runner.simulation.entities import (
    Bear,
    Butterfly,
    Cake,
    Cloud,
    Decoration,
    Entity,
    EntityKind,
    FallingDecoration,
    Heart,
    Obstacle,
    Tulip,
    TulipCluster,
)
from miffy_runner.simulation.seasons import DEFAULT_SEASON, get_season_table
from miffy_runner.simulation.world import LiveEntities

logger = logging.getLogger(__name__)


def choose_obstacle_kind(roll: float, current_speed: float, settings: ObstacleSettings) -> EntityKind:
    """Map a uniform roll in [0, 1) to an obstacle kind."""
    chances = settings.spawn_chances
    bear_band = chances.bear
    butterfly_band = bear_band + chances.butterfly
    cluster_band = butterfly_band + chances.tulip_cluster

    if roll < bear_band and current_speed > settings.min_speed_for_bear:
        return EntityKind.BEAR
    if roll < butterfly_band and current_speed > settings.min_speed_for_butterfly:
        return EntityKind.BUTTERFLY
    if roll < cluster_band:
        return EntityKind.TULIP_CLUSTER
    return EntityKind.TULIP


@dataclass(frozen=True)
class TulipPolicy:
    """Tulip sizing in effect for one spawn."""

    min_count: int
    max_count: int
    spacing: float
    large_chance: float
    small_only: bool
    single_large_chance: float


def tulip_policy(settings: ObstacleSettings, early_game: bool) -> TulipPolicy:
    """Cluster and single-tulip sizing, tightened during the early game."""
    cluster = settings.tulip_cluster
    if not early_game:
        return TulipPolicy(
            min_count=cluster.min_count,
            max_count=max(cluster.min_count, cluster.max_count),
            spacing=cluster.spacing,
            large_chance=cluster.large_chance,
            small_only=False,
            single_large_chance=settings.single_tulip_large_chance,
        )

    max_count = min(cluster.max_count, settings.early_game_max_cluster_count)
    return TulipPolicy(
        min_count=min(cluster.min_count, max_count),
        max_count=max_count,
        spacing=settings.early_game_cluster_spacing,
        large_chance=settings.early_game_large_chance,
        small_only=settings.early_game_small_only,
        single_large_chance=settings.early_game_single_tulip_large_chance,
    )


@dataclass
class SpawnTimer:
    """Elapsed time toward the next spawn.

    With ``max_interval`` unset the target is the fixed ``min_interval``;
    otherwise it is re-rolled uniformly in [min, max] after each spawn.
    A target of 0 means "not rolled yet".
    """

    min_interval: float
    max_interval: Optional[float] = None
    elapsed: float = 0.0
    target: float = 0.0

    def roll(self, rng: random.Random) -> float:
        if self.max_interval is None:
            self.target = self.min_interval
        else:
            low, high = sorted((self.min_interval, self.max_interval))
            if float(low).is_integer() and float(high).is_integer():
                self.target = float(rng.randint(int(low), int(high)))
            else:
                self.target = rng.uniform(low, high)
        return self.target

    def advance(self, dt: float) -> None:
        self.elapsed += dt

    def due(self, rng: random.Random, interval: Optional[float] = None) -> bool:
        if interval is not None:
            self.target = interval
        elif self.target <= 0:
            self.roll(rng)
        return self.elapsed >= self.target

    def restart(self, rng: random.Random) -> None:
        """Start counting toward a fresh target after a spawn."""
        self.elapsed = 0.0
        self.roll(rng)

    def reset(self) -> None:
        self.elapsed = 0.0
        self.target = 0.0


class SpawnController:
    """Decides, each tick, which new entities enter the playfield."""

    def __init__(self, settings: Settings, rng: Optional[random.Random] = None,
                 season: str = DEFAULT_SEASON):
        self.settings = settings
        self.rng = rng or random.Random()
        self.season = season

        view = settings.view
        self.width = view.width
        self.height = view.height
        self.ground_y = view.ground_y

        collectibles = settings.collectibles
        self.clouds = SpawnTimer(settings.clouds.spawn_interval_ms)
        self.decorations = SpawnTimer(settings.decorations.spawn_interval_ms)
        self.falling = SpawnTimer(settings.decorations.falling_spawn_interval_ms)
        self.obstacles = SpawnTimer(settings.obstacles.base_interval)
        self.hearts = SpawnTimer(collectibles.heart_min_interval_ms, collectibles.heart_max_interval_ms)
        self.cakes = SpawnTimer(collectibles.cake_min_interval_ms, collectibles.cake_max_interval_ms)

    @property
    def timers(self) -> dict:
        return {
            "clouds": self.clouds,
            "decorations": self.decorations,
            "falling_decorations": self.falling,
            "obstacles": self.obstacles,
            "hearts": self.hearts,
            "cakes": self.cakes,
        }

    def reset(self) -> None:
        """Zero every timer for a new run."""
        for timer in self.timers.values():
            timer.reset()

    def is_early_game(self, run_time_ms: float) -> bool:
        return run_time_ms < self.settings.obstacles.early_game_duration_ms

    def initial_clouds(self) -> List[Entity]:
        count = self.settings.clouds.initial_count
        low, high = 50, max(50, self.width - 50)
        return [Cloud(self.rng.randint(low, high), rng=self.rng) for _ in range(count)]

    def update(
        self,
        world: LiveEntities,
        dt: float,
        current_speed: float,
        obstacle_interval: float,
        run_time_ms: float,
        cakes_active: bool,
    ) -> List[Entity]:
        """Advance every timer by ``dt`` and append whatever became due.

        Returns the entities created this tick.
        """
        spawned: List[Entity] = []

        self.clouds.advance(dt)
        if self.clouds.due(self.rng) and len(world.clouds) < self.settings.clouds.max_count:
            spawned.append(self._add(world.clouds, Cloud(self.width, rng=self.rng)))
            self.clouds.restart(self.rng)

        spawned.extend(self._spawn_decorations(world, dt))

        self.obstacles.advance(dt)
        if self.obstacles.due(self.rng, interval=obstacle_interval):
            obstacle = self.create_obstacle(current_speed, run_time_ms)
            spawned.append(self._add(world.obstacles, obstacle))
            self.obstacles.elapsed = 0.0

        collectibles = self.settings.collectibles
        self.hearts.advance(dt)
        if self.hearts.due(self.rng) and len(world.hearts) < collectibles.max_hearts:
            x = self.width + self.rng.randint(20, 120)
            spawned.append(self._add(world.hearts, Heart(x, self.ground_y, rng=self.rng)))
            self.hearts.restart(self.rng)

        if cakes_active:
            self.cakes.advance(dt)
            if self.cakes.due(self.rng) and len(world.cakes) < collectibles.max_cakes:
                x = self.width + self.rng.randint(60, 140)
                spawned.append(self._add(world.cakes, Cake(x, self.ground_y, rng=self.rng)))
                self.cakes.restart(self.rng)

        return spawned

    def _spawn_decorations(self, world: LiveEntities, dt: float) -> List[Entity]:
        spawned: List[Entity] = []
        decoration_settings = self.settings.decorations
        table = get_season_table(self.season) or get_season_table(DEFAULT_SEASON)

        self.decorations.advance(dt)
        if self.decorations.due(self.rng) and len(world.decorations) < decoration_settings.max_count:
            if table.flying:
                kind = self.rng.choice(table.flying)
                spawned.append(self._add(world.decorations, Decoration(self.width, kind, rng=self.rng)))
            self.decorations.restart(self.rng)

        self.falling.advance(dt)
        if self.falling.due(self.rng) and len(world.falling_decorations) < decoration_settings.falling_max_count:
            if table.falling:
                glyph = self.rng.choice(table.falling)
                decoration = FallingDecoration(self.width, self.height, glyph, rng=self.rng)
                spawned.append(self._add(world.falling_decorations, decoration))
            self.falling.restart(self.rng)

        return spawned

    def create_obstacle(self, current_speed: float, run_time_ms: float) -> Obstacle:
        """Build the next obstacle at the right edge."""
        settings = self.settings.obstacles
        policy = tulip_policy(settings, self.is_early_game(run_time_ms))
        kind = choose_obstacle_kind(self.rng.random(), current_speed, settings)

        if kind == EntityKind.BEAR:
            return Bear(self.width, self.ground_y, rng=self.rng)
        if kind == EntityKind.BUTTERFLY:
            return Butterfly(self.width, self.ground_y, rng=self.rng)
        if kind == EntityKind.TULIP_CLUSTER:
            count = self.rng.randint(policy.min_count, policy.max_count)
            return TulipCluster(
                self.width,
                self.ground_y,
                count=count,
                min_count=policy.min_count,
                max_count=policy.max_count,
                spacing=policy.spacing,
                large_chance=policy.large_chance,
                small_only=policy.small_only,
                rng=self.rng,
            )

        size = "large" if self.rng.random() < policy.single_large_chance else "small"
        return Tulip(self.width, self.ground_y, size=size, rng=self.rng)

    @staticmethod
    def _add(entities: List[Entity], entity: Entity) -> Entity:
        entities.append(entity)
        logger.debug(f"Spawned {entity.kind.value} at x={entity.x:.0f}")
        return entity
