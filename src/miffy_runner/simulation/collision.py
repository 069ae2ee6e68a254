"""Player-versus-world hit testing, pickups and dodge counting."""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from miffy_runner.simulation.entities import Collectible, Obstacle
from miffy_runner.simulation.geometry import boxes_collide
from miffy_runner.simulation.player import Player
from miffy_runner.simulation.world import LiveEntities

logger = logging.getLogger(__name__)


@dataclass
class CollisionReport:
    """Everything one tick of collision checks found."""

    hit: Optional[Obstacle] = None
    collected: List[Collectible] = field(default_factory=list)
    dodged: List[Obstacle] = field(default_factory=list)

    @property
    def crashed(self) -> bool:
        return self.hit is not None


def find_hit(player: Player, obstacles: Iterable[Obstacle]) -> Optional[Obstacle]:
    """First live obstacle overlapping the player, or None."""
    box = player.collision_box
    for obstacle in obstacles:
        if obstacle.remove:
            continue
        if boxes_collide(box, obstacle.collision_box):
            return obstacle
    return None


def collect_pickups(player: Player, collectibles: Iterable[Collectible]) -> List[Collectible]:
    """Collect every overlapping collectible. Already collected ones are skipped."""
    box = player.collision_box
    picked = []
    for item in collectibles:
        if item.collected or item.remove:
            continue
        if boxes_collide(box, item.collision_box):
            item.collect()
            picked.append(item)
    return picked


def count_dodges(player: Player, obstacles: Iterable[Obstacle]) -> List[Obstacle]:
    """Latch every obstacle that has fully passed the player.

    The latch is per obstacle and never reverts, so an obstacle is counted
    once whatever the frame timing. Removed obstacles still count if they
    passed the player before scrolling off.
    """
    passed = []
    for obstacle in obstacles:
        if obstacle.dodged:
            continue
        if obstacle.right < player.x:
            obstacle.dodged = True
            passed.append(obstacle)
    return passed


class CollisionEngine:
    """Runs the per-tick checks against the live lists."""

    def check(self, player: Player, world: LiveEntities) -> CollisionReport:
        """Obstacle hit, pickups and dodges for this tick.

        Pickups and dodges are gathered even on the tick the player crashes.
        """
        report = CollisionReport()

        report.hit = find_hit(player, world.obstacles)
        if report.hit is not None:
            logger.debug(f"Player hit {report.hit.kind.value} at x={report.hit.x:.0f}")

        report.collected.extend(collect_pickups(player, world.hearts))
        report.collected.extend(collect_pickups(player, world.cakes))
        report.dodged = count_dodges(player, world.obstacles)
        return report
