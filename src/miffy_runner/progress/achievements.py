"""Achievement catalog, unlock evaluation and cumulative stats."""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Dict, Iterable, List, Optional, Set

from miffy_runner.progress.store import ProgressBundle, ProgressStats, ProgressStore, StoreError

logger = logging.getLogger(__name__)

ALL_SEASONS_COUNT = 4
PLAY_TIME_GOAL_MS = 5 * 60 * 1000


@dataclass(frozen=True)
class Achievement:
    id: str
    name: str
    icon: str
    description: str


ACHIEVEMENTS: Dict[str, Achievement] = {
    a.id: a
    for a in (
        Achievement("firstJump", "First Jump", "🐰", "Complete your first jump"),
        Achievement("score100", "Score 100", "💯", "Reach 100 points"),
        Achievement("score500", "Fast Runner", "🏃", "Reach 500 points"),
        Achievement("score1000", "Legend Runner", "👑", "Reach 1000 points"),
        Achievement("jumps10", "Bouncy Bunny", "🦘", "Jump 10 times in one run"),
        Achievement("jumps50", "Sky Hopper", "✈️", "Jump 50 times in one run"),
        Achievement("dodge10", "Quick Dodge", "💨", "Dodge 10 obstacles"),
        Achievement("dodge50", "Untouchable", "⚡", "Dodge 50 obstacles"),
        Achievement("allSeasons", "Season Traveler", "🌍", "Play all seasons"),
        Achievement("playTime5", "Loyal Player", "⏰", "Play for 5 minutes total"),
    )
}


@dataclass(frozen=True)
class AchievementSnapshot:
    """The numbers achievements are judged on.

    Jump, score and dodge figures are for a single run; seasons and play
    time are cumulative.
    """

    jump_count: int = 0
    score: int = 0
    dodges: int = 0
    seasons_played: int = 0
    total_play_time: float = 0.0


# (achievement id, snapshot field, threshold)
THRESHOLDS = (
    ("firstJump", "jump_count", 1),
    ("jumps10", "jump_count", 10),
    ("jumps50", "jump_count", 50),
    ("score100", "score", 100),
    ("score500", "score", 500),
    ("score1000", "score", 1000),
    ("dodge10", "dodges", 10),
    ("dodge50", "dodges", 50),
    ("allSeasons", "seasons_played", ALL_SEASONS_COUNT),
    ("playTime5", "total_play_time", PLAY_TIME_GOAL_MS),
)


def evaluate_achievements(snapshot: AchievementSnapshot, unlocked: Iterable[str] = ()) -> List[str]:
    """Ids that ``snapshot`` earns and that are not unlocked yet."""
    already = set(unlocked)
    earned = []
    for achievement_id, attr, threshold in THRESHOLDS:
        if achievement_id in already or achievement_id in earned:
            continue
        if getattr(snapshot, attr) >= threshold:
            earned.append(achievement_id)
    return earned


@dataclass(frozen=True)
class RunSummary:
    """Final figures of one run."""

    score: int = 0
    jump_count: int = 0
    dodges: int = 0
    play_time: float = 0.0  # ms


class AchievementSystem:
    """Tracks unlocks and cumulative stats, persisting through a ProgressStore.

    Unlocks are monotonic. A failed save is logged and play continues with
    the in-memory state.
    """

    def __init__(self, store: Optional[ProgressStore] = None):
        self.store = store or ProgressStore()
        self.unlocked: Set[str] = set()
        self.stats = ProgressStats()
        self.pending: Deque[Achievement] = deque()
        self.load()

    def load(self) -> None:
        bundle = self.store.load()
        if bundle is None:
            return
        self.unlocked = {
            achievement_id
            for achievement_id, unlocked in bundle.achievements.items()
            if unlocked and achievement_id in ACHIEVEMENTS
        }
        self.stats = bundle.stats

    def save(self) -> bool:
        bundle = ProgressBundle(
            achievements={achievement_id: achievement_id in self.unlocked for achievement_id in ACHIEVEMENTS},
            stats=self.stats,
        )
        try:
            self.store.save(bundle)
        except StoreError as e:
            logger.warning(f"Unable to save achievement progress: {e}")
            return False
        return True

    def is_unlocked(self, achievement_id: str) -> bool:
        return achievement_id in self.unlocked

    def unlock(self, achievement_id: str) -> bool:
        """Unlock one achievement. Unknown or already unlocked ids are no-ops."""
        achievement = ACHIEVEMENTS.get(achievement_id)
        if achievement is None or achievement_id in self.unlocked:
            return False

        self.unlocked.add(achievement_id)
        self.pending.append(achievement)
        logger.info(f"Achievement unlocked: {achievement.name}")
        self.save()
        return True

    def check(self, run: RunSummary, season: str, commit_stats: bool = True) -> List[Achievement]:
        """Evaluate a run and return the achievements it newly unlocked.

        With ``commit_stats`` the run's jumps, dodges and play time are added
        to the cumulative totals. Callers pass False when re-checking a run
        whose stats were already committed.
        """
        if commit_stats:
            self.stats.total_jumps += run.jump_count
            self.stats.total_dodges += run.dodges
            self.stats.total_play_time += int(run.play_time)
        if run.score > self.stats.high_score:
            self.stats.high_score = run.score
        self.stats.seasons_played.add(season)

        snapshot = AchievementSnapshot(
            jump_count=run.jump_count,
            score=run.score,
            dodges=run.dodges,
            seasons_played=len(self.stats.seasons_played),
            total_play_time=self.stats.total_play_time,
        )
        newly = [ACHIEVEMENTS[a] for a in evaluate_achievements(snapshot, self.unlocked) if self.unlock(a)]
        self.save()
        return newly

    def get_next_notification(self) -> Optional[Achievement]:
        return self.pending.popleft() if self.pending else None

    @property
    def unlocked_count(self) -> int:
        return len(self.unlocked)

    @property
    def total_count(self) -> int:
        return len(ACHIEVEMENTS)

    def get_achievements(self) -> List[Dict[str, Any]]:
        return [
            {
                "id": a.id,
                "name": a.name,
                "icon": a.icon,
                "description": a.description,
                "unlocked": a.id in self.unlocked,
            }
            for a in ACHIEVEMENTS.values()
        ]

    def get_stats(self) -> Dict[str, Any]:
        stats = self.stats.to_record()
        stats["achievementsUnlocked"] = self.unlocked_count
        stats["achievementsTotal"] = self.total_count
        return stats

    def reset(self) -> None:
        """Forget every unlock and stat, in memory and in the store."""
        self.unlocked = set()
        self.stats = ProgressStats()
        self.pending.clear()
        try:
            self.store.clear()
        except StoreError as e:
            logger.warning(f"Unable to clear stored progress: {e}")
