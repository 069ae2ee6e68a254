"""
Persisted progress: achievement unlocks, cumulative stats and high score.

Two independent records are kept under fixed keys. The backend only moves
strings in and out; encoding and validation live in ``ProgressStore`` so a
corrupt record can be treated as "no prior data" in one place.
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Set

logger = logging.getLogger(__name__)

ACHIEVEMENTS_KEY = "miffyRunnerAchievements"
HIGH_SCORE_KEY = "miffyRunnerHighScore"


class StoreError(Exception):
    """A record could not be read or written."""


# =============================================================================
# Backends
# =============================================================================

class RecordBackend(ABC):
    """Key-value string storage."""

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """Return the stored text, or None if the key was never written."""

    @abstractmethod
    def write(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        ...


class JsonFileBackend(RecordBackend):
    """One ``<key>.json`` file per record under ``data_dir``."""

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir).expanduser()

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def read(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StoreError(f"Failed to read {path}: {e}") from e

    def write(self, key: str, value: str) -> None:
        path = self._path(key)
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(value, encoding="utf-8")
        except OSError as e:
            raise StoreError(f"Failed to write {path}: {e}") from e

    def delete(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StoreError(f"Failed to delete {path}: {e}") from e


class MemoryBackend(RecordBackend):
    """In-process storage, used by tests and when persistence is disabled."""

    def __init__(self, records: Optional[Dict[str, str]] = None):
        self.records: Dict[str, str] = dict(records or {})

    def read(self, key: str) -> Optional[str]:
        return self.records.get(key)

    def write(self, key: str, value: str) -> None:
        self.records[key] = value

    def delete(self, key: str) -> None:
        self.records.pop(key, None)


# =============================================================================
# Records
# =============================================================================

def _non_negative_int(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if value != value or value in (float("inf"), float("-inf")):
        return 0
    return max(0, int(value))


@dataclass
class ProgressStats:
    """Cumulative stats across every run."""

    total_jumps: int = 0
    total_dodges: int = 0
    total_play_time: int = 0  # ms
    high_score: int = 0
    seasons_played: Set[str] = field(default_factory=set)

    def to_record(self) -> Dict[str, Any]:
        return {
            "totalJumps": self.total_jumps,
            "totalDodges": self.total_dodges,
            "totalPlayTime": self.total_play_time,
            "highScore": self.high_score,
            "seasonsPlayed": sorted(self.seasons_played),
        }

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> "ProgressStats":
        seasons = data.get("seasonsPlayed") or []
        if not isinstance(seasons, list):
            seasons = []
        return cls(
            total_jumps=_non_negative_int(data.get("totalJumps", 0)),
            total_dodges=_non_negative_int(data.get("totalDodges", 0)),
            total_play_time=_non_negative_int(data.get("totalPlayTime", 0)),
            high_score=_non_negative_int(data.get("highScore", 0)),
            seasons_played={s for s in seasons if isinstance(s, str)},
        )


@dataclass
class ProgressBundle:
    """Achievement unlock flags plus cumulative stats."""

    achievements: Dict[str, bool] = field(default_factory=dict)
    stats: ProgressStats = field(default_factory=ProgressStats)

    def to_record(self) -> Dict[str, Any]:
        return {
            "achievements": {
                achievement_id: {"unlocked": unlocked}
                for achievement_id, unlocked in self.achievements.items()
            },
            "stats": self.stats.to_record(),
        }

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> "ProgressBundle":
        """Build a bundle from decoded JSON. Raises ValueError on a bad shape."""
        if not isinstance(data, dict):
            raise ValueError("progress record is not an object")

        raw_achievements = data.get("achievements") or {}
        raw_stats = data.get("stats") or {}
        if not isinstance(raw_achievements, dict) or not isinstance(raw_stats, dict):
            raise ValueError("progress record has malformed sections")

        achievements = {}
        for achievement_id, entry in raw_achievements.items():
            if isinstance(entry, dict):
                achievements[achievement_id] = entry.get("unlocked") is True
        return cls(achievements=achievements, stats=ProgressStats.from_record(raw_stats))


class ProgressStore:
    """Reads and writes the progress and high score records.

    Loading never raises: a missing, unreadable or corrupt record yields
    None (or 0 for the high score) and a warning. Saving raises
    ``StoreError`` so the caller decides how loud a failed write is.
    """

    def __init__(self, backend: Optional[RecordBackend] = None):
        self.backend = backend or MemoryBackend()

    def load(self) -> Optional[ProgressBundle]:
        try:
            raw = self.backend.read(ACHIEVEMENTS_KEY)
        except StoreError as e:
            logger.warning(f"Unable to load achievement progress: {e}")
            return None
        if raw is None:
            return None

        try:
            bundle = ProgressBundle.from_record(json.loads(raw))
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning(f"Ignoring corrupt achievement progress: {e}")
            return None

        logger.info(f"Loaded progress ({sum(bundle.achievements.values())} achievements unlocked)")
        return bundle

    def save(self, bundle: ProgressBundle) -> None:
        try:
            text = json.dumps(bundle.to_record(), indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise StoreError(f"Failed to encode progress: {e}") from e
        self.backend.write(ACHIEVEMENTS_KEY, text)

    def load_high_score(self) -> int:
        try:
            raw = self.backend.read(HIGH_SCORE_KEY)
        except StoreError as e:
            logger.warning(f"Unable to load high score: {e}")
            return 0
        if raw is None:
            return 0

        try:
            return _non_negative_int(json.loads(raw))
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning(f"Ignoring corrupt high score: {e}")
            return 0

    def save_high_score(self, score: int) -> None:
        self.backend.write(HIGH_SCORE_KEY, json.dumps(_non_negative_int(score)))

    def clear(self) -> None:
        """Delete both records."""
        self.backend.delete(ACHIEVEMENTS_KEY)
        self.backend.delete(HIGH_SCORE_KEY)
        logger.info("Cleared stored progress")


def create_store(backend: str = "file", data_dir: Optional[Path] = None) -> ProgressStore:
    """Build a store for the configured backend name."""
    if backend == "memory" or data_dir is None:
        return ProgressStore(MemoryBackend())
    return ProgressStore(JsonFileBackend(data_dir))
