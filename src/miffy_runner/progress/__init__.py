"""Achievements, cumulative stats and their persistence."""

from miffy_runner.progress.achievements import (
    ACHIEVEMENTS,
    Achievement,
    AchievementSnapshot,
    AchievementSystem,
    RunSummary,
    evaluate_achievements,
)
from miffy_runner.progress.store import (
    JsonFileBackend,
    MemoryBackend,
    ProgressBundle,
    ProgressStats,
    ProgressStore,
    RecordBackend,
    StoreError,
    create_store,
)

__all__ = [
    "ACHIEVEMENTS",
    "Achievement",
    "AchievementSnapshot",
    "AchievementSystem",
    "RunSummary",
    "evaluate_achievements",
    "JsonFileBackend",
    "MemoryBackend",
    "ProgressBundle",
    "ProgressStats",
    "ProgressStore",
    "RecordBackend",
    "StoreError",
    "create_store",
]
