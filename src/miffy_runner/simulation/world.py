"""Per-category live entity lists."""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List

from miffy_runner.simulation.entities import Entity, compact


@dataclass
class LiveEntities:
    """Every live entity, one list per category.

    An entity belongs to exactly one list. Removed entities stay listed
    until ``compact`` runs once per tick, after collision checks.
    """

    clouds: List[Entity] = field(default_factory=list)
    decorations: List[Entity] = field(default_factory=list)
    falling_decorations: List[Entity] = field(default_factory=list)
    obstacles: List[Entity] = field(default_factory=list)
    hearts: List[Entity] = field(default_factory=list)
    cakes: List[Entity] = field(default_factory=list)

    CATEGORIES = (
        "clouds",
        "decorations",
        "falling_decorations",
        "obstacles",
        "hearts",
        "cakes",
    )

    def lists(self) -> Dict[str, List[Entity]]:
        return {name: getattr(self, name) for name in self.CATEGORIES}

    def __iter__(self) -> Iterator[Entity]:
        for name in self.CATEGORIES:
            yield from getattr(self, name)

    def __len__(self) -> int:
        return sum(len(getattr(self, name)) for name in self.CATEGORIES)

    def update(self, speed: float, dt: float) -> None:
        """Move every live entity."""
        for entity in self:
            if not entity.remove:
                entity.update(speed, dt)

    def compact(self) -> int:
        """Drop removed entities. Returns how many were dropped."""
        dropped = 0
        for name in self.CATEGORIES:
            entities = getattr(self, name)
            kept = compact(entities)
            dropped += len(entities) - len(kept)
            setattr(self, name, kept)
        return dropped

    def clear(self) -> None:
        for name in self.CATEGORIES:
            setattr(self, name, [])
