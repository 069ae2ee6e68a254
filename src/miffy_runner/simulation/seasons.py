"""Season spawn tables.

Each season decides which ambient decorations may appear:
- flying: kinds used by the right-to-left Decoration spawner
- falling: glyphs used by the FallingDecoration spawner (may be empty)

Palettes live with the renderer; only the spawn-relevant sets are here.
"""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class SeasonTable:
    """Spawn-relevant lookup for one season."""

    id: str
    flying: Tuple[str, ...]
    falling: Tuple[str, ...]


# =============================================================================
# SEASONS
# =============================================================================
SPRING = SeasonTable(
    id="spring",
    flying=("bird", "bee", "butterfly"),
    falling=("🌸",),  # cherry blossom petals
)

SUMMER = SeasonTable(
    id="summer",
    flying=("butterfly", "bee", "bird"),
    falling=(),
)

AUTUMN = SeasonTable(
    id="autumn",
    flying=("bird", "squirrel"),
    falling=("🍂", "🍁"),  # maple leaves
)

WINTER = SeasonTable(
    id="winter",
    flying=("bird",),
    falling=("❄️",),
)


SEASON_TABLES = {
    SPRING.id: SPRING,
    SUMMER.id: SUMMER,
    AUTUMN.id: AUTUMN,
    WINTER.id: WINTER,
}

DEFAULT_SEASON = SPRING.id


def get_season_table(season_id: str) -> Optional[SeasonTable]:
    """Look up a season, None if the id is unknown."""
    return SEASON_TABLES.get(season_id)


def is_known_season(season_id: object) -> bool:
    return isinstance(season_id, str) and season_id in SEASON_TABLES
