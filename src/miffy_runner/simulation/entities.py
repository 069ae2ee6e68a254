"""Moving simulation objects: obstacles, collectibles and ambient decoration.

Every entity scrolls right-to-left by ``update(speed, dt)`` and raises its
``remove`` flag once it is fully off-screen or consumed. The flag never
reverts. Obstacles and collectibles also expose a collision rectangle inset
from their bounding box.

Speeds are expressed in pixels per 60 Hz frame, so every displacement is
scaled by ``dt / FRAME_MS`` to stay frame-rate independent.
"""

import math
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from miffy_runner.simulation.geometry import Rect, union

FRAME_MS = 1000.0 / 60.0

TULIP_SIZES = {
    "small": (18, 28),
    "large": (26, 38),
}


def frame_scale(dt: float) -> float:
    """How many 60 Hz frames ``dt`` milliseconds represent."""
    return dt / FRAME_MS


class EntityKind(Enum):
    TULIP = "tulip"
    TULIP_CLUSTER = "tulip_cluster"
    BEAR = "bear"
    BUTTERFLY = "butterfly"
    HEART = "heart"
    CAKE = "cake"
    CLOUD = "cloud"
    DECORATION = "decoration"
    FALLING_DECORATION = "falling_decoration"


class EntityCategory(Enum):
    OBSTACLE = "obstacle"
    COLLECTIBLE = "collectible"
    AMBIENT = "ambient"


class Entity(ABC):
    """Anything that moves with the scroll."""

    kind: EntityKind
    category: EntityCategory = EntityCategory.AMBIENT

    def __init__(self, x: float, y: float, width: float, height: float):
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        self._remove = False

    @property
    def remove(self) -> bool:
        """True once the entity should be dropped from its live list."""
        return self._remove

    def mark_removed(self) -> None:
        self._remove = True

    @property
    def bounds(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)

    @property
    def right(self) -> float:
        return self.x + self.width

    @abstractmethod
    def update(self, speed: float, dt: float) -> None:
        """Advance by ``dt`` milliseconds at scroll ``speed``."""

    def _scroll(self, distance: float) -> None:
        self.x -= distance
        if self.x + self.width < 0:
            self.mark_removed()

    def view(self) -> Dict[str, Any]:
        """Render-facing description."""
        return {
            "kind": self.kind.value,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
        }


class CollidableEntity(Entity):
    """Entity with a hit box inset from its bounds."""

    # (left, top, shrink width, shrink height)
    COLLISION_INSET: Tuple[float, float, float, float] = (0, 0, 0, 0)

    @property
    def collision_box(self) -> Rect:
        return self.bounds.inset(*self.COLLISION_INSET)


class Obstacle(CollidableEntity):
    category = EntityCategory.OBSTACLE

    def __init__(self, x: float, y: float, width: float, height: float):
        super().__init__(x, y, width, height)
        self.dodged = False


class Collectible(CollidableEntity):
    category = EntityCategory.COLLECTIBLE

    def __init__(self, x: float, y: float, width: float, height: float):
        super().__init__(x, y, width, height)
        self.collected = False

    def collect(self) -> None:
        self.collected = True
        self.mark_removed()


# =============================================================================
# Obstacles
# =============================================================================

class Tulip(Obstacle):
    """Single ground tulip, small or large."""

    kind = EntityKind.TULIP
    COLLISION_INSET = (2, 4, 4, 6)

    def __init__(self, x: float, ground_y: float, size: str = "small",
                 rng: Optional[random.Random] = None):
        rng = rng or random.Random()
        width, height = TULIP_SIZES.get(size, TULIP_SIZES["small"])
        super().__init__(x, ground_y - height, width, height)
        self.size = size if size in TULIP_SIZES else "small"
        self.palette_index = rng.randrange(3)

    def update(self, speed: float, dt: float) -> None:
        self._scroll(speed * frame_scale(dt))


@dataclass
class ClusterMember:
    size: str
    width: int
    height: int
    offset_x: float
    palette_index: int


class TulipCluster(Obstacle):
    """A row of tulips that must be cleared as one obstacle.

    Members are bottom-aligned on the ground and laid out left to right,
    each offset by the previous member's width plus ``spacing``.
    """

    kind = EntityKind.TULIP_CLUSTER
    COLLISION_INSET = (2, 4, 4, 6)

    def __init__(
        self,
        x: float,
        ground_y: float,
        count: int = 3,
        min_count: int = 2,
        max_count: int = 4,
        spacing: float = 6.5,
        large_chance: float = 0.4,
        small_only: bool = False,
        rng: Optional[random.Random] = None,
    ):
        rng = rng or random.Random()
        self.count = max(min_count, min(max_count, count))
        self.count = max(1, self.count)
        self.spacing = spacing
        self.members: List[ClusterMember] = []

        offset = 0.0
        for _ in range(self.count):
            if small_only:
                size = "small"
            else:
                size = "large" if rng.random() < large_chance else "small"
            width, height = TULIP_SIZES[size]
            self.members.append(ClusterMember(size, width, height, offset, rng.randrange(3)))
            offset += width + spacing

        self.ground_y = ground_y
        box = union(self._member_rects(x))
        super().__init__(box.x, box.y, box.width, box.height)

    def _member_rects(self, x: float) -> List[Rect]:
        return [
            Rect(x + m.offset_x, self.ground_y - m.height, m.width, m.height)
            for m in self.members
        ]

    def member_rects(self) -> List[Rect]:
        """Current bounds of each member tulip."""
        return self._member_rects(self.x)

    def update(self, speed: float, dt: float) -> None:
        self._scroll(speed * frame_scale(dt))

    def view(self) -> Dict[str, Any]:
        info = super().view()
        info["members"] = [
            {"size": m.size, "offset_x": m.offset_x, "width": m.width, "height": m.height}
            for m in self.members
        ]
        return info


class Butterfly(Obstacle):
    """Flying obstacle on a wavy path at one of three height tiers."""

    kind = EntityKind.BUTTERFLY
    COLLISION_INSET = (5, 5, 10, 10)
    HEIGHT_TIERS = (80, 60, 40)  # above the ground line

    def __init__(self, x: float, ground_y: float, rng: Optional[random.Random] = None):
        rng = rng or random.Random()
        self.base_y = ground_y - rng.choice(self.HEIGHT_TIERS)
        super().__init__(x, self.base_y, 40, 30)

        self.time = rng.random() * math.pi * 2
        self.amplitude = 15 + rng.random() * 10
        self.frequency = 0.002 + rng.random() * 0.001
        self.speed_variation = 0.8 + rng.random() * 0.4
        self.tilt = 0.0
        self.wing_frame = 0
        self._wing_timer = 0.0
        self.wing_interval = 80.0

    def update(self, speed: float, dt: float) -> None:
        speed_mod = 1 + math.sin(self.time * 2) * 0.2
        step = speed * 1.2 * self.speed_variation * speed_mod * frame_scale(dt)

        self._wing_timer += dt
        if self._wing_timer >= self.wing_interval:
            self.wing_frame = (self.wing_frame + 1) % 2
            self._wing_timer = 0.0

        self.time += self.frequency * dt
        self.y = self.base_y + math.sin(self.time) * self.amplitude

        y_velocity = math.cos(self.time) * self.amplitude * self.frequency
        target_tilt = max(-0.3, min(0.3, y_velocity * 0.02))
        self.tilt += (target_tilt - self.tilt) * 0.1

        self._scroll(step)


class Bear(Obstacle):
    """Low-flying bear; standing height hits it, ducking clears it."""

    kind = EntityKind.BEAR
    COLLISION_INSET = (8, 8, 16, 16)

    def __init__(self, x: float, ground_y: float, rng: Optional[random.Random] = None):
        rng = rng or random.Random()
        self.base_y = ground_y - 55
        super().__init__(x, self.base_y, 50, 50)
        self.time = rng.random() * math.pi * 2
        self.amplitude = 5.0
        self.frequency = 0.003

    def update(self, speed: float, dt: float) -> None:
        self.time += self.frequency * dt
        self.y = self.base_y + math.sin(self.time) * self.amplitude
        self._scroll(speed * 0.9 * frame_scale(dt))


# =============================================================================
# Collectibles
# =============================================================================

class Heart(Collectible):
    kind = EntityKind.HEART
    COLLISION_INSET = (2, 2, 4, 4)
    HEIGHT_TIERS = (80, 60, 40, 20)

    def __init__(self, x: float, ground_y: float, rng: Optional[random.Random] = None):
        rng = rng or random.Random()
        self.base_y = ground_y - rng.choice(self.HEIGHT_TIERS)
        super().__init__(x, self.base_y, 24, 24)
        self.time = rng.random() * math.pi * 2
        self.amplitude = 8.0
        self.frequency = 0.003
        self.pulse = 0.0

    def update(self, speed: float, dt: float) -> None:
        self.time += self.frequency * dt
        self.y = self.base_y + math.sin(self.time) * self.amplitude
        self.pulse = (self.pulse + dt * 0.005) % (math.pi * 2)
        self._scroll(speed * 0.8 * frame_scale(dt))


class Cake(Collectible):
    """Goal cake, only offered once the run reaches the goal score."""

    kind = EntityKind.CAKE
    COLLISION_INSET = (4, 4, 8, 8)

    def __init__(self, x: float, ground_y: float, rng: Optional[random.Random] = None):
        rng = rng or random.Random()
        super().__init__(x, ground_y - 28 - 4, 36, 28)
        self.float_phase = rng.random() * math.pi * 2

    def update(self, speed: float, dt: float) -> None:
        scale = frame_scale(dt)
        self.float_phase += dt * 0.004
        self.y += math.sin(self.float_phase) * 0.4 * scale
        self._scroll(speed * 0.6 * scale)


# =============================================================================
# Ambient
# =============================================================================

class Cloud(Entity):
    kind = EntityKind.CLOUD

    def __init__(self, x: float, rng: Optional[random.Random] = None):
        rng = rng or random.Random()
        width = rng.randint(40, 70)
        super().__init__(x, rng.randint(20, 60), width, width // 3)
        self.drift = 0.5

    def update(self, speed: float, dt: float) -> None:
        self._scroll((self.drift + speed * 0.1) * frame_scale(dt))


class Decoration(Entity):
    """Flying background critter (bird, bee, butterfly, squirrel)."""

    kind = EntityKind.DECORATION
    OFFSCREEN_X = -40

    def __init__(self, x: float, decoration_type: str, rng: Optional[random.Random] = None):
        rng = rng or random.Random()
        self.scale = 0.8 + rng.random() * 0.4
        size = round(20 * self.scale)
        super().__init__(x, rng.randint(26, 90), size, size)
        self.decoration_type = decoration_type
        self.drift = 0.5 + rng.random() * 0.4
        self.wing_phase = rng.random() * math.pi * 2
        self.float_phase = rng.random() * math.pi * 2

    def update(self, speed: float, dt: float) -> None:
        scale = frame_scale(dt)
        self.x -= (self.drift + speed * 0.08) * scale
        self.wing_phase += 0.18 * scale + dt * 0.002
        self.float_phase += 0.03 * scale
        self.y += math.sin(self.float_phase) * 0.2 * scale
        if self.x < self.OFFSCREEN_X:
            self.mark_removed()

    def view(self) -> Dict[str, Any]:
        info = super().view()
        info["type"] = self.decoration_type
        return info


class FallingDecoration(Entity):
    """Petal, leaf or snowflake drifting down from the top edge."""

    kind = EntityKind.FALLING_DECORATION

    def __init__(self, view_width: int, view_height: int, glyph: str,
                 rng: Optional[random.Random] = None):
        rng = rng or random.Random()
        size = rng.randint(12, 20)
        super().__init__(rng.randint(0, view_width), -20, size, size)
        self.glyph = glyph
        self.floor_y = view_height
        self.fall_speed = 0.5 + rng.random()
        self.sway_speed = 0.002 + rng.random() * 0.003
        self.sway_amount = 10 + rng.random() * 20
        self.time = rng.random() * math.pi * 2
        self.rotation = 0.0
        self.rotation_speed = (rng.random() - 0.5) * 0.05
        self.display_x = self.x

    def update(self, speed: float, dt: float) -> None:
        scale = frame_scale(dt)
        self.y += self.fall_speed * scale
        self.time += self.sway_speed * dt
        self.display_x = self.x + math.sin(self.time) * self.sway_amount
        self.rotation += self.rotation_speed * scale
        if self.y > self.floor_y:
            self.mark_removed()

    def view(self) -> Dict[str, Any]:
        info = super().view()
        info["x"] = self.display_x
        info["glyph"] = self.glyph
        info["rotation"] = self.rotation
        return info


def compact(entities: List[Entity]) -> List[Entity]:
    """Drop removed entities, keeping order."""
    return [e for e in entities if not e.remove]
