"""Particle bursts for jumps, pickups and crashes."""

from typing import Any, Dict, List, Optional, Tuple
from dataclasses import dataclass
import math
import random

from miffy_runner.config.settings import PerformanceSettings
from miffy_runner.simulation.entities import frame_scale

GRAVITY = 0.2  # per 60 Hz frame
FRICTION = 0.98


@dataclass
class Particle:
    """A single particle with physics properties."""

    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    color: Tuple[int, int, int] = (255, 255, 255)
    shape: str = "circle"
    size: float = 3.0
    life: float = 1.0  # fades to 0
    decay: float = 0.02  # life lost per frame
    rotation: float = 0.0
    rotation_speed: float = 0.0

    @property
    def is_dead(self) -> bool:
        return self.life <= 0

    def update(self, delta_ms: float) -> None:
        """Update particle physics."""
        scale = frame_scale(delta_ms)
        self.x += self.vx * scale
        self.y += self.vy * scale
        self.vy += GRAVITY * scale
        self.vx *= FRICTION ** scale
        self.life -= self.decay * scale
        self.rotation += self.rotation_speed * scale

    def view(self) -> Dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "size": self.size,
            "alpha": max(0.0, self.life) * 0.8,
            "color": self.color,
            "shape": self.shape,
            "rotation": self.rotation,
        }


# Burst presets: (count, color, shape)
JUMP_BURST = (5, (144, 238, 144), "circle")
HEART_BURST = (8, (255, 20, 147), "heart")
CAKE_BURST = (16, (246, 194, 209), "heart")
CRASH_BURST = (10, (255, 105, 180), "heart")


class ParticleSystem:
    """Emits and manages particles, never holding more than the cap."""

    def __init__(self, settings: Optional[PerformanceSettings] = None,
                 rng: Optional[random.Random] = None):
        self.settings = settings or PerformanceSettings()
        self.rng = rng or random.Random()
        self.particles: List[Particle] = []

    def emit(self, x: float, y: float, count: int,
             color: Tuple[int, int, int] = (255, 255, 255), shape: str = "circle") -> int:
        """Emit up to ``count`` particles at (x, y). Returns how many were added."""
        if not self.settings.enable_particles:
            return 0

        added = 0
        for _ in range(count):
            if len(self.particles) >= self.settings.max_particles:
                break
            self.particles.append(self._create_particle(x, y, color, shape))
            added += 1
        return added

    def burst(self, x: float, y: float, preset: Tuple[int, Tuple[int, int, int], str]) -> int:
        count, color, shape = preset
        return self.emit(x, y, count, color, shape)

    def _create_particle(self, x: float, y: float, color: Tuple[int, int, int], shape: str) -> Particle:
        rng = self.rng
        return Particle(
            x=x,
            y=y,
            vx=(rng.random() - 0.5) * 5,
            vy=(rng.random() - 0.5) * 5 - 3,
            color=color,
            shape=shape,
            size=3 + rng.random() * 4,
            decay=0.015 + rng.random() * 0.015,
            rotation=rng.random() * math.tau,
            rotation_speed=(rng.random() - 0.5) * 0.2,
        )

    def update(self, delta_ms: float) -> None:
        """Update all particles and drop the faded ones."""
        for particle in self.particles:
            particle.update(delta_ms)
        self.particles = [p for p in self.particles if not p.is_dead]

    def clear(self) -> None:
        self.particles = []

    def get_active_count(self) -> int:
        return len(self.particles)
