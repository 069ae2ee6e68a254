"""Tests for the particle system."""
from __future__ import annotations

import random

import pytest

from miffy_runner.config.settings import PerformanceSettings
from miffy_runner.simulation.entities import FRAME_MS
from miffy_runner.simulation.particles import HEART_BURST, Particle, ParticleSystem


def test_particle_physics_per_frame():
    particle = Particle(x=10, y=10, vx=2, vy=-1, decay=0.1)
    particle.update(FRAME_MS)
    assert particle.x == pytest.approx(12)
    assert particle.y == pytest.approx(9)
    assert particle.vy == pytest.approx(-0.8)
    assert particle.vx == pytest.approx(1.96)
    assert particle.life == pytest.approx(0.9)


class TestParticleSystem:
    def test_burst_uses_preset(self) -> None:
        system = ParticleSystem(rng=random.Random(1))
        assert system.burst(100, 50, HEART_BURST) == 8
        assert {p.shape for p in system.particles} == {"heart"}

    def test_cap_is_respected(self) -> None:
        system = ParticleSystem(PerformanceSettings(max_particles=12), random.Random(1))
        assert system.emit(0, 0, 10) == 10
        assert system.emit(0, 0, 10) == 2
        assert system.get_active_count() == 12

    def test_disabled_particles_emit_nothing(self) -> None:
        system = ParticleSystem(PerformanceSettings(enable_particles=False))
        assert system.emit(0, 0, 5) == 0
        assert system.get_active_count() == 0

    def test_faded_particles_are_dropped(self) -> None:
        system = ParticleSystem(rng=random.Random(1))
        system.emit(0, 0, 6)
        for _ in range(100):
            system.update(FRAME_MS)
        assert system.get_active_count() == 0

    def test_clear(self) -> None:
        system = ParticleSystem(rng=random.Random(1))
        system.emit(0, 0, 3)
        system.clear()
        assert system.particles == []
