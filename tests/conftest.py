"""Shared fixtures for the simulation tests."""
from __future__ import annotations

import random

import pytest

from miffy_runner.config.settings import Settings
from miffy_runner.core.clock import FrameClock
from miffy_runner.core.events import Event, EventBus
from miffy_runner.progress.store import MemoryBackend, ProgressStore
from miffy_runner.simulation.run import RunController


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def store() -> ProgressStore:
    return ProgressStore(MemoryBackend())


@pytest.fixture
def bus() -> EventBus:
    return EventBus(history_limit=1000)


@pytest.fixture
def events(bus: EventBus) -> list[Event]:
    received: list[Event] = []
    bus.subscribe_all(received.append)
    return received


@pytest.fixture
def make_controller(settings, store, bus):
    """Build a RunController on a manual clock starting at t=0."""

    def factory(custom: Settings | None = None, seed: int = 7) -> RunController:
        return RunController(
            settings=custom or settings,
            store=store,
            event_bus=bus,
            rng=random.Random(seed),
            clock=FrameClock(max_delta_ms=34.0, start_ms=0.0),
        )

    return factory
