"""Simulation engine: entities, player, spawning, difficulty, collisions and the run loop."""

from miffy_runner.simulation.collision import CollisionEngine, CollisionReport
from miffy_runner.simulation.difficulty import DifficultyController, obstacle_interval
from miffy_runner.simulation.entities import Entity, EntityCategory, EntityKind
from miffy_runner.simulation.player import Player, PlayerStatus
from miffy_runner.simulation.run import RunController, RunState
from miffy_runner.simulation.spawner import SpawnController, SpawnTimer
from miffy_runner.simulation.world import LiveEntities

__all__ = [
    "CollisionEngine",
    "CollisionReport",
    "DifficultyController",
    "obstacle_interval",
    "Entity",
    "EntityCategory",
    "EntityKind",
    "Player",
    "PlayerStatus",
    "RunController",
    "RunState",
    "SpawnController",
    "SpawnTimer",
    "LiveEntities",
]
