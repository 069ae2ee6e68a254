"""Core framework components for Miffy Runner."""

from .state import RunPhase, RunStateMachine
from .events import EventBus, Event, EventType
from .clock import FrameClock

__all__ = ["RunPhase", "RunStateMachine", "EventBus", "Event", "EventType", "FrameClock"]
