"""Core framework components for Game Night."""

from .state import SpinPhase, PhaseMachine
from .events import EventBus, Event, EventType

__all__ = ["SpinPhase", "PhaseMachine", "EventBus", "Event", "EventType"]
