"""
Event bus for Game Night.

The wheel reports its lifecycle here and the host window listens,
without either holding a reference to the other. Host input is queued
and drained once per frame. Handlers may be plain functions or
coroutine functions; plain emit() only reaches the plain ones.
"""

from collections import defaultdict, deque
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional
from enum import Enum, auto
import asyncio
import inspect
import logging
import time

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Event types understood by the wheel and its host."""
    # Host input
    BUTTON_PRESS = auto()

    # Wheel lifecycle
    ITEMS_CONFIGURED = auto()
    SPIN_STARTED = auto()
    SPIN_RESOLVED = auto()
    SPIN_CANCELLED = auto()

    # Game list
    LIBRARY_CHANGED = auto()

    # Host loop
    TICK = auto()
    SHUTDOWN = auto()
    ERROR = auto()


@dataclass
class Event:
    """
    A single notification.

    Attributes:
        type: EventType, or a free-form string for ad-hoc events
        data: Payload
        source: Who emitted it ("wheel", "simulator", ...)
        timestamp: Wall-clock seconds at creation
    """
    type: EventType | str
    data: dict[str, Any] = field(default_factory=dict)
    source: str = "system"
    timestamp: float = field(default_factory=time.time)


Handler = Callable[[Event], Optional[Awaitable[None]]]

# Registry key for handlers that receive every event
_ANY = object()


class EventBus:
    """
    Pub/sub hub with a bounded history of emitted events.

    Events can be dispatched right away with emit(), or queued from
    anywhere and drained once per frame by process_queue().
    """

    def __init__(self, history_limit: int = 100) -> None:
        self._registry: dict[Any, list[Handler]] = defaultdict(list)
        self._pending: deque[Event] = deque()
        self._history: deque[Event] = deque(maxlen=history_limit)

    def subscribe(self, event_type: EventType | str, handler: Handler) -> Callable[[], None]:
        """
        Register handler for one event type.

        Returns:
            Function that removes the handler again (safe to call twice)
        """
        return self._register(event_type, handler)

    def subscribe_all(self, handler: Handler) -> Callable[[], None]:
        """Register handler for every event type."""
        return self._register(_ANY, handler)

    def emit(self, event: Event) -> int:
        """
        Record event and call the synchronous handlers now.

        Coroutine handlers are skipped; use queue_event() to reach them.

        Returns:
            Number of handlers called
        """
        self._history.append(event)
        called = 0
        for handler in self._targets(event):
            if inspect.iscoroutinefunction(handler):
                continue
            self._call(handler, event)
            called += 1
        return called

    def queue_event(self, event: Event) -> None:
        """Defer event until the next process_queue()."""
        self._pending.append(event)

    async def process_queue(self) -> int:
        """Dispatch queued events in order. Returns how many there were."""
        processed = 0
        while self._pending:
            event = self._pending.popleft()
            self._history.append(event)
            await self._dispatch(event)
            processed += 1
        return processed

    def get_history(
        self,
        event_type: EventType | str | None = None,
        limit: int = 10,
    ) -> list[Event]:
        """Most recent events, oldest first, optionally of one type."""
        events = [e for e in self._history if event_type is None or e.type == event_type]
        return events[-limit:]

    def clear_history(self) -> None:
        self._history.clear()

    # ------------------------------------------------------------------

    def _register(self, key: Any, handler: Handler) -> Callable[[], None]:
        handlers = self._registry[key]
        handlers.append(handler)
        logger.debug(f"Handler registered for {'all events' if key is _ANY else key}")

        def unsubscribe() -> None:
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    def _targets(self, event: Event) -> list[Handler]:
        # Copy so handlers may unsubscribe while being called
        return [*self._registry.get(event.type, ()), *self._registry.get(_ANY, ())]

    def _call(self, handler: Handler, event: Event) -> None:
        try:
            handler(event)
        except Exception as e:
            logger.error(f"Handler for {event.type} failed: {e}")

    async def _dispatch(self, event: Event) -> None:
        coroutines = []
        for handler in self._targets(event):
            if inspect.iscoroutinefunction(handler):
                coroutines.append(handler(event))
            else:
                self._call(handler, event)

        if not coroutines:
            return
        for outcome in await asyncio.gather(*coroutines, return_exceptions=True):
            if isinstance(outcome, Exception):
                logger.error(f"Async handler for {event.type} failed: {outcome}")


def button_press_event(source: str = "button") -> Event:
    """Spin request from a key, mouse click or physical button."""
    return Event(EventType.BUTTON_PRESS, source=source)


def tick_event(delta: float, frame: int) -> Event:
    """Host frame tick; delta in seconds."""
    return Event(EventType.TICK, data={"delta": delta, "frame": frame}, source="simulator")
