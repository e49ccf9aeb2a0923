"""Selection wheel: spin state machine and outcome resolution.

The wheel owns a list of items, animates a spin through an injected
FrameScheduler and, when the spin settles, hands exactly one item to
the selection sink.

Lifecycle of a spin:
    1. spin() - snapshot items, draw target and duration, IDLE -> SPINNING
    2. _on_frame(now) - ease rotation, request next frame until progress hits 1
    3. _finish() - SPINNING -> IDLE, resolve index, notify sink once
    cancel()/dispose() may cut the spin short at any frame; the sink is
    then never called.
"""

import asyncio
import inspect
import logging
import random
from typing import Any, Awaitable, Callable, Iterable, List, Optional, Set, Tuple, Union

from gamenight.animation.easing import ease_out_power
from gamenight.animation.scheduler import FrameHandle, FrameScheduler
from gamenight.config.settings import WheelSettings
from gamenight.core.events import Event, EventBus, EventType
from gamenight.core.state import PhaseMachine, SpinPhase
from gamenight.wheel.geometry import Segment, build_segments, normalize_angle, resolve_index
from gamenight.wheel.models import Item, SpinPlan, SpinResult

logger = logging.getLogger(__name__)

SelectionSink = Callable[[Item], Union[None, Awaitable[Any]]]


class SelectionWheel:
    """Equal-segment wheel that resolves a spin to exactly one item.

    Args:
        scheduler: Clock and frame source driving the animation
        on_resolved: Selection sink, called once per completed spin
        settings: Spin tuning (rotation and duration ranges, pointer angle)
        rng: Random source; anything with a random() -> [0, 1) method
        event_bus: Optional bus that receives wheel lifecycle events
        items: Initial items
    """

    def __init__(
        self,
        scheduler: FrameScheduler,
        on_resolved: Optional[SelectionSink] = None,
        settings: Optional[WheelSettings] = None,
        rng: Optional[random.Random] = None,
        event_bus: Optional[EventBus] = None,
        items: Iterable[Item] = (),
    ) -> None:
        self._scheduler = scheduler
        self._on_resolved = on_resolved
        self._settings = settings or WheelSettings()
        self._rng = rng or random.Random()
        self._event_bus = event_bus
        self._ease = ease_out_power(self._settings.easing_exponent)

        self._machine = PhaseMachine(SpinPhase.IDLE)
        self._items: Tuple[Item, ...] = tuple(items)
        self._rotation: float = 0.0
        self._progress: float = 0.0
        self._plan: Optional[SpinPlan] = None
        self._frame: Optional[FrameHandle] = None
        self._spin_counter = 0
        self._last_result: Optional[SpinResult] = None
        self._disposed = False
        self._sink_tasks: Set[asyncio.Task] = set()

        logger.debug(f"SelectionWheel created with {len(self._items)} items")

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def phase(self) -> SpinPhase:
        return self._machine.phase

    @property
    def is_spinning(self) -> bool:
        return self._machine.is_spinning

    @property
    def rotation(self) -> float:
        """Current display rotation in [0, 360)."""
        return self._rotation

    @property
    def progress(self) -> float:
        """Linear progress of the current (or last) spin."""
        return self._progress

    @property
    def items(self) -> Tuple[Item, ...]:
        """Working item list, as last configured."""
        return self._items

    @property
    def snapshot(self) -> Tuple[Item, ...]:
        """Items the in-flight spin resolves against (empty when idle)."""
        if self._plan is None:
            return ()
        return self._plan.snapshot

    @property
    def visible_items(self) -> Tuple[Item, ...]:
        """Items to draw: the snapshot while spinning, else the working list."""
        if self._plan is not None:
            return self._plan.snapshot
        return self._items

    @property
    def spin_plan(self) -> Optional[SpinPlan]:
        return self._plan

    @property
    def last_result(self) -> Optional[SpinResult]:
        return self._last_result

    @property
    def settings(self) -> WheelSettings:
        return self._settings

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def can_spin(self) -> bool:
        return not self._disposed and self._machine.is_idle and len(self._items) > 0

    def segments(self) -> List[Segment]:
        """Rotated segments for the items currently drawn."""
        return build_segments(len(self.visible_items), self._rotation)

    def set_on_resolved(self, callback: Optional[SelectionSink]) -> None:
        """Replace the selection sink."""
        self._on_resolved = callback

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def configure(self, items: Iterable[Item]) -> None:
        """Replace the working item list.

        An in-flight spin keeps resolving against its snapshot; the new
        list is used for the next spin and for drawing once idle.
        """
        self._items = tuple(items)
        logger.debug(
            f"Wheel configured with {len(self._items)} items"
            f"{' (spin in flight keeps its snapshot)' if self.is_spinning else ''}"
        )
        self._emit(EventType.ITEMS_CONFIGURED, {"count": len(self._items)})

    def spin(self) -> bool:
        """Start a spin.

        Silently ignored while a spin is in flight, when there are no
        items, or after dispose().

        Returns:
            True if a spin started
        """
        if not self.can_spin:
            logger.debug(
                f"Spin ignored (phase={self.phase.name}, items={len(self._items)}, "
                f"disposed={self._disposed})"
            )
            return False

        settings = self._settings
        base_rotations = self._draw(settings.min_rotations, settings.max_rotations)
        final_offset = self._draw(0.0, 360.0)
        duration_ms = self._draw(settings.min_duration_ms, settings.max_duration_ms)

        self._spin_counter += 1
        plan = SpinPlan(
            spin_id=self._spin_counter,
            snapshot=self._items,
            start_rotation=self._rotation,
            base_rotations=base_rotations,
            final_offset=final_offset,
            duration_ms=duration_ms,
            started_at=self._scheduler.now(),
        )

        self._machine.transition(SpinPhase.SPINNING)
        self._plan = plan
        self._progress = 0.0
        self._request_frame(plan.spin_id)

        logger.info(
            f"Spin {plan.spin_id} started: {len(plan.snapshot)} items, "
            f"target={plan.spin_target:.1f} deg, duration={duration_ms:.0f} ms"
        )
        self._emit(EventType.SPIN_STARTED, {
            "spin_id": plan.spin_id,
            "count": len(plan.snapshot),
            "spin_target": plan.spin_target,
            "duration_ms": duration_ms,
        })
        return True

    def cancel(self) -> bool:
        """Stop an in-flight spin without notifying the sink.

        The rotation stays where the last frame left it.

        Returns:
            True if a spin was cancelled
        """
        if self._frame is not None:
            self._scheduler.cancel_frame(self._frame)
            self._frame = None

        if self._plan is None:
            return False

        spin_id = self._plan.spin_id
        self._plan = None
        self._machine.transition(SpinPhase.IDLE)

        logger.info(f"Spin {spin_id} cancelled at {self._rotation:.1f} deg")
        self._emit(EventType.SPIN_CANCELLED, {"spin_id": spin_id, "rotation": self._rotation})
        return True

    def dispose(self) -> None:
        """Cancel any spin and disable the wheel for good. Idempotent."""
        if self._disposed:
            return
        self.cancel()
        self._disposed = True
        logger.debug("SelectionWheel disposed")

    def __enter__(self) -> "SelectionWheel":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()

    # ------------------------------------------------------------------
    # Animation
    # ------------------------------------------------------------------

    def _draw(self, low: float, high: float) -> float:
        """Uniform draw from the half-open range [low, high)."""
        return low + (high - low) * self._rng.random()

    def _request_frame(self, spin_id: int) -> None:
        self._frame = self._scheduler.request_frame(
            lambda now: self._on_frame(spin_id, now)
        )

    def _on_frame(self, spin_id: int, now: float) -> None:
        """Advance the in-flight spin to time now (ms)."""
        plan = self._plan
        if plan is None or plan.spin_id != spin_id or self._disposed:
            # Frame from a cancelled or superseded spin
            return

        self._frame = None
        progress = plan.progress_at(now)
        eased = self._ease(progress)
        self._progress = progress
        self._rotation = normalize_angle(plan.start_rotation + plan.spin_target * eased)

        if progress < 1.0:
            self._request_frame(spin_id)
            return

        self._finish(plan)

    def _finish(self, plan: SpinPlan) -> None:
        """Settle the spin, resolve the winner and notify the sink once."""
        self._rotation = normalize_angle(plan.start_rotation + plan.spin_target)
        self._plan = None
        self._machine.transition(SpinPhase.IDLE)

        count = len(plan.snapshot)
        index = resolve_index(self._rotation, count, self._settings.pointer_angle)
        item = plan.snapshot[index]
        result = SpinResult(
            spin_id=plan.spin_id,
            item=item,
            index=index,
            rotation=self._rotation,
            segment_count=count,
        )
        self._last_result = result

        logger.info(
            f"Spin {plan.spin_id} resolved: '{item.display_name}' "
            f"(index {index}/{count}, rotation {self._rotation:.2f} deg)"
        )
        self._emit(EventType.SPIN_RESOLVED, {
            "spin_id": plan.spin_id,
            "item": item,
            "index": index,
            "rotation": self._rotation,
        })
        self._notify_sink(item)

    def _notify_sink(self, item: Item) -> None:
        if self._on_resolved is None:
            return

        try:
            outcome = self._on_resolved(item)
        except Exception as e:
            logger.exception(f"Selection sink failed for '{item.display_name}'")
            self._emit(EventType.ERROR, {"message": str(e), "item": item})
            return

        if not inspect.isawaitable(outcome):
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(
                f"Selection sink returned an awaitable for '{item.display_name}' "
                "but no event loop is running; dropping it"
            )
            if inspect.iscoroutine(outcome):
                outcome.close()
            return

        task = loop.create_task(self._await_sink(outcome, item))
        self._sink_tasks.add(task)
        task.add_done_callback(self._sink_tasks.discard)

    async def _await_sink(self, outcome: Awaitable[Any], item: Item) -> None:
        try:
            await outcome
        except Exception as e:
            logger.exception(f"Async selection sink failed for '{item.display_name}'")
            self._emit(EventType.ERROR, {"message": str(e), "item": item})

    def _emit(self, event_type: EventType, data: dict) -> None:
        if self._event_bus is not None:
            self._event_bus.emit(Event(event_type, data=data, source="wheel"))
