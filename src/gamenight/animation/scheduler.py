"""Frame scheduling for wheel animation.

The wheel never talks to a display clock directly. It asks a
FrameScheduler for the current time and for a callback on the next
frame, so the same spin logic runs under the pygame loop, under
asyncio, or under a test that advances time by hand.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional
import asyncio
import itertools
import logging

logger = logging.getLogger(__name__)

FrameCallback = Callable[[float], None]


@dataclass
class FrameHandle:
    """Ticket for a requested frame callback."""

    id: int
    cancelled: bool = False
    fired: bool = False
    _native: Any = field(default=None, repr=False)

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)


class FrameScheduler(ABC):
    """Abstract clock plus next-frame callback registry."""

    def __init__(self) -> None:
        self._ids = itertools.count(1)

    @abstractmethod
    def now(self) -> float:
        """Current time in milliseconds."""
        ...

    @abstractmethod
    def request_frame(self, callback: FrameCallback) -> FrameHandle:
        """Run callback(now_ms) once on the next frame."""
        ...

    @abstractmethod
    def cancel_frame(self, handle: FrameHandle) -> None:
        """Cancel a pending frame callback. Safe to call more than once."""
        ...

    def _new_handle(self) -> FrameHandle:
        return FrameHandle(id=next(self._ids))


class FramePump(FrameScheduler):
    """Scheduler driven by an external frame loop.

    Time only moves when advance() is called. Each advance runs the
    callbacks that were pending when it started; callbacks requested
    while running wait for the next advance, so a callback can never
    re-enter itself within one frame.
    """

    def __init__(self, start_ms: float = 0.0) -> None:
        super().__init__()
        self._now = start_ms
        self._pending: Dict[int, tuple[FrameHandle, FrameCallback]] = {}
        self._frame_count = 0

    def now(self) -> float:
        return self._now

    @property
    def pending_count(self) -> int:
        """Number of callbacks waiting for the next frame."""
        return len(self._pending)

    @property
    def frame_count(self) -> int:
        return self._frame_count

    def request_frame(self, callback: FrameCallback) -> FrameHandle:
        handle = self._new_handle()
        self._pending[handle.id] = (handle, callback)
        return handle

    def cancel_frame(self, handle: FrameHandle) -> None:
        handle.cancelled = True
        self._pending.pop(handle.id, None)

    def advance(self, delta_ms: float) -> int:
        """Move the clock forward and run due callbacks.

        Args:
            delta_ms: Time elapsed since the last frame in milliseconds

        Returns:
            Number of callbacks that ran
        """
        self._now += max(0.0, delta_ms)
        self._frame_count += 1

        due = list(self._pending.values())
        self._pending.clear()

        ran = 0
        for handle, callback in due:
            # Cancelled by an earlier callback in this same frame
            if handle.cancelled:
                continue
            handle.fired = True
            callback(self._now)
            ran += 1

        return ran

    def run_until_idle(self, delta_ms: float = 16.0, max_frames: int = 10_000) -> int:
        """Advance frame by frame until nothing is pending.

        Returns:
            Number of frames advanced
        """
        frames = 0
        while self._pending and frames < max_frames:
            self.advance(delta_ms)
            frames += 1
        return frames


class AsyncioFrameScheduler(FrameScheduler):
    """Scheduler backed by the running asyncio event loop at a fixed rate."""

    def __init__(
        self,
        fps: int = 60,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        super().__init__()
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps}")
        self._interval = 1.0 / fps
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now(self) -> float:
        return self.loop.time() * 1000.0

    def request_frame(self, callback: FrameCallback) -> FrameHandle:
        handle = self._new_handle()

        def fire() -> None:
            if handle.cancelled:
                return
            handle.fired = True
            callback(self.now())

        handle._native = self.loop.call_later(self._interval, fire)
        return handle

    def cancel_frame(self, handle: FrameHandle) -> None:
        handle.cancelled = True
        if handle._native is not None:
            handle._native.cancel()
