"""Animation module for Game Night."""

from gamenight.animation.easing import (
    Easing,
    ease_out_cubic,
    ease_out_power,
    get_easing,
)
from gamenight.animation.scheduler import (
    FrameHandle,
    FrameScheduler,
    FramePump,
    AsyncioFrameScheduler,
)

__all__ = [
    # Easing
    "Easing",
    "ease_out_cubic",
    "ease_out_power",
    "get_easing",
    # Scheduling
    "FrameHandle",
    "FrameScheduler",
    "FramePump",
    "AsyncioFrameScheduler",
]
