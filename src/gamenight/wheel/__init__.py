"""Selection wheel: geometry, spin state machine and value types."""

from gamenight.wheel.models import Item, SpinPlan, SpinResult
from gamenight.wheel.geometry import (
    Segment,
    build_segments,
    normalize_angle,
    resolve_index,
    segment_bounds,
    segment_span,
)
from gamenight.wheel.selection import SelectionSink, SelectionWheel

__all__ = [
    "Item",
    "SpinPlan",
    "SpinResult",
    "Segment",
    "build_segments",
    "normalize_angle",
    "resolve_index",
    "segment_bounds",
    "segment_span",
    "SelectionSink",
    "SelectionWheel",
]
