"""Segment geometry and angle-to-index resolution.

Angles are degrees in screen space (x right, y down), so positive
angles run clockwise from the +x axis. Before rotation, segment i of N
covers the half-open span [i * 360/N, (i + 1) * 360/N).
"""

from dataclasses import dataclass
from typing import List, Tuple
import math

FULL_TURN = 360.0


@dataclass(frozen=True)
class Segment:
    """One angular slice of the wheel after rotation is applied.

    start is normalized to [0, 360); end is start + span and may
    exceed 360 for the slice that wraps past the +x axis.
    """

    index: int
    start: float
    end: float

    @property
    def span(self) -> float:
        return self.end - self.start

    @property
    def mid(self) -> float:
        return normalize_angle(self.start + self.span / 2)

    def contains(self, angle: float) -> bool:
        """Half-open membership test, wrap-aware."""
        return normalize_angle(angle - self.start) < self.span


def normalize_angle(angle: float) -> float:
    """Map any angle into [0, 360).

    Float modulo can return exactly 360.0 for tiny negative inputs
    (-1e-17 % 360), which is folded back to 0.
    """
    result = angle % FULL_TURN
    if result >= FULL_TURN:
        result = 0.0
    return result


def segment_span(segment_count: int) -> float:
    """Angular size of every segment for a wheel of segment_count items."""
    if segment_count < 1:
        raise ValueError(f"segment_count must be at least 1, got {segment_count}")
    return FULL_TURN / segment_count


def segment_bounds(index: int, segment_count: int, rotation: float = 0.0) -> Tuple[float, float]:
    """(start, end) of segment index after applying rotation."""
    span = segment_span(segment_count)
    if not 0 <= index < segment_count:
        raise ValueError(f"index {index} out of range for {segment_count} segments")
    start = normalize_angle(index * span + rotation)
    return start, start + span


def build_segments(segment_count: int, rotation: float = 0.0) -> List[Segment]:
    """All segments for a wheel, in item order."""
    if segment_count == 0:
        return []
    return [
        Segment(i, *segment_bounds(i, segment_count, rotation))
        for i in range(segment_count)
    ]


def resolve_index(rotation: float, segment_count: int, reference_angle: float = 0.0) -> int:
    """Index of the segment under the pointer.

    The pointer sits at reference_angle. The segment whose rotated span
    contains it wins; a pointer exactly on a boundary belongs to the
    segment that starts there.

    Args:
        rotation: Wheel rotation in degrees
        segment_count: Number of segments (N >= 1)
        reference_angle: Pointer angle in degrees

    Returns:
        Winning index in [0, segment_count)
    """
    span = segment_span(segment_count)
    normalized = normalize_angle(reference_angle - rotation)
    return math.floor(normalized / span) % segment_count
