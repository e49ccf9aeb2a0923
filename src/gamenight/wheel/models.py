"""Value types shared by the wheel, its renderer and its item source."""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class Item:
    """A selectable wheel entry.

    Attributes:
        id: Stable identifier, used only to correlate results
        display_name: Text drawn in the segment
        image_ref: Optional reference to a thumbnail (local path)
    """

    id: str
    display_name: str
    image_ref: Optional[str] = None


@dataclass(frozen=True)
class SpinPlan:
    """Everything a spin commits to at start.

    The snapshot is a tuple so nothing downstream can mutate the items
    the spin will resolve against.
    """

    spin_id: int
    snapshot: Tuple[Item, ...]
    start_rotation: float
    base_rotations: float
    final_offset: float
    duration_ms: float
    started_at: float

    @property
    def spin_target(self) -> float:
        """Total rotation delta in degrees."""
        return self.base_rotations * 360.0 + self.final_offset

    def progress_at(self, now: float) -> float:
        """Linear progress in [0, 1] at time now (ms)."""
        if self.duration_ms <= 0:
            return 1.0
        elapsed = now - self.started_at
        return max(0.0, min(elapsed / self.duration_ms, 1.0))


@dataclass(frozen=True)
class SpinResult:
    """Outcome of a completed spin."""

    spin_id: int
    item: Item
    index: int
    rotation: float
    segment_count: int
