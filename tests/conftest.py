"""Shared fixtures for the wheel tests."""

from typing import Iterable, List

import pytest

from gamenight.animation.scheduler import FramePump
from gamenight.config.settings import WheelSettings
from gamenight.core.events import EventBus
from gamenight.wheel.models import Item


class ScriptedRandom:
    """Replays fixed draws; returns 0.0 once the script runs out."""

    def __init__(self, values: Iterable[float]) -> None:
        self.values = list(values)
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        if self.values:
            return self.values.pop(0)
        return 0.0


class RecordingSink:
    """Selection sink that remembers every item it receives."""

    def __init__(self) -> None:
        self.items: List[Item] = []

    def __call__(self, item: Item) -> None:
        self.items.append(item)


def make_items(*names: str) -> List[Item]:
    return [Item(id=f"id-{name.lower()}", display_name=name) for name in names]


@pytest.fixture
def pump() -> FramePump:
    return FramePump()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def pointer_at_zero() -> WheelSettings:
    """Default ranges with the pointer on the +x axis."""
    return WheelSettings(pointer_angle=0.0)


@pytest.fixture
def abcd() -> List[Item]:
    return make_items("A", "B", "C", "D")
