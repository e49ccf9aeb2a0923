"""Configuration for Game Night."""

from gamenight.config.settings import (
    DisplaySettings,
    Settings,
    SimulatorSettings,
    WheelSettings,
    get_settings,
)

__all__ = [
    "DisplaySettings",
    "Settings",
    "SimulatorSettings",
    "WheelSettings",
    "get_settings",
]
