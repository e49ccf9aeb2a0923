"""
Application settings using Pydantic.

Settings are loaded from environment variables with .env file support.
Nested values use a double underscore, e.g. GAMENIGHT_WHEEL__MIN_ROTATIONS=4.
"""

from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class WheelSettings(BaseSettings):
    """Spin tuning for the selection wheel."""

    model_config = SettingsConfigDict(env_prefix="GAMENIGHT_WHEEL_", extra="ignore")

    # Full turns before the wheel settles, drawn from [min, max); never fewer than 3
    min_rotations: float = Field(default=3.0, ge=3.0)
    max_rotations: float = Field(default=6.0, ge=3.0)

    # Spin duration in milliseconds, drawn from [min, max)
    min_duration_ms: float = Field(default=3000.0, ge=0.0)
    max_duration_ms: float = Field(default=5000.0, ge=0.0)

    # Pointer position, degrees clockwise from the +x axis (270 = top)
    pointer_angle: float = 270.0

    # Ease-out power; 3 is ease-out cubic
    easing_exponent: float = Field(default=3.0, gt=0.0)

    @field_validator("pointer_angle")
    @classmethod
    def _normalize_pointer(cls, value: float) -> float:
        value = value % 360.0
        return 0.0 if value >= 360.0 else value

    @model_validator(mode="after")
    def _check_ranges(self) -> "WheelSettings":
        if self.max_rotations < self.min_rotations:
            raise ValueError("max_rotations must be >= min_rotations")
        if self.max_duration_ms < self.min_duration_ms:
            raise ValueError("max_duration_ms must be >= min_duration_ms")
        return self


class DisplaySettings(BaseSettings):
    """Wheel canvas geometry."""

    model_config = SettingsConfigDict(env_prefix="GAMENIGHT_DISPLAY_", extra="ignore")

    canvas_size: int = Field(default=400, ge=64)
    wheel_radius: int = Field(default=180, ge=16)
    hub_radius: int = Field(default=20, ge=0)
    rim_width: int = Field(default=8, ge=0)
    label_scale: int = Field(default=2, ge=1)
    thumbnail_size: int = Field(default=48, ge=8)

    # Rendering
    fps: int = Field(default=60, ge=1, le=240)

    @model_validator(mode="after")
    def _check_fits(self) -> "DisplaySettings":
        if self.hub_radius >= self.wheel_radius:
            raise ValueError("hub_radius must be smaller than wheel_radius")
        return self


class SimulatorSettings(BaseSettings):
    """Desktop host window."""

    model_config = SettingsConfigDict(env_prefix="GAMENIGHT_SIMULATOR_", extra="ignore")

    window_width: int = 960
    window_height: int = 640
    title: str = "Game Night"
    fullscreen: bool = False


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="GAMENIGHT_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debug: bool = False

    # Nested settings
    wheel: WheelSettings = Field(default_factory=WheelSettings)
    display: DisplaySettings = Field(default_factory=DisplaySettings)
    simulator: SimulatorSettings = Field(default_factory=SimulatorSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
