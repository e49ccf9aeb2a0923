"""Graphics module for the wheel rendering pipeline."""

from gamenight.graphics.primitives import (
    blit_rgba,
    clear,
    draw_circle,
    draw_line,
    draw_ring,
    draw_text_centered,
    draw_triangle,
    new_buffer,
    polar_grid,
)
from gamenight.graphics.palette import DEFAULT_PALETTE, WheelPalette, hex_to_rgb
from gamenight.graphics.images import ImageCache, circular_thumbnail
from gamenight.graphics.wheel_renderer import WheelRenderer, truncate_label

__all__ = [
    # Renderer
    "WheelRenderer",
    "truncate_label",
    "ImageCache",
    "circular_thumbnail",
    # Palette
    "DEFAULT_PALETTE",
    "WheelPalette",
    "hex_to_rgb",
    # Primitives
    "blit_rgba",
    "clear",
    "draw_circle",
    "draw_line",
    "draw_ring",
    "draw_text_centered",
    "draw_triangle",
    "new_buffer",
    "polar_grid",
]
