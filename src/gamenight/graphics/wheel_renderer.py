"""Draws the selection wheel into an RGB numpy buffer."""

from typing import Optional, Sequence
import logging
import math

import numpy as np
from numpy.typing import NDArray

from gamenight.config.settings import DisplaySettings
from gamenight.graphics.images import ImageCache
from gamenight.graphics.palette import DEFAULT_PALETTE, WheelPalette
from gamenight.graphics.primitives import (
    Buffer,
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
from gamenight.wheel.geometry import build_segments, segment_span
from gamenight.wheel.models import Item
from gamenight.wheel.selection import SelectionWheel

logger = logging.getLogger(__name__)

EMPTY_WHEEL_TEXT = "ADD GAMES TO SPIN!"
LABEL_MAX_CHARS = 15
LABEL_MAX_CHARS_WITH_IMAGE = 12

# Content placement as a fraction of the wheel radius
LABEL_RADIUS = 0.8
IMAGE_RADIUS = 0.65


def segment_color_indices(count: int) -> list[int]:
    """Palette slot per segment so that no two neighbours match.

    Segments alternate 0/1. With an odd count the last segment would
    touch segment 0 in the same color, so it takes slot 2.
    """
    indices = [i % 2 for i in range(count)]
    if count > 1 and count % 2 == 1:
        indices[-1] = 2
    return indices


def truncate_label(name: str, has_image: bool = False) -> str:
    """Shorten a display name for a segment label."""
    limit = LABEL_MAX_CHARS_WITH_IMAGE if has_image else LABEL_MAX_CHARS
    if len(name) > limit:
        return name[:limit] + "..."
    return name


class WheelRenderer:
    """Renders wheel segments, rim, hub and pointer.

    The per-pixel polar grid is computed once per canvas size; every
    frame only re-maps angles to segment indices.
    """

    def __init__(
        self,
        display: Optional[DisplaySettings] = None,
        pointer_angle: float = 270.0,
        palette: WheelPalette = DEFAULT_PALETTE,
        images: Optional[ImageCache] = None,
    ) -> None:
        self.display = display or DisplaySettings()
        self.pointer_angle = pointer_angle
        self.palette = palette
        self.images = images

        size = self.display.canvas_size
        self.center = (size / 2.0, size / 2.0)
        self._dist, self._angle = polar_grid(new_buffer(size, size), *self.center)

        # Radial shading: segments darken towards the rim
        r = self.display.wheel_radius
        hub = self.display.hub_radius
        falloff = np.clip((self._dist - hub) / max(r - hub, 1), 0.0, 1.0)
        self._shade = (1.0 - 0.3 * falloff ** 2)[..., None]

    @property
    def size(self) -> int:
        return self.display.canvas_size

    def new_buffer(self) -> Buffer:
        return new_buffer(self.size, self.size, self.palette.rgb("leather_dark"))

    def segment_map(self, segment_count: int, rotation: float) -> NDArray[np.int64]:
        """Segment index for every pixel, -1 outside the wheel face.

        Uses the same half-open convention as resolve_index, so the
        pixel under the pointer maps to the segment that wins.
        """
        index_map = np.full(self._dist.shape, -1, dtype=np.int64)
        if segment_count < 1:
            return index_map

        span = segment_span(segment_count)
        inside = self._dist <= self.display.wheel_radius
        relative = (self._angle - rotation) % 360.0
        indices = np.floor(relative / span).astype(np.int64) % segment_count
        index_map[inside] = indices[inside]
        return index_map

    def render_wheel(self, wheel: SelectionWheel, buffer: Optional[Buffer] = None) -> Buffer:
        """Render the items the wheel currently shows at its rotation."""
        if buffer is None:
            buffer = self.new_buffer()
        self.render(buffer, wheel.visible_items, wheel.rotation)
        return buffer

    def render(self, buffer: Buffer, items: Sequence[Item], rotation: float) -> None:
        """Draw a full frame."""
        clear(buffer, self.palette.rgb("leather_dark"))

        if not items:
            self._draw_empty(buffer)
            return

        self._draw_segments(buffer, len(items), rotation)
        self._draw_borders(buffer, len(items), rotation)
        self._draw_contents(buffer, items, rotation)
        self._draw_rim(buffer)
        self._draw_hub(buffer)
        self._draw_pointer(buffer)

    # ------------------------------------------------------------------

    def _draw_empty(self, buffer: Buffer) -> None:
        cx, cy = self.center
        draw_ring(
            buffer, cx, cy, 0, self.display.wheel_radius,
            self.palette.rgb("leather_light"), self.palette.rgb("wood_brown"),
        )
        draw_text_centered(
            buffer, EMPTY_WHEEL_TEXT, int(cx), int(cy),
            self.palette.rgb("parchment"), scale=self.display.label_scale,
        )

    def _draw_segments(self, buffer: Buffer, count: int, rotation: float) -> None:
        index_map = self.segment_map(count, rotation)
        inside = index_map >= 0
        colors = np.array(self.palette.segment_colors(), dtype=np.float64)
        slots = np.array(segment_color_indices(count))
        fills = colors[slots[index_map[inside]]] * self._shade[inside]
        buffer[inside] = fills.astype(np.uint8)

    def _draw_borders(self, buffer: Buffer, count: int, rotation: float) -> None:
        if count < 2:
            return
        cx, cy = self.center
        r = self.display.wheel_radius
        color = self.palette.rgb("leather_dark")
        for segment in build_segments(count, rotation):
            rad = math.radians(segment.start)
            draw_line(buffer, (cx, cy), (cx + math.cos(rad) * r, cy + math.sin(rad) * r), color)

    def _draw_contents(self, buffer: Buffer, items: Sequence[Item], rotation: float) -> None:
        cx, cy = self.center
        r = self.display.wheel_radius
        text_color = self.palette.rgb("parchment")
        shadow = self.palette.rgb("ink_dark")

        for segment, item in zip(build_segments(len(items), rotation), items):
            rad = math.radians(segment.mid)
            thumb = self.images.get(item.image_ref) if self.images is not None else None

            if thumb is not None:
                ix = cx + math.cos(rad) * r * IMAGE_RADIUS
                iy = cy + math.sin(rad) * r * IMAGE_RADIUS
                th, tw = thumb.shape[:2]
                blit_rgba(buffer, thumb, int(round(ix - tw / 2)), int(round(iy - th / 2)))

            tx = cx + math.cos(rad) * r * LABEL_RADIUS
            ty = cy + math.sin(rad) * r * LABEL_RADIUS
            label = truncate_label(item.display_name, has_image=thumb is not None)
            draw_text_centered(
                buffer, label, int(round(tx)), int(round(ty)),
                text_color, scale=self.display.label_scale, shadow=shadow,
            )

    def _draw_rim(self, buffer: Buffer) -> None:
        if self.display.rim_width <= 0:
            return
        cx, cy = self.center
        r = self.display.wheel_radius
        draw_ring(
            buffer, cx, cy, r, r + self.display.rim_width,
            self.palette.rgb("brass_gold"), self.palette.rgb("brass_dark"),
        )

    def _draw_hub(self, buffer: Buffer) -> None:
        hub = self.display.hub_radius
        if hub <= 0:
            return
        cx, cy = self.center
        draw_ring(
            buffer, cx, cy, 0, hub,
            self.palette.rgb("brass_light"), self.palette.rgb("brass_dark"),
        )
        draw_circle(buffer, int(cx), int(cy), hub, self.palette.rgb("brass_dark"), filled=False, thickness=2)
        # Shine
        draw_ring(
            buffer, cx - hub * 0.4, cy - hub * 0.4, 0, hub * 0.4,
            (255, 250, 220), self.palette.rgb("brass_light"),
        )

    def _draw_pointer(self, buffer: Buffer) -> None:
        cx, cy = self.center
        r = self.display.wheel_radius
        rad = math.radians(self.pointer_angle)
        ux, uy = math.cos(rad), math.sin(rad)
        px, py = -uy, ux
        half_width = max(4.0, r / 18)

        tip_r = r - 6
        base_r = min(r + self.display.rim_width + 14, self.size / 2 - 1)
        tip = (cx + ux * tip_r, cy + uy * tip_r)
        bx, by = cx + ux * base_r, cy + uy * base_r
        left = (bx + px * half_width, by + py * half_width)
        right = (bx - px * half_width, by - py * half_width)

        shadow = tuple((p[0] + 2, p[1] + 2) for p in (tip, left, right))
        draw_triangle(buffer, *shadow, (0, 0, 0))
        draw_triangle(buffer, tip, left, right, self.palette.rgb("brass_gold"))
