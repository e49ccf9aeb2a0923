"""Drawing primitives for the wheel canvas.

Everything draws into an RGB numpy buffer of shape (height, width, 3)
with y pointing down. Shapes are rasterized as boolean masks over the
buffer (or over the shape's bounding box) rather than pixel by pixel.
"""

from functools import lru_cache
from typing import Optional, Tuple

import numpy as np
from numpy.typing import NDArray
from PIL import Image, ImageDraw, ImageFont

# Type aliases
Color = Tuple[int, int, int]
Point = Tuple[float, float]
Buffer = NDArray[np.uint8]
Mask = NDArray[np.bool_]


def new_buffer(width: int, height: int, color: Color = (0, 0, 0)) -> Buffer:
    """Allocate a buffer filled with color."""
    buffer = np.empty((height, width, 3), dtype=np.uint8)
    buffer[...] = color
    return buffer


def clear(buffer: Buffer, color: Color = (0, 0, 0)) -> None:
    buffer[...] = color


def polar_grid(buffer: Buffer, cx: float, cy: float) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Per-pixel (distance, angle) around a center.

    Angles are degrees in [0, 360), clockwise from +x because the
    buffer's y axis points down.
    """
    h, w = buffer.shape[:2]
    ys, xs = np.mgrid[:h, :w]
    dx = xs - cx
    dy = ys - cy
    return np.hypot(dx, dy), np.degrees(np.arctan2(dy, dx)) % 360.0


def _distance(buffer: Buffer, cx: float, cy: float) -> NDArray[np.float64]:
    h, w = buffer.shape[:2]
    ys, xs = np.ogrid[:h, :w]
    return np.hypot(xs - cx, ys - cy)


def draw_circle(
    buffer: Buffer,
    cx: float,
    cy: float,
    radius: float,
    color: Color,
    filled: bool = True,
    thickness: int = 1,
) -> None:
    """Solid disc, or an outline `thickness` pixels wide when filled is False."""
    dist = _distance(buffer, cx, cy)
    mask = dist <= radius
    if not filled:
        mask &= dist > radius - thickness
    buffer[mask] = color


def draw_ring(
    buffer: Buffer,
    cx: float,
    cy: float,
    inner_radius: float,
    outer_radius: float,
    inner_color: Color,
    outer_color: Color,
) -> None:
    """Annulus shaded radially from inner_color to outer_color."""
    dist = _distance(buffer, cx, cy)
    mask = (dist >= inner_radius) & (dist <= outer_radius)
    if not mask.any():
        return

    t = (dist[mask] - inner_radius) / max(outer_radius - inner_radius, 1e-6)
    inner = np.asarray(inner_color, dtype=np.float64)
    outer = np.asarray(outer_color, dtype=np.float64)
    buffer[mask] = (inner + np.outer(np.clip(t, 0.0, 1.0), outer - inner)).astype(np.uint8)


def draw_triangle(buffer: Buffer, p1: Point, p2: Point, p3: Point, color: Color) -> None:
    """Fill a triangle given in either winding order."""
    h, w = buffer.shape[:2]
    xs = (p1[0], p2[0], p3[0])
    ys = (p1[1], p2[1], p3[1])
    x0, x1 = max(0, int(np.floor(min(xs)))), min(w - 1, int(np.ceil(max(xs))))
    y0, y1 = max(0, int(np.floor(min(ys)))), min(h - 1, int(np.ceil(max(ys))))
    if x0 > x1 or y0 > y1:
        return

    gy, gx = np.mgrid[y0:y1 + 1, x0:x1 + 1]

    def side(a: Point, b: Point) -> NDArray[np.float64]:
        return (b[0] - a[0]) * (gy - a[1]) - (b[1] - a[1]) * (gx - a[0])

    s1, s2, s3 = side(p1, p2), side(p2, p3), side(p3, p1)
    inside = ((s1 >= 0) & (s2 >= 0) & (s3 >= 0)) | ((s1 <= 0) & (s2 <= 0) & (s3 <= 0))
    buffer[y0:y1 + 1, x0:x1 + 1][inside] = color


def draw_line(buffer: Buffer, start: Point, end: Point, color: Color, width: int = 1) -> None:
    """Straight line sampled once per pixel of length, clipped to the buffer."""
    h, w = buffer.shape[:2]
    steps = int(np.ceil(max(abs(end[0] - start[0]), abs(end[1] - start[1])))) + 1
    xs = np.rint(np.linspace(start[0], end[0], steps)).astype(np.int64)
    ys = np.rint(np.linspace(start[1], end[1], steps)).astype(np.int64)

    half = width // 2
    for oy in range(-half, width - half):
        for ox in range(-half, width - half):
            px, py = xs + ox, ys + oy
            keep = (px >= 0) & (px < w) & (py >= 0) & (py < h)
            buffer[py[keep], px[keep]] = color


@lru_cache(maxsize=512)
def _text_mask(text: str, scale: int) -> Mask:
    """Rasterize text with Pillow's default font, scaled by whole pixels."""
    font = ImageFont.load_default()
    left, top, right, bottom = font.getbbox(text)
    width, height = max(right - left, 1), max(bottom - top, 1)

    glyphs = Image.new("L", (width, height), 0)
    draw = ImageDraw.Draw(glyphs)
    draw.fontmode = "1"
    draw.text((-left, -top), text, fill=255, font=font)
    if scale > 1:
        glyphs = glyphs.resize((width * scale, height * scale), Image.Resampling.NEAREST)
    return np.asarray(glyphs) >= 128


def _paint_mask(buffer: Buffer, mask: Mask, x: int, y: int, color: Color) -> None:
    h, w = buffer.shape[:2]
    mh, mw = mask.shape
    x0, y0 = max(x, 0), max(y, 0)
    x1, y1 = min(x + mw, w), min(y + mh, h)
    if x0 >= x1 or y0 >= y1:
        return
    region = mask[y0 - y:y1 - y, x0 - x:x1 - x]
    buffer[y0:y1, x0:x1][region] = color


def draw_text_centered(
    buffer: Buffer,
    text: str,
    cx: int,
    cy: int,
    color: Color,
    scale: int = 1,
    shadow: Optional[Color] = None,
) -> None:
    """Draw text centered on (cx, cy), with an optional 1px drop shadow."""
    mask = _text_mask(text, scale)
    x = int(round(cx - mask.shape[1] / 2))
    y = int(round(cy - mask.shape[0] / 2))
    if shadow is not None:
        _paint_mask(buffer, mask, x + 1, y + 1, shadow)
    _paint_mask(buffer, mask, x, y, color)


def blit_rgba(buffer: Buffer, image: NDArray[np.uint8], x: int, y: int) -> None:
    """Alpha-composite an RGBA (or opaque RGB) image with its top-left at (x, y)."""
    h, w = buffer.shape[:2]
    ih, iw = image.shape[:2]
    x0, y0 = max(x, 0), max(y, 0)
    x1, y1 = min(x + iw, w), min(y + ih, h)
    if x0 >= x1 or y0 >= y1:
        return

    src = image[y0 - y:y1 - y, x0 - x:x1 - x]
    if src.shape[2] == 3:
        buffer[y0:y1, x0:x1] = src
        return

    alpha = src[..., 3:4].astype(np.float64) / 255.0
    dst = buffer[y0:y1, x0:x1].astype(np.float64)
    buffer[y0:y1, x0:x1] = np.rint(src[..., :3] * alpha + dst * (1.0 - alpha)).astype(np.uint8)
