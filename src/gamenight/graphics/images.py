"""Thumbnail loading for wheel segments.

Items may carry an image_ref pointing at a local file. Thumbnails are
loaded once with Pillow, cropped to a square, masked to a circle and
kept as RGBA numpy arrays. A file that cannot be read is remembered as
a miss so the wheel falls back to a text-only segment without retrying
every frame.
"""

from pathlib import Path
from typing import Dict, Optional
import logging

import numpy as np
from numpy.typing import NDArray
from PIL import Image, ImageDraw, ImageOps, UnidentifiedImageError

logger = logging.getLogger(__name__)


def circular_thumbnail(image: Image.Image, size: int) -> NDArray[np.uint8]:
    """Square-crop, resize and mask an image to an RGBA circle."""
    square = ImageOps.fit(image.convert("RGB"), (size, size), method=Image.Resampling.LANCZOS)
    mask = Image.new("L", (size, size), 0)
    ImageDraw.Draw(mask).ellipse((0, 0, size - 1, size - 1), fill=255)
    square.putalpha(mask)
    return np.asarray(square, dtype=np.uint8).copy()


class ImageCache:
    """Loads and caches circular thumbnails by image_ref."""

    def __init__(self, size: int = 48, base_path: Optional[Path] = None) -> None:
        self.size = size
        self.base_path = base_path
        self._cache: Dict[str, Optional[NDArray[np.uint8]]] = {}

    def __contains__(self, ref: str) -> bool:
        return ref in self._cache

    def get(self, ref: Optional[str]) -> Optional[NDArray[np.uint8]]:
        """Thumbnail for ref, or None if ref is empty or unreadable."""
        if not ref:
            return None
        if ref not in self._cache:
            self._cache[ref] = self._load(ref)
        return self._cache[ref]

    def put(self, ref: str, image: Image.Image) -> None:
        """Register an already-loaded image under ref."""
        self._cache[ref] = circular_thumbnail(image, self.size)

    def clear(self) -> None:
        self._cache.clear()

    def _load(self, ref: str) -> Optional[NDArray[np.uint8]]:
        path = Path(ref)
        if self.base_path is not None and not path.is_absolute():
            path = self.base_path / path

        try:
            with Image.open(path) as img:
                thumb = circular_thumbnail(img, self.size)
        except (OSError, UnidentifiedImageError) as e:
            logger.warning(f"Failed to load image {ref}: {e}")
            return None

        logger.debug(f"Loaded thumbnail {ref} ({self.size}px)")
        return thumb
