"""
Drawing surface for the curtains.

A thin Pillow-backed stand-in for a 2D canvas: stroke colour and width,
alpha-blended line segments and polylines, a translucent background wash
for trails, and export to numpy or PNG.
"""

import io
from typing import Iterable, Sequence, Tuple

import numpy as np
from PIL import Image, ImageDraw

from aurorascope.curtain.base import RGB


class Canvas:
    """RGB canvas that blends every stroke with its alpha (0-255)."""

    def __init__(self, width: int, height: int, background: RGB = (0, 0, 0)):
        self.background_color = tuple(background)
        self._stroke: Tuple[int, int, int, int] = (255, 255, 255, 255)
        self._weight = 1
        self.resize(width, height)

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size

    def resize(self, width: int, height: int):
        """Reallocate to a new size; contents are cleared."""
        if width < 1 or height < 1:
            raise ValueError(f"Canvas size must be positive, got {width}x{height}")
        self.image = Image.new("RGB", (int(width), int(height)), self.background_color)
        # "RGBA" draw mode blends ink into the RGB image instead of overwriting it.
        self._draw = ImageDraw.Draw(self.image, "RGBA")

    def background(self, color: RGB, alpha: int = 255):
        """Wash the whole canvas with a colour; alpha < 255 leaves trails."""
        if alpha >= 255:
            self.image.paste(tuple(color), (0, 0, self.width, self.height))
        elif alpha > 0:
            self._draw.rectangle(
                (0, 0, self.width, self.height),
                fill=(*map(int, color), int(alpha)),
            )

    def stroke(self, color: Sequence[float], alpha: float = 255):
        r, g, b = (int(round(c)) for c in color)
        self._stroke = (r, g, b, int(round(min(255.0, max(0.0, alpha)))))

    def stroke_weight(self, weight: float):
        self._weight = max(1, int(round(weight)))

    def line(self, x1: float, y1: float, x2: float, y2: float):
        self._draw.line([(x1, y1), (x2, y2)], fill=self._stroke, width=self._weight)

    def polyline(self, points: Iterable[Tuple[float, float]]):
        """Single stroke through all points with rounded joints."""
        pts = [(float(x), float(y)) for x, y in points]
        if len(pts) < 2:
            return
        self._draw.line(pts, fill=self._stroke, width=self._weight, joint="curve")

    def to_array(self) -> np.ndarray:
        """(H, W, 3) uint8 copy of the current pixels."""
        return np.array(self.image, dtype=np.uint8)

    def snapshot(self) -> Image.Image:
        return self.image.copy()


def encode_png(image: Image.Image) -> bytes:
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()
