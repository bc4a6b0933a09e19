"""Object picking by colour: each object renders a unique colour that is read back."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Tuple, Union

import numpy as np

Color = Tuple[float, float, float]
Point3 = Tuple[float, float, float]
Line = Tuple[Point3, Point3]
Area = Tuple[int, int, int, int]

PICK_RADIUS = 5

WATERING_CAN = "Watering Can"
PITCHER = "Pitcher"
BACKGROUND = "Background"
NOTHING = "Nothing"
UNCERTAIN = "Uncertain"


def char_to_color(r: int, g: int, b: int) -> Color:
    """Colour with channels in 0..1 from three bytes."""
    return (r / 255.0, g / 255.0, b / 255.0)


def char_to_int(r: int, g: int, b: int) -> int:
    """Pack three bytes into a 24-bit integer, red in the highest byte."""
    return b + (g << 8) + (r << 16)


def int_to_color(value: int) -> Color:
    """Colour with channels in 0..1 from a packed 24-bit integer."""
    return char_to_color((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)


def color_to_int(color: Sequence[float]) -> int:
    """Pack a colour with channels in 0..1 into a 24-bit integer, truncating each channel."""
    r, g, b = (int(channel * 255) & 0xFF for channel in color[:3])
    return char_to_int(r, g, b)


def pick_region(
    position: Tuple[float, float],
    window_size: Tuple[float, float],
    buffer_size: Tuple[float, float],
) -> Area:
    """Area of the framebuffer to sample around a mouse position.

    The mouse position is in window coordinates (y down); the area is in
    framebuffer coordinates (y up), ``PICK_RADIUS`` pixels on each side.
    """
    window_w, window_h = window_size
    buffer_w, buffer_h = buffer_size
    scale_x = buffer_w / float(window_w)
    scale_y = buffer_h / float(window_h)
    px = int(position[0] * scale_x)
    py = int((window_h - position[1]) * scale_y)
    return (px - PICK_RADIUS, py - PICK_RADIUS, px + PICK_RADIUS, py + PICK_RADIUS)


def grid_lines(size: float = 100.0, step: float = 10.0) -> List[Line]:
    """Lines of a square grid on the floor plane, from -size to size."""
    if step <= 0:
        raise ValueError("step must be positive")
    lines: List[Line] = []
    i = -size
    while i <= size:
        lines.append(((i, 0.0, -size), (i, 0.0, size)))
        lines.append(((-size, 0.0, i), (size, 0.0, i)))
        i += step
    return lines


PixelData = Union[np.ndarray, Iterable[Sequence[int]]]


@dataclass
class Picker:
    """Tells which object a block of picking pixels belongs to."""

    pitcher_color: Color = field(default_factory=lambda: int_to_color(0x0000FF))
    can_color: Color = field(default_factory=lambda: int_to_color(0x00FF00))
    background_color: Color = (0.1, 0.1, 0.1)

    def classify(self, pixels: PixelData) -> str:
        """Name of the object covering at least half of ``pixels``.

        ``pixels`` holds RGB or RGBA byte values, either as rows of channels or
        as an image array whose last axis is the channels. Returns "Uncertain"
        if no colour covers half of the pixels. Raises ValueError if empty.
        """
        data = np.asarray(pixels, dtype=np.int64)
        if data.size == 0:
            raise ValueError("no pixels to classify")
        if data.ndim < 2 or data.shape[-1] not in (3, 4):
            raise ValueError("pixels must have 3 or 4 channels")
        rgb = data.reshape(-1, data.shape[-1])[:, :3]
        occurrences = Counter(char_to_int(int(r), int(g), int(b)) for r, g, b in rgb)
        total = len(rgb)

        highest = max(occurrences.values())
        color = min(key for key, count in occurrences.items() if count == highest)

        if highest < total // 2:
            return UNCERTAIN
        if color == color_to_int(self.can_color):
            return WATERING_CAN
        if color == color_to_int(self.pitcher_color):
            return PITCHER
        if color == color_to_int(self.background_color):
            return BACKGROUND
        return NOTHING