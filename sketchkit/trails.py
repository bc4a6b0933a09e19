"""A ribbon trail swirling around a sphere, grown at a fixed rate."""

from __future__ import annotations

import math
from collections import deque
from typing import Deque, List, Tuple

Vec3 = Tuple[float, float, float]

TRAIL_LENGTH = 16000
TRAILS_PER_SECOND = 2000.0
SPHERE_RADIUS = 45.0
HALF_WIDTH = 1.0


def trail_indices(length: int = TRAIL_LENGTH) -> List[int]:
    """Index buffer of a triangle strip over ``length`` vertices."""
    return list(range(length))


def trail_tex_coords(length: int = TRAIL_LENGTH) -> List[Tuple[float, float]]:
    """Texture coordinates: u runs along the strip, v alternates between its sides."""
    half = length * 0.5
    return [(math.floor(i * 0.5) / half, float(i % 2)) for i in range(length)]


def _sphere_point(phi: float) -> Vec3:
    theta = phi * 0.03
    return (
        SPHERE_RADIUS * math.sin(phi) * math.cos(theta),
        SPHERE_RADIUS * math.sin(phi) * math.sin(theta),
        SPHERE_RADIUS * math.cos(phi),
    )


def _cross(a: Vec3, b: Vec3) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def _normalized(v: Vec3) -> Vec3:
    length = math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])
    if length == 0.0:
        return (0.0, 0.0, 0.0)
    return (v[0] / length, v[1] / length, v[2] / length)


class Trail:
    """Vertices of a ribbon, newest first, holding at most ``length`` of them."""

    def __init__(
        self,
        start: float = 0.0,
        length: int = TRAIL_LENGTH,
        rate: float = TRAILS_PER_SECOND,
    ) -> None:
        self.length = length
        self.rate = rate
        self.time = start
        self.angle = 0.0
        self._vertices: Deque[Vec3] = deque(maxlen=length)

    def _add_segment(self) -> None:
        phi = self.angle * 0.01
        pos = _sphere_point(phi)
        prev_pos = _sphere_point(phi - 0.01)
        direction = (pos[0] - prev_pos[0], pos[1] - prev_pos[1], pos[2] - prev_pos[2])
        right = (math.sin(20.0 * phi), 0.0, math.cos(20.0 * phi))
        normal = _normalized(_cross(direction, right))

        offset = tuple(HALF_WIDTH * n for n in normal)
        self._vertices.appendleft(
            (pos[0] - offset[0], pos[1] - offset[1], pos[2] - offset[2])
        )
        self._vertices.appendleft(
            (pos[0] + offset[0], pos[1] + offset[1], pos[2] + offset[2])
        )
        self.angle += 1.0

    def update(self, now: float) -> int:
        """Add the segments due by time ``now``; return how many were added."""
        elapsed = now - self.time
        count = max(0, int(elapsed * self.rate))
        for _ in range(count):
            self._add_segment()
        self.time += count / self.rate
        return count

    def vertices(self) -> List[Vec3]:
        """The trail's vertices, newest first, in triangle-strip order."""
        return list(self._vertices)