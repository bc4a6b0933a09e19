"""Editable polylines turned into adjacency meshes for thick-line rendering."""

from __future__ import annotations

import math
from typing import List, NamedTuple, Optional, Sequence, Tuple

Point = Tuple[float, float]
Vec3 = Tuple[float, float, float]

DEFAULT_WINDOW = (640, 640)
POINT_RADIUS = 5.0
DEFAULT_THICKNESS = 50.0
MIN_THICKNESS = 1.0
MAX_THICKNESS = 100.0
DEFAULT_MITER_LIMIT = 0.75
LIMIT_STEP = 0.1


class LineMesh(NamedTuple):
    """Vertices of a polyline with one extra vertex at each end, and
    four indices per segment (lines-with-adjacency order)."""

    vertices: List[Vec3]
    indices: List[int]


def adjacency_mesh(points: Sequence[Point]) -> Optional[LineMesh]:
    """Mesh for a polyline, or None if it has fewer than two points.

    The added end vertices mirror the second and second-to-last points
    through the first and last points.
    """
    if len(points) < 2:
        return None
    first, second = points[0], points[1]
    last, before_last = points[-1], points[-2]
    vertices: List[Vec3] = [(2.0 * first[0] - second[0], 2.0 * first[1] - second[1], 0.0)]
    vertices.extend((float(x), float(y), 0.0) for x, y in points)
    vertices.append((2.0 * last[0] - before_last[0], 2.0 * last[1] - before_last[1], 0.0))

    indices: List[int] = []
    for i in range(1, len(vertices) - 2):
        indices.extend((i - 1, i, i + 1, i + 2))
    return LineMesh(vertices, indices)


def is_nvidia(vendor: str) -> bool:
    """True if a graphics vendor string names NVIDIA."""
    return "nvidia" in vendor.lower()


class LineEditor:
    """Points placed and dragged with the mouse, plus the line's style settings."""

    def __init__(self, window_size: Tuple[float, float] = DEFAULT_WINDOW) -> None:
        self.radius = POINT_RADIUS
        self.thickness = DEFAULT_THICKNESS
        self.limit = DEFAULT_MITER_LIMIT
        self.draw_wireframe = True
        self.points: List[Point] = []
        self.window_size: Tuple[float, float] = (float(window_size[0]), float(window_size[1]))
        self.is_dragging = False
        self._drag_index = 0
        self._drag_pos: Point = (0.0, 0.0)
        self._drag_from: Point = (0.0, 0.0)
        self._mesh: Optional[LineMesh] = None
        self._mesh_valid = False

    def _invalidate(self) -> None:
        self._mesh = None
        self._mesh_valid = False

    def mesh(self) -> Optional[LineMesh]:
        """The mesh for the current points, rebuilt only after a change."""
        if not self._mesh_valid:
            self._mesh = adjacency_mesh(self.points)
            self._mesh_valid = True
        return self._mesh

    def _start_drag(self, index: int, position: Point) -> None:
        self._drag_index = index
        self._drag_pos = position
        self._drag_from = self.points[index]
        self.is_dragging = True

    def _drag_to(self, position: Point) -> None:
        self.points[self._drag_index] = (
            self._drag_from[0] + (position[0] - self._drag_pos[0]),
            self._drag_from[1] + (position[1] - self._drag_pos[1]),
        )

    def mouse_down(self, position: Point) -> int:
        """Grab the topmost point under ``position``, or add a new one there.

        Returns the index of the point being dragged.
        """
        for index in reversed(range(len(self.points))):
            if math.dist(position, self.points[index]) < self.radius:
                self._start_drag(index, position)
                return index
        self.points.append((float(position[0]), float(position[1])))
        self._start_drag(len(self.points) - 1, position)
        self._invalidate()
        return self._drag_index

    def mouse_drag(self, position: Point) -> None:
        """Move the grabbed point along with the mouse."""
        if self.is_dragging:
            self._drag_to(position)
            self._invalidate()

    def mouse_up(self, position: Point) -> None:
        """Drop the grabbed point at its final place."""
        if self.is_dragging:
            self._drag_to(position)
            self.is_dragging = False
            self._invalidate()

    def clear(self) -> None:
        """Remove every point."""
        self.points.clear()
        self.is_dragging = False
        self._invalidate()

    def delete_last(self) -> Point:
        """Remove and return the last point; IndexError if there is none."""
        if not self.points:
            raise IndexError("no point to delete")
        point = self.points.pop()
        if self.is_dragging and self._drag_index >= len(self.points):
            self.is_dragging = False
        self._invalidate()
        return point

    def thinner(self) -> float:
        """Decrease the thickness by one, not below one; return it."""
        if self.thickness > MIN_THICKNESS:
            self.thickness -= 1.0
        return self.thickness

    def thicker(self) -> float:
        """Increase the thickness by one, not above a hundred; return it."""
        if self.thickness < MAX_THICKNESS:
            self.thickness += 1.0
        return self.thickness

    def raise_limit(self) -> float:
        """Raise the miter limit by a tenth while it is below one; return it."""
        if self.limit < 1.0:
            self.limit += LIMIT_STEP
        return self.limit

    def lower_limit(self) -> float:
        """Lower the miter limit by a tenth while it is above minus one; return it."""
        if self.limit > -1.0:
            self.limit -= LIMIT_STEP
        return self.limit

    def resize(self, size: Tuple[float, float]) -> None:
        """Follow a new window size, keeping the points centred."""
        dx = 0.5 * (size[0] - self.window_size[0])
        dy = 0.5 * (size[1] - self.window_size[1])
        self.points = [(x + dx, y + dy) for x, y in self.points]
        self.window_size = (float(size[0]), float(size[1]))
        self._invalidate()