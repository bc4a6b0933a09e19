"""Perspective warping of rectangular content onto four draggable corners."""

from __future__ import annotations

import math
from typing import List, Optional, Sequence, Tuple

import numpy as np

Point = Tuple[float, float]

DEFAULT_WINDOW = (640, 480)
DEFAULT_CONTENT = (1440.0, 1080.0)
FAR_AWAY = 10.0e6
NORMALIZED_CORNERS: Tuple[Point, ...] = ((0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0))


def perspective_transform(source: Sequence[Point], destination: Sequence[Point]) -> np.ndarray:
    """3x3 homography that maps the four ``source`` points onto ``destination``.

    Raises ValueError if not given four points each or if the points are degenerate.
    """
    src = np.asarray(source, dtype=float)
    dst = np.asarray(destination, dtype=float)
    if src.shape != (4, 2) or dst.shape != (4, 2):
        raise ValueError("a perspective transform needs exactly four 2D points on each side")

    system = np.zeros((8, 8))
    rhs = np.zeros(8)
    for row, ((x, y), (u, v)) in enumerate(zip(src, dst)):
        system[row] = (x, y, 1.0, 0.0, 0.0, 0.0, -x * u, -y * u)
        rhs[row] = u
        system[row + 4] = (0.0, 0.0, 0.0, x, y, 1.0, -x * v, -y * v)
        rhs[row + 4] = v
    try:
        solution = np.linalg.solve(system, rhs)
    except np.linalg.LinAlgError as exc:
        raise ValueError("points do not define a perspective transform") from exc
    return np.append(solution, 1.0).reshape(3, 3)


def to_gl_matrix(warp: np.ndarray) -> np.ndarray:
    """Embed a 3x3 homography in a 4x4 matrix, flattened in column-major order."""
    warp = np.asarray(warp, dtype=float)
    if warp.shape != (3, 3):
        raise ValueError("expected a 3x3 matrix")
    matrix = np.eye(4)
    rows_cols = (0, 1, 3)
    for i, r in enumerate(rows_cols):
        for j, c in enumerate(rows_cols):
            matrix[r, c] = warp[i, j]
    return matrix.flatten(order="F")


class PerspectiveWarp:
    """Content of a fixed size warped onto four corners placed in the window."""

    def __init__(
        self,
        window_width: float = DEFAULT_WINDOW[0],
        window_height: float = DEFAULT_WINDOW[1],
        content_width: float = DEFAULT_CONTENT[0],
        content_height: float = DEFAULT_CONTENT[1],
    ) -> None:
        self.window_width = window_width
        self.window_height = window_height
        self.width = 0.0
        self.height = 0.0
        self.source: List[Point] = []
        self.destination: List[Point] = [(0.0, 0.0)] * 4
        self.destination_normalized: List[Point] = list(NORMALIZED_CORNERS)
        self.warp = np.eye(3)
        self.transform = to_gl_matrix(self.warp)
        self.is_invalid = True
        self.is_mouse_down = False
        self.selected = 0
        self.initial_mouse: Point = (0.0, 0.0)
        self.current_mouse: Point = (0.0, 0.0)
        self.initial_position: Point = (0.0, 0.0)
        self.set_content_size(content_width, content_height)
        self.update()

    def set_content_size(self, width: float, height: float) -> None:
        """Set the size in pixels of the content being warped."""
        self.width = width
        self.height = height
        self.source = [(0.0, 0.0), (width, 0.0), (width, height), (0.0, height)]
        self.is_invalid = True

    def resize(self, width: float, height: float) -> None:
        """Follow a change of window size; the corners keep their relative places."""
        self.window_width = width
        self.window_height = height
        self.is_invalid = True

    def nearest_index(self, point: Point) -> int:
        """Index of the corner nearest to ``point``."""
        best_index, best_distance = 0, FAR_AWAY
        for index, corner in enumerate(self.destination):
            distance = math.dist(corner, point)
            if distance < best_distance:
                best_index, best_distance = index, distance
        return best_index

    def mouse_down(self, point: Point) -> int:
        """Start dragging the corner nearest to ``point``; return its index."""
        self.is_mouse_down = True
        self.initial_mouse = self.current_mouse = point
        self.selected = self.nearest_index(point)
        self.initial_position = self.destination[self.selected]
        return self.selected

    def mouse_drag(self, point: Point) -> None:
        """Move the selected corner along with the mouse."""
        self.current_mouse = point
        dx = point[0] - self.initial_mouse[0]
        dy = point[1] - self.initial_mouse[1]
        x = self.initial_position[0] + dx
        y = self.initial_position[1] + dy
        self.destination[self.selected] = (x, y)
        self.destination_normalized[self.selected] = (
            x / self.window_width,
            y / self.window_height,
        )
        self.is_invalid = True

    def mouse_up(self) -> None:
        """Stop dragging."""
        self.is_mouse_down = False

    def update(self) -> None:
        """Recalculate the corners and the warp if anything changed."""
        if not self.is_invalid:
            return
        self.destination = [
            (self.window_width * nx, self.window_height * ny)
            for nx, ny in self.destination_normalized
        ]
        self.warp = perspective_transform(self.source, self.destination)
        self.transform = to_gl_matrix(self.warp)
        self.is_invalid = False

    def apply(self, point: Point) -> Point:
        """Window position of a point given in content coordinates."""
        self.update()
        x, y, w = self.warp @ np.array([point[0], point[1], 1.0])
        return (float(x / w), float(y / w))