"""Frustum culling of many transformed objects against a camera's view volume."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field, replace
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np

Vec3 = Tuple[float, float, float]

NUM_OBJECTS = 1500
WINDOW_SIZE = (1200, 675)
FIELD_SIZE = 2000.0
OBJECT_SCALE = 50.0
DEFAULT_OBJECT_SCALE = 0.10

__all__ = [
    "BoundingBox",
    "Frustum",
    "CullableObject",
    "CullingScene",
    "compose_transform",
    "grid_lines",
]


def _vec(values: Sequence[float]) -> np.ndarray:
    array = np.asarray(values, dtype=float)
    if array.shape != (3,):
        raise ValueError("expected three components")
    return array


def _normalized(v: np.ndarray) -> np.ndarray:
    length = float(np.linalg.norm(v))
    if length == 0.0:
        raise ValueError("cannot normalize a zero-length vector")
    return v / length


def grid_lines(size: float = 100.0, step: float = 10.0) -> List[Tuple[Vec3, Vec3]]:
    """Line segments of a square grid on the ground plane (y = 0).

    For each coordinate from ``-size`` to ``size`` in increments of ``step``,
    one line runs along z and one along x.
    """
    if step <= 0.0:
        raise ValueError("step must be positive")
    lines: List[Tuple[Vec3, Vec3]] = []
    i = -float(size)
    while i <= size:
        lines.append(((i, 0.0, -float(size)), (i, 0.0, float(size))))
        lines.append(((-float(size), 0.0, i), (float(size), 0.0, i)))
        i += step
    return lines


def compose_transform(position: Sequence[float], rotation: Sequence[float],
                      scale: Sequence[float]) -> np.ndarray:
    """4x4 matrix that scales, then rotates, then translates.

    ``rotation`` holds Euler angles in radians, applied about X, then Y, then Z.
    """
    px, py, pz = _vec(position)
    rx, ry, rz = _vec(rotation)
    sx, sy, sz = _vec(scale)

    translate = np.eye(4)
    translate[:3, 3] = (px, py, pz)

    cx, sx_ = math.cos(rx), math.sin(rx)
    cy, sy_ = math.cos(ry), math.sin(ry)
    cz, sz_ = math.cos(rz), math.sin(rz)
    rot_x = np.array([[1, 0, 0, 0], [0, cx, -sx_, 0], [0, sx_, cx, 0], [0, 0, 0, 1]], dtype=float)
    rot_y = np.array([[cy, 0, sy_, 0], [0, 1, 0, 0], [-sy_, 0, cy, 0], [0, 0, 0, 1]], dtype=float)
    rot_z = np.array([[cz, -sz_, 0, 0], [sz_, cz, 0, 0], [0, 0, 1, 0], [0, 0, 0, 1]], dtype=float)

    scaling = np.diag([sx, sy, sz, 1.0])
    return translate @ rot_z @ rot_y @ rot_x @ scaling


@dataclass(frozen=True)
class BoundingBox:
    """An axis-aligned box given by its minimum and maximum corners."""

    minimum: Vec3
    maximum: Vec3

    def __post_init__(self) -> None:
        if any(lo > hi for lo, hi in zip(self.minimum, self.maximum)):
            raise ValueError("minimum corner must not exceed maximum corner")

    @classmethod
    def from_points(cls, points: Sequence[Sequence[float]]) -> "BoundingBox":
        """Smallest box holding every point; ValueError if there are none."""
        array = np.asarray(points, dtype=float)
        if array.size == 0:
            raise ValueError("no points to bound")
        array = array.reshape(-1, 3)
        lo = array.min(axis=0)
        hi = array.max(axis=0)
        return cls(tuple(float(v) for v in lo), tuple(float(v) for v in hi))  # type: ignore[arg-type]

    def corners(self) -> List[Vec3]:
        """The eight corners of the box."""
        (x0, y0, z0), (x1, y1, z1) = self.minimum, self.maximum
        return [(x, y, z) for x in (x0, x1) for y in (y0, y1) for z in (z0, z1)]

    def contains(self, point: Sequence[float]) -> bool:
        """True if ``point`` lies inside or on the box."""
        return all(lo <= p <= hi for lo, p, hi in zip(self.minimum, point, self.maximum))

    def transformed(self, matrix: Any) -> "BoundingBox":
        """Box around the eight corners after transforming them by ``matrix``.

        A fast, slightly generous estimate of the transformed object's bounds.
        """
        m = np.asarray(matrix, dtype=float)
        if m.shape != (4, 4):
            raise ValueError("expected a 4x4 matrix")
        corners = np.hstack([np.asarray(self.corners(), dtype=float), np.ones((8, 1))])
        moved = corners @ m.T
        return BoundingBox.from_points(moved[:, :3] / moved[:, 3:4])


@dataclass(frozen=True)
class Frustum:
    """Six planes bounding a view volume, each as (normal, offset) facing inward."""

    planes: Tuple[Tuple[Vec3, float], ...]

    @classmethod
    def from_camera(cls, eye: Sequence[float], target: Sequence[float],
                    up: Sequence[float] = (0.0, 1.0, 0.0), fov: float = 60.0,
                    aspect: float = 1.0, near: float = 0.1, far: float = 1000.0) -> "Frustum":
        """Frustum of a perspective camera; ``fov`` is the vertical angle in degrees."""
        if near <= 0.0 or far <= near:
            raise ValueError("need 0 < near < far")
        if not 0.0 < fov < 180.0:
            raise ValueError("field of view must lie between 0 and 180 degrees")
        if aspect <= 0.0:
            raise ValueError("aspect ratio must be positive")
        eye_v = _vec(eye)
        forward = _normalized(_vec(target) - eye_v)
        right = _normalized(np.cross(forward, _vec(up)))
        true_up = np.cross(right, forward)

        tan_half = math.tan(math.radians(fov) * 0.5)

        def rectangle(distance: float) -> List[np.ndarray]:
            centre = eye_v + forward * distance
            h = tan_half * distance
            w = h * aspect
            return [centre + right * sx * w + true_up * sy * h
                    for sx, sy in ((-1, -1), (1, -1), (1, 1), (-1, 1))]

        n = rectangle(near)
        f = rectangle(far)
        inside = (sum(n) + sum(f)) / 8.0

        triples = (
            (n[0], n[1], n[2]),  # near
            (f[0], f[1], f[2]),  # far
            (n[0], f[0], f[3]),  # left
            (n[1], f[1], f[2]),  # right
            (n[0], f[0], f[1]),  # bottom
            (n[3], f[3], f[2]),  # top
        )
        planes = []
        for a, b, c in triples:
            normal = _normalized(np.cross(b - a, c - a))
            offset = -float(normal @ a)
            if float(normal @ inside) + offset < 0.0:
                normal, offset = -normal, -offset
            planes.append((tuple(float(v) for v in normal), offset))
        return cls(tuple(planes))  # type: ignore[arg-type]

    def contains(self, point: Sequence[float]) -> bool:
        """True if ``point`` lies inside or on the frustum."""
        p = _vec(point)
        return all(float(np.dot(normal, p)) + offset >= 0.0 for normal, offset in self.planes)

    def intersects(self, box: BoundingBox) -> bool:
        """False only if the box lies wholly outside one of the planes."""
        for normal, offset in self.planes:
            farthest = [hi if n >= 0.0 else lo
                        for n, lo, hi in zip(normal, box.minimum, box.maximum)]
            if float(np.dot(normal, farthest)) + offset < 0.0:
                return False
        return True


class CullableObject:
    """An object with a transform that can be marked as culled."""

    def __init__(self, mesh: Any = None) -> None:
        self.mesh = mesh
        self.is_culled = False
        self.position: Vec3 = (0.0, 0.0, 0.0)
        self.rotation: Vec3 = (0.0, 0.0, 0.0)
        self.scale: Vec3 = (DEFAULT_OBJECT_SCALE,) * 3  # type: ignore[assignment]
        self.transform = np.eye(4)
        self.set_transform(self.position, self.rotation, self.scale)

    def update(self, elapsed: float) -> None:
        """Turn about the y axis by ``elapsed`` radians."""
        x, y, z = self.rotation
        self.set_transform(self.position, (x, y + elapsed, z), self.scale)

    def set_transform(self, position: Sequence[float], rotation: Sequence[float],
                      scale: Sequence[float]) -> None:
        """Set position, rotation and scale, and rebuild the combined matrix."""
        self.position = tuple(float(v) for v in position)  # type: ignore[assignment]
        self.rotation = tuple(float(v) for v in rotation)  # type: ignore[assignment]
        self.scale = tuple(float(v) for v in scale)  # type: ignore[assignment]
        self.transform = compose_transform(self.position, self.rotation, self.scale)


@dataclass(frozen=True)
class _Camera:
    eye: Vec3 = (200.0, 200.0, 200.0)
    target: Vec3 = (0.0, 0.0, 0.0)
    up: Vec3 = (0.0, 1.0, 0.0)
    fov: float = 60.0
    aspect: float = WINDOW_SIZE[0] / WINDOW_SIZE[1]
    near: float = 50.0
    far: float = 10000.0

    def frustum(self) -> Frustum:
        return Frustum.from_camera(self.eye, self.target, self.up, self.fov,
                                   self.aspect, self.near, self.far)


@dataclass
class CullingScene:
    """Many objects scattered over a field, culled against a camera each update."""

    object_bounds: BoundingBox
    count: int = NUM_OBJECTS
    rng: Optional[random.Random] = None
    mesh: Any = None
    culling_enabled: bool = True
    camera_enabled: bool = True
    draw_estimated_bounds: bool = False
    draw_precise_bounds: bool = False
    draw_wireframes: bool = False
    help_visible: bool = True
    render_camera: _Camera = field(default_factory=_Camera)
    objects: List[CullableObject] = field(init=False)
    culling_camera: _Camera = field(init=False)

    def __post_init__(self) -> None:
        if self.count < 0:
            raise ValueError("count must not be negative")
        rng = self.rng if self.rng is not None else random.Random()
        self.objects = []
        for _ in range(self.count):
            obj = CullableObject(self.mesh)
            obj.set_transform(
                (rng.uniform(-FIELD_SIZE, FIELD_SIZE), 0.0, rng.uniform(-FIELD_SIZE, FIELD_SIZE)),
                (0.0, rng.uniform(-360.0, 360.0), 0.0),
                (OBJECT_SCALE, OBJECT_SCALE, OBJECT_SCALE),
            )
            self.objects.append(obj)
        self.culling_camera = self.render_camera

    def move_camera(self, **changes: Any) -> None:
        """Change settings of the render camera (eye, target, fov, aspect, ...)."""
        self.render_camera = replace(self.render_camera, **changes)

    def update(self, elapsed: float) -> int:
        """Advance the objects and recompute culling; return the visible count."""
        if self.camera_enabled:
            self.culling_camera = self.render_camera
        visible = self.culling_camera.frustum()
        for obj in self.objects:
            obj.update(elapsed)
            if self.culling_enabled:
                world = self.object_bounds.transformed(obj.transform)
                obj.is_culled = not visible.intersects(world)
            else:
                obj.is_culled = False
        return self.visible_count()

    def visible_count(self) -> int:
        """Number of objects that are not culled."""
        return sum(not obj.is_culled for obj in self.objects)

    def help_lines(self, vertical_sync: bool = False) -> List[str]:
        """Lines of the help panel, describing the current settings."""

        def state(flag: bool) -> str:
            return "ON" if flag else "OFF"

        return [
            f"(C) Toggle culling (currently {state(self.culling_enabled)})",
            f"(B) Toggle estimated bounding boxes (currently {state(self.draw_estimated_bounds)})",
            f"(B)+(Shift) Toggle precise bounding boxes (currently {state(self.draw_precise_bounds)})",
            f"(V) Toggle vertical sync (currently {state(vertical_sync)})",
            f"(Space) Toggle camera control (currently {state(self.camera_enabled)})",
            "(H) Toggle this help panel",
        ]