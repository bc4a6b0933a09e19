"""Geometry of an analog clock face with hour markers and three hands."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

Point = Tuple[float, float]
Color = Tuple[float, float, float]
Shape = Tuple[Color, Tuple[Point, ...]]

WINDOW_SIZE = (300, 300)
WHITE: Color = (1.0, 1.0, 1.0)
RED: Color = (1.0, 0.0, 0.0)

HOUR_MARKER = (-3.0, -110.0, 3.0, -90.0)
MINUTE_HAND = (-2.0, -100.0, 2.0, 15.0)
HOUR_HAND = (-2.0, -60.0, 2.0, 15.0)
SECOND_HAND = (-1.0, -100.0, 1.0, 15.0)
CAP_RADIUS = 6.0
CAP_SEGMENTS = 24


@dataclass(frozen=True)
class HandAngles:
    """Clockwise rotation of each hand in degrees, measured from twelve o'clock."""

    hour: float
    minute: float
    second: float


def seconds_since_midnight(now: Optional[datetime] = None) -> float:
    """Whole seconds elapsed since local midnight."""
    if now is None:
        now = datetime.now()
    return float(now.hour * 3600 + now.minute * 60 + now.second)


def hand_angles(seconds: float) -> HandAngles:
    """Angles of the three hands for a time given in seconds since midnight."""
    return HandAngles(
        hour=seconds * (30.0 / 3600.0),
        minute=seconds * (360.0 / 3600.0),
        second=seconds * (360.0 / 60.0),
    )


def hour_marker_angles() -> List[float]:
    """Angles of the twelve hour markers, 30 degrees apart."""
    return [hour * 30.0 for hour in range(12)]


def rotate_point(point: Point, degrees: float, center: Point = (0.0, 0.0)) -> Point:
    """Rotate ``point`` about the origin, then translate it by ``center``.

    In window coordinates (y pointing down) a positive angle turns clockwise.
    """
    radians = math.radians(degrees)
    cos_a, sin_a = math.cos(radians), math.sin(radians)
    x, y = point
    return (center[0] + x * cos_a - y * sin_a, center[1] + x * sin_a + y * cos_a)


def _rect(bounds: Sequence[float], degrees: float, center: Point) -> Tuple[Point, ...]:
    x1, y1, x2, y2 = bounds
    corners = ((x1, y1), (x2, y1), (x2, y2), (x1, y2))
    return tuple(rotate_point(corner, degrees, center) for corner in corners)


def _circle(radius: float, segments: int, center: Point) -> Tuple[Point, ...]:
    return tuple(
        (
            center[0] + radius * math.cos(2.0 * math.pi * i / segments),
            center[1] + radius * math.sin(2.0 * math.pi * i / segments),
        )
        for i in range(segments)
    )


def clock_face(now: Optional[datetime] = None, center: Optional[Point] = None) -> List[Shape]:
    """Polygons to draw for the clock, in drawing order, each with its colour.

    The twelve markers come first, then the minute and hour hands in white,
    then the red second hand and its round cap.
    """
    if center is None:
        center = (0.5 * WINDOW_SIZE[0], 0.5 * WINDOW_SIZE[1])
    angles = hand_angles(seconds_since_midnight(now))

    shapes: List[Shape] = [
        (WHITE, _rect(HOUR_MARKER, angle, center)) for angle in hour_marker_angles()
    ]
    shapes.append((WHITE, _rect(MINUTE_HAND, angles.minute, center)))
    shapes.append((WHITE, _rect(HOUR_HAND, angles.hour, center)))
    shapes.append((RED, _rect(SECOND_HAND, angles.second, center)))
    shapes.append((RED, _circle(CAP_RADIUS, CAP_SEGMENTS, center)))
    return shapes