"""Balls bouncing under gravity inside a window, colliding with each other."""

from __future__ import annotations

import colorsys
import math
import random
import time
from dataclasses import dataclass
from typing import Iterator, List, NamedTuple, Optional, Tuple

Color = Tuple[float, float, float]

RADIUS = 10
SPEED_MULTIPLIER = 0.5
GRAVITY = 0.981
MIN_TRAIL = 3.0
MAX_TRAIL = 30.0
WALL_FRICTION = -0.95
FLOOR_FRICTION = 0.99


@dataclass(frozen=True)
class Vec2:
    """An immutable two-dimensional vector."""

    x: float = 0.0
    y: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __add__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> "Vec2":
        return Vec2(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    def __truediv__(self, divisor: float) -> "Vec2":
        return Vec2(self.x / divisor, self.y / divisor)

    def dot(self, other: "Vec2") -> float:
        return self.x * other.x + self.y * other.y

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def distance(self, other: "Vec2") -> float:
        return (self - other).length()

    def normalized(self) -> "Vec2":
        return self / self.length()

    def lerp(self, fraction: float, other: "Vec2") -> "Vec2":
        return self + (other - self) * fraction


class BallMesh(NamedTuple):
    """A triangle fan describing a textured disc."""

    positions: List[Tuple[float, float, float]]
    tex_coords: List[Tuple[float, float]]
    indices: List[int]


def ball_mesh(slices: int = 20, radius: float = RADIUS) -> BallMesh:
    """Triangle fan for one ball: a centre vertex followed by ``slices + 1`` rim vertices."""
    positions = [(0.0, 0.0, 0.0)]
    tex_coords = [(0.5, 0.5)]
    for i in range(slices + 1):
        angle = i / slices * 2.0 * math.pi
        vx, vy = math.sin(angle), math.cos(angle)
        tex_coords.append((0.5 + 0.5 * vx, 0.5 + 0.5 * vy))
        positions.append((radius * vx, radius * vy, 0.0))
    return BallMesh(positions, tex_coords, list(range(len(positions))))


class Ball:
    """A ball of fixed radius moving inside a window of the given size."""

    RADIUS = RADIUS

    def __init__(self, width: float, height: float, rng: Optional[random.Random] = None) -> None:
        self.width = width
        self.height = height
        self._rng = rng if rng is not None else random.Random()
        hue = self._rng.uniform(0.0, 1.0)
        saturation = self._rng.uniform(0.75, 1.0)
        value = self._rng.uniform(0.75, 1.0)
        self.color: Color = colorsys.hsv_to_rgb(hue, saturation, value)
        self.position = Vec2()
        self.prev_position = Vec2()
        self.velocity = Vec2()
        self.gravity = 0.0
        self.has_been_drawn = False
        self.reset()

    def reset(self) -> None:
        """Drop the ball in again from just above the window, at a random speed."""
        self.position = Vec2(self._rng.random() * self.width, -0.1 * self.height)
        self.prev_position = self.position
        self.gravity = GRAVITY * SPEED_MULTIPLIER
        self.velocity = Vec2(
            self._rng.uniform(-15.0, 15.0) * SPEED_MULTIPLIER,
            self._rng.uniform(-15.0, 0.0) * SPEED_MULTIPLIER,
        )
        self.has_been_drawn = False

    def update(self) -> None:
        """Advance one simulation step."""
        if self.has_been_drawn:
            self.prev_position = self.position
        if not self.is_colliding_with_window():
            self.velocity = Vec2(self.velocity.x, self.velocity.y + self.gravity)
        self.position = self.position + self.velocity
        self.collide_with_window()
        self.has_been_drawn = False

    def trail(self, use_motion_blur: bool = True) -> Tuple[Color, List[Vec2]]:
        """Colour and positions at which to draw the ball for this frame.

        With motion blur, between 3 and 30 copies are spread from the previous
        position to the current one, each with the colour divided among them.
        """
        if use_motion_blur:
            size = min(MAX_TRAIL, max(MIN_TRAIL, math.floor(self.prev_position.distance(self.position))))
            segments = size - 1.0
            color = tuple(channel / size for channel in self.color)
            positions = [
                self.prev_position.lerp(i / segments, self.position) for i in range(int(size))
            ]
        else:
            color = self.color
            positions = [self.position]
        self.has_been_drawn = True
        return color, positions  # type: ignore[return-value]

    def is_colliding_with(self, other: "Ball") -> bool:
        """True if the two balls overlap."""
        return self.position.distance(other.position) < 2 * self.RADIUS

    def collide_with(self, other: "Ball") -> None:
        """Resolve an elastic collision between two equal balls."""
        minimal = 2.0 * self.RADIUS

        self.position = self.position - self.velocity
        other.position = other.position - other.velocity

        line = other.position - self.position
        if line.length() == 0.0:
            return
        unit = line.normalized()

        distance = line.dot(unit)
        velocity_a = self.velocity.dot(unit)
        velocity_b = other.velocity.dot(unit)
        if velocity_a == velocity_b:
            return

        t = (minimal - distance) / (velocity_b - velocity_a)

        self.position = self.position + t * self.velocity
        other.position = other.position + t * other.velocity

        self.velocity = self.velocity - velocity_a * unit + velocity_b * unit
        other.velocity = other.velocity - velocity_b * unit + velocity_a * unit

        self.position = self.position + (1.0 - t) * self.velocity
        other.position = other.position + (1.0 - t) * other.velocity

        self.collide_with_window()
        other.collide_with_window()

    def _outside_sides(self) -> bool:
        return self.position.x < self.RADIUS or self.position.x > self.width - self.RADIUS

    def _below_floor(self) -> bool:
        return self.position.y > self.height - self.RADIUS

    def is_colliding_with_window(self) -> bool:
        """True if the ball touches the left, right or bottom edge."""
        return self._outside_sides() or self._below_floor()

    def collide_with_window(self) -> None:
        """Bounce off the edges with some friction, and keep the ball inside."""
        if self._outside_sides():
            self.prev_position = self.position
            self.position = Vec2(self.position.x - self.velocity.x, self.position.y)
            self.velocity = Vec2(self.velocity.x * WALL_FRICTION, self.velocity.y)
        if self._below_floor():
            self.prev_position = self.position
            self.position = Vec2(self.position.x, self.position.y - self.velocity.y)
            self.velocity = Vec2(
                self.velocity.x * FLOOR_FRICTION, self.velocity.y * WALL_FRICTION
            )

        x, y = self.position
        vx, vy = self.velocity
        if x < self.RADIUS:
            x, vx = float(self.RADIUS), 0.0
        elif x > self.width - self.RADIUS:
            x, vx = self.width - float(self.RADIUS), 0.0
        if y > self.height - self.RADIUS:
            y, vy = self.height - float(self.RADIUS), 0.0
        self.position = Vec2(x, y)
        self.velocity = Vec2(vx, vy)


class Simulation:
    """A set of balls stepped at a fixed rate, independent of the frame rate."""

    def __init__(
        self,
        width: float = 640,
        height: float = 480,
        count: int = 25,
        rng: Optional[random.Random] = None,
        start: float = 0.0,
        steps_per_second: int = 60,
    ) -> None:
        self.width = width
        self.height = height
        self._rng = rng if rng is not None else random.Random()
        self.steps_per_second = steps_per_second
        self.steps_performed = 0
        self.use_motion_blur = True
        self.balls: List[Ball] = [self._new_ball() for _ in range(count)]
        self._started_at = start
        self._stopped_at: Optional[float] = None

    def _new_ball(self) -> Ball:
        return Ball(self.width, self.height, self._rng)

    @property
    def paused(self) -> bool:
        return self._stopped_at is not None

    def _timer_seconds(self, now: float) -> float:
        end = self._stopped_at if self._stopped_at is not None else now
        return end - self._started_at

    def add_ball(self) -> Ball:
        """Create a new ball and return it."""
        ball = self._new_ball()
        self.balls.append(ball)
        return ball

    def remove_oldest(self) -> None:
        """Remove the ball that was added first, if there is one."""
        if self.balls:
            del self.balls[0]

    def reset_all(self) -> None:
        """Drop every ball in again."""
        for ball in self.balls:
            ball.reset()

    def toggle_pause(self, now: float) -> bool:
        """Pause or resume the simulation; return True if it is now paused."""
        if self.paused:
            self.steps_performed = 0
            self._started_at = now
            self._stopped_at = None
        else:
            self._stopped_at = now
        return self.paused

    def update(self, now: float) -> int:
        """Perform the steps due by time ``now``; return how many were performed.

        If more than a second's worth of steps is due, the surplus is skipped,
        and no more than one second of wall time is spent catching up.
        """
        total = math.floor(self._timer_seconds(now) * self.steps_per_second)
        if total - self.steps_performed > self.steps_per_second:
            self.steps_performed = total - self.steps_per_second

        deadline = time.monotonic() + 1.0
        performed = 0
        while self.steps_performed < total and time.monotonic() < deadline:
            for ball in self.balls:
                ball.update()
            self.perform_collisions()
            self.steps_performed += 1
            performed += 1

        self.steps_performed = total
        return performed

    def perform_collisions(self) -> None:
        """Check every pair of balls once and resolve the ones that overlap."""
        for i, first in enumerate(self.balls):
            for second in self.balls[i + 1 :]:
                if first.is_colliding_with(second):
                    first.collide_with(second)