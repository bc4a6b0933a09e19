"""Placement of hexagon instances in a staggered grid."""

from __future__ import annotations

import math
from typing import Tuple

import numpy as np

NUM_INSTANCES = 9600
INSTANCES_PER_ROW = 60
ROW_HEIGHT = 0.866025


def instance_offset(index: int, per_row: int = INSTANCES_PER_ROW) -> Tuple[float, float, float]:
    """Position of hexagon ``index``; odd rows are shifted half a cell sideways."""
    if per_row <= 0:
        raise ValueError("per_row must be positive")
    x = math.fmod(float(index), per_row)
    y = math.floor(float(index) / per_row)
    return (3.0 * x + 1.5 * math.fmod(y, 2.0), ROW_HEIGHT * y, 0.0)


def instance_matrices(count: int = NUM_INSTANCES, per_row: int = INSTANCES_PER_ROW) -> np.ndarray:
    """One 4x4 translation matrix per instance, shape (count, 4, 4).

    The translation sits in the last column, so flattening a matrix in
    column-major order yields the layout a GPU attribute buffer expects.
    """
    if count < 0:
        raise ValueError("count must not be negative")
    matrices = np.tile(np.eye(4, dtype=np.float32), (count, 1, 1))
    for index in range(count):
        matrices[index, :3, 3] = instance_offset(index, per_row)
    return matrices


def texture_scale(per_row: int = INSTANCES_PER_ROW) -> Tuple[float, float]:
    """Factors that map instance positions to texture coordinates."""
    if per_row <= 0:
        raise ValueError("per_row must be positive")
    return (1.0 / (3.0 * per_row), 1.0 / (2.25 * per_row))