#!/usr/bin/env python3
"""
sim/physics.py
==============
Low-level geometry helpers used by every :mod:`sim` module.

World space is right-handed with ``y`` up: the main corridor runs along
``x`` (east is ``+x``) and lanes are offset along ``z``.  Keeping these in
a separate module avoids circular imports and makes unit testing
straightforward.
"""

from __future__ import annotations

import math
from typing import NamedTuple


class Vec3(NamedTuple):
    """Immutable 3D point / vector."""

    x: float
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: "Vec3") -> "Vec3":  # type: ignore[override]
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vec3") -> "Vec3":
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def scaled(self, k: float) -> "Vec3":
        return Vec3(self.x * k, self.y * k, self.z * k)

    def dot(self, other: "Vec3") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def length(self) -> float:
        return math.sqrt(self.dot(self))

    def normalized(self) -> "Vec3":
        """Unit vector, or the zero vector when the length is ~0."""
        n = self.length()
        if n < 1e-9:
            return Vec3(0.0, 0.0, 0.0)
        return self.scaled(1.0 / n)


ZERO = Vec3(0.0, 0.0, 0.0)
EAST = Vec3(1.0, 0.0, 0.0)


def distance(a: Vec3, b: Vec3) -> float:
    """Euclidean distance between two points."""
    return (a - b).length()


def project(point: Vec3, axis: Vec3) -> float:
    """Scalar coordinate of *point* along the unit vector *axis*."""
    return point.dot(axis)


def sign(value: float) -> int:
    """``+1``, ``-1`` or ``0``."""
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def damp(current: float, target: float, rate: float, dt: float) -> float:
    """Frame-rate independent exponential approach of *current* to *target*.

    Parameters
    ----------
    current, target : float
        Present and desired value.
    rate : float
        Damping rate (1/s); larger values converge faster.
    dt : float
        Elapsed time in seconds.

    Returns
    -------
    float
        ``current`` moved by the fraction ``1 - exp(-rate * dt)`` of the
        remaining gap.  Never overshoots *target*.
    """
    t = 1.0 - math.exp(-rate * max(0.0, dt))
    return current + (target - current) * t
