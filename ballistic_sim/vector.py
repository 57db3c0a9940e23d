"""
3D Vector
=========
Immutable three-component vector used for position, velocity, wind and
acceleration.

Coordinate system:
  x = downrange (away from the shooter, 0 at the muzzle)
  y = lateral   (positive from right to left as seen by the shooter)
  z = vertical  (up positive)

Every operation returns a new Vector3; the named methods (add, subtract,
scale, divide) are the primitives and the arithmetic operators delegate to
them.
"""

from __future__ import annotations

import math
from typing import NamedTuple

import numpy as np

from .exceptions import VectorDivisionError

__all__ = ('Vector3', 'ZERO')


class Vector3(NamedTuple):
    """Immutable 3D vector of floats (defaults to the zero vector)."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def from_length_and_elevation(cls, length: float, angle: float) -> Vector3:
        """
        Vector of the given length in the vertical firing plane, raised
        ``angle`` radians above the x axis (y stays 0).
        """
        return cls(length * math.cos(angle), 0.0, length * math.sin(angle))

    # ── Named operations ──────────────────────────────────────────────────
    def add(self, other: Vector3) -> Vector3:
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def subtract(self, other: Vector3) -> Vector3:
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def scale(self, factor: float) -> Vector3:
        return Vector3(self.x * factor, self.y * factor, self.z * factor)

    def divide(self, divisor: float) -> Vector3:
        """Componentwise division by a scalar; zero raises VectorDivisionError."""
        if divisor == 0:
            raise VectorDivisionError(f"Cannot divide {self!r} by zero")
        return Vector3(self.x / divisor, self.y / divisor, self.z / divisor)

    def dot(self, other: Vector3) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def magnitude(self) -> float:
        return math.hypot(self.x, self.y, self.z)

    def normalize(self) -> Vector3:
        """Unit vector in the same direction. The zero vector has none."""
        m = self.magnitude()
        if m == 0:
            raise VectorDivisionError("Cannot normalize the zero vector")
        return self.divide(m)

    def elevation(self) -> float:
        """Angle of the x/z projection above the x axis (radians)."""
        return math.atan2(self.z, self.x)

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z])

    # ── Operators ─────────────────────────────────────────────────────────
    def __add__(self, other: Vector3) -> Vector3:  # type: ignore[override]
        return self.add(other)

    def __sub__(self, other: Vector3) -> Vector3:
        return self.subtract(other)

    def __mul__(self, factor: float) -> Vector3:  # type: ignore[override]
        return self.scale(factor)

    def __rmul__(self, factor: float) -> Vector3:  # type: ignore[override]
        return self.scale(factor)

    def __truediv__(self, divisor: float) -> Vector3:
        return self.divide(divisor)

    def __neg__(self) -> Vector3:
        return Vector3(-self.x, -self.y, -self.z)

    def __repr__(self) -> str:
        return f"Vector3(x={self.x:g}, y={self.y:g}, z={self.z:g})"


ZERO = Vector3()
