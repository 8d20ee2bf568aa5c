"""Planar value types used throughout the skeleton computation.

This module defines the small immutable vector types the algorithm is written in:
- Vec2: A 2D point or direction
- Vec3: A 3D point (2D position plus height) emitted by face reconstruction
- Segment: A directed segment between two points
- Ray: A half-line with an origin and a (not necessarily unit) direction
"""

import math
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Vec2:
    """A point or direction in the plane.

    Immutable and hashable so points can key the planar graph used for face
    reconstruction. Equality is exact; tolerance-based comparisons live in
    ``skeletonizer.core.geometry``.

    Attributes:
        x: X coordinate
        y: Y coordinate
    """

    x: float
    y: float

    @classmethod
    def of(cls, value: "Vec2 | tuple[float, float] | list[float]") -> "Vec2":
        """Coerce an (x, y) pair or an existing Vec2 into a Vec2.

        Args:
            value: Vec2 instance or any two-element sequence of numbers

        Returns:
            Vec2 instance with float coordinates
        """
        if isinstance(value, Vec2):
            return value
        x, y = value
        return cls(float(x), float(y))

    def __add__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> "Vec2":
        return Vec2(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __neg__(self) -> "Vec2":
        return Vec2(-self.x, -self.y)

    def dot(self, other: "Vec2") -> float:
        return self.x * other.x + self.y * other.y

    def cross(self, other: "Vec2") -> float:
        """Return the z component of the 3D cross product (2D determinant)."""
        return self.x * other.y - self.y * other.x

    def magnitude2(self) -> float:
        return self.x * self.x + self.y * self.y

    def magnitude(self) -> float:
        return math.hypot(self.x, self.y)

    def normalize(self) -> "Vec2":
        """Return the unit vector pointing the same way.

        A zero vector has no direction; the result is then NaN in both
        components so every predicate consuming it evaluates to False.

        Returns:
            Unit-length Vec2, or Vec2(nan, nan) for a zero vector
        """
        length = self.magnitude()
        if length == 0.0:
            return Vec2(math.nan, math.nan)
        return Vec2(self.x / length, self.y / length)

    def distance(self, other: "Vec2") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def distance2(self, other: "Vec2") -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        return dx * dx + dy * dy

    def with_z(self, z: float) -> "Vec3":
        """Lift the point into 3D with the given height."""
        return Vec3(self.x, self.y, z)

    def to_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)

    def to_list(self) -> list[float]:
        return [self.x, self.y]


@dataclass(frozen=True, slots=True)
class Vec3:
    """A point in space: planar position plus height.

    Attributes:
        x: X coordinate
        y: Y coordinate
        z: Height above the polygon plane
    """

    x: float
    y: float
    z: float

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def to_list(self) -> list[float]:
        return [self.x, self.y, self.z]

    @classmethod
    def from_list(cls, data: list[float]) -> "Vec3":
        x, y, z = data
        return cls(float(x), float(y), float(z))


@dataclass(frozen=True, slots=True)
class Segment:
    """A directed segment from ``src`` to ``dst``.

    Attributes:
        src: Start point
        dst: End point
    """

    src: Vec2
    dst: Vec2

    def vec(self) -> Vec2:
        """Return the (unnormalized) direction vector ``dst - src``."""
        return self.dst - self.src

    def to_dict(self) -> dict[str, Any]:
        return {"src": self.src.to_list(), "dst": self.dst.to_list()}


@dataclass(frozen=True, slots=True)
class Ray:
    """A half-line starting at ``origin`` and extending along ``direction``.

    Attributes:
        origin: Start point of the ray
        direction: Direction vector (any non-zero length; may be degenerate)
    """

    origin: Vec2
    direction: Vec2
