"""Planar vectors, headings and angle helpers shared by stage and bot code."""

from __future__ import annotations

import math
from dataclasses import dataclass

TWO_PI = 2.0 * math.pi


def wrap_angle(angle: float) -> float:
    """Wrap ``angle`` into ``[0, 2π)``."""
    wrapped = angle - TWO_PI * math.floor(angle / TWO_PI)
    # Tiny negative inputs round up to exactly 2π.
    if wrapped >= TWO_PI:
        return 0.0
    return wrapped


@dataclass(frozen=True)
class Vector2:
    """Immutable point or displacement in stage coordinates."""

    x: float
    y: float

    @classmethod
    def from_bearing(cls, distance: float, angle: float) -> Vector2:
        """Build the displacement of length ``distance`` along ``angle``."""
        return cls(math.cos(angle) * distance, math.sin(angle) * distance)

    def __sub__(self, other: Vector2) -> Vector2:
        return Vector2(self.x - other.x, self.y - other.y)

    def as_tuple(self) -> tuple[float, float]:
        return (float(self.x), float(self.y))


@dataclass
class Position:
    """Point plus heading. Rotation is kept in ``[0, 2π)`` by its owners."""

    x: float
    y: float
    rotation: float = 0.0

    @property
    def point(self) -> Vector2:
        return Vector2(self.x, self.y)

    def copy(self) -> Position:
        return Position(self.x, self.y, self.rotation)
