"""Bounded ray-casting search proving an escape route exists on a stage."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from core.geometry import Vector2

if TYPE_CHECKING:
    from environment.stage import Stage

LOGGER = logging.getLogger(__name__)


class NavigabilityBudgetExceeded(RuntimeError):
    """Raised inside the search when the global cast budget runs out."""


@dataclass(frozen=True)
class CastSettings:
    """Ray fan parameters for the escape search."""

    trace_distance: float = 50.0
    cast_count: int = 32
    collision_points: int = 20
    max_cast_iterations: int = 10_000

    def __post_init__(self) -> None:
        if self.cast_count <= 0:
            raise ValueError("cast_count must be > 0")
        if self.collision_points <= 0:
            raise ValueError("collision_points must be > 0")
        if self.trace_distance <= 0.0:
            raise ValueError("trace_distance must be > 0")


@dataclass
class _CastNode:
    origin: Vector2
    parent_ray: int
    next_ray: int = 0


class EscapeSearch:
    """Depth-first fan of rays from a start point towards the stage edge.

    Every node casts ``cast_count`` evenly spaced rays. A ray that reaches
    outside the stage ends the search successfully, a ray that hits an
    obstacle is dropped, and a ray that stops in open space opens a child node
    at its end point. Nodes live on an explicit stack; ``casts`` counts every
    node opened across the whole tree.
    """

    def __init__(self, stage: Stage, settings: CastSettings | None = None) -> None:
        self.stage = stage
        self.settings = settings or CastSettings()
        self.casts = 0
        self._offsets = np.arange(1, self.settings.collision_points + 1, dtype=np.float64) * (
            self.settings.trace_distance / self.settings.collision_points
        )

    def _open(self, origin: Vector2, parent_ray: int) -> _CastNode:
        if self.casts > self.settings.max_cast_iterations:
            raise NavigabilityBudgetExceeded(
                f"Escape search exceeded {self.settings.max_cast_iterations} casts."
            )
        self.casts += 1
        return _CastNode(origin=origin, parent_ray=parent_ray)

    def _skip(self, node: _CastNode, index: int) -> bool:
        # Suppresses the ray pointing back along the incoming one.
        count = self.settings.cast_count
        return node.parent_ray < count and index == count // 2 and index % 2 == 0

    def _trace(self, origin: Vector2, ray_index: int) -> tuple[Vector2, bool]:
        """March one ray; return its end point and whether it hit an obstacle."""
        angle = (2.0 * math.pi * ray_index) / self.settings.cast_count
        direction = Vector2.from_bearing(1.0, angle)
        xs = origin.x + self._offsets * direction.x
        ys = origin.y + self._offsets * direction.y
        hits = self.stage.collisions(xs, ys)
        if hits.any():
            first = int(np.argmax(hits))
            return Vector2(float(xs[first]), float(ys[first])), True
        return Vector2(float(xs[-1]), float(ys[-1])), False

    def run(self, start: Vector2) -> bool:
        """Search from ``start``. Raises ``NavigabilityBudgetExceeded`` on timeout."""
        count = self.settings.cast_count
        self.casts = 0
        stack = [self._open(start, count)]
        while stack:
            node = stack[-1]
            if node.next_ray >= count:
                stack.pop()
                continue
            index = node.next_ray
            node.next_ray += 1
            if self._skip(node, index):
                continue

            ray_index = (index + node.parent_ray) % count
            end, collided = self._trace(node.origin, ray_index)
            if not self.stage.in_bounds(end):
                return True
            if not collided:
                stack.append(self._open(end, ray_index))
        return False


def is_navigable(stage: Stage, settings: CastSettings | None = None) -> bool:
    """Return whether the spawn point of ``stage`` has a clear route out.

    A spawn point inside an obstacle is never navigable. Running out of cast
    budget counts as not navigable.
    """
    spawn = Vector2(*stage.spawn_point)
    if stage.collision(spawn):
        return False
    search = EscapeSearch(stage, settings)
    try:
        return search.run(spawn)
    except NavigabilityBudgetExceeded as exc:
        LOGGER.debug("Stage seed %s treated as impossible: %s", stage.seed, exc)
        return False
