"""Noise-carved terrain with collision and bounds predicates."""

from __future__ import annotations

from typing import Any

import numpy as np

from core.geometry import Vector2
from environment.navigability import CastSettings, is_navigable
from environment.noise import NoiseField


def _xy(pos: Any) -> tuple[float, float]:
    if isinstance(pos, Vector2):
        return pos.x, pos.y
    if hasattr(pos, "x") and hasattr(pos, "y"):
        return float(pos.x), float(pos.y)
    x, y = pos
    return float(x), float(y)


class Stage:
    """Rectangular stage whose obstacles are noise values above a threshold.

    The spawn point sits at the centre of the window. Regenerating the noise
    (``generate``) is the only mutation expected during a run; all queries
    are read-only.
    """

    def __init__(
        self,
        width: int,
        height: int,
        seed: int = 0,
        octaves: int = 2,
        frequency: float = 6.0,
        threshold: float = 0.55,
        cast_settings: CastSettings | None = None,
    ) -> None:
        if int(width) <= 0 or int(height) <= 0:
            raise ValueError("Stage width and height must be > 0")
        self._width = int(width)
        self._height = int(height)
        self._spawn = (self._width // 2, self._height // 2)
        self.noise_field = NoiseField(seed=seed, octaves=octaves, frequency=frequency)
        self.threshold = threshold
        self.cast_settings = cast_settings or CastSettings()

    @property
    def seed(self) -> int:
        return self.noise_field.seed

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def threshold(self) -> float:
        return self._threshold

    @threshold.setter
    def threshold(self, value: float) -> None:
        self._threshold = float(min(max(float(value), 0.0), 1.0))

    @property
    def spawn_point(self) -> tuple[int, int]:
        return self._spawn

    @property
    def window_size(self) -> tuple[int, int]:
        return (self._width, self._height)

    def set_octaves(self, octaves: int) -> None:
        self.noise_field.octaves = octaves

    def set_frequency(self, frequency: float) -> None:
        self.noise_field.frequency = frequency

    def generate(self, seed: int | None = None) -> None:
        """Regenerate the terrain, optionally for a new ``seed``."""
        self.noise_field.generate(seed)

    def value(self, x: Any, y: Any = None) -> Any:
        """Noise amplitude at stage coordinates, scaled by window and frequency.

        Takes either a position (``value(pos)``) or coordinates, which may be
        numpy arrays (``value(xs, ys)``).
        """
        if y is None:
            x, y = _xy(x)
        frequency = self.noise_field.frequency
        return self.noise_field.value(
            np.asarray(x, dtype=np.float64) * (frequency / self._width),
            np.asarray(y, dtype=np.float64) * (frequency / self._height),
        )

    def in_bounds(self, pos: Any) -> bool:
        x, y = _xy(pos)
        return 0.0 <= x < self._width and 0.0 <= y < self._height

    def collision(self, pos: Any) -> bool:
        """Return true when ``pos`` lies inside an obstacle.

        Points outside the stage never collide.
        """
        if not self.in_bounds(pos):
            return False
        x, y = _xy(pos)
        return bool(self.value(x, y) > self._threshold)

    def collisions(self, xs: Any, ys: Any) -> np.ndarray:
        """Vectorised :meth:`collision` over matching coordinate arrays."""
        xs = np.asarray(xs, dtype=np.float64)
        ys = np.asarray(ys, dtype=np.float64)
        inside = (xs >= 0.0) & (ys >= 0.0) & (xs < self._width) & (ys < self._height)
        hits = np.zeros(inside.shape, dtype=bool)
        if inside.any():
            hits[inside] = np.asarray(self.value(xs[inside], ys[inside])) > self._threshold
        return hits

    def navigable(self) -> bool:
        """Return whether an obstacle-free route leads from spawn to the edge."""
        return is_navigable(self, self.cast_settings)
