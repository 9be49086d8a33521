"""Seeded multi-octave Perlin noise used to carve stage obstacles."""

from __future__ import annotations

from typing import Any

import numpy as np

MIN_OCTAVES = 1
MAX_OCTAVES = 16
MIN_FREQUENCY = 0.1
MAX_FREQUENCY = 64.0


def _fade(t: np.ndarray) -> np.ndarray:
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def _lerp(a: np.ndarray, b: np.ndarray, t: np.ndarray) -> np.ndarray:
    return a + t * (b - a)


def _grad(hash_: np.ndarray, x: np.ndarray, y: np.ndarray) -> np.ndarray:
    # Improved-noise gradient set evaluated on the z = 0 plane.
    h = hash_ & 15
    u = np.where(h < 8, x, y)
    v = np.where(h < 4, y, np.where((h == 12) | (h == 14), x, 0.0))
    return np.where(h & 1, -u, u) + np.where(h & 2, -v, v)


class NoiseField:
    """Deterministic fractal noise over continuous 2D coordinates.

    The permutation table is rebuilt only by :meth:`generate`; between calls
    the field is a pure function of position.
    """

    def __init__(self, seed: int = 0, octaves: int = 2, frequency: float = 6.0) -> None:
        self.octaves = octaves
        self.frequency = frequency
        self.seed = int(seed)
        self._perm = self._permutation(self.seed)

    @property
    def octaves(self) -> int:
        return self._octaves

    @octaves.setter
    def octaves(self, value: int) -> None:
        self._octaves = int(min(max(int(value), MIN_OCTAVES), MAX_OCTAVES))

    @property
    def frequency(self) -> float:
        return self._frequency

    @frequency.setter
    def frequency(self, value: float) -> None:
        self._frequency = float(min(max(float(value), MIN_FREQUENCY), MAX_FREQUENCY))

    @staticmethod
    def _permutation(seed: int) -> np.ndarray:
        perm = np.random.default_rng(seed).permutation(256).astype(np.int64)
        return np.concatenate([perm, perm])

    def generate(self, seed: int | None = None) -> None:
        """Rebuild the field, optionally switching to a new ``seed``."""
        if seed is not None:
            self.seed = int(seed)
        self._perm = self._permutation(self.seed)

    def noise(self, x: Any, y: Any) -> np.ndarray:
        """Single-octave noise in roughly ``[-1, 1]``."""
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        xf = np.floor(x)
        yf = np.floor(y)
        xi = xf.astype(np.int64) & 255
        yi = yf.astype(np.int64) & 255
        x = x - xf
        y = y - yf
        u = _fade(x)
        v = _fade(y)

        p = self._perm
        a = p[xi] + yi
        b = p[xi + 1] + yi
        aa, ab = p[a], p[a + 1]
        ba, bb = p[b], p[b + 1]

        lower = _lerp(_grad(aa, x, y), _grad(ba, x - 1.0, y), u)
        upper = _lerp(_grad(ab, x, y - 1.0), _grad(bb, x - 1.0, y - 1.0), u)
        return _lerp(lower, upper, v)

    def value(self, x: Any, y: Any) -> Any:
        """Octave-summed noise remapped into ``[0, 1]``.

        Each octave doubles the frequency and halves the amplitude; the sum is
        divided by the total amplitude so the range does not depend on the
        octave count. Scalars in give a float back, arrays give an array.
        """
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        total = np.zeros(np.broadcast(x, y).shape, dtype=np.float64)
        amplitude = 1.0
        amplitude_sum = 0.0
        scale = 1.0
        for _ in range(self._octaves):
            total += amplitude * self.noise(x * scale, y * scale)
            amplitude_sum += amplitude
            amplitude *= 0.5
            scale *= 2.0

        result = np.clip(0.5 * (total / amplitude_sum) + 0.5, 0.0, 1.0)
        if result.ndim == 0:
            return float(result)
        return result
