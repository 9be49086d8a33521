"""Sweeping range sensor carried by a bot."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, NamedTuple

import numpy as np

from core.geometry import Position, Vector2
from environment.stage import Stage


class SensorNotReadyError(RuntimeError):
    """Raised when sweep data is read before the sweep has finished."""


class SonarSample(NamedTuple):
    """One reading: offset angle from the carrier heading and range."""

    angle: float
    distance: float


@dataclass(frozen=True)
class SonarSettings:
    """Sensor geometry and timing."""

    cast_count: int = 18
    fov: float = math.pi
    max_dist: float = 100.0
    cast_resolution: float = 1.0
    rots: float = math.pi / 2.0

    def __post_init__(self) -> None:
        if self.cast_count <= 0:
            raise ValueError("cast_count must be > 0")
        if self.cast_resolution <= 0.0:
            raise ValueError("cast_resolution must be > 0")
        if self.rots <= 0.0:
            raise ValueError("rots must be > 0")
        if self.max_dist < 0.0:
            raise ValueError("max_dist must be >= 0")


class Sonar:
    """Back-and-forth scanning ray sensor.

    ``carrier`` returns the current position of whatever the sonar is mounted
    on; the sonar never moves it. Each :meth:`step` advances the sweep one
    angular slot and stores a sample in a ring buffer of ``cast_count``
    entries.
    """

    def __init__(
        self,
        carrier: Callable[[], Position],
        stage: Stage,
        settings: SonarSettings | None = None,
    ) -> None:
        self._carrier = carrier
        self._stage = stage
        self.settings = settings or SonarSettings()
        count = self.settings.cast_count
        self._probe_offsets = np.arange(
            int(math.floor(self.settings.max_dist / self.settings.cast_resolution)) + 1,
            dtype=np.float64,
        ) * self.settings.cast_resolution
        self.sweep_step = 0
        self.bounce = False
        self.write_index = 0
        self._buffer = [SonarSample(0.0, 0.0)] * count

    @property
    def cast_count(self) -> int:
        return self.settings.cast_count

    def reset(self) -> None:
        """Return to the resting position with an empty buffer."""
        self.sweep_step = 0
        self.bounce = False
        self.write_index = 0
        self._buffer = [SonarSample(0.0, 0.0)] * self.settings.cast_count

    def rotation(self) -> float:
        """Current offset from the carrier heading."""
        fov = self.settings.fov
        return (self.sweep_step * fov) / self.settings.cast_count - fov / 2.0

    def position(self) -> Position:
        carrier = self._carrier()
        return Position(carrier.x, carrier.y, carrier.rotation + self.rotation())

    def distance(self) -> float:
        """Range to the first obstacle along the beam, capped at ``max_dist``."""
        beam = self.position()
        direction = Vector2.from_bearing(1.0, beam.rotation)
        xs = beam.x + self._probe_offsets * direction.x
        ys = beam.y + self._probe_offsets * direction.y
        hits = self._stage.collisions(xs, ys)
        if hits.any():
            return float(self._probe_offsets[int(np.argmax(hits))])
        return float(self.settings.max_dist)

    def at_end(self) -> bool:
        """True when a full sweep's worth of samples is in the buffer."""
        return self.sweep_step == 0 or self.sweep_step == self.settings.cast_count

    def gap(self) -> float:
        """Simulated seconds covered by one step."""
        return self.settings.fov / (self.settings.rots * self.settings.cast_count)

    def step(self) -> SonarSample:
        count = self.settings.cast_count
        if self.bounce:
            self.sweep_step -= 1
        else:
            self.sweep_step += 1
        if self.sweep_step == 0:
            self.bounce = False
        elif self.sweep_step == count:
            self.bounce = True

        sample = SonarSample(self.rotation(), self.distance())
        self._buffer[self.write_index] = sample
        self.write_index = (self.write_index + 1) % count
        return sample

    def data(self) -> list[SonarSample]:
        if not self.at_end():
            raise SensorNotReadyError(
                f"Sonar data not ready: sweep at step {self.sweep_step} of {self.settings.cast_count}."
            )
        return list(self._buffer)
