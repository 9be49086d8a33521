"""Observer that traces the route a bot takes through a trial."""

from __future__ import annotations

import math

from agents.base import BotObserver


class PathRecorder(BotObserver):
    """Keeps every in-bounds position the bot visits.

    ``distance`` accumulates the travelled length from the spawn point over
    all steps, including the final one that may leave the stage.
    """

    def __init__(self, max_points: int | None = None) -> None:
        self.max_points = max_points
        self.points: list[tuple[float, float]] = []
        self.distance = 0.0
        self.steps = 0
        self._last: tuple[float, float] | None = None

    def on_step(self, bot) -> None:
        position = bot.position()
        current = position.point.as_tuple()
        if self._last is None:
            # Bots always start a trial on the spawn point.
            spawn_x, spawn_y = bot.stage.spawn_point
            self._last = (float(spawn_x), float(spawn_y))
        self.distance += math.hypot(current[0] - self._last[0], current[1] - self._last[1])
        self._last = current
        self.steps += 1
        if not bot.in_bounds():
            return
        if self.max_points is not None and len(self.points) >= self.max_points:
            return
        self.points.append(current)

    def reset(self) -> None:
        self.points = []
        self.distance = 0.0
        self.steps = 0
        self._last = None
