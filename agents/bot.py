"""Kinematic bot that moves in lockstep with its sonar."""

from __future__ import annotations

import math
from typing import Callable

from agents.base import BotObserver, DecisionStrategy, MoveType
from agents.sonar import Sonar, SonarSettings
from core.geometry import Position, Vector2, wrap_angle
from environment.stage import Stage

BACKWARD_FACTOR = -0.6
TURN_FACTOR = 0.4


class InvalidMoveTypeError(RuntimeError):
    """Raised when the current move is not one of the four primitives."""


def helix(angle: float, radius: float) -> Vector2:
    """Point on the turning circle for heading ``angle``."""
    return Vector2(radius * math.sin(angle), radius * math.cos(angle))


class Bot:
    """Bot with a position, a shared stage and its own sonar.

    Decision making and path tracing are injected: ``strategy`` is asked for
    a move whenever the sonar finishes a sweep, ``observer`` sees every step.
    Without a strategy the bot keeps its current move.
    """

    def __init__(
        self,
        stage: Stage,
        strategy: DecisionStrategy | None = None,
        observer: BotObserver | None = None,
        turn_radius: float = 15.0,
        sonar_settings: SonarSettings | None = None,
    ) -> None:
        if turn_radius <= 0.0:
            raise ValueError("turn_radius must be > 0")
        self.stage = stage
        self.strategy = strategy
        self.observer = observer
        self.turn_radius = float(turn_radius)
        spawn_x, spawn_y = stage.spawn_point
        self._pos = Position(float(spawn_x), float(spawn_y), 0.0)
        self.sonar = Sonar(self.position, stage, sonar_settings)
        self.current_move: MoveType = MoveType.FORWARD
        self._moves: dict[MoveType, Callable[[float], None]] = {
            MoveType.FORWARD: self._forward,
            MoveType.BACKWARD: self._backward,
            MoveType.LEFT: self._left,
            MoveType.RIGHT: self._right,
        }

    def position(self) -> Position:
        return self._pos.copy()

    def set_position(self, position: Position) -> None:
        self._pos = Position(float(position.x), float(position.y), wrap_angle(position.rotation))

    def reset(self) -> None:
        """Put the bot back on the spawn point facing rotation 0."""
        spawn_x, spawn_y = self.stage.spawn_point
        self._pos = Position(float(spawn_x), float(spawn_y), 0.0)
        self.current_move = MoveType.FORWARD
        self.sonar.reset()
        if self.observer is not None:
            self.observer.reset()

    def _forward(self, dt: float) -> None:
        self._pos.x += dt * math.cos(self._pos.rotation)
        self._pos.y += dt * math.sin(self._pos.rotation)

    def _backward(self, dt: float) -> None:
        self._pos.x += BACKWARD_FACTOR * dt * math.cos(self._pos.rotation)
        self._pos.y += BACKWARD_FACTOR * dt * math.sin(self._pos.rotation)

    def _left(self, dt: float) -> None:
        angle = self._pos.rotation - (dt * TURN_FACTOR) / self.turn_radius
        delta = helix(-angle, self.turn_radius) - helix(-self._pos.rotation, self.turn_radius)
        self._pos.x += delta.x
        self._pos.y += delta.y
        self._pos.rotation = wrap_angle(angle)

    def _right(self, dt: float) -> None:
        angle = self._pos.rotation + (dt * TURN_FACTOR) / self.turn_radius
        delta = helix(angle, self.turn_radius) - helix(self._pos.rotation, self.turn_radius)
        self._pos.x += delta.x
        self._pos.y -= delta.y
        self._pos.rotation = wrap_angle(angle)

    def move(self, dt: float) -> None:
        """Apply the current move primitive for ``dt`` simulated seconds."""
        handler = self._moves.get(self.current_move)
        if handler is None:
            raise InvalidMoveTypeError(f"Invalid move type: {self.current_move!r}")
        handler(dt)

    def step(self) -> None:
        """Decide (on a finished sweep), move for one sonar gap, then sample."""
        if self.strategy is not None and self.sonar.at_end():
            self.current_move = self.strategy.choose_move(self.sonar.data())
        self.move(self.sonar.gap())
        self.sonar.step()
        if self.observer is not None:
            self.observer.on_step(self)

    def in_bounds(self) -> bool:
        return self.stage.in_bounds(self._pos.point)

    def collided(self) -> bool:
        return self.stage.collision(self._pos.point)
