"""Decision strategies that turn a sonar sweep into a move."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from agents.base import MOVE_SPACE, DecisionStrategy, MoveType
from agents.neural_network import NeuralNetwork
from agents.sonar import SonarSample


def squash_distance(distance: float, intercept: float = 20.0, scale: float = 15.0) -> float:
    """Logistic map of a range reading into ``(0, 2)``; equals 1 at ``intercept``."""
    return 2.0 / (1.0 + math.exp(-((distance - intercept) / scale)))


class NetworkPilot(DecisionStrategy):
    """Feeds a sweep through a neural network and follows its strongest output.

    Samples are ordered by angle before encoding so input ``0`` is always the
    leftmost beam regardless of sweep direction. Outputs ``0..3`` map onto
    :class:`MoveType`; the scan starts from FORWARD and only replaces it on a
    strictly larger output.
    """

    def __init__(self, network: NeuralNetwork, intercept: float = 20.0, scale: float = 15.0) -> None:
        if network.shape[-1] < len(MOVE_SPACE):
            raise ValueError(
                f"Network needs at least {len(MOVE_SPACE)} outputs, shape is {list(network.shape)}."
            )
        if scale == 0.0:
            raise ValueError("scale must be non-zero")
        self.network = network
        self.intercept = float(intercept)
        self.scale = float(scale)

    def encode(self, samples: Sequence[SonarSample]) -> list[float]:
        ordered = sorted(samples, key=lambda sample: sample.angle)
        return [squash_distance(sample.distance, self.intercept, self.scale) for sample in ordered]

    def choose_move(self, samples: Sequence[SonarSample]) -> MoveType:
        outputs = self.network.calculate(self.encode(samples))
        best = MoveType.FORWARD
        for move in MOVE_SPACE[1:]:
            if outputs[move] > outputs[best]:
                best = move
        return best


@dataclass
class FixedPilot(DecisionStrategy):
    """Always answers with the same move."""

    move: MoveType = MoveType.FORWARD

    def choose_move(self, samples: Sequence[SonarSample]) -> MoveType:
        _ = samples
        return MoveType(self.move)
