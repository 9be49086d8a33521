"""Move primitives and the pluggable decision/observer contracts of a bot."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Sequence

from agents.sonar import SonarSample

if TYPE_CHECKING:
    from agents.bot import Bot


class MoveType(enum.IntEnum):
    """Discrete move primitives; the value doubles as network output index."""

    FORWARD = 0
    BACKWARD = 1
    LEFT = 2
    RIGHT = 3


MOVE_SPACE: tuple[MoveType, ...] = tuple(MoveType)


class DecisionStrategy(ABC):
    """Chooses the bot's next move from one completed sonar sweep.

    Strategies are consulted only when the sonar reports a finished sweep and
    their answer is held until the next one.
    """

    @abstractmethod
    def choose_move(self, samples: Sequence[SonarSample]) -> MoveType:
        """Return the move to hold until the next sweep completes.

        Args:
            samples (Sequence[SonarSample]): The sweep buffer, in write order.

        Returns:
            MoveType: One of the four move primitives.

        Invariants:
            - Must not mutate ``samples``.
            - Deterministic for equal inputs.
        """


class BotObserver:
    """Optional hook notified after every bot step.

    The default implementation ignores everything; recorders override the
    parts they need.
    """

    def on_step(self, bot: Bot) -> None:
        """Called once the bot has moved and the sonar has sampled."""

    def reset(self) -> None:
        """Called when the bot is put back on its spawn point."""
