"""Trial loop: generate a stage, check it, and drive the bot to an outcome."""

from __future__ import annotations

import enum
import logging
from dataclasses import asdict, dataclass
from typing import Any, Mapping

from agents.bot import Bot
from agents.path_recorder import PathRecorder
from data.logger import TrialLogger
from environment.stage import Stage

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_STEPS = 150_000


class TrialOutcome(str, enum.Enum):
    """Terminal states of a single trial."""

    ESCAPED = "escaped"
    COLLIDED = "collided"
    TIMEOUT = "timeout"
    IMPOSSIBLE = "impossible"


class SimulationRunnerError(RuntimeError):
    """Raised when the runner is wired inconsistently."""


@dataclass(frozen=True)
class TrialResult:
    """Outcome and final state of one trial."""

    trial_index: int
    seed: int
    outcome: TrialOutcome
    steps: int
    simulated_seconds: float
    final_x: float
    final_y: float
    path_length: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["outcome"] = self.outcome.value
        return payload


class SimulationRunner:
    """Runs one trial per seed on a shared stage and bot.

    The stage is regenerated for every seed and the bot is put back on the
    spawn point before each trial. Stages that fail the navigability check
    are recorded as impossible without stepping the bot.
    """

    def __init__(
        self,
        stage: Stage,
        bot: Bot,
        max_steps: int = DEFAULT_MAX_STEPS,
        seed: int = 0,
        logger: TrialLogger | None = None,
        config: Mapping[str, Any] | None = None,
    ) -> None:
        if bot.stage is not stage:
            raise SimulationRunnerError("Bot must be bound to the runner's stage.")
        if max_steps < 0:
            raise ValueError("max_steps must be non-negative")
        self.stage = stage
        self.bot = bot
        self.max_steps = int(max_steps)
        self.seed = int(seed)
        self.logger = logger
        self.config = dict(config or {})
        self.results: list[TrialResult] = []
        self.run_id: str | None = None
        if self.logger is not None:
            self.run_id = self.logger.start_run(
                config=self.config,
                seed=self.seed,
                metadata={"max_steps": self.max_steps},
            )

    def _finish(self, trial_index: int, seed: int, outcome: TrialOutcome, steps: int) -> TrialResult:
        position = self.bot.position()
        recorder = self.bot.observer
        path_length = float(recorder.distance) if isinstance(recorder, PathRecorder) else 0.0
        return TrialResult(
            trial_index=trial_index,
            seed=seed,
            outcome=outcome,
            steps=steps,
            simulated_seconds=steps * self.bot.sonar.gap(),
            final_x=float(position.x),
            final_y=float(position.y),
            path_length=path_length,
        )

    def run_trial(self, seed: int, trial_index: int = 0) -> TrialResult:
        """Run a single trial on the stage generated from ``seed``."""
        self.stage.generate(seed)
        self.bot.reset()

        if not self.stage.navigable():
            return self._finish(trial_index, seed, TrialOutcome.IMPOSSIBLE, 0)

        for step_index in range(self.max_steps):
            if self.bot.collided():
                return self._finish(trial_index, seed, TrialOutcome.COLLIDED, step_index)
            if not self.bot.in_bounds():
                return self._finish(trial_index, seed, TrialOutcome.ESCAPED, step_index)
            self.bot.step()
        return self._finish(trial_index, seed, TrialOutcome.TIMEOUT, self.max_steps)

    def run(self, trials: int) -> list[TrialResult]:
        """Run ``trials`` consecutive seeds starting at ``self.seed``."""
        if trials < 0:
            raise ValueError("trials must be non-negative")
        results: list[TrialResult] = []
        for trial_index in range(trials):
            result = self.run_trial(self.seed + trial_index, trial_index=trial_index)
            results.append(result)
            self.on_trial_end(result)
        return results

    def on_trial_end(self, result: TrialResult) -> None:
        """Record a finished trial and persist it if a logger is configured."""
        self.results.append(result)
        LOGGER.info(
            "Seed %s: %s after %s steps at (%.1f, %.1f)",
            result.seed,
            result.outcome.value,
            result.steps,
            result.final_x,
            result.final_y,
        )
        if self.logger is None or self.run_id is None:
            return
        self.logger.log_trial(self.run_id, result.to_dict())

    def summary(self) -> dict[str, int]:
        """Outcome counts over every trial recorded so far."""
        counts = {outcome.value: 0 for outcome in TrialOutcome}
        for result in self.results:
            counts[result.outcome.value] += 1
        return counts
