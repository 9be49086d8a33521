"""Trial outcomes, seeding and persistence of the simulation runner."""

from __future__ import annotations

import numpy as np
import pytest

from agents.base import MoveType
from agents.bot import Bot
from agents.path_recorder import PathRecorder
from agents.pilots import FixedPilot
from data.logger import TrialLogger
from engine.runner import SimulationRunner, SimulationRunnerError, TrialOutcome
from environment.stage import Stage


def _runner(stage: Stage, **kwargs) -> SimulationRunner:
    bot = Bot(stage, strategy=FixedPilot(MoveType.FORWARD), observer=PathRecorder())
    return SimulationRunner(stage, bot, **kwargs)


def test_blocked_spawn_is_impossible_without_stepping() -> None:
    runner = _runner(Stage(10, 10, threshold=0.0))
    result = runner.run_trial(seed=3)

    assert result.outcome is TrialOutcome.IMPOSSIBLE
    assert result.steps == 0
    assert result.seed == 3
    assert (result.final_x, result.final_y) == (5.0, 5.0)


def test_open_stage_escapes_forward() -> None:
    runner = _runner(Stage(40, 40, threshold=1.0))
    result = runner.run_trial(seed=0)
    gap = runner.bot.sonar.gap()

    assert result.outcome is TrialOutcome.ESCAPED
    assert result.final_x >= 40.0
    assert result.final_y == pytest.approx(20.0)
    assert 180 <= result.steps <= 181
    assert result.simulated_seconds == pytest.approx(result.steps * gap)
    assert result.path_length == pytest.approx(result.steps * gap)


def test_step_budget_ends_in_timeout() -> None:
    runner = _runner(Stage(40, 40, threshold=1.0), max_steps=10)
    result = runner.run_trial(seed=0)

    assert result.outcome is TrialOutcome.TIMEOUT
    assert result.steps == 10
    assert result.final_x == pytest.approx(20.0 + 10 * runner.bot.sonar.gap())


def test_zero_step_budget_times_out_immediately() -> None:
    result = _runner(Stage(40, 40, threshold=1.0), max_steps=0).run_trial(seed=0)
    assert result.outcome is TrialOutcome.TIMEOUT
    assert result.steps == 0


def test_driving_into_wall_collides(mask_stage) -> None:
    stage = mask_stage(100, 100, lambda x, y: x > 60.0)
    result = _runner(stage).run_trial(seed=0)

    assert result.outcome is TrialOutcome.COLLIDED
    assert 60.0 < result.final_x < 61.0
    assert result.steps == pytest.approx(10.0 / (1.0 / 9.0), abs=2)


def test_trials_use_consecutive_seeds_from_base_seed() -> None:
    runner = _runner(Stage(10, 10, threshold=0.0), seed=5)
    results = runner.run(3)

    assert [r.seed for r in results] == [5, 6, 7]
    assert [r.trial_index for r in results] == [0, 1, 2]
    assert runner.results == results
    assert runner.stage.seed == 7


def test_each_trial_starts_from_spawn() -> None:
    runner = _runner(Stage(40, 40, threshold=1.0), max_steps=30)
    first, second = runner.run(2)
    assert first.final_x == pytest.approx(second.final_x)
    assert first.path_length == pytest.approx(second.path_length)


def test_summary_counts_every_outcome() -> None:
    runner = _runner(Stage(10, 10, threshold=0.0))
    runner.run(2)
    assert runner.summary() == {"escaped": 0, "collided": 0, "timeout": 0, "impossible": 2}


def test_results_are_persisted_when_logger_given(tmp_path) -> None:
    logger = TrialLogger(tmp_path / "trials.db")
    runner = _runner(Stage(40, 40, threshold=1.0), max_steps=5, seed=2, logger=logger, config={"trials": 2})
    runner.run(2)

    assert runner.run_id == logger.latest_run_id()
    rows = logger.fetch_trials(runner.run_id)
    assert [row["seed"] for row in rows] == [2, 3]
    assert all(row["outcome"] == "timeout" for row in rows)
    assert logger.outcome_counts(runner.run_id) == {"timeout": 2}
    logger.close()


def test_runner_rejects_bot_on_other_stage() -> None:
    bot = Bot(Stage(10, 10))
    with pytest.raises(SimulationRunnerError):
        SimulationRunner(Stage(10, 10), bot)


def test_negative_trials_rejected() -> None:
    with pytest.raises(ValueError):
        _runner(Stage(10, 10)).run(-1)


def test_result_to_dict_uses_outcome_value() -> None:
    result = _runner(Stage(10, 10, threshold=0.0)).run_trial(seed=0)
    payload = result.to_dict()
    assert payload["outcome"] == "impossible"
    assert np.isclose(payload["final_x"], 5.0)
