"""Simple simulation runner for local validation."""

from __future__ import annotations

from pathlib import Path

from agents.bot import Bot
from agents.path_recorder import PathRecorder
from agents.sonar import SonarSettings
from configs.loader import ConfigLoader, RunConfig
from data.logger import TrialLogger
from engine.component_registry import create_pilot
from engine.runner import SimulationRunner
from environment.stage import Stage


def build_stage(config: RunConfig) -> Stage:
    """Create the stage described by ``config`` at its first seed."""
    return Stage(
        width=int(config.get("width")),
        height=int(config.get("height")),
        seed=config.seed,
        octaves=int(config.get("octaves")),
        frequency=float(config.get("frequency")),
        threshold=float(config.get("threshold")),
    )


def build_sonar_settings(config: RunConfig) -> SonarSettings:
    return SonarSettings(
        cast_count=int(config.get("sonar_cast_count")),
        fov=float(config.get("sonar_fov")),
        max_dist=float(config.get("sonar_max_dist")),
        cast_resolution=float(config.get("sonar_cast_resolution")),
        rots=float(config.get("sonar_rots")),
    )


def build_components(config: RunConfig, logger: TrialLogger | None = None) -> SimulationRunner:
    """Build a runner with stage, bot and pilot from run configuration."""
    stage = build_stage(config)
    pilot = create_pilot(str(config.get("pilot")), config)
    observer = PathRecorder() if bool(config.get("trace_path")) else None
    bot = Bot(
        stage,
        strategy=pilot,
        observer=observer,
        turn_radius=float(config.get("turn_radius")),
        sonar_settings=build_sonar_settings(config),
    )
    return SimulationRunner(
        stage=stage,
        bot=bot,
        max_steps=int(config.get("max_steps")),
        seed=config.seed,
        logger=logger,
        config=config.to_dict(),
    )


def main(config_path: str = "configs/example_run.yaml") -> None:
    """Load config, build components, and run every trial."""
    config = ConfigLoader.load(config_path)
    logger = TrialLogger(Path("trial_results.db"))
    try:
        runner = build_components(config=config, logger=logger)
        runner.run(config.trials)
    finally:
        logger.close()


if __name__ == "__main__":
    main()
