"""Command-line entry points for running, batching, and inspecting trials."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

# Allow `python cli/main.py ...` execution from IDEs by adding repo root to sys.path.
if __package__ in {None, ""}:
    repo_root = Path(__file__).resolve().parents[1]
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))

from configs.loader import ConfigLoader, RunConfig
from data.logger import TrialLogger
from data.network_store import NetworkStore
from main import build_components, build_stage
from visualization.plotting import plot_run


def _run_single(config: RunConfig, db_path: Path) -> str:
    logger = TrialLogger(db_path)
    run_id: str | None = None
    try:
        runner = build_components(config=config, logger=logger)
        runner.run(config.trials)
        run_id = runner.run_id
        print(" ".join(f"{name}={count}" for name, count in runner.summary().items()))
    finally:
        logger.close()
    if run_id is None:
        raise RuntimeError("Expected run id when logger is configured.")
    return run_id


def _stage_report(config: RunConfig, seeds: int) -> None:
    stage = build_stage(config)
    for seed in range(config.seed, config.seed + seeds):
        stage.generate(seed)
        verdict = "navigable" if stage.navigable() else "impossible"
        print(f"{seed} : {verdict}")


def _network_report(path: str, network_id: str | None) -> None:
    store = NetworkStore(path)
    store.read_data()
    ids = [network_id] if network_id else store.ids()
    for key in ids:
        network = store.load_network(key)
        print(f"{key}: shape={list(network.shape)} weights={network.weight_count} bias={network.bias_count}")


def run_cli(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="sonarbot")
    parser.add_argument("--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    run_cmd = sub.add_parser("run")
    run_cmd.add_argument("--config", default="configs/example_run.yaml")
    run_cmd.add_argument("--db", default="trial_results.db")

    batch_cmd = sub.add_parser("batch")
    batch_cmd.add_argument("--config", default="configs/example_batch.yaml")
    batch_cmd.add_argument("--db", default="trial_results.db")

    plot_cmd = sub.add_parser("plot")
    plot_cmd.add_argument("--run")
    plot_cmd.add_argument("--db", default="trial_results.db")
    plot_cmd.add_argument("--out", default="artifacts/outcomes.png")

    stage_cmd = sub.add_parser("stage")
    stage_cmd.add_argument("--config", default="configs/example_run.yaml")
    stage_cmd.add_argument("--seeds", type=int, default=10)

    network_cmd = sub.add_parser("network")
    network_cmd.add_argument("--file", required=True)
    network_cmd.add_argument("--id")

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    if args.command == "run":
        config = ConfigLoader.load(args.config)
        print(_run_single(config, Path(args.db)))
        return 0

    if args.command == "batch":
        for config in ConfigLoader.load_many(args.config):
            print(_run_single(config, Path(args.db)))
        return 0

    if args.command == "plot":
        run_id = args.run
        if run_id is None:
            logger = TrialLogger(args.db)
            run_id = logger.latest_run_id()
            logger.close()
        if run_id is None:
            print("No runs recorded.", file=sys.stderr)
            return 1
        print(plot_run(args.db, run_id, args.out))
        return 0

    if args.command == "stage":
        _stage_report(ConfigLoader.load(args.config), max(0, args.seeds))
        return 0

    if args.command == "network":
        _network_report(args.file, args.id)
        return 0

    return 1


if __name__ == "__main__":
    raise SystemExit(run_cli())
