"""Plot utilities for persisted trial outcomes."""

from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg")  # headless: figures are only written to disk
import matplotlib.pyplot as plt

from data.logger import TrialLogger
from engine.runner import TrialOutcome

OUTCOME_COLORS = {
    TrialOutcome.ESCAPED.value: "tab:green",
    TrialOutcome.COLLIDED.value: "tab:red",
    TrialOutcome.TIMEOUT.value: "tab:orange",
    TrialOutcome.IMPOSSIBLE.value: "tab:gray",
}


def plot_run(db_path: str | Path, run_id: str, output_path: str | Path) -> Path:
    """Render outcome counts and steps-per-seed for a run from SQLite logs."""
    logger = TrialLogger(db_path)
    try:
        rows = logger.fetch_trials(run_id)
        counts = logger.outcome_counts(run_id)
    finally:
        logger.close()

    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    outcomes = [outcome.value for outcome in TrialOutcome]
    fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(8, 6))
    ax1.bar(
        outcomes,
        [counts.get(outcome, 0) for outcome in outcomes],
        color=[OUTCOME_COLORS[outcome] for outcome in outcomes],
    )
    ax1.set_ylabel("trials")
    ax1.set_title(f"run {run_id}")

    for outcome in outcomes:
        subset = [row for row in rows if row["outcome"] == outcome]
        if not subset:
            continue
        ax2.scatter(
            [int(row["seed"]) for row in subset],
            [int(row["steps"]) for row in subset],
            label=outcome,
            color=OUTCOME_COLORS[outcome],
        )
    ax2.set_xlabel("seed")
    ax2.set_ylabel("steps")
    if rows:
        ax2.legend()

    fig.tight_layout()
    fig.savefig(output)
    plt.close(fig)
    return output
