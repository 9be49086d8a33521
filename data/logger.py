"""SQLite-backed run metadata and per-trial outcome logging."""

from __future__ import annotations

import hashlib
import json
import platform
import sqlite3
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping


@dataclass(frozen=True)
class TrialRecord:
    """Structured per-trial row payload."""

    trial_index: int
    seed: int
    outcome: str
    steps: int = 0
    simulated_seconds: float = 0.0
    final_x: float = 0.0
    final_y: float = 0.0
    path_length: float = 0.0


class TrialLogger:
    """Persist run metadata and trial outcomes in SQLite."""

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = Path(db_path)
        self.connection = sqlite3.connect(self.db_path)
        self.connection.row_factory = sqlite3.Row
        self._ensure_schema()

    def close(self) -> None:
        self.connection.close()

    def _ensure_schema(self) -> None:
        self.connection.executescript(
            """
            CREATE TABLE IF NOT EXISTS run_metadata (
                run_id TEXT PRIMARY KEY,
                config_hash TEXT NOT NULL,
                seed INTEGER NOT NULL,
                config_json TEXT NOT NULL,
                runtime_metadata TEXT NOT NULL,
                created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
            );

            CREATE TABLE IF NOT EXISTS trial_results (
                run_id TEXT NOT NULL,
                trial_index INTEGER NOT NULL,
                seed INTEGER NOT NULL,
                outcome TEXT NOT NULL,
                steps INTEGER NOT NULL,
                simulated_seconds REAL NOT NULL,
                final_x REAL NOT NULL,
                final_y REAL NOT NULL,
                path_length REAL NOT NULL,
                PRIMARY KEY (run_id, trial_index),
                FOREIGN KEY (run_id)
                    REFERENCES run_metadata (run_id)
                    ON DELETE CASCADE
            );
            """
        )
        self.connection.commit()

    def start_run(self, config: Mapping[str, Any], seed: int, metadata: Mapping[str, Any] | None = None) -> str:
        config_json = json.dumps(dict(config), sort_keys=True, default=str)
        runtime_metadata: dict[str, Any] = {
            "python_version": platform.python_version(),
            "platform": platform.platform(),
        }
        if metadata:
            runtime_metadata.update(dict(metadata))
        config_hash = hashlib.sha256(config_json.encode("utf-8")).hexdigest()
        deterministic_key = hashlib.sha256(f"{config_hash}:{seed}".encode("utf-8")).hexdigest()
        run_nonce = str(time.time_ns())
        run_id = hashlib.sha256(f"{deterministic_key}:{run_nonce}".encode("utf-8")).hexdigest()[:16]
        runtime_metadata["deterministic_key"] = deterministic_key
        metadata_json = json.dumps(runtime_metadata, sort_keys=True, default=str)

        self.connection.execute(
            """
            INSERT OR IGNORE INTO run_metadata (
                run_id, config_hash, seed, config_json, runtime_metadata
            ) VALUES (?, ?, ?, ?, ?)
            """,
            (run_id, config_hash, int(seed), config_json, metadata_json),
        )
        self.connection.commit()
        return run_id

    def log_trial(self, run_id: str, trial: Mapping[str, Any]) -> None:
        row = TrialRecord(
            trial_index=int(trial["trial_index"]),
            seed=int(trial["seed"]),
            outcome=str(trial["outcome"]),
            steps=int(trial.get("steps", 0)),
            simulated_seconds=float(trial.get("simulated_seconds", 0.0)),
            final_x=float(trial.get("final_x", 0.0)),
            final_y=float(trial.get("final_y", 0.0)),
            path_length=float(trial.get("path_length", 0.0)),
        )
        self.connection.execute(
            """
            INSERT OR REPLACE INTO trial_results (
                run_id,
                trial_index,
                seed,
                outcome,
                steps,
                simulated_seconds,
                final_x,
                final_y,
                path_length
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                run_id,
                row.trial_index,
                row.seed,
                row.outcome,
                row.steps,
                row.simulated_seconds,
                row.final_x,
                row.final_y,
                row.path_length,
            ),
        )
        self.connection.commit()

    def fetch_trials(self, run_id: str) -> list[dict[str, Any]]:
        """Return ordered trial rows for plotting/analysis."""
        rows = self.connection.execute(
            """
            SELECT trial_index, seed, outcome, steps, simulated_seconds, final_x, final_y, path_length
            FROM trial_results
            WHERE run_id = ?
            ORDER BY trial_index ASC
            """,
            (run_id,),
        ).fetchall()
        return [dict(row) for row in rows]

    def outcome_counts(self, run_id: str) -> dict[str, int]:
        rows = self.connection.execute(
            """
            SELECT outcome, COUNT(*) AS total
            FROM trial_results
            WHERE run_id = ?
            GROUP BY outcome
            """,
            (run_id,),
        ).fetchall()
        return {str(row["outcome"]): int(row["total"]) for row in rows}

    def latest_run_id(self) -> str | None:
        """Return most recently created run id, if any."""
        row = self.connection.execute(
            """
            SELECT run_id
            FROM run_metadata
            ORDER BY created_at DESC, rowid DESC
            LIMIT 1
            """
        ).fetchone()
        return str(row[0]) if row is not None else None
