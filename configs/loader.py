"""Configuration loading and validation for sonar bot runs."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

_REQUIRED_KEYS: tuple[str, ...] = (
    "trials",
    "seed",
    "network_file",
    "network_id",
)

DEFAULTS: dict[str, Any] = {
    "width": 1500,
    "height": 1500,
    "octaves": 2,
    "frequency": 6.0,
    "threshold": 0.55,
    "max_steps": 150_000,
    "pilot": "network",
    "fixed_move": "FORWARD",
    "sonar_cast_count": 18,
    "sonar_fov": math.pi,
    "sonar_max_dist": 100.0,
    "sonar_cast_resolution": 1.0,
    "sonar_rots": math.pi / 2.0,
    "turn_radius": 15.0,
    "squash_intercept": 20.0,
    "squash_scale": 15.0,
    "trace_path": True,
}

OPTIONAL_PARAMS: dict[str, type] = {
    "width": int,
    "height": int,
    "octaves": int,
    "frequency": float,
    "threshold": float,
    "max_steps": int,
    "pilot": str,
    "fixed_move": str,
    "sonar_cast_count": int,
    "sonar_fov": float,
    "sonar_max_dist": float,
    "sonar_cast_resolution": float,
    "sonar_rots": float,
    "turn_radius": float,
    "squash_intercept": float,
    "squash_scale": float,
    "trace_path": bool,
}


@dataclass(frozen=True)
class RunConfig:
    """Validated run configuration container.

    Provides typed field access for required parameters and dictionary-style
    access, with defaults, for the optional stage/sonar/bot parameters.
    """

    trials: int
    seed: int
    network_file: str
    network_id: str
    extras: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        """Return a configuration value by key.

        Args:
            key: Configuration key name.
            default: Value to return if the key is neither set nor defaulted.

        Returns:
            Value associated with ``key``, its entry in ``DEFAULTS``, or
            ``default``.
        """
        if key in _REQUIRED_KEYS:
            return getattr(self, key)
        if key in self.extras:
            return self.extras[key]
        return DEFAULTS.get(key, default)

    def to_dict(self) -> dict[str, Any]:
        """Return a full dictionary view of the configuration."""
        payload: dict[str, Any] = {
            "trials": self.trials,
            "seed": self.seed,
            "network_file": self.network_file,
            "network_id": self.network_id,
        }
        payload.update(self.extras)
        return payload


class ConfigLoader:
    """Load and validate run configuration files (YAML or JSON)."""

    @staticmethod
    def load(path: str | Path) -> RunConfig:
        """Load a single run config from ``path``."""
        payload = _read_config_payload(path)
        if not isinstance(payload, Mapping):
            raise ValueError("Single config file must contain a mapping object.")
        return _validate_and_build(payload, Path(path).parent)

    @staticmethod
    def load_many(path: str | Path) -> list[RunConfig]:
        """Load one or many run configs from ``path``.

        Supports:
            - top-level mapping for a single run
            - top-level list of mappings
            - top-level mapping with an ``experiments`` list
        """
        payload = _read_config_payload(path)
        base_dir = Path(path).parent

        if isinstance(payload, list):
            return [_validate_and_build(item, base_dir) for item in payload]

        if isinstance(payload, Mapping) and "experiments" in payload:
            experiments = payload["experiments"]
            if not isinstance(experiments, list):
                raise ValueError("'experiments' must be a list of mappings.")
            return [_validate_and_build(item, base_dir) for item in experiments]

        if isinstance(payload, Mapping):
            return [_validate_and_build(payload, base_dir)]

        raise ValueError("Unsupported config file structure.")


def _read_config_payload(path: str | Path) -> Any:
    """Read raw config payload from JSON or YAML file."""
    config_path = Path(path)
    suffix = config_path.suffix.lower()
    content = config_path.read_text(encoding="utf-8")

    if suffix == ".json":
        return json.loads(content)
    if suffix in {".yaml", ".yml"}:
        return yaml.safe_load(content)
    raise ValueError(f"Unsupported config extension: {suffix}")


def _coerce_optional(key: str, value: Any) -> Any:
    kind = OPTIONAL_PARAMS[key]
    if kind is bool and isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    try:
        return kind(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Config key '{key}' must be {kind.__name__}, got {value!r}") from exc


def _validate_and_build(payload: Mapping[str, Any], base_dir: Path | None = None) -> RunConfig:
    """Validate raw mapping and build ``RunConfig``."""
    if not isinstance(payload, Mapping):
        raise ValueError("Each run config must be a mapping.")
    missing = [key for key in _REQUIRED_KEYS if key not in payload]
    if missing:
        raise ValueError(f"Missing required config keys: {', '.join(missing)}")

    trials = int(payload["trials"])
    seed = int(payload["seed"])
    network_file = str(payload["network_file"])
    network_id = str(payload["network_id"])

    if trials < 0:
        raise ValueError("trials must be >= 0")
    if seed < 0:
        raise ValueError("seed must be >= 0")
    if not network_id:
        raise ValueError("network_id must be non-empty")
    if base_dir is not None and not Path(network_file).is_absolute():
        network_file = str((base_dir / network_file).resolve())

    extras: dict[str, Any] = {}
    for key, value in payload.items():
        if key in _REQUIRED_KEYS:
            continue
        extras[key] = _coerce_optional(key, value) if key in OPTIONAL_PARAMS else value

    for key in ("width", "height", "max_steps", "sonar_cast_count"):
        if key in extras and int(extras[key]) <= 0:
            raise ValueError(f"{key} must be > 0")
    if "threshold" in extras and not 0.0 <= float(extras["threshold"]) <= 1.0:
        raise ValueError("threshold must be in [0.0, 1.0]")

    return RunConfig(
        trials=trials,
        seed=seed,
        network_file=network_file,
        network_id=network_id,
        extras=extras,
    )
