"""Tests for config loading and validation."""

from __future__ import annotations

import json
import math
from pathlib import Path

import pytest

from configs.loader import DEFAULTS, ConfigLoader


def _base_payload(**overrides) -> dict:
    payload = {
        "trials": 3,
        "seed": 1,
        "network_file": "networks.json",
        "network_id": "nn",
    }
    payload.update(overrides)
    return payload


def test_load_json_config(tmp_path) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps(_base_payload(width=300, note="demo")), encoding="utf-8")

    config = ConfigLoader.load(config_path)

    assert config.trials == 3
    assert config.get("width") == 300
    assert config.get("note") == "demo"
    assert config.network_file == str((tmp_path / "networks.json").resolve())


def test_missing_optional_keys_fall_back_to_defaults(tmp_path) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps(_base_payload()), encoding="utf-8")

    config = ConfigLoader.load(config_path)

    assert config.get("width") == 1500
    assert config.get("threshold") == 0.55
    assert config.get("sonar_fov") == pytest.approx(math.pi)
    assert config.get("max_steps") == DEFAULTS["max_steps"]
    assert config.get("unknown", "fallback") == "fallback"


def test_load_yaml_coerces_optional_types(tmp_path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "trials: 2\nseed: 0\nnetwork_file: /abs/nets.json\nnetwork_id: nn\n"
        "width: '640'\nthreshold: 0.6\ntrace_path: 'no'\n",
        encoding="utf-8",
    )

    config = ConfigLoader.load(config_path)

    assert config.get("width") == 640
    assert config.get("threshold") == 0.6
    assert config.get("trace_path") is False
    assert config.network_file == str(Path("/abs/nets.json"))


def test_load_many_batch_json(tmp_path) -> None:
    config_path = tmp_path / "batch.json"
    payload = {"experiments": [_base_payload(), _base_payload(seed=9, pilot="fixed")]}
    config_path.write_text(json.dumps(payload), encoding="utf-8")

    configs = ConfigLoader.load_many(config_path)

    assert len(configs) == 2
    assert configs[1].seed == 9
    assert configs[1].get("pilot") == "fixed"


def test_load_many_accepts_top_level_list_and_single_mapping(tmp_path) -> None:
    list_path = tmp_path / "list.json"
    list_path.write_text(json.dumps([_base_payload(), _base_payload()]), encoding="utf-8")
    single_path = tmp_path / "single.json"
    single_path.write_text(json.dumps(_base_payload()), encoding="utf-8")

    assert len(ConfigLoader.load_many(list_path)) == 2
    assert len(ConfigLoader.load_many(single_path)) == 1


def test_to_dict_includes_extras(tmp_path) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps(_base_payload(height=50)), encoding="utf-8")

    payload = ConfigLoader.load(config_path).to_dict()

    assert payload["trials"] == 3
    assert payload["height"] == 50


def test_invalid_config_missing_required_key(tmp_path) -> None:
    config_path = tmp_path / "invalid.json"
    payload = _base_payload()
    del payload["network_id"]
    config_path.write_text(json.dumps(payload), encoding="utf-8")

    with pytest.raises(ValueError, match="Missing required config keys"):
        ConfigLoader.load(config_path)


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"trials": -1}, "trials"),
        ({"seed": -2}, "seed"),
        ({"width": 0}, "width"),
        ({"threshold": 1.5}, "threshold"),
        ({"max_steps": "many"}, "max_steps"),
    ],
)
def test_invalid_values_rejected(tmp_path, overrides, message) -> None:
    config_path = tmp_path / "invalid.json"
    config_path.write_text(json.dumps(_base_payload(**overrides)), encoding="utf-8")

    with pytest.raises(ValueError, match=message):
        ConfigLoader.load(config_path)


def test_unsupported_extension(tmp_path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text("trials = 1", encoding="utf-8")
    with pytest.raises(ValueError, match="Unsupported config extension"):
        ConfigLoader.load(config_path)


def test_bundled_example_configs_load() -> None:
    root = Path(__file__).resolve().parents[1]
    config = ConfigLoader.load(root / "configs" / "example_run.yaml")
    assert Path(config.network_file).exists()
    assert len(ConfigLoader.load_many(root / "configs" / "example_batch.yaml")) == 3
