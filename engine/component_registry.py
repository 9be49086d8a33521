"""Registry of decision strategies keyed by pilot kind."""

from __future__ import annotations

from typing import Callable

from agents.base import DecisionStrategy, MoveType
from agents.pilots import FixedPilot, NetworkPilot
from configs.loader import RunConfig
from data.network_store import NetworkStore


PilotFactory = Callable[[RunConfig], DecisionStrategy]


_PILOT_FACTORIES: dict[str, PilotFactory] = {}


def register_pilot_factory(name: str, factory: PilotFactory) -> None:
    _PILOT_FACTORIES[str(name)] = factory


def available_pilot_factories() -> list[str]:
    return sorted(_PILOT_FACTORIES)


def create_pilot(name: str, config: RunConfig) -> DecisionStrategy:
    factory = _PILOT_FACTORIES.get(str(name))
    if factory is None:
        available = ", ".join(available_pilot_factories()) or "<none>"
        raise ValueError(f"Unknown pilot factory '{name}'. Available: {available}")
    return factory(config)


def _network_pilot_factory(config: RunConfig) -> DecisionStrategy:
    store = NetworkStore(config.network_file)
    store.read_data()
    network = store.load_network(config.network_id)
    cast_count = int(config.get("sonar_cast_count"))
    if network.shape[0] != cast_count:
        raise ValueError(
            f"Network '{config.network_id}' expects {network.shape[0]} inputs "
            f"but the sonar produces {cast_count} samples per sweep."
        )
    return NetworkPilot(
        network,
        intercept=float(config.get("squash_intercept")),
        scale=float(config.get("squash_scale")),
    )


def _fixed_pilot_factory(config: RunConfig) -> DecisionStrategy:
    name = str(config.get("fixed_move")).upper()
    try:
        move = MoveType[name]
    except KeyError as exc:
        raise ValueError(f"Unknown fixed_move '{name}'. Available: {', '.join(m.name for m in MoveType)}") from exc
    return FixedPilot(move=move)


def _register_defaults() -> None:
    if _PILOT_FACTORIES:
        return
    register_pilot_factory("network", _network_pilot_factory)
    register_pilot_factory("fixed", _fixed_pilot_factory)


_register_defaults()
