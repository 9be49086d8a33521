"""JSON document store for pre-trained network values.

Document layout::

    {"<id>": {"shape": [...], "weights": [...], "bias": [...]}}
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from agents.neural_network import NetworkValues, NeuralNetwork

LOGGER = logging.getLogger(__name__)


class StorageUnavailableError(OSError):
    """Raised when the values file is missing, unreadable or malformed."""


class NetworkStore:
    """Read and write network values keyed by identifier.

    ``read_data`` loads the whole document into memory; ``write_values`` and
    ``store_network`` only change the in-memory copy until ``write_data``.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.data: dict[str, Any] = {}

    def read_data(self) -> None:
        try:
            content = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            LOGGER.error("Cannot locate network values file %s", self.path)
            raise StorageUnavailableError(f"Network values file unavailable: {self.path}") from exc
        try:
            payload = json.loads(content)
        except json.JSONDecodeError as exc:
            raise StorageUnavailableError(f"Network values file is not valid JSON: {self.path}") from exc
        if not isinstance(payload, dict):
            raise StorageUnavailableError(f"Network values file must hold a mapping: {self.path}")
        self.data = payload

    def write_data(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(self.data, indent=2, sort_keys=True), encoding="utf-8")
        tmp_path.replace(self.path)

    def ids(self) -> list[str]:
        return sorted(self.data)

    def read_values(self, network_id: str) -> NetworkValues:
        if network_id not in self.data:
            available = ", ".join(self.ids()) or "<none>"
            raise KeyError(f"Unknown network id '{network_id}'. Available: {available}")
        entry = self.data[network_id]
        missing = [key for key in ("shape", "weights", "bias") if key not in entry]
        if missing:
            raise ValueError(f"Network '{network_id}' is missing keys: {', '.join(missing)}")
        return NetworkValues(
            shape=tuple(int(size) for size in entry["shape"]),
            weights=tuple(float(w) for w in entry["weights"]),
            bias=tuple(float(b) for b in entry["bias"]),
        )

    def write_values(self, network_id: str, values: NetworkValues) -> None:
        self.data[str(network_id)] = values.to_dict()

    def store_network(self, network_id: str, network: NeuralNetwork) -> None:
        self.write_values(network_id, network.package_values())

    def load_network(self, network_id: str) -> NeuralNetwork:
        """Build a network sized from the stored shape and load its values."""
        return NeuralNetwork.from_values(self.read_values(network_id))
