"""Fixed-topology feed-forward network over flat weight/bias arrays.

Weights are stored layer after layer. Within layer ``l`` the weight from
node ``n`` to node ``w`` of layer ``l + 1`` sits at ``n * shape[l + 1] + w``
past the layer offset, so each layer's block reshapes directly into a
``(shape[l], shape[l + 1])`` matrix. Biases hold one entry per node of every
layer, the input layer included; input biases are never read.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np


class ShapeMismatchError(ValueError):
    """Raised when network values do not fit the network topology."""


def weight_count(shape: Sequence[int]) -> int:
    return sum(int(shape[i]) * int(shape[i + 1]) for i in range(len(shape) - 1))


def bias_count(shape: Sequence[int]) -> int:
    return sum(int(size) for size in shape)


@dataclass(frozen=True)
class NetworkValues:
    """Serializable snapshot of a network's topology and parameters."""

    shape: tuple[int, ...]
    weights: tuple[float, ...] = field(default_factory=tuple)
    bias: tuple[float, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "shape", tuple(int(size) for size in self.shape))
        object.__setattr__(self, "weights", tuple(float(w) for w in self.weights))
        object.__setattr__(self, "bias", tuple(float(b) for b in self.bias))

    def to_dict(self) -> dict[str, list]:
        return {
            "shape": list(self.shape),
            "weights": list(self.weights),
            "bias": list(self.bias),
        }


class NeuralNetwork:
    """Inference-only multilayer perceptron with logistic activations."""

    def __init__(self, shape: Sequence[int]) -> None:
        shape = tuple(int(size) for size in shape)
        if len(shape) < 2:
            raise ValueError("Network shape needs at least an input and an output layer.")
        if any(size <= 0 for size in shape):
            raise ValueError("Every layer size must be > 0.")
        self._shape = shape
        self._weights = np.zeros(weight_count(shape), dtype=np.float64)
        self._bias = np.zeros(bias_count(shape), dtype=np.float64)

    @classmethod
    def from_values(cls, values: NetworkValues) -> NeuralNetwork:
        network = cls(values.shape)
        network.load_values(values)
        return network

    @property
    def shape(self) -> tuple[int, ...]:
        return self._shape

    @property
    def layers(self) -> int:
        return len(self._shape)

    @property
    def weights(self) -> list[float]:
        return self._weights.tolist()

    @property
    def bias(self) -> list[float]:
        return self._bias.tolist()

    @property
    def weight_count(self) -> int:
        return int(self._weights.size)

    @property
    def bias_count(self) -> int:
        return int(self._bias.size)

    def weight_index(self, layer: int, node: int, target: int) -> int:
        """Flat index of the weight from ``node`` in ``layer`` to ``target`` in ``layer + 1``."""
        offset = sum(self._shape[i] * self._shape[i + 1] for i in range(layer))
        return offset + node * self._shape[layer + 1] + target

    def bias_index(self, layer: int, node: int) -> int:
        return sum(self._shape[:layer]) + node

    def package_values(self) -> NetworkValues:
        return NetworkValues(shape=self._shape, weights=tuple(self.weights), bias=tuple(self.bias))

    def load_values(self, values: NetworkValues) -> None:
        """Replace all weights and biases with ``values``.

        The bias may carry the input layer (full layout) or start at the first
        hidden layer (compact layout); compact biases are zero-padded. Accepting
        the compact layout loosens the rule that a bias list holds one entry per
        node of every layer. Nothing is modified when validation fails.
        """
        if tuple(values.shape) != self._shape:
            raise ShapeMismatchError(
                f"Shape of new values {list(values.shape)} does not match network shape {list(self._shape)}."
            )
        if len(values.weights) != self.weight_count:
            raise ShapeMismatchError(
                f"Expected {self.weight_count} weights for shape {list(self._shape)}, got {len(values.weights)}."
            )
        full = self.bias_count
        compact = full - self._shape[0]
        if len(values.bias) == full:
            bias = np.asarray(values.bias, dtype=np.float64)
        elif len(values.bias) == compact:
            bias = np.concatenate([np.zeros(self._shape[0]), np.asarray(values.bias, dtype=np.float64)])
        else:
            raise ShapeMismatchError(
                f"Expected {full} (or {compact} without input layer) biases for shape "
                f"{list(self._shape)}, got {len(values.bias)}."
            )
        self._weights = np.asarray(values.weights, dtype=np.float64).copy()
        self._bias = bias

    def calculate(self, inputs: Sequence[float]) -> list[float]:
        """Forward pass; returns the output layer activations."""
        layer_values = np.asarray(inputs, dtype=np.float64).reshape(-1)
        if layer_values.size != self._shape[0]:
            raise ValueError(f"Expected {self._shape[0]} inputs, got {layer_values.size}.")

        weight_offset = 0
        bias_offset = self._shape[0]
        for layer in range(1, self.layers):
            rows, cols = self._shape[layer - 1], self._shape[layer]
            matrix = self._weights[weight_offset : weight_offset + rows * cols].reshape(rows, cols)
            bias = self._bias[bias_offset : bias_offset + cols]
            layer_values = 1.0 / (1.0 + np.exp(-(layer_values @ matrix + bias)))
            weight_offset += rows * cols
            bias_offset += cols
        return layer_values.tolist()
