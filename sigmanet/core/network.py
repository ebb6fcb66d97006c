"""Fully connected feed-forward networks.

A network is created with the width of every layer, input first.  A
``Network(2, 4, 1)`` has two inputs, four hidden units and one output, and
because every layer carries a bias unit it holds ``(2 + 1) * 4 + (4 + 1) * 1``
trainable weights, all zero until :meth:`Network.randomize` is called.
"""

from __future__ import annotations

from typing import List

import numpy as np

from .errors import ConfigurationError
from .layer import Layer
from .types import ActivationState, Array, LayerActivation


class Network:
    """An ordered stack of sigmoid layers."""

    def __init__(self, *sizes: int) -> None:
        if len(sizes) < 2:
            raise ConfigurationError("A network needs at least an input and an output size")
        if any(int(size) <= 0 for size in sizes):
            raise ConfigurationError(f"Layer sizes must be positive, got {list(sizes)}")
        self.layers: List[Layer] = [
            Layer(int(inputs), int(outputs)) for inputs, outputs in zip(sizes[:-1], sizes[1:])
        ]
        self.last_output: Array | None = None

    def __repr__(self) -> str:
        return f"Network{tuple(self.sizes())}"

    def sizes(self) -> List[int]:
        return [self.input_size()] + [layer.output_size() for layer in self.layers]

    def input_size(self) -> int:
        return self.layers[0].input_size()

    def output_size(self) -> int:
        return self.layers[-1].output_size()

    def parameter_count(self) -> int:
        return int(sum(layer.weights.values.size for layer in self.layers))

    def randomize(self, rng: np.random.Generator | None = None) -> None:
        rng = rng or np.random.default_rng()
        for layer in self.layers:
            layer.randomize(rng)

    def trace(self, inputs: Array) -> tuple[Array, ActivationState]:
        """Run a forward pass and keep every layer's activation record."""

        self.last_output = None
        records: List[LayerActivation] = []
        x = inputs
        for layer in self.layers:
            x, record = layer.trace(x)
            records.append(record)
        self.last_output = x.copy()
        return x, ActivationState(layers=records)

    def forward(self, inputs: Array) -> Array:
        outputs, _ = self.trace(inputs)
        return outputs


__all__ = ["Network"]
