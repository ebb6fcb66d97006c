"""A single fully connected sigmoid layer."""

from __future__ import annotations

import numpy as np

from .activations import sigmoid
from .types import Array, LayerActivation
from .weights import WeightMatrix


class Layer:
    """Weights plus an implicit bias unit and a sigmoid transfer function."""

    def __init__(self, inputs: int, outputs: int) -> None:
        self.weights = WeightMatrix.zeros(inputs + 1, outputs)

    def __repr__(self) -> str:
        return f"Layer(inputs={self.input_size()}, outputs={self.output_size()})"

    def input_size(self) -> int:
        return self.weights.input_size() - 1

    def output_size(self) -> int:
        return self.weights.output_size()

    def randomize(self, rng: np.random.Generator | None = None) -> None:
        self.weights.randomize(rng)

    def trace(self, inputs: Array) -> tuple[Array, LayerActivation]:
        """Activate the layer and return the output with its activation record."""

        x = np.array(inputs, dtype=np.float64)
        outputs = sigmoid(self.weights.process(np.append(x, 1.0)))
        return outputs, LayerActivation(inputs=x, outputs=outputs.copy())

    def forward(self, inputs: Array) -> Array:
        outputs, _ = self.trace(inputs)
        return outputs

    def apply_update(self, update: WeightMatrix) -> None:
        """Replace the weights with ``weights + update``."""

        self.weights = self.weights.add(update)


__all__ = ["Layer"]
