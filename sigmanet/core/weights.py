"""Trainable weight matrices."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .errors import ShapeError
from .types import Array


@dataclass(eq=False)
class WeightMatrix:
    """Rectangular weights with one row per output and one column per input.

    The matrix itself knows nothing about bias units; layers that need a bias
    column ask for one extra input.
    """

    values: Array

    def __post_init__(self) -> None:
        values = np.array(self.values, dtype=np.float64)
        if values.ndim != 2:
            raise ShapeError(f"Weights must be two dimensional, got shape {values.shape}")
        self.values = values

    @classmethod
    def zeros(cls, input_size: int, output_size: int) -> "WeightMatrix":
        return cls(np.zeros((int(output_size), int(input_size)), dtype=np.float64))

    @property
    def shape(self) -> tuple[int, int]:
        return self.values.shape  # type: ignore[return-value]

    def input_size(self) -> int:
        return int(self.values.shape[1])

    def output_size(self) -> int:
        return int(self.values.shape[0])

    def randomize(self, rng: np.random.Generator | None = None) -> None:
        """Fill every entry with an independent draw from [-0.5, 0.5)."""

        rng = rng or np.random.default_rng()
        self.values = rng.random(self.values.shape) - 0.5

    def process(self, inputs: Array) -> Array:
        """Return the dot product of every row with ``inputs``."""

        vector = np.asarray(inputs, dtype=np.float64)
        if vector.ndim != 1 or vector.shape[0] != self.input_size():
            raise ShapeError(
                f"Expected {self.input_size()} inputs but got {vector.size} inputs"
            )
        return self.values @ vector

    def add(self, other: "WeightMatrix") -> "WeightMatrix":
        if self.shape != other.shape:
            raise ShapeError(
                "Cannot add a {}x{} to a {}x{} matrix".format(
                    other.input_size(),
                    other.output_size(),
                    self.input_size(),
                    self.output_size(),
                )
            )
        return WeightMatrix(self.values + other.values)

    def copy(self) -> "WeightMatrix":
        return WeightMatrix(self.values.copy())


__all__ = ["WeightMatrix"]
