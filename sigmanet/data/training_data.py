"""Training examples and the in-place operations applied to them."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterator, List, Sequence, overload

import numpy as np

from ..core.errors import ConfigurationError
from ..core.types import Array


@dataclass(eq=False)
class TrainingDatum:
    """One example: the network inputs and the outputs it should produce."""

    inputs: Array
    expected: Array

    def __post_init__(self) -> None:
        self.inputs = np.array(self.inputs, dtype=np.float64).reshape(-1)
        self.expected = np.array(self.expected, dtype=np.float64).reshape(-1)


@dataclass
class TrainingData:
    """Ordered collection of :class:`TrainingDatum`.

    ``labels`` optionally names the output units, in order, for datasets whose
    expected vectors are one-hot class encodings.
    """

    examples: List[TrainingDatum] = field(default_factory=list)
    labels: List[str] | None = None

    @classmethod
    def from_arrays(
        cls,
        inputs: Array,
        expected: Array,
        labels: Sequence[str] | None = None,
    ) -> "TrainingData":
        X = np.asarray(inputs, dtype=np.float64)
        Y = np.asarray(expected, dtype=np.float64)
        if X.ndim == 1:
            X = X.reshape(-1, 1)
        if Y.ndim == 1:
            Y = Y.reshape(-1, 1)
        if X.shape[0] != Y.shape[0]:
            raise ConfigurationError(
                f"Got {X.shape[0]} input rows but {Y.shape[0]} expected rows"
            )
        examples = [TrainingDatum(x, y) for x, y in zip(X, Y)]
        return cls(examples, list(labels) if labels is not None else None)

    def __len__(self) -> int:
        return len(self.examples)

    def __iter__(self) -> Iterator[TrainingDatum]:
        return iter(self.examples)

    @overload
    def __getitem__(self, index: int) -> TrainingDatum: ...

    @overload
    def __getitem__(self, index: slice) -> "TrainingData": ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return TrainingData(self.examples[index], self.labels)
        return self.examples[index]

    def append(self, datum: TrainingDatum) -> None:
        self.examples.append(datum)

    def inputs(self) -> Array:
        return np.vstack([datum.inputs for datum in self.examples])

    def shuffle(self, rounds: int, rng: np.random.Generator | None = None) -> None:
        """Disturb the order with ``rounds * len(self)`` random pair swaps.

        This is not a uniform permutation; it only needs to move examples
        around enough that consecutive passes see a different order.
        """

        size = len(self.examples)
        if size < 2 or rounds <= 0:
            return
        rng = rng or np.random.default_rng()
        swaps = int(rounds) * size
        left = rng.integers(0, size, size=swaps)
        right = rng.integers(0, size, size=swaps)
        examples = self.examples
        for i, j in zip(left, right):
            examples[i], examples[j] = examples[j], examples[i]

    def scale(self, *columns: int) -> tuple[float, float]:
        """Rescale a group of input columns to [0, 1] using their joint range.

        A group whose values are all equal is mapped to 0.0.  Returns the
        ``(minimum, maximum)`` the group was scaled with.
        """

        if not columns:
            raise ConfigurationError("scale() needs at least one column index")
        if not self.examples:
            raise ConfigurationError("Cannot scale an empty data set")
        for datum in self.examples:
            for col in columns:
                if not 0 <= col < datum.inputs.shape[0]:
                    raise ConfigurationError(
                        f"Column {col} is out of range for inputs of length "
                        f"{datum.inputs.shape[0]}"
                    )

        cols = list(columns)
        values = np.vstack([datum.inputs[cols] for datum in self.examples])
        low = float(values.min())
        high = float(values.max())
        span = high - low
        if span == 0:
            span = 1.0
        for datum in self.examples:
            datum.inputs[cols] = (datum.inputs[cols] - low) / span
        return low, high

    def split(self, fraction: float) -> tuple["TrainingData", "TrainingData"]:
        """Partition the data, in its current order, at ``ceil(n * fraction)``."""

        if not 0.0 <= fraction <= 1.0:
            raise ConfigurationError(f"Split fraction must be in [0, 1], got {fraction}")
        cut = int(math.ceil(len(self.examples) * fraction))
        return self[:cut], self[cut:]


__all__ = ["TrainingDatum", "TrainingData"]
