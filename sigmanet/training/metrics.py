"""Squared-error bookkeeping shared by training and evaluation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Sequence

import numpy as np

from ..core.errors import ConfigurationError, DataMismatchError, ShapeError
from ..core.network import Network
from ..core.types import Array
from ..data.training_data import TrainingData

Classifier = Callable[[Array], List[str]]


@dataclass(eq=False)
class SquaredError:
    """Per-output-unit squared error."""

    values: Array

    def __post_init__(self) -> None:
        self.values = np.array(self.values, dtype=np.float64).reshape(-1)

    @classmethod
    def zeros(cls, size: int) -> "SquaredError":
        return cls(np.zeros(int(size), dtype=np.float64))

    def __len__(self) -> int:
        return int(self.values.shape[0])

    def __getitem__(self, index: int) -> float:
        return float(self.values[index])

    def __iter__(self) -> Iterator[float]:
        return iter(self.values.tolist())

    def accumulate(self, other: "SquaredError") -> None:
        if len(other) != len(self):
            raise ShapeError(f"Cannot accumulate {len(other)} errors into {len(self)}")
        self.values += other.values

    def average(self, count: int) -> None:
        self.values /= float(count)

    def combine(self) -> float:
        return float(np.sum(self.values))

    def weighted_combination(self, weights: Sequence[float]) -> float:
        """Combine the units using ``weights`` normalised to sum to one."""

        w = np.asarray(weights, dtype=np.float64)
        if w.shape != self.values.shape:
            raise ShapeError(
                f"Number of weights {w.size} does not equal number of values {len(self)}"
            )
        return float(np.sum(w / w.sum() * self.values))

    def tolist(self) -> List[float]:
        return self.values.tolist()


@dataclass
class AllErrors:
    """Squared errors for many examples."""

    errors: List[SquaredError] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.errors = [
            err if isinstance(err, SquaredError) else SquaredError(err) for err in self.errors
        ]

    def __len__(self) -> int:
        return len(self.errors)

    def __getitem__(self, index: int) -> SquaredError:
        return self.errors[index]

    def __iter__(self) -> Iterator[SquaredError]:
        return iter(self.errors)

    def append(self, error: SquaredError) -> None:
        self.errors.append(error)

    def total(self) -> SquaredError:
        if not self.errors:
            raise ConfigurationError("No errors to total")
        total = SquaredError.zeros(len(self.errors[0]))
        for err in self.errors:
            total.accumulate(err)
        return total

    def average(self) -> SquaredError:
        avg = self.total()
        avg.average(len(self.errors))
        return avg


def calc_error(expected: Array, actual: Array) -> SquaredError:
    expected = np.asarray(expected, dtype=np.float64).reshape(-1)
    actual = np.asarray(actual, dtype=np.float64).reshape(-1)
    if expected.shape != actual.shape:
        raise DataMismatchError(
            f"Expected length = {expected.size} actual length = {actual.size}"
        )
    diff = expected - actual
    return SquaredError(diff * diff)


def evaluate(network: Network, data: TrainingData) -> AllErrors:
    """Return the squared error of ``network`` on every example of ``data``."""

    errors = AllErrors()
    for datum in data:
        outputs = network.forward(datum.inputs)
        errors.append(calc_error(datum.expected, outputs))
    return errors


def classification_error(
    network: Network, data: TrainingData, classifier: Classifier
) -> float:
    """Fraction of examples whose predicted labels differ from the expected ones."""

    if len(data) == 0:
        raise ConfigurationError("Cannot compute classification error on empty data")
    wrong = 0
    for datum in data:
        outputs = network.forward(datum.inputs)
        if classifier(outputs) != classifier(datum.expected):
            wrong += 1
    return wrong / len(data)


__all__ = [
    "AllErrors",
    "Classifier",
    "SquaredError",
    "calc_error",
    "classification_error",
    "evaluate",
]
