"""Turn network output vectors into class labels."""

from __future__ import annotations

from typing import List, Sequence

import numpy as np

from ..core.errors import ShapeError
from ..core.types import Array
from .metrics import Classifier


def _check(outputs: Array, labels: Sequence[str]) -> Array:
    values = np.asarray(outputs, dtype=np.float64).reshape(-1)
    if values.shape[0] != len(labels):
        raise ShapeError(f"Got {values.shape[0]} outputs for {len(labels)} labels")
    return values


def make_best_of_classifier(labels: Sequence[str]) -> Classifier:
    """Classifier returning the single label with the largest output."""

    names = list(labels)

    def classify(outputs: Array) -> List[str]:
        values = _check(outputs, names)
        return [names[int(np.argmax(values))]]

    return classify


def make_threshold_classifier(labels: Sequence[str], threshold: float = 0.5) -> Classifier:
    """Classifier returning every label whose output reaches ``threshold``."""

    names = list(labels)

    def classify(outputs: Array) -> List[str]:
        values = _check(outputs, names)
        return [name for name, value in zip(names, values) if value >= threshold]

    return classify


__all__ = ["make_best_of_classifier", "make_threshold_classifier"]
