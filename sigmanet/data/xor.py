"""The XOR problem."""

from __future__ import annotations

import numpy as np

from .registry import DatasetSpec, register_dataset
from .training_data import TrainingData

_INPUTS = np.array([[1.0, 0.0], [0.0, 1.0], [0.0, 0.0], [1.0, 1.0]])
_EXPECTED = np.array([[1.0], [1.0], [0.0], [0.0]])


def xor_data() -> TrainingData:
    return TrainingData.from_arrays(_INPUTS, _EXPECTED)


@register_dataset("xor")
def build_xor_dataset(*, repeat: int = 1) -> DatasetSpec:
    """Return the four XOR examples, optionally repeated ``repeat`` times."""

    data = TrainingData.from_arrays(np.tile(_INPUTS, (repeat, 1)), np.tile(_EXPECTED, (repeat, 1)))
    return DatasetSpec(name="xor", data=data, provenance={"type": "xor", "repeat": repeat})


__all__ = ["build_xor_dataset", "xor_data"]
