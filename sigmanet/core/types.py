"""Core typing contracts for sigmanet."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

import numpy as np

Array = np.ndarray


@dataclass(frozen=True, eq=False)
class LayerActivation:
    """Values seen by one layer during a single forward pass.

    ``inputs`` is the vector presented to the layer before the bias unit is
    appended and ``outputs`` is the activated (post-sigmoid) result.
    """

    inputs: Array
    outputs: Array

    @property
    def biased_inputs(self) -> Array:
        return np.append(self.inputs, 1.0)


@dataclass(frozen=True, eq=False)
class ActivationState:
    """Per-layer activations captured by :meth:`Network.trace`."""

    layers: List[LayerActivation]

    @property
    def output(self) -> Array:
        return self.layers[-1].outputs


@dataclass(frozen=True)
class RunResult:
    """Summary returned by :func:`sigmanet.training.pipelines.run_pipeline`."""

    iterations: int
    final_error: float
    classification_error: float | None
    metrics_path: str
    manifest_path: str
    summary_path: str = ""
