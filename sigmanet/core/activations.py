"""Numeric primitives shared by layers, trainers and metrics."""

from __future__ import annotations

import numpy as np

from .errors import ShapeError
from .types import Array


def sigmoid(x: Array | float) -> Array | float:
    """Return the logistic function ``1 / (1 + exp(-x))``.

    Outputs lie in [0, 1] and ``sigmoid(0) == 0.5``.  Very negative inputs
    overflow ``exp`` to ``inf`` and saturate to exactly 0.0.
    """

    z = np.asarray(x, dtype=np.float64)
    with np.errstate(over="ignore"):
        out = 1.0 / (1.0 + np.exp(-z))
    if np.ndim(out) == 0:
        return float(out)
    return out


def sigmoid_deriv(activation: Array) -> Array:
    """Derivative of the sigmoid expressed through its own output."""

    return activation * (1.0 - activation)


def dot_product(left: Array, right: Array) -> float:
    left = np.asarray(left, dtype=np.float64)
    right = np.asarray(right, dtype=np.float64)
    if left.shape != right.shape:
        raise ShapeError(
            f"Dot product arguments are of different length: {left.size} vs {right.size}"
        )
    return float(np.sum(left * right))


__all__ = ["sigmoid", "sigmoid_deriv", "dot_product"]
