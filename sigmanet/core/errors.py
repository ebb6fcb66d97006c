"""Exception types raised by sigmanet."""

from __future__ import annotations


class ShapeError(ValueError):
    """A vector or matrix did not have the dimensions an operation needs."""


class DataMismatchError(ValueError):
    """A training example disagrees with the network it is presented to."""


class ConfigurationError(ValueError):
    """Invalid arguments for a data or training operation."""


__all__ = ["ShapeError", "DataMismatchError", "ConfigurationError"]
