"""sigmanet public API."""

from .core import activations, errors, types  # noqa: F401
from .core.errors import ConfigurationError, DataMismatchError, ShapeError
from .core.layer import Layer
from .core.network import Network
from .core.weights import WeightMatrix
from .data import TrainingData, TrainingDatum, get_dataset
from .training import (
    AllErrors,
    SquaredError,
    Trainer,
    calc_error,
    classification_error,
    evaluate,
    make_best_of_classifier,
    make_threshold_classifier,
)
from .training.pipelines import load_preset, presets, run_pipeline

__all__ = [
    "AllErrors",
    "ConfigurationError",
    "DataMismatchError",
    "Layer",
    "Network",
    "ShapeError",
    "SquaredError",
    "Trainer",
    "TrainingData",
    "TrainingDatum",
    "WeightMatrix",
    "activations",
    "calc_error",
    "classification_error",
    "errors",
    "evaluate",
    "get_dataset",
    "load_preset",
    "make_best_of_classifier",
    "make_threshold_classifier",
    "presets",
    "run_pipeline",
    "types",
]
