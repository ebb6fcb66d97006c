"""Training data containers and the dataset registry."""

# Ensure built-in datasets register themselves when the package is imported.
from . import csv_generic as _csv_generic  # noqa: F401
from . import iris as _iris  # noqa: F401
from . import xor as _xor  # noqa: F401
from .registry import DatasetSpec, available_datasets, get_dataset, register_dataset
from .training_data import TrainingData, TrainingDatum

__all__ = [
    "DatasetSpec",
    "TrainingData",
    "TrainingDatum",
    "available_datasets",
    "get_dataset",
    "register_dataset",
]
