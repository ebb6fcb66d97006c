"""Training loop, error metrics and run pipelines."""

from .classifiers import make_best_of_classifier, make_threshold_classifier
from .metrics import AllErrors, SquaredError, calc_error, classification_error, evaluate
from .trainer import Trainer

__all__ = [
    "AllErrors",
    "SquaredError",
    "Trainer",
    "calc_error",
    "classification_error",
    "evaluate",
    "make_best_of_classifier",
    "make_threshold_classifier",
]
