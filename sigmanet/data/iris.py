"""Fisher's iris measurements, bundled with scikit-learn."""

from __future__ import annotations

import numpy as np
from sklearn.datasets import load_iris

from .registry import DatasetSpec, register_dataset
from .training_data import TrainingData


@register_dataset("iris")
def build_iris_dataset(*, one_hot: bool = True) -> DatasetSpec:
    """Return the 150 iris examples with one-hot species targets."""

    bunch = load_iris()
    X = bunch.data.astype(np.float64)
    y = bunch.target.astype(int)
    labels = [str(name) for name in bunch.target_names]
    if one_hot:
        Y = np.eye(len(labels), dtype=np.float64)[y]
        data = TrainingData.from_arrays(X, Y, labels=labels)
    else:
        data = TrainingData.from_arrays(X, y.astype(np.float64))
    provenance = {
        "type": "iris",
        "source": "sklearn.datasets.load_iris",
        "features": [str(name) for name in bunch.feature_names],
        "classes": labels,
        "one_hot": one_hot,
    }
    return DatasetSpec(name="iris", data=data, provenance=provenance)


__all__ = ["build_iris_dataset"]
