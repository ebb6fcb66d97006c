"""Classification data read from a CSV file."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd
from sklearn.preprocessing import LabelEncoder

from .registry import DatasetSpec, register_dataset
from .training_data import TrainingData


def _load_csv(path: Path, target_col: str) -> tuple[np.ndarray, np.ndarray]:
    df = pd.read_csv(path)
    if target_col not in df.columns:
        raise KeyError(f"Target column {target_col!r} not found in CSV")
    y = df.pop(target_col).to_numpy()
    X = df.to_numpy(dtype=np.float64)
    return X, y


@register_dataset("csv")
def load_csv_classification(*, csv_path: str | Path, target_col: str = "target") -> DatasetSpec:
    """Load numeric feature columns and one-hot encode ``target_col``."""

    path = Path(csv_path)
    X, y_raw = _load_csv(path, target_col)
    encoder = LabelEncoder()
    y_encoded = encoder.fit_transform(y_raw)
    labels = [str(name) for name in encoder.classes_]
    Y = np.eye(len(labels), dtype=np.float64)[y_encoded]
    provenance = {
        "type": "csv",
        "path": str(path),
        "target_col": target_col,
        "classes": labels,
    }
    return DatasetSpec(
        name="csv",
        data=TrainingData.from_arrays(X, Y, labels=labels),
        provenance=provenance,
    )


__all__ = ["load_csv_classification"]
