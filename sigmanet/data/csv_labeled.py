"""Labelled CSV datasets: one integer label column plus numeric features.

The default layout matches the common digit CSV exports: a header row, the
label in the first column and 0-255 pixel intensities in the rest.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd
from sklearn.preprocessing import LabelEncoder

from .registry import DatasetSpec, register_dataset
from .utils import deterministic_split, one_hot, to_examples

DEFAULT_SCALE = 1.0 / 255.0


def _load_csv(
    path: Path, label_col: str | int, max_rows: int | None
) -> tuple[np.ndarray, np.ndarray]:
    df = pd.read_csv(path, nrows=max_rows)
    if isinstance(label_col, int):
        if not 0 <= label_col < len(df.columns):
            raise KeyError(f"Label column index {label_col} out of range for {path}")
        label_col = df.columns[label_col]
    if label_col not in df.columns:
        raise KeyError(f"Label column {label_col!r} not found in {path}")
    labels = df.pop(label_col).to_numpy()
    features = df.to_numpy(dtype=np.float64)
    return features, labels


def _encode(
    labels: np.ndarray, num_classes: int | None, encoder: LabelEncoder | None
) -> tuple[np.ndarray, int, LabelEncoder | None]:
    if num_classes is not None:
        return one_hot(labels, num_classes), num_classes, None
    if encoder is None:
        encoder = LabelEncoder().fit(labels)
    indices = encoder.transform(labels)
    classes = len(encoder.classes_)
    return one_hot(indices, classes), classes, encoder


@register_dataset("csv")
def load_csv(
    *,
    path: str | Path,
    test_path: str | Path | None = None,
    label_col: str | int = 0,
    num_classes: int | None = None,
    scale: float = DEFAULT_SCALE,
    test_split: float = 0.0,
    max_rows: int | None = None,
    seed: int = 0,
    **_: object,
) -> DatasetSpec:
    """Load a classification dataset from labelled CSV file(s).

    When ``num_classes`` is given the labels must already be class indices;
    otherwise they are encoded with :class:`~sklearn.preprocessing.LabelEncoder`
    fitted on the training file.
    """

    path = Path(path)
    features, labels = _load_csv(path, label_col, max_rows)
    features = features * scale
    targets, classes, encoder = _encode(labels, num_classes, None)

    if test_path is not None:
        test_file = Path(test_path)
        test_features, test_labels = _load_csv(test_file, label_col, max_rows)
        test_targets, _, _ = _encode(test_labels, classes if encoder is None else None, encoder)
        train = to_examples(features, targets)
        test = to_examples(test_features * scale, test_targets)
    elif test_split > 0:
        splits = deterministic_split(features.shape[0], test_split=test_split, seed=seed)
        train = to_examples(features[splits.train], targets[splits.train])
        test = to_examples(features[splits.test], targets[splits.test])
    else:
        train = to_examples(features, targets)
        test = None

    provenance = {
        "path": str(path),
        "test_path": str(test_path) if test_path is not None else None,
        "label_col": label_col,
        "scale": scale,
        "test_split": test_split,
        "seed": seed,
        "classes": encoder.classes_.tolist() if encoder is not None else list(range(classes)),
    }
    return DatasetSpec(
        name="csv",
        train=train,
        test=test,
        num_classes=classes,
        provenance=provenance,
    )


__all__ = ["DEFAULT_SCALE", "load_csv"]
