"""Utility helpers for dataset loaders."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Mapping

import numpy as np

from ..core.types import Array, Example


@dataclass(frozen=True)
class SplitIndices:
    """Indices for train/test partitions."""

    train: np.ndarray
    test: np.ndarray

    @property
    def sizes(self) -> Mapping[str, int]:
        return {"train": int(self.train.size), "test": int(self.test.size)}


def deterministic_split(
    n_samples: int,
    *,
    test_split: float = 0.2,
    seed: int = 0,
) -> SplitIndices:
    """Return seeded train/test indices for the requested ratio."""

    if not 0 <= test_split < 1:
        raise ValueError("test_split must be in [0, 1)")

    rng = np.random.default_rng(seed)
    indices = np.arange(n_samples)
    rng.shuffle(indices)

    test_size = int(round(n_samples * test_split))
    # At least one test sample when a split was requested
    test_size = min(max(test_size, 1 if test_split > 0 else 0), n_samples)
    if n_samples - test_size <= 0:
        raise ValueError("Not enough samples for the requested split")
    return SplitIndices(train=indices[test_size:], test=indices[:test_size])


def one_hot(labels: Array, num_classes: int) -> Array:
    """Rows with exactly one ``1.0`` at each label index."""

    labels = np.asarray(labels).astype(np.int64).reshape(-1)
    if labels.size and (labels.min() < 0 or labels.max() >= num_classes):
        raise ValueError(
            f"Labels must lie in [0, {num_classes}), got range "
            f"[{labels.min()}, {labels.max()}]"
        )
    out = np.zeros((labels.size, num_classes), dtype=np.float64)
    out[np.arange(labels.size), labels] = 1.0
    return out


def to_examples(features: Array, targets: Array) -> List[Example]:
    """Pair up feature rows and target rows as column-vector examples."""

    if features.shape[0] != targets.shape[0]:
        raise ValueError(
            f"{features.shape[0]} feature rows but {targets.shape[0]} target rows"
        )
    return [Example(inputs=x, targets=y) for x, y in zip(features, targets)]


__all__ = ["SplitIndices", "deterministic_split", "one_hot", "to_examples"]
