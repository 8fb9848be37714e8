"""Classification accuracy against held-out, one-hot labelled data."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence

import numpy as np

from ..core.errors import LabelEncodingError
from ..core.network import Network
from ..core.types import Array, Example


@dataclass(frozen=True)
class EvaluationResult:
    correct: int
    total: int

    @property
    def accuracy(self) -> float:
        return self.correct / self.total if self.total else 0.0

    def as_metrics(self) -> Mapping[str, float]:
        return {
            "correct": self.correct,
            "total": self.total,
            "accuracy": self.accuracy,
        }


def predicted_class(prediction: Array) -> int:
    """Index of the largest entry; ties go to the first occurrence."""

    # np.argmax already returns the first maximal index on ties.
    return int(np.argmax(np.ravel(prediction)))


def true_class(target: Array, *, position: int | None = None) -> int:
    """Index of the entry equal to exactly ``1.0``."""

    hits = np.flatnonzero(np.ravel(target) == 1.0)
    if hits.size == 0:
        where = "" if position is None else f" at position {position}"
        raise LabelEncodingError(
            f"Target{where} is not one-hot: no entry is exactly 1.0"
        )
    return int(hits[0])


def check_labels(examples: Sequence[Example]) -> None:
    for position, example in enumerate(examples):
        true_class(example.targets, position=position)


def evaluate(model: Network, test_data: Iterable[Example]) -> EvaluationResult:
    """Count the examples whose predicted class matches the one-hot label."""

    correct = 0
    total = 0
    for position, example in enumerate(test_data):
        model.check_input(example.inputs, position=position)
        model.check_target(example.targets, position=position)
        label = true_class(example.targets, position=position)
        if predicted_class(model.feedforward(example.inputs)) == label:
            correct += 1
        total += 1
    return EvaluationResult(correct=correct, total=total)


__all__ = [
    "EvaluationResult",
    "check_labels",
    "evaluate",
    "predicted_class",
    "true_class",
]
