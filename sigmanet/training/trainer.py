"""Mini-batch stochastic gradient descent for :class:`~sigmanet.core.network.Network`."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Iterable, List, Mapping, Sequence

import numpy as np

from ..core.backprop import batch_gradients
from ..core.network import Network, make_rng
from ..core.types import Example, Gradients
from ..data.records import ensure_examples
from .evaluation import EvaluationResult, check_labels, evaluate


@dataclass(frozen=True)
class TrainResult:
    """Summary returned by :meth:`Trainer.run`."""

    iterations: int
    batches: int
    stopped_early: bool = False
    last_evaluation: EvaluationResult | None = None


@dataclass
class SGDOptimizer:
    """Plain SGD: ``param -= lr * summed_gradient`` once per batch.

    Gradients are summed over the batch, not averaged, so the effective step
    size grows with ``batch_size``.
    """

    lr: float

    def step(self, model: Network, grads: Gradients) -> None:
        bias_grads, weight_grads = grads
        model.apply_gradients(bias_grads, weight_grads, self.lr)


def partition_batches(n_examples: int, batch_size: int) -> List[slice]:
    """Consecutive slices of ``batch_size``; the last one holds the remainder."""

    if batch_size <= 0:
        raise ValueError(f"batch_size must be positive, got {batch_size}")
    return [
        slice(start, min(start + batch_size, n_examples))
        for start in range(0, n_examples, batch_size)
    ]


def num_batches(n_examples: int, batch_size: int) -> int:
    return math.ceil(n_examples / batch_size)


def validate_dataset(model: Network, examples: Sequence[Example]) -> None:
    """Raise ``DimensionMismatchError`` if any example has the wrong widths."""

    for position, example in enumerate(examples):
        model.check_input(example.inputs, position=position)
        model.check_target(example.targets, position=position)


class Trainer:
    """Shuffle, batch, accumulate and update for a fixed number of iterations."""

    def __init__(
        self,
        model: Network,
        optimizer: SGDOptimizer,
        callbacks: Sequence[object] | None = None,
    ) -> None:
        self.model = model
        self.optimizer = optimizer
        self.callbacks = list(callbacks or [])

    def run(
        self,
        dataset: Iterable[Example],
        iterations: int,
        batch_size: int,
        *,
        test_data: Iterable[Example] | None = None,
        rng: np.random.Generator | int | None = None,
        split_loggers: Mapping[str, Sequence[object]] | None = None,
        should_stop: Callable[[], bool] | None = None,
    ) -> TrainResult:
        if iterations <= 0:
            raise ValueError(f"iterations must be positive, got {iterations}")
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        if not self.optimizer.lr > 0:
            raise ValueError(f"learning rate must be positive, got {self.optimizer.lr}")

        examples = ensure_examples(dataset)
        validate_dataset(self.model, examples)
        test_examples = None
        if test_data is not None:
            test_examples = ensure_examples(test_data)
            validate_dataset(self.model, test_examples)
            check_labels(test_examples)

        rng = make_rng(rng)
        split_loggers = split_loggers or {}
        total_batches = 0
        evaluation: EvaluationResult | None = None
        batches = partition_batches(len(examples), batch_size)

        for iteration in range(1, iterations + 1):
            order = rng.permutation(len(examples))
            shuffled = [examples[i] for i in order]
            for batch in batches:
                grads = batch_gradients(self.model, shuffled[batch])
                self.optimizer.step(self.model, grads)
                total_batches += 1
                if should_stop is not None and should_stop():
                    return TrainResult(
                        iterations=iteration - 1,
                        batches=total_batches,
                        stopped_early=True,
                        last_evaluation=evaluation,
                    )

            self._emit_epoch(
                "train",
                iteration,
                {"examples": len(examples), "batches": len(batches)},
                split_loggers,
            )
            if test_examples is not None:
                evaluation = evaluate(self.model, test_examples)
                self._emit_epoch("test", iteration, evaluation.as_metrics(), split_loggers)

        return TrainResult(
            iterations=iterations,
            batches=total_batches,
            last_evaluation=evaluation,
        )

    # ------------------------------------------------------------------
    # Internal helpers

    def _emit_epoch(
        self,
        split: str,
        epoch: int,
        metrics: Mapping[str, float],
        loggers: Mapping[str, Sequence[object]],
    ) -> None:
        for callback in self.callbacks:
            if hasattr(callback, "on_epoch"):
                callback.on_epoch(epoch, metrics)  # type: ignore[attr-defined]
        for callback in loggers.get(split, []):
            if hasattr(callback, "on_epoch"):
                callback.on_epoch(epoch, metrics)  # type: ignore[attr-defined]
            elif callable(callback):
                callback(epoch, metrics)


def train(
    model: Network,
    dataset: Iterable[Example],
    iterations: int,
    batch_size: int,
    learning_rate: float,
    test_data: Iterable[Example] | None = None,
    *,
    rng: np.random.Generator | int | None = None,
    callbacks: Sequence[object] | None = None,
) -> TrainResult:
    """Train ``model`` in place; see :class:`Trainer`."""

    trainer = Trainer(model, SGDOptimizer(lr=learning_rate), callbacks=callbacks)
    return trainer.run(dataset, iterations, batch_size, test_data=test_data, rng=rng)


__all__ = [
    "SGDOptimizer",
    "TrainResult",
    "Trainer",
    "num_batches",
    "partition_batches",
    "train",
    "validate_dataset",
]
