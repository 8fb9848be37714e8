"""Core typing contracts for sigmanet."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

Array = np.ndarray


@dataclass(frozen=True, eq=False)
class Example:
    """A single (input, target) training pair stored as column vectors."""

    inputs: Array
    targets: Array

    def __post_init__(self) -> None:
        object.__setattr__(self, "inputs", as_column(self.inputs))
        object.__setattr__(self, "targets", as_column(self.targets))

    @classmethod
    def from_pair(cls, inputs: Sequence[float], targets: Sequence[float]) -> "Example":
        return cls(inputs=inputs, targets=targets)


@dataclass
class ForwardTrace:
    """Pre-activations and activations captured during the forward pass.

    ``activations[0]`` is the network input, so ``activations`` holds one more
    entry than ``zs``.
    """

    zs: List[Array]
    activations: List[Array]

    @property
    def output(self) -> Array:
        return self.activations[-1]


# (bias_gradients, weight_gradients), one entry per layer transition.
Gradients = Tuple[List[Array], List[Array]]


def as_column(vector: Sequence[float] | Array) -> Array:
    """Convert a host vector into a float64 ``n x 1`` column."""

    try:
        array = np.asarray(vector, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Vector must contain only numbers: {exc}") from exc
    if array.ndim == 2 and array.shape[1] == 1:
        return array.copy()
    if array.ndim != 1:
        raise ValueError(f"Expected a 1-D vector, got shape {array.shape}")
    return array.reshape(-1, 1)
