"""Fully-connected, sigmoid-activated feed-forward network."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, Sequence

import numpy as np

from .activations import sigmoid
from .errors import ConstructionError, DimensionMismatchError, FormatError
from .types import Array, ForwardTrace, as_column


def make_rng(rng: np.random.Generator | int | None = None) -> np.random.Generator:
    """Return ``rng`` unchanged, or a new generator seeded with it."""

    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


def check_sizes(sizes: Sequence[int]) -> List[int]:
    sizes = list(sizes)
    if len(sizes) < 2:
        raise ConstructionError(
            f"A network needs at least an input and an output layer, got sizes={sizes}"
        )
    for idx, size in enumerate(sizes):
        if isinstance(size, bool) or not isinstance(size, (int, np.integer)):
            raise ConstructionError(f"Layer {idx} size must be an integer, got {size!r}")
        if size <= 0:
            raise ConstructionError(f"Layer {idx} must have a positive width, got {size}")
    return [int(size) for size in sizes]


@dataclass
class Network:
    """Layer sizes plus one weight matrix and bias column per layer transition.

    ``weights[i]`` has shape ``(sizes[i + 1], sizes[i])`` and ``biases[i]`` has
    shape ``(sizes[i + 1], 1)``. Only the trainer mutates them.
    """

    sizes: List[int]
    weights: List[Array] = field(repr=False)
    biases: List[Array] = field(repr=False)

    def __post_init__(self) -> None:
        self.sizes = check_sizes(self.sizes)
        self.weights = list(self.weights)
        self.biases = list(self.biases)
        transitions = len(self.sizes) - 1
        if len(self.weights) != transitions or len(self.biases) != transitions:
            raise ConstructionError(
                f"Expected {transitions} weight matrices and bias vectors, got "
                f"{len(self.weights)} and {len(self.biases)}"
            )
        for idx, (in_dim, out_dim) in enumerate(zip(self.sizes[:-1], self.sizes[1:])):
            W = np.asarray(self.weights[idx], dtype=np.float64)
            b = np.asarray(self.biases[idx], dtype=np.float64)
            if W.shape != (out_dim, in_dim):
                raise ConstructionError(
                    f"weights[{idx}] has shape {W.shape}, expected {(out_dim, in_dim)}"
                )
            if b.shape != (out_dim, 1):
                raise ConstructionError(
                    f"biases[{idx}] has shape {b.shape}, expected {(out_dim, 1)}"
                )
            self.weights[idx] = W
            self.biases[idx] = b

    @classmethod
    def create(
        cls,
        sizes: Sequence[int],
        rng: np.random.Generator | int | None = None,
    ) -> "Network":
        """Sample every weight and bias i.i.d. from a standard normal."""

        sizes = check_sizes(sizes)
        rng = make_rng(rng)
        weights: list[Array] = []
        biases: list[Array] = []
        for in_dim, out_dim in zip(sizes[:-1], sizes[1:]):
            biases.append(rng.standard_normal((out_dim, 1)))
            weights.append(rng.standard_normal((out_dim, in_dim)))
        return cls(sizes=sizes, weights=weights, biases=biases)

    def feedforward(self, inputs: Array) -> Array:
        """Return the output activation for one ``sizes[0] x 1`` column."""

        activation = inputs
        for W, b in zip(self.weights, self.biases):
            activation = sigmoid(W @ activation + b)
        return activation

    def forward_traced(self, inputs: Array) -> ForwardTrace:
        activation = inputs
        zs: list[Array] = []
        activations: list[Array] = [activation]
        for W, b in zip(self.weights, self.biases):
            z = W @ activation + b
            activation = sigmoid(z)
            zs.append(z)
            activations.append(activation)
        return ForwardTrace(zs=zs, activations=activations)

    def check_input(self, inputs: Array, *, position: int | None = None) -> None:
        self._check_column(inputs, self.sizes[0], "Input", "the first layer", position)

    def check_target(self, targets: Array, *, position: int | None = None) -> None:
        self._check_column(targets, self.sizes[-1], "Target", "the output layer", position)

    @staticmethod
    def _check_column(
        vector: Array, width: int, what: str, layer: str, position: int | None
    ) -> None:
        where = "" if position is None else f" at position {position}"
        shape = np.shape(vector)
        if len(shape) != 2 or shape[1] != 1:
            raise DimensionMismatchError(
                f"{what}{where} must be a {width} x 1 column, got shape {shape}"
            )
        if shape[0] != width:
            raise DimensionMismatchError(
                f"{what}{where} has length {shape[0]}, but {layer} has {width} units"
            )

    def predict(self, inputs: Iterable[Sequence[float]]) -> List[Array]:
        """Feed every input forward; all inputs are checked before any output."""

        columns = [as_column(vector) for vector in inputs]
        for position, column in enumerate(columns):
            self.check_input(column, position=position)
        return [self.feedforward(column).ravel() for column in columns]

    def apply_gradients(
        self, bias_grads: Sequence[Array], weight_grads: Sequence[Array], lr: float
    ) -> None:
        for idx in range(len(self.weights)):
            self.weights[idx] = self.weights[idx] - lr * weight_grads[idx]
            self.biases[idx] = self.biases[idx] - lr * bias_grads[idx]

    def state_dict(self) -> Mapping[str, Array]:
        state: dict[str, Array] = {"sizes": np.asarray(self.sizes, dtype=np.int64)}
        for idx, (W, b) in enumerate(zip(self.weights, self.biases)):
            state[f"W{idx}"] = W.copy()
            state[f"b{idx}"] = b.copy()
        return state

    def load_state_dict(self, state: Mapping[str, Array]) -> None:
        """Replace every parameter from a :meth:`state_dict` mapping.

        All entries are checked before any parameter is replaced.
        """

        if "sizes" in state:
            found = [int(size) for size in np.ravel(state["sizes"])]
            if found != self.sizes:
                raise ConstructionError(
                    f"State dict is for sizes={found}, but this network has sizes={self.sizes}"
                )
        weights: list[Array] = []
        biases: list[Array] = []
        for idx in range(len(self.weights)):
            for key, target in ((f"W{idx}", weights), (f"b{idx}", biases)):
                if key not in state:
                    raise FormatError(f"Missing parameter {key} in state dict")
                value = np.array(state[key], dtype=np.float64)
                if not np.all(np.isfinite(value)):
                    raise FormatError(f"Parameter {key} contains non-finite values")
                target.append(value)
        checked = Network(sizes=self.sizes, weights=weights, biases=biases)
        self.weights = checked.weights
        self.biases = checked.biases

    def copy(self) -> "Network":
        return Network(
            sizes=list(self.sizes),
            weights=[W.copy() for W in self.weights],
            biases=[b.copy() for b in self.biases],
        )

    def parameter_count(self) -> int:
        return int(sum(W.size + b.size for W, b in zip(self.weights, self.biases)))


def construct(
    sizes: Sequence[int], rng: np.random.Generator | int | None = None
) -> Network:
    return Network.create(sizes, rng=rng)


def predict(model: Network, inputs: Iterable[Sequence[float]]) -> List[Array]:
    return model.predict(inputs)


__all__ = ["Network", "check_sizes", "construct", "make_rng", "predict"]
