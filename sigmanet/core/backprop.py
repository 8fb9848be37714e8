"""Per-example gradients of the squared-error loss."""

from __future__ import annotations

from typing import List, Sequence

import numpy as np

from .activations import sigmoid_prime
from .network import Network
from .types import Array, Gradients


def zero_gradients(model: Network) -> Gradients:
    """Zero accumulators shaped like ``model.biases`` and ``model.weights``."""

    bias_grads = [np.zeros_like(b) for b in model.biases]
    weight_grads = [np.zeros_like(W) for W in model.weights]
    return bias_grads, weight_grads


def accumulate(total: Gradients, delta: Gradients) -> None:
    """Add ``delta`` into ``total`` in place (a plain sum, not an average)."""

    for acc, grad in zip(total[0], delta[0]):
        acc += grad
    for acc, grad in zip(total[1], delta[1]):
        acc += grad


def backprop(model: Network, inputs: Array, targets: Array) -> Gradients:
    """Return ``(bias_gradients, weight_gradients)`` for one example.

    The loss is ``0.5 * ||a_out - target||^2`` with no regularisation, so the
    output error is ``(a_out - target) * sigmoid'(z_out)``.
    """

    trace = model.forward_traced(inputs)
    zs = trace.zs
    activations = trace.activations
    transitions = len(model.weights)
    bias_grads: List[Array] = [None] * transitions  # type: ignore[list-item]
    weight_grads: List[Array] = [None] * transitions  # type: ignore[list-item]

    delta = (activations[-1] - targets) * sigmoid_prime(zs[-1])
    bias_grads[-1] = delta
    weight_grads[-1] = delta @ activations[-2].T

    for layer in reversed(range(transitions - 1)):
        delta = (model.weights[layer + 1].T @ delta) * sigmoid_prime(zs[layer])
        bias_grads[layer] = delta
        # activations[layer] is the input feeding weights[layer]
        weight_grads[layer] = delta @ activations[layer].T
    return bias_grads, weight_grads


def squared_error(model: Network, inputs: Array, targets: Array) -> float:
    """Loss whose exact gradient :func:`backprop` returns."""

    diff = model.feedforward(inputs) - targets
    return float(0.5 * np.sum(np.square(diff)))


def batch_gradients(model: Network, examples: Sequence) -> Gradients:
    """Sum the per-example gradients of ``examples``."""

    total = zero_gradients(model)
    for example in examples:
        accumulate(total, backprop(model, example.inputs, example.targets))
    return total


__all__ = [
    "accumulate",
    "backprop",
    "batch_gradients",
    "squared_error",
    "zero_gradients",
]
