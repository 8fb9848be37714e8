"""Activation utilities for sigmanet."""

from __future__ import annotations

import numpy as np

from .types import Array


def sigmoid(x: Array) -> Array:
    """Return the logistic sigmoid ``e^x / (e^x + 1)``."""

    # exp(-x) overflows to inf for very negative x, which correctly yields 0.
    with np.errstate(over="ignore"):
        return 1.0 / (1.0 + np.exp(-x))


def sigmoid_prime(x: Array) -> Array:
    """Closed-form derivative ``s(x) * (1 - s(x))``."""

    s = sigmoid(x)
    return s * (1.0 - s)
