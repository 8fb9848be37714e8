"""Core numerical primitives for sigmanet."""

from . import activations, backprop, errors, network, types

__all__ = ["activations", "backprop", "errors", "network", "types"]
