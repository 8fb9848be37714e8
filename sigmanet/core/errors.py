"""Error kinds raised at the boundary of each network operation."""

from __future__ import annotations


class NetworkError(ValueError):
    """Base class for invalid input detected by sigmanet."""


class ConstructionError(NetworkError):
    """Layer sizes are too short or contain a zero-width layer."""


class DimensionMismatchError(NetworkError):
    """A vector length disagrees with the expected layer width."""


class FormatError(NetworkError):
    """A serialized model is malformed or shape-inconsistent."""


class LabelEncodingError(NetworkError):
    """An evaluation target is not one-hot (no entry exactly 1.0)."""


__all__ = [
    "ConstructionError",
    "DimensionMismatchError",
    "FormatError",
    "LabelEncodingError",
    "NetworkError",
]
