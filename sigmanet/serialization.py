"""Lossless export and import of network parameters.

The structured form is a plain mapping::

    {"sizes": [2, 3, 1],
     "weights": [[[w00, w01], ...], ...],   # weights[i] is sizes[i+1] rows of sizes[i]
     "biases": [[[b0], [b1], [b2]], ...]}   # biases[i] is sizes[i+1] rows of 1

Floats are written with ``repr`` precision by :mod:`json`, so a JSON round
trip reproduces every parameter bit for bit.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Mapping

import numpy as np

from .core.errors import ConstructionError, FormatError
from .core.network import Network, check_sizes
from .core.types import Array

REQUIRED_FIELDS = ("sizes", "weights", "biases")


def export_model(model: Network) -> dict[str, Any]:
    """Return sizes, weights and biases as nested lists of Python floats."""

    return {
        "sizes": [int(size) for size in model.sizes],
        "weights": [W.tolist() for W in model.weights],
        "biases": [b.tolist() for b in model.biases],
    }


def _matrix(value: Any, name: str, shape: tuple[int, int]) -> Array:
    if not isinstance(value, list) or not all(isinstance(row, list) for row in value):
        raise FormatError(f"{name} must be a list of rows")
    if len(value) != shape[0] or any(len(row) != shape[1] for row in value):
        found = (len(value), len(value[0]) if value else 0)
        raise FormatError(f"{name} has shape {found}, expected {shape}")
    for row in value:
        for entry in row:
            if isinstance(entry, bool) or not isinstance(entry, (int, float)):
                raise FormatError(f"{name} contains a non-numeric entry {entry!r}")
    array = np.array(value, dtype=np.float64).reshape(shape)
    if not np.all(np.isfinite(array)):
        raise FormatError(f"{name} contains non-finite values")
    return array


def from_model(data: Mapping[str, Any] | str | bytes) -> Network:
    """Rebuild a network from :func:`export_model` output or its JSON text.

    Every field is checked before the network is built; any problem raises
    :class:`~sigmanet.core.errors.FormatError`.
    """

    if isinstance(data, (str, bytes)):
        return loads(data)
    if not isinstance(data, Mapping):
        raise FormatError(f"Serialized model must be a mapping, got {type(data).__name__}")
    missing = [name for name in REQUIRED_FIELDS if name not in data]
    if missing:
        raise FormatError(f"Serialized model is missing fields: {', '.join(missing)}")

    raw_sizes = data["sizes"]
    if not isinstance(raw_sizes, list):
        raise FormatError("sizes must be a list of integers")
    try:
        sizes = check_sizes(raw_sizes)
    except ConstructionError as exc:
        raise FormatError(f"Invalid sizes: {exc}") from exc

    raw_weights, raw_biases = data["weights"], data["biases"]
    transitions = len(sizes) - 1
    for name, value in (("weights", raw_weights), ("biases", raw_biases)):
        if not isinstance(value, list) or len(value) != transitions:
            raise FormatError(f"{name} must be a list of {transitions} matrices")

    weights: List[Array] = []
    biases: List[Array] = []
    for idx, (in_dim, out_dim) in enumerate(zip(sizes[:-1], sizes[1:])):
        weights.append(_matrix(raw_weights[idx], f"weights[{idx}]", (out_dim, in_dim)))
        biases.append(_matrix(raw_biases[idx], f"biases[{idx}]", (out_dim, 1)))
    return Network(sizes=sizes, weights=weights, biases=biases)


def dumps(model: Network, *, indent: int | None = None) -> str:
    return json.dumps(export_model(model), indent=indent)


def loads(text: str | bytes) -> Network:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise FormatError(f"Serialized model is not valid JSON: {exc}") from exc
    return from_model(data)


def save_model(model: Network, path: str | Path) -> str:
    """Write the model as JSON, creating parent directories as needed."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dumps(model))
    return str(path)


def load_model(path: str | Path) -> Network:
    return loads(Path(path).read_text())


def save_checkpoint(model: Network, path: str | Path) -> str:
    """Write the parameters to a compressed ``.npz`` archive."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as handle:
        np.savez_compressed(handle, **model.state_dict())
    return str(path)


def load_checkpoint(path: str | Path) -> Network:
    with np.load(Path(path)) as archive:
        state = {key: archive[key] for key in archive.files}
    if "sizes" not in state:
        raise FormatError(f"Checkpoint {path} has no sizes entry")
    try:
        sizes = check_sizes([int(size) for size in np.ravel(state["sizes"])])
        model = Network(
            sizes=sizes,
            weights=[np.zeros((out_dim, in_dim)) for in_dim, out_dim in zip(sizes[:-1], sizes[1:])],
            biases=[np.zeros((out_dim, 1)) for out_dim in sizes[1:]],
        )
        model.load_state_dict(state)
    except ConstructionError as exc:
        raise FormatError(f"Checkpoint {path} is inconsistent: {exc}") from exc
    return model


__all__ = [
    "dumps",
    "export_model",
    "from_model",
    "load_checkpoint",
    "load_model",
    "loads",
    "save_checkpoint",
    "save_model",
]
