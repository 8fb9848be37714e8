"""Dataset registry and metadata contracts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, MutableMapping

from ..core.types import Example


@dataclass(frozen=True)
class DatasetSpec:
    """Train/test examples plus the metadata needed to size a network.

    Attributes
    ----------
    name:
        Registry key the dataset was built from.
    train:
        Training examples as column vectors.
    test:
        Optional held-out examples with one-hot targets, used for accuracy
        reporting after every iteration.
    num_classes:
        Number of one-hot classes, or ``None`` for non-categorical targets.
    provenance:
        Free-form description of where the data came from, recorded in the
        run manifest.
    """

    name: str
    train: List[Example]
    test: List[Example] | None = None
    num_classes: int | None = None
    provenance: Dict[str, Any] = field(default_factory=dict)

    @property
    def d_in(self) -> int:
        return int(self.train[0].inputs.shape[0])

    @property
    def d_out(self) -> int:
        return int(self.train[0].targets.shape[0])

    @property
    def splits(self) -> Dict[str, int]:
        return {"train": len(self.train), "test": len(self.test or [])}


DatasetFactory = Callable[..., DatasetSpec]


_REGISTRY: MutableMapping[str, DatasetFactory] = {}


def register_dataset(
    name: str | None = None,
    factory: DatasetFactory | None = None,
) -> Callable[[DatasetFactory], DatasetFactory] | DatasetFactory:
    """Register a dataset factory.

    ``register_dataset`` can be used both as a decorator::

        @register_dataset("xor")
        def make_xor(**kwargs):
            ...

    or directly::

        def make_xor(**kwargs):
            ...
        register_dataset("xor", make_xor)
    """

    def _decorator(func: DatasetFactory) -> DatasetFactory:
        _REGISTRY[str(name or func.__name__)] = func
        return func

    if factory is not None:
        return _decorator(factory)
    if name is None:
        raise TypeError("register_dataset requires a name when used without a decorator")
    return _decorator


def get_dataset(dataset: str, /, **options: Any) -> DatasetSpec:
    """Return the :class:`DatasetSpec` for ``dataset``."""

    if dataset not in _REGISTRY:
        available = ", ".join(available_datasets())
        raise KeyError(f"Unknown dataset {dataset!r}. Available datasets: {available}")

    spec = _REGISTRY[dataset](**options)
    _validate_spec(spec)
    return spec


def available_datasets() -> Iterable[str]:
    """Return the sorted list of available dataset identifiers."""

    return sorted(_REGISTRY)


def _validate_spec(spec: DatasetSpec) -> None:
    if not spec.train:
        raise ValueError(f"Dataset {spec.name!r} has no training examples")
    widths = {(e.inputs.shape[0], e.targets.shape[0]) for e in spec.train}
    if spec.test:
        widths |= {(e.inputs.shape[0], e.targets.shape[0]) for e in spec.test}
    if len(widths) != 1:
        raise ValueError(
            f"Dataset {spec.name!r} mixes example widths: {sorted(widths)}"
        )


__all__ = [
    "DatasetSpec",
    "available_datasets",
    "get_dataset",
    "register_dataset",
]
