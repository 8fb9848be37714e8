"""The four-example XOR problem."""

from __future__ import annotations

from ..core.types import Example
from .registry import DatasetSpec, register_dataset

XOR_TABLE = (
    ((0.0, 0.0), 0.0),
    ((0.0, 1.0), 1.0),
    ((1.0, 0.0), 1.0),
    ((1.0, 1.0), 0.0),
)


@register_dataset("xor")
def build_xor(*, one_hot: bool = False, **_: object) -> DatasetSpec:
    """XOR with a single sigmoid target, or two one-hot classes.

    With ``one_hot=True`` the same four examples double as the test set so the
    trainer can report accuracy.
    """

    if one_hot:
        examples = [Example.from_pair(x, (1.0 - y, y)) for x, y in XOR_TABLE]
    else:
        examples = [Example.from_pair(x, (y,)) for x, y in XOR_TABLE]
    return DatasetSpec(
        name="xor",
        train=examples,
        test=list(examples) if one_hot else None,
        num_classes=2 if one_hot else None,
        provenance={"type": "xor", "one_hot": one_hot},
    )


__all__ = ["XOR_TABLE", "build_xor"]
