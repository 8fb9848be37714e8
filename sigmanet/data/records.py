"""Typed conversion from host-supplied values to network examples."""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from ..core.types import Example

Record = Tuple[Sequence[float], Sequence[float]]


def examples_from_records(records: Iterable[Record]) -> List[Example]:
    """Convert ``(input, target)`` pairs of plain numbers into examples."""

    examples: List[Example] = []
    for position, record in enumerate(records):
        try:
            inputs, targets = record
        except (TypeError, ValueError) as exc:
            raise ValueError(
                f"Record at position {position} must be an (input, target) pair"
            ) from exc
        try:
            examples.append(Example.from_pair(inputs, targets))
        except ValueError as exc:
            raise ValueError(f"Record at position {position}: {exc}") from exc
    return examples


def ensure_examples(data: Iterable[Example | Record]) -> List[Example]:
    """Pass examples through and convert any raw pairs."""

    items = list(data)
    if all(isinstance(item, Example) for item in items):
        return items  # type: ignore[return-value]
    return [
        item if isinstance(item, Example) else examples_from_records([item])[0]
        for item in items
    ]


def examples_to_records(examples: Iterable[Example]) -> List[Tuple[List[float], List[float]]]:
    return [
        (example.inputs.ravel().tolist(), example.targets.ravel().tolist())
        for example in examples
    ]


__all__ = ["Record", "ensure_examples", "examples_from_records", "examples_to_records"]
