"""Dataset registry and host-value conversion."""

# Ensure built-in datasets register themselves when the package is imported.
from . import csv_labeled as _csv_labeled  # noqa: F401
from . import xor as _xor  # noqa: F401
from .records import ensure_examples, examples_from_records, examples_to_records
from .registry import DatasetSpec, available_datasets, get_dataset, register_dataset

__all__ = [
    "DatasetSpec",
    "available_datasets",
    "ensure_examples",
    "examples_from_records",
    "examples_to_records",
    "get_dataset",
    "register_dataset",
]
