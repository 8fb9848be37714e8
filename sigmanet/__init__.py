"""sigmanet public API."""

from .core import activations, backprop, network, types  # noqa: F401
from .core.backprop import backprop as compute_gradients
from .core.errors import (
    ConstructionError,
    DimensionMismatchError,
    FormatError,
    LabelEncodingError,
    NetworkError,
)
from .core.network import Network, construct, predict
from .core.types import Example
from .data import examples_from_records, get_dataset
from .serialization import export_model, from_model, load_model, save_model
from .training.evaluation import EvaluationResult, evaluate
from .training.pipelines import load_preset, presets, run_pipeline
from .training.trainer import SGDOptimizer, Trainer, TrainResult, train

__all__ = [
    "ConstructionError",
    "DimensionMismatchError",
    "EvaluationResult",
    "Example",
    "FormatError",
    "LabelEncodingError",
    "Network",
    "NetworkError",
    "SGDOptimizer",
    "TrainResult",
    "Trainer",
    "compute_gradients",
    "construct",
    "evaluate",
    "examples_from_records",
    "export_model",
    "from_model",
    "get_dataset",
    "load_model",
    "load_preset",
    "predict",
    "presets",
    "run_pipeline",
    "save_model",
    "train",
]
