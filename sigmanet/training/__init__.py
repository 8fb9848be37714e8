"""Training loop, evaluation and run pipelines."""

from .evaluation import EvaluationResult, evaluate
from .trainer import SGDOptimizer, Trainer, TrainResult, train

__all__ = ["EvaluationResult", "SGDOptimizer", "TrainResult", "Trainer", "evaluate", "train"]
