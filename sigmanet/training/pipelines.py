"""Pipeline assembly: presets, config files and a complete training run."""

from __future__ import annotations

import json
import time
from copy import deepcopy
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping

import yaml

from ..core.network import Network
from ..data import get_dataset
from ..reporting.artifacts import write_manifest
from ..reporting.metrics import ConsoleSink, CsvSink, JsonlSink
from ..reporting.plots import PlotAdapter
from ..serialization import load_model, save_checkpoint, save_model
from .evaluation import evaluate
from .trainer import SGDOptimizer, Trainer

REQUIRED_SECTIONS = ("data", "model", "train")

_PRESETS: Dict[str, Mapping[str, object]] = {
    "xor": {
        "data": {"name": "xor", "options": {}},
        "model": {"sizes": [2, 3, 1]},
        "train": {
            "iterations": 2000,
            "batch_size": 4,
            "lr": 3.0,
            "seed": 0,
            "run_dir": "runs/xor",
            "enable_plots": False,
            "console": False,
        },
    },
    "xor-onehot": {
        "data": {"name": "xor", "options": {"one_hot": True}},
        "model": {"sizes": [2, 4, 2]},
        "train": {
            "iterations": 2000,
            "batch_size": 4,
            "lr": 3.0,
            "seed": 0,
            "run_dir": "runs/xor-onehot",
            "enable_plots": False,
            "console": False,
        },
    },
    "digits-csv": {
        "data": {
            "name": "csv",
            "options": {
                "path": "mnist_train.csv",
                "test_path": "mnist_test.csv",
                "num_classes": 10,
            },
        },
        "model": {"sizes": [784, 100, 50, 10]},
        "train": {
            "iterations": 20,
            "batch_size": 10,
            "lr": 0.3,
            "seed": 0,
            "run_dir": "runs/digits-csv",
            "enable_plots": False,
            "console": True,
        },
    },
}


@dataclass(frozen=True)
class RunResult:
    """Summary returned by :func:`run_pipeline`."""

    iterations: int
    model_path: str
    metrics_path: str
    manifest_path: str
    correct: int | None = None
    total: int | None = None


def presets() -> Mapping[str, Mapping[str, object]]:
    return {name: deepcopy(cfg) for name, cfg in _PRESETS.items()}


def load_preset(name: str) -> Dict[str, object]:
    try:
        return deepcopy(dict(_PRESETS[name]))
    except KeyError as exc:
        available = ", ".join(sorted(_PRESETS))
        raise KeyError(f"Unknown preset {name!r}. Available presets: {available}") from exc


def load_config_file(path: str | Path) -> Dict[str, object]:
    """Read a JSON or YAML config mapping."""

    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in {".yaml", ".yml", ".json"}:
        raise ValueError(f"Unsupported config file type: {path.suffix}")
    text = path.read_text()
    if suffix == ".json":
        data = json.loads(text or "{}")
    else:
        data = yaml.safe_load(text) or {}
    if not isinstance(data, Mapping):
        raise TypeError(f"Config {path.name} must decode to a mapping")
    return dict(data)


def merge_config(base: Mapping[str, object], override: Mapping[str, object]) -> Dict[str, object]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = merge_config(merged[key], value)  # type: ignore[arg-type]
        else:
            merged[key] = value
    return merged


def check_config(config: Mapping[str, object]) -> None:
    missing = [section for section in REQUIRED_SECTIONS if section not in config]
    if missing:
        raise KeyError(f"Config is missing required sections: {', '.join(missing)}")


def run_pipeline(config: Mapping[str, object]) -> RunResult:
    """Build the dataset and network, train, evaluate and write artifacts."""

    check_config(config)
    data_cfg = dict(config["data"])  # type: ignore[arg-type]
    model_cfg = dict(config["model"])  # type: ignore[arg-type]
    train_cfg = dict(config["train"])  # type: ignore[arg-type]

    seed = int(train_cfg.get("seed", 0))
    dataset = get_dataset(str(data_cfg["name"]), **dict(data_cfg.get("options", {})))

    init_from = model_cfg.get("init_from")
    if init_from:
        model = load_model(str(init_from))
    else:
        sizes = model_cfg.get("sizes") or [dataset.d_in, *model_cfg.get("hidden", []), dataset.d_out]
        model = Network.create([int(size) for size in sizes], rng=seed)

    run_dir = _resolve_run_dir(train_cfg, dataset.name)
    run_dir.mkdir(parents=True, exist_ok=True)

    train_jsonl = JsonlSink(run_dir / "metrics_train.jsonl", split="train", seed=seed)
    test_jsonl = JsonlSink(run_dir / "metrics_test.jsonl", split="test", seed=seed)
    test_csv = CsvSink(run_dir / "metrics_test.csv", split="test")
    plots = PlotAdapter(run_dir, enable_plots=bool(train_cfg.get("enable_plots", False)))
    callbacks = [ConsoleSink()] if train_cfg.get("console", False) else []

    trainer = Trainer(
        model=model,
        optimizer=SGDOptimizer(lr=float(train_cfg.get("lr", 0.1))),
        callbacks=callbacks,
    )
    # shuffling uses its own stream, separate from initialisation
    result = trainer.run(
        dataset.train,
        iterations=int(train_cfg.get("iterations", 1)),
        batch_size=int(train_cfg.get("batch_size", 1)),
        test_data=dataset.test if train_cfg.get("evaluate", True) else None,
        rng=seed + 1,
        split_loggers={
            "train": [train_jsonl],
            "test": [test_jsonl, test_csv, plots],
        },
    )
    plots.close()

    final = evaluate(model, dataset.test) if dataset.test else None
    model_path = save_model(model, run_dir / "model.json")
    save_checkpoint(model, run_dir / "model.npz")
    (run_dir / "config.json").write_text(json.dumps(config, indent=2, default=str))

    results = {"iterations": result.iterations, "batches": result.batches}
    if final is not None:
        results.update(final.as_metrics())
    manifest = write_manifest(
        run_dir / "manifest.json",
        config=json.loads(json.dumps(config, default=str)),
        dataset_provenance=dataset.provenance,
        results=results,
    )
    return RunResult(
        iterations=result.iterations,
        model_path=model_path,
        metrics_path=str(train_jsonl.path),
        manifest_path=manifest,
        correct=final.correct if final is not None else None,
        total=final.total if final is not None else None,
    )


def _resolve_run_dir(train_cfg: Mapping[str, object], dataset: str) -> Path:
    if train_cfg.get("run_dir"):
        return Path(str(train_cfg["run_dir"]))
    timestamp = time.strftime("%Y%m%d-%H%M%S")
    return Path("runs") / timestamp / dataset


__all__ = [
    "RunResult",
    "check_config",
    "load_config_file",
    "load_preset",
    "merge_config",
    "presets",
    "run_pipeline",
]
