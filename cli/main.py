"""Command line entry point for sigmanet training runs and predictions."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Iterable

from sigmanet.core.errors import NetworkError
from sigmanet.serialization import load_model
from sigmanet.training import pipelines


def _format_result(result: pipelines.RunResult) -> str:
    payload = {
        "iterations": result.iterations,
        "model": result.model_path,
        "metrics": result.metrics_path,
        "manifest": result.manifest_path,
    }
    if result.total is not None:
        payload["correct"] = result.correct
        payload["total"] = result.total
    return json.dumps(payload, sort_keys=True)


def _parse_sizes(text: str) -> list[int]:
    try:
        return [int(part) for part in text.split(",") if part.strip()]
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"--sizes expects integers, got {text!r}") from exc


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--preset",
        choices=sorted(pipelines.presets().keys()),
        default="xor",
        help="Preset configuration to execute",
    )
    parser.add_argument("--config", type=Path, help="Optional JSON/YAML config override")
    parser.add_argument(
        "--list-presets", action="store_true", help="List available presets and exit"
    )
    parser.add_argument("--seed", type=int, help="Seed for initialisation and shuffling")
    parser.add_argument("--iterations", type=int, help="Number of passes over the data")
    parser.add_argument("--batch-size", type=int, help="Examples per gradient update")
    parser.add_argument("--lr", type=float, help="Learning rate")
    parser.add_argument(
        "--sizes", type=_parse_sizes, help="Comma separated layer sizes, e.g. 784,100,10"
    )
    parser.add_argument("--train-csv", help="Labelled CSV used for training")
    parser.add_argument("--test-csv", help="Labelled CSV used for per-iteration scoring")
    parser.add_argument("--num-classes", type=int, help="Number of label classes in the CSV")
    parser.add_argument("--run-dir", help="Directory receiving model and metrics files")
    parser.add_argument("--init-from", type=Path, help="Start from a saved model.json")
    parser.add_argument(
        "--enable-plots", action="store_true", help="Plot test accuracy per iteration"
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Do not print per-iteration progress"
    )
    parser.add_argument(
        "--dump-config", type=Path, help="Dump the resolved config to a JSON file"
    )
    parser.add_argument(
        "--predict-model", type=Path, help="Predict with this model.json instead of training"
    )
    parser.add_argument(
        "--inputs", type=Path, help="JSON file holding a list of input vectors to predict"
    )
    return parser.parse_args(argv)


def _resolve_config(args: argparse.Namespace) -> dict:
    config = pipelines.load_preset(args.preset)
    if args.config:
        override = pipelines.load_config_file(args.config)
        if set(pipelines.REQUIRED_SECTIONS) <= set(override.keys()):
            config = override
        else:
            config = pipelines.merge_config(config, override)
    config = json.loads(json.dumps(config))
    train_cfg = config.setdefault("train", {})
    model_cfg = config.setdefault("model", {})

    if args.train_csv:
        options = {"path": args.train_csv}
        if args.test_csv:
            options["test_path"] = args.test_csv
        if args.num_classes is not None:
            options["num_classes"] = int(args.num_classes)
        config["data"] = {"name": "csv", "options": options}
    if args.sizes:
        model_cfg["sizes"] = args.sizes
    if args.init_from:
        model_cfg["init_from"] = str(args.init_from)
    for key, value in (
        ("seed", args.seed),
        ("iterations", args.iterations),
        ("batch_size", args.batch_size),
        ("lr", args.lr),
        ("run_dir", args.run_dir),
    ):
        if value is not None:
            train_cfg[key] = value
    if args.enable_plots:
        train_cfg["enable_plots"] = True
    if args.quiet:
        train_cfg["console"] = False
    return config


def _predict(model_path: Path, inputs_path: Path | None) -> None:
    if inputs_path is None:
        raise SystemExit("--predict-model requires --inputs")
    model = load_model(model_path)
    inputs = json.loads(inputs_path.read_text())
    outputs = model.predict(inputs)
    print(json.dumps([output.tolist() for output in outputs]))


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)

    if args.list_presets:
        for name in sorted(pipelines.presets().keys()):
            print(name)
        raise SystemExit(0)

    try:
        if args.predict_model:
            _predict(args.predict_model, args.inputs)
            return

        config = _resolve_config(args)
        if args.dump_config:
            args.dump_config.parent.mkdir(parents=True, exist_ok=True)
            args.dump_config.write_text(json.dumps(config, indent=2))

        result = pipelines.run_pipeline(config)
    except NetworkError as exc:
        raise SystemExit(f"error: {exc}") from exc
    print(_format_result(result))


if __name__ == "__main__":
    main()
