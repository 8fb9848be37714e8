"""Sinks for the per-iteration progress observation stream."""

from __future__ import annotations

import csv
import json
import subprocess
from pathlib import Path
from typing import Mapping


def _git_sha() -> str:
    try:
        out = subprocess.check_output(["git", "rev-parse", "HEAD"], stderr=subprocess.DEVNULL)
        return out.decode().strip()
    except (OSError, subprocess.CalledProcessError):  # pragma: no cover - git may be unavailable
        return "unknown"


class ConsoleSink:
    """Print ``Iteration i`` and ``Iteration i scored c / t`` lines."""

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        if "correct" in metrics and "total" in metrics:
            print(
                f"Iteration {int(epoch)} scored "
                f"{int(metrics['correct'])} / {int(metrics['total'])}"
            )
        else:
            print(f"Iteration {int(epoch)}")

    __call__ = on_epoch


class _FileSink:
    """Truncate ``path`` once, then append one record per iteration."""

    def __init__(self, path: str | Path, split: str) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("")
        self.split = split

    def _record(self, epoch: int, metrics: Mapping[str, float]) -> dict:
        numeric = {k: v for k, v in metrics.items() if isinstance(v, (int, float))}
        return {"epoch": int(epoch), "split": self.split, **numeric}

    def _append(self, record: dict) -> None:
        raise NotImplementedError

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        self._append(self._record(epoch, metrics))

    __call__ = on_epoch


class JsonlSink(_FileSink):
    """One JSON object per line, tagged with the run seed and git SHA."""

    def __init__(
        self,
        path: str | Path,
        *,
        split: str = "train",
        seed: int | None = None,
        sha: str | None = None,
    ) -> None:
        super().__init__(path, split)
        self.seed = seed
        self.sha = sha or _git_sha()

    def _append(self, record: dict) -> None:
        record.update(seed=self.seed, sha=self.sha)
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record) + "\n")


class CsvSink(_FileSink):
    """CSV rows with sorted columns; the header comes from the first record."""

    def __init__(self, path: str | Path, *, split: str = "train") -> None:
        super().__init__(path, split)

    def _append(self, record: dict) -> None:
        with self.path.open("a", encoding="utf-8", newline="") as handle:
            writer = csv.DictWriter(handle, fieldnames=sorted(record))
            if handle.tell() == 0:
                writer.writeheader()
            writer.writerow(record)


def read_jsonl(path: str | Path) -> list[dict]:
    records = []
    for line in Path(path).read_text().splitlines():
        line = line.strip()
        if line:
            records.append(json.loads(line))
    return records
