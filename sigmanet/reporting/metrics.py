"""Metrics sinks that record training progress.

Every sink is an iteration-end callback for
:meth:`sigmanet.training.trainer.Trainer.add_iteration_end_handler`.
"""

from __future__ import annotations

import csv
import json
import subprocess
from pathlib import Path
from typing import Dict, Optional


def _git_sha() -> str:
    try:
        out = subprocess.check_output(["git", "rev-parse", "HEAD"], stderr=subprocess.DEVNULL)
        return out.decode().strip()
    except Exception:  # pragma: no cover - git may be unavailable in tests
        return "unknown"


def iteration_record(iteration: int, mse, error: Optional[BaseException]) -> Dict[str, object]:
    record: Dict[str, object] = {"iteration": int(iteration)}
    if mse is not None:
        record["mse"] = float(mse.combine())
        for idx, value in enumerate(mse):
            record[f"mse_{idx}"] = float(value)
    if error is not None:
        record["error"] = f"{type(error).__name__}: {error}"
    return record


class _StridedSink:
    def __init__(self, every: int) -> None:
        self.every = max(1, int(every))

    def _should_write(self, iteration: int, error: Optional[BaseException]) -> bool:
        return error is not None or iteration == 1 or iteration % self.every == 0

    def __call__(self, trainer, mse, iteration: int, error: Optional[BaseException]) -> None:
        if self._should_write(iteration, error):
            self._write(iteration_record(iteration, mse, error))

    def _write(self, record: Dict[str, object]) -> None:  # pragma: no cover - abstract
        raise NotImplementedError


class JsonlSink(_StridedSink):
    """Append-only JSONL writer for per-iteration errors."""

    def __init__(
        self,
        path: str | Path,
        *,
        every: int = 1,
        seed: int | None = None,
        sha: str | None = None,
    ) -> None:
        super().__init__(every)
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("")
        self.seed = seed
        self.sha = sha or _git_sha()

    def _write(self, record: Dict[str, object]) -> None:
        payload = dict(record)
        payload["seed"] = self.seed
        payload["sha"] = self.sha
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(payload, sort_keys=True) + "\n")


class CsvSink(_StridedSink):
    """Write per-iteration errors to CSV with a stable schema."""

    def __init__(self, path: str | Path, *, every: int = 1) -> None:
        super().__init__(every)
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("")
        self._fieldnames: list[str] | None = None

    def _write(self, record: Dict[str, object]) -> None:
        if self._fieldnames is None:
            self._fieldnames = sorted(set(record) | {"error"})
        with self.path.open("a", encoding="utf-8", newline="") as handle:
            writer = csv.DictWriter(handle, fieldnames=self._fieldnames, extrasaction="ignore")
            if handle.tell() == 0:
                writer.writeheader()
            writer.writerow(record)


__all__ = ["CsvSink", "JsonlSink", "iteration_record"]
