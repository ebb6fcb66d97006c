"""Condense a run's JSONL error log into ``summary.json``."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Mapping, Sequence

import numpy as np


def error_area(errors: Sequence[float], iterations: Sequence[int] | None = None) -> float:
    """Trapezoidal area under an error curve.

    ``iterations`` gives the x position of each point; sinks that only log
    every Nth iteration still produce an area on the true iteration axis.
    """

    y = np.asarray(errors, dtype=np.float64)
    if y.size < 2:
        return 0.0
    if iterations is None:
        x = np.arange(y.size, dtype=np.float64)
    else:
        x = np.asarray(iterations, dtype=np.float64)
    return float(np.sum(np.diff(x) * (y[1:] + y[:-1]) * 0.5))


def read_records(path: str | Path) -> List[Mapping[str, object]]:
    path = Path(path)
    if not path.exists():
        return []
    return [json.loads(line) for line in path.read_text().splitlines() if line.strip()]


def build_summary(records: Sequence[Mapping[str, object]], tail: int) -> dict:
    scored = [r for r in records if "mse" in r]
    failures = [str(r["error"]) for r in records if "error" in r]
    summary: dict = {
        "records": len(records),
        "last_iteration": int(records[-1]["iteration"]) if records else 0,
        "failed": bool(failures),
    }
    if failures:
        summary["failure"] = failures[-1]
    if not scored:
        return summary

    iterations = np.asarray([r["iteration"] for r in scored], dtype=np.int64)
    errors = np.asarray([r["mse"] for r in scored], dtype=np.float64)
    best = int(np.argmin(errors))
    window = max(1, min(int(tail), errors.size))
    summary["error"] = {
        "first": float(errors[0]),
        "last": float(errors[-1]),
        "best": float(errors[best]),
        "best_iteration": int(iterations[best]),
        "tail_window": window,
        "tail_area": error_area(errors[-window:], iterations[-window:]),
    }
    units = sorted((k for k in scored[-1] if k.startswith("mse_")), key=lambda k: int(k[4:]))
    summary["last_unit_errors"] = [float(scored[-1][k]) for k in units]  # type: ignore[arg-type]
    return summary


def write_summary(
    metrics_jsonl: str | Path,
    out_summary_json: str | Path,
    *,
    tail: int = 32,
    extra: Mapping[str, object] | None = None,
) -> str:
    out_path = Path(out_summary_json)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    summary = build_summary(read_records(metrics_jsonl), tail)
    if extra:
        summary.update(extra)
    out_path.write_text(json.dumps(summary, sort_keys=True, indent=2))
    return str(out_path)


__all__ = ["build_summary", "error_area", "read_records", "write_summary"]
