"""Command line entry point for sigmanet training runs."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Iterable

from sigmanet.core.types import RunResult
from sigmanet.data import available_datasets
from sigmanet.training import pipelines


def _format_result(result: RunResult) -> str:
    payload = {
        "iterations": result.iterations,
        "final_error": result.final_error,
        "metrics": result.metrics_path,
        "manifest": result.manifest_path,
    }
    if result.classification_error is not None:
        payload["classification_error"] = result.classification_error
    if result.summary_path:
        payload["summary"] = result.summary_path
    return json.dumps(payload, sort_keys=True)


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    preset_names = sorted(pipelines.presets().keys())
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--preset",
        choices=preset_names,
        default="xor-online",
        help="Preset configuration to execute",
    )
    parser.add_argument("--config", type=Path, help="Optional JSON/YAML config override")
    parser.add_argument("--enable-plots", action="store_true", help="Write loss.png for the run")
    parser.add_argument(
        "--dataset",
        choices=sorted(available_datasets()),
        help="Override the dataset used by the run",
    )
    parser.add_argument("--csv-path", help="Path to a CSV file for the csv dataset")
    parser.add_argument("--target-col", help="Target column name for the csv dataset")
    parser.add_argument("--seed", type=int, help="Seed used for initial weights and shuffling")
    parser.add_argument("--alpha", type=float, help="Override the learning rate")
    parser.add_argument(
        "--batch",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Apply weight updates once per pass instead of per example",
    )
    parser.add_argument("--max-iterations", type=int, help="Override the iteration cap")
    parser.add_argument("--min-error", type=float, help="Override the target combined error")
    parser.add_argument("--run-dir", type=Path, help="Directory for run artifacts")
    parser.add_argument("--quiet", action="store_true", help="Suppress the startup banner")
    parser.add_argument(
        "--list-presets", action="store_true", help="List available presets and exit"
    )
    parser.add_argument(
        "--dump-config", type=Path, help="Dump the resolved config to a JSON file"
    )
    return parser.parse_args(argv)


def _merge(base: dict, override: dict) -> dict:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = _merge(dict(base[key]), value)
        else:
            base[key] = value
    return base


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)

    if args.list_presets:
        for name in sorted(pipelines.presets().keys()):
            print(name)
        raise SystemExit(0)

    config = json.loads(json.dumps(pipelines.load_preset(args.preset)))

    if args.config:
        override = dict(pipelines.read_config_file(args.config))
        if {"data", "model", "train"} <= set(override.keys()):
            config = json.loads(json.dumps(override))
        else:
            config = _merge(config, override)

    if args.dataset:
        opts: dict = {}
        if args.dataset == "csv":
            if not args.csv_path:
                raise SystemExit("--csv-path is required for the csv dataset")
            opts["csv_path"] = args.csv_path
            if args.target_col:
                opts["target_col"] = args.target_col
        config["data"] = {"name": args.dataset, "options": opts}
        config.setdefault("model", {}).pop("d_in", None)
        config["model"].pop("d_out", None)

    train_cfg = config.setdefault("train", {})
    if args.enable_plots:
        train_cfg["enable_plots"] = True
    if args.seed is not None:
        train_cfg["seed"] = int(args.seed)
    if args.alpha is not None:
        train_cfg["alpha"] = float(args.alpha)
    if args.batch is not None:
        train_cfg["batch_update"] = bool(args.batch)
    if args.max_iterations is not None:
        train_cfg["max_iterations"] = int(args.max_iterations)
    if args.min_error is not None:
        train_cfg["min_error"] = float(args.min_error)
    if args.run_dir is not None:
        train_cfg["run_dir"] = str(args.run_dir)

    if args.dump_config:
        args.dump_config.parent.mkdir(parents=True, exist_ok=True)
        args.dump_config.write_text(json.dumps(config, indent=2))

    result = pipelines.run_pipeline(config, verbose=not args.quiet)
    print(_format_result(result))


if __name__ == "__main__":
    main()
