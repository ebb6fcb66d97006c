"""Pipeline assembly: config mapping in, trained network and run artifacts out."""

from __future__ import annotations

import json
import time
from copy import deepcopy
from pathlib import Path
from typing import Dict, List, Mapping, Sequence, Tuple

import numpy as np

from ..core.errors import ConfigurationError
from ..core.network import Network
from ..core.types import RunResult
from ..data import registry
from ..data.training_data import TrainingData
from ..reporting.artifacts import write_manifest
from ..reporting.metrics import CsvSink, JsonlSink
from ..reporting.plots import PlotAdapter
from ..reporting.summary import write_summary
from .classifiers import make_best_of_classifier, make_threshold_classifier
from .metrics import Classifier, SquaredError, classification_error, evaluate
from .trainer import Trainer

_PRESETS: Dict[str, Mapping[str, object]] = {
    "xor-online": {
        "data": {"name": "xor", "options": {}},
        "model": {"hidden": [4]},
        "train": {
            "alpha": 0.5,
            "batch_update": False,
            "max_iterations": 20000,
            "min_error": 0.01,
            "seed": 7,
            "log_every": 100,
            "run_dir": "runs/xor-online",
            "enable_plots": False,
        },
    },
    "xor-batch": {
        "data": {"name": "xor", "options": {}},
        "model": {"hidden": [4]},
        "train": {
            "alpha": 0.5,
            "batch_update": True,
            "shuffle_rounds": 3,
            "max_iterations": 20000,
            "min_error": 0.01,
            "seed": 7,
            "log_every": 100,
            "run_dir": "runs/xor-batch",
            "enable_plots": False,
        },
    },
    "iris-batch": {
        "data": {
            "name": "iris",
            "options": {"one_hot": True},
            "scale": [[0, 1, 2], [3]],
            "shuffle": 10,
            "split": 0.6667,
            "seed": 3,
        },
        "model": {"hidden": [6]},
        "train": {
            "alpha": 0.1,
            "batch_update": True,
            "shuffle_rounds": 1,
            "max_iterations": 5000,
            "min_error": 0.1,
            "seed": 3,
            "log_every": 50,
            "classifier": "best_of",
            "run_dir": "runs/iris-batch",
            "enable_plots": False,
        },
    },
}

_PRESET_DIR = Path(__file__).resolve().parents[2] / "configs" / "presets"
_FILE_PRESETS_CACHE: Dict[str, Mapping[str, object]] | None = None


def read_config_file(path: Path) -> Mapping[str, object]:
    text = path.read_text()
    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        import yaml

        data = yaml.safe_load(text) or {}
    elif suffix == ".json":
        data = json.loads(text or "{}")
    else:
        raise ValueError(f"Unsupported config file type: {path.suffix}")

    if not isinstance(data, Mapping):
        raise TypeError(f"Config {path.name} must decode to a mapping")
    return data


def _file_presets() -> Dict[str, Mapping[str, object]]:
    global _FILE_PRESETS_CACHE
    if _FILE_PRESETS_CACHE is None:
        presets: Dict[str, Mapping[str, object]] = {}
        if _PRESET_DIR.exists():
            for file in sorted(_PRESET_DIR.iterdir()):
                if file.suffix.lower() not in {".yaml", ".yml", ".json"}:
                    continue
                data = read_config_file(file)
                missing = {"data", "model", "train"} - set(data)
                if missing:
                    missing_str = ", ".join(sorted(missing))
                    raise KeyError(f"Preset {file.name} is missing required sections: {missing_str}")
                presets[file.stem] = json.loads(json.dumps(data))
        _FILE_PRESETS_CACHE = presets
    return {name: deepcopy(cfg) for name, cfg in _FILE_PRESETS_CACHE.items()}


def presets() -> Mapping[str, Mapping[str, object]]:
    combined: Dict[str, Mapping[str, object]] = {}
    combined.update({name: deepcopy(cfg) for name, cfg in _PRESETS.items()})
    combined.update(_file_presets())
    return combined


def load_preset(name: str) -> Mapping[str, object]:
    file_overrides = _file_presets()
    if name in file_overrides:
        return file_overrides[name]
    try:
        return deepcopy(_PRESETS[name])
    except KeyError as exc:
        raise KeyError(f"Unknown preset: {name}") from exc


def prepare_data(
    data: TrainingData, data_cfg: Mapping[str, object]
) -> Tuple[TrainingData, TrainingData | None]:
    """Scale, shuffle and split ``data`` in place as ``data_cfg`` asks."""

    for group in data_cfg.get("scale", []) or []:
        data.scale(*[int(col) for col in group])
    rounds = int(data_cfg.get("shuffle", 0))
    if rounds > 0:
        data.shuffle(rounds, np.random.default_rng(int(data_cfg.get("seed", 0))))
    fraction = data_cfg.get("split")
    if fraction is None:
        return data, None
    train, held_out = data.split(float(fraction))
    if len(train) == 0:
        raise ConfigurationError(f"Split fraction {fraction} leaves no training examples")
    return train, (held_out if len(held_out) else None)


def build_classifier(train_cfg: Mapping[str, object], labels: Sequence[str] | None) -> Classifier | None:
    name = train_cfg.get("classifier")
    if name is None:
        return None
    if not labels:
        raise ConfigurationError(f"Classifier {name!r} needs a dataset with class labels")
    if name == "best_of":
        return make_best_of_classifier(labels)
    if name == "threshold":
        return make_threshold_classifier(labels, float(train_cfg.get("threshold", 0.5)))
    raise ConfigurationError(f"Unknown classifier: {name}")


def build_trainer(train_cfg: Mapping[str, object], seed: int) -> Trainer:
    trainer = Trainer(
        alpha=float(train_cfg.get("alpha", 0.1)),
        batch_update=bool(train_cfg.get("batch_update", False)),
        shuffle_rounds=int(train_cfg.get("shuffle_rounds", 0)),
        rng=np.random.default_rng(seed + 1),
    )
    max_iterations = train_cfg.get("max_iterations")
    if max_iterations is None:
        raise ConfigurationError("train.max_iterations is required; training never stops otherwise")
    trainer.add_simple_stopping_criteria(
        int(max_iterations), float(train_cfg.get("min_error", 0.0))
    )
    patience = train_cfg.get("patience")
    if patience is not None:
        trainer.add_patience_stopping_criteria(
            int(patience), float(train_cfg.get("min_delta", 0.0))
        )
    return trainer


def _build_dims(model_cfg: Mapping[str, object], d_in: int, d_out: int) -> List[int]:
    configured_in = int(model_cfg.get("d_in", d_in))
    configured_out = int(model_cfg.get("d_out", d_out))
    if configured_in != d_in:
        raise ConfigurationError(f"Configured d_in={configured_in} but the data has {d_in} inputs")
    if configured_out != d_out:
        raise ConfigurationError(f"Configured d_out={configured_out} but the data has {d_out} outputs")
    return [d_in] + [int(h) for h in model_cfg.get("hidden", [])] + [d_out]


class _IterationCapture:
    def __init__(self) -> None:
        self.last: SquaredError | None = None

    def __call__(self, trainer, mse, iteration, error) -> None:
        if mse is not None:
            self.last = mse


def run_pipeline(config: Mapping[str, object], *, verbose: bool = True) -> RunResult:
    """Build data, network and trainer from ``config``, train, and write artifacts."""

    data_cfg = dict(config["data"])
    model_cfg = dict(config.get("model", {}))
    train_cfg = dict(config["train"])

    seed = int(train_cfg.get("seed", 0))
    dataset = registry.get_dataset(str(data_cfg["name"]), **dict(data_cfg.get("options", {})))
    train_data, held_out = prepare_data(dataset.data, data_cfg)

    dims = _build_dims(model_cfg, dataset.d_in, dataset.d_out)
    network = Network(*dims)
    network.randomize(np.random.default_rng(seed))

    classifier = build_classifier(train_cfg, dataset.labels)
    trainer = build_trainer(train_cfg, seed)

    run_dir = _resolve_run_dir(train_cfg, dataset.name)
    run_dir.mkdir(parents=True, exist_ok=True)

    if verbose:
        _print_startup_summary(
            dataset_name=dataset.name,
            dims=dims,
            examples=(len(train_data), len(held_out) if held_out else 0),
            trainer=trainer,
            param_count=network.parameter_count(),
        )

    every = int(train_cfg.get("log_every", 1))
    jsonl = JsonlSink(run_dir / "metrics.jsonl", every=every, seed=seed)
    csv_sink = CsvSink(run_dir / "metrics.csv", every=every)
    plots = PlotAdapter(run_dir, enable_plots=bool(train_cfg.get("enable_plots", False)))
    capture = _IterationCapture()
    for handler in (jsonl, csv_sink, plots, capture):
        trainer.add_iteration_end_handler(handler)
    trainer.add_training_end_handler(plots.close)

    iterations = trainer.train(network, train_data)
    final_error = capture.last.combine() if capture.last is not None else float("nan")

    evaluation: Dict[str, object] = {}
    class_error: float | None = None
    if held_out is not None:
        evaluation["held_out_mse"] = evaluate(network, held_out).average().tolist()
        if classifier is not None:
            class_error = classification_error(network, held_out, classifier)
    elif classifier is not None:
        class_error = classification_error(network, train_data, classifier)
    if class_error is not None:
        evaluation["classification_error"] = class_error
    (run_dir / "evaluation.json").write_text(json.dumps(evaluation, indent=2, sort_keys=True))

    safe_config = json.loads(json.dumps(config))
    manifest = write_manifest(
        run_dir / "manifest.json",
        config=safe_config,
        dataset_provenance=dataset.provenance,
        network={"sizes": dims, "parameters": network.parameter_count()},
    )
    summary_path = write_summary(
        jsonl.path,
        run_dir / "summary.json",
        tail=int(train_cfg.get("summary_tail", 32)),
        extra={"iterations": iterations, "final_error": final_error},
    )
    (run_dir / "config.json").write_text(json.dumps(safe_config, indent=2))

    return RunResult(
        iterations=iterations,
        final_error=final_error,
        classification_error=class_error,
        metrics_path=str(jsonl.path),
        manifest_path=manifest,
        summary_path=str(summary_path),
    )


def _resolve_run_dir(train_cfg: Mapping[str, object], dataset: str) -> Path:
    if "run_dir" in train_cfg:
        return Path(str(train_cfg["run_dir"]))
    timestamp = time.strftime("%Y%m%d-%H%M%S")
    return Path("runs") / timestamp / dataset


def _print_startup_summary(
    *,
    dataset_name: str,
    dims: Sequence[int],
    examples: Tuple[int, int],
    trainer: Trainer,
    param_count: int,
) -> None:
    print("=== sigmanet run ===")
    print(f"Dataset       : {dataset_name}")
    print(f"Examples      : {examples[0]} train / {examples[1]} held out")
    print(f"Dimensions    : {list(dims)}")
    print(f"Alpha         : {trainer.alpha}")
    print(f"Update mode   : {'batch' if trainer.batch_update else 'online'}")
    print(f"Shuffle rounds: {trainer.shuffle_rounds}")
    print(f"Parameters    : {param_count}")
    print("====================")


__all__ = ["build_trainer", "load_preset", "prepare_data", "presets", "read_config_file", "run_pipeline"]
