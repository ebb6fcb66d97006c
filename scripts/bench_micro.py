from __future__ import annotations

import argparse
import csv
import json
import sys
from pathlib import Path
from statistics import mean, pstdev

MODES = ["online", "batch"]


def _fmt_mu_sigma(vals):
    mu = mean(vals)
    sd = pstdev(vals) if len(vals) > 1 else 0.0
    return f"{mu:.4f} ± {sd:.4f}"


def train_xor(mode: str, seed: int, max_iterations: int, alpha: float, min_error: float) -> dict:
    import numpy as np

    from sigmanet.core.network import Network
    from sigmanet.data.xor import xor_data
    from sigmanet.training.trainer import Trainer

    net = Network(2, 4, 1)
    net.randomize(np.random.default_rng(seed))
    trainer = Trainer(alpha=alpha, batch_update=mode == "batch")
    trainer.add_simple_stopping_criteria(max_iterations, min_error)
    last = {}
    trainer.add_iteration_end_handler(lambda t, mse, it, err: last.update(mse=mse.combine()))
    iterations = trainer.train(net, xor_data())
    return {
        "iterations": iterations,
        "final_error": last["mse"],
        "converged": last["mse"] < min_error,
    }


def main():
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))

    ap = argparse.ArgumentParser()
    ap.add_argument("--seeds", nargs="+", type=int, default=[123, 124, 125])
    ap.add_argument("--max-iterations", type=int, default=5000)
    ap.add_argument("--alpha", type=float, default=0.7)
    ap.add_argument("--min-error", type=float, default=0.01)
    ap.add_argument("--out", type=str, default=".artifacts/bench")
    args = ap.parse_args()

    out = Path(args.out)
    out.mkdir(parents=True, exist_ok=True)
    runs = []
    for mode in MODES:
        for s in args.seeds:
            r = train_xor(mode, s, args.max_iterations, args.alpha, args.min_error)
            runs.append({"mode": mode, "seed": s, **r})
    (out / "results.jsonl").write_text(
        "\n".join(json.dumps(x) for x in runs), encoding="utf-8"
    )

    agg = {}
    for mode in MODES:
        iters = [r["iterations"] for r in runs if r["mode"] == mode]
        errors = [r["final_error"] for r in runs if r["mode"] == mode]
        agg[mode] = {
            "n": len(iters),
            "iterations_mu": mean(iters),
            "iterations_sd": pstdev(iters) if len(iters) > 1 else 0.0,
            "final_error_mu": mean(errors),
            "final_error_sd": pstdev(errors) if len(errors) > 1 else 0.0,
            "converged": sum(1 for r in runs if r["mode"] == mode and r["converged"]),
        }

    csv_path = out / "bench_micro.csv"
    with csv_path.open("w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(
            [
                "mode",
                "seeds",
                "iterations_mu",
                "iterations_sd",
                "final_error_mu",
                "final_error_sd",
                "converged",
            ]
        )
        for mode in MODES:
            a = agg[mode]
            w.writerow(
                [
                    mode,
                    a["n"],
                    f"{a['iterations_mu']:.1f}",
                    f"{a['iterations_sd']:.1f}",
                    f"{a['final_error_mu']:.4f}",
                    f"{a['final_error_sd']:.4f}",
                    a["converged"],
                ]
            )

    md_path = out / "bench_micro.md"
    lines = []
    lines.append("### Micro‑Benchmark: online vs batch updates on XOR")
    lines.append("")
    lines.append(
        f"- Seeds: `{args.seeds}`; Max iterations: `{args.max_iterations}`; "
        f"Alpha: `{args.alpha}`; Target error: `{args.min_error}`"
    )
    lines.append("")
    lines.append("| Mode | Iterations (μ±σ) | Final Error (μ±σ) | Converged | Seeds |")
    lines.append("|---|---:|---:|---:|---:|")
    for mode in MODES:
        its = [float(r["iterations"]) for r in runs if r["mode"] == mode]
        fe = [r["final_error"] for r in runs if r["mode"] == mode]
        lines.append(
            f"| {mode.upper()} | {_fmt_mu_sigma(its)} | {_fmt_mu_sigma(fe)} | "
            f"{agg[mode]['converged']} | {agg[mode]['n']} |"
        )
    md_path.write_text("\n".join(lines), encoding="utf-8")
    print("Wrote:", csv_path, md_path)


if __name__ == "__main__":
    main()
