"""Compare Adam and AdaMax on a reference problem.

Usage:
    adam-compare --problem linreg --n 500 --dim 20 --set max_epoch=50
    adam-compare --problem logreg --options opts.json --set sub_mode=AdaMax

Each run writes into ``<workflow_dir>/exp_XXXX/``:
- options.json: the resolved options shared by all variants
- history_<variant>.json: the run history as parallel lists
- summary.json: final cost, gap, epochs and stop reason per variant
- plots/<metric>_<x_axis>.png
"""

from __future__ import annotations

import argparse
import json
import re
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import numpy as np

from core.logging import get_logger
from core.protocols import Problem
from core.types import SolverResult
from experiments.config import apply_overrides, load_json, to_jsonable
from experiments.plotting import plot_histories
from optim.adam import adam
from optim.config import SubMode, resolve_options
from tasks.linear_regression import make_linear_regression
from tasks.logistic_regression import LogisticRegressionProblem, make_logistic_data

__all__ = [
    "run_comparison",
    "write_results",
    "next_experiment_dir",
    "build_problem",
    "main",
]

logger = get_logger(__name__)


def run_comparison(
    problem: Problem,
    options: Mapping[str, Any] | None = None,
    *,
    sub_modes: Sequence[str | SubMode] = (SubMode.ADAM, SubMode.ADAMAX),
) -> dict[str, SolverResult]:
    """Run each variant with identical options.

    Every run gets its own generator seeded from ``options["seed"]``, so all
    variants start from the same initial point and see the same sample
    orderings. Without a seed, one is drawn once and shared by every run.

    Returns:
        Mapping variant name -> SolverResult, in the order of sub_modes.
    """
    seed = (options or {}).get("seed")
    if seed is None:
        seed = int(np.random.default_rng().integers(2**32))
        logger.info("no seed given, using seed=%d for all variants", seed)

    results: dict[str, SolverResult] = {}
    for token in sub_modes:
        mode = SubMode.parse(token)
        logger.info("running %s", mode.value)
        results[mode.value] = adam(problem, options, sub_mode=mode, seed=seed)
    return results


def next_experiment_dir(workflow_dir: Path) -> Path:
    """Create ``workflow_dir/exp_XXXX`` with the next free index."""
    workflow_dir.mkdir(parents=True, exist_ok=True)
    pattern = re.compile(r"^exp_(\d{4})$")
    max_index = -1
    for entry in workflow_dir.iterdir():
        if entry.is_dir():
            match = pattern.match(entry.name)
            if match:
                max_index = max(max_index, int(match.group(1)))
    exp_dir = workflow_dir / f"exp_{max_index + 1:04d}"
    exp_dir.mkdir(parents=True, exist_ok=True)
    return exp_dir


def write_results(
    results: Mapping[str, SolverResult],
    out_dir: Path,
    *,
    options: Mapping[str, Any] | None = None,
    plots: bool = True,
) -> dict[str, Any]:
    """Write histories, a summary and plots for a comparison.

    Returns:
        The summary written to ``summary.json``.
    """
    out_dir.mkdir(parents=True, exist_ok=True)
    if options is not None:
        (out_dir / "options.json").write_text(
            json.dumps(to_jsonable(dict(options)), indent=2), encoding="utf-8"
        )

    summary: dict[str, Any] = {}
    for name, result in results.items():
        (out_dir / f"history_{name}.json").write_text(
            json.dumps(to_jsonable(result.infos()), indent=2), encoding="utf-8"
        )
        last = result.history.last()
        summary[name] = {
            "final_cost": last.cost,
            "final_optgap": last.optgap,
            "epochs": result.epochs,
            "total_iter": result.total_iter,
            "grad_calc_count": last.grad_calc_count,
            "stop_reason": result.stop_reason.value,
        }
    (out_dir / "summary.json").write_text(json.dumps(summary, indent=2), encoding="utf-8")

    if plots:
        histories = {name: result.history for name, result in results.items()}
        for metric in ("cost", "optgap"):
            for x_axis in ("epoch", "grad_calc_count"):
                plot_histories(
                    histories,
                    metric,
                    out_dir / "plots" / f"{metric}_{x_axis}.png",
                    x_axis=x_axis,
                    title=f"{metric} vs {x_axis}",
                )
    return summary


def build_problem(
    kind: str, *, n: int, dim: int, seed: int, lam: float = 0.0
) -> tuple[Problem, float | None]:
    """Build a reference problem and, when known, its optimal value.

    Raises:
        ValueError: If kind is unknown.
    """
    rng = np.random.default_rng(seed)
    if kind == "linreg":
        problem = make_linear_regression(n=n, dim=dim, rng=rng, lam=lam)
        return problem, problem.f_opt()
    if kind == "logreg":
        X, y = make_logistic_data(n=n, dim=dim, rng=rng)
        return LogisticRegressionProblem(X=X, y=y, lam=lam), None
    raise ValueError(f"Unknown problem kind: {kind}")


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compare Adam and AdaMax on a reference problem.")
    parser.add_argument("--problem", choices=["linreg", "logreg"], default="linreg")
    parser.add_argument("--n", type=int, default=500, help="number of samples")
    parser.add_argument("--dim", type=int, default=20, help="feature dimension")
    parser.add_argument("--lam", type=float, default=0.0, help="L2 regularization")
    parser.add_argument("--data-seed", type=int, default=0)
    parser.add_argument("--options", type=Path, default=None, help="JSON file with solver options")
    parser.add_argument(
        "--set",
        dest="overrides",
        action="append",
        default=[],
        help="solver option override key=value (repeatable)",
    )
    parser.add_argument(
        "--sub-modes",
        nargs="+",
        default=[SubMode.ADAM.value, SubMode.ADAMAX.value],
    )
    parser.add_argument("--workflow-dir", type=Path, default=Path("workflow"))
    parser.add_argument("--no-plots", action="store_true")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    raw_options = load_json(args.options) if args.options else {}
    raw_options = apply_overrides(raw_options, args.overrides)
    raw_options.setdefault("max_epoch", 100)
    raw_options.setdefault("seed", 0)

    problem, f_opt = build_problem(
        args.problem, n=args.n, dim=args.dim, seed=args.data_seed, lam=args.lam
    )
    if f_opt is not None:
        raw_options.setdefault("f_sol", f_opt)

    # Validate once before any run so a bad option fails fast
    resolved = resolve_options(raw_options).to_options()
    resolved.pop("sub_mode")

    results = run_comparison(problem, raw_options, sub_modes=args.sub_modes)

    exp_dir = next_experiment_dir(args.workflow_dir)
    summary = write_results(results, exp_dir, options=resolved, plots=not args.no_plots)

    print(f"Experiment completed: {exp_dir}")
    for name, info in summary.items():
        print(
            f"  {name}: cost={info['final_cost']:.6e} optgap={info['final_optgap']:.4e} "
            f"epochs={info['epochs']} ({info['stop_reason']})"
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
