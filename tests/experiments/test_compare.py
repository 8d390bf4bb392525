from __future__ import annotations

import json
from pathlib import Path

import numpy as np
import pytest

from core.types import StopReason
from experiments.compare import build_problem, main, next_experiment_dir, run_comparison, write_results
from tasks.linear_regression import make_linear_regression


@pytest.fixture
def problem():
    return make_linear_regression(n=30, dim=3, rng=np.random.default_rng(0))


def test_run_comparison_shares_initial_point(problem) -> None:
    results = run_comparison(problem, {"max_epoch": 3, "seed": 7, "batch_size": 5})
    assert list(results) == ["Adam", "AdaMax"]
    adam_result, adamax_result = results["Adam"], results["AdaMax"]
    assert adam_result.history.cost[0] == adamax_result.history.cost[0]
    assert not np.array_equal(adam_result.w, adamax_result.w)
    assert all(r.stop_reason is StopReason.MAX_EPOCH_REACHED for r in results.values())


def test_run_comparison_without_seed_shares_initial_point(problem) -> None:
    results = run_comparison(problem, {"max_epoch": 1})
    np.testing.assert_array_equal(results["Adam"].history.cost[:1], results["AdaMax"].history.cost[:1])


def test_run_comparison_overrides_sub_mode_in_options(problem) -> None:
    results = run_comparison(problem, {"max_epoch": 1, "seed": 0, "sub_mode": "Adam"}, sub_modes=["adamax"])
    assert list(results) == ["AdaMax"]


def test_next_experiment_dir_increments(tmp_path: Path) -> None:
    first = next_experiment_dir(tmp_path)
    second = next_experiment_dir(tmp_path)
    assert first.name == "exp_0000"
    assert second.name == "exp_0001"


def test_write_results(problem, tmp_path: Path) -> None:
    results = run_comparison(problem, {"max_epoch": 2, "seed": 1})
    summary = write_results(results, tmp_path, options={"max_epoch": 2}, plots=False)

    assert set(summary) == {"Adam", "AdaMax"}
    assert summary["Adam"]["epochs"] == 2
    assert summary["Adam"]["stop_reason"] == "max_epoch_reached"
    history = json.loads((tmp_path / "history_Adam.json").read_text())
    assert history["iter"] == [0, 1, 2]
    assert history["grad_calc_count"] == [0, 30, 60]
    assert json.loads((tmp_path / "options.json").read_text()) == {"max_epoch": 2}
    assert not (tmp_path / "plots").exists()


def test_build_problem_kinds() -> None:
    linreg, f_opt = build_problem("linreg", n=20, dim=2, seed=0)
    assert linreg.sample_count() == 20
    assert f_opt is not None
    logreg, no_opt = build_problem("logreg", n=20, dim=2, seed=0)
    assert logreg.dimension() == 2
    assert no_opt is None
    with pytest.raises(ValueError):
        build_problem("svm", n=20, dim=2, seed=0)


def test_main_writes_experiment(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(
        [
            "--n",
            "40",
            "--dim",
            "3",
            "--set",
            "max_epoch=3",
            "--set",
            "batch_size=4",
            "--workflow-dir",
            str(tmp_path),
        ]
    )
    assert exit_code == 0
    exp_dir = tmp_path / "exp_0000"
    summary = json.loads((exp_dir / "summary.json").read_text())
    assert set(summary) == {"Adam", "AdaMax"}
    assert summary["AdaMax"]["grad_calc_count"] == 120
    options = json.loads((exp_dir / "options.json").read_text())
    assert options["batch_size"] == 4
    assert "sub_mode" not in options
    assert (exp_dir / "plots" / "optgap_epoch.png").exists()
    assert "Experiment completed" in capsys.readouterr().out


def test_main_with_options_file(tmp_path: Path) -> None:
    options_path = tmp_path / "opts.json"
    options_path.write_text(json.dumps({"max_epoch": 1, "step_alg": "decay"}))
    exit_code = main(
        [
            "--problem",
            "logreg",
            "--n",
            "20",
            "--dim",
            "2",
            "--options",
            str(options_path),
            "--sub-modes",
            "AdaMax",
            "--workflow-dir",
            str(tmp_path / "wf"),
            "--no-plots",
        ]
    )
    assert exit_code == 0
    summary = json.loads((tmp_path / "wf" / "exp_0000" / "summary.json").read_text())
    assert list(summary) == ["AdaMax"]
    assert summary["AdaMax"]["epochs"] == 1
