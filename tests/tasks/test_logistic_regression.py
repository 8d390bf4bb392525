from __future__ import annotations

import numpy as np
import pytest

from core.protocols import Problem
from tasks.logistic_regression import LogisticRegressionProblem, make_logistic_data


@pytest.fixture
def problem() -> LogisticRegressionProblem:
    X, y = make_logistic_data(n=60, dim=3, rng=np.random.default_rng(0))
    return LogisticRegressionProblem(X=X, y=y, lam=0.01)


def test_make_logistic_data_shapes_and_labels() -> None:
    X, y = make_logistic_data(n=30, dim=4, rng=np.random.default_rng(1), separable=True)
    assert X.shape == (30, 4)
    assert y.shape == (30,)
    assert set(np.unique(y)).issubset({0.0, 1.0})


def test_protocol_and_sizes(problem: LogisticRegressionProblem) -> None:
    assert isinstance(problem, Problem)
    assert problem.dimension() == 3
    assert problem.sample_count() == 60


def test_cost_at_zero_is_log_two(problem: LogisticRegressionProblem) -> None:
    assert problem.cost(np.zeros(3)) == pytest.approx(np.log(2.0))


def test_gradient_matches_finite_differences(problem: LogisticRegressionProblem) -> None:
    w = np.array([0.2, -0.4, 0.1])
    grad = problem.gradient(w, np.arange(problem.sample_count()))
    h = 1e-6
    numeric = np.array(
        [(problem.cost(w + h * e) - problem.cost(w - h * e)) / (2 * h) for e in np.eye(3)]
    )
    np.testing.assert_allclose(grad, numeric, rtol=1e-5, atol=1e-7)


def test_minibatch_gradient_shape(problem: LogisticRegressionProblem) -> None:
    grad = problem.gradient(np.zeros(3), np.array([0, 5, 9]))
    assert grad.shape == (3,)
    assert grad.dtype == np.float64


def test_accuracy_on_separable_data() -> None:
    rng = np.random.default_rng(2)
    X, y = make_logistic_data(n=100, dim=2, rng=rng, separable=True)
    problem = LogisticRegressionProblem(X=X, y=y)
    w_fit = np.linalg.lstsq(X, 2 * y - 1, rcond=None)[0]
    assert 0.0 <= problem.accuracy(np.zeros(2)) <= 1.0
    assert problem.accuracy(w_fit) > 0.8


def test_validation_errors() -> None:
    with pytest.raises(ValueError):
        LogisticRegressionProblem(X=np.zeros(3), y=np.zeros(3))
    with pytest.raises(ValueError):
        LogisticRegressionProblem(X=np.zeros((3, 2)), y=np.zeros(2))
    with pytest.raises(ValueError):
        LogisticRegressionProblem(X=np.zeros((2, 2)), y=np.array([0.0, 2.0]))
    with pytest.raises(ValueError):
        LogisticRegressionProblem(X=np.zeros((2, 2)), y=np.zeros(2), lam=-0.1)
