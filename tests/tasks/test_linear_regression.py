"""Tests for the least-squares reference problem."""

from __future__ import annotations

import numpy as np
import pytest

from core.protocols import Problem
from tasks.linear_regression import LinearRegressionProblem, make_linear_regression

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def simple_problem() -> LinearRegressionProblem:
    """Two samples, two features, exact fit at w* = [1, 1]."""
    X = np.array([[1.0, 0.0], [0.0, 2.0]])
    y = np.array([1.0, 2.0])
    return LinearRegressionProblem(X, y)


@pytest.fixture
def random_problem() -> LinearRegressionProblem:
    return make_linear_regression(n=40, dim=4, rng=np.random.default_rng(42), lam=0.1)


# =============================================================================
# Tests
# =============================================================================


class TestLinearRegressionProblem:
    def test_satisfies_problem_protocol(self, simple_problem: LinearRegressionProblem) -> None:
        assert isinstance(simple_problem, Problem)
        assert simple_problem.dimension() == 2
        assert simple_problem.sample_count() == 2

    def test_cost_at_origin(self, simple_problem: LinearRegressionProblem) -> None:
        # 1/(2*2) * (1 + 4)
        assert simple_problem.cost(np.zeros(2)) == pytest.approx(1.25)

    def test_single_sample_gradient(self, simple_problem: LinearRegressionProblem) -> None:
        np.testing.assert_allclose(simple_problem.gradient(np.zeros(2), [1]), [0.0, -4.0])

    def test_batch_gradient_is_mean_of_sample_gradients(
        self, random_problem: LinearRegressionProblem
    ) -> None:
        w = np.array([0.3, -0.2, 1.0, 0.5])
        batch = [3, 7, 11]
        per_sample = [random_problem.gradient(w, [i]) for i in batch]
        np.testing.assert_allclose(random_problem.gradient(w, batch), np.mean(per_sample, axis=0))

    def test_full_gradient_matches_finite_differences(
        self, random_problem: LinearRegressionProblem
    ) -> None:
        w = np.array([0.1, 0.2, -0.3, 0.4])
        grad = random_problem.gradient(w, np.arange(random_problem.sample_count()))
        h = 1e-6
        numeric = np.array(
            [
                (random_problem.cost(w + h * e) - random_problem.cost(w - h * e)) / (2 * h)
                for e in np.eye(4)
            ]
        )
        np.testing.assert_allclose(grad, numeric, rtol=1e-5, atol=1e-7)

    def test_w_star_is_stationary(self, random_problem: LinearRegressionProblem) -> None:
        w_star = random_problem.w_star()
        grad = random_problem.gradient(w_star, np.arange(random_problem.sample_count()))
        np.testing.assert_allclose(grad, np.zeros(4), atol=1e-10)
        assert random_problem.f_opt() <= random_problem.cost(w_star + 0.01)

    def test_exact_fit(self, simple_problem: LinearRegressionProblem) -> None:
        np.testing.assert_allclose(simple_problem.w_star(), [1.0, 1.0])
        assert simple_problem.f_opt() == pytest.approx(0.0)


class TestValidation:
    def test_shape_errors(self) -> None:
        with pytest.raises(ValueError):
            LinearRegressionProblem(np.zeros(3), np.zeros(3))
        with pytest.raises(ValueError):
            LinearRegressionProblem(np.zeros((3, 2)), np.zeros((3, 1)))
        with pytest.raises(ValueError):
            LinearRegressionProblem(np.zeros((3, 2)), np.zeros(4))
        with pytest.raises(ValueError):
            LinearRegressionProblem(np.zeros((0, 2)), np.zeros(0))

    def test_negative_lambda(self) -> None:
        with pytest.raises(ValueError):
            LinearRegressionProblem(np.zeros((3, 2)), np.zeros(3), lam=-1.0)

    def test_generator_arguments(self) -> None:
        rng = np.random.default_rng(0)
        with pytest.raises(ValueError):
            make_linear_regression(n=0, dim=2, rng=rng)
        with pytest.raises(ValueError):
            make_linear_regression(n=5, dim=0, rng=rng)
        with pytest.raises(ValueError):
            make_linear_regression(n=5, dim=2, rng=rng, noise=-1.0)

    def test_generator_is_reproducible(self) -> None:
        a = make_linear_regression(n=5, dim=2, rng=np.random.default_rng(3))
        b = make_linear_regression(n=5, dim=2, rng=np.random.default_rng(3))
        np.testing.assert_array_equal(a.X, b.X)
        np.testing.assert_array_equal(a.y, b.y)
