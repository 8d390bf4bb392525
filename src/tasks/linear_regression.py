"""Least-squares linear regression problem.

This module provides a finite-sum convex quadratic:
    f(w) = 1/(2n) * ||X w - y||^2 + lam/2 * ||w||^2

It is the primary sanity-check problem for the optimizer because:
- It has a unique global minimum w* = (X^T X / n + lam I)^{-1} X^T y / n
- Mini-batch gradients are exact and cheap: X_B^T (X_B w - y_B) / |B| + lam w
- f(w*) gives the reference value for the optimality gap
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from core.types import IndexBatch, ParamVector

__all__ = [
    "LinearRegressionProblem",
    "make_linear_regression",
]


@dataclass(frozen=True)
class LinearRegressionProblem:
    """Ridge-regularized least squares over n samples.

    Attributes:
        X: Feature matrix of shape (n, d).
        y: Target vector of shape (n,).
        lam: L2 regularization strength (>= 0).

    Example:
        >>> X = np.array([[1.0, 0.0], [0.0, 2.0]])
        >>> y = np.array([1.0, 2.0])
        >>> problem = LinearRegressionProblem(X, y)
        >>> problem.cost(np.zeros(2))
        1.25
        >>> problem.gradient(np.zeros(2), [0])
        array([-1.,  0.])
    """

    X: np.ndarray
    y: np.ndarray
    lam: float = 0.0

    def __post_init__(self) -> None:
        """Validate shapes and regularization."""
        if self.X.ndim != 2:
            raise ValueError(f"X must be 2D, got ndim={self.X.ndim}")
        if self.y.ndim != 1:
            raise ValueError(f"y must be 1D, got ndim={self.y.ndim}")
        if self.y.shape[0] != self.X.shape[0]:
            raise ValueError(
                f"Sample count mismatch: X has {self.X.shape[0]} rows, "
                f"y has length {self.y.shape[0]}"
            )
        if self.X.shape[0] < 1:
            raise ValueError("Problem must have at least one sample")
        if self.lam < 0:
            raise ValueError(f"lam must be non-negative, got {self.lam}")

    def dimension(self) -> int:
        return int(self.X.shape[1])

    def sample_count(self) -> int:
        return int(self.X.shape[0])

    def cost(self, w: ParamVector) -> float:
        """Full objective f(w)."""
        residual = self.X @ w - self.y
        n = self.sample_count()
        return float(0.5 * residual @ residual / n + 0.5 * self.lam * w @ w)

    def gradient(self, w: ParamVector, indices: IndexBatch) -> ParamVector:
        """Gradient averaged over the given samples.

        Args:
            w: Parameter vector of shape (d,).
            indices: Sample indices of the mini-batch.

        Returns:
            X_B^T (X_B w - y_B) / |B| + lam * w.
        """
        idx = np.asarray(indices, dtype=np.intp)
        X_b = self.X[idx]
        residual = X_b @ w - self.y[idx]
        grad = X_b.T @ residual / len(idx) + self.lam * w
        return np.asarray(grad, dtype=np.float64)

    def w_star(self) -> ParamVector:
        """Closed-form minimizer.

        Solves (X^T X / n + lam I) w = X^T y / n.
        """
        n = self.sample_count()
        H = self.X.T @ self.X / n + self.lam * np.eye(self.dimension())
        return np.linalg.solve(H, self.X.T @ self.y / n)

    def f_opt(self) -> float:
        """Optimal objective value f(w*)."""
        return self.cost(self.w_star())


def make_linear_regression(
    *,
    n: int,
    dim: int,
    rng: np.random.Generator,
    noise: float = 0.1,
    lam: float = 0.0,
) -> LinearRegressionProblem:
    """Generate a random well-posed regression problem.

    Features are standard normal; targets come from a random linear model
    plus Gaussian noise.

    Args:
        n: Number of samples.
        dim: Feature dimensionality.
        rng: Random number generator for reproducibility.
        noise: Standard deviation of the target noise.
        lam: L2 regularization strength.

    Raises:
        ValueError: If n < 1, dim < 1 or noise < 0.

    Example:
        >>> problem = make_linear_regression(n=100, dim=5, rng=np.random.default_rng(0))
        >>> problem.dimension(), problem.sample_count()
        (5, 100)
    """
    if n < 1:
        raise ValueError(f"n must be >= 1, got {n}")
    if dim < 1:
        raise ValueError(f"dim must be >= 1, got {dim}")
    if noise < 0:
        raise ValueError(f"noise must be >= 0, got {noise}")

    X = rng.standard_normal((n, dim))
    w_true = rng.standard_normal(dim)
    y = X @ w_true + noise * rng.standard_normal(n)
    return LinearRegressionProblem(X=X, y=y.astype(np.float64), lam=lam)
