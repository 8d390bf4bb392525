"""Logistic Regression problem for binary classification.

This module provides:
- Data generation for binary classification
- LogisticRegressionProblem implementing the Problem protocol
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from core.types import IndexBatch, ParamVector

__all__ = [
    "make_logistic_data",
    "LogisticRegressionProblem",
]


def make_logistic_data(
    *,
    n: int,
    dim: int,
    rng: np.random.Generator,
    separable: bool = False,
) -> tuple[np.ndarray, np.ndarray]:
    """Generate synthetic binary classification data.

    Creates a dataset where labels are determined by a linear decision boundary
    with optional noise for non-separable cases.

    Args:
        n: Number of samples.
        dim: Feature dimensionality.
        rng: Random number generator.
        separable: If True, data is linearly separable. If False, adds noise.

    Returns:
        Tuple of (X, y) where:
        - X has shape (n, dim), features
        - y has shape (n,), binary labels in {0, 1}
    """
    X = rng.standard_normal((n, dim))

    w_true = rng.standard_normal(dim)
    w_true = w_true / np.linalg.norm(w_true)

    logits = X @ w_true

    if separable:
        y = (logits > 0).astype(np.float64)
    else:
        probs = 1.0 / (1.0 + np.exp(-logits))
        y = (rng.random(n) < probs).astype(np.float64)

    return X, y


def _sigmoid(z: np.ndarray) -> np.ndarray:
    """Numerically stable sigmoid."""
    z_clipped = np.clip(z, -500, 500)
    result: np.ndarray = 1.0 / (1.0 + np.exp(-z_clipped))
    return result


@dataclass(frozen=True)
class LogisticRegressionProblem:
    """L2-regularized binary logistic regression.

    Loss: -mean(y * log(p) + (1-y) * log(1-p)) + lam/2 * ||w||^2
    where p = sigmoid(X @ w)

    Attributes:
        X: Feature matrix of shape (n, dim).
        y: Label vector of shape (n,) with values in {0, 1}.
        lam: L2 regularization strength.
    """

    X: np.ndarray
    y: np.ndarray
    lam: float = 0.0
    _eps: float = field(default=1e-15, repr=False)  # For numerical stability

    def __post_init__(self) -> None:
        if self.X.ndim != 2:
            raise ValueError(f"X must be 2D, got ndim={self.X.ndim}")
        if self.y.shape != (self.X.shape[0],):
            raise ValueError(f"y must have shape ({self.X.shape[0]},), got {self.y.shape}")
        if not np.all((self.y == 0) | (self.y == 1)):
            raise ValueError("Labels must be in {0, 1}")
        if self.lam < 0:
            raise ValueError(f"lam must be non-negative, got {self.lam}")

    def dimension(self) -> int:
        return int(self.X.shape[1])

    def sample_count(self) -> int:
        return int(self.X.shape[0])

    def cost(self, w: ParamVector) -> float:
        """Average log-loss over all samples plus the L2 term."""
        p = np.clip(_sigmoid(self.X @ w), self._eps, 1 - self._eps)
        loss = -np.mean(self.y * np.log(p) + (1 - self.y) * np.log(1 - p))
        return float(loss + 0.5 * self.lam * w @ w)

    def gradient(self, w: ParamVector, indices: IndexBatch) -> ParamVector:
        """Gradient of the mini-batch loss.

        grad = X_B^T (p_B - y_B) / |B| + lam * w
        """
        idx = np.asarray(indices, dtype=np.intp)
        X_b = self.X[idx]
        p = _sigmoid(X_b @ w)
        grad = X_b.T @ (p - self.y[idx]) / len(idx) + self.lam * w
        result: np.ndarray = grad.astype(np.float64)
        return result

    def accuracy(self, w: ParamVector) -> float:
        """Fraction of samples classified correctly (threshold at 0.5)."""
        predictions = (_sigmoid(self.X @ w) >= 0.5).astype(np.float64)
        return float(np.mean(predictions == self.y))
