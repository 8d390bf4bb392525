"""Reference problems for the optimizer.

This package contains finite-sum objectives that implement the Problem
protocol (dimension, sample_count, cost, gradient).

Available problems:
- LinearRegressionProblem: Least squares with closed-form optimum
- LogisticRegressionProblem: Binary classification with logistic loss
"""

from __future__ import annotations

from tasks.linear_regression import LinearRegressionProblem, make_linear_regression
from tasks.logistic_regression import LogisticRegressionProblem, make_logistic_data

__all__ = [
    # Linear regression
    "LinearRegressionProblem",
    "make_linear_regression",
    # Logistic regression
    "LogisticRegressionProblem",
    "make_logistic_data",
]
