"""Protocol definitions for the optimizer.

This module contains Protocol classes defining interfaces for:
- Problems: empirical-risk objectives with per-sample gradients
- Clocks: wall-clock sources used for run telemetry
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.types import IndexBatch, ParamVector

__all__ = [
    "Problem",
    "Clock",
]


@runtime_checkable
class Problem(Protocol):
    """Protocol for finite-sum objectives.

    A Problem represents f(w) = 1/n sum_i f_i(w) over a fixed dataset and
    exposes:
    - Its parameter dimensionality and sample count
    - Full-objective evaluation
    - Gradient evaluation over an arbitrary subset of samples

    Contract:
    - dimension() and sample_count() do not change during a run
    - gradient() returns a vector of length dimension()
    - Sample indices are integers in range [0, sample_count())
    """

    def dimension(self) -> int:
        """Return the parameter dimensionality d."""
        ...

    def sample_count(self) -> int:
        """Return the number of samples n."""
        ...

    def cost(self, w: ParamVector) -> float:
        """Evaluate the full objective at w.

        Args:
            w: Parameter vector of shape (d,).

        Returns:
            The scalar objective value.
        """
        ...

    def gradient(self, w: ParamVector, indices: IndexBatch) -> ParamVector:
        """Compute the gradient of the objective restricted to some samples.

        Args:
            w: Parameter vector of shape (d,).
            indices: Sample indices forming the mini-batch.

        Returns:
            Gradient vector of shape (d,).
        """
        ...


@runtime_checkable
class Clock(Protocol):
    """Zero-argument callable returning monotonic seconds."""

    def __call__(self) -> float: ...
