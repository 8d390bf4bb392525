"""Convergence monitoring on the optimality gap and the epoch budget."""

from __future__ import annotations

from dataclasses import dataclass

from core.protocols import Problem
from core.types import ParamVector, StopReason

__all__ = ["ConvergenceMonitor"]


@dataclass(frozen=True)
class ConvergenceMonitor:
    """Decides whether a run continues after each epoch.

    The loop runs while ``optgap > tol_optgap and epoch < max_epoch``.

    Attributes:
        f_sol: Reference objective value.
        tol_optgap: Optimality-gap tolerance.
        max_epoch: Epoch budget (may be infinite).
    """

    f_sol: float
    tol_optgap: float
    max_epoch: float

    def evaluate(self, problem: Problem, w: ParamVector) -> tuple[float, float]:
        """Return (cost, optimality gap) at w."""
        f_val = float(problem.cost(w))
        return f_val, f_val - self.f_sol

    def should_continue(self, optgap: float, epoch: int) -> bool:
        return optgap > self.tol_optgap and epoch < self.max_epoch

    def stop_reason(self, optgap: float, epoch: int) -> StopReason:
        """Classify a finished run.

        Raises:
            ValueError: If the run should still be continuing.
        """
        if self.should_continue(optgap, epoch):
            raise ValueError(f"Run has not terminated (epoch={epoch}, optgap={optgap})")
        if optgap <= self.tol_optgap:
            return StopReason.TOLERANCE_REACHED
        return StopReason.MAX_EPOCH_REACHED
