"""Step-size schedules.

A schedule maps the global step counter t (number of updates already
performed) to the step size used for the next update.
"""

from __future__ import annotations

from collections.abc import Callable

from optim.config import AdamConfig, StepAlg

__all__ = [
    "StepSize",
    "fixed_step_size",
    "decay_step_size",
    "make_step_size",
]

# Type alias for step size schedules
StepSize = Callable[[int], float]


def fixed_step_size(step: float) -> StepSize:
    """Create a constant step size schedule.

    Example:
        >>> schedule = fixed_step_size(0.1)
        >>> schedule(0), schedule(100)
        (0.1, 0.1)
    """
    if step <= 0:
        raise ValueError(f"step must be positive, got {step}")

    def schedule(t: int) -> float:
        return step

    return schedule


def decay_step_size(step: float, lam: float) -> StepSize:
    """Create the inverse-time decay schedule.

    Returns step(t) = step / (1 + step * lam * t), which is non-increasing
    in t for lam >= 0 and constant for lam == 0.

    Args:
        step: Initial step size (value at t = 0).
        lam: Decay rate.

    Example:
        >>> schedule = decay_step_size(0.1, 10.0)
        >>> schedule(0), schedule(1)
        (0.1, 0.05)
    """
    if step <= 0:
        raise ValueError(f"step must be positive, got {step}")
    if lam < 0:
        raise ValueError(f"lam must be non-negative, got {lam}")

    def schedule(t: int) -> float:
        return step / (1 + step * lam * t)

    return schedule


def make_step_size(config: AdamConfig) -> StepSize:
    """Select the schedule named by the configuration."""
    if config.step_alg is StepAlg.FIXED:
        return fixed_step_size(config.step)
    return decay_step_size(config.step, config.lambda_)
