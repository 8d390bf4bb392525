"""Moment estimators for Adam and AdaMax.

This module provides:
- AdamState / AdaMaxState: per-run optimizer state (w, m, t, epoch and
  the variant-specific accumulator)
- AdamRule / AdaMaxRule: the update rules, sharing a single ``update``
  operation
- make_update_rule: selects the rule named by the configuration

References:
    Diederik Kingma and Jimmy Ba, "Adam: A Method for Stochastic
    Optimization", ICLR 2015.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

import numpy as np

from core.types import ParamVector
from optim.config import AdamConfig, SubMode

__all__ = [
    "MomentState",
    "AdamState",
    "AdaMaxState",
    "UpdateRule",
    "AdamRule",
    "AdaMaxRule",
    "make_update_rule",
]


@dataclass
class MomentState:
    """State shared by both variants.

    Attributes:
        w: Current weight vector.
        m: First moment estimate.
        t: Number of mini-batch updates since the run started.
        epoch: Number of completed epochs.
    """

    w: ParamVector
    m: ParamVector
    t: int = 0
    epoch: int = 0


@dataclass
class AdamState(MomentState):
    """State for Adam.

    Attributes:
        v: Second raw moment estimate (squared gradients).
    """

    v: ParamVector = field(default_factory=lambda: np.array([]))


@dataclass
class AdaMaxState(MomentState):
    """State for AdaMax.

    Attributes:
        u: Exponentially weighted infinity norm of the gradients.
    """

    u: ParamVector = field(default_factory=lambda: np.array([]))


class UpdateRule(Protocol):
    """A moment-based update rule."""

    name: str

    def init_state(self, w: ParamVector) -> MomentState: ...

    def update(self, state: MomentState, grad: ParamVector, step_size: float) -> ParamVector: ...


class AdamRule:
    """Adam update.

    Implements:
        m_t = beta1 * m_{t-1} + (1 - beta1) * g_t
        v_t = beta2 * v_{t-1} + (1 - beta2) * g_t^2
        m_hat = m_t / (1 - beta1^t)
        v_hat = v_t / (1 - beta2^t)
        w_{t+1} = w_t - step * m_hat / (sqrt(v_hat) + eps)
    """

    name = SubMode.ADAM.value

    def __init__(self, beta1: float = 0.9, beta2: float = 0.9, eps: float = 1e-7) -> None:
        if not (0 <= beta1 < 1):
            raise ValueError(f"beta1 must be in [0, 1), got {beta1}")
        if not (0 <= beta2 < 1):
            raise ValueError(f"beta2 must be in [0, 1), got {beta2}")
        self.beta1 = beta1
        self.beta2 = beta2
        self.eps = eps

    def init_state(self, w: ParamVector) -> AdamState:
        """Return a state with zero moments at w."""
        w = np.array(w, dtype=np.float64, copy=True)
        return AdamState(w=w, m=np.zeros_like(w), v=np.zeros_like(w))

    def update(self, state: AdamState, grad: ParamVector, step_size: float) -> ParamVector:
        """Apply one update in place and return the new weights.

        Args:
            state: Current state; ``state.t`` must already count this update.
            grad: Mini-batch gradient.
            step_size: Step size for this update.

        Returns:
            The updated weight vector (also stored in ``state.w``).
        """
        t = state.t

        # Update biased first moment estimate
        state.m = self.beta1 * state.m + (1 - self.beta1) * grad

        # Update biased second raw moment estimate
        state.v = self.beta2 * state.v + (1 - self.beta2) * (grad**2)

        # Bias correction
        m_hat = state.m / (1 - self.beta1**t)
        v_hat = state.v / (1 - self.beta2**t)

        state.w = state.w - step_size * m_hat / (np.sqrt(v_hat) + self.eps)
        return state.w


class AdaMaxRule:
    """AdaMax update.

    Implements:
        m_t = beta1 * m_{t-1} + (1 - beta1) * g_t
        u_t = max(beta2 * u_{t-1}, |g_t|)
        m_hat = m_t / (1 - beta1^t)
        w_{t+1} = w_t - step * m_hat / (u_t + eps)

    eps defaults to 0, in which case a coordinate whose gradient has been
    exactly zero so far divides by zero.
    """

    name = SubMode.ADAMAX.value

    def __init__(self, beta1: float = 0.9, beta2: float = 0.9, eps: float = 0.0) -> None:
        if not (0 <= beta1 < 1):
            raise ValueError(f"beta1 must be in [0, 1), got {beta1}")
        if not (0 <= beta2 < 1):
            raise ValueError(f"beta2 must be in [0, 1), got {beta2}")
        self.beta1 = beta1
        self.beta2 = beta2
        self.eps = eps

    def init_state(self, w: ParamVector) -> AdaMaxState:
        """Return a state with zero moments at w."""
        w = np.array(w, dtype=np.float64, copy=True)
        return AdaMaxState(w=w, m=np.zeros_like(w), u=np.zeros_like(w))

    def update(self, state: AdaMaxState, grad: ParamVector, step_size: float) -> ParamVector:
        """Apply one update in place and return the new weights."""
        t = state.t

        state.m = self.beta1 * state.m + (1 - self.beta1) * grad
        state.u = np.maximum(self.beta2 * state.u, np.abs(grad))

        m_hat = state.m / (1 - self.beta1**t)

        state.w = state.w - step_size * m_hat / (state.u + self.eps)
        return state.w


def make_update_rule(config: AdamConfig) -> AdamRule | AdaMaxRule:
    """Build the update rule selected by ``config.sub_mode``."""
    if config.sub_mode is SubMode.ADAM:
        return AdamRule(beta1=config.beta1, beta2=config.beta2, eps=config.epsilon)
    return AdaMaxRule(beta1=config.beta1, beta2=config.beta2, eps=config.adamax_epsilon)
