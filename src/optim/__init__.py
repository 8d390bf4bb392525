"""Optimization algorithms module.

This package contains the epoch-based Adam / AdaMax solver and its parts:
- Configuration resolution (AdamConfig, resolve_options)
- Moment estimators (AdamRule, AdaMaxRule)
- Step size schedules (fixed, inverse-time decay)
- Mini-batch partitioning and convergence monitoring
"""

from __future__ import annotations

from optim.adam import AdamSolver, adam
from optim.batching import iter_minibatches, num_batches
from optim.config import DEFAULT_OPTIONS, AdamConfig, StepAlg, SubMode, resolve_options
from optim.convergence import ConvergenceMonitor
from optim.moments import (
    AdaMaxRule,
    AdaMaxState,
    AdamRule,
    AdamState,
    MomentState,
    make_update_rule,
)
from optim.schedules import StepSize, decay_step_size, fixed_step_size, make_step_size

__all__ = [
    # Solver
    "AdamSolver",
    "adam",
    # Configuration
    "AdamConfig",
    "StepAlg",
    "SubMode",
    "DEFAULT_OPTIONS",
    "resolve_options",
    # Moment estimators
    "MomentState",
    "AdamState",
    "AdaMaxState",
    "AdamRule",
    "AdaMaxRule",
    "make_update_rule",
    # Step sizes
    "StepSize",
    "fixed_step_size",
    "decay_step_size",
    "make_step_size",
    # Iteration / convergence
    "iter_minibatches",
    "num_batches",
    "ConvergenceMonitor",
]
