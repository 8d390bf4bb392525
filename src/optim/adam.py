"""Epoch-based Adam / AdaMax solver for finite-sum problems.

This module provides:
- AdamSolver: runs the epoch/mini-batch loop for a resolved configuration
- adam: functional entry point taking a partial option mapping

Each epoch visits floor(n / batch_size) mini-batches of a (possibly
shuffled) sample ordering, updates the weights once per mini-batch, then
evaluates the full objective, appends a history record and checks the
stopping conditions.
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from typing import Any

import numpy as np
from tqdm.auto import tqdm

from core.logging import get_logger
from core.protocols import Clock, Problem
from core.rng import make_rng, random_initial_point, sample_order
from core.types import EpochRecord, History, ParamVector, SolverResult, StopReason
from optim.batching import iter_minibatches, num_batches
from optim.config import AdamConfig, resolve_options
from optim.convergence import ConvergenceMonitor
from optim.moments import make_update_rule
from optim.schedules import make_step_size

__all__ = [
    "AdamSolver",
    "adam",
]

logger = get_logger(__name__)


def _log(msg: str, *, use_tqdm: bool) -> None:
    if use_tqdm:
        tqdm.write(msg)
    else:
        print(msg, flush=True)


class AdamSolver:
    """Adam / AdaMax optimizer over a Problem.

    Example:
        >>> solver = AdamSolver(resolve_options(max_epoch=20, seed=0))
        >>> result = solver.solve(problem)
        >>> result.stop_reason
        <StopReason.MAX_EPOCH_REACHED: 'max_epoch_reached'>

    Attributes:
        config: The resolved run configuration.
    """

    def __init__(
        self,
        config: AdamConfig | None = None,
        *,
        rng: np.random.Generator | None = None,
        clock: Clock | None = None,
    ) -> None:
        """Initialize the solver.

        Args:
            config: Resolved configuration. Defaults to all defaults.
            rng: Random source for permutations and the default initial
                point. If None, a generator seeded with ``config.seed`` is
                created for each run.
            clock: Zero-argument callable returning seconds. Defaults to
                ``time.perf_counter``.
        """
        self.config = config if config is not None else AdamConfig()
        self._rng = rng
        self._clock = clock if clock is not None else time.perf_counter

    def _initial_point(self, d: int, rng: np.random.Generator) -> ParamVector:
        if self.config.w_init is None:
            return random_initial_point(d, rng)
        w = np.array(self.config.w_init, dtype=np.float64, copy=True)
        if w.shape != (d,):
            raise ValueError(f"w_init has shape {w.shape}, problem dimension is {d}")
        return w

    def solve(self, problem: Problem) -> SolverResult:
        """Run the optimizer until a stopping condition holds.

        Args:
            problem: Objective and gradient oracle.

        Returns:
            SolverResult with the final weights and the epoch history.

        Raises:
            TypeError: If problem does not implement the Problem protocol.
            ValueError: If w_init or a returned gradient has the wrong shape.
        """
        if not isinstance(problem, Problem):
            raise TypeError(f"{type(problem).__name__} does not implement the Problem protocol")

        config = self.config
        d = int(problem.dimension())
        n = int(problem.sample_count())
        rng = self._rng if self._rng is not None else make_rng(config.seed)

        rule = make_update_rule(config)
        state = rule.init_state(self._initial_point(d, rng))
        step_size = make_step_size(config)
        monitor = ConvergenceMonitor(
            f_sol=config.f_sol,
            tol_optgap=config.tol_optgap,
            max_epoch=config.max_epoch,
        )

        batches_per_epoch = num_batches(n, config.batch_size)
        if batches_per_epoch == 0:
            logger.warning(
                "batch_size=%d exceeds sample count n=%d; epochs perform no updates",
                config.batch_size,
                n,
            )

        # Epoch 0: state before any update
        grad_calc_count = 0
        history = History()
        f_val, optgap = monitor.evaluate(problem, state.w)
        history.append(EpochRecord(0, 0.0, grad_calc_count, f_val, optgap))

        start_time = self._clock()
        total = int(config.max_epoch) if np.isfinite(config.max_epoch) else None
        bar = tqdm(total=total, desc=f"Adam-{rule.name}", disable=not config.progress)
        try:
            while monitor.should_continue(optgap, state.epoch):
                order = sample_order(n, rng, permute=config.permute_on)

                processed = 0
                for indices in iter_minibatches(order, config.batch_size):
                    # Step size uses the count of updates already performed
                    step = step_size(state.t)
                    state.t += 1

                    grad = np.asarray(problem.gradient(state.w, indices), dtype=np.float64)
                    if grad.shape != (d,):
                        raise ValueError(f"Gradient has shape {grad.shape}, expected ({d},)")
                    rule.update(state, grad, step)
                    processed += 1

                elapsed_time = self._clock() - start_time
                grad_calc_count += processed * config.batch_size
                state.epoch += 1

                f_val, optgap = monitor.evaluate(problem, state.w)
                history.append(
                    EpochRecord(state.epoch, float(elapsed_time), grad_calc_count, f_val, optgap)
                )
                bar.update(1)

                if config.verbose:
                    _log(
                        f"Adam-{rule.name}: Epoch = {state.epoch:03d}, "
                        f"cost = {f_val:.16e}, optgap = {optgap:.4e}",
                        use_tqdm=config.progress,
                    )
        finally:
            bar.close()

        reason = monitor.stop_reason(optgap, state.epoch)
        if np.isnan(optgap):
            logger.warning(
                "Optimality gap is not finite (%s) after epoch %d; stopping", optgap, state.epoch
            )
        elif reason is StopReason.TOLERANCE_REACHED:
            logger.info("Optimality gap tolerance reached: tol_optgap = %g", config.tol_optgap)
        else:
            logger.info("Max epoch reached: max_epoch = %g", config.max_epoch)

        return SolverResult(
            w=state.w.copy(),
            history=history,
            stop_reason=reason,
            epochs=state.epoch,
            total_iter=state.t,
        )


def adam(
    problem: Problem,
    options: Mapping[str, Any] | None = None,
    *,
    rng: np.random.Generator | None = None,
    clock: Clock | None = None,
    **overrides: Any,
) -> SolverResult:
    """Minimize ``problem`` with Adam or AdaMax.

    Args:
        problem: Objective and gradient oracle.
        options: Partial option mapping; see ``optim.config.resolve_options``.
        rng: Optional random source (overrides the ``seed`` option).
        clock: Optional clock used for the history's elapsed times.
        **overrides: Options given as keyword arguments.

    Returns:
        SolverResult with the final weights, history and stop reason.

    Example:
        >>> result = adam(problem, {"sub_mode": "AdaMax", "max_epoch": 50}, seed=1)
        >>> len(result.history) == result.epochs + 1
        True
    """
    config = resolve_options(options, **overrides)
    return AdamSolver(config, rng=rng, clock=clock).solve(problem)
