"""Core type definitions for the optimizer.

This module contains:
- Type aliases for parameter vectors and sample index sets
- Data containers for per-epoch telemetry (EpochRecord, History)
- The run outcome (StopReason, SolverResult)
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import numpy as np

__all__ = [
    "ParamVector",
    "IndexBatch",
    "EpochRecord",
    "History",
    "StopReason",
    "SolverResult",
]

# Type alias for parameter vectors (model weights flattened)
ParamVector = np.ndarray

# Type alias for a mini-batch of sample indices
IndexBatch = Sequence[int] | np.ndarray


@dataclass(frozen=True, slots=True)
class EpochRecord:
    """Telemetry captured at the end of one epoch.

    Attributes:
        epoch: Epoch index (0 for the pre-optimization snapshot).
        time: Wall-clock seconds elapsed since the run started.
        grad_calc_count: Cumulative number of per-sample gradient evaluations.
        cost: Objective value at the end of the epoch.
        optgap: Optimality gap, cost minus the reference objective.
    """

    epoch: int
    time: float
    grad_calc_count: int
    cost: float
    optgap: float


@dataclass
class History:
    """Append-only, epoch-indexed log of a run.

    The first record is the state before any update (epoch 0); every
    completed epoch appends one more. Records are never modified once
    written. Fields are also exposed as parallel sequences.

    Example:
        >>> history = History()
        >>> history.append(EpochRecord(0, 0.0, 0, 2.0, 1.0))
        >>> history.append(EpochRecord(1, 0.1, 10, 1.5, 0.5))
        >>> history.cost
        [2.0, 1.5]
    """

    records: list[EpochRecord] = field(default_factory=list)

    def __len__(self) -> int:
        """Return the number of recorded epochs, including the initial one."""
        return len(self.records)

    def append(self, record: EpochRecord) -> None:
        """Append an epoch record.

        Raises:
            ValueError: If the record's epoch index does not follow the last one.
        """
        expected = len(self.records)
        if record.epoch != expected:
            raise ValueError(f"Expected epoch {expected}, got {record.epoch}")
        self.records.append(record)

    def last(self) -> EpochRecord:
        """Return the most recent record.

        Raises:
            IndexError: If history is empty.
        """
        return self.records[-1]

    @property
    def epoch(self) -> list[int]:
        return [r.epoch for r in self.records]

    @property
    def time(self) -> list[float]:
        return [r.time for r in self.records]

    @property
    def grad_calc_count(self) -> list[int]:
        return [r.grad_calc_count for r in self.records]

    @property
    def cost(self) -> list[float]:
        return [r.cost for r in self.records]

    @property
    def optgap(self) -> list[float]:
        return [r.optgap for r in self.records]

    def to_dict(self) -> dict[str, list[Any]]:
        """Return the history as parallel lists (JSON-serializable).

        Keys are ``iter``, ``time``, ``grad_calc_count``, ``cost`` and
        ``optgap``.
        """
        return {
            "iter": self.epoch,
            "time": self.time,
            "grad_calc_count": self.grad_calc_count,
            "cost": self.cost,
            "optgap": self.optgap,
        }


class StopReason(str, Enum):
    """Why a run terminated.

    A run whose optimality gap becomes NaN (for example AdaMax dividing by a
    zero infinity-norm accumulator) stops at once. It is reported as
    MAX_EPOCH_REACHED, since the tolerance was not met, and the solver logs a
    warning instead of the budget message.
    """

    TOLERANCE_REACHED = "tolerance_reached"
    MAX_EPOCH_REACHED = "max_epoch_reached"


@dataclass(frozen=True)
class SolverResult:
    """Outcome of a single optimizer run.

    Attributes:
        w: Final weight vector.
        history: Per-epoch telemetry, starting with the pre-loop snapshot.
        stop_reason: Which termination condition ended the run.
        epochs: Number of epochs executed.
        total_iter: Number of mini-batch updates performed.
    """

    w: ParamVector
    history: History
    stop_reason: StopReason
    epochs: int
    total_iter: int

    def infos(self) -> dict[str, list[Any]]:
        """Return the history as a dict of parallel lists."""
        return self.history.to_dict()
