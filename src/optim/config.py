"""Run configuration for the Adam/AdaMax optimizer.

This module provides:
- StepAlg, SubMode: selectors for the step schedule and update variant
- AdamConfig: the immutable, fully resolved configuration of a run
- resolve_options: builds an AdamConfig from a partial option mapping
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any

import numpy as np

from core.types import ParamVector

__all__ = [
    "StepAlg",
    "SubMode",
    "AdamConfig",
    "DEFAULT_OPTIONS",
    "resolve_options",
]


class StepAlg(str, Enum):
    """Step-size schedule selector."""

    FIXED = "fixed"
    DECAY = "decay"

    @classmethod
    def parse(cls, token: Any) -> StepAlg:
        """Map a caller token to a schedule.

        ``fixed`` (or ``fix``) selects the constant schedule. Every other
        token, recognized or not, selects ``decay``.
        """
        if isinstance(token, StepAlg):
            return token
        if str(token).strip().lower() in ("fixed", "fix"):
            return cls.FIXED
        return cls.DECAY


class SubMode(str, Enum):
    """Moment-update variant selector."""

    ADAM = "Adam"
    ADAMAX = "AdaMax"

    @classmethod
    def parse(cls, token: Any) -> SubMode:
        """Map a caller token to a variant (case-insensitive).

        Raises:
            ValueError: If the token names neither Adam nor AdaMax.
        """
        if isinstance(token, SubMode):
            return token
        normalized = str(token).strip().lower()
        for mode in cls:
            if mode.value.lower() == normalized:
                return mode
        raise ValueError(f"sub_mode must be 'Adam' or 'AdaMax', got {token!r}")


@dataclass(frozen=True)
class AdamConfig:
    """Fully resolved configuration of an optimizer run.

    Attributes:
        step: Initial (or fixed) step size.
        step_alg: Step-size schedule.
        lambda_: Decay rate of the decay schedule (option name ``lambda``).
        tol_optgap: Stop once the optimality gap is at or below this value.
        batch_size: Samples per mini-batch.
        max_epoch: Epoch budget (may be ``math.inf``).
        w_init: Initial weights, or None to draw them from the run generator.
            Stored as a read-only copy and compared by value.
        sub_mode: Update variant.
        beta1: Decay rate of the first moment.
        beta2: Decay rate of the second moment / infinity norm.
        epsilon: Stabilizer added to the Adam denominator.
        f_sol: Reference objective value for the optimality gap.
        permute_on: Shuffle samples at the start of each epoch.
        verbose: Print one progress line per epoch.
        seed: Seed of the run generator.
        adamax_epsilon: Stabilizer added to the AdaMax denominator.
        progress: Show a progress bar over epochs.
    """

    step: float = 0.1
    step_alg: StepAlg = StepAlg.FIXED
    lambda_: float = 0.1
    tol_optgap: float = 1.0e-12
    batch_size: int = 1
    max_epoch: float = math.inf
    w_init: ParamVector | None = None
    sub_mode: SubMode = SubMode.ADAM
    beta1: float = 0.9
    beta2: float = 0.9
    epsilon: float = 1.0e-7
    f_sol: float = -math.inf
    permute_on: bool = True
    verbose: bool = False
    seed: int | None = None
    adamax_epsilon: float = 0.0
    progress: bool = False

    def __post_init__(self) -> None:
        """Validate field values."""
        if self.step <= 0:
            raise ValueError(f"step must be positive, got {self.step}")
        if self.lambda_ < 0:
            raise ValueError(f"lambda must be non-negative, got {self.lambda_}")
        if isinstance(self.batch_size, bool) or int(self.batch_size) != self.batch_size:
            raise ValueError(f"batch_size must be an integer, got {self.batch_size!r}")
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {self.batch_size}")
        if isinstance(self.max_epoch, bool) or (
            self.max_epoch != math.inf and not float(self.max_epoch).is_integer()
        ):
            raise ValueError(f"max_epoch must be an integer or math.inf, got {self.max_epoch!r}")
        if self.max_epoch < 0:
            raise ValueError(f"max_epoch must be >= 0, got {self.max_epoch}")
        if not (0 <= self.beta1 < 1):
            raise ValueError(f"beta1 must be in [0, 1), got {self.beta1}")
        if not (0 <= self.beta2 < 1):
            raise ValueError(f"beta2 must be in [0, 1), got {self.beta2}")
        if self.epsilon < 0:
            raise ValueError(f"epsilon must be non-negative, got {self.epsilon}")
        if self.adamax_epsilon < 0:
            raise ValueError(f"adamax_epsilon must be non-negative, got {self.adamax_epsilon}")
        if self.w_init is not None:
            w_init = np.array(self.w_init, dtype=np.float64, copy=True)
            if w_init.ndim != 1:
                raise ValueError(f"w_init must be 1-dimensional, got ndim={w_init.ndim}")
            w_init.flags.writeable = False
            object.__setattr__(self, "w_init", w_init)

    def _key(self) -> tuple[Any, ...]:
        values = []
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, np.ndarray):
                value = tuple(value.tolist())
            values.append(value)
        return tuple(values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AdamConfig):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def with_options(self, **overrides: Any) -> AdamConfig:
        """Return a copy with some options replaced (caller option names)."""
        return resolve_options(self.to_options(), **overrides)

    def to_options(self) -> dict[str, Any]:
        """Return the configuration as a caller-style option mapping."""
        options: dict[str, Any] = {}
        for f in fields(self):
            key = "lambda" if f.name == "lambda_" else f.name
            options[key] = getattr(self, f.name)
        return options


DEFAULT_OPTIONS: Mapping[str, Any] = AdamConfig().to_options()

# Caller option name -> AdamConfig field name
_OPTION_FIELDS = {key: ("lambda_" if key == "lambda" else key) for key in DEFAULT_OPTIONS}


def resolve_options(options: Mapping[str, Any] | None = None, **overrides: Any) -> AdamConfig:
    """Build a configuration from caller options.

    Missing options take their documented default. Keyword overrides win
    over entries of ``options``. ``lambda`` may also be passed as
    ``lambda_``.

    Args:
        options: Partial mapping of option name to value.
        **overrides: Additional options.

    Returns:
        The resolved AdamConfig.

    Raises:
        ValueError: For unknown option names, an unknown sub_mode, or
            out-of-range values.

    Example:
        >>> config = resolve_options({"step": 0.01, "step_alg": "decay"})
        >>> config.step_alg
        <StepAlg.DECAY: 'decay'>
        >>> config.beta2
        0.9
    """
    merged: dict[str, Any] = dict(options or {})
    merged.update(overrides)

    kwargs: dict[str, Any] = {}
    for key, value in merged.items():
        name = _OPTION_FIELDS.get(key, key if key == "lambda_" else None)
        if name is None:
            raise ValueError(f"Unknown option: {key!r}")
        kwargs[name] = value

    if "step_alg" in kwargs:
        kwargs["step_alg"] = StepAlg.parse(kwargs["step_alg"])
    if "sub_mode" in kwargs:
        kwargs["sub_mode"] = SubMode.parse(kwargs["sub_mode"])
    if "batch_size" in kwargs and isinstance(kwargs["batch_size"], float):
        if kwargs["batch_size"].is_integer():
            kwargs["batch_size"] = int(kwargs["batch_size"])
    for key in ("permute_on", "verbose", "progress"):
        if key in kwargs:
            kwargs[key] = bool(kwargs[key])

    return AdamConfig(**kwargs)
