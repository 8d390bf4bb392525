"""Plotting helpers for optimizer histories."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

import numpy as np

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from core.types import History  # noqa: E402

__all__ = [
    "X_AXES",
    "plot_histories",
]

X_AXES = {
    "epoch": ("epoch", "Epoch"),
    "grad_calc_count": ("grad_calc_count", "Number of gradient evaluations"),
    "time": ("time", "Time [sec]"),
}

_LOG_METRICS = {"cost", "optgap"}


def plot_histories(
    histories: Mapping[str, History],
    metric: str,
    out_path: Path,
    *,
    x_axis: str = "epoch",
    title: str | None = None,
) -> bool:
    """Plot one curve per run for a history metric.

    ``optgap`` and ``cost`` are drawn on a log y-axis; non-positive and
    non-finite points are dropped in that case.

    Args:
        histories: Mapping run name -> History.
        metric: History field to plot (``cost``, ``optgap``, ...).
        out_path: Output PNG path.
        x_axis: One of ``epoch``, ``grad_calc_count`` or ``time``.
        title: Optional plot title.

    Returns:
        True if a figure was written, False if no run had plottable data.

    Raises:
        ValueError: If x_axis is unknown.
    """
    if x_axis not in X_AXES:
        raise ValueError(f"Unknown x_axis {x_axis!r}, expected one of {sorted(X_AXES)}")
    x_attr, x_label = X_AXES[x_axis]
    log_scale = metric in _LOG_METRICS

    out_path.parent.mkdir(parents=True, exist_ok=True)
    plt.figure(figsize=(8, 4.5))

    has_data = False
    for name, history in histories.items():
        y = np.asarray(getattr(history, metric), dtype=np.float64)
        x = np.asarray(getattr(history, x_attr), dtype=np.float64)
        if y.size == 0:
            continue
        mask = np.isfinite(y)
        if log_scale:
            mask &= y > 0
        if not np.any(mask):
            continue
        plt.plot(x[mask], y[mask], label=name)
        has_data = True

    if not has_data:
        plt.close()
        return False

    plt.xlabel(x_label)
    plt.ylabel(metric)
    if log_scale:
        plt.yscale("log")
    if title:
        plt.title(title)
    plt.legend(loc="best")
    plt.grid(True, alpha=0.3)
    plt.tight_layout()
    plt.savefig(out_path)
    plt.close()
    return True
