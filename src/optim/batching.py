"""Mini-batch partitioning of an epoch's sample order."""

from __future__ import annotations

from collections.abc import Iterator

import numpy as np

__all__ = [
    "num_batches",
    "iter_minibatches",
]


def num_batches(n: int, batch_size: int) -> int:
    """Number of full mini-batches per epoch, floor(n / batch_size)."""
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1, got {batch_size}")
    return n // batch_size


def iter_minibatches(order: np.ndarray, batch_size: int) -> Iterator[np.ndarray]:
    """Yield contiguous, non-overlapping slices of ``order``.

    Only full batches are produced; the trailing ``len(order) % batch_size``
    indices are dropped for this epoch.

    Example:
        >>> [b.tolist() for b in iter_minibatches(np.arange(7), 3)]
        [[0, 1, 2], [3, 4, 5]]
    """
    for j in range(num_batches(len(order), batch_size)):
        start = j * batch_size
        yield order[start : start + batch_size]
