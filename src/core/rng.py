"""Random number generation utilities.

This module contains:
- Seeded RNG management for reproducible runs
- Generation of random initial points
- Per-epoch sample orderings
"""

from __future__ import annotations

import numpy as np

from core.types import ParamVector

__all__ = [
    "make_rng",
    "random_initial_point",
    "sample_order",
]


def make_rng(seed: int | None = None) -> np.random.Generator:
    """Create a generator for one run.

    Args:
        seed: Seed for reproducibility. None draws fresh OS entropy.

    Returns:
        A numpy Generator.
    """
    return np.random.default_rng(seed)


def random_initial_point(dim: int, rng: np.random.Generator) -> ParamVector:
    """Draw an initial weight vector from a standard normal distribution."""
    if dim < 1:
        raise ValueError(f"dim must be >= 1, got {dim}")
    return rng.standard_normal(dim).astype(np.float64)


def sample_order(n: int, rng: np.random.Generator, *, permute: bool) -> np.ndarray:
    """Return the order in which samples are visited during an epoch.

    Args:
        n: Number of samples.
        rng: Generator used when permute is True.
        permute: If True, a uniformly random permutation; otherwise 0..n-1.

    Returns:
        Integer array of length n.
    """
    if permute:
        return rng.permutation(n)
    return np.arange(n)
