from __future__ import annotations

import logging

import numpy as np
import pytest

from core.logging import get_logger, set_log_level
from core.rng import make_rng, random_initial_point, sample_order


def test_make_rng_is_reproducible() -> None:
    a = make_rng(7).standard_normal(4)
    b = make_rng(7).standard_normal(4)
    np.testing.assert_array_equal(a, b)


def test_random_initial_point_shape_and_errors() -> None:
    w = random_initial_point(5, make_rng(0))
    assert w.shape == (5,)
    assert w.dtype == np.float64
    with pytest.raises(ValueError):
        random_initial_point(0, make_rng(0))


def test_sample_order_identity_and_permutation() -> None:
    rng = make_rng(3)
    np.testing.assert_array_equal(sample_order(6, rng, permute=False), np.arange(6))
    perm = sample_order(6, rng, permute=True)
    assert sorted(perm.tolist()) == list(range(6))


def test_get_logger_is_namespaced_and_cached() -> None:
    logger = get_logger("optim.something")
    assert logger.name == "adamopt.optim.something"
    assert get_logger("optim.something") is logger
    assert get_logger("adamopt.optim.something") is logger
    assert get_logger().name == "adamopt"
    assert len(logger.handlers) == 1


def test_set_log_level_updates_existing_loggers() -> None:
    logger = get_logger("tests.levels")
    try:
        set_log_level("warning")
        assert logger.level == logging.WARNING
        assert all(h.level == logging.WARNING for h in logger.handlers)
    finally:
        set_log_level(logging.INFO)
    assert logger.level == logging.INFO
