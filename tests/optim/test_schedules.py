from __future__ import annotations

import pytest

from optim.config import resolve_options
from optim.schedules import decay_step_size, fixed_step_size, make_step_size


def test_fixed_schedule_is_constant() -> None:
    schedule = fixed_step_size(0.3)
    assert all(schedule(t) == 0.3 for t in range(50))


def test_decay_schedule_values() -> None:
    schedule = decay_step_size(0.1, 10.0)
    assert schedule(0) == pytest.approx(0.1)
    assert schedule(1) == pytest.approx(0.05)
    assert schedule(9) == pytest.approx(0.01)


def test_decay_schedule_is_non_increasing() -> None:
    schedule = decay_step_size(0.5, 0.3)
    values = [schedule(t) for t in range(200)]
    assert all(a >= b for a, b in zip(values, values[1:]))


def test_decay_with_zero_lambda_equals_fixed() -> None:
    decay = decay_step_size(0.1, 0.0)
    fixed = fixed_step_size(0.1)
    assert all(decay(t) == fixed(t) for t in range(1000))


def test_invalid_schedule_parameters() -> None:
    with pytest.raises(ValueError):
        fixed_step_size(0.0)
    with pytest.raises(ValueError):
        decay_step_size(-0.1, 1.0)
    with pytest.raises(ValueError):
        decay_step_size(0.1, -1.0)


def test_make_step_size_follows_config() -> None:
    fixed = make_step_size(resolve_options(step=0.2))
    decay = make_step_size(resolve_options(step=0.2, step_alg="decay", **{"lambda": 5.0}))
    assert fixed(10) == 0.2
    assert decay(0) == pytest.approx(0.2)
    assert decay(10) == pytest.approx(0.2 / (1 + 0.2 * 5.0 * 10))
