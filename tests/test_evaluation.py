import numpy as np
import pytest

from worksplit.evaluation import cost, finish_times, smoothed_cost


def test_cost_is_largest_finish_time() -> None:
    t = np.array([0.5, 0.25, 0.25], dtype=np.float32)
    x = [1.0, 0.0, 2.0]
    c = [2.0, 4.0, 1.0]
    # finish times 2.0, 1.0, 2.25
    assert cost(t, x, c) == pytest.approx(2.25)
    assert finish_times(t, x, c).tolist() == [2.0, 1.0, 2.25]


def test_cost_uses_absolute_value() -> None:
    t = np.array([1.0, 0.0], dtype=np.float32)
    assert cost(t, [-3.0, 1.0], [1.0, 1.0]) == pytest.approx(2.0)


def test_cost_of_empty_vectors_is_zero() -> None:
    assert cost(np.array([]), np.array([]), np.array([])) == 0.0


def test_finish_times_are_float32() -> None:
    ft = finish_times([0.5, 0.5], [1, 2], [1, 1])
    assert ft.dtype == np.float32


def test_smoothed_cost_matches_power_sum() -> None:
    t = np.array([0.5, 0.5], dtype=np.float32)
    assert smoothed_cost(t, [1.0, 0.0], [1.0, 2.0], 2) == pytest.approx(1.5**2 + 1.0**2)
    assert smoothed_cost(t, [1.0, 0.0], [1.0, 2.0], 4) == pytest.approx(1.5**4 + 1.0**4)


def test_smoothed_cost_bounds_cost() -> None:
    # max_i f_i <= (sum_i f_i^p)^(1/p) <= n^(1/p) * max_i f_i
    t = np.array([0.2, 0.3, 0.5], dtype=np.float32)
    x = [0.1, 0.4, 0.2]
    c = [1.0, 1.5, 0.8]
    exact = cost(t, x, c)
    for p in (2, 4, 8):
        norm = smoothed_cost(t, x, c, p) ** (1.0 / p)
        assert exact <= norm + 1e-6
        assert norm <= 3 ** (1.0 / p) * exact + 1e-6
