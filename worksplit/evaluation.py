"""Objective evaluation for a given allocation.

``cost`` is the exact (L-infinity) makespan of an allocation and is what
callers should use to judge the quality of a solve. ``smoothed_cost`` is the
even p-power surrogate the solver actually minimizes.
"""

from __future__ import annotations

import numpy as np


def finish_times(t: np.ndarray, x: np.ndarray, c: np.ndarray) -> np.ndarray:
    """Per-worker finish time ``x[i] + c[i]*t[i]`` in float32."""
    return np.asarray(x, dtype=np.float32) + np.asarray(c, dtype=np.float32) * np.asarray(
        t, dtype=np.float32
    )


def cost(t: np.ndarray, x: np.ndarray, c: np.ndarray) -> float:
    """Largest absolute finish time ``max_i |x[i] + c[i]*t[i]|``.

    Returns 0.0 for empty vectors.
    """
    ft = finish_times(t, x, c)
    if ft.size == 0:
        return 0.0
    return float(np.max(np.abs(ft)))


def smoothed_cost(t: np.ndarray, x: np.ndarray, c: np.ndarray, p: int) -> float:
    """Surrogate objective ``sum_i (x[i] + c[i]*t[i])^p``."""
    ft = finish_times(t, x, c)
    return float(np.sum(ft ** np.float32(p)))
