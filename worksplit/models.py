"""Core data structures for work-split problems.

This module defines:
    Workload    -- immutable container with per-worker transfer times and
                   compute rates for one problem instance.
    SolveResult -- allocation returned by the solver plus its objective value.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from worksplit.operations import validate_vectors


@dataclass(frozen=True)
class Workload:
    """Immutable representation of one work-split instance.

    Attributes:
        transfer_times: float32 vector, x[i] is the fixed delay before worker
            i can start.
        compute_rates: float32 vector, c[i] is the time worker i needs per
            unit of work.
        workers_number: Number of workers (n).
    """

    transfer_times: np.ndarray
    compute_rates: np.ndarray
    workers_number: int

    @classmethod
    def from_sequences(
        cls,
        transfer_times: Sequence[float],
        compute_rates: Sequence[float],
    ) -> "Workload":
        """Validate both vectors and freeze them into a ``Workload``."""
        x, c = validate_vectors(transfer_times, compute_rates)
        x.setflags(write=False)
        c.setflags(write=False)
        return cls(transfer_times=x, compute_rates=c, workers_number=len(x))


@dataclass(frozen=True)
class SolveResult:
    """Allocation plus objective value and iteration bookkeeping.

    Fields:
        allocation: Share of the workload per worker (non-negative, sums to 1).
        cost: Largest finish time x[i] + c[i]*t[i] under ``allocation``.
        iterations: Outer iterations actually performed.
        converged: True when the run stopped before exhausting the iteration
            budget (tolerance met or iterate pinned at the simplex boundary).
        cost_history: Cost after each outer iteration.
    """

    allocation: np.ndarray
    cost: float
    iterations: int
    converged: bool
    cost_history: list[float] = field(default_factory=list)
