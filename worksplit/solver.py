"""Smoothed work-split solver.

Given transfer times ``x`` and compute rates ``c`` the exact problem is

    t* = argmin_{t >= 0, sum(t) = 1} max_i (x[i] + c[i]*t[i])

i.e. split the work so that all workers nominally finish at the same time.
The solver minimizes the smooth surrogate ``sum_i (x[i] + c[i]*t[i])^p`` for
an even ``p`` instead, with a majorize-minimize / projected-gradient loop:

1. a fixed diagonal majorizer of the Hessian, taken where ``t[i] = 1``;
2. the gradient projected onto the tangent space of ``sum(t) = 1``;
3. backtracking on the step length until the candidate is non-negative;
4. a uniform rescale so the shares sum to one again.

All arithmetic is float32. Larger ``p`` tracks the makespan more closely but
overflows sooner; the solver reports that as ``NumericalFaultError``.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np

from worksplit.config import (
    DEFAULT_MAX_HALVINGS,
    DEFAULT_MAX_ITERATIONS,
    SolverParams,
)
from worksplit.errors import NumericalFaultError
from worksplit.evaluation import cost
from worksplit.models import SolveResult, Workload
from worksplit.operations import (
    create_uniform_allocation,
    validate_allocation,
    validate_budget,
    validate_inputs,
)

logger = logging.getLogger("worksplit.solver")

# relative to the largest share, smaller shares no longer register in a float32 sum
SHARE_FLOOR = np.finfo(np.float32).eps


def majorizer(x: np.ndarray, c: np.ndarray, p: int) -> np.ndarray:
    """Diagonal curvature bound ``(p-1) * c^2 * (x + c)^(p-2)``.

    Evaluated at ``t[i] = 1``, the largest value of ``x[i] + c[i]*t[i]`` on
    the simplex, so it bounds the second derivative everywhere on it.
    """
    pf = np.float32(p)
    return (pf - np.float32(1)) * c**2 * (x + c) ** (pf - np.float32(2))


def gradient(t: np.ndarray, x: np.ndarray, c: np.ndarray, p: int) -> np.ndarray:
    """Partial derivatives ``c[i] * (x[i] + c[i]*t[i])^(p-1)`` (scaled by 1/p)."""
    return c * (x + c * t) ** (np.float32(p) - np.float32(1))


def project_tangent(g: np.ndarray) -> np.ndarray:
    """Remove the mean so a step along the result keeps ``sum(t)`` fixed."""
    return g - np.float32(g.mean(dtype=np.float32))


def _feasible_step(
    t: np.ndarray,
    gn: np.ndarray,
    denom: np.ndarray,
    max_halvings: int,
    iteration: int = 0,
) -> Optional[np.ndarray]:
    step = np.float32(1.0)
    for _ in range(max_halvings + 1):
        candidate = t - step * gn / denom
        if not np.all(np.isfinite(candidate)):
            raise NumericalFaultError(
                f"Non-finite candidate allocation at iteration {iteration}", iteration
            )
        if not np.any(candidate < 0):
            return candidate
        step = step / np.float32(2)
    return None


def backtrack_feasible(
    t: np.ndarray,
    gn: np.ndarray,
    denom: np.ndarray,
    max_halvings: int = DEFAULT_MAX_HALVINGS,
    iteration: int = 0,
) -> np.ndarray:
    """Scaled step ``t - step*gn/denom`` with the largest feasible ``step``.

    Starts from ``step = 1`` and halves until every share is non-negative.

    Raises:
        NumericalFaultError: If no feasible candidate is found within
            ``max_halvings`` halvings or the candidate is not finite.
    """
    candidate = _feasible_step(t, gn, denom, max_halvings, iteration=iteration)
    if candidate is None:
        raise NumericalFaultError(
            f"No feasible step after {max_halvings} halvings at iteration {iteration}",
            iteration,
        )
    return candidate


def pinned_at_boundary(
    t: np.ndarray,
    gn: np.ndarray,
    denom: np.ndarray,
    max_halvings: int = DEFAULT_MAX_HALVINGS,
) -> bool:
    """True when every share blocking the smallest step has vanished.

    A share blocks if it still goes negative at ``step = 2**-max_halvings``.
    It has vanished when it is at most ``SHARE_FLOOR`` times the largest
    share. From there each further feasible step only shrinks it, so the
    iterate no longer moves measurably.
    """
    smallest = np.float32(2.0) ** np.float32(-max_halvings)
    blocking = (t - smallest * gn / denom) < 0
    if not np.any(blocking):
        return False
    return bool(np.all(t[blocking] <= SHARE_FLOOR * t.max()))


def renormalize(t: np.ndarray, iteration: int = 0) -> np.ndarray:
    """Rescale ``t`` to sum to one.

    Only corrects floating-point drift; this is not a projection onto the
    simplex.
    """
    total = np.float32(t.sum(dtype=np.float32))
    if not np.isfinite(total) or total <= 0:
        raise NumericalFaultError(
            f"Cannot renormalize allocation with sum {total} at iteration {iteration}",
            iteration,
        )
    return t / total


def solve_detailed(
    transfer_times: Sequence[float],
    compute_rates: Sequence[float],
    p: int,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    tol: Optional[float] = None,
    max_halvings: int = DEFAULT_MAX_HALVINGS,
) -> SolveResult:
    """Approximately optimal work split with iteration bookkeeping.

    Args:
        transfer_times: Fixed delay per worker, non-negative.
        compute_rates: Time per unit of work per worker, non-negative.
        p: Even smoothing exponent, at least 2.
        max_iterations: Outer iteration budget (1024 by default).
        tol: When given, stop once successive costs differ by less than
            ``cost * tol``. ``None`` always runs the full budget.
        max_halvings: Upper bound on step halvings per iteration.

    Returns:
        SolveResult whose allocation is non-negative and sums to one.

    Raises:
        PreconditionError: Invalid inputs, detected before any computation.
        NumericalFaultError: Overflow, a zero curvature bound (zero compute
            rate) or an exhausted backtracking search.
    """
    x, c, p = validate_inputs(transfer_times, compute_rates, p)
    validate_budget(max_iterations, tol, max_halvings)

    with np.errstate(over="ignore", invalid="ignore", divide="ignore", under="ignore"):
        denom = majorizer(x, c, p)
        if not np.all(np.isfinite(denom)):
            raise NumericalFaultError(f"Curvature bound overflows in float32 for p={p}")
        flat = np.flatnonzero(denom <= 0)
        if flat.size:
            raise NumericalFaultError(
                f"Zero curvature bound for workers {flat.tolist()} (compute rate must be > 0)"
            )

        t = create_uniform_allocation(len(x))
        cost_history: list[float] = []
        old_cost = cost(t, x, c)
        iterations = 0
        converged = False
        for it in range(1, max_iterations + 1):
            g = gradient(t, x, c, p)
            if not np.all(np.isfinite(g)):
                raise NumericalFaultError(f"Non-finite gradient at iteration {it} (p={p})", it)
            gn = project_tangent(g)

            candidate = _feasible_step(t, gn, denom, max_halvings, iteration=it)
            if candidate is None:
                if not pinned_at_boundary(t, gn, denom, max_halvings):
                    raise NumericalFaultError(
                        f"No feasible step after {max_halvings} halvings at iteration {it}", it
                    )
                logger.debug("[solver] iterate pinned at simplex boundary at iter %d", it)
                converged = True
                break
            t = renormalize(candidate, iteration=it)
            iterations = it

            new_cost = cost(t, x, c)
            cost_history.append(new_cost)
            if tol is not None and abs(new_cost - old_cost) < new_cost * tol:
                logger.debug("[solver] tolerance reached at iter %d cost=%s", it, new_cost)
                converged = True
                break
            old_cost = new_cost

    try:
        validate_allocation(t)
    except ValueError as e:
        raise NumericalFaultError(f"Solver produced an invalid allocation: {e}", iterations) from e
    final_cost = cost(t, x, c)
    logger.info(
        "[solver] done workers=%d p=%d iterations=%d cost=%.6g converged=%s",
        len(x),
        p,
        iterations,
        final_cost,
        converged,
    )
    return SolveResult(
        allocation=t,
        cost=final_cost,
        iterations=iterations,
        converged=converged,
        cost_history=cost_history,
    )


def solve(
    transfer_times: Sequence[float],
    compute_rates: Sequence[float],
    p: int,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    tol: Optional[float] = None,
    max_halvings: int = DEFAULT_MAX_HALVINGS,
) -> np.ndarray:
    """Return only the allocation of ``solve_detailed``."""
    return solve_detailed(
        transfer_times,
        compute_rates,
        p,
        max_iterations=max_iterations,
        tol=tol,
        max_halvings=max_halvings,
    ).allocation


def solve_workload(workload: Workload, params: Optional[SolverParams] = None) -> SolveResult:
    """Run the solver on a ``Workload`` with a ``SolverParams`` bundle."""
    if params is None:
        params = SolverParams()
    return solve_detailed(
        workload.transfer_times,
        workload.compute_rates,
        params.p,
        max_iterations=params.max_iterations,
        tol=params.tol,
        max_halvings=params.max_halvings,
    )
