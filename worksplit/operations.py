"""Input checks and allocation utilities.

Concepts
--------
Allocation
    A float32 vector ``t`` with one share per worker. A valid allocation lies
    on the probability simplex: every share is non-negative and the shares
    sum to one. The solver keeps this invariant at the end of every outer
    iteration; functions here produce and verify such vectors.
"""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from worksplit.errors import PreconditionError


def validate_vectors(
    transfer_times: Sequence[float],
    compute_rates: Sequence[float],
) -> tuple[np.ndarray, np.ndarray]:
    """Coerce both per-worker vectors to float32 and check them.

    Args:
        transfer_times: Fixed delay per worker before it can start working.
        compute_rates: Time per unit of work, one entry per worker.

    Returns:
        Tuple ``(x, c)`` of fresh one-dimensional float32 arrays.

    Raises:
        PreconditionError: If either vector is not one-dimensional, the
            lengths differ, the vectors are empty, or an entry is negative
            or not finite.
    """
    try:
        x = np.array(transfer_times, dtype=np.float32)
        c = np.array(compute_rates, dtype=np.float32)
    except (TypeError, ValueError) as e:
        raise PreconditionError(f"Inputs are not numeric vectors: {e}") from e
    if x.ndim != 1 or c.ndim != 1:
        raise PreconditionError("Transfer times and compute rates must be one-dimensional")
    if len(x) != len(c):
        raise PreconditionError(
            f"Length mismatch: {len(x)} transfer times vs {len(c)} compute rates"
        )
    if len(x) == 0:
        raise PreconditionError("At least one worker is required")
    for name, vec in (("transfer_times", x), ("compute_rates", c)):
        if not np.all(np.isfinite(vec)):
            raise PreconditionError(f"{name} contains non-finite values")
        if np.any(vec < 0):
            raise PreconditionError(f"{name} contains negative values")
    return x, c


def validate_exponent(p: int) -> int:
    """Check the smoothing exponent is an even integer of at least 2."""
    if isinstance(p, bool) or not isinstance(p, (int, np.integer)):
        raise PreconditionError(f"Exponent p must be an integer, got {p!r}")
    if p < 2 or p % 2 != 0:
        raise PreconditionError(f"Exponent p must be even and >= 2, got {p}")
    return int(p)


def validate_budget(max_iterations: int, tol: Optional[float], max_halvings: int) -> None:
    """Check the iteration budget, early-exit tolerance and halving bound.

    Raises:
        PreconditionError: If ``max_iterations`` is not a positive integer,
            ``max_halvings`` is not a non-negative integer, or ``tol`` is
            given and not positive.
    """
    if isinstance(max_iterations, bool) or not isinstance(max_iterations, int) or max_iterations <= 0:
        raise PreconditionError(f"max_iterations must be a positive integer, got {max_iterations!r}")
    if isinstance(max_halvings, bool) or not isinstance(max_halvings, int) or max_halvings < 0:
        raise PreconditionError(f"max_halvings must be a non-negative integer, got {max_halvings!r}")
    if tol is not None and not tol > 0:
        raise PreconditionError(f"tol must be positive, got {tol}")


def validate_inputs(
    transfer_times: Sequence[float],
    compute_rates: Sequence[float],
    p: int,
) -> tuple[np.ndarray, np.ndarray, int]:
    """Run every solver precondition; returns ``(x, c, p)`` ready to use."""
    p = validate_exponent(p)
    x, c = validate_vectors(transfer_times, compute_rates)
    return x, c, p


def create_uniform_allocation(workers_number: int) -> np.ndarray:
    """Create the uniform split ``1/n`` used as the solver's start point.

    Args:
        workers_number: Number of workers, must be positive.

    Returns:
        float32 array of length ``workers_number`` filled with ``1/n``.
    """
    if workers_number <= 0:
        raise PreconditionError("At least one worker is required")
    return np.full(workers_number, np.float32(1.0) / np.float32(workers_number), dtype=np.float32)


def validate_allocation(allocation: Sequence[float], atol: float = 1e-4) -> bool:
    """Validate an allocation lies on the probability simplex.

    Args:
        allocation: Candidate per-worker shares.
        atol: Absolute tolerance applied to negativity and to the sum.

    Returns:
        True if the allocation is valid. (Return value mostly for convenience
        so the function can be used inside assertions / conditional flows.)

    Raises:
        ValueError: If an entry is non-finite or below ``-atol``, or the sum
            deviates from one by more than ``atol``.
    """
    t = np.asarray(allocation, dtype=np.float64)
    if t.ndim != 1 or len(t) == 0:
        raise ValueError("Allocation must be a non-empty one-dimensional vector")
    if not np.all(np.isfinite(t)):
        raise ValueError("Allocation contains non-finite values")
    worst = int(np.argmin(t))
    if t[worst] < -atol:
        raise ValueError(f"Negative share for worker {worst}: {t[worst]}")
    total = float(t.sum())
    if abs(total - 1.0) > atol:
        raise ValueError(f"Shares sum to {total}, expected 1")
    return True
