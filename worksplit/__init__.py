"""Core package for balancing work across workers with startup delays.

Exports the solver entry points, the objective evaluator and base data
structures.
"""

from worksplit.config import SolverParams, load_config  # noqa: F401
from worksplit.errors import (  # noqa: F401
    AllocationError,
    NumericalFaultError,
    PreconditionError,
)
from worksplit.evaluation import cost, finish_times, smoothed_cost  # noqa: F401
from worksplit.models import SolveResult, Workload  # noqa: F401
from worksplit.operations import validate_allocation  # noqa: F401
from worksplit.solver import solve, solve_detailed, solve_workload  # noqa: F401

__all__ = [
    "AllocationError",
    "NumericalFaultError",
    "PreconditionError",
    "SolveResult",
    "SolverParams",
    "Workload",
    "cost",
    "finish_times",
    "load_config",
    "smoothed_cost",
    "solve",
    "solve_detailed",
    "solve_workload",
    "validate_allocation",
]
