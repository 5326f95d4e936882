"""Solver configuration.

``SolverParams`` bundles the tunable knobs of the solver so that callers can
keep one object per experiment and load it from YAML. Layout of the file::

    solver:
      p: 8
      max_iterations: 1024
      tol: null
      max_halvings: 128
    workload:
      transfer_times: [1.0, 2.0]
      compute_rates: [1.0, 1.0]

Both sections are optional; missing keys fall back to the defaults below.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import yaml

from worksplit.errors import PreconditionError
from worksplit.models import Workload
from worksplit.operations import validate_budget, validate_exponent

DEFAULT_P = 8
DEFAULT_MAX_ITERATIONS = 1024
DEFAULT_MAX_HALVINGS = 128


@dataclass(slots=True)
class SolverParams:
    """Hyper-parameters of the smoothed solver.

    Attributes:
        p: Even smoothing exponent; larger values track the max more closely
            but raise the risk of float32 overflow.
        max_iterations: Outer iteration budget.
        tol: Relative early-exit tolerance on successive costs, ``None``
            runs the full budget.
        max_halvings: Upper bound on step halvings per backtracking search.
    """
    p: int = DEFAULT_P
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    tol: Optional[float] = None
    max_halvings: int = DEFAULT_MAX_HALVINGS


def load_config(config_file: str = "config.yaml") -> dict:
    """Load configuration from YAML file."""
    with open(config_file, "r", encoding="utf-8") as file:
        config = yaml.safe_load(file)
    return config or {}


def params_from_config(config: dict[str, Any]) -> SolverParams:
    """Build ``SolverParams`` from the ``solver`` section of a config dict.

    Raises:
        PreconditionError: If a value has the wrong type or range.
    """
    section = config.get("solver") or {}
    if not isinstance(section, dict):
        raise PreconditionError("solver section must be a mapping")
    p = validate_exponent(section.get("p", DEFAULT_P))
    max_iterations = section.get("max_iterations", DEFAULT_MAX_ITERATIONS)
    max_halvings = section.get("max_halvings", DEFAULT_MAX_HALVINGS)
    tol = section.get("tol")
    if tol is not None:
        try:
            tol = float(tol)
        except (TypeError, ValueError) as e:
            raise PreconditionError(f"solver.tol must be a number, got {tol!r}") from e
    validate_budget(max_iterations, tol, max_halvings)
    return SolverParams(p=p, max_iterations=max_iterations, tol=tol, max_halvings=max_halvings)


def workload_from_config(config: dict[str, Any]) -> Workload:
    """Build a ``Workload`` from the ``workload`` section of a config dict."""
    section = config.get("workload")
    if not isinstance(section, dict):
        raise PreconditionError("workload section must be a mapping")
    if "transfer_times" not in section or "compute_rates" not in section:
        raise PreconditionError("workload needs both transfer_times and compute_rates")
    return Workload.from_sequences(section["transfer_times"], section["compute_rates"])
