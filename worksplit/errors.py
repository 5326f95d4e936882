"""Exceptions raised by the work-split solver."""


class AllocationError(Exception):
    """Base class for all errors raised by ``worksplit``."""


class PreconditionError(AllocationError, ValueError):
    """Caller supplied invalid input (lengths, exponent, signs, config)."""


class NumericalFaultError(AllocationError, ArithmeticError):
    """The iteration hit a non-finite value or could not find a feasible step.

    Attributes:
        iteration: Outer iteration (1-based) where the fault was detected,
            or 0 when it happened before the first iteration.
    """

    def __init__(self, message: str, iteration: int = 0) -> None:
        super().__init__(message)
        self.iteration = iteration
