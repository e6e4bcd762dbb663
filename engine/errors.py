"""Error taxonomy for the numeric engine.

Every user-facing failure derives from ``EngineError`` (a ``ValueError``),
so callers can keep treating bad input the usual way::

    try:
        result = functions.divide(a, b)
    except ValueError as e:
        show(str(e))

``IndexOutOfRange`` is the exception: it signals an engine bug and is
*not* a ``ValueError``.
"""

from typing import Optional


class EngineError(ValueError):
    """Base class for every recoverable engine error."""


class DimensionMismatch(EngineError):
    pass


class NonSquare(EngineError):
    pass


class Singular(EngineError):
    pass


class DivisionByZero(EngineError):
    pass


class InvalidExponent(EngineError):
    pass


class NegativeFactorial(EngineError):
    pass


class NegativeSqrt(EngineError):
    pass


class DomainError(EngineError):
    """A real-valued function was called outside its real domain."""


class UndefinedOperation(EngineError):
    """The operation is not defined for this kind of operand."""


class InvalidSystem(EngineError):
    """Malformed ``linsolve`` input (not a system ``Ax = b``)."""


class IncompatibleSystem(EngineError):
    def __init__(self, message: str = "The system is incompatible: it has no solution.") -> None:
        super().__init__(message)


class IndeterminateSystem(EngineError):
    """The system has infinitely many solutions.

    ``parametrization`` holds one line per dependent variable, e.g.
    ``x1 = 2 - 1*x2``.
    """

    def __init__(self, parametrization: list[str], dependent: int,
                 independent: int, message: Optional[str] = None) -> None:
        self.parametrization = list(parametrization)
        self.dependent = dependent
        self.independent = independent
        if message is None:
            message = (
                "The system has no unique solution (compatible indeterminate).\n"
                + "\n".join(self.parametrization)
                + f"\n{dependent} dependent and {independent} independent "
                  f"variable{'s' if independent != 1 else ''}."
            )
        super().__init__(message)


class IndexOutOfRange(IndexError):
    """Matrix access outside its bounds; always an engine bug."""
