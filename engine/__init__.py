"""
MatCalc engine: dense matrices, scalar/matrix arithmetic and linear systems.

Quick start:
    from engine import Matrix, Scalar, functions, linsolve

    a = Matrix.from_rows([[2, 1], [1, 1]])
    b = Matrix.from_rows([[3], [2]])
    x = linsolve(a, b)            # -> Matrix [[1], [1]]
    functions.determinant(a)      # -> Scalar(1.0)
"""

__version__ = "0.3.0"

from engine.errors import EngineError
from engine.matrix import Matrix
from engine.value import Scalar, Value
from engine.tolerance import nearly_equal
from engine.linsolve import SystemKind, SystemSolution, linsolve, solve_system
from engine import functions

__all__ = [
    "EngineError", "Matrix", "Scalar", "Value", "nearly_equal",
    "SystemKind", "SystemSolution", "linsolve", "solve_system", "functions",
]
