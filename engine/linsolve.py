"""Solve and classify linear systems ``Ax = b``.

A system is *compatible determined* (exactly one solution), *compatible
indeterminate* (infinitely many) or *incompatible* (none).

``solve_system`` classifies and returns a ``SystemSolution`` describing
the outcome.  ``linsolve`` is the calculator-facing contract on top of
it: it returns the solution vector, or raises ``IndeterminateSystem`` /
``IncompatibleSystem`` when there is no single vector to return.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from engine.errors import IncompatibleSystem, IndeterminateSystem, InvalidSystem
from engine.formatting import format_float
from engine.matrix import Matrix
from engine.tolerance import is_zero
from engine.value import Value

logger = logging.getLogger(__name__)


class SystemKind(Enum):
    DETERMINED = "compatible determined"
    INDETERMINATE = "compatible indeterminate"
    INCOMPATIBLE = "incompatible"


@dataclass
class SystemSolution:
    kind: SystemKind
    rank: int
    unknowns: int
    solution: Optional[Matrix] = None
    parametrization: list[str] = field(default_factory=list)

    @property
    def dependent(self) -> int:
        return self.rank

    @property
    def independent(self) -> int:
        return self.unknowns - self.rank


# ── Validation ──────────────────────────────────────────────────────────

def _validate(a: Value, b: Value) -> tuple[Matrix, Matrix]:
    if not isinstance(a, Matrix):
        raise InvalidSystem("A must be a matrix.")
    if not isinstance(b, Matrix):
        raise InvalidSystem("b must be a matrix.")
    if a.cols == 0:
        raise InvalidSystem("The coefficient matrix A cannot be empty.")
    if a.rows != b.rows:
        raise InvalidSystem(
            f"A and b must have the same number of rows (got {a.rows} and {b.rows})."
        )
    if b.cols != 1:
        raise InvalidSystem(f"b must be a single column (got {b.cols} columns).")
    return a, b


# ── Elimination ─────────────────────────────────────────────────────────

def _augment(a: Matrix, b: Matrix) -> Matrix:
    """Build ``[A | b]`` with its own storage."""
    rows, cols = a.rows, a.cols
    augmented = Matrix(rows, cols + 1)
    for i, j, value in a:
        augmented.set(i, j, value)
    for i in range(rows):
        augmented.set(i, cols, b.get(i, 0))
    return augmented


def _reduce(augmented: Matrix, unknowns: int) -> None:
    """Bring the augmented matrix to reduced row-echelon form, in place.

    The pivot walks the diagonal as ``(pivot_row, pivot_col)``.  A column
    whose best candidate (largest magnitude at or below ``pivot_row``) is
    zero holds no pivot: only ``pivot_col`` advances.
    """
    rows = augmented.rows
    pivot_row = pivot_col = 0
    while pivot_row < rows and pivot_col < unknowns:
        p = augmented.pivot_row(pivot_col, pivot_row)
        if is_zero(augmented.get(p, pivot_col)):
            pivot_col += 1
            continue
        augmented.swap_rows(p, pivot_row)

        augmented.scale_row(pivot_row, 1.0 / augmented.get(pivot_row, pivot_col))
        for i in range(rows):
            if i != pivot_row:
                augmented.add_row(i, pivot_row, -augmented.get(i, pivot_col))

        pivot_row += 1
        pivot_col += 1


def _is_zero_row(augmented: Matrix, row: int, unknowns: int) -> bool:
    return all(is_zero(augmented.get(row, j)) for j in range(unknowns))


def _parametrize(reduced: Matrix, rank: int, unknowns: int) -> list[str]:
    """Describe each pivot variable in terms of the free ones.

    A row ``x1 + 2*x3 = 5`` becomes ``x1 = 5 - 2*x3``.
    """
    lines = []
    for i in range(rank):
        j = 0
        while j < unknowns and is_zero(reduced.get(i, j)):
            j += 1
        line = f"x{j + 1} = {format_float(reduced.get(i, unknowns))}"
        for k in range(j + 1, unknowns):
            coefficient = reduced.get(i, k)
            if not is_zero(coefficient):
                sign = "-" if coefficient > 0 else "+"
                line += f" {sign} {format_float(abs(coefficient))}*x{k + 1}"
        lines.append(line)
    return lines


# ── Public API ──────────────────────────────────────────────────────────

def solve_system(a: Value, b: Value) -> SystemSolution:
    """Classify ``Ax = b`` and solve it when the solution is unique.

    Raises ``InvalidSystem`` when *a* / *b* do not form a system: both
    must be matrices, ``A`` must have at least one column, ``A`` and ``b``
    must have the same number of rows and ``b`` must be a single column.
    """
    a, b = _validate(a, b)
    unknowns = a.cols

    if a.is_square() and not is_zero(a.determinant()):
        logger.debug("linsolve: A is invertible, solving with its inverse")
        return SystemSolution(
            kind=SystemKind.DETERMINED, rank=unknowns, unknowns=unknowns,
            solution=a.inverse().multiply(b),
        )

    augmented = _augment(a, b)
    _reduce(augmented, unknowns)

    rank = 0
    for i in reversed(range(augmented.rows)):
        if not _is_zero_row(augmented, i, unknowns):
            rank = i + 1
            break

    for i in reversed(range(rank, augmented.rows)):
        if not is_zero(augmented.get(i, unknowns)):
            logger.debug("linsolve: row %d reads 0 = %r, system is incompatible",
                         i, augmented.get(i, unknowns))
            return SystemSolution(kind=SystemKind.INCOMPATIBLE, rank=rank,
                                  unknowns=unknowns)

    if rank == unknowns:
        solution = Matrix(unknowns, 1)
        for i in range(unknowns):
            solution.set(i, 0, augmented.get(i, unknowns))
        logger.debug("linsolve: rank %d, unique solution", rank)
        return SystemSolution(kind=SystemKind.DETERMINED, rank=rank,
                              unknowns=unknowns, solution=solution)

    logger.debug("linsolve: rank %d < %d unknowns, infinitely many solutions",
                 rank, unknowns)
    return SystemSolution(
        kind=SystemKind.INDETERMINATE, rank=rank, unknowns=unknowns,
        parametrization=_parametrize(augmented, rank, unknowns),
    )


def linsolve(a: Value, b: Value) -> Value:
    """Return the unique solution of ``Ax = b`` as a column matrix.

    Raises ``InvalidSystem`` for malformed input, ``IncompatibleSystem``
    when there is no solution and ``IndeterminateSystem`` (carrying the
    parametrized solution set) when there are infinitely many.
    """
    result = solve_system(a, b)
    if result.kind is SystemKind.INCOMPATIBLE:
        raise IncompatibleSystem()
    if result.kind is SystemKind.INDETERMINATE:
        raise IndeterminateSystem(result.parametrization, result.dependent,
                                  result.independent)
    return result.solution
