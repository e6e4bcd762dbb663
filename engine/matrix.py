"""Dense real-valued matrix with elementary linear algebra.

Storage is a flat row-major list: element ``(row, col)`` lives at
``data[row * cols + col]`` and ``len(data) == rows * cols`` always holds.
A matrix with zero rows or zero columns is the (valid) empty matrix.

Every operation returns a new matrix with its own storage.  Destructive
algorithms (elimination for the determinant and the inverse) work on a
private copy, never on ``self`` or on an argument.
"""

import logging
from typing import Iterable, Iterator, Optional, Sequence

from engine.errors import (
    DimensionMismatch, IndexOutOfRange, InvalidExponent, NonSquare, Singular,
)
from engine.tolerance import is_integral, is_zero, nearly_equal

logger = logging.getLogger(__name__)


class Matrix:
    """A ``rows x cols`` matrix of floats."""

    __slots__ = ("_rows", "_cols", "_data")

    def __init__(self, rows: int, cols: int,
                 data: Optional[Iterable[float]] = None) -> None:
        if rows < 0 or cols < 0:
            raise DimensionMismatch(f"Invalid matrix dimensions {rows}x{cols}.")
        self._rows = rows
        self._cols = cols
        if data is None:
            self._data = [0.0] * (rows * cols)
        else:
            self._data = [float(v) for v in data]
            if len(self._data) != rows * cols:
                raise DimensionMismatch(
                    f"A {rows}x{cols} matrix needs {rows * cols} elements, "
                    f"got {len(self._data)}."
                )

    # ── Constructors ────────────────────────────────────────────────────

    @classmethod
    def identity(cls, n: int) -> "Matrix":
        """n x n matrix with ones on the diagonal."""
        result = cls(n, n)
        for i in range(n):
            result._data[i * n + i] = 1.0
        return result

    @classmethod
    def from_scalar(cls, value: float) -> "Matrix":
        return cls(1, 1, [value])

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[float]]) -> "Matrix":
        """Build a matrix from a list of equal-length rows.

        ``[]`` gives the empty 0x0 matrix; ragged rows raise
        ``DimensionMismatch``.
        """
        if len(rows) == 0:
            return cls(0, 0)
        cols = len(rows[0])
        data = []
        for i, row in enumerate(rows):
            if len(row) != cols:
                raise DimensionMismatch(
                    f"All rows must have the same number of columns: row {i + 1} "
                    f"has {len(row)}, expected {cols}."
                )
            data.extend(row)
        return cls(len(rows), cols, data)

    # ── Shape and access ────────────────────────────────────────────────

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def shape(self) -> tuple[int, int]:
        return self._rows, self._cols

    def _index(self, row: int, col: int) -> int:
        if not (0 <= row < self._rows and 0 <= col < self._cols):
            raise IndexOutOfRange(
                f"Index ({row}, {col}) out of range for a "
                f"{self._rows}x{self._cols} matrix."
            )
        return row * self._cols + col

    def get(self, row: int, col: int) -> float:
        return self._data[self._index(row, col)]

    def set(self, row: int, col: int, value: float) -> None:
        self._data[self._index(row, col)] = float(value)

    def is_square(self) -> bool:
        return self._rows == self._cols

    def is_empty(self) -> bool:
        return self._rows == 0 or self._cols == 0

    def is_number(self) -> bool:
        """True for a 1x1 matrix."""
        return self._rows == 1 and self._cols == 1

    def is_identity(self) -> bool:
        if not self.is_square():
            return False
        for i, j, value in self:
            if not nearly_equal(value, 1.0 if i == j else 0.0):
                return False
        return True

    def copy(self) -> "Matrix":
        return Matrix(self._rows, self._cols, self._data)

    def to_rows(self) -> list[list[float]]:
        c = self._cols
        return [self._data[r * c:(r + 1) * c] for r in range(self._rows)]

    def __iter__(self) -> Iterator[tuple[int, int, float]]:
        """Yield ``(row, col, value)`` in row-major order."""
        for index, value in enumerate(self._data):
            yield index // self._cols, index % self._cols, value

    def __eq__(self, other) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and self._data == other._data

    __hash__ = None

    def approx_equal(self, other: "Matrix") -> bool:
        """Element-wise ``nearly_equal`` comparison of two same-shaped matrices."""
        if self.shape != other.shape:
            return False
        return all(nearly_equal(a, b) for a, b in zip(self._data, other._data))

    def __repr__(self) -> str:
        return f"Matrix.from_rows({self.to_rows()!r})"

    def __str__(self) -> str:
        from engine.formatting import format_matrix
        return format_matrix(self)

    # ── Elementary row operations (in place) ────────────────────────────
    # Used only on private working copies.

    def swap_rows(self, i: int, j: int) -> None:
        """Permutation: exchange rows *i* and *j*."""
        if i == j:
            return
        c = self._cols
        a, b = self._index(i, 0), self._index(j, 0)
        d = self._data
        d[a:a + c], d[b:b + c] = d[b:b + c], d[a:a + c]

    def scale_row(self, i: int, factor: float) -> None:
        """Scaling: row_i *= factor."""
        start = self._index(i, 0)
        d = self._data
        for k in range(start, start + self._cols):
            d[k] *= factor

    def add_row(self, target: int, source: int, factor: float) -> None:
        """Row combination: row_target += factor * row_source."""
        t = self._index(target, 0)
        s = self._index(source, 0)
        d = self._data
        for k in range(self._cols):
            d[t + k] += factor * d[s + k]

    def pivot_row(self, col: int, start: int) -> int:
        """Row index >= *start* holding the largest |value| in *col*."""
        best = start
        best_abs = abs(self.get(start, col))
        for r in range(start + 1, self._rows):
            candidate = abs(self.get(r, col))
            if candidate > best_abs:
                best, best_abs = r, candidate
        return best

    # ── Arithmetic ──────────────────────────────────────────────────────

    def add(self, other: "Matrix") -> "Matrix":
        if self.shape != other.shape:
            raise DimensionMismatch(
                "Matrix addition is only defined for matrices of equal size "
                f"(got {self._rows}x{self._cols} and {other.rows}x{other.cols})."
            )
        return Matrix(self._rows, self._cols,
                      [a + b for a, b in zip(self._data, other._data)])

    def multiply(self, other: "Matrix") -> "Matrix":
        """Matrix product of an MxN and an NxP matrix (result MxP)."""
        if self._cols != other.rows:
            raise DimensionMismatch(
                "Matrix multiplication needs MxN and NxP operands "
                f"(got {self._rows}x{self._cols} and {other.rows}x{other.cols})."
            )
        n, p = self._cols, other.cols
        a, b = self._data, other._data
        data = []
        for m in range(self._rows):
            row = m * n
            for j in range(p):
                total = 0.0
                for k in range(n):
                    total += a[row + k] * b[k * p + j]
                data.append(total)
        return Matrix(self._rows, p, data)

    def scale(self, factor: float) -> "Matrix":
        return Matrix(self._rows, self._cols, [v * factor for v in self._data])

    def transpose(self) -> "Matrix":
        result = Matrix(self._cols, self._rows)
        for i, j, value in self:
            result._data[j * self._rows + i] = value
        return result

    def pow(self, exponent: float) -> "Matrix":
        """Integer power by binary exponentiation (square and multiply).

        A negative exponent raises the inverse to ``|exponent|``.
        """
        if not self.is_square():
            raise NonSquare("Matrix powers are only defined for square matrices.")
        if not is_integral(exponent):
            raise InvalidExponent("A matrix can only be raised to an integer power.")
        n = int(round(exponent))
        base = self.inverse() if n < 0 else self
        result = Matrix.identity(self._rows)
        k = abs(n)
        while k:
            if k & 1:
                result = result.multiply(base)
            k >>= 1
            if k:
                base = base.multiply(base)
        return result

    def determinant(self) -> float:
        """Determinant by Gaussian elimination with partial pivoting.

        Row swaps flip the sign; row combinations leave it unchanged; the
        result is the signed product of the pivots.  A column with no
        usable pivot means the matrix is singular and ``0.0`` is returned.
        """
        if not self.is_square():
            raise NonSquare("The determinant is only defined for square matrices.")
        work = self.copy()
        n = self._rows
        det = 1.0
        for k in range(n):
            p = work.pivot_row(k, k)
            if is_zero(work.get(p, k)):
                logger.debug("determinant: no pivot in column %d, matrix is singular", k)
                return 0.0
            if p != k:
                work.swap_rows(p, k)
                det = -det
            pivot = work.get(k, k)
            for i in range(k + 1, n):
                factor = work.get(i, k) / pivot
                work.add_row(i, k, -factor)
            det *= pivot
        return det

    def inverse(self) -> "Matrix":
        """Inverse by Gauss-Jordan elimination with partial pivoting.

        Every row operation applied to the working copy is mirrored on an
        accumulator that starts as the identity:

        1. swap/combine rows to clear everything below the diagonal,
        2. scale each row so its pivot is 1,
        3. clear everything above the diagonal, last row first.

        When the working copy has become the identity, the accumulator is
        the inverse.
        """
        if not self.is_square():
            raise NonSquare("The inverse is only defined for square matrices.")
        if is_zero(self.determinant()):
            raise Singular("The matrix is singular (its determinant is zero); it has no inverse.")

        n = self._rows
        work = self.copy()
        acc = Matrix.identity(n)

        for k in range(n):
            p = work.pivot_row(k, k)
            if p != k:
                work.swap_rows(p, k)
                acc.swap_rows(p, k)
            pivot = work.get(k, k)
            for i in range(k + 1, n):
                factor = work.get(i, k) / pivot
                work.add_row(i, k, -factor)
                acc.add_row(i, k, -factor)

        for k in range(n):
            factor = 1.0 / work.get(k, k)
            work.scale_row(k, factor)
            acc.scale_row(k, factor)

        for k in reversed(range(n)):
            for i in reversed(range(k)):
                factor = work.get(i, k)
                work.add_row(i, k, -factor)
                acc.add_row(i, k, -factor)

        return acc
