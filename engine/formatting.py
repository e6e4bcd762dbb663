"""Text rendering of engine values for the console and the API."""

import math

from engine.matrix import Matrix
from engine.tolerance import is_zero, nearly_equal

DEFAULT_PRECISION = 4


def format_float(value: float, precision: int = DEFAULT_PRECISION) -> str:
    """Format a float so it reads like an integer whenever possible.

    - tolerance-zero prints as ``0`` (never ``-0``);
    - integral values drop the decimal point (``7`` not ``7.0``);
    - everything else gets *precision* decimals.
    """
    if is_zero(value):
        return "0"
    if not math.isfinite(value):
        return str(value)
    rounded = round(value)
    if nearly_equal(value, float(rounded)):
        return str(int(rounded))
    return f"{value:.{precision}f}"


def format_matrix(matrix: Matrix, precision: int = DEFAULT_PRECISION) -> str:
    """Render a matrix as right-justified columns.

    A 1x1 matrix prints as its only element; the empty matrix as ``[]``.
    """
    if matrix.is_empty():
        return "[]"
    if matrix.is_number():
        return format_float(matrix.get(0, 0), precision)

    cells = [[format_float(v, precision) for v in row] for row in matrix.to_rows()]
    widths = [max(len(row[j]) for row in cells) for j in range(matrix.cols)]
    lines = [
        "".join(" " * (3 + widths[j] - len(cell)) + cell for j, cell in enumerate(row))
        for row in cells
    ]
    return "\n\n" + "\n".join(lines) + "\n"


def format_value(value, precision: int = DEFAULT_PRECISION) -> str:
    """Render a Scalar or a Matrix."""
    if isinstance(value, Matrix):
        return format_matrix(value, precision)
    return format_float(value.value, precision)
