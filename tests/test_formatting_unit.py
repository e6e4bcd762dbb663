import math

import pytest

from engine.formatting import format_float, format_matrix, format_value
from engine.matrix import Matrix
from engine.value import Scalar


@pytest.mark.parametrize(
    "value,expected",
    [
        (0.0, "0"),
        (-0.0, "0"),
        (1e-15, "0"),
        (7.0, "7"),
        (-3.0, "-3"),
        (2.0000000000001, "2"),
        (0.5, "0.5000"),
        (-1.23456, "-1.2346"),
        (math.pi, "3.1416"),
        (math.inf, "inf"),
        (-math.inf, "-inf"),
        (math.nan, "nan"),
    ],
)
def test_format_float(value, expected) -> None:
    assert format_float(value) == expected


def test_format_float_precision() -> None:
    assert format_float(math.pi, 2) == "3.14"
    assert format_float(math.pi, 6) == "3.141593"


def test_format_matrix_columns_are_right_justified() -> None:
    text = format_matrix(Matrix.from_rows([[1, -20], [300, 0.5]]))
    assert text == (
        "\n\n"
        "     1      -20\n"
        "   300   0.5000\n"
    )


def test_format_matrix_special_shapes() -> None:
    assert format_matrix(Matrix(0, 0)) == "[]"
    assert format_matrix(Matrix.from_rows([[2.5]])) == "2.5000"


def test_format_value_dispatches() -> None:
    assert format_value(Scalar(3)) == "3"
    assert format_value(Matrix.from_rows([[1, 2]])) == "\n\n   1   2\n"
    assert str(Matrix.from_rows([[1], [2]])) == "\n\n   1\n   2\n"
