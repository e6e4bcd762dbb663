"""Scalar / Matrix value model.

A ``Value`` is exactly one of two things: a ``Scalar`` wrapping a float,
or a ``Matrix``.  There is no implicit promotion between the two; the
dispatch layer in ``engine.functions`` decides case by case.
"""

from dataclasses import dataclass
from typing import Union

from engine.matrix import Matrix


@dataclass(frozen=True)
class Scalar:
    value: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", float(self.value))

    def __str__(self) -> str:
        from engine.formatting import format_float
        return format_float(self.value)


Value = Union[Scalar, Matrix]


def is_scalar(value: Value) -> bool:
    return isinstance(value, Scalar)


def is_matrix(value: Value) -> bool:
    return isinstance(value, Matrix)


def kind_of(value: Value) -> str:
    """``"scalar"`` or ``"matrix"``; anything else is a programming error."""
    if isinstance(value, Scalar):
        return "scalar"
    if isinstance(value, Matrix):
        return "matrix"
    raise TypeError(f"Not an engine value: {value!r}")
