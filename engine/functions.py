"""Arithmetic and named functions over engine values.

Every function takes already-evaluated ``Value`` operands (``Scalar`` or
``Matrix``) and returns a new ``Value`` or raises an ``EngineError``.
Scalar/matrix combinations follow these rules:

    operation        scalar,scalar   matrix,matrix        mixed
    add              a + b           element-wise         undefined
    multiply         a * b           matrix product       scales the matrix
    inverse          1 / a           Gauss-Jordan         n/a
    pow(base, n)     a ** n          integer power        n must be a scalar

``divide(a, b)`` is ``a * inverse(b)`` and ``right_divide(a, b)`` (the
``a \\ b`` operator) is ``inverse(a) * b``, i.e. the solution of ``a x = b``.
Transpose and determinant are matrix-only; the transcendental functions,
``abs``, ``sqrt`` and ``factorial`` are scalar-only.
"""

import math

from engine.errors import (
    DivisionByZero, DomainError, InvalidExponent, NegativeFactorial,
    NegativeSqrt, UndefinedOperation,
)
from engine.matrix import Matrix
from engine.tolerance import is_integral, is_zero
from engine.value import Scalar, Value

# 171! no longer fits in a double.
_LARGEST_FACTORIAL = 170


def _require_scalar(x: Value, message: str) -> float:
    if isinstance(x, Matrix):
        raise UndefinedOperation(message)
    return x.value


def _require_matrix(x: Value, message: str) -> Matrix:
    if isinstance(x, Scalar):
        raise UndefinedOperation(message)
    return x


# ── Arithmetic operators ────────────────────────────────────────────────

def add(left: Value, right: Value) -> Value:
    if isinstance(left, Scalar) and isinstance(right, Scalar):
        return Scalar(left.value + right.value)
    if isinstance(left, Matrix) and isinstance(right, Matrix):
        return left.add(right)
    raise UndefinedOperation("Addition between a matrix and a scalar is not defined.")


def negate(x: Value) -> Value:
    if isinstance(x, Scalar):
        return Scalar(-x.value)
    return x.scale(-1.0)


def subtract(left: Value, right: Value) -> Value:
    return add(left, negate(right))


def multiply(left: Value, right: Value) -> Value:
    if isinstance(left, Scalar) and isinstance(right, Scalar):
        return Scalar(left.value * right.value)
    if isinstance(left, Matrix) and isinstance(right, Matrix):
        return left.multiply(right)
    if isinstance(left, Scalar):
        return right.scale(left.value)
    return left.scale(right.value)


def inverse(x: Value) -> Value:
    if isinstance(x, Scalar):
        if is_zero(x.value):
            raise DivisionByZero("1/0 is not defined.")
        return Scalar(1.0 / x.value)
    return x.inverse()


def divide(left: Value, right: Value) -> Value:
    """``left / right``, defined as ``left * inverse(right)``."""
    return multiply(left, inverse(right))


def right_divide(left: Value, right: Value) -> Value:
    """``left \\ right``, defined as ``inverse(left) * right``."""
    return multiply(inverse(left), right)


def pow(base: Value, exponent: Value) -> Value:
    if isinstance(exponent, Matrix):
        raise InvalidExponent("The exponent cannot be a matrix.")
    n = exponent.value
    if isinstance(base, Matrix):
        return base.pow(n)

    a = base.value
    if is_zero(a) and n < 0:
        raise DivisionByZero("0 raised to a negative power is not defined.")
    if a < 0:
        if not is_integral(n):
            raise DomainError(
                "A negative number raised to a fractional power is not a real number."
            )
        n = float(round(n))
    try:
        return Scalar(math.pow(a, n))
    except OverflowError:
        # Saturate like IEEE arithmetic does.
        negative = a < 0 and int(n) % 2 == 1
        return Scalar(-math.inf if negative else math.inf)


# ── Scalar-only functions ───────────────────────────────────────────────

def abs(x: Value) -> Value:
    value = _require_scalar(x, "abs() is only defined for real numbers.")
    return Scalar(math.fabs(value))


def sqrt(x: Value) -> Value:
    value = _require_scalar(x, "sqrt() is only defined for real numbers.")
    if value < 0:
        raise NegativeSqrt("Cannot take the square root of a negative number.")
    return Scalar(math.sqrt(value))


def factorial(x: Value) -> Value:
    """Product ``2 * 3 * ... * floor(n)``; ``0! == 1! == 1``."""
    value = _require_scalar(x, "The factorial is not defined for matrices.")
    if value < 0:
        raise NegativeFactorial("Cannot take the factorial of a negative number.")
    if math.isnan(value):
        return Scalar(value)
    if value > _LARGEST_FACTORIAL:
        return Scalar(math.inf)
    result = 1.0
    for i in range(2, int(value) + 1):
        result *= i
    return Scalar(result)


def _trig(fn, x: Value, message: str) -> Value:
    value = _require_scalar(x, message)
    if math.isinf(value):
        raise DomainError(f"{fn.__name__}() is not defined for infinite values.")
    return Scalar(fn(value))


def sin(x: Value) -> Value:
    return _trig(math.sin, x, "The sine is not defined for matrices.")


def cos(x: Value) -> Value:
    return _trig(math.cos, x, "The cosine is not defined for matrices.")


def tan(x: Value) -> Value:
    return _trig(math.tan, x, "The tangent is not defined for matrices.")


def log(x: Value) -> Value:
    """Natural logarithm."""
    value = _require_scalar(x, "The logarithm is not defined for matrices.")
    if value <= 0:
        raise DomainError("The logarithm is only defined for positive numbers.")
    return Scalar(math.log(value))


# ── Matrix-only functions ───────────────────────────────────────────────

def transpose(x: Value) -> Value:
    matrix = _require_matrix(x, "The transpose is not defined for scalars.")
    return matrix.transpose()


def determinant(x: Value) -> Value:
    matrix = _require_matrix(x, "The determinant is not defined for scalars.")
    return Scalar(matrix.determinant())


det = determinant
