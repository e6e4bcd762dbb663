"""Evaluate calculator syntax trees against a variable environment.

The evaluator resolves identifiers, builds matrices from literals and
forwards every operator / function call to ``engine.functions`` (or
``engine.linsolve``).  It never prints; results and errors go back to
the caller.
"""

import logging
import math
from typing import Callable, Optional

from engine import functions
from engine.linsolve import linsolve
from engine.matrix import Matrix
from engine.value import Scalar, Value
from console.parser import (
    BinaryOp, Call, Ident, MatrixLiteral, Node, Number, Statement, UnaryOp, parse,
)

logger = logging.getLogger(__name__)

DEFAULT_VARIABLES = {
    "pi": Scalar(math.pi),
    "e": Scalar(math.e),
}

_UNARY = {
    "-": functions.negate,
    "!": functions.factorial,
    "'": functions.transpose,
}

_BINARY = {
    "+": functions.add,
    "-": functions.subtract,
    "*": functions.multiply,
    "/": functions.divide,
    "\\": functions.right_divide,
    "^": functions.pow,
}

# name -> (arity, implementation)
FUNCTIONS: dict[str, tuple[int, Callable[..., Value]]] = {
    "abs": (1, functions.abs),
    "sqrt": (1, functions.sqrt),
    "pow": (2, functions.pow),
    "inv": (1, functions.inverse),
    "factorial": (1, functions.factorial),
    "sin": (1, functions.sin),
    "cos": (1, functions.cos),
    "tan": (1, functions.tan),
    "log": (1, functions.log),
    "transpose": (1, functions.transpose),
    "det": (1, functions.determinant),
    "linsolve": (2, linsolve),
}


class EvaluationError(ValueError):
    """Name resolution, arity or literal errors found while evaluating."""


class Evaluator:
    """Holds the variables of a session and evaluates input against them."""

    def __init__(self, variables: Optional[dict[str, Value]] = None) -> None:
        self._variables: dict[str, Value] = dict(DEFAULT_VARIABLES)
        if variables:
            self._variables.update(variables)

    @property
    def variables(self) -> dict[str, Value]:
        return dict(self._variables)

    def assign(self, name: str, value: Value) -> None:
        self._variables[name] = value

    def clear(self) -> None:
        """Forget user variables; ``pi`` and ``e`` come back."""
        self._variables = dict(DEFAULT_VARIABLES)

    # ── Statements ───────────────────────────────────────────────────────

    def run(self, source: str) -> list[tuple[str, Value]]:
        """Parse and evaluate every statement in *source*.

        Each result is stored under its assignment target (or ``ans``).
        Evaluation stops at the first failing statement; assignments made
        by earlier statements are kept.
        """
        results = []
        for statement in parse(source):
            results.append(self.execute(statement))
        return results

    def execute(self, statement: Statement) -> tuple[str, Value]:
        name = statement.assign_to or "ans"
        value = self.evaluate(statement.expr)
        self._variables[name] = value
        logger.debug("%s <- %s", name, type(value).__name__)
        return name, value

    # ── Expressions ──────────────────────────────────────────────────────

    def evaluate(self, node: Node) -> Value:
        if isinstance(node, Number):
            return Scalar(node.value)
        if isinstance(node, Ident):
            return self._lookup(node.name)
        if isinstance(node, MatrixLiteral):
            return self._build_matrix(node)
        if isinstance(node, UnaryOp):
            operand = self.evaluate(node.operand)
            if node.op == "+":
                return operand
            return _UNARY[node.op](operand)
        if isinstance(node, BinaryOp):
            left = self.evaluate(node.left)
            right = self.evaluate(node.right)
            return _BINARY[node.op](left, right)
        if isinstance(node, Call):
            return self._call(node)
        raise TypeError(f"Unknown syntax node: {node!r}")

    def _lookup(self, name: str) -> Value:
        try:
            return self._variables[name]
        except KeyError:
            raise EvaluationError(f'The variable "{name}" is not defined.') from None

    def _build_matrix(self, node: MatrixLiteral) -> Matrix:
        if not node.rows:
            return Matrix(0, 0)
        cols = len(node.rows[0])
        matrix = Matrix(len(node.rows), cols)
        for i, row in enumerate(node.rows):
            if len(row) != cols:
                raise EvaluationError(
                    "Malformed matrix: every row must have the same number of columns."
                )
            for j, element in enumerate(row):
                value = self.evaluate(element)
                if isinstance(value, Matrix):
                    raise EvaluationError("A matrix cannot be declared inside another matrix.")
                matrix.set(i, j, value.value)
        return matrix

    def _call(self, node: Call) -> Value:
        if node.func not in FUNCTIONS:
            raise EvaluationError(f"The function {node.func}() is not defined.")
        arity, fn = FUNCTIONS[node.func]
        if len(node.args) != arity:
            plural = "argument" if arity == 1 else "arguments"
            raise EvaluationError(f"The function {node.func}() takes {arity} {plural}.")
        args = [self.evaluate(arg) for arg in node.args]
        return fn(*args)
