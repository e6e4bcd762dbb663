import math

import pytest

from console.evaluator import FUNCTIONS, EvaluationError, Evaluator
from engine.errors import DivisionByZero, IncompatibleSystem, IndeterminateSystem, UndefinedOperation
from engine.matrix import Matrix
from engine.value import Scalar


def _value(source: str, evaluator: Evaluator = None):
    evaluator = evaluator or Evaluator()
    return evaluator.run(source)[-1][1]


class TestExpressions:
    @pytest.mark.parametrize(
        "source,expected",
        [
            ("1 + 2 * 3", 7),
            ("(1 + 2) * 3", 9),
            ("2 ^ 3 ^ 2", 512),
            ("-2 ^ 2", 4),
            ("2 ^ -1", 0.5),
            ("3! + 1", 7),
            ("10 / 4", 2.5),
            ("4 \\ 2", 0.5),
            ("+5", 5),
            ("abs(-3) + sqrt(16)", 7),
            ("pow(2, 8)", 256),
            ("factorial(5)", 120),
            ("inv(4)", 0.25),
        ],
    )
    def test_scalar_arithmetic(self, source, expected) -> None:
        assert _value(source) == Scalar(expected)

    def test_constants(self) -> None:
        assert _value("pi") == Scalar(math.pi)
        assert _value("e") == Scalar(math.e)
        assert _value("cos(pi)").value == pytest.approx(-1.0)
        assert _value("log(e)").value == pytest.approx(1.0)

    def test_matrix_literal_with_expressions(self) -> None:
        assert _value("[1 + 1, 2 * 3; -1, 2^2]") == Matrix.from_rows([[2, 6], [-1, 4]])

    def test_empty_matrix_literal(self) -> None:
        assert _value("[]") == Matrix(0, 0)

    def test_matrix_operations(self) -> None:
        ev = Evaluator()
        ev.run("A = [1, 2; 3, 4]")
        assert _value("A'", ev) == Matrix.from_rows([[1, 3], [2, 4]])
        assert _value("transpose(A)", ev) == Matrix.from_rows([[1, 3], [2, 4]])
        assert _value("det(A)", ev).value == pytest.approx(-2.0)
        assert _value("2 * A", ev) == Matrix.from_rows([[2, 4], [6, 8]])
        assert _value("A ^ 2", ev) == Matrix.from_rows([[7, 10], [15, 22]])
        assert _value("A * inv(A)", ev).approx_equal(Matrix.identity(2))


class TestStatements:
    def test_assignment_and_ans(self) -> None:
        ev = Evaluator()
        results = ev.run("x = 3; x * 2")
        assert results == [("x", Scalar(3)), ("ans", Scalar(6))]
        assert ev.variables["x"] == Scalar(3)
        assert ev.variables["ans"] == Scalar(6)
        assert _value("ans + 1", ev) == Scalar(7)

    def test_solving_a_system(self) -> None:
        ev = Evaluator()
        results = ev.run("A = [2, 1; 1, 1]; b = [3; 2]; x = linsolve(A, b); y = A \\ b")
        assert [name for name, _ in results] == ["A", "b", "x", "y"]
        assert ev.variables["x"].approx_equal(Matrix.from_rows([[1], [1]]))
        assert ev.variables["y"].approx_equal(ev.variables["x"])

    def test_multiline_input(self) -> None:
        ev = Evaluator()
        ev.run("a = 1\nb = a + 1")
        assert ev.variables["b"] == Scalar(2)

    def test_failure_keeps_earlier_assignments(self) -> None:
        ev = Evaluator()
        with pytest.raises(EvaluationError):
            ev.run("a = 5; b = missing; c = 1")
        assert ev.variables["a"] == Scalar(5)
        assert "b" not in ev.variables
        assert "c" not in ev.variables

    def test_variables_is_a_copy(self) -> None:
        ev = Evaluator()
        ev.variables["x"] = Scalar(1)
        assert "x" not in ev.variables

    def test_initial_variables_and_clear(self) -> None:
        ev = Evaluator({"k": Scalar(2)})
        assert _value("k * pi", ev) == Scalar(2 * math.pi)
        ev.assign("pi", Scalar(3))
        ev.clear()
        assert "k" not in ev.variables
        assert ev.variables["pi"] == Scalar(math.pi)


class TestErrors:
    def test_undefined_variable(self) -> None:
        with pytest.raises(EvaluationError, match='The variable "y" is not defined'):
            _value("y + 1")

    def test_undefined_function(self) -> None:
        with pytest.raises(EvaluationError, match=r"The function foo\(\) is not defined"):
            _value("foo(1)")

    @pytest.mark.parametrize(
        "source,message",
        [
            ("sqrt(1, 2)", r"sqrt\(\) takes 1 argument\."),
            ("linsolve([1])", r"linsolve\(\) takes 2 arguments\."),
        ],
    )
    def test_wrong_arity(self, source, message) -> None:
        with pytest.raises(EvaluationError, match=message):
            _value(source)

    def test_ragged_matrix(self) -> None:
        with pytest.raises(EvaluationError, match="Malformed matrix"):
            _value("[1, 2; 3]")

    def test_nested_matrix(self) -> None:
        with pytest.raises(EvaluationError, match="inside another matrix"):
            _value("[[1, 2], 3]")

    def test_engine_errors_propagate(self) -> None:
        with pytest.raises(DivisionByZero):
            _value("1 / 0")
        with pytest.raises(UndefinedOperation):
            _value("[1, 2] + 1")
        with pytest.raises(IncompatibleSystem):
            _value("linsolve([1, 1; 2, 2], [2; 5])")
        with pytest.raises(IndeterminateSystem):
            _value("linsolve([1, 1; 2, 2], [2; 4])")

    def test_every_error_is_a_value_error(self) -> None:
        assert issubclass(EvaluationError, ValueError)


def test_function_table_names() -> None:
    assert set(FUNCTIONS) == {
        "abs", "sqrt", "pow", "inv", "factorial", "sin", "cos", "tan", "log",
        "transpose", "det", "linsolve",
    }
