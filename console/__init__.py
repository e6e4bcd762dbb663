from console.evaluator import Evaluator, EvaluationError
from console.parser import ParseError, parse
from console.repl import Repl

__all__ = ["Evaluator", "EvaluationError", "ParseError", "parse", "Repl"]
