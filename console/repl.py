"""
MatCalc — interactive read-eval-print loop.

Reads a line, evaluates it with an ``Evaluator`` and prints the value of
the last statement as ``name = value``.  Errors are printed and the loop
keeps going.
"""

import logging
from typing import Callable, Optional

from engine.formatting import DEFAULT_PRECISION, format_value
from engine.value import Value
from console import storage
from console.evaluator import Evaluator
from console.parser import ParseError

logger = logging.getLogger(__name__)

PROMPT = "> "
CLEAR_SCREEN = "\x1b[2J\x1b[1;1H"

BANNER = """\
#=========================#
#  MatCalc                #
#  matrix calculator      #
#=========================#

Type "exit" to quit, "clc" to clear the screen.
"""

EXIT_COMMANDS = ("exit", "quit")


class Repl:
    """One interactive session.

    *input_fn* and *output* default to the terminal and can be replaced
    (tests feed scripted lines and collect the printed text).
    """

    def __init__(self, evaluator: Optional[Evaluator] = None,
                 input_fn: Callable[[str], str] = input,
                 output: Callable[[str], None] = print,
                 precision: int = DEFAULT_PRECISION,
                 save_history: bool = True,
                 show_banner: bool = True) -> None:
        self.evaluator = evaluator or Evaluator()
        self._input = input_fn
        self._output = output
        self.precision = precision
        self.save_history = save_history
        self.show_banner = show_banner

    @staticmethod
    def _friendly_error(exc: Exception) -> str:
        """Turn an exception into the line shown to the user."""
        if isinstance(exc, ParseError):
            return f"Syntax error: {exc}"
        if isinstance(exc, ValueError):
            return f"Error: {exc}"
        return f"Internal error: {exc}"

    def render(self, name: str, value: Value) -> str:
        return f"{name} = {format_value(value, self.precision)}"

    def handle(self, line: str) -> bool:
        """Process one input line; return False when the session should end."""
        line = line.strip()
        if not line:
            return True
        if line in EXIT_COMMANDS:
            return False
        if line == "clc":
            self._output(CLEAR_SCREEN)
            return True
        if line == "who":
            names = sorted(self.evaluator.variables)
            self._output("  ".join(names))
            return True
        if line == "history":
            for record in reversed(storage.get_history()):
                self._output(f"{record['expression']}  ->  {record['answer']}")
            return True

        try:
            results = self.evaluator.run(line)
        except ValueError as e:
            self._output(self._friendly_error(e))
            return True
        except Exception as e:
            logger.exception("Unexpected failure evaluating %r", line)
            self._output(self._friendly_error(e))
            return True

        if results:
            text = self.render(*results[-1])
            self._output(text)
            if self.save_history:
                storage.add_history(line, text)
        return True

    def run(self) -> None:
        if self.show_banner:
            self._output(BANNER)
        while True:
            try:
                line = self._input(PROMPT)
            except (EOFError, KeyboardInterrupt):
                self._output("")
                break
            if not self.handle(line):
                break
