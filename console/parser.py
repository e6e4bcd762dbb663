"""Text to syntax tree for the calculator language.

A line holds one or more statements separated by ``;`` (outside brackets)
or newlines.  A statement is either an expression or an assignment
``name = expression``::

    A = [2, 1; 1, 1]; b = [3; 2]
    linsolve(A, b)
    det(A') ^ 2 + 3!

Operator precedence, lowest to highest:

    + -        binary, left associative
    * / \\      binary, left associative
    ^          binary, right associative
    ! '        postfix (factorial, transpose)
    + -        prefix
"""

import re
from dataclasses import dataclass, field
from typing import Optional, Union


class ParseError(ValueError):
    """Syntax error; ``position`` is the 0-based character offset."""

    def __init__(self, message: str, position: int) -> None:
        super().__init__(f"{message} (at position {position + 1})")
        self.position = position


# ── Syntax tree ─────────────────────────────────────────────────────────

@dataclass
class Number:
    value: float


@dataclass
class Ident:
    name: str


@dataclass
class MatrixLiteral:
    rows: list = field(default_factory=list)


@dataclass
class Call:
    func: str
    args: list = field(default_factory=list)


@dataclass
class UnaryOp:
    op: str
    operand: "Node"


@dataclass
class BinaryOp:
    op: str
    left: "Node"
    right: "Node"


Node = Union[Number, Ident, MatrixLiteral, Call, UnaryOp, BinaryOp]


@dataclass
class Statement:
    expr: Node
    assign_to: Optional[str] = None


# ── Tokenizer ───────────────────────────────────────────────────────────

_TOKEN_RE = re.compile(r"""
    (?P<number>(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)
  | (?P<ident>[A-Za-z_][A-Za-z0-9_]*)
  | (?P<newline>\n)
  | (?P<op>[-+*/\\^!'=()\[\],;])
  | (?P<space>[ \t\r]+)
""", re.VERBOSE)


@dataclass
class Token:
    kind: str
    text: str
    pos: int


def tokenize(source: str) -> list[Token]:
    tokens = []
    pos = 0
    while pos < len(source):
        m = _TOKEN_RE.match(source, pos)
        if m is None:
            raise ParseError(f"Unexpected character '{source[pos]}'", pos)
        kind = m.lastgroup
        if kind != "space":
            tokens.append(Token(kind, m.group(), pos))
        pos = m.end()
    tokens.append(Token("end", "", len(source)))
    return tokens


# ── Pratt parser ────────────────────────────────────────────────────────

# (left binding power, right binding power)
_INFIX = {
    "+": (10, 11), "-": (10, 11),
    "*": (20, 21), "/": (20, 21), "\\": (20, 21),
    "^": (30, 30),
}
_POSTFIX_BP = 40
_PREFIX_BP = 50
_POSTFIX = ("!", "'")
_PREFIX = ("+", "-")


class _Parser:
    def __init__(self, source: str) -> None:
        self.tokens = tokenize(source)
        self.index = 0

    def peek(self, offset: int = 0) -> Token:
        return self.tokens[min(self.index + offset, len(self.tokens) - 1)]

    def advance(self) -> Token:
        tok = self.tokens[self.index]
        if tok.kind != "end":
            self.index += 1
        return tok

    def at(self, text: str) -> bool:
        tok = self.peek()
        return tok.kind == "op" and tok.text == text

    def expect(self, text: str) -> Token:
        if not self.at(text):
            tok = self.peek()
            found = f"'{tok.text}'" if tok.kind != "end" else "end of input"
            raise ParseError(f"Expected '{text}' but found {found}", tok.pos)
        return self.advance()

    def _at_separator(self) -> bool:
        tok = self.peek()
        return tok.kind == "newline" or (tok.kind == "op" and tok.text == ";")

    def program(self) -> list[Statement]:
        statements = []
        while self.peek().kind != "end":
            if self._at_separator():
                self.advance()
                continue
            statements.append(self.statement())
            if not (self._at_separator() or self.peek().kind == "end"):
                tok = self.peek()
                raise ParseError(f"Unexpected '{tok.text}'", tok.pos)
        return statements

    def statement(self) -> Statement:
        tok = self.peek()
        nxt = self.peek(1)
        if tok.kind == "ident" and nxt.kind == "op" and nxt.text == "=":
            self.advance()
            self.advance()
            return Statement(self.expression(), assign_to=tok.text)
        return Statement(self.expression())

    def expression(self, min_bp: int = 0) -> Node:
        left = self.prefix()
        while True:
            tok = self.peek()
            if tok.kind != "op":
                break
            if tok.text in _POSTFIX:
                if _POSTFIX_BP < min_bp:
                    break
                self.advance()
                left = UnaryOp(tok.text, left)
                continue
            if tok.text in _INFIX:
                lbp, rbp = _INFIX[tok.text]
                if lbp < min_bp:
                    break
                self.advance()
                left = BinaryOp(tok.text, left, self.expression(rbp))
                continue
            break
        return left

    def prefix(self) -> Node:
        tok = self.advance()
        if tok.kind == "number":
            return Number(float(tok.text))
        if tok.kind == "ident":
            if self.at("("):
                return self.call(tok.text)
            return Ident(tok.text)
        if tok.kind == "op":
            if tok.text in _PREFIX:
                return UnaryOp(tok.text, self.expression(_PREFIX_BP))
            if tok.text == "(":
                inner = self.expression()
                self.expect(")")
                return inner
            if tok.text == "[":
                return self.matrix()
        if tok.kind == "end":
            raise ParseError("Unexpected end of input", tok.pos)
        raise ParseError(f"Unexpected '{tok.text.strip() or 'line break'}'", tok.pos)

    def call(self, name: str) -> Call:
        self.expect("(")
        args = []
        if not self.at(")"):
            args.append(self.expression())
            while self.at(","):
                self.advance()
                args.append(self.expression())
        self.expect(")")
        return Call(name, args)

    def matrix(self) -> MatrixLiteral:
        """Parse after ``[``: ``,`` separates columns, ``;`` or a newline rows.

        Elements are ordinary expressions, so ``[1 -2]`` is the one element
        ``1 - 2``.  Two elements with no separator between them are an error.
        """
        rows = [[]]
        while True:
            tok = self.peek()
            if tok.kind == "op" and tok.text == "]":
                self.advance()
                break
            if tok.kind == "end":
                raise ParseError("Unclosed '['", tok.pos)
            if self._at_separator():
                self.advance()
                if rows[-1]:
                    rows.append([])
                continue
            rows[-1].append(self.expression())
            if self.at(","):
                self.advance()
            elif not (self._at_separator() or self.at("]") or self.peek().kind == "end"):
                tok = self.peek()
                raise ParseError(f"Expected ',', ';' or ']' but found '{tok.text}'", tok.pos)
        if not rows[-1]:
            rows.pop()
        return MatrixLiteral(rows)


def parse(source: str) -> list[Statement]:
    """Parse a line of input into statements."""
    return _Parser(source).program()


def parse_expression(source: str) -> Node:
    """Parse a single expression (no assignment, no separators)."""
    parser = _Parser(source)
    expr = parser.expression()
    tok = parser.peek()
    if tok.kind != "end":
        raise ParseError(f"Unexpected '{tok.text}'", tok.pos)
    return expr
