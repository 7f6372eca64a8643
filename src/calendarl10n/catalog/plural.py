"""Compile gettext ``Plural-Forms`` headers into plural selection callables.

Catalogues store their plural rule in the header notation used by gettext,
for example ``nplurals=2; plural=(n != 1);``. The expression is a C-style
integer expression over the single variable ``n``; it is tokenised, parsed
with a recursive-descent parser and folded into nested closures.
"""

from __future__ import annotations

import operator
import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Callable, NamedTuple, NoReturn

from .errors import InvalidCatalog

GERMAN_PLURAL_FORMS = "nplurals=2; plural=(n != 1);"

_HEADER_PATTERN = re.compile(
    r"^\s*nplurals\s*=\s*(?P<count>\d+)\s*;\s*plural\s*=\s*(?P<expression>.+?)\s*;?\s*$",
    re.DOTALL,
)
_TOKEN_PATTERN = re.compile(
    r"\s*(?:(?P<number>\d+)|(?P<name>[A-Za-z_]\w*)|(?P<op>&&|\|\||==|!=|<=|>=|[<>!?:()+\-*/%]))"
)

Evaluator = Callable[[int], int]

# Limits keep both the parser and the folded closures well inside the
# interpreter recursion limit.
_MAX_TOKENS = 256
_MAX_DEPTH = 32


def _c_divide(left: int, right: int) -> int:
    if right == 0:
        return 0
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient


def _c_modulo(left: int, right: int) -> int:
    if right == 0:
        return 0
    remainder = abs(left) % abs(right)
    return -remainder if left < 0 else remainder


def _as_flag(function: Callable[[int, int], bool]) -> Callable[[int, int], int]:
    return lambda left, right: int(function(left, right))


_BINARY_OPERATORS: dict[str, Callable[[int, int], int]] = {
    "*": operator.mul,
    "/": _c_divide,
    "%": _c_modulo,
    "+": operator.add,
    "-": operator.sub,
    "<": _as_flag(operator.lt),
    "<=": _as_flag(operator.le),
    ">": _as_flag(operator.gt),
    ">=": _as_flag(operator.ge),
    "==": _as_flag(operator.eq),
    "!=": _as_flag(operator.ne),
}

# Binary precedence levels from loosest to tightest binding, excluding the
# short-circuit operators which are handled separately.
_PRECEDENCE: tuple[tuple[str, ...], ...] = (
    ("==", "!="),
    ("<", "<=", ">", ">="),
    ("+", "-"),
    ("*", "/", "%"),
)


class _Term(NamedTuple):
    evaluate: Evaluator
    constant: int | None = None


def _constant(value: int) -> _Term:
    return _Term(lambda n: value, value)


def _tokenise(expression: str) -> list[str]:
    tokens: list[str] = []
    position = 0
    length = len(expression)

    while position < length:
        match = _TOKEN_PATTERN.match(expression, position)
        if match is None:
            if expression[position:].strip():
                raise InvalidCatalog(
                    f"Unexpected character {expression[position:].strip()[0]!r} "
                    f"in plural expression '{expression}'"
                )
            break
        position = match.end()
        name = match.group("name")
        if name is not None and name != "n":
            raise InvalidCatalog(
                f"Unknown variable '{name}' in plural expression '{expression}'"
            )
        tokens.append(match.group(match.lastgroup or "op"))

    if not tokens:
        raise InvalidCatalog("Plural expression must not be empty")
    return tokens


class _Parser:
    """Recursive-descent parser following C operator precedence."""

    def __init__(self, expression: str) -> None:
        self._expression = expression
        self._tokens = _tokenise(expression)
        self._index = 0
        self._depth = 0
        if len(self._tokens) > _MAX_TOKENS:
            self._fail(f"more than {_MAX_TOKENS} tokens")

    def parse(self) -> _Term:
        term = self._ternary()
        if self._index != len(self._tokens):
            self._fail(f"unexpected token '{self._tokens[self._index]}'")
        return term

    def _fail(self, reason: str) -> NoReturn:
        raise InvalidCatalog(f"Invalid plural expression '{self._expression}': {reason}")

    def _peek(self) -> str | None:
        if self._index < len(self._tokens):
            return self._tokens[self._index]
        return None

    def _advance(self) -> str:
        token = self._peek()
        if token is None:
            self._fail("unexpected end of expression")
        self._index += 1
        return token

    def _expect(self, token: str) -> None:
        if self._peek() != token:
            self._fail(f"expected '{token}'")
        self._index += 1

    def _nested(self) -> _Term:
        self._depth += 1
        if self._depth > _MAX_DEPTH:
            self._fail(f"nesting deeper than {_MAX_DEPTH} levels")
        try:
            return self._ternary()
        finally:
            self._depth -= 1

    def _ternary(self) -> _Term:
        condition = self._logical("||", self._logical_and)
        if self._peek() != "?":
            return condition

        self._index += 1
        when_true = self._nested()
        self._expect(":")
        when_false = self._nested()

        if condition.constant is not None:
            return when_true if condition.constant else when_false

        test, first, second = condition.evaluate, when_true.evaluate, when_false.evaluate
        return _Term(lambda n: first(n) if test(n) else second(n))

    def _logical_and(self) -> _Term:
        return self._logical("&&", lambda: self._binary(0))

    def _logical(self, symbol: str, operand: Callable[[], _Term]) -> _Term:
        term = operand()
        while self._peek() == symbol:
            self._index += 1
            right = operand()
            left_eval, right_eval = term.evaluate, right.evaluate
            if symbol == "&&":
                evaluate: Evaluator = lambda n, a=left_eval, b=right_eval: int(
                    bool(a(n)) and bool(b(n))
                )
            else:
                evaluate = lambda n, a=left_eval, b=right_eval: int(
                    bool(a(n)) or bool(b(n))
                )
            if term.constant is not None and right.constant is not None:
                term = _constant(evaluate(0))
            else:
                term = _Term(evaluate)
        return term

    def _binary(self, level: int) -> _Term:
        if level == len(_PRECEDENCE):
            return self._unary()

        term = self._binary(level + 1)
        while self._peek() in _PRECEDENCE[level]:
            symbol = self._advance()
            right = self._binary(level + 1)
            if symbol in {"/", "%"} and right.constant == 0:
                self._fail("division by zero")
            function = _BINARY_OPERATORS[symbol]
            if term.constant is not None and right.constant is not None:
                term = _constant(function(term.constant, right.constant))
                continue
            term = _Term(
                lambda n, f=function, a=term.evaluate, b=right.evaluate: f(a(n), b(n))
            )
        return term

    def _unary(self) -> _Term:
        token = self._peek()
        if token == "!":
            self._index += 1
            operand = self._unary()
            if operand.constant is not None:
                return _constant(int(not operand.constant))
            inner = operand.evaluate
            return _Term(lambda n: int(not inner(n)))
        if token == "-":
            self._index += 1
            operand = self._unary()
            if operand.constant is not None:
                return _constant(-operand.constant)
            inner = operand.evaluate
            return _Term(lambda n: -inner(n))
        return self._primary()

    def _primary(self) -> _Term:
        token = self._advance()
        if token == "n":
            return _Term(lambda n: n)
        if token.isdigit():
            return _constant(int(token))
        if token == "(":
            term = self._nested()
            self._expect(")")
            return term
        self._fail(f"unexpected token '{token}'")


@dataclass(frozen=True)
class PluralRule:
    """Callable plural selector compiled from a ``Plural-Forms`` header."""

    nplurals: int
    expression: str
    _evaluate: Evaluator = field(repr=False, compare=False)

    @classmethod
    def parse(cls, header: str) -> PluralRule:
        """Compile ``header`` or raise :class:`InvalidCatalog`."""

        if not isinstance(header, str):
            raise InvalidCatalog("Plural forms must be provided as a string")
        return _compile(header)

    @property
    def header(self) -> str:
        return f"nplurals={self.nplurals}; plural={self.expression};"

    def __call__(self, n: int) -> int:
        return self._evaluate(operator.index(n))


@lru_cache(maxsize=64)
def _compile(header: str) -> PluralRule:
    match = _HEADER_PATTERN.match(header)
    if match is None:
        raise InvalidCatalog(f"Unrecognised plural forms header: '{header}'")

    nplurals = int(match.group("count"))
    if nplurals < 1:
        raise InvalidCatalog("nplurals must be a positive integer")

    expression = match.group("expression")
    try:
        term = _Parser(expression).parse()
    except RecursionError as error:
        raise InvalidCatalog(f"Plural expression is too deeply nested: '{expression}'") from error
    return PluralRule(nplurals=nplurals, expression=expression, _evaluate=term.evaluate)


__all__ = ["GERMAN_PLURAL_FORMS", "PluralRule"]
