"""Expression validation and tokenization.

Raw text is validated first (type, denylist, alphabet, parenthesis balance),
then split left to right into Number, Operator and paren tokens.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from onionforge.errors import CalculationOverflowError, ExpressionSyntaxError, InvalidInputError
from onionforge.operations import is_operator

# Never executed, only refused. Matched case-insensitively.
_DENYLIST = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"eval\(",
        r"function\(",
        r"new\s+Function",
        r"\.constructor",
        r"__proto__",
        r"process\.",
        r"require\(",
        r"import\(",
    )
)
_VALID_CHARS_RE = re.compile(r"[0-9+\-*/%.()\s]+")
_NUMBER_RUN_RE = re.compile(r"[0-9.]+")

LEFT_PAREN = "("
RIGHT_PAREN = ")"


class TokenKind(str, Enum):
    """Lexical token categories."""

    NUMBER = "number"
    OPERATOR = "operator"
    LEFT_PAREN = "lparen"
    RIGHT_PAREN = "rparen"


@dataclass(frozen=True)
class Token:
    """A single lexical unit. ``value`` is a float for numbers, else the symbol."""

    kind: TokenKind
    value: Union[float, str]

    @classmethod
    def number(cls, value: float) -> Token:
        return cls(TokenKind.NUMBER, value)

    @classmethod
    def op(cls, symbol: str) -> Token:
        return cls(TokenKind.OPERATOR, symbol)

    @property
    def is_number(self) -> bool:
        return self.kind is TokenKind.NUMBER

    @property
    def is_operator(self) -> bool:
        return self.kind is TokenKind.OPERATOR

    def __str__(self) -> str:
        if self.is_number:
            v = self.value
            return str(int(v)) if float(v).is_integer() else repr(v)
        return str(self.value)


LPAREN_TOKEN = Token(TokenKind.LEFT_PAREN, LEFT_PAREN)
RPAREN_TOKEN = Token(TokenKind.RIGHT_PAREN, RIGHT_PAREN)


def validate(expression: object) -> str:
    """Check an expression before tokenizing it.

    Returns:
        The expression, unchanged, once it passes every check.

    Raises:
        InvalidInputError: Not a string, empty, denylisted pattern or
            characters outside the accepted alphabet.
        ExpressionSyntaxError: Unbalanced parentheses.
    """
    if not isinstance(expression, str):
        raise InvalidInputError("Expression must be a string")
    if not expression:
        raise InvalidInputError("Expression cannot be empty")

    for pattern in _DENYLIST:
        if pattern.search(expression):
            raise InvalidInputError("Invalid expression pattern detected")

    if not _VALID_CHARS_RE.fullmatch(expression):
        raise InvalidInputError("Expression contains invalid characters")

    balance = 0
    for char in expression:
        if char == LEFT_PAREN:
            balance += 1
        elif char == RIGHT_PAREN:
            balance -= 1
            if balance < 0:
                break
    if balance != 0:
        raise ExpressionSyntaxError("Mismatched parentheses")

    return expression


def _parse_number(run: str) -> Token:
    try:
        value = float(run)
    except ValueError:
        raise ExpressionSyntaxError(f"Malformed number: {run!r}") from None
    if not math.isfinite(value):
        raise CalculationOverflowError(f"Number too large: {run[:20]}...")
    return Token.number(value)


def _symbol_token(char: str) -> Optional[Token]:
    if char == LEFT_PAREN:
        return LPAREN_TOKEN
    if char == RIGHT_PAREN:
        return RPAREN_TOKEN
    if is_operator(char):
        return Token.op(char)
    return None


def tokenize(expression: str) -> list[Token]:
    """Split a validated expression into tokens in source order.

    Digit/'.' runs become Number tokens, whitespace is dropped, and every
    other character becomes its own operator or paren token.

    Raises:
        ExpressionSyntaxError: A numeric run does not parse (e.g. '1.2.3').
        CalculationOverflowError: A numeric run overflows a float.
        InvalidInputError: A character outside the alphabet slipped through.
    """
    tokens: list[Token] = []
    pos = 0
    while pos < len(expression):
        char = expression[pos]
        if char.isspace():
            pos += 1
            continue

        run = _NUMBER_RUN_RE.match(expression, pos)
        if run:
            tokens.append(_parse_number(run.group()))
            pos = run.end()
            continue

        token = _symbol_token(char)
        if token is None:
            raise InvalidInputError(f"Unexpected character: {char!r}")
        tokens.append(token)
        pos += 1

    return tokens
