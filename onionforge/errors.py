"""Typed calculator errors.

Every failure in the engine or the state machine is raised as one of four
kinds. Each kind is its own subclass of CalculatorError and also derives from
the closest builtin exception, so callers can catch either.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum


class ErrorKind(str, Enum):
    """Error taxonomy shared by the engine and the state machine."""

    INVALID_INPUT = "INVALID_INPUT"
    SYNTAX_ERROR = "SYNTAX_ERROR"
    DIVISION_BY_ZERO = "DIVISION_BY_ZERO"
    OVERFLOW = "OVERFLOW"


class CalculatorError(Exception):
    """Base class for calculator failures.

    Attributes:
        kind: The ErrorKind tag.
        message: Human-readable description.
        timestamp: ISO-8601 UTC time the error was raised.
    """

    kind: ErrorKind = ErrorKind.SYNTAX_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.timestamp = datetime.now(timezone.utc).isoformat()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, kind={self.kind.value})"


class InvalidInputError(CalculatorError, ValueError):
    """Bad type, empty input, disallowed characters or unknown operator."""

    kind = ErrorKind.INVALID_INPUT


class ExpressionSyntaxError(CalculatorError, ValueError):
    """Unbalanced parentheses, malformed number or wrong operand count."""

    kind = ErrorKind.SYNTAX_ERROR


class DivisionByZeroError(CalculatorError, ZeroDivisionError):
    """Right operand of / or % is zero."""

    kind = ErrorKind.DIVISION_BY_ZERO


class CalculationOverflowError(CalculatorError, OverflowError):
    """Result is not representable as a finite float."""

    kind = ErrorKind.OVERFLOW
