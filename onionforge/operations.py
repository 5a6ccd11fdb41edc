"""Binary operator registry.

A fixed symbol → Operation table. The operator set is closed; nothing
registers operators at runtime.
"""

from __future__ import annotations

import math
import operator
from dataclasses import dataclass
from typing import Callable

from onionforge.errors import DivisionByZeroError, InvalidInputError

ADD = "+"
SUBTRACT = "-"
MULTIPLY = "*"
DIVIDE = "/"
MODULO = "%"


@dataclass(frozen=True)
class Operation:
    """One arithmetic operator: symbol, precedence class and behavior."""

    symbol: str
    precedence: int
    apply: Callable[[float, float], float]
    arity: int = 2

    def __call__(self, a: float, b: float) -> float:
        return self.apply(a, b)


def _divide(a: float, b: float) -> float:
    if b == 0:
        raise DivisionByZeroError("Division by zero is not allowed")
    return a / b


def _modulo(a: float, b: float) -> float:
    if b == 0:
        raise DivisionByZeroError("Modulo by zero is not allowed")
    # Truncated remainder: sign follows the dividend
    return math.fmod(a, b)


OPERATIONS: dict[str, Operation] = {
    ADD: Operation(ADD, 1, operator.add),
    SUBTRACT: Operation(SUBTRACT, 1, operator.sub),
    MULTIPLY: Operation(MULTIPLY, 2, operator.mul),
    DIVIDE: Operation(DIVIDE, 2, _divide),
    MODULO: Operation(MODULO, 2, _modulo),
}


def is_operator(symbol: object) -> bool:
    """True if symbol is one of the five supported operators."""
    return isinstance(symbol, str) and symbol in OPERATIONS


def resolve(symbol: str) -> Operation:
    """Look up the Operation for a symbol.

    Raises:
        InvalidInputError: If the symbol is not a supported operator.
    """
    try:
        return OPERATIONS[symbol]
    except (KeyError, TypeError):
        raise InvalidInputError(f"Invalid operator: {symbol}") from None
