"""Stack-machine evaluation of RPN token sequences."""

from __future__ import annotations

import logging
import math
from typing import Iterable

from onionforge.config import DEFAULT_CONFIG, CalculatorConfig
from onionforge.errors import CalculationOverflowError, ExpressionSyntaxError
from onionforge.models import Number
from onionforge.operations import resolve
from onionforge.tokenizer import Token

logger = logging.getLogger(__name__)


def _check_finite(value: float, symbol: str) -> float:
    if math.isinf(value):
        raise CalculationOverflowError("Numerical overflow")
    if not math.isfinite(value):
        raise ExpressionSyntaxError(f"Invalid numerical result from '{symbol}'")
    return value


def round_result(value: float, config: CalculatorConfig = DEFAULT_CONFIG) -> Number:
    """Suppress binary floating-point noise in a final result.

    Magnitudes below config.zero_threshold collapse to 0. Everything else is
    rounded half up to config.max_decimal_places, and whole numbers come back
    as int.
    """
    if abs(value) < config.zero_threshold:
        return 0

    multiplier = 10 ** config.max_decimal_places
    try:
        scaled = value * multiplier
    except OverflowError:
        # multiplier itself is past float range
        scaled = math.inf
    # Past ~1e15 a float has no fractional digits left to round
    if math.isfinite(scaled):
        rounded = math.floor(scaled + 0.5) / multiplier
    else:
        rounded = value

    if float(rounded).is_integer():
        return int(rounded)
    return rounded


def evaluate_rpn(rpn: Iterable[Token], config: CalculatorConfig = DEFAULT_CONFIG) -> Number:
    """Evaluate an RPN sequence to a single rounded number.

    Raises:
        ExpressionSyntaxError: Insufficient operands, non-finite non-infinite
            result, or not exactly one value left at the end.
        CalculationOverflowError: An operator produced ±inf.
        DivisionByZeroError: Right operand of / or % is zero.
    """
    stack: list[float] = []

    for token in rpn:
        if token.is_number:
            stack.append(float(token.value))
            continue
        if not token.is_operator:
            raise ExpressionSyntaxError(f"Unexpected token in RPN: {token}")

        if len(stack) < 2:
            raise ExpressionSyntaxError("Insufficient operands")
        b = stack.pop()
        a = stack.pop()
        operation = resolve(token.value)
        stack.append(_check_finite(operation(a, b), operation.symbol))

    if len(stack) != 1:
        logger.debug("final stack depth %d, expected 1", len(stack))
        raise ExpressionSyntaxError("Invalid expression format")

    return round_result(stack[0], config)
