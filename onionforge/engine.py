"""Expression engine — validate → tokenize → convert → evaluate.

Stateless: an ExpressionEngine can be shared or built per call. Nothing is
cached between calls.
"""

from __future__ import annotations

import logging
from typing import Optional

from onionforge.config import DEFAULT_CONFIG, CalculatorConfig
from onionforge.rpn import Number, evaluate_rpn
from onionforge.shunting_yard import format_rpn, to_rpn
from onionforge.tokenizer import Token, tokenize, validate

logger = logging.getLogger(__name__)


class ExpressionEngine:
    """Evaluates infix arithmetic over + - * / % and parentheses."""

    def __init__(self, config: Optional[CalculatorConfig] = None):
        self.config = config or DEFAULT_CONFIG

    def to_rpn(self, expression: str) -> list[Token]:
        """Validate and convert an expression without evaluating it."""
        return to_rpn(tokenize(validate(expression)))

    def evaluate(self, expression: str) -> Number:
        """Evaluate an infix expression.

        Args:
            expression: Text over digits, '.', + - * / %, parentheses and
                whitespace.

        Returns:
            The rounded result; an int when it has no fractional part.

        Raises:
            InvalidInputError, ExpressionSyntaxError, DivisionByZeroError,
            CalculationOverflowError: whichever stage fails first.
        """
        rpn = self.to_rpn(expression)
        result = evaluate_rpn(rpn, self.config)
        logger.debug("evaluate %r -> %s", expression, result)
        return result

    @staticmethod
    def format_rpn(tokens: list[Token]) -> str:
        return format_rpn(tokens)
