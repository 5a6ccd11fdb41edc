"""Infix → postfix (RPN) conversion using the shunting-yard algorithm.

Pop rule: an operator on the stack is moved to the output only when its
precedence is strictly greater than the incoming operator's. Equal-precedence
operators therefore stay on the stack, so ``1-2-3`` converts to
``1 2 3 - -`` and evaluates as ``1-(2-3)``. Changing this to ``>=`` changes
results for chains of -, / and %.
"""

from __future__ import annotations

import logging
from typing import Iterable

from onionforge.errors import ExpressionSyntaxError
from onionforge.operations import resolve
from onionforge.tokenizer import Token, TokenKind

logger = logging.getLogger(__name__)


def _should_pop(top: Token, incoming: Token) -> bool:
    if not top.is_operator:
        return False
    return resolve(top.value).precedence > resolve(incoming.value).precedence


def to_rpn(tokens: Iterable[Token]) -> list[Token]:
    """Convert infix tokens to an RPN token list (no parentheses).

    Raises:
        ExpressionSyntaxError: Parentheses do not pair up.
        InvalidInputError: An operator token has an unknown symbol.
    """
    output: list[Token] = []
    stack: list[Token] = []

    for token in tokens:
        if token.is_number:
            output.append(token)
        elif token.is_operator:
            while stack and _should_pop(stack[-1], token):
                output.append(stack.pop())
            stack.append(token)
        elif token.kind is TokenKind.LEFT_PAREN:
            stack.append(token)
        elif token.kind is TokenKind.RIGHT_PAREN:
            while stack and stack[-1].kind is not TokenKind.LEFT_PAREN:
                output.append(stack.pop())
            if not stack:
                raise ExpressionSyntaxError("Mismatched parentheses")
            stack.pop()  # discard '('

    while stack:
        top = stack.pop()
        if top.kind is TokenKind.LEFT_PAREN:
            raise ExpressionSyntaxError("Mismatched parentheses")
        output.append(top)

    logger.debug("rpn: %s", format_rpn(output))
    return output


def format_rpn(tokens: Iterable[Token]) -> str:
    """Space-separated postfix form, e.g. '3 4 2 * +'."""
    return " ".join(str(t) for t in tokens)
