"""Tests for the engine stages: operations, tokenizer, converter, evaluator."""

import pytest

from onionforge.config import CalculatorConfig
from onionforge.errors import (
    CalculationOverflowError,
    DivisionByZeroError,
    ExpressionSyntaxError,
    InvalidInputError,
)
from onionforge.operations import OPERATIONS, is_operator, resolve
from onionforge.rpn import _check_finite, evaluate_rpn, round_result
from onionforge.shunting_yard import format_rpn, to_rpn
from onionforge.tokenizer import LPAREN_TOKEN, RPAREN_TOKEN, Token, TokenKind, tokenize, validate


def rpn_of(expression: str) -> str:
    return format_rpn(to_rpn(tokenize(validate(expression))))


# --- Operation registry ---

def test_registry_covers_five_operators():
    assert set(OPERATIONS) == {"+", "-", "*", "/", "%"}
    assert all(op.arity == 2 for op in OPERATIONS.values())


def test_precedence_classes():
    assert resolve("+").precedence == resolve("-").precedence == 1
    assert resolve("*").precedence == resolve("/").precedence == resolve("%").precedence == 2


def test_is_operator():
    assert is_operator("*")
    assert not is_operator("^")
    assert not is_operator("(")
    assert not is_operator(None)


def test_resolve_unknown_symbol():
    with pytest.raises(InvalidInputError):
        resolve("^")


def test_apply_operations():
    assert resolve("+")(2, 3) == 5
    assert resolve("-")(2, 3) == -1
    assert resolve("*")(2, 3) == 6
    assert resolve("/")(3, 2) == 1.5
    assert resolve("%")(7, 4) == 3


@pytest.mark.parametrize("symbol", ["/", "%"])
def test_zero_right_operand(symbol):
    with pytest.raises(DivisionByZeroError):
        resolve(symbol)(1, 0)


def test_negative_zero_right_operand():
    with pytest.raises(DivisionByZeroError):
        resolve("/")(1, -0.0)


def test_operations_are_immutable():
    with pytest.raises(AttributeError):
        resolve("+").precedence = 5


# --- Validation ---

@pytest.mark.parametrize("expression", [
    "EVAL(1)",
    "function(",
    "new   Function",
    "x.constructor",
    "__proto__",
    "process.exit",
    "require(1)",
    "import(1)",
])
def test_denylist_is_case_insensitive_and_complete(expression):
    with pytest.raises(InvalidInputError) as exc:
        validate(expression)
    assert "pattern" in exc.value.message


def test_invalid_characters():
    with pytest.raises(InvalidInputError) as exc:
        validate("2^3")
    assert "invalid characters" in exc.value.message


def test_validate_returns_input():
    assert validate("(1 + 2) % 3") == "(1 + 2) % 3"


@pytest.mark.parametrize("expression", ["(", ")", "(()", "())(", "1)+(2"])
def test_unbalanced_parentheses(expression):
    with pytest.raises(ExpressionSyntaxError):
        validate(expression)


# --- Tokenizer ---

def test_tokenize_source_order():
    tokens = tokenize("12.5*(3 - 4)")
    assert tokens == [
        Token.number(12.5),
        Token.op("*"),
        LPAREN_TOKEN,
        Token.number(3.0),
        Token.op("-"),
        Token.number(4.0),
        RPAREN_TOKEN,
    ]


def test_tokenize_numbers_are_floats():
    (token,) = tokenize("007")
    assert token.kind is TokenKind.NUMBER
    assert token.value == 7.0
    assert isinstance(token.value, float)


def test_tokenize_drops_whitespace():
    assert tokenize(" 1 +\t2 ") == tokenize("1+2")


def test_tokenize_malformed_number():
    with pytest.raises(ExpressionSyntaxError):
        tokenize("1.2.3")


def test_tokenize_overflowing_number():
    with pytest.raises(CalculationOverflowError):
        tokenize("1" + "0" * 400)


def test_tokenize_rejects_unvalidated_characters():
    with pytest.raises(InvalidInputError):
        tokenize("1+a")


def test_tokens_are_immutable():
    token = Token.number(1.0)
    with pytest.raises(AttributeError):
        token.value = 2.0


# --- Shunting-yard conversion ---

def test_rpn_precedence():
    assert rpn_of("3+4*2") == "3 4 2 * +"


def test_rpn_higher_precedence_popped():
    assert rpn_of("2*3+4") == "2 3 * 4 +"


def test_rpn_parentheses_dropped():
    assert rpn_of("(1+2)*3") == "1 2 + 3 *"


def test_rpn_equal_precedence_not_popped():
    # Strict '>' keeps the first '-' on the stack
    assert rpn_of("1-2-3") == "1 2 3 - -"


def test_rpn_keeps_decimals():
    assert rpn_of("1.5+2") == "1.5 2 +"


def test_rpn_contains_no_parentheses():
    tokens = to_rpn(tokenize("((1+2)*(3+4))"))
    assert all(t.kind in (TokenKind.NUMBER, TokenKind.OPERATOR) for t in tokens)


def test_converter_rejects_unmatched_right_paren():
    with pytest.raises(ExpressionSyntaxError):
        to_rpn([Token.number(1.0), RPAREN_TOKEN])


def test_converter_rejects_unmatched_left_paren():
    with pytest.raises(ExpressionSyntaxError):
        to_rpn([LPAREN_TOKEN, Token.number(1.0)])


# --- RPN evaluation ---

def test_evaluate_rpn_applies_a_op_b():
    # 10 4 - is 10-4, not 4-10
    assert evaluate_rpn([Token.number(10.0), Token.number(4.0), Token.op("-")]) == 6


def test_evaluate_rpn_insufficient_operands():
    with pytest.raises(ExpressionSyntaxError) as exc:
        evaluate_rpn([Token.number(1.0), Token.op("+")])
    assert "Insufficient" in exc.value.message


def test_evaluate_rpn_leftover_operands():
    with pytest.raises(ExpressionSyntaxError) as exc:
        evaluate_rpn([Token.number(1.0), Token.number(2.0)])
    assert "format" in exc.value.message


def test_evaluate_rpn_empty():
    with pytest.raises(ExpressionSyntaxError):
        evaluate_rpn([])


def test_evaluate_rpn_rejects_parentheses():
    with pytest.raises(ExpressionSyntaxError):
        evaluate_rpn([Token.number(1.0), LPAREN_TOKEN])


def test_evaluate_rpn_overflow():
    with pytest.raises(CalculationOverflowError):
        evaluate_rpn([Token.number(1e308), Token.number(10.0), Token.op("*")])


# --- Rounding ---

def test_round_result_zero_threshold():
    assert round_result(9e-11) == 0
    assert round_result(-9e-11) == 0


def test_round_result_integral_becomes_int():
    assert isinstance(round_result(4.0), int)


def test_round_result_half_up():
    whole = CalculatorConfig(max_decimal_places=0)
    assert round_result(2.5, whole) == 3
    assert round_result(-2.5, whole) == -2


def test_round_result_large_values_untouched():
    assert round_result(1e300) == int(1e300)


def test_round_result_precision_beyond_float_range():
    # 10 ** 400 cannot be converted to a float
    wide = CalculatorConfig(max_decimal_places=400)
    assert round_result(1 / 3, wide) == 1 / 3
    assert round_result(2.5, wide) == 2.5


def test_evaluate_with_precision_beyond_float_range():
    wide = CalculatorConfig(max_decimal_places=400)
    assert evaluate_rpn(to_rpn(tokenize("1/3")), wide) == pytest.approx(1 / 3)


# --- Finite checks ---

def test_check_finite_passes_through():
    assert _check_finite(1.5, "+") == 1.5


def test_check_finite_infinity_is_overflow():
    with pytest.raises(CalculationOverflowError):
        _check_finite(float("inf"), "*")


def test_check_finite_nan_is_syntax_error():
    with pytest.raises(ExpressionSyntaxError, match="Invalid numerical result from '\\+'"):
        _check_finite(float("nan"), "+")
