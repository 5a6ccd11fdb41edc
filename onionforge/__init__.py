"""onionforge — private, local-only calculator engine.

A shunting-yard expression engine (+ - * / %, parentheses) and a classic
running-total calculator state machine that drives it one operand pair at a
time. Nothing is evaluated with eval(); nothing leaves the process.

Usage:
    python -m onionforge eval "3 + 4 * 2"        # Evaluate an expression
    python -m onionforge eval "3 + 4 * 2" --rpn  # Show the postfix form
    python -m onionforge keys 7 + 3 =            # Replay keypad presses
    python -m onionforge repl                    # Interactive keypad
    python -m onionforge bench -n 5000           # Engine micro-benchmark
"""

__version__ = "2.0.0"

from onionforge.controller import CalculatorController  # noqa: E402
from onionforge.engine import ExpressionEngine  # noqa: E402
from onionforge.errors import (  # noqa: E402
    CalculationOverflowError,
    CalculatorError,
    DivisionByZeroError,
    ErrorKind,
    ExpressionSyntaxError,
    InvalidInputError,
)
from onionforge.state import CalculatorState  # noqa: E402

__all__ = [
    "CalculationOverflowError",
    "CalculatorController",
    "CalculatorError",
    "CalculatorState",
    "DivisionByZeroError",
    "ErrorKind",
    "ExpressionEngine",
    "ExpressionSyntaxError",
    "InvalidInputError",
    "__version__",
]
