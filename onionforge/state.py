"""Keystroke state machine for a classic running-total calculator.

Digits accumulate into the current operand; an operator stores it as the left
operand; a second operator or equals resolves the pending pair through the
ExpressionEngine immediately (left to right, no deferred precedence).

Informal states, derived from the fields:
    Idle            current_input == default, no pending operator
    Accumulating    digits being typed
    OperatorPending operator applied, next digit starts a fresh operand
    Error           current_input == error sentinel after a failed calculation
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Optional

from onionforge.config import DEFAULT_CONFIG, CalculatorConfig
from onionforge.engine import ExpressionEngine
from onionforge.errors import CalculatorError, InvalidInputError
from onionforge.models import HistoryEntry, LastCalculation, Number
from onionforge.operations import is_operator

logger = logging.getLogger(__name__)

DECIMAL_POINT = "."
_DIGITS = frozenset("0123456789")


def format_number(value: Number, config: CalculatorConfig = DEFAULT_CONFIG) -> str:
    """Render a result as a plain numeric literal (never exponent notation)."""
    if isinstance(value, int):
        return str(value)
    if float(value).is_integer():
        return str(int(value))
    text = f"{value:.{config.max_decimal_places}f}"
    return text.rstrip("0").rstrip(".")


class CalculatorState:
    """Session state for one calculator.

    Not thread-safe; one caller drives it one operation at a time.
    """

    def __init__(
        self,
        engine: Optional[ExpressionEngine] = None,
        config: Optional[CalculatorConfig] = None,
    ):
        self.config = config or (engine.config if engine else DEFAULT_CONFIG)
        self.engine = engine or ExpressionEngine(self.config)
        self.reset()

    def reset(self) -> None:
        """Reinitialize every field, history included."""
        self.current_input: str = self.config.default_display
        self.previous_input: str = ""
        self.pending_operator: Optional[str] = None
        self.should_reset_display: bool = False
        self.history: deque[HistoryEntry] = deque(maxlen=self.config.history_limit)
        self.last_calculation: Optional[LastCalculation] = None

    # --- Mutators ---

    def update_input(self, value: str) -> None:
        """Feed a single digit or the decimal point.

        Raises:
            InvalidInputError: value is not one digit or '.'.
        """
        if value == DECIMAL_POINT:
            self._input_decimal()
            return
        if value not in _DIGITS:
            raise InvalidInputError(f"Invalid input: {value!r}")

        if self.current_input == self.config.default_display or self.should_reset_display:
            self.current_input = value
            self.should_reset_display = False
        elif len(self.current_input) < self.config.max_display_length:
            self.current_input += value

    def _input_decimal(self) -> None:
        if self.should_reset_display:
            self.current_input = self.config.default_display + DECIMAL_POINT
            self.should_reset_display = False
            return
        if DECIMAL_POINT in self.current_input:
            return
        if len(self.current_input) < self.config.max_display_length:
            self.current_input += DECIMAL_POINT

    def apply_operator(self, op: str) -> None:
        """Store the current operand and arm an operator.

        If an operator is already pending and a new right operand was typed,
        the pending pair is calculated first.

        Raises:
            InvalidInputError: op is not a supported operator.
            CalculatorError: The chained calculation failed.
        """
        if not is_operator(op):
            raise InvalidInputError(f"Invalid operator: {op}")

        if self.pending_operator and not self.should_reset_display:
            self.calculate()

        self.previous_input = self.current_input
        self.pending_operator = op
        self.should_reset_display = True

    def calculate(self) -> Optional[Number]:
        """Resolve ``previous_input <op> current_input`` through the engine.

        Returns:
            The result, or None when there is no pending operation.

        Raises:
            CalculatorError: Re-raised after the display is set to the error
                sentinel and the pending operation is dropped.
        """
        if not self.pending_operator or not self.previous_input:
            return None

        expression = f"{self.previous_input}{self.pending_operator}{self.current_input}"
        try:
            result = self.engine.evaluate(expression)
        except CalculatorError as e:
            logger.debug("calculate %r failed: %s", expression, e.kind.value)
            self.current_input = self.config.error_display
            self._clear_pending()
            raise

        if len(self.history) == self.history.maxlen:
            logger.debug("history full, evicting %s", self.history[0])
        self.history.append(HistoryEntry(expression=expression, result=result))
        self.last_calculation = LastCalculation(expression=expression, result=result)

        self.current_input = format_number(result, self.config)
        self._clear_pending()
        return result

    def _clear_pending(self) -> None:
        self.pending_operator = None
        self.previous_input = ""
        self.should_reset_display = True

    def backspace(self) -> None:
        """Drop the last character; fall back to the default display."""
        remaining = self.current_input[:-1]
        if self.current_input == self.config.error_display or remaining in ("", "-"):
            self.current_input = self.config.default_display
        else:
            self.current_input = remaining

    def clear(self) -> None:
        self.reset()

    # --- Accessors ---

    def get_display_value(self) -> str:
        return self.current_input

    def get_history(self) -> list[HistoryEntry]:
        """Snapshot of the history, oldest first."""
        return list(self.history)

    def get_last_calculation(self) -> Optional[LastCalculation]:
        return self.last_calculation

    @property
    def is_error(self) -> bool:
        return self.current_input == self.config.error_display
