"""Key dispatch for a calculator session.

Maps key names (keyboard keys or button actions) onto CalculatorState
operations, keeps a one-line status message, and turns typed errors into
user-facing text. This is the outermost layer: errors stop here.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from onionforge import __version__
from onionforge.errors import CalculatorError, ErrorKind
from onionforge.models import Diagnostics
from onionforge.operations import OPERATIONS
from onionforge.state import DECIMAL_POINT, CalculatorState

logger = logging.getLogger(__name__)

READY_STATUS = "Ready. All calculations happen locally."

# Named actions, shared by keyboard keys and button ids
CLEAR = "clear"
BACKSPACE = "backspace"
EQUALS = "="

KEY_ALIASES: dict[str, str] = {
    "Enter": EQUALS,
    "Escape": CLEAR,
    "Delete": CLEAR,
    "Backspace": BACKSPACE,
}

ERROR_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.DIVISION_BY_ZERO: "Cannot divide by zero",
    ErrorKind.OVERFLOW: "Numerical overflow",
    ErrorKind.INVALID_INPUT: "Invalid input",
}
_DEFAULT_ERROR_MESSAGE = "Calculation error"


def error_message(error: CalculatorError) -> str:
    """Short user-facing description of an error kind."""
    return ERROR_MESSAGES.get(error.kind, _DEFAULT_ERROR_MESSAGE)


class CalculatorController:
    """Drives a CalculatorState from discrete key events."""

    def __init__(self, state: Optional[CalculatorState] = None):
        self.state = state or CalculatorState()
        self.status = READY_STATUS
        self.last_error: Optional[CalculatorError] = None
        self._bindings = self._build_bindings()

    def _build_bindings(self) -> dict[str, Callable[[], None]]:
        bindings: dict[str, Callable[[], None]] = {}
        for digit in "0123456789":
            bindings[digit] = lambda d=digit: self.press_digit(d)
        bindings[DECIMAL_POINT] = self.press_decimal
        for symbol in OPERATIONS:
            bindings[symbol] = lambda s=symbol: self.press_operator(s)
        bindings[EQUALS] = self.press_equals
        bindings[CLEAR] = self.press_clear
        bindings[BACKSPACE] = self.press_backspace
        return bindings

    @property
    def keys(self) -> list[str]:
        """Every key name handle_key accepts."""
        return list(self._bindings) + list(KEY_ALIASES)

    def handle_key(self, key: str) -> bool:
        """Dispatch one key. Returns False if the key is not bound."""
        action = KEY_ALIASES.get(key, key)
        handler = self._bindings.get(action)
        if handler is None:
            logger.warning("Unknown key: %r", key)
            return False
        logger.debug("key %r -> %s", key, action)
        handler()
        return True

    # --- Actions ---

    def press_digit(self, digit: str) -> None:
        self._run(lambda: self.state.update_input(digit), f"Input: {digit}")

    def press_decimal(self) -> None:
        self._run(lambda: self.state.update_input(DECIMAL_POINT), "Decimal point added")

    def press_operator(self, symbol: str) -> None:
        self._run(lambda: self.state.apply_operator(symbol), f"Operator: {symbol}")

    def press_equals(self) -> None:
        if not self._run(self.state.calculate):
            return
        last = self.state.get_last_calculation()
        if last:
            self.status = f"Calculated: {last.expression} = {last.result}"

    def press_clear(self) -> None:
        self.state.clear()
        self.last_error = None
        self.status = "Calculator cleared"

    def press_backspace(self) -> None:
        self.state.backspace()
        self.status = "Last character removed"

    def _run(self, action: Callable[[], object], status: Optional[str] = None) -> bool:
        """Run a state mutation, presenting any CalculatorError it raises."""
        try:
            action()
        except CalculatorError as e:
            self._present_error(e)
            return False
        self.last_error = None
        if status is not None:
            self.status = status
        return True

    def _present_error(self, error: CalculatorError) -> None:
        logger.warning("Calculator error (%s): %s", error.kind.value, error.message)
        self.last_error = error
        self.status = f"Error: {error_message(error)}"

    # --- Views ---

    def display(self) -> str:
        return self.state.get_display_value()

    def history_line(self) -> str:
        """Expression of the most recent history entry, or ''."""
        history = self.state.get_history()
        return history[-1].expression if history else ""

    def diagnostics(self) -> Diagnostics:
        return Diagnostics(
            version=__version__,
            history_length=len(self.state.history),
            current_input=self.state.current_input,
            has_operator=self.state.pending_operator is not None,
            last_calculation=self.state.get_last_calculation(),
        )
