"""
Calculator engine - the state machine behind the calculator page.

Every operation takes a CalculatorState and returns a new one; nothing here
touches Flask, so the same functions back the JSON API, the CLI and the tests.
Chaining is strictly left to right: 2 + 3 × 4 = is (2 + 3) × 4.
"""

import enum
import logging
import math
import re
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Optional

logger = logging.getLogger(__name__)

DECIMAL_POINT = "."
DIGITS = "0123456789"
EQUALS = "="
CLEAR = "C"

# Fractional digits kept when rendering a non-whole result
RESULT_PRECISION = 8

# Digits a typed operand may hold; further digit keys are ignored
MAX_ENTRY_DIGITS = 16

# What the display can hold: an optional sign, digits, at most one decimal point
DISPLAY_PATTERN = re.compile(r"-?\d+(\.\d*)?")


class Operator(enum.Enum):
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "×"
    DIVIDE = "/"


class Phase(enum.Enum):
    IDLE = "idle"
    ACCUMULATING_FIRST_OPERAND = "accumulating_first_operand"
    OPERATOR_PENDING = "operator_pending"
    AWAITING_SECOND_OPERAND = "awaiting_second_operand"


class CalculatorError(Exception):
    """Base class for errors the calculator reports to the user."""

    message = "Error"

    def __init__(self, message=None):
        super().__init__(message or self.message)


class DivisionByZero(CalculatorError, ZeroDivisionError):
    message = "Error: Division by zero"


class ResultOutOfRange(CalculatorError, OverflowError):
    message = "Error: Result out of range"


class UnknownKey(CalculatorError, ValueError):
    def __init__(self, key):
        self.key = key
        super().__init__(f"Unknown key: {key!r}")


@dataclass(frozen=True)
class CalculatorState:
    display: str = "0"
    accumulator: Optional[float] = None
    pending_operator: Optional[Operator] = None
    awaiting_fresh_entry: bool = False

    def to_dict(self):
        """Plain-JSON form, suitable for the Flask session cookie."""
        return {
            "display": self.display,
            "accumulator": self.accumulator,
            "pending_operator": self.pending_operator.value if self.pending_operator else None,
            "awaiting_fresh_entry": self.awaiting_fresh_entry,
        }

    @classmethod
    def from_dict(cls, data):
        """
        Rebuild a state from to_dict() output.

        Anything that does not describe a valid state (missing, tampered or
        left over from an older page) comes back as the initial state.
        """
        if not isinstance(data, dict):
            return INITIAL_STATE
        display = data.get("display")
        if not isinstance(display, str) or not DISPLAY_PATTERN.fullmatch(display):
            return INITIAL_STATE
        awaiting_fresh_entry = data.get("awaiting_fresh_entry", False)
        if not isinstance(awaiting_fresh_entry, bool):
            return INITIAL_STATE
        accumulator = data.get("accumulator")
        if accumulator is not None:
            if isinstance(accumulator, bool) or not isinstance(accumulator, (int, float)):
                return INITIAL_STATE
            accumulator = float(accumulator)
            if not math.isfinite(accumulator):
                return INITIAL_STATE
        op_value = data.get("pending_operator")
        try:
            operator = Operator(op_value) if op_value is not None else None
        except ValueError:
            return INITIAL_STATE
        if operator is None or accumulator is None:
            # An operator without an operand (or the reverse) is not a state we produce
            operator, accumulator = None, None
        return cls(
            display=display,
            accumulator=accumulator,
            pending_operator=operator,
            awaiting_fresh_entry=awaiting_fresh_entry,
        )


INITIAL_STATE = CalculatorState()


def phase(state):
    """Name the state-machine state a CalculatorState is in."""
    if state.pending_operator is not None:
        if state.awaiting_fresh_entry:
            return Phase.OPERATOR_PENDING
        return Phase.AWAITING_SECOND_OPERAND
    if state == INITIAL_STATE:
        return Phase.IDLE
    return Phase.ACCUMULATING_FIRST_OPERAND


def parse_operand(display):
    """Read the display as a number; a run of digits too long for a float is out of range."""
    value = float(display)
    if not math.isfinite(value):
        raise ResultOutOfRange()
    return value


def enter_digit(state, value):
    """Append a digit or decimal point to the display."""
    if value == DECIMAL_POINT:
        if state.awaiting_fresh_entry:
            return replace(state, display="0.", awaiting_fresh_entry=False)
        if DECIMAL_POINT not in state.display:
            return replace(state, display=state.display + DECIMAL_POINT)
        return state

    if len(value) != 1 or value not in DIGITS:
        raise ValueError(f"Not a digit: {value!r}")

    if state.awaiting_fresh_entry:
        return replace(state, display=value, awaiting_fresh_entry=False)
    if state.display == "0":
        return replace(state, display=value)
    if sum(ch.isdigit() for ch in state.display) >= MAX_ENTRY_DIGITS:
        return state
    return replace(state, display=state.display + value)


def enter_operator(state, op):
    """
    Commit the displayed operand and remember the operator.

    If an operator is already pending it is resolved first, so a chain of
    operators evaluates left to right.

    Returns:
        tuple: (new_state, pulse) where pulse is True when a chained result
               was produced.

    Raises:
        DivisionByZero: the chained operation divides by zero.
        ResultOutOfRange: the chained result is not finite.
    """
    current = parse_operand(state.display)
    display = state.display
    pulse = False

    if state.accumulator is None:
        accumulator = current
    elif state.pending_operator is not None:
        accumulator = resolve(state.accumulator, current, state.pending_operator)
        display = format_result(accumulator)
        pulse = True
    else:
        accumulator = state.accumulator

    new_state = CalculatorState(
        display=display,
        accumulator=accumulator,
        pending_operator=op,
        awaiting_fresh_entry=True,
    )
    return new_state, pulse


def enter_equals(state):
    """
    Resolve the pending operation.

    Pressing equals without a complete operation (no operator yet, or right
    after an operator) leaves the state as it is.

    Returns:
        tuple: (new_state, pulse)
    """
    if (
        state.pending_operator is None
        or state.accumulator is None
        or state.awaiting_fresh_entry
    ):
        return state, False

    result = resolve(state.accumulator, parse_operand(state.display), state.pending_operator)
    new_state = CalculatorState(
        display=format_result(result),
        accumulator=None,
        pending_operator=None,
        awaiting_fresh_entry=True,
    )
    return new_state, True


def clear():
    return INITIAL_STATE


def resolve(a, b, op):
    """Apply a binary operator. Unrecognized operators yield b unchanged."""
    if op is Operator.ADD:
        return a + b
    if op is Operator.SUBTRACT:
        return a - b
    if op is Operator.MULTIPLY:
        return a * b
    if op is Operator.DIVIDE:
        if b == 0:
            raise DivisionByZero()
        return a / b
    logger.warning("Unrecognized operator %r, keeping second operand", op)
    return b


def format_result(value):
    """
    Render a computed value for the display.

    Whole numbers lose their decimal point; anything else is rounded to
    RESULT_PRECISION places and written as the shortest decimal that reads
    back as the same float, never in exponent form.
    """
    if not math.isfinite(value):
        raise ResultOutOfRange()
    if float(value).is_integer():
        return str(int(value))
    rounded = round(value, RESULT_PRECISION)
    if rounded.is_integer():
        return str(int(rounded))
    text = repr(rounded)
    if "e" in text:
        # repr switches to exponent form below 1e-4
        text = format(Decimal(text), "f")
    return text


def apply_key(state, token):
    """
    Feed one canonical key token into the engine.

    Returns:
        tuple: (new_state, pulse)
    """
    if token == DECIMAL_POINT or (len(token) == 1 and token in DIGITS):
        return enter_digit(state, token), False
    if token == EQUALS:
        return enter_equals(state)
    if token == CLEAR:
        return clear(), False
    try:
        op = Operator(token)
    except ValueError:
        raise UnknownKey(token) from None
    return enter_operator(state, op)


def run_keys(tokens, state=INITIAL_STATE):
    """Apply a sequence of tokens; pulse reflects the last key only."""
    pulse = False
    for token in tokens:
        state, pulse = apply_key(state, token)
    return state, pulse
