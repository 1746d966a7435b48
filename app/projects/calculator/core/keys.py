"""
Key vocabulary for the calculator: button tokens, keyboard mapping and the
button grid. Single source of truth for the page, the JSON API and the CLI.
"""
from app.projects.calculator.core.engine import (
    CLEAR,
    DECIMAL_POINT,
    DIGITS,
    EQUALS,
    Operator,
)

OPERATOR_TOKENS = [op.value for op in Operator]

# Keyboard key (KeyboardEvent.key) -> canonical token
KEYBOARD_MAP = {
    **{d: d for d in DIGITS},
    ".": DECIMAL_POINT,
    "+": Operator.ADD.value,
    "-": Operator.SUBTRACT.value,
    "*": Operator.MULTIPLY.value,
    "/": Operator.DIVIDE.value,
    "Enter": EQUALS,
    "=": EQUALS,
    "Escape": CLEAR,
    "c": CLEAR,
    "C": CLEAR,
}

# Keys whose browser default must be suppressed ("/" opens quick find)
PREVENT_DEFAULT_KEYS = ["/"]

# Extra spellings accepted from buttons and the CLI
TOKEN_ALIASES = {
    "x": Operator.MULTIPLY.value,
    "X": Operator.MULTIPLY.value,
    "÷": Operator.DIVIDE.value,
    "AC": CLEAR,
}

# Rows of (token, label, css class) rendered by the template
BUTTON_LAYOUT = [
    [(CLEAR, "C", "clear"), (Operator.DIVIDE.value, "÷", "operator")],
    [("7", "7", "number"), ("8", "8", "number"), ("9", "9", "number"), (Operator.MULTIPLY.value, "×", "operator")],
    [("4", "4", "number"), ("5", "5", "number"), ("6", "6", "number"), (Operator.SUBTRACT.value, "−", "operator")],
    [("1", "1", "number"), ("2", "2", "number"), ("3", "3", "number"), (Operator.ADD.value, "+", "operator")],
    [("0", "0", "number"), (DECIMAL_POINT, ".", "number"), (EQUALS, "=", "equals")],
]


def normalize_key(key):
    """
    Map a button token or keyboard key to a canonical engine token.

    Args:
        key (str): Token from a button's data-value, a KeyboardEvent.key, or CLI input

    Returns:
        str: Canonical token, or None if the key means nothing to the calculator
    """
    if not isinstance(key, str):
        return None
    if key in OPERATOR_TOKENS:
        return key
    if key in KEYBOARD_MAP:
        return KEYBOARD_MAP[key]
    return TOKEN_ALIASES.get(key)


def split_keys(text):
    """
    Split a compact key string such as '12+3=' into tokens.

    Whitespace separates nothing and is ignored. Unmapped characters are kept
    as-is so the caller can report them.
    """
    return [ch for ch in text if not ch.isspace()]
