"""Keyboard key names (as reported by browser ``KeyboardEvent.key``) to engine actions."""

from typing import Optional, Tuple

from .engine import CalculatorEngine
from .state import Display

KEY_ACTIONS = {
    ".": "decimal",
    "+": "add",
    "-": "subtract",
    "*": "multiply",
    "/": "divide",
    "Enter": "equals",
    "=": "equals",
    "Escape": "clear",
    "c": "clear",
    "C": "clear",
    "Backspace": "clear",
    "%": "percentage",
}


def action_for_key(key: str) -> Optional[Tuple[str, Optional[str]]]:
    """
    Translate a key into an (action, value) pair.

    Returns:
        ("digit", key) for '0'-'9', (action, None) for mapped keys, or None
        when the key means nothing to the calculator
    """
    if len(key) == 1 and "0" <= key <= "9":
        return "digit", key
    action = KEY_ACTIONS.get(key)
    if action is None:
        return None
    return action, None


def press_key(engine: CalculatorEngine, key: str) -> Display:
    """Feed one key to the engine; unmapped keys leave it untouched."""
    mapped = action_for_key(key)
    if mapped is None:
        return engine.display
    action, value = mapped
    return engine.dispatch(action, value)
