"""Keypad calculator engine with a Flask front-end."""

from .config import CalculatorConfig
from .engine import CalculatorEngine, UnknownActionError
from .formatting import format_result, parse_number
from .scheduler import Scheduler
from .state import CalculatorState, Display, Operator

__version__ = "0.1.0"

__all__ = [
    "CalculatorConfig",
    "CalculatorEngine",
    "UnknownActionError",
    "format_result",
    "parse_number",
    "Scheduler",
    "CalculatorState",
    "Display",
    "Operator",
]
