"""
=============================================================================
MODULE NAME: state.py
=============================================================================

INPUT FILES:
- None (immutable dataclasses only).

OUTPUT FILES:
- None. `Display.to_dict()` feeds the JSON API.

NOTES:
- `CalculatorState` is never mutated; transitions build a new one with
  `dataclasses.replace`.
- The memory register lives in the state but is skipped by `clear`.
=============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


class Operator(str, Enum):
    """Binary operators accepted by the engine."""

    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    DIVIDE = "divide"

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self]


_SYMBOLS = {
    Operator.ADD: "+",
    Operator.SUBTRACT: "-",
    Operator.MULTIPLY: "×",
    Operator.DIVIDE: "÷",
}


@dataclass(frozen=True, slots=True)
class CalculatorState:
    """Everything the engine knows about one calculator."""

    current_entry: str = "0"
    pending_operand: Optional[str] = None
    pending_operator: Optional[Operator] = None
    awaiting_fresh_entry: bool = False
    memory: float = 0.0
    trace: str = ""
    error_message: Optional[str] = None
    advisory: Optional[str] = None

    @property
    def error_active(self) -> bool:
        return self.error_message is not None


@dataclass(frozen=True, slots=True)
class Display:
    """Render command handed to the display adapter."""

    primary: str
    trace: str
    error_active: bool = False
    active_operator: Optional[Operator] = None

    @classmethod
    def of(cls, state: CalculatorState) -> "Display":
        if state.error_active:
            return cls(primary=state.error_message, trace="", error_active=True)
        trace = state.advisory if state.advisory is not None else state.trace
        return cls(
            primary=state.current_entry,
            trace=trace,
            active_operator=state.pending_operator,
        )

    def to_dict(self) -> Dict:
        return {
            "primary": self.primary,
            "trace": self.trace,
            "error_active": self.error_active,
            "active_operator": self.active_operator.value if self.active_operator else None,
        }


__all__ = ["Operator", "CalculatorState", "Display"]
