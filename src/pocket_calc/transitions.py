"""
=============================================================================
MODULE NAME: transitions.py
=============================================================================

INPUT FILES:
- None. Every function maps (state, input) to a `Transition`.

OUTPUT FILES:
- None. The engine applies the returned state and timer request.

NOTES:
- Functions here never touch a clock or an output device; the render
  command (`Display`) and any timer the engine must arm travel back in the
  `Transition`.
- While the Error state is active every input except `clear` is ignored
  until the auto-clear fires.
=============================================================================
"""

from __future__ import annotations

import functools
import math
import string
from dataclasses import dataclass, replace
from typing import Callable, Optional

from .config import CalculatorConfig
from .formatting import format_result, parse_number
from .state import CalculatorState, Display, Operator

DIVIDE_BY_ZERO_MESSAGE = "Cannot divide by zero"
INVALID_SQRT_MESSAGE = "Invalid input for square root"

ADVISORY_MEMORY_CLEARED = "Memory cleared"
ADVISORY_MEMORY_RECALLED = "Memory recalled"
ADVISORY_MEMORY_ADDED = "Added to memory"
ADVISORY_MEMORY_SUBTRACTED = "Subtracted from memory"

ERROR_CLEAR = "error-clear"
ADVISORY_REVERT = "advisory-revert"

DEFAULT_CONFIG = CalculatorConfig()


@dataclass(frozen=True, slots=True)
class TimerRequest:
    """Deferred follow-up the engine should schedule."""

    kind: str
    delay_ms: int
    restore_trace: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Transition:
    state: CalculatorState
    display: Display
    timer: Optional[TimerRequest] = None


def _settle(state: CalculatorState, timer: Optional[TimerRequest] = None) -> Transition:
    return Transition(state=state, display=Display.of(state), timer=timer)


def ignored_during_error(func: Callable[..., Transition]) -> Callable[..., Transition]:
    """Make a transition a no-op while the Error state is showing."""

    @functools.wraps(func)
    def wrapper(state: CalculatorState, *args, **kwargs) -> Transition:
        if state.error_active:
            return _settle(state)
        return func(state, *args, **kwargs)

    return wrapper


def _show_error(state: CalculatorState, message: str, config: CalculatorConfig) -> Transition:
    errored = replace(state, error_message=message, trace="", advisory=None)
    return _settle(errored, TimerRequest(ERROR_CLEAR, config.error_clear_ms))


def _show_result(
    state: CalculatorState, value: float, trace: str, config: CalculatorConfig, **changes
) -> CalculatorState:
    return replace(
        state,
        current_entry=format_result(
            value,
            max_fraction_digits=config.max_fraction_digits,
            max_length=config.max_display_length,
        ),
        trace=trace,
        advisory=None,
        awaiting_fresh_entry=True,
        **changes,
    )


def _show_advisory(state: CalculatorState, message: str, config: CalculatorConfig) -> Transition:
    # The trace underneath the advisory is what comes back when it expires
    timer = TimerRequest(ADVISORY_REVERT, config.advisory_ms, restore_trace=state.trace)
    return _settle(replace(state, advisory=message), timer)


@ignored_during_error
def input_digit(
    state: CalculatorState, digit: str, config: CalculatorConfig = DEFAULT_CONFIG
) -> Transition:
    """
    Append a digit to the entry, or start a new entry.

    Args:
        state: Current calculator state
        digit: Single character '0'-'9'
        config: Limits to apply

    Raises:
        ValueError: If digit is not a single decimal digit
    """
    if not isinstance(digit, str) or len(digit) != 1 or digit not in string.digits:
        raise ValueError(f"Not a digit: {digit!r}")

    entry = state.current_entry
    if state.awaiting_fresh_entry:
        return _settle(replace(state, current_entry=digit, awaiting_fresh_entry=False))
    if entry == "0":
        if digit == "0":
            return _settle(state)
        return _settle(replace(state, current_entry=digit))
    if len(entry) < config.max_entry_length:
        return _settle(replace(state, current_entry=entry + digit))
    return _settle(state)


@ignored_during_error
def input_decimal_point(
    state: CalculatorState, config: CalculatorConfig = DEFAULT_CONFIG
) -> Transition:
    if state.awaiting_fresh_entry:
        return _settle(replace(state, current_entry="0.", awaiting_fresh_entry=False))
    if "." not in state.current_entry:
        return _settle(replace(state, current_entry=state.current_entry + "."))
    return _settle(state)


@ignored_during_error
def set_operator(
    state: CalculatorState, operator: Operator, config: CalculatorConfig = DEFAULT_CONFIG
) -> Transition:
    """
    Arm an operator, evaluating the pending one first when an operand was
    entered since it was set (left to right, no precedence).
    """
    operator = Operator(operator)
    if state.pending_operator is not None and not state.awaiting_fresh_entry:
        chained = evaluate(state, config)
        if chained.state.error_active:
            return chained
        state = chained.state

    armed = replace(
        state,
        pending_operator=operator,
        pending_operand=state.current_entry,
        awaiting_fresh_entry=True,
        trace=f"{state.current_entry} {operator.symbol}",
        advisory=None,
    )
    return _settle(armed)


_OPERATIONS = {
    Operator.ADD: lambda x, y: x + y,
    Operator.SUBTRACT: lambda x, y: x - y,
    Operator.MULTIPLY: lambda x, y: x * y,
    Operator.DIVIDE: lambda x, y: x / y,
}


@ignored_during_error
def evaluate(state: CalculatorState, config: CalculatorConfig = DEFAULT_CONFIG) -> Transition:
    """Run the pending operation (the equals key)."""
    if state.pending_operator is None or state.pending_operand is None:
        return _settle(state)

    operator = state.pending_operator
    left = parse_number(state.pending_operand)
    right = parse_number(state.current_entry)
    if operator is Operator.DIVIDE and right == 0:
        return _show_error(state, DIVIDE_BY_ZERO_MESSAGE, config)

    result = _OPERATIONS[operator](left, right)
    trace = f"{state.pending_operand} {operator.symbol} {state.current_entry} ="
    return _settle(
        _show_result(state, result, trace, config, pending_operator=None, pending_operand=None)
    )


@ignored_during_error
def calculate_percentage(
    state: CalculatorState, config: CalculatorConfig = DEFAULT_CONFIG
) -> Transition:
    # Leaves a pending operator armed: the percentage becomes its right operand
    value = parse_number(state.current_entry) / 100
    trace = f"{state.current_entry}% ="
    return _settle(_show_result(state, value, trace, config))


@ignored_during_error
def calculate_square_root(
    state: CalculatorState, config: CalculatorConfig = DEFAULT_CONFIG
) -> Transition:
    value = parse_number(state.current_entry)
    if value < 0:
        return _show_error(state, INVALID_SQRT_MESSAGE, config)
    trace = f"√{state.current_entry} ="
    return _settle(_show_result(state, math.sqrt(value), trace, config))


@ignored_during_error
def memory_clear(state: CalculatorState, config: CalculatorConfig = DEFAULT_CONFIG) -> Transition:
    return _show_advisory(replace(state, memory=0.0), ADVISORY_MEMORY_CLEARED, config)


@ignored_during_error
def memory_recall(state: CalculatorState, config: CalculatorConfig = DEFAULT_CONFIG) -> Transition:
    recalled = replace(
        state,
        current_entry=format_result(
            state.memory,
            max_fraction_digits=config.max_fraction_digits,
            max_length=config.max_display_length,
        ),
        awaiting_fresh_entry=True,
    )
    return _show_advisory(recalled, ADVISORY_MEMORY_RECALLED, config)


@ignored_during_error
def memory_add(state: CalculatorState, config: CalculatorConfig = DEFAULT_CONFIG) -> Transition:
    memory = state.memory + parse_number(state.current_entry)
    return _show_advisory(replace(state, memory=memory), ADVISORY_MEMORY_ADDED, config)


@ignored_during_error
def memory_subtract(
    state: CalculatorState, config: CalculatorConfig = DEFAULT_CONFIG
) -> Transition:
    memory = state.memory - parse_number(state.current_entry)
    return _show_advisory(replace(state, memory=memory), ADVISORY_MEMORY_SUBTRACTED, config)


def clear(state: CalculatorState, config: CalculatorConfig = DEFAULT_CONFIG) -> Transition:
    """Reset everything except the memory register; also leaves the Error state."""
    return _settle(CalculatorState(memory=state.memory))


def expire_advisory(state: CalculatorState, restore_trace: str) -> Transition:
    """Drop the advisory and put back the trace it covered."""
    if state.advisory is None:
        return _settle(state)
    return _settle(replace(state, advisory=None, trace=restore_trace))
