"""Tests for the pure state transitions."""

import pytest

from pocket_calc import transitions as t
from pocket_calc.config import CalculatorConfig
from pocket_calc.state import CalculatorState, Operator


def run(state, *steps):
    """Apply steps given as "0"-"9", ".", an Operator, or a transition function."""
    for step in steps:
        if isinstance(step, Operator):
            state = t.set_operator(state, step).state
        elif step == ".":
            state = t.input_decimal_point(state).state
        elif isinstance(step, str):
            for ch in step:
                state = (t.input_decimal_point(state) if ch == "." else t.input_digit(state, ch)).state
        else:
            state = step(state).state
    return state


def test_digits_build_the_entry_verbatim():
    assert run(CalculatorState(), "123.45").current_entry == "123.45"
    assert run(CalculatorState(), "0.007").current_entry == "0.007"


def test_leading_zero_collapses():
    assert run(CalculatorState(), "05").current_entry == "5"
    assert run(CalculatorState(), "000").current_entry == "0"


def test_entry_length_is_capped():
    state = run(CalculatorState(), "1234567890123")
    assert state.current_entry == "123456789012"

    short = t.input_digit(CalculatorState(current_entry="123"), "4", CalculatorConfig(max_entry_length=3))
    assert short.state.current_entry == "123"


def test_single_decimal_point():
    assert run(CalculatorState(), "1..5.").current_entry == "1.5"


def test_decimal_after_result_starts_fresh():
    state = CalculatorState(current_entry="42", awaiting_fresh_entry=True)
    state = t.input_decimal_point(state).state
    assert state.current_entry == "0."
    assert state.awaiting_fresh_entry is False


def test_rejects_non_digits():
    with pytest.raises(ValueError):
        t.input_digit(CalculatorState(), "a")
    with pytest.raises(ValueError):
        t.input_digit(CalculatorState(), "12")


def test_set_operator_arms_and_traces():
    state = run(CalculatorState(), "12", Operator.SUBTRACT)
    assert state.pending_operator is Operator.SUBTRACT
    assert state.pending_operand == "12"
    assert state.awaiting_fresh_entry is True
    assert state.trace == "12 -"


def test_evaluate_without_operator_is_noop():
    state = run(CalculatorState(), "7")
    result = t.evaluate(state)
    assert result.state == state
    assert result.timer is None


def test_evaluate_adds_and_traces():
    state = run(CalculatorState(), "2", Operator.ADD, "3", t.evaluate)
    assert state.current_entry == "5"
    assert state.trace == "2 + 3 ="
    assert state.pending_operator is None
    assert state.pending_operand is None
    assert state.awaiting_fresh_entry is True


def test_operators_chain_left_to_right():
    state = run(CalculatorState(), "2", Operator.ADD, "3", Operator.MULTIPLY)
    assert state.pending_operand == "5"
    assert state.trace == "5 ×"

    state = run(state, "4", t.evaluate)
    assert state.current_entry == "20"
    assert state.trace == "5 × 4 ="


def test_repeated_operator_does_not_chain():
    state = run(CalculatorState(), "9", Operator.ADD, Operator.DIVIDE)
    assert state.pending_operator is Operator.DIVIDE
    assert state.pending_operand == "9"


def test_divide_by_zero_enters_error_state():
    result = t.evaluate(run(CalculatorState(), "10", Operator.DIVIDE, "0"))
    assert result.state.error_message == t.DIVIDE_BY_ZERO_MESSAGE
    assert result.display.error_active is True
    assert result.display.primary == "Cannot divide by zero"
    assert result.display.trace == ""
    assert result.timer.kind == t.ERROR_CLEAR
    assert result.timer.delay_ms == 2000


def test_divide_by_zero_while_chaining_does_not_arm():
    result = t.set_operator(run(CalculatorState(), "1", Operator.DIVIDE, "0"), Operator.ADD)
    assert result.state.error_active
    assert result.state.pending_operator is Operator.DIVIDE


def test_overflow_formats_as_error_text_without_error_state():
    state = CalculatorState(
        current_entry="10", pending_operand="1e308", pending_operator=Operator.MULTIPLY
    )
    result = t.evaluate(state)
    assert result.state.current_entry == "Error"
    assert result.state.error_active is False
    assert result.timer is None


def test_percentage():
    state = run(CalculatorState(), "50", t.calculate_percentage)
    assert state.current_entry == "0.5"
    assert state.trace == "50% ="
    assert state.awaiting_fresh_entry is True


def test_percentage_keeps_pending_operator():
    state = run(CalculatorState(), "200", Operator.ADD, "10", t.calculate_percentage)
    assert state.pending_operator is Operator.ADD
    state = run(state, t.evaluate)
    assert state.current_entry == "200.1"
    assert state.trace == "200 + 0.1 ="


def test_square_root():
    state = run(CalculatorState(), "16", t.calculate_square_root)
    assert state.current_entry == "4"
    assert state.trace == "√16 ="


def test_square_root_of_negative_is_error():
    result = t.calculate_square_root(CalculatorState(current_entry="-4"))
    assert result.display.primary == "Invalid input for square root"
    assert result.display.error_active is True
    assert result.timer.kind == t.ERROR_CLEAR


def test_input_ignored_during_error_state():
    errored = t.calculate_square_root(CalculatorState(current_entry="-4")).state
    for step in (
        lambda s: t.input_digit(s, "7"),
        t.input_decimal_point,
        lambda s: t.set_operator(s, Operator.ADD),
        t.evaluate,
        t.calculate_percentage,
        t.memory_add,
    ):
        result = step(errored)
        assert result.state == errored
        assert result.timer is None


def test_clear_resets_all_but_memory():
    state = CalculatorState(
        current_entry="9",
        pending_operand="3",
        pending_operator=Operator.ADD,
        awaiting_fresh_entry=True,
        memory=4.0,
        trace="3 +",
        error_message="Cannot divide by zero",
    )
    once = t.clear(state).state
    assert once == CalculatorState(memory=4.0)
    assert t.clear(once).state == once


def test_memory_advisory_overlays_trace():
    state = run(CalculatorState(), "2", Operator.ADD)
    result = t.memory_add(state)
    assert result.state.memory == 2.0
    assert result.display.trace == "Added to memory"
    assert result.timer.kind == t.ADVISORY_REVERT
    assert result.timer.delay_ms == 1500
    assert result.timer.restore_trace == "2 +"

    reverted = t.expire_advisory(result.state, result.timer.restore_trace)
    assert reverted.display.trace == "2 +"


def test_memory_recall_formats_register():
    result = t.memory_recall(CalculatorState(memory=0.25))
    assert result.state.current_entry == "0.25"
    assert result.state.awaiting_fresh_entry is True
    assert result.display.trace == "Memory recalled"


def test_active_operator_follows_pending_operator():
    state = run(CalculatorState(), "2", Operator.MULTIPLY, "3")
    assert t.evaluate(state).display.active_operator is None
    assert t.input_digit(state, "1").display.active_operator is Operator.MULTIPLY
