"""
Calculator engine.

Wraps the pure transitions in `transitions` with the bits that need an
identity: the current state, the timers for the Error auto-clear and the
memory advisories, and the listeners that render each new display.
"""

import logging
from typing import Callable, Dict, List, Optional

from . import transitions
from .config import CalculatorConfig
from .scheduler import Scheduler
from .state import CalculatorState, Display, Operator
from .transitions import Transition

logger = logging.getLogger(__name__)

DisplayListener = Callable[[Display], None]


class UnknownActionError(ValueError):
    """Raised by `CalculatorEngine.dispatch` for an action it does not know."""


class CalculatorEngine:
    """One calculator: state, timers and display listeners."""

    def __init__(
        self,
        config: Optional[CalculatorConfig] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        self.config = config or CalculatorConfig()
        self.scheduler = scheduler or Scheduler()
        self._state = CalculatorState()
        self._display = Display.of(self._state)
        self._listeners: List[DisplayListener] = []
        # Bumped whenever a pending timer of that kind becomes stale
        self._error_generation = 0
        self._advisory_generation = 0

    @property
    def state(self) -> CalculatorState:
        return self._state

    @property
    def display(self) -> Display:
        return self._display

    def subscribe(self, listener: DisplayListener) -> None:
        """Call listener with every new display, including timer-driven ones."""
        self._listeners.append(listener)

    def tick(self) -> int:
        """Run timers that have come due; returns how many fired."""
        return self.scheduler.run_due()

    # Inputs

    def input_digit(self, digit: str) -> Display:
        return self._apply(transitions.input_digit(self._state, digit, self.config))

    def input_decimal_point(self) -> Display:
        return self._apply(transitions.input_decimal_point(self._state, self.config))

    def set_operator(self, operator: Operator) -> Display:
        return self._apply(transitions.set_operator(self._state, operator, self.config))

    def evaluate(self) -> Display:
        return self._apply(transitions.evaluate(self._state, self.config))

    def calculate_percentage(self) -> Display:
        return self._apply(transitions.calculate_percentage(self._state, self.config))

    def calculate_square_root(self) -> Display:
        return self._apply(transitions.calculate_square_root(self._state, self.config))

    def memory_clear(self) -> Display:
        return self._apply(transitions.memory_clear(self._state, self.config))

    def memory_recall(self) -> Display:
        return self._apply(transitions.memory_recall(self._state, self.config))

    def memory_add(self) -> Display:
        return self._apply(transitions.memory_add(self._state, self.config))

    def memory_subtract(self) -> Display:
        return self._apply(transitions.memory_subtract(self._state, self.config))

    def clear(self) -> Display:
        # A manual clear makes any pending auto-clear stale
        self._error_generation += 1
        return self._apply(transitions.clear(self._state, self.config))

    def dispatch(self, action: str, value: Optional[str] = None) -> Display:
        """
        Route a named action from an adapter to the matching input.

        Args:
            action: Button/action name ("digit", "add", "memory-recall", ...)
            value: The digit for the "digit" action, ignored otherwise

        Returns:
            The display after the action

        Raises:
            UnknownActionError: If action is not a known name
            ValueError: If a digit action carries no single digit
        """
        if not isinstance(action, str):
            raise UnknownActionError(f"Unknown action: {action!r}")
        if action == "digit":
            if value is None:
                raise ValueError("digit action requires a value")
            return self.input_digit(value)
        if action in _OPERATOR_ACTIONS:
            return self.set_operator(Operator(action))
        handler = _ACTIONS.get(action)
        if handler is None:
            raise UnknownActionError(f"Unknown action: {action}")
        return handler(self)

    # Internals

    def _apply(self, transition: Transition) -> Display:
        was_error = self._state.error_active
        self._state = transition.state
        self._display = transition.display
        if self._state.error_active and not was_error:
            logger.info("Entered error state: %s", self._state.error_message)
        if transition.timer is not None:
            self._schedule(transition.timer)
        for listener in self._listeners:
            listener(self._display)
        return self._display

    def _schedule(self, timer: transitions.TimerRequest) -> None:
        if timer.kind == transitions.ERROR_CLEAR:
            self._error_generation += 1
            generation = self._error_generation
            self.scheduler.call_later(
                timer.delay_ms, lambda: self._auto_clear(generation), name="error-clear"
            )
        elif timer.kind == transitions.ADVISORY_REVERT:
            self._advisory_generation += 1
            generation = self._advisory_generation
            restore = timer.restore_trace or ""
            self.scheduler.call_later(
                timer.delay_ms,
                lambda: self._expire_advisory(generation, restore),
                name="advisory-revert",
            )
        else:
            raise ValueError(f"Unknown timer kind: {timer.kind}")

    def _auto_clear(self, generation: int) -> None:
        if generation != self._error_generation:
            logger.debug("Dropping stale auto-clear (generation %d)", generation)
            return
        logger.debug("Auto-clearing error state")
        self._apply(transitions.clear(self._state, self.config))

    def _expire_advisory(self, generation: int, restore_trace: str) -> None:
        if generation != self._advisory_generation:
            logger.debug("Dropping stale advisory revert (generation %d)", generation)
            return
        self._apply(transitions.expire_advisory(self._state, restore_trace))


_OPERATOR_ACTIONS = {op.value for op in Operator}

_ACTIONS: Dict[str, Callable[[CalculatorEngine], Display]] = {
    "decimal": CalculatorEngine.input_decimal_point,
    "equals": CalculatorEngine.evaluate,
    "clear": CalculatorEngine.clear,
    "percentage": CalculatorEngine.calculate_percentage,
    "square-root": CalculatorEngine.calculate_square_root,
    "memory-clear": CalculatorEngine.memory_clear,
    "memory-recall": CalculatorEngine.memory_recall,
    "memory-add": CalculatorEngine.memory_add,
    "memory-subtract": CalculatorEngine.memory_subtract,
}

ACTIONS = frozenset(_ACTIONS) | _OPERATOR_ACTIONS | {"digit"}
