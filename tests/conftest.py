import pytest

from pocket_calc.config import CalculatorConfig
from pocket_calc.engine import CalculatorEngine
from pocket_calc.scheduler import ManualClock, Scheduler


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def engine(clock):
    return CalculatorEngine(CalculatorConfig(), Scheduler(clock))


@pytest.fixture
def type_keys():
    """Type a string of digits and decimal points into an engine."""

    def _type(engine, digits):
        for ch in digits:
            if ch == ".":
                engine.input_decimal_point()
            else:
                engine.input_digit(ch)

    return _type
