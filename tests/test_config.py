"""Tests for environment-driven configuration."""

import pytest

from pocket_calc.config import CalculatorConfig


def test_defaults():
    config = CalculatorConfig.from_env({})
    assert config.max_entry_length == 12
    assert config.error_clear_ms == 2000
    assert config.advisory_ms == 1500
    assert config.max_fraction_digits == 8


def test_env_overrides():
    config = CalculatorConfig.from_env(
        {"POCKET_CALC_ERROR_CLEAR_MS": "500", "POCKET_CALC_MAX_ENTRY_LENGTH": " "}
    )
    assert config.error_clear_ms == 500
    assert config.max_entry_length == 12


@pytest.mark.parametrize("raw", ["soon", "0", "-5"])
def test_invalid_values(raw):
    with pytest.raises(ValueError):
        CalculatorConfig.from_env({"POCKET_CALC_ADVISORY_MS": raw})
