"""
Configuration for the calculator engine and its adapters.

Defaults match the on-screen calculator; each limit can be overridden from
the environment (``POCKET_CALC_*``), which the CLI populates from a ``.env``
file when one is present.
"""

import os
from dataclasses import dataclass

ENV_PREFIX = "POCKET_CALC_"

# Display limits
MAX_ENTRY_LENGTH = 12
MAX_DISPLAY_LENGTH = 12
MAX_FRACTION_DIGITS = 8

# Timers (milliseconds)
ERROR_CLEAR_MS = 2000
ADVISORY_MS = 1500


@dataclass(frozen=True)
class CalculatorConfig:
    """Tunable limits and timer delays for one engine."""

    max_entry_length: int = MAX_ENTRY_LENGTH
    max_display_length: int = MAX_DISPLAY_LENGTH
    max_fraction_digits: int = MAX_FRACTION_DIGITS
    error_clear_ms: int = ERROR_CLEAR_MS
    advisory_ms: int = ADVISORY_MS

    @classmethod
    def from_env(cls, environ=None) -> "CalculatorConfig":
        """
        Build a config from ``POCKET_CALC_*`` environment variables.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``)

        Returns:
            CalculatorConfig with overrides applied

        Raises:
            ValueError: If a variable is set but is not a positive integer
        """
        environ = os.environ if environ is None else environ
        return cls(
            max_entry_length=_int_env(environ, "MAX_ENTRY_LENGTH", MAX_ENTRY_LENGTH),
            error_clear_ms=_int_env(environ, "ERROR_CLEAR_MS", ERROR_CLEAR_MS),
            advisory_ms=_int_env(environ, "ADVISORY_MS", ADVISORY_MS),
        )


def _int_env(environ, name: str, default: int) -> int:
    raw = environ.get(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{ENV_PREFIX}{name} must be positive, got {value}")
    return value
