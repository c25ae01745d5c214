"""Number parsing and display formatting for the calculator."""

import logging
import math
from decimal import ROUND_HALF_UP, Decimal, localcontext

from .config import MAX_DISPLAY_LENGTH, MAX_FRACTION_DIGITS

logger = logging.getLogger(__name__)

ERROR_TEXT = "Error"
EXPONENT_DIGITS = 6
FALLBACK_EXPONENT_DIGITS = 5
LARGE_LIMIT = 1e12
SMALL_LIMIT = 1e-6
# Enough precision to hold any float exactly
EXACT_PRECISION = 1100


def parse_number(text: str) -> float:
    """
    Parse an entry string into a float.

    Args:
        text: Entry as shown on the display ("12.", "0.5", "1.5e+12", ...)

    Returns:
        The parsed value, or 0.0 when the text is not a finite number
    """
    try:
        value = float(text)
    except (TypeError, ValueError):
        logger.debug("Treating malformed entry %r as 0", text)
        return 0.0
    if not math.isfinite(value):
        logger.debug("Treating non-finite entry %r as 0", text)
        return 0.0
    return value


def _round_half_up(value: Decimal, digits: int) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = EXACT_PRECISION
        return value.quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP)


def to_fixed(value: float, digits: int) -> str:
    """Fixed-point string with exact ties rounded away from zero."""
    return format(_round_half_up(Decimal(value), digits), "f")


def to_exponential(value: float, digits: int) -> str:
    """
    Exponential notation with an unpadded, always-signed exponent (``1.5e+12``).

    The mantissa is rounded from the exact binary value, ties away from zero.
    """
    exact = Decimal(value)
    power = exact.adjusted() if value != 0 else 0
    with localcontext() as ctx:
        ctx.prec = EXACT_PRECISION
        mantissa = _round_half_up(exact.scaleb(-power), digits)
        if abs(mantissa) >= 10:
            power += 1
            mantissa = _round_half_up(exact.scaleb(-power), digits)
    mantissa = format(mantissa, "f")
    sign = "+" if power >= 0 else "-"
    return f"{mantissa}e{sign}{abs(power)}"


def to_plain(value: float) -> str:
    """Shortest round-tripping decimal string, never in exponent form."""
    if value == 0:
        return "0"
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def fraction_digits(text: str) -> int:
    return len(text.split(".", 1)[1]) if "." in text else 0


def format_result(
    value: float,
    max_fraction_digits: int = MAX_FRACTION_DIGITS,
    max_length: int = MAX_DISPLAY_LENGTH,
) -> str:
    """
    Format a computed value for the display.

    Args:
        value: Result of a calculation
        max_fraction_digits: Fraction digits kept in plain notation
        max_length: Longest string the display accepts before falling back
            to exponential notation

    Returns:
        Display string, or "Error" for infinities and NaN
    """
    if not math.isfinite(value):
        return ERROR_TEXT

    magnitude = abs(value)
    if magnitude >= LARGE_LIMIT or (magnitude <= SMALL_LIMIT and value != 0):
        formatted = to_exponential(value, EXPONENT_DIGITS)
    else:
        formatted = to_plain(value)
        if fraction_digits(formatted) > max_fraction_digits:
            formatted = to_fixed(value, max_fraction_digits).rstrip("0").rstrip(".")

    if len(formatted) > max_length:
        formatted = to_exponential(value, FALLBACK_EXPONENT_DIGITS)

    return formatted
