"""Meter reading validation shared by charging and swap recording."""
import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from tracker_core.errors import MSG_INVALID_METER_READING, ValidationError

# Same pattern the UI applies before submission: ASCII digits with at most one decimal point.
METER_READING_PATTERN = re.compile(r"^[0-9]*\.?[0-9]*$")

# Numeric(10, 2) column: 8 integer digits, 2 decimals.
MAX_METER_READING = Decimal("99999999.99")
_CENTS = Decimal("0.01")


def parse_meter_reading(value: Any, field: str = "meter_reading") -> Decimal:
    """
    Parse a meter reading into a non-negative Decimal rounded to 2 places.
    Accepts "123", "123.45", "0.5", "7."; rejects "", ".", "12.3.4", "abc", "-5".
    """
    if value is None:
        raise ValidationError(field, MSG_INVALID_METER_READING)
    text = str(value).strip()
    if not text or not METER_READING_PATTERN.fullmatch(text) or not any(ch in "0123456789" for ch in text):
        raise ValidationError(field, MSG_INVALID_METER_READING)
    try:
        reading = Decimal(text)
    except InvalidOperation as e:
        raise ValidationError(field, MSG_INVALID_METER_READING) from e
    reading = reading.quantize(_CENTS, rounding=ROUND_HALF_UP)
    if reading > MAX_METER_READING:
        raise ValidationError(field, MSG_INVALID_METER_READING)
    return reading
