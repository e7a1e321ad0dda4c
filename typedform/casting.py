"""Per-type casting rules for raw form input.

Every FieldType maps to exactly one caster in CASTERS. Casters raise
ValueError when the raw value cannot be represented in the target type.
Parsing is locale independent: only ASCII digits, "." and exponents are
accepted for numbers.
"""

import math
import re
from collections.abc import Callable, Collection
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from typedform.enums import FieldType

INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
FLOAT_PATTERN = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

TRUE_STRINGS = frozenset({"true", "1"})
FALSE_STRINGS = frozenset({"false", "0"})


def _cast_integer(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("boolean is not an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and INTEGER_PATTERN.fullmatch(value):
        return int(value)
    raise ValueError("not an integer")


def _cast_float(value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError("boolean is not a float")
    if isinstance(value, (int, float)):
        result = float(value)
    elif isinstance(value, str) and FLOAT_PATTERN.fullmatch(value):
        result = float(value)
    else:
        raise ValueError("not a float")

    # Overflowing exponents such as "1e999" parse to inf
    if not math.isfinite(result):
        raise ValueError("float is not finite")
    return result


def _cast_decimal(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise ValueError("boolean is not a decimal")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(repr(value))
    elif isinstance(value, str) and FLOAT_PATTERN.fullmatch(value):
        result = Decimal(value)
    else:
        raise ValueError("not a decimal")

    if not result.is_finite():
        raise ValueError("decimal is not finite")
    return result


def _cast_string(value: Any) -> str:
    if isinstance(value, str):
        return value
    raise ValueError("not a string")


def _cast_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.lower()
        if lowered in TRUE_STRINGS:
            return True
        if lowered in FALSE_STRINGS:
            return False
    raise ValueError("not a boolean")


def _cast_date(value: Any) -> date:
    if isinstance(value, datetime):
        raise ValueError("datetime is not a date")
    if isinstance(value, date):
        return value
    if isinstance(value, str) and DATE_PATTERN.fullmatch(value):
        return date.fromisoformat(value)
    raise ValueError("not a date")


def _cast_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and DATE_PATTERN.match(value):
        return datetime.fromisoformat(value)
    raise ValueError("not a datetime")


CASTERS: dict[FieldType, Callable[[Any], Any]] = {
    FieldType.INTEGER: _cast_integer,
    FieldType.FLOAT: _cast_float,
    FieldType.DECIMAL: _cast_decimal,
    FieldType.STRING: _cast_string,
    FieldType.BOOLEAN: _cast_boolean,
    FieldType.DATE: _cast_date,
    FieldType.DATETIME: _cast_datetime,
}


def cast_value(
    field_type: FieldType,
    value: Any,
    *,
    empty_values: Collection[str] = ("",),
    trim_strings: bool = False,
) -> Any:
    """Cast a raw value to the given field type.

    Args:
        field_type: Declared type of the target field
        value: Raw value supplied by the UI layer
        empty_values: Raw values treated as "no value" (cast to None)
        trim_strings: Strip surrounding whitespace from string input first

    Returns:
        The cast value, or None for empty input

    Raises:
        ValueError: If the value cannot be cast
    """
    if trim_strings and isinstance(value, str):
        value = value.strip()

    if value is None or (isinstance(value, str) and value in empty_values):
        return None

    return CASTERS[field_type](value)


def cast_error_message(field_type: FieldType, value: Any) -> str:
    """Human-readable message for a failed cast."""
    return f"cannot cast {value!r} to {field_type.value}"
