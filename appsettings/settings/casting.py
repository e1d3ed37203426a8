"""
Settings Casting
================
Coerce setting values between storage and callers.
"""

import json
import math
import re
from typing import Any, Optional, Union

from .schemas import DataType

_NUMERIC_PREFIX = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")

# Strings that count as false
FALSE_STRINGS = ("", "0")

# Integers saturate at the 64-bit range SQLite can store
INT_MAX = 2 ** 63 - 1
INT_MIN = -(2 ** 63)


def to_int(value: Any) -> int:
    """Integer value of a setting, truncating toward zero.

    Strings use their leading numeric part ("3.7" -> 3, "12px" -> 12);
    anything without one is 0. Results are clamped to [INT_MIN, INT_MAX],
    and NaN or infinite numbers give 0.
    """
    if value is None:
        return 0
    if isinstance(value, (bool, int)):
        return _clamp(int(value))
    if isinstance(value, float):
        return _float_to_int(value)
    if isinstance(value, bytes):
        value = value.decode(errors="ignore")
    if isinstance(value, str):
        match = _NUMERIC_PREFIX.match(value)
        if not match:
            return 0
        number = match.group(0).strip()
        if match.group(2) or match.group(3) or number.lstrip("+-").startswith("."):
            return _float_to_int(float(number))
        return _clamp(int(number))
    if isinstance(value, (list, tuple, dict, set)):
        return 1 if value else 0
    return _clamp(int(value))


def _clamp(number: int) -> int:
    return max(INT_MIN, min(INT_MAX, number))


def _float_to_int(number: float) -> int:
    if not math.isfinite(number):
        return 0
    return _clamp(int(number))


def to_bool(value: Any) -> bool:
    if isinstance(value, bytes):
        value = value.decode(errors="ignore")
    if isinstance(value, str):
        return value not in FALSE_STRINGS
    return bool(value)


def to_array(value: Any, out: bool) -> Union[list, dict, str]:
    if out:
        if not value or value == "0":
            return []
        if isinstance(value, (list, dict)):
            return value
        return json.loads(value)

    return json.dumps(value, separators=(",", ":"))


def cast_value(data_type: Optional[Union[str, DataType]], value: Any, out: bool = False) -> Any:
    """Cast a value for a data type.

    Args:
        data_type: Configured tag ("array", "int", "bool", ...) or DataType
        value: Value to cast
        out: True when reading from storage, False when writing to it

    Raises:
        json.JSONDecodeError: If a stored array value is not valid JSON
    """
    if not isinstance(data_type, DataType):
        data_type = DataType.from_tag(data_type)

    if data_type == DataType.ARRAY:
        return to_array(value, out)
    if data_type == DataType.INTEGER:
        return to_int(value)
    if data_type == DataType.BOOLEAN:
        return to_bool(value)
    return value
