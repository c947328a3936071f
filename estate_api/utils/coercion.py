"""
Lenient parsing of listing form values.

Multipart forms deliver every field as text, so numeric and boolean listing
fields are coerced here instead of being rejected. Integers and decimals are
read from the leading numeric prefix of the value ("3 rooms" -> 3), anything
unreadable falls back to a caller supplied default.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Optional
import re

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_DECIMAL_PREFIX = re.compile(r"\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)")

TRUE_VALUES = frozenset({"1", "true"})


def parse_int(value: Any) -> Optional[int]:
    """Return the integer prefix of ``value`` or None when there is none."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, (float, Decimal)):
        try:
            return int(value)
        except (ValueError, OverflowError, InvalidOperation):
            return None

    match = _INT_PREFIX.match(str(value))
    return int(match.group(1)) if match else None


def parse_decimal(value: Any) -> Optional[Decimal]:
    """Return the decimal prefix of ``value`` or None when there is none."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, (int, float)):
        result = Decimal(str(value))
        return result if result.is_finite() else None

    match = _DECIMAL_PREFIX.match(str(value))
    return Decimal(match.group(1)) if match else None


def coerce_int(value: Any, default: Optional[int] = 0) -> Optional[int]:
    parsed = parse_int(value)
    return default if parsed is None else parsed


def coerce_decimal(value: Any, default: Optional[Decimal] = Decimal("0.0")) -> Optional[Decimal]:
    parsed = parse_decimal(value)
    return default if parsed is None else parsed


def coerce_flag(value: Any) -> bool:
    """
    Interpret a checkbox-style value.

    Only ``True``, ``1``, ``"1"`` and ``"true"`` (any case) count as set.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value == 1
    if isinstance(value, str):
        return value.strip().lower() in TRUE_VALUES
    return False


def clean_text(value: Optional[str]) -> Optional[str]:
    """Strip surrounding whitespace; blank strings become None."""
    if value is None:
        return None
    value = value.strip()
    return value or None
