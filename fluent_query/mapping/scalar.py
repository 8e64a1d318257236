"""Scalar type table.

Decides whether a requested result type is a *scalar* (one column converted
to a value) or a *structured* record (columns mapped onto properties), and
converts column values to scalar types.

Classification is driven only by the table below, never by type names:

* exact entries match the type itself, not subclasses (``bool``, ``UUID``,
  ``timedelta``).
* assignable entries match the type and its subclasses: an ``int``
  subclass used as a typed identifier is a number, ``datetime`` is a
  ``date``, a ``str`` subclass is a string. Values are converted to the
  requested subclass.
* ``typing.NewType`` aliases resolve to their supertype.
"""

from __future__ import annotations

import datetime as dt
import uuid
from collections.abc import Callable
from decimal import Decimal, InvalidOperation
from typing import Any

from fluent_query.core.exceptions import TypeConversionError

Converter = Callable[[Any, type], Any]

_TRUE_STRINGS = frozenset({"1", "true", "t", "yes", "y", "on"})
_FALSE_STRINGS = frozenset({"0", "false", "f", "no", "n", "off"})


def _as_subclass(value: Any, target: type) -> Any:
    return value if type(value) is target else target(value)


def _to_bool(value: Any, target: type) -> bool:
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
        raise ValueError(f"unrecognized boolean literal {value!r}")
    return bool(value)


def _to_int(value: Any, target: type) -> int:
    if isinstance(value, float) and not value.is_integer():
        raise ValueError("value has a fractional part")
    if isinstance(value, Decimal) and value != value.to_integral_value():
        raise ValueError("value has a fractional part")
    if isinstance(value, bytes):
        value = value.decode()
    return _as_subclass(int(value), target)


def _to_float(value: Any, target: type) -> float:
    if isinstance(value, bytes):
        value = value.decode()
    return _as_subclass(float(value), target)


def _to_decimal(value: Any, target: type) -> Decimal:
    if isinstance(value, float):
        return _as_subclass(Decimal(str(value)), target)
    if isinstance(value, bytes):
        value = value.decode()
    try:
        result = Decimal(value)
    except InvalidOperation:
        raise ValueError("not a decimal number") from None
    return _as_subclass(result, target)


def _to_str(value: Any, target: type) -> str:
    if isinstance(value, (bytes, bytearray, memoryview)):
        value = bytes(value).decode()
    return _as_subclass(value, target)


def _to_bytes(value: Any, target: type) -> Any:
    if isinstance(value, str):
        value = value.encode()
    return _as_subclass(value, target)


def _to_date(value: Any, target: type) -> dt.date:
    if isinstance(value, dt.datetime):
        value = value.date()
    elif isinstance(value, str):
        try:
            value = dt.date.fromisoformat(value)
        except ValueError:
            value = dt.datetime.fromisoformat(value).date()
    elif not isinstance(value, dt.date):
        raise TypeError(f"unsupported source type {type(value).__name__}")
    if type(value) is target:
        return value
    return target(value.year, value.month, value.day)


def _to_datetime(value: Any, target: type) -> dt.datetime:
    if isinstance(value, str):
        value = dt.datetime.fromisoformat(value)
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        value = dt.datetime.fromtimestamp(value)
    elif isinstance(value, dt.date) and not isinstance(value, dt.datetime):
        value = dt.datetime.combine(value, dt.time())
    elif not isinstance(value, dt.datetime):
        raise TypeError(f"unsupported source type {type(value).__name__}")
    return value


def _to_time(value: Any, target: type) -> dt.time:
    if isinstance(value, dt.datetime):
        return value.time()
    if isinstance(value, str):
        return dt.time.fromisoformat(value)
    if isinstance(value, dt.time):
        return value
    raise TypeError(f"unsupported source type {type(value).__name__}")


def _to_timedelta(value: Any, target: type) -> dt.timedelta:
    if isinstance(value, dt.timedelta):
        return value
    return dt.timedelta(seconds=float(value))


def _to_uuid(value: Any, target: type) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    if isinstance(value, (bytes, bytearray)) and len(value) == 16:
        return uuid.UUID(bytes=bytes(value))
    return uuid.UUID(str(value))


_EXACT_TYPES: dict[type, Converter] = {
    bool: _to_bool,
    uuid.UUID: _to_uuid,
    dt.timedelta: _to_timedelta,
}

# Checked in order; more specific types first.
_ASSIGNABLE_TYPES: dict[type, Converter] = {
    int: _to_int,
    float: _to_float,
    Decimal: _to_decimal,
    str: _to_str,
    bytes: _to_bytes,
    bytearray: _to_bytes,
    memoryview: _to_bytes,
    dt.datetime: _to_datetime,
    dt.date: _to_date,
    dt.time: _to_time,
}

_registered: dict[type, Converter] = {}


def _construct(value: Any, target: type) -> Any:
    return value if isinstance(value, target) else target(value)


def _unwrap_new_type(target: Any) -> Any:
    while hasattr(target, "__supertype__"):
        target = target.__supertype__
    return target


def register_scalar_type(target: type, converter: Converter | None = None) -> None:
    """Register *target* as a scalar type.

    Args:
        target: The type to treat as a single-column value.
        converter: ``converter(value, target)`` turning a column value into
            an instance of *target*. Defaults to calling ``target(value)``.
    """
    _registered[target] = converter or _construct


def unregister_scalar_type(target: type) -> None:
    """Remove a registration made with register_scalar_type."""
    _registered.pop(target, None)


def _find_converter(target: Any) -> Converter | None:
    target = _unwrap_new_type(target)
    if not isinstance(target, type):
        return None
    if target in _registered:
        return _registered[target]
    if target in _EXACT_TYPES:
        return _EXACT_TYPES[target]
    for base, converter in _ASSIGNABLE_TYPES.items():
        if issubclass(target, base):
            return converter
    return None


def is_scalar_type(target: Any) -> bool:
    """Return True if *target* maps from a single column."""
    return _find_converter(target) is not None


def convert_value(value: Any, target: Any) -> Any:
    """Convert a column value to the scalar type *target*.

    ``None`` passes through unchanged.

    Raises:
        TypeConversionError: if *target* is not scalar or the value does not
            convert.
    """
    resolved = _unwrap_new_type(target)
    converter = _find_converter(resolved)
    if converter is None:
        raise TypeConversionError(value, resolved, "not a scalar type")
    if value is None:
        return None
    if type(value) is resolved:
        return value
    try:
        return converter(value, resolved)
    except (TypeError, ValueError, ArithmeticError) as e:
        raise TypeConversionError(value, resolved, str(e)) from e
