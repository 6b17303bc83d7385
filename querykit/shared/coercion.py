"""Conversion of string filter values to column python types."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from querykit.shared.exceptions import InvalidParams

_TRUE = {"1", "true", "yes", "y", "on"}
_FALSE = {"0", "false", "no", "n", "off"}


def _bad_value(field: str, kind: str) -> InvalidParams:
    return InvalidParams(f'Invalid filter value for field "{field}" ({kind})')


def _to_bool(field: str, text: str) -> bool:
    lowered = text.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise _bad_value(field, "boolean")


def column_python_type(column) -> type | None:
    """Python type of a column expression, `None` when the type has none."""
    try:
        return column.type.python_type
    except NotImplementedError:
        return None


def coerce_value(column, field: str, value: Any) -> Any:
    """Convert a string `value` to the python type of `column`.

    Non-string values and columns without a known python type are left as is.
    """
    if not isinstance(value, str):
        return value
    python_type = column_python_type(column)
    if python_type is None or python_type is str:
        return value

    text = value.strip()
    try:
        if python_type is bool:
            return _to_bool(field, text)
        if python_type is int:
            return int(text)
        if python_type is float:
            return float(text)
        if python_type is Decimal:
            return Decimal(text)
        if python_type is uuid.UUID:
            return uuid.UUID(text)
        if python_type is datetime:
            return datetime.fromisoformat(text.replace("Z", "+00:00"))
        if python_type is date:
            return date.fromisoformat(text)
    except (ValueError, InvalidOperation) as exc:
        raise _bad_value(field, python_type.__name__) from exc
    return value
