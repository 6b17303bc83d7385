"""Filter engine."""

from __future__ import annotations

from collections.abc import Callable, Collection, Mapping
from typing import Any

from sqlalchemy import Select

from querykit.shared.coercion import coerce_value
from querykit.shared.identifiers import to_field

FilterHandler = Callable[[Select, str, Any], Select]


def match_field(stmt: Select, field: str, value: Any) -> Select:
    """Default filter: exact match of the selected column named `field`.

    String values are converted to the column's python type first.
    """
    column = stmt.selected_columns[field]
    return stmt.where(column == coerce_value(column, field, value))


def apply_filter(
    stmt: Select,
    filters: Mapping[str, Any] | None,
    handler: FilterHandler = match_field,
    fields: Collection[str] | None = None,
) -> Select:
    """Fold every filter entry into `stmt`, in the mapping's order."""
    if filters is None:
        return stmt

    if fields is None:
        fields = stmt.selected_columns.keys()
    for name, value in filters.items():
        stmt = handler(stmt, to_field(name, fields), value)
    return stmt
