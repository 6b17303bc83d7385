"""Sort engine."""

from __future__ import annotations

from collections.abc import Callable, Collection

from sqlalchemy import Select

from querykit.core.enums import SortDirection
from querykit.shared.identifiers import to_field

SortHandler = Callable[[Select, str, SortDirection], Select]


def order_by_field(stmt: Select, field: str, direction: SortDirection) -> Select:
    """Default sort: order by the selected column named `field`."""
    column = stmt.selected_columns[field]
    return stmt.order_by(column.desc() if direction == SortDirection.DESC else column.asc())


def parse_sort(sort: str) -> tuple[str, SortDirection]:
    """Split `-field` / `field` into field name and direction."""
    if sort.startswith("-"):
        return sort[1:], SortDirection.DESC
    return sort, SortDirection.ASC


def apply_sort(
    stmt: Select,
    sort: str | None,
    handler: SortHandler = order_by_field,
    fields: Collection[str] | None = None,
) -> Select:
    """Order `stmt` according to the sort param; empty or missing sort is a no-op."""
    if not sort:
        return stmt

    name, direction = parse_sort(sort)
    if fields is None:
        fields = stmt.selected_columns.keys()
    return handler(stmt, to_field(name, fields), direction)
