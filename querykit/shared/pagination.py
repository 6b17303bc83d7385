"""Reusable pagination helpers."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy import Select, distinct, func, select

from querykit.modules.listing.schemas import PageParam
from querykit.shared.exceptions import InvalidPageParam, MissingPageSizeForCount


def _page_values(page: PageParam | Mapping[Any, Any]) -> dict[str, Any]:
    if isinstance(page, PageParam):
        return page.model_dump()
    return {str(key): value for key, value in page.items()}


def paginate(stmt: Select, page: PageParam | Mapping[Any, Any] | None) -> Select:
    """Apply a limit/offset window.

    `size` selects the classic style (`number` defaults to 1), `limit` selects
    the raw style (`offset` defaults to 0).
    """
    if page is None:
        return stmt

    values = _page_values(page)
    size = values.get("size")
    if size is not None:
        number = values.get("number")
        if number is None:
            number = 1
        return stmt.limit(size).offset((number - 1) * size)

    limit = values.get("limit")
    if limit is not None:
        offset = values.get("offset")
        return stmt.limit(limit).offset(0 if offset is None else offset)

    raise InvalidPageParam("Page params require either size or limit")


def count_statement(stmt: Select, field: str) -> Select:
    """Build a distinct count of `field` over the rows selected by `stmt`."""
    subquery = stmt.order_by(None).subquery()
    return select(func.count(distinct(subquery.c[field]))).select_from(subquery)


def require_per_page(per_page: int | None) -> int:
    """Return `per_page` if it can divide a record count."""
    if per_page is None:
        raise MissingPageSizeForCount("Page count requires page size or page limit")
    if per_page <= 0:
        raise MissingPageSizeForCount(f"Page size must be positive, got {per_page}")
    return per_page


def page_count(total: int, per_page: int | None, allow_zero: bool = False) -> int:
    """Number of pages needed for `total` records.

    An empty result still counts as one page unless `allow_zero` is set.
    """
    count = (total - 1) // require_per_page(per_page) + 1
    if allow_zero or count > 0:
        return count
    return 1
