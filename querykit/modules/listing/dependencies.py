"""FastAPI dependencies reading list params from the query string."""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Any

from fastapi import Depends, Request

from querykit.core.config import Settings, get_settings
from querykit.core.enums import ParamKey
from querykit.modules.listing.params import normalize_params
from querykit.modules.listing.schemas import Params
from querykit.shared.exceptions import InvalidPageParam

_NESTED_KEY = re.compile(r"^(?P<group>page|filter)\[(?P<key>[^\[\]]+)\]$")


def parse_query_params(items: Iterable[tuple[str, str]]) -> dict[str, Any] | None:
    """Collect `page[x]`, `filter[x]` and `sort` query items into raw params.

    Unrelated query items are ignored. Returns `None` when nothing was found.
    """
    raw: dict[str, Any] = {}
    for key, value in items:
        match = _NESTED_KEY.match(key)
        if match:
            raw.setdefault(match["group"], {})[match["key"]] = value
        elif key == ParamKey.SORT:
            raw[ParamKey.SORT.value] = value
    return raw or None


def enforce_max_page_size(params: Params | None, max_page_size: int | None) -> None:
    """Reject page windows larger than `max_page_size`."""
    if params is None or params.page is None or max_page_size is None:
        return
    per_page = params.page.per_page
    if per_page is not None and per_page > max_page_size:
        raise InvalidPageParam(f"Page size must not exceed {max_page_size}")


def get_list_params(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> Params | None:
    """FastAPI dependency for list params."""
    params = normalize_params(parse_query_params(request.query_params.multi_items()))
    enforce_max_page_size(params, settings.max_page_size)
    return params
