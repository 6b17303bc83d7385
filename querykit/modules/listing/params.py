"""Normalization of loosely typed list params."""

from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from querykit.core.enums import PAGE_KEYS, TOP_LEVEL_KEYS, ParamKey
from querykit.modules.listing.schemas import PageParam, Params
from querykit.shared.exceptions import InvalidPageParam, InvalidParams
from querykit.shared.identifiers import to_int, to_param_key

RawParams = Mapping[Any, Any] | Iterable[tuple[Any, Any]]


def normalize_page(
    page: PageParam | Mapping[Any, Any],
    fields: Collection[str] = (),
) -> PageParam:
    """Coerce page keys and values, dropping keys other than number/size/offset/limit."""
    if isinstance(page, PageParam):
        return page
    if not isinstance(page, Mapping):
        raise InvalidPageParam(f"Page params must be a mapping, got {type(page).__name__}")

    values: dict[str, Any] = {}
    for key, value in page.items():
        key = to_param_key(key, fields)
        if key not in PAGE_KEYS:
            continue
        try:
            values[key.value] = to_int(value)
        except ValueError as exc:
            raise InvalidPageParam(f"Page param {key.value!r} must be an integer") from exc

    try:
        return PageParam(**values)
    except ValidationError as exc:
        raise InvalidPageParam(_describe(exc)) from exc


def normalize_params(
    raw: Params | RawParams | None,
    fields: Collection[str] = (),
) -> Params | None:
    """Normalize params into a `Params` instance.

    `None` stays `None` and an existing `Params` is returned as is. Keys may be
    strings or `ParamKey` members; strings that are not known identifiers raise
    `UnknownIdentifier`. Known identifiers outside page/filter/sort are dropped,
    including the names in `fields` (the queried schema's field names).
    """
    if raw is None:
        return None
    if isinstance(raw, Params):
        return raw

    params: dict[str, Any] = {}
    for key, value in dict(raw).items():
        key = to_param_key(key, fields)
        if key in TOP_LEVEL_KEYS:
            params[key.value] = value

    page = params.get(ParamKey.PAGE.value)
    if page is not None:
        params[ParamKey.PAGE.value] = normalize_page(page, fields)

    try:
        return Params(**params)
    except ValidationError as exc:
        raise InvalidParams(_describe(exc)) from exc


def _describe(exc: ValidationError) -> str:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        messages.append(f"{location}: {error['msg']}" if location else error["msg"])
    return "; ".join(messages)
