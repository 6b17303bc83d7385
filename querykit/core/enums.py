"""Core enums used across modules."""

from enum import StrEnum


class ParamKey(StrEnum):
    """Canonical identifiers recognized in list params."""

    PAGE = "page"
    FILTER = "filter"
    SORT = "sort"
    NUMBER = "number"
    SIZE = "size"
    OFFSET = "offset"
    LIMIT = "limit"


class SortDirection(StrEnum):
    """Ordering direction."""

    ASC = "asc"
    DESC = "desc"


TOP_LEVEL_KEYS = frozenset({ParamKey.PAGE, ParamKey.FILTER, ParamKey.SORT})
PAGE_KEYS = frozenset({ParamKey.NUMBER, ParamKey.SIZE, ParamKey.OFFSET, ParamKey.LIMIT})
