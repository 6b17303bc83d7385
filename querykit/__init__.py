"""Pagination, sorting and filtering for SQLAlchemy select statements."""

from querykit.core.enums import ParamKey, SortDirection
from querykit.modules.listing.params import normalize_params
from querykit.modules.listing.repository import QueryRepository, SQLAlchemyRepository
from querykit.modules.listing.rules import filter_rule, sort_rule
from querykit.modules.listing.schemas import PageParam, Params
from querykit.modules.listing.service import ListQuery
from querykit.shared.exceptions import (
    AppException,
    InvalidPageParam,
    InvalidParams,
    MissingPageSizeForCount,
    UnknownIdentifier,
)

__all__ = [
    "AppException",
    "InvalidPageParam",
    "InvalidParams",
    "ListQuery",
    "MissingPageSizeForCount",
    "PageParam",
    "ParamKey",
    "Params",
    "QueryRepository",
    "SQLAlchemyRepository",
    "SortDirection",
    "UnknownIdentifier",
    "filter_rule",
    "normalize_params",
    "sort_rule",
]
