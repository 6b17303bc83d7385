"""List query business logic layer.

Subclass `ListQuery` to expose pagination, sorting and filtering over a base
statement:

    class ArticleQuery(ListQuery):
        def base_queryable(self) -> Select:
            return select(Article).where(Article.deleted_at.is_(None))

        @sort_rule("author")
        def sort_by_author_name(self, stmt, field, direction):
            ...

        @filter_rule("tag")
        def filter_by_tag(self, stmt, field, value):
            ...

    await ArticleQuery(repository).list({"page": {"size": 10}, "sort": "-published_at"})

Without a matching rule, sorting orders by the named column and filtering
matches the named column exactly. Rules are tried in declaration order, rules
of a subclass before those of its parents.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Collection
from typing import Any

from sqlalchemy import Select

from querykit.core.config import get_settings
from querykit.core.metrics import track_query
from querykit.modules.listing.filtering import apply_filter, match_field
from querykit.modules.listing.params import RawParams, normalize_params
from querykit.modules.listing.repository import QueryRepository
from querykit.modules.listing.rules import FILTER, SORT, RuleChain, bind_rules, collect_rule_names
from querykit.modules.listing.schemas import Params
from querykit.modules.listing.sorting import apply_sort, order_by_field
from querykit.shared.pagination import (
    count_statement,
    page_count,
    paginate,
    require_per_page,
)

logger = logging.getLogger(__name__)


class ListQuery(ABC):
    """Filter, sort and paginate a base statement, then run it through a repository."""

    count_field: str | None = None

    _sort_rule_names: tuple[str, ...] = ()
    _filter_rule_names: tuple[str, ...] = ()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._sort_rule_names = collect_rule_names(cls.__mro__, SORT)
        cls._filter_rule_names = collect_rule_names(cls.__mro__, FILTER)

    def __init__(self, repository: QueryRepository | None = None) -> None:
        self.repository = repository

    @abstractmethod
    def base_queryable(self) -> Select:
        """Initial statement every list and count starts from."""

    def repo(self) -> QueryRepository:
        """Repository that executes the built statements."""
        if self.repository is None:
            raise TypeError(
                f"{type(self).__name__} has no repository: pass one in or override repo()",
            )
        return self.repository

    def fields(self, stmt: Select) -> Collection[str]:
        """Field names accepted in sort and filter params."""
        return stmt.selected_columns.keys()

    def normalize(self, params: Params | RawParams | None) -> Params | None:
        """Normalize params, recognizing this query's field names as identifiers."""
        if params is None or isinstance(params, Params):
            return params
        return normalize_params(params, self.fields(self.base_queryable()))

    @property
    def name(self) -> str:
        return type(self).__name__

    def sort_handler(self) -> RuleChain:
        return RuleChain(bind_rules(self, self._sort_rule_names), default=order_by_field)

    def filter_handler(self) -> RuleChain:
        return RuleChain(bind_rules(self, self._filter_rule_names), default=match_field)

    def filtered_statement(self, params: Params | None) -> Select:
        stmt = self.base_queryable()
        if params is None:
            return stmt
        return apply_filter(stmt, params.filter, self.filter_handler(), self.fields(stmt))

    def build_statement(self, params: Params | RawParams | None) -> Select:
        """Statement `list` would execute for these params."""
        params = self.normalize(params)
        stmt = self.filtered_statement(params)
        if params is None:
            return stmt
        stmt = apply_sort(stmt, params.sort, self.sort_handler(), self.fields(stmt))
        return paginate(stmt, params.page)

    async def list(self, params: Params | RawParams | None) -> list[Any]:
        """List records filtered, sorted and paginated according to params."""
        params = self.normalize(params)
        stmt = self.build_statement(params)
        if params is not None:
            logger.debug(
                "Listing %s filter=%s sort=%s page=%s",
                self.name,
                list(params.filter or ()),
                params.sort,
                params.page,
            )
        with track_query(self.name, "list"):
            return await self.repo().execute(stmt)

    async def get_page_count(
        self,
        params: Params | RawParams,
        allow_zero: bool | None = None,
    ) -> int:
        """Return the number of pages.

        Requires `page.size` or `page.limit`. When no record is found one page
        is reported anyway, unless `allow_zero` is set.
        """
        settings = get_settings()
        params = self.normalize(params)
        page = params.page if params is not None else None
        per_page = require_per_page(page.per_page if page is not None else None)
        if allow_zero is None:
            allow_zero = settings.allow_zero_pages

        stmt = count_statement(
            self.filtered_statement(params),
            self.count_field or settings.count_field,
        )
        with track_query(self.name, "page_count"):
            total = await self.repo().count(stmt)

        count = page_count(total, per_page, allow_zero=allow_zero)
        logger.debug("Counted %s total=%s per_page=%s pages=%s", self.name, total, per_page, count)
        return count
