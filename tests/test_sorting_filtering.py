from __future__ import annotations

import pytest
from sqlalchemy import Integer, String, func, select
from sqlalchemy.dialects import postgresql
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from querykit.core.enums import SortDirection
from querykit.modules.listing.filtering import apply_filter
from querykit.modules.listing.rules import Rule, RuleChain, RuleSpec, filter_rule, sort_rule
from querykit.modules.listing.sorting import apply_sort, parse_sort
from querykit.shared.exceptions import UnknownIdentifier


class Base(DeclarativeBase):
    pass


class Stuff(Base):
    __tablename__ = "stuff"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    foo: Mapped[str] = mapped_column(String(64))
    bar: Mapped[int] = mapped_column(Integer)


def to_sql(stmt) -> str:
    compiled = stmt.compile(dialect=postgresql.dialect(), compile_kwargs={"literal_binds": True})
    return " ".join(str(compiled).split())


class RecordingHandler:
    def __init__(self) -> None:
        self.calls: list[tuple[str, object]] = []

    def __call__(self, stmt, field, argument):
        self.calls.append((field, argument))
        return stmt


@pytest.mark.parametrize(
    ("sort", "expected"),
    [
        ("-foo", ("foo", SortDirection.DESC)),
        ("foo", ("foo", SortDirection.ASC)),
    ],
)
def test_sort_direction_parsing(sort: str, expected: tuple) -> None:
    handler = RecordingHandler()

    apply_sort(select(Stuff), sort, handler)

    assert parse_sort(sort) == expected
    assert handler.calls == [expected]


@pytest.mark.parametrize("sort", [None, ""])
def test_missing_sort_is_noop(sort: str | None) -> None:
    handler = RecordingHandler()
    stmt = select(Stuff)

    assert apply_sort(stmt, sort, handler) is stmt
    assert handler.calls == []


def test_default_sort_orders_by_column() -> None:
    assert to_sql(apply_sort(select(Stuff), "-foo")).endswith("ORDER BY stuff.foo DESC")
    assert to_sql(apply_sort(select(Stuff), "bar")).endswith("ORDER BY stuff.bar ASC")


def test_sort_rejects_unknown_field() -> None:
    with pytest.raises(UnknownIdentifier) as exc:
        apply_sort(select(Stuff), "-password_hash")

    assert exc.value.value == "password_hash"
    assert exc.value.allowed == ("bar", "foo", "id")


def test_sort_accepts_explicit_field_set() -> None:
    handler = RecordingHandler()

    apply_sort(select(Stuff), "score", handler, fields={"score"})

    assert handler.calls == [("score", SortDirection.ASC)]


def test_missing_filter_is_noop() -> None:
    stmt = select(Stuff)

    assert apply_filter(stmt, None) is stmt


def test_default_filter_is_equality_in_insertion_order() -> None:
    stmt = select(Stuff).where(Stuff.foo != "baz")

    sql = to_sql(apply_filter(stmt, {"bar": 1, "foo": "a"}))

    assert sql.endswith("WHERE stuff.foo != 'baz' AND stuff.bar = 1 AND stuff.foo = 'a'")


def test_default_filter_on_none_is_null_check() -> None:
    sql = to_sql(apply_filter(select(Stuff), {"foo": None}))

    assert sql.endswith("WHERE stuff.foo IS NULL")


def test_filter_threads_statement_through_each_entry() -> None:
    handler = RecordingHandler()

    apply_filter(select(Stuff), {"bar": 0, "foo": "x"}, handler)

    assert handler.calls == [("bar", 0), ("foo", "x")]


def test_filter_rejects_unknown_field() -> None:
    with pytest.raises(UnknownIdentifier):
        apply_filter(select(Stuff), {"bar": 1, "1=1; --": "x"})


def test_rule_chain_prefers_first_matching_rule() -> None:
    def first(stmt, field, value):
        return stmt.where(Stuff.bar <= 0)

    def second(stmt, field, value):
        return stmt.where(Stuff.bar < 0)

    chain = RuleChain(
        [
            Rule(RuleSpec(kind="filter", field="bar", when=lambda value: value == 0), first),
            Rule(RuleSpec(kind="filter", field="bar"), second),
        ],
        default=lambda stmt, field, value: stmt.where(Stuff.bar == value),
    )

    assert to_sql(chain(select(Stuff), "bar", 0)).endswith("WHERE stuff.bar <= 0")
    assert to_sql(chain(select(Stuff), "bar", 3)).endswith("WHERE stuff.bar < 0")
    assert to_sql(chain(select(Stuff), "foo", 3)).endswith("WHERE stuff.bar = 3")


def test_sort_rule_matches_field_and_direction() -> None:
    @sort_rule("foo", SortDirection.DESC)
    def by_length(stmt, field, direction):
        return stmt.order_by(func.length(Stuff.foo).desc())

    spec = by_length.__querykit_rule__

    assert spec.matches("foo", SortDirection.DESC)
    assert not spec.matches("foo", SortDirection.ASC)
    assert not spec.matches("bar", SortDirection.DESC)


def test_filter_rule_value_match_is_type_strict() -> None:
    @filter_rule("bar", value=0)
    def non_positive(stmt, field, value):
        return stmt

    spec = non_positive.__querykit_rule__

    assert spec.matches("bar", 0)
    assert not spec.matches("bar", False)
    assert not spec.matches("bar", "0")


def test_filter_rule_rejects_value_and_predicate_together() -> None:
    with pytest.raises(TypeError):
        filter_rule("bar", value=0, when=lambda value: True)
