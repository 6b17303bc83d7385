from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy import Boolean, Date, DateTime, Integer, Numeric, String, Uuid, select
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from querykit.modules.listing.filtering import apply_filter
from querykit.shared.coercion import coerce_value
from querykit.shared.exceptions import InvalidParams


class Base(DeclarativeBase):
    pass


class Gadget(Base):
    __tablename__ = "gadgets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(64))
    active: Mapped[bool] = mapped_column(Boolean)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    released_on: Mapped[date] = mapped_column(Date)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    token: Mapped[uuid.UUID] = mapped_column(Uuid)


def column(name: str):
    return select(Gadget).selected_columns[name]


@pytest.mark.parametrize(
    ("name", "raw", "expected"),
    [
        ("id", "42", 42),
        ("id", " 7 ", 7),
        ("name", "42", "42"),
        ("active", "true", True),
        ("active", "0", False),
        ("price", "9.90", Decimal("9.90")),
        ("released_on", "2026-02-19", date(2026, 2, 19)),
        ("updated_at", "2026-02-19T10:00:00Z", datetime(2026, 2, 19, 10, tzinfo=timezone.utc)),
        (
            "token",
            "12345678-1234-5678-1234-567812345678",
            uuid.UUID("12345678-1234-5678-1234-567812345678"),
        ),
    ],
)
def test_string_values_take_the_column_type(name: str, raw: str, expected: object) -> None:
    assert coerce_value(column(name), name, raw) == expected


def test_non_string_values_are_kept() -> None:
    assert coerce_value(column("id"), "id", 5) == 5
    assert coerce_value(column("id"), "id", None) is None


@pytest.mark.parametrize(
    ("name", "raw"),
    [("id", "one"), ("active", "maybe"), ("price", "cheap"), ("released_on", "soon")],
)
def test_unparseable_values_are_rejected(name: str, raw: str) -> None:
    with pytest.raises(InvalidParams) as exc:
        coerce_value(column(name), name, raw)

    assert name in exc.value.message


def test_default_filter_binds_coerced_value() -> None:
    stmt = apply_filter(select(Gadget), {"id": "3", "active": "yes"})

    assert sorted(stmt.compile().params.values(), key=str) == [3, True]
