"""Repository layer executing list statements."""

from __future__ import annotations

from typing import Any, Protocol

from fastapi import Depends
from sqlalchemy import Select
from sqlalchemy.ext.asyncio import AsyncSession

from querykit.core.database import get_db_session


class QueryRepository(Protocol):
    """Protocol for backends that run list and count statements."""

    async def execute(self, stmt: Select) -> list[Any]:
        """Return all records selected by the statement."""

    async def count(self, stmt: Select) -> int:
        """Return the scalar result of an aggregate statement."""


class SQLAlchemyRepository:
    """DB operations over an async SQLAlchemy session."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def execute(self, stmt: Select) -> list[Any]:
        if len(stmt.column_descriptions) == 1:
            return list((await self.session.scalars(stmt)).all())
        return list((await self.session.execute(stmt)).all())

    async def count(self, stmt: Select) -> int:
        return int((await self.session.scalar(stmt)) or 0)


async def get_repository(session: AsyncSession = Depends(get_db_session)) -> SQLAlchemyRepository:
    """Dependency provider for the SQLAlchemy repository."""
    return SQLAlchemyRepository(session)
