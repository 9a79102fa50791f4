"""Record store adapter over async SQLAlchemy sessions.

Reads open one short-lived session each, so independent fetches can run
concurrently. Multi-step writes go through ``transaction()`` and commit or
roll back as a unit. Every SQLAlchemy failure surfaces as StoreError.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from typing import Any, TypeVar

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from gpc.exceptions import StoreError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


class StoreSession:
    """Row operations bound to one open session/transaction."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def query_rows(
        self,
        model: type[ModelT],
        *criteria: Any,
        order_by: Sequence[Any] = (),
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[ModelT]:
        """Fetch all rows of ``model`` matching every criterion."""
        stmt = select(model).where(*criteria).execution_options(populate_existing=True)
        if order_by:
            stmt = stmt.order_by(*order_by)
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset:
            stmt = stmt.offset(offset)
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to query {model.__name__}: {exc}") from exc
        return list(result.scalars().all())

    async def count_rows(self, model: type, *criteria: Any) -> int:
        """Number of rows of ``model`` matching every criterion."""
        stmt = select(func.count()).select_from(model).where(*criteria)
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to count {model.__name__}: {exc}") from exc
        return int(result.scalar_one())

    async def get_row(self, model: type[ModelT], *criteria: Any) -> ModelT | None:
        """Fetch the single row matching the criteria, or None."""
        rows = await self.query_rows(model, *criteria, limit=1)
        return rows[0] if rows else None

    async def insert_row(self, row: ModelT) -> ModelT:
        """Insert a new row and flush so server-side defaults are assigned."""
        try:
            self.session.add(row)
            await self.session.flush()
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to insert {type(row).__name__}: {exc}") from exc
        return row

    async def update_row(self, model: type, *criteria: Any, values: dict[str, Any]) -> int:
        """Update rows matching the criteria. Returns the number of rows changed."""
        stmt = update(model).where(*criteria).values(**values)
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to update {model.__name__}: {exc}") from exc
        return result.rowcount or 0

    async def delete_row(self, model: type, *criteria: Any) -> int:
        """Delete rows matching the criteria. Returns the number of rows removed."""
        stmt = delete(model).where(*criteria)
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to delete {model.__name__}: {exc}") from exc
        return result.rowcount or 0


class RecordStore:
    """Entry point the services use for all persistence."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[StoreSession]:
        """Open a session and transaction; commit on success, roll back on error."""
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    yield StoreSession(session)
        except SQLAlchemyError as exc:
            logger.error("Record store transaction failed: %s", exc)
            raise StoreError(f"Transaction failed: {exc}") from exc

    async def query_rows(
        self,
        model: type[ModelT],
        *criteria: Any,
        order_by: Sequence[Any] = (),
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[ModelT]:
        async with self.transaction() as tx:
            return await tx.query_rows(model, *criteria, order_by=order_by, limit=limit, offset=offset)

    async def count_rows(self, model: type, *criteria: Any) -> int:
        async with self.transaction() as tx:
            return await tx.count_rows(model, *criteria)

    async def get_row(self, model: type[ModelT], *criteria: Any) -> ModelT | None:
        async with self.transaction() as tx:
            return await tx.get_row(model, *criteria)

    async def insert_row(self, row: ModelT) -> ModelT:
        async with self.transaction() as tx:
            return await tx.insert_row(row)

    async def update_row(self, model: type, *criteria: Any, values: dict[str, Any]) -> int:
        async with self.transaction() as tx:
            return await tx.update_row(model, *criteria, values=values)

    async def delete_row(self, model: type, *criteria: Any) -> int:
        async with self.transaction() as tx:
            return await tx.delete_row(model, *criteria)
