"""
Document store over an async SQLAlchemy session.

Collection-style access used by the registry, ledger and directory:
create / get / update / delete plus equality-filtered queries ordered by a
single field. Every round trip is bounded by ``settings.store_timeout_seconds``
and driver failures are translated into StoreError / StoreConflict /
StoreTimeout so callers never see SQLAlchemy exceptions.
"""
import asyncio
import logging
from typing import Any, Awaitable, Optional, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database_types import utcnow
from app.errors import StoreConflict, StoreError, StoreTimeout

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DocumentStore:
    """Per-request store handle. Holds no state beyond its session."""

    def __init__(self, db: AsyncSession, timeout: Optional[float] = None):
        self.db = db
        self.timeout = timeout if timeout is not None else settings.store_timeout_seconds

    async def _run(self, operation: str, awaitable: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except asyncio.TimeoutError:
            await self.db.rollback()
            logger.error(f"Store {operation} timed out after {self.timeout}s")
            raise StoreTimeout(f"Store {operation} timed out")
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(f"Store {operation} rejected by constraint: {e.orig}")
            raise StoreConflict(f"Store {operation} violates a uniqueness constraint") from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Store {operation} failed: {str(e)}", exc_info=True)
            raise StoreError(f"Store {operation} failed") from e

    async def create(self, model: type[T], **fields: Any) -> T:
        """Insert a record. A missing id is generated by the model default."""
        record = model(**fields)

        async def _create():
            self.db.add(record)
            await self.db.commit()
            await self.db.refresh(record)
            return record

        return await self._run(f"create {model.__tablename__}", _create())

    async def get(self, model: type[T], record_id: str) -> Optional[T]:
        return await self._run(
            f"get {model.__tablename__}",
            self.db.get(model, record_id, populate_existing=True),
        )

    async def update(self, model: type[T], record_id: str, fields: dict[str, Any]) -> Optional[T]:
        """
        Apply a partial update and refresh ``updated_at``.

        Returns the updated record, or None when it does not exist.
        """
        async def _update():
            record = await self.db.get(model, record_id)
            if record is None:
                return None
            for field, value in fields.items():
                setattr(record, field, value)
            if hasattr(record, "updated_at"):
                record.updated_at = utcnow()
            await self.db.commit()
            await self.db.refresh(record)
            return record

        return await self._run(f"update {model.__tablename__}", _update())

    async def delete(self, model: type[T], record_id: str) -> bool:
        async def _delete():
            record = await self.db.get(model, record_id)
            if record is None:
                return False
            await self.db.delete(record)
            await self.db.commit()
            return True

        return await self._run(f"delete {model.__tablename__}", _delete())

    async def delete_cascade(
        self,
        model: type[T],
        record_id: str,
        dependents: list[tuple[type, str]],
    ) -> Optional[int]:
        """
        Delete a record together with the rows that reference it, in one commit.

        ``dependents`` pairs each child model with the attribute holding the
        parent id. Returns the number of child rows removed, or None when the
        record does not exist. On failure nothing is deleted.
        """
        async def _delete_cascade():
            record = await self.db.get(model, record_id)
            if record is None:
                return None
            removed = 0
            for child, field in dependents:
                result = await self.db.execute(
                    delete(child).where(getattr(child, field) == record_id)
                )
                removed += result.rowcount or 0
            await self.db.delete(record)
            await self.db.commit()
            return removed

        return await self._run(f"delete {model.__tablename__}", _delete_cascade())

    async def query(
        self,
        model: type[T],
        filters: Optional[dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = True,
    ) -> list[T]:
        """
        Equality-filtered query, optionally ordered by a single field.

        Results are read to completion and returned as a list.
        """
        query = select(model)
        for field, value in (filters or {}).items():
            query = query.where(getattr(model, field) == value)
        if order_by:
            column = getattr(model, order_by)
            query = query.order_by(column.desc() if descending else column.asc())

        async def _query():
            result = await self.db.execute(query)
            return list(result.scalars().all())

        return await self._run(f"query {model.__tablename__}", _query())
