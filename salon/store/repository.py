"""Tenant-scoped CRUD over one ORM model.

Every call opens its own short-lived session, so concurrent calls
(``asyncio.gather`` fan-outs) never share an AsyncSession. Rows are
returned as frozen pydantic records and never leak out of the session.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from salon.db.engine import async_session_factory
from salon.errors import NotFoundError, PersistenceError
from salon.models.base import Base

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


class TenantRepository(Generic[RecordT]):
    """CRUD for ``model`` rows owned by one tenant."""

    def __init__(
        self,
        model: type[Base],
        record: type[RecordT],
        owner_id: uuid.UUID,
        *,
        order_by: Sequence[str] = ("created_at",),
        session_factory: async_sessionmaker[AsyncSession] = async_session_factory,
    ) -> None:
        self.model = model
        self.record = record
        self.owner_id = owner_id
        self.order_by = order_by
        self._session_factory = session_factory

    @property
    def name(self) -> str:
        return self.model.__tablename__

    def _to_record(self, row: Any) -> RecordT:
        return self.record.model_validate(row)

    def _fail(self, action: str, exc: SQLAlchemyError) -> PersistenceError:
        logger.exception("%s on %s failed (owner=%s)", action, self.name, self.owner_id)
        return PersistenceError(f"Erro ao acessar {self.name}: {exc.__class__.__name__}")

    async def _get_row(self, db: AsyncSession, record_id: uuid.UUID) -> Any:
        result = await db.execute(
            select(self.model).where(
                self.model.id == record_id,
                self.model.owner_id == self.owner_id,
            )
        )
        row = result.scalar_one_or_none()
        if row is None:
            raise NotFoundError(f"Registro {record_id} não encontrado em {self.name}")
        return row

    # ── Reads ────────────────────────────────────────────────────────

    async def list(self, **filters: Any) -> list[RecordT]:
        """All rows of this tenant, optionally filtered by column equality."""
        stmt = select(self.model).where(self.model.owner_id == self.owner_id)
        for column, value in filters.items():
            stmt = stmt.where(getattr(self.model, column) == value)
        stmt = stmt.order_by(*(getattr(self.model, c) for c in self.order_by))
        try:
            async with self._session_factory() as db:
                result = await db.execute(stmt)
                return [self._to_record(row) for row in result.scalars().all()]
        except SQLAlchemyError as exc:
            raise self._fail("list", exc) from exc

    async def get(self, record_id: uuid.UUID) -> RecordT:
        """Raises NotFoundError if the row is missing or owned by another tenant."""
        try:
            async with self._session_factory() as db:
                return self._to_record(await self._get_row(db, record_id))
        except SQLAlchemyError as exc:
            raise self._fail("get", exc) from exc

    # ── Writes ───────────────────────────────────────────────────────

    async def create(self, values: dict[str, Any]) -> RecordT:
        try:
            async with self._session_factory() as db:
                row = self.model(owner_id=self.owner_id, **values)
                db.add(row)
                await db.commit()
                await db.refresh(row)
                logger.info("Created %s %s (owner=%s)", self.name, row.id, self.owner_id)
                return self._to_record(row)
        except SQLAlchemyError as exc:
            raise self._fail("create", exc) from exc

    async def update(self, record_id: uuid.UUID, values: dict[str, Any]) -> RecordT:
        """Overwrite the given columns. Unknown ids raise NotFoundError."""
        try:
            async with self._session_factory() as db:
                row = await self._get_row(db, record_id)
                for column, value in values.items():
                    setattr(row, column, value)
                await db.commit()
                await db.refresh(row)
                logger.info("Updated %s %s: %s", self.name, record_id, sorted(values))
                return self._to_record(row)
        except SQLAlchemyError as exc:
            raise self._fail("update", exc) from exc

    async def delete(self, record_id: uuid.UUID) -> None:
        try:
            async with self._session_factory() as db:
                row = await self._get_row(db, record_id)
                await db.delete(row)
                await db.commit()
                logger.info("Deleted %s %s (owner=%s)", self.name, record_id, self.owner_id)
        except SQLAlchemyError as exc:
            raise self._fail("delete", exc) from exc


def column_values(payload: BaseModel, *, exclude_unset: bool = False) -> dict[str, Any]:
    """Dump an input schema to plain column values (enums stored by value)."""
    return {
        key: value.value if isinstance(value, Enum) else value
        for key, value in payload.model_dump(exclude_unset=exclude_unset).items()
    }
