"""Tenant-bound data store facade.

Bundles one TenantRepository per table for a single salon owner. Callers
never pass the owner id again once the store is built.
"""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from salon.db.engine import async_session_factory
from salon.errors import AuthenticationError, NotFoundError, PersistenceError
from salon.models import (
    Appointment,
    Client,
    Product,
    Professional,
    Service,
    StockMovement,
    Transaction,
    User,
)
from salon.schemas.appointments import AppointmentRecord
from salon.schemas.catalog import ClientRecord, ProductRecord, ProfessionalRecord, ServiceRecord
from salon.schemas.finance import StockMovementRecord, TransactionRecord
from salon.security.passwords import hash_password, verify_password
from salon.store.repository import TenantRepository

logger = logging.getLogger(__name__)


class DataStore:
    """All repositories of one tenant."""

    def __init__(
        self,
        owner_id: uuid.UUID,
        session_factory: async_sessionmaker[AsyncSession] = async_session_factory,
    ) -> None:
        self.owner_id = owner_id
        self.appointments = TenantRepository(
            Appointment,
            AppointmentRecord,
            owner_id,
            order_by=("date", "start_time"),
            session_factory=session_factory,
        )
        self.clients = TenantRepository(
            Client, ClientRecord, owner_id, order_by=("name",), session_factory=session_factory
        )
        self.services = TenantRepository(
            Service, ServiceRecord, owner_id, order_by=("name",), session_factory=session_factory
        )
        self.professionals = TenantRepository(
            Professional, ProfessionalRecord, owner_id, order_by=("name",), session_factory=session_factory
        )
        self.products = TenantRepository(
            Product, ProductRecord, owner_id, order_by=("name",), session_factory=session_factory
        )
        self.transactions = TenantRepository(
            Transaction,
            TransactionRecord,
            owner_id,
            order_by=("date", "created_at"),
            session_factory=session_factory,
        )
        self.stock_movements = TenantRepository(
            StockMovement,
            StockMovementRecord,
            owner_id,
            order_by=("date", "created_at"),
            session_factory=session_factory,
        )


async def authenticate_owner(
    email: str,
    password: str,
    session_factory: async_sessionmaker[AsyncSession] = async_session_factory,
) -> uuid.UUID:
    """Owner account id for a login e-mail, checked against that owner's own password.

    Raises:
        AuthenticationError: Unknown e-mail, no password set, or wrong password.
    """
    try:
        async with session_factory() as db:
            result = await db.execute(
                select(User.id, User.password_hash).where(User.email == email.strip().lower())
            )
            row = result.one_or_none()
    except SQLAlchemyError as exc:
        logger.exception("Owner lookup failed for %s", email)
        raise PersistenceError("Erro ao consultar a conta") from exc
    if row is None or not verify_password(password, row.password_hash):
        raise AuthenticationError("E-mail ou senha inválidos")
    return row.id


async def set_owner_password(
    email: str,
    password: str,
    session_factory: async_sessionmaker[AsyncSession] = async_session_factory,
) -> None:
    """Store a fresh hash of ``password`` for an existing owner.

    Raises:
        NotFoundError: No salon owner is registered with that e-mail.
    """
    try:
        async with session_factory() as db:
            result = await db.execute(
                update(User)
                .where(User.email == email.strip().lower())
                .values(password_hash=hash_password(password))
            )
            await db.commit()
    except SQLAlchemyError as exc:
        logger.exception("Password update failed for %s", email)
        raise PersistenceError("Erro ao atualizar a conta") from exc
    if result.rowcount == 0:
        raise NotFoundError(f"Conta {email} não encontrada")
    logger.info("Password updated for owner %s", email)
