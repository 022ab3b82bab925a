"""Transaction model: income and expense entries of the salon cash flow."""

from __future__ import annotations

import datetime as dt
import uuid
from decimal import Decimal

from sqlalchemy import Date, Integer, Numeric, String
from sqlalchemy.dialects.postgresql import ARRAY, UUID
from sqlalchemy.orm import Mapped, mapped_column

from salon.models.base import Base, TenantMixin, TimestampMixin
from salon.models.enums import TransactionStatus


class Transaction(TenantMixin, TimestampMixin, Base):
    """A financial entry."""

    __tablename__ = "transactions"

    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    type: Mapped[str] = mapped_column(String(10), nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(String(500), default="", nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    payment_method: Mapped[str] = mapped_column(String(10), nullable=False)
    status: Mapped[str] = mapped_column(String(10), default=TransactionStatus.COMPLETED.value, nullable=False)

    # Optional links
    client_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True))
    service_ids: Mapped[list[uuid.UUID]] = mapped_column(ARRAY(UUID(as_uuid=True)), default=list)
    professional_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True))

    # Product sales
    product_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True))
    quantity: Mapped[int | None] = mapped_column(Integer)
    discount_percentage: Mapped[Decimal | None] = mapped_column(Numeric(5, 2))
    non_registered_client_name: Mapped[str | None] = mapped_column(String(200))

    def __repr__(self) -> str:
        return f"<Transaction {self.type} {self.amount} on {self.date}>"
