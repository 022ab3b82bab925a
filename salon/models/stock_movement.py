"""StockMovement model: append-only log of inventory ins and outs."""

from __future__ import annotations

import datetime as dt
import uuid

from sqlalchemy import Date, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from salon.models.base import Base, TenantMixin, TimestampMixin


class StockMovement(TenantMixin, TimestampMixin, Base):
    """One inventory movement."""

    __tablename__ = "stock_movements"

    product_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False, index=True)
    type: Mapped[str] = mapped_column(String(3), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    reason: Mapped[str | None] = mapped_column(String(500))

    def __repr__(self) -> str:
        return f"<StockMovement {self.type} {self.quantity} product={self.product_id}>"
