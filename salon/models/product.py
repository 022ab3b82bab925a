"""Product model: inventory items. Stock status is derived, never stored."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import Date, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from salon.models.base import Base, TenantMixin, TimestampMixin


class Product(TenantMixin, TimestampMixin, Base):
    """An inventory item."""

    __tablename__ = "products"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    min_quantity: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    unit: Mapped[str] = mapped_column(String(20), default="un", nullable=False)
    cost_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"), nullable=False)
    sale_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"), nullable=False)
    supplier: Mapped[str | None] = mapped_column(String(200))
    last_purchase: Mapped[date | None] = mapped_column(Date)
    expiration_date: Mapped[date | None] = mapped_column(Date)

    def __repr__(self) -> str:
        return f"<Product name={self.name} qty={self.quantity}/{self.min_quantity}>"
