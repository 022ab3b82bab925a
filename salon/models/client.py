"""Client model: salon customers.

Lifetime totals (spend, visits, last visit) are not stored: they are
recomputed from appointment history on every read.
"""

from __future__ import annotations

from datetime import date

from sqlalchemy import Date, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from salon.models.base import Base, TenantMixin, TimestampMixin
from salon.models.enums import ClientStatus


class Client(TenantMixin, TimestampMixin, Base):
    """A salon customer."""

    __tablename__ = "clients"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(20))
    email: Mapped[str | None] = mapped_column(String(255))
    birthdate: Mapped[date | None] = mapped_column(Date)
    address: Mapped[str | None] = mapped_column(String(500))
    cpf: Mapped[str | None] = mapped_column(String(14))
    registration_date: Mapped[date] = mapped_column(Date, server_default=func.current_date(), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(10), default=ClientStatus.ACTIVE.value, nullable=False)

    def __repr__(self) -> str:
        return f"<Client name={self.name} status={self.status}>"
