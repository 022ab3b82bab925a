"""Professional model: staff members who perform services."""

from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from salon.models.base import Base, TenantMixin, TimestampMixin


class Professional(TenantMixin, TimestampMixin, Base):
    """A professional whose agenda is checked for conflicts."""

    __tablename__ = "professionals"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(20))
    email: Mapped[str | None] = mapped_column(String(255))
    specialties: Mapped[list[str]] = mapped_column(ARRAY(String(50)), default=list)
    color: Mapped[str] = mapped_column(String(20), default="#3b82f6", comment="Calendar colour")
    active: Mapped[bool] = mapped_column(default=True)

    def __repr__(self) -> str:
        return f"<Professional name={self.name} active={self.active}>"
