"""Service model: catalog of bookable services (duration drives conflicts)."""

from __future__ import annotations

import uuid
from decimal import Decimal

from sqlalchemy import Integer, Numeric, String, Text
from sqlalchemy.dialects.postgresql import ARRAY, UUID
from sqlalchemy.orm import Mapped, mapped_column

from salon.models.base import Base, TenantMixin, TimestampMixin
from salon.models.enums import ServiceCategory


class Service(TenantMixin, TimestampMixin, Base):
    """A bookable service."""

    __tablename__ = "services"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    category: Mapped[str] = mapped_column(String(20), default=ServiceCategory.HAIR.value, nullable=False)
    duration: Mapped[int] = mapped_column(Integer, nullable=False, comment="Minutes")
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    professional_ids: Mapped[list[uuid.UUID]] = mapped_column(ARRAY(UUID(as_uuid=True)), default=list)
    active: Mapped[bool] = mapped_column(default=True)

    def __repr__(self) -> str:
        return f"<Service name={self.name} duration={self.duration}>"
