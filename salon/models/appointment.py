"""Appointment model: a booking of one or more services with a professional.

`end_time` and `total_amount` are derived from the booked services and
recomputed on every write. `notes` may carry the `kanbanColumnId:<id>`
board directive; see salon.scheduling.directive.

Client/professional/service references are resolved in memory when the
board is built; rows pointing at deleted records are dropped from views.
"""

from __future__ import annotations

import datetime as dt
import uuid
from decimal import Decimal

from sqlalchemy import Date, Numeric, String, Text
from sqlalchemy.dialects.postgresql import ARRAY, UUID
from sqlalchemy.orm import Mapped, mapped_column

from salon.models.base import Base, TenantMixin, TimestampMixin
from salon.models.enums import AppointmentStatus


class Appointment(TenantMixin, TimestampMixin, Base):
    """A booking on the salon agenda."""

    __tablename__ = "appointments"

    # References
    client_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False, index=True)
    professional_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False, index=True)
    service_ids: Mapped[list[uuid.UUID]] = mapped_column(ARRAY(UUID(as_uuid=True)), default=list)

    # Scheduling: civil date + wall-clock HH:MM, no timezone
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)

    status: Mapped[str] = mapped_column(
        String(20), default=AppointmentStatus.AGENDADO.value, nullable=False
    )
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text)

    def __repr__(self) -> str:
        return f"<Appointment id={self.id} status={self.status} at={self.date} {self.start_time}>"
