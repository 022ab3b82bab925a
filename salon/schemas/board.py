"""Pydantic schemas for the calendar and kanban projections.

Both views are derived from the same resolved appointments and are never
persisted.
"""

from __future__ import annotations

import datetime as dt
import uuid
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from salon.models.enums import AppointmentStatus, DatePreset


class KanbanColumn(BaseModel):
    """A board lane."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    status: AppointmentStatus
    order: int


class ResolvedAppointment(BaseModel):
    """Appointment joined against the loaded catalogs."""

    model_config = ConfigDict(frozen=True)

    id: uuid.UUID
    client_id: uuid.UUID
    client_name: str
    client_phone: str | None = None
    client_email: str | None = None
    professional_id: uuid.UUID
    professional_name: str
    professional_color: str
    service_id: uuid.UUID
    service_name: str
    service_ids: tuple[uuid.UUID, ...]
    date: dt.date
    start_time: str
    end_time: str
    duration_minutes: int
    status: AppointmentStatus
    total_amount: Decimal
    notes: str
    visible_notes: str
    column_override: str | None = None


class CalendarEntry(BaseModel):
    """Appointment as shown on the monthly calendar."""

    id: uuid.UUID
    date: dt.date
    start_time: str
    end_time: str
    client_id: uuid.UUID
    client_name: str
    professional_id: uuid.UUID
    professional_name: str
    professional_color: str
    service_id: uuid.UUID
    service_name: str
    duration_minutes: int
    duration_label: str
    status: AppointmentStatus
    notes: str


class CalendarDay(BaseModel):
    day: dt.date
    entries: list[CalendarEntry] = Field(default_factory=list)


class KanbanCard(BaseModel):
    """Appointment as shown on the kanban board."""

    model_config = ConfigDict(frozen=True)

    id: uuid.UUID
    client_name: str
    service_name: str
    start_time: str
    date: dt.date
    professional_name: str
    status: AppointmentStatus
    column_id: str
    order: int
    amount: Decimal | None = None


class BoardView(BaseModel):
    columns: list[KanbanColumn]
    cards: list[KanbanCard]
    month: dt.date


class AppointmentFilter(BaseModel):
    """Filters shared by calendar and kanban.

    `preset` and `kanban_month` only apply to the board.
    """

    professional_ids: list[uuid.UUID] = Field(default_factory=list)
    status: str = "all"
    client_search: str = ""
    preset: DatePreset = DatePreset.WHOLE_MONTH
    kanban_month: dt.date | None = None


class CardMove(BaseModel):
    """A card dropped on a board lane."""

    card_id: uuid.UUID
    column_id: str = Field(pattern=r"^(?:[a-z-]+|nao_compareceu)$")


class AppointmentChange(BaseModel):
    """Status + notes written together for one moved card."""

    model_config = ConfigDict(frozen=True)

    appointment_id: uuid.UUID
    status: AppointmentStatus
    notes: str
