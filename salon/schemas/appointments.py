"""Pydantic schemas for appointments and booking checks."""

from __future__ import annotations

import datetime as dt
import uuid
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from salon.scheduling.timeutils import HHMM_PATTERN, parse_local_date


class AppointmentRecord(BaseModel):
    """Canonical appointment as stored.

    `status` is kept as stored (legacy spellings included); readers
    normalize it via salon.scheduling.status.
    """

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: uuid.UUID
    client_id: uuid.UUID
    professional_id: uuid.UUID
    service_ids: tuple[uuid.UUID, ...] = ()
    date: dt.date
    start_time: str
    end_time: str = ""
    status: str
    total_amount: Decimal = Decimal("0")
    notes: str = ""

    @field_validator("date", mode="before")
    @classmethod
    def _civil_date(cls, v: object) -> object:
        if isinstance(v, str):
            return parse_local_date(v)
        return v

    @field_validator("notes", mode="before")
    @classmethod
    def _notes_not_null(cls, v: object) -> object:
        return v or ""

    @field_validator("service_ids", mode="before")
    @classmethod
    def _service_ids_tuple(cls, v: object) -> object:
        if v is None:
            return ()
        return tuple(v)  # type: ignore[arg-type]


class AppointmentInput(BaseModel):
    """Fields collected by the create/edit dialog."""

    client_id: uuid.UUID | None = None
    professional_id: uuid.UUID | None = None
    service_id: uuid.UUID | None = None
    date: dt.date | None = None
    start_time: str | None = Field(default=None, pattern=HHMM_PATTERN)
    status: str = "agendado"
    notes: str = ""

    @field_validator("date", mode="before")
    @classmethod
    def _civil_date(cls, v: object) -> object:
        if isinstance(v, str) and v:
            return parse_local_date(v)
        return v


class AppointmentPatch(BaseModel):
    """Partial edit from the details drawer."""

    client_id: uuid.UUID | None = None
    professional_id: uuid.UUID | None = None
    service_id: uuid.UUID | None = None
    date: dt.date | None = None
    start_time: str | None = Field(default=None, pattern=HHMM_PATTERN)
    status: str | None = None
    notes: str | None = None

    @field_validator("date", mode="before")
    @classmethod
    def _civil_date(cls, v: object) -> object:
        if isinstance(v, str) and v:
            return parse_local_date(v)
        return v


class BookingWindow(BaseModel):
    """One professional's occupied (or requested) slot on a civil date.

    Any field may be missing while the dialog is still being filled in.
    """

    model_config = ConfigDict(frozen=True)

    appointment_id: uuid.UUID | None = None
    professional_id: uuid.UUID | None = None
    date: dt.date | None = None
    start_time: str | None = None
    duration_minutes: int = 0
    status: str | None = None


class ConflictCheck(BaseModel):
    """Result of an advisory conflict check."""

    conflict: bool
    message: str = ""
    conflicting_appointment_id: uuid.UUID | None = None
