"""Agenda API: calendar, kanban board and the appointment write path."""
# ruff: noqa: B008

from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Depends, Query, status

from salon.admin.auth import get_store, verify_owner
from salon.models.enums import DatePreset
from salon.schemas.appointments import AppointmentInput, AppointmentPatch, AppointmentRecord, ConflictCheck
from salon.schemas.board import AppointmentFilter, BoardView, CalendarDay, CardMove, ResolvedAppointment
from salon.scheduling.service import scheduling_service
from salon.scheduling.timeutils import HHMM_PATTERN, today
from salon.store.datastore import DataStore

router = APIRouter(prefix="/api/appointments", tags=["appointments"])


def appointment_filter(
    professional_id: list[uuid.UUID] = Query(default=[]),
    status_filter: str = Query(default="all", alias="status"),
    client: str = Query(default=""),
    preset: DatePreset = Query(default=DatePreset.WHOLE_MONTH),
    month: date | None = Query(default=None),
) -> AppointmentFilter:
    return AppointmentFilter(
        professional_ids=professional_id,
        status=status_filter,
        client_search=client,
        preset=preset,
        kanban_month=month,
    )


# ── Views ────────────────────────────────────────────────────────────


@router.get("/calendar", response_model=list[CalendarDay])
async def calendar(
    flt: AppointmentFilter = Depends(appointment_filter),
    store: DataStore = Depends(get_store),
) -> list[CalendarDay]:
    """Month grid: days with bookings, each sorted by start time."""
    return await scheduling_service.calendar_view(store, flt, flt.kanban_month or today())


@router.get("/board", response_model=BoardView)
async def kanban_board(
    flt: AppointmentFilter = Depends(appointment_filter),
    store: DataStore = Depends(get_store),
) -> BoardView:
    return await scheduling_service.board_view(store, flt)


@router.get("/conflicts", response_model=ConflictCheck)
async def check_conflict(
    professional_id: uuid.UUID | None = None,
    day: date | None = Query(default=None, alias="date"),
    start_time: str | None = Query(default=None, pattern=HHMM_PATTERN),
    service_id: uuid.UUID | None = None,
    exclude_id: uuid.UUID | None = None,
    store: DataStore = Depends(get_store),
) -> ConflictCheck:
    """Advisory availability check while the dialog is open."""
    return await scheduling_service.check_conflict(store, professional_id, day, start_time, service_id, exclude_id)


# ── Writes ───────────────────────────────────────────────────────────


@router.post("", response_model=AppointmentRecord, status_code=status.HTTP_201_CREATED)
async def create_appointment(
    payload: AppointmentInput,
    store: DataStore = Depends(get_store),
    owner: str = Depends(verify_owner),
) -> AppointmentRecord:
    return await scheduling_service.create_appointment(store, payload, actor_id=owner)


@router.patch("/{appointment_id}", response_model=AppointmentRecord)
async def update_appointment(
    appointment_id: uuid.UUID,
    patch: AppointmentPatch,
    store: DataStore = Depends(get_store),
    owner: str = Depends(verify_owner),
) -> AppointmentRecord:
    return await scheduling_service.update_appointment(store, appointment_id, patch, actor_id=owner)


@router.post("/{appointment_id}/cancel", response_model=AppointmentRecord)
async def cancel_appointment(
    appointment_id: uuid.UUID,
    store: DataStore = Depends(get_store),
    owner: str = Depends(verify_owner),
) -> AppointmentRecord:
    return await scheduling_service.cancel_appointment(store, appointment_id, actor_id=owner)


@router.post("/{appointment_id}/complete", response_model=AppointmentRecord)
async def complete_appointment(
    appointment_id: uuid.UUID,
    store: DataStore = Depends(get_store),
    owner: str = Depends(verify_owner),
) -> AppointmentRecord:
    return await scheduling_service.complete_appointment(store, appointment_id, actor_id=owner)


@router.delete("/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_appointment(
    appointment_id: uuid.UUID,
    store: DataStore = Depends(get_store),
    owner: str = Depends(verify_owner),
) -> None:
    await scheduling_service.delete_appointment(store, appointment_id, actor_id=owner)


@router.post("/board/moves", response_model=list[ResolvedAppointment])
async def move_cards(
    moves: list[CardMove],
    store: DataStore = Depends(get_store),
) -> list[ResolvedAppointment]:
    """Apply drag-and-drop moves as one all-or-nothing batch."""
    return list(await scheduling_service.move_cards(store, moves))
