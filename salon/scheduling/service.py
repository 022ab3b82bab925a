"""Scheduling service: the appointment write path and the agenda views.

Loads the four collections an agenda needs concurrently, derives the
calendar and kanban projections from them, and validates every booking
(required selections, known references, professional availability)
before it reaches the data store.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any

from salon.admin.events import emit
from salon.errors import BookingConflictError, ValidationError
from salon.models.enums import AppointmentStatus
from salon.schemas.appointments import (
    AppointmentInput,
    AppointmentPatch,
    AppointmentRecord,
    BookingWindow,
    ConflictCheck,
)
from salon.schemas.board import (
    AppointmentChange,
    AppointmentFilter,
    BoardView,
    CalendarDay,
    CardMove,
    ResolvedAppointment,
)
from salon.schemas.catalog import ClientRecord, ProfessionalRecord, ServiceRecord
from salon.schemas.events import EventType, SystemEvent
from salon.scheduling import board
from salon.scheduling.conflicts import find_conflict
from salon.scheduling.directive import strip_directive
from salon.scheduling.optimistic import AppointmentBoard, OptimisticBatch
from salon.scheduling.status import board_columns, normalize_status
from salon.scheduling.timeutils import end_time_for, today
from salon.store.datastore import DataStore

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = (
    ("client_id", "Selecione um cliente"),
    ("professional_id", "Selecione um profissional"),
    ("service_id", "Selecione um serviço"),
    ("date", "Informe a data"),
    ("start_time", "Informe o horário"),
)


@dataclass(frozen=True)
class AgendaData:
    """Everything the calendar and the board are derived from."""

    appointments: list[AppointmentRecord]
    clients: list[ClientRecord]
    services: list[ServiceRecord]
    professionals: list[ProfessionalRecord]

    def resolved(self) -> list[ResolvedAppointment]:
        return board.resolve_all(self.appointments, self.clients, self.services, self.professionals)

    def windows(self) -> list[BookingWindow]:
        """Booked slots of every stored appointment, for conflict checks."""
        durations = {s.id: s.duration for s in self.services}
        return [
            BookingWindow(
                appointment_id=apt.id,
                professional_id=apt.professional_id,
                date=apt.date,
                start_time=apt.start_time,
                duration_minutes=sum(durations.get(sid, 0) for sid in apt.service_ids),
                status=_status_value(apt.status),
            )
            for apt in self.appointments
        ]


def _status_value(raw: str) -> str:
    try:
        return normalize_status(raw).value
    except ValueError:
        return raw


class SchedulingService:
    """Agenda reads and appointment writes for one tenant's data store."""

    # ── Reads ────────────────────────────────────────────────────────

    async def load(self, store: DataStore) -> AgendaData:
        """Fan out the four list calls and join before deriving anything."""
        appointments, clients, services, professionals = await asyncio.gather(
            store.appointments.list(),
            store.clients.list(),
            store.services.list(),
            store.professionals.list(),
        )
        return AgendaData(appointments, clients, services, professionals)

    async def board_view(
        self,
        store: DataStore,
        flt: AppointmentFilter,
        reference: date | None = None,
    ) -> BoardView:
        data = await self.load(store)
        ref = reference or today()
        return BoardView(
            columns=board_columns(),
            cards=board.kanban_cards(data.resolved(), flt, reference=ref),
            month=(flt.kanban_month or ref).replace(day=1),
        )

    async def calendar_view(self, store: DataStore, flt: AppointmentFilter, month: date) -> list[CalendarDay]:
        data = await self.load(store)
        return board.calendar_month(data.resolved(), flt, month)

    async def check_conflict(
        self,
        store: DataStore,
        professional_id: uuid.UUID | None,
        day: date | None,
        start_time: str | None,
        service_id: uuid.UUID | None,
        exclude_id: uuid.UUID | None = None,
    ) -> ConflictCheck:
        """Advisory check used while the dialog is being filled in."""
        data = await self.load(store)
        services = {s.id: s for s in data.services}
        service = services.get(service_id) if service_id else None
        candidate = BookingWindow(
            professional_id=professional_id,
            date=day,
            start_time=start_time,
            duration_minutes=service.duration if service else 0,
        )
        clash = find_conflict(candidate, data.windows(), exclude_id=exclude_id)
        if clash is None:
            return ConflictCheck(conflict=False)
        return ConflictCheck(
            conflict=True,
            message=self._conflict_message(clash, data),
            conflicting_appointment_id=clash.appointment_id,
        )

    # ── Writes ───────────────────────────────────────────────────────

    async def create_appointment(
        self,
        store: DataStore,
        payload: AppointmentInput,
        actor_id: str | None = None,
    ) -> AppointmentRecord:
        """Validate, check availability and store a new booking.

        Raises:
            ValidationError: A required selection is missing or unknown.
            BookingConflictError: The professional is already booked.
        """
        fields = payload.model_dump()
        self._require(fields)
        data = await self.load(store)
        values = self._derive(fields, data)
        self._ensure_available(values, data)

        record = await store.appointments.create(values)
        await emit(SystemEvent(
            event_type=EventType.APPOINTMENT_CREATED,
            tenant_id=store.owner_id,
            actor_id=actor_id,
            data={
                "appointment_id": str(record.id),
                "date": record.date.isoformat(),
                "start_time": record.start_time,
                "status": record.status,
            },
            source_module="scheduling.service",
        ))
        logger.info("Appointment created: id=%s date=%s %s", record.id, record.date, record.start_time)
        return record

    async def update_appointment(
        self,
        store: DataStore,
        appointment_id: uuid.UUID,
        patch: AppointmentPatch,
        actor_id: str | None = None,
    ) -> AppointmentRecord:
        """Apply a partial edit; the booking never conflicts with itself."""
        current = await store.appointments.get(appointment_id)
        changes = patch.model_dump(exclude_unset=True)

        fields: dict[str, Any] = {
            "client_id": current.client_id,
            "professional_id": current.professional_id,
            "service_id": current.service_ids[0] if current.service_ids else None,
            "date": current.date,
            "start_time": current.start_time,
            "status": current.status,
            "notes": current.notes,
        }
        fields.update({k: v for k, v in changes.items() if v is not None or k == "notes"})
        self._require(fields)

        data = await self.load(store)
        values = self._derive(fields, data)
        if values["status"] != _status_value(current.status):
            values["notes"] = strip_directive(values["notes"])
        if "service_id" not in changes and len(current.service_ids) > 1:
            values.update(self._totals(list(current.service_ids), data, values["start_time"]))
        self._ensure_available(values, data, exclude_id=appointment_id)

        record = await store.appointments.update(appointment_id, values)
        await emit(SystemEvent(
            event_type=EventType.APPOINTMENT_UPDATED,
            tenant_id=store.owner_id,
            actor_id=actor_id,
            data={"appointment_id": str(record.id), "fields": sorted(changes)},
            source_module="scheduling.service",
        ))
        logger.info("Appointment updated: id=%s fields=%s", record.id, sorted(changes))
        return record

    async def cancel_appointment(
        self, store: DataStore, appointment_id: uuid.UUID, actor_id: str | None = None
    ) -> AppointmentRecord:
        """Soft-terminate: the row stays, with status ``cancelado``."""
        return await self._set_status(
            store, appointment_id, AppointmentStatus.CANCELADO, EventType.APPOINTMENT_CANCELLED, actor_id
        )

    async def complete_appointment(
        self, store: DataStore, appointment_id: uuid.UUID, actor_id: str | None = None
    ) -> AppointmentRecord:
        return await self._set_status(
            store, appointment_id, AppointmentStatus.CONCLUIDO, EventType.APPOINTMENT_COMPLETED, actor_id
        )

    async def delete_appointment(
        self, store: DataStore, appointment_id: uuid.UUID, actor_id: str | None = None
    ) -> None:
        await store.appointments.delete(appointment_id)
        await emit(SystemEvent(
            event_type=EventType.APPOINTMENT_DELETED,
            tenant_id=store.owner_id,
            actor_id=actor_id,
            data={"appointment_id": str(appointment_id)},
            source_module="scheduling.service",
        ))
        logger.info("Appointment deleted: id=%s", appointment_id)

    async def move_cards(
        self,
        store: DataStore,
        moves: list[CardMove],
        agenda: AppointmentBoard | None = None,
    ) -> tuple[ResolvedAppointment, ...]:
        """Move cards between lanes as one optimistic batch.

        Raises:
            BoardRollbackError: Some write failed; ``agenda`` was restored.
        """
        if agenda is None:
            agenda = AppointmentBoard((await self.load(store)).resolved())
        changes = board.plan_moves(agenda.appointments, moves)
        if not changes:
            logger.debug("No card changed lane; nothing to write")
            return agenda.appointments

        async def write(change: AppointmentChange) -> AppointmentRecord:
            return await store.appointments.update(
                change.appointment_id,
                {"status": change.status.value, "notes": change.notes},
            )

        batch = OptimisticBatch(agenda, changes, tenant_id=store.owner_id)
        return await batch.run(write)

    # ── Helpers ──────────────────────────────────────────────────────

    async def _set_status(
        self,
        store: DataStore,
        appointment_id: uuid.UUID,
        status: AppointmentStatus,
        event_type: EventType,
        actor_id: str | None,
    ) -> AppointmentRecord:
        current = await store.appointments.get(appointment_id)
        # A status change drops any lane pinned by the previous status
        values = {"status": status.value, "notes": strip_directive(current.notes)}
        record = await store.appointments.update(appointment_id, values)
        await emit(SystemEvent(
            event_type=event_type,
            tenant_id=store.owner_id,
            actor_id=actor_id,
            data={
                "appointment_id": str(appointment_id),
                "from_status": current.status,
                "to_status": status.value,
            },
            source_module="scheduling.service",
        ))
        logger.info("Appointment %s: %s -> %s", appointment_id, current.status, status.value)
        return record

    @staticmethod
    def _require(fields: dict[str, Any]) -> None:
        for name, message in _REQUIRED_FIELDS:
            if not fields.get(name):
                raise ValidationError(message)

    def _derive(self, fields: dict[str, Any], data: AgendaData) -> dict[str, Any]:
        """Column values for a booking, with end time and amount recomputed."""
        if not any(c.id == fields["client_id"] for c in data.clients):
            raise ValidationError("Cliente não encontrado")
        if not any(p.id == fields["professional_id"] for p in data.professionals):
            raise ValidationError("Profissional não encontrado")
        try:
            status = normalize_status(fields.get("status") or AppointmentStatus.AGENDADO.value)
        except ValueError as exc:
            raise ValidationError(f"Status inválido: {fields.get('status')}") from exc

        values: dict[str, Any] = {
            "client_id": fields["client_id"],
            "professional_id": fields["professional_id"],
            "date": fields["date"],
            "start_time": fields["start_time"],
            "status": status.value,
            "notes": (fields.get("notes") or "").strip(),
        }
        values.update(self._totals([fields["service_id"]], data, fields["start_time"]))
        return values

    @staticmethod
    def _totals(service_ids: list[uuid.UUID], data: AgendaData, start_time: str) -> dict[str, Any]:
        services = {s.id: s for s in data.services}
        booked = [services.get(sid) for sid in service_ids]
        if not booked or any(s is None for s in booked):
            raise ValidationError("Serviço não encontrado")
        duration = sum(s.duration for s in booked if s is not None)
        try:
            end_time = end_time_for(start_time, duration)
        except ValueError as exc:
            raise ValidationError(f"Horário inválido: {start_time}") from exc
        return {
            "service_ids": service_ids,
            "end_time": end_time,
            "total_amount": sum((s.price for s in booked if s is not None), Decimal("0")),
        }

    def _ensure_available(
        self,
        values: dict[str, Any],
        data: AgendaData,
        exclude_id: uuid.UUID | None = None,
    ) -> None:
        durations = {s.id: s.duration for s in data.services}
        candidate = BookingWindow(
            professional_id=values["professional_id"],
            date=values["date"],
            start_time=values["start_time"],
            duration_minutes=sum(durations.get(sid, 0) for sid in values["service_ids"]),
        )
        clash = find_conflict(candidate, data.windows(), exclude_id=exclude_id)
        if clash is not None:
            raise BookingConflictError(self._conflict_message(clash, data))

    @staticmethod
    def _conflict_message(clash: BookingWindow, data: AgendaData) -> str:
        names = {p.id: p.name for p in data.professionals}
        professional = names.get(clash.professional_id, "O profissional") if clash.professional_id else "O profissional"
        return f"{professional} já tem um agendamento às {clash.start_time} neste dia"


# Module-level singleton
scheduling_service = SchedulingService()
