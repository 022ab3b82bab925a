"""Calendar and kanban projections of the appointment list.

Both views are derived from the same canonical records: appointments are
first resolved against the loaded catalogs (dropping any that reference
missing records or carry an unknown status), then filtered, then turned
into calendar entries or kanban cards. Nothing computed here is stored.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable, Mapping
from datetime import date
from decimal import Decimal

from salon.admin.formatters import format_duration
from salon.errors import ValidationError
from salon.schemas.appointments import AppointmentRecord
from salon.schemas.board import (
    AppointmentChange,
    AppointmentFilter,
    CalendarDay,
    CalendarEntry,
    CardMove,
    KanbanCard,
    ResolvedAppointment,
)
from salon.schemas.catalog import ClientRecord, ProfessionalRecord, ServiceRecord
from salon.scheduling.directive import column_override, notes_for_column, resolve_column, strip_directive
from salon.scheduling.status import is_board_column, normalize_status, status_for_column
from salon.scheduling.timeutils import end_time_for, month_bounds, parse_hhmm, preset_range, today

logger = logging.getLogger(__name__)


# ── Resolution ───────────────────────────────────────────────────────


def resolve(
    appointment: AppointmentRecord,
    clients: Mapping[uuid.UUID, ClientRecord],
    services: Mapping[uuid.UUID, ServiceRecord],
    professionals: Mapping[uuid.UUID, ProfessionalRecord],
) -> ResolvedAppointment | None:
    """Join one appointment with its client, professional and services.

    Returns None when any reference dangles or the status is not
    recognized; such rows are left out of every view.
    Rows with an unreadable start time are dropped too.
    """
    client = clients.get(appointment.client_id)
    professional = professionals.get(appointment.professional_id)
    booked = [services.get(sid) for sid in appointment.service_ids]
    if client is None or professional is None or not booked or None in booked:
        logger.debug("Dropping appointment %s: unresolved reference", appointment.id)
        return None

    try:
        status = normalize_status(appointment.status)
    except ValueError:
        logger.debug("Dropping appointment %s: unknown status %r", appointment.id, appointment.status)
        return None

    resolved_services = [s for s in booked if s is not None]
    duration = sum(s.duration for s in resolved_services)
    try:
        end_time = end_time_for(appointment.start_time, duration)
    except ValueError:
        logger.debug("Dropping appointment %s: bad start time %r", appointment.id, appointment.start_time)
        return None
    first = resolved_services[0]
    return ResolvedAppointment(
        id=appointment.id,
        client_id=client.id,
        client_name=client.name,
        client_phone=client.phone,
        client_email=client.email,
        professional_id=professional.id,
        professional_name=professional.name,
        professional_color=professional.color,
        service_id=first.id,
        service_name=first.name,
        service_ids=appointment.service_ids,
        date=appointment.date,
        start_time=appointment.start_time,
        end_time=end_time,
        duration_minutes=duration,
        status=status,
        total_amount=sum((s.price for s in resolved_services), Decimal("0")),
        notes=appointment.notes,
        visible_notes=strip_directive(appointment.notes),
        column_override=column_override(appointment.notes),
    )


def resolve_all(
    appointments: Iterable[AppointmentRecord],
    clients: Iterable[ClientRecord],
    services: Iterable[ServiceRecord],
    professionals: Iterable[ProfessionalRecord],
) -> list[ResolvedAppointment]:
    client_map = {c.id: c for c in clients}
    service_map = {s.id: s for s in services}
    professional_map = {p.id: p for p in professionals}
    resolved = []
    for apt in appointments:
        item = resolve(apt, client_map, service_map, professional_map)
        if item is not None:
            resolved.append(item)
    return resolved


# ── Filters ──────────────────────────────────────────────────────────


def matches_filter(
    apt: ResolvedAppointment,
    flt: AppointmentFilter,
    *,
    kanban: bool = False,
    reference: date | None = None,
) -> bool:
    """Shared calendar/kanban filter. Date presets apply to the board only."""
    if flt.professional_ids and apt.professional_id not in flt.professional_ids:
        return False
    if flt.status != "all":
        try:
            wanted = normalize_status(flt.status)
        except ValueError:
            return False
        if apt.status != wanted:
            return False
    search = flt.client_search.strip().lower()
    if search and search not in apt.client_name.lower():
        return False
    if kanban:
        ref = reference or today()
        start, end = preset_range(flt.preset, flt.kanban_month or ref, ref)
        if not start <= apt.date <= end:
            return False
    return True


def _start_key(apt: ResolvedAppointment) -> tuple[int, date]:
    return parse_hhmm(apt.start_time), apt.date


# ── Calendar ─────────────────────────────────────────────────────────


def to_calendar_entry(apt: ResolvedAppointment) -> CalendarEntry:
    return CalendarEntry(
        id=apt.id,
        date=apt.date,
        start_time=apt.start_time,
        end_time=apt.end_time,
        client_id=apt.client_id,
        client_name=apt.client_name,
        professional_id=apt.professional_id,
        professional_name=apt.professional_name,
        professional_color=apt.professional_color,
        service_id=apt.service_id,
        service_name=apt.service_name,
        duration_minutes=apt.duration_minutes,
        duration_label=format_duration(apt.duration_minutes),
        status=apt.status,
        notes=apt.visible_notes,
    )


def calendar_entries(resolved: Iterable[ResolvedAppointment], flt: AppointmentFilter) -> list[CalendarEntry]:
    return [to_calendar_entry(a) for a in sorted(resolved, key=_start_key) if matches_filter(a, flt)]


def calendar_month(
    resolved: Iterable[ResolvedAppointment],
    flt: AppointmentFilter,
    month_cursor: date,
) -> list[CalendarDay]:
    """Days of the cursor's month that have bookings, each sorted by start time."""
    first, last = month_bounds(month_cursor)
    days: dict[date, list[CalendarEntry]] = {}
    for entry in calendar_entries(resolved, flt):
        if first <= entry.date <= last:
            days.setdefault(entry.date, []).append(entry)
    return [CalendarDay(day=d, entries=days[d]) for d in sorted(days)]


# ── Kanban ───────────────────────────────────────────────────────────


def current_column(apt: ResolvedAppointment) -> str:
    """Lane the card is displayed in right now."""
    return apt.column_override or resolve_column(apt.status, None)


def kanban_cards(
    resolved: Iterable[ResolvedAppointment],
    flt: AppointmentFilter,
    reference: date | None = None,
) -> list[KanbanCard]:
    """Filtered cards ordered by start minutes; ``order`` is the list index."""
    visible = sorted(
        (a for a in resolved if matches_filter(a, flt, kanban=True, reference=reference)),
        key=_start_key,
    )
    return [
        KanbanCard(
            id=apt.id,
            client_name=apt.client_name,
            service_name=apt.service_name,
            start_time=apt.start_time,
            date=apt.date,
            professional_name=apt.professional_name,
            status=apt.status,
            column_id=current_column(apt),
            order=index,
            amount=apt.total_amount,
        )
        for index, apt in enumerate(visible)
    ]


def plan_moves(
    resolved: Iterable[ResolvedAppointment],
    moves: Iterable[CardMove],
) -> list[AppointmentChange]:
    """Status + notes writes for every card whose lane actually changed.

    Moves for unknown cards or to the lane a card already sits in are
    skipped. A later move of the same card wins.

    Raises:
        ValidationError: A move targets a lane the board does not have.
    """
    by_id = {a.id: a for a in resolved}
    targets: dict[uuid.UUID, str] = {}
    for move in moves:
        if not is_board_column(move.column_id):
            raise ValidationError(f"Coluna desconhecida: {move.column_id}")
        targets[move.card_id] = move.column_id

    changes = []
    for card_id, target in targets.items():
        apt = by_id.get(card_id)
        if apt is None or current_column(apt) == target:
            continue
        status = status_for_column(target)
        changes.append(
            AppointmentChange(
                appointment_id=card_id,
                status=status,
                notes=notes_for_column(apt.notes, target, status),
            )
        )
    return changes


def apply_change(apt: ResolvedAppointment, change: AppointmentChange) -> ResolvedAppointment:
    """Local projection of a planned write."""
    return apt.model_copy(
        update={
            "status": change.status,
            "notes": change.notes,
            "visible_notes": strip_directive(change.notes),
            "column_override": column_override(change.notes),
        }
    )
