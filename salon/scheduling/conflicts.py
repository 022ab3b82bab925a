"""Booking conflict detection.

A professional cannot be in two places at once: two bookings on the same
civil date clash when their half-open ``[start, start + duration)`` minute
intervals overlap. The check is advisory. It blocks the create/edit dialog
and is never enforced by the data store.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable

from salon.config import settings
from salon.models.enums import AppointmentStatus
from salon.schemas.appointments import BookingWindow
from salon.scheduling.timeutils import parse_hhmm

logger = logging.getLogger(__name__)


def _interval(window: BookingWindow) -> tuple[int, int] | None:
    if not window.start_time or window.duration_minutes <= 0:
        return None
    try:
        start = parse_hhmm(window.start_time)
    except ValueError:
        logger.debug("Ignoring window with unreadable start time %r", window.start_time)
        return None
    return start, start + window.duration_minutes


def find_conflict(
    candidate: BookingWindow,
    existing: Iterable[BookingWindow],
    exclude_id: uuid.UUID | None = None,
    ignore_cancelled: bool | None = None,
) -> BookingWindow | None:
    """Return the first existing window that overlaps ``candidate``.

    Args:
        candidate: The requested slot. Any missing field makes the check inert.
        existing: Windows already on the agenda.
        exclude_id: Id of the appointment being edited, so it never clashes
            with itself.
        ignore_cancelled: Skip cancelled bookings. Defaults to the
            ``ignore_cancelled_in_conflicts`` setting.
    """
    if candidate.professional_id is None or candidate.date is None:
        return None
    interval = _interval(candidate)
    if interval is None:
        return None
    start, end = interval

    if ignore_cancelled is None:
        ignore_cancelled = settings.scheduling.ignore_cancelled_in_conflicts

    for window in existing:
        if exclude_id is not None and window.appointment_id == exclude_id:
            continue
        if window.professional_id != candidate.professional_id or window.date != candidate.date:
            continue
        if ignore_cancelled and window.status == AppointmentStatus.CANCELADO.value:
            continue
        other = _interval(window)
        if other is None:
            continue
        apt_start, apt_end = other
        if start < apt_end and end > apt_start:
            logger.debug(
                "Conflict for professional %s on %s: %s overlaps %s",
                candidate.professional_id,
                candidate.date,
                candidate.start_time,
                window.start_time,
            )
            return window
    return None


def has_conflict(
    candidate: BookingWindow,
    existing: Iterable[BookingWindow],
    exclude_id: uuid.UUID | None = None,
    ignore_cancelled: bool | None = None,
) -> bool:
    return find_conflict(candidate, existing, exclude_id, ignore_cancelled) is not None
