"""The ``kanbanColumnId:<id>`` notes directive.

Board placement that differs from a card's status-derived lane is stored
inside the appointment notes as ``kanbanColumnId:<column-id>``. The token
format is fixed for compatibility with existing rows. All reading and
writing of the directive lives here.
"""

from __future__ import annotations

import re

from salon.models.enums import AppointmentStatus
from salon.scheduling.status import default_column, is_board_column

DIRECTIVE_PREFIX = "kanbanColumnId:"

_DIRECTIVE_RE = re.compile(r"kanbanColumnId:([a-z-]+)")
_STRIP_RE = re.compile(r"kanbanColumnId:[a-z-]+\s*")


def extract_column(notes: str | None) -> str | None:
    """First directive token in ``notes``, or None."""
    if not notes:
        return None
    match = _DIRECTIVE_RE.search(notes)
    return match.group(1) if match else None


def strip_directive(notes: str | None) -> str:
    """Remove every directive and trim surrounding whitespace."""
    if not notes:
        return ""
    return _STRIP_RE.sub("", notes).strip()


def column_override(notes: str | None) -> str | None:
    """Directive token when it names a lane the board knows about."""
    token = extract_column(notes)
    if token is not None and is_board_column(token):
        return token
    return None


def resolve_column(status: AppointmentStatus, notes: str | None) -> str:
    """Lane a card is displayed in: override if valid, else the status default."""
    return column_override(notes) or default_column(status)


def notes_for_column(notes: str | None, target_column: str, status: AppointmentStatus) -> str:
    """Rewrite ``notes`` for a card now sitting in ``target_column``.

    The directive is only kept when the target differs from the lane the
    new status would pick anyway.
    """
    clean = strip_directive(notes)
    if target_column == default_column(status):
        return clean
    return f"{clean} {DIRECTIVE_PREFIX}{target_column}".strip()
