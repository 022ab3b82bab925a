"""Appointment status normalization and the status <-> board column table.

Stored rows may still carry the legacy English spellings; they are mapped
onto the canonical Portuguese states on every read. The five fixed lanes
map one-to-one onto the five canonical states. Extra lanes (configured in
settings) are all treated as "not yet confirmed".
"""

from __future__ import annotations

from salon.config import settings
from salon.models.enums import AppointmentStatus, KanbanColumnId
from salon.schemas.board import KanbanColumn

LEGACY_STATUSES: dict[str, AppointmentStatus] = {
    "scheduled": AppointmentStatus.AGENDADO,
    "completed": AppointmentStatus.CONCLUIDO,
    "cancelled": AppointmentStatus.CANCELADO,
    "no-show": AppointmentStatus.NAO_COMPARECEU,
}

DEFAULT_COLUMNS: dict[AppointmentStatus, KanbanColumnId] = {
    AppointmentStatus.AGENDADO: KanbanColumnId.PENDIENTE,
    AppointmentStatus.CONFIRMADO: KanbanColumnId.CONFIRMADO,
    AppointmentStatus.CONCLUIDO: KanbanColumnId.CONCLUIDO,
    AppointmentStatus.CANCELADO: KanbanColumnId.CANCELADO,
    AppointmentStatus.NAO_COMPARECEU: KanbanColumnId.NAO_COMPARECEU,
}

COLUMN_STATUSES: dict[KanbanColumnId, AppointmentStatus] = {col: st for st, col in DEFAULT_COLUMNS.items()}

COLUMN_TITLES: dict[KanbanColumnId, str] = {
    KanbanColumnId.PENDIENTE: "Pendente",
    KanbanColumnId.CONFIRMADO: "Confirmado",
    KanbanColumnId.CONCLUIDO: "Concluído",
    KanbanColumnId.NAO_COMPARECEU: "Não Compareceu",
    KanbanColumnId.CANCELADO: "Cancelado",
}


def normalize_status(value: str | AppointmentStatus) -> AppointmentStatus:
    """Map a stored status (canonical or legacy) to its canonical form.

    Raises:
        ValueError: The value is neither canonical nor a known legacy spelling.
    """
    if isinstance(value, AppointmentStatus):
        return value
    key = value.strip().lower()
    if key in LEGACY_STATUSES:
        return LEGACY_STATUSES[key]
    return AppointmentStatus(key)


def default_column(status: AppointmentStatus) -> str:
    """Lane a card sits in when its notes carry no override."""
    return DEFAULT_COLUMNS[status].value


def status_for_column(column_id: str) -> AppointmentStatus:
    """Status a card takes when dropped on ``column_id``.

    Extra and unknown lanes fall back to ``agendado``.
    """
    try:
        return COLUMN_STATUSES[KanbanColumnId(column_id)]
    except ValueError:
        return AppointmentStatus.AGENDADO


def board_column_ids() -> list[str]:
    """Every lane id the board currently shows, fixed lanes first."""
    ids = [col.value for col in KanbanColumnId]
    ids.extend(c for c in settings.scheduling.extra_columns if c not in ids)
    return ids


def is_board_column(column_id: str) -> bool:
    return column_id in board_column_ids()


def board_columns() -> list[KanbanColumn]:
    """Titled lanes in display order."""
    columns = [
        KanbanColumn(id=col.value, title=COLUMN_TITLES[col], status=COLUMN_STATUSES[col], order=i)
        for i, col in enumerate(KanbanColumnId)
    ]
    for column_id in board_column_ids()[len(columns) :]:
        columns.append(
            KanbanColumn(
                id=column_id,
                title=column_id.replace("-", " ").capitalize(),
                status=AppointmentStatus.AGENDADO,
                order=len(columns),
            )
        )
    return columns
