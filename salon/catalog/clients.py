"""Client list with lifetime totals.

Totals are never stored: they are recomputed from completed appointments
every time the list or a client page is read.
"""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Iterable
from decimal import Decimal

from salon.models.enums import AppointmentStatus, ClientStatus
from salon.schemas.appointments import AppointmentRecord
from salon.schemas.catalog import ClientRecord, ClientSummary
from salon.scheduling.status import normalize_status
from salon.store.datastore import DataStore


def _is_completed(apt: AppointmentRecord) -> bool:
    try:
        return normalize_status(apt.status) == AppointmentStatus.CONCLUIDO
    except ValueError:
        return False


def client_totals(client: ClientRecord, appointments: Iterable[AppointmentRecord]) -> ClientSummary:
    """Spend, visits, last visit and average ticket from completed bookings."""
    done = [a for a in appointments if a.client_id == client.id and _is_completed(a)]
    total = sum((a.total_amount for a in done), Decimal("0"))
    visits = len(done)
    return ClientSummary(
        client=client,
        total_spent=total,
        total_visits=visits,
        last_visit=max((a.date for a in done), default=None),
        average_ticket=(total / visits).quantize(Decimal("0.01")) if visits else Decimal("0"),
    )


def filter_clients(
    clients: Iterable[ClientRecord],
    search: str = "",
    status: ClientStatus | None = None,
) -> list[ClientRecord]:
    """Case-insensitive match on name, phone or e-mail, plus status."""
    needle = search.strip().lower()
    selected = []
    for client in clients:
        if status is not None and client.status != status.value:
            continue
        haystack = " ".join(filter(None, (client.name, client.phone, client.email))).lower()
        if needle and needle not in haystack:
            continue
        selected.append(client)
    return selected


async def list_clients(
    store: DataStore,
    search: str = "",
    status: ClientStatus | None = None,
) -> list[ClientSummary]:
    clients, appointments = await asyncio.gather(store.clients.list(), store.appointments.list())
    return [client_totals(c, appointments) for c in filter_clients(clients, search, status)]


async def get_client(store: DataStore, client_id: uuid.UUID) -> ClientSummary:
    client, appointments = await asyncio.gather(
        store.clients.get(client_id),
        store.appointments.list(client_id=client_id),
    )
    return client_totals(client, appointments)
