"""Dashboard overview and the period reports.

Everything here is an aggregate over records that are already loaded; the
``build_*`` functions are pure and the ``*_report`` coroutines at the bottom
only fetch what they need from the store.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable, Mapping
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal

from salon.errors import ValidationError
from salon.models.enums import AppointmentStatus, ClientStatus, TransactionStatus, TransactionType
from salon.schemas.board import ResolvedAppointment
from salon.schemas.catalog import ClientRecord, ProductRecord, ProfessionalRecord, ServiceRecord
from salon.schemas.finance import TransactionRecord
from salon.schemas.reports import (
    ClientsReport,
    DailyCount,
    DashboardOverview,
    DayComparison,
    FinancialReport,
    ProductSalesRow,
    ProductsReport,
    ProfessionalPerformance,
    ServiceReportRow,
    ServiceRevenue,
    ServicesReport,
)
from salon.scheduling.board import resolve_all, to_calendar_entry
from salon.scheduling.timeutils import month_bounds, now_minutes, parse_hhmm, today
from salon.store.datastore import DataStore

logger = logging.getLogger(__name__)

UPCOMING_LIMIT = 5
TOP_SERVICES_LIMIT = 5
RECENT_TRANSACTIONS_LIMIT = 5

_OPEN_STATUSES = frozenset({AppointmentStatus.AGENDADO, AppointmentStatus.CONFIRMADO})


def _completed_income(transactions: Iterable[TransactionRecord]) -> list[TransactionRecord]:
    return [
        t
        for t in transactions
        if t.type == TransactionType.INCOME.value and t.status == TransactionStatus.COMPLETED.value
    ]


def _sum(amounts: Iterable[Decimal]) -> Decimal:
    return sum(amounts, Decimal("0"))


def change_percent(current: Decimal, previous: Decimal) -> int:
    """Whole-number growth from ``previous`` to ``current``; 0 without a base."""
    if previous <= 0:
        return 0
    ratio = (current - previous) / previous * 100
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compare_days(current: Decimal, previous: Decimal) -> DayComparison:
    return DayComparison(today=current, yesterday=previous, change_percent=change_percent(current, previous))


def check_range(start: date, end: date) -> None:
    if start > end:
        raise ValidationError("A data inicial deve ser anterior à data final")


# ── Dashboard ────────────────────────────────────────────────────────


def open_appointments_on(resolved: Iterable[ResolvedAppointment], day: date) -> int:
    """Bookings on ``day`` that still expect the client (agendado or confirmado)."""
    return sum(1 for a in resolved if a.date == day and a.status in _OPEN_STATUSES)


def income_on(transactions: Iterable[TransactionRecord], day: date) -> Decimal:
    return _sum(t.amount for t in _completed_income(transactions) if t.date == day)


def new_clients_between(clients: Iterable[ClientRecord], start: date, end: date) -> int:
    """Clients registered in ``[start, end]``; rows without a date never count."""
    return sum(1 for c in clients if c.registration_date is not None and start <= c.registration_date <= end)


def upcoming_appointments(
    resolved: Iterable[ResolvedAppointment],
    reference: date,
    minute: int = 0,
    limit: int = UPCOMING_LIMIT,
) -> list[ResolvedAppointment]:
    """Next open bookings from ``reference`` at ``minute`` onward, soonest first."""
    ahead = [
        a
        for a in resolved
        if a.status in _OPEN_STATUSES
        and (a.date > reference or (a.date == reference and parse_hhmm(a.start_time) >= minute))
    ]
    ahead.sort(key=lambda a: (a.date, parse_hhmm(a.start_time)))
    return ahead[:limit]


def top_services(
    transactions: Iterable[TransactionRecord],
    services: Iterable[ServiceRecord],
    start: date,
    end: date,
    limit: int = TOP_SERVICES_LIMIT,
) -> list[ServiceRevenue]:
    """Services ranked by the completed income booked against them in ``[start, end]``.

    A transaction that lists several services credits its full amount to
    each of them. Services no longer in the catalog are left out.
    """
    catalog = {s.id: s for s in services}
    revenue: dict[uuid.UUID, Decimal] = {}
    counts: dict[uuid.UUID, int] = {}
    for t in _completed_income(transactions):
        if not start <= t.date <= end:
            continue
        for service_id in set(t.service_ids):
            revenue[service_id] = revenue.get(service_id, Decimal("0")) + t.amount
            counts[service_id] = counts.get(service_id, 0) + 1

    ranked = [
        ServiceRevenue(
            service_id=service_id,
            service_name=catalog[service_id].name,
            count=counts[service_id],
            revenue=amount,
        )
        for service_id, amount in revenue.items()
        if service_id in catalog
    ]
    ranked.sort(key=lambda r: (-r.revenue, r.service_name))
    return ranked[:limit]


def professional_performance(
    resolved: Iterable[ResolvedAppointment],
    professionals: Iterable[ProfessionalRecord],
    start: date,
    end: date,
) -> list[ProfessionalPerformance]:
    """Completed bookings per professional in ``[start, end]``, busiest first.

    Professionals with nothing completed are omitted.
    """
    counts: dict[uuid.UUID, int] = {}
    for apt in resolved:
        if apt.status == AppointmentStatus.CONCLUIDO and start <= apt.date <= end:
            counts[apt.professional_id] = counts.get(apt.professional_id, 0) + 1

    rows = [
        ProfessionalPerformance(professional_id=p.id, name=p.name, color=p.color, completed=counts[p.id])
        for p in professionals
        if counts.get(p.id)
    ]
    rows.sort(key=lambda r: (-r.completed, r.name))
    return rows


def completed_by_day(resolved: Iterable[ResolvedAppointment], start: date, end: date) -> list[DailyCount]:
    """One entry per day in ``[start, end]``, zero-filled."""
    counts: dict[date, int] = {}
    for apt in resolved:
        if apt.status == AppointmentStatus.CONCLUIDO and start <= apt.date <= end:
            counts[apt.date] = counts.get(apt.date, 0) + 1
    days = (start + timedelta(days=offset) for offset in range((end - start).days + 1))
    return [DailyCount(day=d, completed=counts.get(d, 0)) for d in days]


def recent_transactions(
    transactions: Iterable[TransactionRecord],
    limit: int = RECENT_TRANSACTIONS_LIMIT,
) -> list[TransactionRecord]:
    return sorted(transactions, key=lambda t: t.date, reverse=True)[:limit]


def build_dashboard(
    resolved: list[ResolvedAppointment],
    transactions: list[TransactionRecord],
    clients: list[ClientRecord],
    services: list[ServiceRecord],
    professionals: list[ProfessionalRecord],
    reference: date,
    minute: int = 0,
) -> DashboardOverview:
    """Overview cards, charts and tables of the dashboard home page."""
    yesterday = reference - timedelta(days=1)
    month_start, month_end = month_bounds(reference)
    return DashboardOverview(
        reference=reference,
        appointments=compare_days(
            Decimal(open_appointments_on(resolved, reference)),
            Decimal(open_appointments_on(resolved, yesterday)),
        ),
        income=compare_days(income_on(transactions, reference), income_on(transactions, yesterday)),
        new_clients_this_month=new_clients_between(clients, month_start, month_end),
        upcoming=[to_calendar_entry(a) for a in upcoming_appointments(resolved, reference, minute)],
        top_services=top_services(transactions, services, month_start, month_end),
        professional_performance=professional_performance(resolved, professionals, month_start, month_end),
        services_by_day=completed_by_day(resolved, month_start, month_end),
        recent_transactions=recent_transactions(transactions),
    )


# ── Period reports ───────────────────────────────────────────────────


def build_financial_report(transactions: Iterable[TransactionRecord], start: date, end: date) -> FinancialReport:
    """Totals count completed transactions only; the listing shows every status."""
    check_range(start, end)
    in_range = sorted((t for t in transactions if start <= t.date <= end), key=lambda t: t.date)
    completed = [t for t in in_range if t.status == TransactionStatus.COMPLETED.value]
    income = _sum(t.amount for t in completed if t.type == TransactionType.INCOME.value)
    expense = _sum(t.amount for t in completed if t.type == TransactionType.EXPENSE.value)
    return FinancialReport(
        start=start,
        end=end,
        income=income,
        expense=expense,
        profit=income - expense,
        transactions=in_range,
    )


def build_services_report(
    resolved: Iterable[ResolvedAppointment],
    services: Mapping[uuid.UUID, ServiceRecord],
    start: date,
    end: date,
) -> ServicesReport:
    """Completed bookings in ``[start, end]`` with every service they included."""
    check_range(start, end)
    done = sorted(
        (a for a in resolved if a.status == AppointmentStatus.CONCLUIDO and start <= a.date <= end),
        key=lambda a: (a.date, parse_hhmm(a.start_time)),
    )
    rows = [
        ServiceReportRow(
            appointment_id=apt.id,
            date=apt.date,
            client_name=apt.client_name,
            professional_name=apt.professional_name,
            service_names=[services[sid].name for sid in apt.service_ids if sid in services],
            amount=apt.total_amount,
        )
        for apt in done
    ]
    return ServicesReport(
        start=start,
        end=end,
        completed_count=len(rows),
        revenue=_sum(r.amount for r in rows),
        rows=rows,
    )


def build_products_report(
    transactions: Iterable[TransactionRecord],
    products: Iterable[ProductRecord],
    start: date,
    end: date,
) -> ProductsReport:
    """Units and revenue per product from completed sales in ``[start, end]``."""
    check_range(start, end)
    catalog = {p.id: p for p in products}
    units: dict[uuid.UUID, int] = {}
    revenue: dict[uuid.UUID, Decimal] = {}
    for t in _completed_income(transactions):
        if t.product_id is None or not start <= t.date <= end:
            continue
        units[t.product_id] = units.get(t.product_id, 0) + (t.quantity or 0)
        revenue[t.product_id] = revenue.get(t.product_id, Decimal("0")) + t.amount

    rows = [
        ProductSalesRow(
            product_id=product_id,
            product_name=catalog[product_id].name if product_id in catalog else "Produto removido",
            units_sold=units[product_id],
            revenue=amount,
        )
        for product_id, amount in revenue.items()
    ]
    rows.sort(key=lambda r: (-r.revenue, r.product_name))
    return ProductsReport(
        start=start,
        end=end,
        units_sold=sum(r.units_sold for r in rows),
        revenue=_sum(r.revenue for r in rows),
        rows=rows,
    )


def build_clients_report(clients: Iterable[ClientRecord], start: date, end: date) -> ClientsReport:
    check_range(start, end)
    items = list(clients)
    return ClientsReport(
        start=start,
        end=end,
        total=len(items),
        active=sum(1 for c in items if c.status == ClientStatus.ACTIVE.value),
        new_in_period=new_clients_between(items, start, end),
    )


# ── Store operations ─────────────────────────────────────────────────


def default_range(start: date | None, end: date | None, reference: date | None = None) -> tuple[date, date]:
    """Missing bounds fall back to the first of the month and today."""
    ref = reference or today()
    return start or ref.replace(day=1), end or ref


async def _catalogs(
    store: DataStore,
) -> tuple[list[ResolvedAppointment], list[ClientRecord], list[ServiceRecord], list[ProfessionalRecord]]:
    appointments = await store.appointments.list()
    clients = await store.clients.list()
    services = await store.services.list()
    professionals = await store.professionals.list()
    return resolve_all(appointments, clients, services, professionals), clients, services, professionals


async def dashboard(store: DataStore, reference: date | None = None) -> DashboardOverview:
    ref = reference or today()
    minute = now_minutes() if reference is None else 0
    resolved, clients, services, professionals = await _catalogs(store)
    overview = build_dashboard(resolved, await store.transactions.list(), clients, services, professionals, ref, minute)
    logger.debug("Dashboard built for %s: %d upcoming", ref, len(overview.upcoming))
    return overview


async def financial_report(store: DataStore, start: date | None = None, end: date | None = None) -> FinancialReport:
    first, last = default_range(start, end)
    return build_financial_report(await store.transactions.list(), first, last)


async def services_report(store: DataStore, start: date | None = None, end: date | None = None) -> ServicesReport:
    first, last = default_range(start, end)
    resolved, _, services, _ = await _catalogs(store)
    return build_services_report(resolved, {s.id: s for s in services}, first, last)


async def products_report(store: DataStore, start: date | None = None, end: date | None = None) -> ProductsReport:
    first, last = default_range(start, end)
    return build_products_report(await store.transactions.list(), await store.products.list(), first, last)


async def clients_report(store: DataStore, start: date | None = None, end: date | None = None) -> ClientsReport:
    first, last = default_range(start, end)
    return build_clients_report(await store.clients.list(), first, last)
