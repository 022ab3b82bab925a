"""Tests for the dashboard overview and the period reports."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

import pytest

from salon.catalog.reports import (
    build_clients_report,
    build_dashboard,
    build_financial_report,
    build_products_report,
    build_services_report,
    change_percent,
    completed_by_day,
    dashboard,
    default_range,
    financial_report,
    professional_performance,
    top_services,
    upcoming_appointments,
)
from salon.errors import ValidationError
from salon.scheduling.board import resolve_all
from tests.factories import (
    DAY,
    FakeStore,
    make_appointment,
    make_client,
    make_product,
    make_professional,
    make_service,
    make_transaction,
    resolved_for,
)

YESTERDAY = DAY - timedelta(days=1)


@pytest.fixture
def people():
    client = make_client(registration_date=date(2026, 10, 2))
    pro = make_professional(color="#f472b6")
    corte = make_service()
    return client, pro, corte


def _booking(people, day=DAY, start_time="09:00", status="agendado"):
    client, pro, corte = people
    return resolved_for(make_appointment(client, pro, corte, day=day, start_time=start_time, status=status), *people)


class TestChangePercent:
    def test_growth(self):
        assert change_percent(Decimal("150"), Decimal("100")) == 50

    def test_drop(self):
        assert change_percent(Decimal("1"), Decimal("3")) == -67

    def test_no_base(self):
        assert change_percent(Decimal("80"), Decimal("0")) == 0


class TestDashboard:
    def test_today_against_yesterday(self, people):
        resolved = [
            _booking(people, start_time="09:00"),
            _booking(people, start_time="11:00", status="confirmado"),
            _booking(people, start_time="13:00", status="cancelado"),
            _booking(people, day=YESTERDAY),
        ]
        transactions = [
            make_transaction("200.00", day=DAY),
            make_transaction("100.00", day=YESTERDAY),
            make_transaction("999.00", day=DAY, status="pending"),
            make_transaction("50.00", kind="expense", day=DAY),
        ]
        client, pro, corte = people
        overview = build_dashboard(resolved, transactions, [client], [corte], [pro], DAY)

        assert overview.appointments.today == 2
        assert overview.appointments.yesterday == 1
        assert overview.appointments.change_percent == 100
        assert overview.income.today == Decimal("200.00")
        assert overview.income.change_percent == 100
        assert overview.new_clients_this_month == 1
        assert len(overview.services_by_day) == 31
        assert overview.recent_transactions[0].date == DAY

    def test_new_clients_exclude_other_months_and_undated(self, people):
        clients = [
            make_client("Bia", registration_date=date(2026, 9, 30)),
            make_client("Cris"),
            make_client("Duda", registration_date=date(2026, 10, 31)),
        ]
        overview = build_dashboard([], [], clients, [], [], DAY)
        assert overview.new_clients_this_month == 1

    def test_upcoming_skips_past_and_closed(self, people):
        resolved = [
            _booking(people, start_time="08:00"),
            _booking(people, start_time="10:00", status="concluido"),
            _booking(people, start_time="15:00"),
            _booking(people, day=DAY + timedelta(days=1), start_time="09:00"),
            _booking(people, day=YESTERDAY, start_time="18:00"),
        ]
        upcoming = upcoming_appointments(resolved, DAY, minute=9 * 60)
        assert [(a.date, a.start_time) for a in upcoming] == [
            (DAY, "15:00"),
            (DAY + timedelta(days=1), "09:00"),
        ]

    def test_upcoming_is_capped(self, people):
        resolved = [_booking(people, start_time=f"{hour:02d}:00") for hour in range(8, 16)]
        assert len(upcoming_appointments(resolved, DAY)) == 5

    def test_top_services_by_revenue(self):
        corte, escova, removido = make_service(), make_service("Escova"), make_service("Luzes")
        transactions = [
            make_transaction("80.00", service_ids=[corte.id]),
            make_transaction("80.00", service_ids=[corte.id]),
            make_transaction("120.00", service_ids=[escova.id, corte.id]),
            make_transaction("500.00", service_ids=[removido.id]),
            make_transaction("300.00", day=date(2026, 9, 15), service_ids=[escova.id]),
        ]
        ranked = top_services(transactions, [corte, escova], date(2026, 10, 1), date(2026, 10, 31))
        assert [(r.service_name, r.count, r.revenue) for r in ranked] == [
            ("Corte feminino", 3, Decimal("280.00")),
            ("Escova", 1, Decimal("120.00")),
        ]

    def test_professional_performance_counts_completed(self, people):
        client, pro, corte = people
        idle = make_professional("Rita")
        resolved = [
            _booking(people, status="concluido"),
            _booking(people, day=DAY - timedelta(days=2), status="concluido"),
            _booking(people, status="agendado"),
            _booking(people, day=date(2026, 9, 30), status="concluido"),
        ]
        rows = professional_performance(resolved, [pro, idle], date(2026, 10, 1), date(2026, 10, 31))
        assert [(r.name, r.completed, r.color) for r in rows] == [("Carla Lima", 2, "#f472b6")]

    def test_completed_by_day_is_zero_filled(self, people):
        resolved = [_booking(people, status="concluido"), _booking(people, start_time="10:00", status="concluido")]
        counts = completed_by_day(resolved, YESTERDAY, DAY)
        assert [(c.day, c.completed) for c in counts] == [(YESTERDAY, 0), (DAY, 2)]

    @pytest.mark.asyncio()
    async def test_from_store(self, people):
        store = FakeStore()
        client, pro, corte = people
        store.add(client, pro, corte, make_appointment(client, pro, corte, start_time="14:00"))
        store.add(make_transaction("80.00", service_ids=[corte.id]))
        overview = await dashboard(store, DAY)
        assert overview.upcoming[0].client_name == "Ana Souza"
        assert overview.top_services[0].revenue == Decimal("80.00")


class TestFinancialReport:
    def test_totals_and_listing(self):
        transactions = [
            make_transaction("300.00", day=date(2026, 10, 5)),
            make_transaction("120.00", kind="expense", day=date(2026, 10, 6)),
            make_transaction("60.00", day=date(2026, 10, 7), status="pending"),
            make_transaction("900.00", day=date(2026, 9, 30)),
        ]
        report = build_financial_report(transactions, date(2026, 10, 1), DAY)
        assert report.income == Decimal("300.00")
        assert report.expense == Decimal("120.00")
        assert report.profit == Decimal("180.00")
        assert [t.date.day for t in report.transactions] == [5, 6, 7]

    def test_reversed_range(self):
        with pytest.raises(ValidationError, match="data inicial"):
            build_financial_report([], DAY, YESTERDAY)

    def test_default_range(self):
        assert default_range(None, None, DAY) == (date(2026, 10, 1), DAY)
        assert default_range(YESTERDAY, None, DAY) == (YESTERDAY, DAY)

    @pytest.mark.asyncio()
    async def test_from_store(self):
        store = FakeStore()
        store.add(make_transaction("75.00"))
        report = await financial_report(store, DAY, DAY)
        assert report.profit == Decimal("75.00")


class TestServicesReport:
    def test_completed_only_with_service_names(self, people):
        client, pro, corte = people
        escova = make_service("Escova", price="50.00")
        both = make_appointment(client, pro, corte, status="concluido", start_time="14:00")
        appointments = [
            make_appointment(client, pro, corte, status="concluido"),
            make_appointment(client, pro, corte, status="agendado", start_time="11:00"),
            both.model_copy(update={"service_ids": (corte.id, escova.id)}),
        ]
        resolved = resolve_all(appointments, [client], [corte, escova], [pro])

        report = build_services_report(resolved, {corte.id: corte, escova.id: escova}, date(2026, 10, 1), DAY)
        assert report.completed_count == 2
        assert report.revenue == Decimal("210.00")
        assert report.rows[1].service_names == ["Corte feminino", "Escova"]


class TestProductsReport:
    def test_units_and_revenue_per_product(self):
        shampoo, mascara = make_product(), make_product("Máscara")
        transactions = [
            make_transaction("90.00", product_id=shampoo.id, quantity=2),
            make_transaction("45.00", product_id=shampoo.id, quantity=1),
            make_transaction("60.00", product_id=mascara.id, quantity=1),
            make_transaction("45.00", product_id=mascara.id, quantity=1, status="cancelled"),
            make_transaction("80.00"),
        ]
        report = build_products_report(transactions, [shampoo, mascara], DAY, DAY)
        assert [(r.product_name, r.units_sold, r.revenue) for r in report.rows] == [
            ("Shampoo Profissional", 3, Decimal("135.00")),
            ("Máscara", 1, Decimal("60.00")),
        ]
        assert report.units_sold == 4
        assert report.revenue == Decimal("195.00")

    def test_deleted_product_keeps_its_sales(self):
        gone = make_product()
        report = build_products_report([make_transaction("45.00", product_id=gone.id, quantity=1)], [], DAY, DAY)
        assert report.rows[0].product_name == "Produto removido"


class TestClientsReport:
    def test_counts(self):
        clients = [
            make_client("Ana", registration_date=date(2026, 10, 3)),
            make_client("Bia", registration_date=date(2026, 8, 1), status="inactive"),
            make_client("Cris"),
        ]
        report = build_clients_report(clients, date(2026, 10, 1), DAY)
        assert (report.total, report.active, report.new_in_period) == (3, 2, 1)
