"""Pydantic schemas for the dashboard overview and the period reports."""

from __future__ import annotations

import datetime as dt
import uuid
from decimal import Decimal

from pydantic import BaseModel, Field

from salon.schemas.board import CalendarEntry
from salon.schemas.finance import TransactionRecord


class DayComparison(BaseModel):
    """A KPI for today next to the same KPI for yesterday.

    ``change_percent`` is 0 when yesterday had nothing to compare against.
    """

    today: Decimal
    yesterday: Decimal
    change_percent: int


class ServiceRevenue(BaseModel):
    service_id: uuid.UUID
    service_name: str
    count: int
    revenue: Decimal


class ProfessionalPerformance(BaseModel):
    professional_id: uuid.UUID
    name: str
    color: str
    completed: int


class DailyCount(BaseModel):
    day: dt.date
    completed: int


class DashboardOverview(BaseModel):
    reference: dt.date
    appointments: DayComparison
    income: DayComparison
    new_clients_this_month: int
    upcoming: list[CalendarEntry]
    top_services: list[ServiceRevenue]
    professional_performance: list[ProfessionalPerformance]
    services_by_day: list[DailyCount]
    recent_transactions: list[TransactionRecord]


# ── Period reports ───────────────────────────────────────────────────


class FinancialReport(BaseModel):
    start: dt.date
    end: dt.date
    income: Decimal
    expense: Decimal
    profit: Decimal
    transactions: list[TransactionRecord]


class ServiceReportRow(BaseModel):
    appointment_id: uuid.UUID
    date: dt.date
    client_name: str
    professional_name: str
    service_names: list[str]
    amount: Decimal


class ServicesReport(BaseModel):
    start: dt.date
    end: dt.date
    completed_count: int
    revenue: Decimal
    rows: list[ServiceReportRow]


class ProductSalesRow(BaseModel):
    product_id: uuid.UUID
    product_name: str
    units_sold: int
    revenue: Decimal


class ProductsReport(BaseModel):
    start: dt.date
    end: dt.date
    units_sold: int
    revenue: Decimal
    rows: list[ProductSalesRow] = Field(default_factory=list)


class ClientsReport(BaseModel):
    start: dt.date
    end: dt.date
    total: int
    active: int
    new_in_period: int
