"""Reports API: dashboard overview and the per-period reports."""
# ruff: noqa: B008

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends

from salon.admin.auth import get_store
from salon.catalog import reports
from salon.schemas.reports import ClientsReport, DashboardOverview, FinancialReport, ProductsReport, ServicesReport
from salon.store.datastore import DataStore

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get("/dashboard", response_model=DashboardOverview)
async def dashboard(store: DataStore = Depends(get_store)) -> DashboardOverview:
    return await reports.dashboard(store)


# ── Period reports ───────────────────────────────────────────────────
# Omitted bounds default to the first of the current month and today.


@router.get("/financial", response_model=FinancialReport)
async def financial_report(
    start: date | None = None,
    end: date | None = None,
    store: DataStore = Depends(get_store),
) -> FinancialReport:
    return await reports.financial_report(store, start, end)


@router.get("/services", response_model=ServicesReport)
async def services_report(
    start: date | None = None,
    end: date | None = None,
    store: DataStore = Depends(get_store),
) -> ServicesReport:
    return await reports.services_report(store, start, end)


@router.get("/products", response_model=ProductsReport)
async def products_report(
    start: date | None = None,
    end: date | None = None,
    store: DataStore = Depends(get_store),
) -> ProductsReport:
    return await reports.products_report(store, start, end)


@router.get("/clients", response_model=ClientsReport)
async def clients_report(
    start: date | None = None,
    end: date | None = None,
    store: DataStore = Depends(get_store),
) -> ClientsReport:
    return await reports.clients_report(store, start, end)
