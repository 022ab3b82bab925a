"""Finance API: transactions, summary, product sales and stock."""
# ruff: noqa: B008

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from salon.admin.auth import get_store, verify_owner
from salon.catalog import finance, inventory
from salon.models.enums import PeriodFilter, TransactionType
from salon.schemas.finance import (
    FinanceSummary,
    InventoryOverview,
    ProductSaleInput,
    StockMovementCreate,
    StockMovementRecord,
    TransactionCreate,
    TransactionRecord,
)
from salon.store.datastore import DataStore

router = APIRouter(prefix="/api/finance", tags=["finance"])


@router.get("/transactions", response_model=list[TransactionRecord])
async def list_transactions(
    kind: TransactionType | None = Query(default=None, alias="type"),
    period: PeriodFilter | None = None,
    store: DataStore = Depends(get_store),
) -> list[TransactionRecord]:
    return await finance.list_transactions(store, kind, period)


@router.post("/transactions", response_model=TransactionRecord, status_code=status.HTTP_201_CREATED)
async def record_transaction(
    payload: TransactionCreate,
    store: DataStore = Depends(get_store),
    owner: str = Depends(verify_owner),
) -> TransactionRecord:
    return await finance.record_transaction(store, payload, owner)


@router.get("/summary", response_model=FinanceSummary)
async def finance_summary(store: DataStore = Depends(get_store)) -> FinanceSummary:
    return await finance.summary(store)


@router.post("/sales", response_model=TransactionRecord, status_code=status.HTTP_201_CREATED)
async def sell_product(
    payload: ProductSaleInput,
    store: DataStore = Depends(get_store),
    owner: str = Depends(verify_owner),
) -> TransactionRecord:
    """Stock out + income transaction in one call."""
    return await finance.sell_product(store, payload, owner)


# ── Stock ────────────────────────────────────────────────────────────


@router.get("/stock-movements", response_model=list[StockMovementRecord])
async def list_stock_movements(store: DataStore = Depends(get_store)) -> list[StockMovementRecord]:
    return await store.stock_movements.list()


@router.post("/stock-movements", response_model=StockMovementRecord, status_code=status.HTTP_201_CREATED)
async def record_stock_movement(
    payload: StockMovementCreate,
    store: DataStore = Depends(get_store),
    owner: str = Depends(verify_owner),
) -> StockMovementRecord:
    movement, _ = await inventory.record_movement(store, payload, owner)
    return movement


@router.get("/inventory", response_model=InventoryOverview)
async def inventory_overview(store: DataStore = Depends(get_store)) -> InventoryOverview:
    return await inventory.inventory_overview(store)
