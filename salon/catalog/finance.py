"""Cash flow: transactions, the finance summary and product sales."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from salon.admin.events import emit
from salon.catalog.inventory import product_for_sale, record_movement
from salon.errors import PersistenceError
from salon.models.enums import MovementType, PeriodFilter, TransactionStatus, TransactionType
from salon.schemas.catalog import ProductRecord
from salon.schemas.events import EventType, SystemEvent
from salon.schemas.finance import (
    FinanceSummary,
    ProductSaleInput,
    StockMovementCreate,
    StockMovementRecord,
    TransactionCreate,
    TransactionRecord,
)
from salon.scheduling.timeutils import month_bounds, period_range, today
from salon.store.datastore import DataStore
from salon.store.repository import column_values

logger = logging.getLogger(__name__)

SALE_CATEGORY = "Venda de produto"
_CENTS = Decimal("0.01")


def _total(transactions: Iterable[TransactionRecord]) -> Decimal:
    return sum((t.amount for t in transactions), Decimal("0"))


def finance_summary(transactions: Iterable[TransactionRecord], reference: date | None = None) -> FinanceSummary:
    """Today/month income and expense over completed transactions.

    Pending transactions only feed the pending total.
    """
    ref = reference or today()
    month_start, month_end = month_bounds(ref)
    items = list(transactions)
    completed = [t for t in items if t.status == TransactionStatus.COMPLETED.value]
    pending = [t for t in items if t.status == TransactionStatus.PENDING.value]

    def pick(kind: TransactionType, start: date, end: date) -> Decimal:
        return _total(t for t in completed if t.type == kind.value and start <= t.date <= end)

    month_income = pick(TransactionType.INCOME, month_start, month_end)
    month_expense = pick(TransactionType.EXPENSE, month_start, month_end)
    return FinanceSummary(
        today_income=pick(TransactionType.INCOME, ref, ref),
        today_expense=pick(TransactionType.EXPENSE, ref, ref),
        month_income=month_income,
        month_expense=month_expense,
        net_balance=month_income - month_expense,
        pending_amount=_total(pending),
        pending_count=len(pending),
    )


def sale_amount(unit_price: Decimal, quantity: int, discount_percentage: Decimal = Decimal("0")) -> Decimal:
    """``unit_price × quantity`` minus a percentage discount, rounded to cents."""
    gross = unit_price * quantity
    net = gross * (Decimal("100") - discount_percentage) / Decimal("100")
    return net.quantize(_CENTS, rounding=ROUND_HALF_UP)


# ── Store operations ─────────────────────────────────────────────────


async def list_transactions(
    store: DataStore,
    kind: TransactionType | None = None,
    period: PeriodFilter | None = None,
    reference: date | None = None,
) -> list[TransactionRecord]:
    transactions = await store.transactions.list()
    if kind is not None:
        transactions = [t for t in transactions if t.type == kind.value]
    if period is not None:
        start, end = period_range(period, reference)
        transactions = [t for t in transactions if start <= t.date <= end]
    return transactions


async def summary(store: DataStore, reference: date | None = None) -> FinanceSummary:
    return finance_summary(await store.transactions.list(), reference)


async def record_transaction(
    store: DataStore,
    payload: TransactionCreate,
    actor_id: str | None = None,
) -> TransactionRecord:
    values = column_values(payload)
    values["description"] = values.get("description") or ""
    record = await store.transactions.create(values)
    await emit(SystemEvent(
        event_type=EventType.TRANSACTION_RECORDED,
        tenant_id=store.owner_id,
        actor_id=actor_id,
        data={"transaction_id": str(record.id), "type": record.type, "amount": str(record.amount)},
        source_module="catalog.finance",
    ))
    logger.info("Transaction recorded: %s %s %s", record.type, record.amount, record.category)
    return record


async def sell_product(
    store: DataStore,
    payload: ProductSaleInput,
    actor_id: str | None = None,
) -> TransactionRecord:
    """Take units out of stock and book the income.

    Raises:
        InsufficientStockError: Not enough units; nothing is written.
        PersistenceError: A write failed. If booking the income failed, the
            stock movement is reverted before the error propagates.
    """
    product = await product_for_sale(store, payload.product_id, payload.quantity)
    sale_day = payload.date or today()

    movement, updated = await record_movement(
        store,
        StockMovementCreate(
            product_id=product.id,
            type=MovementType.OUT,
            quantity=payload.quantity,
            date=sale_day,
            reason="Venda",
        ),
        actor_id=actor_id,
    )
    amount = sale_amount(product.sale_price, payload.quantity, payload.discount_percentage)
    try:
        record = await store.transactions.create({
            "date": sale_day,
            "type": TransactionType.INCOME.value,
            "category": SALE_CATEGORY,
            "description": f"{product.name} x{payload.quantity}",
            "amount": amount,
            "payment_method": payload.payment_method.value,
            "status": TransactionStatus.COMPLETED.value,
            "client_id": payload.client_id,
            "professional_id": payload.professional_id,
            "product_id": product.id,
            "quantity": payload.quantity,
            "discount_percentage": payload.discount_percentage,
            "non_registered_client_name": payload.non_registered_client_name,
        })
    except PersistenceError:
        await _undo_stock_out(store, movement, updated)
        raise
    await emit(SystemEvent(
        event_type=EventType.PRODUCT_SOLD,
        tenant_id=store.owner_id,
        actor_id=actor_id,
        data={
            "transaction_id": str(record.id),
            "product_id": str(product.id),
            "quantity": payload.quantity,
            "amount": str(amount),
        },
        source_module="catalog.finance",
    ))
    logger.info("Product sold: %s x%d for %s", product.name, payload.quantity, amount)
    return record


async def _undo_stock_out(store: DataStore, movement: StockMovementRecord, product: ProductRecord) -> None:
    """Put sold units back when the income could not be booked."""
    try:
        await store.products.update(product.id, {"quantity": product.quantity + movement.quantity})
        await store.stock_movements.delete(movement.id)
    except PersistenceError:
        logger.exception(
            "Could not revert stock movement %s for product %s; stock must be fixed by hand",
            movement.id,
            product.id,
        )
        return
    logger.warning("Sale of product %s failed; stock movement %s reverted", product.id, movement.id)
