"""Stock levels, movements and the inventory overview.

A product's stock bucket is derived from its current quantity on every
read:

- critical: below the minimum quantity
- low: below one and a half times the minimum
- ok: anything else

Comparisons are exact (integer quantities against a Decimal threshold).
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable
from datetime import date, timedelta
from decimal import Decimal

from salon.admin.events import emit
from salon.config import settings
from salon.errors import InsufficientStockError
from salon.models.enums import MovementType, StockStatus
from salon.schemas.catalog import ProductRecord, ProductStock
from salon.schemas.events import EventType, SystemEvent
from salon.schemas.finance import InventoryOverview, StockMovementCreate, StockMovementRecord
from salon.scheduling.timeutils import today
from salon.store.datastore import DataStore

logger = logging.getLogger(__name__)

LOW_STOCK_FACTOR = Decimal("1.5")


def stock_status(quantity: int, min_quantity: int) -> StockStatus:
    if quantity < min_quantity:
        return StockStatus.CRITICAL
    if quantity < min_quantity * LOW_STOCK_FACTOR:
        return StockStatus.LOW
    return StockStatus.OK


def product_stock(product: ProductRecord) -> ProductStock:
    return ProductStock(product=product, status=stock_status(product.quantity, product.min_quantity))


def inventory_value(products: Iterable[ProductRecord]) -> Decimal:
    """Stock valued at cost price."""
    return sum((p.cost_price * p.quantity for p in products), Decimal("0"))


def expiring_soon(products: Iterable[ProductRecord], reference: date, days: int) -> list[ProductRecord]:
    """Products expiring within ``days`` of ``reference``, already expired included."""
    limit = reference + timedelta(days=days)
    return [p for p in products if p.expiration_date is not None and p.expiration_date <= limit]


def overview(products: list[ProductRecord], reference: date | None = None) -> InventoryOverview:
    ref = reference or today()
    return InventoryOverview(
        total_products=len(products),
        inventory_value=inventory_value(products),
        critical=[p for p in products if stock_status(p.quantity, p.min_quantity) == StockStatus.CRITICAL],
        expiring_soon=expiring_soon(products, ref, settings.scheduling.expiring_soon_days),
    )


# ── Store operations ─────────────────────────────────────────────────


async def list_products(store: DataStore, search: str = "") -> list[ProductStock]:
    needle = search.strip().lower()
    products = await store.products.list()
    return [product_stock(p) for p in products if needle in p.name.lower()]


async def inventory_overview(store: DataStore, reference: date | None = None) -> InventoryOverview:
    return overview(await store.products.list(), reference)


async def record_movement(
    store: DataStore,
    payload: StockMovementCreate,
    actor_id: str | None = None,
) -> tuple[StockMovementRecord, ProductRecord]:
    """Apply an ``in``/``out`` movement to a product's quantity.

    Raises:
        NotFoundError: Unknown product.
        InsufficientStockError: An ``out`` movement exceeds the current quantity.
    """
    product = await store.products.get(payload.product_id)
    if payload.type == MovementType.OUT:
        if payload.quantity > product.quantity:
            raise InsufficientStockError(
                f"{product.name}: apenas {product.quantity} {product.unit} em estoque"
            )
        new_quantity = product.quantity - payload.quantity
    else:
        new_quantity = product.quantity + payload.quantity

    movement_day = payload.date or today()
    product_values: dict[str, object] = {"quantity": new_quantity}
    if payload.type == MovementType.IN:
        product_values["last_purchase"] = movement_day

    updated = await store.products.update(product.id, product_values)
    movement = await store.stock_movements.create({
        "product_id": product.id,
        "type": payload.type.value,
        "quantity": payload.quantity,
        "date": movement_day,
        "reason": payload.reason,
    })

    await emit(SystemEvent(
        event_type=EventType.STOCK_MOVED,
        tenant_id=store.owner_id,
        actor_id=actor_id,
        data={
            "product_id": str(product.id),
            "type": payload.type.value,
            "quantity": payload.quantity,
            "new_quantity": new_quantity,
        },
        source_module="catalog.inventory",
    ))
    await _alert_if_low(store, product, updated)
    logger.info("Stock %s: product=%s qty=%d -> %d", payload.type.value, product.id, payload.quantity, new_quantity)
    return movement, updated


async def _alert_if_low(store: DataStore, before: ProductRecord, after: ProductRecord) -> None:
    """Emit a low-stock alert when a product drops into a worse bucket."""
    order = [StockStatus.OK, StockStatus.LOW, StockStatus.CRITICAL]
    old = stock_status(before.quantity, before.min_quantity)
    new = stock_status(after.quantity, after.min_quantity)
    if order.index(new) <= order.index(old):
        return
    logger.warning("Product %s stock is now %s (%d/%d)", after.name, new.value, after.quantity, after.min_quantity)
    await emit(SystemEvent(
        event_type=EventType.STOCK_LOW,
        tenant_id=store.owner_id,
        data={
            "product_id": str(after.id),
            "name": after.name,
            "status": new.value,
            "quantity": after.quantity,
            "min_quantity": after.min_quantity,
        },
        source_module="catalog.inventory",
    ))


async def product_for_sale(store: DataStore, product_id: uuid.UUID, quantity: int) -> ProductRecord:
    """Load a product and make sure ``quantity`` units can be sold."""
    product = await store.products.get(product_id)
    if quantity > product.quantity:
        raise InsufficientStockError(f"{product.name}: apenas {product.quantity} {product.unit} em estoque")
    return product
