"""Pydantic schemas for transactions, stock movements and reports."""

from __future__ import annotations

import datetime as dt
import uuid
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from salon.models.enums import MovementType, PaymentMethod, TransactionStatus, TransactionType
from salon.schemas.catalog import ProductRecord


class TransactionRecord(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: uuid.UUID
    date: dt.date
    type: str
    category: str
    description: str = ""
    amount: Decimal
    payment_method: str
    status: str = TransactionStatus.COMPLETED.value
    client_id: uuid.UUID | None = None
    service_ids: tuple[uuid.UUID, ...] = ()
    professional_id: uuid.UUID | None = None
    product_id: uuid.UUID | None = None
    quantity: int | None = None
    discount_percentage: Decimal | None = None
    non_registered_client_name: str | None = None

    @field_validator("description", mode="before")
    @classmethod
    def _description_not_null(cls, v: object) -> object:
        return v or ""

    @field_validator("service_ids", mode="before")
    @classmethod
    def _service_ids_tuple(cls, v: object) -> object:
        if v is None:
            return ()
        return tuple(v)  # type: ignore[arg-type]


class TransactionCreate(BaseModel):
    date: dt.date
    type: TransactionType
    category: str = Field(min_length=1)
    description: str | None = ""
    amount: Decimal = Field(gt=0)
    payment_method: PaymentMethod
    status: TransactionStatus = TransactionStatus.COMPLETED
    client_id: uuid.UUID | None = None
    service_ids: list[uuid.UUID] = Field(default_factory=list)
    professional_id: uuid.UUID | None = None


class ProductSaleInput(BaseModel):
    product_id: uuid.UUID
    quantity: int = Field(gt=0)
    payment_method: PaymentMethod
    date: dt.date | None = None
    discount_percentage: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    client_id: uuid.UUID | None = None
    non_registered_client_name: str | None = None
    professional_id: uuid.UUID | None = None


class StockMovementRecord(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: uuid.UUID
    product_id: uuid.UUID
    type: str
    quantity: int
    date: dt.date
    reason: str | None = None


class StockMovementCreate(BaseModel):
    product_id: uuid.UUID
    type: MovementType
    quantity: int = Field(gt=0)
    date: dt.date | None = None
    reason: str | None = None


class FinanceSummary(BaseModel):
    """Cash-flow cards of the finance page (completed transactions only)."""

    today_income: Decimal
    today_expense: Decimal
    month_income: Decimal
    month_expense: Decimal
    net_balance: Decimal
    pending_amount: Decimal
    pending_count: int


class InventoryOverview(BaseModel):
    total_products: int
    inventory_value: Decimal
    critical: list[ProductRecord]
    expiring_soon: list[ProductRecord]
