"""Pydantic schemas for clients, professionals, services and products.

Records are frozen snapshots of rows as returned by the data store.
Create/Update schemas carry the writable fields of each table.
"""

from __future__ import annotations

import datetime as dt
import uuid
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from salon.models.enums import ClientStatus, ServiceCategory, StockStatus


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)


# ── Clients ──────────────────────────────────────────────────────────


class ClientRecord(_Record):
    id: uuid.UUID
    name: str
    phone: str | None = None
    email: str | None = None
    birthdate: dt.date | None = None
    address: str | None = None
    cpf: str | None = None
    registration_date: dt.date | None = None
    notes: str | None = None
    status: str = ClientStatus.ACTIVE.value


class ClientCreate(BaseModel):
    name: str = Field(min_length=1)
    phone: str | None = None
    email: str | None = None
    birthdate: dt.date | None = None
    address: str | None = None
    cpf: str | None = None
    notes: str | None = None
    status: ClientStatus = ClientStatus.ACTIVE


class ClientUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    phone: str | None = None
    email: str | None = None
    birthdate: dt.date | None = None
    address: str | None = None
    cpf: str | None = None
    notes: str | None = None
    status: ClientStatus | None = None


class ClientSummary(BaseModel):
    """Client with lifetime totals recomputed from appointment history."""

    client: ClientRecord
    total_spent: Decimal = Decimal("0")
    total_visits: int = 0
    last_visit: dt.date | None = None
    average_ticket: Decimal = Decimal("0")


# ── Professionals ────────────────────────────────────────────────────


class ProfessionalRecord(_Record):
    id: uuid.UUID
    name: str
    phone: str | None = None
    email: str | None = None
    specialties: list[str] = Field(default_factory=list)
    color: str = "#3b82f6"
    active: bool = True


class ProfessionalCreate(BaseModel):
    name: str = Field(min_length=1)
    phone: str | None = None
    email: str | None = None
    specialties: list[str] = Field(default_factory=list)
    color: str = "#3b82f6"
    active: bool = True


class ProfessionalUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    phone: str | None = None
    email: str | None = None
    specialties: list[str] | None = None
    color: str | None = None
    active: bool | None = None


# ── Services ─────────────────────────────────────────────────────────


class ServiceRecord(_Record):
    id: uuid.UUID
    name: str
    category: str = ServiceCategory.HAIR.value
    duration: int
    price: Decimal
    description: str | None = None
    professional_ids: list[uuid.UUID] = Field(default_factory=list)
    active: bool = True


class ServiceCreate(BaseModel):
    name: str = Field(min_length=1)
    category: ServiceCategory = ServiceCategory.HAIR
    duration: int = Field(ge=0, description="Minutes")
    price: Decimal = Field(ge=0)
    description: str | None = None
    professional_ids: list[uuid.UUID] = Field(default_factory=list)
    active: bool = True


class ServiceUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    category: ServiceCategory | None = None
    duration: int | None = Field(default=None, ge=0)
    price: Decimal | None = Field(default=None, ge=0)
    description: str | None = None
    professional_ids: list[uuid.UUID] | None = None
    active: bool | None = None


# ── Products ─────────────────────────────────────────────────────────


class ProductRecord(_Record):
    id: uuid.UUID
    name: str
    category: str
    quantity: int = 0
    min_quantity: int = 0
    unit: str = "un"
    cost_price: Decimal = Decimal("0")
    sale_price: Decimal = Decimal("0")
    supplier: str | None = None
    last_purchase: dt.date | None = None
    expiration_date: dt.date | None = None


class ProductCreate(BaseModel):
    name: str = Field(min_length=1)
    category: str = Field(min_length=1)
    quantity: int = Field(default=0, ge=0)
    min_quantity: int = Field(default=0, ge=0)
    unit: str = "un"
    cost_price: Decimal = Field(default=Decimal("0"), ge=0)
    sale_price: Decimal = Field(default=Decimal("0"), ge=0)
    supplier: str | None = None
    last_purchase: dt.date | None = None
    expiration_date: dt.date | None = None


class ProductUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    category: str | None = None
    quantity: int | None = Field(default=None, ge=0)
    min_quantity: int | None = Field(default=None, ge=0)
    unit: str | None = None
    cost_price: Decimal | None = Field(default=None, ge=0)
    sale_price: Decimal | None = Field(default=None, ge=0)
    supplier: str | None = None
    last_purchase: dt.date | None = None
    expiration_date: dt.date | None = None


class ProductStock(BaseModel):
    """Product with its derived stock bucket."""

    product: ProductRecord
    status: StockStatus
