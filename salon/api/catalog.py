"""Catalog API: clients, services, professionals and products."""
# ruff: noqa: B008

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, status

from salon.admin.auth import get_store, verify_owner
from salon.catalog import clients as client_views
from salon.catalog import inventory
from salon.catalog.crud import create_record, delete_record, update_record
from salon.models.enums import ClientStatus
from salon.schemas.catalog import (
    ClientCreate,
    ClientRecord,
    ClientSummary,
    ClientUpdate,
    ProductCreate,
    ProductRecord,
    ProductStock,
    ProductUpdate,
    ProfessionalCreate,
    ProfessionalRecord,
    ProfessionalUpdate,
    ServiceCreate,
    ServiceRecord,
    ServiceUpdate,
)
from salon.store.datastore import DataStore

router = APIRouter(prefix="/api", tags=["catalog"])


# ── Clients ──────────────────────────────────────────────────────────


@router.get("/clients", response_model=list[ClientSummary])
async def list_clients(
    search: str = "",
    client_status: ClientStatus | None = Query(default=None, alias="status"),
    store: DataStore = Depends(get_store),
) -> list[ClientSummary]:
    return await client_views.list_clients(store, search, client_status)


@router.get("/clients/{client_id}", response_model=ClientSummary)
async def get_client(client_id: uuid.UUID, store: DataStore = Depends(get_store)) -> ClientSummary:
    return await client_views.get_client(store, client_id)


@router.post("/clients", response_model=ClientRecord, status_code=status.HTTP_201_CREATED)
async def create_client(
    payload: ClientCreate,
    store: DataStore = Depends(get_store),
    owner: str = Depends(verify_owner),
) -> ClientRecord:
    return await create_record(store, "clients", payload, owner)


@router.patch("/clients/{client_id}", response_model=ClientRecord)
async def update_client(
    client_id: uuid.UUID,
    payload: ClientUpdate,
    store: DataStore = Depends(get_store),
    owner: str = Depends(verify_owner),
) -> ClientRecord:
    return await update_record(store, "clients", client_id, payload, owner)


@router.delete("/clients/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(
    client_id: uuid.UUID,
    store: DataStore = Depends(get_store),
    owner: str = Depends(verify_owner),
) -> None:
    await delete_record(store, "clients", client_id, owner)


# ── Services ─────────────────────────────────────────────────────────


@router.get("/services", response_model=list[ServiceRecord])
async def list_services(active: bool | None = None, store: DataStore = Depends(get_store)) -> list[ServiceRecord]:
    if active is None:
        return await store.services.list()
    return await store.services.list(active=active)


@router.post("/services", response_model=ServiceRecord, status_code=status.HTTP_201_CREATED)
async def create_service(
    payload: ServiceCreate,
    store: DataStore = Depends(get_store),
    owner: str = Depends(verify_owner),
) -> ServiceRecord:
    return await create_record(store, "services", payload, owner)


@router.patch("/services/{service_id}", response_model=ServiceRecord)
async def update_service(
    service_id: uuid.UUID,
    payload: ServiceUpdate,
    store: DataStore = Depends(get_store),
    owner: str = Depends(verify_owner),
) -> ServiceRecord:
    return await update_record(store, "services", service_id, payload, owner)


@router.delete("/services/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_service(
    service_id: uuid.UUID,
    store: DataStore = Depends(get_store),
    owner: str = Depends(verify_owner),
) -> None:
    await delete_record(store, "services", service_id, owner)


# ── Professionals ────────────────────────────────────────────────────


@router.get("/professionals", response_model=list[ProfessionalRecord])
async def list_professionals(
    active: bool | None = None, store: DataStore = Depends(get_store)
) -> list[ProfessionalRecord]:
    if active is None:
        return await store.professionals.list()
    return await store.professionals.list(active=active)


@router.post("/professionals", response_model=ProfessionalRecord, status_code=status.HTTP_201_CREATED)
async def create_professional(
    payload: ProfessionalCreate,
    store: DataStore = Depends(get_store),
    owner: str = Depends(verify_owner),
) -> ProfessionalRecord:
    return await create_record(store, "professionals", payload, owner)


@router.patch("/professionals/{professional_id}", response_model=ProfessionalRecord)
async def update_professional(
    professional_id: uuid.UUID,
    payload: ProfessionalUpdate,
    store: DataStore = Depends(get_store),
    owner: str = Depends(verify_owner),
) -> ProfessionalRecord:
    return await update_record(store, "professionals", professional_id, payload, owner)


@router.delete("/professionals/{professional_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_professional(
    professional_id: uuid.UUID,
    store: DataStore = Depends(get_store),
    owner: str = Depends(verify_owner),
) -> None:
    await delete_record(store, "professionals", professional_id, owner)


# ── Products ─────────────────────────────────────────────────────────


@router.get("/products", response_model=list[ProductStock])
async def list_products(search: str = "", store: DataStore = Depends(get_store)) -> list[ProductStock]:
    """Products with their derived stock bucket."""
    return await inventory.list_products(store, search)


@router.post("/products", response_model=ProductRecord, status_code=status.HTTP_201_CREATED)
async def create_product(
    payload: ProductCreate,
    store: DataStore = Depends(get_store),
    owner: str = Depends(verify_owner),
) -> ProductRecord:
    return await create_record(store, "products", payload, owner)


@router.patch("/products/{product_id}", response_model=ProductRecord)
async def update_product(
    product_id: uuid.UUID,
    payload: ProductUpdate,
    store: DataStore = Depends(get_store),
    owner: str = Depends(verify_owner),
) -> ProductRecord:
    return await update_record(store, "products", product_id, payload, owner)


@router.delete("/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: uuid.UUID,
    store: DataStore = Depends(get_store),
    owner: str = Depends(verify_owner),
) -> None:
    await delete_record(store, "products", product_id, owner)
