"""Create / update / delete for the catalog tables, with audit events.

Clients, services, professionals and products share the same write path:
validate with the pydantic input schema, write through the tenant
repository, emit a catalog event.
"""

from __future__ import annotations

import logging
import uuid

from pydantic import BaseModel

from salon.admin.events import emit
from salon.schemas.events import EventType, SystemEvent
from salon.store.datastore import DataStore
from salon.store.repository import TenantRepository, column_values

logger = logging.getLogger(__name__)

CATALOGS = ("clients", "services", "professionals", "products")


def repository(store: DataStore, catalog: str) -> TenantRepository:
    if catalog not in CATALOGS:
        msg = f"Unknown catalog: {catalog}"
        raise ValueError(msg)
    return getattr(store, catalog)


async def _emit(store: DataStore, event_type: EventType, catalog: str, record_id: uuid.UUID, actor_id: str | None) -> None:
    await emit(SystemEvent(
        event_type=event_type,
        tenant_id=store.owner_id,
        actor_id=actor_id,
        data={"catalog": catalog, "record_id": str(record_id)},
        source_module="catalog.crud",
    ))


async def create_record(store: DataStore, catalog: str, payload: BaseModel, actor_id: str | None = None) -> BaseModel:
    record = await repository(store, catalog).create(column_values(payload))
    await _emit(store, EventType.CATALOG_CREATED, catalog, record.id, actor_id)
    return record


async def update_record(
    store: DataStore,
    catalog: str,
    record_id: uuid.UUID,
    payload: BaseModel,
    actor_id: str | None = None,
) -> BaseModel:
    """Write only the fields the caller actually sent."""
    values = column_values(payload, exclude_unset=True)
    repo = repository(store, catalog)
    record = await repo.update(record_id, values) if values else await repo.get(record_id)
    await _emit(store, EventType.CATALOG_UPDATED, catalog, record_id, actor_id)
    return record


async def delete_record(store: DataStore, catalog: str, record_id: uuid.UUID, actor_id: str | None = None) -> None:
    await repository(store, catalog).delete(record_id)
    await _emit(store, EventType.CATALOG_DELETED, catalog, record_id, actor_id)
    logger.info("Deleted %s record %s", catalog, record_id)
