"""SystemEvent schema: the core event type that flows through the entire system.

Every write emits a SystemEvent. Subscribers (AuditLogger, stock alerts)
consume these events asynchronously.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class EventType(str, Enum):
    """All event types emitted by the system."""

    # Appointments
    APPOINTMENT_CREATED = "appointment.created"
    APPOINTMENT_UPDATED = "appointment.updated"
    APPOINTMENT_CANCELLED = "appointment.cancelled"
    APPOINTMENT_COMPLETED = "appointment.completed"
    APPOINTMENT_DELETED = "appointment.deleted"
    BOOKING_CONFLICT = "appointment.conflict"

    # Kanban board
    BOARD_MOVES_COMMITTED = "board.moves_committed"
    BOARD_MOVES_ROLLED_BACK = "board.moves_rolled_back"

    # Catalogs
    CATALOG_CREATED = "catalog.created"
    CATALOG_UPDATED = "catalog.updated"
    CATALOG_DELETED = "catalog.deleted"

    # Finance & inventory
    TRANSACTION_RECORDED = "finance.transaction_recorded"
    PRODUCT_SOLD = "finance.product_sold"
    STOCK_MOVED = "stock.moved"
    STOCK_LOW = "stock.low"

    # System
    SYSTEM_STARTUP = "system.startup"
    SYSTEM_SHUTDOWN = "system.shutdown"
    SYSTEM_ERROR = "system.error"


class SystemEvent(BaseModel):
    """Core event that flows through the dashboard.

    Immutable once created. Consumed by:
    - audit_on_event → writes to audit_log table
    """

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    event_type: EventType
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Context (optional, system events have no tenant)
    tenant_id: uuid.UUID | None = None
    actor_id: str | None = None

    # Flexible payload
    data: dict[str, Any] = Field(default_factory=dict)

    # Metadata
    source_module: str | None = Field(default=None, description="Module that emitted this event")

    model_config = {"frozen": True}
