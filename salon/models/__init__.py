"""SQLAlchemy ORM models for the salon dashboard.

Import all models here so Alembic and Base.metadata.create_all() discover them.
"""

from __future__ import annotations

from salon.models.appointment import Appointment
from salon.models.audit import AuditLog
from salon.models.base import Base
from salon.models.client import Client
from salon.models.enums import (
    AppointmentStatus,
    ClientStatus,
    DatePreset,
    KanbanColumnId,
    MovementType,
    PaymentMethod,
    PeriodFilter,
    ServiceCategory,
    StockStatus,
    TransactionStatus,
    TransactionType,
)
from salon.models.product import Product
from salon.models.professional import Professional
from salon.models.service import Service
from salon.models.stock_movement import StockMovement
from salon.models.transaction import Transaction
from salon.models.user import User

__all__ = [
    # Base
    "Base",
    # Models
    "User",
    "Client",
    "Professional",
    "Service",
    "Product",
    "Appointment",
    "Transaction",
    "StockMovement",
    "AuditLog",
    # Enums
    "AppointmentStatus",
    "KanbanColumnId",
    "ClientStatus",
    "ServiceCategory",
    "TransactionType",
    "PaymentMethod",
    "TransactionStatus",
    "MovementType",
    "StockStatus",
    "DatePreset",
    "PeriodFilter",
]
