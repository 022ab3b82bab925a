"""Domain enums used across SQLAlchemy models and Pydantic schemas.

All enums use str mixin for JSON serialization and plain VARCHAR storage.
"""

from __future__ import annotations

from enum import Enum


class AppointmentStatus(str, Enum):
    """Canonical appointment lifecycle states (source of truth)."""

    AGENDADO = "agendado"
    CONFIRMADO = "confirmado"
    CONCLUIDO = "concluido"
    CANCELADO = "cancelado"
    NAO_COMPARECEU = "nao_compareceu"


class KanbanColumnId(str, Enum):
    """Fixed kanban board lanes."""

    PENDIENTE = "pendiente"
    CONFIRMADO = "confirmado"
    CONCLUIDO = "concluido"
    NAO_COMPARECEU = "nao_compareceu"
    CANCELADO = "cancelado"


class ClientStatus(str, Enum):
    """Client record status."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class ServiceCategory(str, Enum):
    """Catalog categories for services."""

    HAIR = "hair"
    NAILS = "nails"
    AESTHETICS = "aesthetics"
    MAKEUP = "makeup"
    MASSAGE = "massage"


class TransactionType(str, Enum):
    """Cash flow direction."""

    INCOME = "income"
    EXPENSE = "expense"


class PaymentMethod(str, Enum):
    """Accepted payment methods."""

    CASH = "cash"
    CREDIT = "credit"
    DEBIT = "debit"
    PIX = "pix"


class TransactionStatus(str, Enum):
    """Transaction settlement state; only completed ones count in summaries."""

    COMPLETED = "completed"
    PENDING = "pending"
    CANCELLED = "cancelled"


class MovementType(str, Enum):
    """Stock movement direction."""

    IN = "in"
    OUT = "out"


class StockStatus(str, Enum):
    """Derived stock bucket, recomputed on every read, never stored."""

    CRITICAL = "critical"
    LOW = "low"
    OK = "ok"


class DatePreset(str, Enum):
    """Kanban date-range presets."""

    TODAY = "today"
    THIS_WEEK = "this-week"
    NEXT_WEEK = "next-week"
    WHOLE_MONTH = "whole-month"


class PeriodFilter(str, Enum):
    """Dashboard/report period filters."""

    HOJE = "hoje"
    ULTIMOS_7_DIAS = "ultimos-7-dias"
    ESTE_MES = "este-mes"
    MES_PASSADO = "mes-passado"
    ESTE_ANO = "este-ano"
