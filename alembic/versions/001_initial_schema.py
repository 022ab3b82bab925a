"""Initial schema: owner accounts, catalogs, agenda, cash flow, audit.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""
from __future__ import annotations

from typing import Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, tuple[str, ...], None] = None
depends_on: Union[str, tuple[str, ...], None] = None


def _id_and_timestamps() -> list[sa.Column]:
    return [
        sa.Column("id", postgresql.UUID(as_uuid=True), server_default=sa.text("gen_random_uuid()"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def _owner() -> sa.Column:
    return sa.Column(
        "owner_id",
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )


def upgrade() -> None:
    # ── Standalone tables ──────────────────────────────────────────────

    op.create_table(
        "audit_log",
        sa.Column("event_type", sa.String(100), nullable=False, index=True),
        sa.Column("tenant_id", postgresql.UUID(as_uuid=True), index=True),
        sa.Column("actor_id", sa.String(255), comment="Owner e-mail or 'system'"),
        sa.Column("data", postgresql.JSONB(astext_type=sa.Text())),
        *_id_and_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "users",
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), comment="pbkdf2_sha256$<iterations>$<salt>$<digest>"),
        sa.Column("full_name", sa.String(200)),
        sa.Column("salon_name", sa.String(200)),
        sa.Column("cnpj", sa.String(18)),
        sa.Column("phone", sa.String(20)),
        sa.Column("address", sa.String(500)),
        *_id_and_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # ── Catalogs (FK → users) ──────────────────────────────────────────

    op.create_table(
        "clients",
        _owner(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("phone", sa.String(20)),
        sa.Column("email", sa.String(255)),
        sa.Column("birthdate", sa.Date()),
        sa.Column("address", sa.String(500)),
        sa.Column("cpf", sa.String(14)),
        sa.Column("registration_date", sa.Date(), server_default=sa.text("CURRENT_DATE"), nullable=False),
        sa.Column("notes", sa.Text()),
        sa.Column("status", sa.String(10), nullable=False),
        *_id_and_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "professionals",
        _owner(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("phone", sa.String(20)),
        sa.Column("email", sa.String(255)),
        sa.Column("specialties", postgresql.ARRAY(sa.String(50))),
        sa.Column("color", sa.String(20), nullable=False, comment="Calendar colour"),
        sa.Column("active", sa.Boolean(), nullable=False),
        *_id_and_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "services",
        _owner(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("category", sa.String(20), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False, comment="Minutes"),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("professional_ids", postgresql.ARRAY(postgresql.UUID(as_uuid=True))),
        sa.Column("active", sa.Boolean(), nullable=False),
        *_id_and_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "products",
        _owner(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("min_quantity", sa.Integer(), nullable=False),
        sa.Column("unit", sa.String(20), nullable=False),
        sa.Column("cost_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("sale_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("supplier", sa.String(200)),
        sa.Column("last_purchase", sa.Date()),
        sa.Column("expiration_date", sa.Date()),
        *_id_and_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    # ── Agenda & cash flow (references resolved in memory, no FKs) ─────

    op.create_table(
        "appointments",
        _owner(),
        sa.Column("client_id", postgresql.UUID(as_uuid=True), nullable=False, index=True),
        sa.Column("professional_id", postgresql.UUID(as_uuid=True), nullable=False, index=True),
        sa.Column("service_ids", postgresql.ARRAY(postgresql.UUID(as_uuid=True))),
        sa.Column("date", sa.Date(), nullable=False, index=True),
        sa.Column("start_time", sa.String(5), nullable=False),
        sa.Column("end_time", sa.String(5), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("total_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("notes", sa.Text(), comment="May carry the kanbanColumnId:<id> board directive"),
        *_id_and_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "transactions",
        _owner(),
        sa.Column("date", sa.Date(), nullable=False, index=True),
        sa.Column("type", sa.String(10), nullable=False),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("description", sa.String(500), nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("payment_method", sa.String(10), nullable=False),
        sa.Column("status", sa.String(10), nullable=False),
        sa.Column("client_id", postgresql.UUID(as_uuid=True)),
        sa.Column("service_ids", postgresql.ARRAY(postgresql.UUID(as_uuid=True))),
        sa.Column("professional_id", postgresql.UUID(as_uuid=True)),
        sa.Column("product_id", postgresql.UUID(as_uuid=True)),
        sa.Column("quantity", sa.Integer()),
        sa.Column("discount_percentage", sa.Numeric(5, 2)),
        sa.Column("non_registered_client_name", sa.String(200)),
        *_id_and_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "stock_movements",
        _owner(),
        sa.Column("product_id", postgresql.UUID(as_uuid=True), nullable=False, index=True),
        sa.Column("type", sa.String(3), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("reason", sa.String(500)),
        *_id_and_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    # Drop in reverse dependency order
    op.drop_table("stock_movements")
    op.drop_table("transactions")
    op.drop_table("appointments")
    op.drop_table("products")
    op.drop_table("services")
    op.drop_table("professionals")
    op.drop_table("clients")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
    op.drop_table("audit_log")
