"""Tests for the finance summary, transactions and product sales."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, patch

import pytest

from salon.catalog.finance import (
    SALE_CATEGORY,
    finance_summary,
    list_transactions,
    record_transaction,
    sale_amount,
    sell_product,
)
from salon.errors import InsufficientStockError, PersistenceError
from salon.models.enums import PaymentMethod, PeriodFilter, TransactionType
from salon.schemas.events import EventType
from salon.schemas.finance import ProductSaleInput, TransactionCreate
from tests.factories import FakeStore, make_product, make_transaction

REF = date(2026, 10, 19)


class TestFinanceSummary:
    def test_summary(self):
        transactions = [
            make_transaction("100.00", day=REF),
            make_transaction("40.00", kind="expense", day=REF),
            make_transaction("250.00", day=date(2026, 10, 3)),
            make_transaction("90.00", kind="expense", day=date(2026, 10, 5)),
            make_transaction("500.00", day=date(2026, 9, 30)),
            make_transaction("70.00", day=REF, status="pending"),
            make_transaction("30.00", day=REF, status="cancelled"),
        ]
        summary = finance_summary(transactions, REF)
        assert summary.today_income == Decimal("100.00")
        assert summary.today_expense == Decimal("40.00")
        assert summary.month_income == Decimal("350.00")
        assert summary.month_expense == Decimal("130.00")
        assert summary.net_balance == Decimal("220.00")
        assert summary.pending_amount == Decimal("70.00")
        assert summary.pending_count == 1

    def test_empty(self):
        summary = finance_summary([], REF)
        assert summary.net_balance == Decimal("0")


class TestSaleAmount:
    def test_no_discount(self):
        assert sale_amount(Decimal("45.00"), 2) == Decimal("90.00")

    def test_discount(self):
        assert sale_amount(Decimal("45.00"), 3, Decimal("10")) == Decimal("121.50")

    def test_rounds_to_cents(self):
        assert sale_amount(Decimal("9.99"), 1, Decimal("33.33")) == Decimal("6.66")


class TestTransactions:
    @pytest.mark.asyncio()
    async def test_description_defaults_to_empty(self, no_events):
        store = FakeStore()
        record = await record_transaction(
            store,
            TransactionCreate(
                date=REF,
                type=TransactionType.EXPENSE,
                category="Aluguel",
                description=None,
                amount=Decimal("1500.00"),
                payment_method=PaymentMethod.PIX,
            ),
        )
        assert record.description == ""
        assert record.type == "expense"
        assert no_events["salon.catalog.finance"].call_args.args[0].event_type == EventType.TRANSACTION_RECORDED

    @pytest.mark.asyncio()
    async def test_list_filters(self):
        store = FakeStore()
        store.add(
            make_transaction("10.00", day=REF),
            make_transaction("20.00", kind="expense", day=REF),
            make_transaction("30.00", day=date(2026, 9, 1)),
        )
        result = await list_transactions(store, TransactionType.INCOME, PeriodFilter.ESTE_MES, reference=REF)
        assert [t.amount for t in result] == [Decimal("10.00")]


class TestSellProduct:
    @pytest.mark.asyncio()
    async def test_sale_moves_stock_and_books_income(self, no_events):
        store = FakeStore()
        product = make_product("Shampoo", quantity=10, sale_price="45.00")
        store.add(product)

        record = await sell_product(
            store,
            ProductSaleInput(
                product_id=product.id,
                quantity=2,
                payment_method=PaymentMethod.CREDIT,
                date=REF,
                discount_percentage=Decimal("10"),
                non_registered_client_name="Maria (balcão)",
            ),
        )

        assert record.amount == Decimal("81.00")
        assert record.category == SALE_CATEGORY
        assert record.product_id == product.id
        assert record.non_registered_client_name == "Maria (balcão)"
        assert store.products.rows[product.id].quantity == 8
        (movement,) = store.stock_movements.rows.values()
        assert movement.type == "out"
        assert movement.quantity == 2

    @pytest.mark.asyncio()
    async def test_insufficient_stock_writes_nothing(self, no_events):
        store = FakeStore()
        product = make_product(quantity=1)
        store.add(product)

        with pytest.raises(InsufficientStockError):
            await sell_product(
                store,
                ProductSaleInput(product_id=product.id, quantity=5, payment_method=PaymentMethod.CASH),
            )
        assert store.transactions.rows == {}
        assert store.stock_movements.rows == {}

    @pytest.mark.asyncio()
    async def test_failed_income_puts_stock_back(self, no_events):
        store = FakeStore()
        product = make_product("Shampoo", quantity=10)
        store.add(product)

        with (
            patch.object(
                store.transactions,
                "create",
                new=AsyncMock(side_effect=PersistenceError("Erro ao acessar transactions: OperationalError")),
            ),
            pytest.raises(PersistenceError),
        ):
            await sell_product(
                store,
                ProductSaleInput(product_id=product.id, quantity=3, payment_method=PaymentMethod.PIX),
            )

        assert store.products.rows[product.id].quantity == 10
        assert store.stock_movements.rows == {}
