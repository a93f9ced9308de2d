"""
Unit Tests - Record Decoding
"""
from datetime import datetime
from decimal import Decimal

import pytest
from pydantic import ValidationError

from grocery_analytics.repository.memory import InMemoryAnalyticsRepository, decode_rows
from grocery_analytics.repository.records import (
    FavoriteRecord,
    OrderItemRecord,
    OrderRecord,
    ProductRecord,
    unwrap_join,
)

PRODUCT = {"id": "p1", "name": "Milk", "images": ["a.jpg", "b.jpg"]}


class TestJoinNormalisation:
    """Joined relations may arrive as an object, a list, or nothing"""

    @pytest.mark.parametrize("joined", [PRODUCT, [PRODUCT]])
    def test_single_object(self, joined):
        item = OrderItemRecord.model_validate(
            {"order_id": "o1", "product_id": "p1", "quantity": 1, "price": 2, "product": joined}
        )

        assert item.product.id == "p1"
        assert item.product.thumbnail == "a.jpg"

    @pytest.mark.parametrize("joined", [None, []])
    def test_missing_product(self, joined):
        favorite = FavoriteRecord.model_validate({"id": "f1", "product": joined})

        assert favorite.product is None

    def test_unwrap_join_takes_first(self):
        assert unwrap_join([1, 2]) == 1
        assert unwrap_join(()) is None
        assert unwrap_join({"id": "x"}) == {"id": "x"}


class TestOrderRecord:
    """Tests for order decoding"""

    def test_decimal_amount_becomes_float(self):
        order = OrderRecord.model_validate(
            {"id": "o1", "total_amount": Decimal("12.50"), "status": "pending",
             "created_at": datetime(2026, 1, 1)}
        )

        assert order.total_amount == 12.5
        assert isinstance(order.total_amount, float)

    def test_null_amount_is_zero(self):
        order = OrderRecord.model_validate(
            {"id": "o1", "total_amount": None, "status": "pending", "created_at": datetime(2026, 1, 1)}
        )

        assert order.total_amount == 0.0

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError):
            OrderRecord.model_validate(
                {"id": "o1", "total_amount": -1, "status": "pending", "created_at": datetime(2026, 1, 1)}
            )

    def test_records_are_frozen(self):
        order = OrderRecord.model_validate(
            {"id": "o1", "status": "pending", "created_at": datetime(2026, 1, 1), "extra": 1}
        )

        with pytest.raises(ValidationError):
            order.status = "cancelled"


class TestProductRecord:
    """Tests for product decoding"""

    def test_null_images_and_flags(self):
        product = ProductRecord.model_validate(
            {"id": "p1", "images": None, "is_featured": None, "is_on_sale": None}
        )

        assert product.images == ()
        assert product.is_featured is False

    def test_zero_quantity_line_item_rejected(self):
        with pytest.raises(ValidationError):
            OrderItemRecord.model_validate({"order_id": "o1", "quantity": 0, "price": 1})


async def test_in_memory_repository_decodes_rows(sample_repository):
    orders = await sample_repository.fetch_orders()
    items = await sample_repository.fetch_order_items()

    assert len(orders) == 8
    assert all(isinstance(order, OrderRecord) for order in orders)
    assert items[1].product.name == "Bread"


async def test_in_memory_repository_defaults_to_empty():
    repository = InMemoryAnalyticsRepository()

    assert await repository.fetch_favorites() == ()
    assert decode_rows(None, OrderRecord) == ()
