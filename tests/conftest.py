"""
Test Suite Configuration
"""
from datetime import datetime

import pytest

from grocery_analytics.analytics.engine import AnalyticsEngine
from grocery_analytics.config import AnalyticsSettings, Settings
from grocery_analytics.repository.memory import InMemoryAnalyticsRepository


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Create test settings"""
    return Settings(
        APP_ENV="testing",
        DEBUG=True,
    )


@pytest.fixture
def reference_time() -> datetime:
    """Wednesday 14 October 2026, 15:30 local time"""
    return datetime(2026, 10, 14, 15, 30)


@pytest.fixture
def sample_categories() -> list:
    return [
        {"id": "c1", "name": "Dairy"},
        {"id": "c2", "name": "Bakery"},
        {"id": "c3", "name": "Produce"},
    ]


@pytest.fixture
def sample_products() -> list:
    return [
        {"id": "p1", "name": "Milk", "category_id": "c1", "stock": 0,
         "is_featured": True, "is_on_sale": False, "images": ["milk.jpg", "milk-2.jpg"]},
        {"id": "p2", "name": "Bread", "category_id": "c2", "stock": 5,
         "is_featured": False, "is_on_sale": True, "images": []},
        {"id": "p3", "name": "Apples", "category_id": "c3", "stock": 10,
         "is_featured": True, "is_on_sale": True, "images": ["apples.jpg"]},
        {"id": "p4", "name": "Cheese", "category_id": None, "stock": 50,
         "is_featured": False, "is_on_sale": False, "images": None},
    ]


@pytest.fixture
def sample_users() -> list:
    return [
        {"id": "u1", "created_at": datetime(2026, 8, 1, 12, 0)},
        {"id": "u2", "created_at": datetime(2026, 10, 3, 9, 0)},
        {"id": "u3", "created_at": datetime(2026, 10, 10, 18, 45)},
        {"id": "u4", "created_at": datetime(2025, 12, 1, 8, 0)},
        {"id": "u5", "created_at": datetime(2026, 9, 30, 23, 59, 59)},
    ]


@pytest.fixture
def sample_orders() -> list:
    """
    Valid revenue: 580 total, 250 today, 360 this week, 480 this month,
    100 previous month.
    """
    return [
        {"id": "o1", "total_amount": 200, "status": "delivered", "payment_method": "card",
         "created_at": datetime(2026, 10, 14, 9, 15), "user_id": "u1"},
        {"id": "o2", "total_amount": 100, "status": "cancelled", "payment_method": "cash",
         "created_at": datetime(2026, 10, 14, 10, 0), "user_id": "u2"},
        {"id": "o3", "total_amount": 50, "status": "pending", "payment_method": "cash",
         "created_at": datetime(2026, 10, 14, 15, 0), "user_id": "u2"},
        {"id": "o4", "total_amount": 80, "status": "processing", "payment_method": None,
         "created_at": datetime(2026, 10, 12, 8, 0), "user_id": "u3"},
        {"id": "o5", "total_amount": 120, "status": "delivered", "payment_method": "card",
         "created_at": datetime(2026, 10, 2, 12, 0), "user_id": "u1"},
        {"id": "o6", "total_amount": 40, "status": "on_delivery", "payment_method": "bank_transfer",
         "created_at": datetime(2026, 9, 20, 18, 0), "user_id": "u3"},
        {"id": "o7", "total_amount": 60, "status": "delivered", "payment_method": "cash",
         "created_at": datetime(2026, 9, 5, 11, 0), "user_id": "u4"},
        {"id": "o8", "total_amount": 30, "status": "preparing", "payment_method": "card",
         "created_at": datetime(2026, 10, 13, 23, 59), "user_id": None},
    ]


def _joined(product: dict) -> dict:
    return {
        "id": product["id"],
        "name": product["name"],
        "images": product["images"],
        "category_id": product["category_id"],
    }


@pytest.fixture
def sample_order_items(sample_products) -> list:
    """
    Line items; `i5` references a deleted product and `i2` arrives with its
    join wrapped in a one-element list.
    """
    p1, p2, p3, p4 = (_joined(p) for p in sample_products)
    return [
        {"order_id": "o1", "product_id": "p1", "quantity": 2, "price": 10, "product": p1},
        {"order_id": "o1", "product_id": "p2", "quantity": 1, "price": 30, "product": [p2]},
        {"order_id": "o3", "product_id": "p3", "quantity": 5, "price": 4, "product": p3},
        {"order_id": "o4", "product_id": "p4", "quantity": 3, "price": 20, "product": p4},
        {"order_id": "o5", "product_id": None, "quantity": 4, "price": 10, "product": None},
        {"order_id": "o5", "product_id": "p1", "quantity": 1, "price": 10, "product": p1},
        {"order_id": "o2", "product_id": "p2", "quantity": 2, "price": 30, "product": p2},
    ]


@pytest.fixture
def sample_favorites(sample_products) -> list:
    p1, _, p3, _ = (_joined(p) for p in sample_products)
    return [
        {"id": "f1", "user_id": "u1", "product_id": "p3", "product": p3},
        {"id": "f2", "user_id": "u2", "product_id": "p3", "product": [p3]},
        {"id": "f3", "user_id": "u3", "product_id": "p1", "product": p1},
        {"id": "f4", "user_id": "u1", "product_id": "p9", "product": []},
    ]


@pytest.fixture
def sample_repository(
    sample_orders,
    sample_users,
    sample_products,
    sample_order_items,
    sample_categories,
    sample_favorites,
) -> InMemoryAnalyticsRepository:
    return InMemoryAnalyticsRepository(
        orders=sample_orders,
        users=sample_users,
        products=sample_products,
        order_items=sample_order_items,
        categories=sample_categories,
        favorites=sample_favorites,
    )


@pytest.fixture
def engine(sample_repository) -> AnalyticsEngine:
    return AnalyticsEngine(sample_repository, AnalyticsSettings())
