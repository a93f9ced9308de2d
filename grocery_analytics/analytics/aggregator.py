"""
Filter/Reduce Aggregator

Classifies orders and reduces the raw collections into the scalar summary
groups of a snapshot: revenue, orders, customers, products and favorites.
Each metric is computed in a single pass over its collection.
"""

from typing import Iterable, Sequence, Set

from grocery_analytics.database.models import OrderStatus
from grocery_analytics.repository.records import (
    FavoriteRecord,
    OrderRecord,
    ProductRecord,
    UserRecord,
)
from .growth import growth_rate, safe_ratio
from .snapshot import (
    CustomerSummary,
    FavoriteProduct,
    FavoriteSummary,
    OrderSummary,
    ProductSummary,
    RevenueSummary,
)
from .windows import ReportingWindows, to_local

OPEN_STATUSES = frozenset({
    OrderStatus.PENDING.value,
    OrderStatus.PROCESSING.value,
    OrderStatus.PREPARING.value,
})

DEFAULT_LOW_STOCK_THRESHOLD = 10


def is_valid_order(order: OrderRecord) -> bool:
    """Every order that was not cancelled counts towards revenue."""
    return order.status != OrderStatus.CANCELLED.value


def summarize_revenue(orders: Iterable[OrderRecord], windows: ReportingWindows) -> RevenueSummary:
    total = today = week = month = previous_month = 0.0

    for order in orders:
        if not is_valid_order(order):
            continue
        amount = order.total_amount
        created = to_local(order.created_at, windows.now)
        total += amount
        if windows.today.contains(created):
            today += amount
        if windows.this_week.contains(created):
            week += amount
        if windows.this_month.contains(created):
            month += amount
        if windows.previous_month.contains(created):
            previous_month += amount

    return RevenueSummary(
        total=total,
        today=today,
        week=week,
        month=month,
        previous_month=previous_month,
        growth=growth_rate(month, previous_month),
    )


def summarize_orders(orders: Iterable[OrderRecord], windows: ReportingWindows) -> OrderSummary:
    """
    Order counts. `total`, `pending`, `completed` and `cancelled` look at
    every order; the period counts and the average only at valid ones.
    """
    total = today = week = month = 0
    pending = completed = cancelled = 0
    valid_count = 0
    valid_revenue = 0.0

    for order in orders:
        total += 1
        if order.status in OPEN_STATUSES:
            pending += 1
        elif order.status == OrderStatus.DELIVERED.value:
            completed += 1
        elif order.status == OrderStatus.CANCELLED.value:
            cancelled += 1

        if not is_valid_order(order):
            continue
        valid_count += 1
        valid_revenue += order.total_amount
        created = to_local(order.created_at, windows.now)
        if windows.today.contains(created):
            today += 1
        if windows.this_week.contains(created):
            week += 1
        if windows.this_month.contains(created):
            month += 1

    return OrderSummary(
        total=total,
        today=today,
        week=week,
        month=month,
        pending=pending,
        completed=completed,
        cancelled=cancelled,
        average_value=safe_ratio(valid_revenue, valid_count),
    )


def summarize_customers(
    users: Sequence[UserRecord],
    orders: Iterable[OrderRecord],
    windows: ReportingWindows,
) -> CustomerSummary:
    """
    Customer counts.

    `returning` is simply total minus new; it does not check whether a
    user ordered more than once.
    """
    new = sum(
        1 for user in users
        if windows.this_month.contains(to_local(user.created_at, windows.now))
    )

    active: Set[str] = set()
    for order in orders:
        if order.user_id is None or not is_valid_order(order):
            continue
        if windows.this_month.contains(to_local(order.created_at, windows.now)):
            active.add(order.user_id)

    return CustomerSummary(
        total=len(users),
        new=new,
        returning=len(users) - new,
        active_this_month=len(active),
    )


def summarize_products(
    products: Iterable[ProductRecord],
    low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD,
) -> ProductSummary:
    total = low_stock = out_of_stock = featured = on_sale = 0

    for product in products:
        total += 1
        if product.stock == 0:
            out_of_stock += 1
        elif product.stock <= low_stock_threshold:
            low_stock += 1
        if product.is_featured:
            featured += 1
        if product.is_on_sale:
            on_sale += 1

    return ProductSummary(
        total=total,
        low_stock=low_stock,
        out_of_stock=out_of_stock,
        featured=featured,
        on_sale=on_sale,
    )


def summarize_favorites(
    favorites: Sequence[FavoriteRecord],
    top_products: Sequence[FavoriteProduct],
) -> FavoriteSummary:
    return FavoriteSummary(total=len(favorites), top_products=tuple(top_products))
