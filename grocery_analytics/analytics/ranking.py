"""
Grouping and Ranking Engine

Groups line items, orders and favorites into breakdowns and ranks them.
Each ranking is a polars group-by that keeps first-seen key order, followed
by a stable descending sort and truncation, so ties always resolve to the
key that appeared first in the input.

Rows whose joined product no longer exists are skipped, not treated as errors.
"""

from collections import Counter
from typing import Dict, Iterable, List, Sequence, Tuple

import polars as pl
import structlog

from grocery_analytics.database.models import OrderStatus, PaymentMethod
from grocery_analytics.repository.records import (
    CategoryRecord,
    FavoriteRecord,
    OrderItemRecord,
    OrderRecord,
)
from .aggregator import is_valid_order
from .snapshot import (
    CategoryStat,
    FavoriteProduct,
    OrderStatusStat,
    PaymentMethodStat,
    TopProduct,
)

logger = structlog.get_logger(__name__)

DEFAULT_TOP_N = 10
UNKNOWN_CATEGORY = "Unknown"
UNKNOWN_PAYMENT_METHOD = "unknown"

PAYMENT_METHOD_LABELS: Dict[str, str] = {
    PaymentMethod.CASH.value: "Cash",
    PaymentMethod.CARD.value: "Card",
}

ORDER_STATUS_LABELS: Dict[str, str] = {
    OrderStatus.PENDING.value: "Pending",
    OrderStatus.PROCESSING.value: "Processing",
    OrderStatus.PREPARING.value: "Preparing",
    OrderStatus.ON_DELIVERY.value: "On Delivery",
    OrderStatus.DELIVERED.value: "Delivered",
    OrderStatus.CANCELLED.value: "Cancelled",
}


def _rank(
    rows: List[dict],
    schema: Dict[str, pl.DataType],
    key: str,
    aggregations: Sequence[pl.Expr],
    metric: str,
    top_n: int,
) -> pl.DataFrame:
    """Group rows by `key`, sort descending on `metric`, keep the top N."""
    frame = pl.DataFrame(rows, schema=schema)
    return (
        frame.group_by(key, maintain_order=True)
        .agg(list(aggregations))
        .sort(metric, descending=True, maintain_order=True)
        .head(top_n)
    )


def rank_categories(
    items: Iterable[OrderItemRecord],
    categories: Iterable[CategoryRecord],
    top_n: int = DEFAULT_TOP_N,
) -> Tuple[CategoryStat, ...]:
    """
    Category sales ranked by quantity sold.

    Line items without a joined product, or whose product has no category,
    are left out.
    """
    names = {category.id: category.name for category in categories}
    rows = []
    skipped = 0
    for item in items:
        if item.product is None or not item.product.category_id:
            skipped += 1
            continue
        rows.append({
            "category_id": item.product.category_id,
            "quantity": item.quantity,
            "revenue": item.price * item.quantity,
        })

    if skipped:
        logger.debug("category_breakdown_items_skipped", skipped=skipped)
    if not rows:
        return ()

    ranked = _rank(
        rows,
        schema={"category_id": pl.Utf8, "quantity": pl.Int64, "revenue": pl.Float64},
        key="category_id",
        aggregations=[
            pl.col("quantity").sum().alias("order_count"),
            pl.col("revenue").sum().alias("total_revenue"),
        ],
        metric="order_count",
        top_n=top_n,
    )
    return tuple(
        CategoryStat(
            category_id=row["category_id"],
            category_name=names.get(row["category_id"], UNKNOWN_CATEGORY),
            order_count=row["order_count"],
            total_revenue=row["total_revenue"],
        )
        for row in ranked.iter_rows(named=True)
    )


def rank_products(
    items: Iterable[OrderItemRecord],
    top_n: int = DEFAULT_TOP_N,
) -> Tuple[TopProduct, ...]:
    """Best sellers ranked by quantity sold; name and image come from the first row seen."""
    rows = [
        {
            "product_id": item.product.id,
            "name": item.product.name,
            "image": item.product.thumbnail,
            "quantity": item.quantity,
            "revenue": item.price * item.quantity,
        }
        for item in items
        if item.product is not None
    ]
    if not rows:
        return ()

    ranked = _rank(
        rows,
        schema={
            "product_id": pl.Utf8,
            "name": pl.Utf8,
            "image": pl.Utf8,
            "quantity": pl.Int64,
            "revenue": pl.Float64,
        },
        key="product_id",
        aggregations=[
            pl.col("name").first(),
            pl.col("image").first(),
            pl.col("quantity").sum().alias("total_sold"),
            pl.col("revenue").sum().alias("total_revenue"),
        ],
        metric="total_sold",
        top_n=top_n,
    )
    return tuple(
        TopProduct(
            product_id=row["product_id"],
            product_name=row["name"],
            image=row["image"],
            total_sold=row["total_sold"],
            total_revenue=row["total_revenue"],
        )
        for row in ranked.iter_rows(named=True)
    )


def rank_payment_methods(
    orders: Iterable[OrderRecord],
    top_n: int = DEFAULT_TOP_N,
) -> Tuple[PaymentMethodStat, ...]:
    """
    Valid orders grouped by payment method, ranked by order count.

    A missing method lands in the "unknown" bucket; methods other than
    cash and card keep their raw value as the label.
    """
    rows = [
        {
            "method": order.payment_method or UNKNOWN_PAYMENT_METHOD,
            "amount": order.total_amount,
        }
        for order in orders
        if is_valid_order(order)
    ]
    if not rows:
        return ()

    ranked = _rank(
        rows,
        schema={"method": pl.Utf8, "amount": pl.Float64},
        key="method",
        aggregations=[
            pl.len().alias("count"),
            pl.col("amount").sum().alias("revenue"),
        ],
        metric="count",
        top_n=top_n,
    )
    return tuple(
        PaymentMethodStat(
            method=row["method"],
            label=PAYMENT_METHOD_LABELS.get(row["method"], row["method"]),
            count=row["count"],
            revenue=row["revenue"],
        )
        for row in ranked.iter_rows(named=True)
    )


def rank_favorites(
    favorites: Iterable[FavoriteRecord],
    top_n: int = DEFAULT_TOP_N,
) -> Tuple[FavoriteProduct, ...]:
    """Global favorite counts per product across all users."""
    rows = [
        {
            "product_id": favorite.product.id,
            "name": favorite.product.name,
            "image": favorite.product.thumbnail,
        }
        for favorite in favorites
        if favorite.product is not None
    ]
    if not rows:
        return ()

    ranked = _rank(
        rows,
        schema={"product_id": pl.Utf8, "name": pl.Utf8, "image": pl.Utf8},
        key="product_id",
        aggregations=[
            pl.col("name").first(),
            pl.col("image").first(),
            pl.len().alias("favorite_count"),
        ],
        metric="favorite_count",
        top_n=top_n,
    )
    return tuple(
        FavoriteProduct(
            product_id=row["product_id"],
            product_name=row["name"],
            image=row["image"],
            favorite_count=row["favorite_count"],
        )
        for row in ranked.iter_rows(named=True)
    )


def count_statuses(orders: Iterable[OrderRecord]) -> Tuple[OrderStatusStat, ...]:
    """Count of every order per status, cancelled included, in first-seen order."""
    counts = Counter(order.status for order in orders)
    return tuple(
        OrderStatusStat(
            status=status,
            label=ORDER_STATUS_LABELS.get(status, status),
            count=count,
        )
        for status, count in counts.items()
    )
