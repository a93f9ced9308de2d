"""
Analytics Snapshot Models

Immutable result of one aggregation run. Every model is frozen and every
sequence is a tuple, so a snapshot can be shared and cached freely.
"""

import datetime as dt
from typing import Tuple

from pydantic import BaseModel, ConfigDict

from .windows import RangeSelector


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class RevenueSummary(_Frozen):
    """Revenue over valid orders"""
    total: float = 0.0
    today: float = 0.0
    week: float = 0.0
    month: float = 0.0
    previous_month: float = 0.0
    growth: float = 0.0


class OrderSummary(_Frozen):
    """Order counts; `total` includes cancelled orders"""
    total: int = 0
    today: int = 0
    week: int = 0
    month: int = 0
    pending: int = 0
    completed: int = 0
    cancelled: int = 0
    average_value: float = 0.0


class CustomerSummary(_Frozen):
    """`returning` is total minus new, not a repeat-purchase cohort"""
    total: int = 0
    new: int = 0
    returning: int = 0
    active_this_month: int = 0


class ProductSummary(_Frozen):
    total: int = 0
    low_stock: int = 0
    out_of_stock: int = 0
    featured: int = 0
    on_sale: int = 0


class FavoriteProduct(_Frozen):
    product_id: str
    product_name: str
    favorite_count: int
    image: str = ""


class FavoriteSummary(_Frozen):
    total: int = 0
    top_products: Tuple[FavoriteProduct, ...] = ()


class AnalyticsSummary(_Frozen):
    revenue: RevenueSummary = RevenueSummary()
    orders: OrderSummary = OrderSummary()
    customers: CustomerSummary = CustomerSummary()
    products: ProductSummary = ProductSummary()
    favorites: FavoriteSummary = FavoriteSummary()


class DailyBucket(_Frozen):
    date: dt.date
    orders: int = 0
    revenue: float = 0.0


class HourlyBucket(_Frozen):
    hour: int
    label: str
    orders: int = 0
    revenue: float = 0.0


class CategoryStat(_Frozen):
    """
    Category sales. `order_count` is the summed line-item quantity,
    not the number of distinct orders.
    """
    category_id: str
    category_name: str
    order_count: int
    total_revenue: float


class TopProduct(_Frozen):
    product_id: str
    product_name: str
    image: str = ""
    total_sold: int
    total_revenue: float


class PaymentMethodStat(_Frozen):
    method: str
    label: str
    count: int
    revenue: float


class OrderStatusStat(_Frozen):
    status: str
    label: str
    count: int


class AnalyticsSnapshot(_Frozen):
    """Complete output of one recompute"""
    reference_time: dt.datetime
    range: RangeSelector
    summary: AnalyticsSummary
    daily_sales: Tuple[DailyBucket, ...] = ()
    hourly_distribution: Tuple[HourlyBucket, ...] = ()
    category_breakdown: Tuple[CategoryStat, ...] = ()
    top_products: Tuple[TopProduct, ...] = ()
    payment_method_breakdown: Tuple[PaymentMethodStat, ...] = ()
    order_status_breakdown: Tuple[OrderStatusStat, ...] = ()


def assemble_snapshot(
    reference_time: dt.datetime,
    range_selector: RangeSelector,
    *,
    revenue: RevenueSummary,
    orders: OrderSummary,
    customers: CustomerSummary,
    products: ProductSummary,
    favorites: FavoriteSummary,
    daily_sales: Tuple[DailyBucket, ...],
    hourly_distribution: Tuple[HourlyBucket, ...],
    category_breakdown: Tuple[CategoryStat, ...],
    top_products: Tuple[TopProduct, ...],
    payment_method_breakdown: Tuple[PaymentMethodStat, ...],
    order_status_breakdown: Tuple[OrderStatusStat, ...],
) -> AnalyticsSnapshot:
    """Merge independently computed parts into one snapshot."""
    return AnalyticsSnapshot(
        reference_time=reference_time,
        range=range_selector,
        summary=AnalyticsSummary(
            revenue=revenue,
            orders=orders,
            customers=customers,
            products=products,
            favorites=favorites,
        ),
        daily_sales=tuple(daily_sales),
        hourly_distribution=tuple(hourly_distribution),
        category_breakdown=tuple(category_breakdown),
        top_products=tuple(top_products),
        payment_method_breakdown=tuple(payment_method_breakdown),
        order_status_breakdown=tuple(order_status_breakdown),
    )
