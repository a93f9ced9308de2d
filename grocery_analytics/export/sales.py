"""
Daily Sales Export

Turns the daily series of a snapshot into the CSV the dashboard offers for
download: header `Date,Order Count,Revenue`, one row per day, revenue with
two decimals, UTF-8.
"""

from datetime import date
from pathlib import Path
from typing import Optional, Union

import polars as pl
import structlog

from grocery_analytics.analytics.snapshot import AnalyticsSnapshot
from grocery_analytics.analytics.windows import RangeSelector

logger = structlog.get_logger(__name__)

CSV_SCHEMA = {"Date": pl.Utf8, "Order Count": pl.Int64, "Revenue": pl.Float64}


def daily_sales_frame(snapshot: AnalyticsSnapshot) -> pl.DataFrame:
    """Daily buckets as a DataFrame with the export column names."""
    rows = [(bucket.date.isoformat(), bucket.orders, bucket.revenue) for bucket in snapshot.daily_sales]
    return pl.DataFrame(rows, schema=CSV_SCHEMA, orient="row")


def daily_sales_csv(snapshot: AnalyticsSnapshot) -> str:
    """Render the daily series as CSV text."""
    return daily_sales_frame(snapshot).write_csv(float_precision=2)


def export_filename(range_selector: Union[str, RangeSelector], today: Optional[date] = None) -> str:
    selected = RangeSelector.parse(range_selector)
    today = today or date.today()
    return f"analytics-{selected.value}-{today.isoformat()}.csv"


def write_daily_sales_csv(
    snapshot: AnalyticsSnapshot,
    directory: Union[str, Path],
    filename: Optional[str] = None,
) -> Path:
    """
    Write the daily sales CSV into `directory`.

    Returns:
        Path of the written file
    """
    output_dir = Path(directory)
    output_dir.mkdir(parents=True, exist_ok=True)
    output_file = output_dir / (filename or export_filename(snapshot.range, snapshot.reference_time.date()))

    output_file.write_text(daily_sales_csv(snapshot), encoding="utf-8")
    logger.info("daily_sales_exported", path=str(output_file), rows=len(snapshot.daily_sales))

    return output_file
