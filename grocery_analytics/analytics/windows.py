"""
Reporting Window Calculator

Computes the time boundaries every aggregation filters on, relative to a
reference instant and the selected reporting range. All windows are
inclusive on both ends; weeks start on Monday.
"""

import calendar
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Union

from grocery_analytics.exceptions import InvalidRangeError


class RangeSelector(str, Enum):
    """Reporting range for the daily sales chart"""
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @property
    def days(self) -> int:
        """Chart span in days, counted back from the reference instant"""
        return _RANGE_DAYS[self]

    @classmethod
    def parse(cls, value: Union[str, "RangeSelector"]) -> "RangeSelector":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidRangeError(value) from None


_RANGE_DAYS = {
    RangeSelector.WEEK: 7,
    RangeSelector.MONTH: 30,
    RangeSelector.YEAR: 365,
}


@dataclass(frozen=True)
class Window:
    """Closed interval [start, end]"""
    start: datetime
    end: datetime

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant <= self.end


@dataclass(frozen=True)
class ReportingWindows:
    """Named windows for one aggregation run"""
    now: datetime
    today: Window
    this_week: Window
    this_month: Window
    previous_month: Window
    chart_start: datetime

    @property
    def chart(self) -> Window:
        return Window(self.chart_start, self.now)


def start_of_day(instant: datetime) -> datetime:
    return instant.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(instant: datetime) -> datetime:
    return instant.replace(hour=23, minute=59, second=59, microsecond=999999)


def to_local(instant: datetime, reference: datetime) -> datetime:
    """
    Express a record instant in the reference instant's local time.

    Aware instants are converted into the reference zone; with a naive
    reference they are converted to host local time and made naive. Naive
    instants are assumed to already be local to the reference.
    """
    if reference.tzinfo is None:
        if instant.tzinfo is None:
            return instant
        return instant.astimezone().replace(tzinfo=None)
    if instant.tzinfo is None:
        return instant.replace(tzinfo=reference.tzinfo)
    return instant.astimezone(reference.tzinfo)


def month_window(year: int, month: int, like: datetime) -> Window:
    """Calendar month window carrying the tzinfo of `like`."""
    last_day = calendar.monthrange(year, month)[1]
    start = datetime.combine(date(year, month, 1), time.min, tzinfo=like.tzinfo)
    end = datetime.combine(date(year, month, last_day), time.max, tzinfo=like.tzinfo)
    return Window(start, end)


def compute_windows(now: datetime, range_selector: Union[str, RangeSelector]) -> ReportingWindows:
    """
    Compute all reporting windows for a reference instant.

    Args:
        now: Reference instant
        range_selector: week, month or year

    Returns:
        ReportingWindows with today, this week, this month, previous month
        and the chart start instant
    """
    selected = RangeSelector.parse(range_selector)

    today_start = start_of_day(now)
    week_start = today_start - timedelta(days=now.weekday())
    week_end = end_of_day(week_start + timedelta(days=6))

    if now.month == 1:
        prev_year, prev_month = now.year - 1, 12
    else:
        prev_year, prev_month = now.year, now.month - 1

    return ReportingWindows(
        now=now,
        today=Window(today_start, end_of_day(now)),
        this_week=Window(week_start, week_end),
        this_month=month_window(now.year, now.month, now),
        previous_month=month_window(prev_year, prev_month, now),
        chart_start=now - timedelta(days=selected.days),
    )
