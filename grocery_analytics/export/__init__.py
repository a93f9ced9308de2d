"""
Export Module
"""
from .sales import daily_sales_csv, daily_sales_frame, export_filename, write_daily_sales_csv

__all__ = [
    "daily_sales_csv",
    "daily_sales_frame",
    "export_filename",
    "write_daily_sales_csv",
]
