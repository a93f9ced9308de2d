"""
Command-line access to the analytics engine.

    grocery-analytics snapshot --range week
    grocery-analytics export --range month --output ./exports

Both commands read straight from the configured database; the snapshot
cache is not involved.
"""

import argparse
import asyncio
import sys
from datetime import datetime
from typing import List, Optional

import structlog

from grocery_analytics.analytics.engine import AnalyticsEngine
from grocery_analytics.analytics.windows import RangeSelector
from grocery_analytics.config import get_settings
from grocery_analytics.config.logging import configure_logging
from grocery_analytics.database.connection import close_database, get_session_factory, init_database
from grocery_analytics.exceptions import AnalyticsError
from grocery_analytics.export.sales import write_daily_sales_csv
from grocery_analytics.repository.sql import SqlAlchemyAnalyticsRepository

logger = structlog.get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="grocery-analytics", description=__doc__.strip().splitlines()[0])
    parser.add_argument("--database-url", help="SQLAlchemy async URL (default: from POSTGRES_*)")
    parser.add_argument("--log-level", default=None, help="Overrides LOG_LEVEL")

    commands = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--range",
        dest="range_selector",
        default=None,
        choices=[selector.value for selector in RangeSelector],
        help="Reporting range (default: ANALYTICS_DEFAULT_RANGE)",
    )
    common.add_argument(
        "--at",
        dest="reference_time",
        type=datetime.fromisoformat,
        default=None,
        help="Reference instant in ISO format (default: now)",
    )

    commands.add_parser("snapshot", parents=[common], help="Print the snapshot as JSON")

    export = commands.add_parser("export", parents=[common], help="Write the daily sales CSV")
    export.add_argument("--output", default=".", help="Directory to write into")
    export.add_argument("--filename", default=None, help="Defaults to analytics-<range>-<date>.csv")

    return parser


async def run(args: argparse.Namespace) -> int:
    settings = get_settings()
    range_selector = args.range_selector or settings.analytics.default_range
    reference_time = args.reference_time or datetime.now()

    await init_database(args.database_url)
    try:
        engine = AnalyticsEngine(SqlAlchemyAnalyticsRepository(get_session_factory()), settings.analytics)
        snapshot = await engine.recompute(reference_time, range_selector)
    except AnalyticsError as e:
        logger.error("cli_recompute_failed", command=args.command, error=str(e))
        return 1
    finally:
        await close_database()

    if args.command == "snapshot":
        print(snapshot.model_dump_json(indent=2))
    else:
        print(write_daily_sales_csv(snapshot, args.output, args.filename))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    # stdout carries the command output
    configure_logging(log_level=args.log_level, stream=sys.stderr)
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
