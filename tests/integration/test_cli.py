"""
Integration Tests - Command Line
"""
import json
import logging
import sys

import pytest
import structlog

from grocery_analytics.cli import build_parser, run
from grocery_analytics.config.logging import configure_logging


@pytest.fixture
def cli_logging():
    """Route logs to stderr as cli.main() does, so stdout carries only command output"""
    handler = configure_logging(stream=sys.stderr)
    yield
    logging.getLogger().removeHandler(handler)
    structlog.reset_defaults()


class TestParser:
    """Tests for argument parsing"""

    def test_export_arguments(self):
        args = build_parser().parse_args(
            ["export", "--range", "week", "--at", "2026-10-14T15:30:00", "--output", "out"]
        )

        assert args.command == "export"
        assert args.range_selector == "week"
        assert args.reference_time.hour == 15
        assert args.output == "out"

    def test_unknown_range_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["snapshot", "--range", "quarter"])

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


@pytest.mark.usefixtures("cli_logging")
class TestRun:
    """Tests for the commands against a seeded database"""

    async def test_snapshot_prints_json(self, seeded_database_url, capsys):
        args = build_parser().parse_args(
            ["--database-url", seeded_database_url, "snapshot", "--range", "week",
             "--at", "2026-10-14T15:30:00"]
        )

        assert await run(args) == 0

        snapshot = json.loads(capsys.readouterr().out)
        assert snapshot["range"] == "week"
        assert snapshot["summary"]["revenue"]["week"] == 360.0

    async def test_export_writes_csv(self, seeded_database_url, tmp_path, capsys):
        args = build_parser().parse_args(
            ["--database-url", seeded_database_url, "export", "--range", "week",
             "--at", "2026-10-14T15:30:00", "--output", str(tmp_path / "exports")]
        )

        assert await run(args) == 0

        output_file = tmp_path / "exports" / "analytics-week-2026-10-14.csv"
        assert capsys.readouterr().out.strip() == str(output_file)
        assert output_file.read_text(encoding="utf-8").splitlines()[-1] == "2026-10-14,2,250.00"

    async def test_unreadable_database_exits_nonzero(self, tmp_path):
        args = build_parser().parse_args(
            ["--database-url", f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}", "snapshot"]
        )

        assert await run(args) == 1
