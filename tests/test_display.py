"""Tests for display functions."""

from datetime import datetime, timedelta
from unittest.mock import patch

from nmsweep.display import (
    format_age,
    format_size,
    prompt_age_cap,
    show_delete_result,
    show_matches,
    show_nothing_found,
)
from nmsweep.models import DeleteResult, DirectoryMatch

NOW = datetime(2024, 6, 1, 12, 0, 0)


class TestFormatSize:
    def test_bytes(self):
        assert format_size(500) == "500 B"

    def test_kilobytes(self):
        assert format_size(1024) == "1.0 KB"

    def test_megabytes(self):
        assert format_size(5_500_000) == "5.5 MB"

    def test_gigabytes(self):
        assert format_size(2_000_000_000) == "2.0 GB"

    def test_zero(self):
        assert format_size(0) == "0 B"


class TestFormatAge:
    def test_hours(self):
        assert format_age(NOW - timedelta(hours=3), NOW) == "less than a day"

    def test_one_day(self):
        assert format_age(NOW - timedelta(days=1), NOW) == "a day"

    def test_days(self):
        assert format_age(NOW - timedelta(days=10), NOW) == "10 days"

    def test_one_month(self):
        assert format_age(NOW - timedelta(days=31), NOW) == "a month"

    def test_months(self):
        assert format_age(NOW - timedelta(days=91), NOW) == "3 months"

    def test_one_year(self):
        assert format_age(NOW - timedelta(days=400), NOW) == "a year"

    def test_years(self):
        assert format_age(NOW - timedelta(days=365 * 3), NOW) == "3 years"

    def test_future_timestamp(self):
        assert format_age(NOW + timedelta(days=3), NOW) == "less than a day"


class TestShowFunctions:
    def test_show_matches(self, capsys):
        matches = [DirectoryMatch(path="/p/node_modules", age=datetime.now() - timedelta(days=91))]
        show_matches(matches)
        out = capsys.readouterr().out
        assert "/p/node_modules" in out
        assert "3 months ago" in out

    def test_show_matches_with_sizes(self, capsys):
        matches = [DirectoryMatch(path="/p/node_modules", age=datetime.now(), size_bytes=2048)]
        show_matches(matches, show_sizes=True)
        out = capsys.readouterr().out
        assert "2.0 KB" in out
        assert "Total" in out

    def test_show_nothing_found(self, capsys):
        show_nothing_found()
        assert "too young" in capsys.readouterr().out

    def test_show_delete_result(self, capsys):
        show_delete_result(DeleteResult(total_bytes_reclaimed=1024, files_deleted=3, deleted=["/a"]))
        out = capsys.readouterr().out
        assert "Deleted 1 directory successfully." in out
        assert "(3 files)" in out
        assert "1.0 KB" in out
        assert "now free" in out

    def test_show_delete_result_plural_with_failures(self, capsys):
        result = DeleteResult(total_bytes_reclaimed=10, deleted=["/a", "/b"], failed=["/c"])
        show_delete_result(result)
        out = capsys.readouterr().out
        assert "Deleted 2 directories successfully." in out
        assert "Could not delete /c" in out

    def test_show_delete_result_dry_run(self, capsys):
        show_delete_result(DeleteResult(total_bytes_reclaimed=10, deleted=["/a"]), dry_run=True)
        out = capsys.readouterr().out
        assert "DRY RUN" in out
        assert "would be free" in out


class TestPromptAgeCap:
    def test_reprompts_until_valid(self, capsys):
        with patch("rich.prompt.Prompt.ask", side_effect=["abc", "0", "4"]) as ask:
            assert prompt_age_cap() == 4
        assert ask.call_count == 3
        out = capsys.readouterr().out
        assert "whole number" in out
        assert "at least 1 month" in out
