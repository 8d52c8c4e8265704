"""Tests for wbsplan.labor.weekly module."""

from datetime import date

import pytest

from wbsplan.labor.weekly import (
    column_totals,
    current_week,
    grand_total,
    project_matches,
    row_totals,
    tokens,
    week_days,
    weekly_labor_aggregate,
)
from wbsplan.project.models import LogEntry, Project

PROJECT = Project(id="p100", name="Bridge Retrofit", start_date="2025-06-01")


def _log(day, engineer="Amy", project_id="P100", hours=1.0):
    return LogEntry(date=day, engineer=engineer, project_id=project_id, hours=hours)


class TestWeekDays:
    """Monday-start week containing a reference date."""

    def test_midweek_reference(self):
        days = week_days("2025-06-12")
        assert days[0] == "2025-06-09"
        assert days[-1] == "2025-06-15"
        assert len(days) == 7

    def test_sunday_belongs_to_preceding_week(self):
        assert week_days("2025-06-15")[0] == "2025-06-09"

    def test_monday_starts_its_own_week(self):
        assert week_days(date(2025, 6, 16))[0] == "2025-06-16"

    def test_current_week(self):
        assert current_week(date(2025, 6, 12)) == week_days("2025-06-12")


class TestProjectMatches:
    """Fuzzy attribution of free-text project fields."""

    def test_exact_case_insensitive(self):
        assert project_matches("P100", "p100") is True

    def test_padded_id(self):
        assert project_matches("  P100 ", "p100") is True

    def test_numeric_id(self):
        assert project_matches(100, "100") is True

    def test_token_matches_name(self):
        assert project_matches("retrofit", "p100", "Bridge Retrofit") is True

    def test_comma_separated_tokens(self):
        assert project_matches("x9,P100", "p100") is True

    def test_no_substring_match(self):
        assert project_matches("p1000", "p100") is False
        assert project_matches("p10", "p100") is False

    def test_empty_log_project_never_matches(self):
        assert project_matches("", "p100") is False
        assert project_matches(None, "p100") is False
        assert project_matches("  ", "") is False

    def test_tokens(self):
        assert tokens("P100, Bridge  retrofit") == {"p100", "bridge", "retrofit"}


class TestWeeklyAggregate:
    """Engineer x day hours for one week."""

    def test_slash_date_and_case_folded_project(self):
        weekly = weekly_labor_aggregate([_log("2025/06/10", hours=4)], PROJECT, "2025-06-12")
        assert weekly == {"Amy": {"2025-06-10": 4.0}}

    def test_sums_same_cell(self):
        logs = [_log("2025-06-10", hours=2), _log("2025-06-10", hours=1.5)]
        weekly = weekly_labor_aggregate(logs, PROJECT, "2025-06-12")
        assert weekly["Amy"]["2025-06-10"] == pytest.approx(3.5)

    def test_excludes_other_weeks(self):
        logs = [_log("2025-06-08"), _log("2025-06-16"), _log("2025-06-09")]
        weekly = weekly_labor_aggregate(logs, PROJECT, "2025-06-12")
        assert weekly == {"Amy": {"2025-06-09": 1.0}}

    def test_excludes_other_projects(self):
        logs = [_log("2025-06-10", project_id="p1000"), _log("2025-06-10", project_id="")]
        assert weekly_labor_aggregate(logs, PROJECT, "2025-06-12") == {}

    def test_sunday_reference(self):
        logs = [_log("2025-06-09", engineer="Bo"), _log("2025-06-15", engineer="Bo")]
        weekly = weekly_labor_aggregate(logs, PROJECT, "2025-06-15")
        assert set(weekly["Bo"]) == {"2025-06-09", "2025-06-15"}

    def test_matches_by_name_token(self):
        weekly = weekly_labor_aggregate([_log("2025-06-11", project_id="Bridge")], PROJECT, "2025-06-12")
        assert "Amy" in weekly


class TestTotals:
    @pytest.fixture
    def weekly(self):
        logs = [
            _log("2025-06-09", engineer="Amy", hours=2),
            _log("2025-06-10", engineer="Amy", hours=3),
            _log("2025-06-10", engineer="Bo", hours=4),
        ]
        return weekly_labor_aggregate(logs, PROJECT, "2025-06-12")

    def test_row_totals(self, weekly):
        assert row_totals(weekly) == {"Amy": 5.0, "Bo": 4.0}

    def test_column_totals_include_empty_days(self, weekly):
        totals = column_totals(weekly, week_days("2025-06-12"))
        assert totals["2025-06-09"] == 2.0
        assert totals["2025-06-10"] == 7.0
        assert totals["2025-06-15"] == 0.0
        assert len(totals) == 7

    def test_grand_total(self, weekly):
        assert grand_total(weekly) == 9.0

    def test_empty(self):
        assert grand_total({}) == 0
