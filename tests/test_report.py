"""Tests for wbsplan.labor.report module."""

import pytest

from wbsplan.labor.report import (
    BudgetUsage,
    budget_alerts,
    budget_usage,
    engineer_hours,
    filter_logs,
    project_actual_hours,
    resolve_task_title,
    round_hours,
)
from wbsplan.project.models import LogEntry, Project, Task

BRIDGE = Project(
    id="P100", name="Bridge", start_date="2025-01-01", budget_hours=10,
    tasks=(Task(id=7, title="Survey", category="Design", start_date="2025-01-02"),),
)
TOWER = Project(id="P200", name="Tower", start_date="2025-01-01", budget_hours=0)


def _log(day, engineer="Amy", project_id="P100", hours=1.0, task_id=None):
    return LogEntry(date=day, engineer=engineer, project_id=project_id, hours=hours, task_id=task_id)


LOGS = [
    _log("2025/01/05", hours=3, task_id="7"),
    _log("2025-01-02", engineer="Bo", hours=2.5),
    _log("2024-12-30", project_id="P200", hours=4),
    _log("2025-01-10", hours=3.1, task_id="free text"),
]


class TestFilterLogs:
    """Detailed report filtering."""

    def test_sorted_oldest_first(self):
        assert [log.date for log in filter_logs(LOGS)] == [
            "2024-12-30", "2025-01-02", "2025/01/05", "2025-01-10",
        ]

    def test_project_filter(self):
        assert len(filter_logs(LOGS, project=BRIDGE)) == 3

    def test_inclusive_date_range(self):
        selected = filter_logs(LOGS, start="2025-01-02", end="2025/01/05")
        assert [log.engineer for log in selected] == ["Bo", "Amy"]

    def test_engineer_filter(self):
        assert [log.hours for log in filter_logs(LOGS, engineer="Bo")] == [2.5]


class TestTaskTitle:
    def test_known_task(self):
        assert resolve_task_title(LOGS[0], [BRIDGE, TOWER]) == "Survey"

    def test_unknown_task_falls_back_to_raw_value(self):
        assert resolve_task_title(LOGS[3], [BRIDGE]) == "free text"

    def test_no_task(self):
        assert resolve_task_title(LOGS[1], [BRIDGE]) == ""


class TestBudget:
    """Budget usage and alerts."""

    def test_actual_hours_rounded(self):
        assert project_actual_hours(LOGS, BRIDGE) == 8.6

    def test_usage(self):
        usage = {u.project_id: u for u in budget_usage(LOGS, [BRIDGE, TOWER])}
        assert usage["P100"].usage == pytest.approx(0.86)
        assert usage["P200"].usage == 0.0

    def test_alerts_skip_unbudgeted_projects(self):
        alerts = budget_alerts(LOGS, [BRIDGE, TOWER])
        assert [a.project_id for a in alerts] == ["P100"]

    def test_threshold_is_strict(self):
        usage = BudgetUsage(project_id="x", name="x", budget_hours=10, actual_hours=8)
        assert usage.usage == 0.8
        logs = [_log("2025-01-01", hours=8)]
        assert budget_alerts(logs, [BRIDGE]) == []

    def test_custom_threshold(self):
        assert budget_alerts(LOGS, [BRIDGE], threshold=0.9) == []


class TestEngineerHours:
    def test_by_year(self):
        assert engineer_hours(LOGS, year="2025") == {"Amy": 6.1, "Bo": 2.5}

    def test_by_project(self):
        assert engineer_hours(LOGS, project=TOWER) == {"Amy": 4.0}


def test_round_hours_half_up():
    assert round_hours(0.25) == 0.3
    assert round_hours(8.6000000001) == 8.6
