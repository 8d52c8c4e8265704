"""
Labor report queries over the log corpus.

Filtering for the detailed report, task title resolution, and the
budget/usage figures shown on the overview. Display values are rounded to
one decimal to hide float accumulation noise.
"""

import math
from collections import defaultdict
from dataclasses import dataclass
from typing import Iterable, Optional

from wbsplan.labor.weekly import log_matches_project
from wbsplan.lib import dates
from wbsplan.lib.constants import BUDGET_ALERT_THRESHOLD
from wbsplan.project.models import LogEntry, Project


def round_hours(value: float) -> float:
    return math.floor(value * 10 + 0.5) / 10


def filter_logs(
    logs: Iterable[LogEntry],
    project: Optional[Project] = None,
    start: Optional[str] = None,
    end: Optional[str] = None,
    engineer: Optional[str] = None,
) -> list[LogEntry]:
    """Logs matching the project, inclusive date range and engineer, oldest first."""
    start = dates.normalize_date_str(start) if start else None
    end = dates.normalize_date_str(end) if end else None

    selected = []
    for log in logs:
        log_date = dates.normalize_date_str(log.date)
        if project is not None and not log_matches_project(log, project):
            continue
        if start and log_date < start:
            continue
        if end and log_date > end:
            continue
        if engineer and log.engineer != engineer:
            continue
        selected.append(log)

    return sorted(selected, key=lambda log: dates.normalize_date_str(log.date))


def resolve_task_title(log: LogEntry, projects: Iterable[Project]) -> str:
    """Task title for a log, falling back to the raw task field (free-text entries)."""
    if not log.task_id:
        return ""
    for project in projects:
        if not log_matches_project(log, project):
            continue
        for task in project.tasks:
            if str(task.id) == str(log.task_id):
                return task.title
    return str(log.task_id)


def project_actual_hours(logs: Iterable[LogEntry], project: Project) -> float:
    return round_hours(sum(log.hours for log in logs if log_matches_project(log, project)))


@dataclass(frozen=True)
class BudgetUsage:
    project_id: str
    name: str
    budget_hours: float
    actual_hours: float

    @property
    def usage(self) -> float:
        if self.budget_hours <= 0:
            return 0.0
        return self.actual_hours / self.budget_hours


def budget_usage(logs: list[LogEntry], projects: Iterable[Project]) -> list[BudgetUsage]:
    return [
        BudgetUsage(
            project_id=p.id,
            name=p.name,
            budget_hours=p.budget_hours,
            actual_hours=project_actual_hours(logs, p),
        )
        for p in projects
    ]


def budget_alerts(
    logs: list[LogEntry],
    projects: Iterable[Project],
    threshold: float = BUDGET_ALERT_THRESHOLD,
) -> list[BudgetUsage]:
    """Projects with a budget whose logged hours exceed threshold * budget."""
    return [
        u for u in budget_usage(logs, projects)
        if u.budget_hours > 0 and u.actual_hours > u.budget_hours * threshold
    ]


def engineer_hours(
    logs: Iterable[LogEntry],
    year: Optional[str] = None,
    project: Optional[Project] = None,
) -> dict[str, float]:
    """Total hours per engineer, optionally limited to a year and a project."""
    totals: dict[str, float] = defaultdict(float)
    for log in logs:
        if year and not dates.normalize_date_str(log.date).startswith(str(year)):
            continue
        if project is not None and not log_matches_project(log, project):
            continue
        totals[log.engineer] += log.hours
    return {name: round_hours(hours) for name, hours in totals.items()}
