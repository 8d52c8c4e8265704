"""
Weekly labor-hours aggregation.

Buckets time-entry records into a Monday-start week and attributes them to a
project. Log records carry a free-text project field that may hold the
project id, its name, or both, in any case or formatting, so matching is
fuzzy:

    match = exact(log.project_id, project.id)
            or tokens(log.project_id) & tokens(project.id + " " + project.name)

where tokens split on whitespace and commas. This compensates for upstream
identifiers that are not a reliable foreign key.
"""

import logging
import re
from collections import defaultdict
from datetime import date, timedelta
from typing import Iterable

from wbsplan.lib import dates
from wbsplan.project.models import LogEntry, Project

logger = logging.getLogger(__name__)

TOKEN_SPLIT = re.compile(r'[\s,]+')

WeeklyHours = dict[str, dict[str, float]]


def week_days(reference) -> list[str]:
    """The 7 dates (Monday..Sunday) of the week containing ``reference``."""
    monday = dates.week_start(reference)
    return [dates.format_date(monday + timedelta(days=i)) for i in range(7)]


def _normalize_id(value) -> str:
    return str(value if value is not None else "").strip().lower()


def tokens(value) -> set[str]:
    return {t for t in TOKEN_SPLIT.split(_normalize_id(value)) if t}


def project_matches(log_project_id, project_id, project_name: str = "") -> bool:
    """Does a log's free-text project field refer to this project?"""
    log_key = _normalize_id(log_project_id)
    if not log_key:
        return False
    if log_key == _normalize_id(project_id):
        return True
    return bool(tokens(log_key) & tokens(f"{project_id} {project_name}"))


def log_matches_project(log: LogEntry, project: Project) -> bool:
    return project_matches(log.project_id, project.id, project.name)


def weekly_labor_aggregate(
    logs: Iterable[LogEntry],
    project: Project,
    reference_date,
) -> WeeklyHours:
    """
    Sum hours per engineer per day for the week containing reference_date.

    Returns:
        {engineer: {date: hours}}; only engineers/days with matching logs
        appear.
    """
    days = week_days(reference_date)
    window = set(days)
    grouped: dict[str, dict[str, float]] = defaultdict(lambda: defaultdict(float))
    matched = 0

    for log in logs:
        log_date = dates.normalize_date_str(log.date)
        if log_date not in window:
            continue
        if not log_matches_project(log, project):
            continue
        grouped[log.engineer][log_date] += float(log.hours)
        matched += 1

    logger.debug(f"[LABOR] Week of {days[0]}: {matched} logs matched project {project.id}")
    return {engineer: dict(per_day) for engineer, per_day in grouped.items()}


def row_totals(weekly: WeeklyHours) -> dict[str, float]:
    """Hours per engineer across the week."""
    return {engineer: sum(per_day.values()) for engineer, per_day in weekly.items()}


def column_totals(weekly: WeeklyHours, days: list[str]) -> dict[str, float]:
    """Hours per day across engineers, for every day in ``days``."""
    return {day: sum(per_day.get(day, 0.0) for per_day in weekly.values()) for day in days}


def grand_total(weekly: WeeklyHours) -> float:
    return sum(row_totals(weekly).values())


def current_week(today: date | None = None) -> list[str]:
    return week_days(today or date.today())
