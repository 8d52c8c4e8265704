"""
Project and log record loading.

Reads the records handed over by the persistence layer and the time-entry
subsystem (JSON, or YAML for hand-written fixtures), validates them against
the bundled schemas, and builds model objects. ``project_to_dict`` produces
the same camelCase shape for saving.
"""

import json
import logging
from datetime import date
from pathlib import Path

import yaml

from wbsplan.lib import dates, validate
from wbsplan.project.models import Engineer, LogEntry, Project, Task, WBSCategory

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")


def _stringify_dates(value):
    """YAML turns bare 2025-01-01 into date objects; records use strings."""
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _stringify_dates(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_stringify_dates(v) for v in value]
    return value


def read_records(path: Path):
    """Decode a JSON or YAML file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Records file not found: {path}")
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in YAML_SUFFIXES:
        return _stringify_dates(yaml.safe_load(text))
    return json.loads(text)


def task_from_dict(data: dict) -> Task:
    return Task(
        id=int(data["id"]),
        title=data.get("title", ""),
        category=data.get("category", ""),
        start_date=dates.normalize_date_str(data["startDate"]),
        duration=int(data.get("duration", 1)),
        progress=int(data.get("progress", 0)),
        assignee=data.get("assignee"),
        delay_reason=data.get("delayReason"),
        hours=float(data.get("hours", 0) or 0),
        actual_hours=float(data.get("actualHours", 0) or 0),
    )


def project_from_dict(data: dict) -> Project:
    """Validate and convert one project record."""
    validate.validate(data, "project")
    end_date = data.get("endDate") or None
    return Project(
        id=str(data["id"]),
        name=data.get("name", ""),
        start_date=dates.normalize_date_str(data["startDate"]),
        end_date=dates.normalize_date_str(end_date) if end_date else None,
        holidays=frozenset(dates.normalize_date_str(h) for h in data.get("holidays", [])),
        wbs=tuple(
            WBSCategory(id=w["id"], name=w["name"], collapsed=bool(w.get("collapsed", False)))
            for w in data.get("wbs", [])
        ),
        tasks=tuple(task_from_dict(t) for t in data.get("tasks", [])),
        engineers=tuple(
            Engineer(id=e["id"], name=e["name"], color=e.get("color", ""))
            for e in data.get("engineers", [])
        ),
        client=data.get("client", ""),
        budget_hours=float(data.get("budgetHours", 0) or 0),
        status=data.get("status", "Active"),
        manager=data.get("manager"),
    )


def log_from_dict(data: dict) -> LogEntry:
    task_id = data.get("taskId")
    return LogEntry(
        date=str(data["date"]),
        engineer=data["engineer"],
        project_id=str(data["projectId"]),
        hours=float(data["hours"]),
        task_id=str(task_id) if task_id not in (None, "") else None,
        log_id=data.get("logId"),
        note=data.get("note") or "",
    )


def load_project(path: Path) -> Project:
    return project_from_dict(read_records(path))


def load_projects(path: Path) -> list[Project]:
    """Load a file holding one project record or a list of them."""
    data = read_records(path)
    if isinstance(data, dict):
        data = [data]
    return [project_from_dict(item) for item in data]


def load_logs(path: Path) -> list[LogEntry]:
    data = read_records(path)
    validate.validate_many(data, "log")
    logs = [log_from_dict(item) for item in data]
    logger.debug(f"Loaded {len(logs)} log records from {path}")
    return logs


def task_to_dict(task: Task) -> dict:
    return {
        "id": task.id,
        "title": task.title,
        "category": task.category,
        "assignee": task.assignee,
        "startDate": task.start_date,
        "duration": task.duration,
        "progress": task.progress,
        "hours": task.hours,
        "actualHours": task.actual_hours,
        "delayReason": task.delay_reason,
    }


def project_to_dict(project: Project) -> dict:
    return {
        "id": project.id,
        "name": project.name,
        "client": project.client,
        "budgetHours": project.budget_hours,
        "status": project.status,
        "manager": project.manager,
        "startDate": project.start_date,
        "endDate": project.end_date,
        "holidays": sorted(project.holidays),
        "wbs": [{"id": w.id, "name": w.name, "collapsed": w.collapsed} for w in project.wbs],
        "engineers": [{"id": e.id, "name": e.name, "color": e.color} for e in project.engineers],
        "tasks": [task_to_dict(t) for t in project.tasks],
    }


def save_project(project: Project, path: Path) -> None:
    """Write a project record, refusing to write one that fails its schema."""
    data = project_to_dict(project)
    validate.validate(data, "project")
    Path(path).write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
