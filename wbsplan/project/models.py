"""
Data models for projects, tasks and time logs.

Task and Project are frozen: edits go through ``dataclasses.replace`` (or the
TaskBoard) so geometry, rollup and drag code always work on snapshots.
"""

from dataclasses import dataclass, replace
from typing import Optional

from wbsplan.lib import dates
from wbsplan.lib.constants import ROLE_ADMIN, ROLE_ENGINEER, UNASSIGNED_COLOR


@dataclass(frozen=True)
class Task:
    """A scheduled bar on the Gantt chart."""
    id: int
    title: str
    category: str                           # WBSCategory.name, not id
    start_date: str                         # YYYY-MM-DD
    duration: int = 1                       # Days, >= 1
    progress: int = 0                       # 0-100
    assignee: Optional[str] = None          # Engineer.id
    delay_reason: Optional[str] = None      # Set only by a confirmed delaying drag
    hours: float = 0.0                      # Estimated hours
    actual_hours: float = 0.0

    @property
    def end_date(self) -> str:
        """Exclusive end: start_date + duration."""
        return dates.add_days(self.start_date, self.duration)


@dataclass(frozen=True)
class WBSCategory:
    id: int | str
    name: str
    collapsed: bool = False


@dataclass(frozen=True)
class Engineer:
    id: str
    name: str
    color: str


@dataclass(frozen=True)
class Project:
    """A project and its owned WBS categories and tasks."""
    id: str
    name: str
    start_date: str
    end_date: Optional[str] = None
    holidays: frozenset[str] = frozenset()  # Render-only
    wbs: tuple[WBSCategory, ...] = ()
    tasks: tuple[Task, ...] = ()
    engineers: tuple[Engineer, ...] = ()
    client: str = ""
    budget_hours: float = 0.0
    status: str = "Active"
    manager: Optional[str] = None           # Engineer name allowed to reschedule

    def with_tasks(self, tasks) -> "Project":
        return replace(self, tasks=tuple(tasks))

    def category_names(self) -> list[str]:
        return [c.name for c in self.wbs]

    def assignee_color(self, task: Task) -> str:
        """Bar colour for a task: its engineer's colour, grey when unassigned."""
        for engineer in self.engineers:
            if engineer.id == task.assignee:
                return engineer.color
        return UNASSIGNED_COLOR


@dataclass(frozen=True)
class LogEntry:
    """A time-entry record. project_id is free text from the logging UI."""
    date: str
    engineer: str
    project_id: str
    hours: float
    task_id: Optional[str] = None
    log_id: Optional[int | str] = None
    note: str = ""


@dataclass(frozen=True)
class Viewer:
    """The authenticated caller, as reported by the auth collaborator."""
    name: str
    role: str = ROLE_ENGINEER

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def can_edit(viewer: Optional[Viewer], project: Project) -> bool:
    """Admins and the project's designated manager may reschedule tasks."""
    if viewer is None:
        return False
    if viewer.is_admin:
        return True
    return bool(project.manager) and viewer.name == project.manager

