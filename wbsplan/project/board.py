"""
In-memory editing board for one project.

The board owns the task collection (indexed by id) and the WBS categories.
All edits happen here; nothing is persisted until the host hands
``board.project`` to the persistence collaborator at an explicit save.

Delete policy for WBS categories:
- ``orphan`` (default): tasks keep their category name and show up in
  ``orphaned_tasks()`` until reassigned.
- ``cascade``: tasks in the category are deleted with it.
"""

import logging
from dataclasses import replace

from wbsplan.lib import dates
from wbsplan.lib.constants import ENGINEER_PALETTE, PROJECT_STATUSES
from wbsplan.project.models import Engineer, Project, Task, WBSCategory

logger = logging.getLogger(__name__)

DELETE_POLICIES = ("orphan", "cascade")

DEFAULT_TASK_TITLE = "New task"
DEFAULT_MEMBER_NAME = "New member"

# Project fields the board owns; update_project cannot set them directly
OWNED_FIELDS = frozenset({"tasks", "wbs", "engineers", "holidays"})


class TaskNotFound(KeyError):
    def __init__(self, task_id):
        self.task_id = task_id
        super().__init__(f"Task not found: {task_id}")


class CategoryNotFound(KeyError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"WBS category not found: {name!r}")


class DuplicateCategory(ValueError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"WBS category already exists: {name!r}")


def _check_task_fields(duration: int, progress: int) -> None:
    if int(duration) < 1:
        raise ValueError(f"Task duration must be at least 1 day, got {duration}")
    if not 0 <= int(progress) <= 100:
        raise ValueError(f"Task progress must be within 0-100, got {progress}")


class TaskBoard:
    """Owned, indexed task collection plus WBS category editing."""

    def __init__(self, project: Project):
        self._project = project
        self._tasks: dict[int, Task] = {t.id: t for t in project.tasks}
        self._categories: list[WBSCategory] = list(project.wbs)
        self._engineers: list[Engineer] = list(project.engineers)
        self._holidays: set[str] = set(project.holidays)
        # Ids are never reused, even after the highest one is deleted
        self._next_id = max(self._tasks, default=0) + 1
        self._next_category_id = max(
            (c.id for c in self._categories if isinstance(c.id, int)), default=0
        ) + 1

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    @property
    def project(self) -> Project:
        """Committed project state."""
        return replace(
            self._project,
            tasks=tuple(self._tasks.values()),
            wbs=tuple(self._categories),
            engineers=tuple(self._engineers),
            holidays=frozenset(self._holidays),
        )

    def snapshot(self) -> tuple[Task, ...]:
        return tuple(self._tasks.values())

    def update_project(self, **changes) -> Project:
        """Change project-level fields such as start_date, end_date or name."""
        owned = OWNED_FIELDS.intersection(changes)
        if owned:
            raise ValueError(
                f"{', '.join(sorted(owned))} are edited through the board, not update_project"
            )
        status = changes.get("status")
        if status is not None and status not in PROJECT_STATUSES:
            raise ValueError(f"Unknown project status '{status}'")
        for key in ("start_date", "end_date"):
            if changes.get(key):
                changes[key] = dates.format_date(dates.parse_local_date(changes[key], strict=True))
        self._project = replace(self._project, **changes)
        return self.project

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    def get_task(self, task_id: int) -> Task:
        try:
            return self._tasks[task_id]
        except KeyError:
            raise TaskNotFound(task_id) from None

    def tasks_in(self, category: str) -> list[Task]:
        return [t for t in self._tasks.values() if t.category == category]

    def add_task(self, title: str = DEFAULT_TASK_TITLE, **fields) -> Task:
        """Add a task with project defaults and a fresh id."""
        fields.pop("id", None)
        fields.setdefault("start_date", self._project.start_date)
        fields.setdefault("duration", 1)
        fields.setdefault("progress", 0)
        fields.setdefault("category", self._categories[0].name if self._categories else "")
        _check_task_fields(fields["duration"], fields["progress"])

        task = Task(id=self._next_id, title=title, **fields)
        self._next_id += 1
        self._tasks[task.id] = task
        logger.debug(f"[BOARD] Added task {task.id} '{task.title}'")
        return task

    def update_task(self, task_id: int, **changes) -> Task:
        """Replace fields of a task in place, keeping its position in the list."""
        if "id" in changes and changes["id"] != task_id:
            raise ValueError("Task id is immutable")
        task = self.get_task(task_id)
        updated = replace(task, **changes)
        _check_task_fields(updated.duration, updated.progress)
        self._tasks[task_id] = updated
        return updated

    def delete_task(self, task_id: int) -> Task:
        task = self.get_task(task_id)
        del self._tasks[task_id]
        logger.debug(f"[BOARD] Deleted task {task_id}")
        return task

    # ------------------------------------------------------------------
    # WBS categories
    # ------------------------------------------------------------------

    @property
    def categories(self) -> tuple[WBSCategory, ...]:
        return tuple(self._categories)

    def _category_index(self, name: str) -> int:
        for i, category in enumerate(self._categories):
            if category.name == name:
                return i
        raise CategoryNotFound(name)

    def add_category(self, name: str) -> WBSCategory:
        name = name.strip()
        if not name:
            raise ValueError("WBS category name must not be empty")
        if any(c.name == name for c in self._categories):
            raise DuplicateCategory(name)
        category = WBSCategory(id=self._next_category_id, name=name)
        self._next_category_id += 1
        self._categories.append(category)
        return category

    def rename_category(self, old_name: str, new_name: str) -> int:
        """Rename a category and every task referencing it. Returns tasks touched."""
        new_name = new_name.strip()
        if not new_name:
            raise ValueError("WBS category name must not be empty")
        index = self._category_index(old_name)
        if new_name == old_name:
            return 0
        if any(c.name == new_name for c in self._categories):
            raise DuplicateCategory(new_name)

        self._categories[index] = replace(self._categories[index], name=new_name)
        touched = 0
        for task_id, task in self._tasks.items():
            if task.category == old_name:
                self._tasks[task_id] = replace(task, category=new_name)
                touched += 1
        logger.info(f"[BOARD] Renamed WBS '{old_name}' -> '{new_name}' ({touched} tasks)")
        return touched

    def delete_category(self, name: str, policy: str = "orphan") -> list[Task]:
        """Delete a category. Returns the tasks that were orphaned or removed."""
        if policy not in DELETE_POLICIES:
            raise ValueError(f"Unknown delete policy '{policy}'. Valid: {', '.join(DELETE_POLICIES)}")
        index = self._category_index(name)
        del self._categories[index]

        affected = self.tasks_in(name)
        if policy == "cascade":
            for task in affected:
                del self._tasks[task.id]
        logger.info(f"[BOARD] Deleted WBS '{name}' ({len(affected)} tasks, policy={policy})")
        return affected

    def toggle_collapsed(self, name: str) -> bool:
        index = self._category_index(name)
        category = self._categories[index]
        self._categories[index] = replace(category, collapsed=not category.collapsed)
        return not category.collapsed

    def orphaned_tasks(self) -> list[Task]:
        names = {c.name for c in self._categories}
        return [t for t in self._tasks.values() if t.category not in names]

    # ------------------------------------------------------------------
    # Holidays and team
    # ------------------------------------------------------------------

    def toggle_holiday(self, day) -> bool:
        """Mark or unmark a holiday. Returns True if the day is now a holiday."""
        key = dates.format_date(dates.parse_local_date(day, strict=True))
        if key in self._holidays:
            self._holidays.remove(key)
            return False
        self._holidays.add(key)
        return True

    def add_engineer(self, name: str = DEFAULT_MEMBER_NAME) -> Engineer:
        n = len(self._engineers)
        existing = {e.id for e in self._engineers}
        engineer_id = f"e{n + 1}"
        while engineer_id in existing:
            n += 1
            engineer_id = f"e{n + 1}"
        engineer = Engineer(
            id=engineer_id,
            name=name,
            color=ENGINEER_PALETTE[len(self._engineers) % len(ENGINEER_PALETTE)],
        )
        self._engineers.append(engineer)
        return engineer

    def remove_engineer(self, engineer_id: str) -> None:
        self._engineers = [e for e in self._engineers if e.id != engineer_id]
