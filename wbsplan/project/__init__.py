"""
Project records: models, the in-memory editing board, and record loading.
"""

from wbsplan.project.models import Engineer, LogEntry, Project, Task, Viewer, WBSCategory, can_edit
from wbsplan.project.board import (
    TaskBoard,
    TaskNotFound,
    CategoryNotFound,
    DuplicateCategory,
)

__all__ = [
    "Engineer",
    "LogEntry",
    "Project",
    "Task",
    "Viewer",
    "WBSCategory",
    "can_edit",
    "TaskBoard",
    "TaskNotFound",
    "CategoryNotFound",
    "DuplicateCategory",
]
