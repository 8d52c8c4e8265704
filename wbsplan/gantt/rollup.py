"""
WBS rollup: one summary bar for a collapsed category.

Progress is weighted by duration, so long tasks dominate the summary.
"""

import math
from dataclasses import dataclass
from typing import Iterable, Optional

from wbsplan.lib import dates
from wbsplan.project.models import Project, Task


@dataclass(frozen=True)
class Rollup:
    start: str      # Earliest task start
    end: str        # Latest task end (exclusive)
    progress: int   # Duration-weighted, 0-100

    @property
    def duration(self) -> int:
        return dates.day_diff(self.start, self.end)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def rollup(tasks: Iterable[Task], category_name: str) -> Optional[Rollup]:
    """Summarize a category's tasks, or None when none have a usable schedule."""
    eligible = [
        t for t in tasks
        if t.category == category_name and t.start_date and t.duration > 0
    ]
    if not eligible:
        return None

    start = min(dates.parse_local_date(t.start_date) for t in eligible)
    end = max(dates.parse_local_date(t.end_date) for t in eligible)
    total_days = sum(t.duration for t in eligible)
    weighted = sum(t.duration * t.progress for t in eligible)

    return Rollup(
        start=dates.format_date(start),
        end=dates.format_date(end),
        progress=round_half_up(weighted / total_days),
    )


def collapsed_rollups(project: Project) -> dict[str, Optional[Rollup]]:
    """Rollups for every collapsed category (None entries are not drawn)."""
    return {
        category.name: rollup(project.tasks, category.name)
        for category in project.wbs
        if category.collapsed
    }
