"""Bar placement on the timeline."""

from dataclasses import dataclass

from wbsplan.gantt.geometry import TimelineGeometry
from wbsplan.gantt.rollup import Rollup
from wbsplan.project.models import Task


@dataclass(frozen=True)
class BarPlacement:
    left: int
    width: int

    @property
    def right(self) -> int:
        return self.left + self.width


def bar_width(duration: int, column_width: int) -> int:
    # Never thinner than one column, so the bar stays grabbable
    return max(column_width, duration * column_width)


def place_task(task: Task, geometry: TimelineGeometry, drag_offset: int = 0) -> BarPlacement:
    """Position a task bar; drag_offset is the live, uncommitted pointer delta."""
    return BarPlacement(
        left=geometry.pixel_offset(task.start_date) + drag_offset,
        width=bar_width(task.duration, geometry.column_width),
    )


def place_rollup(summary: Rollup, geometry: TimelineGeometry) -> BarPlacement:
    return BarPlacement(
        left=geometry.pixel_offset(summary.start),
        width=bar_width(summary.duration, geometry.column_width),
    )
