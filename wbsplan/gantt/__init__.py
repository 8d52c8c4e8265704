"""Gantt timeline engine.

Pure layout functions (geometry, placement, rollup) plus the stateful
DragEngine. Layout is always computed from committed board state; the drag
engine's live offset only reaches the host through preview_placement().
"""

from wbsplan.gantt.geometry import (
    Custom,
    HeaderGroup,
    TimelineDay,
    TimelineGeometry,
    ViewMode,
    ViewPreset,
    compute_geometry,
    zoom,
)
from wbsplan.gantt.placement import BarPlacement, place_rollup, place_task
from wbsplan.gantt.rollup import Rollup, collapsed_rollups, rollup
from wbsplan.gantt.drag import (
    DelayCandidate,
    DragEngine,
    DragOutcome,
    DragSession,
    EmptyDelayReason,
    StaleDragCandidate,
)

__all__ = [
    # geometry
    "Custom",
    "HeaderGroup",
    "TimelineDay",
    "TimelineGeometry",
    "ViewMode",
    "ViewPreset",
    "compute_geometry",
    "zoom",
    # placement
    "BarPlacement",
    "place_rollup",
    "place_task",
    # rollup
    "Rollup",
    "collapsed_rollups",
    "rollup",
    # drag
    "DelayCandidate",
    "DragEngine",
    "DragOutcome",
    "DragSession",
    "EmptyDelayReason",
    "StaleDragCandidate",
]
