"""Drag-to-reschedule state machine using transitions library.

States:
- idle: no gesture in progress
- dragging: pointer is down on a bar; moves only change a visual offset
- pending_delay_confirmation: the drop would push the task's end date later
  and is held until the caller supplies a reason or discards it

Nothing is written to the TaskBoard until a drop commits (non-delaying move)
or a delay is confirmed, so discarding or aborting only drops the session.
Edits made to the board while a gesture is open are kept; a task deleted
mid-gesture ends the gesture without a commit.

Usage:
    from wbsplan.gantt.drag import DragEngine

    engine = DragEngine(board)
    session = engine.begin_drag(task_id, pointer_x=100, viewer=viewer,
                                column_width=geometry.column_width)
    engine.update_drag(session, pointer_x=180)
    outcome = engine.end_drag(session)
    if outcome.delay_detected:
        engine.confirm_delay(outcome.candidate, "Vendor shipped late")
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional

from transitions import Machine

from wbsplan.gantt.geometry import TimelineGeometry
from wbsplan.gantt.placement import BarPlacement, place_task
from wbsplan.lib import dates
from wbsplan.lib.config import DEFAULT_CONFIG, EditorConfig
from wbsplan.project.board import TaskBoard, TaskNotFound
from wbsplan.project.models import Task, Viewer, can_edit

logger = logging.getLogger(__name__)


STATES = [
    "idle",
    "dragging",
    "pending_delay_confirmation",
]

# Transitions defined as (trigger, source, dest)
TRANSITIONS = [
    # Authorized pointer-down on a bar
    {"trigger": "grab", "source": "idle", "dest": "dragging"},

    # Drop: no change, or a non-delaying move committed immediately
    {"trigger": "settle", "source": "dragging", "dest": "idle"},

    # Drop that pushes the end date later
    {"trigger": "hold_for_reason", "source": "dragging", "dest": "pending_delay_confirmation"},

    # Delay resolution
    {"trigger": "confirm", "source": "pending_delay_confirmation", "dest": "idle"},
    {"trigger": "discard", "source": "pending_delay_confirmation", "dest": "idle"},

    # Lost pointer-up, focus loss, escape key
    {"trigger": "abort", "source": "dragging", "dest": "idle"},
    {"trigger": "abort", "source": "pending_delay_confirmation", "dest": "idle"},
]


class EmptyDelayReason(ValueError):
    """A delaying move was confirmed without a justification."""

    def __init__(self, task_id: int):
        self.task_id = task_id
        super().__init__(f"A delay reason is required to reschedule task {task_id}")


class StaleDragCandidate(Exception):
    """Confirm/discard for a candidate that is not the one pending."""

    def __init__(self, task_id: int, state: str):
        self.task_id = task_id
        self.state = state
        super().__init__(f"No pending delay for task {task_id} (engine is {state})")


@dataclass
class DragSession:
    """Transient state of one pointer gesture."""
    task: Task                  # Snapshot captured at pointer-down
    pointer_start: int
    original_start: str
    column_width: int
    offset_px: int = 0


@dataclass(frozen=True)
class DelayCandidate:
    """A held reschedule awaiting a reason."""
    task_id: int
    original_task: Task
    candidate_start: str
    days_delta: int

    @property
    def original_end(self) -> str:
        return self.original_task.end_date

    @property
    def candidate_end(self) -> str:
        return dates.add_days(self.candidate_start, self.original_task.duration)


@dataclass(frozen=True)
class DragOutcome:
    committed: bool
    delay_detected: bool
    candidate: Optional[DelayCandidate] = None
    task: Optional[Task] = None     # Committed task value, when committed


def snap_days(offset_px: int, column_width: int, mode: str = "trunc") -> int:
    """Convert a pixel offset into whole days.

    trunc: only complete columns count, in either direction.
    round: nearest day, halves rounded up.
    """
    ratio = offset_px / column_width
    if mode == "round":
        return int(math.floor(ratio + 0.5))
    return int(ratio)


class DragEngine:
    """Runs the drag protocol against a TaskBoard.

    Only one gesture exists at a time; begin_drag refuses while another
    session is dragging or waiting for a delay reason.
    """

    def __init__(
        self,
        board: TaskBoard,
        config: EditorConfig = DEFAULT_CONFIG,
        on_transition: Callable[[str, str, str], None] | None = None,
    ):
        self.board = board
        self.config = config
        self.on_transition = on_transition
        self.session: Optional[DragSession] = None
        self.pending: Optional[DelayCandidate] = None

        self.machine = Machine(
            model=self,
            states=STATES,
            transitions=TRANSITIONS,
            initial="idle",
            auto_transitions=False,
            send_event=True,
            after_state_change="on_state_change",
        )

    def on_state_change(self, event) -> None:
        from_state = event.transition.source
        to_state = event.transition.dest
        trigger = event.event.name

        logger.info(f"[DRAG] {from_state} -> {to_state} ({trigger})")

        if self.on_transition:
            self.on_transition(from_state, to_state, trigger)

    def can(self, trigger: str) -> bool:
        """Check if a trigger can be executed in current state."""
        return trigger in self.machine.get_triggers(self.state)

    def _reset(self) -> None:
        self.session = None
        self.pending = None

    # ------------------------------------------------------------------
    # Gesture
    # ------------------------------------------------------------------

    def begin_drag(
        self,
        task_id: int,
        pointer_x: int,
        viewer: Optional[Viewer],
        column_width: int,
    ) -> Optional[DragSession]:
        """Start a gesture on a task bar.

        column_width is the width the bar is currently painted at (the live
        zoom level, e.g. ``geometry.column_width``); the drop is snapped
        against it.

        Returns None without creating a session when the viewer may not edit
        (silently, read-only viewers just can't drag) or when another
        gesture is still unresolved.
        """
        if int(column_width) <= 0:
            raise ValueError(f"Column width must be positive, got {column_width}")
        if not can_edit(viewer, self.board.project):
            logger.debug(f"[DRAG] Ignoring pointer-down on task {task_id}: viewer cannot edit")
            return None
        if self.state != "idle":
            logger.warning(f"[DRAG] Ignoring pointer-down on task {task_id}: engine is {self.state}")
            return None

        task = self.board.get_task(task_id)
        self.session = DragSession(
            task=task,
            pointer_start=int(pointer_x),
            original_start=task.start_date,
            column_width=int(column_width),
        )
        self.grab()
        return self.session

    def update_drag(self, session: DragSession, pointer_x: int) -> int:
        """Track the pointer. Visual only; returns the live pixel offset."""
        if session is None or session is not self.session or self.state != "dragging":
            return 0
        session.offset_px = int(pointer_x) - session.pointer_start
        return session.offset_px

    def end_drag(self, session: DragSession) -> DragOutcome:
        """Pointer-up: commit, hold for a delay reason, or do nothing."""
        if session is None or session is not self.session or self.state != "dragging":
            task_id = session.task.id if session is not None else None
            logger.warning(f"[DRAG] end_drag for task {task_id} without an active gesture")
            return DragOutcome(committed=False, delay_detected=False)

        days_delta = snap_days(session.offset_px, session.column_width, self.config.drag_snap)
        try:
            task = self.board.get_task(session.task.id)
        except TaskNotFound:
            logger.warning(f"[DRAG] Task {session.task.id} was deleted during the drag, nothing committed")
            self._reset()
            self.settle()
            return DragOutcome(committed=False, delay_detected=False)

        if days_delta == 0:
            logger.debug(f"[DRAG] Task {task.id} dropped in place ({session.offset_px}px)")
            self._reset()
            self.settle()
            return DragOutcome(committed=False, delay_detected=False)

        candidate_start = dates.add_days(session.original_start, days_delta)
        candidate_end = dates.parse_local_date(dates.add_days(candidate_start, task.duration))

        if candidate_end > dates.parse_local_date(task.end_date):
            self.pending = DelayCandidate(
                task_id=task.id,
                original_task=task,
                candidate_start=candidate_start,
                days_delta=days_delta,
            )
            self.session = None
            self.hold_for_reason()
            return DragOutcome(committed=False, delay_detected=True, candidate=self.pending)

        committed = self.board.update_task(task.id, start_date=candidate_start)
        logger.info(f"[DRAG] Task {task.id} moved {task.start_date} -> {candidate_start}")
        self._reset()
        self.settle()
        return DragOutcome(committed=True, delay_detected=False, task=committed)

    # ------------------------------------------------------------------
    # Delay resolution
    # ------------------------------------------------------------------

    def _check_pending(self, candidate: DelayCandidate) -> None:
        if self.state != "pending_delay_confirmation" or candidate is not self.pending:
            raise StaleDragCandidate(candidate.task_id, self.state)

    def confirm_delay(self, candidate: DelayCandidate, reason: str) -> Optional[Task]:
        """Commit a held delay with its justification.

        Only start_date and delay_reason are written; other fields keep any
        edits made while the delay was pending. Returns None (and goes back
        to idle) when the task was deleted in the meantime.

        Raises:
            EmptyDelayReason: reason is empty or whitespace; nothing changes
                and the candidate stays pending.
            StaleDragCandidate: candidate is not the pending one.
        """
        self._check_pending(candidate)
        if reason is None or not reason.strip():
            raise EmptyDelayReason(candidate.task_id)

        try:
            task = self.board.update_task(
                candidate.task_id,
                start_date=candidate.candidate_start,
                delay_reason=reason.strip(),
            )
        except TaskNotFound:
            logger.warning(f"[DRAG] Task {candidate.task_id} was deleted before its delay was confirmed")
            self._reset()
            self.discard()
            return None

        logger.info(
            f"[DRAG] Task {task.id} delayed {candidate.original_task.start_date} -> "
            f"{candidate.candidate_start}: {task.delay_reason}"
        )
        self._reset()
        self.confirm()
        return task

    def discard_delay(self, candidate: DelayCandidate) -> None:
        """Drop a held delay. The board was never touched, so nothing is restored."""
        self._check_pending(candidate)
        logger.debug(f"[DRAG] Delay for task {candidate.task_id} discarded")
        self._reset()
        self.discard()

    def abort_drag(self, session: DragSession | None = None) -> None:
        """Cancel whatever gesture is unresolved. No-op when idle."""
        if self.state == "idle":
            return
        if session is not None and self.state == "dragging" and session is not self.session:
            logger.debug("[DRAG] abort_drag for a stale session ignored")
            return

        self._reset()
        self.abort()

    # ------------------------------------------------------------------
    # Host painting
    # ------------------------------------------------------------------

    def preview_placement(self, task: Task, geometry: TimelineGeometry) -> BarPlacement:
        """Where to paint a bar right now, including the uncommitted gesture."""
        offset = 0
        if self.session is not None and self.session.task.id == task.id:
            offset = self.session.offset_px
        elif self.pending is not None and self.pending.task_id == task.id:
            offset = self.pending.days_delta * geometry.column_width
        return place_task(task, geometry, drag_offset=offset)
