"""
Timeline geometry: maps a project's date span onto a grid of day columns.

The render window starts ``lead_days`` before the project start and runs
``tail_days`` past the later of the project end date or the latest task end.
Its length is clamped to ``[min_span_days, max_span_days]``.

Everything here is a pure function of (project, column width, config, today);
hosts recompute geometry whenever one of those inputs changes.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum

from wbsplan.lib import dates
from wbsplan.lib.config import DEFAULT_CONFIG, EditorConfig
from wbsplan.project.models import Project


class ViewPreset(Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


@dataclass(frozen=True)
class Custom:
    """Manual zoom level, decoupled from the presets."""
    width: int


ViewMode = ViewPreset | Custom


def preset_width(preset: ViewPreset, config: EditorConfig = DEFAULT_CONFIG) -> int:
    return {
        ViewPreset.DAY: config.day_column_width,
        ViewPreset.WEEK: config.week_column_width,
        ViewPreset.MONTH: config.month_column_width,
    }[preset]


def clamp_column_width(width: int, config: EditorConfig = DEFAULT_CONFIG) -> int:
    return max(config.min_column_width, min(config.max_column_width, int(width)))


def column_width_for(mode: ViewMode, config: EditorConfig = DEFAULT_CONFIG) -> int:
    if isinstance(mode, Custom):
        return clamp_column_width(mode.width, config)
    return preset_width(mode, config)


def parse_view_mode(value: str, config: EditorConfig = DEFAULT_CONFIG) -> ViewMode:
    """Parse 'day' / 'week' / 'month' or a numeric custom width."""
    text = str(value).strip().lower()
    for preset in ViewPreset:
        if preset.value == text:
            return preset
    try:
        return Custom(clamp_column_width(int(text), config))
    except ValueError:
        raise ValueError(f"Unknown view mode '{value}'. Use day, week, month or a width") from None


def zoom(mode: ViewMode, delta: int | None = None, config: EditorConfig = DEFAULT_CONFIG) -> Custom:
    """Widen (positive delta) or narrow columns. Always leaves preset mode."""
    step = config.zoom_step if delta is None else delta
    return Custom(clamp_column_width(column_width_for(mode, config) + step, config))


@dataclass(frozen=True)
class TimelineDay:
    date: str
    weekday: int            # Monday=0 .. Sunday=6
    label: int              # Day of month
    iso_week: int
    is_weekend: bool
    is_holiday: bool        # Cosmetic only

    @property
    def is_off(self) -> bool:
        return self.is_weekend or self.is_holiday


@dataclass(frozen=True)
class HeaderGroup:
    """A merged header cell spanning contiguous days."""
    key: tuple[int, int]    # (year, month) or (iso_year, iso_week)
    label: str
    days: int
    width: int


@dataclass(frozen=True)
class TimelineGeometry:
    render_start: str
    column_width: int
    view_mode: ViewMode
    days: tuple[TimelineDay, ...]
    header_groups: tuple[HeaderGroup, ...]
    week_groups: tuple[HeaderGroup, ...]
    total_width: int
    today_offset: int | None    # None: today is outside the window, don't draw

    @property
    def render_end(self) -> str:
        """Last date in the window (inclusive)."""
        return self.days[-1].date

    def pixel_offset(self, day) -> int:
        return pixel_offset(self.render_start, day, self.column_width)

    def date_at(self, px: int) -> str:
        """Date of the column containing pixel ``px``."""
        return dates.add_days(self.render_start, int(px) // self.column_width)

    def content_width(self, sidebar_width: int) -> int:
        return sidebar_width + self.total_width


def pixel_offset(render_start, day, column_width: int) -> int:
    return dates.day_diff(render_start, day) * column_width


def render_window(project: Project, config: EditorConfig = DEFAULT_CONFIG) -> tuple[date, int]:
    """Return (render_start, number_of_days) for a project."""
    start = dates.parse_local_date(project.start_date)
    render_start = start - timedelta(days=config.lead_days)

    latest = start
    if project.end_date:
        latest = max(latest, dates.parse_local_date(project.end_date))
    for task in project.tasks:
        if task.start_date:
            task_end = dates.parse_local_date(task.start_date) + timedelta(days=max(task.duration, 1))
            latest = max(latest, task_end)

    span = (latest - render_start).days + config.tail_days
    span = max(config.min_span_days, min(config.max_span_days, span))
    return render_start, span


def _month_groups(days: list[TimelineDay], column_width: int) -> list[HeaderGroup]:
    groups: list[HeaderGroup] = []
    for day in days:
        key = (int(day.date[:4]), int(day.date[5:7]))
        if groups and groups[-1].key == key:
            last = groups[-1]
            groups[-1] = HeaderGroup(key, last.label, last.days + 1, last.width + column_width)
        else:
            groups.append(HeaderGroup(key, f"{key[0]}-{key[1]:02d}", 1, column_width))
    return groups


def _week_groups(days: list[TimelineDay], column_width: int) -> list[HeaderGroup]:
    groups: list[HeaderGroup] = []
    for day in days:
        iso_year = dates.parse_local_date(day.date).isocalendar()[0]
        key = (iso_year, day.iso_week)
        if groups and groups[-1].key == key:
            last = groups[-1]
            groups[-1] = HeaderGroup(key, last.label, last.days + 1, last.width + column_width)
        else:
            groups.append(HeaderGroup(key, f"W{day.iso_week:02d}", 1, column_width))
    return groups


def compute_geometry(
    project: Project,
    column_width: int | None = None,
    view_mode: ViewMode = ViewPreset.DAY,
    today: date | None = None,
    config: EditorConfig = DEFAULT_CONFIG,
) -> TimelineGeometry:
    """
    Materialize the render window for a project.

    Args:
        project: Committed project snapshot
        column_width: Pixels per day; derived from view_mode when omitted
        view_mode: Day / Week / Month preset or Custom(width)
        today: Reference for the today marker (defaults to date.today())
        config: Editor settings
    """
    if column_width is None:
        column_width = column_width_for(view_mode, config)
    column_width = clamp_column_width(column_width, config)

    render_start, span = render_window(project, config)
    holidays = {dates.normalize_date_str(h) for h in project.holidays}

    days = []
    for i in range(span):
        d = render_start + timedelta(days=i)
        day_str = dates.format_date(d)
        days.append(TimelineDay(
            date=day_str,
            weekday=d.weekday(),
            label=d.day,
            iso_week=dates.iso_week(d),
            is_weekend=d.weekday() >= 5,
            is_holiday=day_str in holidays,
        ))

    today = today or date.today()
    today_diff = (today - render_start).days
    today_offset = today_diff * column_width if 0 <= today_diff < span else None

    return TimelineGeometry(
        render_start=dates.format_date(render_start),
        column_width=column_width,
        view_mode=view_mode,
        days=tuple(days),
        header_groups=tuple(_month_groups(days, column_width)),
        week_groups=tuple(_week_groups(days, column_width)),
        total_width=span * column_width,
        today_offset=today_offset,
    )
