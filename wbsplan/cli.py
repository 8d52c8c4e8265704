#!/usr/bin/env python3
"""wbsplan CLI entrypoint."""

import argparse
import logging
import sys
from pathlib import Path

from wbsplan.gantt.geometry import compute_geometry, parse_view_mode
from wbsplan.gantt.placement import place_rollup, place_task
from wbsplan.gantt.rollup import rollup
from wbsplan.labor import report
from wbsplan.labor.weekly import column_totals, grand_total, row_totals, week_days, weekly_labor_aggregate
from wbsplan.lib import dates
from wbsplan.lib.config import load_editor_config
from wbsplan.lib.validate import ValidationError
from wbsplan.project.loader import load_logs, load_project, load_projects

COLORS = {
    "reset": "\033[0m",
    "dim": "\033[2m",
    "bold": "\033[1m",
    "red": "\033[31m",
    "yellow": "\033[33m",
}


def _paint(text: str, color: str, colorize: bool) -> str:
    if not colorize:
        return text
    return f"{COLORS[color]}{text}{COLORS['reset']}"


def _colorize(args) -> bool:
    return not args.no_color and sys.stdout.isatty()


def _config(args):
    return load_editor_config(Path(args.config_dir) if args.config_dir else Path.cwd())


def cmd_geometry(args):
    """Print the render window, header groups and bar placements."""
    config = _config(args)
    project = load_project(Path(args.project_file))
    mode = parse_view_mode(args.view, config)
    today = dates.parse_local_date(args.today, strict=True) if args.today else None
    geometry = compute_geometry(project, view_mode=mode, today=today, config=config)
    colorize = _colorize(args)

    print(f"Project:      {project.name} ({project.id})")
    print(f"Window:       {geometry.render_start} .. {geometry.render_end} ({len(geometry.days)} days)")
    print(f"Column width: {geometry.column_width}px   Total width: {geometry.total_width}px")
    print(f"Content width: {geometry.content_width(config.sidebar_width)}px (sidebar {config.sidebar_width}px)")
    if geometry.today_offset is None:
        print("Today:        outside window")
    else:
        print(f"Today:        {geometry.today_offset}px")
    print()

    print(_paint("Months:", "bold", colorize))
    for group in geometry.header_groups:
        print(f"  {group.label}  {group.days:>3} days  {group.width:>6}px")
    print()

    for category in project.wbs:
        summary = rollup(project.tasks, category.name)
        marker = "+" if category.collapsed else "-"
        print(_paint(f"[{marker}] {category.name}", "bold", colorize))
        if category.collapsed:
            if summary is not None:
                bar = place_rollup(summary, geometry)
                print(f"    {summary.start} .. {summary.end}  {summary.progress:>3}%  left={bar.left} width={bar.width}")
            continue
        for task in project.tasks:
            if task.category != category.name:
                continue
            bar = place_task(task, geometry)
            line = f"    #{task.id:<4} {task.title:<24} {task.start_date} +{task.duration}d  left={bar.left} width={bar.width}"
            if task.delay_reason:
                line += _paint(f"  delayed: {task.delay_reason}", "yellow", colorize)
            print(line)
    return 0


def cmd_rollup(args):
    project = load_project(Path(args.project_file))
    names = [args.category] if args.category else project.category_names()
    for name in names:
        summary = rollup(project.tasks, name)
        if summary is None:
            print(f"{name}: no scheduled tasks")
        else:
            print(f"{name}: {summary.start} .. {summary.end} ({summary.duration}d) {summary.progress}%")
    return 0


def cmd_labor(args):
    """Weekly engineer x day hours table for one project."""
    project = load_project(Path(args.project_file))
    logs = load_logs(Path(args.logs_file))
    reference = args.week or dates.today_str()
    days = week_days(reference)
    weekly = weekly_labor_aggregate(logs, project, reference)

    print(f"{project.name}: week {dates.iso_week(days[0])} ({days[0]} .. {days[-1]})")
    header = f"{'Engineer':<16}" + "".join(f"{d[5:]:>7}" for d in days) + f"{'Total':>8}"
    print(header)
    totals = row_totals(weekly)
    for engineer in sorted(weekly):
        cells = "".join(f"{report.round_hours(weekly[engineer].get(d, 0.0)):>7g}" for d in days)
        print(f"{engineer:<16}{cells}{report.round_hours(totals[engineer]):>8g}")
    per_day = column_totals(weekly, days)
    cells = "".join(f"{report.round_hours(per_day[d]):>7g}" for d in days)
    print(f"{'Total':<16}{cells}{report.round_hours(grand_total(weekly)):>8g}")
    return 0


def cmd_report(args):
    """Detailed log listing with filters."""
    logs = load_logs(Path(args.logs_file))
    projects = load_projects(Path(args.projects_file)) if args.projects_file else []
    project = None
    if args.project_id:
        project = next((p for p in projects if p.id == args.project_id), None)
        if project is None:
            print(f"ERROR: Project '{args.project_id}' not found.", file=sys.stderr)
            return 1

    selected = report.filter_logs(logs, project, args.start, args.end, args.engineer)
    for log in selected:
        title = report.resolve_task_title(log, projects)
        print(f"{dates.normalize_date_str(log.date)}  {log.engineer:<12} [{log.project_id}] {title:<24} {log.hours:>5g}h  {log.note}")
    total = report.round_hours(sum(log.hours for log in selected))
    print(f"{len(selected)} entries, {total:g}h")
    return 0


def cmd_alerts(args):
    """Projects whose logged hours exceed the budget threshold."""
    projects = load_projects(Path(args.projects_file))
    logs = load_logs(Path(args.logs_file))
    colorize = _colorize(args)
    alerts = report.budget_alerts(logs, projects, args.threshold)
    if not alerts:
        print("No projects over budget threshold.")
        return 0
    for usage in alerts:
        color = "red" if usage.usage > 1 else "yellow"
        print(_paint(
            f"{usage.project_id:<10} {usage.name:<24} {usage.actual_hours:g}/{usage.budget_hours:g}h ({usage.usage:.0%})",
            color, colorize,
        ))
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(prog='wbsplan', description='Gantt/WBS planning engine')
    parser.add_argument('--config-dir', '-c', help='Directory holding wbsplan.env (default: cwd)')
    parser.add_argument('--no-color', action='store_true', help='Disable ANSI colors')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')
    subparsers = parser.add_subparsers(dest='command', required=True)

    # wbsplan geometry
    p_geometry = subparsers.add_parser('geometry', help='Show timeline layout for a project')
    p_geometry.add_argument('project_file', help='Project JSON/YAML file')
    p_geometry.add_argument('--view', default='day', help='day, week, month or a column width')
    p_geometry.add_argument('--today', help='Reference date for the today marker')
    p_geometry.set_defaults(func=cmd_geometry)

    # wbsplan rollup
    p_rollup = subparsers.add_parser('rollup', help='Summarize WBS categories')
    p_rollup.add_argument('project_file', help='Project JSON/YAML file')
    p_rollup.add_argument('--category', help='Only this category')
    p_rollup.set_defaults(func=cmd_rollup)

    # wbsplan labor
    p_labor = subparsers.add_parser('labor', help='Weekly labor hours for a project')
    p_labor.add_argument('project_file', help='Project JSON/YAML file')
    p_labor.add_argument('logs_file', help='Log records JSON/YAML file')
    p_labor.add_argument('--week', help='Any date in the week (default: today)')
    p_labor.set_defaults(func=cmd_labor)

    # wbsplan report
    p_report = subparsers.add_parser('report', help='Detailed labor report')
    p_report.add_argument('logs_file', help='Log records JSON/YAML file')
    p_report.add_argument('--projects-file', help='Projects JSON/YAML file (for names and task titles)')
    p_report.add_argument('--project-id', help='Only logs for this project')
    p_report.add_argument('--from', dest='start', help='Start date (inclusive)')
    p_report.add_argument('--to', dest='end', help='End date (inclusive)')
    p_report.add_argument('--engineer', help='Only this engineer')
    p_report.set_defaults(func=cmd_report)

    # wbsplan alerts
    p_alerts = subparsers.add_parser('alerts', help='Projects near or over budget')
    p_alerts.add_argument('projects_file', help='Projects JSON/YAML file')
    p_alerts.add_argument('logs_file', help='Log records JSON/YAML file')
    p_alerts.add_argument('--threshold', type=float, default=report.BUDGET_ALERT_THRESHOLD,
                          help='Share of budget that triggers an alert (default 0.8)')
    p_alerts.set_defaults(func=cmd_alerts)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        return args.func(args)
    except (ValidationError, FileNotFoundError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2


if __name__ == '__main__':
    sys.exit(main())
