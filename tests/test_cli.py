"""Tests for the wbsplan command line."""

import json

import pytest

from wbsplan.cli import main

PROJECT = {
    "id": "P100",
    "name": "Bridge Retrofit",
    "budgetHours": 10,
    "startDate": "2025-01-01",
    "endDate": "2025-01-31",
    "wbs": [{"id": 1, "name": "Design", "collapsed": True}, {"id": 2, "name": "Build"}],
    "tasks": [
        {"id": 1, "title": "Survey", "category": "Design", "startDate": "2025-01-01", "duration": 5, "progress": 50},
        {"id": 2, "title": "Drawings", "category": "Design", "startDate": "2025-01-03", "duration": 1, "progress": 100},
    ],
}

LOGS = [
    {"date": "2025/06/10", "engineer": "Amy", "projectId": "p100", "hours": 4, "taskId": 1},
    {"date": "2025-06-11", "engineer": "Bo", "projectId": "P100", "hours": 5},
]


@pytest.fixture
def files(tmp_path):
    project = tmp_path / "project.json"
    project.write_text(json.dumps(PROJECT))
    logs = tmp_path / "logs.json"
    logs.write_text(json.dumps(LOGS))
    return tmp_path, project, logs


class TestCommands:
    """Each subcommand against small fixture files."""

    def test_rollup(self, files, capsys):
        _, project, _ = files
        assert main(["rollup", str(project)]) == 0
        out = capsys.readouterr().out
        assert "Design: 2025-01-01 .. 2025-01-06 (5d) 58%" in out
        assert "Build: no scheduled tasks" in out

    def test_geometry(self, files, capsys):
        config_dir, project, _ = files
        assert main(["-c", str(config_dir), "--no-color", "geometry", str(project), "--today", "2025-01-01"]) == 0
        out = capsys.readouterr().out
        assert "2024-12-17 .. 2025-03-01 (75 days)" in out
        assert "Today:        600px" in out
        assert "left=600 width=200" in out

    def test_geometry_week_view(self, files, capsys):
        config_dir, project, _ = files
        assert main(["-c", str(config_dir), "geometry", str(project), "--view", "week"]) == 0
        assert "Column width: 20px" in capsys.readouterr().out

    def test_labor(self, files, capsys):
        _, project, logs = files
        assert main(["labor", str(project), str(logs), "--week", "2025-06-12"]) == 0
        out = capsys.readouterr().out
        assert "2025-06-09 .. 2025-06-15" in out
        assert "Amy" in out and "Bo" in out
        assert out.strip().splitlines()[-1].split()[-1] == "9"

    def test_report(self, files, capsys):
        _, project, logs = files
        assert main(["report", str(logs), "--projects-file", str(project), "--project-id", "P100"]) == 0
        out = capsys.readouterr().out
        assert "Survey" in out
        assert "2 entries, 9h" in out

    def test_report_unknown_project(self, files, capsys):
        _, project, logs = files
        assert main(["report", str(logs), "--projects-file", str(project), "--project-id", "P999"]) == 1
        assert "not found" in capsys.readouterr().err

    def test_alerts(self, files, capsys):
        _, project, logs = files
        assert main(["--no-color", "alerts", str(project), str(logs)]) == 0
        assert "P100" in capsys.readouterr().out

    def test_no_alerts(self, files, capsys):
        _, project, logs = files
        assert main(["alerts", str(project), str(logs), "--threshold", "1.0"]) == 0
        assert "No projects over budget threshold." in capsys.readouterr().out


class TestErrors:
    """Bad input maps to exit code 2."""

    def test_missing_file(self, tmp_path, capsys):
        assert main(["rollup", str(tmp_path / "missing.json")]) == 2
        assert "ERROR" in capsys.readouterr().err

    def test_invalid_project(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"id": "P1"}))
        assert main(["rollup", str(path)]) == 2

    def test_bad_view_mode(self, files, capsys):
        config_dir, project, _ = files
        assert main(["-c", str(config_dir), "geometry", str(project), "--view", "fortnight"]) == 2
        assert "Unknown view mode" in capsys.readouterr().err

    def test_missing_subcommand(self):
        with pytest.raises(SystemExit):
            main([])


class TestConfigDir:
    def test_sidebar_width_from_config(self, files, capsys):
        config_dir, project, _ = files
        (config_dir / "wbsplan.env").write_text("SIDEBAR_WIDTH=300\n")
        assert main(["-c", str(config_dir), "geometry", str(project), "--today", "2025-01-01"]) == 0
        assert "Content width: 3300px (sidebar 300px)" in capsys.readouterr().out
