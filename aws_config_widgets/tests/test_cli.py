"""Tests for the local preview command line interface."""

from __future__ import annotations

import json
import sys
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


import pytest

from aws_config_widgets import cli
from aws_config_widgets.tests.fakes import make_evaluation, make_rule, make_summary


@pytest.fixture
def patched_source(monkeypatch, source):
    sessions = []

    def fake_session(**kwargs):
        sessions.append(kwargs)
        return object()

    monkeypatch.setattr(cli.boto3, "Session", fake_session)
    monkeypatch.setattr(cli, "ConfigRuleSource", lambda session, settings: source)
    return sessions


def test_build_event_from_arguments() -> None:
    """Flags map onto widget parameters."""

    args = cli.parse_args(
        [
            "rules",
            "--rule-names",
            "a",
            "b",
            "--status",
            "NON_COMPLIANT",
            "--theme",
            "dark",
            "--no-remediation",
        ]
    )

    event = cli.build_event(args)

    assert event["widgetContext"]["theme"] == "dark"
    assert event["params"] == {
        "showRemediation": False,
        "ruleNames": ["a", "b"],
        "complianceStatus": "NON_COMPLIANT",
    }


def test_main_prints_widget_html(config_client, patched_source, capsys) -> None:
    """Without export flags the widget HTML goes to stdout."""

    config_client.rules = [make_rule("r1")]
    config_client.summary = [make_summary("r1", 1, 0, 1)]

    exit_code = cli.main(["rules", "--profile", "audit", "--region", "eu-west-1"])

    assert exit_code == 0
    assert patched_source == [{"profile_name": "audit", "region_name": "eu-west-1"}]
    assert "AWS Config Rules Status" in capsys.readouterr().out


def test_main_writes_html_and_json(config_client, patched_source, tmp_path, capsys) -> None:
    """HTML and JSON exports are written to the requested paths."""

    config_client.rules = [make_rule("r1"), make_rule("r2")]
    config_client.summary = [make_summary("r1", 0, 2, 2), make_summary("r2", 1, 0, 1)]
    html_path = tmp_path / "widget.html"
    json_path = tmp_path / "rules.json"

    exit_code = cli.main(
        ["compliance", "--status", "NON_COMPLIANT", "-o", str(html_path), "--json", str(json_path)]
    )

    assert exit_code == 0
    assert "Compliance Summary" in html_path.read_text(encoding="utf-8")
    rows = json.loads(json_path.read_text(encoding="utf-8"))
    assert [row["ruleName"] for row in rows] == ["r1"]
    assert "Rule compliance exported to" in capsys.readouterr().out


def test_main_reports_widget_errors(patched_source, capsys) -> None:
    """Widget errors print a message and exit non-zero."""

    exit_code = cli.main(["compliance", "--rule-name", "missing"])

    assert exit_code == 1
    assert "Error: Rule missing not found" in capsys.readouterr().err


def test_main_runs_every_requested_export_with_rule_name(
    config_client, patched_source, tmp_path, capsys
) -> None:
    """A rule drill-down workbook does not suppress the JSON and table exports."""

    pytest.importorskip("openpyxl")
    config_client.rules = [make_rule("r1")]
    config_client.summary = [make_summary("r1", 0, 1, 1)]
    config_client.details["r1"] = [make_evaluation("bucket", "NON_COMPLIANT", resource_type="AWS::S3::Bucket")]
    excel_path = tmp_path / "r1.xlsx"
    json_path = tmp_path / "rules.json"

    exit_code = cli.main(
        ["compliance", "--rule-name", "r1", "--excel", str(excel_path), "--json", str(json_path), "--table"]
    )

    output = capsys.readouterr().out
    assert exit_code == 0
    assert excel_path.exists()
    assert [row["ruleName"] for row in json.loads(json_path.read_text(encoding="utf-8"))] == ["r1"]
    assert "NON_COMPLIANT" in output
    assert "Excel report written to" in output


def test_main_exports_rule_evaluations_to_excel(config_client, patched_source, tmp_path) -> None:
    """With --rule-name the workbook lists that rule's evaluations."""

    openpyxl = pytest.importorskip("openpyxl")
    config_client.rules = [make_rule("r1")]
    config_client.details["r1"] = [make_evaluation("bucket", "NON_COMPLIANT", resource_type="AWS::S3::Bucket")]
    path = tmp_path / "r1.xlsx"

    assert cli.main(["compliance", "--rule-name", "r1", "--excel", str(path)]) == 0

    sheet = openpyxl.load_workbook(path).active
    assert sheet.title == "Evaluations"
    assert list(sheet.iter_rows(min_row=2, values_only=True))[0][:3] == (
        "bucket",
        "AWS::S3::Bucket",
        "NON_COMPLIANT",
    )


def test_main_exports_rule_list_to_excel(config_client, patched_source, tmp_path) -> None:
    """Without --rule-name the workbook lists the filtered rules."""

    openpyxl = pytest.importorskip("openpyxl")
    config_client.rules = [make_rule("r1"), make_rule("r2")]
    config_client.summary = [make_summary("r1", 1, 0, 1), make_summary("r2", 0, 1, 1)]
    path = tmp_path / "rules.xlsx"

    assert cli.main(["rules", "--status", "COMPLIANT", "--excel", str(path)]) == 0

    sheet = openpyxl.load_workbook(path).active
    assert sheet.title == "Rule Compliance"
    assert [row[0] for row in sheet.iter_rows(min_row=2, values_only=True)] == ["r1"]
