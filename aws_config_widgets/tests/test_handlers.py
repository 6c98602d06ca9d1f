"""Tests for the Lambda handlers and the widgets they dispatch to."""

from __future__ import annotations

import sys
from pathlib import Path
from types import SimpleNamespace


PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


import pytest

from aws_config_widgets.config import Settings
from aws_config_widgets.handlers import handle_widget
from aws_config_widgets.tests.fakes import (
    client_error,
    make_evaluation,
    make_rule,
    make_summary,
)
from aws_config_widgets.widgets import WIDGETS

FUNCTION_ARN = "arn:aws:lambda:us-east-1:123456789012:function:config-widget"
REMEDIATION_ARN = "arn:aws:lambda:us-east-1:123456789012:function:config-remediation"
LAMBDA_CONTEXT = SimpleNamespace(invoked_function_arn=FUNCTION_ARN)


@pytest.fixture
def populated(config_client):
    config_client.rules = [
        make_rule("s3-bucket-public-read-prohibited", resource_types=["AWS::S3::Bucket"], description="No public reads"),
        make_rule("custom-tagging", owner="CUSTOM_LAMBDA", resource_types=["AWS::EC2::Instance"]),
        make_rule("idle-rule"),
    ]
    config_client.summary = [
        make_summary("s3-bucket-public-read-prohibited", 3, 1, 4),
        make_summary("custom-tagging", 1, 1, 2),
    ]
    config_client.details["s3-bucket-public-read-prohibited"] = [
        make_evaluation("public-bucket", "NON_COMPLIANT", resource_type="AWS::S3::Bucket", annotation="ACL grants AllUsers"),
        make_evaluation("private-bucket", "COMPLIANT", resource_type="AWS::S3::Bucket"),
    ]
    config_client.details["custom-tagging"] = [
        make_evaluation("i-0123", "NON_COMPLIANT", resource_type="AWS::EC2::Instance"),
    ]
    return config_client


def _render(name, event, source_factory, **settings):
    return handle_widget(
        name,
        event,
        LAMBDA_CONTEXT,
        settings=Settings(**settings),
        source_factory=source_factory,
    )


def test_all_widgets_are_registered() -> None:
    """Each Lambda has a registered widget and error title."""

    assert sorted(WIDGETS) == ["compliance", "remediation", "rules"]
    assert WIDGETS["rules"].error_title == "AWS Config Widget Error"


def test_rules_widget_lists_rules_with_remediate_action(populated, source_factory) -> None:
    """Non-compliant rules offer a Remediate button wired to the remediation Lambda."""

    html = _render("rules", {}, source_factory, remediation_function_arn=REMEDIATION_ARN)

    assert "AWS Config Rules Status" in html
    assert "Account: 123456789012" in html
    assert "3/4 resources compliant (75%)" in html
    assert "No resources evaluated" in html
    assert "No public reads" in html
    assert f'endpoint="{REMEDIATION_ARN}"' in html
    assert '{"action": "remediateRule", "ruleName": "s3-bucket-public-read-prohibited"}' in html
    assert html.count("cwdb-action action=") == 2


def test_rules_widget_hides_remediation_when_disabled(populated, source_factory) -> None:
    """showRemediation=false removes the buttons."""

    html = _render("rules", {"showRemediation": False}, source_factory, remediation_function_arn=REMEDIATION_ARN)

    assert "Remediate" not in html


def test_rules_widget_empty_state(populated, source_factory) -> None:
    """Filters that match nothing show the empty state."""

    html = _render("rules", {"ruleNames": ["does-not-exist"]}, source_factory)

    assert "No Config rules found matching the current filters." in html


def test_rules_widget_uses_requested_region(populated, source_factory) -> None:
    """The widget region parameter selects the client region."""

    _render("rules", {"widgetContext": {"region": "us-east-1"}, "region": "eu-central-1"}, source_factory)

    assert source_factory.regions == ["eu-central-1"]


def test_compliance_summary(populated, source_factory) -> None:
    """The summary counts rules by classification and draws a chart."""

    html = _render("compliance", {"widgetContext": {"theme": "dark"}}, source_factory)

    assert "Compliance Summary" in html
    assert "Compliant Rules:" in html
    assert "Non-Compliant Rules:" in html
    assert "<svg" in html
    assert "#0d1117" in html
    assert f'endpoint="{FUNCTION_ARN}"' in html


def test_compliance_drill_down(populated, source_factory) -> None:
    """ruleName switches the widget to the per-resource view."""

    html = _render("compliance", {"ruleName": "s3-bucket-public-read-prohibited"}, source_factory)

    assert "Rule: s3-bucket-public-read-prohibited" in html
    assert "Total: 2 resources" in html
    assert "public-bucket" in html
    assert "ACL grants AllUsers" in html
    assert "Back to Summary" in html


def test_compliance_drill_down_unknown_rule(populated, source_factory) -> None:
    """Unknown rules render the compliance error panel."""

    html = _render("compliance", {"ruleName": "missing"}, source_factory)

    assert "Compliance Widget Error" in html
    assert "Rule missing not found" in html
    assert "Check CloudWatch logs for more details." in html


def test_remediation_dashboard_lists_only_non_compliant_rules(populated, source_factory) -> None:
    """The dashboard ignores compliant and idle rules."""

    html = _render("remediation", {"complianceStatus": "COMPLIANT"}, source_factory)

    assert "Remediation Dashboard" in html
    assert "2 rules need attention" in html
    assert "idle-rule" not in html
    assert "getRemediationStatus" in html
    assert "showRuleDetails" in html


def test_remediation_dashboard_empty(config_client, source_factory) -> None:
    """With nothing to fix the dashboard says so."""

    config_client.rules = [make_rule("r1")]
    config_client.summary = [make_summary("r1", 1, 0, 1)]

    html = _render("remediation", {}, source_factory)

    assert "No rules need attention at this time!" in html


def test_remediate_managed_rule_shows_guidance(populated, source_factory) -> None:
    """AWS managed rules get step-by-step guidance."""

    html = _render(
        "remediation",
        {"action": "remediateRule", "ruleName": "s3-bucket-public-read-prohibited"},
        source_factory,
    )

    assert "Remediation: s3-bucket-public-read-prohibited" in html
    assert "Step 1" in html
    assert "Remove public read access from the S3 bucket" in html


def test_remediate_custom_rule_requires_manual_work(populated, source_factory) -> None:
    """Custom rules have no automated guidance."""

    html = _render("remediation", {"action": "remediateRule", "ruleName": "custom-tagging"}, source_factory)

    assert "Manual Remediation Required" in html


def test_remediate_requires_rule_name(populated, source_factory) -> None:
    """remediateRule without a rule name is rejected."""

    html = _render("remediation", {"action": "remediateRule"}, source_factory)

    assert "Remediation Widget Error" in html
    assert "Rule name is required for remediation" in html


def test_remediation_status_lists_remaining_resources(populated, source_factory) -> None:
    """Only non-compliant resources are fetched for the status view."""

    html = _render(
        "remediation",
        {"action": "getRemediationStatus", "ruleName": "s3-bucket-public-read-prohibited"},
        source_factory,
    )

    assert "Status: s3-bucket-public-read-prohibited" in html
    assert "1 resources still need remediation" in html
    assert "private-bucket" not in html
    call = populated.calls_to("get_compliance_details_by_config_rule")[-1]
    assert call["ComplianceTypes"] == ["NON_COMPLIANT"]
    assert call["Limit"] == 50


def test_remediation_status_all_fixed(config_client, source_factory) -> None:
    """A rule with no failing resources is reported as fixed."""

    config_client.details["r1"] = [make_evaluation("bucket", "COMPLIANT")]

    html = _render("remediation", {"action": "getRemediationStatus", "ruleName": "r1"}, source_factory)

    assert "All resources are now compliant!" in html


def test_show_rule_details(populated, source_factory) -> None:
    """Rule details show the description and affected resources."""

    html = _render(
        "remediation",
        {"action": "showRuleDetails", "ruleName": "s3-bucket-public-read-prohibited"},
        source_factory,
    )

    assert "Rule Details: s3-bucket-public-read-prohibited" in html
    assert "No public reads" in html
    assert "Affected Resources" in html
    assert "public-bucket" in html


def test_unknown_remediation_action(populated, source_factory) -> None:
    """Unknown actions are reported rather than silently showing the dashboard."""

    html = _render("remediation", {"action": "deleteEverything"}, source_factory)

    assert "Unknown action 'deleteEverything'" in html


def test_invalid_parameters_render_error_panel(populated, source_factory) -> None:
    """Validation errors are shown in the widget."""

    html = _render("rules", {"complianceStatus": "GREEN"}, source_factory)

    assert "AWS Config Widget Error" in html
    assert "Unknown complianceStatus &#x27;GREEN&#x27;" in html


def test_upstream_failure_renders_error_panel(populated, source_factory, caplog) -> None:
    """AWS failures never escape the handler."""

    populated.errors["get_compliance_summary_by_config_rule"] = client_error(
        "AccessDeniedException", "GetComplianceSummaryByConfigRule"
    )

    html = _render("compliance", {}, source_factory)

    assert "Compliance Widget Error" in html
    assert "Failed to get compliance summary" in html
    assert "compliance widget failed" in caplog.text


def test_unexpected_error_is_logged_with_traceback(caplog) -> None:
    """Programming errors are logged and still rendered."""

    def broken_factory(region, settings):
        raise RuntimeError("boom")

    html = handle_widget("rules", {}, None, settings=Settings(), source_factory=broken_factory)

    assert "boom" in html
    assert "Unexpected error in rules widget" in caplog.text
    assert any(record.exc_info for record in caplog.records)


def test_html_is_escaped(config_client, source_factory) -> None:
    """Rule metadata cannot inject markup."""

    config_client.rules = [make_rule("r1", description="<script>alert(1)</script>")]

    html = _render("rules", {}, source_factory)

    assert "<script>" not in html
    assert "&lt;script&gt;" in html


def test_failed_detail_fetch_is_flagged_in_widget(populated, source_factory) -> None:
    """A throttled account-level rule still renders, with a warning."""

    populated.rules.append(make_rule("iam-password-policy"))
    populated.errors[("get_compliance_details_by_config_rule", "iam-password-policy")] = client_error(
        "ThrottlingException", "GetComplianceDetailsByConfigRule"
    )

    html = _render("rules", {"complianceStatus": "NON_COMPLIANT"}, source_factory)

    assert "Detailed compliance unavailable for: iam-password-policy" in html
    assert "2 of 4 rules" in html


def test_malformed_widget_context_still_renders(populated, source_factory) -> None:
    """A non-mapping widgetContext does not escape the handler."""

    html = _render("rules", {"widgetContext": "x"}, source_factory)

    assert "AWS Config Rules Status" in html


def test_invalid_log_level_renders_named_error(populated, source_factory, monkeypatch) -> None:
    """Configuration errors in the environment are shown in the widget."""

    monkeypatch.setenv("LOG_LEVEL", "VERBOSE")

    html = handle_widget("rules", {}, LAMBDA_CONTEXT, source_factory=source_factory)

    assert "AWS Config Widget Error" in html
    assert "LOG_LEVEL must be one of" in html
