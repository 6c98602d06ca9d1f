"""HTML for the remediation dashboard and its actions."""
from __future__ import annotations

from typing import Optional, Sequence

from ..events import WidgetRequest
from ..models import COMPLIANT, NON_COMPLIANT, ComplianceSnapshot, EvaluationResult, Rule, RuleCompliance
from ..remediation import remediation_steps
from .html_utils import (
    action_button,
    empty_state,
    escape_html,
    resource_item,
    stat_tile,
    truncate,
    widget_header,
    widget_page,
)

DESCRIPTION_LIMIT = 120


def _rule_actions(rule_name: str, endpoint: Optional[str], *, include_remediate: bool = True) -> str:
    buttons = []
    if include_remediate:
        buttons.append(
            action_button("Remediate", endpoint, {"action": "remediateRule", "ruleName": rule_name}, primary=True)
        )
    buttons.append(action_button("Check Status", endpoint, {"action": "getRemediationStatus", "ruleName": rule_name}))
    return f'<div class="item-actions">{"".join(buttons)}</div>'


def _back_to_dashboard(endpoint: Optional[str]) -> str:
    return action_button("Back to Dashboard", endpoint, {}) if endpoint else ""


def _dashboard_item(record: RuleCompliance, request: WidgetRequest) -> str:
    rule = record.rule
    description = truncate(rule.description, DESCRIPTION_LIMIT) if rule.description else "No description available"
    actions = _rule_actions(rule.name, request.function_arn) + action_button(
        "View Details", request.function_arn, {"action": "showRuleDetails", "ruleName": rule.name}
    )
    return (
        '<div class="list-item">'
        '<div class="item-header">'
        f'<span class="item-name">{escape_html(rule.name)}</span>'
        f'<span class="status-badge status-noncompliant">{record.counts.non_compliant} non-compliant</span>'
        "</div>"
        f'<div class="item-details">{escape_html(description)}</div>'
        f"{actions}</div>"
    )


def render_remediation_dashboard(snapshot: ComplianceSnapshot, request: WidgetRequest) -> str:
    """Return the list of non-compliant rules with remediation actions."""

    count = len(snapshot.rules)
    header = widget_header(
        "Remediation Dashboard",
        meta=[f"{count} rules need attention"],
        account_id=snapshot.account_id,
    )
    stats = (
        '<div class="summary-stats">'
        + stat_tile(count, "Rules Need Attention", NON_COMPLIANT)
        + "</div>"
    )
    if snapshot.rules:
        items = "".join(_dashboard_item(record, request) for record in snapshot.rules)
    else:
        items = empty_state("No rules need attention at this time!")
    return widget_page(request.context, header + stats + f'<div class="item-list">{items}</div>')


def render_remediation_guidance(rule: Rule, request: WidgetRequest) -> str:
    """Return step-by-step manual remediation for an AWS managed rule."""

    header = widget_header(
        f"Remediation: {rule.name}", back_action=_back_to_dashboard(request.function_arn)
    )
    steps = "".join(
        '<div class="guidance-step">'
        f'<div class="step-number">Step {index}</div>'
        f"<div>{escape_html(step)}</div></div>"
        for index, step in enumerate(remediation_steps(rule.name), start=1)
    )
    actions = _rule_actions(rule.name, request.function_arn, include_remediate=False) + action_button(
        "View Rule Details", request.function_arn, {"action": "showRuleDetails", "ruleName": rule.name}
    )
    return widget_page(request.context, header + f'<div class="item-list">{steps}</div>' + actions)


def render_manual_remediation(rule: Rule, request: WidgetRequest) -> str:
    """Return the notice shown for custom rules without managed guidance."""

    header = widget_header(
        f"Remediation: {rule.name}", back_action=_back_to_dashboard(request.function_arn)
    )
    notice = (
        '<div class="notice status-insufficient">'
        "<strong>Manual Remediation Required</strong><br>"
        "This rule requires manual remediation. Automated remediation is not available "
        "for this rule type. Please review the rule documentation and manually fix the "
        "non-compliant resources."
        "</div>"
    )
    actions = action_button(
        "View Rule Details", request.function_arn, {"action": "showRuleDetails", "ruleName": rule.name}
    )
    return widget_page(request.context, header + notice + f'<div class="item-actions">{actions}</div>')


def render_remediation_status(
    rule_name: str, results: Sequence[EvaluationResult], request: WidgetRequest
) -> str:
    """Return the resources of ``rule_name`` that are still non-compliant."""

    header = widget_header(f"Status: {rule_name}", back_action=_back_to_dashboard(request.function_arn))
    remaining = len(results)
    if remaining == 0:
        summary = '<div class="notice status-compliant">All resources are now compliant!</div>'
        items = ""
    else:
        summary = (
            '<div class="notice status-noncompliant">'
            f"{remaining} resources still need remediation</div>"
        )
        items = "".join(resource_item(result, show_status=False) for result in results)
    return widget_page(request.context, header + summary + f'<div class="item-list">{items}</div>')


def render_rule_details(rule: Rule, results: Sequence[EvaluationResult], request: WidgetRequest) -> str:
    """Return description, counts and affected resources for one rule."""

    compliant = sum(1 for result in results if result.status == COMPLIANT)
    non_compliant = sum(1 for result in results if result.status == NON_COMPLIANT)
    header = widget_header(
        f"Rule Details: {rule.name}", back_action=_back_to_dashboard(request.function_arn)
    )
    description = f'<div class="item-details">{escape_html(rule.description or "No description available")}</div>'
    stats = (
        '<div class="summary-stats" style="margin-top: 8px;">'
        + stat_tile(compliant, "Compliant", COMPLIANT)
        + stat_tile(non_compliant, "Non-Compliant", NON_COMPLIANT)
        + stat_tile(len(results), "Total", "")
        + "</div>"
    )
    if results:
        items = "".join(resource_item(result) for result in results)
    else:
        items = empty_state("No resources evaluated for this rule")
    resources = f'<div class="widget-title" style="font-size: 12px;">Affected Resources</div><div class="item-list">{items}</div>'
    return widget_page(
        request.context,
        header + description + stats + resources + _rule_actions(rule.name, request.function_arn),
    )


__all__ = [
    "render_manual_remediation",
    "render_remediation_dashboard",
    "render_remediation_guidance",
    "render_remediation_status",
    "render_rule_details",
]
