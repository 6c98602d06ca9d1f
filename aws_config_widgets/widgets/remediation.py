"""Remediation dashboard widget and its actions."""
from __future__ import annotations

from dataclasses import replace
from typing import Callable, Dict, Optional

from ..core import collect_rule_compliance, fetch_rule_with_results
from ..errors import InvalidRequest
from ..events import WidgetRequest
from ..filters import FilterSpec
from ..models import NON_COMPLIANT
from ..render import (
    render_manual_remediation,
    render_remediation_dashboard,
    render_remediation_guidance,
    render_remediation_status,
    render_rule_details,
)
from ..sources import ConfigRuleSource
from . import register_widget

RemediationAction = Callable[[WidgetRequest, ConfigRuleSource], str]


def _require_rule_name(request: WidgetRequest, message: str = "Rule name is required") -> str:
    if not request.params.rule_name:
        raise InvalidRequest(message)
    return request.params.rule_name


def remediate_rule(request: WidgetRequest, source: ConfigRuleSource) -> str:
    name = _require_rule_name(request, "Rule name is required for remediation")
    rule = source.describe_rule(name)
    if not rule.is_managed:
        return render_manual_remediation(rule, request)
    return render_remediation_guidance(rule, request)


def remediation_status(request: WidgetRequest, source: ConfigRuleSource) -> str:
    name = _require_rule_name(request)
    results = source.get_evaluation_results(
        name,
        compliance_types=(NON_COMPLIANT,),
        limit=source.settings.status_page_limit,
    )
    return render_remediation_status(name, results, request)


def show_rule_details(request: WidgetRequest, source: ConfigRuleSource) -> str:
    name = _require_rule_name(request)
    rule, results = fetch_rule_with_results(source, name)
    return render_rule_details(rule, results, request)


def remediation_dashboard(request: WidgetRequest, source: ConfigRuleSource) -> str:
    spec = replace(FilterSpec.from_params(request.params), compliance_status=NON_COMPLIANT)
    snapshot = collect_rule_compliance(source, spec)
    return render_remediation_dashboard(snapshot, request)


ACTIONS: Dict[Optional[str], RemediationAction] = {
    None: remediation_dashboard,
    "remediateRule": remediate_rule,
    "getRemediationStatus": remediation_status,
    "showRuleDetails": show_rule_details,
}


@register_widget("remediation", error_title="Remediation Widget Error")
def remediation_widget(request: WidgetRequest, source: ConfigRuleSource) -> str:
    """Dispatch on the ``action`` parameter; no action shows the dashboard."""

    action = ACTIONS.get(request.params.action)
    if action is None:
        valid = ", ".join(sorted(key for key in ACTIONS if key))
        raise InvalidRequest(f"Unknown action '{request.params.action}'. Valid actions: {valid}")
    return action(request, source)


__all__ = [
    "ACTIONS",
    "remediate_rule",
    "remediation_dashboard",
    "remediation_status",
    "remediation_widget",
    "show_rule_details",
]
