"""Compliance summary widget with single-rule drill-down."""
from __future__ import annotations

from ..core import collect_rule_compliance
from ..events import WidgetRequest
from ..filters import FilterSpec
from ..render import render_compliance_summary, render_rule_evaluations
from ..sources import ConfigRuleSource
from . import register_widget


@register_widget("compliance", error_title="Compliance Widget Error")
def compliance_widget(request: WidgetRequest, source: ConfigRuleSource) -> str:
    """Show the account-wide summary, or one rule's resources when ``ruleName`` is set."""

    rule_name = request.params.rule_name
    if rule_name:
        results = source.get_evaluation_results(rule_name)
        return render_rule_evaluations(rule_name, results, request)

    snapshot = collect_rule_compliance(source, FilterSpec.from_params(request.params))
    return render_compliance_summary(snapshot, request)


__all__ = ["compliance_widget"]
