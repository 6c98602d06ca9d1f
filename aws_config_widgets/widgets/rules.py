"""Config rules status widget."""
from __future__ import annotations

from ..core import collect_rule_compliance
from ..events import WidgetRequest
from ..filters import FilterSpec
from ..render import render_rules_widget
from ..sources import ConfigRuleSource
from . import register_widget


@register_widget("rules", error_title="AWS Config Widget Error")
def rules_widget(request: WidgetRequest, source: ConfigRuleSource) -> str:
    """List every rule with its reconciled status and remediation shortcuts."""

    snapshot = collect_rule_compliance(source, FilterSpec.from_params(request.params))
    return render_rules_widget(
        snapshot,
        request,
        remediation_endpoint=source.settings.remediation_function_arn,
    )


__all__ = ["rules_widget"]
