"""CloudWatch custom widgets for AWS Config rule compliance."""

from __future__ import annotations

from .core import collect_rule_compliance
from .errors import InvalidRequest, NotFound, SourceUnavailable, WidgetError
from .filters import FilterSpec, apply_filters
from .handlers import compliance_handler, handle_widget, remediation_handler, rules_handler
from .models import ComplianceCount, EvaluationResult, Rule, RuleCompliance
from .reconcile import classify, reconcile
from .sources import ConfigRuleSource

__all__ = [
    "ComplianceCount",
    "ConfigRuleSource",
    "EvaluationResult",
    "FilterSpec",
    "InvalidRequest",
    "NotFound",
    "Rule",
    "RuleCompliance",
    "SourceUnavailable",
    "WidgetError",
    "apply_filters",
    "classify",
    "collect_rule_compliance",
    "compliance_handler",
    "handle_widget",
    "reconcile",
    "remediation_handler",
    "rules_handler",
]
