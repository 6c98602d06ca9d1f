"""HTML rendering for the CloudWatch custom widgets."""

from __future__ import annotations

from .compliance import render_compliance_summary, render_rule_evaluations
from .html_utils import error_panel
from .remediation import (
    render_manual_remediation,
    render_remediation_dashboard,
    render_remediation_guidance,
    render_remediation_status,
    render_rule_details,
)
from .rules import render_rules_widget

__all__ = [
    "error_panel",
    "render_compliance_summary",
    "render_manual_remediation",
    "render_remediation_dashboard",
    "render_remediation_guidance",
    "render_remediation_status",
    "render_rule_details",
    "render_rule_evaluations",
    "render_rules_widget",
]
