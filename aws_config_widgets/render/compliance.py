"""HTML for the compliance summary and single-rule drill-down views."""
from __future__ import annotations

from typing import Optional, Sequence

from ..events import WidgetRequest
from ..models import COMPLIANT, INSUFFICIENT_DATA, NON_COMPLIANT, ComplianceSnapshot, EvaluationResult, RuleCompliance
from .charts import compliance_pie
from .html_utils import (
    action_button,
    describe_counts,
    empty_state,
    escape_html,
    get_palette,
    resource_item,
    rule_count_label,
    skipped_notice,
    stat_row,
    status_badge,
    widget_header,
    widget_page,
)


def _summary_item(record: RuleCompliance, endpoint: Optional[str]) -> str:
    drill_down = action_button("View resources", endpoint, {"ruleName": record.name}) if endpoint else ""
    actions = f'<div class="item-actions">{drill_down}</div>' if drill_down else ""
    return (
        '<div class="list-item">'
        '<div class="item-header">'
        f'<span class="item-name">{escape_html(record.name)}</span>{status_badge(record.status)}'
        "</div>"
        f'<div class="item-details">{escape_html(describe_counts(record.counts))}</div>'
        f"{actions}</div>"
    )


def render_compliance_summary(snapshot: ComplianceSnapshot, request: WidgetRequest) -> str:
    """Return the rule-level compliance overview with a pie chart."""

    palette = get_palette(request.context.theme)
    tally = snapshot.tally
    header = widget_header(
        "Compliance Summary",
        meta=[rule_count_label(tally.total, snapshot.unfiltered_count)],
        account_id=snapshot.account_id,
    )
    chart = compliance_pie(tally.compliant, tally.non_compliant, tally.insufficient_data, palette)
    overview = (
        '<div class="overview">'
        f"<div>{chart}</div>"
        '<div class="summary-stats" style="flex-direction: column; gap: 0;">'
        + stat_row("Compliant Rules:", tally.compliant, COMPLIANT)
        + stat_row("Non-Compliant Rules:", tally.non_compliant, NON_COMPLIANT)
        + stat_row("Insufficient Data:", tally.insufficient_data, INSUFFICIENT_DATA)
        + "</div></div>"
    )
    if snapshot.rules:
        items = "".join(_summary_item(record, request.function_arn) for record in snapshot.rules)
    else:
        items = empty_state("No Config rules found matching the current filters.")
    notice = skipped_notice(snapshot.skipped_details)
    return widget_page(request.context, header + notice + overview + f'<div class="item-list">{items}</div>')


def render_rule_evaluations(
    rule_name: str,
    results: Sequence[EvaluationResult],
    request: WidgetRequest,
) -> str:
    """Return the per-resource breakdown for a single rule."""

    palette = get_palette(request.context.theme)
    compliant = sum(1 for result in results if result.status == COMPLIANT)
    non_compliant = sum(1 for result in results if result.status == NON_COMPLIANT)
    insufficient = len(results) - compliant - non_compliant

    back = action_button("Back to Summary", request.function_arn, {}) if request.function_arn else ""
    header = widget_header(f"Rule: {rule_name}", back_action=back)
    chart = compliance_pie(compliant, non_compliant, insufficient, palette)
    overview = (
        '<div class="overview">'
        f"<div>{chart}</div>"
        '<div class="summary-stats" style="flex-direction: column; gap: 0;">'
        + stat_row("Compliant Resources:", compliant, COMPLIANT)
        + stat_row("Non-Compliant Resources:", non_compliant, NON_COMPLIANT)
        + stat_row("Insufficient Data:", insufficient, INSUFFICIENT_DATA)
        + f'<div class="item-details" style="margin-top: 8px;">Total: {len(results)} resources</div>'
        + "</div></div>"
    )
    if results:
        items = "".join(resource_item(result) for result in results)
    else:
        items = empty_state("No compliance data available for this rule.")
    return widget_page(request.context, header + overview + f'<div class="item-list">{items}</div>')


__all__ = ["render_compliance_summary", "render_rule_evaluations"]
