"""HTML for the Config rules status widget."""
from __future__ import annotations

from typing import Optional

from ..events import WidgetRequest
from ..models import NON_COMPLIANT, ComplianceSnapshot, RuleCompliance
from .html_utils import (
    action_button,
    describe_counts,
    empty_state,
    escape_html,
    rule_count_label,
    skipped_notice,
    stat_tile,
    status_badge,
    truncate,
    widget_header,
    widget_page,
)

DESCRIPTION_LIMIT = 100


def render_rule_item(
    record: RuleCompliance,
    *,
    show_remediation: bool = True,
    remediation_endpoint: Optional[str] = None,
) -> str:
    rule = record.rule
    details = [escape_html(describe_counts(record.counts, with_percent=True))]
    if rule.description:
        details.append(escape_html(truncate(rule.description, DESCRIPTION_LIMIT)))

    actions = ""
    if record.status == NON_COMPLIANT and show_remediation:
        button = action_button(
            "Remediate",
            remediation_endpoint,
            {"action": "remediateRule", "ruleName": rule.name},
        )
        actions = f'<div class="item-actions">{button}</div>'

    return (
        '<div class="list-item">'
        '<div class="item-header">'
        f'<span class="item-name">{escape_html(rule.name)}</span>{status_badge(record.status)}'
        "</div>"
        f'<div class="item-details">{"<br>".join(details)}</div>'
        f"{actions}</div>"
    )


def render_rules_widget(
    snapshot: ComplianceSnapshot,
    request: WidgetRequest,
    *,
    remediation_endpoint: Optional[str] = None,
) -> str:
    """Return the rules list with per-status totals."""

    tally = snapshot.tally
    header = widget_header(
        "AWS Config Rules Status",
        meta=[rule_count_label(tally.total, snapshot.unfiltered_count)],
        account_id=snapshot.account_id,
    )
    stats = (
        '<div class="summary-stats">'
        + stat_tile(tally.compliant, "Compliant", "COMPLIANT")
        + stat_tile(tally.non_compliant, "Non-Compliant", "NON_COMPLIANT")
        + stat_tile(tally.insufficient_data, "Insufficient Data", "INSUFFICIENT_DATA")
        + "</div>"
    )
    if snapshot.rules:
        items = "".join(
            render_rule_item(
                record,
                show_remediation=request.params.show_remediation,
                remediation_endpoint=remediation_endpoint,
            )
            for record in snapshot.rules
        )
    else:
        items = empty_state("No Config rules found matching the current filters.")
    notice = skipped_notice(snapshot.skipped_details)
    return widget_page(request.context, header + notice + stats + f'<div class="item-list">{items}</div>')


__all__ = ["render_rule_item", "render_rules_widget"]
