"""Helpers for building CloudWatch custom widget HTML."""

from __future__ import annotations

import json
from dataclasses import dataclass
from html import escape as html_escape
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence

from ..events import WidgetContext
from ..models import COMPLIANT, NON_COMPLIANT, ComplianceCount, EvaluationResult

FONT_STACK = "-apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif"


@dataclass(frozen=True)
class Palette:
    """Colours for one dashboard theme."""

    text: str
    background: str
    border: str
    muted: str
    faint: str
    link: str
    surface: str
    surface_hover: str
    button: str
    compliant_bg: str
    compliant_fg: str
    noncompliant_bg: str
    noncompliant_fg: str
    insufficient_bg: str
    insufficient_fg: str


THEMES: Dict[str, Palette] = {
    "light": Palette(
        text="#24292e",
        background="#ffffff",
        border="#d0d7de",
        muted="#656d76",
        faint="#8b949e",
        link="#0969da",
        surface="#f6f8fa",
        surface_hover="#f0f6fc",
        button="#f6f8fa",
        compliant_bg="#dafbe1",
        compliant_fg="#1a7f37",
        noncompliant_bg="#ffebe9",
        noncompliant_fg="#cf222e",
        insufficient_bg="#fff8c5",
        insufficient_fg="#9a6700",
    ),
    "dark": Palette(
        text="#e1e4e8",
        background="#0d1117",
        border="#30363d",
        muted="#8b949e",
        faint="#656d76",
        link="#58a6ff",
        surface="#161b22",
        surface_hover="#1c2128",
        button="#21262d",
        compliant_bg="#0c2d6b",
        compliant_fg="#58a6ff",
        noncompliant_bg="#5a1e1e",
        noncompliant_fg="#ff8182",
        insufficient_bg="#3c2300",
        insufficient_fg="#d29922",
    ),
}

STATUS_LABELS: Dict[str, str] = {
    COMPLIANT: "Compliant",
    NON_COMPLIANT: "Non-Compliant",
    "INSUFFICIENT_DATA": "Insufficient Data",
}

STATUS_CLASSES: Dict[str, str] = {
    COMPLIANT: "status-compliant",
    NON_COMPLIANT: "status-noncompliant",
    "INSUFFICIENT_DATA": "status-insufficient",
}


def get_palette(theme: str) -> Palette:
    return THEMES.get(theme, THEMES["light"])


def escape_html(value: Any) -> str:
    """Return ``value`` escaped for HTML text and attribute content."""

    return html_escape(str(value), quote=True)


def truncate(text: str, limit: int) -> str:
    """Shorten ``text`` to ``limit`` characters, marking the cut with ``...``."""

    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def stylesheet(palette: Palette) -> str:
    """Return the ``<style>`` block shared by every widget view."""

    p = palette
    return f"""<style>
.config-widget {{ font-family: {FONT_STACK}; font-size: 12px; line-height: 1.4; color: {p.text};
  background: {p.background}; border: 1px solid {p.border}; border-radius: 6px; padding: 12px;
  overflow: hidden; box-sizing: border-box; display: flex; flex-direction: column; }}
.widget-header {{ display: flex; justify-content: space-between; align-items: center; margin-bottom: 12px;
  padding-bottom: 8px; border-bottom: 1px solid {p.border}; }}
.widget-title {{ font-size: 14px; font-weight: 600; margin: 0; }}
.widget-meta {{ display: flex; flex-direction: column; align-items: flex-end; gap: 2px; font-size: 10px; color: {p.muted}; }}
.account-id {{ font-size: 9px; color: {p.faint}; font-family: monospace; }}
.summary-stats {{ display: flex; flex-wrap: wrap; gap: 12px; margin-bottom: 12px; }}
.overview {{ display: flex; gap: 16px; align-items: center; margin-bottom: 12px; }}
.stat-item {{ text-align: center; padding: 8px; border-radius: 4px; min-width: 60px; }}
.stat-row {{ display: flex; justify-content: space-between; gap: 12px; padding: 4px 8px; border-radius: 4px; margin-bottom: 4px; }}
.stat-number {{ font-size: 16px; font-weight: 600; display: block; }}
.stat-label {{ font-size: 10px; text-transform: uppercase; letter-spacing: 0.5px; }}
.status-compliant {{ background: {p.compliant_bg}; color: {p.compliant_fg}; }}
.status-noncompliant {{ background: {p.noncompliant_bg}; color: {p.noncompliant_fg}; }}
.status-insufficient {{ background: {p.insufficient_bg}; color: {p.insufficient_fg}; }}
.item-list {{ overflow-y: auto; flex: 1; }}
.list-item {{ padding: 8px; border: 1px solid {p.border}; border-radius: 4px; margin-bottom: 6px; background: {p.surface}; }}
.list-item:hover {{ border-color: {p.link}; background: {p.surface_hover}; }}
.item-header {{ display: flex; justify-content: space-between; align-items: center; margin-bottom: 4px; }}
.item-name {{ font-weight: 600; font-size: 11px; color: {p.link}; word-break: break-all; }}
.status-badge {{ font-size: 10px; padding: 2px 6px; border-radius: 3px; font-weight: 500; white-space: nowrap; }}
.item-details {{ font-size: 10px; color: {p.muted}; }}
.item-actions {{ margin-top: 6px; display: flex; gap: 6px; flex-wrap: wrap; }}
.btn {{ background: {p.button}; border: 1px solid {p.border}; border-radius: 3px; padding: 4px 8px; font-size: 10px;
  cursor: pointer; color: {p.text}; text-decoration: none; }}
.btn-primary {{ border-color: {p.link}; color: {p.link}; }}
.guidance-step {{ display: flex; gap: 8px; margin-bottom: 8px; }}
.step-number {{ font-weight: 600; white-space: nowrap; color: {p.link}; }}
.notice {{ padding: 8px; border-radius: 4px; margin-bottom: 12px; }}
.no-data {{ text-align: center; padding: 20px; color: {p.muted}; font-style: italic; }}
.error {{ color: {p.noncompliant_fg}; background: {p.noncompliant_bg}; padding: 12px; border-radius: 4px;
  border: 1px solid {p.noncompliant_fg}; margin-bottom: 8px; }}
.error-title {{ font-weight: 600; margin-bottom: 4px; }}
.error-message {{ font-size: 12px; }}
</style>"""


def widget_page(context: WidgetContext, body: str) -> str:
    """Wrap ``body`` in the themed widget container."""

    palette = get_palette(context.theme)
    return (
        stylesheet(palette)
        + f'<div class="config-widget" data-theme="{escape_html(context.theme)}" '
        f'style="width: 100%; height: 100%; max-width: {context.width}px; '
        f'min-height: {context.height}px;">'
        + body
        + "</div>"
    )


def widget_header(
    title: str,
    *,
    meta: Iterable[str] = (),
    account_id: Optional[str] = None,
    back_action: str = "",
) -> str:
    """Return the header row with ``title`` and optional right-hand metadata."""

    meta_rows = [f"<span>{escape_html(line)}</span>" for line in meta if line]
    if account_id:
        meta_rows.append(f'<span class="account-id">Account: {escape_html(account_id)}</span>')
    if back_action:
        meta_rows.append(back_action)
    return (
        '<div class="widget-header">'
        f'<h3 class="widget-title">{escape_html(title)}</h3>'
        f'<div class="widget-meta">{"".join(meta_rows)}</div>'
        "</div>"
    )


def status_badge(status: str) -> str:
    css_class = STATUS_CLASSES.get(status, "status-insufficient")
    label = STATUS_LABELS.get(status, "Insufficient Data")
    return f'<span class="status-badge {css_class}">{label}</span>'


def stat_tile(value: int, label: str, status: str) -> str:
    """Return a boxed statistic with a large number above its label."""

    return (
        f'<div class="stat-item {STATUS_CLASSES.get(status, "")}">'
        f'<span class="stat-number">{value}</span>'
        f'<span class="stat-label">{escape_html(label)}</span></div>'
    )


def stat_row(label: str, value: int, status: str) -> str:
    """Return a ``label: value`` line tinted for ``status``."""

    return (
        f'<div class="stat-row {STATUS_CLASSES.get(status, "")}">'
        f"<span>{escape_html(label)}</span><span>{value}</span></div>"
    )


def action_button(
    label: str,
    endpoint: Optional[str],
    params: Mapping[str, Any],
    *,
    primary: bool = False,
) -> str:
    """Return a button that re-invokes ``endpoint`` with ``params``.

    CloudWatch binds a ``<cwdb-action>`` to the element that precedes it and
    re-renders the widget with the Lambda's response. Without an endpoint
    (for example in a local preview) only the inert button is emitted.
    """

    css = "btn btn-primary" if primary else "btn"
    button = f'<a class="{css}">{escape_html(label)}</a>'
    if not endpoint:
        return button
    payload = html_escape(json.dumps(dict(params), sort_keys=True), quote=False)
    return (
        button
        + f'<cwdb-action action="call" endpoint="{escape_html(endpoint)}" display="widget">'
        + payload
        + "</cwdb-action>"
    )


def describe_counts(counts: ComplianceCount, *, with_percent: bool = False) -> str:
    """Return a one-line description of a rule's resource counts.

    Account-level rules can report non-compliant findings without any
    resources in ``total``; those read as ``Account (N non-compliant)``.
    """

    if counts.total > 0:
        text = f"{counts.compliant}/{counts.total} resources compliant"
        if with_percent:
            text += f" ({counts.percent_compliant}%)"
        return text
    if counts.non_compliant > 0:
        return f"Account ({counts.non_compliant} non-compliant)"
    return "No resources evaluated"


def rule_count_label(shown: int, unfiltered: int) -> str:
    """Return ``N rules``, or ``N of M rules`` when filters hid some."""

    if unfiltered > shown:
        return f"{shown} of {unfiltered} rules"
    return f"{shown} rules"


def skipped_notice(rule_names: Sequence[str]) -> str:
    """Return a warning listing rules whose detailed compliance failed to load."""

    if not rule_names:
        return ""
    names = ", ".join(rule_names)
    return (
        '<div class="notice status-insufficient">'
        f"Detailed compliance unavailable for: {escape_html(names)}. Counts may be incomplete."
        "</div>"
    )


def empty_state(message: str) -> str:
    return f'<div class="no-data">{escape_html(message)}</div>'


def resource_item(result: EvaluationResult, *, show_status: bool = True) -> str:
    """Return a list entry for one evaluated resource."""

    badge = status_badge(result.status) if show_status else ""
    annotation = (
        f'<div class="item-details">{escape_html(truncate(result.annotation, 160))}</div>'
        if result.annotation
        else ""
    )
    return (
        '<div class="list-item">'
        f'<div class="item-header"><span class="item-name">{escape_html(result.resource_id)}</span>{badge}</div>'
        f'<div class="item-details">{escape_html(result.resource_type)}</div>'
        f"{annotation}</div>"
    )


def error_panel(context: WidgetContext, title: str, message: str) -> str:
    """Return the full widget HTML for an error."""

    palette = get_palette(context.theme)
    body = (
        '<div class="error">'
        f'<div class="error-title">{escape_html(title)}</div>'
        f'<div class="error-message">{escape_html(message)}</div>'
        "</div>"
        f'<div style="font-size: 11px; color: {palette.muted};">'
        "Check CloudWatch logs for more details.</div>"
    )
    return widget_page(context, body)


__all__ = [
    "Palette",
    "STATUS_CLASSES",
    "STATUS_LABELS",
    "THEMES",
    "action_button",
    "describe_counts",
    "empty_state",
    "error_panel",
    "escape_html",
    "get_palette",
    "resource_item",
    "rule_count_label",
    "skipped_notice",
    "stat_row",
    "stat_tile",
    "status_badge",
    "stylesheet",
    "truncate",
    "widget_header",
    "widget_page",
]
