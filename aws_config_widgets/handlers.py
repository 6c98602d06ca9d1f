"""AWS Lambda entry points for the CloudWatch custom widgets.

Each handler returns an HTML string. Errors never escape a handler; they are
logged and rendered as the widget's error panel instead, since CloudWatch
shows a raw stack trace for failed invocations.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

from .config import Settings, resolve_region
from .errors import WidgetError
from .events import WidgetContext, WidgetRequest
from .render import error_panel
from .sources import ConfigRuleSource
from .widgets import WIDGETS

logger = logging.getLogger(__name__)

SourceFactory = Callable[[Optional[str], Settings], ConfigRuleSource]

_UNKNOWN_ERROR = "An unknown error occurred while fetching AWS Config data."


def handle_widget(
    name: str,
    event: Optional[Mapping[str, Any]],
    context: Any = None,
    *,
    settings: Optional[Settings] = None,
    source_factory: SourceFactory = ConfigRuleSource.for_region,
) -> str:
    """Render widget ``name`` for a CloudWatch invocation ``event``."""

    entry = WIDGETS[name]
    if not isinstance(event, Mapping):
        event = {}
    display = WidgetContext.from_event(event.get("widgetContext"))
    try:
        settings = settings or Settings.from_env()
        logging.getLogger(__package__).setLevel(settings.log_level)
        request = WidgetRequest.from_event(event, context)
        region = resolve_region(request.params.region, request.context.region)
        source = source_factory(region, settings)
        return entry.render(request, source)
    except WidgetError as exc:
        logger.warning("%s widget failed: %s", entry.name, exc.message)
        return error_panel(display, entry.error_title, exc.message)
    except Exception as exc:
        logger.exception("Unexpected error in %s widget", entry.name)
        return error_panel(display, entry.error_title, str(exc) or _UNKNOWN_ERROR)


def rules_handler(event: Mapping[str, Any], context: Any) -> str:
    return handle_widget("rules", event, context)


def compliance_handler(event: Mapping[str, Any], context: Any) -> str:
    return handle_widget("compliance", event, context)


def remediation_handler(event: Mapping[str, Any], context: Any) -> str:
    return handle_widget("remediation", event, context)


__all__ = ["compliance_handler", "handle_widget", "remediation_handler", "rules_handler"]
