"""Parsing of CloudWatch custom widget invocation events."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from .config import parse_bool, split_names
from .errors import InvalidRequest
from .models import COMPLIANCE_STATUSES

DEFAULT_WIDTH = 400
DEFAULT_HEIGHT = 300
THEMES = ("light", "dark")

# Keys CloudWatch adds to the event that are not widget parameters.
_RESERVED_EVENT_KEYS = {"widgetContext", "params", "describe"}


def _as_names(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return split_names(value)
    if isinstance(value, Iterable):
        return tuple(str(item).strip() for item in value if str(item).strip())
    raise InvalidRequest(f"Expected a list of names, got {value!r}")


def _as_dimension(value: Any, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


@dataclass
class WidgetContext:
    """Display settings CloudWatch passes alongside every invocation."""

    region: Optional[str] = None
    theme: str = "light"
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT

    @classmethod
    def from_event(cls, data: Optional[Mapping[str, Any]]) -> "WidgetContext":
        if not isinstance(data, Mapping):
            data = {}
        theme = str(data.get("theme") or "light").lower()
        return cls(
            region=data.get("region") or None,
            theme=theme if theme in THEMES else "light",
            width=_as_dimension(data.get("width"), DEFAULT_WIDTH),
            height=_as_dimension(data.get("height"), DEFAULT_HEIGHT),
        )


@dataclass
class WidgetParams:
    """Widget parameters recognised by the Config widgets."""

    rule_names: Tuple[str, ...] = ()
    resource_types: Tuple[str, ...] = ()
    compliance_status: Optional[str] = None
    show_remediation: bool = True
    rule_name: Optional[str] = None
    region: Optional[str] = None
    action: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "WidgetParams":
        """Validate raw parameters, raising :class:`InvalidRequest` on bad input."""

        status = data.get("complianceStatus") or None
        if status is not None:
            status = str(status).strip().upper()
            if status not in COMPLIANCE_STATUSES:
                valid = ", ".join(COMPLIANCE_STATUSES)
                raise InvalidRequest(
                    f"Unknown complianceStatus '{data.get('complianceStatus')}'. Valid options: {valid}"
                )
        rule_name = str(data.get("ruleName") or "").strip()
        return cls(
            rule_names=_as_names(data.get("ruleNames")),
            resource_types=_as_names(data.get("resourceTypes")),
            compliance_status=status,
            show_remediation=parse_bool(data.get("showRemediation"), True),
            rule_name=rule_name or None,
            region=data.get("region") or None,
            action=data.get("action") or None,
        )


@dataclass
class WidgetRequest:
    """Everything a widget needs from one Lambda invocation."""

    context: WidgetContext = field(default_factory=WidgetContext)
    params: WidgetParams = field(default_factory=WidgetParams)
    function_arn: Optional[str] = None

    @classmethod
    def from_event(cls, event: Optional[Mapping[str, Any]], lambda_context: Any = None) -> "WidgetRequest":
        """Build a request from a CloudWatch event.

        CloudWatch delivers widget parameters both as top-level event keys and
        under ``widgetContext.params``; callers invoking the function directly
        may nest them under ``params``. Later sources win.
        """

        if not isinstance(event, Mapping):
            event = {}
        raw_context = event.get("widgetContext")
        if not isinstance(raw_context, Mapping):
            raw_context = {}
        merged: Dict[str, Any] = {}
        context_params = raw_context.get("params")
        if isinstance(context_params, Mapping):
            merged.update(context_params)
        merged.update({key: value for key, value in event.items() if key not in _RESERVED_EVENT_KEYS})
        nested = event.get("params")
        if isinstance(nested, Mapping):
            merged.update(nested)

        return cls(
            context=WidgetContext.from_event(raw_context),
            params=WidgetParams.from_mapping(merged),
            function_arn=getattr(lambda_context, "invoked_function_arn", None),
        )


__all__ = ["THEMES", "WidgetContext", "WidgetParams", "WidgetRequest"]
