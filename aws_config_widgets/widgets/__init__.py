"""Widget entry points and registry helpers."""
from __future__ import annotations

from dataclasses import dataclass
import importlib
import pkgutil
from types import MappingProxyType
from typing import Callable, Dict, Mapping

from ..events import WidgetRequest
from ..sources import ConfigRuleSource

WidgetRenderer = Callable[[WidgetRequest, ConfigRuleSource], str]


@dataclass(frozen=True)
class WidgetEntry:
    """A registered widget and the title of its error panel."""

    name: str
    render: WidgetRenderer
    error_title: str


class WidgetRegistry:
    """Registry that stores available widget renderers."""

    def __init__(self) -> None:
        self._widgets: Dict[str, WidgetEntry] = {}

    @staticmethod
    def _normalize(name: str) -> str:
        if not name:
            raise ValueError("Widget name must be a non-empty string")
        return name.strip().lower()

    def register(self, name: str, *, error_title: str) -> Callable[[WidgetRenderer], WidgetRenderer]:
        """Return a decorator that registers *name* for the wrapped renderer."""

        normalized = self._normalize(name)

        def decorator(func: WidgetRenderer) -> WidgetRenderer:
            existing = self._widgets.get(normalized)
            if existing is not None and existing.render is not func:
                raise ValueError(f"Widget '{name}' is already registered")
            self._widgets[normalized] = WidgetEntry(normalized, func, error_title)
            return func

        return decorator

    def as_mapping(self) -> Mapping[str, WidgetEntry]:
        return MappingProxyType(self._widgets)


WIDGET_REGISTRY = WidgetRegistry()
register_widget = WIDGET_REGISTRY.register


def get_widgets() -> Mapping[str, WidgetEntry]:
    """Return a read-only mapping of registered widgets."""

    return WIDGET_REGISTRY.as_mapping()


def _import_widget_modules() -> None:
    """Import modules that register widgets via decorators."""

    package_name = __name__
    package_paths = getattr(__spec__, "submodule_search_locations", None)
    if not package_paths:
        return

    for module_info in pkgutil.iter_modules(package_paths):
        module_name = module_info.name
        if module_name.startswith("_"):
            continue
        importlib.import_module(f"{package_name}.{module_name}")


_import_widget_modules()

WIDGETS: Mapping[str, WidgetEntry] = get_widgets()

__all__ = [
    "WIDGETS",
    "WIDGET_REGISTRY",
    "WidgetEntry",
    "WidgetRenderer",
    "get_widgets",
    "register_widget",
]
