"""Exceptions raised by the AWS Config widgets."""
from __future__ import annotations


class WidgetError(Exception):
    """Base class for errors that carry a user-facing message."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class SourceUnavailable(WidgetError):
    """An upstream AWS read failed (network, throttling, permissions)."""


class NotFound(WidgetError):
    """A requested Config rule does not exist."""


class InvalidRequest(WidgetError):
    """A widget parameter is missing or malformed."""


__all__ = ["InvalidRequest", "NotFound", "SourceUnavailable", "WidgetError"]
