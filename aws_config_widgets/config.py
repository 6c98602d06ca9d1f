"""Runtime settings for the widgets, read from the Lambda environment."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

# Rules evaluated against the account as a whole. AWS Config does not report
# reliable resource counts for these in the per-rule compliance summary.
DEFAULT_ACCOUNT_LEVEL_RULES: Tuple[str, ...] = (
    "iam-password-policy",
    "root-account-mfa-enabled",
    "iam-user-mfa-enabled",
)

DEFAULT_DETAIL_PAGE_LIMIT = 100
DEFAULT_STATUS_PAGE_LIMIT = 50

_FALSE_VALUES = {"0", "false", "no", "off"}


def parse_bool(value: object, default: bool = True) -> bool:
    """Interpret ``value`` as a boolean flag, falling back to ``default``."""

    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() not in _FALSE_VALUES


def split_names(value: Optional[str]) -> Tuple[str, ...]:
    """Split a comma-separated string into stripped, non-empty names."""

    if not value:
        return ()
    return tuple(part.strip() for part in value.split(",") if part.strip())


def _int_setting(environ: Mapping[str, str], key: str, default: int) -> int:
    raw = environ.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{key} must be positive, got {value}")
    return value


LOG_LEVELS: Tuple[str, ...] = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _log_level_setting(environ: Mapping[str, str], key: str, default: str) -> str:
    raw = (environ.get(key) or "").strip()
    if not raw:
        return default
    level = raw.upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"{key} must be one of {', '.join(LOG_LEVELS)}, got {raw!r}")
    return level


@dataclass(frozen=True)
class Settings:
    """Configuration shared by the widgets for one invocation."""

    account_level_rules: Tuple[str, ...] = DEFAULT_ACCOUNT_LEVEL_RULES
    detail_page_limit: int = DEFAULT_DETAIL_PAGE_LIMIT
    status_page_limit: int = DEFAULT_STATUS_PAGE_LIMIT
    speculative_detail_fetch: bool = True
    remediation_function_arn: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``environ`` (defaults to :data:`os.environ`)."""

        env = os.environ if environ is None else environ
        account_level = split_names(env.get("ACCOUNT_LEVEL_RULES"))
        return cls(
            account_level_rules=account_level or DEFAULT_ACCOUNT_LEVEL_RULES,
            detail_page_limit=_int_setting(env, "DETAIL_PAGE_LIMIT", DEFAULT_DETAIL_PAGE_LIMIT),
            status_page_limit=_int_setting(env, "STATUS_PAGE_LIMIT", DEFAULT_STATUS_PAGE_LIMIT),
            speculative_detail_fetch=parse_bool(env.get("SPECULATIVE_DETAIL_FETCH"), True),
            remediation_function_arn=env.get("REMEDIATION_FUNCTION_ARN") or None,
            log_level=_log_level_setting(env, "LOG_LEVEL", "INFO"),
        )


def resolve_region(
    param_region: Optional[str],
    context_region: Optional[str],
    environ: Optional[Mapping[str, str]] = None,
) -> Optional[str]:
    """Return the first region configured by the widget, dashboard or runtime."""

    env = os.environ if environ is None else environ
    for candidate in (
        param_region,
        context_region,
        env.get("AWS_REGION"),
        env.get("AWS_DEFAULT_REGION"),
    ):
        if candidate:
            return candidate
    return None


__all__ = [
    "DEFAULT_ACCOUNT_LEVEL_RULES",
    "DEFAULT_DETAIL_PAGE_LIMIT",
    "DEFAULT_STATUS_PAGE_LIMIT",
    "LOG_LEVELS",
    "Settings",
    "parse_bool",
    "resolve_region",
    "split_names",
]
