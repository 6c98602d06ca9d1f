"""Shared helpers for AWS Config reads."""
from __future__ import annotations

from typing import Iterator

from botocore.client import BaseClient
from botocore.exceptions import BotoCoreError, ClientError, OperationNotPageableError

from .errors import NotFound, SourceUnavailable

# Exceptions that mean an AWS call did not produce a usable response.
AWS_ERRORS = (BotoCoreError, ClientError)

NO_SUCH_RULE_CODE = "NoSuchConfigRuleException"


def safe_paginate(client: BaseClient, method_name: str, result_key: str, **kwargs) -> Iterator[dict]:
    """Iterate through paginated boto3 results while handling pagination gaps."""

    try:
        paginator = client.get_paginator(method_name)
    except OperationNotPageableError:
        response = getattr(client, method_name)(**kwargs)
        for item in response.get(result_key, []):
            yield item
        return

    for page in paginator.paginate(**kwargs):
        for item in page.get(result_key, []):
            yield item


def error_code(exc: Exception) -> str:
    """Return the AWS error code from a botocore exception, if present."""

    if isinstance(exc, ClientError):
        return exc.response.get("Error", {}).get("Code", "")
    return ""


def source_error(action: str, exc: Exception, *, rule_name: str | None = None) -> Exception:
    """Translate a botocore exception raised by ``action`` into a widget error.

    ``NoSuchConfigRuleException`` becomes :class:`NotFound` when the call was
    scoped to ``rule_name``; everything else is :class:`SourceUnavailable`.
    """

    if rule_name and error_code(exc) == NO_SUCH_RULE_CODE:
        return NotFound(f"Rule {rule_name} not found")
    action = action.rstrip(".")
    return SourceUnavailable(f"{action}: {exc}")


__all__ = ["AWS_ERRORS", "NO_SUCH_RULE_CODE", "error_code", "safe_paginate", "source_error"]
