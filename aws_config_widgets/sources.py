"""Readers over the AWS Config and STS APIs."""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

import boto3
from botocore.client import BaseClient

from .config import Settings
from .errors import NotFound
from .models import ComplianceCount, EvaluationResult, Rule
from .utils import AWS_ERRORS, safe_paginate, source_error

logger = logging.getLogger(__name__)

# Compliance types requested when fetching evaluation details.
DETAIL_COMPLIANCE_TYPES: Sequence[str] = ("NON_COMPLIANT", "COMPLIANT", "NOT_APPLICABLE")


class ConfigRuleSource:
    """Read-only access to Config rules, summaries and evaluation results.

    Clients are created once per source and shared by the reader methods;
    boto3 clients are safe to use from the orchestrator's worker threads.
    Every AWS failure is re-raised as :class:`~aws_config_widgets.errors.SourceUnavailable`
    (or :class:`~aws_config_widgets.errors.NotFound` for unknown rules).
    """

    def __init__(
        self,
        session: Optional[boto3.session.Session] = None,
        settings: Optional[Settings] = None,
        *,
        config_client: Optional[BaseClient] = None,
        sts_client: Optional[BaseClient] = None,
    ) -> None:
        if session is None and (config_client is None or sts_client is None):
            session = boto3.Session()
        self.settings = settings or Settings()
        self._config = config_client or session.client("config")
        self._sts = sts_client or session.client("sts")

    @classmethod
    def for_region(cls, region: Optional[str], settings: Optional[Settings] = None) -> "ConfigRuleSource":
        return cls(boto3.Session(region_name=region), settings)

    def list_rules(self) -> List[Rule]:
        """Return every Config rule in the account, in API order."""

        try:
            return [
                Rule.from_api(item)
                for item in safe_paginate(self._config, "describe_config_rules", "ConfigRules")
            ]
        except AWS_ERRORS as exc:
            raise source_error("Failed to list Config rules", exc) from exc

    def describe_rule(self, name: str) -> Rule:
        """Return the rule called ``name`` or raise :class:`NotFound`."""

        try:
            response = self._config.describe_config_rules(ConfigRuleNames=[name])
        except AWS_ERRORS as exc:
            raise source_error(f"Failed to describe rule {name}", exc, rule_name=name) from exc
        rules = response.get("ConfigRules") or []
        if not rules:
            raise NotFound(f"Rule {name} not found")
        return Rule.from_api(rules[0])

    def get_compliance_summary(self) -> Dict[str, ComplianceCount]:
        """Return resource counts keyed by rule name.

        Rules AWS has not aggregated are simply absent from the mapping.
        """

        try:
            response = self._config.get_compliance_summary_by_config_rule()
        except AWS_ERRORS as exc:
            raise source_error("Failed to get compliance summary", exc) from exc

        summary: Dict[str, ComplianceCount] = {}
        for item in response.get("ComplianceSummaryByConfigRule") or []:
            name = item.get("ConfigRuleName")
            if not name:
                continue
            summary[name] = ComplianceCount.from_api(item.get("ComplianceSummary") or {})
        return summary

    def get_evaluation_results(
        self,
        name: str,
        compliance_types: Sequence[str] = DETAIL_COMPLIANCE_TYPES,
        limit: Optional[int] = None,
    ) -> List[EvaluationResult]:
        """Return the first page of evaluation results for rule ``name``."""

        try:
            response = self._config.get_compliance_details_by_config_rule(
                ConfigRuleName=name,
                ComplianceTypes=list(compliance_types),
                Limit=limit or self.settings.detail_page_limit,
            )
        except AWS_ERRORS as exc:
            raise source_error(
                f"Failed to get compliance details for {name}", exc, rule_name=name
            ) from exc
        return [EvaluationResult.from_api(item) for item in response.get("EvaluationResults") or []]

    def get_account_id(self) -> Optional[str]:
        """Return the caller's account id, or ``None`` when STS is unreachable."""

        try:
            return self._sts.get_caller_identity().get("Account")
        except AWS_ERRORS as exc:
            logger.warning("Unable to determine account id: %s", exc)
            return None


__all__ = ["ConfigRuleSource", "DETAIL_COMPLIANCE_TYPES"]
