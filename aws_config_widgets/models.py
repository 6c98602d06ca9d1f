"""Data models for AWS Config rule compliance."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Literal, Mapping, Optional, Tuple

ComplianceStatus = Literal["COMPLIANT", "NON_COMPLIANT", "INSUFFICIENT_DATA"]
ComplianceType = Literal["COMPLIANT", "NON_COMPLIANT", "NOT_APPLICABLE", "INSUFFICIENT_DATA"]

COMPLIANT = "COMPLIANT"
NON_COMPLIANT = "NON_COMPLIANT"
INSUFFICIENT_DATA = "INSUFFICIENT_DATA"
NOT_APPLICABLE = "NOT_APPLICABLE"

COMPLIANCE_STATUSES: Tuple[str, ...] = (COMPLIANT, NON_COMPLIANT, INSUFFICIENT_DATA)

MANAGED_RULE_OWNER = "AWS"


def coerce_count(value: Any) -> int:
    """Return a non-negative integer from an AWS Config count field.

    AWS reports resource counts either as plain integers or as
    ``{"CappedCount": n, "CapExceeded": bool}`` objects.
    """

    if isinstance(value, Mapping):
        value = value.get("CappedCount", 0)
    try:
        count = int(value or 0)
    except (TypeError, ValueError):
        return 0
    return max(count, 0)


@dataclass
class Rule:
    """A Config rule definition as listed by ``DescribeConfigRules``."""

    name: str
    description: Optional[str] = None
    owner: Optional[str] = None
    resource_types: Tuple[str, ...] = ()
    arn: Optional[str] = None
    state: Optional[str] = None

    @property
    def is_managed(self) -> bool:
        return self.owner == MANAGED_RULE_OWNER

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "Rule":
        scope = data.get("Scope") or {}
        source = data.get("Source") or {}
        return cls(
            name=data["ConfigRuleName"],
            description=data.get("Description") or None,
            owner=source.get("Owner"),
            resource_types=tuple(scope.get("ComplianceResourceTypes") or ()),
            arn=data.get("ConfigRuleArn"),
            state=data.get("ConfigRuleState"),
        )


@dataclass
class ComplianceCount:
    """Resource counts for a single rule."""

    compliant: int = 0
    non_compliant: int = 0
    total: int = 0

    @property
    def percent_compliant(self) -> int:
        """Share of compliant resources, rounded half-up; 0 without resources."""

        if self.total <= 0:
            return 0
        return int(self.compliant * 100 / self.total + 0.5)

    @classmethod
    def from_api(cls, summary: Mapping[str, Any]) -> "ComplianceCount":
        return cls(
            compliant=coerce_count(summary.get("CompliantResourceCount")),
            non_compliant=coerce_count(summary.get("NonCompliantResourceCount")),
            total=coerce_count(summary.get("TotalResourceCount")),
        )


@dataclass
class EvaluationResult:
    """The evaluation of one resource against one rule."""

    resource_id: str
    resource_type: str
    compliance_type: str
    annotation: Optional[str] = None
    recorded_at: Optional[datetime] = None

    @property
    def status(self) -> ComplianceStatus:
        """Tri-state status, folding NOT_APPLICABLE into INSUFFICIENT_DATA."""

        if self.compliance_type in (COMPLIANT, NON_COMPLIANT):
            return self.compliance_type  # type: ignore[return-value]
        return INSUFFICIENT_DATA

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "EvaluationResult":
        identifier = data.get("EvaluationResultIdentifier") or {}
        qualifier = identifier.get("EvaluationResultQualifier") or {}
        return cls(
            resource_id=qualifier.get("ResourceId") or "Unknown",
            resource_type=qualifier.get("ResourceType") or "Unknown",
            compliance_type=data.get("ComplianceType") or INSUFFICIENT_DATA,
            annotation=data.get("Annotation") or None,
            recorded_at=data.get("ResultRecordedTime"),
        )


@dataclass
class RuleCompliance:
    """Reconciled compliance for one rule."""

    rule: Rule
    counts: ComplianceCount
    status: ComplianceStatus

    @property
    def name(self) -> str:
        return self.rule.name


@dataclass
class ComplianceTally:
    """Number of rules in each compliance classification."""

    total: int = 0
    compliant: int = 0
    non_compliant: int = 0
    insufficient_data: int = 0


@dataclass
class ComplianceSnapshot:
    """Reconciled and filtered rule compliance for a single invocation."""

    rules: List[RuleCompliance]
    tally: ComplianceTally
    account_id: Optional[str] = None
    unfiltered_count: int = 0
    skipped_details: List[str] = field(default_factory=list)


__all__ = [
    "COMPLIANCE_STATUSES",
    "COMPLIANT",
    "ComplianceCount",
    "ComplianceSnapshot",
    "ComplianceStatus",
    "ComplianceTally",
    "ComplianceType",
    "EvaluationResult",
    "INSUFFICIENT_DATA",
    "MANAGED_RULE_OWNER",
    "NON_COMPLIANT",
    "NOT_APPLICABLE",
    "Rule",
    "RuleCompliance",
    "coerce_count",
]
