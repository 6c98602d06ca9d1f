"""Reconciliation of compliance summaries with per-rule evaluation details.

The compliance summary endpoint omits (or reports zeros for) rules that are
evaluated against the account rather than individual resources. For those
rules the evaluation details are the only reliable signal, so whenever a rule
has detail results they replace its summary counts outright.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Sequence

from .models import (
    COMPLIANT,
    INSUFFICIENT_DATA,
    NON_COMPLIANT,
    ComplianceCount,
    ComplianceStatus,
    ComplianceTally,
    EvaluationResult,
    Rule,
    RuleCompliance,
)


def classify(counts: ComplianceCount) -> ComplianceStatus:
    """Return the tri-state classification for ``counts``.

    Any non-compliant resource wins, even when ``total`` is zero, which is
    how account-level findings surface. Only a rule with evaluated resources
    and no failures is compliant.
    """

    if counts.non_compliant > 0:
        return NON_COMPLIANT
    if counts.total > 0:
        return COMPLIANT
    return INSUFFICIENT_DATA


def count_results(results: Sequence[EvaluationResult]) -> ComplianceCount:
    """Derive resource counts from a list of evaluation results."""

    return ComplianceCount(
        compliant=sum(1 for result in results if result.compliance_type == COMPLIANT),
        non_compliant=sum(1 for result in results if result.compliance_type == NON_COMPLIANT),
        total=len(results),
    )


def merge_counts(
    summary: Mapping[str, ComplianceCount],
    details: Mapping[str, Sequence[EvaluationResult]],
) -> Dict[str, ComplianceCount]:
    """Return summary counts with non-empty detail counts taking precedence."""

    merged: Dict[str, ComplianceCount] = dict(summary)
    for name, results in details.items():
        if results:
            merged[name] = count_results(results)
    return merged


def reconcile(
    rules: Iterable[Rule],
    summary: Mapping[str, ComplianceCount],
    details: Mapping[str, Sequence[EvaluationResult]],
) -> List[RuleCompliance]:
    """Return one :class:`RuleCompliance` per rule, in catalogue order."""

    merged = merge_counts(summary, details)
    reconciled: List[RuleCompliance] = []
    for rule in rules:
        counts = merged.get(rule.name) or ComplianceCount()
        reconciled.append(RuleCompliance(rule=rule, counts=counts, status=classify(counts)))
    return reconciled


def tally(records: Iterable[RuleCompliance]) -> ComplianceTally:
    """Count rules per classification."""

    result = ComplianceTally()
    for record in records:
        result.total += 1
        if record.status == COMPLIANT:
            result.compliant += 1
        elif record.status == NON_COMPLIANT:
            result.non_compliant += 1
        else:
            result.insufficient_data += 1
    return result


__all__ = ["classify", "count_results", "merge_counts", "reconcile", "tally"]
