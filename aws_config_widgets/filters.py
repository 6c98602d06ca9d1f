"""Filtering of reconciled rule compliance by widget parameters."""
from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional

from .events import WidgetParams
from .models import RuleCompliance


@dataclass(frozen=True)
class FilterSpec:
    """Predicates a rule must satisfy to be displayed.

    Empty predicates impose no constraint. All supplied predicates must match.
    """

    rule_names: FrozenSet[str] = frozenset()
    resource_types: FrozenSet[str] = frozenset()
    compliance_status: Optional[str] = None

    @classmethod
    def from_params(cls, params: WidgetParams) -> "FilterSpec":
        return cls(
            rule_names=frozenset(params.rule_names),
            resource_types=frozenset(params.resource_types),
            compliance_status=params.compliance_status,
        )

    @property
    def is_empty(self) -> bool:
        return not (self.rule_names or self.resource_types or self.compliance_status)

    def matches(self, record: RuleCompliance) -> bool:
        if self.rule_names and record.name not in self.rule_names:
            return False
        # Rules without a resource scope never match a resource type filter.
        if self.resource_types and not self.resource_types.intersection(record.rule.resource_types):
            return False
        if self.compliance_status and record.status != self.compliance_status:
            return False
        return True


def apply_filters(records: Iterable[RuleCompliance], spec: FilterSpec) -> List[RuleCompliance]:
    """Return the records matching ``spec`` as a new list in input order."""

    return [record for record in records if spec.matches(record)]


__all__ = ["FilterSpec", "apply_filters"]
