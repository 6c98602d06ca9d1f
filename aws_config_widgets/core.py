"""Core orchestration for the AWS Config widgets."""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .errors import NotFound, SourceUnavailable
from .filters import FilterSpec, apply_filters
from .models import ComplianceCount, ComplianceSnapshot, EvaluationResult, Rule, RuleCompliance
from .reconcile import reconcile, tally
from .sources import ConfigRuleSource

logger = logging.getLogger(__name__)

# Widest spreadsheet column, in characters.
MAX_COLUMN_WIDTH = 60


def fetch_catalog_and_summary(
    source: ConfigRuleSource,
) -> Tuple[List[Rule], Dict[str, ComplianceCount]]:
    """Read the rule catalogue and compliance summary concurrently.

    Both reads are awaited before returning. If either fails its exception
    propagates once the other has finished.
    """

    with ThreadPoolExecutor(max_workers=2) as executor:
        rules_future = executor.submit(source.list_rules)
        summary_future = executor.submit(source.get_compliance_summary)
        rules = rules_future.result()
        summary = summary_future.result()
    return rules, summary


@dataclass
class AccountLevelDetails:
    """Evaluation details gathered for the account-level rules."""

    details: Dict[str, List[EvaluationResult]] = field(default_factory=dict)
    unlisted_rules: List[Rule] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)


def fetch_account_level_details(
    source: ConfigRuleSource,
    rules: Sequence[Rule],
    account_level_rules: Iterable[str],
    *,
    speculative: bool = True,
) -> AccountLevelDetails:
    """Fetch evaluation details for account-level rules, one rule at a time.

    Rules missing from ``rules`` are still queried when ``speculative`` is set,
    since ``DescribeConfigRules`` does not always list every rule; those with
    results are returned as placeholder rules in ``unlisted_rules``. A failure
    for one rule is logged, recorded in ``skipped`` and never stops the others.
    ``rules`` is not modified.
    """

    known = {rule.name for rule in rules}
    fetched = AccountLevelDetails()
    for name in account_level_rules:
        in_catalog = name in known
        if name in fetched.details or (not in_catalog and not speculative):
            continue
        try:
            results = source.get_evaluation_results(name)
        except NotFound as exc:
            logger.debug("Account-level rule %s is not deployed: %s", name, exc)
            continue
        except SourceUnavailable as exc:
            logger.warning("Skipping detailed compliance for %s: %s", name, exc)
            fetched.skipped.append(name)
            continue

        if in_catalog:
            fetched.details[name] = results
        elif results:
            logger.info("Found %d evaluations for unlisted rule %s", len(results), name)
            fetched.details[name] = results
            fetched.unlisted_rules.append(Rule(name=name))
    return fetched


def collect_rule_compliance(
    source: ConfigRuleSource,
    spec: Optional[FilterSpec] = None,
    *,
    include_account_id: bool = True,
) -> ComplianceSnapshot:
    """Fetch, reconcile and filter compliance for every rule in the account.

    Unlisted account-level rules found by the speculative fetch are reported
    after the catalogued rules.
    """

    settings = source.settings
    rules, summary = fetch_catalog_and_summary(source)
    fetched = fetch_account_level_details(
        source,
        rules,
        settings.account_level_rules,
        speculative=settings.speculative_detail_fetch,
    )
    reconciled = reconcile(rules + fetched.unlisted_rules, summary, fetched.details)
    selected = apply_filters(reconciled, spec) if spec is not None else list(reconciled)
    logger.debug(
        "Reconciled %d rules (%d after filtering, %d with detail data)",
        len(reconciled),
        len(selected),
        len(fetched.details),
    )
    return ComplianceSnapshot(
        rules=selected,
        tally=tally(selected),
        account_id=source.get_account_id() if include_account_id else None,
        unfiltered_count=len(reconciled),
        skipped_details=fetched.skipped,
    )


def fetch_rule_with_results(
    source: ConfigRuleSource, name: str
) -> Tuple[Rule, List[EvaluationResult]]:
    """Read one rule and its evaluation results concurrently."""

    with ThreadPoolExecutor(max_workers=2) as executor:
        rule_future = executor.submit(source.describe_rule, name)
        results_future = executor.submit(source.get_evaluation_results, name)
        rule = rule_future.result()
        results = results_future.result()
    return rule, results


def print_rule_compliance(records: Iterable[RuleCompliance]) -> None:
    """Pretty-print reconciled rules to stdout."""

    records = list(records)
    if not records:
        print("No Config rules matched.")
        return

    header = f"{'Status':<18} {'Compliant':>9} {'NonCompl':>8} {'Total':>6}  Rule"
    print(header)
    print("-" * len(header))
    for record in records:
        counts = record.counts
        print(
            f"{record.status:<18} {counts.compliant:>9} {counts.non_compliant:>8} "
            f"{counts.total:>6}  {record.name}"
        )


def rule_compliance_rows(records: Iterable[RuleCompliance]) -> List[dict]:
    """Return JSON-serialisable dictionaries for ``records``."""

    return [
        {
            "ruleName": record.name,
            "status": record.status,
            "compliantResourceCount": record.counts.compliant,
            "nonCompliantResourceCount": record.counts.non_compliant,
            "totalResourceCount": record.counts.total,
            "resourceTypes": list(record.rule.resource_types),
            "owner": record.rule.owner,
        }
        for record in records
    ]


def export_compliance_to_excel(records: Iterable[RuleCompliance], path: str) -> str:
    """Write reconciled ``records`` to an Excel workbook located at *path*."""

    headers = ("Rule", "Status", "Compliant", "Non-Compliant", "Total", "Resource Types")
    rows = (
        (
            record.name,
            record.status,
            record.counts.compliant,
            record.counts.non_compliant,
            record.counts.total,
            ", ".join(record.rule.resource_types),
        )
        for record in records
    )
    return _export_rows_to_excel(
        rows,
        headers,
        path,
        sheet_title="Rule Compliance",
        purpose="rule compliance",
    )


def export_evaluations_to_excel(results: Iterable[EvaluationResult], path: str) -> str:
    """Write evaluation ``results`` for a single rule to *path*."""

    headers = ("Resource ID", "Resource Type", "Compliance", "Annotation")
    rows = (
        (result.resource_id, result.resource_type, result.compliance_type, result.annotation or "")
        for result in results
    )
    return _export_rows_to_excel(
        rows,
        headers,
        path,
        sheet_title="Evaluations",
        purpose="evaluation results",
    )


def _export_rows_to_excel(
    rows: Iterable[Sequence[object]],
    headers: Sequence[str],
    path: str,
    *,
    sheet_title: str,
    purpose: str,
) -> str:
    """Write a single-sheet workbook with a bold, frozen, filterable header row."""

    try:
        from openpyxl import Workbook
        from openpyxl.styles import Font
        from openpyxl.utils import get_column_letter
    except ImportError as exc:  # pragma: no cover - dependency missing during tests
        raise RuntimeError(
            f"Exporting {purpose} requires openpyxl. "
            "Install the 'excel' extra: pip install 'aws-config-widgets[excel]'."
        ) from exc

    workbook = Workbook()
    sheet = workbook.active
    sheet.title = sheet_title

    sheet.append(list(headers))
    for cell in sheet[1]:
        cell.font = Font(bold=True)
    sheet.freeze_panes = "A2"

    widths = {idx: len(header) for idx, header in enumerate(headers, start=1)}
    for row in rows:
        values = list(row)
        sheet.append(values)
        for idx, value in enumerate(values, start=1):
            widths[idx] = max(widths.get(idx, 0), len(str(value)))

    last_column = get_column_letter(len(headers))
    sheet.auto_filter.ref = f"A1:{last_column}{sheet.max_row}"
    for idx, width in widths.items():
        sheet.column_dimensions[get_column_letter(idx)].width = min(width + 2, MAX_COLUMN_WIDTH)

    workbook.save(path)
    return path


__all__ = [
    "AccountLevelDetails",
    "collect_rule_compliance",
    "export_compliance_to_excel",
    "export_evaluations_to_excel",
    "fetch_account_level_details",
    "fetch_catalog_and_summary",
    "fetch_rule_with_results",
    "print_rule_compliance",
    "rule_compliance_rows",
]
