"""Command line interface for previewing the widgets against a live account."""
from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Dict, List, Optional

import boto3

from .config import Settings
from .core import (
    collect_rule_compliance,
    export_compliance_to_excel,
    export_evaluations_to_excel,
    print_rule_compliance,
    rule_compliance_rows,
)
from .errors import WidgetError
from .events import THEMES, WidgetRequest
from .filters import FilterSpec
from .models import COMPLIANCE_STATUSES
from .sources import ConfigRuleSource
from .widgets import WIDGETS


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Return parsed command line arguments."""

    parser = argparse.ArgumentParser(
        description="Render AWS Config CloudWatch custom widgets locally."
    )
    parser.add_argument("widget", choices=sorted(WIDGETS), help="Widget to render")
    parser.add_argument("--profile", help="AWS CLI profile to use", default=None)
    parser.add_argument("--region", help="AWS region to query", default=None)
    parser.add_argument("--rule-names", nargs="*", default=None, help="Only show these rules")
    parser.add_argument(
        "--resource-types",
        nargs="*",
        default=None,
        help="Only show rules scoped to these resource types (e.g., AWS::S3::Bucket)",
    )
    parser.add_argument(
        "--status",
        choices=COMPLIANCE_STATUSES,
        default=None,
        help="Only show rules with this compliance classification",
    )
    parser.add_argument("--rule-name", default=None, help="Single rule to drill into")
    parser.add_argument(
        "--action",
        default=None,
        help="Remediation widget action (remediateRule, getRemediationStatus, showRuleDetails)",
    )
    parser.add_argument("--theme", choices=THEMES, default="light")
    parser.add_argument(
        "--no-remediation",
        dest="show_remediation",
        action="store_false",
        help="Hide remediation buttons in the rules widget",
    )
    parser.add_argument("--output", "-o", help="Write the widget HTML to this path instead of stdout")
    parser.add_argument("--table", action="store_true", help="Print reconciled rules as a table")
    parser.add_argument("--json", dest="json_path", help="Export reconciled rules as JSON")
    parser.add_argument(
        "--excel",
        dest="excel_path",
        help="Export reconciled rules (or the drilled-into rule's evaluations) as an Excel workbook",
    )
    return parser.parse_args(argv)


def build_event(args: argparse.Namespace) -> Dict[str, Any]:
    """Return a CloudWatch-style event for the parsed arguments."""

    params: Dict[str, Any] = {"showRemediation": args.show_remediation}
    if args.rule_names:
        params["ruleNames"] = args.rule_names
    if args.resource_types:
        params["resourceTypes"] = args.resource_types
    if args.status:
        params["complianceStatus"] = args.status
    if args.rule_name:
        params["ruleName"] = args.rule_name
    if args.action:
        params["action"] = args.action
    return {"widgetContext": {"theme": args.theme, "region": args.region}, "params": params}


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point used by ``python -m aws_config_widgets``."""

    args = parse_args(argv)
    try:
        settings = Settings.from_env()
        request = WidgetRequest.from_event(build_event(args))
    except (ValueError, WidgetError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    session = boto3.Session(profile_name=args.profile, region_name=args.region)
    source = ConfigRuleSource(session, settings)

    try:
        html = WIDGETS[args.widget].render(request, source)
    except WidgetError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1

    if args.output:
        with open(args.output, "w", encoding="utf-8") as fh:
            fh.write(html)
        print(f"Widget HTML written to {args.output}")
    elif not (args.table or args.json_path or args.excel_path):
        print(html)

    # With --rule-name the workbook holds that rule's evaluations; the table
    # and JSON exports always describe the reconciled rule list.
    export_evaluations = bool(args.rule_name and args.excel_path)
    needs_snapshot = args.table or args.json_path or (args.excel_path and not export_evaluations)

    try:
        results = source.get_evaluation_results(args.rule_name) if export_evaluations else []
        snapshot = (
            collect_rule_compliance(source, FilterSpec.from_params(request.params))
            if needs_snapshot
            else None
        )
    except WidgetError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1

    exit_code = 0

    if args.table and snapshot is not None:
        print_rule_compliance(snapshot.rules)

    if args.json_path and snapshot is not None:
        with open(args.json_path, "w", encoding="utf-8") as fh:
            json.dump(rule_compliance_rows(snapshot.rules), fh, indent=2)
        print(f"Rule compliance exported to {args.json_path}")

    if args.excel_path:
        try:
            if export_evaluations:
                path = export_evaluations_to_excel(results, args.excel_path)
            else:
                path = export_compliance_to_excel(snapshot.rules, args.excel_path)
        except RuntimeError as exc:
            print(f"Failed to export Excel report: {exc}", file=sys.stderr)
            exit_code = 1
        else:
            print(f"Excel report written to {path}")

    return exit_code


__all__ = ["build_event", "main", "parse_args"]
