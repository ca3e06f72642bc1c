"""Validation result reporting and formatting.

Turns a forest and a validation session into console-friendly output.
Per-kind counts are derived here from the violation lists; the rule engine
itself only returns individual results.
"""

import json
from collections import Counter
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from orgchart.hierarchy.tree import Forest, Node
from orgchart.utils.types import ReportFormat
from orgchart.validation.rules import ValidationResult, ViolationKind, salary_bounds
from orgchart.validation.session import EmployeeValidationDetail, ValidationSession

# Status output only; reports go to stdout.
console = Console(stderr=True)


def violation_counts(results: Iterable[ValidationResult]) -> Counter[ViolationKind]:
    """Count violations per kind; passing results are ignored."""
    return Counter(result.kind for result in results if not result.valid)


def _node_label(node: Node) -> str:
    record = node.record
    return f"{escape(record.full_name)} (ID: {escape(record.id)}, Salary: ${record.salary:,.2f})"


def render_tree(forest: Forest) -> Tree:
    """Build a rich tree of the whole forest, roots in input order."""
    tree = Tree("[bold]Employee Tree Structure[/bold]")
    if not forest.roots:
        tree.add("[dim]No employees found.[/dim]")
        return tree

    def _add(branch: Tree, node: Node) -> None:
        child_branch = branch.add(_node_label(node))
        for child in node.children:
            _add(child_branch, child)

    for root in forest.roots:
        _add(tree, root)
    return tree


def _capture(*renderables) -> str:
    buf = Console(file=None, force_terminal=False, width=120)
    with buf.capture() as capture:
        for renderable in renderables:
            buf.print(renderable)
    return capture.get()


def _result_row(session: ValidationSession, result: ValidationResult) -> dict:
    subject = result.subject
    row = {
        "id": subject.id,
        "name": subject.full_name,
        "kind": str(result.kind),
        "message": result.message,
        "magnitude": round(result.magnitude, 2),
        "salary": subject.salary,
    }
    if result.kind in (ViolationKind.UNDERPAID, ViolationKind.OVERPAID):
        node = session.forest.index.get(subject.id)
        if node is not None:
            avg, floor, ceiling = salary_bounds(node.children)
            row |= {
                "average_report_salary": round(avg, 2),
                "required_range": [round(floor, 2), round(ceiling, 2)],
            }
    return row


def _report_rows(session: ValidationSession) -> tuple[list[dict], list[dict]]:
    salary = [_result_row(session, r) for r in session.salary_results]
    depth = [_result_row(session, r) for r in session.depth_results]
    return salary, depth


def build_validation_report(
    session: ValidationSession,
    output_format: ReportFormat = ReportFormat.TABLE,
) -> str:
    """Render the cached results of ``session`` in the requested format."""
    session.ensure_run("build_validation_report")
    salary_rows, depth_rows = _report_rows(session)
    counts = violation_counts(session.violations)

    match output_format:
        case "json":
            return _to_json(session, salary_rows, depth_rows, counts)
        case "summary":
            return _to_summary(salary_rows, depth_rows, counts)
        case "table":
            return _to_table(salary_rows, depth_rows, counts)
        case other:
            raise ValueError(f"Unsupported report format: {other}")


def _to_json(
    session: ValidationSession,
    salary_rows: list[dict],
    depth_rows: list[dict],
    counts: Counter[ViolationKind],
) -> str:
    report = {
        "timestamp": datetime.now().isoformat(),
        "total_employees": session.forest.total_employee_count,
        "root_nodes": session.forest.root_node_count,
        "counts": {kind.value: counts[kind] for kind in ViolationKind if kind is not ViolationKind.OK},
        "salary_violations": salary_rows,
        "depth_violations": depth_rows,
    }
    return json.dumps(report, indent=2)


def _to_summary(
    salary_rows: list[dict],
    depth_rows: list[dict],
    counts: Counter[ViolationKind],
) -> str:
    lines = [
        f"Underpaid managers: {counts[ViolationKind.UNDERPAID]}",
        f"Overpaid managers: {counts[ViolationKind.OVERPAID]}",
        f"Employees with too long reporting lines: {counts[ViolationKind.TOO_DEEP]}",
    ]
    for row in salary_rows:
        label = "Shortfall" if row["kind"] == ViolationKind.UNDERPAID else "Excess"
        lines.append(
            f"  {row['kind'].upper()}: {row['name']} (ID: {row['id']}) {label}: ${row['magnitude']:,.2f}"
        )
    for row in depth_rows:
        lines.append(
            f"  TOO DEEP: {row['name']} (ID: {row['id']}) Levels too deep: {int(row['magnitude'])}"
        )
    return "\n".join(lines)


def _to_table(
    salary_rows: list[dict],
    depth_rows: list[dict],
    counts: Counter[ViolationKind],
) -> str:
    salary_table = Table(title="Salary Validation Results")
    salary_table.add_column("Employee", style="cyan")
    salary_table.add_column("Status", style="bold")
    salary_table.add_column("Salary", justify="right")
    salary_table.add_column("Avg Report Salary", justify="right")
    salary_table.add_column("Required Range", justify="right")
    salary_table.add_column("Amount", justify="right")

    for row in salary_rows:
        status = (
            "[red]UNDERPAID[/red]" if row["kind"] == ViolationKind.UNDERPAID else "[red]OVERPAID[/red]"
        )
        low, high = row.get("required_range", (0.0, 0.0))
        salary_table.add_row(
            f"{escape(row['name'])} (ID: {escape(row['id'])})",
            status,
            f"${row['salary']:,.2f}",
            f"${row.get('average_report_salary', 0.0):,.2f}",
            f"${low:,.2f} - ${high:,.2f}",
            f"${row['magnitude']:,.2f}",
        )

    depth_table = Table(title="Reporting Structure Validation")
    depth_table.add_column("Employee", style="cyan")
    depth_table.add_column("Status", style="bold")
    depth_table.add_column("Levels Too Deep", justify="right")
    for row in depth_rows:
        depth_table.add_row(
            f"{escape(row['name'])} (ID: {escape(row['id'])})",
            "[red]TOO DEEP[/red]",
            str(int(row["magnitude"])),
        )

    parts: list = []
    if salary_rows:
        parts.append(salary_table)
    else:
        parts.append("[green]All managers meet the salary requirements![/green]")
    parts.append(
        f"Underpaid managers: {counts[ViolationKind.UNDERPAID]}  "
        f"Overpaid managers: {counts[ViolationKind.OVERPAID]}"
    )
    if depth_rows:
        parts.append(depth_table)
    else:
        parts.append("[green]All employees have acceptable reporting line lengths![/green]")
    parts.append(f"Employees with too long reporting lines: {counts[ViolationKind.TOO_DEEP]}")
    return _capture(*parts)


def render_employee_details(detail: EmployeeValidationDetail) -> str:
    """Render the single-employee view, passing checks included."""
    record = detail.node.record
    lines = [f"Validation Details for {escape(record.full_name)} (ID: {escape(record.id)}):"]

    if detail.is_manager:
        lines.append("Manager Validation:")
        minimum = detail.minimum_salary_result
        maximum = detail.maximum_salary_result
        if minimum.valid:
            lines.append("  [green]Minimum salary requirement met[/green]")
        else:
            lines.append(f"  [red]Minimum salary violation: ${minimum.magnitude:,.2f} shortfall[/red]")
        if maximum.valid:
            lines.append("  [green]Maximum salary requirement met[/green]")
        else:
            lines.append(f"  [red]Maximum salary violation: ${maximum.magnitude:,.2f} excess[/red]")

    depth = detail.depth_result
    if depth.valid:
        lines.append("  [green]Reporting depth acceptable[/green]")
    else:
        lines.append(f"  [red]Reporting depth violation: {int(depth.magnitude)} levels too deep[/red]")
    return _capture(*lines)


def save_report(
    report: str,
    output_dir: Path,
    name: str = "validation",
    fmt: ReportFormat = ReportFormat.JSON,
) -> Path:
    """Persist a rendered report to disk."""
    output_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    match fmt:
        case "json":
            path = output_dir / f"{name}_{timestamp}.json"
        case _:
            path = output_dir / f"{name}_{timestamp}.txt"

    path.write_text(report)
    console.print(f"  Report saved: {escape(str(path))}")
    return path
