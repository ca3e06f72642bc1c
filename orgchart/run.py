"""Command-line runner: load a directory export, print its tree and validate it."""

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from orgchart.config import DirectoryConfig, apply_overrides, load_config
from orgchart.hierarchy.ingest import RecordFormatError, load_records
from orgchart.hierarchy.tree import DuplicateEmployeeError, OrgTree
from orgchart.utils.types import ReportFormat, RunStatus, exit_code_for
from orgchart.validation.reporters import (
    build_validation_report,
    render_employee_details,
    render_tree,
    save_report,
)
from orgchart.validation.session import employee_validation_details, run_validation

logger = logging.getLogger(__name__)

console = Console()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="orgchart",
        description="Rebuild the reporting hierarchy from an employee export and validate it",
    )
    parser.add_argument("input", nargs="?", type=Path, help="Employee CSV export")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--format",
        dest="report_format",
        choices=[fmt.value for fmt in ReportFormat],
        help="Report output format",
    )
    parser.add_argument(
        "--employee",
        action="append",
        default=[],
        metavar="ID",
        help="Show validation details for an employee (repeatable)",
    )
    parser.add_argument("--env", default="production", help="Configuration environment")
    parser.add_argument("--config", type=Path, help="TOML or YAML config file")
    parser.add_argument("--output-dir", type=Path, help="Save the report under this directory")
    parser.add_argument(
        "--strict-ids",
        action="store_true",
        help="Reject duplicate employee ids instead of keeping the last one",
    )
    return parser


def resolve_config(args: argparse.Namespace) -> DirectoryConfig:
    config = load_config(args.env, args.config)
    overrides = {
        "input_path": args.input,
        "report_format": args.report_format,
        "output_dir": args.output_dir,
        "log_level": "DEBUG" if args.debug else None,
        "strict_ids": True if args.strict_ids else None,
    }
    return apply_overrides(config, {k: v for k, v in overrides.items() if v is not None})


def run(config: DirectoryConfig, employee_ids: list[str] | None = None) -> RunStatus:
    """Execute the load/build/validate/report flow and return the outcome."""
    if config.input_path is None:
        raise ValueError("No input file given and none configured for this environment")

    records = load_records(config.input_path)
    logger.debug("Successfully loaded %d employees", len(records))
    for record in records:
        logger.debug("%s", record)

    tree = OrgTree(strict_ids=config.strict_ids)
    forest = tree.build_tree(records)
    logger.debug("Total employees: %d", tree.get_total_employee_count())
    logger.debug("Root nodes (top-level managers): %d", tree.get_root_node_count())

    if config.report_format != ReportFormat.JSON:
        console.print(render_tree(forest))

    session = run_validation(forest)
    report = build_validation_report(session, config.report_format)
    console.print(report, markup=False, highlight=False, soft_wrap=True)

    for employee_id in employee_ids or []:
        detail = employee_validation_details(session, employee_id)
        if detail is None:
            console.print(f"[yellow]No employee with ID {escape(employee_id)}[/yellow]")
            continue
        console.print(render_employee_details(detail), markup=False, highlight=False)

    if config.output_dir is not None:
        save_report(report, config.output_dir, fmt=config.report_format)

    return RunStatus.VIOLATIONS if session.violations else RunStatus.CLEAN


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    try:
        config = resolve_config(args)
    except (ValueError, FileNotFoundError) as exc:
        console.print(f"[red]Configuration error: {exc}[/red]")
        sys.exit(exit_code_for(RunStatus.FAILED))

    configure_logging(config.log_level)
    if args.debug:
        logger.info("Debug mode enabled")

    try:
        status = run(config, args.employee)
    except FileNotFoundError as exc:
        logger.error("Error reading file: %s", exc)
        status = RunStatus.FAILED
    except (RecordFormatError, DuplicateEmployeeError, ValueError) as exc:
        logger.error("Invalid employee data: %s", exc)
        status = RunStatus.FAILED

    sys.exit(exit_code_for(status))


if __name__ == "__main__":
    main()
