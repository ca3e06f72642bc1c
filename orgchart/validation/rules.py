"""Compensation and reporting-depth rules over the org forest.

Each rule is a plain function returning a ``ValidationResult``. The batch
evaluators run the rules across a sequence of nodes and keep violations only.

Policy thresholds are fixed:

- a manager must earn at least ``MIN_SALARY_RATIO`` times the average salary
  of their direct reports,
- and no more than ``MAX_SALARY_RATIO`` times that average;
- nobody may sit more than ``MAX_REPORTING_DEPTH`` levels below a root.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import StrEnum

import numpy as np

from orgchart.hierarchy.models import Record
from orgchart.hierarchy.tree import Node

logger = logging.getLogger(__name__)

MIN_SALARY_RATIO = 1.20
MAX_SALARY_RATIO = 1.50
MAX_REPORTING_DEPTH = 4


class ViolationKind(StrEnum):
    OK = "ok"
    UNDERPAID = "underpaid"
    OVERPAID = "overpaid"
    TOO_DEEP = "too_deep"


_MESSAGES: dict[ViolationKind, str] = {
    ViolationKind.OK: "Requirement met",
    ViolationKind.UNDERPAID: "Manager is underpaid",
    ViolationKind.OVERPAID: "Manager is overpaid",
    ViolationKind.TOO_DEEP: "Reporting line too deep",
}


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of one rule applied to one employee.

    ``magnitude`` is 0 for passing results; otherwise it is the salary
    shortfall, the salary excess, or the number of levels too deep.
    """

    valid: bool
    kind: ViolationKind
    magnitude: float
    subject: Record

    @classmethod
    def ok(cls, subject: Record) -> "ValidationResult":
        return cls(valid=True, kind=ViolationKind.OK, magnitude=0.0, subject=subject)

    @classmethod
    def violation(cls, kind: ViolationKind, magnitude: float, subject: Record) -> "ValidationResult":
        return cls(valid=False, kind=kind, magnitude=magnitude, subject=subject)

    @property
    def message(self) -> str:
        return _MESSAGES[self.kind]


type SalaryRule = Callable[[Record, Sequence[Node]], ValidationResult]
type DepthRule = Callable[[Node], ValidationResult]


def average_salary(nodes: Sequence[Node]) -> float:
    """Mean salary of ``nodes``; 0.0 for an empty sequence."""
    if not nodes:
        return 0.0
    return float(np.mean([node.record.salary for node in nodes]))


def minimum_salary_rule(manager: Record, direct_reports: Sequence[Node]) -> ValidationResult:
    if not direct_reports:
        return ValidationResult.ok(manager)

    floor = average_salary(direct_reports) * MIN_SALARY_RATIO
    if manager.salary >= floor:
        return ValidationResult.ok(manager)
    return ValidationResult.violation(ViolationKind.UNDERPAID, floor - manager.salary, manager)


def maximum_salary_rule(manager: Record, direct_reports: Sequence[Node]) -> ValidationResult:
    if not direct_reports:
        return ValidationResult.ok(manager)

    ceiling = average_salary(direct_reports) * MAX_SALARY_RATIO
    if manager.salary <= ceiling:
        return ValidationResult.ok(manager)
    return ValidationResult.violation(ViolationKind.OVERPAID, manager.salary - ceiling, manager)


def reporting_depth_rule(node: Node) -> ValidationResult:
    depth = node.depth
    if depth <= MAX_REPORTING_DEPTH:
        return ValidationResult.ok(node.record)
    return ValidationResult.violation(
        ViolationKind.TOO_DEEP, float(depth - MAX_REPORTING_DEPTH), node.record
    )


# Order matters: batch results list the floor check before the ceiling check.
SALARY_RULES: tuple[SalaryRule, ...] = (minimum_salary_rule, maximum_salary_rule)


def salary_bounds(direct_reports: Sequence[Node]) -> tuple[float, float, float]:
    """Return ``(average, floor, ceiling)`` for a manager's direct reports."""
    avg = average_salary(direct_reports)
    return avg, avg * MIN_SALARY_RATIO, avg * MAX_SALARY_RATIO


def validate_all_manager_salaries(nodes: Sequence[Node]) -> list[ValidationResult]:
    """Run both salary rules for every node with direct reports; keep violations."""
    results: list[ValidationResult] = []
    managers = 0
    for node in nodes:
        if node.is_leaf:
            continue
        managers += 1
        for rule in SALARY_RULES:
            result = rule(node.record, node.children)
            if not result.valid:
                results.append(result)

    logger.info("Checked salaries of %d managers: %d violation(s)", managers, len(results))
    return results


def validate_all_reporting_depths(nodes: Sequence[Node]) -> list[ValidationResult]:
    """Run the depth rule for every node; keep violations."""
    results = [result for result in map(reporting_depth_rule, nodes) if not result.valid]
    logger.info("Checked reporting depth of %d employees: %d violation(s)", len(nodes), len(results))
    return results
