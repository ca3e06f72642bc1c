"""Validation sessions: one batch pass per forest, cached for detail queries."""

import logging
from dataclasses import dataclass, field

from orgchart.hierarchy.models import EmployeeID
from orgchart.hierarchy.tree import Forest, Node
from orgchart.validation.rules import (
    ValidationResult,
    ViolationKind,
    salary_bounds,
    validate_all_manager_salaries,
    validate_all_reporting_depths,
)

logger = logging.getLogger(__name__)


class ValidationStateError(RuntimeError):
    """Raised when detail results are requested before ``run_validation``."""


@dataclass
class ValidationSession:
    """Batch validation results for a single forest.

    A session is scoped to the forest it was created for. Rebuilding the tree
    calls for a new session; nothing here is invalidated automatically.
    """

    forest: Forest
    salary_results: list[ValidationResult] | None = None
    depth_results: list[ValidationResult] | None = None
    _by_employee: dict[EmployeeID, list[ValidationResult]] = field(default_factory=dict, repr=False)

    @property
    def has_run(self) -> bool:
        return self.salary_results is not None and self.depth_results is not None

    @property
    def violations(self) -> list[ValidationResult]:
        self.ensure_run("violations")
        return [*self.salary_results, *self.depth_results]

    def violations_for(self, employee_id: EmployeeID) -> list[ValidationResult]:
        self.ensure_run("violations_for")
        return list(self._by_employee.get(employee_id, []))

    def ensure_run(self, operation: str) -> None:
        if not self.has_run:
            raise ValidationStateError(
                f"{operation} requires a completed batch pass; call run_validation(forest) first"
            )


def run_validation(forest: Forest) -> ValidationSession:
    """Run every batch evaluator once over ``forest`` and return the session."""
    nodes = forest.all_nodes()
    session = ValidationSession(
        forest=forest,
        salary_results=validate_all_manager_salaries(nodes),
        depth_results=validate_all_reporting_depths(nodes),
    )
    for result in session.violations:
        session._by_employee.setdefault(result.subject.id, []).append(result)

    logger.info(
        "Validation pass complete: %d salary violation(s), %d depth violation(s)",
        len(session.salary_results),
        len(session.depth_results),
    )
    return session


@dataclass(frozen=True)
class EmployeeValidationDetail:
    """Per-employee view with passing results reported explicitly.

    Salary fields are ``None`` for employees without direct reports.
    """

    node: Node
    depth_result: ValidationResult
    minimum_salary_result: ValidationResult | None = None
    maximum_salary_result: ValidationResult | None = None
    average_report_salary: float | None = None

    @property
    def is_manager(self) -> bool:
        return self.minimum_salary_result is not None

    @property
    def results(self) -> list[ValidationResult]:
        found = [self.minimum_salary_result, self.maximum_salary_result, self.depth_result]
        return [result for result in found if result is not None]

    @property
    def valid(self) -> bool:
        return all(result.valid for result in self.results)


def _cached_or_ok(
    cached: list[ValidationResult],
    kind: ViolationKind,
    node: Node,
) -> ValidationResult:
    for result in cached:
        if result.kind == kind:
            return result
    return ValidationResult.ok(node.record)


def employee_validation_details(
    session: ValidationSession,
    employee_id: EmployeeID,
) -> EmployeeValidationDetail | None:
    """Look up one employee's results in ``session``; ``None`` if the id is unknown."""
    session.ensure_run("employee_validation_details")

    node = session.forest.index.get(employee_id)
    if node is None:
        logger.debug("No employee %s in validated forest", employee_id)
        return None

    cached = session.violations_for(employee_id)
    depth_result = _cached_or_ok(cached, ViolationKind.TOO_DEEP, node)
    if node.is_leaf:
        return EmployeeValidationDetail(node=node, depth_result=depth_result)

    avg, _, _ = salary_bounds(node.children)
    return EmployeeValidationDetail(
        node=node,
        depth_result=depth_result,
        minimum_salary_result=_cached_or_ok(cached, ViolationKind.UNDERPAID, node),
        maximum_salary_result=_cached_or_ok(cached, ViolationKind.OVERPAID, node),
        average_report_salary=avg,
    )
