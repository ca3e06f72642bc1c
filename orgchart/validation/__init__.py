"""Business-rule validation over the reporting forest."""

from orgchart.validation.rules import (
    MAX_REPORTING_DEPTH,
    MAX_SALARY_RATIO,
    MIN_SALARY_RATIO,
    ValidationResult,
    ViolationKind,
    maximum_salary_rule,
    minimum_salary_rule,
    reporting_depth_rule,
    validate_all_manager_salaries,
    validate_all_reporting_depths,
)
from orgchart.validation.session import (
    EmployeeValidationDetail,
    ValidationSession,
    ValidationStateError,
    employee_validation_details,
    run_validation,
)
from orgchart.validation.reporters import build_validation_report, render_tree, violation_counts
