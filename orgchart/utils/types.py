"""Shared type definitions for the directory checks."""

from enum import StrEnum

type ConfigValue = str | int | bool | None
type ConfigDict = dict[str, ConfigValue]


class ReportFormat(StrEnum):
    TABLE = "table"
    SUMMARY = "summary"
    JSON = "json"


class RunStatus(StrEnum):
    CLEAN = "clean"
    VIOLATIONS = "violations"
    FAILED = "failed"


def exit_code_for(status: RunStatus) -> int:
    match status:
        case RunStatus.CLEAN:
            return 0
        case RunStatus.FAILED:
            return 1
        case RunStatus.VIOLATIONS:
            return 2
