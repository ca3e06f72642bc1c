"""Shared fixtures for the orgchart test suite."""

from pathlib import Path

import pytest

from orgchart.hierarchy.models import Record
from orgchart.hierarchy.tree import Forest, build_forest

CSV_HEADER = "Id,firstName,lastName,salary,managerId"


def make_record(
    employee_id: str,
    salary: float = 50_000.0,
    manager_id: str | None = None,
    first_name: str | None = None,
    last_name: str = "Test",
) -> Record:
    return Record(
        id=employee_id,
        first_name=first_name or f"Emp{employee_id}",
        last_name=last_name,
        salary=salary,
        manager_id=manager_id,
    )


def chain_records(length: int, salary: float = 50_000.0) -> list[Record]:
    """Ids 1..length, each managed by the previous one."""
    return [
        make_record(str(i), salary=salary, manager_id=str(i - 1) if i > 1 else None)
        for i in range(1, length + 1)
    ]


@pytest.fixture
def small_org_records() -> list[Record]:
    return [
        Record("1", "J", "D", 60_000.0, None),
        Record("2", "A", "S", 40_000.0, "1"),
        Record("3", "B", "S", 50_000.0, "1"),
    ]


@pytest.fixture
def small_org(small_org_records) -> Forest:
    return build_forest(small_org_records)


@pytest.fixture
def company_records() -> list[Record]:
    """CEO with two managers; Martin is underpaid, Bob is overpaid."""
    return [
        Record("123", "Joe", "Doe", 60_000.0, None),
        Record("124", "Martin", "Chekov", 45_000.0, "123"),
        Record("125", "Bob", "Ronstad", 47_000.0, "123"),
        Record("300", "Alice", "Hasacat", 50_000.0, "124"),
        Record("305", "Brett", "Hardleaf", 34_000.0, "300"),
        Record("400", "Carl", "Lawson", 20_000.0, "125"),
    ]


@pytest.fixture
def company(company_records) -> Forest:
    return build_forest(company_records)


@pytest.fixture
def write_csv(tmp_path):
    """Write CSV lines under tmp_path and return the file path."""

    def _write(lines: list[str], name: str = "employees.csv", header: str | None = CSV_HEADER) -> Path:
        path = tmp_path / name
        body = ([header] if header is not None else []) + lines
        path.write_text("\n".join(body) + "\n", encoding="utf-8")
        return path

    return _write
