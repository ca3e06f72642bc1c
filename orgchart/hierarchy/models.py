"""Employee record type and pandera schema for the raw directory export."""

from dataclasses import dataclass

import pandera as pa
from pandera import Check, Column

type EmployeeID = str
type SalaryAmount = float

EXPECTED_COLUMNS: list[str] = ["Id", "firstName", "lastName", "salary", "managerId"]


@dataclass(frozen=True)
class Record:
    """Immutable snapshot of one employee row.

    ``manager_id`` of ``None`` means the employee has no manager; an empty
    string is normalized to ``None`` on construction.
    """

    id: EmployeeID
    first_name: str
    last_name: str
    salary: SalaryAmount
    manager_id: EmployeeID | None = None

    def __post_init__(self) -> None:
        if not self.manager_id:
            object.__setattr__(self, "manager_id", None)
        if self.salary < 0:
            raise ValueError(f"Salary must be non-negative for employee {self.id}: {self.salary}")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def has_manager(self) -> bool:
        return self.manager_id is not None


# Applied after salary has been coerced to float; manager ids stay as
# (possibly empty) strings until normalization.
employee_schema = pa.DataFrameSchema(
    {
        "Id": Column(str, Check.str_length(min_value=1)),
        "firstName": Column(str),
        "lastName": Column(str),
        "salary": Column(float, Check.greater_than_or_equal_to(0)),
        "managerId": Column(str, nullable=True),
    },
    strict=False,
    coerce=True,
)
