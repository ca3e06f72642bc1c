"""Employee directory hierarchy.

Reads directory exports, normalizes them into records and rebuilds the
reporting forest used by validation and reporting.
"""

from orgchart.hierarchy.models import Record, employee_schema
from orgchart.hierarchy.ingest import RecordFormatError, load_records, read_employee_csv
from orgchart.hierarchy.transform import normalize_employee_records, records_from_frame
from orgchart.hierarchy.tree import (
    DuplicateEmployeeError,
    Forest,
    Node,
    OrgTree,
    build_forest,
    get_all_subordinates,
    get_direct_reports,
)
