"""Ingest employee directory exports (``Id,firstName,lastName,salary,managerId``)."""

import logging
from pathlib import Path

import pandas as pd
import pandera as pa

from orgchart.hierarchy.models import EXPECTED_COLUMNS, Record, employee_schema
from orgchart.hierarchy.transform import normalize_employee_records, records_from_frame

logger = logging.getLogger(__name__)

type FilePath = str | Path

EXPORT_ENCODINGS = ("utf-8", "latin-1", "cp1252")
EXPECTED_HEADER = ",".join(EXPECTED_COLUMNS)


class RecordFormatError(ValueError):
    """Raised when an export cannot be read as an employee directory."""


def _skip_bad_line(fields: list[str]) -> None:
    logger.warning(
        "Invalid line format: %s (expected %d fields, got %d)",
        ",".join(fields),
        len(EXPECTED_COLUMNS),
        len(fields),
    )
    return None


def _read_export_file(path: Path) -> pd.DataFrame:
    """Read a single export as all-string columns, handling encoding quirks."""
    for encoding in EXPORT_ENCODINGS:
        try:
            return pd.read_csv(
                path,
                encoding=encoding,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                engine="python",
                on_bad_lines=_skip_bad_line,
            )
        except UnicodeDecodeError:
            continue
        except pd.errors.EmptyDataError as exc:
            raise RecordFormatError(f"Employee export is empty: {path}") from exc
    raise RecordFormatError(f"Could not decode {path}")


def read_employee_csv(path: FilePath) -> pd.DataFrame:
    """Load an export and check its header.

    Rows with too many fields are dropped and logged by ``_skip_bad_line``;
    rows with too few come back NaN-padded and are dropped here with a warning.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Employee export not found: {path}")

    df = _read_export_file(path)
    df.columns = [str(col).strip() for col in df.columns]

    if df.columns.tolist()[: len(EXPECTED_COLUMNS)] != EXPECTED_COLUMNS:
        raise RecordFormatError(f"Invalid CSV format. Expected header: {EXPECTED_HEADER}")

    df = df[EXPECTED_COLUMNS]
    short_rows = df.isna().any(axis=1)
    for idx in df.index[short_rows]:
        logger.warning(
            "Invalid line format in row %s (expected %d fields)", idx, len(EXPECTED_COLUMNS)
        )
    df = df[~short_rows]

    logger.info("Read %d rows from %s", len(df), path.name)
    return df


def validate_employee_frame(df: pd.DataFrame) -> pd.DataFrame:
    """Validate normalized rows against ``employee_schema``, dropping failing rows."""
    try:
        return employee_schema.validate(df, lazy=True)
    except pa.errors.SchemaErrors as exc:
        bad_rows: set[int] = set()
        for _, row in exc.failure_cases.iterrows():
            match row.to_dict():
                case {"column": col, "check": check, "failure_case": val, "index": idx} if pd.notna(idx):
                    logger.warning(
                        "Dropping row %s: column '%s' failed check '%s': %r",
                        idx, col, check, val,
                    )
                    bad_rows.add(int(idx))
                case failure:
                    raise RecordFormatError(f"Employee export failed validation: {failure}") from exc
        return employee_schema.validate(df.drop(index=sorted(bad_rows)))


def load_records(path: FilePath) -> list[Record]:
    """Read, normalize and validate an export into a list of records."""
    raw = read_employee_csv(path)
    normalized = normalize_employee_records(raw)
    validated = validate_employee_frame(normalized)
    records = records_from_frame(validated)
    logger.info("Ingested %d employee records from %s", len(records), Path(path).name)
    return records
