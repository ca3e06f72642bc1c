"""Normalize raw directory rows and convert them into ``Record`` values."""

import logging

import pandas as pd

from orgchart.hierarchy.models import EXPECTED_COLUMNS, Record

logger = logging.getLogger(__name__)

_TEXT_COLUMNS = ("Id", "firstName", "lastName", "managerId")


def _parse_salary(raw: pd.Series) -> pd.Series:
    """Strip currency symbols and thousands separators, then coerce to float."""
    cleaned = raw.str.strip().str.replace(r"[$,]", "", regex=True)
    return pd.to_numeric(cleaned, errors="coerce")


def normalize_employee_records(raw_df: pd.DataFrame) -> pd.DataFrame:
    """Trim text fields and coerce salaries, dropping rows whose salary is not numeric."""
    df = raw_df[EXPECTED_COLUMNS].copy()

    for col in _TEXT_COLUMNS:
        df[col] = df[col].str.strip()

    df["salary"] = _parse_salary(df["salary"])
    unparseable = df["salary"].isna()
    for idx in df.index[unparseable]:
        logger.warning(
            "Error parsing salary in row %s: %r",
            idx,
            raw_df.at[idx, "salary"],
        )
    df = df[~unparseable]

    logger.info("Normalized %d employee records", len(df))
    return df


def records_from_frame(df: pd.DataFrame) -> list[Record]:
    """Convert a normalized, schema-validated frame into records, keeping row order."""
    records = [
        Record(
            id=row["Id"],
            first_name=row["firstName"],
            last_name=row["lastName"],
            salary=float(row["salary"]),
            manager_id=row["managerId"] or None,
        )
        for row in df.to_dict("records")
    ]
    logger.debug("Built %d records from frame", len(records))
    return records
