"""
Tests for reading directory exports into records.

These tests verify that:
1. A well-formed export yields records in file order
2. A wrong header or empty file is a format error
3. Unusable rows are dropped with a warning instead of failing the load
"""

import logging

import pandas as pd
import pytest

from orgchart.hierarchy.ingest import (
    RecordFormatError,
    load_records,
    read_employee_csv,
    validate_employee_frame,
)
from orgchart.hierarchy.models import EXPECTED_COLUMNS, Record
from orgchart.hierarchy.transform import normalize_employee_records, records_from_frame


class TestReadEmployeeCsv:
    """Test the raw reader and header check."""

    def test_reads_all_columns_as_strings(self, write_csv):
        path = write_csv(["123,Joe,Doe,60000,", "124,Martin,Chekov,45000,123"])
        df = read_employee_csv(path)
        assert df.columns.tolist() == EXPECTED_COLUMNS
        assert len(df) == 2
        assert df.iloc[0]["Id"] == "123"
        assert df.iloc[0]["managerId"] == ""

    def test_wrong_header(self, write_csv):
        path = write_csv(["1,Joe,Doe,100,"], header="id,name,salary")
        with pytest.raises(RecordFormatError, match="Expected header"):
            read_employee_csv(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("")
        with pytest.raises(RecordFormatError, match="empty"):
            read_employee_csv(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_employee_csv(tmp_path / "nope.csv")

    def test_header_only(self, write_csv):
        assert read_employee_csv(write_csv([])).empty

    def test_blank_lines_skipped(self, write_csv):
        path = write_csv(["1,Joe,Doe,100,", "", "2,Ann,Lee,90,1"])
        assert len(read_employee_csv(path)) == 2

    def test_row_with_extra_fields_dropped(self, write_csv, caplog):
        path = write_csv(["1,Joe,Doe,100,", "2,Ann,Lee,90,1,extra", "3,Bo,Ng,80,1"])
        with caplog.at_level(logging.WARNING, logger="orgchart.hierarchy.ingest"):
            df = read_employee_csv(path)
        assert df["Id"].tolist() == ["1", "3"]
        assert "Invalid line format" in caplog.text

    def test_row_with_missing_fields_dropped(self, write_csv, caplog):
        path = write_csv(["1,Joe,Doe,100,", "2,Ann,Lee", "3,Bo,Ng,80,1"])
        with caplog.at_level(logging.WARNING, logger="orgchart.hierarchy.ingest"):
            df = read_employee_csv(path)
        assert df["Id"].tolist() == ["1", "3"]
        assert "Invalid line format in row" in caplog.text

    def test_latin1_export(self, tmp_path):
        path = tmp_path / "latin1.csv"
        path.write_bytes("Id,firstName,lastName,salary,managerId\n1,José,Müller,100,\n".encode("latin-1"))
        df = read_employee_csv(path)
        assert df.iloc[0]["firstName"] == "José"


class TestNormalize:
    """Test trimming and salary coercion."""

    def _frame(self, rows: list[list[str]]) -> pd.DataFrame:
        return pd.DataFrame(rows, columns=EXPECTED_COLUMNS)

    def test_trims_text_fields(self):
        df = normalize_employee_records(self._frame([[" 1 ", " Joe", "Doe ", "100", " 7 "]]))
        row = df.iloc[0]
        assert (row["Id"], row["firstName"], row["lastName"], row["managerId"]) == ("1", "Joe", "Doe", "7")

    def test_salary_coerced_to_float(self):
        df = normalize_employee_records(self._frame([["1", "Joe", "Doe", " $60,000.50 ", ""]]))
        assert df.iloc[0]["salary"] == 60_000.50

    def test_non_numeric_salary_dropped(self, caplog):
        frame = self._frame([["1", "Joe", "Doe", "abc", ""], ["2", "Ann", "Lee", "90", ""]])
        with caplog.at_level(logging.WARNING, logger="orgchart.hierarchy.transform"):
            df = normalize_employee_records(frame)
        assert df["Id"].tolist() == ["2"]
        assert "Error parsing salary" in caplog.text

    def test_records_from_frame(self):
        df = normalize_employee_records(
            self._frame([["1", "Joe", "Doe", "100", ""], ["2", "Ann", "Lee", "90", "1"]])
        )
        assert records_from_frame(df) == [
            Record("1", "Joe", "Doe", 100.0, None),
            Record("2", "Ann", "Lee", 90.0, "1"),
        ]


class TestSchemaValidation:
    """Test pandera-based row filtering."""

    def test_valid_frame_passes(self):
        df = pd.DataFrame([["1", "Joe", "Doe", 100.0, ""]], columns=EXPECTED_COLUMNS)
        assert len(validate_employee_frame(df)) == 1

    def test_negative_salary_row_dropped(self, caplog):
        df = pd.DataFrame(
            [["1", "Joe", "Doe", 100.0, ""], ["2", "Ann", "Lee", -5.0, "1"]],
            columns=EXPECTED_COLUMNS,
        )
        with caplog.at_level(logging.WARNING, logger="orgchart.hierarchy.ingest"):
            validated = validate_employee_frame(df)
        assert validated["Id"].tolist() == ["1"]
        assert "Dropping row 1" in caplog.text

    def test_empty_id_row_dropped(self):
        df = pd.DataFrame(
            [["", "Joe", "Doe", 100.0, ""], ["2", "Ann", "Lee", 90.0, ""]],
            columns=EXPECTED_COLUMNS,
        )
        assert validate_employee_frame(df)["Id"].tolist() == ["2"]


class TestLoadRecords:
    """Test the end-to-end record source."""

    def test_sample_export(self, write_csv):
        path = write_csv([
            "123,Joe,Doe,60000,",
            "124,Martin,Chekov,45000,123",
            "125,Bob,Ronstad,47000,123",
            "300,Alice,Hasacat,50000,124",
            "305,Brett,Hardleaf,34000,300",
        ])
        records = load_records(path)
        assert [r.id for r in records] == ["123", "124", "125", "300", "305"]
        assert records[0].manager_id is None
        assert records[1].manager_id == "123"
        assert records[4].salary == 34_000.0

    def test_bad_rows_skipped(self, write_csv):
        path = write_csv([
            "1,Joe,Doe,100,",
            "2,Ann,Lee,not-a-number,1",
            "3,Bo,Ng,-10,1",
            "4,Cy,Fox,80,1",
        ])
        assert [r.id for r in load_records(path)] == ["1", "4"]

    def test_header_only_gives_no_records(self, write_csv):
        assert load_records(write_csv([])) == []
