"""
Unit tests for csv2oscal.readers.control_reader.

All inputs are synthetic CSV/XLSX files written to ``tmp_path``. The tests
verify header skipping, row order, ragged rows, empty-row skipping, Excel
sheet selection and SourceUnavailable for unreadable sources.
"""

from __future__ import annotations

import hashlib

import pytest
from openpyxl import Workbook

from csv2oscal import MalformedInput, SourceUnavailable, transform
from csv2oscal.readers import ControlReader

from conftest import HEADER, SAMPLE_ROWS


# ---------------------------------------------------------------------------
# CSV
# ---------------------------------------------------------------------------

class TestCsv:
    def test_reads_rows_after_header(self, sample_csv):
        cir = ControlReader(sample_csv).to_cir()

        assert cir["rows"] == SAMPLE_ROWS
        assert cir["line_numbers"] == [2, 3, 4]

    def test_metadata(self, sample_csv):
        cir = ControlReader(sample_csv).to_cir()
        metadata = cir["metadata"]

        assert metadata["source_file"] == str(sample_csv)
        assert metadata["source_type"] == "csv"
        assert metadata["row_count"] == 3
        assert metadata["hash"] == hashlib.sha256(sample_csv.read_bytes()).hexdigest()

    def test_header_only(self, write_csv):
        path = write_csv(HEADER + "\n")
        cir = ControlReader(path).to_cir()

        assert cir["rows"] == []
        document = transform(cir)
        assert document.components == []
        assert len(document.metadata.parties) == 1

    def test_quoted_fields_with_commas(self, write_csv):
        path = write_csv(HEADER + '\nAC-1,MyApp,"Enforces access control, everywhere"\n')
        cir = ControlReader(path).to_cir()

        assert cir["rows"] == [("AC-1", "MyApp", "Enforces access control, everywhere")]

    def test_extra_columns_kept(self, write_csv):
        path = write_csv(HEADER + ",Notes\nAC-1,MyApp,Enforces,inherited\n")
        cir = ControlReader(path).to_cir()

        assert cir["rows"] == [("AC-1", "MyApp", "Enforces", "inherited")]

    def test_short_row_keeps_width(self, write_csv):
        path = write_csv(HEADER + "\nAC-1,MyApp,Enforces access control\nAC-2,MyApp\n")
        cir = ControlReader(path).to_cir()

        assert cir["rows"][1] == ("AC-2", "MyApp")
        with pytest.raises(MalformedInput) as exc_info:
            transform(cir)
        assert exc_info.value.row_index == 1
        assert exc_info.value.line_number == 3

    def test_blank_lines_skipped(self, write_csv):
        path = write_csv(HEADER + "\nAC-1,MyApp,Enforces\n\nAC-2,Other,Audits\n")
        cir = ControlReader(path).to_cir()

        assert [row[0] for row in cir["rows"]] == ["AC-1", "AC-2"]
        assert cir["line_numbers"] == [2, 4]

    def test_empty_description_is_a_field(self, write_csv):
        path = write_csv(HEADER + "\nAC-1,MyApp,\n")
        cir = ControlReader(path).to_cir()

        assert cir["rows"] == [("AC-1", "MyApp", "")]
        document = transform(cir)
        assert len(document.components) == 1
        component = document.components[0]
        assert component.description == ""
        assert component.control_implementations[0].implemented_requirements[0].description == ""

    def test_row_wider_than_header_keeps_all_fields(self, write_csv):
        path = write_csv("Control,Component\nAC-1,MyApp,Enforces access control,extra\n")
        cir = ControlReader(path).to_cir()

        assert cir["rows"] == [("AC-1", "MyApp", "Enforces access control", "extra")]
        assert transform(cir).components[0].description == "Enforces access control"

    def test_cell_text_not_normalized(self, write_csv):
        path = write_csv(HEADER + '\n AC-1 ,MyApp,"  Enforces  "\n')
        cir = ControlReader(path).to_cir()

        assert cir["rows"] == [(" AC-1 ", "MyApp", "  Enforces  ")]
        requirement = transform(cir).components[0].control_implementations[0].implemented_requirements[0]
        assert requirement.control_id == " AC-1 "
        assert requirement.description == "  Enforces  "

    def test_multiline_field_line_numbers(self, write_csv):
        path = write_csv(HEADER + '\nAC-1,MyApp,"first\nsecond"\nAC-2,Other\n')
        cir = ControlReader(path).to_cir()

        assert cir["rows"][0] == ("AC-1", "MyApp", "first\nsecond")
        assert cir["line_numbers"] == [2, 4]
        with pytest.raises(MalformedInput, match=r"line 4"):
            transform(cir)

    def test_values_kept_as_text(self, write_csv):
        path = write_csv(HEADER + "\n001,NA,1.50\n")
        cir = ControlReader(path).to_cir()

        assert cir["rows"] == [("001", "NA", "1.50")]


# ---------------------------------------------------------------------------
# Excel
# ---------------------------------------------------------------------------

def _write_workbook(path, sheets):
    workbook = Workbook()
    workbook.remove(workbook.active)
    for title, rows in sheets.items():
        sheet = workbook.create_sheet(title)
        for row in rows:
            sheet.append(list(row))
    workbook.save(path)
    return path


class TestExcel:
    def test_reads_control_sheet(self, tmp_path):
        header = tuple(HEADER.split(","))
        path = _write_workbook(tmp_path / "controls.xlsx", {
            "Cover": [("Prepared by", "Security team")],
            "Control Matrix": [header] + SAMPLE_ROWS,
        })

        reader = ControlReader(path)
        cir = reader.to_cir()

        assert cir["rows"] == SAMPLE_ROWS
        assert cir["metadata"]["source_type"] == "xlsx"
        assert cir["metadata"]["sheet_name"] == "Control Matrix"

    def test_falls_back_to_first_sheet(self, tmp_path):
        header = tuple(HEADER.split(","))
        path = _write_workbook(tmp_path / "export.xlsx", {
            "Sheet A": [header, SAMPLE_ROWS[0]],
            "Sheet B": [header],
        })

        cir = ControlReader(path).to_cir()
        assert cir["rows"] == [SAMPLE_ROWS[0]]
        assert cir["metadata"]["sheet_name"] == "Sheet A"

    def test_corrupt_workbook(self, tmp_path):
        path = tmp_path / "broken.xlsx"
        path.write_bytes(b"not a zip archive")

        with pytest.raises(SourceUnavailable):
            ControlReader(path).to_cir()


# ---------------------------------------------------------------------------
# Unreadable sources
# ---------------------------------------------------------------------------

class TestSourceUnavailable:
    def test_missing_file(self, tmp_path):
        with pytest.raises(SourceUnavailable, match="not found"):
            ControlReader(tmp_path / "missing.csv")

    def test_empty_file_has_no_header(self, write_csv):
        path = write_csv("")
        with pytest.raises(SourceUnavailable, match="No header row"):
            ControlReader(path).to_cir()

    def test_unsupported_extension(self, write_csv):
        path = write_csv(HEADER + "\n", name="controls.txt")
        with pytest.raises(SourceUnavailable, match="Unsupported input type"):
            ControlReader(path)

    def test_undecodable_bytes(self, tmp_path):
        path = tmp_path / "controls.csv"
        path.write_bytes(HEADER.encode() + b"\nAC-1,\xff\xfe,desc\n")

        with pytest.raises(SourceUnavailable, match="Failed to read"):
            ControlReader(path).to_cir()
