"""Tests for workbook reading and header mapping."""

from __future__ import annotations

import pandas as pd
import pytest

from plantflow.config.mapping_loader import get_required_keys, get_template_headers, normalize_header
from plantflow.services.errors import UploadValidationError
from plantflow.services.file_parser import (
    check_upload_file,
    map_headers,
    read_workbook,
    validate_alias_headers,
    validate_headers,
    validate_template_headers,
)

from sheet_fixtures import HEADERS, build_workbook, make_row


class TestHeaderNormalization:
    """Tests for alias lookups."""

    def test_normalize_header_collapses_whitespace(self) -> None:
        assert normalize_header("  PGI   Dt. ") == "pgi dt."

    @pytest.mark.parametrize("raw", ["PGI  Dt.", "pgi dt", "PGI Date", "Pgi DT."])
    def test_date_aliases_map_to_same_key(self, raw: str) -> None:
        assert map_headers([raw]).columns == {raw: "pgi_date"}

    @pytest.mark.parametrize("raw", ["PGI No.", "PGI No", "pgi  no."])
    def test_number_aliases_map_to_same_key(self, raw: str) -> None:
        assert map_headers([raw]).columns == {raw: "pgi_no"}

    def test_unknown_headers_are_reported(self) -> None:
        mapping = map_headers(["Plant", "Truck No", "Driver"])
        assert mapping.columns == {"Plant": "plant"}
        assert mapping.unmapped == ["Truck No", "Driver"]

    def test_sample_header_row_maps_completely(self) -> None:
        mapping = map_headers(HEADERS)
        assert mapping.unmapped == []
        assert set(get_required_keys()) <= mapping.mapped_keys


class TestRequiredColumns:
    """Tests for required-column validation."""

    def test_missing_keys_are_listed_exactly(self) -> None:
        headers = [h for h in HEADERS if h not in ("Weight", "Amount")] + ["Truck No"]
        with pytest.raises(UploadValidationError) as exc_info:
            validate_alias_headers(headers)
        assert exc_info.value.message == "Excel is missing required columns."
        assert exc_info.value.details == {"missing": ["weight", "amount"], "unmapped": ["Truck No"]}

    def test_unmapped_is_omitted_when_empty(self) -> None:
        headers = [h for h in HEADERS if h != "Mode"]
        with pytest.raises(UploadValidationError) as exc_info:
            validate_alias_headers(headers)
        assert exc_info.value.details == {"missing": ["mode"]}

    def test_extra_headers_do_not_fail_alias_mode(self) -> None:
        mapping = validate_headers(HEADERS + ["Truck No"])
        assert mapping.unmapped == ["Truck No"]


class TestTemplateMode:
    """Tests for the strict literal-template mode."""

    def test_exact_template_passes(self) -> None:
        mapping = validate_template_headers(get_template_headers())
        assert mapping.unmapped == []

    def test_reports_missing_and_unexpected(self) -> None:
        headers = [h for h in get_template_headers() if h != "Amount"] + ["Amt"]
        with pytest.raises(UploadValidationError) as exc_info:
            validate_headers(headers, mode="template")
        assert exc_info.value.details == {"missing": ["Amount"], "unexpected": ["Amt"]}

    def test_aliases_are_not_enough_in_template_mode(self) -> None:
        with pytest.raises(UploadValidationError):
            validate_template_headers(HEADERS)


class TestUploadFileChecks:
    """Tests for file-level rejection."""

    @pytest.mark.parametrize("filename", [None, "", "dispatch.csv", "dispatch.xls", "xlsx"])
    def test_rejects_non_xlsx(self, filename) -> None:
        with pytest.raises(UploadValidationError, match="Only .xlsx format is accepted"):
            check_upload_file(filename, b"data")

    def test_rejects_missing_content(self) -> None:
        with pytest.raises(UploadValidationError):
            check_upload_file("dispatch.xlsx", None)

    def test_accepts_xlsx(self) -> None:
        check_upload_file("Dispatch 15-03.XLSX", b"data")


class TestReadWorkbook:
    """Tests for reading the first sheet."""

    def test_reads_rows_with_native_types(self) -> None:
        df = read_workbook(build_workbook([make_row(), make_row("P102")]))
        assert list(df.columns) == HEADERS
        assert len(df) == 2
        assert df.iloc[0]["No. of Case"] == 12

    def test_header_only_sheet_is_empty(self) -> None:
        with pytest.raises(UploadValidationError, match="Excel file is empty."):
            read_workbook(build_workbook([]))

    def test_blank_rows_are_dropped(self) -> None:
        blank = {h: None for h in HEADERS}
        df = read_workbook(build_workbook([make_row(), blank, make_row("P102")]))
        assert len(df) == 2

    def test_unreadable_bytes(self) -> None:
        with pytest.raises(UploadValidationError, match="Could not read Excel file."):
            read_workbook(b"definitely not a zip archive")

    def test_only_first_sheet_is_read(self, tmp_path) -> None:
        path = tmp_path / "two_sheets.xlsx"
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            pd.DataFrame([make_row()], columns=HEADERS).to_excel(writer, sheet_name="Today", index=False)
            pd.DataFrame([make_row("P9"), make_row("P10")], columns=HEADERS).to_excel(
                writer, sheet_name="Archive", index=False
            )
        df = read_workbook(path.read_bytes())
        assert list(df["Plant"]) == ["P101"]
