"""
Workbook reading and column header mapping services.
"""
from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pandas as pd

from plantflow.config.mapping_loader import (
    get_header_aliases,
    get_required_keys,
    get_template_headers,
    normalize_header,
)
from plantflow.services.errors import UploadValidationError

ACCEPTED_FILE_TYPE = "xlsx"


@dataclass
class HeaderMapping:
    """Result of mapping a header row onto canonical field keys."""
    columns: Dict[str, str] = field(default_factory=dict)  # raw header -> canonical key
    unmapped: List[str] = field(default_factory=list)

    @property
    def mapped_keys(self) -> set:
        return set(self.columns.values())


def infer_file_type(filename: str) -> str:
    """Infer file type from extension."""
    return Path(filename).suffix.lower().lstrip(".")


def check_upload_file(filename: Optional[str], content: Optional[bytes]) -> None:
    """Reject a missing upload or anything that is not an .xlsx workbook."""
    if not filename or content is None or infer_file_type(filename) != ACCEPTED_FILE_TYPE:
        raise UploadValidationError("Invalid file. Only .xlsx format is accepted.")


def read_workbook(content: bytes) -> pd.DataFrame:
    """
    Read the first sheet of an .xlsx workbook into a DataFrame.

    Cells keep their native types (dtype=object) so the date and number
    parsers see what the spreadsheet actually stored. Fully blank rows are
    dropped.
    """
    try:
        df = pd.read_excel(BytesIO(content), sheet_name=0, dtype=object, engine="openpyxl")
    except Exception as e:
        raise UploadValidationError(
            "Could not read Excel file.",
            details=str(e),
        ) from e
    df = df.dropna(how="all")
    if df.empty:
        raise UploadValidationError("Excel file is empty.")
    return df


def map_headers(headers: Iterable) -> HeaderMapping:
    """
    Map raw headers to canonical keys through the alias table.

    Matching ignores case and repeated whitespace, so "PGI  Dt." and
    "pgi dt" both land on ``pgi_date``. Unknown headers are collected in
    ``unmapped`` and otherwise ignored.
    """
    aliases = get_header_aliases()
    mapping = HeaderMapping()
    for raw in headers:
        key = aliases.get(normalize_header(raw))
        if key:
            mapping.columns[raw] = key
        else:
            mapping.unmapped.append(str(raw))
    return mapping


def validate_alias_headers(headers: Iterable) -> HeaderMapping:
    mapping = map_headers(headers)
    mapped = mapping.mapped_keys
    missing = [key for key in get_required_keys() if key not in mapped]
    if missing:
        details = {"missing": missing}
        if mapping.unmapped:
            details["unmapped"] = mapping.unmapped
        raise UploadValidationError("Excel is missing required columns.", details=details)
    return mapping


def validate_template_headers(headers: Iterable) -> HeaderMapping:
    """Strict mode: the header row must match the fixed template exactly."""
    headers = list(headers)
    template = get_template_headers()
    present = [str(h).strip() for h in headers]
    missing = [h for h in template if h not in present]
    unexpected = [h for h in present if h not in template]
    if missing or unexpected:
        raise UploadValidationError(
            "Excel headers do not match the expected template.",
            details={"missing": missing, "unexpected": unexpected},
        )
    return map_headers(headers)


def validate_headers(headers: Iterable, mode: str = "alias") -> HeaderMapping:
    if mode == "template":
        return validate_template_headers(headers)
    return validate_alias_headers(headers)
