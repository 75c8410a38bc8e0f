"""
Data normalization service - converts raw workbook rows to shipment records.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List

import pandas as pd

from plantflow.services.value_parsers import (
    coerce_amount,
    coerce_count,
    coerce_date,
    is_missing,
)

TOTAL_SENTINEL = "TOTAL"

TEXT_FIELDS = (
    "plant",
    "location",
    "pgi_no",
    "invoice_no",
    "mode",
    "preferred_mode",
    "dispatch_remark",
    "eod_data",
    "remarks",
)
DATE_FIELDS = ("pgi_date", "invoice_date", "preferred_edd")
AMOUNT_FIELDS = ("weight", "volume", "amount")
COUNT_FIELDS = ("case_count",)


@dataclass
class NormalizedRows:
    records: List[Dict[str, Any]] = field(default_factory=list)
    skipped_rows: int = 0
    defaulted_values: int = 0


def norm_text(val) -> str:
    """Trim a cell to text; blanks and NaN become an empty string."""
    if is_missing(val):
        return ""
    if isinstance(val, float) and val.is_integer():
        # Document numbers typed into numeric cells come back as floats
        return str(int(val))
    return str(val).strip()


def remap_row(raw: Dict[Any, Any], columns: Dict[Any, str]) -> Dict[str, Any]:
    """Re-key a raw row by canonical field name. Later columns win on clashes."""
    mapped: Dict[str, Any] = {}
    for source_col, target_field in columns.items():
        mapped[target_field] = raw.get(source_col)
    return mapped


def is_data_row(row: Dict[str, Any]) -> bool:
    """Totals rows and rows without a plant are not shipments."""
    plant = norm_text(row.get("plant")).upper()
    return bool(plant) and plant != TOTAL_SENTINEL


def normalize_row(row: Dict[str, Any]) -> Dict[str, Any]:
    """
    Normalize a single canonical-keyed row to shipment record fields.

    Returns a dict ready for bulk insertion plus a ``_defaulted`` count of
    values that fell back to a default while parsing.
    """
    result: Dict[str, Any] = {}
    defaulted = 0

    for name in TEXT_FIELDS:
        result[name] = norm_text(row.get(name))

    for name in DATE_FIELDS:
        parsed = coerce_date(row.get(name))
        result[name] = parsed.value
        defaulted += parsed.defaulted

    for name in AMOUNT_FIELDS:
        parsed = coerce_amount(row.get(name))
        result[name] = parsed.value
        defaulted += parsed.defaulted

    for name in COUNT_FIELDS:
        parsed = coerce_count(row.get(name))
        result[name] = parsed.value
        defaulted += parsed.defaulted

    result["is_ready"] = False
    result["_defaulted"] = defaulted
    return result


def build_records(df: pd.DataFrame, columns: Dict[Any, str]) -> NormalizedRows:
    """Filter and normalize every sheet row, keeping sheet order."""
    return normalize_rows(df.to_dict(orient="records"), columns)


def normalize_rows(raw_rows: Iterable[Dict[Any, Any]], columns: Dict[Any, str]) -> NormalizedRows:
    out = NormalizedRows()
    for raw in raw_rows:
        row = remap_row(raw, columns)
        if not is_data_row(row):
            out.skipped_rows += 1
            continue
        record = normalize_row(row)
        out.defaulted_values += record.pop("_defaulted")
        out.records.append(record)
    return out
