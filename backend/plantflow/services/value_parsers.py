"""
Lenient cell parsers for dates and numbers.

Dispatch workbooks are hand-maintained, so nothing here raises on dirty
input. Unparseable dates pass through as their trimmed text and
unparseable numbers become 0. The ``ParseResult`` variants report whether
such a fallback was used; the plain helpers return only the value.
"""
import math
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from numbers import Number
from typing import Any, Union

import numpy as np
import pandas as pd

# Spreadsheet serial day 25569 is 1970-01-01
EXCEL_EPOCH_OFFSET_DAYS = 25569
MS_PER_DAY = 86_400_000
SERIAL_MIN = 30000
SERIAL_MAX = 60000

_UNIX_EPOCH = datetime(1970, 1, 1)
_DMY_PATTERN = re.compile(r"^(\d{1,2})[.\-/](\d{1,2})[.\-/](\d{2}|\d{4})$")
_ISO_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
# Leading numeric prefix, the way spreadsheet tools read "12.5 kg"
_NUMBER_PREFIX = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


@dataclass(frozen=True)
class ParseResult:
    value: Union[str, float]
    defaulted: bool = False


def is_missing(value: Any) -> bool:
    """True for None, NaN, NaT and other pandas null scalars."""
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _is_number(value: Any) -> bool:
    return isinstance(value, (Number, np.number)) and not isinstance(value, (bool, np.bool_))


def _serial_to_iso(serial: float) -> str:
    moment = _UNIX_EPOCH + timedelta(milliseconds=(serial - EXCEL_EPOCH_OFFSET_DAYS) * MS_PER_DAY)
    return moment.date().isoformat()


def _number_text(value: Any) -> str:
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return str(number)


def coerce_date(value: Any) -> ParseResult:
    """
    Parse a cell into an ISO ``YYYY-MM-DD`` string.

    Recognised, in order:
    - native date/datetime values
    - D.M.Y, D-M-Y or D/M/Y with a 2 or 4 digit year (2 digits means 20YY)
    - spreadsheet serial numbers strictly between 30000 and 60000
    Anything else comes back as the trimmed original text.
    """
    if is_missing(value):
        return ParseResult("", defaulted=True)

    if isinstance(value, (datetime, date)):
        if isinstance(value, datetime):
            value = value.date()
        return ParseResult(value.isoformat())

    if _is_number(value):
        text = _number_text(value)
    else:
        text = str(value).strip()
    if not text:
        return ParseResult("", defaulted=True)

    if _ISO_PATTERN.match(text):
        return ParseResult(text)

    dmy = _DMY_PATTERN.match(text)
    if dmy:
        day, month, year = dmy.groups()
        if len(year) == 2:
            year = f"20{year}"
        return ParseResult(f"{year}-{month.zfill(2)}-{day.zfill(2)}")

    try:
        serial = float(value) if _is_number(value) else float(text)
    except ValueError:
        serial = None
    if serial is not None and SERIAL_MIN < serial < SERIAL_MAX:
        return ParseResult(_serial_to_iso(serial))

    return ParseResult(text, defaulted=True)


def parse_excel_date(value: Any) -> str:
    return coerce_date(value).value


def coerce_amount(value: Any) -> ParseResult:
    """
    Parse a cell into a float.

    Commas are stripped before parsing, which covers both Western
    (2,566,675.96) and Indian (25,66,675.96) digit grouping.
    """
    if is_missing(value):
        return ParseResult(0.0, defaulted=True)
    if _is_number(value):
        try:
            number = float(value)
        except OverflowError:
            return ParseResult(0.0, defaulted=True)
    elif isinstance(value, (bool, np.bool_)):
        return ParseResult(0.0, defaulted=True)
    else:
        cleaned = str(value).replace(",", "").strip()
        match = _NUMBER_PREFIX.match(cleaned)
        if not match:
            return ParseResult(0.0, defaulted=True)
        number = float(match.group(0))
    # "1e400" and 400-digit cells overflow to inf
    if not math.isfinite(number):
        return ParseResult(0.0, defaulted=True)
    return ParseResult(number)


def parse_amount(value: Any) -> float:
    return coerce_amount(value).value


def coerce_count(value: Any) -> ParseResult:
    """Case counts are whole numbers; fractional input is truncated."""
    result = coerce_amount(value)
    return ParseResult(int(result.value), defaulted=result.defaulted)
