import logging
import math
import re
from datetime import date, datetime
from pathlib import Path
from typing import Any

import pandas as pd

logger = logging.getLogger(__name__)

FREIGHT_GOAL_PATTERN = re.compile(r"\$?([\d,]+(?:\.\d{1,2})?)")

# Unparseable dates sort as this day.
EPOCH = date(1970, 1, 1)


def get_date_suffix_for_filename() -> str:
    """Returns the current date as a YYYY-MM-DD string for filenames."""
    return datetime.now().strftime("%Y-%m-%d")


def is_missing(value: Any) -> bool:
    """True for None and for the float NaN pandas uses for empty cells."""
    if value is None:
        return True
    return isinstance(value, float) and math.isnan(value)


def is_blank(value: Any) -> bool:
    """Missing, or text that is empty after trimming."""
    if is_missing(value):
        return True
    return isinstance(value, str) and value.strip() == ""


def parse_numeric(value: Any) -> float:
    """
    Converts an ERP cell into a number. Blank, null and unparseable cells
    become 0 so a handful of bad cells never aborts a whole file.
    Thousands separators are stripped: "1,234.5" -> 1234.5.
    """
    if is_missing(value) or value == "":
        return 0.0
    if isinstance(value, bool):
        return float(value)
    text = str(value).replace(",", "")
    # float() also accepts "1_000", "inf" and "Infinity"; ERP cells never mean those.
    if "_" in text:
        return 0.0
    try:
        number = float(text)
    except ValueError:
        return 0.0
    return number if math.isfinite(number) else 0.0


def to_identity(value: Any) -> str:
    """
    Renders an identity field (item, warehouse) as a string. Integral floats
    lose their trailing '.0' so 100100 and 100100.0 compare equal.
    """
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def parse_date_string(date_string: str | None) -> date:
    """Parses ERP 'M/D/YYYY' dates. Anything unparseable sorts as the epoch."""
    if not date_string:
        return EPOCH
    parts = str(date_string).split("/")
    if len(parts) != 3:
        return EPOCH
    try:
        month, day, year = (int(p) for p in parts)
    except ValueError:
        return EPOCH
    if 1 <= month <= 12 and 1 <= day <= 31 and year > 1900:
        try:
            return date(year, month, day)
        except ValueError:
            return EPOCH
    return EPOCH


def parse_freight_goal(freight_info: str | None) -> float:
    """
    Extracts the first dollar amount from vendor freight text.
    '**($1,325)**' -> 1325.0, '**(N/A)**' -> 0.0.
    """
    text = "" if freight_info is None else str(freight_info)
    match = FREIGHT_GOAL_PATTERN.search(text)
    if match and match.group(1):
        return parse_numeric(match.group(1))
    return 0.0


def records_from_frame(df: pd.DataFrame) -> list[dict[str, Any]]:
    """Turns a parsed CSV into row dicts, with empty cells as None."""
    cleaned = df.astype(object).where(pd.notna(df), None)
    return [{str(k): v for k, v in row.items()} for row in cleaned.to_dict("records")]


def load_csv(file_path: Path, nrows: int | None = None) -> pd.DataFrame | None:
    """
    A robust CSV loader with a multi-stage encoding fallback.
    Every column is read as text so part numbers keep leading zeros.
    It will attempt to read a file in the following order:
    1. UTF-8 with BOM support ('utf-8-sig').
    2. Latin-1 - A permissive fallback that never fails but might misinterpret characters.
    """
    read_options = {"dtype": str, "skip_blank_lines": True, "nrows": nrows}
    try:
        return pd.read_csv(file_path, encoding="utf-8-sig", **read_options)

    except UnicodeDecodeError:
        logger.info(
            f"UTF-8 decoding failed for {file_path.name}. Retrying with 'latin-1'."
        )
        try:
            return pd.read_csv(file_path, encoding="latin-1", **read_options)
        except (ValueError, OSError) as e_latin1:
            logger.error(
                f"Could not read {file_path.name} even with latin-1. Reason: {e_latin1}"
            )
            return None

    except FileNotFoundError:
        logger.info(f"Report not found at {file_path}, skipping.")
        return None

    except (ValueError, OSError) as e_general:
        # pandas raises EmptyDataError/ParserError, both ValueError subclasses.
        logger.error(
            f"An unexpected error occurred while reading {file_path.name}. Reason: {e_general}"
        )
        return None
