import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from .classifier import FILE_SIGNATURES, FileSignature, classify_headers
from .errors import FileLoadError, PurchasingError
from .sanitize import sanitize_rows
from .schemas import FileInfo, Record
from .utils import load_csv, records_from_frame

logger = logging.getLogger(__name__)


class BulkUploadResult(BaseModel):
    """Outcome of a bulk upload: record sets by type plus the files nobody could identify."""

    data: dict[str, list[Record]] = Field(default_factory=dict)
    files_loaded: dict[str, FileInfo] = Field(default_factory=dict)
    unidentified: list[str] = Field(default_factory=list)

    @property
    def identified_count(self) -> int:
        return len(self.files_loaded)


def read_headers(path: Path) -> list[str]:
    """Header row only; the body is not parsed."""
    df = load_csv(path, nrows=0)
    if df is None:
        raise FileLoadError(f"Could not read headers of {path.name}")
    return [str(column) for column in df.columns]


def load_records(path: Path, record_type: str) -> tuple[list[Record], FileInfo]:
    """Parses a whole file and maps its rows onto the record type's fields."""
    df = load_csv(path)
    if df is None:
        raise FileLoadError(f"Could not read {path.name}")
    rows = records_from_frame(df)
    sanitized = sanitize_rows(rows, record_type)
    logger.info(f"  > Loaded {path.name} as '{record_type}' ({len(rows)} rows).")
    return sanitized, FileInfo(name=path.name, count=len(rows))


def identify_and_load(
    path: Path, signatures: dict[str, FileSignature] = FILE_SIGNATURES
) -> Optional[tuple[str, list[Record], FileInfo]]:
    """Classifies one file from its headers and loads it. None when it cannot be identified."""
    record_type = classify_headers(read_headers(path), signatures)
    if record_type is None:
        logger.warning(f"  > Could not identify {path.name} from its headers.")
        return None
    rows, file_info = load_records(path, record_type)
    return record_type, rows, file_info


def load_bulk(
    paths: list[Path],
    max_workers: int = 4,
    signatures: dict[str, FileSignature] = FILE_SIGNATURES,
) -> BulkUploadResult:
    """
    Identifies and loads several files concurrently. A file that fails or
    cannot be classified is reported in `unidentified`; the rest of the batch
    is unaffected. Results are merged in input order once every file is done,
    so a later file of the same type replaces an earlier one.
    """
    result = BulkUploadResult()
    if not paths:
        return result

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [executor.submit(identify_and_load, path, signatures) for path in paths]

    for path, future in zip(paths, futures):
        try:
            outcome = future.result()
        except (PurchasingError, ValueError) as e:
            logger.error(f"  > Error reading {path.name}: {e}")
            outcome = None

        if outcome is None:
            result.unidentified.append(path.name)
            continue

        record_type, rows, file_info = outcome
        result.data[record_type] = rows
        result.files_loaded[record_type] = file_info

    logger.info(f"Identified and processed {result.identified_count} of {len(paths)} files.")
    return result
