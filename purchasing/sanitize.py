"""
Field mapping and record validation.

Raw CSV rows arrive with whatever headers the ERP export used. They are mapped
onto the fixed logical field set of their record type, then filtered so that
no record without its identity fields ever reaches a join.
"""
import logging
from typing import Any, Iterable, Mapping, Sequence

from .errors import UnknownRecordTypeError
from .mappings import FIELD_MAPPINGS, REQUIRED_FIELDS
from .utils import is_blank, is_missing, to_identity

logger = logging.getLogger(__name__)


def map_row(row: Mapping[str, Any], mapping: Mapping[str, Sequence[str]]) -> dict[str, Any]:
    """Builds a record with exactly the mapped fields, None when no alias is populated."""
    sanitized: dict[str, Any] = {}
    for field, possible_headers in mapping.items():
        value = None
        for header in possible_headers:
            candidate = row.get(header)
            if not is_missing(candidate):
                value = candidate
                break
        sanitized[field] = value
    return sanitized


def sanitize_rows(rows: Iterable[Mapping[str, Any]], record_type: str) -> list[dict[str, Any]]:
    """Maps every row of a record type; a present item id is always a string."""
    mapping = FIELD_MAPPINGS.get(record_type)
    if mapping is None:
        raise UnknownRecordTypeError(record_type)

    sanitized_rows = []
    for row in rows:
        sanitized = map_row(row, mapping)
        if sanitized.get("item") is not None:
            sanitized["item"] = to_identity(sanitized["item"])
        sanitized_rows.append(sanitized)
    return sanitized_rows


def has_required_field(record: Mapping[str, Any] | None, field: str) -> bool:
    if not record:
        return False
    return not is_blank(record.get(field))


def filter_valid(records: Any, required_fields: Sequence[str]) -> list[dict[str, Any]]:
    """Keeps only records carrying every required field; anything that is not a list yields []."""
    if not isinstance(records, list):
        return []
    valid = [
        record
        for record in records
        if all(has_required_field(record, field) for field in required_fields)
    ]
    dropped = len(records) - len(valid)
    if dropped:
        logger.debug(f"Dropped {dropped} of {len(records)} records missing {list(required_fields)}.")
    return valid


def filter_valid_for(records: Any, record_type: str) -> list[dict[str, Any]]:
    """filter_valid with the identity fields declared for the record type."""
    return filter_valid(records, REQUIRED_FIELDS.get(record_type, ()))
