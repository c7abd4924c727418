"""
Identifies the record type of an uploaded file from its header row alone.

Each record type declares header-alias groups. Every required group must be
matched by at least one header; optional groups add to the score and at least
``min_optional`` of them must match. The highest score wins, and on equal
scores the type declared first wins.
"""
import logging
from typing import Iterable, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class FileSignature(BaseModel):
    required: list[list[str]]
    optional: list[list[str]] = Field(default_factory=list)
    min_optional: int = Field(default=0, ge=0)


# Declaration order is the tie-break order.
FILE_SIGNATURES: dict[str, FileSignature] = {
    "lot": FileSignature(
        required=[["On Hand", "onHand"], ["Committed", "committed"], ["Available", "available"]],
        optional=[["Item", "item"], ["WH", "wh", "Warehouse"], ["Location", "location"]],
        min_optional=1,
    ),
    "items": FileSignature(
        required=[["Primary Vendor", "primaryVendor"], ["Unit Loaded Cost", "Avg Cost", "unitCost"]],
        optional=[["Item", "item"], ["RPL", "rpl"], ["Categories", "Item Category", "category"], ["Vendor Code", "vendorCode"]],
        min_optional=1,
    ),
    "usage": FileSignature(
        required=[["MO Avg", "monthlyAvg"], ["Min", "min"], ["Max", "max"]],
        optional=[["Item", "item"], ["WH", "wh", "Warehouse"]],
        min_optional=1,
    ),
    "po": FileSignature(
        required=[["PO", "po"], ["Ord Date", "ordDate"]],
        optional=[["Status", "status"], ["Open", "open"], ["Open Total", "openTotal"], ["Ship Date", "shipDate"]],
        min_optional=1,
    ),
    "sales": FileSignature(
        required=[["Wanted Date"], ["Customer Name"]],
        optional=[["Order Date"], ["Order"], ["Qty"]],
        min_optional=1,
    ),
    "vendors": FileSignature(
        required=[["Vendor Code", "Vendor"], ["Vendor Name", "Name"]],
    ),
}


def _matches(group: list[str], headers: set[str]) -> bool:
    return any(alias in headers for alias in group)


def score_headers(headers: Iterable[str], signature: FileSignature) -> Optional[int]:
    """
    Score of a header row against one signature, or None when a required
    group is missing or too few optional groups match.
    """
    header_set = {str(h) for h in headers}
    if not all(_matches(group, header_set) for group in signature.required):
        return None

    optional_matched = sum(1 for group in signature.optional if _matches(group, header_set))
    if optional_matched < signature.min_optional:
        return None

    return len(signature.required) + optional_matched


def classify_headers(
    headers: Iterable[str],
    signatures: dict[str, FileSignature] = FILE_SIGNATURES,
) -> Optional[str]:
    """Best-scoring record type for a header row, or None if nothing qualifies."""
    header_list = list(headers)
    best_type: Optional[str] = None
    best_score = -1
    for record_type, signature in signatures.items():
        score = score_headers(header_list, signature)
        if score is None:
            continue
        # Strictly greater keeps the first declared type on a tie.
        if score > best_score:
            best_type, best_score = record_type, score
        elif score == best_score:
            logger.warning(
                f"Headers match '{best_type}' and '{record_type}' equally (score {score}); using '{best_type}'."
            )
    return best_type
