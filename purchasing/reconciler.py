import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import pandas as pd
from pydantic import ValidationError

from . import settings
from .errors import ReferenceDataError
from .mappings import ITEMS_MAPPING, LOT_MAPPING, USAGE_MAPPING
from .sanitize import filter_valid_for
from .schemas import Record, ReconciledInventoryItem, ReferenceData, VendorDetail
from .utils import is_missing, parse_numeric, to_identity

logger = logging.getLogger(__name__)

UNKNOWN_VENDOR = "Unknown"
QUANTITY_FIELDS = ["onHand", "committed", "available"]


def load_reference(
    vendor_directory_path: Path | None = None,
    lead_times: dict[str, int] | None = None,
) -> ReferenceData:
    """
    Builds the reference tables from the vendor directory JSON and the
    lead-time table in settings. Raises ReferenceDataError when either is unusable.
    """
    path = vendor_directory_path or settings.VENDOR_DIRECTORY_PATH
    try:
        with open(path, encoding="utf-8") as f:
            raw_directory = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ReferenceDataError(f"Could not read vendor directory {path}: {e}") from e

    try:
        return ReferenceData(
            lead_times=settings.VENDOR_LEAD_TIMES if lead_times is None else lead_times,
            vendor_directory={
                code: VendorDetail(**detail) for code, detail in raw_directory.items()
            },
        )
    except (ValidationError, TypeError, AttributeError) as e:
        raise ReferenceDataError(f"Invalid reference data: {e}") from e


@lru_cache(maxsize=1)
def default_reference() -> ReferenceData:
    """The packaged reference tables, read once per process."""
    return load_reference()


def _text(value: Any) -> Optional[str]:
    """A non-empty string, or None for missing/empty cells."""
    if is_missing(value) or value == "":
        return None
    return str(value)


def _first_present(values: pd.Series) -> Optional[str]:
    """First non-empty value of a column. Later lines never overwrite it."""
    for value in values:
        text = _text(value)
        if text is not None:
            return text
    return None


def _collect_locations(values: pd.Series) -> list[str]:
    """Distinct non-empty locations, in the order they were first seen."""
    locations: list[str] = []
    for value in values:
        location = _text(value)
        if location is not None and location not in locations:
            locations.append(location)
    return locations


def _frame(records: list[Record], columns: list[str]) -> pd.DataFrame:
    """Valid records as a frame with every logical column and string identity fields."""
    df = pd.DataFrame(records).reindex(columns=columns)
    df["item"] = df["item"].map(to_identity)
    if "warehouse" in df.columns:
        df["warehouse"] = df["warehouse"].map(to_identity)
    return df


def _aggregate_lots(valid_lots: list[Record]) -> list[dict[str, Any]]:
    """Collapses lot lines into one aggregate per (item, warehouse), in first-seen order."""
    lots_df = _frame(valid_lots, list(LOT_MAPPING))
    for column in QUANTITY_FIELDS:
        lots_df[column] = lots_df[column].map(parse_numeric)

    groups = []
    for (item, warehouse), group in lots_df.groupby(["item", "warehouse"], sort=False):
        groups.append(
            {
                "item": item,
                "warehouse": warehouse,
                "onHand": float(group["onHand"].sum()),
                "committed": float(group["committed"].sum()),
                "available": float(group["available"].sum()),
                "locations": _collect_locations(group["location"]),
                "description": _first_present(group["description"]),
                "vendor": _first_present(group["vendor"]),
            }
        )
    return groups


def _items_map(valid_items: list[Record]) -> dict[str, dict[str, Any]]:
    """item id -> item master entry; the last entry for a duplicated id wins."""
    items_df = _frame(valid_items, list(ITEMS_MAPPING))
    items_df = items_df.drop_duplicates(subset="item", keep="last")
    return items_df.set_index("item").to_dict("index")


def _usage_map(valid_usage: list[Record]) -> dict[str, dict[str, Any]]:
    """'item|warehouse' -> usage entry; the last entry for a duplicated key wins."""
    usage_df = _frame(valid_usage, list(USAGE_MAPPING))
    usage_df["key"] = usage_df["item"] + "|" + usage_df["warehouse"]
    usage_df = usage_df.drop_duplicates(subset="key", keep="last")
    return usage_df.set_index("key").to_dict("index")


def reconcile(
    lots: list[Record],
    items: list[Record],
    usage: list[Record],
    reference: ReferenceData | None = None,
) -> list[ReconciledInventoryItem]:
    """
    Joins lot, item-master and usage records into one ReconciledInventoryItem
    per distinct (item, warehouse) in the valid lot input.

    Malformed cells degrade to zero. Returns [] when no valid lot or usage
    rows remain, since nothing downstream is meaningful without both.
    """
    if reference is None:
        reference = default_reference()

    valid_lots = filter_valid_for(lots, "lot")
    valid_items = filter_valid_for(items, "items")
    valid_usage = filter_valid_for(usage, "usage")

    if not valid_lots or not valid_usage:
        logger.info(
            f"Nothing to reconcile ({len(valid_lots)} valid lot rows, {len(valid_usage)} valid usage rows)."
        )
        return []

    vendor_name_to_code = reference.vendor_name_index()
    items_map = _items_map(valid_items) if valid_items else {}
    usage_map = _usage_map(valid_usage)

    merged = []
    for lot in _aggregate_lots(valid_lots):
        item, warehouse = lot["item"], lot["warehouse"]
        item_details = items_map.get(item, {})
        usage_details = usage_map.get(f"{item}|{warehouse}", {})

        unit_cost = parse_numeric(item_details.get("unitCost"))
        available = lot["available"]
        vendor = (
            _text(item_details.get("primaryVendor"))
            or lot["vendor"]
            or UNKNOWN_VENDOR
        )
        vendor_code = _text(item_details.get("vendorCode")) or vendor_name_to_code.get(vendor)

        merged.append(
            ReconciledInventoryItem(
                id=f"{item}-{warehouse}",
                item=item,
                warehouse=warehouse,
                on_hand=lot["onHand"],
                committed=lot["committed"],
                available=available,
                locations=lot["locations"],
                description=lot["description"] or _text(item_details.get("description")),
                vendor=vendor,
                vendor_code=vendor_code,
                unit_cost=unit_cost,
                inventory_value=available * unit_cost,
                monthly_avg=parse_numeric(usage_details.get("monthlyAvg")),
                min_level=parse_numeric(usage_details.get("min")),
                max_level=parse_numeric(usage_details.get("max")),
                lead_time=reference.lead_time_for(vendor_code),
                rpl=_text(item_details.get("rpl")) or "",
                category=_text(item_details.get("category")),
            )
        )

    logger.info(
        f"Reconciled {len(valid_lots)} lot rows into {len(merged)} inventory records "
        f"({len(valid_items)} item master rows, {len(valid_usage)} usage rows)."
    )
    return merged
