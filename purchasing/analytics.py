"""
Summaries over the reconciled inventory: KPI tiles, per-warehouse and
per-category rollups, vendor summaries, open purchase orders and the
part availability lookup used by sales support.
"""
import logging
from datetime import date
from typing import Any, Optional

from . import settings
from .policy import DEFAULT_POLICY, ReorderPolicy, calculate_reorder_info, is_overstock
from .schemas import KpiSummary, ReconciledInventoryItem, Record, ReferenceData, VendorSummary
from .utils import EPOCH, parse_date_string, parse_numeric

logger = logging.getLogger(__name__)


def _is_open(po_line: Record) -> bool:
    return po_line.get("status") == "Open"


def kpi_summary(
    inventory: list[ReconciledInventoryItem],
    po_records: list[Record],
    policy: ReorderPolicy = DEFAULT_POLICY,
) -> KpiSummary:
    open_pos = [po for po in po_records if _is_open(po)]
    return KpiSummary(
        total_value=sum(item.inventory_value for item in inventory),
        total_skus=len({item.item for item in inventory}),
        low_stock_items=sum(
            1 for item in inventory if calculate_reorder_info(item, policy).needs_reorder
        ),
        open_pos_count=len(open_pos),
        open_po_value=sum(parse_numeric(po.get("openTotal")) for po in open_pos),
        active_vendors=len({po.get("vendorName") for po in open_pos if po.get("vendorName")}),
    )


def filter_inventory(
    inventory: list[ReconciledInventoryItem],
    warehouse: str = "all",
    search: str = "",
) -> list[ReconciledInventoryItem]:
    """Narrows to one warehouse, then to rows whose item, description, vendor or category contains the search text."""
    filtered = inventory
    if warehouse != "all":
        filtered = [item for item in filtered if item.warehouse == warehouse]
    if not search:
        return filtered

    needle = search.lower()
    return [
        item
        for item in filtered
        if any(
            needle in (value or "").lower()
            for value in (item.item, item.description, item.vendor, item.category)
        )
    ]


def low_supply_items(
    inventory: list[ReconciledInventoryItem],
    days: float = settings.LOW_SUPPLY_DAYS,
    policy: ReorderPolicy = DEFAULT_POLICY,
) -> list[ReconciledInventoryItem]:
    return [
        item for item in inventory if calculate_reorder_info(item, policy).days_of_supply < days
    ]


def _empty_rollup() -> dict[str, Any]:
    return {"value": 0.0, "skus": 0, "low": 0, "over": 0}


def _add_to_rollup(rollup: dict[str, Any], item: ReconciledInventoryItem, policy: ReorderPolicy):
    rollup["value"] += item.inventory_value
    rollup["skus"] += 1
    if calculate_reorder_info(item, policy).needs_reorder:
        rollup["low"] += 1
    if is_overstock(item, policy):
        rollup["over"] += 1


def warehouse_summary(
    inventory: list[ReconciledInventoryItem],
    warehouses: list[str] = settings.WAREHOUSE_ORDER,
    policy: ReorderPolicy = DEFAULT_POLICY,
) -> dict[str, dict[str, Any]]:
    """Value, SKU, low-stock and overstock counts for the known warehouses only."""
    summary = {wh: _empty_rollup() for wh in warehouses}
    for item in inventory:
        if item.warehouse in summary:
            _add_to_rollup(summary[item.warehouse], item, policy)
    return summary


def category_summary(
    inventory: list[ReconciledInventoryItem],
    policy: ReorderPolicy = DEFAULT_POLICY,
) -> list[tuple[str, dict[str, Any]]]:
    """Same rollup by item category, highest value first."""
    summary: dict[str, dict[str, Any]] = {}
    for item in inventory:
        category = item.category or "Uncategorized"
        if category not in summary:
            summary[category] = {**_empty_rollup(), "items": []}
        _add_to_rollup(summary[category], item, policy)
        summary[category]["items"].append(item.item)
    return sorted(summary.items(), key=lambda entry: entry[1]["value"], reverse=True)


def vendor_summary(
    inventory: list[ReconciledInventoryItem],
    vendors_data: list[Record],
    reference: ReferenceData,
    search: str = "",
    policy: ReorderPolicy = DEFAULT_POLICY,
) -> list[VendorSummary]:
    """
    One row per vendor code found on the inventory. Items without a vendor
    code are left out. Low-stock and SKU counts are by distinct item.
    """
    vendor_names = {
        str(v.get("vendorCode")): v.get("vendorName")
        for v in vendors_data
        if v.get("vendorCode") is not None
    }
    rollups: dict[str, dict[str, Any]] = {}

    for item in inventory:
        code = item.vendor_code
        if not code:
            continue
        if code not in rollups:
            directory_entry = reference.vendor_directory.get(code)
            name = (
                item.vendor
                or (directory_entry.name if directory_entry else None)
                or vendor_names.get(code)
                or f"Vendor {code}"
            )
            rollups[code] = {"name": name, "value": 0.0, "low": set(), "skus": set()}

        rollup = rollups[code]
        rollup["value"] += item.inventory_value
        rollup["skus"].add(item.item)
        if calculate_reorder_info(item, policy).needs_reorder:
            rollup["low"].add(item.item)

    summaries = [
        VendorSummary(
            name=rollup["name"],
            code=code,
            inventory_value=rollup["value"],
            low_stock_items=len(rollup["low"]),
            sku_count=len(rollup["skus"]),
        )
        for code, rollup in rollups.items()
    ]

    if search:
        needle = search.lower()
        summaries = [
            s for s in summaries if needle in s.name.lower() or needle in s.code.lower()
        ]

    return sorted(summaries, key=lambda s: s.inventory_value, reverse=True)


def top_vendor_items(
    inventory: list[ReconciledInventoryItem],
    vendor_code: str,
    n: int = settings.VENDOR_DETAIL_TOP_N_ITEMS,
) -> list[ReconciledInventoryItem]:
    if not vendor_code:
        return []
    items = [item for item in inventory if item.vendor_code == vendor_code]
    return sorted(items, key=lambda item: item.inventory_value or 0, reverse=True)[:n]


def open_purchase_orders(po_records: list[Record], search: str = "") -> list[Record]:
    """Open PO lines matching the search on PO number or vendor name, newest order date first."""
    open_pos = [po for po in po_records if _is_open(po)]
    if search:
        needle = search.lower()
        open_pos = [
            po
            for po in open_pos
            if needle in str(po.get("po") or "").lower()
            or needle in str(po.get("vendorName") or "").lower()
        ]
    return sorted(open_pos, key=lambda po: parse_date_string(po.get("ordDate")), reverse=True)


def sales_orders(
    sales_records: list[Record], search: str = "", today: Optional[date] = None
) -> list[Record]:
    """
    Sales order lines matching the search on order number, customer or item,
    earliest wanted date first. Each row gains `late` and a `status` of
    "LATE" or "On Time". A line whose wanted date cannot be parsed is never late.
    """
    today = today or date.today()
    orders = sales_records
    if search:
        needle = search.lower()
        orders = [
            so
            for so in orders
            if any(
                needle in str(so.get(field) or "").lower()
                for field in ("order", "customerName", "item")
            )
        ]

    result = []
    for so in sorted(orders, key=lambda so: parse_date_string(so.get("wantedDate"))):
        wanted = parse_date_string(so.get("wantedDate"))
        late = wanted != EPOCH and wanted < today
        result.append({**so, "late": late, "status": "LATE" if late else "On Time"})
    return result


def availability_lookup(
    search: str,
    inventory: list[ReconciledInventoryItem],
    po_records: list[Record],
    min_length: int = settings.AVAILABILITY_MIN_SEARCH,
) -> dict[str, dict[str, Any]]:
    """
    Per matching part: description, unit cost, available quantity by
    warehouse and the inbound quantities on open POs.
    """
    if not search or len(search) < min_length:
        return {}

    needle = search.upper()
    results: dict[str, dict[str, Any]] = {}
    for item in inventory:
        if needle in item.item.upper():
            entry = results.setdefault(
                item.item,
                {
                    "description": item.description,
                    "unitCost": item.unit_cost,
                    "warehouses": {},
                    "inbound": [],
                },
            )
            entry["warehouses"][item.warehouse] = item.available

    for line in po_records:
        part = str(line.get("item") or "")
        if _is_open(line) and needle in part.upper() and part in results:
            results[part]["inbound"].append(
                {
                    "po": line.get("po"),
                    "qty": parse_numeric(line.get("openQty")),
                    "shipDate": line.get("shipDate"),
                }
            )
    return results


def _format_quantity(value: float) -> str:
    return f"{value:,.0f}" if float(value).is_integer() else f"{value:,}"


def availability_message(
    part: str,
    entry: dict[str, Any],
    warehouses: list[str] = settings.WAREHOUSE_ORDER,
    markup: float = settings.CUSTOMER_PRICE_MARKUP,
) -> str:
    """Plain-text availability note for a part, ready to paste into chat."""
    customer_price = (entry.get("unitCost") or 0) * markup
    availability = " | ".join(
        f"{wh}: {_format_quantity(entry['warehouses'].get(wh) or 0)} avail." for wh in warehouses
    )
    lines = [f"Part: {part}", f"Desc: {entry.get('description')}", availability]
    inbound: Optional[list] = entry.get("inbound")
    if inbound:
        lines.append(
            "Inbound: "
            + ", ".join(
                f"{_format_quantity(po['qty'])} on PO {po['po']} (est. {po['shipDate'] or 'TBD'})"
                for po in inbound
            )
        )
    lines.append(f"Customer Price: ~${customer_price:.2f}/ea")
    return "\n".join(lines)
