"""
Reorder worksheet: the items that need reordering, grouped by vendor, with
order quantities, totals and progress toward each vendor's freight goal.
"""
import logging
from typing import Any, Optional

from pydantic import BaseModel, Field

from .policy import DEFAULT_POLICY, ReorderPolicy, calculate_reorder_info
from .schemas import ReconciledInventoryItem, ReferenceData, ReorderLine
from .utils import parse_freight_goal

logger = logging.getLogger(__name__)

UNKNOWN_VENDOR_BUCKET = "Unknown Vendor"
FREIGHT_NEAR_RATIO = 0.8


class VendorWorksheet(BaseModel):
    vendor: str
    vendor_code: Optional[str] = None
    lines: list[ReorderLine] = Field(default_factory=list)
    total_value: float = 0
    freight_goal: float = 0
    freight_progress: Optional[float] = None
    freight_status: str = "none"


def reorder_items(
    inventory: list[ReconciledInventoryItem],
    search: str = "",
    policy: ReorderPolicy = DEFAULT_POLICY,
) -> list[ReconciledInventoryItem]:
    """Items at or below their reorder point, optionally narrowed by item, description or vendor."""
    items = [item for item in inventory if calculate_reorder_info(item, policy).needs_reorder]
    if not search:
        return items
    needle = search.lower()
    return [
        item
        for item in items
        if any(needle in (value or "").lower() for value in (item.item, item.description, item.vendor))
    ]


def group_by_vendor(
    items: list[ReconciledInventoryItem],
) -> dict[str, list[ReconciledInventoryItem]]:
    grouped: dict[str, list[ReconciledInventoryItem]] = {}
    for item in items:
        grouped.setdefault(item.vendor or UNKNOWN_VENDOR_BUCKET, []).append(item)
    return grouped


def freight_status(total_value: float, freight_goal: float) -> tuple[Optional[float], str]:
    """Share of the freight goal reached and a label: 'met', 'near', 'below' or 'none'."""
    if freight_goal <= 0:
        return None, "none"
    progress = total_value / freight_goal
    if progress >= 1:
        return progress, "met"
    if progress >= FREIGHT_NEAR_RATIO:
        return progress, "near"
    return progress, "below"


def build_vendor_worksheets(
    inventory: list[ReconciledInventoryItem],
    reference: ReferenceData,
    edited_quantities: Optional[dict[str, int]] = None,
    search: str = "",
    policy: ReorderPolicy = DEFAULT_POLICY,
) -> list[VendorWorksheet]:
    """
    One worksheet per vendor. A buyer's edited quantity (keyed by inventory
    id) replaces the suggested quantity for that line.
    """
    edited_quantities = edited_quantities or {}
    worksheets = []

    for vendor, items in group_by_vendor(reorder_items(inventory, search, policy)).items():
        lines = []
        for item in items:
            info = calculate_reorder_info(item, policy)
            quantity = edited_quantities.get(item.id, info.suggested)
            lines.append(
                ReorderLine(
                    vendor=vendor,
                    vendor_code=item.vendor_code,
                    part=item.item,
                    description=item.description,
                    warehouse=item.warehouse,
                    available=item.available,
                    reorder_point=info.reorder_point,
                    target_stock=info.target_stock,
                    order_quantity=max(0, quantity),
                    unit_cost=item.unit_cost,
                    total_value=max(0, quantity) * (item.unit_cost or 0),
                    lead_time=item.lead_time,
                )
            )

        # The first item's vendor code stands for the whole group.
        vendor_code = items[0].vendor_code if items else None
        details = reference.vendor_directory.get(vendor_code) if vendor_code else None
        goal = parse_freight_goal(details.freight_info if details else "")
        total_value = sum(line.total_value for line in lines)
        progress, status = freight_status(total_value, goal)

        worksheets.append(
            VendorWorksheet(
                vendor=vendor,
                vendor_code=vendor_code,
                lines=lines,
                total_value=total_value,
                freight_goal=goal,
                freight_progress=progress,
                freight_status=status,
            )
        )

    logger.info(
        f"Built reorder worksheets for {len(worksheets)} vendors "
        f"({sum(len(w.lines) for w in worksheets)} lines)."
    )
    return worksheets


def export_rows(worksheet: VendorWorksheet) -> list[dict[str, Any]]:
    """The purchase-order suggestion columns for one vendor."""
    return [
        {
            "Part #": line.part,
            "Description": line.description,
            "Warehouse": line.warehouse,
            "Order Quantity": line.order_quantity,
            "Unit Cost": line.unit_cost,
            "Total Value": line.total_value,
        }
        for line in worksheet.lines
    ]
