from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Raw records (lot, items, usage, po, sales, vendors) stay plain dicts keyed by
# the logical field names from mappings.py.
Record = dict[str, Any]


class ReconciledInventoryItem(BaseModel):
    """
    One row of the unified inventory view: every lot line for an
    (item, warehouse) pair, joined with the item master and usage history.
    Aliases are the camelCase names the dashboard and the JSON output use.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    item: str
    warehouse: str
    on_hand: float = Field(default=0, alias="onHand")
    committed: float = 0
    available: float = 0
    locations: list[str] = Field(default_factory=list)
    description: Optional[str] = None
    vendor: str = "Unknown"
    vendor_code: Optional[str] = Field(default=None, alias="vendorCode")
    unit_cost: float = Field(default=0, alias="unitCost")
    inventory_value: float = Field(default=0, alias="inventoryValue")
    monthly_avg: float = Field(default=0, alias="monthlyAvg")
    min_level: float = Field(default=0, alias="min")
    max_level: float = Field(default=0, alias="max")
    lead_time: int = Field(default=14, alias="leadTime")
    rpl: str = ""
    category: Optional[str] = None


class ReorderInfo(BaseModel):
    """Purchasing signals for one inventory item. Computed on demand, never stored."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    reorder_point: float = Field(..., alias="reorderPoint")
    target_stock: float = Field(..., alias="targetStock")
    days_of_supply: float = Field(..., alias="daysOfSupply")
    needs_reorder: bool = Field(..., alias="needsReorder")
    suggested: int = Field(..., ge=0)


class VendorContact(BaseModel):
    role: str
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class VendorDetail(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    contacts: list[VendorContact] = Field(default_factory=list)
    notes: list[str] = Field(default_factory=list)
    freight_info: str = Field(default="", alias="freightInfo")


class ReferenceData(BaseModel):
    """Static configuration tables handed to the reconciler and the worksheet."""

    lead_times: dict[str, int]
    vendor_directory: dict[str, VendorDetail] = Field(default_factory=dict)

    @field_validator("lead_times")
    @classmethod
    def require_default_lead_time(cls, value: dict[str, int]) -> dict[str, int]:
        if "DEFAULT" not in value:
            raise ValueError("lead time table must define a DEFAULT entry")
        return value

    @property
    def default_lead_time(self) -> int:
        return self.lead_times["DEFAULT"]

    def lead_time_for(self, vendor_code: Optional[str]) -> int:
        """Lead time for a vendor code; DEFAULT when the code is missing, unmapped or zero."""
        if vendor_code:
            lead_time = self.lead_times.get(vendor_code)
            if lead_time:
                return lead_time
        return self.default_lead_time

    def vendor_name_index(self) -> dict[str, str]:
        """Reverse lookup from a vendor's display name to its code."""
        return {
            detail.name: code
            for code, detail in self.vendor_directory.items()
            if detail.name
        }


class FileInfo(BaseModel):
    name: str
    count: int = Field(default=0, ge=0)


class ReconcileRequest(BaseModel):
    """The three input tables for one reconciliation."""

    model_config = ConfigDict(populate_by_name=True)

    lot_data: list[Record] = Field(default_factory=list, alias="lotData")
    items_data: list[Record] = Field(default_factory=list, alias="itemsData")
    usage_data: list[Record] = Field(default_factory=list, alias="usageData")


class ReconcileResponse(BaseModel):
    status: Literal["success", "error"]
    payload: list[ReconciledInventoryItem] = Field(default_factory=list)
    message: Optional[str] = None


class ReorderLine(BaseModel):
    """
    One line of the exported reorder worksheet. Aliases are the column
    headers of the CSV a buyer turns into a purchase order.
    """

    model_config = ConfigDict(populate_by_name=True)

    vendor: str = Field(..., alias="Vendor")
    vendor_code: Optional[str] = Field(default=None, alias="Vendor Code")
    part: str = Field(..., alias="Part #")
    description: Optional[str] = Field(default=None, alias="Description")
    warehouse: str = Field(..., alias="Warehouse")
    available: float = Field(default=0, alias="Available")
    reorder_point: float = Field(default=0, alias="Reorder Point")
    target_stock: float = Field(default=0, alias="Target Stock")
    order_quantity: int = Field(default=0, ge=0, alias="Order Quantity")
    unit_cost: float = Field(default=0, alias="Unit Cost")
    total_value: float = Field(default=0, alias="Total Value")
    lead_time: int = Field(default=14, alias="Lead Time")
    generated_at: datetime = Field(default_factory=datetime.now, alias="Generated At")


class KpiSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_value: float = Field(default=0, alias="totalValue")
    total_skus: int = Field(default=0, alias="totalSkus")
    low_stock_items: int = Field(default=0, alias="lowStockItems")
    open_pos_count: int = Field(default=0, alias="openPOsCount")
    open_po_value: float = Field(default=0, alias="openPOValue")
    active_vendors: int = Field(default=0, alias="activeVendors")


class VendorSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    code: str
    inventory_value: float = Field(default=0, alias="inventoryValue")
    low_stock_items: int = Field(default=0, alias="lowStockItems")
    sku_count: int = Field(default=0, alias="skuCount")
