import logging
from datetime import date
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from purchasing import analytics, ingest, settings
from purchasing.errors import FileLoadError
from purchasing.pipeline import DataPipeline
from purchasing.policy import ReorderPolicy
from purchasing.reconciler import default_reference
from purchasing.schemas import ReconciledInventoryItem, ReconcileRequest, Record, ReferenceData, ReorderLine
from purchasing.worker import handle_request
from purchasing.worksheet import VendorWorksheet, build_vendor_worksheets

logger = logging.getLogger(__name__)


def _file_date(path: Path) -> date:
    return date.fromtimestamp(path.stat().st_mtime)


class ReorderPipeline(DataPipeline):
    def __init__(
        self,
        input_dir: Optional[Path] = None,
        reference: Optional[ReferenceData] = None,
        edited_quantities: Optional[dict[str, int]] = None,
        test_mode: bool = False,
    ):
        super().__init__("reorder", test_mode=test_mode)
        self.input_dir = input_dir or settings.INPUT_DIR
        self.reference = reference if reference is not None else default_reference()
        self.policy = ReorderPolicy.for_reference(self.reference)
        self.edited_quantities = edited_quantities or {}
        self.inventory: list[ReconciledInventoryItem] = []
        self.worksheets: list[VendorWorksheet] = []
        self.unidentified: list[str] = []

        # Files named with one of these prefixes skip header classification.
        self.PREFIX_REGISTRY = [
            {"record_type": "lot", "prefix": settings.LOT_FILENAME_PREFIX},
            {"record_type": "items", "prefix": settings.ITEMS_FILENAME_PREFIX},
            {"record_type": "usage", "prefix": settings.USAGE_FILENAME_PREFIX},
            {"record_type": "po", "prefix": settings.PO_FILENAME_PREFIX},
            {"record_type": "sales", "prefix": settings.SALES_FILENAME_PREFIX},
            {"record_type": "vendors", "prefix": settings.VENDORS_FILENAME_PREFIX},
        ]

    def extract(self) -> dict[str, list[Record]] | None:
        logger.info("--- Starting Reorder Report Process ---")

        if not self.input_dir.is_dir():
            logger.error(f"Input directory not found: {self.input_dir}")
            return None

        csv_files = sorted(self.input_dir.glob("*.csv"))
        record_sets: dict[str, list[Record]] = {}
        claimed: set[Path] = set()

        for entry in self.PREFIX_REGISTRY:
            record_type, prefix = entry["record_type"], entry["prefix"]
            matches = [p for p in csv_files if p.name.startswith(prefix)]
            if not matches:
                continue
            claimed.update(matches)
            # Newest file of each type wins.
            path = max(matches, key=lambda p: p.stat().st_mtime)
            try:
                rows, _ = ingest.load_records(path, record_type)
            except FileLoadError as e:
                logger.error(f"  > ERROR: {e}")
                continue
            record_sets[record_type] = rows
            self.status_summary[record_type] = _file_date(path)

        unclaimed = [p for p in csv_files if p not in claimed]
        if unclaimed:
            logger.info(f"\n-- Identifying {len(unclaimed)} unnamed files --")
            bulk = ingest.load_bulk(unclaimed)
            self.unidentified = bulk.unidentified
            for record_type, rows in bulk.data.items():
                if record_type in record_sets:
                    logger.info(f"  > '{record_type}' already loaded from a named file; ignoring {bulk.files_loaded[record_type].name}.")
                    continue
                record_sets[record_type] = rows
                self.status_summary[record_type] = _file_date(
                    self.input_dir / bulk.files_loaded[record_type].name
                )

        for record_type in ("lot", "usage"):
            if record_type not in record_sets:
                logger.warning(f"⚠️ No '{record_type}' data found; the inventory cannot be reconciled.")

        return record_sets or None

    def transform(self, record_sets: dict[str, list[Record]]) -> list[ReorderLine] | None:
        logger.info("\n--- Reconciling Inventory ---")
        response = handle_request(
            ReconcileRequest(
                lot_data=record_sets.get("lot", []),
                items_data=record_sets.get("items", []),
                usage_data=record_sets.get("usage", []),
            ),
            self.reference,
        )
        if response.status == "error":
            logger.error(f"❌ Data processing error: {response.message}")
            return None

        self.inventory = response.payload
        kpis = analytics.kpi_summary(self.inventory, record_sets.get("po", []), self.policy)
        logger.info(
            f"Inventory: {kpis.total_skus} SKUs, ${kpis.total_value:,.2f} on hand, "
            f"{kpis.low_stock_items} below reorder point, {kpis.open_pos_count} open PO lines."
        )
        late_orders = [so for so in analytics.sales_orders(record_sets.get("sales", [])) if so["late"]]
        if late_orders:
            logger.warning(f"⚠️ {len(late_orders)} sales order lines are past their wanted date.")

        try:
            logger.info("Building reorder worksheets...")
            self.worksheets = build_vendor_worksheets(
                self.inventory, self.reference, self.edited_quantities, policy=self.policy
            )
        except ValidationError as e:
            logger.error("❌ Data validation failed!")
            logger.error(e)
            return None

        validated_data = [line for worksheet in self.worksheets for line in worksheet.lines]
        logger.info(f"✅ Data validation successful ({len(validated_data)} lines).")
        return validated_data
