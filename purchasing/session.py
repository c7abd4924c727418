import logging
from concurrent.futures import Future
from datetime import datetime
from typing import Optional

from . import settings
from .errors import UnknownRecordTypeError
from .ingest import BulkUploadResult
from .schemas import FileInfo, ReconciledInventoryItem, ReconcileRequest, ReconcileResponse, Record
from .worker import ReconciliationWorker

logger = logging.getLogger(__name__)

# Record sets whose change invalidates the reconciled inventory.
RECONCILED_TYPES = {"lot", "items", "usage"}


class DataSession:
    """
    One in-memory generation of every uploaded record set, and the
    reconciled inventory computed from the lot, items and usage sets.
    Loading a record type replaces that type's previous rows.
    """

    def __init__(self, worker: Optional[ReconciliationWorker] = None):
        self.worker = worker or ReconciliationWorker()
        self.worker.on_result = self._apply_response
        self.records: dict[str, list[Record]] = {t: [] for t in settings.RECORD_TYPES}
        self.files_loaded: dict[str, FileInfo] = {}
        self.last_updated: Optional[datetime] = None
        self.merged_inventory: list[ReconciledInventoryItem] = []
        self.last_error: Optional[str] = None

    @property
    def data_loaded(self) -> bool:
        return bool(self.records["lot"]) and bool(self.records["usage"])

    def load(self, record_type: str, rows: list[Record], file_info: Optional[FileInfo] = None) -> Optional[Future]:
        """Replaces one record set. Returns the reconciliation future when the inventory is recomputed."""
        if record_type not in self.records:
            raise UnknownRecordTypeError(record_type)
        self.records[record_type] = rows
        if file_info is not None:
            self.files_loaded[record_type] = file_info
        self.last_updated = datetime.now()
        if record_type in RECONCILED_TYPES:
            return self.refresh()
        return None

    def apply_bulk(self, result: BulkUploadResult) -> Optional[Future]:
        """Merges every identified file of a bulk upload, then reconciles once."""
        if not result.data:
            logger.warning("Could not identify any uploaded files. Please check headers.")
            return None
        for record_type, rows in result.data.items():
            self.records[record_type] = rows
        self.files_loaded.update(result.files_loaded)
        self.last_updated = datetime.now()
        if RECONCILED_TYPES & result.data.keys():
            return self.refresh()
        return None

    def refresh(self) -> Optional[Future]:
        """Submits a new reconciliation, or clears the inventory when lot or usage data is missing."""
        if not self.data_loaded:
            self.worker.invalidate()
            self.merged_inventory = []
            return None
        request = ReconcileRequest(
            lot_data=self.records["lot"],
            items_data=self.records["items"],
            usage_data=self.records["usage"],
        )
        return self.worker.submit(request)

    def clear(self):
        self.worker.invalidate()
        self.records = {t: [] for t in settings.RECORD_TYPES}
        self.files_loaded = {}
        self.last_updated = None
        self.merged_inventory = []
        self.last_error = None

    def close(self):
        self.worker.shutdown()

    def _apply_response(self, response: ReconcileResponse):
        if response.status == "error":
            logger.error(f"Data processing error: {response.message}")
            self.last_error = response.message
            self.merged_inventory = []
            return
        self.last_error = None
        self.merged_inventory = list(response.payload)
