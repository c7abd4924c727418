import logging
from abc import ABC, abstractmethod
from datetime import date
from pathlib import Path
from typing import Any, Optional

from purchasing import data_handler, settings
from purchasing.schemas import Record

logger = logging.getLogger(__name__)


class DataPipeline(ABC):
    """
    Base class for report pipelines: extract record sets from the input
    folder, transform them into validated report lines, then save and
    deliver the lines with a per-source status summary.
    """

    def __init__(self, report_type: str, sources: Optional[list[str]] = None, test_mode: bool = False):
        self.report_type = report_type
        self.sources = sources if sources is not None else settings.RECORD_TYPES
        self.test_mode = test_mode
        # Date of the file each record type was loaded from; None when absent.
        self.status_summary: dict[str, Optional[date]] = {source: None for source in self.sources}
        self.output_path: Optional[Path] = None
        self.delivered = False

    def run(self) -> list[Any] | None:
        """Runs extract, transform and load. Returns the report lines, or None when a step failed."""
        logger.info(f"🚀 STEP: {self.report_type.upper()} REPORT")
        logger.info("-" * 30)

        record_sets = self.extract()
        if not record_sets:
            logger.warning(f"⚠️ No data extracted for {self.report_type}. Sending empty status summary.")
            self.load([])
            return None

        lines = self.transform(record_sets)
        if lines is None:
            logger.error(f"❌ Transformation failed for {self.report_type}.")
            return None

        self.load(lines)

        logger.info(f"✅ {self.report_type.capitalize()} Pipeline Finished.\n")
        logger.info("=" * 60)
        return lines

    @abstractmethod
    def extract(self) -> dict[str, list[Record]] | None:
        """Returns record sets keyed by record type and fills in status_summary."""

    @abstractmethod
    def transform(self, record_sets: dict[str, list[Record]]) -> list[Any] | None:
        """Returns validated pydantic report lines, or None when validation fails."""

    def log_status_summary(self):
        logger.info("\n--- Final Status Summary ---")
        for source in self.sources:
            file_date = self.status_summary.get(source)
            logger.info(f"{source}: {file_date.isoformat() if file_date else 'No data'}")

    def load(self, lines: list[Any]):
        """Writes the report files and posts to the webhook unless in test mode."""
        if self.sources:
            self.log_status_summary()

        if lines:
            self.output_path = data_handler.save_outputs(lines, settings.REPORT_FILENAME_BASE)
        else:
            logger.warning("No data to save to disk.")

        if self.test_mode:
            logger.info("🧪 Test Mode: Skipping webhook post.")
            return

        self.delivered = data_handler.post_to_webhook(
            validated_data=lines,
            metadata=self.status_summary,
            report_type=self.report_type,
        )
