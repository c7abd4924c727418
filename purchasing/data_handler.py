import json
import logging
from datetime import date
from pathlib import Path
from typing import Optional

import pandas as pd
import requests

from . import settings
from . import utils
from .schemas import ReorderLine

logger = logging.getLogger(__name__)


def save_outputs(validated_data: list[ReorderLine], report_name: str) -> Path:
    """Saves the worksheet to CSV and conditionally to JSON, with dated filenames."""
    settings.OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
    date_suffix = utils.get_date_suffix_for_filename()

    csv_path = settings.OUTPUT_DIR / f"{report_name}_{date_suffix}.csv"
    json_path = settings.OUTPUT_DIR / f"{report_name}_{date_suffix}.json"

    # Column order and headers come from the schema aliases.
    columns = [info.alias or name for name, info in ReorderLine.model_fields.items()]
    df_for_csv = pd.DataFrame(
        [line.model_dump(by_alias=True) for line in validated_data], columns=columns
    )
    df_for_csv.to_csv(csv_path, index=False)
    logger.info(f"✅ Reorder worksheet saved to: {csv_path}")

    if settings.SAVE_JSON_OUTPUT:
        with open(json_path, "w", encoding="utf-8") as f:
            json_data = [line.model_dump(mode="json", by_alias=True) for line in validated_data]
            json.dump(json_data, f, indent=2, default=str)
        logger.info(f"✅ JSON output saved to: {json_path}")
    else:
        logger.info("Skipping JSON file save as per configuration.")

    return csv_path


def post_to_webhook(
    validated_data: list[ReorderLine],
    metadata: dict[str, Optional[date]],
    report_type: str,
) -> bool:
    """
    Posts the validated worksheet AND the per-source status summary to the webhook.
    Returns False when nothing was delivered.
    """
    if not settings.WEBHOOK_URL:
        logger.warning("⚠️ WEBHOOK_URL not set. Skipping webhook post.")
        return False

    logger.info(f"🚀 Posting {report_type} data and summary to webhook: {settings.WEBHOOK_URL}")

    payload = {
        "reportType": report_type,
        "reportData": [
            line.model_dump(mode="json", by_alias=True) for line in validated_data
        ],
        "statusSummary": {
            source: dt.isoformat() if dt else None for source, dt in metadata.items()
        },
    }

    try:
        response = requests.post(settings.WEBHOOK_URL, json=payload, timeout=15)
        response.raise_for_status()
        logger.info("✅ Data and summary successfully posted to webhook.")
        return True
    except requests.exceptions.RequestException as e:
        logger.error(f"❌ Error posting to webhook: {e}")
        return False
