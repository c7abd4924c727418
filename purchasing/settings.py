import os
from pathlib import Path
from dotenv import load_dotenv

# --- Base Directory ---
BASE_DIR = Path(__file__).resolve().parent.parent
PACKAGE_DIR = Path(__file__).resolve().parent

# --- Load Environment Variables ---
load_dotenv(BASE_DIR / ".env")

# --- Path Configuration ---
# Use Path objects for robust, OS-agnostic path handling.
INPUT_DIR = BASE_DIR / os.getenv("INPUT_DIR", "input")
OUTPUT_DIR = BASE_DIR / os.getenv("OUTPUT_DIR", "output")
VENDOR_DIRECTORY_PATH = Path(
    os.getenv(
        "VENDOR_DIRECTORY_PATH",
        str(PACKAGE_DIR / "reference" / "vendor_directory.json"),
    )
)

# --- Filename Configuration ---
# Files starting with one of these prefixes are loaded as that record type.
# Anything else in INPUT_DIR goes through the header classifier.
LOT_FILENAME_PREFIX = os.getenv("LOT_FILENAME_PREFIX", "lot_")
ITEMS_FILENAME_PREFIX = os.getenv("ITEMS_FILENAME_PREFIX", "items_")
USAGE_FILENAME_PREFIX = os.getenv("USAGE_FILENAME_PREFIX", "usage_")
PO_FILENAME_PREFIX = os.getenv("PO_FILENAME_PREFIX", "po_")
SALES_FILENAME_PREFIX = os.getenv("SALES_FILENAME_PREFIX", "sales_")
VENDORS_FILENAME_PREFIX = os.getenv("VENDORS_FILENAME_PREFIX", "vendors_")
REPORT_FILENAME_BASE = os.getenv("REPORT_FILENAME_BASE", "reorder_worksheet")

# --- Output / Delivery ---
WEBHOOK_URL = os.getenv("WEBHOOK_URL")
SAVE_JSON_OUTPUT = os.getenv("SAVE_JSON_OUTPUT", "true").lower() in ("1", "true", "yes")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE = BASE_DIR / os.getenv("LOG_DIR", "logs") / "purchasing.log"

# --- Shared Business Logic ---
# Record types in the order they are declared everywhere (mappings, classifier, status).
RECORD_TYPES = [
    "lot",
    "items",
    "usage",
    "po",
    "sales",
    "vendors",
]

# Warehouses shown in the per-warehouse summaries and availability messages.
WAREHOUSE_ORDER = [
    "PA",
    "TX",
    "NE",
]

# Vendor code -> lead time in days. DEFAULT is mandatory.
VENDOR_LEAD_TIMES = {
    "STASTA": 21,  # STAR STAINLESS
    "ELCIND": 35,  # ELCO
    "FORFAS": 21,  # FORD
    "EDSMAN": 10,  # EDSON
    "DEFAULT": 14,
}

# --- Purchasing Policy ---
DAYS_IN_MONTH = 30
SAFETY_STOCK_DAYS = 14  # Days of supply kept as safety
TARGET_STOCK_MULTIPLIER = 1.5  # Target stock is X times the reorder point
LONG_LEAD_TIME_SAFETY_FACTOR = 0.5  # Share of lead time added as safety for long lead times
OVERSTOCK_MONTHS_THRESHOLD = 6  # More months of supply than this is overstock
LEAD_TIME_WARNING_DAYS = 21
WATCH_THRESHOLD_MULTIPLIER = 1.25  # Within 25% of the reorder point
LOW_SUPPLY_DAYS = 15

# --- Sales Support ---
CUSTOMER_PRICE_MARKUP = 1.4
AVAILABILITY_MIN_SEARCH = 3
VENDOR_DETAIL_TOP_N_ITEMS = 5
