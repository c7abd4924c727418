import argparse
import logging
from pathlib import Path

from purchasing.errors import PurchasingError
from purchasing.logger import setup_logger
from purchasing.pipelines.reorder import ReorderPipeline


def parse_args():
    parser = argparse.ArgumentParser(
        description="Reconcile ERP exports and build the vendor reorder worksheet."
    )
    parser.add_argument(
        "--input-dir",
        type=Path,
        default=None,
        help="Folder with the lot, items, usage, PO, sales and vendor CSV exports.",
    )
    parser.add_argument(
        "--test-mode",
        action="store_true",
        help="Save outputs locally but skip the webhook post.",
    )
    return parser.parse_args()


def run_process():
    """Main orchestration function to run the reorder report."""
    args = parse_args()
    setup_logger()
    logger = logging.getLogger(__name__)

    try:
        pipeline = ReorderPipeline(input_dir=args.input_dir, test_mode=args.test_mode)
        pipeline.run()
    except PurchasingError as e:
        logger.error(f"❌ {e}")
        raise SystemExit(1)

    if pipeline.unidentified:
        logger.warning(f"Unidentified files: {', '.join(pipeline.unidentified)}")


if __name__ == "__main__":
    run_process()
