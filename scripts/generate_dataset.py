"""
Sample Dataset Writer

Writes the fixed sample tables (products, customers, orders,
order_items) so the file loader can be exercised end to end.

Usage:
    python scripts/generate_dataset.py --format parquet --output data/sample
"""

import argparse
from pathlib import Path

import structlog

from sales_analytics.config.logging import configure_logging
from sales_analytics.data import write_sample_dataset

logger = structlog.get_logger(__name__)

OUTPUT_DIR = Path(__file__).parent.parent / "data" / "sample"


def main() -> None:
    parser = argparse.ArgumentParser(description="Write the sample sales dataset")
    parser.add_argument("--output", type=Path, default=OUTPUT_DIR, help="Output directory")
    parser.add_argument("--format", choices=["csv", "json", "parquet"], default="csv", help="File format")
    args = parser.parse_args()

    configure_logging()

    directory = write_sample_dataset(args.output, args.format)
    logger.info("Sample dataset written", directory=str(directory), format=args.format)


if __name__ == "__main__":
    main()
