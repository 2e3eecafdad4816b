#!/usr/bin/env python3
"""
Bulk import products from a CSV export into Supabase.

Usage:
    # From project root, with venv active:
    PYTHONPATH=src python scripts/import_products.py data/amazon.csv

    # Dry run - parse and count only:
    PYTHONPATH=src python scripts/import_products.py data/amazon.csv --dry-run

    # Smaller batches for a slow connection:
    PYTHONPATH=src python scripts/import_products.py data/amazon.csv --batch-size 100
"""

import argparse
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from dotenv import load_dotenv
load_dotenv()

from tqdm import tqdm

from catalog.importer import iter_batches, load_products, to_records, upsert_batch
from config.database import StoreError, get_supabase_client
from core.logging import configure_logging, get_logger

logger = get_logger("import_products")


def main():
    parser = argparse.ArgumentParser(description="Import products from CSV into Supabase")
    parser.add_argument("csv_path", type=Path, help="Path to the product CSV")
    parser.add_argument("--dry-run", action="store_true", help="Parse and count, don't write")
    parser.add_argument("--batch-size", type=int, default=100, help="Rows per upsert (default 100)")
    args = parser.parse_args()

    configure_logging(json_logs=False, log_level="INFO")

    if not args.csv_path.exists():
        print(f"CSV not found: {args.csv_path}")
        sys.exit(1)

    records = to_records(load_products(args.csv_path))
    print(f"Parsed {len(records)} unique products")

    if args.dry_run:
        for record in records[:3]:
            print(f"  {record['id']}: {record['product_name'][:70]} ({record['discounted_price']})")
        print("Dry run - nothing written")
        return

    client = get_supabase_client()
    imported = 0
    failed_batches = 0

    batches = list(iter_batches(records, args.batch_size))
    for batch in tqdm(batches, desc="Importing", unit="batch"):
        try:
            imported += upsert_batch(client, batch)
        except StoreError as e:
            # Failed batches are logged and skipped
            failed_batches += 1
            logger.error("Batch failed", first_id=batch[0]["id"], error=str(e))

    print(f"Imported {imported}/{len(records)} products ({failed_batches} failed batches)")
    if failed_batches:
        sys.exit(1)


if __name__ == "__main__":
    main()
