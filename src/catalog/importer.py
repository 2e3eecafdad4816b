"""
Bulk product import from the catalog CSV export.

The export has one row per review, so a product appears many times;
only the first row per product_id is kept. Review columns are dropped.
"""

import math
from pathlib import Path
from typing import Any, Dict, Iterator, List, Union

import pandas as pd

from catalog.normalize import parse_rating
from config.constants import TABLES
from config.database import execute_query
from core.logging import get_logger
from core.utils import chunk_list

logger = get_logger(__name__)

# CSV column -> products column
COLUMN_MAP: Dict[str, str] = {
    "product_id": "id",
    "product_name": "product_name",
    "category": "category",
    "discounted_price": "discounted_price",
    "actual_price": "actual_price",
    "discount_percentage": "discount_percentage",
    "rating": "rating",
    "rating_count": "rating_count",
    "about_product": "about_product",
    "img_link": "img_link",
    "product_link": "product_link",
}

REQUIRED_COLUMNS = ("product_id", "product_name")


def load_products(csv_path: Union[str, Path]) -> pd.DataFrame:
    """
    Read the CSV and return one row per product, catalog columns only.

    Raises:
        ValueError: If a required column is missing
    """
    df = pd.read_csv(csv_path, dtype=str, keep_default_na=False)
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"CSV is missing required columns: {', '.join(missing)}")

    df["product_id"] = df["product_id"].str.strip()
    df["product_name"] = df["product_name"].str.strip()
    df = df[(df["product_id"] != "") & (df["product_name"] != "")]
    df = df.drop_duplicates(subset="product_id", keep="first")

    columns = [c for c in COLUMN_MAP if c in df.columns]
    logger.info("Loaded product CSV", path=str(csv_path), products=len(df))
    return df[columns].rename(columns=COLUMN_MAP).reset_index(drop=True)


def _clean_value(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def to_records(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """Rows ready for the products table (blank optional text becomes null)."""
    records = []
    for row in df.to_dict(orient="records"):
        record = {key: _clean_value(value) for key, value in row.items()}
        for key in ("category", "discounted_price", "actual_price"):
            record[key] = record.get(key) or ""
        record["rating"] = parse_rating(record.get("rating"))
        records.append(record)
    return records


def iter_batches(records: List[Dict[str, Any]], batch_size: int) -> Iterator[List[Dict[str, Any]]]:
    yield from chunk_list(records, batch_size)


def upsert_batch(client: Any, batch: List[Dict[str, Any]]) -> int:
    """
    Insert a batch, leaving existing products untouched.

    Returns:
        Number of rows sent
    """
    query = client.table(TABLES.PRODUCTS).upsert(batch, on_conflict="id", ignore_duplicates=True)
    execute_query(query, "import_products")
    return len(batch)
