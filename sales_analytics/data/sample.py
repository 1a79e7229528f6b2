"""
Sample Dataset

Small fixed dataset used for demos and tests: 6 products, 4 customers
across 3 cities, 6 orders and 11 order items.

Known results:
- order totals: 1=128500, 2=57000, 3=19250, 4=28600, 5=43000, 6=6000
- top customers: Acme Corp 185500, Blue Ocean Ltd 43000, Innotech 28600
- cities: Johannesburg 214100, Durban 43000, Cape Town 25250
"""

from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Dict, Union

import polars as pl

from sales_analytics.domain.models import Customer, Dataset, Order, OrderItem, Product

PRODUCTS = [
    (1, "Laptop Pro", "Laptops", "25000"),
    (2, "Laptop Air", "Laptops", "18000"),
    (3, "Mouse", "Accessories", "350"),
    (4, "Keyboard", "Accessories", "1200"),
    (5, "Monitor", "Displays", "7000"),
    (6, "USB-C Hub", "Accessories", "600"),
]

CUSTOMERS = [
    (1, "Acme Corp", "Johannesburg"),
    (2, "Innotech", "Johannesburg"),
    (3, "Blue Ocean Ltd", "Durban"),
    (4, "Global Dynamics", "Cape Town"),
]

ORDERS = [
    (1, 1, date(2024, 1, 5)),
    (2, 1, date(2024, 1, 12)),
    (3, 4, date(2024, 1, 20)),
    (4, 2, date(2024, 2, 3)),
    (5, 3, date(2024, 2, 3)),
    (6, 4, date(2024, 2, 14)),
]

# (order_id, product_id, quantity)
ORDER_ITEMS = [
    (1, 1, 4),
    (1, 2, 1),
    (1, 3, 30),
    (2, 2, 3),
    (2, 6, 5),
    (3, 3, 55),
    (4, 1, 1),
    (4, 4, 3),
    (5, 1, 1),
    (5, 2, 1),
    (6, 4, 5),
]


def sample_dataset() -> Dataset:
    """Build the sample dataset as domain entities"""
    return Dataset(
        products=[Product(id=i, name=n, category=c, price=Decimal(p)) for i, n, c, p in PRODUCTS],
        customers=[Customer(id=i, name=n, city=c) for i, n, c in CUSTOMERS],
        orders=[Order(id=i, customer_id=c, date=d) for i, c, d in ORDERS],
        items=[OrderItem(order_id=o, product_id=p, quantity=q) for o, p, q in ORDER_ITEMS],
    )


def sample_frames() -> Dict[str, pl.DataFrame]:
    """Build the sample dataset as the four loader tables"""
    return {
        "products": pl.DataFrame({
            "product_id": [p[0] for p in PRODUCTS],
            "name": [p[1] for p in PRODUCTS],
            "category": [p[2] for p in PRODUCTS],
            "price": [int(p[3]) for p in PRODUCTS],
        }),
        "customers": pl.DataFrame({
            "customer_id": [c[0] for c in CUSTOMERS],
            "name": [c[1] for c in CUSTOMERS],
            "city": [c[2] for c in CUSTOMERS],
        }),
        "orders": pl.DataFrame({
            "order_id": [o[0] for o in ORDERS],
            "customer_id": [o[1] for o in ORDERS],
            "order_date": [o[2].isoformat() for o in ORDERS],
        }),
        "order_items": pl.DataFrame({
            "order_id": [i[0] for i in ORDER_ITEMS],
            "product_id": [i[1] for i in ORDER_ITEMS],
            "quantity": [i[2] for i in ORDER_ITEMS],
        }),
    }


def write_sample_dataset(directory: Union[str, Path], file_format: str = "csv") -> Path:
    """Write the sample tables to `<directory>/<table>.<format>`"""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)

    writers = {
        "csv": pl.DataFrame.write_csv,
        "json": pl.DataFrame.write_json,
        "parquet": pl.DataFrame.write_parquet,
    }
    if file_format not in writers:
        raise ValueError(f"Unsupported file format: {file_format}")

    for table, df in sample_frames().items():
        writers[file_format](df, directory / f"{table}.{file_format}")
    return directory
