"""
Dataset Loader

Turns base entity tables (polars DataFrames or CSV / JSON / Parquet
files) into an immutable Dataset snapshot.

Each table is validated before conversion; any failed check is raised
to the caller, nothing is dropped.

Expected columns:
- products: product_id, name, category, price
- customers: customer_id, name, city
- orders: order_id, customer_id, order_date
- order_items: order_id, product_id, quantity
"""

from dataclasses import asdict
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import polars as pl
import structlog

from sales_analytics.config import get_settings
from sales_analytics.domain.models import Customer, Dataset, Order, OrderItem, Product, to_money
from sales_analytics.exceptions import ValidationError
from sales_analytics.quality.validators import (
    create_customers_validator,
    create_order_items_validator,
    create_orders_validator,
    create_products_validator,
    raise_for_result,
)

logger = structlog.get_logger(__name__)

TABLES = ("products", "customers", "orders", "order_items")


class FileFormat(str, Enum):
    """Supported file formats"""
    CSV = "csv"
    JSON = "json"
    PARQUET = "parquet"


class FrameLoader:
    """
    Converts the four base tables into a Dataset.

    Example:
        loader = FrameLoader()
        dataset = loader.load(products_df, customers_df, orders_df, items_df)
    """

    def __init__(
        self,
        enable_validation: bool = True,
        strict_mode: Optional[bool] = None,
        date_format: str = "%Y-%m-%d",
    ):
        self.enable_validation = enable_validation
        self.strict_mode = get_settings().analytics.strict_validation if strict_mode is None else strict_mode
        self.date_format = date_format

    def _standardize_dates(self, df: pl.DataFrame, column: str) -> pl.DataFrame:
        """Parse string dates and truncate datetimes to dates"""
        if column not in df.columns:
            return df
        dtype = df.schema[column]
        if dtype == pl.Utf8:
            try:
                return df.with_columns(pl.col(column).str.strptime(pl.Date, self.date_format))
            except pl.exceptions.PolarsError as e:
                raise ValidationError(f"Column '{column}' has dates not matching {self.date_format}") from e
        if dtype == pl.Datetime:
            return df.with_columns(pl.col(column).dt.date())
        return df

    def _validate(
        self,
        products_df: pl.DataFrame,
        customers_df: pl.DataFrame,
        orders_df: pl.DataFrame,
        items_df: pl.DataFrame,
    ) -> None:
        """Validate each table; referential checks run after key checks pass"""
        for validator, df in (
            (create_products_validator(self.strict_mode), products_df),
            (create_customers_validator(self.strict_mode), customers_df),
        ):
            raise_for_result(validator.validate(df))

        raise_for_result(
            create_orders_validator(customers_df, strict_mode=self.strict_mode).validate(orders_df)
        )
        raise_for_result(
            create_order_items_validator(orders_df, products_df, strict_mode=self.strict_mode).validate(items_df)
        )

    def load(
        self,
        products_df: pl.DataFrame,
        customers_df: pl.DataFrame,
        orders_df: pl.DataFrame,
        items_df: pl.DataFrame,
    ) -> Dataset:
        """
        Validate and convert the base tables.

        Raises:
            ValidationError: on missing columns, nulls, duplicate ids,
                negative prices or non-positive quantities
            ReferenceIntegrityError: on orphan foreign keys
        """
        orders_df = self._standardize_dates(orders_df, "order_date")

        if self.enable_validation:
            self._validate(products_df, customers_df, orders_df, items_df)

        dataset = Dataset(
            products=[
                Product(
                    id=row["product_id"],
                    name=row["name"],
                    category=row["category"],
                    price=to_money(row["price"]),
                )
                for row in products_df.iter_rows(named=True)
            ],
            customers=[
                Customer(id=row["customer_id"], name=row["name"], city=row["city"])
                for row in customers_df.iter_rows(named=True)
            ],
            orders=[
                Order(id=row["order_id"], customer_id=row["customer_id"], date=row["order_date"])
                for row in orders_df.iter_rows(named=True)
            ],
            items=[
                OrderItem(order_id=row["order_id"], product_id=row["product_id"], quantity=row["quantity"])
                for row in items_df.iter_rows(named=True)
            ],
        )

        logger.info(
            "Loaded dataset",
            products=len(dataset.products),
            customers=len(dataset.customers),
            orders=len(dataset.orders),
            items=len(dataset.items),
        )
        return dataset

    def load_frames(self, frames: Dict[str, pl.DataFrame]) -> Dataset:
        """Load from a mapping keyed by table name"""
        missing = [name for name in TABLES if name not in frames]
        if missing:
            raise ValidationError(f"Missing tables: {missing}")
        return self.load(
            frames["products"],
            frames["customers"],
            frames["orders"],
            frames["order_items"],
        )


def _read_table(path: Path, file_format: FileFormat) -> pl.DataFrame:
    """Read one table file based on format"""
    readers = {
        FileFormat.CSV: lambda p: pl.read_csv(p, try_parse_dates=True),
        FileFormat.JSON: pl.read_json,
        FileFormat.PARQUET: pl.read_parquet,
    }
    return readers[file_format](path)


def load_dataset_from_directory(
    directory: Union[str, Path],
    file_format: Union[FileFormat, str] = FileFormat.CSV,
    loader: Optional[FrameLoader] = None,
) -> Dataset:
    """
    Load products, customers, orders and order_items files from a directory.

    Args:
        directory: Directory holding `<table>.<format>` files
        file_format: csv, json or parquet
        loader: Loader to use; a default FrameLoader otherwise

    Raises:
        FileNotFoundError: if a table file is missing
    """
    directory = Path(directory)
    file_format = FileFormat(file_format)

    frames = {}
    for table in TABLES:
        path = directory / f"{table}.{file_format.value}"
        if not path.exists():
            raise FileNotFoundError(f"Table file not found: {path}")
        frames[table] = _read_table(path, file_format)
        logger.debug(f"Read {len(frames[table])} rows from {path}", table=table)

    return (loader or FrameLoader()).load_frames(frames)


def reports_to_frame(reports: Sequence) -> pl.DataFrame:
    """
    Project a sequence of report records into a DataFrame.

    Column order follows the record's field order; money columns stay
    Decimal.
    """
    rows: List[dict] = [asdict(report) for report in reports]
    if not rows:
        return pl.DataFrame()
    return pl.DataFrame(rows, infer_schema_length=None)
