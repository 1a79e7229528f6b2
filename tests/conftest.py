"""
Test Suite Configuration
"""
from datetime import date
from decimal import Decimal
from typing import Dict, List

import polars as pl
import pytest

from sales_analytics.analytics import flatten, order_totals
from sales_analytics.config import Settings
from sales_analytics.data import sample_dataset, sample_frames
from sales_analytics.domain import Dataset, LineItem, OrderTotal


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Create test settings"""
    return Settings(
        app_env="testing",
        debug=True,
    )


@pytest.fixture
def dataset() -> Dataset:
    """Fixed sample dataset: 6 products, 4 customers, 6 orders, 11 items"""
    return sample_dataset()


@pytest.fixture
def line_items(dataset) -> List[LineItem]:
    """Flattened line items of the sample dataset"""
    return flatten(dataset.orders, dataset.items, dataset.products, dataset.customers)


@pytest.fixture
def totals(line_items) -> List[OrderTotal]:
    """Order totals of the sample dataset"""
    return order_totals(line_items)


@pytest.fixture
def frames() -> Dict[str, pl.DataFrame]:
    """Sample dataset as loader tables"""
    return sample_frames()


@pytest.fixture
def make_line():
    """Factory for LineItem rows with sensible defaults"""
    def _make_line(
        order_id,
        product_id,
        quantity,
        unit_price,
        customer_id=1,
        customer_name="Acme Corp",
        order_date=date(2024, 1, 1),
        product_name=None,
    ) -> LineItem:
        return LineItem(
            order_id=order_id,
            customer_id=customer_id,
            customer_name=customer_name,
            order_date=order_date,
            product_id=product_id,
            product_name=product_name or f"Product {product_id}",
            quantity=quantity,
            unit_price=Decimal(unit_price),
        )
    return _make_line


@pytest.fixture
def make_total():
    """Factory for OrderTotal rows with sensible defaults"""
    def _make_total(order_id, customer_id, customer_name, total, order_date=date(2024, 1, 1)) -> OrderTotal:
        return OrderTotal(
            order_id=order_id,
            customer_id=customer_id,
            customer_name=customer_name,
            order_date=order_date,
            total=Decimal(total),
        )
    return _make_total
