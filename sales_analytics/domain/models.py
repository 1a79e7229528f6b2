"""
Domain Models

Immutable entity and report records for the sales analytics engine.

Base entities (Product, Customer, Order, OrderItem) are supplied by a
loader and validated on construction. Report records are value objects
produced fresh on every pipeline run.

All money values are Decimal so sums and averages never drift.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Tuple

from sales_analytics.exceptions import ValidationError

ZERO = Decimal("0")


def to_money(value: Any) -> Decimal:
    """Coerce a price-like value to Decimal without passing through binary float."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValidationError(f"Invalid money value: {value!r}")
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValidationError(f"Invalid money value: {value!r}") from e


def _require_text(entity: str, key: Any, field_name: str, value: Any) -> None:
    if not isinstance(value, str):
        raise ValidationError(f"{entity} {key!r} {field_name} must be a string, got {value!r}")


# =============================================================================
# BASE ENTITIES
# =============================================================================

@dataclass(frozen=True)
class Product:
    """Catalogue product"""
    id: Any
    name: str
    category: str
    price: Decimal

    def __post_init__(self):
        _require_text("Product", self.id, "name", self.name)
        _require_text("Product", self.id, "category", self.category)
        price = to_money(self.price)
        if not price.is_finite() or price < 0:
            raise ValidationError(f"Product {self.id!r} has invalid price {price}")
        object.__setattr__(self, "price", price)


@dataclass(frozen=True)
class Customer:
    """Customer with a home city"""
    id: Any
    name: str
    city: str

    def __post_init__(self):
        _require_text("Customer", self.id, "name", self.name)
        _require_text("Customer", self.id, "city", self.city)


@dataclass(frozen=True)
class Order:
    """Order header. One order belongs to exactly one customer."""
    id: Any
    customer_id: Any
    date: date


@dataclass(frozen=True)
class OrderItem:
    """Order line: a quantity of one product within an order"""
    order_id: Any
    product_id: Any
    quantity: int

    def __post_init__(self):
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise ValidationError(
                f"Order item ({self.order_id!r}, {self.product_id!r}) quantity must be an integer, "
                f"got {self.quantity!r}"
            )
        if self.quantity <= 0:
            raise ValidationError(
                f"Order item ({self.order_id!r}, {self.product_id!r}) has non-positive quantity {self.quantity}"
            )


@dataclass(frozen=True)
class Dataset:
    """
    Read-only snapshot of the four base collections.

    Collections are stored as tuples, so a snapshot taken by a loader
    cannot change underneath a running pipeline.
    """
    products: Tuple[Product, ...] = ()
    customers: Tuple[Customer, ...] = ()
    orders: Tuple[Order, ...] = ()
    items: Tuple[OrderItem, ...] = ()

    def __post_init__(self):
        for name in ("products", "customers", "orders", "items"):
            object.__setattr__(self, name, tuple(getattr(self, name)))


# =============================================================================
# DERIVED RECORDS
# =============================================================================

@dataclass(frozen=True)
class LineItem:
    """Flattened fact row: an order item joined to its order, product and customer"""
    order_id: Any
    customer_id: Any
    customer_name: str
    order_date: date
    product_id: Any
    product_name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "line_total", self.unit_price * self.quantity)


@dataclass(frozen=True)
class OrderTotal:
    """Sum of line totals for one order"""
    order_id: Any
    customer_id: Any
    customer_name: str
    order_date: date
    total: Decimal


@dataclass(frozen=True)
class CustomerRank:
    """Customer spend ranking entry"""
    customer_id: Any
    customer_name: str
    total_spent: Decimal
    orders_count: int


@dataclass(frozen=True)
class CustomerReport:
    """Per-customer spend summary"""
    customer_id: Any
    customer_name: str
    city: str
    total_spent: Decimal
    orders_count: int
    average_order_value: Decimal


@dataclass(frozen=True)
class ProductPerformance:
    """Units sold and revenue for one product"""
    product_id: Any
    product_name: str
    qty_sold: int
    revenue: Decimal


@dataclass(frozen=True)
class CityReport:
    """Customer count and revenue for one city"""
    city: str
    customer_count: int
    revenue: Decimal


@dataclass(frozen=True)
class CategoryReport:
    """Units sold, revenue and distinct products sold for one product category"""
    category: str
    qty_sold: int
    revenue: Decimal
    product_count: int


@dataclass(frozen=True)
class SalesOverview:
    """Headline totals across the whole dataset"""
    total_revenue: Decimal
    total_orders: int
    total_customers: int
    average_order_value: Decimal
