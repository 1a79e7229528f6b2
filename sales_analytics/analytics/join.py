"""
Join Engine

Resolves order items against their order, product and customer into
flattened LineItem fact rows. Every foreign key must resolve: a dangling
reference raises ReferenceIntegrityError instead of silently dropping
the row. Callers that want lenient behaviour filter their inputs first.
"""

from typing import Any, Callable, Dict, Iterable, List, TypeVar

import structlog

from sales_analytics.domain.models import Customer, LineItem, Order, OrderItem, Product
from sales_analytics.exceptions import ConsistencyError, ReferenceIntegrityError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def index_by_id(
    rows: Iterable[T],
    entity: str,
    key_fn: Callable[[T], Any] = lambda row: row.id,
) -> Dict[Any, T]:
    """
    Build an id -> entity lookup.

    Raises:
        ConsistencyError: if two entities share an id
    """
    index: Dict[Any, T] = {}
    for row in rows:
        key = key_fn(row)
        if key in index:
            raise ConsistencyError(f"Duplicate {entity} id {key!r}")
        index[key] = row
    return index


def flatten(
    orders: Iterable[Order],
    items: Iterable[OrderItem],
    products: Iterable[Product],
    customers: Iterable[Customer],
) -> List[LineItem]:
    """
    Join order items to orders, products and customers.

    Args:
        orders: Order headers
        items: Order items (fact rows)
        products: Product dimension
        customers: Customer dimension

    Returns:
        One LineItem per order item, in input item order. Downstream
        stages impose their own ordering.

    Raises:
        ReferenceIntegrityError: if any order, product or customer is missing
        ConsistencyError: if a base collection has duplicate ids
    """
    orders_by_id = index_by_id(orders, "order")
    products_by_id = index_by_id(products, "product")
    customers_by_id = index_by_id(customers, "customer")

    line_items = []
    for item in items:
        order = orders_by_id.get(item.order_id)
        if order is None:
            raise ReferenceIntegrityError("order", item.order_id, referenced_by="order item")

        product = products_by_id.get(item.product_id)
        if product is None:
            raise ReferenceIntegrityError(
                "product", item.product_id, referenced_by=f"order item of order {item.order_id!r}"
            )

        customer = customers_by_id.get(order.customer_id)
        if customer is None:
            raise ReferenceIntegrityError(
                "customer", order.customer_id, referenced_by=f"order {order.id!r}"
            )

        line_items.append(
            LineItem(
                order_id=order.id,
                customer_id=customer.id,
                customer_name=customer.name,
                order_date=order.date,
                product_id=product.id,
                product_name=product.name,
                quantity=item.quantity,
                unit_price=product.price,
            )
        )

    logger.debug("Flattened order items", line_items=len(line_items))
    return line_items
