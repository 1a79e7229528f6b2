"""
Report Builder

Builds the per-order, per-customer, per-product, per-city and
per-category reports from flattened line items and order totals.

Every builder is a pure function: it groups with group_reduce, derives
ratios, then hands the rows to the ranker for a deterministic order.
"""

from dataclasses import replace
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sales_analytics.analytics.aggregate import group_reduce
from sales_analytics.analytics.join import index_by_id
from sales_analytics.analytics.ranking import (
    CATEGORY_REVENUE_ORDER,
    CITY_REVENUE_ORDER,
    CUSTOMER_SPEND_ORDER,
    ORDER_TOTALS_ORDER,
    PRODUCT_REVENUE_ORDER,
    rank,
)
from sales_analytics.domain.models import (
    ZERO,
    CategoryReport,
    CityReport,
    Customer,
    CustomerRank,
    CustomerReport,
    LineItem,
    OrderTotal,
    Product,
    ProductPerformance,
    SalesOverview,
)
from sales_analytics.exceptions import ConsistencyError, ReferenceIntegrityError

DEFAULT_MONEY_PLACES = 2


def average(total: Decimal, count: int, places: int = DEFAULT_MONEY_PLACES) -> Decimal:
    """Mean of `count` values summing to `total`, rounded half-up; 0 when count is 0."""
    if count == 0:
        return ZERO
    exponent = Decimal(1).scaleb(-places)
    with localcontext() as ctx:
        # room for every integer digit of the total plus `places` decimals
        ctx.prec = max(ctx.prec, total.adjusted() + places + 10)
        return (total / count).quantize(exponent, rounding=ROUND_HALF_UP)


# =============================================================================
# ORDER TOTALS
# =============================================================================

def _add_line_to_order(acc: Optional[OrderTotal], line: LineItem) -> OrderTotal:
    if acc is None:
        return OrderTotal(
            order_id=line.order_id,
            customer_id=line.customer_id,
            customer_name=line.customer_name,
            order_date=line.order_date,
            total=line.line_total,
        )

    for field_name, expected, actual in (
        ("customer_id", acc.customer_id, line.customer_id),
        ("customer_name", acc.customer_name, line.customer_name),
        ("order_date", acc.order_date, line.order_date),
    ):
        if expected != actual:
            raise ConsistencyError(
                f"Order {line.order_id!r} has line items with different {field_name}: "
                f"{expected!r} != {actual!r}"
            )
    return replace(acc, total=acc.total + line.line_total)


def order_totals(line_items: Iterable[LineItem]) -> List[OrderTotal]:
    """
    Sum line totals per order.

    Returns:
        OrderTotal rows ordered by order date, then order id

    Raises:
        ConsistencyError: if line items of one order disagree on customer or date
    """
    totals = group_reduce(
        line_items,
        key_fn=lambda line: line.order_id,
        reduce_fn=_add_line_to_order,
        initial=lambda: None,
    )
    return rank(totals.values(), ORDER_TOTALS_ORDER)


# =============================================================================
# CUSTOMERS
# =============================================================================

def _add_order_to_customer(acc: Optional[CustomerRank], order: OrderTotal) -> CustomerRank:
    if acc is None:
        return CustomerRank(
            customer_id=order.customer_id,
            customer_name=order.customer_name,
            total_spent=order.total,
            orders_count=1,
        )
    if acc.customer_name != order.customer_name:
        raise ConsistencyError(
            f"Customer {order.customer_id!r} appears with different names: "
            f"{acc.customer_name!r} != {order.customer_name!r}"
        )
    return replace(
        acc,
        total_spent=acc.total_spent + order.total,
        orders_count=acc.orders_count + 1,
    )


def customer_spend(order_totals: Iterable[OrderTotal]) -> Dict[Any, CustomerRank]:
    """Total spent and order count per customer id (customers with orders only)"""
    return group_reduce(
        order_totals,
        key_fn=lambda order: order.customer_id,
        reduce_fn=_add_order_to_customer,
        initial=lambda: None,
    )


def top_customers(order_totals: Iterable[OrderTotal], n: int) -> List[CustomerRank]:
    """
    Rank customers by total spend.

    Sorted by total spent descending, then customer name ascending.
    Fewer than `n` customers simply returns all of them.

    Raises:
        ValueError: if n is negative
    """
    return rank(customer_spend(order_totals).values(), CUSTOMER_SPEND_ORDER, limit=n)


def _spend_for_customers(
    customers: Iterable[Customer],
    order_totals: Iterable[OrderTotal],
) -> Tuple[Dict[Any, Customer], Dict[Any, CustomerRank]]:
    customers_by_id = index_by_id(customers, "customer")
    spend = customer_spend(order_totals)
    for customer_id in spend:
        if customer_id not in customers_by_id:
            raise ReferenceIntegrityError("customer", customer_id, referenced_by="order totals")
    return customers_by_id, spend


def customer_reports(
    customers: Iterable[Customer],
    order_totals: Iterable[OrderTotal],
    places: int = DEFAULT_MONEY_PLACES,
) -> List[CustomerReport]:
    """
    Per-customer spend summary, including customers without orders.

    average_order_value is total_spent / orders_count rounded to `places`
    decimal places, or 0 for customers without orders.

    Raises:
        ReferenceIntegrityError: if an order total belongs to an unknown customer
    """
    customers_by_id, spend = _spend_for_customers(customers, order_totals)

    reports = []
    for customer in customers_by_id.values():
        ranked = spend.get(customer.id)
        total_spent = ranked.total_spent if ranked else ZERO
        orders_count = ranked.orders_count if ranked else 0
        reports.append(
            CustomerReport(
                customer_id=customer.id,
                customer_name=customer.name,
                city=customer.city,
                total_spent=total_spent,
                orders_count=orders_count,
                average_order_value=average(total_spent, orders_count, places),
            )
        )
    return rank(reports, CUSTOMER_SPEND_ORDER)


def city_summary(
    customers: Iterable[Customer],
    order_totals: Iterable[OrderTotal],
) -> List[CityReport]:
    """
    Customer count and revenue per city.

    Every customer counts toward its city, with or without orders, so a
    city whose customers never ordered still appears with revenue 0.

    Raises:
        ReferenceIntegrityError: if an order total belongs to an unknown customer
    """
    customers_by_id, spend = _spend_for_customers(customers, order_totals)

    def add_customer(acc: Optional[CityReport], customer: Customer) -> CityReport:
        spent = spend[customer.id].total_spent if customer.id in spend else ZERO
        if acc is None:
            return CityReport(city=customer.city, customer_count=1, revenue=spent)
        return replace(acc, customer_count=acc.customer_count + 1, revenue=acc.revenue + spent)

    cities = group_reduce(
        customers_by_id.values(),
        key_fn=lambda customer: customer.city,
        reduce_fn=add_customer,
        initial=lambda: None,
    )
    return rank(cities.values(), CITY_REVENUE_ORDER)


# =============================================================================
# PRODUCTS
# =============================================================================

def _add_line_to_product(acc: Optional[ProductPerformance], line: LineItem) -> ProductPerformance:
    if acc is None:
        return ProductPerformance(
            product_id=line.product_id,
            product_name=line.product_name,
            qty_sold=line.quantity,
            revenue=line.line_total,
        )
    if acc.product_name != line.product_name:
        raise ConsistencyError(
            f"Product {line.product_id!r} appears with different names: "
            f"{acc.product_name!r} != {line.product_name!r}"
        )
    return replace(acc, qty_sold=acc.qty_sold + line.quantity, revenue=acc.revenue + line.line_total)


def product_performance(line_items: Iterable[LineItem]) -> List[ProductPerformance]:
    """
    Units sold and revenue per product.

    Products without sales never appear. Sorted by revenue descending,
    then product id ascending.
    """
    products = group_reduce(
        line_items,
        key_fn=lambda line: line.product_id,
        reduce_fn=_add_line_to_product,
        initial=lambda: None,
    )
    sold = [perf for perf in products.values() if perf.qty_sold > 0]
    return rank(sold, PRODUCT_REVENUE_ORDER)


def category_summary(
    line_items: Iterable[LineItem],
    products: Iterable[Product],
) -> List[CategoryReport]:
    """
    Units sold, revenue and number of distinct products sold per category.

    Raises:
        ReferenceIntegrityError: if a line item's product is not in `products`
    """
    products_by_id = index_by_id(products, "product")

    def category_of(line: LineItem) -> str:
        product = products_by_id.get(line.product_id)
        if product is None:
            raise ReferenceIntegrityError("product", line.product_id, referenced_by="line items")
        return product.category

    def add_line(acc: Tuple[int, Decimal, frozenset], line: LineItem) -> Tuple[int, Decimal, frozenset]:
        qty, revenue, product_ids = acc
        return qty + line.quantity, revenue + line.line_total, product_ids | {line.product_id}

    categories = group_reduce(
        line_items,
        key_fn=category_of,
        reduce_fn=add_line,
        initial=lambda: (0, ZERO, frozenset()),
    )
    reports = [
        CategoryReport(
            category=category,
            qty_sold=qty,
            revenue=revenue,
            product_count=len(product_ids),
        )
        for category, (qty, revenue, product_ids) in categories.items()
        if qty > 0
    ]
    return rank(reports, CATEGORY_REVENUE_ORDER)


# =============================================================================
# OVERVIEW
# =============================================================================

def sales_overview(
    order_totals: Iterable[OrderTotal],
    customers: Iterable[Customer],
    places: int = DEFAULT_MONEY_PLACES,
) -> SalesOverview:
    """Headline revenue, order count, customer count and average order value"""
    orders = list(order_totals)
    total_revenue = sum((order.total for order in orders), ZERO)
    return SalesOverview(
        total_revenue=total_revenue,
        total_orders=len(orders),
        total_customers=len(index_by_id(customers, "customer")),
        average_order_value=average(total_revenue, len(orders), places),
    )
