"""
Domain Models Module
"""
from .models import (
    CategoryReport,
    CityReport,
    Customer,
    CustomerRank,
    CustomerReport,
    Dataset,
    LineItem,
    Order,
    OrderItem,
    OrderTotal,
    Product,
    ProductPerformance,
    SalesOverview,
    to_money,
)

__all__ = [
    "CategoryReport",
    "CityReport",
    "Customer",
    "CustomerRank",
    "CustomerReport",
    "Dataset",
    "LineItem",
    "Order",
    "OrderItem",
    "OrderTotal",
    "Product",
    "ProductPerformance",
    "SalesOverview",
    "to_money",
]
