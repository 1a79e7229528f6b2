"""
Sales Analytics Module
"""
from .aggregate import count_by, group_reduce, sum_by
from .filters import filter_reports
from .join import flatten
from .pipeline import AnalyticsPipeline, AnalyticsResult
from .ranking import SortKey, rank
from .reports import (
    category_summary,
    city_summary,
    customer_reports,
    order_totals,
    product_performance,
    sales_overview,
    top_customers,
)

__all__ = [
    "AnalyticsPipeline",
    "AnalyticsResult",
    "SortKey",
    "category_summary",
    "city_summary",
    "count_by",
    "customer_reports",
    "filter_reports",
    "flatten",
    "group_reduce",
    "order_totals",
    "product_performance",
    "rank",
    "sales_overview",
    "sum_by",
    "top_customers",
]
