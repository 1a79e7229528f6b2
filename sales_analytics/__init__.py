"""
Sales Analytics Engine

Join, group, aggregate, rank and filter pipeline over products,
customers, orders and order items.

Quick Start:
    >>> from sales_analytics.analytics import AnalyticsPipeline
    >>> from sales_analytics.data import sample_dataset
    >>>
    >>> result = AnalyticsPipeline().run(sample_dataset(), top_n=3)
    >>> [c.customer_name for c in result.top_customers]
    ['Acme Corp', 'Blue Ocean Ltd', 'Innotech']
"""

__version__ = "1.0.0"

from sales_analytics.exceptions import (
    AnalyticsError,
    ConsistencyError,
    ReferenceIntegrityError,
    ValidationError,
)

__all__ = [
    "AnalyticsError",
    "ConsistencyError",
    "ReferenceIntegrityError",
    "ValidationError",
    "__version__",
]
