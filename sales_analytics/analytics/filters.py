"""
Filter Layer

Post-hoc narrowing of an already built customer report sequence.
Filtering never re-runs aggregation and keeps the input order.
"""

from decimal import Decimal
from typing import Iterable, List, Optional, Union

from sales_analytics.domain.models import CustomerReport, to_money


def filter_reports(
    reports: Iterable[CustomerReport],
    min_revenue: Union[Decimal, int, str] = Decimal("0"),
    city: Optional[str] = None,
) -> List[CustomerReport]:
    """
    Keep reports with total_spent >= min_revenue, optionally in one city.

    Args:
        reports: Customer reports, in presentation order
        min_revenue: Minimum total spent (inclusive)
        city: Exact, case-sensitive city match. None or "" disables the
            city criterion.

    Returns:
        Matching reports in their original relative order
    """
    threshold = to_money(min_revenue)
    return [
        report
        for report in reports
        if report.total_spent >= threshold and (not city or report.city == city)
    ]
