"""
Analytics Pipeline

Orchestrates the staged report pipeline over one dataset snapshot:

    flatten -> order totals -> report builders -> ranking -> filtering

Each stage is eager and pure; the pipeline only sequences them, logs
stage sizes and times the run.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

import structlog

from sales_analytics.analytics.filters import filter_reports
from sales_analytics.analytics.join import flatten
from sales_analytics.analytics.reports import (
    category_summary,
    city_summary,
    customer_reports,
    order_totals,
    product_performance,
    sales_overview,
    top_customers,
)
from sales_analytics.config import Settings, get_settings
from sales_analytics.domain.models import (
    CategoryReport,
    CityReport,
    CustomerRank,
    CustomerReport,
    Dataset,
    LineItem,
    OrderTotal,
    ProductPerformance,
    SalesOverview,
)
from sales_analytics.exceptions import AnalyticsError

logger = structlog.get_logger(__name__)


@dataclass
class AnalyticsResult:
    """All reports produced by one pipeline run"""
    line_items: List[LineItem]
    order_totals: List[OrderTotal]
    top_customers: List[CustomerRank]
    customer_reports: List[CustomerReport]
    filtered_reports: List[CustomerReport]
    product_performance: List[ProductPerformance]
    city_summary: List[CityReport]
    category_summary: List[CategoryReport]
    overview: SalesOverview
    started_at: datetime
    completed_at: datetime
    duration_seconds: float
    filters: dict = field(default_factory=dict)

    @property
    def line_item_count(self) -> int:
        return len(self.line_items)


class AnalyticsPipeline:
    """
    Runs every report over one dataset snapshot.

    Example:
        pipeline = AnalyticsPipeline()
        result = pipeline.run(dataset, min_revenue=Decimal("30000"), city="Johannesburg")
        for row in result.top_customers:
            ...
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def run(
        self,
        dataset: Dataset,
        min_revenue: Optional[Decimal] = None,
        city: Optional[str] = None,
        top_n: Optional[int] = None,
    ) -> AnalyticsResult:
        """
        Run the full pipeline.

        Args:
            dataset: Base entity snapshot
            min_revenue: Minimum total spent for the filtered customer
                reports. Defaults to the configured value.
            city: Optional exact city match for the filtered reports
            top_n: Size of the top customers ranking. Defaults to the
                configured value.

        Raises:
            ReferenceIntegrityError, ConsistencyError: on bad input data
        """
        config = self.settings.analytics
        places = config.money_decimal_places
        min_revenue = config.default_min_revenue if min_revenue is None else min_revenue
        top_n = config.top_customers_limit if top_n is None else top_n

        started_at = datetime.now(timezone.utc)
        log = logger.bind(
            products=len(dataset.products),
            customers=len(dataset.customers),
            orders=len(dataset.orders),
            items=len(dataset.items),
        )
        log.info("Starting analytics pipeline")

        try:
            # Step 1: Join
            line_items = flatten(dataset.orders, dataset.items, dataset.products, dataset.customers)
            log.info("Joined line items", line_items=len(line_items))

            # Step 2: Order-level aggregation
            totals = order_totals(line_items)
            log.info("Aggregated order totals", order_totals=len(totals))

            # Step 3: Reports
            ranking = top_customers(totals, top_n)
            reports = customer_reports(dataset.customers, totals, places=places)
            products = product_performance(line_items)
            cities = city_summary(dataset.customers, totals)
            categories = category_summary(line_items, dataset.products)
            overview = sales_overview(totals, dataset.customers, places=places)

            # Step 4: Filter
            filtered = filter_reports(reports, min_revenue=min_revenue, city=city)

        except AnalyticsError as e:
            log.error("Analytics pipeline failed", error=str(e), error_type=type(e).__name__)
            raise

        completed_at = datetime.now(timezone.utc)
        duration = (completed_at - started_at).total_seconds()

        log.info(
            "Analytics pipeline complete",
            total_revenue=str(overview.total_revenue),
            customer_reports=len(reports),
            filtered_reports=len(filtered),
            duration_seconds=duration,
        )

        return AnalyticsResult(
            line_items=line_items,
            order_totals=totals,
            top_customers=ranking,
            customer_reports=reports,
            filtered_reports=filtered,
            product_performance=products,
            city_summary=cities,
            category_summary=categories,
            overview=overview,
            started_at=started_at,
            completed_at=completed_at,
            duration_seconds=duration,
            filters={"min_revenue": min_revenue, "city": city, "top_n": top_n},
        )
