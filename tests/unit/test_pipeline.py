"""
Unit Tests - Analytics Pipeline
"""
from decimal import Decimal

import pytest

from sales_analytics.analytics import AnalyticsPipeline
from sales_analytics.config import AnalyticsSettings, Settings
from sales_analytics.domain import Dataset, OrderItem
from sales_analytics.exceptions import ReferenceIntegrityError


class TestAnalyticsPipeline:
    """Tests for AnalyticsPipeline"""

    def test_run_sample(self, dataset, test_settings):
        """Test a full run over the sample dataset"""
        result = AnalyticsPipeline(test_settings).run(dataset)

        assert result.line_item_count == 11
        assert len(result.order_totals) == 6
        assert [c.customer_name for c in result.top_customers] == ["Acme Corp", "Blue Ocean Ltd", "Innotech"]
        assert result.city_summary[0].city == "Johannesburg"
        assert result.product_performance[0].product_name == "Laptop Pro"
        assert result.overview.total_revenue == Decimal("282350")
        assert result.filtered_reports == result.customer_reports
        assert result.duration_seconds >= 0

    def test_filters_applied(self, dataset, test_settings):
        """Test min revenue and city narrow the filtered reports only"""
        result = AnalyticsPipeline(test_settings).run(
            dataset, min_revenue=Decimal("30000"), city="Johannesburg"
        )

        assert [r.customer_name for r in result.filtered_reports] == ["Acme Corp"]
        assert len(result.customer_reports) == 4
        assert result.filters["city"] == "Johannesburg"

    def test_top_n_override(self, dataset, test_settings):
        """Test explicit top_n wins over configuration"""
        result = AnalyticsPipeline(test_settings).run(dataset, top_n=1)
        assert len(result.top_customers) == 1

    def test_configured_defaults(self, dataset):
        """Test settings drive top N and money places"""
        settings = Settings(
            app_env="testing",
            analytics=AnalyticsSettings(top_customers_limit=2, money_decimal_places=0),
        )
        result = AnalyticsPipeline(settings).run(dataset)

        assert len(result.top_customers) == 2
        assert result.overview.average_order_value == Decimal("47058")

    def test_empty_dataset(self, test_settings):
        """Test an empty snapshot flows through as empty reports"""
        result = AnalyticsPipeline(test_settings).run(Dataset())

        assert result.line_items == []
        assert result.order_totals == []
        assert result.top_customers == []
        assert result.city_summary == []
        assert result.overview.total_orders == 0

    def test_errors_propagate(self, dataset, test_settings):
        """Test integrity errors reach the caller"""
        broken = Dataset(
            products=dataset.products,
            customers=dataset.customers,
            orders=dataset.orders,
            items=dataset.items + (OrderItem(order_id=42, product_id=1, quantity=1),),
        )

        with pytest.raises(ReferenceIntegrityError):
            AnalyticsPipeline(test_settings).run(broken)
