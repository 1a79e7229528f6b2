"""
Unit Tests - Dataset Loading
"""
from datetime import date
from decimal import Decimal

import polars as pl
import pytest

from sales_analytics.analytics import AnalyticsPipeline, order_totals, product_performance
from sales_analytics.data import sample_dataset, write_sample_dataset
from sales_analytics.exceptions import ReferenceIntegrityError, ValidationError
from sales_analytics.ingestion import FrameLoader, load_dataset_from_directory, reports_to_frame


class TestFrameLoader:
    """Tests for FrameLoader"""

    def test_load_sample_frames(self, frames):
        """Test frames convert to the same entities as the sample dataset"""
        dataset = FrameLoader().load_frames(frames)

        assert dataset == sample_dataset()

    def test_string_dates_parsed(self, frames):
        """Test ISO date strings become dates"""
        dataset = FrameLoader().load_frames(frames)
        assert dataset.orders[0].date == date(2024, 1, 5)

    def test_bad_date_format(self, frames):
        """Test unparseable dates raise ValidationError"""
        frames["orders"] = frames["orders"].with_columns(pl.lit("05/01/2024").alias("order_date"))

        with pytest.raises(ValidationError, match="order_date"):
            FrameLoader().load_frames(frames)

    def test_missing_table(self, frames):
        """Test a missing table raises ValidationError"""
        del frames["customers"]

        with pytest.raises(ValidationError, match="customers"):
            FrameLoader().load_frames(frames)

    def test_missing_column(self, frames):
        """Test a missing column raises ValidationError"""
        frames["products"] = frames["products"].drop("price")

        with pytest.raises(ValidationError, match="Missing columns"):
            FrameLoader().load_frames(frames)

    def test_orphan_item(self, frames):
        """Test items for unknown products raise ReferenceIntegrityError"""
        frames["order_items"] = pl.concat([
            frames["order_items"],
            pl.DataFrame({"order_id": [1], "product_id": [77], "quantity": [1]}),
        ])

        with pytest.raises(ReferenceIntegrityError, match="product 77"):
            FrameLoader().load_frames(frames)

    @pytest.mark.parametrize("strict_mode", [True, False])
    @pytest.mark.parametrize("table,key,column", [
        ("customers", "customer_id", "city"),
        ("products", "product_id", "category"),
    ])
    def test_null_labels_rejected_in_any_mode(self, frames, strict_mode, table, key, column):
        """Test a null city or category fails the load, strict or not"""
        frames[table] = frames[table].with_columns(
            pl.when(pl.col(key) == 3).then(None).otherwise(pl.col(column)).alias(column)
        )

        with pytest.raises(ValidationError, match=column):
            FrameLoader(strict_mode=strict_mode).load_frames(frames)

    @pytest.mark.parametrize("table,key,column", [
        ("customers", "customer_id", "city"),
        ("products", "product_id", "category"),
    ])
    def test_null_labels_rejected_without_validation(self, frames, table, key, column):
        """Test entity construction rejects a null city or category the validators never saw"""
        frames[table] = frames[table].with_columns(
            pl.when(pl.col(key) == 3).then(None).otherwise(pl.col(column)).alias(column)
        )

        with pytest.raises(ValidationError, match=f"{column} must be a string"):
            FrameLoader(enable_validation=False).load_frames(frames)

    def test_lenient_load_runs_pipeline(self, frames, test_settings):
        """Test data accepted by a non-strict loader runs through the whole pipeline"""
        dataset = FrameLoader(strict_mode=False).load_frames(frames)

        result = AnalyticsPipeline(test_settings).run(dataset)

        assert [c.city for c in result.city_summary] == ["Johannesburg", "Durban", "Cape Town"]
        assert [c.category for c in result.category_summary] == ["Laptops", "Accessories"]

    def test_float_prices_become_exact_decimals(self, frames):
        """Test float price columns convert without float noise"""
        frames["products"] = frames["products"].with_columns(
            pl.Series("price", [25000.0, 18000.0, 350.1, 1200.0, 7000.0, 600.0])
        )

        dataset = FrameLoader().load_frames(frames)

        assert dataset.products[2].price == Decimal("350.1")


class TestLoadFromDirectory:
    """Tests for load_dataset_from_directory"""

    @pytest.mark.parametrize("file_format", ["csv", "json", "parquet"])
    def test_round_trip(self, tmp_path, file_format, test_settings):
        """Test written sample files load back and report the same totals"""
        write_sample_dataset(tmp_path, file_format)

        dataset = load_dataset_from_directory(tmp_path, file_format)
        result = AnalyticsPipeline(test_settings).run(dataset)

        assert [t.total for t in result.order_totals] == [
            Decimal(v) for v in ("128500", "57000", "19250", "28600", "43000", "6000")
        ]

    def test_missing_file(self, tmp_path):
        """Test missing table file raises FileNotFoundError"""
        with pytest.raises(FileNotFoundError):
            load_dataset_from_directory(tmp_path)


class TestReportsToFrame:
    """Tests for reports_to_frame"""

    def test_product_performance_frame(self, line_items):
        """Test report rows become DataFrame rows in order"""
        df = reports_to_frame(product_performance(line_items))

        assert df.columns == ["product_id", "product_name", "qty_sold", "revenue"]
        assert df.height == 5
        assert df["product_name"].to_list()[:2] == ["Laptop Pro", "Laptop Air"]

    def test_order_totals_frame_keeps_dates(self, line_items):
        """Test date columns stay dates"""
        df = reports_to_frame(order_totals(line_items))
        assert df.schema["order_date"] == pl.Date

    def test_empty(self):
        """Test no reports gives an empty frame"""
        assert reports_to_frame([]).is_empty()
