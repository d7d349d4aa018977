"""
Unit Tests - Customer Report
"""
from datetime import date

import polars as pl
import pytest

from gold_analytics.config import ReportSettings
from gold_analytics.reports.common import ReportComputationError
from gold_analytics.reports.customers import (
    AGE_SEGMENTS,
    CUSTOMER_REPORT_COLUMNS,
    age_segmentation,
    customer_report,
    customer_segmentation,
)
from gold_analytics.warehouse import FACT_SALES, conform_frame


def _row(report: pl.DataFrame, customer_key: int) -> dict:
    return report.filter(pl.col("customer_key") == customer_key).row(0, named=True)


def _single_line_fact(**overrides) -> pl.DataFrame:
    line = {
        "order_number": ["SO1"],
        "product_key": [1],
        "customer_key": [10],
        "order_date": [date(2023, 5, 1)],
        "sales_amount": [200.0],
        "quantity": [1],
        "price": [200.0],
    }
    line.update({k: [v] for k, v in overrides.items()})
    return conform_frame(pl.DataFrame(line), FACT_SALES)


class TestCustomerReport:
    """Tests for the customer report view"""

    def test_columns_in_report_order(self, sample_fact_sales, sample_dim_customers, as_of):
        report = customer_report(sample_fact_sales, sample_dim_customers, as_of=as_of)

        assert report.columns == CUSTOMER_REPORT_COLUMNS

    def test_only_customers_with_dated_sales(self, sample_fact_sales, sample_dim_customers, as_of):
        report = customer_report(sample_fact_sales, sample_dim_customers, as_of=as_of)

        # 13 never ordered, 99 only has an undated line
        assert report["customer_key"].to_list() == [10, 11, 12, 14]

    def test_vip_customer(self, sample_fact_sales, sample_dim_customers, as_of):
        row = _row(customer_report(sample_fact_sales, sample_dim_customers, as_of=as_of), 10)

        assert row["customer_name"] == "Jon Yang"
        assert row["customer_number"] == "AW00000010"
        assert row["total_order_num"] == 2
        assert row["total_sales"] == 10100
        assert row["total_quantity"] == 4
        assert row["total_product"] == 2
        assert row["last_order"] == date(2023, 1, 10)
        assert row["lifespan"] == 12
        assert row["customer_segmentation"] == "VIP"
        assert row["recency_in_month"] == 12
        assert row["avg_order_value"] == 5050
        assert row["avg_monthly_spending"] == pytest.approx(10100 / 12)

    def test_regular_customer(self, sample_fact_sales, sample_dim_customers, as_of):
        row = _row(customer_report(sample_fact_sales, sample_dim_customers, as_of=as_of), 14)

        assert row["lifespan"] == 12
        assert row["total_sales"] == 40
        assert row["customer_segmentation"] == "Regular"
        assert row["age_segmentation"] == "30-39"

    def test_big_spender_with_short_lifespan_is_new(self, sample_fact_sales, sample_dim_customers, as_of):
        row = _row(customer_report(sample_fact_sales, sample_dim_customers, as_of=as_of), 11)

        assert row["total_sales"] == 60000
        assert row["lifespan"] == 0
        assert row["customer_segmentation"] == "New"
        assert row["avg_monthly_spending"] == 60000

    def test_single_month_customer(self, sample_dim_customers, as_of):
        """lifespan 0 and 200 spent: full spend as monthly figure, segment New"""
        row = _row(customer_report(_single_line_fact(), sample_dim_customers, as_of=as_of), 10)

        assert row["lifespan"] == 0
        assert row["avg_monthly_spending"] == 200
        assert row["customer_segmentation"] == "New"

    def test_age_boundaries(self, sample_fact_sales, sample_dim_customers, as_of):
        report = customer_report(sample_fact_sales, sample_dim_customers, as_of=as_of)

        assert _row(report, 12)["customer_age"] == 19
        assert _row(report, 12)["age_segmentation"] == "Under 20"
        assert _row(report, 11)["customer_age"] == 20
        assert _row(report, 11)["age_segmentation"] == "20-29"
        assert _row(report, 10)["customer_age"] == 53
        assert _row(report, 10)["age_segmentation"] == "50 and above"

    def test_age_counts_calendar_years(self, sample_fact_sales, sample_dim_customers):
        """Age is the difference of years, birthday or not"""
        report = customer_report(sample_fact_sales, sample_dim_customers, as_of=date(2024, 1, 1))

        # Born 2004-05-14, birthday not reached yet on 2024-01-01
        assert _row(report, 11)["customer_age"] == 20

    def test_zero_sales_avoids_division(self, sample_dim_customers, as_of):
        fact = _single_line_fact(sales_amount=0.0, order_number=None)

        row = _row(customer_report(fact, sample_dim_customers, as_of=as_of), 10)

        assert row["total_order_num"] == 0
        assert row["avg_order_value"] == 0

    def test_sales_without_orders_raise(self, sample_dim_customers, as_of):
        """avg_order_value is only guarded on total_sales"""
        fact = _single_line_fact(order_number=None)

        with pytest.raises(ReportComputationError, match="10"):
            customer_report(fact, sample_dim_customers, as_of=as_of)

    def test_unknown_customer_gets_blank_name(self, sample_dim_customers, as_of):
        fact = _single_line_fact(customer_key=404)

        row = _row(customer_report(fact, sample_dim_customers, as_of=as_of), 404)

        assert row["customer_name"] == " "
        assert row["customer_number"] is None
        assert row["total_sales"] == 200

    def test_missing_last_name(self, sample_dim_customers, as_of):
        customers = sample_dim_customers.with_columns(
            pl.when(pl.col("customer_key") == 10)
            .then(None)
            .otherwise(pl.col("last_name"))
            .alias("last_name")
        )

        row = _row(customer_report(_single_line_fact(), customers, as_of=as_of), 10)

        assert row["customer_name"] == "Jon "


class TestAgeSegmentation:
    """Tests for the age buckets"""

    @pytest.mark.parametrize(
        "age,expected",
        [
            (0, "Under 20"),
            (19, "Under 20"),
            (20, "20-29"),
            (29, "20-29"),
            (30, "30-39"),
            (39, "30-39"),
            (40, "40-49"),
            (49, "40-49"),
            (50, "50 and above"),
            (101, "50 and above"),
        ],
    )
    def test_buckets(self, age, expected):
        result = pl.DataFrame({"age": [age]}).select(age_segmentation(pl.col("age")))

        assert result.item() == expected

    def test_exhaustive_over_ages(self):
        ages = pl.DataFrame({"age": list(range(0, 121))})

        labels = ages.select(age_segmentation(pl.col("age")).alias("segment"))["segment"]

        assert labels.null_count() == 0
        assert labels.unique(maintain_order=True).to_list() == AGE_SEGMENTS


class TestCustomerSegmentation:
    """Tests for the value segments"""

    @pytest.mark.parametrize(
        "lifespan,total_sales,expected",
        [
            (12, 5000.01, "VIP"),
            (12, 5000.0, "Regular"),
            (30, 10.0, "Regular"),
            (11, 5000.01, "New"),
            (0, 10_000_000.0, "New"),
        ],
    )
    def test_segments(self, lifespan, total_sales, expected):
        df = pl.DataFrame({"lifespan": [lifespan], "total_sales": [total_sales]})

        result = df.select(
            customer_segmentation(pl.col("lifespan"), pl.col("total_sales"), ReportSettings())
        )

        assert result.item() == expected
