"""
Unit Tests - Exploration, Measures, Magnitude and Ranking
"""
from datetime import date

import polars as pl
import pytest

from gold_analytics.analysis import exploration, magnitude, measures, ranking


class TestExploration:
    """Tests for schema and dimension exploration"""

    def test_list_tables(self, sqlite_engine):
        tables = exploration.list_tables(sqlite_engine)

        assert tables == ["dim_customers", "dim_products", "fact_sales"]

    def test_list_columns(self, sqlite_engine):
        columns = exploration.list_columns(sqlite_engine, "fact_sales")

        assert columns["column_name"].to_list()[:3] == ["order_number", "product_key", "customer_key"]
        assert set(columns["table_name"].to_list()) == {"fact_sales"}
        nullable = dict(zip(columns["column_name"].to_list(), columns["is_nullable"].to_list()))
        assert nullable["order_date"] is True

    def test_frame_schema(self, gold_tables):
        schema = exploration.frame_schema(gold_tables.as_dict())

        fact_columns = schema.filter(pl.col("table_name") == "fact_sales")
        assert len(fact_columns) == len(gold_tables.fact_sales.columns)
        assert schema.columns == ["table_name", "column_name", "data_type"]

    def test_distinct_countries(self, sample_dim_customers):
        countries = exploration.distinct_countries(sample_dim_customers)

        assert countries["country"].to_list() == ["Australia", "Canada", "Germany", "United States"]

    def test_product_hierarchy(self, sample_dim_products):
        hierarchy = exploration.product_hierarchy(sample_dim_products)

        assert hierarchy.columns == ["category", "sub_category", "product_name"]
        assert hierarchy["category"].to_list()[0] == "Accessories"
        assert len(hierarchy) == 5

    def test_order_date_range(self, sample_fact_sales):
        result = exploration.order_date_range(sample_fact_sales).row(0, named=True)

        assert result["first_order_date"] == date(2022, 1, 20)
        assert result["last_order_date"] == date(2023, 6, 10)
        assert result["order_range_years"] == 1
        assert result["order_range_months"] == 17

    def test_customer_age_range(self, sample_dim_customers, as_of):
        result = exploration.customer_age_range(sample_dim_customers, as_of).row(0, named=True)

        assert result["oldest_birthdate"] == date(1971, 10, 6)
        assert result["oldest_age"] == 53
        assert result["youngest_birthdate"] == date(2005, 2, 1)
        assert result["youngest_age"] == 19


class TestMeasures:
    """Tests for the key business metrics"""

    def test_totals_include_undated_lines(self, sample_fact_sales):
        assert measures.total_sales(sample_fact_sales) == 75156
        assert measures.total_quantity(sample_fact_sales) == 10
        assert measures.total_orders(sample_fact_sales) == 8

    def test_average_price(self, sample_fact_sales):
        assert measures.average_price(sample_fact_sales) == pytest.approx(75101 / 9)

    def test_average_price_of_empty_fact(self, sample_fact_sales):
        assert measures.average_price(sample_fact_sales.clear()) == 0.0

    def test_key_metrics(self, gold_tables):
        metrics = measures.key_metrics(gold_tables)
        values = dict(zip(metrics["measure_name"].to_list(), metrics["measure_value"].to_list()))

        assert metrics.columns == ["measure_name", "measure_value"]
        assert values["Total Sales"] == 75156
        assert values["Total Nr. Orders"] == 8
        assert values["Total Nr. Products"] == 5
        assert values["Total Nr. Customers"] == 5
        assert values["Total Nr. Customers with Orders"] == 5


class TestMagnitude:
    """Tests for dimension breakdowns"""

    def test_customers_by_country(self, sample_dim_customers):
        result = magnitude.customers_by_country(sample_dim_customers)

        assert result["country"].to_list() == ["Australia", "Canada", "Germany", "United States"]
        assert result["total_customers"].to_list() == [2, 1, 1, 1]

    def test_customers_by_gender(self, sample_dim_customers):
        result = magnitude.customers_by_gender(sample_dim_customers)

        assert result.rows() == [("Male", 3), ("Female", 2)]

    def test_products_by_category(self, sample_dim_products):
        result = magnitude.products_by_category(sample_dim_products)

        assert result.rows() == [("Accessories", 2), ("Clothing", 2), ("Bikes", 1)]

    def test_avg_cost_by_category(self, sample_dim_products):
        result = magnitude.avg_cost_by_category(sample_dim_products)

        assert result["category"].to_list() == ["Bikes", "Clothing", "Accessories"]
        assert result["avg_cost"].to_list() == [1000.0, 18.5, 11.0]

    def test_revenue_by_category(self, sample_fact_sales, sample_dim_products):
        result = magnitude.revenue_by_category(sample_fact_sales, sample_dim_products)

        assert result.rows() == [("Bikes", 65100.0), ("Clothing", 10000.0), ("Accessories", 56.0)]

    def test_revenue_by_customer(self, sample_fact_sales, sample_dim_customers):
        result = magnitude.revenue_by_customer(sample_fact_sales, sample_dim_customers)

        assert result["customer_key"].to_list()[:2] == [11, 10]
        assert result.columns == ["customer_key", "first_name", "last_name", "total_revenue"]

    def test_sold_items_by_country(self, sample_fact_sales, sample_dim_customers):
        result = magnitude.sold_items_by_country(sample_fact_sales, sample_dim_customers)

        assert result.rows() == [
            ("Australia", 5),
            ("Germany", 2),
            ("United States", 2),
            (None, 1),
        ]


class TestRanking:
    """Tests for top-N / bottom-N rankings"""

    def test_top_products(self, sample_fact_sales, sample_dim_products):
        result = ranking.top_products(sample_fact_sales, sample_dim_products, n=2)

        assert result.columns == ["rank", "product_key", "product_name", "total_revenue"]
        assert result["rank"].to_list() == [1, 2]
        assert result["product_key"].to_list() == [1, 3]

    def test_bottom_products(self, sample_fact_sales, sample_dim_products):
        result = ranking.top_products(sample_fact_sales, sample_dim_products, n=2, bottom=True)

        assert result["product_key"].to_list() == [2, 4]
        assert result["total_revenue"].to_list() == [16.0, 40.0]

    def test_default_size_from_settings(self, sample_fact_sales, sample_dim_products):
        result = ranking.top_products(sample_fact_sales, sample_dim_products)

        # Five by default, but only four products sold
        assert len(result) == 4

    def test_top_subcategories(self, sample_fact_sales, sample_dim_products):
        result = ranking.top_subcategories(sample_fact_sales, sample_dim_products, n=1)

        assert result.rows() == [(1, "Road Bikes", 65100.0)]

    def test_top_customers(self, sample_fact_sales, sample_dim_customers):
        result = ranking.top_customers(sample_fact_sales, sample_dim_customers, n=3)

        assert result["customer_key"].to_list() == [11, 10, 99]
        assert result["first_name"].to_list() == ["Eugene", "Jon", None]

    def test_bottom_customers(self, sample_fact_sales, sample_dim_customers):
        result = ranking.top_customers(sample_fact_sales, sample_dim_customers, n=1, bottom=True)

        assert result["customer_key"].to_list() == [12]

    def test_fewest_orders_ties_by_key(self, sample_fact_sales, sample_dim_customers):
        result = ranking.fewest_order_customers(sample_fact_sales, sample_dim_customers, n=2)

        assert result["customer_key"].to_list() == [11, 99]
        assert result["total_orders"].to_list() == [1, 1]

    def test_rejects_non_positive_size(self, sample_fact_sales, sample_dim_products):
        with pytest.raises(ValueError):
            ranking.top_products(sample_fact_sales, sample_dim_products, n=0)
