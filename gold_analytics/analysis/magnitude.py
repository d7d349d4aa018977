"""
Magnitude Analysis

Measures broken down by a dimension attribute, largest first. Ties are
ordered by the dimension value so results are stable between runs.
"""

from typing import List

import polars as pl

from gold_analytics.reports.common import count_distinct


def _by(df: pl.DataFrame, keys: List[str], measure: pl.Expr, name: str) -> pl.DataFrame:
    return (
        df.group_by(keys)
        .agg(measure.alias(name))
        .sort([name, *keys], descending=[True] + [False] * len(keys), nulls_last=True)
    )


def customers_by_country(dim_customers: pl.DataFrame) -> pl.DataFrame:
    return _by(
        dim_customers,
        ["country"],
        count_distinct("customer_key").cast(pl.Int64),
        "total_customers",
    )


def customers_by_gender(dim_customers: pl.DataFrame) -> pl.DataFrame:
    return _by(
        dim_customers,
        ["gender"],
        count_distinct("customer_key").cast(pl.Int64),
        "total_customers",
    )


def products_by_category(dim_products: pl.DataFrame) -> pl.DataFrame:
    return _by(
        dim_products,
        ["category"],
        count_distinct("product_key").cast(pl.Int64),
        "total_products",
    )


def avg_cost_by_category(dim_products: pl.DataFrame) -> pl.DataFrame:
    return _by(dim_products, ["category"], pl.col("cost").mean(), "avg_cost")


def revenue_by_category(fact_sales: pl.DataFrame, dim_products: pl.DataFrame) -> pl.DataFrame:
    """Revenue per product category; sales of unknown products land in a null category"""
    base = fact_sales.join(
        dim_products.select(["product_key", "category"]), on="product_key", how="left"
    )
    return _by(base, ["category"], pl.col("sales_amount").sum(), "total_revenue")


def revenue_by_customer(fact_sales: pl.DataFrame, dim_customers: pl.DataFrame) -> pl.DataFrame:
    base = fact_sales.join(
        dim_customers.select(["customer_key", "first_name", "last_name"]),
        on="customer_key",
        how="left",
    )
    return _by(
        base,
        ["customer_key", "first_name", "last_name"],
        pl.col("sales_amount").sum(),
        "total_revenue",
    )


def sold_items_by_country(fact_sales: pl.DataFrame, dim_customers: pl.DataFrame) -> pl.DataFrame:
    """Distribution of sold units across customer countries"""
    base = fact_sales.join(
        dim_customers.select(["customer_key", "country"]), on="customer_key", how="left"
    )
    return _by(base, ["country"], pl.col("quantity").sum().cast(pl.Int64), "total_sold_items")
