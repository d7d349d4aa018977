"""
Ranking Analysis

Top-N and bottom-N entities by revenue or order count. Every result carries
a 1-based ``rank``; equal measures are ordered by the entity key.
"""

from typing import List, Optional

import polars as pl
import structlog

from gold_analytics.config import get_settings
from gold_analytics.reports.common import count_distinct

logger = structlog.get_logger(__name__)


def _resolve_n(n: Optional[int]) -> int:
    n = get_settings().reports.top_n if n is None else n
    if n < 1:
        raise ValueError(f"Ranking size must be positive, got {n}")
    return n


def _rank(
    df: pl.DataFrame,
    measure: str,
    keys: List[str],
    n: int,
    descending: bool,
) -> pl.DataFrame:
    ranked = (
        df.sort([measure, keys[0]], descending=[descending, False], nulls_last=True)
        .head(n)
        .with_row_index("rank", offset=1)
        .with_columns(pl.col("rank").cast(pl.Int64))
    )
    return ranked.select(["rank", *keys, measure])


def _product_revenue(fact_sales: pl.DataFrame, dim_products: pl.DataFrame) -> pl.DataFrame:
    return (
        fact_sales.join(
            dim_products.select(["product_key", "product_name"]),
            on="product_key",
            how="left",
        )
        .group_by(["product_key", "product_name"])
        .agg(pl.col("sales_amount").sum().alias("total_revenue"))
    )


def top_products(
    fact_sales: pl.DataFrame,
    dim_products: pl.DataFrame,
    n: Optional[int] = None,
    bottom: bool = False,
) -> pl.DataFrame:
    """Products ranked by revenue"""
    return _rank(
        _product_revenue(fact_sales, dim_products),
        "total_revenue",
        ["product_key", "product_name"],
        _resolve_n(n),
        descending=not bottom,
    )


def top_subcategories(
    fact_sales: pl.DataFrame,
    dim_products: pl.DataFrame,
    n: Optional[int] = None,
    bottom: bool = False,
) -> pl.DataFrame:
    """Sub-categories ranked by revenue"""
    revenue = (
        fact_sales.join(
            dim_products.select(["product_key", "sub_category"]),
            on="product_key",
            how="left",
        )
        .group_by("sub_category")
        .agg(pl.col("sales_amount").sum().alias("total_revenue"))
    )
    return _rank(revenue, "total_revenue", ["sub_category"], _resolve_n(n), descending=not bottom)


def top_customers(
    fact_sales: pl.DataFrame,
    dim_customers: pl.DataFrame,
    n: Optional[int] = None,
    bottom: bool = False,
) -> pl.DataFrame:
    """Customers ranked by revenue"""
    revenue = (
        fact_sales.join(
            dim_customers.select(["customer_key", "first_name", "last_name"]),
            on="customer_key",
            how="left",
        )
        .group_by(["customer_key", "first_name", "last_name"])
        .agg(pl.col("sales_amount").sum().alias("total_revenue"))
    )
    return _rank(
        revenue,
        "total_revenue",
        ["customer_key", "first_name", "last_name"],
        _resolve_n(n),
        descending=not bottom,
    )


def fewest_order_customers(
    fact_sales: pl.DataFrame,
    dim_customers: pl.DataFrame,
    n: Optional[int] = None,
) -> pl.DataFrame:
    """Customers with the fewest distinct orders"""
    orders = (
        fact_sales.join(
            dim_customers.select(["customer_key", "first_name", "last_name"]),
            on="customer_key",
            how="left",
        )
        .group_by(["customer_key", "first_name", "last_name"])
        .agg(count_distinct("order_number").cast(pl.Int64).alias("total_orders"))
    )
    result = _rank(
        orders,
        "total_orders",
        ["customer_key", "first_name", "last_name"],
        _resolve_n(n),
        descending=False,
    )
    logger.debug("Ranked customers by order count", rows=len(result))
    return result
