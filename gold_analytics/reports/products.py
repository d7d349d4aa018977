"""
Product Report

One summary row per product that has at least one dated sale line:
lifecycle (lifespan, last sale, recency), revenue tier, and efficiency KPIs.

Pipeline:
1. Drop sale lines without an order date, left join the product dimension
2. Aggregate per product
3. Derive recency, segment and the guarded averages

``recency_in_months`` depends on the evaluation date passed in as ``as_of``,
so the same warehouse state yields different reports on different days.
"""

from datetime import date
from typing import Optional, Union

import polars as pl
import structlog

from gold_analytics.config import ReportSettings, get_settings
from .common import count_distinct, dated_sales, months_between

logger = structlog.get_logger(__name__)

FrameLike = Union[pl.DataFrame, pl.LazyFrame]

PRODUCT_KEYS = ["product_key", "product_name", "category", "sub_category", "cost"]

PRODUCT_REPORT_COLUMNS = [
    "product_key",
    "product_name",
    "category",
    "sub_category",
    "cost",
    "last_sale_date",
    "recency_in_months",
    "product_segment",
    "lifespan",
    "total_orders",
    "total_sales",
    "total_quantity",
    "total_customers",
    "avg_selling_price",
    "avg_order_revenue",
    "avg_monthly_revenue",
]


def product_segment(total_sales: pl.Expr, settings: ReportSettings) -> pl.Expr:
    """High-Performer / Mid-Range / Low-Performer, first match wins"""
    return (
        pl.when(total_sales > settings.high_performer_sales)
        .then(pl.lit("High-Performer"))
        .when(total_sales >= settings.mid_range_sales)
        .then(pl.lit("Mid-Range"))
        .otherwise(pl.lit("Low-Performer"))
    )


def build_product_report(
    fact_sales: FrameLike,
    dim_products: FrameLike,
    *,
    as_of: date,
    settings: Optional[ReportSettings] = None,
) -> pl.LazyFrame:
    """
    Build the product report as a lazy query.

    Args:
        fact_sales: Sale lines
        dim_products: Product dimension
        as_of: Evaluation date used for recency
        settings: Segment thresholds (defaults to application settings)

    Returns:
        LazyFrame with one row per product, columns in report order
    """
    settings = settings or get_settings().reports

    base = dated_sales(fact_sales.lazy()).join(
        dim_products.lazy().select(PRODUCT_KEYS),
        on="product_key",
        how="left",
    )

    aggregated = base.group_by(PRODUCT_KEYS).agg([
        months_between(pl.col("order_date").min(), pl.col("order_date").max())
        .alias("lifespan"),
        pl.col("order_date").max().alias("last_sale_date"),
        count_distinct("order_number").cast(pl.Int64).alias("total_orders"),
        count_distinct("customer_key").cast(pl.Int64).alias("total_customers"),
        pl.col("sales_amount").sum().alias("total_sales"),
        pl.col("quantity").sum().cast(pl.Int64).alias("total_quantity"),
        # Lines with zero quantity have no unit price and drop out of the mean
        pl.when(pl.col("quantity") != 0)
        .then(pl.col("sales_amount") / pl.col("quantity"))
        .mean()
        .round(settings.selling_price_decimals)
        .alias("avg_selling_price"),
    ])

    total_sales = pl.col("total_sales")

    return (
        aggregated.with_columns([
            months_between(pl.col("last_sale_date"), as_of).alias("recency_in_months"),
            product_segment(total_sales, settings).alias("product_segment"),
            pl.when(pl.col("total_orders") == 0)
            .then(pl.lit(0.0))
            .otherwise(total_sales / pl.col("total_orders"))
            .alias("avg_order_revenue"),
            pl.when(pl.col("lifespan") == 0)
            .then(total_sales)
            .otherwise(total_sales / pl.col("lifespan"))
            .alias("avg_monthly_revenue"),
        ])
        .select(PRODUCT_REPORT_COLUMNS)
        .sort("product_key", nulls_last=True)
    )


def product_report(
    fact_sales: FrameLike,
    dim_products: FrameLike,
    *,
    as_of: date,
    settings: Optional[ReportSettings] = None,
) -> pl.DataFrame:
    """Evaluate the product report"""
    report = build_product_report(
        fact_sales, dim_products, as_of=as_of, settings=settings
    ).collect()

    logger.info("Product report computed", rows=len(report), as_of=as_of.isoformat())
    return report
