"""
Customer Report

One summary row per customer that has at least one dated sale line, with
demographic and value segments plus lifecycle and spend KPIs.

Pipeline:
1. Drop sale lines without an order date, left join the customer dimension
2. Aggregate per customer
3. Derive segments, recency and the guarded averages

``avg_order_value`` is guarded on ``total_sales`` being zero, not on the
order count. A customer with sales but no countable order numbers cannot be
evaluated; ``customer_report`` raises ``ReportComputationError`` for it the
way the warehouse aborts a statement on division by zero.
"""

from datetime import date
from typing import Optional, Union

import polars as pl
import structlog

from gold_analytics.config import ReportSettings, get_settings
from .common import (
    ReportComputationError,
    count_distinct,
    dated_sales,
    months_between,
    years_between,
)

logger = structlog.get_logger(__name__)

FrameLike = Union[pl.DataFrame, pl.LazyFrame]

CUSTOMER_KEYS = ["customer_key", "customer_number", "customer_name", "customer_age"]

CUSTOMER_REPORT_COLUMNS = [
    "customer_key",
    "customer_number",
    "customer_name",
    "customer_age",
    "age_segmentation",
    "customer_segmentation",
    "last_order",
    "recency_in_month",
    "total_order_num",
    "total_sales",
    "total_quantity",
    "total_product",
    "lifespan",
    "avg_order_value",
    "avg_monthly_spending",
]

AGE_SEGMENTS = ["Under 20", "20-29", "30-39", "40-49", "50 and above"]


def age_segmentation(age: pl.Expr) -> pl.Expr:
    """Fixed age buckets evaluated low to high"""
    return (
        pl.when(age < 20).then(pl.lit(AGE_SEGMENTS[0]))
        .when(age < 30).then(pl.lit(AGE_SEGMENTS[1]))
        .when(age < 40).then(pl.lit(AGE_SEGMENTS[2]))
        .when(age < 50).then(pl.lit(AGE_SEGMENTS[3]))
        .otherwise(pl.lit(AGE_SEGMENTS[4]))
    )


def customer_segmentation(
    lifespan: pl.Expr,
    total_sales: pl.Expr,
    settings: ReportSettings,
) -> pl.Expr:
    """VIP / Regular for long-standing customers, New for everyone else"""
    loyal = lifespan >= settings.loyal_lifespan_months
    return (
        pl.when(loyal & (total_sales > settings.vip_sales))
        .then(pl.lit("VIP"))
        .when(loyal & (total_sales <= settings.vip_sales))
        .then(pl.lit("Regular"))
        .otherwise(pl.lit("New"))
    )


def build_customer_report(
    fact_sales: FrameLike,
    dim_customers: FrameLike,
    *,
    as_of: date,
    settings: Optional[ReportSettings] = None,
) -> pl.LazyFrame:
    """
    Build the customer report as a lazy query.

    Args:
        fact_sales: Sale lines
        dim_customers: Customer dimension
        as_of: Evaluation date used for age and recency
        settings: Segment thresholds (defaults to application settings)

    Returns:
        LazyFrame with one row per customer, columns in report order
    """
    settings = settings or get_settings().reports

    customers = dim_customers.lazy().select(
        ["customer_key", "customer_number", "first_name", "last_name", "birthdate"]
    )

    # Derived after the join: unmatched sale lines get a blank name
    base = (
        dated_sales(fact_sales.lazy())
        .join(customers, on="customer_key", how="left")
        .with_columns([
            pl.concat_str([
                pl.col("first_name").fill_null(""),
                pl.lit(" "),
                pl.col("last_name").fill_null(""),
            ]).alias("customer_name"),
            years_between(pl.col("birthdate"), as_of).alias("customer_age"),
        ])
    )

    aggregated = base.group_by(CUSTOMER_KEYS).agg([
        count_distinct("order_number").cast(pl.Int64).alias("total_order_num"),
        pl.col("sales_amount").sum().alias("total_sales"),
        pl.col("quantity").sum().cast(pl.Int64).alias("total_quantity"),
        count_distinct("product_key").cast(pl.Int64).alias("total_product"),
        pl.col("order_date").max().alias("last_order"),
        months_between(pl.col("order_date").min(), pl.col("order_date").max())
        .alias("lifespan"),
    ])

    total_sales = pl.col("total_sales")

    return (
        aggregated.with_columns([
            age_segmentation(pl.col("customer_age")).alias("age_segmentation"),
            customer_segmentation(pl.col("lifespan"), total_sales, settings)
            .alias("customer_segmentation"),
            months_between(pl.col("last_order"), as_of).alias("recency_in_month"),
            pl.when(total_sales == 0)
            .then(pl.lit(0.0))
            .otherwise(total_sales / pl.col("total_order_num"))
            .alias("avg_order_value"),
            pl.when(pl.col("lifespan") == 0)
            .then(total_sales)
            .otherwise(total_sales / pl.col("lifespan"))
            .alias("avg_monthly_spending"),
        ])
        .select(CUSTOMER_REPORT_COLUMNS)
        .sort("customer_key", nulls_last=True)
    )


def customer_report(
    fact_sales: FrameLike,
    dim_customers: FrameLike,
    *,
    as_of: date,
    settings: Optional[ReportSettings] = None,
) -> pl.DataFrame:
    """
    Evaluate the customer report.

    Raises:
        ReportComputationError: If a customer has sales but no order numbers
    """
    report = build_customer_report(
        fact_sales, dim_customers, as_of=as_of, settings=settings
    ).collect()

    undefined = report.filter(
        (pl.col("total_order_num") == 0) & (pl.col("total_sales") != 0)
    )
    if len(undefined) > 0:
        keys = undefined["customer_key"].to_list()
        logger.error("Division by zero in avg_order_value", customer_keys=keys)
        raise ReportComputationError(
            f"avg_order_value is undefined for customers without orders: {keys}"
        )

    logger.info("Customer report computed", rows=len(report), as_of=as_of.isoformat())
    return report
