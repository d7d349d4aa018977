"""
Measures

Big-number metrics over the whole Gold layer.
"""

import polars as pl
import structlog

from gold_analytics.reports.common import count_distinct
from gold_analytics.warehouse import GoldTables

logger = structlog.get_logger(__name__)


def total_sales(fact_sales: pl.DataFrame) -> float:
    return float(fact_sales["sales_amount"].sum())


def total_quantity(fact_sales: pl.DataFrame) -> int:
    return int(fact_sales["quantity"].sum())


def average_price(fact_sales: pl.DataFrame) -> float:
    """Mean unit price over sale lines; 0 when there is none"""
    value = fact_sales["price"].mean()
    return float(value) if value is not None else 0.0


def total_orders(fact_sales: pl.DataFrame) -> int:
    return fact_sales.select(count_distinct("order_number")).item()


def total_products(dim_products: pl.DataFrame) -> int:
    return dim_products.select(count_distinct("product_key")).item()


def total_customers(dim_customers: pl.DataFrame) -> int:
    return dim_customers.select(count_distinct("customer_key")).item()


def ordering_customers(fact_sales: pl.DataFrame) -> int:
    """Customers that placed at least one order"""
    return fact_sales.select(count_distinct("customer_key")).item()


def key_metrics(tables: GoldTables) -> pl.DataFrame:
    """
    All measures as a two-column (measure_name, measure_value) frame.
    """
    fact = tables.fact_sales
    metrics = [
        ("Total Sales", total_sales(fact)),
        ("Total Quantity", total_quantity(fact)),
        ("Average Price", average_price(fact)),
        ("Total Nr. Orders", total_orders(fact)),
        ("Total Nr. Products", total_products(tables.dim_products)),
        ("Total Nr. Customers", total_customers(tables.dim_customers)),
        ("Total Nr. Customers with Orders", ordering_customers(fact)),
    ]

    logger.info("Key metrics computed", total_sales=metrics[0][1], total_orders=metrics[3][1])
    return pl.DataFrame(
        {
            "measure_name": [name for name, _ in metrics],
            "measure_value": [float(value) for _, value in metrics],
        }
    )
