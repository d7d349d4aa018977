"""
Exploration

Schema inspection and first look at the Gold layer: which relations and
columns exist, which dimension members occur, and which date ranges the
data covers.
"""

from datetime import date
from typing import Dict, List, Optional

import polars as pl
import structlog
from sqlalchemy import Engine, inspect

from gold_analytics.reports.common import months_between, years_between

logger = structlog.get_logger(__name__)


# =============================================================================
# SCHEMA
# =============================================================================

def list_tables(engine: Engine, schema: Optional[str] = None) -> List[str]:
    """Tables in the warehouse schema, sorted"""
    tables = sorted(inspect(engine).get_table_names(schema=schema))
    logger.debug("Listed warehouse tables", schema=schema, count=len(tables))
    return tables


def list_columns(engine: Engine, table: str, schema: Optional[str] = None) -> pl.DataFrame:
    """Column metadata of a warehouse table"""
    columns = inspect(engine).get_columns(table, schema=schema)
    return pl.DataFrame(
        {
            "table_name": [table] * len(columns),
            "column_name": [c["name"] for c in columns],
            "data_type": [str(c["type"]) for c in columns],
            "is_nullable": [bool(c.get("nullable", True)) for c in columns],
        },
        schema={
            "table_name": pl.Utf8,
            "column_name": pl.Utf8,
            "data_type": pl.Utf8,
            "is_nullable": pl.Boolean,
        },
    )


def frame_schema(frames: Dict[str, pl.DataFrame]) -> pl.DataFrame:
    """Column listing of loaded relations, one row per column"""
    rows = [
        (name, column, str(dtype))
        for name, df in frames.items()
        for column, dtype in df.schema.items()
    ]
    return pl.DataFrame(
        rows,
        schema={"table_name": pl.Utf8, "column_name": pl.Utf8, "data_type": pl.Utf8},
        orient="row",
    )


# =============================================================================
# DIMENSIONS
# =============================================================================

def distinct_countries(dim_customers: pl.DataFrame) -> pl.DataFrame:
    """Countries customers come from"""
    return dim_customers.select("country").unique().sort("country", nulls_last=True)


def product_hierarchy(dim_products: pl.DataFrame) -> pl.DataFrame:
    """Category > sub-category > product combinations"""
    columns = ["category", "sub_category", "product_name"]
    return dim_products.select(columns).unique().sort(columns, nulls_last=True)


# =============================================================================
# DATES
# =============================================================================

def order_date_range(fact_sales: pl.DataFrame) -> pl.DataFrame:
    """First and last order date and the span between them"""
    first = pl.col("order_date").min()
    last = pl.col("order_date").max()
    return fact_sales.select([
        first.alias("first_order_date"),
        last.alias("last_order_date"),
        years_between(first, last).alias("order_range_years"),
        months_between(first, last).alias("order_range_months"),
    ])


def customer_age_range(dim_customers: pl.DataFrame, as_of: date) -> pl.DataFrame:
    """Oldest and youngest customer by birthdate"""
    oldest = pl.col("birthdate").min()
    youngest = pl.col("birthdate").max()
    return dim_customers.select([
        oldest.alias("oldest_birthdate"),
        years_between(oldest, as_of).alias("oldest_age"),
        youngest.alias("youngest_birthdate"),
        years_between(youngest, as_of).alias("youngest_age"),
    ])
