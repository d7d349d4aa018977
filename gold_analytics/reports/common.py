"""
Shared helpers for the report views.

Calendar differences count boundaries crossed rather than elapsed time:
2023-01-31 to 2023-02-01 is one month, 2023-01-01 to 2023-01-31 is zero.
"""

from datetime import date
from typing import Union

import polars as pl


IntoDateExpr = Union[pl.Expr, date]


class ReportComputationError(ValueError):
    """A report cannot be evaluated for the given input"""


def _as_expr(value: IntoDateExpr) -> pl.Expr:
    if isinstance(value, pl.Expr):
        return value
    return pl.lit(value, dtype=pl.Date)


def months_between(start: IntoDateExpr, end: IntoDateExpr) -> pl.Expr:
    """Whole calendar months from ``start`` to ``end``"""
    start, end = _as_expr(start), _as_expr(end)
    years = end.dt.year().cast(pl.Int64) - start.dt.year().cast(pl.Int64)
    months = end.dt.month().cast(pl.Int64) - start.dt.month().cast(pl.Int64)
    return years * 12 + months


def years_between(start: IntoDateExpr, end: IntoDateExpr) -> pl.Expr:
    """Whole calendar years from ``start`` to ``end``"""
    start, end = _as_expr(start), _as_expr(end)
    return end.dt.year().cast(pl.Int64) - start.dt.year().cast(pl.Int64)


def count_distinct(column: str) -> pl.Expr:
    """COUNT(DISTINCT column): nulls are not counted"""
    return pl.col(column).drop_nulls().n_unique()


def dated_sales(fact_sales: pl.LazyFrame) -> pl.LazyFrame:
    """Sale lines that can take part in a report"""
    return fact_sales.filter(pl.col("order_date").is_not_null())
