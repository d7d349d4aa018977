#!/usr/bin/env python
"""
Gold Layer Analytics Command Line

Usage:
    gold-analytics --as-of 2024-01-31 reports --output-dir out/
    gold-analytics --source data/gold metrics
    gold-analytics rank --by customers --bottom -n 10
    gold-analytics magnitude
    gold-analytics explore
    gold-analytics sql "SELECT * FROM report_products LIMIT 5"

Without ``--source`` the relations are read from the warehouse configured
through WAREHOUSE_* environment variables.
"""

import argparse
import sys
from datetime import date
from pathlib import Path
from typing import Callable, Dict, Optional, Sequence

import polars as pl
import structlog
from sqlalchemy.exc import SQLAlchemyError

from gold_analytics.analysis import exploration, magnitude, measures, ranking
from gold_analytics.config import get_settings
from gold_analytics.config.logging import configure_logging
from gold_analytics.database.connection import close_database, get_engine, init_database
from gold_analytics.reports import (
    REPORT_CUSTOMERS,
    REPORT_PRODUCTS,
    ReportComputationError,
    ReportContext,
)
from gold_analytics.warehouse import FileFormat, GoldTables, WarehouseError, WarehouseReader

logger = structlog.get_logger(__name__)


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date '{value}', expected YYYY-MM-DD") from None


def _show(df: pl.DataFrame, title: Optional[str] = None) -> None:
    if title:
        print(f"\n{title}")
    with pl.Config(tbl_rows=-1, tbl_cols=-1, fmt_str_lengths=60):
        print(df)


# =============================================================================
# COMMANDS
# =============================================================================

def cmd_reports(args: argparse.Namespace, tables: GoldTables) -> None:
    context = ReportContext(tables, as_of=args.as_of)
    names = args.report or context.views

    output_dir = Path(args.output_dir) if args.output_dir else None
    if output_dir is not None:
        output_dir.mkdir(parents=True, exist_ok=True)

    for name in names:
        report = context.report(name)
        if output_dir is None:
            _show(report, title=name)
            continue

        output_file = output_dir / f"{name}.{args.format}"
        if args.format == FileFormat.PARQUET.value:
            report.write_parquet(output_file)
        else:
            report.write_csv(output_file)
        logger.info("Report written", report=name, rows=len(report), path=str(output_file))


def cmd_metrics(args: argparse.Namespace, tables: GoldTables) -> None:
    _show(measures.key_metrics(tables))


def cmd_rank(args: argparse.Namespace, tables: GoldTables) -> None:
    fact = tables.fact_sales
    if args.by == "products":
        result = ranking.top_products(fact, tables.dim_products, n=args.n, bottom=args.bottom)
    elif args.by == "subcategories":
        result = ranking.top_subcategories(fact, tables.dim_products, n=args.n, bottom=args.bottom)
    elif args.by == "orders":
        result = ranking.fewest_order_customers(fact, tables.dim_customers, n=args.n)
    else:
        result = ranking.top_customers(fact, tables.dim_customers, n=args.n, bottom=args.bottom)
    _show(result)


def cmd_magnitude(args: argparse.Namespace, tables: GoldTables) -> None:
    fact, products, customers = tables.fact_sales, tables.dim_products, tables.dim_customers
    _show(magnitude.customers_by_country(customers), "Customers by country")
    _show(magnitude.customers_by_gender(customers), "Customers by gender")
    _show(magnitude.products_by_category(products), "Products by category")
    _show(magnitude.avg_cost_by_category(products), "Average cost by category")
    _show(magnitude.revenue_by_category(fact, products), "Revenue by category")
    _show(magnitude.revenue_by_customer(fact, customers), "Revenue by customer")
    _show(magnitude.sold_items_by_country(fact, customers), "Sold items by country")


def cmd_explore(args: argparse.Namespace, tables: GoldTables) -> None:
    as_of = args.as_of or date.today()
    if args.source:
        _show(exploration.frame_schema(tables.as_dict()), "Columns")
    else:
        engine = get_engine()
        schema = get_settings().warehouse.schema_name
        for table in exploration.list_tables(engine, schema=schema):
            _show(exploration.list_columns(engine, table, schema=schema), table)
    _show(exploration.order_date_range(tables.fact_sales), "Order dates")
    _show(exploration.customer_age_range(tables.dim_customers, as_of), "Customer ages")
    _show(exploration.distinct_countries(tables.dim_customers), "Countries")
    _show(exploration.product_hierarchy(tables.dim_products), "Products")


def cmd_sql(args: argparse.Namespace, tables: GoldTables) -> None:
    context = ReportContext(tables, as_of=args.as_of)
    _show(context.execute(args.query))


COMMANDS: Dict[str, Callable[[argparse.Namespace, GoldTables], None]] = {
    "reports": cmd_reports,
    "metrics": cmd_metrics,
    "rank": cmd_rank,
    "magnitude": cmd_magnitude,
    "explore": cmd_explore,
    "sql": cmd_sql,
}


# =============================================================================
# ENTRY POINT
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gold-analytics",
        description="Descriptive analytics and report views over the Gold layer",
    )
    parser.add_argument(
        "--source",
        help="Directory of CSV/Parquet exports (default: configured warehouse)",
    )
    parser.add_argument("--log-level", help="Override LOG_LEVEL")
    parser.add_argument(
        "--as-of",
        type=_parse_date,
        default=None,
        help="Evaluation date for age and recency (default: today)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    reports = subparsers.add_parser("reports", help="Compute the product and customer reports")
    reports.add_argument(
        "--report",
        action="append",
        choices=[REPORT_PRODUCTS, REPORT_CUSTOMERS],
        help="Report to compute (repeatable, default: both)",
    )
    reports.add_argument("--output-dir", help="Write reports here instead of printing")
    reports.add_argument(
        "--format",
        choices=[f.value for f in FileFormat],
        default=FileFormat.CSV.value,
        help="Output file format",
    )

    subparsers.add_parser("metrics", help="Print key business metrics")

    rank = subparsers.add_parser("rank", help="Top-N / bottom-N rankings")
    rank.add_argument(
        "--by",
        choices=["products", "subcategories", "customers", "orders"],
        default="products",
    )
    rank.add_argument("--bottom", action="store_true", help="Lowest first")
    rank.add_argument("-n", type=int, default=None, help="Result size")

    subparsers.add_parser("magnitude", help="Measures broken down by dimension")
    subparsers.add_parser("explore", help="Schema, date ranges and dimension members")

    sql = subparsers.add_parser("sql", help="Run SQL against relations and report views")
    sql.add_argument("query")

    return parser


def _load(source: Optional[str]) -> GoldTables:
    if source:
        return WarehouseReader.from_directory(source).load()
    init_database()
    return WarehouseReader.from_engine(get_engine()).load()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        tables = _load(args.source)
        COMMANDS[args.command](args, tables)
    except (
        WarehouseError,
        ReportComputationError,
        SQLAlchemyError,
        pl.exceptions.PolarsError,
        ValueError,
    ) as e:
        logger.error("Command failed", command=args.command, error=str(e))
        return 1
    finally:
        close_database()

    return 0


if __name__ == "__main__":
    sys.exit(main())
