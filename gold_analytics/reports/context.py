"""
Report Views

Exposes the Gold layer relations and the two report views as named,
queryable relations through a Polars SQL context.

Reports are never cached: each call to ``report`` or ``execute`` recomputes
the views it needs from the source relations.

Example:
    context = ReportContext(tables, as_of=date(2024, 1, 31))
    top = context.execute(
        "SELECT product_name, total_sales FROM report_products "
        "ORDER BY total_sales DESC LIMIT 5"
    )
"""

import re
from datetime import date
from typing import Callable, Dict, List, Optional

import polars as pl
import structlog

from gold_analytics.config import ReportSettings, get_settings
from gold_analytics.warehouse import GoldTables
from .customers import customer_report
from .products import product_report

logger = structlog.get_logger(__name__)

REPORT_PRODUCTS = "report_products"
REPORT_CUSTOMERS = "report_customers"


class ReportContext:
    """
    Named relations over one snapshot of the Gold layer.

    Args:
        tables: Source relations
        as_of: Evaluation date for time-varying fields (defaults to today)
        settings: Report thresholds
    """

    def __init__(
        self,
        tables: GoldTables,
        as_of: Optional[date] = None,
        settings: Optional[ReportSettings] = None,
    ):
        self.tables = tables
        self.as_of = as_of or date.today()
        self.settings = settings or get_settings().reports

        self._views: Dict[str, Callable[[], pl.DataFrame]] = {
            REPORT_PRODUCTS: self.products,
            REPORT_CUSTOMERS: self.customers,
        }

    @property
    def views(self) -> List[str]:
        return list(self._views)

    @property
    def relations(self) -> List[str]:
        return list(self.tables.as_dict()) + self.views

    def products(self) -> pl.DataFrame:
        return product_report(
            self.tables.fact_sales,
            self.tables.dim_products,
            as_of=self.as_of,
            settings=self.settings,
        )

    def customers(self) -> pl.DataFrame:
        return customer_report(
            self.tables.fact_sales,
            self.tables.dim_customers,
            as_of=self.as_of,
            settings=self.settings,
        )

    def report(self, name: str) -> pl.DataFrame:
        """Evaluate a report view by name"""
        try:
            view = self._views[name]
        except KeyError:
            raise ValueError(f"Unknown report: {name}. Available: {self.views}") from None
        return view()

    def execute(self, query: str) -> pl.DataFrame:
        """
        Run a SQL query against the source relations and report views.

        Only the views referenced in ``query`` are evaluated.
        """
        ctx = pl.SQLContext(
            frames={name: df.lazy() for name, df in self.tables.as_dict().items()}
        )
        for name in self.views:
            if re.search(rf"\b{name}\b", query, flags=re.IGNORECASE):
                ctx.register(name, self.report(name))

        logger.debug("Executing query", query=query, as_of=self.as_of.isoformat())
        return ctx.execute(query, eager=True)
